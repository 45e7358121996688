# config.py
from __future__ import annotations

import runpy
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional

DEFAULT_CONFIG_FILE = "betterdocs_config.py"


@dataclass
class DocsConfig:
    """
    Static configuration for one documentation build.

    Paths are relative to `project_root` unless noted. `project_root`
    itself is resolved against the directory of the config file.
    """
    package: str
    project_root: Path = Path(".")
    docs_dir: str = "docs"
    apidoc_output: str = "source"  # relative to docs_dir

    # Sourced in this order before the build, in a single shell.
    venv: Optional[str] = None
    env_profile: Optional[str] = None
    env: Dict[str, str] = field(default_factory=dict)
    shell: str = "bash"

    build_command: List[str] = field(default_factory=lambda: ["python", "setup.py", "build"])
    apidoc_command: List[str] = field(default_factory=lambda: ["sphinx-apidoc"])
    apidoc_args: List[str] = field(default_factory=list)
    apidoc_exclude: List[str] = field(default_factory=list)
    site_command: List[str] = field(default_factory=lambda: ["make", "html"])

    html_index: str = "_build/html/index.html"  # relative to docs_dir
    open_command: Optional[List[str]] = None   # None -> platform launcher
    open_artifact: bool = True

    # step name -> seconds
    timeouts: Dict[str, float] = field(default_factory=dict)

    @property
    def root(self) -> Path:
        return Path(self.project_root).expanduser().resolve()

    @property
    def docs_path(self) -> Path:
        return self.root / self.docs_dir

    @property
    def apidoc_path(self) -> Path:
        return self.docs_path / self.apidoc_output

    @property
    def package_path(self) -> Path:
        return self.root / self.package

    @property
    def index_path(self) -> Path:
        return self.docs_path / self.html_index


def find_config(start: str | Path = ".") -> Optional[Path]:
    """Return the default config file in `start`, if there is one."""
    candidate = Path(start) / DEFAULT_CONFIG_FILE
    return candidate if candidate.exists() else None


def load_config(path: str | Path) -> DocsConfig:
    """
    Load a DocsConfig from a python file path.

    The file must define either:
      - config() -> DocsConfig
      - CONFIG = DocsConfig(...)

    A relative project_root is resolved against the file's directory.
    """
    cfg_path = Path(path).expanduser().resolve()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    if cfg_path.suffix != ".py":
        raise ValueError(f"Config must be a .py file, got: {cfg_path.name}")

    module_name = f"betterdocs_config_{cfg_path.stem}"
    globals_dict = runpy.run_path(str(cfg_path), run_name=module_name)

    cfg = None
    if "config" in globals_dict and callable(globals_dict["config"]):
        cfg = globals_dict["config"]()
    elif "CONFIG" in globals_dict:
        cfg = globals_dict["CONFIG"]

    if not isinstance(cfg, DocsConfig):
        raise TypeError(
            "Config must return/define a DocsConfig. "
            "Define config() -> DocsConfig or CONFIG = DocsConfig(...)."
        )

    root = Path(cfg.project_root).expanduser()
    if not root.is_absolute():
        root = cfg_path.parent / root
    return replace(cfg, project_root=root.resolve())
