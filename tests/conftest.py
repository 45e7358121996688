import json
import os
from pathlib import Path

import pytest

from betterdocs.config import DocsConfig
from betterdocs.runner import CommandResult
from betterdocs.ui.console import Console, set_console


class FakeRunner:
    """Records every command and answers from a table keyed by argv[0]."""

    def __init__(self, returncodes=None, stdout=None, hooks=None):
        self.calls = []
        self.returncodes = returncodes or {}
        self.stdout = stdout or {}
        self.hooks = hooks or {}

    def __call__(self, argv, cwd, env, timeout=None):
        tool = os.path.basename(argv[0])
        self.calls.append({"argv": argv, "cwd": cwd, "env": dict(env), "timeout": timeout})
        if tool in self.hooks:
            self.hooks[tool](argv, cwd, env)
        out = self.stdout.get(tool, "")
        if callable(out):
            out = out(env)
        code = self.returncodes.get(tool, 0)
        return CommandResult(code, out, f"{tool} exploded" if code else "")

    @property
    def tools(self):
        return [os.path.basename(c["argv"][0]) for c in self.calls]


def dump_env(extra):
    """stdout of a profile step that exported `extra` on top of its input env."""
    def _out(env):
        return "sourcing...\n" + json.dumps({**env, **extra}) + "\n"
    return _out


@pytest.fixture(autouse=True)
def quiet_console():
    set_console(Console())
    yield
    set_console(Console())


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project laid out like the original script expects."""
    (tmp_path / "mypkg").mkdir()
    (tmp_path / "mypkg" / "__init__.py").write_text("")
    (tmp_path / "docs").mkdir()
    (tmp_path / "venv" / "bin").mkdir(parents=True)
    (tmp_path / "venv" / "bin" / "activate").write_text("export VIRTUAL_ENV=venv\n")
    (tmp_path / "env.sh").write_text("export DOCS_FLAVOUR=html\n")
    return tmp_path


@pytest.fixture
def config(project: Path) -> DocsConfig:
    return DocsConfig(
        package="mypkg",
        project_root=project,
        venv="venv",
        env_profile="env.sh",
        build_command=["build-tool"],
        apidoc_command=["apidoc-tool"],
        site_command=["site-tool"],
        open_command=["open-tool"],
    )


@pytest.fixture
def bare_config(config: DocsConfig) -> DocsConfig:
    """Same project without a venv or profile: no environment step."""
    config.venv = None
    config.env_profile = None
    return config
