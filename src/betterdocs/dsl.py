# dsl.py
from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Type

from .config import DocsConfig
from .errors import (
    ArtifactOpenFailure,
    BuildFailure,
    DocGenerationFailure,
    SiteBuildFailure,
    StepFailure,
)
from .model import Pipeline, Step
from .step_workflows.clean import clean_step
from .step_workflows.profile import profile_step, venv_activate_script

# Step names, in execution order.
PROFILE = "Apply environment profile"
BUILD = "Build package"
CLEAN = "Remove generated API sources"
APIDOC = "Generate API stubs"
SITE = "Build HTML site"
OPEN = "Open documentation"


# ---------------------------------------------------------------------
# Step helper
# ---------------------------------------------------------------------

def sh(
    name: str,
    cmd: List[str],
    *,
    cwd: str | None = None,
    failure: Type[StepFailure] = StepFailure,
    fatal: bool = True,
    timeout: float | None = None,
) -> Step:
    """Create an external command step."""
    return Step(name=name, run=list(cmd), cwd=cwd, failure=failure, fatal=fatal, timeout=timeout)


def default_open_command(platform: str | None = None) -> List[str]:
    """Launcher that opens a file in the user's default viewer."""
    platform = platform or sys.platform
    if platform == "darwin":
        return ["open"]
    if platform.startswith("win"):
        return ["cmd", "/c", "start", ""]
    return ["xdg-open"]


def base_environment(overrides: Mapping[str, str] | None = None) -> Dict[str, str]:
    """A copy of this process's environment with `overrides` applied."""
    env = os.environ.copy()
    env.update({k: str(v) for k, v in (overrides or {}).items()})
    return env


# ---------------------------------------------------------------------
# The documentation pipeline
# ---------------------------------------------------------------------

def docs_pipeline(
    config: DocsConfig,
    *,
    open_artifact: Optional[bool] = None,
    env: Optional[Dict[str, str]] = None,
) -> Pipeline:
    """
    Build the fixed step list for `config`.

    The profile step only exists when a venv or profile is configured, and
    the open step only when opening is enabled (`open_artifact` overrides
    the config value).
    """
    root = config.root
    docs = config.docs_dir
    timeouts = config.timeouts
    steps: List[Step] = []

    profiles: List[Path] = []
    if config.venv:
        profiles.append(root / venv_activate_script(config.venv))
    if config.env_profile:
        profiles.append(root / config.env_profile)
    if profiles:
        steps.append(profile_step(PROFILE, profiles, shell=config.shell, timeout=timeouts.get(PROFILE)))

    steps.append(sh(BUILD, config.build_command, failure=BuildFailure, timeout=timeouts.get(BUILD)))

    steps.append(clean_step(CLEAN, Path(docs) / config.apidoc_output))

    # Package path as seen from the docs directory, e.g. ../mypkg
    package_arg = os.path.relpath(config.package_path, config.docs_path)
    apidoc = [
        *config.apidoc_command,
        *config.apidoc_args,
        "-o",
        config.apidoc_output,
        package_arg,
        *config.apidoc_exclude,
    ]
    steps.append(sh(APIDOC, apidoc, cwd=docs, failure=DocGenerationFailure, timeout=timeouts.get(APIDOC)))

    steps.append(sh(SITE, config.site_command, cwd=docs, failure=SiteBuildFailure, timeout=timeouts.get(SITE)))

    should_open = config.open_artifact if open_artifact is None else open_artifact
    if should_open:
        opener = config.open_command or default_open_command()
        steps.append(
            sh(
                OPEN,
                [*opener, str(config.index_path)],
                failure=ArtifactOpenFailure,
                fatal=False,
                timeout=timeouts.get(OPEN),
            )
        )

    return Pipeline(
        name=root.name,
        root=root,
        steps=steps,
        env=base_environment(config.env) if env is None else {**env, **config.env},
    )
