# step_workflows/profile.py
from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Dict, List

from ..errors import EnvironmentSetupFailure
from ..model import Pipeline, Step

# Sources every file given as a positional argument, then execs a python
# interpreter ($0) that dumps the resulting environment as one JSON line.
# Only exported variables survive, same as for any child of the shell.
PROFILE_SCRIPT = (
    'for f in "$@"; do . "$f" || exit $?; done\n'
    'exec "$0" -c "import json, os; print(json.dumps(dict(os.environ)))"'
)


# ---------------------------------------------------------------------
# Profile step helper
# ---------------------------------------------------------------------

def venv_activate_script(venv: str | Path) -> Path:
    """Path of the activation script inside a virtualenv."""
    bindir = "Scripts" if os.name == "nt" else "bin"
    return Path(venv) / bindir / "activate"


def profile_step(
    name: str,
    files: List[str | Path],
    *,
    shell: str = "bash",
    python: str | None = None,
    timeout: float | None = None,
) -> Step:
    """Create a step that sources `files` and captures the environment they produce."""
    sources = [str(f) for f in files]
    argv = [shell, "-c", PROFILE_SCRIPT, python or sys.executable, *sources]
    return Step(
        name=name,
        run=argv,
        kind="profile",
        failure=EnvironmentSetupFailure,
        timeout=timeout,
        data={"files": sources},
    )


# ---------------------------------------------------------------------
# Profile step execution
# ---------------------------------------------------------------------

def parse_environment(step: Step, stdout: str) -> Dict[str, str]:
    """
    Read the environment dump from the last non-empty stdout line.

    Profiles are free to print; anything before the dump is ignored.
    """
    lines = [line for line in (stdout or "").splitlines() if line.strip()]
    try:
        env = json.loads(lines[-1]) if lines else None
    except json.JSONDecodeError:
        env = None

    if not isinstance(env, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in env.items()
    ):
        raise step.failure(
            step=step.name,
            cmd=list(step.run),
            exit_code=1,
            stdout=stdout or "",
            message="Could not read the environment produced by the profile.",
        )
    return env


def run_step(pipeline: Pipeline, step: Step, env: Dict[str, str], runner) -> Dict[str, str]:
    """Run a profile step; returns the environment for the remaining steps."""
    # Import here to avoid circular import
    from ..runner import invoke, resolve_cwd

    files = list((step.data or {}).get("files", []))
    missing = [f for f in files if not (pipeline.root / f).exists()]
    if missing:
        raise step.failure(
            step=step.name,
            cmd=list(step.run),
            exit_code=1,
            message="Profile not found: " + ", ".join(missing),
        )

    result = invoke(step, step.run, resolve_cwd(pipeline, step), env, runner)
    return parse_environment(step, result.stdout)
