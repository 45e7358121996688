# step_workflows/clean.py
from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Dict

from ..errors import CleanupFailure
from ..model import Pipeline, Step
from ..ui.console import get_console


def clean_step(name: str, target: str | Path) -> Step:
    """Create a step that removes `target` (relative to the pipeline root)."""
    return Step(
        name=name,
        kind="clean",
        failure=CleanupFailure,
        data={"target": str(target)},
    )


def remove_path(target: Path) -> bool:
    """
    Remove a file, symlink or directory tree.

    Returns False when there was nothing to remove, so calling it twice
    in a row is fine.
    """
    if target.is_symlink() or target.is_file():
        target.unlink()
        return True
    if target.is_dir():
        shutil.rmtree(target)
        return True
    return False


def run_step(pipeline: Pipeline, step: Step, env: Dict[str, str], runner) -> None:
    console = get_console()
    raw = (step.data or {}).get("target")
    if not raw:
        raise ValueError(f"step '{step.name}' has no clean target")

    root = Path(pipeline.root).resolve()
    target = Path(os.path.abspath(root / raw))
    # Resolve the parent only: a symlinked target is unlinked, never followed.
    real = target.parent.resolve() / target.name

    # Never remove the project itself or anything outside it.
    if real == root or root not in real.parents:
        raise step.failure(
            step=step.name,
            exit_code=1,
            message=f"Refusing to remove {target}: not inside {root}",
        )

    try:
        removed = remove_path(target)
    except OSError as e:
        raise step.failure(
            step=step.name,
            exit_code=1,
            stderr=str(e),
            message=f"Could not remove {target}",
        ) from e

    if removed:
        console.print_debug(f"removed {target}")
    else:
        console.print_debug(f"nothing to remove at {target}")
