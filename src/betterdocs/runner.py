# runner.py
from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .errors import StepFailure, tail
from .model import Pipeline, PipelineResult, Step
from .step_workflows import clean, profile
from .ui.console import get_console

# Exit codes a shell would report for the same situations.
EXIT_CANNOT_EXECUTE = 126
EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124
EXIT_INTERRUPTED = 130

TOOL_HINTS = {
    "sphinx-apidoc": "Install Sphinx in the docs environment (e.g., pip install sphinx).",
    "sphinx-build": "Install Sphinx in the docs environment (e.g., pip install sphinx).",
    "make": "Install make or set site_command to call sphinx-build directly.",
    "python": "No 'python' on PATH; set venv in your config or use python3 in build_command.",
    "bash": "Install bash or set shell in your config.",
    "xdg-open": "Install xdg-utils or run with --no-open.",
    "open": "Run with --no-open on systems without a default viewer.",
}


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""


# (argv, cwd, env, timeout) -> CommandResult
CommandRunner = Callable[[List[str], Path, Dict[str, str], Optional[float]], CommandResult]


def subprocess_runner(
    argv: List[str],
    cwd: Path,
    env: Dict[str, str],
    timeout: Optional[float] = None,
) -> CommandResult:
    proc = subprocess.run(
        argv,
        cwd=str(cwd),
        env=env,
        text=True,
        capture_output=True,   # so you can show output on failure
        timeout=timeout,
    )
    return CommandResult(proc.returncode, proc.stdout or "", proc.stderr or "")


# ----------------------------------------------------------------------
# Execution primitives
# ----------------------------------------------------------------------

def resolve_cwd(pipeline: Pipeline, step: Step) -> Path:
    return (pipeline.root / (step.cwd or ".")).resolve()


def _tool_hint(argv: List[str]) -> str:
    tool = os.path.basename(argv[0]) if argv else ""
    return TOOL_HINTS.get(tool, f"Install {tool} or fix PATH.")


def invoke(
    step: Step,
    argv: List[str],
    cwd: Path,
    env: Dict[str, str],
    runner: CommandRunner,
) -> CommandResult:
    """
    Run one external command for `step`.

    Returns the result on exit status 0; raises `step.failure` otherwise.
    """
    if not cwd.exists():
        raise step.failure(
            step=step.name,
            cmd=list(argv),
            exit_code=1,
            message=f"Working directory not found: {cwd}",
        )

    try:
        result = runner(list(argv), cwd, env, step.timeout)
    except FileNotFoundError as e:
        raise step.failure(
            step=step.name,
            cmd=list(argv),
            exit_code=EXIT_NOT_FOUND,
            stderr=str(e),
            message=_tool_hint(argv),
        ) from e
    except OSError as e:
        # not executable, no shebang, ...
        raise step.failure(
            step=step.name,
            cmd=list(argv),
            exit_code=EXIT_CANNOT_EXECUTE,
            stderr=str(e),
            message=f"Cannot execute {argv[0] if argv else ''}",
        ) from e
    except subprocess.TimeoutExpired as e:
        raise step.failure(
            step=step.name,
            cmd=list(argv),
            exit_code=EXIT_TIMEOUT,
            stdout=tail(_text(e.stdout)),
            stderr=tail(_text(e.stderr)),
            message=f"Timed out after {step.timeout}s",
        ) from e

    code = result.returncode
    if code != 0:
        # killed by signal N -> 128+N, like a shell
        if code < 0:
            code = 128 - code
        raise step.failure(
            step=step.name,
            cmd=list(argv),
            exit_code=code,
            stdout=tail(result.stdout),
            stderr=tail(result.stderr),
        )
    return result


def _text(data) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def _run_command(pipeline: Pipeline, step: Step, env: Dict[str, str], runner: CommandRunner) -> None:
    result = invoke(step, step.run, resolve_cwd(pipeline, step), env, runner)
    get_console().print_debug(result.stdout.strip())


STEP_RUNNERS = {
    "sh": _run_command,
    "profile": profile.run_step,
    "clean": clean.run_step,
}


def run_step(
    pipeline: Pipeline,
    step: Step,
    env: Dict[str, str],
    runner: CommandRunner = subprocess_runner,
) -> Optional[Dict[str, str]]:
    """Run one step. Returns a replacement environment, or None to keep `env`."""
    handler = STEP_RUNNERS.get(step.kind)
    if handler is None:
        raise ValueError(f"step '{step.name}' has unknown kind {step.kind!r}")
    return handler(pipeline, step, env, runner)


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------

def run_pipeline(
    pipeline: Pipeline,
    *,
    runner: CommandRunner | None = None,
) -> PipelineResult:
    """
    Run every step in order, stopping at the first fatal failure.

    Non-fatal failures are reported as warnings and do not change the
    exit code. Nothing is retried.
    """
    console = get_console()
    runner = runner or subprocess_runner
    env = dict(pipeline.env)
    results: Dict[str, str] = {}
    warnings: List[StepFailure] = []

    for step in pipeline.steps:
        console.print_step(step.name)
        try:
            new_env = run_step(pipeline, step, env, runner)
        except StepFailure as e:
            if step.fatal:
                results[step.name] = "failed"
                console.print_step_failure(e)
                return PipelineResult(
                    results=results,
                    exit_code=e.exit_code or 1,
                    failure=e,
                    warnings=warnings,
                )
            results[step.name] = "warning"
            warnings.append(e)
            console.print_step_warning(e)
            continue

        if new_env is not None:
            env = new_env
        results[step.name] = "ok"

    return PipelineResult(results=results, exit_code=0, warnings=warnings)
