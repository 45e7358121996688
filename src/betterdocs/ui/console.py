"""Console output formatting utilities for betterdocs."""

from __future__ import annotations

import sys
from typing import Optional

from ..errors import StepFailure

# Lines of tool output shown for a failed step outside debug mode.
OUTPUT_LINES = 20


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False):
        """
        Initialize console formatter.

        Args:
            debug: If True, show full tool output and stack traces
        """
        self.debug = debug

    def print_run_started(
        self,
        project: str,
        config: str,
        step_count: int,
    ) -> None:
        """Print run start information."""
        print("\nDOCS BUILD STARTED")
        print(f"Project: {project}")
        print(f"Config: {config}")
        print(f"Steps: {step_count}")
        print()

    def print_step(self, name: str) -> None:
        """Print step start message."""
        print(f"STEP: {name}")

    def _print_output(self, failure: StepFailure, stream=None) -> None:
        output = failure.output
        if not output:
            return
        lines = output.splitlines()
        if not self.debug and len(lines) > OUTPUT_LINES:
            print(f"... ({len(lines) - OUTPUT_LINES} earlier lines, use --debug)", file=stream)
            lines = lines[-OUTPUT_LINES:]
        for line in lines:
            print(f"  | {line}", file=stream)

    def print_step_failure(self, failure: StepFailure) -> None:
        """Print a fatal step failure with the tool's own diagnostics."""
        print(f"STEP FAILED: {failure.step}", file=sys.stderr)
        print(f"Reason: {failure.kind}", file=sys.stderr)
        print(f"Exit code: {failure.exit_code}", file=sys.stderr)
        if failure.message:
            print(f"Error: {failure.message}", file=sys.stderr)
        if failure.hint:
            print(f"Hint: {failure.hint}", file=sys.stderr)
        self._print_output(failure, sys.stderr)

    def print_step_warning(self, failure: StepFailure) -> None:
        """Print a non-fatal step failure."""
        print(f"WARNING: {failure.step} failed (exit={failure.exit_code})", file=sys.stderr)
        if failure.message:
            print(f"Error: {failure.message}", file=sys.stderr)
        if failure.hint:
            print(f"Hint: {failure.hint}", file=sys.stderr)
        if self.debug:
            self._print_output(failure, sys.stderr)

    def print_results(self, results: dict[str, str]) -> None:
        """Print final results summary."""
        print("\n" + "=" * 40)
        print("RESULTS")
        print("=" * 40)
        for step, status in results.items():
            status_display = status.upper() if status != "ok" else "SUCCESS"
            print(f"  {step}: {status_display}")

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if details:
            for detail in details:
                print(f"  {detail}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)

    def print_exception(self, exc: Exception) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            traceback.print_exc()
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_info(self, message: str) -> None:
        """Print informational message."""
        print(message)

    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug and message:
            print(f"[DEBUG] {message}", file=sys.stderr)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console
