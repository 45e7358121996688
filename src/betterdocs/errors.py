# errors.py
from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from typing import ClassVar, List, Optional

# Keep the tail of captured output only; tool logs can be huge.
OUTPUT_TAIL = 4000


def tail(text: str | None, limit: int = OUTPUT_TAIL) -> str:
    if not text:
        return ""
    return text[-limit:]


@dataclass
class StepFailure(Exception):
    """
    A pipeline step that did not complete.

    Carries enough context for:
      - a precise console report (which step, which command, exit code)
      - the tool's own diagnostics (captured stdout/stderr tails)
      - the CLI exit code
    """
    step: str
    cmd: List[str] = field(default_factory=list)
    exit_code: int = 1
    stdout: str = ""
    stderr: str = ""
    message: Optional[str] = None

    hint: ClassVar[Optional[str]] = None

    @property
    def kind(self) -> str:
        return type(self).__name__

    @property
    def output(self) -> str:
        """Whatever the tool said, stderr first."""
        return (self.stderr or self.stdout or "").strip()

    def __str__(self) -> str:
        head = f"{self.kind}: step '{self.step}' failed (exit={self.exit_code})"
        if self.cmd:
            head += f": {shlex.join(self.cmd)}"
        if self.message:
            head += f"\n{self.message}"
        return head


class EnvironmentSetupFailure(StepFailure):
    hint = "Check the virtualenv and profile script paths in your config."


class BuildFailure(StepFailure):
    hint = "The package did not build; documentation steps were not run."


class CleanupFailure(StepFailure):
    hint = "Could not remove previously generated API sources."


class DocGenerationFailure(StepFailure):
    hint = "API stub generation failed; check that the built package imports cleanly."


class SiteBuildFailure(StepFailure):
    hint = "The site build failed; check templates and reST content in the docs directory."


class ArtifactOpenFailure(StepFailure):
    hint = "Documentation was built; open the index file manually."
