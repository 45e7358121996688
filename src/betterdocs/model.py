# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

from .errors import StepFailure


@dataclass(frozen=True)
class Step:
    """A single ordered unit of the documentation build."""
    name: str
    run: list[str] = field(default_factory=list)
    cwd: str | None = None

    # "sh" runs `run` as an external command; other kinds are dispatched
    # to betterdocs.step_workflows.
    kind: str = "sh"
    fatal: bool = True
    failure: Type[StepFailure] = StepFailure
    timeout: float | None = None
    data: Optional[Dict[str, Any]] = None


@dataclass
class Pipeline:
    """
    The fixed step list for one invocation.

    `env` is the environment handed to the first step; the profile step
    may replace it for the steps that follow.
    """
    name: str
    root: Path
    steps: list[Step]
    env: Dict[str, str] = field(default_factory=dict)

    def step_names(self) -> List[str]:
        return [s.name for s in self.steps]


@dataclass
class PipelineResult:
    results: Dict[str, str]
    exit_code: int = 0
    failure: Optional[StepFailure] = None
    warnings: List[StepFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.exit_code == 0
