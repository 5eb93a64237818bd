"""Ordered, fail-fast step execution shared by the build and scaffold commands."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Sequence

from .console import Console


@dataclass(frozen=True, slots=True)
class Step:
    description: str
    action: Callable[..., None]

    def __call__(self, *payload: Any) -> None:
        self.action(*payload)


class StepPipeline:
    """Run steps strictly in order, stopping at the first failure.

    Each step receives the same payload. An exception raised by a step
    propagates to the caller unchanged and the remaining steps are never
    invoked. Work done by earlier steps is not rolled back.
    """

    def __init__(self, steps: Sequence[Step], *, console: Console | None = None) -> None:
        self._steps: List[Step] = list(steps)
        self._console = console or Console("none")

    @property
    def descriptions(self) -> List[str]:
        return [step.description for step in self._steps]

    def run(self, *payload: Any) -> None:
        total = len(self._steps)
        for index, step in enumerate(self._steps, start=1):
            self._console.debug(f"[{index}/{total}] {step.description}")
            step(*payload)


__all__ = ["Step", "StepPipeline"]
