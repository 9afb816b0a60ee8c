from __future__ import annotations

from typing import Optional, Sequence, TYPE_CHECKING


if TYPE_CHECKING:  # pragma: no cover
    from melon.model import Step


class MelonError(Exception):
    pass


class PatternCompileError(MelonError, ValueError):
    pattern: str

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f'invalid step pattern "{pattern}": {reason}')
        self.pattern = pattern
        self.reason = reason


class ScenarioFailure(MelonError, AssertionError):
    """Raised when a scenario stops at a step.

    The exception message is the rendered trace, attributes keep the raw parts so
    callers can inspect which step failed.
    """

    scenario_name: str
    steps: Sequence[Step]
    cursor: int
    message: str
    background_size: int

    def __init__(
        self,
        report: str,
        *,
        scenario_name: str,
        steps: Sequence[Step],
        cursor: int,
        message: str,
        background_size: int = 0,
    ) -> None:
        super().__init__(report)
        self.scenario_name = scenario_name
        self.steps = steps
        self.cursor = cursor
        self.message = message
        self.background_size = background_size

    @property
    def in_background(self) -> bool:
        return self.cursor < self.background_size

    @property
    def failed_step(self) -> Optional[Step]:
        try:
            return self.steps[self.cursor]
        except IndexError:
            return None
