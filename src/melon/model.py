from __future__ import annotations

from typing import Dict, List, Optional, Tuple, Union
from dataclasses import dataclass, field


@dataclass(frozen=True)
class DataTable:
    headings: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]

    def as_dicts(self) -> List[Dict[str, str]]:
        return [dict(zip(self.headings, row)) for row in self.rows]


StepData = Union[str, DataTable]


@dataclass(frozen=True)
class Step:
    kind: str
    text: str
    keyword: Optional[str] = field(default=None)
    data: Optional[StepData] = field(default=None)
    line: Optional[int] = field(default=None)

    @property
    def label(self) -> str:
        if self.keyword is not None and self.keyword.strip() not in ('', '*'):
            return self.keyword.strip()

        return self.kind.capitalize()


@dataclass(frozen=True)
class Scenario:
    name: str
    tags: Tuple[str, ...] = field(default=())
    steps: Tuple[Step, ...] = field(default=())
    line: Optional[int] = field(default=None)


@dataclass(frozen=True)
class Examples:
    name: str
    tags: Tuple[str, ...] = field(default=())
    rows: Tuple[Dict[str, str], ...] = field(default=())


@dataclass(frozen=True)
class ScenarioOutline:
    name: str
    tags: Tuple[str, ...] = field(default=())
    steps: Tuple[Step, ...] = field(default=())
    examples: Tuple[Examples, ...] = field(default=())
    line: Optional[int] = field(default=None)


@dataclass(frozen=True)
class Feature:
    name: str
    tags: Tuple[str, ...] = field(default=())
    background: Tuple[Step, ...] = field(default=())
    scenarios: Tuple[Union[Scenario, ScenarioOutline], ...] = field(default=())
    description: Tuple[str, ...] = field(default=())
    filename: Optional[str] = field(default=None)
