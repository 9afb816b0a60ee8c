"""Finds the step definition for a step and invokes it.

Sources are searched in the order given, definitions inside a source in the order they were
registered. A handler has three ways to answer:

* return `Ok(context)`, the step passed and `context` is the complete context for the next step
* return `REJECTED`, the text matched but the handler declines, the search continues
* raise, the search stops and the step failed

Anything else returned by a handler is an unexpected return value.
"""
from __future__ import annotations

import logging
import traceback

from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from melon.model import Step
from melon.registry import StepDefinition, StepRegistry


logger = logging.getLogger(__name__)

Context = Mapping[str, Any]


class Rejected(Enum):
    REJECTED = 'rejected'

    def __repr__(self) -> str:
        return 'REJECTED'


REJECTED = Rejected.REJECTED


@dataclass(frozen=True)
class Ok:
    context: Context


def freeze(context: Context) -> Context:
    return MappingProxyType(dict(context))


def ok(context: Context, **changes: Any) -> Ok:
    """Shorthand for a passed step, the next context is a copy of `context` updated with `changes`."""
    return Ok({**context, **changes})


@dataclass(frozen=True)
class StepFailure:
    step: Step

    @property
    def message(self) -> str:
        raise NotImplementedError  # pragma: no cover

    @property
    def error(self) -> Optional[BaseException]:
        return None


@dataclass(frozen=True)
class MissingDefinition(StepFailure):
    @property
    def message(self) -> str:
        return f'Definition for "{self.step.text}" not found'


@dataclass(frozen=True)
class UnexpectedReturn(StepFailure):
    definition: StepDefinition
    value: Any

    @property
    def message(self) -> str:
        return f'Unexpected return value `{self.value!r}`'


@dataclass(frozen=True)
class HandlerException(StepFailure):
    definition: StepDefinition
    exception: Exception

    @property
    def message(self) -> str:
        return ''.join(traceback.format_exception_only(type(self.exception), self.exception)).strip()

    @property
    def error(self) -> Optional[BaseException]:
        return self.exception


Outcome = Union[Ok, MissingDefinition, UnexpectedReturn, HandlerException]


def find_definition(text: str, sources: Sequence[StepRegistry]) -> Optional[Tuple[StepDefinition, List[Any]]]:
    """First definition whose pattern matches the text, no handler is invoked."""
    for source in sources:
        for definition in source:
            values = definition.match(text)
            if values is not None:
                return definition, values

    return None


def dispatch(step: Step, context: Context, sources: Sequence[StepRegistry]) -> Outcome:
    for source in sources:
        for definition in source:
            values = definition.match(step.text)
            if values is None:
                continue

            if step.data is not None:
                values.append(step.data)

            logger.debug(f'"{step.text}" matched {definition.describe()}')

            try:
                result = definition.func(context, *values)
            except Exception as e:
                return HandlerException(step, definition, e)

            if result is REJECTED:
                logger.debug(f'{definition.describe()} rejected "{step.text}"')
                continue

            if isinstance(result, Ok) and isinstance(result.context, Mapping):
                return Ok(freeze(result.context))

            return UnexpectedReturn(step, definition, result)

    return MissingDefinition(step)
