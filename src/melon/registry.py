from __future__ import annotations

import logging

from typing import Any, Callable, Dict, Iterator, List, Optional, TypeVar
from dataclasses import dataclass

from melon.matchers import Converter, Matcher, TypeDefinition, compile_pattern, make_converter


logger = logging.getLogger(__name__)

STEP_KINDS = ('given', 'when', 'then', 'step')

StepFunc = Callable[..., Any]
F = TypeVar('F', bound=StepFunc)


@dataclass(frozen=True)
class StepDefinition:
    kind: str
    pattern: str
    matcher: Matcher
    func: StepFunc
    source: str

    def match(self, text: str) -> Optional[List[Any]]:
        return self.matcher.match(text)

    def describe(self) -> str:
        return f'@{self.kind}(\'{self.pattern}\') in {self.source}'


class StepRegistry:
    """Ordered step definitions contributed by one source.

    ```python
    steps = StepRegistry('stack')

    @steps.given('pushed {num}')
    def pushed(context, value):
        return ok(context, stack=[value, *context['stack']])
    ```

    Definitions are tried in the order they were registered, the kind (given, when, then)
    is informational only, a `given` definition also matches a `Then` step with the same text.
    """

    name: str
    definitions: List[StepDefinition]
    types: Dict[str, Converter]

    def __init__(self, name: str, *, types: Optional[Dict[str, TypeDefinition]] = None) -> None:
        self.name = name
        self.definitions = []
        self.types = {}

        if types is not None:
            self.register_type(**types)

    def register_type(self, **converters: TypeDefinition) -> None:
        for name, definition in converters.items():
            self.types.update({name: make_converter(name, definition)})
            logger.debug(f'registered placeholder kind "{name}" in {self.name}')

    def add(self, kind: str, pattern: str, func: StepFunc) -> StepDefinition:
        kind = kind.lower()
        if kind not in STEP_KINDS:
            raise ValueError(f'"{kind}" is not a valid step kind')

        definition = StepDefinition(
            kind=kind,
            pattern=pattern,
            matcher=compile_pattern(pattern, self.types),
            func=func,
            source=self.name,
        )
        self.definitions.append(definition)
        logger.debug(f'registered step "{pattern}" in {self.name}')

        return definition

    def _decorator(self, kind: str) -> Callable[[str], Callable[[F], F]]:
        def decorator(pattern: str) -> Callable[[F], F]:
            def wrapper(func: F) -> F:
                self.add(kind, pattern, func)

                return func

            return wrapper

        return decorator

    def given(self, pattern: str) -> Callable[[F], F]:
        return self._decorator('given')(pattern)

    def when(self, pattern: str) -> Callable[[F], F]:
        return self._decorator('when')(pattern)

    def then(self, pattern: str) -> Callable[[F], F]:
        return self._decorator('then')(pattern)

    def step(self, pattern: str) -> Callable[[F], F]:
        return self._decorator('step')(pattern)

    def __iter__(self) -> Iterator[StepDefinition]:
        return iter(self.definitions)

    def __len__(self) -> int:
        return len(self.definitions)

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.name} ({len(self.definitions)} steps)>'
