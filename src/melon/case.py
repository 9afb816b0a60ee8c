"""pytest integration, one test case per concrete scenario.

```python
from melon.case import feature

from tests.steps import stack_steps, math_steps

test_stack = feature(
    '''
Feature: Stack
  Scenario: sum
    Given empty stack
    And pushed 1
    And pushed 2
    When execute sum function
    Then have 3 on top of stack
''',
    stack_steps,
    imports=[math_steps],
)
```

The returned function is parametrized with one `pytest.param` per scenario (outlines expanded
first), so every scenario is reported, selected and run as its own test. pytest's `request`
fixture is available to step handlers as `context['request']`.
"""
from __future__ import annotations

import logging

from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

import pytest

from melon.constants import CONTEXT_REQUEST
from melon.model import Feature, Scenario
from melon.outline import scenarios
from melon.parser import parse_feature, parse_feature_file
from melon.registry import StepRegistry
from melon.runner import run_scenario
from melon.text import normalize_text


logger = logging.getLogger(__name__)

ContextFactory = Callable[[], Mapping[str, Any]]


def _marks(feature: Feature, scenario: Scenario) -> List[pytest.MarkDecorator]:
    return [getattr(pytest.mark, tag) for tag in (*feature.tags, *scenario.tags)]


def build_test(
    feature: Feature,
    steps: StepRegistry,
    *,
    imports: Sequence[StepRegistry] = (),
    context: Optional[ContextFactory] = None,
) -> Callable[..., None]:
    sources = [steps, *imports]
    concrete = scenarios(feature)

    params = [pytest.param(scenario, id=scenario.name, marks=_marks(feature, scenario)) for scenario in concrete]

    logger.debug(f'feature "{feature.name}" has {len(concrete)} scenarios')

    @pytest.mark.parametrize('scenario', params)
    def test_feature(scenario: Scenario, request: pytest.FixtureRequest) -> None:
        initial: Dict[str, Any] = dict(context() if context is not None else {})
        initial.update({CONTEXT_REQUEST: request})

        run_scenario(feature.background, scenario.steps, initial, sources, name=scenario.name)

    name = normalize_text(feature.name).replace('-', '_').lower() or 'feature'
    test_feature.__name__ = f'test_{name}'
    test_feature.__qualname__ = test_feature.__name__

    return test_feature


def feature(
    source: str,
    steps: StepRegistry,
    *,
    imports: Sequence[StepRegistry] = (),
    context: Optional[ContextFactory] = None,
) -> Callable[..., None]:
    return build_test(parse_feature(source), steps, imports=imports, context=context)


def feature_file(
    filename: Union[str, Path],
    steps: StepRegistry,
    *,
    imports: Sequence[StepRegistry] = (),
    context: Optional[ContextFactory] = None,
    root: Optional[Path] = None,
) -> Callable[..., None]:
    return build_test(parse_feature_file(filename, root=root), steps, imports=imports, context=context)
