from __future__ import annotations

from typing import List, Union

from melon.model import Feature, Scenario, ScenarioOutline, Step
from melon.text import substitute_placeholders


def _example_name(outline: ScenarioOutline, index: int, row: dict) -> str:
    values = ', '.join(f'{key}={value}' for key, value in row.items())

    return f'{outline.name} (example {index}: {values})'


def expand(outline: Union[Scenario, ScenarioOutline]) -> List[Scenario]:
    """One scenario per example row, in row order. `<name>` in step text is replaced with the
    value of column `name`; attached data is left as is.
    """
    if isinstance(outline, Scenario):
        return [outline]

    scenarios: List[Scenario] = []
    index = 0

    for examples in outline.examples:
        for row in examples.rows:
            index += 1
            steps = tuple(
                Step(
                    kind=step.kind,
                    text=substitute_placeholders(step.text, row),
                    keyword=step.keyword,
                    data=step.data,
                    line=step.line,
                )
                for step in outline.steps
            )

            scenarios.append(
                Scenario(
                    name=_example_name(outline, index, row),
                    tags=(*outline.tags, *examples.tags),
                    steps=steps,
                    line=outline.line,
                )
            )

    return scenarios


def scenarios(feature: Feature) -> List[Scenario]:
    expanded: List[Scenario] = []

    for scenario in feature.scenarios:
        expanded.extend(expand(scenario))

    return expanded
