"""Loads Gherkin features with behave's parser and converts them into melon's model."""
from __future__ import annotations

import logging

from os import environ
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

from behave.parser import parse_feature as behave_parse_feature
from behave import model as behave_model

from melon.constants import DEFAULT_FEATURES_PATH, ENV_FEATURES_PATH
from melon.model import DataTable, Examples, Feature, Scenario, ScenarioOutline, Step, StepData


logger = logging.getLogger(__name__)


def features_path() -> Path:
    return Path(environ.get(ENV_FEATURES_PATH, DEFAULT_FEATURES_PATH))


def _tags(tags: Iterable[object]) -> Tuple[str, ...]:
    return tuple(str(tag) for tag in tags)


def _table(table: behave_model.Table) -> DataTable:
    return DataTable(
        headings=tuple(table.headings),
        rows=tuple(tuple(row.cells) for row in table.rows),
    )


def _step(step: behave_model.Step) -> Step:
    data: Optional[StepData] = None

    if step.table is not None:
        data = _table(step.table)
    elif step.text is not None:
        data = str(step.text)

    return Step(
        kind=step.step_type,
        text=step.name,
        keyword=step.keyword,
        data=data,
        line=step.line,
    )


def _scenario(scenario: behave_model.Scenario) -> Union[Scenario, ScenarioOutline]:
    steps = tuple(_step(step) for step in scenario.steps)

    if isinstance(scenario, behave_model.ScenarioOutline):
        examples = []
        for example in scenario.examples:
            rows = ()
            if example.table is not None:
                rows = tuple(dict(zip(example.table.headings, row.cells)) for row in example.table.rows)

            examples.append(Examples(name=example.name, tags=_tags(example.tags), rows=rows))

        return ScenarioOutline(
            name=scenario.name,
            tags=_tags(scenario.tags),
            steps=steps,
            examples=tuple(examples),
            line=scenario.line,
        )

    return Scenario(name=scenario.name, tags=_tags(scenario.tags), steps=steps, line=scenario.line)


def convert_feature(feature: behave_model.Feature) -> Feature:
    background: Tuple[Step, ...] = ()
    if feature.background is not None:
        background = tuple(_step(step) for step in feature.background.steps)

    return Feature(
        name=feature.name,
        tags=_tags(feature.tags),
        background=background,
        scenarios=tuple(_scenario(scenario) for scenario in feature.scenarios),
        description=tuple(feature.description or ()),
        filename=feature.filename,
    )


def parse_feature(text: str, *, filename: Optional[str] = None, language: Optional[str] = None) -> Feature:
    parsed = behave_parse_feature(text, language=language, filename=filename)

    if parsed is None:
        raise ValueError(f'unable to parse {filename or "<string>"}, no feature found')

    return convert_feature(parsed)


def parse_feature_file(filename: Union[str, Path], *, root: Optional[Path] = None) -> Feature:
    """Relative file names are resolved against `root`, which defaults to the features
    directory (`MELON_FEATURES_PATH`, `tests/features` if not set).
    """
    if root is None:
        root = features_path()

    path = Path(filename)
    if not path.is_absolute():
        path = (root / path).resolve()

    logger.debug(f'loading feature from {path.as_posix()}')

    return parse_feature(path.read_text(encoding='utf-8'), filename=path.as_posix())
