from __future__ import annotations

import logging

from typing import Optional, Sequence

from melon.constants import CONTEXT_SCENARIO_NAME
from melon.dispatch import Context, Ok, dispatch, freeze
from melon.model import Step
from melon.registry import StepRegistry
from melon.reporter import raise_failure


logger = logging.getLogger(__name__)


def run_steps(
    steps: Sequence[Step],
    context: Context,
    sources: Sequence[StepRegistry],
    *,
    name: str,
    background_size: int = 0,
    color: bool = True,
) -> Context:
    """Run steps in order, each step gets the context returned by the step before it.

    The first step that does not pass stops the run, the steps after it are never attempted
    and `ScenarioFailure` is raised.
    """
    steps = tuple(steps)

    for cursor, step in enumerate(steps):
        logger.debug(f'{name}: running step {cursor} "{step.text}"')
        outcome = dispatch(step, context, sources)

        if isinstance(outcome, Ok):
            context = outcome.context
            continue

        logger.debug(f'{name}: step {cursor} failed: {outcome.message}')

        raise_failure(
            name,
            steps,
            cursor,
            outcome.message,
            error=outcome.error,
            background_size=background_size,
            color=color,
        )

    return context


def run_scenario(
    background: Sequence[Step],
    steps: Sequence[Step],
    context: Optional[Context],
    sources: Sequence[StepRegistry],
    *,
    name: str,
    color: bool = True,
) -> Context:
    """Run the background steps followed by the scenario steps, with `scenario_name` added to
    the initial context. Returns the context returned by the last step.
    """
    initial = freeze({**(context or {}), CONTEXT_SCENARIO_NAME: name})

    final = run_steps(
        [*background, *steps],
        initial,
        sources,
        name=name,
        background_size=len(background),
        color=color,
    )

    logger.info(f'scenario "{name}" passed')

    return final
