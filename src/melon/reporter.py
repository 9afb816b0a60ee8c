from __future__ import annotations

from typing import List, NoReturn, Optional, Sequence

from colorama import Fore, Style

from melon.constants import GLYPH_DONE, GLYPH_FAILED, GLYPH_SKIPPED, KEYWORD_WIDTH, TRACE_DELIMITER
from melon.errors import ScenarioFailure
from melon.model import Step


def _colorize(text: str, color: str, enabled: bool) -> str:
    if not enabled:
        return text

    return f'{color}{text}{Fore.RESET}'


def format_step(step: Step) -> str:
    return f'{step.label.rjust(KEYWORD_WIDTH)} {step.text}'


def format_failure(
    scenario_name: str,
    steps: Sequence[Step],
    cursor: int,
    message: str,
    *,
    color: bool = True,
) -> str:
    lines = [format_step(step) for step in steps]
    previous, current, following = lines[:cursor], lines[cursor], lines[cursor + 1 :]

    printable_steps: List[str] = [
        *[f'{_colorize(GLYPH_DONE, Fore.GREEN, color)} \t{line}' for line in previous],
        f'{_colorize(GLYPH_FAILED, Fore.RED, color)} \t{_colorize(current, Fore.RED, color)}',
        *[f'{GLYPH_SKIPPED} \t{line}' for line in following],
    ]

    reset = Style.RESET_ALL if color else ''

    return '\n'.join(
        [
            message,
            '',
            f'{reset}{TRACE_DELIMITER}',
            f'  Scenario: {scenario_name}',
            f'{reset}' + '\n'.join(printable_steps),
        ]
    )


def raise_failure(
    scenario_name: str,
    steps: Sequence[Step],
    cursor: int,
    message: str,
    *,
    error: Optional[BaseException] = None,
    background_size: int = 0,
    color: bool = True,
) -> NoReturn:
    """Raise `ScenarioFailure` with the rendered trace. When the step failed because of an
    exception, the failure is chained to it and carries its traceback, so the frame where the
    handler failed is still the last one shown.
    """
    failure = ScenarioFailure(
        format_failure(scenario_name, steps, cursor, message, color=color),
        scenario_name=scenario_name,
        steps=steps,
        cursor=cursor,
        message=message,
        background_size=background_size,
    )

    if error is None:
        raise failure

    raise failure.with_traceback(error.__traceback__) from error
