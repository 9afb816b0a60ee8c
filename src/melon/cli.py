from __future__ import annotations

import sys

from argparse import Namespace as Arguments
from pathlib import Path
from typing import List, Sequence, Set, Tuple

from colorama import init, Fore

from melon.constants import MESSAGE_NO_STEP_IMPL
from melon.dispatch import find_definition
from melon.inventory import load_sources
from melon.model import Feature, Step
from melon.outline import scenarios
from melon.parser import parse_feature_file
from melon.registry import StepRegistry


def diagnostic_to_text(filename: str, step: Step) -> str:
    return '\t'.join(
        [
            f'{filename}:{step.line or 0}',
            f'{Fore.YELLOW}warning{Fore.RESET}',
            f'{MESSAGE_NO_STEP_IMPL}: {step.label} {step.text}',
        ]
    )


def find_missing_steps(feature: Feature, sources: Sequence[StepRegistry]) -> List[Step]:
    missing: List[Step] = []
    seen: Set[Tuple[int, str]] = set()

    all_steps = list(feature.background)
    for scenario in scenarios(feature):
        all_steps.extend(scenario.steps)

    for step in all_steps:
        key = (step.line or 0, step.text)
        if key in seen:
            continue

        seen.add(key)

        if find_definition(step.text, sources) is None:
            missing.append(step)

    return missing


def _collect_files(names: List[str]) -> List[Path]:
    if names == ['.']:
        return sorted(Path.cwd().rglob('*.feature'))

    files: List[Path] = []
    for name in names:
        path = Path(name)

        if path.is_dir():
            files.extend(sorted(path.rglob('*.feature')))
        else:
            files.append(path)

    return files


def cli(args: Arguments) -> int:
    # init colorama for ansi colors
    init()

    cwd = Path.cwd().as_posix()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    sources = load_sources(args.steps)

    rc: int = 0
    for file in _collect_files(args.files):
        feature = parse_feature_file(file.resolve())
        missing = find_missing_steps(feature, sources)

        if len(missing) < 1:
            continue

        rc = 1

        filename = file.resolve().as_posix().replace(cwd, '').lstrip('/\\')

        for step in missing:
            print(diagnostic_to_text(filename, step))

    return rc
