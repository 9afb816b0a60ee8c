from __future__ import annotations

import logging

from types import ModuleType
from typing import List, Sequence, Tuple
from importlib import import_module
from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path

from melon.registry import StepRegistry


logger = logging.getLogger(__name__)


def _split_target(target: str) -> Tuple[str, str]:
    if ':' in target:
        location, attribute = target.rsplit(':', 1)
        if attribute.isidentifier():
            return location, attribute

    return target, ''


def load_module(location: str) -> ModuleType:
    if not location.endswith('.py'):
        return import_module(location)

    path = Path(location).resolve()
    spec = spec_from_file_location(path.stem, path)
    if spec is None or spec.loader is None:
        raise ValueError(f'unable to load step module from {path.as_posix()}')

    module = module_from_spec(spec)
    spec.loader.exec_module(module)

    return module


def load_sources(targets: Sequence[str]) -> List[StepRegistry]:
    """Resolve `package.module[:attribute]` or `path/to/steps.py[:attribute]` into step
    registries. Without an attribute, every registry defined in the module is used, in the
    order they appear in the module.
    """
    sources: List[StepRegistry] = []

    for target in targets:
        location, attribute = _split_target(target)
        module = load_module(location)

        if attribute:
            source = getattr(module, attribute, None)
            if not isinstance(source, StepRegistry):
                raise ValueError(f'{attribute} in {location} is not a step registry')
            found = [source]
        else:
            found = [value for value in vars(module).values() if isinstance(value, StepRegistry)]
            if len(found) < 1:
                raise ValueError(f'no step registry found in {location}')

        for source in found:
            if any(source is existing for existing in sources):
                continue

            logger.debug(f'loaded {len(source)} steps from {source.name} ({location})')
            sources.append(source)

    return sources
