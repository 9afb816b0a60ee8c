import pytest

from melon.registry import StepRegistry

from tests.helpers import Calls, create_stack_steps


@pytest.fixture
def calls() -> Calls:
    return Calls()


@pytest.fixture
def stack_steps(calls: Calls) -> StepRegistry:
    return create_stack_steps(calls)
