from typing import Any, Dict, List, Mapping

from melon.dispatch import Ok, ok
from melon.model import Step
from melon.registry import StepRegistry


def given(text: str, **kwargs: Any) -> Step:
    return Step('given', text, keyword='Given', **kwargs)


def when(text: str, **kwargs: Any) -> Step:
    return Step('when', text, keyword='When', **kwargs)


def then(text: str, **kwargs: Any) -> Step:
    return Step('then', text, keyword='Then', **kwargs)


def and_(kind: str, text: str, **kwargs: Any) -> Step:
    return Step(kind, text, keyword='And', **kwargs)


class Calls:
    """Records which handlers was invoked, and with what."""

    calls: List[str]
    contexts: Dict[str, List[Mapping[str, Any]]]

    def __init__(self) -> None:
        self.calls = []
        self.contexts = {}

    def __call__(self, name: str, context: Mapping[str, Any]) -> None:
        self.calls.append(name)
        self.contexts.setdefault(name, []).append(context)

    def count(self, name: str) -> int:
        return self.calls.count(name)


def create_stack_steps(calls: Calls) -> StepRegistry:
    steps = StepRegistry('stack')

    @steps.given('empty stack')
    def empty_stack(context: Mapping[str, Any]) -> Ok:
        calls('empty_stack', context)
        return ok(context, stack=[])

    @steps.given('pushed {num}')
    def pushed(context: Mapping[str, Any], value: int) -> Ok:
        calls('pushed', context)
        return ok(context, stack=[value, *context['stack']])

    @steps.when('execute sum function')
    def execute_sum(context: Mapping[str, Any]) -> Ok:
        calls('execute_sum', context)
        a, b, *rest = context['stack']
        return ok(context, stack=[a + b, *rest])

    @steps.then('have {num} on top of stack')
    def top_of_stack(context: Mapping[str, Any], value: int) -> Ok:
        calls('top_of_stack', context)
        assert context['stack'][0] == value, f'expected {value}, got {context["stack"][0]}'
        return ok(context)

    return steps
