from typing import Any, List, Mapping

import pytest

from melon.dispatch import (
    REJECTED,
    HandlerException,
    MissingDefinition,
    Ok,
    Rejected,
    UnexpectedReturn,
    dispatch,
    find_definition,
    freeze,
    ok,
)
from melon.model import DataTable
from melon.registry import StepRegistry

from tests.helpers import Calls, given, then


def test_ok() -> None:
    context = {'a': 1}
    result = ok(context, b=2)

    assert result == Ok({'a': 1, 'b': 2})
    assert context == {'a': 1}

    assert ok(context).context == context
    assert ok(context).context is not context


def test_rejected() -> None:
    assert REJECTED is Rejected.REJECTED
    assert repr(REJECTED) == 'REJECTED'


def test_freeze() -> None:
    frozen = freeze({'a': 1})

    assert frozen == {'a': 1}

    with pytest.raises(TypeError):
        frozen['b'] = 2  # type: ignore[index]


def test_dispatch_ok(stack_steps: StepRegistry, calls: Calls) -> None:
    outcome = dispatch(given('pushed 3'), {'stack': [1]}, [stack_steps])

    assert isinstance(outcome, Ok)
    assert outcome.context == {'stack': [3, 1]}
    assert calls.calls == ['pushed']

    with pytest.raises(TypeError):
        outcome.context['stack'] = []  # type: ignore[index]


def test_dispatch_first_match_wins(calls: Calls) -> None:
    steps = StepRegistry('numbers')

    @steps.given('pushed {num}')
    def first(context: Mapping[str, Any], value: int) -> Ok:
        calls('first', context)
        return ok(context, value=value)

    @steps.given('pushed {int}')
    def second(context: Mapping[str, Any], value: int) -> Ok:
        calls('second', context)
        return ok(context, value=value)

    outcome = dispatch(given('pushed 1'), {}, [steps])

    assert outcome == Ok({'value': 1})
    assert calls.calls == ['first']


def test_dispatch_source_priority(calls: Calls) -> None:
    own = StepRegistry('own')
    imported = StepRegistry('imported')

    @imported.given('a step')
    def imported_step(context: Mapping[str, Any]) -> Ok:
        calls('imported', context)
        return ok(context, source='imported')

    @own.given('a step')
    def own_step(context: Mapping[str, Any]) -> Ok:
        calls('own', context)
        return ok(context, source='own')

    assert dispatch(given('a step'), {}, [own, imported]) == Ok({'source': 'own'})
    assert dispatch(given('a step'), {}, [imported, own]) == Ok({'source': 'imported'})
    assert calls.calls == ['own', 'imported']


def test_dispatch_rejected(calls: Calls) -> None:
    own = StepRegistry('own')
    imported = StepRegistry('imported')

    @own.given('user {word}')
    def specific(context: Mapping[str, Any], name: str) -> Any:
        calls('specific', context)
        if name != 'admin':
            return REJECTED

        return ok(context, role='admin')

    @own.given('user {word}')
    def generic(context: Mapping[str, Any], name: str) -> Any:
        calls('generic', context)
        if name == 'guest':
            return REJECTED

        return ok(context, role='user')

    @imported.given('user {word}')
    def fallback(context: Mapping[str, Any], name: str) -> Ok:
        calls('fallback', context)
        return ok(context, role='guest')

    assert dispatch(given('user admin'), {}, [own, imported]) == Ok({'role': 'admin'})
    assert calls.calls == ['specific']

    calls.calls.clear()
    assert dispatch(given('user bob'), {}, [own, imported]) == Ok({'role': 'user'})
    assert calls.calls == ['specific', 'generic']

    calls.calls.clear()
    assert dispatch(given('user guest'), {}, [own, imported]) == Ok({'role': 'guest'})
    assert calls.calls == ['specific', 'generic', 'fallback']

    # rejected by everyone
    calls.calls.clear()
    step = given('user guest')
    outcome = dispatch(step, {}, [own])
    assert outcome == MissingDefinition(step)
    assert calls.calls == ['specific', 'generic']


def test_dispatch_missing_definition(stack_steps: StepRegistry, calls: Calls) -> None:
    step = then('the stack is sorted')
    outcome = dispatch(step, {'stack': []}, [stack_steps])

    assert isinstance(outcome, MissingDefinition)
    assert outcome.step is step
    assert outcome.message == 'Definition for "the stack is sorted" not found'
    assert outcome.error is None
    assert calls.calls == []

    assert isinstance(dispatch(step, {}, []), MissingDefinition)


def test_dispatch_handler_exception(calls: Calls) -> None:
    steps = StepRegistry('failing')
    error = AssertionError('expected 3, got 2')

    @steps.then('have {num} on top of stack')
    def failing(context: Mapping[str, Any], value: int) -> Ok:
        calls('failing', context)
        raise error

    @steps.then('have {num} on top of stack')
    def never(context: Mapping[str, Any], value: int) -> Ok:
        calls('never', context)
        return ok(context)

    step = then('have 3 on top of stack')
    outcome = dispatch(step, {}, [steps])

    assert isinstance(outcome, HandlerException)
    assert outcome.exception is error
    assert outcome.error is error
    assert outcome.definition.func is failing
    assert outcome.message == 'AssertionError: expected 3, got 2'
    assert calls.calls == ['failing']

    @steps.when('it breaks')
    def breaks(context: Mapping[str, Any]) -> Ok:
        raise ValueError()

    outcome = dispatch(given('it breaks'), {}, [steps])
    assert isinstance(outcome, HandlerException)
    assert outcome.message == 'ValueError'


def test_dispatch_unexpected_return(calls: Calls) -> None:
    steps = StepRegistry('bad')

    @steps.given('returns nothing')
    def returns_nothing(context: Mapping[str, Any]) -> None:
        calls('returns_nothing', context)

    @steps.given('returns a dict')
    def returns_dict(context: Mapping[str, Any]) -> Any:
        return {'a': 1}

    @steps.given('returns ok without context')
    def returns_ok_none(context: Mapping[str, Any]) -> Any:
        return Ok(None)  # type: ignore[arg-type]

    step = given('returns nothing')
    outcome = dispatch(step, {}, [steps])
    assert isinstance(outcome, UnexpectedReturn)
    assert outcome.value is None
    assert outcome.definition.func is returns_nothing
    assert outcome.message == 'Unexpected return value `None`'
    assert outcome.error is None

    outcome = dispatch(given('returns a dict'), {}, [steps])
    assert isinstance(outcome, UnexpectedReturn)
    assert outcome.message == 'Unexpected return value `{\'a\': 1}`'

    outcome = dispatch(given('returns ok without context'), {}, [steps])
    assert isinstance(outcome, UnexpectedReturn)
    assert outcome.message == 'Unexpected return value `Ok(context=None)`'


def test_dispatch_step_data() -> None:
    steps = StepRegistry('data')
    received: List[Any] = []

    @steps.given('the users in {word}')
    def users(context: Mapping[str, Any], group: str, table: DataTable) -> Ok:
        received.extend([group, table])
        return ok(context)

    @steps.given('the text')
    def text(context: Mapping[str, Any], value: str) -> Ok:
        received.append(value)
        return ok(context)

    table = DataTable(headings=('name',), rows=(('alice',), ('bob',)))

    assert isinstance(dispatch(given('the users in admins', data=table), {}, [steps]), Ok)
    assert received == ['admins', table]
    assert received[1] is table

    received.clear()
    assert isinstance(dispatch(given('the text', data='hello\nworld'), {}, [steps]), Ok)
    assert received == ['hello\nworld']


def test_find_definition(stack_steps: StepRegistry, calls: Calls) -> None:
    found = find_definition('pushed 2', [stack_steps])

    assert found is not None
    definition, values = found
    assert definition.pattern == 'pushed {num}'
    assert values == [2]
    assert calls.calls == []

    assert find_definition('pushed two', [stack_steps]) is None
    assert find_definition('pushed 2', []) is None

    colors = StepRegistry('colors', types={'color': (r'\w+', {'red': 1}.__getitem__)})
    colors.add('given', 'color {color}', lambda context, value: ok(context))

    assert find_definition('color blue', [colors]) is None
    assert find_definition('color red', [colors]) is not None
