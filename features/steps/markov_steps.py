from __future__ import annotations

import json
import shlex

from behave import given, then, when

from features.environment import run_markovtext
from markovtext.constants import MAGIC_FILE_BYTES
from markovtext.errors import InsufficientInputError
from markovtext.model import MarkovModel
from markovtext.persistence import dump_model, load_input
from markovtext.state import State


def _state(raw: str) -> State:
    return State(tuple(raw.split()))


@given('a model trained on "{text}" with chain order {order:d}')
def step_model_trained(context, text: str, order: int) -> None:
    context.model = MarkovModel.from_tokens(text.split(), order, random_source=0)


@when('I train on "{text}" with chain order {order:d}')
def step_train(context, text: str, order: int) -> None:
    context.training_error = None
    try:
        context.model = MarkovModel.from_tokens(text.split(), order)
    except InsufficientInputError as exc:
        context.training_error = exc


@then("training fails with an insufficient input error")
def step_training_fails(context) -> None:
    assert isinstance(context.training_error, InsufficientInputError)


@then('state "{raw}" has id {state_id:d}')
def step_state_id(context, raw: str, state_id: int) -> None:
    assert context.model.states.get_index(_state(raw)) == state_id


@then("the matrix entry at row {row:d} column {column:d} is {count:d}")
def step_matrix_entry(context, row: int, column: int, count: int) -> None:
    assert context.model.matrix.get(row, column) == count


@then("the model has {count:d} state")
@then("the model has {count:d} states")
def step_state_count(context, count: int) -> None:
    assert len(context.model.states) == count


@then("the matrix has no stored entries")
def step_matrix_empty(context) -> None:
    assert context.model.matrix.nnz == 0


@when('I predict {count:d} times from state "{raw}"')
def step_predict(context, count: int, raw: str) -> None:
    state = _state(raw)
    context.predictions = [context.model.predict(state) for _ in range(count)]


@then('every prediction is state "{raw}"')
def step_every_prediction(context, raw: str) -> None:
    assert set(context.predictions) == {_state(raw)}


@when("I save and reload the model")
def step_save_reload(context) -> None:
    context.reloaded = load_input(dump_model(context.model), state_size=1)


@then("the reloaded model equals the original")
def step_reloaded_equals(context) -> None:
    assert context.reloaded == context.model


@given('a text file "{filename}" containing "{text}"')
def step_text_file(context, filename: str, text: str) -> None:
    (context.workdir / filename).write_text(text, encoding="utf-8")


@when('I run markovtext "{command}" with input "{text}"')
def step_run_with_input(context, command: str, text: str) -> None:
    run_markovtext(context, shlex.split(command), input_text=text)


@when('I run markovtext "{command}"')
def step_run(context, command: str) -> None:
    run_markovtext(context, shlex.split(command))


@then("the command succeeds")
def step_command_succeeds(context) -> None:
    result = context.last_result
    assert result.returncode == 0, result.stderr


@then("the command fails with exit code {code:d}")
def step_command_fails(context, code: int) -> None:
    assert context.last_result.returncode == code


@then('standard output is "{expected}"')
def step_stdout_is(context, expected: str) -> None:
    assert context.last_result.stdout.strip() == expected


@then('standard error contains "{expected}"')
def step_stderr_contains(context, expected: str) -> None:
    assert expected in context.last_result.stderr


@then('the file "{filename}" starts with the model magic bytes')
def step_file_magic(context, filename: str) -> None:
    assert (context.workdir / filename).read_bytes().startswith(MAGIC_FILE_BYTES)


@then("the summary reports {states:d} states and {transitions:d} transitions")
def step_summary(context, states: int, transitions: int) -> None:
    summary = json.loads(context.last_result.stdout)
    assert summary["states"] == states
    assert summary["total_transitions"] == transitions
