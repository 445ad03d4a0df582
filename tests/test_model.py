"""
Training and prediction tests for the Markov model.
"""

from __future__ import annotations

from collections import Counter

import numpy as np
import pytest

from markovtext.constants import U16_MAX
from markovtext.errors import InsufficientInputError, MarkovTextError
from markovtext.matrix import TransitionMatrix
from markovtext.model import MarkovModel
from markovtext.state import State
from markovtext.state_index import HashStateIndex


def _tokens(text: str):
    return text.split()


def test_alternating_corpus_records_exact_counts():
    """
    Rows hold the later state of each pair and columns the earlier one.
    """
    model = MarkovModel.from_tokens(_tokens("a b a b a b"), 1, random_source=0)
    a = State(("a",))
    b = State(("b",))
    assert model.states.get_index(a) == 0
    assert model.states.get_index(b) == 1
    assert model.matrix.shape == (6, 6)
    assert model.matrix.to_rows() == {0: {1: 2}, 1: {0: 3}}
    assert {model.predict(a) for _ in range(50)} == {b}
    assert {model.predict(b) for _ in range(50)} == {a}


def test_training_is_deterministic_across_runs_and_backends():
    """
    Training the same tokens yields the same ids and counts regardless of backend.
    """
    tokens = _tokens("the dog and the fox and the dog sleep")
    first = MarkovModel.from_tokens(tokens, 2)
    second = MarkovModel.from_tokens(tokens, 2)
    linear = MarkovModel.from_tokens(tokens, 2, state_index="linear")
    assert first.states.states() == second.states.states()
    assert first.matrix == second.matrix
    assert first == linear
    assert first.states.get_state(0) == State(("the", "dog"))
    assert first.states.get_state(1) == State(("dog", "and"))


def test_every_stored_count_is_positive():
    tokens = _tokens("x y z x y y z z x x y z")
    model = MarkovModel.from_tokens(tokens, 1)
    assert all(count >= 1 for _, _, count in model.matrix.iter_entries())
    assert model.matrix.total() == len(tokens) - 1


def test_input_of_exactly_chain_order_has_one_state_and_no_transitions():
    model = MarkovModel.from_tokens(["a", "b", "c"], 3)
    assert len(model.states) == 1
    assert model.matrix.shape == (1, 1)
    assert model.matrix.nnz == 0
    assert model.predict(State(("a", "b", "c"))) == State(("a", "b", "c"))


def test_input_shorter_than_chain_order_is_rejected():
    with pytest.raises(InsufficientInputError) as excinfo:
        MarkovModel.from_tokens(["a", "b"], 3)
    assert excinfo.value.token_count == 2
    assert excinfo.value.chain_order == 3
    with pytest.raises(InsufficientInputError):
        MarkovModel.from_tokens([], 1)
    with pytest.raises(ValueError):
        MarkovModel.from_tokens(["a"], 0)


def test_repeated_transitions_saturate():
    """
    A transition seen more often than the 16-bit ceiling keeps the ceiling.
    """
    model = MarkovModel.from_tokens(["a"] * (U16_MAX + 10), 1)
    assert model.matrix.to_rows() == {0: {0: U16_MAX}}


def test_dead_end_falls_back_to_uniform_states():
    """
    A state with an empty row predicts every registered state about equally often.
    """
    model = MarkovModel.from_tokens(_tokens("a b c d"), 1, random_source=1234)
    assert model.matrix.row_entries(0) == []
    assert model.dead_end_count() == 1
    trials = 4000
    counts = Counter(model.predict(State(("a",))) for _ in range(trials))
    assert len(counts) == 4
    for count in counts.values():
        assert abs(count - trials / 4) < trials * 0.05


def test_unknown_state_falls_back_to_a_registered_state():
    model = MarkovModel.from_tokens(_tokens("a b c d"), 1, random_source=5)
    registered = set(model.states.states())
    for _ in range(20):
        assert model.predict(State(("zebra",))) in registered


def test_weighted_sampling_follows_counts():
    """
    Sampling frequency converges to each count's share of its row.
    """
    model = MarkovModel.from_tokens(_tokens("p x p x p x q x"), 1, random_source=99)
    x = State(("x",))
    assert model.matrix.row_entries(model.states.get_index(x)) == [(0, 3), (2, 1)]
    trials = 8000
    picked_p = sum(1 for _ in range(trials) if model.predict(x) == State(("p",)))
    assert abs(picked_p / trials - 0.75) < 0.03


def test_seeded_models_predict_identically():
    tokens = _tokens("the dog and the fox and the dog sleep and the fox runs")
    first = MarkovModel.from_tokens(tokens, 1, random_source=np.random.default_rng(3))
    second = MarkovModel.from_tokens(tokens, 1, random_source=3)
    state = State(("the",))
    assert [first.predict(state) for _ in range(25)] == [second.predict(state) for _ in range(25)]


def test_column_without_registered_state_raises_model_error():
    """
    A transition into an identifier the state index never registered is reported, not asserted.
    """
    index = HashStateIndex()
    index.insert(0, State(("a",)))
    matrix = TransitionMatrix.from_rows(3, {0: {2: 1}})
    model = MarkovModel(states=index, matrix=matrix, state_size=1, random_source=0)
    with pytest.raises(MarkovTextError, match="no state 2"):
        model.predict(State(("a",)))
