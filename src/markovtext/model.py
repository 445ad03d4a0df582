"""
Markov chain model for markovtext.
"""

from __future__ import annotations

from typing import Optional, Sequence, Union

import numpy as np

from .constants import DEFAULT_STATE_INDEX
from .errors import InsufficientInputError, MarkovTextError
from .matrix import TransitionMatrix
from .state import State
from .state_index import StateIndex, get_state_index

RandomSource = Union[None, int, np.random.Generator]


def _coerce_generator(random_source: RandomSource) -> np.random.Generator:
    if isinstance(random_source, np.random.Generator):
        return random_source
    return np.random.default_rng(random_source)


class MarkovModel:
    """
    Transition counts between token states, with weighted sampling over them.

    Row identifiers of the matrix are the state observed later in each adjacent training
    pair and column identifiers the state observed earlier. Prediction reads the row of the
    current state, so it samples among the states recorded in front of it.

    :param states: State index holding every registered state.
    :type states: StateIndex
    :param matrix: Transition counts.
    :type matrix: TransitionMatrix
    :param state_size: Chain order.
    :type state_size: int
    :param random_source: Seed or generator used for sampling.
    :type random_source: int or numpy.random.Generator or None
    """

    def __init__(
        self,
        *,
        states: StateIndex,
        matrix: TransitionMatrix,
        state_size: int,
        random_source: RandomSource = None,
    ) -> None:
        if state_size < 1:
            raise ValueError(f"Chain order must be at least 1 (got {state_size})")
        self.states = states
        self.matrix = matrix
        self.state_size = state_size
        self.rng = _coerce_generator(random_source)

    @classmethod
    def from_tokens(
        cls,
        tokens: Sequence[str],
        state_size: int,
        *,
        state_index: str = DEFAULT_STATE_INDEX,
        random_source: RandomSource = None,
    ) -> "MarkovModel":
        """
        Train a model from a token sequence.

        :param tokens: Ordered training tokens.
        :type tokens: Sequence[str]
        :param state_size: Chain order.
        :type state_size: int
        :param state_index: State index backend identifier.
        :type state_index: str
        :param random_source: Seed or generator used for sampling.
        :type random_source: int or numpy.random.Generator or None
        :return: Trained model.
        :rtype: MarkovModel
        :raises ValueError: If the chain order is below one.
        :raises InsufficientInputError: If fewer tokens than the chain order are supplied.
        """
        if state_size < 1:
            raise ValueError(f"Chain order must be at least 1 (got {state_size})")
        if len(tokens) < state_size:
            raise InsufficientInputError(token_count=len(tokens), chain_order=state_size)

        max_possible_states = len(tokens) - (state_size - 1)
        index = get_state_index(state_index)
        matrix = TransitionMatrix(max_possible_states)

        previous_row: Optional[int] = None
        for position in range(max_possible_states):
            state = State(tuple(tokens[position : position + state_size]))
            row = index.get_index(state)
            if row is None:
                row = len(index)
                index.insert(row, state)
            if previous_row is not None:
                matrix.increment(row, previous_row)
            previous_row = row

        return cls(
            states=index,
            matrix=matrix,
            state_size=state_size,
            random_source=random_source,
        )

    def _random_state_index(self) -> int:
        return int(self.rng.integers(0, len(self.states)))

    def _state_at(self, index: int) -> State:
        state = self.states.get_state(index)
        if state is None:
            raise MarkovTextError(
                f"State index has no state {index} (holds {len(self.states)} states)"
            )
        return state

    def random_state(self) -> State:
        """
        Return a state chosen uniformly at random.

        :return: Random registered state.
        :rtype: State
        """
        return self._state_at(self._random_state_index())

    def predict(self, current_state: State) -> State:
        """
        Sample the state that follows ``current_state`` in a generated walk.

        Unknown states and rows without entries fall back to a uniformly random state.

        :param current_state: State to predict from.
        :type current_state: State
        :return: Sampled state.
        :rtype: State
        """
        row = self.states.get_index(current_state)
        if row is None:
            row = self._random_state_index()
        columns, weights = self.matrix.row(row)

        if columns.size == 0:
            return self.random_state()

        probabilities = weights.astype(np.float64)
        probabilities /= probabilities.sum()
        selected = int(columns[self.rng.choice(columns.size, p=probabilities)])
        return self._state_at(selected)

    def dead_end_count(self) -> int:
        populated = set(self.matrix.populated_rows())
        return sum(1 for row in range(len(self.states)) if row not in populated)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MarkovModel):
            return NotImplemented
        return (
            self.state_size == other.state_size
            and self.states.states() == other.states.states()
            and self.matrix == other.matrix
        )

    def __repr__(self) -> str:
        return (
            f"MarkovModel(state_size={self.state_size}, states={len(self.states)}, "
            f"matrix={self.matrix!r})"
        )
