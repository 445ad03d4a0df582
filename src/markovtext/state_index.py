"""
State index backends for markovtext.

A state index assigns every distinct state a dense integer identifier in order of first
observation. Backends share one interface so lookup strategies can be compared without
touching the model.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type

from .state import State


class StateIndex(ABC):
    """
    Abstract interface for state index backends.

    :ivar index_id: Identifier string for the backend.
    :vartype index_id: str
    """

    index_id: str

    def __init__(self) -> None:
        self._states: List[State] = []

    def get_state(self, index: int) -> Optional[State]:
        """
        Return the state registered at an identifier.

        :param index: State identifier.
        :type index: int
        :return: Registered state or None when out of range.
        :rtype: State or None
        """
        if 0 <= index < len(self._states):
            return self._states[index]
        return None

    @abstractmethod
    def get_index(self, state: State) -> Optional[int]:
        """
        Return the identifier registered for a state.

        :param state: State to look up by content.
        :type state: State
        :return: State identifier or None when the state is unknown.
        :rtype: int or None
        """
        raise NotImplementedError

    def insert(self, index: int, state: State) -> None:
        """
        Register a new state at the next free identifier.

        :param index: Identifier to assign. Must equal the current length.
        :type index: int
        :param state: State to register.
        :type state: State
        :raises ValueError: If the identifier is out of sequence or the state is already registered.
        """
        if index != len(self._states):
            raise ValueError(
                f"State identifiers must be contiguous: expected {len(self._states)}, got {index}"
            )
        if self.get_index(state) is not None:
            raise ValueError(f"State already registered: {state}")
        self._states.append(state)
        self._register(index, state)

    def _register(self, index: int, state: State) -> None:
        return None

    def states(self) -> List[State]:
        """
        Return the registered states in identifier order.

        :return: Registered states.
        :rtype: list[State]
        """
        return list(self._states)

    def __len__(self) -> int:
        return len(self._states)


class LinearStateIndex(StateIndex):
    """
    State index that resolves lookups with a linear scan.
    """

    index_id = "linear"

    def get_index(self, state: State) -> Optional[int]:
        for index, candidate in enumerate(self._states):
            if candidate == state:
                return index
        return None


class HashStateIndex(StateIndex):
    """
    State index that resolves lookups through a dictionary.
    """

    index_id = "hash"

    def __init__(self) -> None:
        super().__init__()
        self._ids: Dict[State, int] = {}

    def get_index(self, state: State) -> Optional[int]:
        return self._ids.get(state)

    def _register(self, index: int, state: State) -> None:
        self._ids[state] = index


def available_state_indexes() -> Dict[str, Type[StateIndex]]:
    """
    Return the registered state index backends.

    :return: Mapping of backend identifiers to backend classes.
    :rtype: dict[str, Type[StateIndex]]
    """
    return {
        HashStateIndex.index_id: HashStateIndex,
        LinearStateIndex.index_id: LinearStateIndex,
    }


def get_state_index(index_id: str) -> StateIndex:
    """
    Instantiate an empty state index backend by identifier.

    :param index_id: Backend identifier.
    :type index_id: str
    :return: Empty state index.
    :rtype: StateIndex
    :raises KeyError: If the backend identifier is unknown.
    """
    registry = available_state_indexes()
    index_class = registry.get(index_id)
    if index_class is None:
        known = ", ".join(sorted(registry))
        raise KeyError(f"Unknown state index '{index_id}'. Known state indexes: {known}")
    return index_class()
