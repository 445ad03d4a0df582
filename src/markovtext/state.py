"""
Chain states for markovtext.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple


@dataclass(frozen=True)
class State:
    """
    Ordered run of tokens treated as one node of the transition graph.

    :ivar tokens: Tokens in the state, oldest first.
    :vartype tokens: tuple[str, ...]
    """

    tokens: Tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "tokens", tuple(self.tokens))

    @classmethod
    def from_tokens(cls, tokens: Sequence[str], state_size: int) -> "State":
        """
        Build a state from the trailing tokens of a sequence.

        Fewer than ``state_size`` tokens yields a shorter state holding all of them.

        :param tokens: Token sequence.
        :type tokens: Sequence[str]
        :param state_size: Number of trailing tokens to keep.
        :type state_size: int
        :return: State built from the trailing tokens.
        :rtype: State
        """
        start = max(len(tokens) - state_size, 0)
        return cls(tuple(tokens[start:]))

    def __iter__(self) -> Iterator[str]:
        return iter(self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)

    def __str__(self) -> str:
        return " ".join(self.tokens)
