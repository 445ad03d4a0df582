"""
Error types for markovtext.
"""

from __future__ import annotations


class MarkovTextError(RuntimeError):
    """
    Base class for fatal markovtext errors.
    """


class InsufficientInputError(MarkovTextError):
    """
    Training input is shorter than the chain order.

    :param token_count: Number of tokens supplied for training.
    :type token_count: int
    :param chain_order: Chain order requested for the model.
    :type chain_order: int
    """

    def __init__(self, *, token_count: int, chain_order: int) -> None:
        self.token_count = token_count
        self.chain_order = chain_order
        message = (
            "Training input is too short"
            f": token_count={token_count} chain_order={chain_order}"
        )
        super().__init__(message)


class ModelFormatError(MarkovTextError):
    """
    Persisted model payload is structurally invalid.

    Raised for truncated payloads, trailing bytes, out-of-range identifiers and any other
    condition that prevents a faithful reconstruction of the saved model.
    """


class ModelWriteError(MarkovTextError):
    """
    Model file could not be written to its destination.
    """
