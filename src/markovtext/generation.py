"""
Random-walk text generation for markovtext.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from .model import MarkovModel
from .state import State
from .text import format_tokens, tokenize


def generate_tokens(
    model: MarkovModel,
    output_size: int,
    *,
    initial_tokens: Optional[Sequence[str]] = None,
) -> List[str]:
    """
    Walk the model and collect the tokens of every visited state.

    The walk starts from the trailing state of ``initial_tokens`` when given, or from a
    random state otherwise. It then predicts ``output_size // state_size`` states.

    :param model: Model to walk.
    :type model: MarkovModel
    :param output_size: Approximate number of tokens to generate.
    :type output_size: int
    :param initial_tokens: Optional phrase that seeds the walk and starts the output.
    :type initial_tokens: Sequence[str] or None
    :return: Generated tokens.
    :rtype: list[str]
    """
    if output_size < 0:
        raise ValueError(f"Output size must be non-negative (got {output_size})")

    output: List[str] = []
    if initial_tokens:
        current = State.from_tokens(initial_tokens, model.state_size)
        output.extend(initial_tokens)
    else:
        current = model.random_state()
        output.extend(current)

    for _ in range(output_size // model.state_size):
        current = model.predict(current)
        output.extend(current)
    return output


def generate_text(
    model: MarkovModel,
    output_size: int,
    *,
    initial_phrase: Optional[str] = None,
) -> str:
    """
    Generate formatted prose from a model.

    :param model: Model to walk.
    :type model: MarkovModel
    :param output_size: Approximate number of tokens to generate.
    :type output_size: int
    :param initial_phrase: Optional phrase that seeds the walk.
    :type initial_phrase: str or None
    :return: Generated prose.
    :rtype: str
    """
    initial_tokens = tokenize(initial_phrase) if initial_phrase else None
    tokens = generate_tokens(model, output_size, initial_tokens=initial_tokens)
    return format_tokens(tokens)
