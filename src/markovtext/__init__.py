"""
markovtext public package interface.
"""

from .constants import MAGIC_FILE_BYTES
from .errors import InsufficientInputError, MarkovTextError, ModelFormatError, ModelWriteError
from .generation import generate_text, generate_tokens
from .matrix import TransitionMatrix
from .model import MarkovModel
from .models import GenerationConfiguration, ModelSummary
from .persistence import decode_model, dump_model, encode_model, load_input, write_model
from .state import State
from .state_index import (
    HashStateIndex,
    LinearStateIndex,
    StateIndex,
    available_state_indexes,
    get_state_index,
)
from .text import format_tokens, tokenize

__all__ = [
    "__version__",
    "GenerationConfiguration",
    "HashStateIndex",
    "InsufficientInputError",
    "LinearStateIndex",
    "MAGIC_FILE_BYTES",
    "MarkovModel",
    "MarkovTextError",
    "ModelFormatError",
    "ModelWriteError",
    "ModelSummary",
    "State",
    "StateIndex",
    "TransitionMatrix",
    "available_state_indexes",
    "decode_model",
    "dump_model",
    "encode_model",
    "format_tokens",
    "generate_text",
    "generate_tokens",
    "get_state_index",
    "load_input",
    "tokenize",
    "write_model",
]

__version__ = "0.1.0"
