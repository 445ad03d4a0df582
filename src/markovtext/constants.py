"""
Shared constants for markovtext.
"""

MAGIC_FILE_BYTES = b"\x03\x04\x05"
U16_MAX = 0xFFFF
U32_MAX = 0xFFFFFFFF
CONFIGURATION_SCHEMA_VERSION = 1
DEFAULT_OUTPUT_SIZE = 200
DEFAULT_STATE_SIZE = 2
DEFAULT_STATE_INDEX = "hash"
DEFAULT_MODEL_PATH = "markov.bin"
SENTENCE_TERMINALS = frozenset({".", ";", "!", "?"})
