"""
Binary persistence of Markov models for markovtext.

A saved model is the magic prefix followed by a little-endian payload::

    u32 chain order
    u32 state count, then for every state: chain order x (u32 byte length, UTF-8 bytes)
    u32 rows, u32 columns
    u32 populated row count, then for every populated row:
        u32 row, u32 entry count, entries of (u32 column, u16 count)
"""

from __future__ import annotations

import struct
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .constants import DEFAULT_STATE_INDEX, MAGIC_FILE_BYTES, U32_MAX
from .errors import ModelFormatError, ModelWriteError
from .matrix import TransitionMatrix
from .model import MarkovModel, RandomSource
from .state import State
from .state_index import get_state_index
from .text import tokenize

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_ENTRY = struct.Struct("<IH")


def _pack_u32(value: int, *, label: str) -> bytes:
    if not 0 <= value <= U32_MAX:
        raise ValueError(f"{label} does not fit in 32 bits: {value}")
    return _U32.pack(value)


def encode_model(model: MarkovModel) -> bytes:
    """
    Serialize a model payload without the magic prefix.

    :param model: Model to serialize.
    :type model: MarkovModel
    :return: Payload bytes.
    :rtype: bytes
    """
    parts: List[bytes] = [_pack_u32(model.state_size, label="Chain order")]

    states = model.states.states()
    parts.append(_pack_u32(len(states), label="State count"))
    for state in states:
        for token in state:
            encoded = token.encode("utf-8")
            parts.append(_pack_u32(len(encoded), label="Token length"))
            parts.append(encoded)

    rows, columns = model.matrix.shape
    parts.append(_pack_u32(rows, label="Matrix rows"))
    parts.append(_pack_u32(columns, label="Matrix columns"))
    populated = model.matrix.populated_rows()
    parts.append(_pack_u32(len(populated), label="Populated row count"))
    for row in populated:
        entries = model.matrix.row_entries(row)
        parts.append(_U32.pack(row))
        parts.append(_U32.pack(len(entries)))
        for column, count in entries:
            parts.append(_ENTRY.pack(column, count))
    return b"".join(parts)


def dump_model(model: MarkovModel) -> bytes:
    """
    Serialize a model with the magic prefix, ready to be written to disk.

    :param model: Model to serialize.
    :type model: MarkovModel
    :return: File bytes.
    :rtype: bytes
    """
    return MAGIC_FILE_BYTES + encode_model(model)


def write_model(model: MarkovModel, path: Path) -> Path:
    """
    Write a model file.

    :param model: Model to write.
    :type model: MarkovModel
    :param path: Destination path.
    :type path: Path
    :return: Written path.
    :rtype: Path
    :raises ModelWriteError: If the file cannot be written.
    """
    path = Path(path)
    payload = dump_model(model)
    try:
        path.write_bytes(payload)
    except OSError as exc:
        reason = exc.strerror or exc.__class__.__name__
        raise ModelWriteError(f"Cannot write model file {path}: {reason}") from exc
    return path


class _PayloadReader:
    def __init__(self, payload: bytes) -> None:
        self._payload = payload
        self._offset = 0

    def _take(self, size: int, *, label: str) -> bytes:
        end = self._offset + size
        if end > len(self._payload):
            raise ModelFormatError(
                f"Model payload truncated while reading {label} at offset {self._offset}"
            )
        chunk = self._payload[self._offset : end]
        self._offset = end
        return chunk

    def u32(self, *, label: str) -> int:
        return _U32.unpack(self._take(_U32.size, label=label))[0]

    def u16(self, *, label: str) -> int:
        return _U16.unpack(self._take(_U16.size, label=label))[0]

    def text(self, *, label: str) -> str:
        length = self.u32(label=f"{label} length")
        raw = self._take(length, label=label)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ModelFormatError(f"Model payload holds invalid UTF-8 in {label}") from exc

    def finish(self) -> None:
        remaining = len(self._payload) - self._offset
        if remaining:
            raise ModelFormatError(f"Model payload has {remaining} trailing bytes")


def decode_model(
    payload: bytes,
    *,
    state_index: str = DEFAULT_STATE_INDEX,
    random_source: RandomSource = None,
) -> MarkovModel:
    """
    Deserialize a model payload without the magic prefix.

    :param payload: Payload bytes.
    :type payload: bytes
    :param state_index: State index backend identifier for the loaded model.
    :type state_index: str
    :param random_source: Seed or generator used for sampling.
    :type random_source: int or numpy.random.Generator or None
    :return: Loaded model.
    :rtype: MarkovModel
    :raises ModelFormatError: If the payload is structurally invalid.
    """
    reader = _PayloadReader(payload)
    state_size = reader.u32(label="chain order")
    if state_size < 1:
        raise ModelFormatError("Model payload declares a chain order of zero")

    state_count = reader.u32(label="state count")
    if state_count < 1:
        raise ModelFormatError("Model payload holds no states")
    index = get_state_index(state_index)
    for state_id in range(state_count):
        tokens = tuple(
            reader.text(label=f"state {state_id} token {position}")
            for position in range(state_size)
        )
        state = State(tokens)
        if index.get_index(state) is not None:
            raise ModelFormatError(f"Model payload repeats state {state_id}: {state}")
        index.insert(state_id, state)

    rows = reader.u32(label="matrix rows")
    columns = reader.u32(label="matrix columns")
    if rows != columns:
        raise ModelFormatError(f"Model matrix is not square: {rows}x{columns}")
    if rows < state_count:
        raise ModelFormatError(
            f"Model matrix has {rows} rows but the payload holds {state_count} states"
        )

    populated = reader.u32(label="populated row count")
    entries: Dict[int, Dict[int, int]] = {}
    previous_row: Optional[int] = None
    for _ in range(populated):
        row = reader.u32(label="row id")
        if row >= state_count or (previous_row is not None and row <= previous_row):
            raise ModelFormatError(f"Model matrix row {row} is out of range or out of order")
        entry_count = reader.u32(label=f"row {row} entry count")
        if entry_count < 1:
            raise ModelFormatError(f"Model matrix row {row} is declared but empty")
        row_entries: Dict[int, int] = {}
        for _ in range(entry_count):
            column, count = _read_entry(reader, row=row)
            if column >= state_count or column in row_entries:
                raise ModelFormatError(
                    f"Model matrix entry ({row}, {column}) is out of range or repeated"
                )
            if count < 1:
                raise ModelFormatError(f"Model matrix entry ({row}, {column}) has a zero count")
            row_entries[column] = count
        entries[row] = row_entries
        previous_row = row
    reader.finish()

    return MarkovModel(
        states=index,
        matrix=TransitionMatrix.from_rows(rows, entries),
        state_size=state_size,
        random_source=random_source,
    )


def _read_entry(reader: _PayloadReader, *, row: int) -> Tuple[int, int]:
    column = reader.u32(label=f"row {row} column")
    count = reader.u16(label=f"row {row} count")
    return column, count


def is_model_bytes(data: bytes) -> bool:
    return data[: len(MAGIC_FILE_BYTES)] == MAGIC_FILE_BYTES


def load_input(
    data: bytes,
    *,
    state_size: int,
    state_index: str = DEFAULT_STATE_INDEX,
    random_source: RandomSource = None,
) -> MarkovModel:
    """
    Load a saved model or train a new one, depending on the input bytes.

    Input that starts with the magic prefix is decoded as a saved model and ``state_size``
    is ignored. Anything else is read as UTF-8 training text.

    :param data: Raw input bytes.
    :type data: bytes
    :param state_size: Chain order used when training.
    :type state_size: int
    :param state_index: State index backend identifier.
    :type state_index: str
    :param random_source: Seed or generator used for sampling.
    :type random_source: int or numpy.random.Generator or None
    :return: Loaded or trained model.
    :rtype: MarkovModel
    :raises ModelFormatError: If a saved model payload is invalid.
    :raises InsufficientInputError: If training text is shorter than the chain order.
    :raises ValueError: If training text is not valid UTF-8.
    """
    if is_model_bytes(data):
        return decode_model(
            data[len(MAGIC_FILE_BYTES) :],
            state_index=state_index,
            random_source=random_source,
        )
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ValueError(f"Training input is not valid UTF-8: {exc}") from exc
    return MarkovModel.from_tokens(
        tokenize(text),
        state_size,
        state_index=state_index,
        random_source=random_source,
    )
