"""
Sparse transition count matrix for markovtext.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Mapping, Tuple

import numpy as np

from .constants import U16_MAX


class TransitionMatrix:
    """
    Square sparse matrix of unsigned 16-bit transition counts.

    Rows are stored as dictionaries of column to count. Zero counts are never stored, and
    counts saturate at ``U16_MAX``.

    :param size: Number of rows and columns.
    :type size: int
    """

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError(f"Matrix size must be non-negative (got {size})")
        self._size = size
        self._rows: Dict[int, Dict[int, int]] = {}

    @property
    def shape(self) -> Tuple[int, int]:
        return (self._size, self._size)

    def _check_bounds(self, row: int, column: int) -> None:
        if not (0 <= row < self._size and 0 <= column < self._size):
            raise IndexError(f"Matrix entry ({row}, {column}) outside shape {self.shape}")

    def increment(self, row: int, column: int) -> int:
        """
        Add one observation to an entry, inserting it with a count of one when absent.

        :param row: Row identifier.
        :type row: int
        :param column: Column identifier.
        :type column: int
        :return: Updated count.
        :rtype: int
        """
        self._check_bounds(row, column)
        entries = self._rows.setdefault(row, {})
        count = min(entries.get(column, 0) + 1, U16_MAX)
        entries[column] = count
        return count

    def set(self, row: int, column: int, count: int) -> None:
        """
        Store an explicit count for an entry.

        :param row: Row identifier.
        :type row: int
        :param column: Column identifier.
        :type column: int
        :param count: Count between 1 and ``U16_MAX``.
        :type count: int
        :raises ValueError: If the count is outside the unsigned 16-bit range or zero.
        """
        self._check_bounds(row, column)
        if not 1 <= count <= U16_MAX:
            raise ValueError(f"Matrix counts must be between 1 and {U16_MAX} (got {count})")
        self._rows.setdefault(row, {})[column] = count

    def get(self, row: int, column: int) -> int:
        return self._rows.get(row, {}).get(column, 0)

    def row(self, row: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Return the stored entries of a row.

        :param row: Row identifier.
        :type row: int
        :return: Column identifiers and their unsigned 16-bit counts, in ascending column order.
        :rtype: tuple[numpy.ndarray, numpy.ndarray]
        """
        entries = self._rows.get(row, {})
        columns = sorted(entries)
        return (
            np.asarray(columns, dtype=np.int64),
            np.asarray([entries[column] for column in columns], dtype=np.uint16),
        )

    def row_entries(self, row: int) -> List[Tuple[int, int]]:
        entries = self._rows.get(row, {})
        return [(column, entries[column]) for column in sorted(entries)]

    def populated_rows(self) -> List[int]:
        return sorted(row for row, entries in self._rows.items() if entries)

    def iter_entries(self) -> Iterator[Tuple[int, int, int]]:
        """
        Iterate over stored entries in row-major order.

        :return: Iterator of ``(row, column, count)`` triples.
        :rtype: Iterator[tuple[int, int, int]]
        """
        for row in self.populated_rows():
            for column, count in self.row_entries(row):
                yield row, column, count

    @property
    def nnz(self) -> int:
        return sum(len(entries) for entries in self._rows.values())

    def total(self) -> int:
        return sum(sum(entries.values()) for entries in self._rows.values())

    def to_rows(self) -> Dict[int, Dict[int, int]]:
        return {row: dict(self._rows[row]) for row in self.populated_rows()}

    @classmethod
    def from_rows(cls, size: int, rows: Mapping[int, Mapping[int, int]]) -> "TransitionMatrix":
        """
        Build a matrix from explicit row mappings.

        :param size: Number of rows and columns.
        :type size: int
        :param rows: Mapping of row identifiers to column count mappings.
        :type rows: Mapping[int, Mapping[int, int]]
        :return: Matrix holding the given entries.
        :rtype: TransitionMatrix
        """
        matrix = cls(size)
        for row, entries in rows.items():
            for column, count in entries.items():
                matrix.set(row, column, count)
        return matrix

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TransitionMatrix):
            return NotImplemented
        return self.shape == other.shape and self.to_rows() == other.to_rows()

    def __repr__(self) -> str:
        return f"TransitionMatrix(shape={self.shape}, nnz={self.nnz})"
