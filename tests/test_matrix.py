"""
Transition matrix tests for markovtext.
"""

from __future__ import annotations

import numpy as np
import pytest

from markovtext.constants import U16_MAX
from markovtext.matrix import TransitionMatrix


def test_increment_inserts_then_counts():
    matrix = TransitionMatrix(3)
    assert matrix.increment(1, 0) == 1
    assert matrix.increment(1, 0) == 2
    matrix.increment(1, 2)
    assert matrix.get(1, 0) == 2
    assert matrix.get(0, 1) == 0
    assert matrix.nnz == 2
    assert matrix.total() == 3
    assert matrix.row_entries(1) == [(0, 2), (2, 1)]
    assert matrix.populated_rows() == [1]


def test_row_view_uses_unsigned_16_bit_counts():
    matrix = TransitionMatrix(4)
    matrix.increment(2, 3)
    matrix.increment(2, 1)
    columns, weights = matrix.row(2)
    assert columns.tolist() == [1, 3]
    assert weights.dtype == np.uint16
    assert weights.tolist() == [1, 1]
    empty_columns, empty_weights = matrix.row(0)
    assert empty_columns.size == 0
    assert empty_weights.size == 0


def test_counts_saturate_at_sixteen_bits():
    """
    Repeated observations stop at the unsigned 16-bit ceiling instead of wrapping.
    """
    matrix = TransitionMatrix(1)
    matrix.set(0, 0, U16_MAX - 1)
    assert matrix.increment(0, 0) == U16_MAX
    assert matrix.increment(0, 0) == U16_MAX


def test_zero_and_oversized_counts_are_rejected():
    matrix = TransitionMatrix(2)
    with pytest.raises(ValueError):
        matrix.set(0, 0, 0)
    with pytest.raises(ValueError):
        matrix.set(0, 0, U16_MAX + 1)
    with pytest.raises(IndexError):
        matrix.increment(2, 0)


def test_from_rows_round_trips_equality():
    matrix = TransitionMatrix(3)
    matrix.increment(0, 1)
    matrix.increment(2, 2)
    rebuilt = TransitionMatrix.from_rows(3, matrix.to_rows())
    assert rebuilt == matrix
    assert list(rebuilt.iter_entries()) == [(0, 1, 1), (2, 2, 1)]
    assert TransitionMatrix.from_rows(4, matrix.to_rows()) != matrix
