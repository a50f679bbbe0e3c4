# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np
import pytest
import sympy

from echelon.errors import InvalidRowIndex
from echelon.rowops import MatrixHistory, elementary_row_operation
from echelon.scalar import Symbolic
from echelon.utils import as_float_array

a = sympy.Symbol("a")
A = np.array([[1.0, 2.0], [3.0, 4.0]])


@pytest.mark.parametrize(
    "operation,scalar,expected",
    [
        ("swap", None, [[3, 4], [1, 2]]),
        ("+", 2, [[7, 10], [3, 4]]),
        ("-", 2, [[-5, -6], [3, 4]]),
        ("*", 3, [[3, 6], [3, 4]]),
        ("SWAP", None, [[3, 4], [1, 2]]),
    ],
)
def test_elementary_operations(operation, scalar, expected):
    result = elementary_row_operation(A, 1, 2, operation, scalar)
    np.testing.assert_allclose(as_float_array(result), expected)


def test_input_is_not_mutated():
    original = A.copy()
    elementary_row_operation(A, 1, 2, "*", 5)
    np.testing.assert_array_equal(A, original)


@pytest.mark.parametrize("rows", [(0, 1), (1, 3), (3, 1), (-1, 2)])
def test_invalid_row_index(rows):
    with pytest.raises(InvalidRowIndex, match="Not within matrix dimensions"):
        elementary_row_operation(A, *rows, "swap")


def test_invalid_row_index_is_an_index_error():
    with pytest.raises(IndexError):
        elementary_row_operation(A, 1, 5, "*", 2)


def test_scalar_required():
    with pytest.raises(ValueError, match="Scalar argument is required"):
        elementary_row_operation(A, 1, 2, "+")


def test_unknown_operation():
    with pytest.raises(ValueError, match="Invalid operation"):
        elementary_row_operation(A, 1, 2, "/", 2)


def test_symbolic_scalar_promotes_matrix():
    result = elementary_row_operation(A, 1, 2, "*", "a")
    assert all(isinstance(x, Symbolic) for x in result.flat)
    assert result[0, 0] == Symbolic(a)
    assert result[0, 1] == Symbolic(2 * a)
    assert result[1, 0] == Symbolic(sympy.Integer(3))


def test_numeric_scalar_on_symbolic_matrix():
    result = elementary_row_operation([[a, 1], [1, 1]], 2, 1, "-", 1)
    assert result[1, 0] == Symbolic(1 - a)
    assert result[1, 1] == Symbolic(sympy.Integer(0))


def test_history_undo_restores_previous_state():
    history = MatrixHistory()
    M = elementary_row_operation(A, 1, 2, "swap", history=history)
    M = elementary_row_operation(M, 2, 1, "-", 1, history=history)
    assert len(history) == 2

    np.testing.assert_allclose(as_float_array(history.peek()), [[3, 4], [1, 2]])
    np.testing.assert_allclose(as_float_array(history.undo()), [[3, 4], [1, 2]])
    np.testing.assert_allclose(as_float_array(history.undo()), A)
    with pytest.raises(IndexError, match="No operations to undo."):
        history.undo()


def test_history_ignores_failed_operations():
    history = MatrixHistory()
    with pytest.raises(InvalidRowIndex):
        elementary_row_operation(A, 1, 9, "swap", history=history)
    assert len(history) == 0


def test_history_clear():
    history = MatrixHistory()
    history.push(np.array([[1.0]]))
    history.clear()
    assert len(history) == 0
    with pytest.raises(IndexError):
        history.peek()
