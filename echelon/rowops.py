# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Elementary row operations and an undo history.

The in-place helpers (``swap_rows``, ``scale_row``, ``add_row_multiple``,
``combine_rows``) take 0-based indices and are what the reducer uses.
``elementary_row_operation`` is the student-facing entry point: 1-based
row numbers, a copy returned, and the previous state pushed onto a
``MatrixHistory`` the caller owns.
"""

import logging
from typing import List, Optional

import numpy as np

from .errors import InvalidRowIndex
from .scalar import Scalar, Symbolic, as_matrix, as_scalar, promote
from .utils import copy_matrix

logger = logging.getLogger(__name__)


class MatrixHistory:
    """
    Ordered snapshots of a matrix, most recent last.

    Each mutating call pushes the state *before* it ran, so ``undo``
    hands back the matrix as it was prior to the last operation.
    """

    def __init__(self) -> None:
        self._snapshots: List[np.ndarray] = []

    def push(self, M: np.ndarray) -> None:
        self._snapshots.append(copy_matrix(M))

    def undo(self) -> np.ndarray:
        if not self._snapshots:
            raise IndexError("No operations to undo.")
        return self._snapshots.pop()

    def peek(self) -> np.ndarray:
        if not self._snapshots:
            raise IndexError("History is empty.")
        return copy_matrix(self._snapshots[-1])

    def clear(self) -> None:
        self._snapshots.clear()

    def __len__(self) -> int:
        return len(self._snapshots)


# ---------------------------------------------------------------------
# In-place primitives (0-based)
# ---------------------------------------------------------------------
def swap_rows(M: np.ndarray, i: int, j: int) -> None:
    M[[i, j]] = M[[j, i]]


def scale_row(M: np.ndarray, i: int, factor: Scalar) -> None:
    for col in range(M.shape[1]):
        M[i, col] = factor * M[i, col]


def divide_row(M: np.ndarray, i: int, divisor: Scalar) -> None:
    # entry / entry is exactly 1, which multiplying by 1/divisor is not
    for col in range(M.shape[1]):
        M[i, col] = M[i, col] / divisor


def add_row_multiple(M: np.ndarray, target: int, source: int, factor: Scalar) -> None:
    """R_target <- R_target + factor * R_source"""
    for col in range(M.shape[1]):
        M[target, col] = M[target, col] + factor * M[source, col]


def combine_rows(
    M: np.ndarray, target: int, source: int, keep: Scalar, remove: Scalar
) -> None:
    """
    R_target <- keep * R_target - remove * R_source

    Division free, so it is safe when ``keep`` is an expression that may
    vanish for some parameter value. The target row ends up scaled by
    ``keep``.
    """
    for col in range(M.shape[1]):
        M[target, col] = keep * M[target, col] - remove * M[source, col]


# ---------------------------------------------------------------------
# Student-facing operation (1-based)
# ---------------------------------------------------------------------
_OPERATIONS = ("swap", "+", "-", "*")


def elementary_row_operation(
    matrix,
    row1: int,
    row2: int,
    operation: str,
    scalar=None,
    history: Optional[MatrixHistory] = None,
) -> np.ndarray:
    """
    Apply one elementary row operation and return the new matrix.

    Parameters
    ----------
    matrix : array-like (m, n)
    row1, row2 : int
        1-based row numbers; both are validated even where ``row2`` is
        unused (``"*"``).
    operation : {"swap", "+", "-", "*"}
        ``swap``  R1 <-> R2
        ``+``     R1 <- R1 + scalar * R2
        ``-``     R1 <- R1 - scalar * R2
        ``*``     R1 <- scalar * R1
    scalar : number, SymPy expression or str
        Required by ``+``, ``-`` and ``*``.
    history : MatrixHistory | None
        Receives a snapshot of the matrix before the operation.

    Raises
    ------
    InvalidRowIndex : a row number is outside 1..m.
    ValueError      : unknown operation, or scalar missing.
    """
    M = as_matrix(matrix)
    m = M.shape[0]
    for r in (row1, row2):
        if not 1 <= r <= m:
            raise InvalidRowIndex(
                f"Invalid row index {r}. Not within matrix dimensions (1..{m})."
            )

    op = operation.lower()
    if op not in _OPERATIONS:
        raise ValueError(f'Invalid operation {operation!r}. Use "swap", "+", "-" or "*".')
    if op != "swap" and scalar is None:
        raise ValueError(f"Scalar argument is required for the {op!r} operation")

    if history is not None:
        history.push(M)

    result = copy_matrix(M)
    i, j = row1 - 1, row2 - 1
    if op == "swap":
        swap_rows(result, i, j)
    else:
        factor = as_scalar(scalar)
        if result.size and type(factor) is not type(result.flat[0]):
            if isinstance(factor, Symbolic):
                result = as_matrix([[promote(x) for x in row] for row in result])
            else:
                factor = promote(factor)
        if op == "+":
            add_row_multiple(result, i, j, factor)
        elif op == "-":
            add_row_multiple(result, i, j, -factor)
        else:
            scale_row(result, i, factor)

    logger.debug(f"{op} on rows {row1}, {row2} (scalar={scalar}) ->\n{result}")
    return result
