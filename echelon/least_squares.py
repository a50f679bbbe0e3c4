#!/usr/bin/python3
# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Least squares through the normal equations
"""

import logging
from dataclasses import dataclass
from typing import List

import numpy as np

from .elimination import rref
from .formatting import format_exact, format_matrix, format_vector

logger = logging.getLogger(__name__)


@dataclass
class LeastSquaresResult:
    rref_augmented: np.ndarray
    is_unique: bool
    solution: np.ndarray
    projection: np.ndarray
    residual: np.ndarray
    residual_norm: float
    orthogonality_check: np.ndarray

    def describe(self) -> List[str]:
        lines = [
            "RREF of augmented matrix [A'A | A'b]:",
            format_matrix(self.rref_augmented),
        ]
        if self.is_unique:
            lines.append("The solution is UNIQUE (A has full column rank).")
        else:
            lines += [
                "The solution is NOT UNIQUE (A does not have full column rank).",
                "Free variables correspond to columns without pivots; "
                "the particular solution sets them to 0.",
            ]
        lines += [
            f"x = {format_vector(self.solution)}",
            f"Projection of b onto column space of A: {format_vector(self.projection)}",
            f"Residual vector (b - projection): {format_vector(self.residual)}",
            f"Residual norm ||b - Ax|| = {format_exact(self.residual_norm)}",
            f"A'(b - Ax) = {format_vector(self.orthogonality_check)} (should be 0)",
        ]
        return lines


def least_squares(A: np.ndarray, b: np.ndarray) -> LeastSquaresResult:
    """
    Solve min ||Ax - b|| via the RREF of [A'A | A'b].

    Returns
    -------
    LeastSquaresResult
        The RREF, whether the solution is unique (A has full column rank),
        a particular solution with free variables set to 0, the projection
        p = Ax of b onto the column space, the residual b - p, its norm and
        A'(b - p), which is 0 up to rounding.
    """
    A = np.asarray(A, dtype=float)
    b = np.asarray(b, dtype=float)
    if A.ndim != 2:
        raise ValueError("A must be a 2-D matrix")
    m, n = A.shape

    # If we are 1D, make this a column matrix
    if b.ndim == 1:
        b = b[:, None]
    if b.shape != (m, 1):
        raise ValueError("Vector b must have dimensions m×1 where A is m×n")

    aT = np.transpose(A)
    R, pivots = rref(np.hstack([aT @ A, aT @ b]))
    coefficient_pivots = [p for p in pivots if p < n]
    is_unique = len(coefficient_pivots) == n

    x = np.zeros(n)
    for r, col in enumerate(coefficient_pivots):
        x[col] = float(R[r, n])

    p = A @ x
    residual = b.ravel() - p
    logger.debug(f"least squares: pivots={pivots}, x={x}")
    return LeastSquaresResult(
        rref_augmented=R,
        is_unique=is_unique,
        solution=x,
        projection=p,
        residual=residual,
        residual_norm=float(np.linalg.norm(residual)),
        orthogonality_check=aT @ residual,
    )
