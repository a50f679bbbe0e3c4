# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np
import sympy

# Entries with |v| below this are treated as zero during elimination.
ZERO_TOL: float = 1e-10

# Matching tolerance of the exact-value formatter.
FORMAT_TOL: float = 1e-9

# Largest denominator the formatter prints as a plain fraction.
MAX_DENOMINATOR: int = 1000

COMMON_SURDS = (2, 3, 5, 6, 7, 8, 10, 11, 12, 13, 14, 15)


def copy_matrix(M: np.ndarray) -> np.ndarray:
    """Shallow copy of an object matrix; Scalars are immutable."""
    return np.array(M, dtype=object, copy=True)


def as_sympy_matrix(M: np.ndarray) -> sympy.Matrix:
    """Convert a matrix of Scalars into a ``sympy.Matrix``."""
    m, n = M.shape
    return sympy.Matrix(m, n, lambda i, j: M[i, j].to_sympy())


def as_float_array(M: np.ndarray) -> np.ndarray:
    """
    Convert a matrix of Scalars into a float64 ndarray.

    Raises TypeError if an entry still depends on a free parameter.
    """
    m, n = M.shape
    out = np.zeros((m, n), dtype=float)
    for i in range(m):
        for j in range(n):
            out[i, j] = float(M[i, j])
    return out


def random_integer_matrix(m, n, low=-9, high=10, seed=None) -> np.ndarray:
    """
    Build an m by n matrix of small random integers, handy for classroom
    sized examples where the exact formatter has something to recover.

    Returns
    -------
    Matrix with float64 dtype
    """
    rng = np.random.default_rng(seed)
    return rng.integers(low, high, size=(m, n)).astype(float)
