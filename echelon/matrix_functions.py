# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from typing import Optional

import numpy as np

from .elimination import rref
from .scalar import Numeric, as_matrix
from .symbolic import SymbolicEngine
from .utils import as_float_array

logger = logging.getLogger(__name__)


def inverse(matrix, engine: Optional[SymbolicEngine] = None) -> np.ndarray:
    """
    Inverse of a square matrix by Gauss-Jordan elimination on [A | I].

    Works for numeric and symbolic matrices; a symbolic inverse is valid
    wherever its denominators do not vanish.

    Raises
    ------
    ValueError : A is not square, or is singular.
    """
    A = as_matrix(matrix)
    m, n = A.shape
    if m != n:
        raise ValueError("No inverse found. Matrix must be square.")

    if n and isinstance(A[0, 0], Numeric):
        cond = np.linalg.cond(as_float_array(A))
        if not np.isfinite(cond) or 1.0 / cond < np.finfo(float).eps:
            raise ValueError("No inverse found. Matrix is singular.")

    I = np.empty((n, n), dtype=object)
    for i in range(n):
        for j in range(n):
            zero = A[i, j].zero()
            I[i, j] = zero + 1 if i == j else zero

    R, pivots = rref(np.concatenate([A, I], axis=1), engine=engine)
    if len([p for p in pivots if p < n]) < n:
        raise ValueError("No inverse found. Matrix is singular.")

    inv = R[:, n:]
    logger.debug(f"inverse:\n{inv}")
    return inv
