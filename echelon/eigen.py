# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np
import sympy

from .formatting import format_scalar, format_vector
from .scalar import Symbolic, as_matrix
from .symbolic import DEFAULT_ENGINE, SymbolicEngine
from .utils import as_sympy_matrix

logger = logging.getLogger(__name__)


@dataclass
class EigenResult:
    vectors: np.ndarray
    values: List[sympy.Expr] = field(default_factory=list)
    is_generalized: List[bool] = field(default_factory=list)
    verified: bool = True

    def algebraic_multiplicities(self) -> Dict[sympy.Expr, int]:
        return dict(Counter(self.values))

    def geometric_multiplicities(self) -> Dict[sympy.Expr, int]:
        counts = {value: 0 for value in self.values}
        for value, generalized in zip(self.values, self.is_generalized):
            if not generalized:
                counts[value] += 1
        return counts

    def describe(self) -> List[str]:
        lines = []
        geometric = self.geometric_multiplicities()
        for value, am in self.algebraic_multiplicities().items():
            lines.append(
                f"λ = {format_scalar(Symbolic(value))}: algebraic multiplicity {am}, "
                f"geometric multiplicity {geometric[value]}"
            )
        for k, (value, generalized) in enumerate(zip(self.values, self.is_generalized)):
            tag = ", generalized" if generalized else ""
            lines.append(
                f"v{k + 1} = {format_vector(self.vectors[:, k])} "
                f"(λ = {format_scalar(Symbolic(value))}{tag})"
            )
        lines.append(
            "Verification: A·V = V·J holds."
            if self.verified
            else "Verification failed: A·V != V·J."
        )
        return lines


def eigen_decomposition(matrix, engine: Optional[SymbolicEngine] = None) -> EigenResult:
    """
    Eigenvalues with a full basis of eigenvectors and generalized
    eigenvectors, computed exactly through the Jordan form A V = V J.

    Column k of ``vectors`` is generalized when J has a 1 directly above
    its diagonal entry, i.e. (A - λI) v_k = v_{k-1}.

    Raises
    ------
    ValueError : A is not square, depends on a parameter, or SymPy cannot
        find its eigenvalues.
    """
    engine = engine or DEFAULT_ENGINE
    M = as_matrix(matrix)
    m, n = M.shape
    if m != n:
        raise ValueError("Input must be a square matrix.")
    if not all(x.is_numeric for x in M.flat):
        raise ValueError("Input matrix must be numeric.")
    if n == 0:
        return EigenResult(np.empty((0, 0), dtype=object))

    A = as_sympy_matrix(M)
    try:
        P, J = A.jordan_form()
    except Exception as e:
        raise ValueError(f"Could not compute the eigen-decomposition: {e}") from e

    values = [J[k, k] for k in range(n)]
    generalized = [k > 0 and J[k - 1, k] != 0 for k in range(n)]
    verified = all(engine.is_zero(x) for x in A * P - P * J)
    if not verified:
        logger.warning("A·V = V·J does not simplify to zero")
    logger.debug(f"eigenvalues {values}, generalized {generalized}")
    return EigenResult(as_matrix(P), values, generalized, verified)
