# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Bases of vector spaces and subspace tests.

A space can be given three ways: as the span of explicit vectors, as a
parametric vector such as ``[a + b; a; b]``, or as the solution set of
linear constraints on named variables. All three reduce to ``rref`` on a
coefficient matrix.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np
import sympy
from sympy.core.relational import Relational

from .elimination import rref
from .formatting import format_matrix, format_vector
from .scalar import as_matrix
from .symbolic import DEFAULT_ENGINE, SymbolicEngine

logger = logging.getLogger(__name__)


@dataclass
class BasisResult:
    basis: List[np.ndarray]
    pivots: List[int] = field(default_factory=list)
    coefficient_matrix: Optional[np.ndarray] = None
    parameters: List[str] = field(default_factory=list)

    @property
    def dimension(self) -> int:
        return len(self.basis)

    def as_matrix(self) -> np.ndarray:
        """Basis vectors as the columns of an object matrix."""
        if not self.basis:
            return np.empty((0, 0), dtype=object)
        return np.column_stack(self.basis)

    def describe(self) -> List[str]:
        lines = []
        if self.coefficient_matrix is not None:
            lines.append(f"Coefficient matrix A: {format_matrix(self.coefficient_matrix)}")
        lines.append("Basis for the vector space:")
        lines += [f"b{k} = {format_vector(b)}" for k, b in enumerate(self.basis, 1)]
        lines.append(f"Dimension of the vector space: {self.dimension}")
        return lines


def _columns(M: np.ndarray, cols) -> List[np.ndarray]:
    return [M[:, j].copy() for j in cols]


def basis_from_span(vectors) -> BasisResult:
    """
    Linearly independent subset of ``vectors``: the pivot columns of the
    matrix whose columns are the vectors.

    Parameters
    ----------
    vectors : (m, k) array or sequence of k vectors
        Columns of a 2-D array are the vectors.
    """
    if isinstance(vectors, np.ndarray) and vectors.ndim == 2:
        A = as_matrix(vectors)
    else:
        V = [list(np.ravel(np.asarray(v, dtype=object))) for v in vectors]
        if not V:
            return BasisResult([])
        if any(len(v) != len(V[0]) for v in V):
            raise ValueError("All vectors must have the same dimension.")
        A = as_matrix([list(row) for row in zip(*V)])

    _, pivots = rref(A)
    logger.debug(f"span: pivot columns {pivots}")
    return BasisResult(_columns(A, pivots), pivots)


def basis_from_parametric(
    param_vector, engine: Optional[SymbolicEngine] = None
) -> BasisResult:
    """
    Basis of ``{v(p) : p real}`` for a vector linear in its parameters.

    Column j of the coefficient matrix holds the coefficients of the j-th
    parameter (parameters sorted by name); its pivot columns are the basis.
    """
    engine = engine or DEFAULT_ENGINE
    exprs = [sympy.sympify(x) for x in np.ravel(np.asarray(param_vector, dtype=object))]
    params = engine.free_variables(sympy.Tuple(*exprs))
    if not params:
        raise ValueError("Parametric vector has no free parameters.")

    offset = [engine.substitute(e, {p: 0 for p in params}) for e in exprs]
    if any(not engine.is_zero(c) for c in offset):
        logger.warning(f"parametric vector has a constant part {offset}; using its linear part")

    A = as_matrix([[engine.coefficient(e, p) for p in params] for e in exprs])
    _, pivots = rref(A, engine=engine)
    return BasisResult(_columns(A, pivots), pivots, A, [p.name for p in params])


def _constraint_expression(constraint):
    """``lhs - rhs`` of an equation; a bare expression is read as ``expr = 0``."""
    c = sympy.sympify(constraint)
    if c is sympy.true:
        return sympy.Integer(0)
    if c is sympy.false:
        return sympy.Integer(1)
    if isinstance(c, sympy.Equality):
        return c.lhs - c.rhs
    if isinstance(c, Relational):
        raise ValueError(f"{c} is not an equation")
    return c


def _nullspace(R: np.ndarray, pivots: List[int], n: int, zero) -> List[np.ndarray]:
    free = [j for j in range(n) if j not in pivots]
    basis = []
    # one basis vector per free column
    for j in free:
        z = np.array([zero] * n, dtype=object)
        z[j] = zero + 1
        for r, col in enumerate(pivots):
            z[col] = -R[r, j]
        basis.append(z)
    return basis


def basis_from_constraints(
    variables: Sequence, constraints: Sequence, engine: Optional[SymbolicEngine] = None
) -> BasisResult:
    """
    Basis of the solution set of homogeneous linear constraints.

    Parameters
    ----------
    variables : sequence of symbols or names
        Coordinates of the ambient space, in order.
    constraints : sequence of ``sympy.Eq``, expressions (``expr = 0``) or strings
    """
    engine = engine or DEFAULT_ENGINE
    names = [sympy.Symbol(v) if isinstance(v, str) else v for v in variables]
    n = len(names)
    if n == 0:
        raise ValueError("Need at least 1 variable.")

    exprs = [_constraint_expression(c) for c in constraints]
    if not exprs:
        identity = as_matrix(np.eye(n))
        return BasisResult(_columns(identity, range(n)), [], None, [v.name for v in names])

    origin = {v: 0 for v in names}
    for c, e in zip(constraints, exprs):
        if not engine.is_zero(engine.substitute(e, origin)):
            logger.warning(f"constraint {c} is not homogeneous; using its linear part")

    A = as_matrix([[engine.coefficient(e, v) for v in names] for e in exprs])
    R, pivots = rref(A, engine=engine)
    basis = _nullspace(R, pivots, n, A[0, 0].zero())
    logger.debug(f"constraints: pivots {pivots}, nullity {len(basis)}")
    return BasisResult(basis, pivots, A, [v.name for v in names])


def identify_basis(data, constraints: Optional[Sequence] = None, *, engine=None) -> BasisResult:
    """
    Basis of a vector space given as a span, a parametric vector, or
    variables plus constraints.

    >>> a, b = sympy.symbols("a b")
    >>> identify_basis([a + b, a, b]).dimension
    2
    """
    if constraints is not None:
        return basis_from_constraints(data, constraints, engine=engine)
    if isinstance(data, np.ndarray) and data.ndim == 2:
        return basis_from_span(data)
    if isinstance(data, sympy.MatrixBase):
        if data.cols == 1:
            return basis_from_parametric(list(data), engine=engine)
        return basis_from_span(np.array(data.tolist(), dtype=object))
    items = list(data)
    if items and all(isinstance(x, (list, tuple, np.ndarray, sympy.MatrixBase)) for x in items):
        return basis_from_span(items)
    return basis_from_parametric(items, engine=engine)


@dataclass
class SubspaceReport:
    is_subspace: bool
    contains_zero: bool
    failures: List[str] = field(default_factory=list)

    def describe(self) -> List[str]:
        lines = list(self.failures)
        lines.append(
            "The set is a subspace." if self.is_subspace else "The set is NOT a subspace."
        )
        return lines


def check_subspace(
    constraints: Sequence, variables: Optional[Sequence] = None, engine=None
) -> SubspaceReport:
    """
    Decide whether ``{x : every constraint holds}`` is a subspace.

    It is when every constraint is an equation that holds at the origin
    and is linear in ``variables`` (all free symbols by default). An
    inequality is never closed under multiplication by -1. A nonlinear
    equation passes only if it is additive and homogeneous.
    """
    engine = engine or DEFAULT_ENGINE
    parsed = [sympy.sympify(c) for c in constraints]
    if variables is None:
        names = engine.free_variables(sympy.Tuple(*parsed))
    else:
        names = [sympy.Symbol(v) if isinstance(v, str) else v for v in variables]
    origin = {v: 0 for v in names}

    failures = []
    contains_zero = True
    for c in parsed:
        if isinstance(c, Relational) and not isinstance(c, sympy.Equality):
            failures.append(f"{c} is an inequality: not closed under scalar multiplication")
            continue
        expr = _constraint_expression(c)
        if not engine.is_zero(engine.substitute(expr, origin)):
            contains_zero = False
            failures.append(f"{c} does not hold at the zero vector")
            continue
        degree = engine.degree(expr, names)
        if degree is not None and degree <= 1:
            continue
        # closure under addition and scaling, checked symbolically
        xs = [sympy.Dummy(f"x{k}") for k in range(len(names))]
        ys = [sympy.Dummy(f"y{k}") for k in range(len(names))]
        t = sympy.Dummy("t")
        f_x = expr.subs(dict(zip(names, xs)), simultaneous=True)
        f_y = expr.subs(dict(zip(names, ys)), simultaneous=True)
        f_sum = expr.subs({v: x + y for v, x, y in zip(names, xs, ys)}, simultaneous=True)
        f_scaled = expr.subs({v: t * x for v, x in zip(names, xs)}, simultaneous=True)
        if not (engine.is_zero(f_sum - f_x - f_y) and engine.is_zero(f_scaled - t * f_x)):
            failures.append(f"{c} is nonlinear: not closed under addition and scaling")

    report = SubspaceReport(not failures, contains_zero, failures)
    logger.debug(f"subspace test: {report}")
    return report
