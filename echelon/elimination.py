# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Tuple

import numpy as np

from .errors import SimplificationError
from .formatting import format_scalar, format_table
from .rowops import (
    MatrixHistory,
    add_row_multiple,
    combine_rows,
    divide_row,
    swap_rows,
)
from .scalar import Scalar, as_matrix
from .symbolic import DEFAULT_ENGINE, SymbolicEngine
from .utils import copy_matrix

logger = logging.getLogger(__name__)

# Pivot preference, highest wins. Numeric candidates score
# NUMERIC_BASE - |v|, symbolic ones SYMBOLIC_BASE - len(str(expr)).
SCORE_ONE = 1000.0
SCORE_MINUS_ONE = 900.0
NUMERIC_BASE = 800.0
SYMBOLIC_BASE = 500.0

# Tiers are compared before scores, so a large number never loses to an
# expression.
TIER_ONE = 3
TIER_MINUS_ONE = 2
TIER_NUMERIC = 1
TIER_SYMBOLIC = 0


@dataclass
class ReduceOptions:
    trace_steps: bool = False
    normalize_pivots: bool = False
    simplify_after_each_step: bool = True


class PivotCandidate(NamedTuple):
    row_index: int
    tier: int
    score: float

    @property
    def key(self) -> Tuple[int, float]:
        return self.tier, self.score


@dataclass(frozen=True)
class Step:
    step_number: int
    description: str
    matrix: np.ndarray = field(compare=False, repr=False)


@dataclass
class ReducedResult:
    matrix: np.ndarray
    steps: List[Step] = field(default_factory=list)
    pivots: List[int] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)

    @property
    def rank(self) -> int:
        return len(self.pivots)


def pivot_score(entry: Scalar) -> Tuple[int, float]:
    """
    Rank a nonzero candidate pivot as (tier, score).

    1 beats -1 beats any parameter-free value (smaller magnitude first)
    beats any expression (shorter printed form first), however large
    the value. Changing the textual length measure changes which rows get
    swapped and therefore every printed trace.
    """
    if entry.is_one():
        return TIER_ONE, SCORE_ONE
    if entry.is_minus_one():
        return TIER_MINUS_ONE, SCORE_MINUS_ONE
    if entry.is_numeric:
        return TIER_NUMERIC, NUMERIC_BASE - entry.magnitude()
    return TIER_SYMBOLIC, SYMBOLIC_BASE - entry.complexity()


def select_pivot(
    M: np.ndarray, row: int, col: int, engine: Optional[SymbolicEngine] = None
) -> Optional[PivotCandidate]:
    """Best nonzero entry of column ``col`` at or below ``row``; earliest wins ties."""
    best = None
    for i in range(row, M.shape[0]):
        entry = M[i, col]
        if entry.is_zero(engine):
            continue
        candidate = PivotCandidate(i, *pivot_score(entry))
        if best is None or candidate.key > best.key:
            best = candidate
    return best


def _simplify_entries(
    M: np.ndarray, rows, engine: SymbolicEngine, diagnostics: List[str]
) -> None:
    # A failed simplification keeps the unsimplified entry.
    for i in rows:
        for j in range(M.shape[1]):
            try:
                M[i, j] = M[i, j].simplified(engine)
            except SimplificationError as e:
                diagnostics.append(str(e))
                logger.warning(f"keeping unsimplified entry ({i + 1}, {j + 1}): {e}")


class _Reduction:
    """State of one forward-elimination pass over a private copy."""

    def __init__(self, M: np.ndarray, options: ReduceOptions, engine: SymbolicEngine):
        self.M = M
        self.options = options
        self.engine = engine
        self.step_count = 0
        self.steps: List[Step] = []
        self.pivots: List[int] = []
        self.diagnostics: List[str] = []

    def _record(self, description: str) -> None:
        self.step_count += 1
        if not self.options.trace_steps:
            return
        snapshot = copy_matrix(self.M)
        self.steps.append(Step(self.step_count, description, snapshot))
        logger.debug(f"Step {self.step_count}: {description}\n{format_table(snapshot)}")

    def _normalize(self, row: int, pivot: Scalar) -> None:
        divide_row(self.M, row, pivot)
        if self.options.simplify_after_each_step:
            _simplify_entries(self.M, [row], self.engine, self.diagnostics)
        self._record(f"R{row + 1} = (1/{format_scalar(pivot)})×R{row + 1}")

    def _eliminate(self, i: int, row: int, lead: int) -> None:
        pivot = self.M[row, lead]
        entry = self.M[i, lead]
        if pivot.is_numeric:
            factor = entry / pivot
            add_row_multiple(self.M, i, row, -factor)
            description = f"R{i + 1} = R{i + 1} - ({format_scalar(factor)})×R{row + 1}"
        else:
            # Multiply instead of dividing by an expression that may vanish.
            combine_rows(self.M, i, row, pivot, entry)
            description = (
                f"R{i + 1} = ({format_scalar(pivot)})×R{i + 1}"
                f" - ({format_scalar(entry)})×R{row + 1}"
            )
        self.M[i, lead] = entry.zero()
        if self.options.simplify_after_each_step:
            _simplify_entries(self.M, [i], self.engine, self.diagnostics)
        self._record(description)

    def run(self) -> ReducedResult:
        m, n = self.M.shape
        if self.options.trace_steps:
            logger.debug(f"Initial matrix:\n{format_table(self.M)}")

        row = 0
        for lead in range(n):
            if row == m:
                break
            candidate = select_pivot(self.M, row, lead, self.engine)
            if candidate is None:
                # all-zero column: move right, keep the row
                continue

            if candidate.row_index != row:
                swap_rows(self.M, row, candidate.row_index)
                self._record(f"Swap R{row + 1} and R{candidate.row_index + 1}")

            pivot = self.M[row, lead]
            if self.options.normalize_pivots and pivot.is_numeric and not pivot.is_one():
                self._normalize(row, pivot)

            for i in range(row + 1, m):
                if not self.M[i, lead].is_zero(self.engine):
                    self._eliminate(i, row, lead)

            self.pivots.append(lead)
            row += 1

        # the final pass runs regardless of simplify_after_each_step
        _simplify_entries(self.M, range(m), self.engine, self.diagnostics)
        if self.options.trace_steps:
            logger.debug(f"Final row echelon form:\n{format_table(self.M)}")
        return ReducedResult(self.M, self.steps, self.pivots, self.diagnostics)


def reduce(
    matrix,
    options: Optional[ReduceOptions] = None,
    *,
    engine: Optional[SymbolicEngine] = None,
    history: Optional[MatrixHistory] = None,
    **overrides,
) -> ReducedResult:
    """
    Row-echelon form of a numeric or symbolic m by n matrix.

    Parameters
    ----------
    matrix : array-like (m, n)
        Nested rows, ndarray or ``sympy.Matrix``. Never modified.
    options : ReduceOptions | None
        ``trace_steps``, ``normalize_pivots``, ``simplify_after_each_step``.
    engine : SymbolicEngine | None
        Defaults to ``DEFAULT_ENGINE``.
    history : MatrixHistory | None
        Receives the input matrix before reduction starts.
    **overrides
        Individual option fields, e.g. ``reduce(A, trace_steps=True)``.

    Returns
    -------
    ReducedResult
        ``matrix`` (same shape, echelon form), ``steps`` (empty unless
        traced), ``pivots`` (pivot column indices, 0-based) and
        ``diagnostics`` (recovered simplification failures).

    Notes
    -----
    Below a pivot that still contains a free parameter the update is
    ``Ri <- p*Ri - e*Rrow``, which rescales ``Ri`` by ``p``. Echelon form
    does not depend on row scale, and no row is ever divided by an
    expression that could be zero for some parameter value.
    """
    opts = options or ReduceOptions()
    if overrides:
        opts = dataclasses.replace(opts, **overrides)
    engine = engine or DEFAULT_ENGINE

    M = as_matrix(matrix)
    if history is not None:
        history.push(M)

    m, n = M.shape
    if m == 0 or n == 0:
        logger.info("Empty matrix provided. No operations needed.")
        return ReducedResult(M)

    return _Reduction(M, opts, engine).run()


def rref(
    matrix, engine: Optional[SymbolicEngine] = None
) -> Tuple[np.ndarray, List[int]]:
    """
    Return the reduced row-echelon form R of A and the
    pivot column list. R has the same shape as A.

    Symbolic pivots are divided out here, so the result holds for generic
    parameter values; use ``reduce`` plus ``analyze`` to find the values
    where that breaks down.
    """
    engine = engine or DEFAULT_ENGINE
    result = reduce(matrix, normalize_pivots=True, engine=engine)
    R, pivots = result.matrix, result.pivots

    # backward sweep: one pass per pivot, from bottom to top
    for r, col in reversed(list(enumerate(pivots))):
        pivot = R[r, col]
        if not pivot.is_one():
            divide_row(R, r, pivot)

        # zero out entries above the pivot
        for i in range(r):
            factor = R[i, col]
            if not factor.is_zero(engine):
                add_row_multiple(R, i, r, -factor)
                R[i, col] = factor.zero()

    _simplify_entries(R, range(R.shape[0]), engine, result.diagnostics)
    return R, pivots


def rank(matrix, engine: Optional[SymbolicEngine] = None) -> int:
    """Matrix rank is the number of pivot columns (generic rank if symbolic)"""
    return reduce(matrix, engine=engine).rank
