# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Critical values of a parametric system in row-echelon form.

For each diagonal entry the analyzer asks for which parameter values the
entry vanishes (the rank drops there), and separately checks whether the
last row reads ``0 = c`` with ``c != 0``. Positions are 1-based, matching
the ``R1 .. Rm`` labels of a step trace.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, NamedTuple, Optional

import numpy as np
import sympy

from .errors import NotInEchelonForm, SimplificationError
from .formatting import format_scalar
from .scalar import Scalar, Symbolic, as_matrix
from .symbolic import DEFAULT_ENGINE, SymbolicEngine

logger = logging.getLogger(__name__)


class CaseKind(enum.Enum):
    DEPENDENT = "dependent"
    ALWAYS_DEPENDENT = "always_dependent"
    INCONSISTENT = "inconsistent"


class Summary(enum.Enum):
    HAS_NO_SOLUTION = "has_no_solution"
    ALWAYS_INFINITE_SOLUTIONS = "always_infinite_solutions"
    INFINITE_FOR_SPECIFIC_PARAMETER_VALUES = "infinite_for_specific_parameter_values"
    UNIQUE_SOLUTION_FOR_ALL_PARAMETER_VALUES = "unique_solution_for_all_parameter_values"


class ParameterValue(NamedTuple):
    parameter: str
    value: Scalar


@dataclass(frozen=True)
class CriticalCase:
    kind: CaseKind
    position: int
    parameter_values: FrozenSet[ParameterValue]
    source_expression: Scalar


@dataclass
class AnalysisResult:
    cases: List[CriticalCase] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)

    def _has(self, kind: CaseKind) -> bool:
        return any(c.kind is kind for c in self.cases)

    @property
    def has_no_solution(self) -> bool:
        return self._has(CaseKind.INCONSISTENT)

    @property
    def always_infinite_solutions(self) -> bool:
        return self._has(CaseKind.ALWAYS_DEPENDENT)

    @property
    def infinite_for_specific_parameter_values(self) -> bool:
        return self._has(CaseKind.DEPENDENT)

    @property
    def unique_solution(self) -> bool:
        return not self.cases

    @property
    def summary(self) -> Summary:
        if self.has_no_solution:
            return Summary.HAS_NO_SOLUTION
        if self.always_infinite_solutions:
            return Summary.ALWAYS_INFINITE_SOLUTIONS
        if self.infinite_for_specific_parameter_values:
            return Summary.INFINITE_FOR_SPECIFIC_PARAMETER_VALUES
        return Summary.UNIQUE_SOLUTION_FOR_ALL_PARAMETER_VALUES

    def critical_values(self) -> Dict[str, List[sympy.Expr]]:
        """Roots per parameter, deduplicated, in order of discovery."""
        found: Dict[str, List[sympy.Expr]] = {}
        for case in self.cases:
            if case.kind is not CaseKind.DEPENDENT:
                continue
            for pv in sorted(case.parameter_values, key=lambda pv: pv.parameter):
                values = found.setdefault(pv.parameter, [])
                expr = pv.value.to_sympy()
                if expr not in values:
                    values.append(expr)
        return found

    def describe(self) -> List[str]:
        """Report lines, headline first."""
        headlines = {
            Summary.HAS_NO_SOLUTION: "The system is inconsistent: no solution.",
            Summary.ALWAYS_INFINITE_SOLUTIONS: (
                "The matrix is rank deficient for every parameter value: "
                "infinitely many solutions or none."
            ),
            Summary.INFINITE_FOR_SPECIFIC_PARAMETER_VALUES: (
                "The rank drops at the critical values below."
            ),
            Summary.UNIQUE_SOLUTION_FOR_ALL_PARAMETER_VALUES: (
                "Unique solution for all parameter values."
            ),
        }
        lines = [headlines[self.summary]]

        for case in self.cases:
            if case.kind is CaseKind.INCONSISTENT:
                lines.append(
                    f"Row {case.position} reads 0 = {format_scalar(case.source_expression)}."
                )
            elif case.kind is CaseKind.ALWAYS_DEPENDENT:
                lines.append(f"Diagonal entry {case.position} is 0.")

        critical = self.critical_values()
        if critical:
            lines += ["", "Critical Values:", "==============="]
            names = set(critical)
            relationships: List[str] = []
            for name, values in critical.items():
                for value in values:
                    text = format_scalar(Symbolic(value))
                    if text in names:
                        # a = b and b = a are the same relationship
                        if f"{text} = {name}" not in relationships:
                            if f"{name} = {text}" not in relationships:
                                relationships.append(f"{name} = {text}")
                    else:
                        lines.append(f"{name} = {text}")
            lines += relationships
            lines += [
                "",
                "At a critical value the system has either no solution "
                "(inconsistent) or infinitely many (dependent).",
            ]

        for note in self.diagnostics:
            lines.append(f"warning: {note}")
        return lines


def _first_nonzero(row, engine: SymbolicEngine) -> Optional[int]:
    for j, entry in enumerate(row):
        if not entry.is_zero(engine):
            return j
    return None


def check_echelon_form(M: np.ndarray, engine: Optional[SymbolicEngine] = None) -> None:
    """
    Structural row-echelon check.

    Raises NotInEchelonForm if a pivot is not strictly right of the one
    above it, an entry below a pivot is nonzero, or a nonzero row follows
    a zero row.
    """
    engine = engine or DEFAULT_ENGINE
    m = M.shape[0]
    last_pivot_col = -1
    seen_zero_row = False
    for i in range(m):
        pivot_col = _first_nonzero(M[i], engine)
        if pivot_col is None:
            seen_zero_row = True
            continue
        if seen_zero_row:
            raise NotInEchelonForm(f"row {i + 1} is nonzero but follows a zero row")
        if pivot_col <= last_pivot_col:
            raise NotInEchelonForm(
                f"pivot of row {i + 1} (column {pivot_col + 1}) is not right of "
                f"the previous pivot (column {last_pivot_col + 1})"
            )
        for k in range(i + 1, m):
            if not M[k, pivot_col].is_zero(engine):
                raise NotInEchelonForm(
                    f"entry ({k + 1}, {pivot_col + 1}) below a pivot is nonzero"
                )
        last_pivot_col = pivot_col


class _Analysis:
    def __init__(self, M: np.ndarray, engine: SymbolicEngine):
        self.M = M
        self.engine = engine
        self.result = AnalysisResult()

    def _warn(self, message: str) -> None:
        self.result.diagnostics.append(message)
        logger.warning(message)

    def _verified(self, expr, var, root) -> bool:
        try:
            back = self.engine.substitute(expr, {var: root})
            return self.engine.is_always_true(sympy.Eq(back, 0))
        except SimplificationError as e:
            self._warn(f"could not verify {var} = {root}: {e}")
            return False

    def _diagonal_entry(self, position: int, entry: Scalar) -> None:
        # covers expressions that are identically zero, not just the number 0
        if entry.is_zero(self.engine):
            self.result.cases.append(
                CriticalCase(CaseKind.ALWAYS_DEPENDENT, position, frozenset(), entry)
            )
            return
        if entry.is_numeric:
            return

        expr = entry.to_sympy()
        for var in self.engine.free_variables(expr):
            outcome = self.engine.solve(expr, var)
            if outcome.unsolvable:
                self._warn(
                    f"diagonal entry {position}: cannot solve {expr} = 0 "
                    f"for {var}: {outcome.reason}"
                )
                continue
            for root in outcome.solutions:
                if root.has(sympy.zoo, sympy.oo, -sympy.oo, sympy.nan):
                    continue
                if not self._verified(expr, var, root):
                    self._warn(f"diagonal entry {position}: dropped unverified root {var} = {root}")
                    continue
                logger.debug(f"diagonal entry {position}: {expr} = 0 at {var} = {root}")
                self.result.cases.append(
                    CriticalCase(
                        CaseKind.DEPENDENT,
                        position,
                        frozenset({ParameterValue(var.name, Symbolic(root))}),
                        entry,
                    )
                )

    def _last_row(self) -> None:
        m, n = self.M.shape
        if n < 2:
            return
        last = self.M[m - 1]
        if _first_nonzero(last, self.engine) == n - 1:
            constant = last[n - 1]
            logger.debug(f"row {m} reads 0 = {constant}")
            self.result.cases.append(
                CriticalCase(CaseKind.INCONSISTENT, m, frozenset(), constant)
            )

    def run(self, augmented: bool) -> AnalysisResult:
        m, n = self.M.shape
        for i in range(min(m, n)):
            self._diagonal_entry(i + 1, self.M[i, i])
        if augmented and m:
            self._last_row()
        return self.result


def analyze(
    matrix, *, engine: Optional[SymbolicEngine] = None, augmented: bool = True
) -> AnalysisResult:
    """
    Classify a matrix in row-echelon form by its critical parameter values.

    Parameters
    ----------
    matrix : array-like (m, n)
        Already in row-echelon form (e.g. ``reduce(A).matrix``).
    engine : SymbolicEngine | None
    augmented : bool
        Read the last column as the right-hand side and look for a final
        ``0 = c`` row. Pass False for a bare coefficient matrix.

    Returns
    -------
    AnalysisResult
        ``cases`` in diagonal order followed by any inconsistency,
        ``diagnostics`` for roots that could not be found or verified,
        and the derived ``summary``.

    Raises
    ------
    NotInEchelonForm : the structural check failed.
    """
    engine = engine or DEFAULT_ENGINE
    M = as_matrix(matrix)
    check_echelon_form(M, engine)
    return _Analysis(M, engine).run(augmented)
