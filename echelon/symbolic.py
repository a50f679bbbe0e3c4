# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Thin adapter over SymPy.

The reducer and the analyzer never call SymPy directly for solving or
simplifying; they go through a ``SymbolicEngine`` so that a failing solve
comes back as a ``SolveResult`` marked unsolvable instead of an exception
in the middle of an analysis loop.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence, Tuple, Union

import sympy

from .errors import SimplificationError, UnsolvableExpression

logger = logging.getLogger(__name__)

Variable = Union[str, sympy.Symbol]


@dataclass(frozen=True)
class SolveResult:
    """Roots of ``expr = 0`` for one variable, or the reason there are none."""

    expression: sympy.Expr
    variable: sympy.Symbol
    solutions: Tuple[sympy.Expr, ...] = ()
    unsolvable: bool = False
    reason: str = ""

    @classmethod
    def failed(cls, expression, variable, reason: str) -> "SolveResult":
        return cls(expression, variable, (), True, reason)

    def unwrap(self) -> Tuple[sympy.Expr, ...]:
        if self.unsolvable:
            raise UnsolvableExpression(
                f"cannot solve {self.expression} = 0 for {self.variable}: {self.reason}"
            )
        return self.solutions


class SymbolicEngine:
    """Solve / simplify / substitute over SymPy expressions."""

    def free_variables(self, expr) -> Tuple[sympy.Symbol, ...]:
        """Free symbols of ``expr`` sorted by name."""
        free = getattr(sympy.sympify(expr), "free_symbols", set())
        return tuple(sorted(free, key=lambda s: s.name))

    def _resolve(self, expr, variable: Variable) -> sympy.Symbol:
        # Match by name so assumptions on the caller's symbol are kept.
        if isinstance(variable, sympy.Symbol):
            return variable
        for sym in self.free_variables(expr):
            if sym.name == variable:
                return sym
        return sympy.Symbol(variable)

    def solve(self, expr, variable: Variable) -> SolveResult:
        """
        Solve ``expr = 0`` for ``variable``.

        Never raises for a SymPy failure; the result is marked unsolvable
        and carries the reason instead.
        """
        expr = sympy.sympify(expr)
        var = self._resolve(expr, variable)
        try:
            roots = sympy.solve(sympy.Eq(expr, 0), var, dict=False)
        except Exception as e:
            logger.debug(f"solve({expr} = 0, {var}) failed: {e}")
            return SolveResult.failed(expr, var, str(e) or type(e).__name__)

        if not isinstance(roots, (list, tuple)):
            return SolveResult.failed(expr, var, f"unexpected solve output {roots!r}")
        return SolveResult(expr, var, tuple(roots))

    def simplify(self, expr) -> sympy.Expr:
        try:
            return sympy.simplify(expr)
        except Exception as e:
            raise SimplificationError(f"could not simplify {expr}: {e}") from e

    def substitute(self, expr, bindings: Mapping[Variable, object]) -> sympy.Expr:
        expr = sympy.sympify(expr)
        subs: Dict[sympy.Symbol, object] = {
            self._resolve(expr, var): value for var, value in bindings.items()
        }
        return expr.subs(subs)

    def coefficient(self, expr, variable: Variable) -> sympy.Expr:
        """d(expr)/d(variable): the coefficient of ``variable`` in a linear expr."""
        expr = sympy.sympify(expr)
        return sympy.diff(expr, self._resolve(expr, variable))

    def degree(self, expr, variables: Sequence[Variable]) -> Optional[int]:
        """Total degree in ``variables``; None if not a polynomial in them."""
        expr = sympy.sympify(expr)
        gens = [self._resolve(expr, v) for v in variables]
        if not gens or expr.is_zero:
            return 0
        try:
            return sympy.Poly(expr, *gens).total_degree()
        except sympy.PolynomialError:
            return None

    def is_always_true(self, condition) -> bool:
        """True only when ``condition`` reduces to SymPy's ``true``."""
        if isinstance(condition, bool):
            return condition
        if condition is sympy.true or condition is sympy.false:
            return bool(condition)
        return self.simplify(condition) is sympy.true

    def is_zero(self, expr) -> bool:
        """Exact zero test: structural first, then through ``simplify``."""
        expr = sympy.sympify(expr)
        known = expr.is_zero
        if known is not None:
            return bool(known)
        try:
            return self.simplify(expr) == 0
        except SimplificationError as e:
            logger.warning(f"zero test fell back to 'nonzero': {e}")
            return False


DEFAULT_ENGINE = SymbolicEngine()
