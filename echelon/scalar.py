# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Matrix entries.

An entry is either ``Numeric`` (a float compared against ``ZERO_TOL``) or
``Symbolic`` (a SymPy expression compared exactly). Algorithms ask an
entry what it can do (``is_zero``, ``is_numeric``, ``magnitude``, ...)
rather than inspecting its type.
"""

import math
import numbers
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import FrozenSet, Optional

import numpy as np
import sympy

from .errors import DimensionError
from .symbolic import DEFAULT_ENGINE, SymbolicEngine
from .utils import ZERO_TOL


class Scalar(ABC):
    """Common interface of ``Numeric`` and ``Symbolic`` entries."""

    @property
    @abstractmethod
    def is_numeric(self) -> bool:
        """True when the entry does not depend on any free parameter."""

    @property
    @abstractmethod
    def free_symbols(self) -> FrozenSet[sympy.Symbol]: ...

    @abstractmethod
    def is_zero(self, engine: Optional[SymbolicEngine] = None) -> bool: ...

    @abstractmethod
    def is_one(self) -> bool: ...

    @abstractmethod
    def is_minus_one(self) -> bool: ...

    @abstractmethod
    def magnitude(self) -> float:
        """Absolute value of a parameter-free entry."""

    @abstractmethod
    def simplified(self, engine: Optional[SymbolicEngine] = None) -> "Scalar": ...

    @abstractmethod
    def to_sympy(self) -> sympy.Expr: ...

    @abstractmethod
    def zero(self) -> "Scalar":
        """The zero of this entry's variant."""

    # -- arithmetic ------------------------------------------------------
    def _binary(self, other, op):
        other = as_scalar(other)
        if isinstance(self, Numeric) and isinstance(other, Numeric):
            return Numeric(op(self.value, other.value))
        return Symbolic(op(self.to_sympy(), other.to_sympy()))

    def __add__(self, other):
        return self._binary(other, lambda a, b: a + b)

    def __radd__(self, other):
        return as_scalar(other) + self

    def __sub__(self, other):
        return self._binary(other, lambda a, b: a - b)

    def __rsub__(self, other):
        return as_scalar(other) - self

    def __mul__(self, other):
        return self._binary(other, lambda a, b: a * b)

    def __rmul__(self, other):
        return as_scalar(other) * self

    def __truediv__(self, other):
        return self._binary(other, lambda a, b: a / b)

    def __rtruediv__(self, other):
        return as_scalar(other) / self


@dataclass(frozen=True)
class Numeric(Scalar):
    value: float

    @property
    def is_numeric(self) -> bool:
        return True

    @property
    def free_symbols(self) -> FrozenSet[sympy.Symbol]:
        return frozenset()

    def is_zero(self, engine=None) -> bool:
        return abs(self.value) < ZERO_TOL

    def is_one(self) -> bool:
        return abs(self.value - 1.0) < ZERO_TOL

    def is_minus_one(self) -> bool:
        return abs(self.value + 1.0) < ZERO_TOL

    def magnitude(self) -> float:
        return abs(self.value)

    def simplified(self, engine=None) -> "Numeric":
        # Snap elimination noise (and -0.0) to an exact zero.
        if self.is_zero():
            return Numeric(0.0)
        return self

    def to_sympy(self) -> sympy.Expr:
        # Shortest repr, so 0.1 becomes 1/10 rather than its binary value.
        if not math.isfinite(self.value):
            return sympy.Float(self.value)
        return sympy.Rational(repr(self.value))

    def zero(self) -> "Numeric":
        return Numeric(0.0)

    def __neg__(self):
        return Numeric(-self.value)

    def __float__(self) -> float:
        return self.value

    def __str__(self) -> str:
        return f"{self.value:g}"


@dataclass(frozen=True)
class Symbolic(Scalar):
    expr: sympy.Expr

    @property
    def is_numeric(self) -> bool:
        return not self.expr.free_symbols

    @property
    def free_symbols(self) -> FrozenSet[sympy.Symbol]:
        return frozenset(self.expr.free_symbols)

    def is_zero(self, engine: Optional[SymbolicEngine] = None) -> bool:
        return (engine or DEFAULT_ENGINE).is_zero(self.expr)

    def is_one(self) -> bool:
        return self.expr == 1

    def is_minus_one(self) -> bool:
        return self.expr == -1

    def magnitude(self) -> float:
        return float(abs(self.expr))

    def complexity(self) -> int:
        """Length of the printed form; a crude size measure."""
        return len(str(self.expr))

    def simplified(self, engine: Optional[SymbolicEngine] = None) -> "Symbolic":
        return Symbolic((engine or DEFAULT_ENGINE).simplify(self.expr))

    def to_sympy(self) -> sympy.Expr:
        return self.expr

    def zero(self) -> "Symbolic":
        return Symbolic(sympy.Integer(0))

    def __neg__(self):
        return Symbolic(-self.expr)

    def __float__(self) -> float:
        return float(self.expr)

    def __str__(self) -> str:
        return str(self.expr)


def as_scalar(value) -> Scalar:
    """
    Wrap a raw entry.

    Python and NumPy numbers become ``Numeric``; SymPy objects and strings
    (parsed with ``sympy.sympify``) become ``Symbolic``.
    """
    if isinstance(value, Scalar):
        return value
    # SymPy registers its numbers with the numbers ABCs, so test it first.
    if isinstance(value, (str, sympy.Basic)):
        return Symbolic(sympy.sympify(value))
    if isinstance(value, (bool, np.bool_)):
        return Numeric(float(value))
    if isinstance(value, numbers.Real):
        return Numeric(float(value))
    raise TypeError(f"cannot use {type(value).__name__} as a matrix entry")


def promote(value: Scalar) -> Symbolic:
    """Turn any entry into its exact ``Symbolic`` form."""
    if isinstance(value, Symbolic):
        return value
    return Symbolic(value.to_sympy())


def as_matrix(data) -> np.ndarray:
    """
    Coerce nested rows, an ndarray or a ``sympy.Matrix`` into an m by n
    object ndarray of Scalars.

    If any entry is symbolic the whole matrix is promoted to ``Symbolic``
    so that one reduction pass never mixes the two variants.

    Raises
    ------
    DimensionError : input is not 2-D or its rows differ in length.
    """
    if isinstance(data, sympy.MatrixBase):
        shape = data.shape
        rows = data.tolist()
    elif isinstance(data, np.ndarray):
        if data.ndim != 2:
            raise DimensionError(f"expected a 2-D matrix, got {data.ndim}-D")
        shape = data.shape
        rows = data.tolist()
    else:
        try:
            rows = [list(r) for r in data]
        except TypeError as e:
            raise DimensionError("matrix rows must be sequences") from e
        widths = {len(r) for r in rows}
        if len(widths) > 1:
            raise DimensionError(f"rows have differing lengths {sorted(widths)}")
        shape = (len(rows), widths.pop() if widths else 0)

    entries = [[as_scalar(x) for x in row] for row in rows]
    symbolic = any(isinstance(x, Symbolic) for row in entries for x in row)

    M = np.empty(shape, dtype=object)
    for i, row in enumerate(entries):
        for j, x in enumerate(row):
            M[i, j] = promote(x) if symbolic else x
    return M
