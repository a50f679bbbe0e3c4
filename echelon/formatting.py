# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Exact-value display.

``format_exact`` turns a float back into the closed form a student would
write by hand: an integer, a fraction, or a simple surd such as ``3/√5``
or ``5√2/3``. The candidate forms are tried in a fixed order and the first
one within tolerance wins; no attempt is made to find the "simplest" one.
"""

import math
import re
from fractions import Fraction
from typing import Iterable, Optional

import numpy as np

from .scalar import Symbolic, as_scalar
from .utils import COMMON_SURDS, FORMAT_TOL, MAX_DENOMINATOR


def _rational_form(val: float) -> Optional[str]:
    # Within FORMAT_TOL two fractions with d <= 1000 cannot both match, so
    # limit_denominator finds the same fraction a continued-fraction
    # expansion stopped at the tolerance would.
    frac = Fraction(val).limit_denominator(MAX_DENOMINATOR)
    if abs(val - frac.numerator / frac.denominator) >= FORMAT_TOL * max(1.0, abs(val)):
        return None
    if frac.denominator == 1:
        return f"{frac.numerator}"
    return f"{frac.numerator}/{frac.denominator}"


def _surd_quotient_form(val: float) -> Optional[str]:
    """k/√s or √s/k, either sign."""
    for num in range(1, 11):
        for surd in COMMON_SURDS:
            root = math.sqrt(surd)
            if abs(val - num / root) < FORMAT_TOL:
                return f"{num}/√{surd}"
            if abs(val + num / root) < FORMAT_TOL:
                return f"-{num}/√{surd}"
            over = f"√{surd}" if num == 1 else f"√{surd}/{num}"
            if abs(val - root / num) < FORMAT_TOL:
                return over
            if abs(val + root / num) < FORMAT_TOL:
                return f"-{over}"
    return None


def _scaled_surd_form(val: float) -> Optional[str]:
    """(k/d)·√s, either sign."""
    for num in range(1, 21):
        for denom in range(1, 21):
            for surd in COMMON_SURDS:
                test_val = (num / denom) * math.sqrt(surd)
                text = f"{num}√{surd}" if denom == 1 else f"{num}√{surd}/{denom}"
                if abs(val - test_val) < FORMAT_TOL:
                    return text
                if abs(val + test_val) < FORMAT_TOL:
                    return f"-{text}"
    return None


def _root_of_fraction_form(val: float) -> Optional[str]:
    """√(p/q) with the sign of ``val``."""
    square = val * val
    sign = "-" if val < 0 else ""
    for num in range(1, 101):
        for denom in range(1, 101):
            if abs(square - num / denom) < FORMAT_TOL:
                if denom == 1:
                    return f"{sign}√{num}"
                return f"{sign}√({num}/{denom})"
    return None


def format_exact(value) -> str:
    """
    Format a number in exact mathematical form.

    Tries, in order: zero, integer or fraction (denominator <= 1000),
    ``k/√s`` / ``√s/k``, ``k√s/d``, ``√(p/q)``, and finally ``%g``.
    Never raises for a real input.

    >>> format_exact(0.5)
    '1/2'
    >>> format_exact(2 / 3 ** 0.5)
    '2/√3'
    """
    val = float(value)
    if not math.isfinite(val):
        return f"{val:g}"
    if abs(val) < FORMAT_TOL:
        return "0"

    for form in (
        _rational_form,
        _surd_quotient_form,
        _scaled_surd_form,
        _root_of_fraction_form,
    ):
        text = form(val)
        if text is not None:
            return text
    return f"{val:g}"


def _pretty_expr(text: str) -> str:
    text = text.replace("sqrt(", "√(")
    text = re.sub(r"√\((\d+)\)", r"√\1", text)
    return text.replace("**", "^")


def format_scalar(entry) -> str:
    """
    Display one matrix entry.

    Floats go through ``format_exact``; exact SymPy rationals are printed
    as they are; other parameter-free constants are evaluated and matched
    against the surd forms.
    """
    entry = as_scalar(entry)
    if isinstance(entry, Symbolic) and entry.expr.is_Rational:
        return str(entry.expr)
    if entry.is_numeric:
        try:
            return format_exact(float(entry))
        except TypeError:
            # complex constants such as I
            pass
    return _pretty_expr(str(entry))


def format_vector(values: Iterable, sep: str = "; ") -> str:
    """``[a; b; c]`` with every component formatted exactly."""
    return "[" + sep.join(format_scalar(v) for v in values) + "]"


def format_matrix(M: np.ndarray) -> str:
    """
    One-line display of a matrix, rows separated by ``;``.

    >>> format_matrix(np.array([[1.0, 0.5], [0.0, 2.0]]))
    '[1 1/2;0 2]'
    """
    rows = [" ".join(format_scalar(x) for x in row) for row in np.asarray(M)]
    return "[" + ";".join(rows) + "]"


def format_table(M: np.ndarray) -> str:
    """Multi-line, column-aligned display used in step traces."""
    M = np.asarray(M)
    if M.size == 0:
        return "[]"
    cells = [[format_scalar(x) for x in row] for row in M]
    widths = [max(len(row[j]) for row in cells) for j in range(M.shape[1])]
    lines = ["  ".join(c.rjust(w) for c, w in zip(row, widths)) for row in cells]
    return "\n".join(f"[ {line} ]" for line in lines)
