# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import math

import numpy as np
import pytest
import sympy

from echelon.formatting import format_exact, format_matrix, format_scalar, format_table
from echelon.scalar import as_matrix


@pytest.mark.parametrize(
    "value,expected",
    [
        (0.5, "1/2"),
        (1 / math.sqrt(2), "1/√2"),
        (0.0000000001, "0"),
        (3.0, "3"),
        (2 / math.sqrt(3), "2/√3"),
        (-0.75, "-3/4"),
        (-7.0, "-7"),
        (1 / 3, "1/3"),
        (3 / math.sqrt(5), "3/√5"),
        (-math.sqrt(7) / 4, "-√7/4"),
        (5 * math.sqrt(2) / 3, "5√2/3"),
        (-2 * math.sqrt(11), "-2√11"),
        (math.sqrt(17), "√17"),
        (-math.sqrt(17), "-√17"),
        (math.sqrt(17 / 3), "√(17/3)"),
    ],
)
def test_closed_forms(value, expected):
    assert format_exact(value) == expected


def test_zero_and_near_zero():
    assert format_exact(0.0) == "0"
    assert format_exact(-0.0) == "0"
    assert format_exact(-1e-12) == "0"
    assert format_exact(np.finfo(float).eps) == "0"


def test_bare_surd_has_no_unit_denominator():
    assert format_exact(math.sqrt(2)) == "√2"
    assert format_exact(-math.sqrt(3)) == "-√3"


def test_fraction_denominator_limit():
    assert format_exact(1 / 1000) == "1/1000"
    # d > 1000 is not printed as a fraction
    assert format_exact(1 / 1001) == f"{1 / 1001:g}"


def test_fallback_is_compact_decimal():
    assert format_exact(math.pi) == "3.14159"
    assert format_exact(math.e) == f"{math.e:g}"


def test_non_finite_values_do_not_raise():
    assert format_exact(float("nan")) == "nan"
    assert format_exact(float("inf")) == "inf"
    assert format_exact(float("-inf")) == "-inf"


def test_numpy_scalars_accepted():
    assert format_exact(np.float64(0.25)) == "1/4"
    assert format_exact(np.int64(4)) == "4"


def test_first_matching_form_wins():
    # √2/2 is also 1/√2; the k/√s check runs first
    assert format_exact(math.sqrt(2) / 2) == "1/√2"


def test_format_scalar_symbolic_and_exact():
    a = sympy.Symbol("a")
    assert format_scalar(sympy.Rational(2, 7)) == "2/7"
    assert format_scalar(sympy.sqrt(2)) == "√2"
    assert format_scalar(a**2 - 3) == "a^2 - 3"
    assert format_scalar(sympy.sqrt(a)) == "√(a)"
    assert format_scalar(0.5) == "1/2"


def test_format_matrix_one_line():
    assert format_matrix(np.array([[1.0, 0.5], [0.0, 2.0]])) == "[1 1/2;0 2]"
    a = sympy.Symbol("a")
    M = as_matrix([[1, a], [0, a - 3]])
    assert format_matrix(M) == "[1 a;0 a - 3]"


def test_format_table_aligns_columns():
    table = format_table(np.array([[1.0, 10.0], [100.0, 0.5]]))
    lines = table.splitlines()
    assert len(lines) == 2
    assert len(lines[0]) == len(lines[1])
    assert format_table(np.zeros((0, 2))) == "[]"
