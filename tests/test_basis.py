# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging

import numpy as np
import pytest
import sympy

from echelon.basis import (
    basis_from_constraints,
    basis_from_parametric,
    basis_from_span,
    check_subspace,
    identify_basis,
)
from echelon.elimination import rank
from echelon.utils import as_float_array, random_integer_matrix

TEST_ITERATIONS = 10
logger = logging.getLogger(__name__)

a, b = sympy.symbols("a b")
x, y, z = sympy.symbols("x y z")


def _floats(vector):
    return [float(v) for v in vector]


def test_span_keeps_pivot_columns():
    result = basis_from_span([[1, 0, 1], [2, 0, 2], [0, 1, 0]])
    assert result.pivots == [0, 2]
    assert result.dimension == 2
    assert _floats(result.basis[0]) == [1, 0, 1]
    assert _floats(result.basis[1]) == [0, 1, 0]


def test_span_of_array_columns():
    result = basis_from_span(np.array([[1, 2], [2, 4]]))
    assert result.dimension == 1
    assert _floats(result.basis[0]) == [1, 2]


def test_span_dimension_is_rank():
    for seed in range(TEST_ITERATIONS):
        A = random_integer_matrix(4, 6, seed=seed)
        result = basis_from_span(A)
        logger.debug(f"\nseed={seed}\nA:\n{A}\npivots={result.pivots}")
        assert result.dimension == np.linalg.matrix_rank(A)
        assert rank(as_float_array(result.as_matrix())) == result.dimension


def test_span_rejects_mixed_dimensions():
    with pytest.raises(ValueError, match="same dimension"):
        basis_from_span([[1, 2], [1, 2, 3]])
    assert basis_from_span([]).dimension == 0


def test_parametric_vector():
    result = basis_from_parametric([a + b, a - b, 2 * a])
    assert result.parameters == ["a", "b"]
    assert result.dimension == 2

    dependent = basis_from_parametric([a + 2 * b, 2 * a + 4 * b])
    assert dependent.dimension == 1
    assert _floats(dependent.basis[0]) == [1, 2]


def test_parametric_needs_parameters():
    with pytest.raises(ValueError, match="no free parameters"):
        basis_from_parametric([1, 2])


def test_constant_part_is_dropped(caplog):
    with caplog.at_level(logging.WARNING, logger="echelon.basis"):
        result = basis_from_parametric([a + 1, a])
    assert result.dimension == 1
    assert _floats(result.basis[0]) == [1, 1]
    assert "constant part" in caplog.text


def test_constraints_give_nullspace():
    result = basis_from_constraints([x, y, z], [sympy.Eq(x + y, z)])
    assert result.dimension == 2
    assert _floats(result.basis[0]) == [-1, 1, 0]
    assert _floats(result.basis[1]) == [1, 0, 1]

    A = as_float_array(result.coefficient_matrix)
    for v in result.basis:
        np.testing.assert_allclose(A @ np.array(_floats(v)), 0.0, atol=1e-12)
    assert result.describe()[-1] == "Dimension of the vector space: 2"


def test_constraints_by_name_and_expression():
    result = basis_from_constraints(["x", "y"], ["x - 2*y"])
    assert result.parameters == ["x", "y"]
    assert _floats(result.basis[0]) == [2, 1]


def test_no_constraints_is_whole_space():
    result = basis_from_constraints(["x", "y"], [])
    assert [_floats(v) for v in result.basis] == [[1, 0], [0, 1]]
    with pytest.raises(ValueError):
        basis_from_constraints([], [])


def test_identify_basis_dispatch():
    assert identify_basis([a + b, a, b]).dimension == 2
    assert identify_basis(sympy.Matrix([a, 2 * a])).dimension == 1
    assert identify_basis([[1, 0], [0, 1], [1, 1]]).dimension == 2
    assert identify_basis(np.eye(3)).dimension == 3
    assert identify_basis(["x", "y", "z"], [sympy.Eq(x, 0)]).dimension == 2


def test_describe_lists_basis():
    lines = basis_from_parametric([a, 2 * a]).describe()
    assert lines[0].startswith("Coefficient matrix A:")
    assert "b1 = [1; 2]" in lines


def test_linear_equation_is_subspace():
    report = check_subspace([sympy.Eq(x + y, z)])
    assert report.is_subspace and report.contains_zero
    assert report.describe() == ["The set is a subspace."]


def test_affine_equation_misses_origin():
    report = check_subspace([sympy.Eq(x + y, 1)])
    assert not report.is_subspace
    assert not report.contains_zero
    assert "does not hold at the zero vector" in report.failures[0]


def test_inequality_is_not_subspace():
    report = check_subspace([x >= 0], variables=["x"])
    assert not report.is_subspace
    assert report.contains_zero
    assert "inequality" in report.failures[0]


def test_nonlinear_equation_is_not_subspace():
    report = check_subspace([sympy.Eq(x * y, 0)])
    assert not report.is_subspace
    assert report.contains_zero
    assert report.describe()[-1] == "The set is NOT a subspace."
