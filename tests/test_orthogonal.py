# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
import math

import numpy as np
import pytest

from echelon.orthogonal import check_orthogonality, gram_schmidt, relative_coordinates

logger = logging.getLogger(__name__)


def test_gram_schmidt_two_vectors():
    result = gram_schmidt([[3, 1], [2, 2]])
    np.testing.assert_allclose(result.orthogonal[1], [-0.4, 1.2], atol=1e-12)
    assert result.projections[0].i == 2 and result.projections[0].j == 1
    np.testing.assert_allclose(result.projections[0].vector, [2.4, 0.8], atol=1e-12)
    assert result.is_orthogonal
    assert result.is_orthonormal

    lines = result.describe()
    assert "u1 = [3; 1]" in lines
    assert "e1 = [3/√10; 1/√10]" in lines
    assert lines[-1] == "The basis is orthonormal."


def test_gram_schmidt_random_columns():
    A = np.random.default_rng(0).standard_normal((6, 4))
    Q = gram_schmidt(A).as_matrix()
    logger.debug(f"\nQ:\n{Q}")
    np.testing.assert_allclose(Q.T @ Q, np.eye(4), atol=1e-10)
    # same column space
    np.testing.assert_allclose(Q @ Q.T @ A, A, atol=1e-10)


def test_gram_schmidt_dependent_vector(caplog):
    with caplog.at_level(logging.WARNING, logger="echelon.orthogonal"):
        result = gram_schmidt([[1, 0], [2, 0]])
    assert result.dependent == [2]
    np.testing.assert_array_equal(result.orthonormal[1], [0, 0])
    assert result.is_orthogonal
    assert not result.is_orthonormal
    assert "linearly dependent" in caplog.text
    assert "v2 is linearly dependent on the previous vectors" in result.describe()


def test_gram_schmidt_rejects_bad_input():
    with pytest.raises(ValueError):
        gram_schmidt([])
    with pytest.raises(ValueError, match="same dimension"):
        gram_schmidt([[1, 0], [1, 0, 0]])


def test_check_orthogonality_standard_basis():
    report = check_orthogonality(np.eye(3))
    assert report.is_orthogonal and report.is_orthonormal
    assert report.norms == [1.0, 1.0, 1.0]


def test_check_orthogonality_not_normalized():
    report = check_orthogonality([[1, 1], [1, -1]])
    assert report.is_orthogonal
    assert not report.is_orthonormal
    assert math.isclose(report.norms[0], math.sqrt(2))
    np.testing.assert_allclose(report.normalized[0], [1 / math.sqrt(2)] * 2)

    lines = report.describe()
    assert "The set is orthogonal!" in lines
    assert "Vector 1 norm = √2" in lines
    assert "Vector 1: [1/√2; 1/√2]" in lines


def test_check_orthogonality_reports_pairs():
    report = check_orthogonality([[1, 0], [1, 1]])
    assert not report.is_orthogonal
    assert report.non_orthogonal_pairs == [(1, 2, 1.0)]
    assert "Vectors 1 and 2 are not orthogonal: dot product = 1" in report.describe()


def test_check_orthogonality_zero_vector(caplog):
    with caplog.at_level(logging.WARNING, logger="echelon.orthogonal"):
        report = check_orthogonality([[0, 0], [1, 0]])
    np.testing.assert_array_equal(report.normalized[0], [0, 0])
    assert not report.is_orthonormal
    assert "cannot be normalized" in caplog.text


def test_check_orthogonality_empty():
    with pytest.raises(ValueError):
        check_orthogonality([])


def test_relative_coordinates_orthogonal_basis():
    result = relative_coordinates([[2, 0, 0], [0, 3, 0], [0, 0, 4]], [4, 6, 8])
    np.testing.assert_allclose(result.coordinates, [2, 2, 2])
    assert result.verified and result.basis_is_orthogonal

    lines = result.describe()
    assert lines[0] == "Coordinates relative to the orthogonal basis:"
    assert "c1 = 2" in lines
    assert "Reconstructed vector: [4; 6; 8]" in lines
    assert lines[-1] == "Verification: reconstruction matches the original vector."


def test_relative_coordinates_orthonormal_basis():
    Q = gram_schmidt([[3, 1], [2, 2]]).as_matrix()
    v = np.array([1.0, 2.0])
    result = relative_coordinates(Q, v, orthonormal=True)
    np.testing.assert_allclose(result.coordinates, Q.T @ v, atol=1e-12)
    np.testing.assert_allclose(result.reconstructed, v, atol=1e-12)
    assert result.verified


def test_relative_coordinates_non_orthogonal_basis(caplog):
    with caplog.at_level(logging.WARNING, logger="echelon.orthogonal"):
        result = relative_coordinates([[1, 0], [1, 1]], [1, 2])
    assert not result.basis_is_orthogonal
    assert not result.verified
    np.testing.assert_allclose(result.coordinates, [1.0, 1.5])
    assert "not orthogonal" in caplog.text
    assert result.describe()[-1].startswith("Verification failed")


def test_relative_coordinates_rejects_bad_input():
    with pytest.raises(ValueError, match="does not match"):
        relative_coordinates([[1, 0], [0, 1]], [1, 2, 3])
    with pytest.raises(ValueError, match="zero vector"):
        relative_coordinates([[0, 0], [0, 1]], [1, 2])
    with pytest.raises(ValueError):
        relative_coordinates([], [1, 2])
