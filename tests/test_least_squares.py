# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np
import pytest

from echelon.least_squares import least_squares


def test_least_squares_projection():
    A = np.array(
        [
            [1, 0],
            [1, 1],
            [1, 2],
        ]
    )
    b = np.array(
        [
            [6],
            [0],
            [0],
        ]
    )

    result = least_squares(A, b)
    assert result.is_unique
    np.testing.assert_allclose(result.solution, [5, -3], atol=1e-12)
    np.testing.assert_allclose(result.projection, [5, 2, -1], atol=1e-12, verbose=True)
    np.testing.assert_allclose(result.orthogonality_check, [0, 0], atol=1e-12)

    # Check residuals
    res = np.linalg.norm(A @ np.linalg.lstsq(A, b, rcond=None)[0] - b, np.inf)
    res_proj = np.linalg.norm(result.residual, np.inf)
    assert abs(res - res_proj) < 1e-12
    assert "Residual norm ||b - Ax|| = √6" in result.describe()


def test_least_squares_flat_b():
    A = np.array([[1, 0], [1, 1], [1, 2]])
    result = least_squares(A, [6, 0, 0])
    np.testing.assert_allclose(result.solution, [5, -3], atol=1e-12)


def test_least_squares_rank_deficient():
    A = np.ones((3, 2))
    result = least_squares(A, [1, 2, 3])
    assert not result.is_unique
    np.testing.assert_allclose(result.solution, [2, 0], atol=1e-12)
    np.testing.assert_allclose(result.projection, [2, 2, 2], atol=1e-12)
    assert "The solution is NOT UNIQUE (A does not have full column rank)." in result.describe()


def test_least_squares_bad_b():
    with pytest.raises(ValueError, match="m×1"):
        least_squares(np.eye(3), [1, 2])
