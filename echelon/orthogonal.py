# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Gram-Schmidt, orthogonality checks and coordinates in an orthogonal
basis, with exact-form reports.
"""

import logging
from dataclasses import dataclass, field
from typing import List, NamedTuple, Tuple

import numpy as np

from .formatting import format_exact, format_vector
from .utils import ZERO_TOL

logger = logging.getLogger(__name__)


def _as_vectors(vectors) -> List[np.ndarray]:
    """Columns of a 2-D array, or each item of a sequence, as 1-D floats."""
    if isinstance(vectors, np.ndarray) and vectors.ndim == 2:
        V = [vectors[:, j].astype(float) for j in range(vectors.shape[1])]
    else:
        V = [np.asarray(v, dtype=float).ravel() for v in vectors]
    if V and any(v.shape != V[0].shape for v in V):
        raise ValueError("All vectors must have the same dimension.")
    return V


class Projection(NamedTuple):
    """proj of v_i onto u_j that was subtracted (1-based indices)."""

    i: int
    j: int
    vector: np.ndarray


@dataclass
class GramSchmidtResult:
    orthogonal: List[np.ndarray]
    orthonormal: List[np.ndarray]
    projections: List[Projection] = field(default_factory=list)
    dependent: List[int] = field(default_factory=list)
    is_orthogonal: bool = True
    is_orthonormal: bool = True

    def as_matrix(self) -> np.ndarray:
        """Orthonormal vectors as the columns of a matrix."""
        return np.column_stack(self.orthonormal)

    def describe(self) -> List[str]:
        lines = []
        for p in self.projections:
            lines.append(
                f"proj of v{p.i} onto u{p.j} = {format_vector(p.vector)}"
            )
        for k, (u, e) in enumerate(zip(self.orthogonal, self.orthonormal), start=1):
            if k in self.dependent:
                lines.append(f"v{k} is linearly dependent on the previous vectors")
                continue
            lines.append(f"u{k} = {format_vector(u)}")
            lines.append(f"e{k} = {format_vector(e)}")
        lines.append(
            "The basis is orthogonal."
            if self.is_orthogonal
            else "The basis is not orthogonal."
        )
        lines.append(
            "The basis is orthonormal."
            if self.is_orthonormal
            else "The basis is not orthonormal."
        )
        return lines


def _pairwise_orthogonal(V: List[np.ndarray], tol: float) -> List[Tuple[int, int, float]]:
    bad = []
    for i in range(len(V)):
        for j in range(i + 1, len(V)):
            d = float(V[i] @ V[j])
            if abs(d) > tol:
                bad.append((i + 1, j + 1, d))
    return bad


def gram_schmidt(vectors, tol: float = ZERO_TOL) -> GramSchmidtResult:
    """
    Modified Gram-Schmidt orthogonalization.

    Parameters:
    vectors : (m, k) ndarray or sequence of k vectors
        Columns of a 2-D array are the vectors.
    tol : float
        Norm below which a vector counts as dependent.
    Returns:
    GramSchmidtResult
        Orthogonal and orthonormal vectors (dependent ones replaced by
        zero vectors), the projections subtracted, and verification flags.
    """
    V = _as_vectors(vectors)
    if not V:
        raise ValueError("Need at least 1 vector for Gram-Schmidt process.")

    dim = V[0].shape[0]
    result = GramSchmidtResult([], [])
    for i, v in enumerate(V):
        u = v.copy()
        for j, w in enumerate(result.orthogonal):
            ww = w @ w
            if ww < tol:
                continue
            proj = (u @ w) / ww * w
            u -= proj
            result.projections.append(Projection(i + 1, j + 1, proj))

        norm_u = np.linalg.norm(u)
        if norm_u < tol:
            logger.warning(
                f"Vector {i + 1} is linearly dependent on previous vectors. Using zero vector."
            )
            result.dependent.append(i + 1)
            result.orthogonal.append(np.zeros(dim))
            result.orthonormal.append(np.zeros(dim))
            continue
        result.orthogonal.append(u)
        result.orthonormal.append(u / norm_u)

    result.is_orthogonal = not _pairwise_orthogonal(result.orthogonal, tol)
    gram = np.array([[e @ f for f in result.orthonormal] for e in result.orthonormal])
    result.is_orthonormal = bool(np.allclose(gram, np.eye(len(V)), rtol=0.0, atol=tol))
    return result


@dataclass
class OrthogonalityReport:
    is_orthogonal: bool
    is_orthonormal: bool
    norms: List[float]
    normalized: List[np.ndarray]
    non_orthogonal_pairs: List[Tuple[int, int, float]] = field(default_factory=list)

    def describe(self) -> List[str]:
        lines = [
            f"Vectors {i} and {j} are not orthogonal: dot product = {format_exact(d)}"
            for i, j, d in self.non_orthogonal_pairs
        ]
        lines.append(
            "The set is orthogonal!" if self.is_orthogonal else "The set is not orthogonal."
        )
        lines += [f"Vector {k} norm = {format_exact(n)}" for k, n in enumerate(self.norms, 1)]
        lines.append(
            "The set is orthonormal!"
            if self.is_orthonormal
            else "The set is not orthonormal."
        )
        lines += [f"Vector {k}: {format_vector(e)}" for k, e in enumerate(self.normalized, 1)]
        return lines


def check_orthogonality(vectors, tol: float = ZERO_TOL) -> OrthogonalityReport:
    """
    Check whether vectors form an orthogonal / orthonormal set and
    return the normalized set. A single vector is trivially orthogonal.
    """
    V = _as_vectors(vectors)
    if not V:
        raise ValueError("Need at least 1 vector to check orthogonality.")

    bad = _pairwise_orthogonal(V, tol)
    norms = [float(np.linalg.norm(v)) for v in V]
    normalized = []
    for k, (v, n) in enumerate(zip(V, norms), start=1):
        if n < tol:
            logger.warning(f"Vector {k} is the zero vector and cannot be normalized")
            normalized.append(np.zeros_like(v))
        else:
            normalized.append(v / n)

    is_orthogonal = not bad
    is_orthonormal = is_orthogonal and all(abs(n - 1.0) <= tol for n in norms)
    return OrthogonalityReport(is_orthogonal, is_orthonormal, norms, normalized, bad)


@dataclass
class CoordinatesResult:
    coordinates: np.ndarray
    reconstructed: np.ndarray
    error_norm: float
    orthonormal: bool
    basis_is_orthogonal: bool = True

    @property
    def verified(self) -> bool:
        return self.error_norm < ZERO_TOL

    def describe(self) -> List[str]:
        kind = "orthonormal" if self.orthonormal else "orthogonal"
        lines = [f"Coordinates relative to the {kind} basis:"]
        lines += [f"c{k} = {format_exact(c)}" for k, c in enumerate(self.coordinates, 1)]
        lines.append(f"Reconstructed vector: {format_vector(self.reconstructed)}")
        lines.append(
            "Verification: reconstruction matches the original vector."
            if self.verified
            else f"Verification failed: ||v - Bc|| = {format_exact(self.error_norm)}"
        )
        return lines


def relative_coordinates(
    basis, vector, orthonormal: bool = False, tol: float = ZERO_TOL
) -> CoordinatesResult:
    """
    Coordinates of ``vector`` in an orthogonal (or orthonormal) basis.

    c_i = (v . b_i) / (b_i . b_i), or just v . b_i when ``orthonormal``.
    A basis that is not orthogonal still gets the projection coefficients,
    but the reconstruction will not match; check ``verified``.
    """
    B = _as_vectors(basis)
    if not B:
        raise ValueError("Need at least 1 basis vector.")
    v = np.asarray(vector, dtype=float).ravel()
    if v.shape != B[0].shape:
        raise ValueError("Vector dimension does not match basis vector dimension")

    coords = np.zeros(len(B))
    for i, b in enumerate(B):
        if orthonormal:
            coords[i] = v @ b
            continue
        bb = b @ b
        if bb < tol:
            raise ValueError(f"Basis vector {i + 1} is the zero vector.")
        coords[i] = (v @ b) / bb

    bad = _pairwise_orthogonal(B, tol)
    if bad:
        logger.warning(f"basis is not orthogonal at pairs {[(i, j) for i, j, _ in bad]}")

    reconstructed = sum(c * b for c, b in zip(coords, B))
    error_norm = float(np.linalg.norm(v - reconstructed))
    return CoordinatesResult(coords, reconstructed, error_norm, orthonormal, not bad)
