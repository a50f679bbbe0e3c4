# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
echelon
=======

A small, educational linear-algebra toolkit that shows its work: row
reduction over numbers *and* parameters, exact closed forms instead of
decimals, and the parameter values at which a system breaks down.

Public API
~~~~~~~~~~
- Row reduction
    - `reduce`, `ReduceOptions`, `rref`, `rank`
- Parametric analysis
    - `analyze`, `CaseKind`, `Summary`
- Display
    - `format_exact`, `format_matrix`
- Row operations
    - `elementary_row_operation`, `MatrixHistory`
- Collaborators
    - `inverse`, `gram_schmidt`, `check_orthogonality`, `least_squares`,
      `relative_coordinates`, `identify_basis`, `check_subspace`,
      `eigen_decomposition`

Everything else lives in sub-modules and is **not** considered part of the
stable interface.

Example
-------
>>> import sympy, echelon as ech
>>> a = sympy.Symbol("a")
>>> R = ech.reduce([[1, 2], [2, a + 1]]).matrix
>>> result = ech.analyze(R, augmented=False)
>>> result.critical_values()
{'a': [3]}
"""

from importlib.metadata import version as _pkg_version

from .analysis import (
    AnalysisResult,
    CaseKind,
    CriticalCase,
    ParameterValue,
    Summary,
    analyze,
)
from .basis import (
    BasisResult,
    SubspaceReport,
    basis_from_constraints,
    basis_from_parametric,
    basis_from_span,
    check_subspace,
    identify_basis,
)
from .eigen import EigenResult, eigen_decomposition
from .elimination import (
    ReducedResult,
    ReduceOptions,
    Step,
    rank,
    reduce,
    rref,
)
from .errors import (
    DimensionError,
    EchelonError,
    InvalidRowIndex,
    NotInEchelonForm,
    SimplificationError,
    UnsolvableExpression,
)
from .formatting import format_exact, format_matrix, format_scalar
from .least_squares import least_squares
from .matrix_functions import inverse
from .orthogonal import (
    CoordinatesResult,
    check_orthogonality,
    gram_schmidt,
    relative_coordinates,
)
from .rowops import MatrixHistory, elementary_row_operation
from .scalar import Numeric, Scalar, Symbolic, as_matrix
from .symbolic import DEFAULT_ENGINE, SolveResult, SymbolicEngine
from .utils import as_float_array, as_sympy_matrix

__all__ = [
    "reduce",
    "ReduceOptions",
    "ReducedResult",
    "Step",
    "rref",
    "rank",
    "analyze",
    "AnalysisResult",
    "CriticalCase",
    "CaseKind",
    "ParameterValue",
    "Summary",
    "format_exact",
    "format_matrix",
    "format_scalar",
    "elementary_row_operation",
    "MatrixHistory",
    "inverse",
    "gram_schmidt",
    "check_orthogonality",
    "least_squares",
    "relative_coordinates",
    "CoordinatesResult",
    "identify_basis",
    "basis_from_span",
    "basis_from_parametric",
    "basis_from_constraints",
    "BasisResult",
    "check_subspace",
    "SubspaceReport",
    "eigen_decomposition",
    "EigenResult",
    "Scalar",
    "Numeric",
    "Symbolic",
    "as_matrix",
    "as_float_array",
    "as_sympy_matrix",
    "SymbolicEngine",
    "SolveResult",
    "DEFAULT_ENGINE",
    "EchelonError",
    "DimensionError",
    "NotInEchelonForm",
    "UnsolvableExpression",
    "SimplificationError",
    "InvalidRowIndex",
]

# ---------------------------------------------------------------------
# Version string (helps “pip show exact-echelon”, Sphinx, etc.)
# ---------------------------------------------------------------------
try:  # installed via pip / build backend
    __version__ = _pkg_version("exact-echelon")
except Exception:  # running from a checkout
    __version__ = "0.0.0.dev0"

# ---------------------------------------------------------------------
# Optional: lightweight default logging config so users see warnings
# only if they deliberately enable them.
# ---------------------------------------------------------------------
import logging as _logging

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
