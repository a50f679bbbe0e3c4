# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Exception types raised by the reducer, the analyzer and their collaborators.

Hard failures (bad shapes, non-echelon input, bad row numbers) propagate
to the caller. Solve and simplify failures are caught where they happen
and turned into diagnostics on the result object.
"""


class EchelonError(ValueError):
    """Base class for every error raised by this package."""


class DimensionError(EchelonError):
    """The input is not a rectangular 2-D matrix."""


class NotInEchelonForm(EchelonError):
    """A matrix handed to the analyzer is not in row-echelon form."""


class UnsolvableExpression(EchelonError):
    """The symbolic engine could not solve ``expr = 0`` for a variable."""


class SimplificationError(EchelonError):
    """The symbolic engine failed to simplify an expression."""


class InvalidRowIndex(EchelonError, IndexError):
    """A row number lies outside ``1..m``."""
