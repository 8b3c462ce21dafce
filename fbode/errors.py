"""Exceptions raised when a solve is requested with unusable inputs.

All of them derive from `ValueError`, so callers that already guard
against bad arguments with ``except ValueError`` keep working.
"""


class SolverError(Exception):
    """Base class of errors raised by fbode."""


class UnknownMethodError(SolverError, ValueError):
    """Requested integration method is not one of the known methods."""


class MalformedMatrixError(SolverError, ValueError):
    """Coefficient matrix shape matches none of the structural cases."""


class LengthMismatchError(SolverError, ValueError):
    """State and scale vectors have different lengths."""
