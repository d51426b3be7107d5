from __future__ import annotations

from typing import Any


class FDOperatorError(Exception):
    """Base class for errors raised by the operator algebra."""


class OperatorConstructionError(FDOperatorError, ValueError):
    """Raised when an operator is built from invalid parameters.

    Examples are a non-positive grid spacing, fewer than one interior point,
    an empty :class:`~fd_operators.operators.algebra.Combination` or a bias
    vector whose length does not match the linear part of an affine operator.
    The check happens in the constructor, never later in ``apply``.
    """


class ShapeMismatchError(FDOperatorError, ValueError):
    """Raised when a vector or operand has an incompatible size.

    Parameters
    ----------
    message : str
        Human readable description.
    expected, actual :
        The expected and received shapes (or lengths).
    operator :
        The operator that rejected the input, if any.

    Notes
    -----
    Inputs are never truncated or padded to make them fit.
    """

    def __init__(
        self,
        message: str,
        *,
        expected: Any = None,
        actual: Any = None,
        operator: Any = None,
    ) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual
        self.operator = operator
