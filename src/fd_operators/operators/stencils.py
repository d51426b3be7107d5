"""Finite-difference stencil operators on a uniform 1D grid.

Both operators map a boundary-extended vector of length ``m + 2`` (boundary
node, ``m`` interior nodes, boundary node) to the ``m`` interior values.
Boundary-extension operators (:mod:`fd_operators.operators.boundary`) supply
the extended vector.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..exceptions import OperatorConstructionError
from ..numerics.stencils import (
    d1_backward_coeffs,
    d1_forward_coeffs,
    d2_central_coeffs,
    interior_band_matrix,
)
from ..typing import FloatArray, MatrixLike
from ..validate import validate_interior_points, validate_spacing
from .base import LinearOperator, finish_matrix


class Direction(str, Enum):
    """Which neighbour a one-sided drift stencil differences against.

    With ``y`` the output for interior node ``i`` (extended index ``i + 1``):

    - RIGHT: ``y[i] = (x[i + 1] - x[i]) / dx``, uses the left neighbour
    - LEFT:  ``y[i] = (x[i + 2] - x[i + 1]) / dx``, uses the right neighbour
    """

    LEFT = "left"
    RIGHT = "right"


def _direction(value: Direction | str) -> Direction:
    if isinstance(value, Direction):
        return value
    try:
        return Direction(str(value).strip().lower())
    except ValueError as e:
        raise OperatorConstructionError(
            f"Unsupported direction: {value!r} (expected 'left' or 'right')"
        ) from e


@dataclass(frozen=True, slots=True, eq=False)
class DiffusionOperator(LinearOperator):
    """Centered second difference ``(x[i] + x[i+2] - 2 x[i+1]) / dx**2``.

    Parameters
    ----------
    dx : float
        Grid spacing, > 0.
    m : int
        Number of interior points, >= 1. Input length ``m + 2``, output ``m``.
    """

    dx: float
    m: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "dx", validate_spacing(self.dx))
        object.__setattr__(self, "m", validate_interior_points(self.m))

    @property
    def shape(self) -> tuple[int, int]:
        return self.m, self.m + 2

    def _apply(self, x: FloatArray) -> FloatArray:
        return (x[:-2] + x[2:] - 2.0 * x[1:-1]) / (self.dx * self.dx)

    def _materialize(self, sparse: bool) -> MatrixLike:
        return finish_matrix(interior_band_matrix(self.m, d2_central_coeffs(self.dx)), sparse)


@dataclass(frozen=True, slots=True, eq=False)
class DriftOperator(LinearOperator):
    """One-sided first difference; see :class:`Direction` for the two variants."""

    dx: float
    m: int
    direction: Direction = Direction.RIGHT

    def __post_init__(self) -> None:
        object.__setattr__(self, "dx", validate_spacing(self.dx))
        object.__setattr__(self, "m", validate_interior_points(self.m))
        object.__setattr__(self, "direction", _direction(self.direction))

    @property
    def shape(self) -> tuple[int, int]:
        return self.m, self.m + 2

    def _apply(self, x: FloatArray) -> FloatArray:
        if self.direction == Direction.RIGHT:
            return (x[1:-1] - x[:-2]) / self.dx
        return (x[2:] - x[1:-1]) / self.dx

    def _materialize(self, sparse: bool) -> MatrixLike:
        # Relative to interior node i+1: RIGHT is a backward difference, LEFT a forward one.
        if self.direction == Direction.RIGHT:
            coeffs = d1_backward_coeffs(self.dx)
        else:
            coeffs = d1_forward_coeffs(self.dx)
        return finish_matrix(interior_band_matrix(self.m, coeffs), sparse)
