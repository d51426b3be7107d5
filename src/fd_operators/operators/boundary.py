from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import scipy.sparse as sp

from ..typing import FloatArray, MatrixLike
from ..validate import validate_interior_points, validate_spacing
from .base import AffineOperator, LinearOperator, finish_matrix

# --- Homogeneous extensions: interior vector (m,) -> extended vector (m+2,) ---


@dataclass(frozen=True, slots=True, eq=False)
class AbsorbingBE(LinearOperator):
    """Zero (homogeneous Dirichlet) extension: ``[0, x_1, ..., x_m, 0]``."""

    m: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "m", validate_interior_points(self.m))

    @property
    def shape(self) -> tuple[int, int]:
        return self.m + 2, self.m

    def _apply(self, x: FloatArray) -> FloatArray:
        return np.concatenate(([0.0], x, [0.0]))

    def _materialize(self, sparse: bool) -> MatrixLike:
        E = sp.diags_array(np.ones(self.m), offsets=-1, shape=self.shape, format="csr")
        return finish_matrix(E, sparse)


@dataclass(frozen=True, slots=True, eq=False)
class ReflectingBE(LinearOperator):
    """Copy-edge (homogeneous Neumann) extension: ``[x_1, x_1, ..., x_m, x_m]``."""

    m: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "m", validate_interior_points(self.m))

    @property
    def shape(self) -> tuple[int, int]:
        return self.m + 2, self.m

    def _apply(self, x: FloatArray) -> FloatArray:
        return np.concatenate((x[:1], x, x[-1:]))

    def _materialize(self, sparse: bool) -> MatrixLike:
        m = self.m
        rows = np.arange(m + 2)
        cols = np.concatenate(([0], np.arange(m), [m - 1]))
        E = sp.coo_array((np.ones(m + 2), (rows, cols)), shape=self.shape).tocsr()
        return finish_matrix(E, sparse)


# --- Non-homogeneous boundary conditions as affine extensions ---


def dirichlet_boundary(m: int, left_value: float, right_value: float) -> AffineOperator:
    """Fix the boundary values: ``[left_value, x_1, ..., x_m, right_value]``."""
    m = validate_interior_points(m)
    bias = np.zeros(m + 2, dtype=float)
    bias[0] = float(left_value)
    bias[-1] = float(right_value)
    return AffineOperator(AbsorbingBE(m), bias)


def neumann_boundary(
    m: int, dx: float, left_flux: float, right_flux: float
) -> AffineOperator:
    """Prescribe one-sided difference quotients at both ends.

    The extended vector ``y`` satisfies ``(y[1] - y[0]) / dx = left_flux`` and
    ``(y[-1] - y[-2]) / dx = right_flux``.
    """
    m = validate_interior_points(m)
    dx = validate_spacing(dx)
    bias = np.zeros(m + 2, dtype=float)
    bias[0] = -float(left_flux) * dx
    bias[-1] = float(right_flux) * dx
    return AffineOperator(ReflectingBE(m), bias)
