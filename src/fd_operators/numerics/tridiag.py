# src/fd_operators/numerics/tridiag.py
from __future__ import annotations

from dataclasses import dataclass
from typing import cast

import numpy as np
import scipy.sparse as sp
from numpy.typing import NDArray

from ..exceptions import ShapeMismatchError
from ..typing import MatrixLike

__all__ = [
    "Tridiag",
    "solve_tridiag_thomas",
    "solve_tridiag_scipy",
]


@dataclass(frozen=True, slots=True)
class Tridiag:
    """Square tridiagonal matrix stored by its three bands."""

    lower: NDArray[np.floating]
    diag: NDArray[np.floating]
    upper: NDArray[np.floating]

    def check(self) -> int:
        """Validate band shapes and return M (system size)."""
        diag = np.asarray(self.diag)
        if diag.ndim != 1 or diag.shape[0] == 0:
            raise ValueError("diag must be a non-empty 1D array")

        M = int(diag.shape[0])
        lower = np.asarray(self.lower)
        upper = np.asarray(self.upper)
        if lower.shape != (M - 1,) or upper.shape != (M - 1,):
            raise ValueError(
                f"lower/upper must have shape {(M - 1,)} got {lower.shape}, {upper.shape}"
            )
        return M

    @classmethod
    def from_matrix(cls, matrix: MatrixLike) -> Tridiag:
        """Extract the bands of a square matrix (dense or SciPy sparse).

        Raises ``ValueError`` if the matrix has entries outside the three
        central bands.
        """
        if sp.issparse(matrix):
            A = sp.dia_array(matrix)
            n_rows, n_cols = A.shape
            if A.offsets.size and np.any(np.abs(A.offsets) > 1):
                outside = np.abs(A.offsets) > 1
                if np.any(A.data[outside] != 0.0):
                    raise ValueError("matrix is not tridiagonal")
            dense_bands = {k: A.diagonal(k) for k in (-1, 0, 1)}
        else:
            A = np.asarray(matrix, dtype=float)
            if A.ndim != 2:
                raise ValueError(f"matrix must be 2D got shape {A.shape}")
            n_rows, n_cols = A.shape
            if np.any(np.triu(A, 2)) or np.any(np.tril(A, -2)):
                raise ValueError("matrix is not tridiagonal")
            dense_bands = {k: np.diagonal(A, k) for k in (-1, 0, 1)}

        if n_rows != n_cols:
            raise ShapeMismatchError(
                f"matrix must be square got {(n_rows, n_cols)}",
                expected=(n_rows, n_rows),
                actual=(n_rows, n_cols),
            )

        return cls(
            lower=np.array(dense_bands[-1], dtype=float),
            diag=np.array(dense_bands[0], dtype=float),
            upper=np.array(dense_bands[1], dtype=float),
        )


def solve_tridiag_thomas(A: Tridiag, rhs: NDArray[np.floating]) -> NDArray[np.floating]:
    """
    Solve A x = rhs for tridiagonal A.

    Notes:
    - Thomas algorithm without pivoting; meant for diagonally dominant systems
      such as ``I - dt * G`` for an upwind generator ``G``.
    - Raises np.linalg.LinAlgError on (near-)zero pivots.
    - Inputs are never modified.
    """
    M = A.check()

    rhs = np.asarray(rhs)
    if rhs.shape != (M,):
        raise ValueError(f"rhs must have shape {(M,)} got {rhs.shape}")

    dtype = np.result_type(A.lower, A.diag, A.upper, rhs, np.float64)
    lower = np.array(A.lower, dtype=dtype)
    diag = np.array(A.diag, dtype=dtype)
    c = np.array(A.upper, dtype=dtype)
    d = np.array(rhs, dtype=dtype)

    tol = 100.0 * np.finfo(dtype).eps

    denom = diag[0]
    if abs(denom) < tol:
        raise np.linalg.LinAlgError("Near-zero pivot at row 0")
    if M == 1:
        return cast(NDArray[np.floating], d / denom)

    # Forward sweep
    c[0] = c[0] / denom
    d[0] = d[0] / denom
    for i in range(1, M):
        denom = diag[i] - lower[i - 1] * c[i - 1]
        if abs(denom) < tol:
            raise np.linalg.LinAlgError(f"Near-zero pivot at row {i}")
        if i < M - 1:
            c[i] = c[i] / denom
        d[i] = (d[i] - lower[i - 1] * d[i - 1]) / denom

    # Back substitution
    x = np.empty(M, dtype=dtype)
    x[M - 1] = d[M - 1]
    for i in range(M - 2, -1, -1):
        x[i] = d[i] - c[i] * x[i + 1]
    return cast(NDArray[np.floating], x)


def solve_tridiag_scipy(A: Tridiag, rhs: NDArray[np.floating]) -> NDArray[np.floating]:
    """
    Solve using SciPy banded solver. SciPy is imported lazily.

    Singular systems raise np.linalg.LinAlgError from SciPy.
    """
    from scipy.linalg import (
        solve_banded,  # local import to avoid import-time dependency
    )

    M = A.check()
    rhs = np.asarray(rhs)
    if rhs.shape != (M,):
        raise ValueError(f"rhs must have shape {(M,)} got {rhs.shape}")

    ab = np.zeros((3, M), dtype=np.result_type(A.lower, A.diag, A.upper, rhs))
    ab[0, 1:] = np.asarray(A.upper)
    ab[1, :] = np.asarray(A.diag)
    ab[2, :-1] = np.asarray(A.lower)

    res = solve_banded((1, 1), ab, rhs)
    # scipy stubs often return Any; cast back to an NDArray
    return cast(NDArray[np.floating], np.asarray(res))
