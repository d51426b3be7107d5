from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import scipy.sparse as sp

from ..exceptions import OperatorConstructionError
from ..typing import FloatArray, MatrixLike, VectorLike
from .base import LinearOperator


@dataclass(frozen=True, slots=True, eq=False)
class ArrayOperator(LinearOperator):
    """Linear operator backed by an explicit matrix.

    Accepts a dense 2D array or any SciPy sparse matrix/array; the input is
    copied (sparse input is stored as CSR) so later changes to the caller's
    matrix do not leak in.
    """

    matrix: MatrixLike

    def __post_init__(self) -> None:
        if sp.issparse(self.matrix):
            M = sp.csr_array(self.matrix, dtype=float, copy=True)
        else:
            M = np.array(self.matrix, dtype=float)
            M.flags.writeable = False
        if M.ndim != 2:
            raise OperatorConstructionError(f"matrix must be 2D, got shape {M.shape}")
        if 0 in M.shape:
            raise OperatorConstructionError(f"matrix must be non-empty, got shape {M.shape}")
        object.__setattr__(self, "matrix", M)

    @property
    def shape(self) -> tuple[int, int]:
        n_out, n_in = self.matrix.shape
        return int(n_out), int(n_in)

    def _apply(self, x: FloatArray) -> FloatArray:
        return np.asarray(self.matrix @ x, dtype=float)

    def _materialize(self, sparse: bool) -> MatrixLike:
        if sparse:
            return sp.csr_array(self.matrix, copy=True)
        if sp.issparse(self.matrix):
            return self.matrix.toarray()
        return np.array(self.matrix)


def diagonal(values: VectorLike) -> ArrayOperator:
    """Diagonal coefficient operator ``diag(values)`` (stored sparse)."""
    v = np.asarray(values, dtype=float)
    if v.ndim != 1 or v.size == 0:
        raise OperatorConstructionError(
            f"diagonal values must be a non-empty 1D array, got shape {v.shape}"
        )
    return ArrayOperator(sp.diags_array(v, format="csr"))


def identity(n: int) -> ArrayOperator:
    return diagonal(np.ones(int(n), dtype=float))
