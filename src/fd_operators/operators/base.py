"""Operator capability set and the two top-level operator kinds.

Every operator exposes

* ``shape``: ``(n_out, n_in)``;
* ``apply(x)``: lazy action on a vector of length ``n_in``;
* ``materialize(sparse=False)``: the explicit matrix, built by recursion over
  the operator tree and never by calling ``apply``.

For any operator built by the algebra, ``op.apply(x)`` equals
``op.materialize() @ x`` (plus ``op.bias`` for affine operators) up to
floating-point rounding.

Arithmetic is spelled with Python operators:

========================  ==================================================
``A + B``, ``A - B``      weighted sums (:class:`~.algebra.Combination`)
``alpha * A``, ``-A``     scalar scaling
``A * B``, ``A @ B``      composition, ``B`` is applied first
``A @ x``, ``A(x)``       same as ``A.apply(x)`` for a vector ``x``
``A.solve(y)``            right division ``A \\ y``
========================  ==================================================

Operators are immutable; every operation returns a new instance.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from numbers import Real
from typing import TYPE_CHECKING, Any

import numpy as np
import scipy.sparse as sp

from ..exceptions import OperatorConstructionError
from ..typing import FloatArray, MatrixLike, VectorLike
from ..validate import validate_vector

if TYPE_CHECKING:
    from ..config import SolveConfig
    from ..numerics.solvers import SolverLike


def is_scalar(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def finish_matrix(matrix: MatrixLike, sparse: bool) -> MatrixLike:
    """Return ``matrix`` as CSR if ``sparse`` else as a dense ndarray."""
    if sparse:
        return sp.csr_array(matrix)
    if sp.issparse(matrix):
        return matrix.toarray()
    return np.asarray(matrix, dtype=float)


class Operator(ABC):
    __slots__ = ()

    # Make numpy scalars defer to our reflected operators (2.0 * op).
    __array_ufunc__ = None

    @property
    @abstractmethod
    def shape(self) -> tuple[int, int]: ...

    @abstractmethod
    def apply(self, x: VectorLike) -> FloatArray: ...

    @abstractmethod
    def materialize(self, *, sparse: bool = False) -> MatrixLike: ...

    def __call__(self, x: VectorLike) -> FloatArray:
        return self.apply(x)

    def solve(
        self,
        y: VectorLike,
        *,
        solver: SolverLike | None = None,
        config: SolveConfig | None = None,
    ) -> FloatArray:
        """Right division ``self \\ y``, see :func:`fd_operators.numerics.solvers.solve`."""
        from ..numerics.solvers import solve

        return solve(self, y, solver=solver, config=config)

    # --- arithmetic -------------------------------------------------------

    def __add__(self, other: Any) -> Operator:
        from .algebra import add

        if isinstance(other, Operator):
            return add(self, other)
        return NotImplemented

    def __sub__(self, other: Any) -> Operator:
        from .algebra import subtract

        if isinstance(other, Operator):
            return subtract(self, other)
        return NotImplemented

    def __neg__(self) -> Operator:
        from .algebra import negate

        return negate(self)

    def __mul__(self, other: Any) -> Operator:
        from .algebra import compose, scale

        if is_scalar(other):
            return scale(other, self)
        if isinstance(other, Operator):
            return compose(self, other)
        return NotImplemented

    def __rmul__(self, other: Any) -> Operator:
        from .algebra import scale

        if is_scalar(other):
            return scale(other, self)
        return NotImplemented

    def __truediv__(self, other: Any) -> Operator:
        from .algebra import scale

        if is_scalar(other):
            return scale(1.0 / float(other), self)
        return NotImplemented

    def __matmul__(self, other: Any) -> Operator | FloatArray:
        from .algebra import compose

        if isinstance(other, Operator):
            return compose(self, other)
        return self.apply(other)


class LinearOperator(Operator):
    """Abstract linear operator.

    Subclasses implement ``_apply`` on an already validated float vector and
    ``_materialize`` returning either a dense or a CSR matrix.
    """

    __slots__ = ()

    def apply(self, x: VectorLike) -> FloatArray:
        xv = validate_vector(x, size=self.shape[1], operator=self)
        return self._apply(xv)

    def materialize(self, *, sparse: bool = False) -> MatrixLike:
        return self._materialize(sparse)

    @abstractmethod
    def _apply(self, x: FloatArray) -> FloatArray: ...

    @abstractmethod
    def _materialize(self, sparse: bool) -> MatrixLike: ...


@dataclass(frozen=True, slots=True, eq=False)
class AffineOperator(Operator):
    """Linear part plus a fixed bias: ``x -> linear(x) + bias``.

    Convention: :meth:`materialize` returns the matrix of the linear part
    only. The bias is never folded into it; callers needing the full affine
    map read :attr:`bias` alongside, or use :meth:`augmented` for the
    homogeneous-coordinates form.
    """

    linear: LinearOperator
    bias: FloatArray

    def __post_init__(self) -> None:
        if not isinstance(self.linear, LinearOperator):
            raise OperatorConstructionError(
                f"linear part must be a LinearOperator, got {type(self.linear).__name__}"
            )
        n_out = self.linear.shape[0]
        b = np.array(self.bias, dtype=float)
        if b.shape != (n_out,):
            raise OperatorConstructionError(
                f"bias must have shape {(n_out,)} got {b.shape}"
            )
        b.flags.writeable = False
        object.__setattr__(self, "bias", b)

    @property
    def shape(self) -> tuple[int, int]:
        return self.linear.shape

    def apply(self, x: VectorLike) -> FloatArray:
        return self.linear.apply(x) + self.bias

    def materialize(self, *, sparse: bool = False) -> MatrixLike:
        return self.linear.materialize(sparse=sparse)

    def augmented(self) -> FloatArray:
        """Dense ``(n_out + 1) x (n_in + 1)`` matrix ``[[L, b], [0, 1]]``."""
        n_out, n_in = self.shape
        out = np.zeros((n_out + 1, n_in + 1), dtype=float)
        out[:n_out, :n_in] = self.linear.materialize()
        out[:n_out, n_in] = self.bias
        out[n_out, n_in] = 1.0
        return out
