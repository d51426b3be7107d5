"""
Input validation shared by every operator.

Responsibility: tiny helpers that turn user input into clean float arrays or
raise the library's own errors, plus :func:`check_consistency`, which compares
the two evaluation paths (``apply`` vs ``materialize``) of an operator.

All constructors and ``apply`` calls go through the same helpers so that error
messages look the same whichever operator rejects the input.
"""

from __future__ import annotations

import math
import operator as _operator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from .config import ToleranceConfig
from .exceptions import OperatorConstructionError, ShapeMismatchError
from .typing import FloatArray, VectorLike

if TYPE_CHECKING:
    from .operators.base import Operator


def describe(op: Any) -> str:
    shape = getattr(op, "shape", None)
    return f"{type(op).__name__}{tuple(shape) if shape is not None else ''}"


def validate_spacing(dx: float, name: str = "dx") -> float:
    try:
        val = float(dx)
    except (TypeError, ValueError) as e:
        raise OperatorConstructionError(f"{name} must be a real number, got {dx!r}") from e
    if not math.isfinite(val) or val <= 0.0:
        raise OperatorConstructionError(f"{name} must be finite and > 0, got {val}")
    return val


def validate_interior_points(m: int, name: str = "m") -> int:
    if isinstance(m, bool):
        raise OperatorConstructionError(f"{name} must be an integer, got {m!r}")
    try:
        val = _operator.index(m)
    except TypeError as e:
        raise OperatorConstructionError(f"{name} must be an integer, got {m!r}") from e
    if val < 1:
        raise OperatorConstructionError(f"{name} must be >= 1, got {val}")
    return val


def validate_vector(
    x: VectorLike,
    *,
    size: int,
    operator: Any = None,
    name: str = "x",
) -> FloatArray:
    """Return ``x`` as a 1D float array of length ``size``.

    Raises
    ------
    ShapeMismatchError
        If ``x`` is not 1D or has the wrong length.
    """
    arr = np.asarray(x, dtype=float)
    where = f" for {describe(operator)}" if operator is not None else ""
    if arr.ndim != 1:
        raise ShapeMismatchError(
            f"{name} must be 1D{where}, got shape {arr.shape}",
            expected=(size,),
            actual=arr.shape,
            operator=operator,
        )
    if arr.shape[0] != size:
        raise ShapeMismatchError(
            f"{name} must have length {size}{where}, got {arr.shape[0]}",
            expected=size,
            actual=int(arr.shape[0]),
            operator=operator,
        )
    return arr


@dataclass(frozen=True, slots=True)
class ConsistencyResult:
    lazy: FloatArray
    explicit: FloatArray
    max_abs_error: float
    ok: bool


def check_consistency(
    op: Operator,
    x: VectorLike,
    tol: ToleranceConfig | None = None,
) -> ConsistencyResult:
    """Evaluate ``op`` on ``x`` through both paths and compare.

    The lazy path is ``op.apply(x)``; the explicit path is
    ``op.materialize() @ x`` plus the bias for affine operators. Disagreement
    is reported through ``ok`` rather than raised.
    """
    from .operators.base import AffineOperator

    tol = ToleranceConfig() if tol is None else tol
    xv = validate_vector(x, size=op.shape[1], operator=op)

    lazy = np.asarray(op.apply(xv), dtype=float)
    explicit = np.asarray(op.materialize() @ xv, dtype=float)
    if isinstance(op, AffineOperator):
        explicit = explicit + op.bias

    err = float(np.max(np.abs(lazy - explicit))) if lazy.size else 0.0
    ok = bool(np.allclose(lazy, explicit, rtol=tol.rtol, atol=tol.atol))
    return ConsistencyResult(lazy=lazy, explicit=explicit, max_abs_error=err, ok=ok)
