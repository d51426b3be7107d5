"""Composite operators and the rules that build them.

Two composite kinds exist:

* :class:`Combination` stores a flat list of ``(coefficient, operand)`` pairs
  and represents ``sum_i c_i * O_i``.
* :class:`Composition` stores a flat list ``[O_1, ..., O_n]`` applied right to
  left: ``O_1(O_2(...O_n(x)))``. Index 0 is applied last.

The builder functions below flatten nested composites of the same kind, so
``(A + B) + C`` holds three terms and ``A * (B * C)`` holds three factors.
Affine operators are handled by pushing the bias through the rules

* ``L * Affine(M, b) = Affine(L * M, L(b))``
* ``Affine(M, b) * L = Affine(M * L, b)``
* ``Affine(M, b) * Affine(N, c) = Affine(M * N, M(c) + b)``
* ``alpha * Affine(M, b) = Affine(alpha * M, alpha * b)``
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import Any

import numpy as np

from ..exceptions import OperatorConstructionError, ShapeMismatchError
from ..typing import FloatArray, MatrixLike
from ..validate import describe
from .array import ArrayOperator
from .base import AffineOperator, LinearOperator, Operator, finish_matrix, is_scalar

__all__ = [
    "Combination",
    "Composition",
    "add",
    "scale",
    "negate",
    "subtract",
    "compose",
    "freeze",
]


def _require_linear(op: Any, role: str) -> LinearOperator:
    if not isinstance(op, LinearOperator):
        raise OperatorConstructionError(
            f"{role} must be a LinearOperator, got {type(op).__name__}"
        )
    return op


@dataclass(frozen=True, slots=True, eq=False)
class Combination(LinearOperator):
    """Weighted sum ``sum_i coefficients[i] * operands[i]``."""

    coefficients: tuple[float, ...]
    operands: tuple[LinearOperator, ...]

    def __post_init__(self) -> None:
        coeffs = tuple(float(c) for c in self.coefficients)
        ops = tuple(self.operands)
        if not ops:
            raise OperatorConstructionError("Combination needs at least one operand")
        if len(coeffs) != len(ops):
            raise OperatorConstructionError(
                f"Combination has {len(coeffs)} coefficients but {len(ops)} operands"
            )
        for op in ops:
            _require_linear(op, "Combination operand")
        shape = ops[0].shape
        for op in ops[1:]:
            if op.shape != shape:
                raise ShapeMismatchError(
                    f"cannot add {describe(op)} to an operator of shape {shape}",
                    expected=shape,
                    actual=op.shape,
                    operator=op,
                )
        object.__setattr__(self, "coefficients", coeffs)
        object.__setattr__(self, "operands", ops)

    @property
    def shape(self) -> tuple[int, int]:
        return self.operands[0].shape

    @property
    def terms(self) -> tuple[tuple[float, LinearOperator], ...]:
        return tuple(zip(self.coefficients, self.operands, strict=True))

    def __len__(self) -> int:
        return len(self.operands)

    def _apply(self, x: FloatArray) -> FloatArray:
        out = np.zeros(self.shape[0], dtype=float)
        for c, op in self.terms:
            out += c * op.apply(x)
        return out

    def _materialize(self, sparse: bool) -> MatrixLike:
        total = None
        for c, op in self.terms:
            term = c * op.materialize(sparse=sparse)
            total = term if total is None else total + term
        return finish_matrix(total, sparse)


@dataclass(frozen=True, slots=True, eq=False)
class Composition(LinearOperator):
    """Chained operators, applied right to left (``operands[-1]`` first)."""

    operands: tuple[LinearOperator, ...]

    def __post_init__(self) -> None:
        ops = tuple(self.operands)
        if not ops:
            raise OperatorConstructionError("Composition needs at least one operand")
        for op in ops:
            _require_linear(op, "Composition operand")
        for outer, inner in zip(ops[:-1], ops[1:]):
            if outer.shape[1] != inner.shape[0]:
                raise ShapeMismatchError(
                    f"cannot compose {describe(outer)} after {describe(inner)}: "
                    f"{describe(outer)} expects input length {outer.shape[1]}, "
                    f"{describe(inner)} produces {inner.shape[0]}",
                    expected=outer.shape[1],
                    actual=inner.shape[0],
                    operator=outer,
                )
        object.__setattr__(self, "operands", ops)

    @property
    def shape(self) -> tuple[int, int]:
        return self.operands[0].shape[0], self.operands[-1].shape[1]

    def __len__(self) -> int:
        return len(self.operands)

    def _apply(self, x: FloatArray) -> FloatArray:
        for op in reversed(self.operands):
            x = op.apply(x)
        return x

    def _materialize(self, sparse: bool) -> MatrixLike:
        mats = [op.materialize(sparse=sparse) for op in self.operands]
        return finish_matrix(reduce(lambda a, b: a @ b, mats), sparse)


# -----------------------------
# Builders
# -----------------------------


def _terms(op: LinearOperator) -> tuple[tuple[float, ...], tuple[LinearOperator, ...]]:
    if isinstance(op, Combination):
        return op.coefficients, op.operands
    return (1.0,), (op,)


def _factors(op: LinearOperator) -> tuple[LinearOperator, ...]:
    if isinstance(op, Composition):
        return op.operands
    return (op,)


def add(left: Operator, right: Operator) -> Operator:
    """Sum of two operators; combinations on either side are flattened."""
    if isinstance(left, AffineOperator) or isinstance(right, AffineOperator):
        left_lin = left.linear if isinstance(left, AffineOperator) else left
        right_lin = right.linear if isinstance(right, AffineOperator) else right
        linear = add(left_lin, right_lin)
        if isinstance(left, AffineOperator) and isinstance(right, AffineOperator):
            bias = left.bias + right.bias
        elif isinstance(left, AffineOperator):
            bias = left.bias
        else:
            assert isinstance(right, AffineOperator)
            bias = right.bias
        return AffineOperator(_require_linear(linear, "sum"), bias)

    lc, lo = _terms(_require_linear(left, "left operand"))
    rc, ro = _terms(_require_linear(right, "right operand"))
    return Combination(lc + rc, lo + ro)


def scale(alpha: float, op: Operator) -> Operator:
    """``alpha * op``; scales an existing combination's coefficients in place of nesting."""
    if not is_scalar(alpha):
        raise TypeError(f"alpha must be a real scalar, got {type(alpha).__name__}")
    a = float(alpha)
    if isinstance(op, AffineOperator):
        linear = scale(a, op.linear)
        return AffineOperator(_require_linear(linear, "scaled operator"), a * op.bias)

    coeffs, ops = _terms(_require_linear(op, "operand"))
    return Combination(tuple(a * c for c in coeffs), ops)


def negate(op: Operator) -> Operator:
    return scale(-1.0, op)


def subtract(left: Operator, right: Operator) -> Operator:
    return add(left, negate(right))


def compose(outer: Operator, inner: Operator) -> Operator:
    """Operator applying ``inner`` first, then ``outer``."""
    if isinstance(inner, AffineOperator):
        # outer(M x + c) = (outer M) x + outer(c)
        if isinstance(outer, AffineOperator):
            linear = compose(outer.linear, inner.linear)
            bias = outer.linear.apply(inner.bias) + outer.bias
        else:
            linear = compose(outer, inner.linear)
            bias = outer.apply(inner.bias)
        return AffineOperator(_require_linear(linear, "composition"), bias)

    if isinstance(outer, AffineOperator):
        linear = compose(outer.linear, inner)
        return AffineOperator(_require_linear(linear, "composition"), outer.bias)

    return Composition(
        _factors(_require_linear(outer, "outer operand"))
        + _factors(_require_linear(inner, "inner operand"))
    )


def freeze(op: Operator, *, sparse: bool = True) -> Operator:
    """Materialize ``op`` once and wrap the matrix as an :class:`ArrayOperator`.

    Useful when the same composite is applied or solved many times. Affine
    operators keep their bias.
    """
    if isinstance(op, AffineOperator):
        return AffineOperator(ArrayOperator(op.linear.materialize(sparse=sparse)), op.bias)
    return ArrayOperator(op.materialize(sparse=sparse))
