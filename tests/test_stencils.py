# tests/test_stencils.py

import numpy as np
import pytest

from fd_operators import (
    DiffusionOperator,
    Direction,
    DriftOperator,
    OperatorConstructionError,
    ShapeMismatchError,
)
from fd_operators.numerics.stencils import (
    d1_backward_coeffs,
    d1_forward_coeffs,
    d2_central_coeffs,
    interior_band_matrix,
)


def test_diffusion_concrete_values() -> None:
    D = DiffusionOperator(1.0, 2)
    np.testing.assert_array_equal(D.apply([0.0, 1.0, 4.0, 9.0]), [2.0, 2.0])


def test_drift_concrete_values() -> None:
    x = np.array([0.0, 1.0, 4.0, 9.0])
    np.testing.assert_array_equal(DriftOperator(1.0, 2, "right").apply(x), [1.0, 3.0])
    np.testing.assert_array_equal(DriftOperator(1.0, 2, "left").apply(x), [3.0, 5.0])


def test_diffusion_matches_literal_formula() -> None:
    rng = np.random.default_rng(11)
    m, dx = 9, 0.3
    x = rng.normal(size=m + 2)
    expected = np.array(
        [(x[i] + x[i + 2] - 2.0 * x[i + 1]) / dx**2 for i in range(m)]
    )
    np.testing.assert_allclose(DiffusionOperator(dx, m).apply(x), expected, rtol=1e-13)


def test_diffusion_exact_for_quadratic() -> None:
    """The centered 3-point stencil is exact for quadratics on a uniform grid."""
    rng = np.random.default_rng(456)
    m, dx = 15, 0.1
    grid = dx * np.arange(m + 2)
    a, b, c = rng.normal(size=3)
    y = a * grid**2 + b * grid + c

    approx = DiffusionOperator(dx, m).apply(y)
    np.testing.assert_allclose(approx, np.full(m, 2.0 * a), rtol=0.0, atol=1e-9)


@pytest.mark.parametrize("direction", ["left", "right"])
def test_drift_exact_for_linear(direction: str) -> None:
    m, dx = 6, 0.25
    grid = dx * np.arange(m + 2)
    y = 3.0 * grid - 1.0
    np.testing.assert_allclose(
        DriftOperator(dx, m, direction).apply(y), np.full(m, 3.0), atol=1e-12
    )


def test_diffusion_materialize_bands() -> None:
    dx = 0.5
    M = DiffusionOperator(dx, 3).materialize()
    expected = np.array(
        [
            [1.0, -2.0, 1.0, 0.0, 0.0],
            [0.0, 1.0, -2.0, 1.0, 0.0],
            [0.0, 0.0, 1.0, -2.0, 1.0],
        ]
    ) / dx**2
    assert M.shape == (3, 5)
    np.testing.assert_allclose(M, expected)


def test_drift_materialize_bands() -> None:
    R = DriftOperator(2.0, 2, Direction.RIGHT).materialize()
    L = DriftOperator(2.0, 2, Direction.LEFT).materialize()
    np.testing.assert_allclose(R, [[-0.5, 0.5, 0.0, 0.0], [0.0, -0.5, 0.5, 0.0]])
    np.testing.assert_allclose(L, [[0.0, -0.5, 0.5, 0.0], [0.0, 0.0, -0.5, 0.5]])


@pytest.mark.parametrize("m", [1, 2, 7, 40])
def test_stencils_apply_matches_materialize(m: int) -> None:
    rng = np.random.default_rng(100 + m)
    x = rng.normal(size=m + 2)
    for op in (
        DiffusionOperator(0.2, m),
        DriftOperator(0.2, m, "left"),
        DriftOperator(0.2, m, "right"),
    ):
        np.testing.assert_allclose(op.apply(x), op.materialize() @ x, rtol=1e-12, atol=1e-10)
        np.testing.assert_allclose(
            op.materialize(sparse=True).toarray(), op.materialize(), rtol=0, atol=0
        )


def test_coefficient_triples() -> None:
    assert d2_central_coeffs(0.5) == (4.0, -8.0, 4.0)
    assert d1_backward_coeffs(0.5) == (-2.0, 2.0, 0.0)
    assert d1_forward_coeffs(0.5) == (0.0, -2.0, 2.0)


def test_band_matrix_skips_zero_bands() -> None:
    B = interior_band_matrix(4, d1_forward_coeffs(1.0))
    assert B.shape == (4, 6)
    assert B.nnz == 8


@pytest.mark.parametrize("dx", [0.0, -1.0, float("nan"), float("inf")])
def test_invalid_spacing_rejected_at_construction(dx: float) -> None:
    with pytest.raises(OperatorConstructionError, match="dx"):
        DiffusionOperator(dx, 3)
    with pytest.raises(OperatorConstructionError, match="dx"):
        DriftOperator(dx, 3)


@pytest.mark.parametrize("m", [0, -2, 2.5, True])
def test_invalid_interior_count_rejected(m) -> None:
    with pytest.raises(OperatorConstructionError, match="m"):
        DiffusionOperator(1.0, m)


def test_invalid_direction_rejected() -> None:
    with pytest.raises(OperatorConstructionError, match="direction"):
        DriftOperator(1.0, 3, "up")


def test_direction_accepts_strings_case_insensitively() -> None:
    assert DriftOperator(1.0, 3, " LEFT ").direction is Direction.LEFT


def test_apply_rejects_wrong_length() -> None:
    D = DiffusionOperator(1.0, 4)
    with pytest.raises(ShapeMismatchError, match="length 6") as excinfo:
        D.apply(np.ones(4))
    assert excinfo.value.expected == 6
    assert excinfo.value.actual == 4
    assert excinfo.value.operator is D


def test_apply_rejects_2d_input() -> None:
    with pytest.raises(ShapeMismatchError, match="1D"):
        DriftOperator(1.0, 2).apply(np.ones((4, 1)))
