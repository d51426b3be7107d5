# tests/test_solvers.py
import numpy as np
import pytest

from fd_operators import (
    ArrayOperator,
    DiffusionOperator,
    ReflectingBE,
    ShapeMismatchError,
    SolveConfig,
    available_solvers,
    dirichlet_boundary,
    identity,
    register_solver,
    solve,
)
from fd_operators.numerics.solvers import DenseSolver, resolve_solver
from fd_operators.numerics.tridiag import Tridiag, solve_tridiag_scipy, solve_tridiag_thomas


def make_diag_dominant_tridiag(rng: np.random.Generator, M: int) -> Tridiag:
    """Create a random *strictly diagonally dominant* tridiagonal system."""
    lower = rng.normal(size=M - 1)
    upper = rng.normal(size=M - 1)
    diag = 1.0 + np.abs(rng.normal(size=M))
    diag[:-1] += np.abs(upper)
    diag[1:] += np.abs(lower)
    return Tridiag(lower=lower, diag=diag, upper=upper)


def _dense(T: Tridiag) -> np.ndarray:
    M = T.check()
    A = np.diag(T.diag)
    if M > 1:
        A += np.diag(T.lower, -1) + np.diag(T.upper, 1)
    return A


def _heat_system(m: int, dt: float = 0.1, dx: float = 0.5):
    """``I - dt * D * R``: tridiagonal, diagonally dominant, non-singular."""
    return identity(m) - dt * (DiffusionOperator(dx, m) * ReflectingBE(m))


# --- Tridiagonal kernels -----------------------------------------------------


@pytest.mark.parametrize("M", [1, 2, 3, 10, 50])
def test_thomas_matches_scipy_and_dense(M: int) -> None:
    rng = np.random.default_rng(12345 + M)
    T = make_diag_dominant_tridiag(rng, M)
    rhs = rng.normal(size=M)

    x_dense = np.linalg.solve(_dense(T), rhs)
    np.testing.assert_allclose(solve_tridiag_thomas(T, rhs), x_dense, rtol=1e-10, atol=1e-12)
    np.testing.assert_allclose(solve_tridiag_scipy(T, rhs), x_dense, rtol=1e-10, atol=1e-12)


def test_thomas_does_not_modify_inputs() -> None:
    rng = np.random.default_rng(999)
    T = make_diag_dominant_tridiag(rng, 6)
    rhs = rng.normal(size=6)
    lower0, diag0, upper0, rhs0 = T.lower.copy(), T.diag.copy(), T.upper.copy(), rhs.copy()

    _ = solve_tridiag_thomas(T, rhs)
    np.testing.assert_array_equal(T.lower, lower0)
    np.testing.assert_array_equal(T.diag, diag0)
    np.testing.assert_array_equal(T.upper, upper0)
    np.testing.assert_array_equal(rhs, rhs0)


def test_thomas_zero_pivot_raises() -> None:
    T = Tridiag(lower=np.array([1.0]), diag=np.array([0.0, 1.0]), upper=np.array([1.0]))
    with pytest.raises(np.linalg.LinAlgError, match="pivot"):
        solve_tridiag_thomas(T, np.ones(2))


def test_tridiag_from_matrix_round_trip() -> None:
    rng = np.random.default_rng(4)
    T = make_diag_dominant_tridiag(rng, 5)
    A = _dense(T)
    for source in (A, _heat_system(5).materialize(sparse=True)):
        back = Tridiag.from_matrix(source)
        assert back.check() == 5
    back = Tridiag.from_matrix(A)
    np.testing.assert_array_equal(back.lower, T.lower)
    np.testing.assert_array_equal(back.diag, T.diag)
    np.testing.assert_array_equal(back.upper, T.upper)


def test_tridiag_from_matrix_rejects_wide_bands() -> None:
    A = np.eye(4)
    A[0, 3] = 1.0
    with pytest.raises(ValueError, match="not tridiagonal"):
        Tridiag.from_matrix(A)


def test_tridiag_shape_errors() -> None:
    with pytest.raises(ValueError, match="lower/upper"):
        Tridiag(lower=np.zeros(2), diag=np.ones(2), upper=np.zeros(1)).check()
    T = Tridiag(lower=np.zeros(1), diag=np.ones(2), upper=np.zeros(1))
    with pytest.raises(ValueError, match="rhs"):
        solve_tridiag_thomas(T, np.ones(3))


# --- Right division ----------------------------------------------------------


@pytest.mark.parametrize("solver", ["dense", "numpy", "scipy", "sparse", "thomas", "banded"])
@pytest.mark.parametrize("m", [1, 4, 25])
def test_builtin_solvers_agree(solver: str, m: int) -> None:
    op = _heat_system(m)
    y = np.random.default_rng(m).normal(size=m)
    expected = np.linalg.solve(op.materialize(), y)

    x = solve(op, y, solver=solver)
    np.testing.assert_allclose(x, expected, rtol=1e-10, atol=1e-12)
    np.testing.assert_allclose(op.apply(x), y, rtol=1e-9, atol=1e-10)


def test_operator_solve_method_uses_config() -> None:
    op = _heat_system(6)
    y = np.linspace(0.0, 1.0, 6)
    x = op.solve(y, config=SolveConfig(solver="sparse"))
    np.testing.assert_allclose(op.apply(x), y, atol=1e-10)


def test_affine_solve_subtracts_bias() -> None:
    m = 5
    A = identity(m) - 0.1 * (DiffusionOperator(0.5, m) * dirichlet_boundary(m, 1.0, 2.0))
    y = np.random.default_rng(2).normal(size=m)
    x = solve(A, y)
    np.testing.assert_allclose(A.apply(x), y, rtol=1e-10, atol=1e-10)
    np.testing.assert_allclose(
        x, np.linalg.solve(A.materialize(), y - A.bias), rtol=1e-12, atol=1e-12
    )


@pytest.mark.parametrize("solver", ["dense", "scipy", "sparse", "thomas", "banded"])
def test_singular_system_surfaces_solver_error(solver: str) -> None:
    # D * R annihilates constants, so it is singular.
    op = DiffusionOperator(1.0, 4) * ReflectingBE(4)
    with pytest.raises(np.linalg.LinAlgError):
        solve(op, np.ones(4), solver=solver)


def test_non_square_operator_rejected() -> None:
    with pytest.raises(ShapeMismatchError, match="square"):
        solve(DiffusionOperator(1.0, 3), np.ones(3))


def test_rhs_length_checked() -> None:
    with pytest.raises(ShapeMismatchError, match="y must have length 4"):
        solve(_heat_system(4), np.ones(5))


def test_callable_solver_is_wrapped() -> None:
    calls = []

    def my_solver(matrix, rhs):
        calls.append(matrix.shape)
        return np.linalg.solve(matrix, rhs)

    op = ArrayOperator(np.array([[2.0, 0.0], [0.0, 4.0]]))
    np.testing.assert_allclose(solve(op, [2.0, 2.0], solver=my_solver), [1.0, 0.5])
    assert calls == [(2, 2)]


def test_registry() -> None:
    keys = available_solvers()
    for k in ("dense", "numpy", "scipy", "sparse", "thomas", "banded"):
        assert k in keys

    with pytest.raises(ValueError, match="Unknown solver"):
        resolve_solver("nope")
    with pytest.raises(KeyError, match="already registered"):
        register_solver("dense", DenseSolver)

    register_solver("test-dense-copy", DenseSolver, overwrite=True, aliases=("TDC",))
    assert isinstance(resolve_solver(" tdc "), DenseSolver)
    assert resolve_solver(None).name == "dense"


def test_solve_config_validation() -> None:
    with pytest.raises(ValueError):
        SolveConfig(solver="  ")
