"""Linear solvers and a small registry.

This module provides three things:

1) A lightweight *solver interface* (:class:`LinearSolver`): given a square
   matrix and a right-hand side, return the solution or raise
   ``numpy.linalg.LinAlgError`` for singular/ill-conditioned systems.
2) A string-to-solver *registry* so users can write ``solver="sparse"`` (or
   register their own) without touching :func:`solve`.
3) :func:`solve`, the right division ``op \\ y``: materialize the operator and
   hand the matrix to the solver. Affine operators solve ``L x = y - b``.

Solver failures are never caught here.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, TypeAlias, cast, runtime_checkable

import numpy as np
import scipy.linalg
import scipy.sparse as sp
from scipy.sparse.linalg import MatrixRankWarning, spsolve

from ..config import SolveConfig
from ..exceptions import ShapeMismatchError
from ..operators.base import AffineOperator, Operator
from ..typing import FloatArray, MatrixLike, SolverFn, VectorLike
from ..validate import describe, validate_vector
from .tridiag import Tridiag, solve_tridiag_scipy, solve_tridiag_thomas

logger = logging.getLogger(__name__)


@runtime_checkable
class LinearSolver(Protocol):
    """A linear solver for ``A x = rhs``.

    ``wants_sparse`` tells :func:`solve` which materialization to build.
    """

    @property
    def name(self) -> str:  # pragma: no cover
        ...

    @property
    def wants_sparse(self) -> bool:  # pragma: no cover
        ...

    def solve(
        self, matrix: MatrixLike, rhs: FloatArray, *, config: SolveConfig
    ) -> FloatArray:  # pragma: no cover
        ...


@dataclass(frozen=True, slots=True)
class DenseSolver:
    """LU solve through ``numpy.linalg.solve``."""

    name: str = "dense"
    wants_sparse: bool = False

    def solve(self, matrix: MatrixLike, rhs: FloatArray, *, config: SolveConfig) -> FloatArray:
        return np.linalg.solve(np.asarray(matrix, dtype=float), rhs)


@dataclass(frozen=True, slots=True)
class ScipySolver:
    """LU solve through ``scipy.linalg.solve``."""

    name: str = "scipy"
    wants_sparse: bool = False

    def solve(self, matrix: MatrixLike, rhs: FloatArray, *, config: SolveConfig) -> FloatArray:
        res = scipy.linalg.solve(
            np.asarray(matrix, dtype=float), rhs, check_finite=config.check_finite
        )
        return cast(FloatArray, np.asarray(res))


@dataclass(frozen=True, slots=True)
class SparseSolver:
    """Sparse direct solve through ``scipy.sparse.linalg.spsolve``.

    SciPy only warns about exactly singular matrices and returns NaNs; both
    are turned into ``LinAlgError`` so every solver fails the same way.
    """

    name: str = "sparse"
    wants_sparse: bool = True

    def solve(self, matrix: MatrixLike, rhs: FloatArray, *, config: SolveConfig) -> FloatArray:
        A = sp.csc_array(matrix)
        with warnings.catch_warnings():
            warnings.simplefilter("error", MatrixRankWarning)
            try:
                x = np.asarray(spsolve(A, rhs), dtype=float)
            except MatrixRankWarning as e:
                raise np.linalg.LinAlgError("Singular matrix") from e
        if config.check_finite and not np.all(np.isfinite(x)):
            raise np.linalg.LinAlgError("Sparse solve produced non-finite values")
        return x


@dataclass(frozen=True, slots=True)
class TridiagSolver:
    """Band solve for tridiagonal systems (Thomas or SciPy ``solve_banded``)."""

    name: str = "thomas"
    wants_sparse: bool = True
    banded: Callable[[Tridiag, FloatArray], FloatArray] = solve_tridiag_thomas

    def solve(self, matrix: MatrixLike, rhs: FloatArray, *, config: SolveConfig) -> FloatArray:
        return self.banded(Tridiag.from_matrix(matrix), rhs)


@dataclass(frozen=True, slots=True)
class CallableSolver:
    """Adapter for a plain ``fn(matrix, rhs) -> x`` callable (dense input)."""

    fn: SolverFn
    name: str = "callable"
    wants_sparse: bool = False

    def solve(self, matrix: MatrixLike, rhs: FloatArray, *, config: SolveConfig) -> FloatArray:
        return cast(FloatArray, np.asarray(self.fn(matrix, rhs), dtype=float))


SolverLike: TypeAlias = str | LinearSolver | SolverFn

# -----------------------------
# Registry
# -----------------------------

SolverFactory = Callable[[], LinearSolver]
_SOLVER_REGISTRY: dict[str, SolverFactory] = {}


def register_solver(
    name: str,
    factory: SolverFactory,
    *,
    overwrite: bool = False,
    aliases: tuple[str, ...] = (),
) -> None:
    """Register a solver factory under one or more names.

    Parameters
    ----------
    name:
        Primary key users will pass to ``solve(..., solver=...)``.
    factory:
        Callable returning a new solver instance.
    overwrite:
        If False (default), raise if ``name`` or any alias already exists.
    aliases:
        Additional strings that should resolve to the same factory.
    """

    keys = (name, *aliases)
    for k in keys:
        kk = str(k).lower().strip()
        if not kk:
            raise ValueError("Solver name/alias cannot be empty")
        if (not overwrite) and (kk in _SOLVER_REGISTRY):
            raise KeyError(f"Solver '{kk}' is already registered")
        _SOLVER_REGISTRY[kk] = factory


def available_solvers() -> list[str]:
    """Return the currently registered solver keys (sorted)."""

    return sorted(_SOLVER_REGISTRY.keys())


def resolve_solver(solver: SolverLike | None) -> LinearSolver:
    """Resolve the user's solver choice into a concrete :class:`LinearSolver`.

    Resolution order:
    1) ``None`` -> "dense".
    2) A :class:`LinearSolver` instance -> returned as is.
    3) A string -> looked up in the registry.
    4) Any other callable -> wrapped in :class:`CallableSolver`.
    """

    if solver is None:
        solver = "dense"

    if isinstance(solver, LinearSolver):
        return solver

    if isinstance(solver, str):
        key = solver.lower().strip()
        try:
            factory = _SOLVER_REGISTRY[key]
        except KeyError as e:
            raise ValueError(
                f"Unknown solver '{solver}'. Available: {', '.join(available_solvers())}"
            ) from e
        return factory()

    if callable(solver):
        return CallableSolver(fn=solver)

    raise TypeError(f"Cannot interpret {solver!r} as a linear solver")


def _register_builtin_solvers() -> None:
    register_solver("dense", DenseSolver, overwrite=True, aliases=("numpy", "lu"))
    register_solver("scipy", ScipySolver, overwrite=True)
    register_solver("sparse", SparseSolver, overwrite=True, aliases=("spsolve",))
    register_solver(
        "thomas", TridiagSolver, overwrite=True, aliases=("tridiag",)
    )
    register_solver(
        "banded",
        lambda: TridiagSolver(name="banded", banded=solve_tridiag_scipy),
        overwrite=True,
        aliases=("solve_banded",),
    )


_register_builtin_solvers()


# -----------------------------
# Right division
# -----------------------------


def solve(
    op: Operator,
    y: VectorLike,
    *,
    solver: SolverLike | None = None,
    config: SolveConfig | None = None,
) -> FloatArray:
    """Right division ``op \\ y``.

    For a linear ``L`` this is ``solver(L.materialize(), y)``; for an affine
    ``Affine(L, b)`` it is ``L \\ (y - b)`` since ``L x + b = y``.

    Raises
    ------
    ShapeMismatchError
        If ``op`` is not square or ``y`` has the wrong length.
    numpy.linalg.LinAlgError
        Propagated from the solver for singular systems.
    """
    cfg = SolveConfig() if config is None else config
    n_out, n_in = op.shape
    if n_out != n_in:
        raise ShapeMismatchError(
            f"right division needs a square operator, got {describe(op)}",
            expected=(n_out, n_out),
            actual=(n_out, n_in),
            operator=op,
        )

    rhs = validate_vector(y, size=n_out, operator=op, name="y")
    if isinstance(op, AffineOperator):
        rhs = rhs - op.bias
        op = op.linear

    impl = resolve_solver(cfg.solver if solver is None else solver)
    logger.debug("solving %s with solver=%s", describe(op), impl.name)
    matrix = op.materialize(sparse=impl.wants_sparse)
    x = impl.solve(matrix, rhs, config=cfg)
    return cast(FloatArray, np.asarray(x, dtype=float))
