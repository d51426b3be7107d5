# fd_operators/models/diffusion.py
"""
Upwind generator of a 1D diffusion process and implicit time stepping.

For a process ``dX = mu(x) dt + sigma(x) dW`` on a uniform grid with ``m``
interior nodes, the (backward Kolmogorov / HJB-type) generator

    G u = mu u_x + 0.5 sigma^2 u_xx

is discretized as::

    G = (diag(mu+) * Drift_left + diag(mu-) * Drift_right
         + diag(0.5 sigma^2) * Diffusion) * boundary

with ``mu+ = max(mu, 0)`` and ``mu- = min(mu, 0)``. Positive drift reads the
right neighbour and negative drift the left one, so the assembled matrix has
non-negative off-diagonals. The boundary operator extends the interior
vector; an affine boundary (non-homogeneous Dirichlet/Neumann) turns ``G``
into an affine operator.

Coefficient sampling is the caller's job: ``drift`` and ``variance`` are
already evaluated on the interior nodes.
"""

from __future__ import annotations

import logging
from typing import Literal

import numpy as np

from ..config import SolveConfig
from ..exceptions import OperatorConstructionError, ShapeMismatchError
from ..numerics.solvers import SolverLike, solve
from ..operators.algebra import freeze
from ..operators.array import diagonal, identity
from ..operators.base import Operator
from ..operators.boundary import AbsorbingBE, ReflectingBE
from ..operators.stencils import DiffusionOperator, Direction, DriftOperator
from ..typing import FloatArray, VectorLike
from ..validate import describe, validate_spacing, validate_vector

logger = logging.getLogger(__name__)

BoundaryKind = Literal["absorbing", "reflecting"]


def _resolve_boundary(boundary: BoundaryKind | Operator, m: int) -> Operator:
    if isinstance(boundary, Operator):
        if boundary.shape != (m + 2, m):
            raise ShapeMismatchError(
                f"boundary operator must have shape {(m + 2, m)}, got {describe(boundary)}",
                expected=(m + 2, m),
                actual=boundary.shape,
                operator=boundary,
            )
        return boundary

    key = str(boundary).strip().lower()
    if key == "absorbing":
        return AbsorbingBE(m)
    if key == "reflecting":
        return ReflectingBE(m)
    raise OperatorConstructionError(
        f"Unsupported boundary: {boundary!r} (expected 'absorbing', 'reflecting' or an operator)"
    )


def upwind_generator(
    dx: float,
    drift: VectorLike,
    variance: VectorLike,
    boundary: BoundaryKind | Operator = "reflecting",
) -> Operator:
    """Assemble the upwind generator from sampled coefficients.

    Parameters
    ----------
    dx:
        Uniform grid spacing.
    drift:
        ``mu`` at the ``m`` interior nodes.
    variance:
        ``sigma^2`` at the ``m`` interior nodes, must be >= 0.
    boundary:
        ``"absorbing"``, ``"reflecting"`` or any operator of shape ``(m+2, m)``
        such as :func:`~fd_operators.operators.boundary.dirichlet_boundary`.

    Returns
    -------
    Operator
        ``(m, m)`` linear operator, or affine if ``boundary`` is affine.
    """
    dx = validate_spacing(dx)
    mu = np.asarray(drift, dtype=float)
    if mu.ndim != 1 or mu.size == 0:
        raise OperatorConstructionError(f"drift must be a non-empty 1D array, got shape {mu.shape}")
    m = int(mu.size)
    var = validate_vector(variance, size=m, name="variance")
    if np.any(var < 0.0):
        raise OperatorConstructionError("variance must be >= 0")

    interior = (
        diagonal(np.maximum(mu, 0.0)) * DriftOperator(dx, m, Direction.LEFT)
        + diagonal(np.minimum(mu, 0.0)) * DriftOperator(dx, m, Direction.RIGHT)
        + diagonal(0.5 * var) * DiffusionOperator(dx, m)
    )
    G = interior * _resolve_boundary(boundary, m)
    logger.debug("assembled upwind generator %s", describe(G))
    return G


def implicit_euler_step(
    generator: Operator,
    u: VectorLike,
    dt: float,
    *,
    solver: SolverLike | None = None,
    config: SolveConfig | None = None,
) -> FloatArray:
    """One backward-Euler step ``u_next = u + dt * G(u_next)``.

    Solves ``(I - dt G) u_next = u``; an affine ``G = L + b`` moves
    ``dt * b`` to the right-hand side through the affine solve rule.
    """
    if not dt > 0.0:
        raise ValueError("dt must be > 0")
    m = generator.shape[0]
    system = identity(m) - float(dt) * generator
    return solve(system, u, solver=solver, config=config)


def march(
    generator: Operator,
    u0: VectorLike,
    dt: float,
    n_steps: int,
    *,
    solver: SolverLike | None = None,
    config: SolveConfig | None = None,
    store: Literal["all", "final"] = "all",
) -> FloatArray:
    """Repeat :func:`implicit_euler_step` ``n_steps`` times.

    The system operator is materialized once. Returns the ``(n_steps + 1, m)``
    history for ``store="all"`` or the final state for ``store="final"``.
    """
    if not dt > 0.0:
        raise ValueError("dt must be > 0")
    if n_steps < 0:
        raise ValueError("n_steps must be >= 0")
    if store not in ("all", "final"):
        raise ValueError("store must be 'all' or 'final'")

    m = generator.shape[0]
    u = validate_vector(u0, size=m, operator=generator, name="u0")
    system = freeze(identity(m) - float(dt) * generator)

    U = np.empty((n_steps + 1, m), dtype=float) if store == "all" else None
    if U is not None:
        U[0] = u
    for n in range(n_steps):
        u = solve(system, u, solver=solver, config=config)
        if U is not None:
            U[n + 1] = u

    logger.debug("marched %d implicit steps of size %g", n_steps, dt)
    return U if U is not None else u
