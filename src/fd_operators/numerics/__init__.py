# src/fd_operators/numerics/__init__.py
"""
Numerical building blocks (advanced API).

Stencil coefficients, tridiagonal band solvers and the solver registry used
by right division.
"""

from .solvers import (
    LinearSolver,
    available_solvers,
    register_solver,
    resolve_solver,
    solve,
)
from .stencils import d1_backward_coeffs, d1_forward_coeffs, d2_central_coeffs
from .tridiag import Tridiag, solve_tridiag_scipy, solve_tridiag_thomas

__all__ = [
    # Stencils
    "d2_central_coeffs",
    "d1_backward_coeffs",
    "d1_forward_coeffs",
    # Tridiagonal
    "Tridiag",
    "solve_tridiag_thomas",
    "solve_tridiag_scipy",
    # Solvers
    "LinearSolver",
    "register_solver",
    "available_solvers",
    "resolve_solver",
    "solve",
]
