"""
fd_operators

Lazy linear/affine operator algebra for 1D finite-difference discretizations.

Operators are combined symbolically and evaluated either directly on a vector
(``apply``) or as an explicit matrix (``materialize``); both paths agree. The
everyday API is re-exported here, so you can write, for example:

    from fd_operators import DiffusionOperator, ReflectingBE, solve
"""

import logging

from .config import SolveConfig, ToleranceConfig
from .exceptions import FDOperatorError, OperatorConstructionError, ShapeMismatchError
from .numerics.solvers import available_solvers, register_solver, solve
from .operators import (
    AbsorbingBE,
    AffineOperator,
    ArrayOperator,
    Combination,
    Composition,
    DiffusionOperator,
    Direction,
    DriftOperator,
    LinearOperator,
    Operator,
    ReflectingBE,
    diagonal,
    dirichlet_boundary,
    freeze,
    identity,
    neumann_boundary,
)
from .validate import ConsistencyResult, check_consistency

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Operators
    "Operator",
    "LinearOperator",
    "AffineOperator",
    "ArrayOperator",
    "Combination",
    "Composition",
    "DiffusionOperator",
    "DriftOperator",
    "Direction",
    "AbsorbingBE",
    "ReflectingBE",
    "diagonal",
    "identity",
    "dirichlet_boundary",
    "neumann_boundary",
    "freeze",
    # Solve
    "solve",
    "register_solver",
    "available_solvers",
    # Config
    "SolveConfig",
    "ToleranceConfig",
    # Errors
    "FDOperatorError",
    "OperatorConstructionError",
    "ShapeMismatchError",
    # Checks
    "ConsistencyResult",
    "check_consistency",
]
