"""Lazy linear/affine operators and their algebra.

Leaves: :class:`ArrayOperator`, :class:`DiffusionOperator`,
:class:`DriftOperator`, :class:`AbsorbingBE`, :class:`ReflectingBE`.
Composites: :class:`Combination`, :class:`Composition`, :class:`AffineOperator`.
"""

from .algebra import (
    Combination,
    Composition,
    add,
    compose,
    freeze,
    negate,
    scale,
    subtract,
)
from .array import ArrayOperator, diagonal, identity
from .base import AffineOperator, LinearOperator, Operator
from .boundary import AbsorbingBE, ReflectingBE, dirichlet_boundary, neumann_boundary
from .stencils import DiffusionOperator, Direction, DriftOperator

__all__ = [
    # Capability set
    "Operator",
    "LinearOperator",
    "AffineOperator",
    # Leaves
    "ArrayOperator",
    "diagonal",
    "identity",
    "DiffusionOperator",
    "DriftOperator",
    "Direction",
    "AbsorbingBE",
    "ReflectingBE",
    "dirichlet_boundary",
    "neumann_boundary",
    # Algebra
    "Combination",
    "Composition",
    "add",
    "scale",
    "negate",
    "subtract",
    "compose",
    "freeze",
]
