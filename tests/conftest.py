"""Pytest helpers for the fd_operators library."""

from __future__ import annotations

import numpy as np
import pytest

from fd_operators import (
    AbsorbingBE,
    DiffusionOperator,
    DriftOperator,
    ReflectingBE,
    diagonal,
)


@pytest.fixture
def rng():
    """Seeded RNG factory."""

    def _rng(seed: int) -> np.random.Generator:
        return np.random.default_rng(seed)

    return _rng


@pytest.fixture
def make_leaves():
    """Factory fixture for a consistent family of leaf operators on ``m`` nodes."""

    def _make(m: int, dx: float = 0.5, seed: int = 0) -> dict:
        r = np.random.default_rng(seed)
        return {
            "diffusion": DiffusionOperator(dx, m),
            "drift_left": DriftOperator(dx, m, "left"),
            "drift_right": DriftOperator(dx, m, "right"),
            "absorbing": AbsorbingBE(m),
            "reflecting": ReflectingBE(m),
            "coeff": diagonal(r.uniform(0.5, 2.0, size=m)),
        }

    return _make
