"""
numerics/stencils.py (pure coefficients/weights)
Responsibility: return 3-point stencil coefficients on a uniform grid and lay
them out as band matrices; no operator logic.

Every stencil here acts on a boundary-extended vector of length ``m + 2`` and
produces ``m`` interior values. Row ``i`` of the band matrix reads the
extended entries ``i, i + 1, i + 2``, so a coefficient triple ``(dl, dd, du)``
sits at column offsets ``(0, 1, 2)``.
"""

from __future__ import annotations

import numpy as np
import scipy.sparse as sp

STENCIL_OFFSETS: tuple[int, int, int] = (0, 1, 2)


def d2_central_coeffs(dx: float) -> tuple[float, float, float]:
    """Central 3-point coefficients for the second derivative.

    Returns ``(dl, dd, du)`` such that::

        y''(x_i) ≈ dl*y_{i-1} + dd*y_i + du*y_{i+1}

    which is ``(1, -2, 1) / dx**2``.
    """
    h2 = dx * dx
    return 1.0 / h2, -2.0 / h2, 1.0 / h2


def d1_backward_coeffs(dx: float) -> tuple[float, float, float]:  # (y_i - y_{i-1})/dx
    return -1.0 / dx, 1.0 / dx, 0.0


def d1_forward_coeffs(dx: float) -> tuple[float, float, float]:  # (y_{i+1} - y_i)/dx
    return 0.0, -1.0 / dx, 1.0 / dx


def interior_band_matrix(
    m: int, coeffs: tuple[float, float, float]
) -> sp.csr_array:
    """Lay a coefficient triple out as an ``m x (m + 2)`` CSR band matrix.

    Bands whose coefficient is exactly zero are left out, so one-sided
    stencils store two bands only.
    """
    bands = []
    offsets = []
    for c, k in zip(coeffs, STENCIL_OFFSETS, strict=True):
        if c != 0.0:
            bands.append(np.full(m, c, dtype=float))
            offsets.append(k)
    return sp.diags_array(bands, offsets=offsets, shape=(m, m + 2), format="csr")
