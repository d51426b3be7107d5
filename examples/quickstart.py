from __future__ import annotations


def main() -> None:
    # [START README_QUICKSTART]
    import numpy as np

    from fd_operators import (
        DiffusionOperator,
        DriftOperator,
        ReflectingBE,
        check_consistency,
        dirichlet_boundary,
        solve,
    )
    from fd_operators.models import march, upwind_generator

    m, dx = 50, 0.02
    x = dx * np.arange(1, m + 1)

    # Lazy expression: nothing is assembled until materialize().
    L = 0.5 * DiffusionOperator(dx, m) - DriftOperator(dx, m, "left")
    A = L * ReflectingBE(m)
    print("A:", A.shape, type(A).__name__)
    print("consistent:", check_consistency(A, np.sin(x)).ok)

    # Affine boundary, right division.
    B = DiffusionOperator(dx, m) * dirichlet_boundary(m, 1.0, 0.0)
    u = solve(B, np.zeros(m), solver="thomas")
    print("harmonic profile, first nodes:", u[:3])

    # Implicit time stepping with an upwind generator.
    G = upwind_generator(dx, drift=-x, variance=np.full(m, 0.1), boundary="reflecting")
    U = march(G, np.exp(-((x - 0.5) ** 2) / 0.01), dt=0.01, n_steps=20)
    print("mass drift:", U[-1].sum() - U[0].sum())
    # [END README_QUICKSTART]


if __name__ == "__main__":
    main()
