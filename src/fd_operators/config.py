from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SolveConfig:
    """Options for the right-division (``L \\ y``) glue.

    ``solver`` is a key of the solver registry, see
    :func:`fd_operators.numerics.solvers.available_solvers`.
    """

    solver: str = "dense"
    check_finite: bool = True

    def __post_init__(self) -> None:
        if not str(self.solver).strip():
            raise ValueError("solver must be a non-empty registry key")


@dataclass(frozen=True, slots=True)
class ToleranceConfig:
    rtol: float = 1e-9
    atol: float = 1e-12

    def __post_init__(self) -> None:
        if self.rtol < 0 or self.atol < 0:
            raise ValueError("rtol and atol must be >= 0")
        if self.rtol == 0 and self.atol == 0:
            raise ValueError("at least one of rtol, atol must be > 0")
