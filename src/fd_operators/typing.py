from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TypeAlias

import numpy as np
import scipy.sparse as sp
from numpy.typing import NDArray

# typing only
FloatArray: TypeAlias = NDArray[np.floating]
VectorLike: TypeAlias = FloatArray | Sequence[float]
MatrixLike: TypeAlias = FloatArray | sp.sparray | sp.spmatrix
SolverFn: TypeAlias = Callable[[MatrixLike, FloatArray], FloatArray]

# Runtime types
FloatDType = np.float64  # runtime dtype only
