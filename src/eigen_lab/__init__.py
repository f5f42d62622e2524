"""Eigen Lab: Iterative eigenvalue solvers over real and complex fields."""

__version__ = "0.1.0"

from eigen_lab.algorithms import (
    EigenvalueSolver,
    InversePowerMethod,
    InversePowerMethodWithShift,
    PowerMethod,
    PowerMethodWithShift,
    QRMethod,
    SolveResult,
)
from eigen_lab.data.scalar_types import ScalarType
from eigen_lab.exceptions import (
    AlgebraError,
    InvalidInputError,
    IterationLimitExceeded,
    NotImplementedSolverError,
    SolverError,
)

__all__ = [
    "__version__",
    "AlgebraError",
    "EigenvalueSolver",
    "InvalidInputError",
    "InversePowerMethod",
    "InversePowerMethodWithShift",
    "IterationLimitExceeded",
    "NotImplementedSolverError",
    "PowerMethod",
    "PowerMethodWithShift",
    "QRMethod",
    "ScalarType",
    "SolveResult",
    "SolverError",
]
