"""Build solvers from configuration and run them on loaded matrices."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from eigen_lab.algorithms.power_method import (
    InversePowerMethod,
    InversePowerMethodWithShift,
    PowerMethod,
    PowerMethodWithShift,
)
from eigen_lab.algorithms.qr_method import QRMethod
from eigen_lab.config import SolverConfig, SolverMethod
from eigen_lab.exceptions import InvalidInputError, SolverInitializationError

if TYPE_CHECKING:
    from eigen_lab.algorithms.base import EigenvalueSolver, SolveResult
    from eigen_lab.io.matrix_market import LoadedMatrix

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SolveReport:
    """What a run produced, for the reporting layer."""

    name: str
    """Matrix name."""

    config: SolverConfig
    """Configuration used."""

    solver: EigenvalueSolver
    """Solver instance (results readable through its accessors)."""

    result: SolveResult
    """Solve outcome."""


def create_solver(config: SolverConfig) -> EigenvalueSolver:
    """Instantiate and configure the solver named by ``config``.

    Raises:
        InvalidInputError: If a shifted method has no shift, or the shift is
            complex for a real scalar type.
        SolverInitializationError: If the configured method is not a known
            solver.
    """
    common = {
        "max_iterations": config.max_iterations,
        "tolerance": config.tolerance,
    }
    method = config.method

    if method is SolverMethod.QR:
        return QRMethod(
            config.scalar_type, sort_eigenvalues=config.sort_eigenvalues, **common
        )
    if method is SolverMethod.POWER:
        return PowerMethod(config.scalar_type, seed=config.seed, **common)
    if method is SolverMethod.INVERSE_POWER:
        return InversePowerMethod(config.scalar_type, seed=config.seed, **common)
    if method is SolverMethod.POWER_SHIFT:
        return PowerMethodWithShift(
            config.shift, config.scalar_type, seed=config.seed, **common
        )
    if method is SolverMethod.INVERSE_POWER_SHIFT:
        return InversePowerMethodWithShift(
            config.shift, config.scalar_type, seed=config.seed, **common
        )
    raise SolverInitializationError(f"Unsupported solver method: {method!r}")


def run_solver(config: SolverConfig, loaded: LoadedMatrix) -> SolveReport:
    """Solve the eigenvalue problem for a loaded matrix.

    Raises:
        InvalidInputError: If the matrix field does not match the solver
            field (complex matrix with a real solver or the reverse), or the
            matrix itself is invalid.
        IterationLimitExceeded: If a power-family solver does not converge.
        AlgebraError: If a required inversion fails.
    """
    if loaded.is_complex != config.is_complex:
        matrix_field = "complex" if loaded.is_complex else "real"
        raise InvalidInputError(
            f"Matrix '{loaded.name}' is {matrix_field} but the solver works over "
            f"{config.scalar_type.value}",
            tip=f"Use --field {matrix_field} for this matrix.",
        )

    solver = create_solver(config)
    solver.set_matrix(loaded.matrix)

    logger.info(
        "Solving %s (%dx%d) with %s over %s",
        loaded.name,
        loaded.matrix.shape[0],
        loaded.matrix.shape[1],
        config.method.value,
        config.scalar_type.value,
    )
    result = solver.solve()
    logger.info(
        "%s: %d eigenvalue(s) after %d iterations in %.3fs",
        loaded.name,
        result.eigenvalues.size,
        result.iterations,
        result.total_time,
    )
    return SolveReport(name=loaded.name, config=config, solver=solver, result=result)


__all__ = [
    "SolveReport",
    "create_solver",
    "run_solver",
]
