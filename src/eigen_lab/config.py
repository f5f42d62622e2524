"""Solver configuration.

A SolverConfig names the algorithm and its parameters; it is validated on
construction so that bad combinations (a shifted method without a shift, a
non-positive budget) fail before any matrix is touched.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from eigen_lab.algorithms.base import DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE
from eigen_lab.data.scalar_types import ScalarType, get_spec, parse_scalar_type
from eigen_lab.exceptions import InvalidInputError, SolverInitializationError


class SolverMethod(Enum):
    """Available eigenvalue algorithms (values are the CLI selectors)."""

    QR = "qr"
    POWER = "pm"
    INVERSE_POWER = "im"
    POWER_SHIFT = "pms"
    INVERSE_POWER_SHIFT = "ims"

    @property
    def requires_shift(self) -> bool:
        return self in (SolverMethod.POWER_SHIFT, SolverMethod.INVERSE_POWER_SHIFT)

    @property
    def has_eigenvectors(self) -> bool:
        return self is not SolverMethod.QR

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS: dict[SolverMethod, str] = {
    SolverMethod.QR: "QR algorithm, full spectrum (no eigenvectors)",
    SolverMethod.POWER: "Power method, largest-magnitude eigenvalue",
    SolverMethod.INVERSE_POWER: "Inverse power method, smallest-magnitude eigenvalue",
    SolverMethod.POWER_SHIFT: "Power method on A - sI, farthest eigenvalue from s",
    SolverMethod.INVERSE_POWER_SHIFT: "Inverse power method on A - sI, eigenvalue closest to s",
}


def parse_method(name: str) -> SolverMethod:
    """Parse a CLI selector (qr, pm, im, pms, ims) into a SolverMethod."""
    normalized = name.strip().lower()
    for method in SolverMethod:
        if method.value == normalized:
            return method
    valid = [m.value for m in SolverMethod]
    raise InvalidInputError(f"Unknown solver method: '{name}'. Valid: {valid}")


@dataclass(frozen=True, slots=True)
class SolverConfig:
    """Configuration for one solver run."""

    method: SolverMethod
    """Algorithm to use."""

    scalar_type: ScalarType = ScalarType.FLOAT64
    """Scalar field ('real' maps to float64, 'complex' to complex128)."""

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    """Iteration budget."""

    tolerance: float = DEFAULT_TOLERANCE
    """Convergence threshold."""

    shift: complex | None = None
    """Shift point, mandatory for pms and ims."""

    seed: int | None = None
    """Seed for random starting vectors."""

    sort_eigenvalues: bool = True
    """Sort QR eigenvalues by descending magnitude."""

    def __post_init__(self) -> None:
        # Accept plain strings, as they arrive from the command line
        if isinstance(self.method, str):
            object.__setattr__(self, "method", parse_method(self.method))
        if not isinstance(self.method, SolverMethod):
            raise SolverInitializationError(
                f"Solver method must be a SolverMethod or its name, got {self.method!r}"
            )
        if isinstance(self.scalar_type, str):
            try:
                scalar_type = parse_scalar_type(self.scalar_type)
            except ValueError as exc:
                raise InvalidInputError(str(exc)) from exc
            object.__setattr__(self, "scalar_type", scalar_type)

        if self.max_iterations < 1:
            raise InvalidInputError(
                f"max_iterations must be positive, got {self.max_iterations}"
            )
        if self.tolerance < 0:
            raise InvalidInputError(
                f"tolerance must be non-negative, got {self.tolerance}"
            )
        if self.method.requires_shift and self.shift is None:
            raise InvalidInputError(
                f"Method '{self.method.value}' requires a shift",
                tip="Provide one with --shift <value>.",
            )

    @property
    def is_complex(self) -> bool:
        return get_spec(self.scalar_type).is_complex


__all__ = [
    "SolverConfig",
    "SolverMethod",
    "parse_method",
]
