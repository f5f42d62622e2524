"""Power-method family of eigenvalue solvers.

Four algorithms that differ only in the operator they iterate and in how the
Rayleigh quotient of that operator maps back to an eigenvalue of A:

    PowerMethod                  A           -> rho          (largest |lambda|)
    InversePowerMethod           A^-1        -> 1/rho        (smallest |lambda|)
    PowerMethodWithShift         A - sI      -> rho + s      (farthest from s)
    InversePowerMethodWithShift  (A - sI)^-1 -> 1/rho + s    (closest to s)

The operator is built once when the matrix (or shift) is set, so singular
inversions surface at configuration time. The iteration loop itself lives in
power_iteration and is shared by composition.

References:
- Golub & Van Loan: "Matrix Computations" (4th ed.), §7.3 and §8.2
- Saad: "Numerical Methods for Large Eigenvalue Problems" (2011), ch. 4
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

import numpy as np

from eigen_lab.algorithms.base import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    EigenvalueSolver,
    SolveResult,
)
from eigen_lab.algorithms.power_iteration import (
    PowerIteration,
    iterate_until_converged,
    rayleigh_quotient,
)
from eigen_lab.data.scalar_types import ScalarType
from eigen_lab.exceptions import (
    AlgebraError,
    InvalidInputError,
    IterationLimitExceeded,
)

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SpectralTransform:
    """Maps a matrix to the operator a power iteration runs on, and back."""

    name: str
    """Short identifier (pm, im, pms, ims)."""

    shifted: bool
    """Subtract shift * I before iterating."""

    inverted: bool
    """Iterate with the inverse of the (shifted) matrix."""

    def build_operator(self, matrix: NDArray[Any], shift: Any) -> NDArray[Any]:
        """Return the iteration operator for ``matrix``.

        Raises:
            AlgebraError: If an inverse is required and the (shifted) matrix
                is singular or too ill-conditioned to invert.
        """
        operator = matrix
        if self.shifted:
            operator = matrix - shift * np.eye(matrix.shape[0], dtype=matrix.dtype)
        if self.inverted:
            operator = invert_matrix(operator)
        return operator

    def recover(self, rayleigh: complex, shift: Any) -> complex:
        """Map a Rayleigh quotient of the operator to an eigenvalue of A."""
        value = rayleigh
        if self.inverted:
            if rayleigh == 0:
                raise AlgebraError(
                    "Rayleigh quotient of the inverse vanished; cannot invert it"
                )
            value = 1 / value
        if self.shifted:
            value += complex(shift)
        return value


DIRECT = SpectralTransform(name="pm", shifted=False, inverted=False)
INVERSE = SpectralTransform(name="im", shifted=False, inverted=True)
SHIFTED = SpectralTransform(name="pms", shifted=True, inverted=False)
SHIFTED_INVERSE = SpectralTransform(name="ims", shifted=True, inverted=True)


def invert_matrix(matrix: NDArray[Any]) -> NDArray[Any]:
    """Invert a matrix, refusing singular or numerically singular input.

    Raises:
        AlgebraError: If the matrix cannot be inverted reliably in its
            working precision.
    """
    # Same rank threshold as np.linalg.matrix_rank
    singular_values = np.linalg.svd(matrix, compute_uv=False)
    largest = float(singular_values.max())
    smallest = float(singular_values.min())
    threshold = largest * max(matrix.shape) * np.finfo(matrix.dtype).eps
    if not np.isfinite(largest) or smallest <= threshold:
        raise AlgebraError(
            f"Matrix is singular to working precision (smallest singular value {smallest:.3e})",
            tip="If a shift is used, move it away from the eigenvalue it coincides with.",
        )
    try:
        inverse = np.linalg.inv(matrix)
    except np.linalg.LinAlgError as exc:
        raise AlgebraError(f"Matrix inversion failed: {exc}") from exc
    if not np.all(np.isfinite(inverse)):
        raise AlgebraError("Matrix inversion produced non-finite entries")
    return inverse


class PowerFamilySolver(EigenvalueSolver):
    """Power iteration on a transformed operator.

    Concrete algorithms only choose the SpectralTransform; configuration,
    the iteration loop and result handling are shared.

    Args:
        scalar_type: Scalar field the solver works over.
        max_iterations: Iteration budget.
        tolerance: Threshold on the displacement between unit iterates.
        seed: Seed (or Generator) for the random starting vectors.
        record_history: Keep per-iteration displacements in the result.
    """

    transform: ClassVar[SpectralTransform] = DIRECT

    def __init__(
        self,
        scalar_type: ScalarType | str = ScalarType.FLOAT64,
        *,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        tolerance: float | complex = DEFAULT_TOLERANCE,
        seed: int | np.random.Generator | None = None,
        record_history: bool = False,
    ) -> None:
        super().__init__(
            scalar_type, max_iterations=max_iterations, tolerance=tolerance
        )
        self._rng = np.random.default_rng(seed)
        self._record_history = record_history
        self._shift = self._dtype.type(0)
        self._operator: NDArray[Any] | None = None

    @property
    def name(self) -> str:  # type: ignore[override]
        return self.transform.name

    def set_matrix(self, matrix: ArrayLike) -> None:
        """Store the matrix and build the iteration operator.

        Raises:
            InvalidInputError: If the matrix is empty, not square, or of the
                wrong scalar field.
            AlgebraError: If the operator needs an inverse that does not exist.
        """
        validated = self._validate_matrix(matrix)
        operator = self.transform.build_operator(validated, self._shift)
        self._matrix = validated
        self._operator = operator
        self._result = None

    def solve(self) -> SolveResult:
        """Iterate from a fresh random vector until converged.

        Raises:
            InvalidInputError: If no matrix has been set.
            IterationLimitExceeded: If the budget runs out first.
            AlgebraError: If the iteration breaks down.
        """
        operator = self._require_operator()

        engine = PowerIteration(operator, seed=self._rng)
        outcome = iterate_until_converged(
            engine,
            self._tolerance,
            self._max_iterations,
            record_history=self._record_history,
        )

        if not outcome.converged:
            logger.debug(
                "%s: no convergence after %d iterations (displacement %.3e)",
                self.name,
                outcome.iterations,
                outcome.displacement,
            )
            raise IterationLimitExceeded(
                f"{self.name} did not converge within {self._max_iterations} "
                f"iterations (displacement {outcome.displacement:.3e} > "
                f"tolerance {self._tolerance:.3e})",
                tip="Increase the maximum iterations or relax the tolerance.",
                iterations=outcome.iterations,
                displacement=outcome.displacement,
            )

        rayleigh = rayleigh_quotient(operator, outcome.vector)
        eigenvalue = self.transform.recover(rayleigh, self._shift)

        self._result = SolveResult(
            eigenvalues=np.array([eigenvalue], dtype=np.complex128),
            eigenvectors=outcome.vector.reshape(-1, 1),
            iterations=outcome.iterations,
            converged=True,
            residual=outcome.displacement,
            total_time=outcome.total_time,
            history=outcome.history,
        )
        logger.debug(
            "%s: converged in %d iterations, eigenvalue %s",
            self.name,
            outcome.iterations,
            eigenvalue,
        )
        return self._result

    def _require_operator(self) -> NDArray[Any]:
        self._require_matrix()
        if self._operator is None:
            raise InvalidInputError(
                "No iteration operator has been built",
                tip="Call set_matrix() before solve().",
            )
        return self._operator


class PowerMethod(PowerFamilySolver):
    """Dominant eigenvalue (largest magnitude) by plain power iteration.

    Requires a strictly dominant eigenvalue; ties in magnitude (including
    sign-flipping pairs like 1 and -1) do not converge.
    """

    transform = DIRECT


class InversePowerMethod(PowerFamilySolver):
    """Eigenvalue of smallest magnitude, iterating with A^-1."""

    transform = INVERSE


class ShiftedPowerFamilySolver(PowerFamilySolver):
    """Power-family solver that works relative to a shift point.

    The shift is mandatory: constructing without one raises InvalidInputError.
    """

    def __init__(
        self,
        shift: float | complex | None = None,
        scalar_type: ScalarType | str = ScalarType.FLOAT64,
        **kwargs: Any,
    ) -> None:
        super().__init__(scalar_type, **kwargs)
        if shift is None:
            raise InvalidInputError(
                f"The {self.name} solver requires a shift",
                tip="Pass shift=<value> (e.g. --shift 1.0).",
            )
        self.set_shift(shift)

    @property
    def shift(self) -> complex:
        return complex(self._shift)

    def set_shift(self, shift: float | complex) -> None:
        """Set the shift, rebuilding the operator if a matrix is present.

        Raises:
            InvalidInputError: If a complex shift is given to a real solver.
            AlgebraError: If the new shifted matrix cannot be inverted.
        """
        value = complex(shift)
        if not np.isfinite(value):
            raise InvalidInputError(f"Shift must be finite, got {shift!r}")
        if value.imag != 0 and not self.is_complex:
            raise InvalidInputError(
                f"Complex shift {shift!r} given to a {self._scalar_type.value} solver",
                tip="Use a complex scalar type or a real shift.",
            )
        new_shift = self._dtype.type(value if self.is_complex else value.real)

        if self._matrix is not None:
            self._operator = self.transform.build_operator(self._matrix, new_shift)
            self._result = None
        self._shift = new_shift


class PowerMethodWithShift(ShiftedPowerFamilySolver):
    """Dominant eigenvalue of A - sI, reported as an eigenvalue of A."""

    transform = SHIFTED


class InversePowerMethodWithShift(ShiftedPowerFamilySolver):
    """Eigenvalue of A closest to the shift, iterating with (A - sI)^-1."""

    transform = SHIFTED_INVERSE


__all__ = [
    "DIRECT",
    "INVERSE",
    "SHIFTED",
    "SHIFTED_INVERSE",
    "InversePowerMethod",
    "InversePowerMethodWithShift",
    "PowerFamilySolver",
    "PowerMethod",
    "PowerMethodWithShift",
    "ShiftedPowerFamilySolver",
    "SpectralTransform",
    "invert_matrix",
]
