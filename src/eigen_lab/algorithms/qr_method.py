"""Unshifted QR algorithm for the full spectrum.

Each iteration factors the working matrix A = QR and replaces it with RQ.
This is a similarity transform, so the spectrum is preserved while A drifts
toward (quasi-)upper-triangular real Schur form: real eigenvalues settle on
the diagonal, complex-conjugate pairs remain as unreduced 2x2 blocks.

The method is non-adaptive: it always runs the configured number
of iterations, with no per-entry convergence monitoring and no shifts. Running
out of iterations is ordinary termination, not an error. Eigenvectors are not
tracked.

References:
- Golub & Van Loan: "Matrix Computations" (4th ed.), §7.3.2 and §7.4
- Francis: "The QR Transformation" (1961)
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

import numpy as np

from eigen_lab.algorithms.base import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    EigenvalueSolver,
    SolveResult,
)
from eigen_lab.data.scalar_types import ScalarType
from eigen_lab.exceptions import NotImplementedSolverError

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

logger = logging.getLogger(__name__)


def complex_pair_eigenvalues(block: NDArray[Any]) -> tuple[complex, complex]:
    """Eigenvalues of a 2x2 block by the quadratic formula.

    lambda = (tr +/- sqrt(tr^2 - 4 det)) / 2, evaluated in complex arithmetic
    whatever the block's own dtype, so real blocks yield conjugate pairs.
    """
    a, b = complex(block[0, 0]), complex(block[0, 1])
    c, d = complex(block[1, 0]), complex(block[1, 1])
    trace = a + d
    det = a * d - b * c
    root = complex(np.sqrt(np.complex128(trace * trace - 4 * det)))
    return (trace + root) / 2, (trace - root) / 2


def extract_eigenvalues(matrix: NDArray[Any], tolerance: float) -> NDArray[np.complex128]:
    """Read eigenvalues off a quasi-triangular matrix, top to bottom.

    A sub-diagonal entry with magnitude above ``tolerance`` marks a 2x2 block
    whose two eigenvalues are taken together; otherwise the diagonal entry is
    an eigenvalue. Magnitudes are compared as complex moduli against the real
    tolerance for both real and complex matrices.
    """
    n = matrix.shape[0]
    values: list[complex] = []
    i = 0
    while i < n:
        if i < n - 1 and abs(matrix[i + 1, i]) > tolerance:
            values.extend(complex_pair_eigenvalues(matrix[i : i + 2, i : i + 2]))
            i += 2
        else:
            values.append(complex(matrix[i, i]))
            i += 1
    return np.array(values, dtype=np.complex128)


def is_quasi_triangular(matrix: NDArray[Any], tolerance: float) -> bool:
    """True if no two consecutive sub-diagonal entries exceed tolerance.

    Two such entries mean an unreduced block larger than 2x2, whose
    eigenvalues the extraction step cannot recover exactly.
    """
    if matrix.shape[0] < 3:
        return True
    large = np.abs(np.diag(matrix, -1)) > tolerance
    return not bool(np.any(large[:-1] & large[1:]))


def sort_by_magnitude(eigenvalues: NDArray[np.complex128]) -> NDArray[np.complex128]:
    """Sort eigenvalues by descending magnitude (stable for ties)."""
    order = np.argsort(-np.abs(eigenvalues), kind="stable")
    return eigenvalues[order]


class QRMethod(EigenvalueSolver):
    """Full spectrum by unshifted QR iteration.

    Args:
        scalar_type: Scalar field the solver works over.
        max_iterations: Exact number of QR steps to run.
        tolerance: Sub-diagonal magnitude above which a 2x2 block is
            treated as a complex-conjugate pair.
        sort_eigenvalues: Sort results by descending magnitude (otherwise
            they come in diagonal order).
        record_history: Keep the largest sub-diagonal magnitude per step.

    Example:
        >>> solver = QRMethod(max_iterations=500)
        >>> solver.set_matrix([[2.0, 1.0], [1.0, 2.0]])
        >>> solver.solve().eigenvalues
        array([3.+0.j, 1.+0.j])
    """

    name = "qr"

    def __init__(
        self,
        scalar_type: ScalarType | str = ScalarType.FLOAT64,
        *,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        tolerance: float | complex = DEFAULT_TOLERANCE,
        sort_eigenvalues: bool = True,
        record_history: bool = False,
    ) -> None:
        super().__init__(
            scalar_type, max_iterations=max_iterations, tolerance=tolerance
        )
        self.sort_eigenvalues = sort_eigenvalues
        self._record_history = record_history

    def set_matrix(self, matrix: ArrayLike) -> None:
        """Store the matrix to decompose.

        Raises:
            InvalidInputError: If the matrix is empty, not square, or of the
                wrong scalar field.
        """
        self._matrix = self._validate_matrix(matrix)
        self._result = None

    def solve(self) -> SolveResult:
        """Run max_iterations QR steps, then extract the spectrum.

        Raises:
            InvalidInputError: If no matrix has been set.
        """
        working = self._require_matrix().copy()
        history: list[float] = []
        start_time = time.perf_counter()

        for _ in range(self._max_iterations):
            q, r = np.linalg.qr(working)
            working = r @ q
            if self._record_history:
                history.append(_largest_subdiagonal(working))

        eigenvalues = extract_eigenvalues(working, self._tolerance)
        if self.sort_eigenvalues:
            eigenvalues = sort_by_magnitude(eigenvalues)

        reduced = is_quasi_triangular(working, self._tolerance)
        if not reduced:
            logger.warning(
                "qr: matrix not reduced to quasi-triangular form after %d "
                "iterations; eigenvalues are approximate",
                self._max_iterations,
            )

        self._result = SolveResult(
            eigenvalues=eigenvalues,
            eigenvectors=None,
            iterations=self._max_iterations,
            converged=reduced,
            residual=_largest_subdiagonal(working),
            total_time=time.perf_counter() - start_time,
            history=tuple(history),
        )
        logger.debug(
            "qr: %d iterations, %d eigenvalues extracted",
            self._max_iterations,
            eigenvalues.size,
        )
        return self._result

    def get_eigenvectors(self) -> NDArray[Any]:
        """Not available: the QR method does not track eigenvectors."""
        raise NotImplementedSolverError(
            "Eigenvectors are not supported for the QR method.",
            tip="Use a power-method solver to obtain eigenvectors.",
        )


def _largest_subdiagonal(matrix: NDArray[Any]) -> float:
    if matrix.shape[0] < 2:
        return 0.0
    return float(np.max(np.abs(np.diag(matrix, -1))))


__all__ = [
    "QRMethod",
    "complex_pair_eigenvalues",
    "extract_eigenvalues",
    "is_quasi_triangular",
    "sort_by_magnitude",
]
