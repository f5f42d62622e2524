"""Eigenvalue solver contract.

Defines the configure/solve/report lifecycle shared by every algorithm:

    solver.set_matrix(A)
    solver.set_tolerance(1e-6)
    solver.set_max_iterations(1000)
    result = solver.solve()
    solver.get_eigenvalues()

Concrete solvers own their matrix, iteration state and results exclusively;
nothing is shared between instances.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

import numpy as np

from eigen_lab.data.scalar_types import (
    ScalarType,
    get_dtype,
    get_spec,
    parse_scalar_type,
)
from eigen_lab.exceptions import (
    InvalidInputError,
    NotImplementedSolverError,
    SolverError,
)

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS: int = 100_000
"""Iteration budget used when none is configured."""

DEFAULT_TOLERANCE: float = 1e-6
"""Convergence threshold used when none is configured."""


@dataclass(frozen=True, slots=True)
class SolveResult:
    """Outcome of a successful solve."""

    eigenvalues: NDArray[np.complex128]
    """Computed eigenvalues, always complex-valued."""

    eigenvectors: NDArray[Any] | None
    """One column per eigenvalue, or None when the algorithm has none."""

    iterations: int
    """Iterations performed."""

    converged: bool
    """Whether the convergence criterion was met."""

    residual: float
    """Final iterate displacement (power family) or largest sub-diagonal magnitude (QR)."""

    total_time: float
    """Wall clock time of the solve (seconds)."""

    history: tuple[float, ...] = ()
    """Per-iteration residuals, when recording was requested."""


class EigenvalueSolver(ABC):
    """Abstract base class for eigenvalue solvers.

    Subclasses must implement set_matrix() and solve(). Tolerance and
    iteration budget have working defaults, so a solver is always fully
    configured once a matrix is set.

    Args:
        scalar_type: Scalar field the solver works over.
        max_iterations: Iteration budget (positive).
        tolerance: Convergence threshold (non-negative).
    """

    name: ClassVar[str] = "solver"

    def __init__(
        self,
        scalar_type: ScalarType | str = ScalarType.FLOAT64,
        *,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        tolerance: float | complex = DEFAULT_TOLERANCE,
    ) -> None:
        if isinstance(scalar_type, str):
            scalar_type = parse_scalar_type(scalar_type)
        self._scalar_type = scalar_type
        self._dtype = np.dtype(get_dtype(scalar_type))
        self._matrix: NDArray[Any] | None = None
        self._result: SolveResult | None = None
        self._max_iterations = DEFAULT_MAX_ITERATIONS
        self._tolerance = DEFAULT_TOLERANCE
        self.set_max_iterations(max_iterations)
        self.set_tolerance(tolerance)

    # -- configuration ------------------------------------------------------

    @abstractmethod
    def set_matrix(self, matrix: ArrayLike) -> None:
        """Store the matrix to solve for.

        Raises:
            InvalidInputError: If the matrix is empty, not square, or holds
                complex data while the solver works over a real field.
        """

    def set_tolerance(self, tolerance: float | complex) -> None:
        """Set the convergence threshold.

        Complex values are reduced to their magnitude, since convergence is
        measured as a non-negative distance.
        """
        try:
            if np.iscomplexobj(tolerance):
                value = float(abs(tolerance))
            else:
                value = float(tolerance)  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise InvalidInputError(
                f"Tolerance must be a non-negative number, got {tolerance!r}"
            ) from exc
        if np.isnan(value) or value < 0:
            raise InvalidInputError(
                f"Tolerance must be a non-negative number, got {tolerance!r}"
            )
        self._tolerance = value

    def set_max_iterations(self, max_iterations: int) -> None:
        """Set the iteration budget."""
        if isinstance(max_iterations, bool) or not isinstance(
            max_iterations, (int, np.integer)
        ):
            raise InvalidInputError(
                f"Maximum iterations must be an integer, got {max_iterations!r}"
            )
        if max_iterations < 1:
            raise InvalidInputError(
                f"Maximum iterations must be positive, got {max_iterations}"
            )
        self._max_iterations = int(max_iterations)

    # -- execution ----------------------------------------------------------

    @abstractmethod
    def solve(self) -> SolveResult:
        """Run the algorithm and store its results."""

    # -- results ------------------------------------------------------------

    def get_eigenvalues(self) -> NDArray[np.complex128]:
        """Return the eigenvalues of the last solve as complex numbers."""
        return self._require_result().eigenvalues.copy()

    def get_eigenvectors(self) -> NDArray[Any]:
        """Return the eigenvectors of the last solve, one per column."""
        result = self._require_result()
        if result.eigenvectors is None:
            raise NotImplementedSolverError(
                f"Eigenvectors are not available from the {self.name} solver."
            )
        return result.eigenvectors.copy()

    @property
    def result(self) -> SolveResult | None:
        """Result of the last solve, if any."""
        return self._result

    @property
    def scalar_type(self) -> ScalarType:
        return self._scalar_type

    @property
    def dtype(self) -> np.dtype[Any]:
        return self._dtype

    @property
    def is_complex(self) -> bool:
        return get_spec(self._scalar_type).is_complex

    @property
    def tolerance(self) -> float:
        return self._tolerance

    @property
    def max_iterations(self) -> int:
        return self._max_iterations

    @property
    def matrix(self) -> NDArray[Any] | None:
        """Copy of the configured matrix (None before set_matrix)."""
        return None if self._matrix is None else self._matrix.copy()

    # -- helpers ------------------------------------------------------------

    def _validate_matrix(self, matrix: ArrayLike) -> NDArray[Any]:
        """Check shape and field, then return a private copy in the solver dtype."""
        array = np.asarray(matrix)

        if array.size == 0:
            raise InvalidInputError(
                "Matrix cannot be empty",
                tip=f"Got a matrix of shape {array.shape}.",
            )
        if array.ndim != 2:
            raise InvalidInputError(
                f"Matrix must be two-dimensional, got {array.ndim} dimensions"
            )
        rows, cols = array.shape
        if rows != cols:
            raise InvalidInputError(
                f"Matrix must be square, got {rows}x{cols}",
                tip="Eigenvalues are only defined for square matrices.",
            )
        if np.iscomplexobj(array) and not self.is_complex:
            raise InvalidInputError(
                f"Complex matrix given to a {self._scalar_type.value} solver",
                tip="Use a complex scalar type (e.g. --field complex).",
            )
        if not np.all(np.isfinite(array)):
            raise InvalidInputError("Matrix contains NaN or infinite entries")

        logger.debug(
            "%s: matrix %dx%d stored as %s", self.name, rows, cols, self._dtype
        )
        return np.array(array, dtype=self._dtype, copy=True)

    def _require_matrix(self) -> NDArray[Any]:
        if self._matrix is None:
            raise InvalidInputError(
                "No matrix has been set",
                tip="Call set_matrix() before solve().",
            )
        return self._matrix

    def _require_result(self) -> SolveResult:
        if self._result is None:
            raise SolverError(
                "No results available",
                tip="Call solve() before reading results.",
            )
        return self._result

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(scalar_type={self._scalar_type.value!r}, "
            f"max_iterations={self._max_iterations}, tolerance={self._tolerance:g})"
        )


__all__ = [
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_TOLERANCE",
    "EigenvalueSolver",
    "SolveResult",
]
