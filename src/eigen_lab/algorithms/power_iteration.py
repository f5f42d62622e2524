"""Power iteration engine with ping-pong buffer optimization.

Shared iterate-until-converged machinery for the power-method family. The
engine knows nothing about which operator it iterates (A, A^-1, A - sI or
(A - sI)^-1); solvers build the operator and hand it in.

Loop protocol:
    1. Draw a random unit starting vector.
    2. v_next = normalize(operator @ v); count the iteration.
    3. Converged when ||v_next - v|| < tolerance.
    4. Stop on convergence or when the budget is spent. The two outcomes are
       reported separately; the caller decides what exhaustion means.

Key Optimizations:
- Ping-pong buffer pattern eliminates allocations in hot loop
- Self-timing for performance analysis

References:
- Golub & Van Loan: "Matrix Computations" (4th ed.), §7.3
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from eigen_lab.exceptions import AlgebraError

if TYPE_CHECKING:
    from numpy.typing import NDArray


@dataclass(frozen=True, slots=True)
class IterationResult:
    """Result of a single power iteration."""

    displacement: float
    """||v_next - v_prev|| between consecutive unit iterates."""

    algorithm_time: float
    """Time for iteration (seconds)."""


@dataclass(frozen=True, slots=True)
class IterationOutcome:
    """Outcome of running the iteration loop to convergence or exhaustion."""

    vector: NDArray[Any]
    """Final unit iterate (a copy, safe to keep)."""

    iterations: int
    """Number of iterations performed."""

    displacement: float
    """Displacement of the last iteration."""

    converged: bool
    """True if the displacement dropped below the tolerance."""

    total_time: float
    """Total execution time (seconds)."""

    history: tuple[float, ...]
    """Per-iteration displacements (empty unless recorded)."""


class PowerIteration:
    """Power iteration engine with ping-pong buffer optimization.

    Eliminates array allocations in hot loop by alternating between two
    pre-allocated vectors in an Nx2 matrix (column-major for BLAS efficiency).

    Example:
        >>> engine = PowerIteration(np.array([[2.0, 1.0], [1.0, 2.0]]), seed=0)
        >>> for _ in range(100):
        ...     if engine.iterate().displacement < 1e-8:
        ...         break
    """

    __slots__ = (
        "_operator",
        "_dtype",
        "_n",
        "_vectors",
        "_current_idx",
        "_iterations",
        "_breakdown_norm",
    )

    def __init__(
        self,
        operator: NDArray[Any],
        *,
        initial_vector: NDArray[Any] | None = None,
        seed: int | np.random.Generator | None = None,
    ) -> None:
        """Initialize power iteration engine.

        Args:
            operator: Square matrix to iterate with; its dtype sets the
                working precision.
            initial_vector: Starting vector (optional, random if None).
            seed: Seed or Generator for the random starting vector.
        """
        self._operator = operator
        self._dtype = operator.dtype
        self._n = operator.shape[0]
        self._vectors = np.zeros((self._n, 2), dtype=self._dtype, order="F")
        self._current_idx = 0
        self._iterations = 0
        self._breakdown_norm = float(np.finfo(self._dtype).tiny)

        if initial_vector is None:
            initial_vector = random_unit_vector(
                self._n, complex_field=np.iscomplexobj(operator), seed=seed
            )
        self.set_initial_vector(initial_vector)

    def iterate(self) -> IterationResult:
        """Execute single power iteration with self-timing.

        Algorithm:
            1. Matrix-vector multiply: y = operator @ x
            2. Normalize: x_new = y / ||y||
            3. Displacement: ||x_new - phase * x||, with phase the unit
               scalar aligning x to x_new

        Raises:
            AlgebraError: If the product vanishes or overflows, so the
                iterate cannot be normalized.
        """
        start = time.perf_counter()

        # Ping-pong: alternate between vectors
        next_idx = 1 - self._current_idx
        current_vec = self._vectors[:, self._current_idx]
        next_vec = self._vectors[:, next_idx]

        next_vec[:] = self._operator @ current_vec

        norm = float(np.linalg.norm(next_vec))
        if not np.isfinite(norm) or norm <= self._breakdown_norm:
            raise AlgebraError(
                f"Iteration broke down at step {self._iterations + 1} "
                f"(||A v|| = {norm:g})",
                tip="The starting vector may lie in the null space of the operator.",
            )

        next_vec[:] /= norm

        # Compare directions: strip the unit scalar that a negative or complex
        # dominant eigenvalue multiplies the iterate by at each step
        overlap = np.vdot(current_vec, next_vec)
        phase = overlap / abs(overlap) if abs(overlap) > 0 else 1
        displacement = float(np.linalg.norm(next_vec - phase * current_vec))

        self._current_idx = next_idx
        self._iterations += 1

        return IterationResult(
            displacement=displacement,
            algorithm_time=time.perf_counter() - start,
        )

    @property
    def current_vector(self) -> NDArray[Any]:
        """Return view of current iterate (no copy)."""
        return self._vectors[:, self._current_idx]

    @property
    def iterations(self) -> int:
        """Iterations performed since the last (re)start."""
        return self._iterations

    @property
    def vector_norm(self) -> float:
        """Get norm of current iterate (should be ~1.0)."""
        return float(np.linalg.norm(self._vectors[:, self._current_idx]))

    def set_initial_vector(self, x: NDArray[Any]) -> None:
        """Restart the iteration from a given vector.

        Args:
            x: Starting vector (converted to working precision and normalized).

        Raises:
            AlgebraError: If x has the wrong length or zero norm.
        """
        x = np.asarray(x)
        if x.shape != (self._n,):
            raise AlgebraError(
                f"Starting vector has shape {x.shape}, expected ({self._n},)"
            )
        if np.iscomplexobj(x) and not np.iscomplexobj(self._vectors):
            raise AlgebraError("Complex starting vector for a real operator")
        self._current_idx = 0
        self._iterations = 0
        self._vectors[:, 0] = x.astype(self._dtype)
        norm = np.linalg.norm(self._vectors[:, 0])
        if norm <= self._breakdown_norm:
            raise AlgebraError("Starting vector must be nonzero")
        self._vectors[:, 0] /= norm


def random_unit_vector(
    n: int,
    *,
    complex_field: bool = False,
    seed: int | np.random.Generator | None = None,
) -> NDArray[Any]:
    """Draw a normalized Gaussian vector (complex Gaussian when requested)."""
    rng = np.random.default_rng(seed)
    vec = rng.standard_normal(n)
    if complex_field:
        vec = vec + 1j * rng.standard_normal(n)
    return vec / np.linalg.norm(vec)


def iterate_until_converged(
    engine: PowerIteration,
    tolerance: float,
    max_iterations: int,
    *,
    record_history: bool = False,
) -> IterationOutcome:
    """Run the engine until its displacement drops below tolerance.

    Budget exhaustion is not an error here: the outcome's ``converged`` flag
    tells the two endings apart.

    Args:
        engine: Power iteration engine (its counter bounds the loop).
        tolerance: Displacement threshold.
        max_iterations: Iteration budget.
        record_history: Keep every displacement in the outcome.

    Returns:
        IterationOutcome with the final iterate and loop statistics.
    """
    history: list[float] = []
    start_time = time.perf_counter()
    displacement = float("inf")
    converged = False

    while engine.iterations < max_iterations:
        displacement = engine.iterate().displacement
        if record_history:
            history.append(displacement)
        if displacement < tolerance:
            converged = True
            break

    return IterationOutcome(
        vector=engine.current_vector.copy(),
        iterations=engine.iterations,
        displacement=displacement,
        converged=converged,
        total_time=time.perf_counter() - start_time,
        history=tuple(history),
    )


def rayleigh_quotient(operator: NDArray[Any], vector: NDArray[Any]) -> complex:
    """Rayleigh quotient v^H (A v) / (v^H v), conjugating for complex fields."""
    numerator = np.vdot(vector, operator @ vector)
    denominator = np.vdot(vector, vector)
    return complex(numerator / denominator)


__all__ = [
    "IterationOutcome",
    "IterationResult",
    "PowerIteration",
    "iterate_until_converged",
    "random_unit_vector",
    "rayleigh_quotient",
]
