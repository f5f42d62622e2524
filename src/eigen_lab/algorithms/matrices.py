"""Matrices with known spectra for testing and demonstrating solvers.

Builds A = Q @ diag(lambda) @ Q^H from a prescribed spectrum and a random
orthogonal (or unitary) Q, so the exact answer is known in advance.

Key Features:
- Reproducible generation with seed control
- Linear, geometric and slow-convergence spectrum shapes
- Real matrices carrying complex-conjugate eigenvalue pairs (for QR)

References:
- Golub & Van Loan: "Matrix Computations" (4th ed.), Section 7.3
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


DEFAULT_SEED: int = 42
"""Default random seed for reproducible matrices."""

SPECTRUM_TYPES: tuple[str, ...] = ("linear", "geometric", "slow")


def linear_spectrum(n: int, condition_number: float) -> NDArray[np.float64]:
    """Eigenvalues linearly spaced in [1, κ]; large gaps, fast convergence."""
    return np.linspace(1.0, condition_number, n)


def geometric_spectrum(n: int, condition_number: float) -> NDArray[np.float64]:
    """Eigenvalues geometrically spaced in [1, κ]."""
    return np.geomspace(1.0, condition_number, n)


def slow_spectrum(
    n: int,
    condition_number: float,
    *,
    eigenvalue_gap: float = 1.1,
) -> NDArray[np.float64]:
    """Spectrum with a small gap between the two dominant eigenvalues.

    Eigenvalue distribution:
        λ₁ = κ (largest)
        λ₂ = κ / eigenvalue_gap (only ~10% smaller by default)
        λ₃...λₙ = geometric decay from λ₂ to 1.0

    Power-method convergence rate: (λ₂/λ₁)^k = (1/1.1)^k ≈ (0.909)^k
    """
    eigenvalues = np.zeros(n)
    eigenvalues[0] = condition_number
    if n > 1:
        eigenvalues[1:] = np.geomspace(condition_number / eigenvalue_gap, 1.0, n - 1)
    return eigenvalues


def random_orthogonal(
    n: int,
    *,
    complex_field: bool = False,
    seed: int | None = None,
) -> NDArray[Any]:
    """Random orthogonal (or unitary) matrix via QR decomposition."""
    rng = np.random.default_rng(seed)
    z = rng.standard_normal((n, n))
    if complex_field:
        z = z + 1j * rng.standard_normal((n, n))
    q, _ = np.linalg.qr(z)
    return q


def create_matrix_with_spectrum(
    eigenvalues: ArrayLike,
    *,
    complex_field: bool = False,
    seed: int | None = None,
) -> NDArray[Any]:
    """Create a normal matrix with the given eigenvalues.

    Real eigenvalues give a symmetric (or Hermitian) matrix. Complex
    eigenvalues require ``complex_field``.

    Example:
        >>> A = create_matrix_with_spectrum([5.0, 2.0, 1.0], seed=42)
        >>> np.allclose(np.sort(np.linalg.eigvalsh(A)), [1.0, 2.0, 5.0])
        True
    """
    values = np.asarray(eigenvalues)
    if np.iscomplexobj(values) and not complex_field:
        if np.any(values.imag != 0):
            msg = "Complex eigenvalues need complex_field=True"
            raise ValueError(msg)
        values = values.real

    q = random_orthogonal(values.size, complex_field=complex_field, seed=seed)
    return q @ np.diag(values) @ q.conj().T


def create_matrix_with_complex_pair(
    real_part: float,
    imag_part: float,
    other_eigenvalues: ArrayLike = (),
    *,
    seed: int | None = None,
) -> NDArray[np.float64]:
    """Create a real matrix with eigenvalues a ± bi plus given real ones.

    Mathematical Construction:
        B = blockdiag([[a, -b], [b, a]], diag(others))
        A = Q @ B @ Q^T  where Q is random orthogonal
    """
    others = np.asarray(other_eigenvalues, dtype=np.float64)
    n = 2 + others.size
    block = np.zeros((n, n))
    block[:2, :2] = [[real_part, -imag_part], [imag_part, real_part]]
    block[2:, 2:] = np.diag(others)

    q = random_orthogonal(n, seed=seed)
    return q @ block @ q.T


def dominance_ratio(eigenvalues: ArrayLike) -> float:
    """|λ₂|/|λ₁|, the power-method convergence rate (0 for a single value)."""
    magnitudes = np.sort(np.abs(np.asarray(eigenvalues)))[::-1]
    if magnitudes.size < 2 or magnitudes[0] == 0:
        return 0.0
    return float(magnitudes[1] / magnitudes[0])


@dataclass(frozen=True, slots=True)
class KnownSpectrumMatrix:
    """Container for a generated matrix and its exact spectrum."""

    matrix: NDArray[Any]
    """The n×n matrix."""

    eigenvalues: NDArray[np.complex128]
    """Exact eigenvalues, sorted by descending magnitude."""

    seed: int
    """Random seed used for generation."""

    spectrum: str
    """Spectrum type: 'linear', 'geometric' or 'slow'."""

    @property
    def dominant_eigenvalue(self) -> complex:
        return complex(self.eigenvalues[0])

    @property
    def smallest_eigenvalue(self) -> complex:
        return complex(self.eigenvalues[-1])

    @property
    def dominance_ratio(self) -> float:
        return dominance_ratio(self.eigenvalues)


def create_test_matrix(
    n: int,
    condition_number: float,
    *,
    spectrum: str = "linear",
    complex_field: bool = False,
    seed: int = DEFAULT_SEED,
) -> KnownSpectrumMatrix:
    """Create a symmetric (or Hermitian) matrix with a known spectrum.

    Args:
        n: Matrix dimension.
        condition_number: Ratio of largest to smallest eigenvalue.
        spectrum: "linear", "geometric" or "slow" (10% dominant gap).
        complex_field: Build a complex Hermitian matrix.
        seed: Random seed (default: 42 for reproducibility).

    Example:
        >>> problem = create_test_matrix(50, 100)
        >>> problem.dominant_eigenvalue
        (100+0j)
    """
    if spectrum == "linear":
        values = linear_spectrum(n, condition_number)
    elif spectrum == "geometric":
        values = geometric_spectrum(n, condition_number)
    elif spectrum == "slow":
        values = slow_spectrum(n, condition_number)
    else:
        msg = f"Unknown spectrum: {spectrum}. Valid: {list(SPECTRUM_TYPES)}"
        raise ValueError(msg)

    matrix = create_matrix_with_spectrum(values, complex_field=complex_field, seed=seed)
    # Q diag Q^H is Hermitian only up to rounding
    matrix = (matrix + matrix.conj().T) / 2

    eigenvalues = np.asarray(values, dtype=np.complex128)
    order = np.argsort(-np.abs(eigenvalues), kind="stable")

    return KnownSpectrumMatrix(
        matrix=matrix,
        eigenvalues=eigenvalues[order],
        seed=seed,
        spectrum=spectrum,
    )


__all__ = [
    "DEFAULT_SEED",
    "SPECTRUM_TYPES",
    "KnownSpectrumMatrix",
    "create_matrix_with_complex_pair",
    "create_matrix_with_spectrum",
    "create_test_matrix",
    "dominance_ratio",
    "geometric_spectrum",
    "linear_spectrum",
    "random_orthogonal",
    "slow_spectrum",
]
