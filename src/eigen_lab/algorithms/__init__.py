"""Numerical algorithms module.

This module contains implementations of:
- The eigenvalue solver contract and result type
- Power iteration engine shared by the power-method family
- Power, inverse power and shifted variants
- Unshifted QR algorithm with complex-pair extraction
- Matrix generation utilities with known spectra
"""

from eigen_lab.algorithms.base import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    EigenvalueSolver,
    SolveResult,
)
from eigen_lab.algorithms.matrices import (
    DEFAULT_SEED,
    KnownSpectrumMatrix,
    create_matrix_with_complex_pair,
    create_matrix_with_spectrum,
    create_test_matrix,
    dominance_ratio,
)
from eigen_lab.algorithms.power_iteration import (
    IterationOutcome,
    IterationResult,
    PowerIteration,
    iterate_until_converged,
    rayleigh_quotient,
)
from eigen_lab.algorithms.power_method import (
    InversePowerMethod,
    InversePowerMethodWithShift,
    PowerFamilySolver,
    PowerMethod,
    PowerMethodWithShift,
    SpectralTransform,
)
from eigen_lab.algorithms.qr_method import (
    QRMethod,
    complex_pair_eigenvalues,
    extract_eigenvalues,
)

__all__ = [
    # Contract
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_TOLERANCE",
    "EigenvalueSolver",
    "SolveResult",
    # Matrix generation
    "DEFAULT_SEED",
    "KnownSpectrumMatrix",
    "create_matrix_with_complex_pair",
    "create_matrix_with_spectrum",
    "create_test_matrix",
    "dominance_ratio",
    # Power iteration
    "IterationOutcome",
    "IterationResult",
    "PowerIteration",
    "iterate_until_converged",
    "rayleigh_quotient",
    # Power family
    "InversePowerMethod",
    "InversePowerMethodWithShift",
    "PowerFamilySolver",
    "PowerMethod",
    "PowerMethodWithShift",
    "SpectralTransform",
    # QR
    "QRMethod",
    "complex_pair_eigenvalues",
    "extract_eigenvalues",
]
