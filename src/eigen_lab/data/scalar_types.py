"""
Scalar Field Definitions - Single Source of Truth

This module defines the scalar types a solver can work over: real and complex,
in single and double precision. Each type carries the NumPy dtype used for
storage and arithmetic, whether it is complex, and its machine epsilon.

References:
    - IEEE 754-2019 Standard for Floating-Point Arithmetic
    - Golub & Van Loan: "Matrix Computations" (4th ed.), Section 7.3
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, cast

import numpy as np
from numpy.typing import DTypeLike


class ScalarType(Enum):
    """Supported scalar fields."""

    FLOAT32 = "float32"
    FLOAT64 = "float64"
    COMPLEX64 = "complex64"  # pair of float32
    COMPLEX128 = "complex128"  # pair of float64


@dataclass(frozen=True, slots=True)
class ScalarSpec:
    """Specification for a scalar field."""

    type: ScalarType
    bits: int
    is_complex: bool
    machine_epsilon: float
    real_type: ScalarType  # Field of magnitudes, norms and tolerances

    @property
    def bytes(self) -> int:
        """Number of bytes per element."""
        return self.bits // 8


# =============================================================================
# SCALAR SPECIFICATIONS
# =============================================================================
# Complex types report the total width of the (real, imag) pair.

_SCALAR_SPECS: dict[ScalarType, ScalarSpec] = {
    ScalarType.FLOAT32: ScalarSpec(
        type=ScalarType.FLOAT32,
        bits=32,
        is_complex=False,
        machine_epsilon=1.19e-7,  # 2^(-23)
        real_type=ScalarType.FLOAT32,
    ),
    ScalarType.FLOAT64: ScalarSpec(
        type=ScalarType.FLOAT64,
        bits=64,
        is_complex=False,
        machine_epsilon=2.22e-16,  # 2^(-52)
        real_type=ScalarType.FLOAT64,
    ),
    ScalarType.COMPLEX64: ScalarSpec(
        type=ScalarType.COMPLEX64,
        bits=64,
        is_complex=True,
        machine_epsilon=1.19e-7,
        real_type=ScalarType.FLOAT32,
    ),
    ScalarType.COMPLEX128: ScalarSpec(
        type=ScalarType.COMPLEX128,
        bits=128,
        is_complex=True,
        machine_epsilon=2.22e-16,
        real_type=ScalarType.FLOAT64,
    ),
}

_DTYPES: dict[ScalarType, Any] = {
    ScalarType.FLOAT32: np.float32,
    ScalarType.FLOAT64: np.float64,
    ScalarType.COMPLEX64: np.complex64,
    ScalarType.COMPLEX128: np.complex128,
}

# Names accepted on the command line and in configuration files
_ALIASES: dict[str, ScalarType] = {
    "float": ScalarType.FLOAT32,
    "single": ScalarType.FLOAT32,
    "double": ScalarType.FLOAT64,
    "real": ScalarType.FLOAT64,
    "complex": ScalarType.COMPLEX128,
    "complex_float": ScalarType.COMPLEX64,
    "complex_double": ScalarType.COMPLEX128,
}


# =============================================================================
# PUBLIC API
# =============================================================================


def get_spec(scalar: ScalarType | str) -> ScalarSpec:
    """
    Get the full specification for a scalar type.

    Args:
        scalar: Scalar type (enum or string like 'float64', 'complex', 'double')

    Returns:
        ScalarSpec with all type properties

    Raises:
        ValueError: If the type is unknown

    Example:
        >>> get_spec("complex").real_type
        <ScalarType.FLOAT64: 'float64'>
    """
    if isinstance(scalar, str):
        scalar = parse_scalar_type(scalar)
    return _SCALAR_SPECS[scalar]


def get_dtype(scalar: ScalarType | str) -> DTypeLike:
    """
    Get the numpy dtype for a scalar type.

    Example:
        >>> get_dtype("float32")
        <class 'numpy.float32'>
    """
    if isinstance(scalar, str):
        scalar = parse_scalar_type(scalar)
    return cast("DTypeLike", _DTYPES[scalar])


def get_real_dtype(scalar: ScalarType | str) -> DTypeLike:
    """Get the dtype of magnitudes for a scalar type (float32 for complex64)."""
    return get_dtype(get_spec(scalar).real_type)


def get_eps(scalar: ScalarType | str) -> float:
    """Get machine epsilon for a scalar type."""
    return get_spec(scalar).machine_epsilon


def is_complex(scalar: ScalarType | str) -> bool:
    """Whether the scalar type is a complex field."""
    return get_spec(scalar).is_complex


def scalar_type_of(dtype: DTypeLike) -> ScalarType:
    """
    Map a NumPy dtype to the narrowest supported scalar type that holds it.

    Integer and boolean data map to float64, other floating types are
    promoted to their nearest supported width.

    Example:
        >>> scalar_type_of(np.int64)
        <ScalarType.FLOAT64: 'float64'>
    """
    dt = np.dtype(dtype)
    if dt.kind == "c":
        return ScalarType.COMPLEX64 if dt.itemsize <= 8 else ScalarType.COMPLEX128
    if dt.kind == "f" and dt.itemsize <= 4:
        return ScalarType.FLOAT32
    if dt.kind in "biuf":
        return ScalarType.FLOAT64
    raise ValueError(f"Unsupported matrix dtype: {dt}")


def list_scalar_types() -> list[ScalarType]:
    """List scalar types, real before complex, single before double."""
    return [
        ScalarType.FLOAT32,
        ScalarType.FLOAT64,
        ScalarType.COMPLEX64,
        ScalarType.COMPLEX128,
    ]


def parse_scalar_type(name: str) -> ScalarType:
    """Parse a string into a ScalarType enum."""
    normalized = name.lower().replace("-", "_").replace(" ", "_")

    for scalar in ScalarType:
        if scalar.value == normalized:
            return scalar
    if normalized in _ALIASES:
        return _ALIASES[normalized]

    valid = [s.value for s in ScalarType] + sorted(_ALIASES)
    raise ValueError(f"Unknown scalar type: '{name}'. Valid: {valid}")


__all__ = [
    "ScalarSpec",
    "ScalarType",
    "get_dtype",
    "get_eps",
    "get_real_dtype",
    "get_spec",
    "is_complex",
    "list_scalar_types",
    "parse_scalar_type",
    "scalar_type_of",
]
