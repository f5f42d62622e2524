"""Data module for scalar field definitions."""

from eigen_lab.data.scalar_types import (
    ScalarSpec,
    ScalarType,
    get_dtype,
    get_eps,
    get_real_dtype,
    get_spec,
    is_complex,
    list_scalar_types,
    parse_scalar_type,
    scalar_type_of,
)

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
