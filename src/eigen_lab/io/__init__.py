"""Matrix input and result output."""

from eigen_lab.io.export import (
    export_eigenvalues_dat,
    write_eigenvalues,
    write_eigenvectors,
)
from eigen_lab.io.matrix_market import (
    LoadedMatrix,
    read_matrix_market,
    write_matrix_market,
)

__all__ = [
    "LoadedMatrix",
    "export_eigenvalues_dat",
    "read_matrix_market",
    "write_eigenvalues",
    "write_eigenvectors",
    "write_matrix_market",
]
