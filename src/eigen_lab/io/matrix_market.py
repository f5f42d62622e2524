"""Matrix Market (.mtx) reading and writing.

Matrices are read with scipy.io and densified, since every solver works on
dense storage. The header's field decides whether the matrix is complex.
Pattern matrices (structure only) get 1.0 for every stored entry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import numpy as np
import scipy.io
import scipy.sparse

from eigen_lab.exceptions import IOFileError

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LoadedMatrix:
    """Dense matrix read from a Matrix Market file."""

    name: str
    """File stem, used to name result files."""

    matrix: NDArray[Any]
    """Dense matrix (float64 or complex128)."""

    is_complex: bool
    """True if the file declares a complex field."""

    field: str
    """Header field: real, integer, complex or pattern."""

    symmetry: str
    """Header symmetry: general, symmetric, skew-symmetric or hermitian."""

    @property
    def shape(self) -> tuple[int, ...]:
        return self.matrix.shape


def read_matrix_market(path: str | Path) -> LoadedMatrix:
    """Read a Matrix Market file into a dense matrix.

    Raises:
        IOFileError: If the file is missing or cannot be parsed.
    """
    path = Path(path)
    if not path.is_file():
        raise IOFileError(
            f"Matrix file not found: {path}",
            tip="Check the path passed to the solver.",
        )

    try:
        _, _, _, _, field, symmetry = scipy.io.mminfo(str(path))
        data = scipy.io.mmread(str(path))
    except (OSError, ValueError, IndexError) as exc:
        raise IOFileError(
            f"Failed to parse Matrix Market file {path}: {exc}",
            tip="The file must start with a '%%MatrixMarket matrix' header.",
        ) from exc

    if scipy.sparse.issparse(data):
        data = data.toarray()

    is_complex = field == "complex"
    dtype = np.complex128 if is_complex else np.float64
    matrix = np.asarray(data, dtype=dtype)

    logger.info(
        "Read %s: %dx%d %s %s matrix",
        path.name,
        matrix.shape[0],
        matrix.shape[1],
        symmetry,
        field,
    )
    return LoadedMatrix(
        name=path.stem,
        matrix=matrix,
        is_complex=is_complex,
        field=field,
        symmetry=symmetry,
    )


def write_matrix_market(
    path: str | Path,
    matrix: ArrayLike,
    *,
    comment: str = "",
) -> Path:
    """Write a dense matrix to a Matrix Market file in coordinate format.

    Raises:
        IOFileError: If the file cannot be written.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        sparse = scipy.sparse.coo_matrix(np.asarray(matrix))
        scipy.io.mmwrite(str(path), sparse, comment=comment)
    except OSError as exc:
        raise IOFileError(f"Failed to write Matrix Market file {path}: {exc}") from exc

    logger.info("Wrote %s", path)
    return path


__all__ = [
    "LoadedMatrix",
    "read_matrix_market",
    "write_matrix_market",
]
