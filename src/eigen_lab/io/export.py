"""Result writers.

Files are named after the matrix and written under an output directory:

    <name>_values.txt        one eigenvalue per line
    <name>_eigenvalues.dat   "real imag" columns, input for plotting
    <name>_vectors.txt       eigenvectors, one per column
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

from eigen_lab.exceptions import IOFileError, NotImplementedSolverError

if TYPE_CHECKING:
    from eigen_lab.algorithms.base import EigenvalueSolver

logger = logging.getLogger(__name__)


def _prepare(out_dir: str | Path, filename: str) -> Path:
    out_dir = Path(out_dir)
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise IOFileError(
            f"Cannot create output directory {out_dir}: {exc}",
            tip="Check write permissions for the output location.",
        ) from exc
    return out_dir / filename


def _write(path: Path, text: str) -> Path:
    try:
        path.write_text(text)
    except OSError as exc:
        raise IOFileError(f"Failed to open file: {path}: {exc}") from exc
    logger.info("Results written to file: %s", path)
    return path


def format_complex(value: complex) -> str:
    """Format as 'a+bi' with full double precision."""
    return f"{value.real:.16g}{value.imag:+.16g}i"


def write_eigenvalues(
    solver: EigenvalueSolver, name: str, out_dir: str | Path = "results"
) -> Path:
    """Write the solver's eigenvalues to ``<name>_values.txt``."""
    path = _prepare(out_dir, f"{name}_values.txt")
    lines = [format_complex(complex(v)) for v in solver.get_eigenvalues()]
    return _write(path, "\n".join(lines) + "\n")


def export_eigenvalues_dat(
    solver: EigenvalueSolver, name: str, out_dir: str | Path = "results"
) -> Path:
    """Write eigenvalues as 'real imag' rows to ``<name>_eigenvalues.dat``."""
    path = _prepare(out_dir, f"{name}_eigenvalues.dat")
    eigenvalues = solver.get_eigenvalues()
    rows = np.column_stack([eigenvalues.real, eigenvalues.imag])
    lines = [f"{re:.16g} {im:.16g}" for re, im in rows]
    return _write(path, "\n".join(lines) + "\n")


def write_eigenvectors(
    solver: EigenvalueSolver, name: str, out_dir: str | Path = "results"
) -> Path | None:
    """Write eigenvectors to ``<name>_vectors.txt``.

    Returns None, without writing, for solvers that compute no eigenvectors.
    """
    try:
        eigenvectors = solver.get_eigenvectors()
    except NotImplementedSolverError:
        logger.warning("This solver does not compute eigenvectors; skipping %s", name)
        return None

    path = _prepare(out_dir, f"{name}_vectors.txt")
    if np.iscomplexobj(eigenvectors):
        lines = [" ".join(format_complex(complex(z)) for z in row) for row in eigenvectors]
    else:
        lines = [" ".join(f"{x:.16g}" for x in row) for row in eigenvectors]
    return _write(path, "\n".join(lines) + "\n")


__all__ = [
    "export_eigenvalues_dat",
    "format_complex",
    "write_eigenvalues",
    "write_eigenvectors",
]
