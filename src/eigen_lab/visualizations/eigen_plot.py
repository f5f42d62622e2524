"""Eigenvalue plots.

Rendering is a side effect the CLI injects; solvers never plot. A renderer
takes the "real imag" data file written by export_eigenvalues_dat and an
output image path.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

import numpy as np

from eigen_lab.exceptions import IOFileError

# matplotlib is an optional extra
try:
    from matplotlib.figure import Figure

    HAS_MATPLOTLIB = True
except ImportError:
    Figure = None  # type: ignore[assignment,misc,unused-ignore]
    HAS_MATPLOTLIB = False

logger = logging.getLogger(__name__)


class PlotRenderer(Protocol):
    """Renders an eigenvalue data file to an image."""

    def render(self, data_path: Path, output_path: Path) -> Path:
        """Render ``data_path`` into ``output_path`` and return the output path."""
        ...


def load_eigenvalue_data(data_path: str | Path) -> np.ndarray:
    """Load a 'real imag' data file as a complex array.

    Raises:
        IOFileError: If the file is missing or malformed.
    """
    data_path = Path(data_path)
    try:
        data = np.loadtxt(data_path, ndmin=2)
    except (OSError, ValueError) as exc:
        raise IOFileError(f"Failed to read eigenvalue data {data_path}: {exc}") from exc
    if data.shape[1] != 2:
        raise IOFileError(
            f"Eigenvalue data {data_path} must have 2 columns, got {data.shape[1]}"
        )
    return data[:, 0] + 1j * data[:, 1]


class MatplotlibRenderer:
    """Scatter eigenvalues in the complex plane.

    Args:
        title: Figure title.
        dpi: Output resolution.
    """

    def __init__(self, title: str = "Eigenvalues", dpi: int = 150) -> None:
        if not HAS_MATPLOTLIB:
            raise ImportError(
                "Plotting requires the matplotlib package. "
                "Install with: pip install 'eigen-lab[plot]'"
            )
        self.title = title
        self.dpi = dpi

    def render(self, data_path: Path, output_path: Path) -> Path:
        eigenvalues = load_eigenvalue_data(data_path)
        output_path = Path(output_path)

        fig = Figure(figsize=(6, 5))
        ax = fig.add_subplot()
        ax.scatter(eigenvalues.real, eigenvalues.imag, s=18, color="tab:blue")
        ax.axhline(0.0, color="grey", linewidth=0.6)
        ax.axvline(0.0, color="grey", linewidth=0.6)
        ax.set_xlabel("Re(λ)")
        ax.set_ylabel("Im(λ)")
        ax.set_title(self.title)
        ax.grid(True, alpha=0.3)

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            fig.savefig(output_path, dpi=self.dpi, bbox_inches="tight")
        except OSError as exc:
            raise IOFileError(f"Failed to write plot {output_path}: {exc}") from exc

        logger.info("Plot written to %s", output_path)
        return output_path


__all__ = [
    "HAS_MATPLOTLIB",
    "MatplotlibRenderer",
    "PlotRenderer",
    "load_eigenvalue_data",
]
