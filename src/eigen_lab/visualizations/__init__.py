"""Visualization utilities for solver results.

This module contains:
- Complex-plane eigenvalue plots (matplotlib, optional)
"""

from eigen_lab.visualizations.eigen_plot import (
    HAS_MATPLOTLIB,
    MatplotlibRenderer,
    PlotRenderer,
    load_eigenvalue_data,
)

__all__ = [
    "HAS_MATPLOTLIB",
    "MatplotlibRenderer",
    "PlotRenderer",
    "load_eigenvalue_data",
]
