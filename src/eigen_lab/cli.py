"""
Command-line interface for Eigen Lab.

Usage:
    eigen-lab info               Show supported scalar types
    eigen-lab methods            Show available eigenvalue solvers
    eigen-lab solve FILE.mtx     Compute eigenvalues of a Matrix Market file
    eigen-lab generate OUT.mtx   Write a test matrix with a known spectrum
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from eigen_lab import __version__
from eigen_lab.algorithms.base import DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE
from eigen_lab.algorithms.matrices import DEFAULT_SEED, SPECTRUM_TYPES, create_test_matrix
from eigen_lab.config import SolverConfig, SolverMethod
from eigen_lab.data import ScalarType, get_spec
from eigen_lab.exceptions import InvalidInputError, SolverError
from eigen_lab.io import (
    export_eigenvalues_dat,
    read_matrix_market,
    write_eigenvalues,
    write_eigenvectors,
    write_matrix_market,
)
from eigen_lab.runner import SolveReport, run_solver
from eigen_lab.visualizations import MatplotlibRenderer, PlotRenderer

app = typer.Typer(
    name="eigen-lab",
    help="Iterative eigenvalue solvers for Matrix Market files",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"eigen-lab version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich."""
    handler = RichHandler(console=console, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    package_logger = logging.getLogger("eigen_lab")
    package_logger.handlers = [handler]
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def parse_shift(value: str | None) -> complex | None:
    """Parse a shift such as '1.5', '-2', '2-1j' or '2-1i'."""
    if value is None:
        return None
    text = value.strip().replace(" ", "").replace("i", "j")
    try:
        return complex(text)
    except ValueError as exc:
        raise InvalidInputError(
            f"Invalid shift: '{value}'", tip="Use a number such as 1.5 or 2-1j."
        ) from exc


@app.callback()  # type: ignore[misc]
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Show debug logging."),
    ] = False,
) -> None:
    """Eigen Lab - Iterative eigenvalue solvers."""
    configure_logging(verbose)


@app.command()  # type: ignore[misc]
def info() -> None:
    """Display the supported scalar types."""
    table = Table(title="Scalar Types")

    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("Bits", justify="right")
    table.add_column("Complex", justify="center")
    table.add_column("Machine ε", justify="right")

    for scalar in ScalarType:
        spec = get_spec(scalar)
        table.add_row(
            scalar.value,
            str(spec.bits),
            "✓" if spec.is_complex else "✗",
            f"{spec.machine_epsilon:.2e}",
        )

    console.print(table)
    console.print(
        "\n[yellow]Note:[/] --field real selects float64, --field complex selects complex128."
    )


@app.command()  # type: ignore[misc]
def methods() -> None:
    """Display the available eigenvalue solvers."""
    table = Table(title="Eigenvalue Solvers")

    table.add_column("Method", style="cyan", no_wrap=True)
    table.add_column("Description")
    table.add_column("Shift", justify="center")
    table.add_column("Eigenvectors", justify="center")

    for method in SolverMethod:
        table.add_row(
            method.value,
            method.description,
            "required" if method.requires_shift else "-",
            "✓" if method.has_eigenvectors else "✗",
        )

    console.print(table)


def print_report(report: SolveReport) -> None:
    """Print the eigenvalues of a run as a table."""
    result = report.result
    table = Table(title=f"Eigenvalues of {report.name} ({report.config.method.value})")

    table.add_column("#", justify="right", style="dim")
    table.add_column("Re(λ)", justify="right")
    table.add_column("Im(λ)", justify="right")
    table.add_column("|λ|", justify="right")

    for index, value in enumerate(result.eigenvalues):
        table.add_row(
            str(index),
            f"{value.real:.10g}",
            f"{value.imag:.10g}",
            f"{abs(value):.10g}",
        )

    console.print(table)
    console.print(
        f"  Iterations: {result.iterations}  "
        f"Residual: {result.residual:.3e}  "
        f"Time: {result.total_time:.3f}s"
    )


def save_report(
    report: SolveReport,
    output_dir: Path,
    renderer: PlotRenderer | None = None,
) -> list[Path]:
    """Write result files and, with a renderer, the eigenvalue plot."""
    written = [
        write_eigenvalues(report.solver, report.name, output_dir),
        export_eigenvalues_dat(report.solver, report.name, output_dir),
    ]
    vectors = write_eigenvectors(report.solver, report.name, output_dir)
    if vectors is not None:
        written.append(vectors)
    if renderer is not None:
        plot_path = output_dir / f"{report.name}_{report.config.method.value}.png"
        written.append(renderer.render(written[1], plot_path))
    return written


@app.command()  # type: ignore[misc]
def solve(
    matrix: Annotated[
        Path,
        typer.Argument(help="Matrix Market file (.mtx)"),
    ],
    method: Annotated[
        str,
        typer.Option("--method", "-m", help="Solver: qr, pm, im, pms or ims"),
    ] = "qr",
    field: Annotated[
        str,
        typer.Option("--field", "-f", help="Scalar field: real or complex"),
    ] = "real",
    max_iterations: Annotated[
        int,
        typer.Option("--max-iter", "-i", help="Maximum iterations"),
    ] = DEFAULT_MAX_ITERATIONS,
    tolerance: Annotated[
        float,
        typer.Option("--tol", "-t", help="Convergence tolerance"),
    ] = DEFAULT_TOLERANCE,
    shift: Annotated[
        str | None,
        typer.Option("--shift", "-s", help="Shift for pms/ims (e.g. 1.5 or 2-1j)"),
    ] = None,
    seed: Annotated[
        int | None,
        typer.Option("--seed", help="Seed for random starting vectors"),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Directory for result files"),
    ] = None,
    plot: Annotated[
        bool,
        typer.Option("--plot", help="Render eigenvalues to PNG (needs matplotlib)"),
    ] = False,
) -> None:
    """Compute eigenvalues of a Matrix Market file."""
    try:
        config = SolverConfig(
            method=method,  # type: ignore[arg-type]
            scalar_type=field,  # type: ignore[arg-type]
            max_iterations=max_iterations,
            tolerance=tolerance,
            shift=parse_shift(shift),
            seed=seed,
        )
        loaded = read_matrix_market(matrix)
        report = run_solver(config, loaded)
        print_report(report)

        if output_dir is None and plot:
            output_dir = Path("results")
        if output_dir is not None:
            renderer = None
            if plot:
                renderer = MatplotlibRenderer(title=f"Eigenvalues of {loaded.name}")
            for path in save_report(report, output_dir, renderer):
                console.print(f"  Wrote [bold]{path}[/]")
    except (SolverError, ImportError) as exc:
        console.print(str(exc), style="red", markup=False)
        raise typer.Exit(code=1) from exc


@app.command()  # type: ignore[misc]
def generate(
    output: Annotated[
        Path,
        typer.Argument(help="Output Matrix Market file"),
    ],
    size: Annotated[
        int,
        typer.Option("--size", "-n", help="Matrix dimension"),
    ] = 50,
    condition_number: Annotated[
        float,
        typer.Option("--condition", "-k", help="Largest/smallest eigenvalue ratio"),
    ] = 100.0,
    spectrum: Annotated[
        str,
        typer.Option("--spectrum", help=f"One of {', '.join(SPECTRUM_TYPES)}"),
    ] = "linear",
    complex_field: Annotated[
        bool,
        typer.Option("--complex", help="Generate a complex Hermitian matrix"),
    ] = False,
    seed: Annotated[
        int,
        typer.Option("--seed", help="Random seed"),
    ] = DEFAULT_SEED,
) -> None:
    """Write a symmetric (or Hermitian) matrix with a known spectrum."""
    try:
        problem = create_test_matrix(
            size,
            condition_number,
            spectrum=spectrum,
            complex_field=complex_field,
            seed=seed,
        )
        write_matrix_market(
            output,
            problem.matrix,
            comment=f"{spectrum} spectrum, condition number {condition_number:g}, seed {seed}",
        )
    except (ValueError, SolverError) as exc:
        console.print(str(exc), style="red", markup=False)
        raise typer.Exit(code=1) from exc

    console.print(f"Wrote [bold]{output}[/] ({size}×{size}, {spectrum} spectrum)")
    console.print(f"  Largest eigenvalue:  {problem.dominant_eigenvalue.real:.10g}")
    console.print(f"  Smallest eigenvalue: {problem.smallest_eigenvalue.real:.10g}")
    console.print(f"  Dominance ratio:     {problem.dominance_ratio:.4f}")


if __name__ == "__main__":
    app()
