"""Exception hierarchy for eigenvalue solvers.

Every error raised by the library derives from SolverError, so callers can
catch a single type at the reporting boundary (the CLI does exactly that).
Each error carries an optional tip that is appended to the message.
"""

from __future__ import annotations


class SolverError(RuntimeError):
    """Base class for all solver errors."""

    prefix: str = ""

    def __init__(self, message: str, tip: str = "") -> None:
        self.message = message
        self.tip = tip
        text = f"{self.prefix}{message}"
        if tip:
            text += f"\nTip: {tip}"
        super().__init__(text)


class SolverInitializationError(SolverError):
    """A parameter is invalid, inconsistent or missing at configuration time."""

    prefix = "Solver Initialization Error: "


class InvalidInputError(SolverError, ValueError):
    """Input validation failed (empty or non-square matrix, missing shift, ...)."""

    prefix = "Input Validation Error: "


class AlgebraError(SolverError):
    """An algebraic operation failed (singular inversion, iteration breakdown)."""

    prefix = "Algebra Error: "


class IterationLimitExceeded(SolverError):
    """The iteration budget ran out before the tolerance was reached."""

    prefix = "Iteration Limit Exceeded: "

    def __init__(
        self,
        message: str,
        tip: str = "",
        *,
        iterations: int = 0,
        displacement: float = float("nan"),
    ) -> None:
        self.iterations = iterations
        self.displacement = displacement
        super().__init__(message, tip)


class NotImplementedSolverError(SolverError, NotImplementedError):
    """The requested capability does not exist for this algorithm."""

    prefix = "Not Implemented: "


class IOFileError(SolverError):
    """Reading or writing a file failed."""

    prefix = "File IO Error: "


__all__ = [
    "AlgebraError",
    "IOFileError",
    "InvalidInputError",
    "IterationLimitExceeded",
    "NotImplementedSolverError",
    "SolverError",
    "SolverInitializationError",
]
