"""Generalized Sudoku / Latin-square solver built on an exact-one encoding.

This package exposes the public API surface via:

- ``latinsquare.engine.grid.PuzzleGrid`` and ``create_grid``: the validated
  puzzle container.
- ``latinsquare.engine.encoder.encode``: grid to solver-agnostic constraints.
- ``latinsquare.engine.solver.CpSatSolver``: the OR-Tools CP-SAT adapter.
- ``latinsquare.engine.pipeline.solve``: encode, solve and decode in one call.
"""

from .core.constants import EMPTY, SolveStatus
from .core.exceptions import (CellRangeError, ConfigurationError, DomainError,
                              LatinSquareError, SolveFailure)
from .engine.decoder import decode
from .engine.encoder import encode
from .engine.grid import GridConfig, PuzzleGrid, create_grid
from .engine.pipeline import solve
from .engine.solver import CpSatSolver, SolverAdapter, SolverConfig
from .engine.validator import GridValidator, ValidationResult

__all__ = [
    "EMPTY",
    "SolveStatus",
    "LatinSquareError",
    "ConfigurationError",
    "DomainError",
    "CellRangeError",
    "SolveFailure",
    "GridConfig",
    "PuzzleGrid",
    "create_grid",
    "encode",
    "decode",
    "solve",
    "CpSatSolver",
    "SolverAdapter",
    "SolverConfig",
    "GridValidator",
    "ValidationResult",
]

__version__ = "0.1.0"
