"""Solve entry point: encode, run the engine, decode.

A grid is owned by a single caller for the duration of :func:`solve`; the
decision tensor and the solver model live only inside one call.
"""

from __future__ import annotations

from typing import Optional

from ..core.constants import REASON_SOLVER_ERROR
from ..core.exceptions import SolveFailure
from ..utils.logger import get_logger
from .decoder import decode, resolve_values
from .encoder import encode
from .grid import PuzzleGrid
from .solver import CpSatSolver, SolverAdapter, SolverConfig
from .validator import GridValidator

LOGGER = get_logger(__name__)


def solve(
    grid: PuzzleGrid,
    solver: Optional[SolverAdapter] = None,
    *,
    config: Optional[SolverConfig] = None,
    verify: bool = True,
) -> PuzzleGrid:
    """Complete ``grid`` in place and return it.

    Args:
        grid: Grid holding the givens. Left untouched on failure.
        solver: Engine adapter; defaults to :class:`CpSatSolver`.
        config: Settings for the default CP-SAT adapter. Ignored when
            ``solver`` is supplied.
        verify: Re-check the decoded assignment against the row, column and
            cage rules before installing it.

    Raises:
        SolveFailure: the puzzle has no completion (``is_infeasible``) or the
            engine did not produce a usable answer.
    """

    engine = solver if solver is not None else CpSatSolver(config)
    constraints = encode(grid)
    LOGGER.info(
        "Solving %sx%s grid with %d givens", grid.size, grid.size, len(constraints.fixed)
    )
    result = engine.solve(constraints)

    if verify:
        values = resolve_values(grid, result)
        for coord, given in grid.filled_cells():
            if values[coord] != given:
                raise SolveFailure(
                    REASON_SOLVER_ERROR, result.status, f"given at {coord} was overwritten"
                )
        candidate = grid.blank_copy()
        candidate.update(values)
        report = GridValidator().validate(candidate)
        if not report.ok:
            raise SolveFailure(REASON_SOLVER_ERROR, result.status, "; ".join(report.messages))

    return decode(grid, result)
