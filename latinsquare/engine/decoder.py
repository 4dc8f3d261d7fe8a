"""Install a solver assignment back into a puzzle grid."""

from __future__ import annotations

from typing import Dict, Tuple

from ..core.constants import REASON_INFEASIBLE, REASON_SOLVER_ERROR, SolveStatus
from ..core.exceptions import SolveFailure
from ..core.models import SolveResult
from ..utils.logger import get_logger
from .grid import PuzzleGrid

LOGGER = get_logger(__name__)


def decode(grid: PuzzleGrid, result: SolveResult) -> PuzzleGrid:
    """Write the feasible assignment in ``result`` into ``grid``.

    Raises :class:`SolveFailure` when the solver reported infeasibility or an
    error, or when the assignment does not pick exactly one value per cell.
    The grid is only written once every cell has been resolved.
    """

    values = resolve_values(grid, result)
    for (row, col), value in values.items():
        grid.set(row, col, value)
    LOGGER.debug("Installed %d cell values", len(values))
    return grid


def resolve_values(grid: PuzzleGrid, result: SolveResult) -> Dict[Tuple[int, int], object]:
    """Map each cell to its alphabet value without touching ``grid``."""

    if result.status == SolveStatus.INFEASIBLE:
        raise SolveFailure(REASON_INFEASIBLE, result.status, result.message or None)
    if result.status == SolveStatus.ERROR:
        raise SolveFailure(REASON_SOLVER_ERROR, result.status, result.message or None)
    if result.assignment is None:
        raise SolveFailure(REASON_SOLVER_ERROR, result.status, "feasible result without assignment")

    n = grid.size
    alphabet = grid.alphabet
    values: Dict[Tuple[int, int], object] = {}
    for i in range(1, n + 1):
        for j in range(1, n + 1):
            chosen = [k for k in range(1, n + 1) if result.assignment.get((i, j, k))]
            if len(chosen) != 1:
                LOGGER.error("Cell (%s,%s) has %d true values in assignment", i, j, len(chosen))
                raise SolveFailure(
                    REASON_SOLVER_ERROR,
                    result.status,
                    f"cell ({i},{j}) has {len(chosen)} values set",
                )
            values[(i, j)] = alphabet[chosen[0] - 1]
    return values
