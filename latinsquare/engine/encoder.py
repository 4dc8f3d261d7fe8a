"""Exact-one encoding of a puzzle grid over a boolean decision tensor."""

from __future__ import annotations

from ..core.constants import ConstraintFamily
from ..core.exceptions import DomainError
from ..core.models import ConstraintSet, ExactlyOne, FixedValue
from ..utils.logger import get_logger
from .grid import PuzzleGrid

LOGGER = get_logger(__name__)


def encode(grid: PuzzleGrid) -> ConstraintSet:
    """Build the feasibility model for ``grid``.

    Variable ``(i, j, k)`` stands for "cell (i, j) holds ``alphabet[k]``".
    Constraints are emitted in a fixed order: cells, rows, columns, cages,
    then the givens in row-major order.
    """

    n = grid.size
    values = range(1, n + 1)
    constraints = ConstraintSet(size=n)
    add = constraints.constraints.append

    # Each cell holds exactly one value
    for i in values:
        for j in values:
            add(ExactlyOne(
                ConstraintFamily.CELL,
                f"cell_{i}_{j}",
                tuple((i, j, k) for k in values),
            ))

    # Each row holds every value once
    for i in values:
        for k in values:
            add(ExactlyOne(
                ConstraintFamily.ROW,
                f"row_{i}_v{k}",
                tuple((i, j, k) for j in values),
            ))

    # Each column holds every value once
    for j in values:
        for k in values:
            add(ExactlyOne(
                ConstraintFamily.COLUMN,
                f"col_{j}_v{k}",
                tuple((i, j, k) for i in values),
            ))

    # Each cage holds every value once
    for cage_number, cells in enumerate(grid.cages(), start=1):
        for k in values:
            add(ExactlyOne(
                ConstraintFamily.CAGE,
                f"cage_{cage_number}_v{k}",
                tuple((i, j, k) for i, j in cells),
            ))

    for (i, j), value in grid.filled_cells():
        index = grid.index_of(value)
        if index is None:
            raise DomainError(
                f"Value {value!r} at ({i},{j}) is not in alphabet {list(grid.alphabet)}"
            )
        constraints.fixed.append(FixedValue(i, j, index))

    LOGGER.debug(
        "Encoded %sx%s grid: cell=%d row=%d col=%d cage=%d fixed=%d",
        n,
        n,
        constraints.count(ConstraintFamily.CELL),
        constraints.count(ConstraintFamily.ROW),
        constraints.count(ConstraintFamily.COLUMN),
        constraints.count(ConstraintFamily.CAGE),
        len(constraints.fixed),
    )
    return constraints
