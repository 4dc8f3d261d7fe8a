"""Deterministic rule validation for puzzle grids."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from ..core.constants import EMPTY
from ..core.exceptions import ValidationError
from .grid import PuzzleGrid
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class GridValidator:
    """Checks row, column and cage rules over a grid."""

    def validate(self, grid: PuzzleGrid) -> ValidationResult:
        """Full check of a solved grid: complete, and every group a permutation."""

        try:
            self._check_complete(grid)
            self._check_alphabet(grid)
            self._check_groups(grid, partial=False)
        except ValidationError as exc:
            LOGGER.error("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=[str(exc)])
        return ValidationResult(ok=True, messages=[])

    def validate_givens(self, grid: PuzzleGrid) -> ValidationResult:
        """Check that no filled cells collide; empty cells are allowed."""

        try:
            self._check_alphabet(grid)
            self._check_groups(grid, partial=True)
        except ValidationError as exc:
            LOGGER.info("Givens conflict: %s", exc)
            return ValidationResult(ok=False, messages=[str(exc)])
        return ValidationResult(ok=True, messages=[])

    def _check_complete(self, grid: PuzzleGrid) -> None:
        for cells in grid.rows():
            for row, col in cells:
                if grid.get(row, col) is EMPTY:
                    raise ValidationError(f"Cell ({row},{col}) is empty")

    def _check_alphabet(self, grid: PuzzleGrid) -> None:
        for (row, col), value in grid.filled_cells():
            if grid.index_of(value) is None:
                raise ValidationError(f"Invalid value {value!r} at ({row},{col})")

    def _check_groups(self, grid: PuzzleGrid, partial: bool) -> None:
        groups: Iterable[Tuple[str, Iterable[List[Tuple[int, int]]]]] = (
            ("row", grid.rows()),
            ("column", grid.columns()),
            ("cage", grid.cages()),
        )
        for kind, members in groups:
            for number, cells in enumerate(members, start=1):
                values = [grid.get(r, c) for r, c in cells]
                values = [v for v in values if v is not EMPTY]
                duplicates = [v for v, count in Counter(values).items() if count > 1]
                if duplicates:
                    raise ValidationError(
                        f"Duplicate value {duplicates[0]!r} in {kind} {number}"
                    )
                if not partial and len(values) != grid.size:
                    raise ValidationError(f"{kind.capitalize()} {number} is incomplete")
