"""Grid representation and construction-time validation."""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass
from typing import (Dict, Generic, Hashable, Iterator, List, Mapping, Optional,
                    Sequence, Tuple, TypeVar, Union)

from ..core.constants import EMPTY
from ..core.exceptions import CellRangeError, ConfigurationError, DomainError
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

T = TypeVar("T", bound=Hashable)

Coord = Tuple[int, int]
Dims = Union[int, Tuple[int, int]]


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class GridConfig:
    """Configuration values describing a puzzle grid.

    ``size`` is either the side length n or a ``(rows, cols)`` pair; when it is
    omitted n is taken from the length of ``alphabet``. When ``cage_shape`` is
    omitted the classic ``(sqrt(n), sqrt(n))`` blocks are used; when
    ``alphabet`` is omitted the values are ``1..n``.
    """

    size: Optional[Dims] = None
    cage_shape: Optional[Tuple[int, int]] = None
    alphabet: Optional[Sequence[Hashable]] = None
    classic_only: bool = False

    def resolve(self) -> Tuple[int, Tuple[int, int], Tuple[Hashable, ...]]:
        """Validate the configuration and return ``(n, cage_shape, alphabet)``."""

        values = None if self.alphabet is None else tuple(self.alphabet)
        n = self._resolve_size(values)
        root = math.isqrt(n)
        is_square = root * root == n

        if self.cage_shape is None:
            if not is_square:
                raise ConfigurationError(
                    f"Grid size {n} is not a perfect square; a cage shape must be given"
                )
            cage_shape = (root, root)
        else:
            cage_shape = self._resolve_cage_shape(n)

        if self.classic_only and (not is_square or cage_shape != (root, root)):
            raise ConfigurationError(
                f"Classic mode requires square cages of side sqrt({n}), got {cage_shape}"
            )

        alphabet = self._resolve_alphabet(n, values)
        return n, cage_shape, alphabet

    def _resolve_size(self, values: Optional[Tuple[Hashable, ...]]) -> int:
        if self.size is None:
            if values is None:
                raise ConfigurationError("Either a grid size or an alphabet must be given")
            rows = cols = len(values)
        elif _is_int(self.size):
            rows = cols = self.size
        elif isinstance(self.size, tuple) and len(self.size) == 2 and all(map(_is_int, self.size)):
            rows, cols = self.size
        else:
            raise ConfigurationError(
                f"Grid size must be an int or a (rows, cols) pair of ints, got {self.size!r}"
            )
        if rows != cols:
            raise ConfigurationError(f"Grid must be square, got {rows}x{cols}")
        if rows < 1:
            raise ConfigurationError(f"Grid size must be positive, got {rows}")
        return rows

    def _resolve_cage_shape(self, n: int) -> Tuple[int, int]:
        shape = self.cage_shape
        if not (isinstance(shape, tuple) and len(shape) == 2 and all(map(_is_int, shape))):
            raise ConfigurationError(f"Cage shape must be a pair of ints, got {shape!r}")
        cage_rows, cage_cols = shape
        if cage_rows < 1 or cage_cols < 1:
            raise ConfigurationError(f"Cage shape must be positive, got {shape}")
        if n % cage_rows or n % cage_cols:
            raise ConfigurationError(
                f"Cage shape {cage_rows}x{cage_cols} does not divide grid size {n}"
            )
        if cage_rows * cage_cols != n:
            raise ConfigurationError(
                f"Cage shape {cage_rows}x{cage_cols} holds {cage_rows * cage_cols} cells, "
                f"expected {n}"
            )
        return (cage_rows, cage_cols)

    def _resolve_alphabet(
        self, n: int, alphabet: Optional[Tuple[Hashable, ...]]
    ) -> Tuple[Hashable, ...]:
        if alphabet is None:
            return tuple(range(1, n + 1))
        if len(alphabet) != n:
            raise ConfigurationError(
                f"Alphabet has {len(alphabet)} values, expected {n}"
            )
        if any(value is EMPTY for value in alphabet):
            raise ConfigurationError("Alphabet may not contain the EMPTY marker")
        try:
            distinct = set(alphabet)
        except TypeError as exc:
            raise ConfigurationError(f"Alphabet values must be hashable: {exc}") from exc
        if len(distinct) != n:
            raise ConfigurationError(f"Alphabet contains duplicate values: {list(alphabet)}")
        return alphabet


class PuzzleGrid(Generic[T]):
    """Square grid of cells drawing values from a fixed ordered alphabet.

    Coordinates are 1-indexed. Unfilled cells read back as ``EMPTY``.
    """

    def __init__(self, config: GridConfig) -> None:
        n, cage_shape, alphabet = config.resolve()
        self.config = config
        self._size = n
        self._cage_shape = cage_shape
        self._alphabet: Tuple[T, ...] = alphabet  # type: ignore[assignment]
        self._index: Dict[T, int] = {value: k for k, value in enumerate(self._alphabet, start=1)}
        self._cells: Dict[Coord, T] = {}
        LOGGER.debug(
            "Created %sx%s grid with %sx%s cages", n, n, cage_shape[0], cage_shape[1]
        )

    @classmethod
    def create(
        cls,
        dims: Optional[Dims] = None,
        cage_shape: Optional[Tuple[int, int]] = None,
        alphabet: Optional[Sequence[T]] = None,
        *,
        classic_only: bool = False,
    ) -> "PuzzleGrid[T]":
        return cls(GridConfig(dims, cage_shape, alphabet, classic_only))

    # ------------------------------------------------------------------
    # Read-only configuration
    # ------------------------------------------------------------------
    @property
    def size(self) -> int:
        return self._size

    @property
    def dims(self) -> Tuple[int, int]:
        return (self._size, self._size)

    @property
    def cage_shape(self) -> Tuple[int, int]:
        return self._cage_shape

    @property
    def alphabet(self) -> Tuple[T, ...]:
        return self._alphabet

    def index_of(self, value: T) -> Optional[int]:
        """Return the 1-indexed alphabet position of ``value``, or None."""

        try:
            return self._index.get(value)
        except TypeError:
            # unhashable values can never be alphabet members
            return None

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------
    def get(self, row: int, col: int):
        self._check_coord(row, col)
        return self._cells.get((row, col), EMPTY)

    def set(self, row: int, col: int, value: T) -> None:
        self._check_coord(row, col)
        self._check_value(row, col, value)
        self._cells[(row, col)] = value

    def clear(self, row: int, col: int) -> None:
        self._check_coord(row, col)
        self._cells.pop((row, col), None)

    def update(self, values: Mapping[Coord, T]) -> None:
        """Write several cells at once; nothing is written if any entry is invalid."""

        for (row, col), value in values.items():
            self._check_coord(row, col)
            self._check_value(row, col, value)
        for (row, col), value in values.items():
            self._cells[(row, col)] = value

    def filled_cells(self) -> Iterator[Tuple[Coord, T]]:
        for coord in sorted(self._cells):
            yield coord, self._cells[coord]

    def is_complete(self) -> bool:
        return len(self._cells) == self._size * self._size

    def _check_coord(self, row: int, col: int) -> None:
        if not (_is_int(row) and _is_int(col)):
            raise CellRangeError(f"Cell coordinates must be ints, got ({row!r},{col!r})")
        if not (1 <= row <= self._size and 1 <= col <= self._size):
            raise CellRangeError(
                f"Cell ({row},{col}) outside 1..{self._size} grid"
            )

    def _check_value(self, row: int, col: int, value: T) -> None:
        if self.index_of(value) is None:
            raise DomainError(
                f"Value {value!r} at ({row},{col}) is not in alphabet {list(self._alphabet)}"
            )

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    def rows(self) -> Iterator[List[Coord]]:
        n = self._size
        for i in range(1, n + 1):
            yield [(i, j) for j in range(1, n + 1)]

    def columns(self) -> Iterator[List[Coord]]:
        n = self._size
        for j in range(1, n + 1):
            yield [(i, j) for i in range(1, n + 1)]

    def cages(self) -> Iterator[List[Coord]]:
        """Yield the cells of each cage block, blocks in row-major order."""

        cage_rows, cage_cols = self._cage_shape
        for a in range(1, self._size // cage_rows + 1):
            for b in range(1, self._size // cage_cols + 1):
                yield [
                    (i, j)
                    for i in range((a - 1) * cage_rows + 1, a * cage_rows + 1)
                    for j in range((b - 1) * cage_cols + 1, b * cage_cols + 1)
                ]

    # ------------------------------------------------------------------
    # Copies
    # ------------------------------------------------------------------
    def copy(self) -> "PuzzleGrid[T]":
        clone = self.blank_copy()
        clone._cells = copy.deepcopy(self._cells)
        return clone

    def blank_copy(self) -> "PuzzleGrid[T]":
        """Return an empty grid sharing this grid's configuration."""

        clone = copy.copy(self)
        clone._cells = {}
        return clone

    def __repr__(self) -> str:
        return (
            f"PuzzleGrid(size={self._size}, cage_shape={self._cage_shape}, "
            f"filled={len(self._cells)})"
        )


def create_grid(
    dims: Optional[Dims] = None,
    cage_shape: Optional[Tuple[int, int]] = None,
    alphabet: Optional[Sequence[T]] = None,
    *,
    classic_only: bool = False,
) -> PuzzleGrid[T]:
    """Build a validated grid; defaults give classic Sudoku of side n.

    With only an alphabet, n is its length: ``create_grid(alphabet="ABCD")``.
    """

    return PuzzleGrid.create(dims, cage_shape, alphabet, classic_only=classic_only)
