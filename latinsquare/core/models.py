"""Data models exchanged between the encoder, solver adapters and decoder."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .constants import ConstraintFamily, SolveStatus

# (row, col, value index), all 1-indexed.
VarIndex = Tuple[int, int, int]


@dataclass(frozen=True)
class ExactlyOne:
    """Exactly one of ``variables`` must be true."""

    family: ConstraintFamily
    label: str
    variables: Tuple[VarIndex, ...]


@dataclass(frozen=True)
class FixedValue:
    """A given: cell ``(row, col)`` holds the ``index``-th alphabet value."""

    row: int
    col: int
    index: int

    @property
    def variable(self) -> VarIndex:
        return (self.row, self.col, self.index)


@dataclass
class ConstraintSet:
    """Solver-agnostic feasibility model over an n x n x n boolean tensor."""

    size: int
    constraints: List[ExactlyOne] = field(default_factory=list)
    fixed: List[FixedValue] = field(default_factory=list)

    def variables(self) -> Iterator[VarIndex]:
        n = self.size
        for i in range(1, n + 1):
            for j in range(1, n + 1):
                for k in range(1, n + 1):
                    yield (i, j, k)

    def count(self, family: ConstraintFamily) -> int:
        return sum(1 for c in self.constraints if c.family == family)

    def __len__(self) -> int:
        return len(self.constraints) + len(self.fixed)


@dataclass
class SolveResult:
    """Outcome of a single solver call.

    ``assignment`` maps every decision triple to its boolean value and is only
    populated for feasible results.
    """

    status: SolveStatus
    assignment: Optional[Dict[VarIndex, bool]] = None
    message: str = ""
    wall_time: float = 0.0

    @property
    def is_feasible(self) -> bool:
        return self.status == SolveStatus.FEASIBLE
