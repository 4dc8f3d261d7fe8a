"""Custom exception hierarchy for grid construction and solving."""

from __future__ import annotations

from typing import Optional

from .constants import REASON_INFEASIBLE, SolveStatus


class LatinSquareError(Exception):
    """Base exception for all latinsquare failures."""


class ConfigurationError(LatinSquareError):
    """Raised when grid dimensions, cage shape or alphabet are inconsistent."""


class DomainError(LatinSquareError):
    """Raised when a value outside the grid alphabet is written to a cell."""


class CellRangeError(DomainError):
    """Raised when cell coordinates fall outside the grid."""


class ValidationError(LatinSquareError):
    """Raised when a grid breaks a row, column or cage rule."""


class SolveFailure(LatinSquareError):
    """Raised when no assignment could be installed into the grid.

    ``reason`` is either ``"no feasible assignment"`` (the puzzle itself is
    contradictory) or ``"solver error"`` (the engine failed to answer, or
    answered with something unusable).
    """

    def __init__(self, reason: str, status: SolveStatus, detail: Optional[str] = None) -> None:
        message = reason if not detail else f"{reason}: {detail}"
        super().__init__(message)
        self.reason = reason
        self.status = status
        self.detail = detail

    @property
    def is_infeasible(self) -> bool:
        return self.reason == REASON_INFEASIBLE
