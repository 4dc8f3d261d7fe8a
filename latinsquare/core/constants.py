"""Shared constants and enumerations for the latinsquare solver."""

from __future__ import annotations

from enum import Enum


class _Empty:
    """Marker returned for cells that hold no value."""

    _instance = None

    def __new__(cls) -> "_Empty":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "EMPTY"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_Empty, ())


EMPTY = _Empty()


class SolveStatus(str, Enum):
    """Terminal outcome reported by a solver adapter."""

    FEASIBLE = "FEASIBLE"
    INFEASIBLE = "INFEASIBLE"
    ERROR = "ERROR"


class ConstraintFamily(str, Enum):
    """Exact-one constraint groups emitted by the encoder."""

    CELL = "CELL"
    ROW = "ROW"
    COLUMN = "COLUMN"
    CAGE = "CAGE"


REASON_INFEASIBLE = "no feasible assignment"
REASON_SOLVER_ERROR = "solver error"
