"""CP-SAT adapter solving exact-one feasibility models using OR-Tools."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Protocol

from ortools.sat.python import cp_model

from ..core.constants import SolveStatus
from ..core.models import ConstraintSet, SolveResult, VarIndex
from ..utils.logger import get_logger

LOGGER = get_logger(__name__)


class SolverAdapter(Protocol):
    """Protocol implemented by all solving engines."""

    def solve(self, constraints: ConstraintSet) -> SolveResult:
        ...


@dataclass
class SolverConfig:
    """Tuning knobs passed through to CP-SAT.

    The defaults run a single seeded worker so repeated solves of the same
    puzzle return the same completion.
    """

    timeout_seconds: Optional[float] = None
    num_workers: int = 1
    random_seed: int = 0
    log_search_progress: bool = False


class CpSatSolver:
    """Solve a :class:`ConstraintSet` with the OR-Tools CP-SAT engine."""

    def __init__(self, config: Optional[SolverConfig] = None) -> None:
        self.config = config or SolverConfig()

    def solve(self, constraints: ConstraintSet) -> SolveResult:
        try:
            return self._solve(constraints)
        except Exception as exc:  # engine failures are reported, not raised
            LOGGER.exception("CP-SAT: engine failure")
            return SolveResult(status=SolveStatus.ERROR, message=f"{type(exc).__name__}: {exc}")

    def _solve(self, constraints: ConstraintSet) -> SolveResult:
        model = cp_model.CpModel()

        # ------------------------------------------------------------------
        # Step 1: Decision variables
        # ------------------------------------------------------------------
        x: Dict[VarIndex, cp_model.IntVar] = {}
        for i, j, k in constraints.variables():
            x[(i, j, k)] = model.new_bool_var(f"X_{i}_{j}_{k}")

        # ------------------------------------------------------------------
        # Step 2: Exact-one constraints and givens
        # ------------------------------------------------------------------
        for constraint in constraints.constraints:
            model.add_exactly_one([x[v] for v in constraint.variables]).with_name(
                constraint.label
            )

        for given in constraints.fixed:
            model.add(x[given.variable] == 1).with_name(
                f"given_{given.row}_{given.col}"
            )

        # ------------------------------------------------------------------
        # Step 3: Solve
        # ------------------------------------------------------------------
        solver = cp_model.CpSolver()
        if self.config.timeout_seconds is not None:
            solver.parameters.max_time_in_seconds = self.config.timeout_seconds
        solver.parameters.num_workers = self.config.num_workers
        solver.parameters.random_seed = self.config.random_seed
        solver.parameters.log_search_progress = self.config.log_search_progress

        LOGGER.info(
            "CP-SAT: %d bool vars, %d constraints, solving...",
            len(x),
            len(constraints),
        )

        status = solver.solve(model)
        status_name = solver.status_name(status)

        if status == cp_model.INFEASIBLE:
            LOGGER.warning("CP-SAT: puzzle is infeasible")
            return SolveResult(
                status=SolveStatus.INFEASIBLE, message=status_name, wall_time=solver.wall_time
            )
        if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
            LOGGER.warning("CP-SAT: no answer (status=%s)", status_name)
            return SolveResult(
                status=SolveStatus.ERROR, message=status_name, wall_time=solver.wall_time
            )

        LOGGER.info("CP-SAT: solution found in %.2fs", solver.wall_time)

        # ------------------------------------------------------------------
        # Step 4: Extract assignment
        # ------------------------------------------------------------------
        assignment = {index: bool(solver.boolean_value(var)) for index, var in x.items()}
        return SolveResult(
            status=SolveStatus.FEASIBLE,
            assignment=assignment,
            message=status_name,
            wall_time=solver.wall_time,
        )
