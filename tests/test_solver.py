import unittest
from unittest.mock import MagicMock, patch

from ortools.sat.python import cp_model

from latinsquare.core.constants import EMPTY, SolveStatus
from latinsquare.core.exceptions import SolveFailure
from latinsquare.core.models import SolveResult
from latinsquare.engine.encoder import encode
from latinsquare.engine.grid import create_grid
from latinsquare.engine.pipeline import solve
from latinsquare.engine.solver import CpSatSolver, SolverConfig
from latinsquare.engine.validator import GridValidator


CLASSIC_PUZZLE = [
    "53..7....",
    "6..195...",
    ".98....6.",
    "8...6...3",
    "4..8.3..1",
    "7...2...6",
    ".6....28.",
    "...419..5",
    "....8..79",
]

CLASSIC_SOLUTION = [
    "534678912",
    "672195348",
    "198342567",
    "859761423",
    "426853791",
    "713924856",
    "961537284",
    "287419635",
    "345286179",
]

SMALL_GIVENS = {
    (1, 1): 1, (1, 2): 2, (1, 3): 3,
    (2, 3): 1, (2, 4): 2,
    (3, 1): 2, (3, 2): 1,
    (4, 1): 4,
}

SMALL_SOLUTION = [
    [1, 2, 3, 4],
    [3, 4, 1, 2],
    [2, 1, 4, 3],
    [4, 3, 2, 1],
]


def _load(rows):
    grid = create_grid(len(rows))
    for i, line in enumerate(rows, start=1):
        for j, ch in enumerate(line, start=1):
            if ch != ".":
                grid.set(i, j, int(ch))
    return grid


def _values(grid):
    return [[grid.get(i, j) for j in range(1, grid.size + 1)] for i in range(1, grid.size + 1)]


class CpSatSolverTests(unittest.TestCase):
    def test_feasible_result_has_full_assignment(self) -> None:
        constraints = encode(create_grid(4))
        result = CpSatSolver().solve(constraints)
        self.assertEqual(result.status, SolveStatus.FEASIBLE)
        self.assertTrue(result.is_feasible)
        assert result.assignment is not None
        self.assertEqual(len(result.assignment), 64)
        self.assertEqual(sum(result.assignment.values()), 16)

    def test_conflicting_givens_are_infeasible(self) -> None:
        grid = create_grid(4)
        grid.set(1, 1, 1)
        grid.set(1, 3, 1)
        result = CpSatSolver(SolverConfig(num_workers=2)).solve(encode(grid))
        self.assertEqual(result.status, SolveStatus.INFEASIBLE)
        self.assertIsNone(result.assignment)

    def test_engine_exception_reported_as_error(self) -> None:
        constraints = encode(create_grid(4))
        constraints.fixed = [MagicMock(variable=(9, 9, 9), row=9, col=9)]
        result = CpSatSolver().solve(constraints)
        self.assertEqual(result.status, SolveStatus.ERROR)
        self.assertIn("KeyError", result.message)

    def test_non_answer_status_reported_as_error(self) -> None:
        constraints = encode(create_grid(4))
        for status, name in ((cp_model.UNKNOWN, "UNKNOWN"), (cp_model.MODEL_INVALID, "MODEL_INVALID")):
            with self.subTest(status=name):
                with patch.object(cp_model, "CpSolver") as solver_cls:
                    engine = solver_cls.return_value
                    engine.solve.return_value = status
                    engine.status_name.return_value = name
                    engine.wall_time = 0.25
                    result = CpSatSolver(SolverConfig(timeout_seconds=0.01)).solve(constraints)
                self.assertEqual(result.status, SolveStatus.ERROR)
                self.assertIsNone(result.assignment)
                self.assertEqual(result.message, name)
                self.assertEqual(engine.parameters.max_time_in_seconds, 0.01)

    def test_time_limit_surfaces_as_retryable_failure(self) -> None:
        grid = create_grid(4)
        grid.set(1, 1, 1)
        with patch.object(cp_model, "CpSolver") as solver_cls:
            engine = solver_cls.return_value
            engine.solve.return_value = cp_model.UNKNOWN
            engine.status_name.return_value = "UNKNOWN"
            engine.wall_time = 1.0
            with self.assertRaises(SolveFailure) as ctx:
                solve(grid)
        self.assertFalse(ctx.exception.is_infeasible)
        self.assertEqual(ctx.exception.status, SolveStatus.ERROR)
        self.assertEqual(list(grid.filled_cells()), [((1, 1), 1)])


class SolvePipelineTests(unittest.TestCase):
    def assert_valid_solution(self, grid) -> None:
        report = GridValidator().validate(grid)
        self.assertTrue(report.ok, report.messages)
        for i in range(1, grid.size + 1):
            for j in range(1, grid.size + 1):
                self.assertIn(grid.get(i, j), grid.alphabet)

    def test_small_puzzle_completes_uniquely(self) -> None:
        grid = create_grid(4, cage_shape=(2, 2), alphabet=[1, 2, 3, 4])
        grid.update(SMALL_GIVENS)
        returned = solve(grid)
        self.assertIs(returned, grid)
        self.assert_valid_solution(grid)
        self.assertEqual(_values(grid), SMALL_SOLUTION)

    def test_contradictory_small_givens_fail(self) -> None:
        # 1 and 2 in the top-left cage leave row 2 no room for 3 and 4.
        grid = create_grid(4)
        grid.update({(1, 1): 1, (1, 2): 2, (2, 3): 3, (2, 4): 4, (3, 1): 3, (4, 1): 4})
        with self.assertRaises(SolveFailure) as ctx:
            solve(grid)
        self.assertTrue(ctx.exception.is_infeasible)

    def test_classic_puzzle_reproduces_known_solution(self) -> None:
        grid = _load(CLASSIC_PUZZLE)
        solve(grid)
        expected = [[int(ch) for ch in line] for line in CLASSIC_SOLUTION]
        self.assertEqual(_values(grid), expected)

    def test_givens_are_preserved(self) -> None:
        grid = _load(CLASSIC_PUZZLE)
        givens = dict(grid.filled_cells())
        solve(grid)
        for (i, j), value in givens.items():
            self.assertEqual(grid.get(i, j), value)

    def test_row_conflict_fails_and_leaves_grid(self) -> None:
        grid = create_grid(4)
        grid.set(1, 1, 1)
        grid.set(1, 3, 1)
        with self.assertRaises(SolveFailure) as ctx:
            solve(grid)
        self.assertEqual(ctx.exception.reason, "no feasible assignment")
        self.assertEqual(ctx.exception.status, SolveStatus.INFEASIBLE)
        self.assertEqual(list(grid.filled_cells()), [((1, 1), 1), ((1, 3), 1)])
        self.assertIs(grid.get(2, 2), EMPTY)

    def test_solved_grid_is_unchanged(self) -> None:
        grid = _load(CLASSIC_SOLUTION)
        before = _values(grid)
        solve(grid)
        self.assertEqual(_values(grid), before)

    def test_rectangular_cages_and_symbol_alphabet(self) -> None:
        grid = create_grid(6, cage_shape=(2, 3), alphabet="ABCDEF")
        grid.set(1, 1, "F")
        grid.set(6, 6, "A")
        solve(grid)
        self.assert_valid_solution(grid)
        self.assertEqual(grid.get(1, 1), "F")
        self.assertEqual(grid.get(6, 6), "A")

    def test_empty_classic_grid(self) -> None:
        grid = create_grid(9)
        solve(grid, config=SolverConfig(timeout_seconds=60.0))
        self.assert_valid_solution(grid)

    def test_engine_error_leaves_grid_unchanged(self) -> None:
        grid = create_grid(4)
        grid.set(2, 2, 3)
        engine = MagicMock()
        engine.solve.return_value = SolveResult(SolveStatus.ERROR, message="MODEL_INVALID")
        with self.assertRaises(SolveFailure) as ctx:
            solve(grid, engine)
        self.assertEqual(ctx.exception.reason, "solver error")
        self.assertEqual(ctx.exception.detail, "MODEL_INVALID")
        engine.solve.assert_called_once()
        self.assertEqual(list(grid.filled_cells()), [((2, 2), 3)])

    def test_unsound_engine_answer_is_rejected(self) -> None:
        grid = create_grid(4)
        grid.set(1, 1, 1)
        # Every cell picks value 1: one value per cell, but rows repeat.
        assignment = {
            (i, j, k): k == 1 for i in range(1, 5) for j in range(1, 5) for k in range(1, 5)
        }
        engine = MagicMock()
        engine.solve.return_value = SolveResult(SolveStatus.FEASIBLE, assignment)
        with self.assertRaises(SolveFailure) as ctx:
            solve(grid, engine)
        self.assertFalse(ctx.exception.is_infeasible)
        self.assertIs(grid.get(1, 2), EMPTY)

    def test_overwritten_given_is_rejected(self) -> None:
        grid = create_grid(4)
        grid.set(1, 1, 2)
        assignment = {
            (i, j, k): SMALL_SOLUTION[i - 1][j - 1] == k
            for i in range(1, 5) for j in range(1, 5) for k in range(1, 5)
        }
        engine = MagicMock()
        engine.solve.return_value = SolveResult(SolveStatus.FEASIBLE, assignment)
        with self.assertRaises(SolveFailure) as ctx:
            solve(grid, engine)
        self.assertIn("overwritten", str(ctx.exception))
        self.assertEqual(list(grid.filled_cells()), [((1, 1), 2)])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
