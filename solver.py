from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

from constraints import cell_name, duplicate_givens, units_satisfied
from errors import ContradictionError, SearchTimeoutError, UnsolvableError
from grid import COUNT, CandidateGrid
from model import Board, Grid

log = logging.getLogger(__name__)

PROGRESS_INTERVAL = 60.0

Trace = Callable[[str], None]


@dataclass
class SolverResult:
    status: str
    solution: Optional[Grid]
    duration_ms: int
    solutions_found: int = 0
    nodes: int = 0
    backtracks: int = 0
    message: str = ""

    @property
    def solved(self) -> bool:
        return self.status in ("solved", "multiple")


def select_cell(grid: CandidateGrid) -> int:
    """Pick the open cell with the fewest candidates.

    Cells are scanned in row-major order and the first minimum wins, so the
    choice only depends on the grid contents. Returns -1 if every cell is
    determined.
    """
    best = -1
    best_count = 10
    for cell, mask in enumerate(grid.cells):
        n = COUNT[mask]
        if 1 < n < best_count:
            best, best_count = cell, n
            if n == 2:
                break
    return best


def is_valid_solution(values: Grid) -> bool:
    return units_satisfied(values)


class SudokuSolver:
    def __init__(
        self,
        board: Union[Board, Dict[int, int]],
        require_uniqueness: bool = False,
        timeout: Optional[float] = None,
        logger: Optional[Trace] = None,
    ) -> None:
        self.board = board if isinstance(board, Board) else Board(board)
        self.require_uniqueness = require_uniqueness
        self.timeout = timeout
        self.logger = logger
        self.nodes = 0
        self.backtracks = 0

    def _initial_grid(self) -> CandidateGrid:
        grid = CandidateGrid.full()
        try:
            grid.apply_givens(self.board.givens)
        except ContradictionError as exc:
            clashes = duplicate_givens(self.board.givens)
            if clashes:
                unit, digit = clashes[0]
                raise UnsolvableError(f"clue {digit} repeats in {unit}") from exc
            raise UnsolvableError(f"contradiction in clues: {exc}") from exc
        return grid

    def _check_clock(self, start_time: float, last_report: List[float]) -> None:
        now = time.monotonic()
        if self.timeout is not None and now - start_time >= self.timeout:
            raise SearchTimeoutError(self.timeout, self.nodes)
        if now - last_report[0] >= PROGRESS_INTERVAL:
            log.info(
                "%ds elapsed; %d nodes, %d backtracks",
                int(now - start_time),
                self.nodes,
                self.backtracks,
            )
            last_report[0] = now

    def _search(
        self,
        grid: CandidateGrid,
        max_solutions: int,
        solutions: List[CandidateGrid],
        start_time: float,
        last_report: List[float],
    ) -> None:
        self.nodes += 1
        self._check_clock(start_time, last_report)
        cell = select_cell(grid)
        if cell < 0:
            solutions.append(grid)
            return
        for val in grid.candidates(cell):
            new_grid = grid.copy()
            try:
                new_grid.assign(cell, val)
            except ContradictionError:
                self.backtracks += 1
                if self.logger:
                    self.logger(f"Backtrack: {cell_name(cell)} != {val}")
                continue
            if self.logger:
                self.logger(f"Guess: {cell_name(cell)} = {val}")
            found = len(solutions)
            self._search(new_grid, max_solutions, solutions, start_time, last_report)
            if len(solutions) >= max_solutions:
                return
            if len(solutions) == found:
                self.backtracks += 1
                if self.logger:
                    self.logger(f"Backtrack: {cell_name(cell)} != {val}")

    def find_solutions(self, max_solutions: int = 1) -> List[CandidateGrid]:
        """Return up to ``max_solutions`` solved grids.

        Search continues from the board's grid when it holds an unsolved
        candidate state, otherwise it starts from the propagated clues. The
        board's grid is never modified here.

        Raises :class:`UnsolvableError` if the clues contradict each other
        and :class:`SearchTimeoutError` once the timeout passes.
        """
        start = time.monotonic()
        self.nodes = 0
        self.backtracks = 0
        if self.board.grid is not None and not self.board.grid.is_solved():
            grid = self.board.grid.copy()
        else:
            grid = self._initial_grid()
        solutions: List[CandidateGrid] = []
        self._search(grid, max_solutions, solutions, start, [start])
        return solutions

    def run(self) -> SolverResult:
        """Solve the board in place, raising instead of reporting failure."""
        start = time.monotonic()
        log.debug("solve start: %s", self.board.to_string())
        solutions = self.find_solutions(2 if self.require_uniqueness else 1)
        duration_ms = int((time.monotonic() - start) * 1000)
        log.debug(
            "solve end in %d ms; %d nodes, %d backtracks, solutions found %d",
            duration_ms,
            self.nodes,
            self.backtracks,
            len(solutions),
        )
        if not solutions:
            raise UnsolvableError("all possibilities lead nowhere")
        self.board.grid = solutions[0]
        if len(solutions) > 1:
            status, message = "multiple", "Multiple solutions exist."
        else:
            status, message = "solved", "Solved successfully."
        return SolverResult(
            status=status,
            solution=solutions[0].values(),
            duration_ms=duration_ms,
            solutions_found=len(solutions),
            nodes=self.nodes,
            backtracks=self.backtracks,
            message=message,
        )

    def solve(self) -> SolverResult:
        start = time.monotonic()
        try:
            return self.run()
        except UnsolvableError as exc:
            status = "no-solution"
            message = str(exc)
        except SearchTimeoutError as exc:
            status = "timeout"
            message = str(exc)
        return SolverResult(
            status=status,
            solution=None,
            duration_ms=int((time.monotonic() - start) * 1000),
            nodes=self.nodes,
            backtracks=self.backtracks,
            message=message,
        )


def propagate(board: Board) -> Board:
    """Apply the clues to ``board`` without guessing.

    The board's grid shows what propagation alone can deduce. Raises
    :class:`UnsolvableError` if the clues are inconsistent.
    """
    board.grid = SudokuSolver(board)._initial_grid()
    return board


def solve(
    board: Board,
    require_uniqueness: bool = False,
    timeout: Optional[float] = None,
    logger: Optional[Trace] = None,
) -> SolverResult:
    """Solve ``board`` in place.

    On success the board's grid holds the solution. Raises
    :class:`UnsolvableError` when there is none and
    :class:`SearchTimeoutError` when ``timeout`` seconds pass first; in both
    cases the board is left as it was.
    """
    return SudokuSolver(
        board, require_uniqueness=require_uniqueness, timeout=timeout, logger=logger
    ).run()
