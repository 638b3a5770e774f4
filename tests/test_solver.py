import logging

import pytest

import solver

from errors import SearchTimeoutError, UnsolvableError
from grid import ALL, CandidateGrid, mask_of
from model import Board
from puzzles import CLASSIC, CLASSIC_SOLUTION, DEAD_END, DUPLICATE_CLUE, EMPTY, HARD, HARD_PIPES
from solver import SudokuSolver, is_valid_solution, propagate, select_cell, solve


def _keeps_clues(puzzle, values):
    board = Board.from_string(puzzle)
    return all(values[cell // 9][cell % 9] == d for cell, d in board.givens.items())


def test_classic_puzzle_solution():
    board = Board.from_string(CLASSIC)
    result = solve(board)
    assert result.status == "solved"
    assert board.copy_grid()[0] == [4, 8, 3, 9, 2, 1, 6, 5, 7]
    assert board.to_string() == CLASSIC_SOLUTION
    assert is_valid_solution(result.solution)


def test_classic_puzzle_needs_no_guessing():
    result = solve(Board.from_string(CLASSIC))
    assert result.nodes == 1
    assert result.backtracks == 0


def test_propagation_alone_solves_classic():
    board = propagate(Board.from_string(CLASSIC))
    assert board.is_solved()


def test_hard_puzzle_needs_search():
    board = propagate(Board.from_string(HARD))
    assert not board.is_solved()
    result = solve(board)
    assert board.is_solved()
    assert result.nodes > 1
    assert is_valid_solution(result.solution)
    assert _keeps_clues(HARD, result.solution)


def test_formatted_input_gives_same_solution():
    a = Board.from_string(HARD)
    b = Board.from_string(HARD_PIPES)
    solve(a)
    solve(b)
    assert a.copy_grid() == b.copy_grid()


def test_search_is_deterministic():
    first = SudokuSolver(Board.from_string(HARD)).solve()
    second = SudokuSolver(Board.from_string(HARD)).solve()
    assert first.solution == second.solution
    assert (first.nodes, first.backtracks) == (second.nodes, second.backtracks)


def test_solving_a_solved_board_is_idempotent():
    board = Board.from_string(CLASSIC_SOLUTION)
    result = solve(board)
    assert board.to_string() == CLASSIC_SOLUTION
    assert result.nodes == 1


def test_empty_board_solves():
    result = solve(Board.from_string(EMPTY))
    assert is_valid_solution(result.solution)


def test_uniqueness_check():
    assert solve(Board.from_string(EMPTY), require_uniqueness=True).status == "multiple"
    result = solve(Board.from_string(CLASSIC), require_uniqueness=True)
    assert result.status == "solved"
    assert result.solutions_found == 1


def test_duplicate_clue_is_unsolvable():
    board = Board.from_string(DUPLICATE_CLUE)
    with pytest.raises(UnsolvableError) as info:
        solve(board)
    assert "repeats in row1" in str(info.value)
    assert board.grid is None


def test_inconsistent_clues_without_duplicates():
    with pytest.raises(UnsolvableError) as info:
        solve(Board.from_string(DEAD_END))
    assert info.value.__cause__ is not None


def test_solver_result_reports_failure():
    result = SudokuSolver(Board.from_string(DUPLICATE_CLUE)).solve()
    assert result.status == "no-solution"
    assert result.solution is None
    assert not result.solved


def test_timeout():
    board = Board.from_string(EMPTY)
    with pytest.raises(SearchTimeoutError):
        solve(board, timeout=0)
    assert board.grid is None
    assert SudokuSolver(board, timeout=0).solve().status == "timeout"


def test_trace_logger():
    lines = []
    solve(Board.from_string(HARD), logger=lines.append)
    assert lines
    assert all(line.startswith(("Guess: ", "Backtrack: ")) for line in lines)


def test_solver_accepts_givens_mapping():
    result = SudokuSolver(Board.from_string(CLASSIC).givens).solve()
    assert result.status == "solved"


def test_select_cell_prefers_fewest_candidates_then_row_major():
    cells = [mask_of([1])] * 81
    cells[30] = mask_of([1, 2, 3])
    cells[50] = mask_of([4, 5])
    cells[70] = mask_of([6, 7])
    assert select_cell(CandidateGrid(cells)) == 50
    cells[5] = ALL
    assert select_cell(CandidateGrid(cells)) == 50
    cells[20] = mask_of([8, 9])
    assert select_cell(CandidateGrid(cells)) == 20


def test_select_cell_on_solved_grid():
    assert select_cell(CandidateGrid([mask_of([1])] * 81)) == -1


def _dead_end_grid():
    # r1c1 can be 1 or 2, but r1c2 is already 1 and r1c3 already 2
    cells = [ALL] * 81
    cells[0] = mask_of([1, 2])
    cells[1] = mask_of([1])
    cells[2] = mask_of([2])
    return CandidateGrid(cells)


def test_exhausted_search_is_unsolvable():
    board = Board()
    board.grid = _dead_end_grid()
    before = board.grid.copy()
    with pytest.raises(UnsolvableError) as info:
        solve(board)
    assert "all possibilities lead nowhere" in str(info.value)
    assert info.value.__cause__ is None
    assert board.grid == before

    result = SudokuSolver(board).solve()
    assert result.status == "no-solution"
    assert result.nodes == 1
    assert result.backtracks == 2
    assert board.grid == before


def test_search_continues_from_propagated_grid():
    board = propagate(Board.from_string(HARD))
    before = board.grid.copy()
    result = SudokuSolver(board).find_solutions()
    assert len(result) == 1
    assert is_valid_solution(result[0].values())
    assert board.grid == before


def test_progress_is_logged(monkeypatch, caplog):
    monkeypatch.setattr(solver, "PROGRESS_INTERVAL", 0)
    caplog.set_level(logging.INFO, logger="solver")
    solve(Board.from_string(CLASSIC))
    assert "elapsed; 1 nodes, 0 backtracks" in caplog.text


def test_every_abandoned_guess_is_traced():
    lines = []
    result = solve(Board.from_string(HARD), logger=lines.append)
    assert sum(line.startswith("Backtrack: ") for line in lines) == result.backtracks
    # pair each backtrack with the guess it undoes; what stays open is the
    # path to the solution
    open_guesses = {}
    for line in lines:
        kind, move = line.split(": ")
        if kind == "Guess":
            key = tuple(move.split(" = "))
            open_guesses[key] = open_guesses.get(key, 0) + 1
        else:
            key = tuple(move.split(" != "))
            if open_guesses.get(key):
                open_guesses[key] -= 1
    for (name, val), count in open_guesses.items():
        if not count:
            continue
        r, c = int(name[1]) - 1, int(name[3]) - 1
        assert result.solution[r][c] == int(val)
