from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional, Sequence

from errors import SudokuError
from model import Board
from solver import SudokuSolver

log = logging.getLogger(__name__)

DEFAULT_PUZZLE_FILE = "sudokus.txt"


def read_puzzles(path: Path) -> List[str]:
    """Load puzzle strings from a text or JSON file.

    Text files hold one puzzle per line; blank lines and ``#`` comments are
    skipped. JSON files hold a list of strings or ``{"puzzles": [...]}``.
    """
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data = json.loads(text)
        if isinstance(data, dict):
            data = data.get("puzzles", [])
        if not isinstance(data, list) or not all(isinstance(p, str) for p in data):
            raise SudokuError(f"{path}: expected a list of puzzle strings")
        return data
    puzzles = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        puzzles.append(line)
    return puzzles


def _solver(board: Board, args: argparse.Namespace) -> SudokuSolver:
    return SudokuSolver(
        board,
        require_uniqueness=args.unique,
        timeout=args.timeout,
        logger=print if args.trace else None,
    )


def solve_puzzles(puzzles: Sequence[str], args: argparse.Namespace) -> int:
    failures = 0
    for puzzle in puzzles:
        try:
            board = Board.from_string(puzzle)
        except SudokuError as exc:
            print(f"ERROR: {exc}")
            failures += 1
            continue
        result = _solver(board, args).solve()
        if not result.solved:
            print(f"ERROR: {result.message}")
            failures += 1
            continue
        print(board)
        if result.status == "multiple":
            print(result.message)
        print()
        log.debug("%s in %d ms, %d nodes", result.status, result.duration_ms, result.nodes)
    return failures


def benchmark(puzzles: Sequence[str], args: argparse.Namespace) -> int:
    failures = 0
    for i, puzzle in enumerate(puzzles):
        board = None
        total = 0.0
        ok = True
        for _ in range(args.repeat):
            try:
                board = Board.from_string(puzzle)
            except SudokuError as exc:
                print(f"ERROR: {exc}")
                ok = False
                break
            start = time.perf_counter()
            result = _solver(board, args).solve()
            total += time.perf_counter() - start
            if not result.solved:
                print(f"ERROR: {result.message}")
                ok = False
                break
        if not ok:
            failures += 1
            continue
        print(board)
        print(f"Mean time for sudoku {i}: {total / args.repeat * 1000:.3f} ms")
    return failures


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Solve 9x9 sudoku puzzles by constraint propagation and search."
    )
    ap.add_argument("-i", "--input", help="a single puzzle string to solve")
    ap.add_argument(
        "files",
        nargs="*",
        type=Path,
        help=f"puzzle files, one puzzle per line or JSON (default: {DEFAULT_PUZZLE_FILE})",
    )
    ap.add_argument("--bench", action="store_true", help="time each puzzle")
    ap.add_argument("--repeat", type=int, default=10, help="solves per puzzle when benchmarking")
    ap.add_argument("--unique", action="store_true", help="report puzzles with more than one solution")
    ap.add_argument("--timeout", type=float, default=None, help="give up after this many seconds")
    ap.add_argument("--trace", action="store_true", help="print every guess and backtrack")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.repeat < 1:
        print("ERROR: --repeat must be at least 1", file=sys.stderr)
        return 2

    puzzles: List[str] = []
    if args.input:
        puzzles.append(args.input)
    files = args.files or ([] if args.input else [Path(DEFAULT_PUZZLE_FILE)])
    for path in files:
        try:
            puzzles.extend(read_puzzles(path))
        except (OSError, ValueError, SudokuError) as exc:
            print(f"ERROR: cannot read {path}: {exc}", file=sys.stderr)
            return 2

    run = benchmark if args.bench else solve_puzzles
    return 1 if run(puzzles, args) else 0


if __name__ == "__main__":
    sys.exit(main())
