from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from constraints import ALL_CELLS, SIZE, cell_index
from errors import InputError
from formatting import render
from grid import CandidateGrid

Grid = List[List[int]]

BLANKS = ".0"
CLUES = "123456789"


def parse_puzzle(text: str) -> Dict[int, int]:
    """Read 81 cells in row-major order and return the clues by flat index.

    ``1``-``9`` is a clue, ``.`` or ``0`` a blank. Every other character is
    skipped and not counted; anything after the 81st cell is ignored.
    """
    givens: Dict[int, int] = {}
    total = SIZE * SIZE
    seen = 0
    for ch in text:
        if seen == total:
            break
        if ch in CLUES:
            givens[seen] = int(ch)
        elif ch not in BLANKS:
            continue
        seen += 1
    if seen < total:
        raise InputError(f"expected {total} cells, found {seen}")
    return givens


def givens_from_grid(rows: Sequence[Sequence[int]]) -> Dict[int, int]:
    if len(rows) != SIZE or any(len(row) != SIZE for row in rows):
        raise InputError(f"grid must be {SIZE}x{SIZE}")
    givens: Dict[int, int] = {}
    for r, c in ALL_CELLS:
        val = rows[r][c]
        if isinstance(val, bool) or not isinstance(val, int) or not 0 <= val <= SIZE:
            raise InputError(f"invalid value {val!r} at r{r + 1}c{c + 1}")
        if val:
            givens[cell_index(r, c)] = val
    return givens


class Board:
    """A puzzle's clues plus the candidate grid the solver narrows.

    ``grid`` is ``None`` until the clues have been propagated.
    """

    def __init__(self, givens: Optional[Dict[int, int]] = None) -> None:
        self.givens: Dict[int, int] = dict(givens or {})
        self.grid: Optional[CandidateGrid] = None

    @classmethod
    def from_string(cls, text: str) -> "Board":
        return cls(parse_puzzle(text))

    @classmethod
    def from_grid(cls, rows: Sequence[Sequence[int]]) -> "Board":
        return cls(givens_from_grid(rows))

    def given(self, row: int, col: int) -> int:
        return self.givens.get(cell_index(row, col), 0)

    def value(self, row: int, col: int) -> int:
        """Determined digit at ``(row, col)``; falls back to the clue before solving."""
        if self.grid is None:
            return self.given(row, col)
        return self.grid.value(cell_index(row, col))

    def candidates(self, row: int, col: int) -> List[int]:
        if self.grid is None:
            given = self.given(row, col)
            return [given] if given else list(range(1, SIZE + 1))
        return list(self.grid.candidates(cell_index(row, col)))

    def copy_grid(self) -> Grid:
        return [[self.value(r, c) for c in range(SIZE)] for r in range(SIZE)]

    def is_solved(self) -> bool:
        return self.grid is not None and self.grid.is_solved()

    def to_string(self, blank: str = ".") -> str:
        return "".join(str(self.value(r, c) or blank) for r, c in ALL_CELLS)

    def __str__(self) -> str:
        return render(self)

    def __repr__(self) -> str:
        return f"Board({self.to_string()!r})"


def new_board(text: str) -> Board:
    return Board.from_string(text)

