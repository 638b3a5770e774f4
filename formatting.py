"""Text rendering of boards.

Solved cells print as their digit. Open cells print every remaining
candidate, so an unsolved board doubles as a diagnostic dump; before the
clues have been propagated, blanks print as ``.``. All fields share the
width of the widest one so the columns stay aligned.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, List

from constraints import BOX, SIZE

if TYPE_CHECKING:
    from model import Board


def cell_text(board: "Board", row: int, col: int) -> str:
    if board.grid is None:
        given = board.given(row, col)
        return str(given) if given else "."
    return "".join(str(d) for d in board.candidates(row, col))


def _center(text: str, width: int) -> str:
    return text.rjust((width + len(text)) // 2).ljust(width)


def render(board: "Board") -> str:
    texts = [[cell_text(board, r, c) for c in range(SIZE)] for r in range(SIZE)]
    width = max(len(t) for row in texts for t in row)
    band = "-" * ((width + 1) * BOX + 1)
    rule = "+".join([band] * (SIZE // BOX))

    lines: List[str] = []
    for r, row in enumerate(texts):
        if r and r % BOX == 0:
            lines.append(rule)
        groups = [
            " ".join(_center(t, width) for t in row[c : c + BOX])
            for c in range(0, SIZE, BOX)
        ]
        lines.append((" " + " | ".join(groups)).rstrip())
    return "\n".join(lines)


def render_values(board: "Board", blank: str = ".") -> str:
    """Compact nine-line form, one row per line, no borders."""
    return "\n".join(
        "".join(str(board.value(r, c) or blank) for c in range(SIZE))
        for r in range(SIZE)
    )
