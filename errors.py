from __future__ import annotations

from typing import Optional

from constraints import cell_name


class SudokuError(Exception):
    pass


class InputError(SudokuError, ValueError):
    """The puzzle text or grid could not be read as 81 cells."""


class ContradictionError(SudokuError):
    """A candidate set emptied, or a unit has no place left for a digit."""

    def __init__(self, message: str, cell: Optional[int] = None, digit: Optional[int] = None) -> None:
        super().__init__(message)
        self.cell = cell
        self.digit = digit

    @classmethod
    def empty_cell(cls, cell: int, digit: int) -> "ContradictionError":
        return cls(f"removed last candidate {digit} from {cell_name(cell)}", cell, digit)

    @classmethod
    def no_place(cls, unit_name: str, cell: int, digit: int) -> "ContradictionError":
        return cls(f"no place left for {digit} in {unit_name}", cell, digit)


class UnsolvableError(SudokuError):
    pass


class SearchTimeoutError(SudokuError):
    def __init__(self, timeout: float, nodes: int) -> None:
        super().__init__(f"search gave up after {timeout:g}s ({nodes} nodes)")
        self.timeout = timeout
        self.nodes = nodes
