"""Candidate grid and the propagation engine.

Each of the 81 cells holds a bitmask of the digits still possible there
(bit ``d - 1`` stands for digit ``d``). ``assign`` and ``eliminate`` narrow
the masks and follow every forced deduction until nothing changes or a
contradiction shows up:

* a cell reduced to one digit removes that digit from its 20 peers;
* a unit left with one place for a digit puts the digit there;
* an empty cell, or a unit with no place for a digit, raises
  :class:`ContradictionError`.

Deductions are queued on an explicit stack instead of recursing, so deep
cascades cannot hit the interpreter's recursion limit.
"""
from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Tuple

from constraints import DIGITS, SIZE, TOPOLOGY, Topology
from errors import ContradictionError

ALL = (1 << SIZE) - 1

BIT: Dict[int, int] = {d: 1 << (d - 1) for d in DIGITS}
COUNT: List[int] = [bin(mask).count("1") for mask in range(ALL + 1)]
DIGITS_OF: List[Tuple[int, ...]] = [
    tuple(d for d in DIGITS if mask & BIT[d]) for mask in range(ALL + 1)
]


def mask_of(digits) -> int:
    mask = 0
    for d in digits:
        mask |= BIT[d]
    return mask


class CandidateGrid:
    topology: Topology = TOPOLOGY

    __slots__ = ("cells",)

    def __init__(self, cells: Optional[List[int]] = None) -> None:
        if cells is None:
            cells = [ALL] * len(self.topology.cells)
        if len(cells) != len(self.topology.cells):
            raise ValueError(f"expected {len(self.topology.cells)} cells, got {len(cells)}")
        self.cells = cells

    @classmethod
    def full(cls) -> "CandidateGrid":
        return cls()

    def copy(self) -> "CandidateGrid":
        return CandidateGrid(self.cells[:])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CandidateGrid):
            return NotImplemented
        return self.cells == other.cells

    def __repr__(self) -> str:
        determined = sum(1 for mask in self.cells if COUNT[mask] == 1)
        return f"CandidateGrid({determined}/{len(self.cells)} determined)"

    # -- queries ---------------------------------------------------------

    def candidates(self, cell: int) -> Tuple[int, ...]:
        return DIGITS_OF[self.cells[cell]]

    def count(self, cell: int) -> int:
        return COUNT[self.cells[cell]]

    def has(self, cell: int, digit: int) -> bool:
        return bool(self.cells[cell] & BIT[digit])

    def value(self, cell: int) -> int:
        """Return the digit of a determined cell, else 0."""
        mask = self.cells[cell]
        return DIGITS_OF[mask][0] if COUNT[mask] == 1 else 0

    def is_solved(self) -> bool:
        return all(COUNT[mask] == 1 for mask in self.cells)

    def values(self) -> List[List[int]]:
        """Rows of determined digits, 0 where a cell is still open."""
        size = self.topology.size
        return [[self.value(r * size + c) for c in range(size)] for r in range(size)]

    # -- propagation -----------------------------------------------------

    def assign(self, cell: int, digit: int) -> None:
        """Narrow ``cell`` to ``digit`` and propagate."""
        self._propagate(self._assignment(cell, digit))

    def eliminate(self, cell: int, digit: int) -> None:
        """Remove ``digit`` from ``cell`` and propagate. No-op if already gone."""
        self._propagate([(cell, digit)])

    def apply_givens(self, givens: Mapping[int, int]) -> None:
        for cell in sorted(givens):
            self.assign(cell, givens[cell])

    def _assignment(self, cell: int, digit: int) -> List[Tuple[int, int]]:
        others = self.cells[cell] & ~BIT[digit]
        return [(cell, d) for d in DIGITS_OF[others]]

    def _propagate(self, pending: List[Tuple[int, int]]) -> None:
        cells = self.cells
        units_of = self.topology.units_of
        peers = self.topology.peers
        while pending:
            cell, digit = pending.pop()
            bit = BIT[digit]
            mask = cells[cell]
            if not mask & bit:
                continue
            mask &= ~bit
            cells[cell] = mask
            remaining = COUNT[mask]
            if remaining == 0:
                raise ContradictionError.empty_cell(cell, digit)
            if remaining == 1:
                last = DIGITS_OF[mask][0]
                pending.extend((peer, last) for peer in peers[cell])
            for unit in units_of[cell]:
                place = -1
                for other in unit.cells:
                    if cells[other] & bit:
                        if place >= 0:
                            break
                        place = other
                else:
                    if place < 0:
                        raise ContradictionError.no_place(unit.name, cell, digit)
                    pending.extend(self._assignment(place, digit))
