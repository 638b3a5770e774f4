from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence, Tuple

Cell = Tuple[int, int]

SIZE = 9
BOX = 3
DIGITS: Tuple[int, ...] = tuple(range(1, SIZE + 1))


def cell_index(row: int, col: int, size: int = SIZE) -> int:
    """Return the flat row-major index of ``(row, col)``."""
    if not (0 <= row < size and 0 <= col < size):
        raise ValueError(f"cell ({row}, {col}) is outside a {size}x{size} board")
    return row * size + col


def cell_of(index: int, size: int = SIZE) -> Cell:
    if not 0 <= index < size * size:
        raise ValueError(f"index {index} is outside a {size}x{size} board")
    return divmod(index, size)


def cell_name(index: int, size: int = SIZE) -> str:
    r, c = cell_of(index, size)
    return f"r{r + 1}c{c + 1}"


ALL_CELLS: List[Cell] = [(r, c) for r in range(SIZE) for c in range(SIZE)]


@dataclass(frozen=True)
class Unit:
    """A row, column or box whose cells must all hold different digits."""

    kind: str
    number: int
    cells: Tuple[int, ...]

    @property
    def name(self) -> str:
        return f"{self.kind}{self.number + 1}"

    def is_satisfied(self, assignment: Mapping[int, int]) -> bool:
        """Return True if the fully assigned cells of this unit are all different."""
        vals = [assignment[cell] for cell in self.cells]
        return len(vals) == len(set(vals)) and all(vals)


def build_row_units(size: int = SIZE) -> List[Unit]:
    return [
        Unit("row", r, tuple(r * size + c for c in range(size))) for r in range(size)
    ]


def build_col_units(size: int = SIZE) -> List[Unit]:
    return [
        Unit("col", c, tuple(r * size + c for r in range(size))) for c in range(size)
    ]


def build_box_units(size: int = SIZE, box: int = BOX) -> List[Unit]:
    units: List[Unit] = []
    for box_r in range(size // box):
        for box_c in range(size // box):
            cells = []
            for dr in range(box):
                for dc in range(box):
                    cells.append((box_r * box + dr) * size + box_c * box + dc)
            units.append(Unit("box", len(units), tuple(cells)))
    return units


@dataclass(frozen=True)
class Topology:
    """Units and peers of a board. Built once and never mutated."""

    size: int
    box: int
    units: Tuple[Unit, ...]
    units_of: Tuple[Tuple[Unit, ...], ...] = field(repr=False)
    peers: Tuple[Tuple[int, ...], ...] = field(repr=False)

    @property
    def cells(self) -> range:
        return range(self.size * self.size)

    def unit_cells(self, kind: str) -> List[Tuple[int, ...]]:
        return [unit.cells for unit in self.units if unit.kind == kind]


def _validate_shape(size: int, box: int) -> None:
    if size <= 0 or box <= 0:
        raise ValueError("board and box sizes must be positive")
    if size % box:
        raise ValueError(f"box size {box} does not divide board size {size}")
    if box * box != size:
        raise ValueError(
            f"a {size}x{size} board needs {size} boxes of {size} cells, "
            f"got boxes of {box * box}"
        )


def build_topology(size: int = SIZE, box: int = BOX) -> Topology:
    _validate_shape(size, box)
    units: List[Unit] = []
    units.extend(build_row_units(size))
    units.extend(build_col_units(size))
    units.extend(build_box_units(size, box))

    units_of: Dict[int, List[Unit]] = {cell: [] for cell in range(size * size)}
    for unit in units:
        for cell in unit.cells:
            units_of[cell].append(unit)

    peers: List[Tuple[int, ...]] = []
    for cell in range(size * size):
        seen = set()
        for unit in units_of[cell]:
            seen.update(unit.cells)
        seen.discard(cell)
        peers.append(tuple(sorted(seen)))

    return Topology(
        size=size,
        box=box,
        units=tuple(units),
        units_of=tuple(tuple(units_of[cell]) for cell in range(size * size)),
        peers=tuple(peers),
    )


TOPOLOGY = build_topology()


def units_satisfied(values: Sequence[Sequence[int]], topology: Topology = TOPOLOGY) -> bool:
    """Return True if ``values`` (rows of digits) fills every unit with distinct digits."""
    size = topology.size
    if len(values) != size or any(len(row) != size for row in values):
        return False
    assignment = {r * size + c: values[r][c] for r in range(size) for c in range(size)}
    if any(v not in range(1, size + 1) for v in assignment.values()):
        return False
    return all(unit.is_satisfied(assignment) for unit in topology.units)


def duplicate_givens(givens: Mapping[int, int], topology: Topology = TOPOLOGY) -> List[Tuple[str, int]]:
    """List ``(unit name, digit)`` pairs where the clues repeat a digit."""
    clashes: List[Tuple[str, int]] = []
    for unit in topology.units:
        seen = set()
        for cell in unit.cells:
            digit = givens.get(cell)
            if not digit:
                continue
            if digit in seen:
                clashes.append((unit.name, digit))
            seen.add(digit)
    return clashes
