"""
Board Model - The 100-cell grid and its ownership zones.

Layout (row-major, 10 columns):
- 0-39   host territory
- 40-59  neutral terrain, including eight water cells
- 60-99  guest territory

Water cells are impassable and never hold a piece.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from copy import deepcopy
from enum import Enum
from typing import Iterator

from .pieces import Rank


BOARD_SIZE = 100
COLUMNS = 10

WATER_CELLS = frozenset({42, 43, 46, 47, 52, 53, 56, 57})


class Owner(str, Enum):
    """Which side controls a cell."""
    HOST = "host"
    GUEST = "guest"
    NONE = "none"

    @property
    def opponent(self) -> Owner:
        if self is Owner.HOST:
            return Owner.GUEST
        if self is Owner.GUEST:
            return Owner.HOST
        return Owner.NONE


HOST_TERRITORY = range(0, 40)
NEUTRAL_ZONE = range(40, 60)
GUEST_TERRITORY = range(60, 100)


def is_on_board(index: int) -> bool:
    return 0 <= index < BOARD_SIZE


def is_water_cell(index: int) -> bool:
    """True for the eight lake cells in the neutral band."""
    return index in WATER_CELLS


def zone_owner(index: int) -> Owner:
    """Owner of the zone an index falls in."""
    if index in HOST_TERRITORY:
        return Owner.HOST
    if index in GUEST_TERRITORY:
        return Owner.GUEST
    return Owner.NONE


def territory(owner: Owner) -> range:
    """Starting territory of a side. Raises ValueError for Owner.NONE."""
    if owner is Owner.HOST:
        return HOST_TERRITORY
    if owner is Owner.GUEST:
        return GUEST_TERRITORY
    raise ValueError(f"{owner.value} has no territory")


def row_of(index: int) -> int:
    return index // COLUMNS


def column_of(index: int) -> int:
    return index % COLUMNS


@dataclass
class Cell:
    """One square of the board."""
    rank: Rank = Rank.EMPTY
    owner: Owner = Owner.NONE
    revealed: bool = False

    @property
    def is_empty(self) -> bool:
        return self.rank is Rank.EMPTY


def empty_cell() -> Cell:
    return Cell(rank=Rank.EMPTY, owner=Owner.NONE, revealed=False)


@dataclass
class Board:
    """
    Ordered sequence of exactly 100 cells.

    Indexable like a list; cells are replaced, never removed.
    """
    cells: list[Cell] = field(default_factory=list)

    def __post_init__(self):
        if len(self.cells) != BOARD_SIZE:
            raise ValueError(f"Board needs {BOARD_SIZE} cells, got {len(self.cells)}")

    @classmethod
    def create(cls) -> Board:
        """Fresh board: every cell empty and owned by its zone."""
        return cls(cells=[
            Cell(rank=Rank.EMPTY, owner=zone_owner(i), revealed=False)
            for i in range(BOARD_SIZE)
        ])

    def __getitem__(self, index: int) -> Cell:
        return self.cells[index]

    def __setitem__(self, index: int, cell: Cell):
        self.cells[index] = cell

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def clear(self, index: int):
        """Reset a cell to empty and unowned."""
        self.cells[index] = empty_cell()

    def count(self, rank: Rank, owner: Owner) -> int:
        """How many cells hold `rank` for `owner`."""
        return sum(1 for c in self.cells if c.rank is rank and c.owner is owner)

    def is_territory_full(self, owner: Owner) -> bool:
        return all(not self.cells[i].is_empty for i in territory(owner))

    def starting_positions(self, owner: Owner) -> dict[int, Rank]:
        """Index -> rank for every cell of the owner's territory."""
        return {i: self.cells[i].rank for i in territory(owner)}

    def view_for(self, viewer: Owner) -> Board:
        """
        Copy of the board as `viewer` is allowed to see it.

        Opponent pieces keep their owner but their rank is hidden
        until they have been revealed in combat.
        """
        cells = []
        for cell in self.cells:
            hidden = (
                cell.owner not in (viewer, Owner.NONE)
                and not cell.revealed
            )
            cells.append(Cell(
                rank=Rank.EMPTY if hidden else cell.rank,
                owner=cell.owner,
                revealed=cell.revealed,
            ))
        return Board(cells=cells)

    def clone(self) -> Board:
        return deepcopy(self)
