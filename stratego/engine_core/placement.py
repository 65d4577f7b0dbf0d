"""
Placement Engine - Pre-game placement of bench pieces.

Note on can_place: it answers "is this rank used up?", not "may I place
it?". It returns True only once every piece of the rank is on the board,
and callers treat True as blocked.
"""

from __future__ import annotations
from typing import Mapping

from .board import Board, Cell, Owner, territory
from .pieces import RANKS, RANK_COUNTS, Rank, rank_count


class InvalidPlacementError(ValueError):
    """A submitted starting layout breaks the placement rules."""


def can_place(board: Board, rank: Rank, owner: Owner) -> bool:
    """True when `owner` has already placed every piece of `rank`."""
    rank = Rank(rank)
    return board.count(rank, owner) == rank_count(rank)


def place_bench_piece(board: Board, index: int, rank: Rank, owner: Owner):
    """
    Put a bench piece on the board.

    No territory check here; the session controller only calls this
    for a selected cell inside the player's own territory.
    """
    board[index] = Cell(rank=Rank(rank), owner=owner, revealed=False)


def random_placement(board: Board, owner: Owner):
    """
    Fill the owner's whole territory.

    Ranks are laid out in catalog order, each taking rank_count()
    consecutive cells from the start of the territory.
    """
    cells = iter(territory(owner))
    for rank in RANKS:
        for _ in range(rank_count(rank)):
            board[next(cells)] = Cell(rank=rank, owner=owner, revealed=False)


def validate_starting_positions(positions: Mapping[int, Rank], owner: Owner):
    """
    Check a full starting layout for `owner`.

    Every territory index must carry a real rank and the per-rank totals
    must match the catalog exactly.
    """
    counts: dict[Rank, int] = {}
    for index in territory(owner):
        if index not in positions:
            raise InvalidPlacementError(f"piece {index} is missing")
        try:
            rank = Rank(positions[index])
        except ValueError:
            raise InvalidPlacementError(f"piece {positions[index]} is not valid")
        if rank is Rank.EMPTY:
            raise InvalidPlacementError(f"piece {index} is empty")
        counts[rank] = counts.get(rank, 0) + 1

    extra = sorted(set(positions) - set(territory(owner)))
    if extra:
        raise InvalidPlacementError(
            f"pieces {extra} are outside the {owner.value}'s territory"
        )

    if counts != RANK_COUNTS:
        summary = {r.value: n for r, n in counts.items()}
        raise InvalidPlacementError(f"number of pieces ({summary}) is not valid")
