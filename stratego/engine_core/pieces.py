"""
Piece Catalog - Static rank ordering, capacities and labels.

Ranks are totally ordered by RANKS. The index of a combat rank is its
strength (spy 1 ... marshal 10). Bomb and flag sit after marshal but never
fight on their own initiative.

Pure lookup data: nothing here holds state.
"""

from __future__ import annotations
from enum import Enum


class Rank(str, Enum):
    """Piece types, in catalog order."""
    EMPTY = "empty"
    SPY = "spy"
    SCOUT = "scout"
    MINER = "miner"
    SERGEANT = "sergeant"
    LIEUTENANT = "lieutenant"
    CAPTAIN = "captain"
    MAJOR = "major"
    COLONEL = "colonel"
    GENERAL = "general"
    MARSHAL = "marshal"
    BOMB = "bomb"
    FLAG = "flag"


RANKS: tuple[Rank, ...] = tuple(Rank)

# Pieces each player brings to the board
RANK_COUNTS: dict[Rank, int] = {
    Rank.SPY: 1,
    Rank.SCOUT: 8,
    Rank.MINER: 5,
    Rank.SERGEANT: 4,
    Rank.LIEUTENANT: 4,
    Rank.CAPTAIN: 4,
    Rank.MAJOR: 3,
    Rank.COLONEL: 2,
    Rank.GENERAL: 1,
    Rank.MARSHAL: 1,
    Rank.BOMB: 6,
    Rank.FLAG: 1,
}

PIECES_PER_PLAYER = sum(RANK_COUNTS.values())

IMMOBILE_RANKS = frozenset({Rank.EMPTY, Rank.BOMB, Rank.FLAG})

# Attacker -> defenders it defeats. Ties are never a win.
BEATS: dict[Rank, frozenset[Rank]] = {
    Rank.SPY: frozenset({Rank.MARSHAL, Rank.FLAG}),
    Rank.SCOUT: frozenset({Rank.SPY, Rank.FLAG}),
    Rank.MINER: frozenset({Rank.SCOUT, Rank.SPY, Rank.BOMB, Rank.FLAG}),
    Rank.SERGEANT: frozenset({Rank.MINER, Rank.SCOUT, Rank.SPY, Rank.FLAG}),
    Rank.LIEUTENANT: frozenset({
        Rank.SERGEANT, Rank.MINER, Rank.SCOUT, Rank.SPY, Rank.FLAG,
    }),
    Rank.CAPTAIN: frozenset({
        Rank.LIEUTENANT, Rank.SERGEANT, Rank.MINER, Rank.SCOUT, Rank.SPY,
        Rank.FLAG,
    }),
    Rank.MAJOR: frozenset({
        Rank.CAPTAIN, Rank.LIEUTENANT, Rank.SERGEANT, Rank.MINER, Rank.SCOUT,
        Rank.SPY, Rank.FLAG,
    }),
    Rank.COLONEL: frozenset({
        Rank.MAJOR, Rank.CAPTAIN, Rank.LIEUTENANT, Rank.SERGEANT, Rank.MINER,
        Rank.SCOUT, Rank.SPY, Rank.FLAG,
    }),
    Rank.GENERAL: frozenset({
        Rank.COLONEL, Rank.MAJOR, Rank.CAPTAIN, Rank.LIEUTENANT,
        Rank.SERGEANT, Rank.MINER, Rank.SCOUT, Rank.SPY, Rank.FLAG,
    }),
    Rank.MARSHAL: frozenset({
        Rank.GENERAL, Rank.COLONEL, Rank.MAJOR, Rank.CAPTAIN,
        Rank.LIEUTENANT, Rank.SERGEANT, Rank.MINER, Rank.SCOUT, Rank.SPY,
        Rank.FLAG,
    }),
}


def rank_count(rank: Rank) -> int:
    """Number of pieces of `rank` a player places. Zero for empty."""
    return RANK_COUNTS.get(Rank(rank), 0)


def strength(rank: Rank) -> int:
    """Position of the rank in catalog order (spy 1 ... marshal 10)."""
    return RANKS.index(Rank(rank))


def display_label(rank: Rank) -> str:
    """
    Short label drawn on a board cell.

    Empty cells get a blank, spy/bomb/flag their initial, and every other
    rank its strength number.
    """
    rank = Rank(rank)
    if rank is Rank.EMPTY:
        return " "
    if rank in (Rank.SPY, Rank.BOMB, Rank.FLAG):
        return rank.value[0].upper()
    return str(strength(rank))


def is_movable(rank: Rank) -> bool:
    return Rank(rank) not in IMMOBILE_RANKS


def beats(attacker: Rank, defender: Rank) -> bool:
    """True if `attacker` wins when it strikes `defender`."""
    return Rank(defender) in BEATS.get(Rank(attacker), frozenset())


def parse_rank(value: str) -> Rank:
    """Parse a rank name as it appears on the wire. Raises ValueError."""
    return Rank(value.strip().lower())
