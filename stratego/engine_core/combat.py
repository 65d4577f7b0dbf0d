"""
Combat Resolution - Authoritative outcome of a move, used by the game service.

Unlike can_move(), this reports *why* a move is refused, and it knows
every piece's identity, so it can tell a quiet move from an attack and
decide who survives.
"""

from __future__ import annotations
from dataclasses import dataclass

from .board import Board, Owner, is_on_board, is_water_cell
from .events import EventKind
from .movement import path_between
from .pieces import Rank, beats, is_movable


class IllegalMoveError(ValueError):
    """A move request that the rules do not allow."""


@dataclass(frozen=True)
class MoveOutcome:
    """What happened when a piece moved."""
    kind: EventKind
    from_index: int
    to_index: int
    attacker: Rank
    defender: Rank = Rank.EMPTY


def resolve_move(board: Board, player: Owner, from_index: int, to_index: int) -> MoveOutcome:
    """
    Validate a move by `player` and classify the result.

    - moves:   destination unowned
    - attacks: attacker beats the defender
    - wins:    attacker captures the flag
    - reveals: a scout loses and the defender is shown
    - defends: any other attacker loses
    """
    if not (is_on_board(from_index) and is_on_board(to_index)):
        raise IllegalMoveError("piece is not on the board")

    piece = board[from_index]
    if piece.is_empty:
        raise IllegalMoveError("piece is not in this position")
    if not is_movable(piece.rank):
        raise IllegalMoveError(f"{piece.rank.value} can not move")
    if piece.owner is not player:
        raise IllegalMoveError(f"piece is not the {player.value}'s")
    if from_index == to_index:
        raise IllegalMoveError(f"{piece.rank.value} must move")

    path = path_between(from_index, to_index)
    if path is None:
        raise IllegalMoveError("piece can not move diagonally")
    if len(path) > 2 and piece.rank is not Rank.SCOUT:
        raise IllegalMoveError(f"{piece.rank.value} can not move more than one space")

    for position, index in enumerate(path):
        if is_water_cell(index):
            raise IllegalMoveError("piece can not move through water")
        if 0 < position < len(path) - 1 and not board[index].is_empty:
            raise IllegalMoveError("piece can not move through other piece")

    target = board[to_index]
    if target.owner is player:
        raise IllegalMoveError(
            f"piece can not end on another piece owned by the {player.value}"
        )
    if target.owner is Owner.NONE:
        return MoveOutcome(EventKind.MOVES, from_index, to_index, piece.rank)

    if beats(piece.rank, target.rank):
        kind = EventKind.WINS if target.rank is Rank.FLAG else EventKind.ATTACKS
    elif piece.rank is Rank.SCOUT:
        kind = EventKind.REVEALS
    else:
        kind = EventKind.DEFENDS

    return MoveOutcome(kind, from_index, to_index, piece.rank, target.rank)
