"""
Move Legality Engine - Client-side check of a candidate (from, to) move.

The checks mirror what the game service enforces, so an accepted move
is sent to the service and a rejected one just keeps the selection
pending. Nothing here raises; every failure is a plain False.

Whether a legal move is a quiet move or an attack is decided by the
service, not here.
"""

from __future__ import annotations

from .board import Board, COLUMNS, Owner, column_of, is_on_board, is_water_cell, row_of
from .pieces import Rank, is_movable


def path_between(from_index: int, to_index: int) -> list[int] | None:
    """
    Cells of the straight line between two indices, both ends included.

    Returns None when the two cells share neither a row nor a column.
    """
    if row_of(from_index) == row_of(to_index):
        step = 1
    elif column_of(from_index) == column_of(to_index):
        step = COLUMNS
    else:
        return None

    low, high = sorted((from_index, to_index))
    return list(range(low, high + 1, step))


def can_move(
    board: Board,
    player: Owner,
    turn_owner: Owner,
    has_started: bool,
    from_index: int,
    to_index: int,
) -> bool:
    """Decide whether `player` may move the piece at from_index to to_index."""
    if turn_owner is not player:
        return False
    if not has_started:
        return False
    if not (is_on_board(from_index) and is_on_board(to_index)):
        return False

    rank = board[from_index].rank
    if not is_movable(rank):
        return False

    if from_index == to_index:
        return False

    path = path_between(from_index, to_index)
    if path is None:
        return False

    # Only scouts travel more than one square
    if len(path) > 2 and rank is not Rank.SCOUT:
        return False

    for position, index in enumerate(path):
        if is_water_cell(index):
            return False
        if not 0 < position < len(path) - 1:
            continue
        cell = board[index]
        # Hidden opponent pieces carry an owner but no rank
        if cell.owner is not Owner.NONE or not cell.is_empty:
            return False

    return board[to_index].owner is not player


def legal_destinations(board: Board, player: Owner, from_index: int) -> list[int]:
    """Every index the piece at from_index could legally move to right now."""
    return [
        to_index
        for to_index in range(len(board))
        if can_move(board, player, player, True, from_index, to_index)
    ]
