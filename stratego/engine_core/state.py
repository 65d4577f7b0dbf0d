"""
Game State - One player's local picture of a Stratego game.

Design principles:
- Owned by a session controller and passed explicitly to engine code
- Only the local player's piece identities are known; opponent cells
  carry an owner but an empty rank until revealed
- Cloneable so a replay step can be applied atomically
"""

from __future__ import annotations
from dataclasses import dataclass, field
from copy import deepcopy
from enum import Enum

from .board import Board, Owner


class GamePhase(str, Enum):
    """Lifecycle of a game as seen by one player."""
    SETUP = "setup"
    AWAITING_START = "awaiting_start"  # host submitted, guest not joined yet
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


@dataclass
class GameState:
    """
    Complete local state at a point in time.

    `turn` is always host or guest. `selected_cell`, when set, points at
    a cell owned by `local_role`.
    """
    local_role: Owner
    turn: Owner
    game_id: str | None = None
    phase: GamePhase = GamePhase.SETUP
    selected_cell: int | None = None
    board: Board = field(default_factory=Board.create)

    winner: Owner | None = None
    last_error: str | None = None

    def __post_init__(self):
        if self.local_role is Owner.NONE:
            raise ValueError("local_role must be host or guest")
        if self.turn is Owner.NONE:
            raise ValueError("turn must be host or guest")

    @classmethod
    def create(cls, game_id: str | None = None) -> GameState:
        """
        New local state. Whoever arrives with a game id is the guest.

        Each side starts out holding the turn so it can place its pieces.
        """
        role = Owner.GUEST if game_id else Owner.HOST
        return cls(local_role=role, turn=role, game_id=game_id)

    @property
    def opponent(self) -> Owner:
        return self.local_role.opponent

    @property
    def has_started(self) -> bool:
        return self.phase in (GamePhase.IN_PROGRESS, GamePhase.FINISHED)

    @property
    def is_playing(self) -> bool:
        return self.phase is GamePhase.IN_PROGRESS

    @property
    def is_local_turn(self) -> bool:
        return self.turn is self.local_role

    @property
    def is_over(self) -> bool:
        return self.phase is GamePhase.FINISHED

    def flip_turn(self):
        self.turn = self.turn.opponent

    def clone(self) -> GameState:
        """Deep copy the state."""
        return deepcopy(self)
