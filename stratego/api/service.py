"""
Games Service - The authoritative side of a two-player game.

The service:
1. Accepts the host's layout and opens a game
2. Accepts the guest's layout and starts play
3. Resolves every move, including combat, with full knowledge of the board
4. Broadcasts the outcome as an event token on the game's feed

Games live in memory only. This layer is framework-agnostic; the
FastAPI app and the in-process transport both call it directly.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping
import logging
import threading
import time
import uuid

from ..engine_core.board import Board, Cell, Owner, territory
from ..engine_core.combat import IllegalMoveError, resolve_move
from ..engine_core.events import Event, EventKind
from ..engine_core.pieces import Rank
from ..engine_core.placement import InvalidPlacementError, validate_starting_positions
from .broker import EventBroker, moves_topic

logger = logging.getLogger(__name__)


class GameStatus(str, Enum):
    """Server-side game status. HOST/GUEST name the side to move."""
    SETUP = "setup"
    HOST = "host"
    GUEST = "guest"
    DONE = "done"


class GameServiceError(Exception):
    """Base class for errors reported back to the caller."""
    error_code = "GAME_ERROR"


class GameNotFoundError(GameServiceError):
    error_code = "GAME_NOT_FOUND"


class GameNotStartedError(GameServiceError):
    error_code = "GAME_NOT_STARTED"


class GameAlreadyStartedError(GameServiceError):
    error_code = "GAME_ALREADY_STARTED"


class GameOverError(GameServiceError):
    error_code = "GAME_OVER"


class NotYourTurnError(GameServiceError):
    error_code = "NOT_YOUR_TURN"


@dataclass
class Game:
    """A game as the service stores it."""
    game_id: str
    board: Board
    created_at: float
    status: GameStatus = GameStatus.SETUP
    winner: Owner | None = None

    @property
    def turn(self) -> Owner | None:
        if self.status is GameStatus.HOST:
            return Owner.HOST
        if self.status is GameStatus.GUEST:
            return Owner.GUEST
        return None


@dataclass
class GamesService:
    """
    In-memory games store plus the broker that carries their feeds.

    Usage:
        service = GamesService()
        game_id = service.create_game(host_positions)
        service.join_game(game_id, guest_positions)
        service.move(game_id, 30, 40)
    """
    broker: EventBroker = field(default_factory=EventBroker)

    _games: dict[str, Game] = field(default_factory=dict)
    _lock: threading.RLock = field(default_factory=threading.RLock)

    def create_game(self, positions: Mapping[int, Rank]) -> str:
        """Open a game with the host's 40 starting pieces."""
        validate_starting_positions(positions, Owner.HOST)

        board = Board.create()
        for index in range(len(board)):
            board.clear(index)
        for index in territory(Owner.HOST):
            board[index] = Cell(rank=Rank(positions[index]), owner=Owner.HOST)

        game = Game(game_id=str(uuid.uuid4()), board=board, created_at=time.time())
        with self._lock:
            self._games[game.game_id] = game

        logger.info("Created game %s", game.game_id)
        return game.game_id

    def join_game(self, game_id: str, positions: Mapping[int, Rank]) -> str:
        """Add the guest's layout and start play. Host moves first."""
        with self._lock:
            game = self._get(game_id)
            if game.status is not GameStatus.SETUP:
                raise GameAlreadyStartedError(f"game {game_id} has already started")

            validate_starting_positions(positions, Owner.GUEST)
            for index in territory(Owner.GUEST):
                game.board[index] = Cell(rank=Rank(positions[index]), owner=Owner.GUEST)
            game.status = GameStatus.HOST

            logger.info("Guest joined game %s", game_id)
            self._publish(game, Event.started())
        return game.game_id

    def move(self, game_id: str, from_index: int, to_index: int, player: Owner | None = None) -> Event:
        """
        Resolve a move by `player` (default: whoever is on turn).

        Returns the event that was broadcast.
        """
        with self._lock:
            game = self._get(game_id)
            if game.status is GameStatus.SETUP:
                raise GameNotStartedError("game has not started")
            if game.status is GameStatus.DONE:
                raise GameOverError("game is over")

            mover = player or game.turn
            if mover is not game.turn:
                raise NotYourTurnError(f"it is not the {mover.value}'s turn")

            outcome = resolve_move(game.board, mover, from_index, to_index)
            board = game.board

            if outcome.kind in (EventKind.MOVES, EventKind.ATTACKS, EventKind.WINS):
                board[to_index] = board[from_index]
                board.clear(from_index)
            elif outcome.kind is EventKind.DEFENDS:
                board.clear(from_index)
            elif outcome.kind is EventKind.REVEALS:
                board.clear(from_index)
                board[to_index].revealed = True

            logger.info(
                "Game %s: %s %s %d -> %d",
                game_id, mover.value, outcome.kind.value, from_index, to_index,
            )

            if outcome.kind is EventKind.WINS:
                game.status = GameStatus.DONE
                game.winner = mover
                self._publish(game, Event.attacks(from_index, to_index))
                event = Event.wins(mover)
            else:
                game.status = GameStatus(mover.opponent.value)
                event = self._event_for(outcome.kind, from_index, to_index, board)

            self._publish(game, event)
        return event

    def get_game(self, game_id: str) -> Game:
        with self._lock:
            return self._get(game_id)

    def get_view(self, game_id: str, viewer: Owner) -> Board:
        """The board as `viewer` may see it."""
        with self._lock:
            return self._get(game_id).board.view_for(viewer)

    def list_games(self) -> list[str]:
        with self._lock:
            return list(self._games)

    def end_game(self, game_id: str) -> bool:
        with self._lock:
            return self._games.pop(game_id, None) is not None

    def _get(self, game_id: str) -> Game:
        game = self._games.get(game_id)
        if game is None:
            raise GameNotFoundError(f"game {game_id} not found")
        return game

    def _event_for(self, kind: EventKind, from_index: int, to_index: int, board: Board) -> Event:
        if kind is EventKind.MOVES:
            return Event.moves(from_index, to_index)
        if kind is EventKind.ATTACKS:
            return Event.attacks(from_index, to_index)
        if kind is EventKind.DEFENDS:
            return Event.defends(from_index, to_index)
        return Event.reveals(from_index, to_index, board[to_index].rank)

    def _publish(self, game: Game, event: Event):
        self.broker.publish(moves_topic(game.game_id), event.to_token())


__all__ = [
    "Game",
    "GameStatus",
    "GamesService",
    "GameServiceError",
    "GameNotFoundError",
    "GameNotStartedError",
    "GameAlreadyStartedError",
    "GameOverError",
    "NotYourTurnError",
    "IllegalMoveError",
    "InvalidPlacementError",
]
