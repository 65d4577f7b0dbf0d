"""
Transport - How a session talks to the game service.

GameTransport is the contract the session controller depends on. Any
implementation raises TransportError for failures it cannot recover
from; the controller logs them and leaves retrying to the user.
"""

from __future__ import annotations
from typing import Callable, Mapping, Protocol
import logging

from ..api.broker import ErrorHandler, MessageHandler, Subscription, moves_topic
from ..api.service import GameServiceError, GamesService
from ..engine_core.combat import IllegalMoveError
from ..engine_core.pieces import Rank
from ..engine_core.placement import InvalidPlacementError

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """A request to the game service failed."""


class GameTransport(Protocol):
    """Outbound requests plus the per-game event feed."""

    def create_game(self, positions: Mapping[int, Rank]) -> str:
        ...

    def join_game(self, game_id: str, positions: Mapping[int, Rank]) -> str:
        ...

    def submit_move(self, game_id: str, from_index: int, to_index: int) -> None:
        ...

    def subscribe(
        self,
        game_id: str,
        on_message: MessageHandler,
        on_error: ErrorHandler | None = None,
    ) -> Subscription:
        ...


class LocalTransport:
    """
    Transport that calls a GamesService in the same process.

    Used for hot-seat play and for tests. Feed messages are delivered
    synchronously while the request that caused them is still running.
    """

    def __init__(self, service: GamesService):
        self.service = service

    def create_game(self, positions: Mapping[int, Rank]) -> str:
        return self._call(self.service.create_game, positions)

    def join_game(self, game_id: str, positions: Mapping[int, Rank]) -> str:
        return self._call(self.service.join_game, game_id, positions)

    def submit_move(self, game_id: str, from_index: int, to_index: int) -> None:
        self._call(self.service.move, game_id, from_index, to_index)

    def subscribe(
        self,
        game_id: str,
        on_message: MessageHandler,
        on_error: ErrorHandler | None = None,
    ) -> Subscription:
        return self.service.broker.subscribe(moves_topic(game_id), on_message, on_error)

    def _call(self, fn: Callable, *args):
        try:
            return fn(*args)
        except (GameServiceError, IllegalMoveError, InvalidPlacementError) as e:
            raise TransportError(str(e)) from e
