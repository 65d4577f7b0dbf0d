"""
API Module - The authoritative game service and its HTTP surface.

Game clients:
1. Create a game with the host's layout
2. Join it with the guest's layout
3. Submit moves
4. Follow the game's event feed for outcomes

Games live in memory only. The FastAPI app is in `stratego.api.app`.
"""

from .broker import EventBroker, Subscription, moves_topic
from .service import (
    Game,
    GameStatus,
    GamesService,
    GameServiceError,
    GameNotFoundError,
    GameNotStartedError,
    GameAlreadyStartedError,
    GameOverError,
    NotYourTurnError,
)

__all__ = [
    # Feed
    "EventBroker",
    "Subscription",
    "moves_topic",
    # Service
    "Game",
    "GameStatus",
    "GamesService",
    # Errors
    "GameServiceError",
    "GameNotFoundError",
    "GameNotStartedError",
    "GameAlreadyStartedError",
    "GameOverError",
    "NotYourTurnError",
]
