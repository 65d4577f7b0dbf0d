"""
Session Module - A player's side of a game.

A session represents one player in one game:
- Created when the player opens the board (host or guest)
- Holds the player's GameState
- Sends placement and moves through a transport
- Replays the game's event feed

Sessions are EPHEMERAL and own exactly one feed subscription,
released when the session is closed.
"""

from .controller import GameSession, game_path
from .manager import SessionManager, SessionRecord
from .transport import GameTransport, LocalTransport, TransportError

__all__ = [
    "GameSession",
    "game_path",
    "SessionManager",
    "SessionRecord",
    "GameTransport",
    "LocalTransport",
    "TransportError",
]
