"""
Session Manager - Creates and tracks local game sessions.

LIFECYCLE:
1. A player opens the app: a session is created (host if no game id,
   guest if the route carried one)
2. The player places pieces, then starts or joins the game
3. The session replays the game's feed until the game ends
4. The session is ended: its subscription is closed and it is forgotten

Sessions are in-memory only. Nothing is persisted.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable
import logging
import time
import uuid

from ..engine_core.state import GameState
from .controller import GameSession
from .transport import GameTransport

logger = logging.getLogger(__name__)


@dataclass
class SessionRecord:
    """Bookkeeping for one managed session."""
    session_id: str
    session: GameSession
    created_at: float

    def is_active(self) -> bool:
        return not self.session.state.is_over


class SessionManager:
    """
    Owns every GameSession in this process.

    Responsibilities:
    - Create sessions bound to a transport
    - Look sessions up by id
    - Close subscriptions when sessions end
    """

    def __init__(self, transport: GameTransport):
        self.transport = transport
        self._sessions: dict[str, SessionRecord] = {}

    def create_session(
        self,
        game_id: str | None = None,
        on_navigate: Callable[[str], None] | None = None,
        on_change: Callable[[GameState], None] | None = None,
    ) -> tuple[str, GameSession]:
        """
        Create a new session.

        Args:
            game_id: Game to join; None creates a host session
            on_navigate: Called with the game's path once a host starts
            on_change: Called after every replayed feed event

        Returns:
            (session_id, session)
        """
        session_id = str(uuid.uuid4())
        session = GameSession(
            self.transport,
            game_id=game_id,
            on_navigate=on_navigate,
            on_change=on_change,
        )
        self._sessions[session_id] = SessionRecord(
            session_id=session_id,
            session=session,
            created_at=time.time(),
        )
        logger.debug("Created %s session %s", session.player.value, session_id)
        return session_id, session

    def get_session(self, session_id: str) -> GameSession | None:
        record = self._sessions.get(session_id)
        return record.session if record else None

    def end_session(self, session_id: str) -> bool:
        """Close the session's subscription and forget it."""
        record = self._sessions.pop(session_id, None)
        if record is None:
            return False
        record.session.close()
        return True

    def list_active_sessions(self) -> list[str]:
        return [sid for sid, record in self._sessions.items() if record.is_active()]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """End finished sessions older than max_age. Returns how many."""
        current_time = time.time()
        stale = [
            sid for sid, record in self._sessions.items()
            if current_time - record.created_at > max_age_seconds and not record.is_active()
        ]
        for session_id in stale:
            self.end_session(session_id)
        return len(stale)

    def close_all(self):
        for session_id in list(self._sessions):
            self.end_session(session_id)
