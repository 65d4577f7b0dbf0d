"""
Reducer - Replays event tokens into the local game state.

The reducer is the single point where feed events mutate a GameState.

Design principles:
- (state, event) -> new state; the input state is never touched
- A token applies fully or not at all
- Every recognised event passes the turn to the other side
- Unparsable or unknown tokens are logged and skipped; only unknown kinds
  keep the turn where it was
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable
import logging

from .board import Owner
from .events import Event, EventKind, MalformedEventError, parse_event
from .state import GamePhase, GameState

logger = logging.getLogger(__name__)


@dataclass
class ReplayResult:
    """
    Result of applying one event.

    On failure `new_state` still holds the state to continue from: a copy
    with the board untouched and the turn advanced unless the kind was
    unknown (in legacy mode it advances then too).
    """
    success: bool
    new_state: GameState | None = None
    event: Event | None = None
    error: str | None = None
    error_code: str | None = None

    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        state: GameState | None = None,
    ) -> ReplayResult:
        return cls(success=False, new_state=state, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: GameState,
        event: Event,
        changes: list[str] | None = None,
    ) -> ReplayResult:
        return cls(success=True, new_state=state, event=event, state_changes=changes or [])


@dataclass
class EventReducer:
    """
    Applies feed events to a player's local state.

    advance_turn_on_unrecognized keeps the old client behaviour of
    passing the turn even for tokens of an unknown kind.
    """
    advance_turn_on_unrecognized: bool = False

    def apply(self, state: GameState, event: Event) -> ReplayResult:
        """Apply a parsed event, returning the new state."""
        handler = self._get_handler(event.kind)
        new_state = state.clone()
        try:
            changes = handler(new_state, event)
        except (IndexError, TypeError) as e:
            logger.warning("Could not apply %r: %s", event.to_token(), e)
            return ReplayResult.failure(str(e), error_code="HANDLER_ERROR", state=state)

        selected = new_state.selected_cell
        if selected is not None and new_state.board[selected].owner is not new_state.local_role:
            new_state.selected_cell = None

        new_state.flip_turn()
        logger.debug("Applied %r, turn passes to %s", event.to_token(), new_state.turn.value)
        return ReplayResult.success_with_state(new_state, event, changes)

    def apply_token(self, state: GameState, token: str) -> ReplayResult:
        """Parse and apply one raw token from the feed."""
        try:
            event = parse_event(token)
        except MalformedEventError as e:
            logger.warning("Skipping event token %r: %s", token, e)
            skipped = state.clone()
            # A known kind still stands for one turn on the service
            if not e.unknown_kind or self.advance_turn_on_unrecognized:
                skipped.flip_turn()
            return ReplayResult.failure(
                str(e),
                error_code="UNKNOWN_EVENT" if e.unknown_kind else "MALFORMED_EVENT",
                state=skipped,
            )
        return self.apply(state, event)

    def replay(self, state: GameState, tokens: Iterable[str]) -> GameState:
        """Fold a sequence of tokens over a state, in order."""
        for token in tokens:
            state = self.apply_token(state, token).new_state
        return state

    def _get_handler(self, kind: EventKind):
        handlers = {
            EventKind.STARTED: self._handle_started,
            EventKind.MOVES: self._handle_moves,
            EventKind.ATTACKS: self._handle_moves,
            EventKind.DEFENDS: self._handle_defends,
            EventKind.REVEALS: self._handle_reveals,
            EventKind.WINS: self._handle_wins,
        }
        return handlers[kind]

    def _mover(self, state: GameState) -> Owner:
        # Whoever is on turn made the move being reported
        return state.local_role if state.is_local_turn else state.opponent

    def _handle_started(self, state: GameState, event: Event) -> list[str]:
        state.phase = GamePhase.IN_PROGRESS
        return ["game started"]

    def _handle_moves(self, state: GameState, event: Event) -> list[str]:
        """Moves and attacks look the same locally: the piece relocates."""
        mover = self._mover(state)
        moving = state.board[event.from_index]
        moving.owner = mover
        state.board[event.to_index] = moving
        state.board.clear(event.from_index)
        return [f"{mover.value} {event.kind.value} {event.from_index} -> {event.to_index}"]

    def _handle_defends(self, state: GameState, event: Event) -> list[str]:
        state.board.clear(event.from_index)
        return [f"piece at {event.from_index} lost its attack"]

    def _handle_reveals(self, state: GameState, event: Event) -> list[str]:
        target = state.board[event.to_index]
        target.rank = event.rank
        target.revealed = True
        state.board.clear(event.from_index)
        return [f"piece at {event.to_index} revealed as {event.rank.value}"]

    def _handle_wins(self, state: GameState, event: Event) -> list[str]:
        state.phase = GamePhase.FINISHED
        state.winner = event.winner
        state.selected_cell = None
        if event.winner is None:
            return ["game over"]
        return [f"{event.winner.value} wins"]


def apply_event(state: GameState, token: str | Event) -> ReplayResult:
    """Convenience wrapper around a default EventReducer."""
    reducer = EventReducer()
    if isinstance(token, Event):
        return reducer.apply(state, token)
    return reducer.apply_token(state, token)


def replay(state: GameState, tokens: Iterable[str]) -> GameState:
    return EventReducer().replay(state, tokens)
