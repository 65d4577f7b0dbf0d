"""
Session Controller - One player's side of a game.

The controller owns the player's GameState and the game's event
subscription. It turns user intents (bench and board clicks, start,
join) into placement, move checks and outgoing requests, and it feeds
incoming event tokens through the reducer.

All state changes happen under one lock, so feed callbacks arriving on
another thread never interleave with click handling.
"""

from __future__ import annotations
from typing import Callable
import logging
import threading

from ..api.broker import Subscription
from ..engine_core.board import Board, Owner, is_on_board, territory
from ..engine_core.movement import can_move
from ..engine_core.pieces import Rank
from ..engine_core.placement import can_place, place_bench_piece, random_placement
from ..engine_core.reducer import EventReducer, ReplayResult
from ..engine_core.state import GamePhase, GameState
from .transport import GameTransport, TransportError

logger = logging.getLogger(__name__)


def game_path(game_id: str) -> str:
    return f"/games/{game_id}"


class GameSession:
    """
    Usage:
        with GameSession(transport) as host:
            host.randomize()
            host.start_game()
            host.handle_click_board_cell(31)
            host.handle_click_board_cell(41)
    """

    def __init__(
        self,
        transport: GameTransport,
        game_id: str | None = None,
        reducer: EventReducer | None = None,
        on_navigate: Callable[[str], None] | None = None,
        on_change: Callable[[GameState], None] | None = None,
    ):
        self.transport = transport
        self.reducer = reducer or EventReducer()
        self.on_navigate = on_navigate
        self.on_change = on_change

        self._state = GameState.create(game_id)
        self._subscription: Subscription | None = None
        self._lock = threading.RLock()

    # =========================================================================
    # Read access for presentation
    # =========================================================================

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def board(self) -> Board:
        return self._state.board

    @property
    def player(self) -> Owner:
        return self._state.local_role

    @property
    def turn(self) -> Owner:
        return self._state.turn

    @property
    def phase(self) -> GamePhase:
        return self._state.phase

    @property
    def selected_cell(self) -> int | None:
        return self._state.selected_cell

    @property
    def game_id(self) -> str | None:
        return self._state.game_id

    @property
    def subscription(self) -> Subscription | None:
        return self._subscription

    # =========================================================================
    # Setup
    # =========================================================================

    def handle_click_bench_piece(self, rank: Rank) -> bool:
        """Place a bench piece on the selected cell. Returns True if placed."""
        with self._lock:
            state = self._state
            if state.phase is not GamePhase.SETUP or state.selected_cell is None:
                return False
            if can_place(state.board, rank, state.local_role):
                # Every piece of this rank is already on the board
                return False

            place_bench_piece(state.board, state.selected_cell, rank, state.local_role)
            return True

    def randomize(self) -> bool:
        """Fill the whole territory with the default layout."""
        with self._lock:
            if self._state.phase is not GamePhase.SETUP:
                return False
            random_placement(self._state.board, self._state.local_role)
            self._state.selected_cell = None
            return True

    def start_game(self) -> bool:
        """Host: submit the layout and open the game. No-op unless allowed."""
        with self._lock:
            state = self._state
            if (
                state.game_id is not None
                or state.local_role is not Owner.HOST
                or state.turn is not Owner.HOST
                or not state.board.is_territory_full(Owner.HOST)
            ):
                return False

            positions = state.board.starting_positions(Owner.HOST)
            try:
                game_id = self.transport.create_game(positions)
            except TransportError as e:
                self._record_failure("create game", e)
                return False

            self._state.game_id = game_id
            self._open_subscription(game_id)
            self._state.turn = Owner.GUEST
            self._state.phase = GamePhase.AWAITING_START
            self._state.selected_cell = None
            self._state.last_error = None

        logger.info("Started game %s as host", game_id)
        if self.on_navigate:
            self.on_navigate(game_path(game_id))
        return True

    def join_game(self) -> bool:
        """Guest: submit the layout to the known game. No-op unless allowed."""
        with self._lock:
            state = self._state
            if (
                state.game_id is None
                or state.local_role is not Owner.GUEST
                or state.turn is not Owner.GUEST
                or not state.board.is_territory_full(Owner.GUEST)
            ):
                return False

            positions = state.board.starting_positions(Owner.GUEST)
            try:
                game_id = self.transport.join_game(state.game_id, positions)
            except TransportError as e:
                self._record_failure("join game", e)
                return False

            self._state.game_id = game_id
            self._open_subscription(game_id)
            self._state.turn = Owner.HOST
            self._state.phase = GamePhase.IN_PROGRESS
            self._state.selected_cell = None
            self._state.last_error = None

        logger.info("Joined game %s as guest", game_id)
        return True

    # =========================================================================
    # Board clicks
    # =========================================================================

    def handle_click_board_cell(self, index: int) -> bool:
        """
        Handle a click on a board cell.

        Returns True if a move request was sent.
        """
        with self._lock:
            state = self._state
            if not is_on_board(index):
                return False
            if not state.is_local_turn or state.is_over:
                return False

            if state.phase is GamePhase.SETUP:
                self._toggle_setup_selection(index)
                return False

            selected = state.selected_cell
            own = state.board[index].owner is state.local_role

            if selected is None:
                if own:
                    state.selected_cell = index
                return False

            if selected == index:
                state.selected_cell = None
                return False

            if can_move(
                state.board, state.local_role, state.turn,
                state.is_playing, selected, index,
            ):
                return self._submit_move(selected, index)

            state.selected_cell = index if own else None
            return False

    def _toggle_setup_selection(self, index: int):
        state = self._state
        if index not in territory(state.local_role):
            return
        state.selected_cell = None if state.selected_cell == index else index

    def _submit_move(self, from_index: int, to_index: int) -> bool:
        try:
            self.transport.submit_move(self._state.game_id, from_index, to_index)
        except TransportError as e:
            self._record_failure("submit move", e)
            return False

        # The feed may already have been replayed into a fresh state object
        self._state.selected_cell = None
        self._state.last_error = None
        return True

    # =========================================================================
    # Event feed
    # =========================================================================

    def handle_message(self, token: str) -> ReplayResult:
        """Replay one event token from the feed."""
        with self._lock:
            result = self.reducer.apply_token(self._state, token)
            self._state = result.new_state
            state = self._state

        if self.on_change:
            self.on_change(state)
        return result

    def _on_feed_error(self, error: Exception):
        with self._lock:
            self._record_failure("event feed", error)

    def _open_subscription(self, game_id: str):
        if self._subscription is not None:
            self._subscription.close()
        self._subscription = self.transport.subscribe(
            game_id, self.handle_message, self._on_feed_error
        )

    def _record_failure(self, action: str, error: Exception):
        logger.error("Failed to %s: %s", action, error, exc_info=error)
        self._state.last_error = str(error)

    # =========================================================================
    # Lifetime
    # =========================================================================

    def close(self):
        """Release the event subscription."""
        with self._lock:
            if self._subscription is not None:
                self._subscription.close()
                self._subscription = None

    def __enter__(self) -> GameSession:
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
