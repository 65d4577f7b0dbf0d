"""
Tests for the reducer (event replay).

Tests:
- Board mutation per event kind
- Turn alternation
- Ownership from each player's point of view
- Skipping of malformed tokens
"""

import pytest

from ..engine_core.board import Owner
from ..engine_core.events import Event, EventKind
from ..engine_core.pieces import Rank
from ..engine_core.reducer import EventReducer, apply_event, replay
from ..engine_core.state import GamePhase, GameState
from .conftest import put


class TestMovesEvent:
    """Relocation and ownership of the moved piece."""

    def test_move_on_local_turn_keeps_local_owner(self, playing_state):
        put(playing_state.board, 5, Rank.MAJOR, Owner.HOST)

        result = apply_event(playing_state, "moves 5 6")

        assert result.success
        board = result.new_state.board
        assert board[6].owner is Owner.HOST
        assert board[6].rank is Rank.MAJOR
        assert board[5].is_empty
        assert board[5].owner is Owner.NONE

    def test_move_on_opponent_turn_belongs_to_opponent(self, playing_state):
        playing_state.turn = Owner.GUEST
        put(playing_state.board, 5, Rank.EMPTY, Owner.GUEST)

        result = apply_event(playing_state, "moves 5 6")

        assert result.new_state.board[6].owner is Owner.GUEST
        assert result.new_state.board[5].owner is Owner.NONE

    def test_attack_mutates_like_move(self, playing_state):
        put(playing_state.board, 50, Rank.COLONEL, Owner.HOST)
        put(playing_state.board, 60, Rank.EMPTY, Owner.GUEST)

        result = apply_event(playing_state, "attacks 50 60")

        assert result.new_state.board[60].owner is Owner.HOST
        assert result.new_state.board[60].rank is Rank.COLONEL
        assert result.new_state.board[50].is_empty

    def test_input_state_untouched(self, playing_state):
        put(playing_state.board, 5, Rank.MAJOR, Owner.HOST)

        apply_event(playing_state, "moves 5 6")

        assert playing_state.board[5].rank is Rank.MAJOR
        assert playing_state.board[6].is_empty
        assert playing_state.turn is Owner.HOST


class TestOtherEvents:

    def test_started(self, host_state):
        host_state.phase = GamePhase.AWAITING_START
        host_state.turn = Owner.GUEST

        result = apply_event(host_state, "started")

        assert result.new_state.phase is GamePhase.IN_PROGRESS
        assert result.new_state.turn is Owner.HOST

    def test_defends_clears_attacker(self, playing_state):
        put(playing_state.board, 50, Rank.SERGEANT, Owner.HOST)
        put(playing_state.board, 60, Rank.EMPTY, Owner.GUEST)

        result = apply_event(playing_state, "defends 50 60")

        assert result.new_state.board[50].is_empty
        assert result.new_state.board[60].owner is Owner.GUEST

    def test_reveals(self, playing_state):
        put(playing_state.board, 50, Rank.SCOUT, Owner.HOST)
        put(playing_state.board, 60, Rank.EMPTY, Owner.GUEST)

        result = apply_event(playing_state, "reveals 50 60 marshal")

        target = result.new_state.board[60]
        assert target.rank is Rank.MARSHAL
        assert target.revealed
        assert target.owner is Owner.GUEST
        assert result.new_state.board[50].is_empty

    def test_wins(self, playing_state):
        put(playing_state.board, 60, Rank.MAJOR, Owner.HOST)
        before = playing_state.board.clone()

        result = apply_event(playing_state, "wins host")

        assert result.new_state.phase is GamePhase.FINISHED
        assert result.new_state.winner is Owner.HOST
        assert result.new_state.board == before
        assert result.new_state.turn is Owner.GUEST


class TestTurnAlternation:

    def test_token_sequence(self, host_state):
        put(host_state.board, 12, Rank.MINER, Owner.HOST)
        tokens = ["started", "moves 12 22", "attacks 22 75", "defends 75"]

        turns = []
        state = host_state
        for token in tokens:
            result = apply_event(state, token)
            assert result.success
            state = result.new_state
            turns.append(state.turn)

        assert turns == [Owner.GUEST, Owner.HOST, Owner.GUEST, Owner.HOST]
        assert state.board[75].is_empty
        assert state.board[22].is_empty
        assert state.board[12].is_empty

    def test_replay_helper(self, host_state):
        put(host_state.board, 12, Rank.MINER, Owner.HOST)
        state = replay(host_state, ["started", "moves 12 22"])
        assert state.board[22].owner is Owner.GUEST
        assert state.turn is Owner.HOST


class TestUnrecognizedTokens:

    def test_unknown_kind_is_skipped(self, playing_state):
        result = apply_event(playing_state, "teleports 1 2")

        assert not result.success
        assert result.error_code == "UNKNOWN_EVENT"
        assert result.new_state.turn is Owner.HOST

    def test_malformed_index_is_skipped(self, playing_state):
        put(playing_state.board, 5, Rank.MAJOR, Owner.HOST)

        result = apply_event(playing_state, "moves 5 x")

        assert not result.success
        assert result.error_code == "MALFORMED_EVENT"
        assert result.new_state.board[5].rank is Rank.MAJOR
        assert result.new_state.turn is Owner.GUEST

    def test_malformed_known_kind_keeps_turns_in_step(self, playing_state):
        """The next move after a garbled one is still credited to the right side."""
        put(playing_state.board, 60, Rank.EMPTY, Owner.GUEST)

        state = replay(playing_state, ["moves 5 x", "moves 60 50"])

        assert state.board[50].owner is Owner.GUEST
        assert state.turn is Owner.HOST

    def test_legacy_mode_still_advances_turn(self, playing_state):
        reducer = EventReducer(advance_turn_on_unrecognized=True)

        result = reducer.apply_token(playing_state, "teleports 1 2")

        assert not result.success
        assert result.new_state.turn is Owner.GUEST

    def test_replay_continues_past_bad_token(self, playing_state):
        put(playing_state.board, 5, Rank.MAJOR, Owner.HOST)
        state = replay(playing_state, ["bogus", "moves 5 6"])
        assert state.board[6].rank is Rank.MAJOR


class TestSelection:

    def test_selection_cleared_when_piece_captured(self, playing_state):
        put(playing_state.board, 50, Rank.SCOUT, Owner.HOST)
        put(playing_state.board, 60, Rank.EMPTY, Owner.GUEST)
        playing_state.selected_cell = 50
        playing_state.turn = Owner.GUEST

        result = apply_event(playing_state, Event.attacks(60, 50))

        assert result.new_state.board[50].owner is Owner.GUEST
        assert result.new_state.selected_cell is None

    def test_selection_kept_for_untouched_piece(self, playing_state):
        put(playing_state.board, 30, Rank.MAJOR, Owner.HOST)
        playing_state.selected_cell = 30
        playing_state.turn = Owner.GUEST
        put(playing_state.board, 70, Rank.EMPTY, Owner.GUEST)

        result = apply_event(playing_state, "moves 70 71")

        assert result.new_state.selected_cell == 30


def test_local_role_must_be_a_side():
    with pytest.raises(ValueError):
        GameState(local_role=Owner.NONE, turn=Owner.HOST)


def test_every_event_kind_has_a_handler():
    reducer = EventReducer()
    for kind in EventKind:
        assert callable(reducer._get_handler(kind))
