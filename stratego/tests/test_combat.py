"""
Tests for authoritative move resolution.
"""

import pytest

from ..engine_core.board import Owner
from ..engine_core.combat import IllegalMoveError, resolve_move
from ..engine_core.events import EventKind
from ..engine_core.pieces import Rank
from .conftest import put


def duel(board, attacker: Rank, defender: Rank):
    put(board, 50, attacker, Owner.HOST)
    put(board, 60, defender, Owner.GUEST)
    return resolve_move(board, Owner.HOST, 50, 60)


class TestOutcomes:

    def test_quiet_move(self, open_board):
        put(open_board, 30, Rank.MAJOR, Owner.HOST)
        outcome = resolve_move(open_board, Owner.HOST, 30, 40)
        assert outcome.kind is EventKind.MOVES
        assert outcome.attacker is Rank.MAJOR

    def test_stronger_attacker_wins(self, open_board):
        outcome = duel(open_board, Rank.COLONEL, Rank.MAJOR)
        assert outcome.kind is EventKind.ATTACKS
        assert outcome.defender is Rank.MAJOR

    def test_spy_takes_marshal(self, open_board):
        assert duel(open_board, Rank.SPY, Rank.MARSHAL).kind is EventKind.ATTACKS

    def test_miner_defuses_bomb(self, open_board):
        assert duel(open_board, Rank.MINER, Rank.BOMB).kind is EventKind.ATTACKS

    def test_bomb_stops_other_attackers(self, open_board):
        assert duel(open_board, Rank.GENERAL, Rank.BOMB).kind is EventKind.DEFENDS

    def test_tie_defends(self, open_board):
        assert duel(open_board, Rank.CAPTAIN, Rank.CAPTAIN).kind is EventKind.DEFENDS

    def test_losing_scout_reveals(self, open_board):
        assert duel(open_board, Rank.SCOUT, Rank.SERGEANT).kind is EventKind.REVEALS

    def test_flag_capture_wins(self, open_board):
        assert duel(open_board, Rank.SCOUT, Rank.FLAG).kind is EventKind.WINS


class TestIllegal:

    @pytest.mark.parametrize("setup,move,message", [
        ([(30, Rank.MAJOR, Owner.HOST)], (30, 130), "not on the board"),
        ([], (30, 40), "not in this position"),
        ([(30, Rank.BOMB, Owner.HOST)], (30, 40), "bomb can not move"),
        ([(30, Rank.MAJOR, Owner.GUEST)], (30, 40), "not the host's"),
        ([(30, Rank.MAJOR, Owner.HOST)], (30, 30), "must move"),
        ([(30, Rank.MAJOR, Owner.HOST)], (30, 41), "diagonally"),
        ([(30, Rank.MAJOR, Owner.HOST)], (30, 50), "more than one space"),
        ([(32, Rank.MAJOR, Owner.HOST)], (32, 42), "water"),
        ([(30, Rank.SCOUT, Owner.HOST), (40, Rank.SPY, Owner.GUEST)], (30, 50), "through other piece"),
        ([(30, Rank.MAJOR, Owner.HOST), (31, Rank.SPY, Owner.HOST)], (30, 31), "owned by the host"),
    ])
    def test_rejections(self, open_board, setup, move, message):
        for index, rank, owner in setup:
            put(open_board, index, rank, owner)
        with pytest.raises(IllegalMoveError, match=message):
            resolve_move(open_board, Owner.HOST, *move)
