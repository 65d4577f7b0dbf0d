"""
Tests for the board model.
"""

import pytest

from ..engine_core.board import (
    Board, Cell, Owner, WATER_CELLS, empty_cell, is_water_cell, territory, zone_owner,
)
from ..engine_core.pieces import Rank
from .conftest import put


class TestZones:
    """Zone layout and water."""

    def test_exactly_eight_water_cells(self):
        water = [i for i in range(100) if is_water_cell(i)]
        assert water == [42, 43, 46, 47, 52, 53, 56, 57]
        assert set(water) == WATER_CELLS

    def test_zone_owner(self):
        assert zone_owner(0) is Owner.HOST
        assert zone_owner(39) is Owner.HOST
        assert zone_owner(40) is Owner.NONE
        assert zone_owner(59) is Owner.NONE
        assert zone_owner(60) is Owner.GUEST
        assert zone_owner(99) is Owner.GUEST

    def test_territory(self):
        assert territory(Owner.HOST) == range(0, 40)
        assert territory(Owner.GUEST) == range(60, 100)
        with pytest.raises(ValueError):
            territory(Owner.NONE)

    def test_opponent(self):
        assert Owner.HOST.opponent is Owner.GUEST
        assert Owner.GUEST.opponent is Owner.HOST
        assert Owner.NONE.opponent is Owner.NONE


class TestBoard:
    """Board construction and queries."""

    def test_create(self):
        board = Board.create()
        assert len(board) == 100
        for index, cell in enumerate(board):
            assert cell.rank is Rank.EMPTY
            assert cell.owner is zone_owner(index)
            assert not cell.revealed

    def test_empty_cell(self):
        assert empty_cell() == Cell(rank=Rank.EMPTY, owner=Owner.NONE, revealed=False)

    def test_wrong_size_rejected(self):
        with pytest.raises(ValueError):
            Board(cells=[empty_cell()] * 99)

    def test_clear(self):
        board = Board.create()
        put(board, 5, Rank.MAJOR, Owner.HOST)
        board.clear(5)
        assert board[5] == empty_cell()

    def test_territory_full_and_positions(self):
        board = Board.create()
        assert not board.is_territory_full(Owner.HOST)
        for index in territory(Owner.HOST):
            put(board, index, Rank.SCOUT, Owner.HOST)
        assert board.is_territory_full(Owner.HOST)
        assert not board.is_territory_full(Owner.GUEST)

        positions = board.starting_positions(Owner.HOST)
        assert sorted(positions) == list(range(40))
        assert set(positions.values()) == {Rank.SCOUT}


class TestViewFor:
    """Hiding opponent identities."""

    def test_hides_unrevealed_opponent_ranks(self):
        board = Board.create()
        put(board, 10, Rank.MARSHAL, Owner.HOST)
        put(board, 70, Rank.GENERAL, Owner.GUEST)
        put(board, 71, Rank.MINER, Owner.GUEST, revealed=True)

        view = board.view_for(Owner.HOST)

        assert view[10].rank is Rank.MARSHAL
        assert view[70].rank is Rank.EMPTY
        assert view[70].owner is Owner.GUEST
        assert view[71].rank is Rank.MINER

    def test_view_is_a_copy(self):
        board = Board.create()
        put(board, 70, Rank.GENERAL, Owner.GUEST)
        view = board.view_for(Owner.HOST)
        view[70].owner = Owner.NONE
        assert board[70].owner is Owner.GUEST
        assert board[70].rank is Rank.GENERAL
