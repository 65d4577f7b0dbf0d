"""
Pytest fixtures for Stratego tests.
"""

import pytest

from ..api.service import GamesService
from ..engine_core.board import Board, Cell, Owner
from ..engine_core.pieces import Rank
from ..engine_core.placement import random_placement
from ..engine_core.state import GamePhase, GameState
from ..session import GameSession, LocalTransport


def put(board: Board, index: int, rank: Rank, owner: Owner, revealed: bool = False):
    """Place a piece directly, bypassing placement rules."""
    board[index] = Cell(rank=rank, owner=owner, revealed=revealed)


def layout(owner: Owner) -> dict[int, Rank]:
    """The default full layout for one side."""
    board = Board.create()
    random_placement(board, owner)
    return board.starting_positions(owner)


@pytest.fixture
def host_state() -> GameState:
    """Fresh host state in setup."""
    return GameState.create()


@pytest.fixture
def guest_state() -> GameState:
    """Fresh guest state in setup, arriving with a game id."""
    return GameState.create("test_game")


@pytest.fixture
def open_board() -> Board:
    """A board with every cell empty and unowned."""
    board = Board.create()
    for index in range(len(board)):
        board.clear(index)
    return board


@pytest.fixture
def playing_state(open_board: Board) -> GameState:
    """Host's view of a game in progress, host on turn, nothing placed."""
    return GameState(
        local_role=Owner.HOST,
        turn=Owner.HOST,
        game_id="test_game",
        phase=GamePhase.IN_PROGRESS,
        board=open_board,
    )


@pytest.fixture
def host_positions() -> dict[int, Rank]:
    return layout(Owner.HOST)


@pytest.fixture
def guest_positions() -> dict[int, Rank]:
    return layout(Owner.GUEST)


@pytest.fixture
def service() -> GamesService:
    return GamesService()


@pytest.fixture
def transport(service: GamesService) -> LocalTransport:
    return LocalTransport(service)


@pytest.fixture
def started_sessions(transport: LocalTransport):
    """Host and guest sessions with both layouts submitted; host to move."""
    host = GameSession(transport)
    host.randomize()
    assert host.start_game()

    guest = GameSession(transport, game_id=host.game_id)
    guest.randomize()
    assert guest.join_game()

    yield host, guest

    host.close()
    guest.close()


