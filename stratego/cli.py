"""
Stratego CLI - Command-line interface for the engine.

Usage:
    stratego serve [--host H] [--port P]   Run the game service API
    stratego demo [--moves N]              Play a scripted hot-seat game
    stratego catalog                       Print the piece catalog
"""

import argparse
import logging
import sys

from .config import configure_logging, load_settings

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Stratego - networked game-state engine",
        prog="stratego",
    )
    parser.add_argument("--log-level", help="Override STRATEGO_LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the game service API")
    serve_parser.add_argument("--host", help="Bind address")
    serve_parser.add_argument("--port", type=int, help="Bind port")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Play a scripted hot-seat game")
    demo_parser.add_argument("--moves", type=int, default=6, help="Number of moves to play")

    # Catalog command
    subparsers.add_parser("catalog", help="Print the piece catalog")

    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging(args.log_level or settings.log_level)

    if args.command == "serve":
        cmd_serve(args, settings)
    elif args.command == "demo":
        cmd_demo(args)
    elif args.command == "catalog":
        cmd_catalog(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_serve(args, settings):
    """Run the API under uvicorn."""
    import uvicorn
    from .api.app import create_app

    uvicorn.run(
        create_app(),
        host=args.host or settings.host,
        port=args.port or settings.port,
    )


def cmd_catalog(args):
    """Print rank, label and count for every piece."""
    from .engine_core.pieces import RANKS, Rank, display_label, rank_count

    print(f"{'rank':<12}{'label':>6}{'count':>7}")
    for rank in RANKS:
        if rank is Rank.EMPTY:
            continue
        print(f"{rank.value:<12}{display_label(rank):>6}{rank_count(rank):>7}")


def cmd_demo(args):
    """Two in-process sessions play against the in-memory service."""
    from .api.service import GamesService
    from .engine_core.movement import legal_destinations
    from .session import GameSession, LocalTransport

    transport = LocalTransport(GamesService())

    with GameSession(transport) as host:
        host.randomize()
        host.start_game()
        print(f"Host opened game {host.game_id}")

        with GameSession(transport, game_id=host.game_id) as guest:
            guest.randomize()
            guest.join_game()
            print("Guest joined\n")

            for number in range(1, args.moves + 1):
                session = host if host.state.is_local_turn else guest
                if session.state.is_over:
                    break

                move = _first_legal_move(session, legal_destinations)
                if move is None:
                    print(f"{session.player.value} has no legal move")
                    break

                from_index, to_index = move
                session.handle_click_board_cell(from_index)
                session.handle_click_board_cell(to_index)
                print(f"{number}. {session.player.value}: {from_index} -> {to_index}")

            print("\nHost view:")
            print(format_board(host.state))
            print("\nGuest view:")
            print(format_board(guest.state))


def _first_legal_move(session, legal_destinations):
    # Front line first: host advances toward higher indices, guest lower
    from .engine_core.board import Owner

    state = session.state
    host = state.local_role is Owner.HOST
    indices = range(len(state.board))
    if host:
        indices = reversed(indices)

    for index in indices:
        if state.board[index].owner is not state.local_role:
            continue
        destinations = legal_destinations(state.board, state.local_role, index)
        if destinations:
            forward = max if host else min
            return index, forward(destinations)
    return None


def format_board(state) -> str:
    """
    Text rendering of a local board.

    Own pieces show their label, hidden opponent pieces show `?`,
    water shows `~` and the selected cell is bracketed.
    """
    from .engine_core.board import COLUMNS, Owner, is_water_cell
    from .engine_core.pieces import display_label

    rows = []
    for start in range(0, len(state.board), COLUMNS):
        cells = []
        for index in range(start, start + COLUMNS):
            cell = state.board[index]
            if is_water_cell(index):
                label = "~"
            elif cell.owner is not Owner.NONE and cell.owner is not state.local_role and cell.is_empty:
                label = "?"
            else:
                label = display_label(cell.rank).strip() or "."
            if index == state.selected_cell:
                label = f"[{label}]"
            cells.append(f"{label:>4}")
        rows.append("".join(cells))
    return "\n".join(rows)


if __name__ == "__main__":
    main()
