"""
Engine Core - Deterministic Stratego rules and local state replay.

The engine:
1. Catalogs ranks and their capacities
2. Models the 100-cell board and its zones
3. Validates and applies setup placement
4. Decides move legality (client side) and combat (service side)
5. Replays feed events into a player's GameState via the reducer
"""

from .pieces import Rank, RANKS, RANK_COUNTS, rank_count, display_label, beats, is_movable
from .board import (
    Board, Cell, Owner, WATER_CELLS, empty_cell, is_water_cell, territory, zone_owner,
)
from .placement import (
    InvalidPlacementError, can_place, place_bench_piece, random_placement,
    validate_starting_positions,
)
from .movement import can_move, legal_destinations, path_between
from .events import Event, EventKind, MalformedEventError, parse_event
from .combat import IllegalMoveError, MoveOutcome, resolve_move
from .state import GamePhase, GameState
from .reducer import EventReducer, ReplayResult, apply_event, replay

__all__ = [
    "Rank",
    "RANKS",
    "RANK_COUNTS",
    "rank_count",
    "display_label",
    "beats",
    "is_movable",
    "Board",
    "Cell",
    "Owner",
    "WATER_CELLS",
    "empty_cell",
    "is_water_cell",
    "territory",
    "zone_owner",
    "InvalidPlacementError",
    "can_place",
    "place_bench_piece",
    "random_placement",
    "validate_starting_positions",
    "can_move",
    "legal_destinations",
    "path_between",
    "Event",
    "EventKind",
    "MalformedEventError",
    "parse_event",
    "IllegalMoveError",
    "MoveOutcome",
    "resolve_move",
    "GamePhase",
    "GameState",
    "EventReducer",
    "ReplayResult",
    "apply_event",
    "replay",
]
