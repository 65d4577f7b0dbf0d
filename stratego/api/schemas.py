"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a game client and the
service. Field names on the wire follow the client (`startingPositions`,
`from`, `to`).

Error Codes:
- GAME_NOT_FOUND: Game does not exist
- INVALID_PLACEMENT: Starting layout breaks the placement rules
- GAME_NOT_STARTED: Move sent before the guest joined
- GAME_ALREADY_STARTED: Join sent to a game that is already running
- GAME_OVER: Move sent after the flag was captured
- NOT_YOUR_TURN: Move sent by the side that is not on turn
- ILLEGAL_MOVE: Move breaks the movement rules
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from ..engine_core.board import Owner
from ..engine_core.pieces import Rank


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    GAME_NOT_FOUND = "GAME_NOT_FOUND"
    INVALID_PLACEMENT = "INVALID_PLACEMENT"
    GAME_NOT_STARTED = "GAME_NOT_STARTED"
    GAME_ALREADY_STARTED = "GAME_ALREADY_STARTED"
    GAME_OVER = "GAME_OVER"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    ILLEGAL_MOVE = "ILLEGAL_MOVE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CellInfo(BaseModel):
    """One board cell as a given player may see it."""
    index: int
    rank: Rank
    owner: Owner
    revealed: bool = False

    model_config = {"from_attributes": True}


# =============================================================================
# Request Models
# =============================================================================

class StartingPositionsRequest(BaseModel):
    """A full 40-piece layout for one side."""
    starting_positions: dict[int, Rank] = Field(
        ...,
        alias="startingPositions",
        description="Board index -> rank for every cell of the player's territory",
    )

    model_config = ConfigDict(populate_by_name=True)


class MoveRequest(BaseModel):
    """Move the piece at `from` to `to`."""
    from_index: int = Field(..., alias="from", ge=0, le=99)
    to_index: int = Field(..., alias="to", ge=0, le=99)
    player: Optional[Owner] = Field(
        None, description="Side making the move; defaults to the side on turn"
    )

    model_config = ConfigDict(populate_by_name=True)


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")


class GameCreatedResponse(BaseModel):
    """Identifier of a created or joined game."""
    id: str


class MoveResponse(BaseModel):
    """Acknowledgement of a move. Outcomes travel on the event feed."""
    event: Optional[str] = Field(None, description="Token broadcast for this move")


class GameViewResponse(BaseModel):
    """The board from one player's point of view."""
    id: str
    status: str = Field(description="setup, host, guest or done")
    viewer: Owner
    winner: Optional[Owner] = None
    board: list[CellInfo] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    service: str = "stratego"
    version: str = "1.0.0"
