"""
FastAPI Application - REST API for game clients.

Endpoints:
    POST   /games                   Create a game with the host's layout
    POST   /games/{id}              Join a game with the guest's layout
    POST   /games/{id}/moves        Submit a move
    GET    /games/{id}              Board as one player may see it
    WS     /games/{id}/moves        Event feed for the game
    GET    /health                  Health check

Move Flow:
    1. A client POSTs /moves with `from` and `to`
    2. The service resolves the move (and any combat)
    3. The outcome is broadcast as one event token to every feed
       subscriber of the game, e.g. `attacks 31 41`
    4. Clients replay the token into their local board

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union
import asyncio
import logging

from fastapi import FastAPI, Query, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..config import load_settings
from ..engine_core.board import Owner
from ..engine_core.combat import IllegalMoveError
from ..engine_core.placement import InvalidPlacementError
from .broker import moves_topic
from .schemas import (
    # Request models
    StartingPositionsRequest,
    MoveRequest,
    # Response models
    CellInfo,
    ErrorResponse,
    GameCreatedResponse,
    GameViewResponse,
    HealthResponse,
    MoveResponse,
    # Enums
    ErrorCode,
)
from .service import (
    GameAlreadyStartedError,
    GameNotFoundError,
    GameNotStartedError,
    GameOverError,
    GameServiceError,
    GamesService,
    NotYourTurnError,
)

logger = logging.getLogger(__name__)

# Exception type -> (error code, HTTP status)
ERROR_MAP: dict[type, tuple[ErrorCode, int]] = {
    GameNotFoundError: (ErrorCode.GAME_NOT_FOUND, 404),
    InvalidPlacementError: (ErrorCode.INVALID_PLACEMENT, 400),
    GameNotStartedError: (ErrorCode.GAME_NOT_STARTED, 409),
    GameAlreadyStartedError: (ErrorCode.GAME_ALREADY_STARTED, 409),
    GameOverError: (ErrorCode.GAME_OVER, 409),
    NotYourTurnError: (ErrorCode.NOT_YOUR_TURN, 409),
    IllegalMoveError: (ErrorCode.ILLEGAL_MOVE, 422),
}


def create_app(service: Optional[GamesService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional GamesService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    settings = load_settings()

    app = FastAPI(
        title="Stratego Game API",
        description="""
Authoritative two-player Stratego service.

Each player submits a 40-piece layout; the host creates the game and the
guest joins it. Moves are resolved here, including combat, and every
outcome is broadcast on the game's event feed as a short text token.

## Error Codes

| Code | Description |
|------|-------------|
| `GAME_NOT_FOUND` | Game does not exist |
| `INVALID_PLACEMENT` | Layout breaks the placement rules |
| `GAME_NOT_STARTED` | Guest has not joined yet |
| `NOT_YOUR_TURN` | The other side is on turn |
| `ILLEGAL_MOVE` | Move breaks the movement rules |
        """,
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    games_service = service or GamesService()
    app.state.games_service = games_service

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(error=message, error_code=error_code).model_dump(mode="json"),
        )

    def error_from_exception(error: Exception) -> JSONResponse:
        for error_type, (code, status_code) in ERROR_MAP.items():
            if isinstance(error, error_type):
                return make_error_response(code, str(error), status_code)
        logger.error("Unmapped service error: %s", error)
        return make_error_response(ErrorCode.INTERNAL_ERROR, str(error), 500)

    service_errors = (GameServiceError, InvalidPlacementError, IllegalMoveError)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/games",
        response_model=GameCreatedResponse,
        status_code=201,
        responses={400: {"model": ErrorResponse, "description": "Invalid layout"}},
        tags=["Games"],
        summary="Create a game with the host's starting layout",
    )
    async def create_game(body: StartingPositionsRequest) -> Union[GameCreatedResponse, JSONResponse]:
        """Indices 0-39 must all be present with exactly the catalog's pieces."""
        try:
            game_id = games_service.create_game(body.starting_positions)
        except service_errors as e:
            return error_from_exception(e)
        return GameCreatedResponse(id=game_id)

    @app.post(
        "/games/{game_id}",
        response_model=GameCreatedResponse,
        status_code=201,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid layout"},
            404: {"model": ErrorResponse, "description": "Game not found"},
            409: {"model": ErrorResponse, "description": "Game already started"},
        },
        tags=["Games"],
        summary="Join a game with the guest's starting layout",
    )
    async def join_game(
        game_id: str,
        body: StartingPositionsRequest,
    ) -> Union[GameCreatedResponse, JSONResponse]:
        """Indices 60-99 must all be present. Broadcasts `started`."""
        try:
            joined_id = games_service.join_game(game_id, body.starting_positions)
        except service_errors as e:
            return error_from_exception(e)
        return GameCreatedResponse(id=joined_id)

    @app.post(
        "/games/{game_id}/moves",
        response_model=MoveResponse,
        status_code=201,
        responses={
            404: {"model": ErrorResponse, "description": "Game not found"},
            409: {"model": ErrorResponse, "description": "Not started or not your turn"},
            422: {"model": ErrorResponse, "description": "Illegal move"},
        },
        tags=["Game Loop"],
        summary="Submit a move",
    )
    async def submit_move(game_id: str, body: MoveRequest) -> Union[MoveResponse, JSONResponse]:
        """
        Resolve a move. The outcome is broadcast on the event feed:
        `moves`, `attacks`, `defends`, `reveals` or `wins`.
        """
        try:
            event = games_service.move(game_id, body.from_index, body.to_index, body.player)
        except service_errors as e:
            return error_from_exception(e)
        return MoveResponse(event=event.to_token())

    @app.get(
        "/games/{game_id}",
        response_model=GameViewResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Get the board from one player's point of view",
    )
    async def get_game(
        game_id: str,
        player: Annotated[Owner, Query(description="Viewing side")] = Owner.HOST,
    ) -> Union[GameViewResponse, JSONResponse]:
        """Opponent pieces that have not been revealed come back with rank `empty`."""
        try:
            game = games_service.get_game(game_id)
            view = games_service.get_view(game_id, player)
        except service_errors as e:
            return error_from_exception(e)

        return GameViewResponse(
            id=game.game_id,
            status=game.status.value,
            viewer=player,
            winner=game.winner,
            board=[
                CellInfo(index=i, rank=cell.rank, owner=cell.owner, revealed=cell.revealed)
                for i, cell in enumerate(view)
            ],
        )

    # =========================================================================
    # Event Feed
    # =========================================================================

    @app.websocket("/games/{game_id}/moves")
    async def event_feed(websocket: WebSocket, game_id: str):
        """
        Streams the game's event tokens as text frames, in order.

        Every event published once the connection is accepted is sent.
        The feed ends as soon as the client goes away, even if the game
        has gone quiet.
        """
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[str] = asyncio.Queue()
        subscription = games_service.broker.subscribe(
            moves_topic(game_id),
            lambda message: loop.call_soon_threadsafe(queue.put_nowait, message),
        )

        async def forward_events():
            while True:
                message = await queue.get()
                await websocket.send_text(message)

        async def watch_client():
            # Clients never send on the feed; reading is how a close shows up
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    return

        tasks: set[asyncio.Task] = set()
        try:
            await websocket.accept()
            tasks = {
                asyncio.create_task(forward_events()),
                asyncio.create_task(watch_client()),
            }
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                task.result()
            logger.debug("Feed client for %s disconnected", game_id)
        except WebSocketDisconnect:
            logger.debug("Feed client for %s disconnected", game_id)
        finally:
            for task in tasks:
                task.cancel()
            subscription.close()

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse()

    return app


# For running directly: uvicorn stratego.api.app:app
app = create_app()
