"""
FastAPI Application - REST API for game clients.

Endpoints:
    POST   /api/v1/games                     Create a game
    GET    /api/v1/games                     List stored games
    GET    /api/v1/games/{id}                Get a game (projected for the viewer)
    POST   /api/v1/games/{id}/inputs         Submit an input
    GET    /api/v1/games/{id}/legal-inputs   List a player's legal inputs
    GET    /api/v1/games/{id}/log            Get the game log
    WS     /api/v1/games/{id}/ws             Change notifications
    GET    /api/health                       Health check

Polling contract:
    Every accepted input (including UNDO) increases game_state_id. Clients
    either poll GET /games/{id} and compare game_state_id, or listen on the
    WebSocket for {"type": "game_changed", "game_state_id": n}.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union
import asyncio
import json
import logging
import os

from .. import __version__

# Environment configuration
EVERDELL_ENV = os.getenv("EVERDELL_ENV", "development")
EVERDELL_DATA_DIR = os.getenv("EVERDELL_DATA_DIR", None)
EVERDELL_LOG_LEVEL = os.getenv("EVERDELL_LOG_LEVEL", "INFO")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query, Request, WebSocket, WebSocketDisconnect
        from fastapi.exceptions import RequestValidationError
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from ..engine_core.errors import ErrorCode, InvariantViolation
    from ..session import FileGameStore, GameManager
    from .service import APIService, status_for
    from .schemas import (
        # Request models
        CreateGameRequest,
        SubmitInputRequest,
        # Response models
        CreateGameResponse,
        ErrorResponse,
        GameListResponse,
        GameLogResponse,
        GameStateResponse,
        HealthResponse,
        LegalInputsResponse,
        SubmitInputResponse,
    )

    logging.getLogger("everdell").setLevel(EVERDELL_LOG_LEVEL.upper())

    app = FastAPI(
        title="Everdell Engine API",
        description="""
Turn-based rules engine for Everdell.

## Inputs

Top-level inputs are submitted by the active player. When an effect needs a
decision, the game waits on a pending input: only its target player may
answer it, with the matching `input_type`, `context_type` and `context_name`.

## Error Codes

| Code | Status | Description |
|------|--------|-------------|
| `NOT_FOUND` | 404 | Unknown game, player or entity |
| `AUTH_ERROR` | 403 | Secret does not match the player |
| `NOT_YOUR_TURN` | 409 | The game is waiting on another player |
| `MALFORMED_INPUT` | 422 | The payload has the wrong shape |
| `ILLEGAL_ACTION` | 400 | Not allowed by the rules right now |
| `INVALID_INPUT` | 400 | The game is over |
| `INVARIANT_VIOLATION` | 500 | Internal error; nothing was applied |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Service instance
    if service is None:
        store = FileGameStore(EVERDELL_DATA_DIR) if EVERDELL_DATA_DIR else None
        service = APIService(game_manager=GameManager(store=store))
    api_service = service
    notifier = api_service.game_manager.notifier

    # WebSocket connections and their notifier subscriptions, by game id
    ws_connections: dict[str, list[WebSocket]] = {}
    ws_subscriptions: dict[str, str] = {}

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def error_to_response(response: ErrorResponse) -> JSONResponse:
        return make_error_response(
            response.error_code,
            response.error,
            status_code=status_for(response.error_code),
            details=response.details,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return make_error_response(
            ErrorCode.MALFORMED_INPUT,
            "Request body is malformed",
            status_code=422,
            details={"errors": json.loads(json.dumps(exc.errors(), default=str))},
        )

    @app.exception_handler(InvariantViolation)
    async def invariant_violation_handler(request: Request, exc: InvariantViolation):
        return make_error_response(ErrorCode.INVARIANT_VIOLATION, exc.message, status_code=500)

    async def broadcast_to_game(game_id: str, message: dict):
        """Broadcast a message to all WebSocket connections for a game."""
        if game_id in ws_connections:
            dead_connections = []
            for ws in ws_connections[game_id]:
                try:
                    await ws.send_json(message)
                except (WebSocketDisconnect, RuntimeError):
                    dead_connections.append(ws)
            for ws in dead_connections:
                ws_connections[game_id].remove(ws)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games",
        response_model=CreateGameResponse,
        responses={422: {"model": ErrorResponse, "description": "Invalid player list"}},
        tags=["Games"],
        summary="Create a new game",
    )
    async def create_game(request: CreateGameRequest) -> Union[CreateGameResponse, JSONResponse]:
        """
        Create a new game.

        The response carries every player's secret. It is returned only here;
        hand each player their own.
        """
        try:
            return api_service.create_game(request)
        except ValueError as e:
            return make_error_response(ErrorCode.MALFORMED_INPUT, str(e), status_code=422)

    @app.get(
        "/api/v1/games",
        response_model=GameListResponse,
        tags=["Games"],
        summary="List stored games",
    )
    async def list_games() -> GameListResponse:
        return api_service.list_games()

    @app.get(
        "/api/v1/games/{game_id}",
        response_model=GameStateResponse,
        responses={
            403: {"model": ErrorResponse},
            404: {"model": ErrorResponse},
        },
        tags=["Games"],
        summary="Get a game as seen by a player",
    )
    async def get_game(
        game_id: str,
        player_id: Annotated[Optional[str], Query(description="Viewer; omit for the public view")] = None,
        player_secret: Annotated[Optional[str], Query(description="Viewer's secret")] = None,
    ) -> Union[GameStateResponse, JSONResponse]:
        """Get the current game state, hiding what the viewer may not see."""
        response = api_service.get_game_state(game_id, player_id, player_secret)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

    @app.post(
        "/api/v1/games/{game_id}/inputs",
        response_model=SubmitInputResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Illegal input"},
            403: {"model": ErrorResponse, "description": "Bad credentials"},
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse, "description": "Not your turn"},
            422: {"model": ErrorResponse, "description": "Malformed input"},
        },
        tags=["Games"],
        summary="Submit an input",
    )
    async def submit_input(
        game_id: str, request: SubmitInputRequest
    ) -> Union[SubmitInputResponse, JSONResponse]:
        """
        Apply a top-level input or answer the pending input.

        On success the response carries the submitter's view and the inputs
        they can submit next.
        """
        response = api_service.submit_input(game_id, request)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

    @app.get(
        "/api/v1/games/{game_id}/legal-inputs",
        response_model=LegalInputsResponse,
        responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="List a player's legal inputs",
    )
    async def get_legal_inputs(
        game_id: str,
        player_id: Annotated[str, Query(description="Player")],
        player_secret: Annotated[str, Query(description="Player's secret")],
    ) -> Union[LegalInputsResponse, JSONResponse]:
        response = api_service.get_legal_inputs(game_id, player_id, player_secret)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

    @app.get(
        "/api/v1/games/{game_id}/log",
        response_model=GameLogResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Get the game log",
    )
    async def get_game_log(
        game_id: str,
        since: Annotated[int, Query(ge=0, description="Index of the first entry")] = 0,
    ) -> Union[GameLogResponse, JSONResponse]:
        response = api_service.get_game_log(game_id, since)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket("/api/v1/games/{game_id}/ws")
    async def websocket_endpoint(websocket: WebSocket, game_id: str):
        """
        WebSocket for change notifications.

        Messages from server:
        - connected: Sent once, with the current game_state_id
        - game_changed: An input was applied; refetch the state
        - error: Unknown game or bad message

        Messages from client:
        - ping: Keep-alive
        """
        await websocket.accept()

        response = api_service.get_game_state(game_id)
        if isinstance(response, ErrorResponse):
            await websocket.send_json({"type": "error", "payload": {"message": response.error}})
            await websocket.close()
            return

        loop = asyncio.get_running_loop()

        def on_game_changed(changed_game_id: str, game_state_id: int) -> None:
            message = {"type": "game_changed", "game_state_id": game_state_id}
            asyncio.run_coroutine_threadsafe(broadcast_to_game(changed_game_id, message), loop)

        if game_id not in ws_connections:
            ws_connections[game_id] = []
        if game_id not in ws_subscriptions:
            ws_subscriptions[game_id] = notifier.subscribe(game_id, on_game_changed)
        ws_connections[game_id].append(websocket)

        try:
            await websocket.send_json({
                "type": "connected",
                "game_state_id": response.game_state_id,
            })

            # Listen for messages
            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                    if message.get("type") == "ping":
                        await websocket.send_json({"type": "pong"})
                except (json.JSONDecodeError, AttributeError):
                    await websocket.send_json({
                        "type": "error",
                        "payload": {"message": "Invalid JSON"},
                    })

        except WebSocketDisconnect:
            logger.debug("WebSocket for game %s disconnected", game_id)
        finally:
            if websocket in ws_connections.get(game_id, []):
                ws_connections[game_id].remove(websocket)
            if not ws_connections.get(game_id) and game_id in ws_subscriptions:
                notifier.unsubscribe(ws_subscriptions.pop(game_id))

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/api/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            version=__version__,
            environment=EVERDELL_ENV,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Everdell Engine API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/api/health",
        }

    return app


# For running directly: uvicorn everdell.api.app:app
app = None
try:
    app = create_app()
except ImportError:
    # FastAPI not installed
    pass
