"""
API Module - HTTP interface.

Exposes the engine via REST API. Clients:
1. Create a game and hand each player their secret
2. Fetch their projection of the game
3. Submit inputs and answers to pending inputs
4. Watch for changes by polling game_state_id or over the WebSocket

FastAPI is imported lazily inside create_app().
"""

from .schemas import (
    # Requests
    CreateGameRequest,
    SubmitInputRequest,
    # Responses
    CreateGameResponse,
    ErrorResponse,
    GameListResponse,
    GameLogResponse,
    GameStateResponse,
    HealthResponse,
    LegalInputsResponse,
    SubmitInputResponse,
    # Shared
    GameOptionsModel,
    PlayerCredentials,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateGameRequest",
    "SubmitInputRequest",
    # Responses
    "CreateGameResponse",
    "ErrorResponse",
    "GameListResponse",
    "GameLogResponse",
    "GameStateResponse",
    "HealthResponse",
    "LegalInputsResponse",
    "SubmitInputResponse",
    # Shared
    "GameOptionsModel",
    "PlayerCredentials",
    # Service
    "APIService",
    "create_app",
]
