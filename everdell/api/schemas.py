"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between clients and the engine.
Game projections and inputs are passed through as JSON objects: their shape
is owned by the engine (GameState.to_dict / GameInput.to_dict).

Error Codes (shared with the engine):
- NOT_FOUND: Unknown game, player, card, location, ...
- AUTH_ERROR: Player secret does not match
- NOT_YOUR_TURN: The game is waiting on another player
- ILLEGAL_ACTION: Well formed but not allowed by the rules right now
- INVALID_INPUT: The game is over
- MALFORMED_INPUT: The payload has the wrong shape
- INVARIANT_VIOLATION: Internal error; the input was not applied
"""

from typing import Optional, Any
from pydantic import BaseModel, Field

from ..engine_core.errors import ErrorCode


# =============================================================================
# Shared Models
# =============================================================================

class GameOptionsModel(BaseModel):
    """Per-game configuration."""
    pearlbrook: bool = Field(False, description="Play with the river and adornments")
    newleaf: bool = Field(False, description="Play with the station and reservations")
    allow_undo: bool = Field(True, description="Allow one-level undo")

    model_config = {"from_attributes": True}


class PlayerCredentials(BaseModel):
    """A seat in a new game. The secret is only returned once, at creation."""
    player_id: str
    name: str
    player_secret: str

    model_config = {"from_attributes": True}


# =============================================================================
# Request Models
# =============================================================================

class CreateGameRequest(BaseModel):
    """Request to create a new game."""
    player_names: list[str] = Field(
        ..., min_length=2, max_length=4, description="Names in seating order"
    )
    options: GameOptionsModel = Field(default_factory=GameOptionsModel)
    random_seed: Optional[int] = Field(None, description="Seed for reproducible games")


class SubmitInputRequest(BaseModel):
    """Request to apply an input on behalf of a player."""
    player_id: str = Field(..., description="Submitting player")
    player_secret: str = Field(..., description="Secret returned when the game was created")
    game_input: dict[str, Any] = Field(
        ..., description="GameInput: input_type, client_options, and the context for follow-ups"
    )


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class CreateGameResponse(BaseModel):
    """Response after creating a game."""
    game_id: str
    game_state_id: int
    players: list[PlayerCredentials]
    options: GameOptionsModel


class GameStateResponse(BaseModel):
    """A game as seen by one viewer."""
    game_id: str
    game_state_id: int
    viewer_id: Optional[str] = None
    state: dict[str, Any] = Field(description="Projection of the game state for the viewer")


class SubmitInputResponse(BaseModel):
    """Response after an input was applied."""
    success: bool = True
    game_id: str
    game_state_id: int
    state: dict[str, Any] = Field(description="Projection for the submitter")
    legal_inputs: list[dict[str, Any]] = Field(
        default_factory=list, description="What the submitter can do next"
    )
    changes: list[str] = Field(default_factory=list, description="Log lines written")


class LegalInputsResponse(BaseModel):
    """Inputs a player may submit now."""
    game_id: str
    player_id: str
    legal_inputs: list[dict[str, Any]] = Field(default_factory=list)
    count: int = 0


class GameLogResponse(BaseModel):
    """Game log entries."""
    game_id: str
    entries: list[dict[str, Any]] = Field(default_factory=list)
    count: int = 0


class GameListResponse(BaseModel):
    """List of stored games."""
    games: list[str]
    count: int


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str
    environment: str
