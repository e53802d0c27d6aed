"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to GameManager calls
2. Converts engine errors into ErrorResponse objects
3. Formats responses for clients

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
InvariantViolation is not converted; the transport turns it into a 500.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..engine_core.errors import EngineError, ErrorCode, InvariantViolation
from ..engine_core.state import GameOptions
from ..session import GameManager
from .schemas import (
    CreateGameRequest,
    CreateGameResponse,
    ErrorResponse,
    GameListResponse,
    GameLogResponse,
    GameOptionsModel,
    GameStateResponse,
    LegalInputsResponse,
    PlayerCredentials,
    SubmitInputRequest,
    SubmitInputResponse,
)

# Transport status for each error code.
HTTP_STATUS = {
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.AUTH_ERROR: 403,
    ErrorCode.NOT_YOUR_TURN: 409,
    ErrorCode.MALFORMED_INPUT: 422,
    ErrorCode.ILLEGAL_ACTION: 400,
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.INVARIANT_VIOLATION: 500,
}


def status_for(error_code: ErrorCode | str) -> int:
    return HTTP_STATUS.get(ErrorCode(error_code), 400)


def _error(e: EngineError) -> ErrorResponse:
    return ErrorResponse(error=e.message, error_code=e.code)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Create a game
        created = service.create_game(CreateGameRequest(player_names=["A", "B"]))

        # Submit an input
        response = service.submit_input(created.game_id, request)
    """
    game_manager: GameManager = field(default_factory=GameManager)

    def create_game(self, request: CreateGameRequest) -> CreateGameResponse:
        """
        Create a new game.

        Raises ValueError for an unsupported player count.
        """
        options = GameOptions(**request.options.model_dump())
        state = self.game_manager.create_game(
            request.player_names, options, request.random_seed
        )
        return CreateGameResponse(
            game_id=state.game_id,
            game_state_id=state.game_state_id,
            players=[PlayerCredentials.model_validate(p) for p in state.players],
            options=GameOptionsModel.model_validate(state.game_options),
        )

    def get_game_state(
        self,
        game_id: str,
        player_id: str | None = None,
        player_secret: str | None = None,
    ) -> GameStateResponse | ErrorResponse:
        try:
            view = self.game_manager.get_game_state(game_id, player_id, player_secret)
        except InvariantViolation:
            raise
        except EngineError as e:
            return _error(e)
        return GameStateResponse(
            game_id=game_id,
            game_state_id=view["game_state_id"],
            viewer_id=player_id,
            state=view,
        )

    def submit_input(
        self, game_id: str, request: SubmitInputRequest
    ) -> SubmitInputResponse | ErrorResponse:
        result = self.game_manager.submit_input(
            game_id, request.player_id, request.player_secret, request.game_input
        )
        if not result.success:
            return ErrorResponse(error=result.error, error_code=ErrorCode(result.error_code))
        return SubmitInputResponse(
            game_id=result.game_id,
            game_state_id=result.game_state_id,
            state=result.state,
            legal_inputs=result.legal_inputs,
            changes=result.changes,
        )

    def get_legal_inputs(
        self, game_id: str, player_id: str, player_secret: str | None
    ) -> LegalInputsResponse | ErrorResponse:
        try:
            inputs = self.game_manager.legal_inputs(game_id, player_id, player_secret)
        except InvariantViolation:
            raise
        except EngineError as e:
            return _error(e)
        return LegalInputsResponse(
            game_id=game_id, player_id=player_id, legal_inputs=inputs, count=len(inputs)
        )

    def get_game_log(self, game_id: str, since: int = 0) -> GameLogResponse | ErrorResponse:
        try:
            entries = self.game_manager.game_log(game_id, since)
        except InvariantViolation:
            raise
        except EngineError as e:
            return _error(e)
        return GameLogResponse(game_id=game_id, entries=entries, count=len(entries))

    def list_games(self) -> GameListResponse:
        games = self.game_manager.list_games()
        return GameListResponse(games=games, count=len(games))
