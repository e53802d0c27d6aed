"""
Engine Core - Deterministic game state management and effect resolution.

The engine is the runtime that:
1. Holds the GameState and the content catalog it refers to
2. Generates legal inputs
3. Applies inputs via the reducer
4. Resolves follow-ups step-by-step through the pending-input queue
5. Projects the state for each viewer
"""

from .action import CardSource, ContextType, GameInput, InputResult, InputType, PendingInput
from .action_generator import ActionGenerator, legal_inputs
from .effect_resolver import ResolverState, resolver_state, waiting_on
from .errors import (
    AuthError, EngineError, ErrorCode, GameOverError, IllegalActionError,
    InvariantViolation, MalformedInputError, NotFoundError, NotYourTurnError,
)
from .reducer import Reducer, apply_input
from .state import GameOptions, GameState, Player, PlayerStatus, Season
from .visibility import project_state

__all__ = [
    "CardSource",
    "ContextType",
    "GameInput",
    "InputResult",
    "InputType",
    "PendingInput",
    "ActionGenerator",
    "legal_inputs",
    "ResolverState",
    "resolver_state",
    "waiting_on",
    "AuthError",
    "EngineError",
    "ErrorCode",
    "GameOverError",
    "IllegalActionError",
    "InvariantViolation",
    "MalformedInputError",
    "NotFoundError",
    "NotYourTurnError",
    "Reducer",
    "apply_input",
    "GameOptions",
    "GameState",
    "Player",
    "PlayerStatus",
    "Season",
    "project_state",
]
