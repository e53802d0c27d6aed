"""
Engine errors - the typed failure taxonomy.

Every rejection raised inside the engine is an EngineError subclass with a
stable error code. The reducer converts them into failed InputResults; the
service layer maps the codes to transport status codes.

InvariantViolation is different from the rest: it signals a bug in the
engine (or corrupt persisted state) and is never turned into a normal
rejection.
"""

from __future__ import annotations
from enum import Enum


class ErrorCode(str, Enum):
    """Stable error codes shared by the engine, service and API layers."""
    NOT_FOUND = "NOT_FOUND"
    AUTH_ERROR = "AUTH_ERROR"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    ILLEGAL_ACTION = "ILLEGAL_ACTION"
    INVALID_INPUT = "INVALID_INPUT"
    MALFORMED_INPUT = "MALFORMED_INPUT"
    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"


class EngineError(Exception):
    """Base class for every error the engine raises on purpose."""
    code: ErrorCode = ErrorCode.ILLEGAL_ACTION

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(EngineError):
    """Unknown game id, player id, or catalog entry."""
    code = ErrorCode.NOT_FOUND


class AuthError(EngineError):
    """Credential mismatch for the claimed player."""
    code = ErrorCode.AUTH_ERROR


class NotYourTurnError(EngineError):
    """The submitter is not the player the game is waiting on."""
    code = ErrorCode.NOT_YOUR_TURN


class IllegalActionError(EngineError):
    """The input is well formed but the rules do not allow it right now."""
    code = ErrorCode.ILLEGAL_ACTION


class GameOverError(IllegalActionError):
    """Any input submitted after the game has ended."""
    code = ErrorCode.INVALID_INPUT


class MalformedInputError(EngineError):
    """The input payload does not match the shape its type requires."""
    code = ErrorCode.MALFORMED_INPUT


class InvariantViolation(EngineError):
    """Internal inconsistency detected. Fail loud, never recover silently."""
    code = ErrorCode.INVARIANT_VIOLATION
