"""
Input System - game inputs, pending inputs, and results.

Inputs come in two families:
1. Top-level inputs: what a player chooses to do on their turn
   (play a card, place a worker, claim an event, ...)
2. Follow-up inputs: answers to a PendingInput that an effect queued
   (select cards, select a player, pick resources, ...)

All state changes flow through inputs applied by the reducer.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import MalformedInputError


class InputType(str, Enum):
    """Types of inputs in the system."""
    # Top-level inputs
    PLAY_CARD = "PLAY_CARD"
    PLACE_WORKER = "PLACE_WORKER"
    VISIT_DESTINATION_CARD = "VISIT_DESTINATION_CARD"
    CLAIM_EVENT = "CLAIM_EVENT"
    PLACE_AMBASSADOR = "PLACE_AMBASSADOR"
    PLAY_ADORNMENT = "PLAY_ADORNMENT"
    RESERVE_CARD = "RESERVE_CARD"
    PREPARE_FOR_SEASON = "PREPARE_FOR_SEASON"
    GAME_END = "GAME_END"
    UNDO = "UNDO"

    # Follow-up inputs (answers to a PendingInput)
    SELECT_CARDS = "SELECT_CARDS"
    SELECT_PLAYED_CARDS = "SELECT_PLAYED_CARDS"
    SELECT_PLAYER = "SELECT_PLAYER"
    SELECT_OPTION_GENERIC = "SELECT_OPTION_GENERIC"
    SELECT_RESOURCES = "SELECT_RESOURCES"
    DISCARD_CARDS = "DISCARD_CARDS"
    SELECT_PAYMENT_FOR_CARD = "SELECT_PAYMENT_FOR_CARD"


TOP_LEVEL_INPUT_TYPES = frozenset({
    InputType.PLAY_CARD,
    InputType.PLACE_WORKER,
    InputType.VISIT_DESTINATION_CARD,
    InputType.CLAIM_EVENT,
    InputType.PLACE_AMBASSADOR,
    InputType.PLAY_ADORNMENT,
    InputType.RESERVE_CARD,
    InputType.PREPARE_FOR_SEASON,
    InputType.GAME_END,
    InputType.UNDO,
})

FOLLOWUP_INPUT_TYPES = frozenset(InputType) - TOP_LEVEL_INPUT_TYPES


class ContextType(str, Enum):
    """Which kind of entity spawned a follow-up input."""
    CARD = "card"
    LOCATION = "location"
    EVENT = "event"
    ADORNMENT = "adornment"
    RIVER_DESTINATION = "river_destination"
    SEASON = "season"


class CardSource(str, Enum):
    """Where a card is played from."""
    HAND = "HAND"
    MEADOW = "MEADOW"
    STATION = "STATION"
    RESERVED = "RESERVED"


def _enum_or_none(enum_cls, value):
    return enum_cls(value) if value is not None else None


@dataclass
class PendingInput:
    """
    A follow-up request queued by an effect.

    Only the head of the queue is answerable. The constraints are fixed when
    the request is created; options are stable identifiers (card names,
    player ids, resource names or played-card uids).
    """
    input_id: str
    input_type: InputType
    player_id: str
    label: str
    context_type: ContextType
    context_name: str
    prev_input_type: InputType | None = None
    options: list[Any] = field(default_factory=list)
    min_choices: int = 0
    max_choices: int = 0
    optional: bool = False
    to_spend: bool = False
    specific_resource: str | None = None
    card: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "input_id": self.input_id,
            "input_type": self.input_type.value,
            "player_id": self.player_id,
            "label": self.label,
            "context_type": self.context_type.value,
            "context_name": self.context_name,
            "prev_input_type": self.prev_input_type.value if self.prev_input_type else None,
            "options": list(self.options),
            "min_choices": self.min_choices,
            "max_choices": self.max_choices,
            "optional": self.optional,
            "to_spend": self.to_spend,
            "specific_resource": self.specific_resource,
            "card": self.card,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PendingInput:
        return cls(
            input_id=data["input_id"],
            input_type=InputType(data["input_type"]),
            player_id=data["player_id"],
            label=data["label"],
            context_type=ContextType(data["context_type"]),
            context_name=data["context_name"],
            prev_input_type=_enum_or_none(InputType, data.get("prev_input_type")),
            options=list(data.get("options", [])),
            min_choices=data.get("min_choices", 0),
            max_choices=data.get("max_choices", 0),
            optional=data.get("optional", False),
            to_spend=data.get("to_spend", False),
            specific_resource=data.get("specific_resource"),
            card=data.get("card"),
            metadata=dict(data.get("metadata", {})),
        )


@dataclass
class GameInput:
    """
    A complete input to be applied to the game state.

    For follow-ups, ``input_type`` and the context must match the head of
    the pending queue. The reducer attaches the matched PendingInput as
    ``pending`` before any effect sees the input.
    """
    input_type: InputType
    player_id: str | None = None
    client_options: dict[str, Any] = field(default_factory=dict)
    context_type: ContextType | None = None
    context_name: str | None = None
    input_id: str | None = None
    is_auto_advanced: bool = False
    pending: PendingInput | None = None

    @property
    def is_top_level(self) -> bool:
        return self.input_type in TOP_LEVEL_INPUT_TYPES

    def option(self, key: str, default: Any = None) -> Any:
        return self.client_options.get(key, default)

    @classmethod
    def play_card(
        cls,
        player_id: str,
        card: str,
        source: CardSource | str = CardSource.HAND,
        resources: dict[str, int] | None = None,
        use_associated_card: bool = False,
        card_to_use: str | None = None,
    ) -> GameInput:
        """Factory for playing a card."""
        return cls(
            input_type=InputType.PLAY_CARD,
            player_id=player_id,
            client_options={
                "card": card,
                "source": CardSource(source).value,
                "payment_options": {
                    "resources": dict(resources or {}),
                    "use_associated_card": use_associated_card,
                    "card_to_use": card_to_use,
                },
            },
        )

    @classmethod
    def place_worker(cls, player_id: str, location: str) -> GameInput:
        return cls(InputType.PLACE_WORKER, player_id, {"location": location})

    @classmethod
    def visit_destination_card(cls, player_id: str, card_uid: int) -> GameInput:
        return cls(InputType.VISIT_DESTINATION_CARD, player_id, {"card_uid": card_uid})

    @classmethod
    def claim_event(cls, player_id: str, event: str) -> GameInput:
        return cls(InputType.CLAIM_EVENT, player_id, {"event": event})

    @classmethod
    def place_ambassador(cls, player_id: str, spot: str) -> GameInput:
        return cls(InputType.PLACE_AMBASSADOR, player_id, {"spot": spot})

    @classmethod
    def play_adornment(cls, player_id: str, adornment: str) -> GameInput:
        return cls(InputType.PLAY_ADORNMENT, player_id, {"adornment": adornment})

    @classmethod
    def reserve_card(cls, player_id: str, card: str) -> GameInput:
        return cls(InputType.RESERVE_CARD, player_id, {"card": card})

    @classmethod
    def prepare_for_season(cls, player_id: str) -> GameInput:
        return cls(InputType.PREPARE_FOR_SEASON, player_id)

    @classmethod
    def game_end(cls, player_id: str) -> GameInput:
        return cls(InputType.GAME_END, player_id)

    @classmethod
    def undo(cls, player_id: str) -> GameInput:
        return cls(InputType.UNDO, player_id)

    @classmethod
    def answer(cls, pending: PendingInput, **client_options: Any) -> GameInput:
        """Factory for a response to a pending input."""
        return cls(
            input_type=pending.input_type,
            player_id=pending.player_id,
            client_options=client_options,
            context_type=pending.context_type,
            context_name=pending.context_name,
            input_id=pending.input_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "input_type": self.input_type.value,
            "player_id": self.player_id,
            "client_options": dict(self.client_options),
            "context_type": self.context_type.value if self.context_type else None,
            "context_name": self.context_name,
            "input_id": self.input_id,
            "is_auto_advanced": self.is_auto_advanced,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameInput:
        """Parse an untrusted payload; raises MalformedInputError on bad shape."""
        if not isinstance(data, dict):
            raise MalformedInputError("Game input must be an object")
        try:
            input_type = InputType(data.get("input_type"))
        except ValueError:
            raise MalformedInputError(f"Unknown input type: {data.get('input_type')!r}")
        try:
            context_type = _enum_or_none(ContextType, data.get("context_type"))
        except ValueError:
            raise MalformedInputError(f"Unknown context type: {data.get('context_type')!r}")
        client_options = data.get("client_options") or {}
        if not isinstance(client_options, dict):
            raise MalformedInputError("client_options must be an object")
        return cls(
            input_type=input_type,
            player_id=data.get("player_id"),
            client_options=dict(client_options),
            context_type=context_type,
            context_name=data.get("context_name"),
            input_id=data.get("input_id"),
        )


@dataclass
class InputResult:
    """
    Result of applying an input.

    Contains:
    - Whether the input was accepted
    - New state (if accepted)
    - Error message and code (if rejected)
    - Plain-text log lines written while resolving
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: str | None = None
    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> InputResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(cls, state: Any, changes: list[str] | None = None) -> InputResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, state_changes=changes or [])
