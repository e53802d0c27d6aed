"""
Effect Resolver - follow-up validation and auto-resolution.

When an effect needs a decision it queues a PendingInput. This module:
- Reports which state the resolution machine is in
- Validates an answer against the constraints of the queue head before
  any effect code sees it
- Decides when the head is trivially decidable and builds the answer for it

The reducer owns the loop; everything here is pure.
"""

from __future__ import annotations
import logging
from collections import Counter
from enum import Enum
from typing import Any, TYPE_CHECKING

from .action import GameInput, InputType, PendingInput
from .errors import IllegalActionError, MalformedInputError
from .resources import BASIC_RESOURCES, ResourceType, parse_resource_map

if TYPE_CHECKING:
    from .state import GameState

logger = logging.getLogger(__name__)


class ResolverState(Enum):
    """State of the input resolution machine."""
    AWAITING_TOP_LEVEL_INPUT = "awaiting_top_level_input"
    AWAITING_FOLLOWUP = "awaiting_followup"
    GAME_OVER = "game_over"


def resolver_state(state: GameState) -> ResolverState:
    if state.is_game_over:
        return ResolverState.GAME_OVER
    if state.pending_inputs:
        return ResolverState.AWAITING_FOLLOWUP
    return ResolverState.AWAITING_TOP_LEVEL_INPUT


def waiting_on(state: GameState) -> str | None:
    """The player whose input the game is waiting for."""
    if state.is_game_over:
        return None
    if state.pending_inputs:
        return state.pending_inputs[0].player_id
    return state.active_player_id


# ============================================================================
# Validation
# ============================================================================

def _as_list(value: Any, key: str, item_type: type | None = None) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedInputError(f"{key} must be a list")
    if item_type is not None:
        for item in value:
            # bool is an int subclass but never a valid uid
            if isinstance(item, bool) or not isinstance(item, item_type):
                raise MalformedInputError(
                    f"{key} must only contain {item_type.__name__} values")
    return value


def _check_count(pending: PendingInput, count: int, noun: str) -> None:
    if count < pending.min_choices:
        raise MalformedInputError(
            f"Must select at least {pending.min_choices} {noun} (selected {count})"
        )
    if count > pending.max_choices:
        raise MalformedInputError(
            f"Cannot select more than {pending.max_choices} {noun} (selected {count})"
        )


def _check_subset(selected: list[Any], available: list[Any], noun: str) -> None:
    missing = Counter(selected) - Counter(available)
    if missing:
        raise IllegalActionError(f"Selected {noun} not available: {sorted(missing, key=str)}")


def validate_followup(state: GameState, pending: PendingInput, game_input: GameInput) -> dict[str, Any]:
    """
    Validate an answer to ``pending``.

    Returns the normalized client options. Shape problems raise
    MalformedInputError; choices outside the offered set raise
    IllegalActionError.
    """
    opts = game_input.client_options
    input_type = pending.input_type

    if input_type == InputType.SELECT_CARDS:
        selected = _as_list(opts.get("selected_cards"), "selected_cards", str)
        _check_count(pending, len(selected), "cards")
        _check_subset(selected, pending.options, "cards")
        return {"selected_cards": list(selected)}

    if input_type == InputType.SELECT_PLAYED_CARDS:
        selected = _as_list(opts.get("selected_cards"), "selected_cards", int)
        _check_count(pending, len(selected), "cards")
        if len(set(selected)) != len(selected):
            raise MalformedInputError("Cannot select the same played card twice")
        _check_subset(selected, pending.options, "played cards")
        return {"selected_cards": list(selected)}

    if input_type == InputType.SELECT_PLAYER:
        selected = opts.get("selected_player")
        if selected is None:
            if not pending.optional:
                raise MalformedInputError("Must select a player")
            return {"selected_player": None}
        if selected not in pending.options:
            raise IllegalActionError(f"Cannot select player {selected!r}")
        return {"selected_player": selected}

    if input_type == InputType.SELECT_OPTION_GENERIC:
        if "selected_option" not in opts:
            raise MalformedInputError("Must select an option")
        selected = opts["selected_option"]
        if selected not in pending.options:
            raise IllegalActionError(f"Selected option is not available: {selected!r}")
        return {"selected_option": selected}

    if input_type == InputType.DISCARD_CARDS:
        selected = _as_list(opts.get("cards_to_discard"), "cards_to_discard", str)
        _check_count(pending, len(selected), "cards")
        player = state.get_player(pending.player_id)
        _check_subset(selected, player.cards_in_hand, "cards")
        return {"cards_to_discard": list(selected)}

    if input_type == InputType.SELECT_RESOURCES:
        allowed = tuple(ResourceType(r) for r in pending.metadata.get("allowed", [])) or BASIC_RESOURCES
        if pending.specific_resource:
            allowed = (ResourceType(pending.specific_resource),)
        resources = parse_resource_map(opts.get("resources"), allowed)
        _check_count(pending, sum(resources.values()), "resources")
        if pending.to_spend:
            player = state.get_player(pending.player_id)
            if not player.has_resources(resources):
                raise IllegalActionError("You do not have the resources you are trying to spend")
        return {"resources": resources}

    if input_type == InputType.SELECT_PAYMENT_FOR_CARD:
        payment = opts.get("payment_options") or {}
        if not isinstance(payment, dict):
            raise MalformedInputError("payment_options must be an object")
        resources = parse_resource_map(payment.get("resources"))
        player = state.get_player(pending.player_id)
        if not player.has_resources(resources):
            raise IllegalActionError("You do not have the resources you are trying to pay with")
        return {"payment_options": {**payment, "resources": resources}}

    raise MalformedInputError(f"{input_type.value} is not a follow-up input")


# ============================================================================
# Auto-resolution
# ============================================================================

def auto_advance_options(state: GameState, pending: PendingInput) -> dict[str, Any] | None:
    """
    Client options that answer ``pending`` without asking anyone, or None.

    Only decisions with exactly one legal answer are taken.
    """
    input_type = pending.input_type

    if input_type == InputType.SELECT_PLAYER:
        if len(pending.options) == 1 and not pending.optional:
            return {"selected_player": pending.options[0]}
        return None

    if input_type == InputType.SELECT_OPTION_GENERIC:
        if len(pending.options) == 1:
            return {"selected_option": pending.options[0]}
        return None

    if input_type in (InputType.SELECT_CARDS, InputType.SELECT_PLAYED_CARDS):
        if len(pending.options) == pending.min_choices:
            return {"selected_cards": list(pending.options)}
        return None

    if input_type == InputType.DISCARD_CARDS:
        hand = state.get_player(pending.player_id).cards_in_hand
        if pending.min_choices == len(hand):
            return {"cards_to_discard": list(hand)}
        return None

    if input_type == InputType.SELECT_RESOURCES:
        if pending.max_choices == 0:
            return {"resources": {}}
        if pending.to_spend:
            player = state.get_player(pending.player_id)
            spendable = ([pending.specific_resource] if pending.specific_resource
                         else pending.metadata.get("allowed") or [r.value for r in BASIC_RESOURCES])
            if pending.min_choices == 0 and all(player.get_num_resource(r) == 0 for r in spendable):
                return {"resources": {}}
        return None

    return None


def build_auto_input(state: GameState, pending: PendingInput) -> GameInput | None:
    options = auto_advance_options(state, pending)
    if options is None:
        return None
    game_input = GameInput.answer(pending, **options)
    game_input.is_auto_advanced = True
    logger.debug("Auto-advancing %s for %s", pending.input_type.value, pending.player_id)
    return game_input
