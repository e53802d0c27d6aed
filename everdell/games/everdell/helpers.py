"""
Effect helpers shared by cards, locations, events and river destinations.

Most effects are small compositions of the same few steps: ask the player
to pick ANY resources, ask them to discard cards, count cards of a type.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from ...engine_core.action import ContextType, GameInput, InputType
from ...engine_core.resources import BASIC_RESOURCES

if TYPE_CHECKING:
    from ...engine_core.state import GameState, Player


def push_gain_any(
    state: GameState,
    player: Player,
    num: int,
    context_type: ContextType,
    context_name: str,
    label: str | None = None,
    prev_input_type: InputType | None = None,
) -> None:
    """Queue a SELECT_RESOURCES asking ``player`` which ``num`` basic resources to gain."""
    if num <= 0:
        return
    state.push_pending(
        InputType.SELECT_RESOURCES,
        player.player_id,
        label or f"Gain {num} ANY",
        context_type,
        context_name,
        prev_input_type=prev_input_type,
        min_choices=num,
        max_choices=num,
        metadata={"gain_any": True},
    )


def is_gain_any(game_input: GameInput) -> bool:
    return (game_input.input_type == InputType.SELECT_RESOURCES
            and game_input.pending is not None
            and bool(game_input.pending.metadata.get("gain_any")))


def resolve_gain_any(state: GameState, game_input: GameInput, source_part) -> None:
    player = state.get_player(game_input.player_id)
    resources = game_input.option("resources")
    player.gain_resources(state, resources)
    state.add_log(player, " gained ", describe_resources(resources), " from ", source_part, ".")


def push_discard(
    state: GameState,
    player: Player,
    min_cards: int,
    max_cards: int,
    context_type: ContextType,
    context_name: str,
    label: str,
    prev_input_type: InputType | None = None,
    **metadata,
) -> None:
    state.push_pending(
        InputType.DISCARD_CARDS,
        player.player_id,
        label,
        context_type,
        context_name,
        prev_input_type=prev_input_type,
        min_choices=min_cards,
        max_choices=max_cards,
        metadata=metadata,
    )


def describe_resources(resources: dict[str, int]) -> str:
    parts = [f"{count} {resource}" for resource, count in resources.items() if count]
    return ", ".join(parts) if parts else "nothing"


def basic_resource_names() -> list[str]:
    return [r.value for r in BASIC_RESOURCES]
