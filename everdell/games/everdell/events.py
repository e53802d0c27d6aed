"""
Everdell Events - achievements claimed by placing a worker.

Basic events need a number of cards of one type in the claimant's city.
Special events need specific cards and may carry their own effect.
"""

from __future__ import annotations

from ...engine_core.action import ContextType, InputType
from ...engine_core.catalog import CardType, EventDefinition, EventType, register
from ...engine_core.game_log import entity_part
from .helpers import describe_resources

EVENT = ContextType.EVENT


def _part(name: str):
    return entity_part("event", name)


# ============================================================================
# Basic events
# ============================================================================

BASIC_FOUR_PRODUCTION = register(EventDefinition(
    name="BASIC_FOUR_PRODUCTION", event_type=EventType.BASIC, base_vp=3,
    required_card_types={CardType.PRODUCTION.value: 4},
    description="Have at least 4 PRODUCTION cards in your city.",
))

BASIC_THREE_DESTINATION = register(EventDefinition(
    name="BASIC_THREE_DESTINATION", event_type=EventType.BASIC, base_vp=3,
    required_card_types={CardType.DESTINATION.value: 3},
    description="Have at least 3 DESTINATION cards in your city.",
))

BASIC_THREE_GOVERNANCE = register(EventDefinition(
    name="BASIC_THREE_GOVERNANCE", event_type=EventType.BASIC, base_vp=3,
    required_card_types={CardType.GOVERNANCE.value: 3},
    description="Have at least 3 GOVERNANCE cards in your city.",
))

BASIC_THREE_TRAVELER = register(EventDefinition(
    name="BASIC_THREE_TRAVELER", event_type=EventType.BASIC, base_vp=3,
    required_card_types={CardType.TRAVELER.value: 3},
    description="Have at least 3 TRAVELER cards in your city.",
))


# ============================================================================
# Special events
# ============================================================================

THE_EVERDELL_GAMES = register(EventDefinition(
    name="THE_EVERDELL_GAMES", event_type=EventType.SPECIAL, base_vp=9,
    required_card_types={t.value: 2 for t in CardType},
    description="Have at least 2 of each card type in your city.",
))


def _marketing_plan_play(state, game_input, player):
    state.push_pending(
        InputType.SELECT_RESOURCES,
        player.player_id,
        "Select up to 3 ANY to give to opponents (2 VP each)",
        EVENT,
        "A_BRILLIANT_MARKETING_PLAN",
        prev_input_type=game_input.input_type,
        min_choices=0,
        max_choices=3,
        to_spend=True,
    )


def _marketing_plan_resolve(state, game_input):
    player = state.get_player(game_input.player_id)
    if game_input.input_type == InputType.SELECT_RESOURCES:
        resources = game_input.option("resources")
        if not resources:
            state.add_log(player, " did not give away any resources for ",
                          _part("A_BRILLIANT_MARKETING_PLAN"), ".")
            return
        state.push_pending(
            InputType.SELECT_PLAYER,
            player.player_id,
            f"Select a player to give {describe_resources(resources)} to",
            EVENT,
            "A_BRILLIANT_MARKETING_PLAN",
            prev_input_type=InputType.SELECT_RESOURCES,
            options=[p.player_id for p in state.other_players(player.player_id)],
            metadata={"resources": dict(resources)},
        )
        return
    resources = game_input.pending.metadata["resources"]
    target = state.get_player(game_input.option("selected_player"))
    player.spend_resources(resources)
    target.gain_resources(state, resources)
    num_vp = 2 * sum(resources.values())
    player.gain_resources(state, {"VP": num_vp})
    state.add_log(player, f" gave {describe_resources(resources)} to ", target,
                  f" and gained {num_vp} VP from ", _part("A_BRILLIANT_MARKETING_PLAN"), ".")


A_BRILLIANT_MARKETING_PLAN = register(EventDefinition(
    name="A_BRILLIANT_MARKETING_PLAN", event_type=EventType.SPECIAL, base_vp=0,
    required_cards=("SHOPKEEPER", "POST_OFFICE"),
    play_inner=_marketing_plan_play, resolve_inner=_marketing_plan_resolve,
    description="Give up to 3 ANY to opponents. Worth 2 VP for each resource given.",
))


BASIC_EVENTS = [
    BASIC_FOUR_PRODUCTION,
    BASIC_THREE_DESTINATION,
    BASIC_THREE_GOVERNANCE,
    BASIC_THREE_TRAVELER,
]

SPECIAL_EVENTS = [THE_EVERDELL_GAMES, A_BRILLIANT_MARKETING_PLAN]
