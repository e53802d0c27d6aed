"""
Everdell Locations - where workers go.

Basic locations are always in play. A random subset of the forest
locations is dealt at setup (3 with two players, 4 otherwise). HAVEN and
the JOURNEY locations are always available; journeys open in AUTUMN only.
"""

from __future__ import annotations

from ...engine_core.action import ContextType, InputType
from ...engine_core.catalog import (
    LocationDefinition, LocationOccupancy, LocationType, register,
)
from ...engine_core.game_log import entity_part
from ...engine_core.state import Season
from .helpers import is_gain_any, push_discard, push_gain_any, resolve_gain_any

LOCATION = ContextType.LOCATION


def _part(name: str):
    return entity_part("location", name)


def _basic(name: str, occupancy: LocationOccupancy, resources: dict[str, int]) -> LocationDefinition:
    return register(LocationDefinition(
        name=name, location_type=LocationType.BASIC, occupancy=occupancy,
        resources_to_gain=resources,
    ))


def _forest(name: str, resources: dict[str, int] | None = None, description: str = "",
            play_inner=None, resolve_inner=None, can_play_check_inner=None) -> LocationDefinition:
    return register(LocationDefinition(
        name=name, location_type=LocationType.FOREST, occupancy=LocationOccupancy.EXCLUSIVE_FOUR,
        resources_to_gain=resources or {}, description=description,
        play_inner=play_inner, resolve_inner=resolve_inner,
        can_play_check_inner=can_play_check_inner,
    ))


# ============================================================================
# Basic locations
# ============================================================================

BASIC_ONE_BERRY = _basic("BASIC_ONE_BERRY", LocationOccupancy.EXCLUSIVE, {"BERRY": 1})
BASIC_ONE_BERRY_AND_ONE_CARD = _basic(
    "BASIC_ONE_BERRY_AND_ONE_CARD", LocationOccupancy.UNLIMITED, {"BERRY": 1, "CARD": 1})
BASIC_ONE_RESIN_AND_ONE_CARD = _basic(
    "BASIC_ONE_RESIN_AND_ONE_CARD", LocationOccupancy.UNLIMITED, {"RESIN": 1, "CARD": 1})
BASIC_ONE_STONE = _basic("BASIC_ONE_STONE", LocationOccupancy.EXCLUSIVE, {"PEBBLE": 1})
BASIC_THREE_TWIGS = _basic("BASIC_THREE_TWIGS", LocationOccupancy.EXCLUSIVE, {"TWIG": 3})
BASIC_TWO_CARDS_AND_ONE_VP = _basic(
    "BASIC_TWO_CARDS_AND_ONE_VP", LocationOccupancy.UNLIMITED, {"CARD": 2, "VP": 1})
BASIC_TWO_RESIN = _basic("BASIC_TWO_RESIN", LocationOccupancy.EXCLUSIVE, {"RESIN": 2})
BASIC_TWO_TWIGS_AND_ONE_CARD = _basic(
    "BASIC_TWO_TWIGS_AND_ONE_CARD", LocationOccupancy.UNLIMITED, {"TWIG": 2, "CARD": 1})


# ============================================================================
# Forest locations
# ============================================================================

def _gain_any_play(num: int, name: str):
    def play_inner(state, game_input, player):
        push_gain_any(state, player, num, LOCATION, name, prev_input_type=game_input.input_type)
    return play_inner


def _gain_any_resolve(name: str):
    def resolve_inner(state, game_input):
        resolve_gain_any(state, game_input, _part(name))
    return resolve_inner


def _discard_for_any_play(state, game_input, player):
    push_discard(state, player, 0, min(3, player.num_cards_in_hand), LOCATION,
                 "FOREST_DISCARD_UP_TO_THREE_CARDS_GAIN_ONE_ANY_EACH",
                 "Discard up to 3 CARD to gain 1 ANY each",
                 prev_input_type=game_input.input_type)


def _discard_for_any_resolve(state, game_input):
    name = "FOREST_DISCARD_UP_TO_THREE_CARDS_GAIN_ONE_ANY_EACH"
    if is_gain_any(game_input):
        resolve_gain_any(state, game_input, _part(name))
        return
    player = state.get_player(game_input.player_id)
    cards = game_input.option("cards_to_discard")
    player.discard_cards(state, cards)
    state.add_log(player, f" discarded {len(cards)} CARD at ", _part(name), ".")
    push_gain_any(state, player, len(cards), LOCATION, name, prev_input_type=InputType.DISCARD_CARDS)


FOREST_TWO_BERRY_ONE_CARD = _forest("FOREST_TWO_BERRY_ONE_CARD", {"BERRY": 2, "CARD": 1})
FOREST_TWO_WILD = _forest(
    "FOREST_TWO_WILD", description="Gain 2 ANY.",
    play_inner=_gain_any_play(2, "FOREST_TWO_WILD"),
    resolve_inner=_gain_any_resolve("FOREST_TWO_WILD"),
)
FOREST_ONE_PEBBLE_THREE_CARD = _forest("FOREST_ONE_PEBBLE_THREE_CARD", {"PEBBLE": 1, "CARD": 3})
FOREST_ONE_TWIG_RESIN_BERRY = _forest("FOREST_ONE_TWIG_RESIN_BERRY", {"TWIG": 1, "RESIN": 1, "BERRY": 1})
FOREST_THREE_BERRY = _forest("FOREST_THREE_BERRY", {"BERRY": 3})
FOREST_TWO_RESIN_ONE_TWIG = _forest("FOREST_TWO_RESIN_ONE_TWIG", {"RESIN": 2, "TWIG": 1})
FOREST_TWO_CARDS_ONE_WILD = _forest(
    "FOREST_TWO_CARDS_ONE_WILD", {"CARD": 2}, description="Draw 2 CARD and gain 1 ANY.",
    play_inner=_gain_any_play(1, "FOREST_TWO_CARDS_ONE_WILD"),
    resolve_inner=_gain_any_resolve("FOREST_TWO_CARDS_ONE_WILD"),
)
FOREST_DISCARD_UP_TO_THREE_CARDS_GAIN_ONE_ANY_EACH = _forest(
    "FOREST_DISCARD_UP_TO_THREE_CARDS_GAIN_ONE_ANY_EACH",
    description="Discard up to 3 CARD and gain 1 ANY for each.",
    play_inner=_discard_for_any_play, resolve_inner=_discard_for_any_resolve,
)

FOREST_LOCATIONS = [
    FOREST_TWO_BERRY_ONE_CARD,
    FOREST_TWO_WILD,
    FOREST_ONE_PEBBLE_THREE_CARD,
    FOREST_ONE_TWIG_RESIN_BERRY,
    FOREST_THREE_BERRY,
    FOREST_TWO_RESIN_ONE_TWIG,
    FOREST_TWO_CARDS_ONE_WILD,
    FOREST_DISCARD_UP_TO_THREE_CARDS_GAIN_ONE_ANY_EACH,
]


# ============================================================================
# Haven and journeys
# ============================================================================

def _haven_play(state, game_input, player):
    push_discard(state, player, 0, player.num_cards_in_hand, LOCATION, "HAVEN",
                 "Discard any number of CARD; gain 1 ANY for every 2 discarded",
                 prev_input_type=game_input.input_type)


def _haven_resolve(state, game_input):
    if is_gain_any(game_input):
        resolve_gain_any(state, game_input, _part("HAVEN"))
        return
    player = state.get_player(game_input.player_id)
    cards = game_input.option("cards_to_discard")
    player.discard_cards(state, cards)
    state.add_log(player, f" discarded {len(cards)} CARD at ", _part("HAVEN"), ".")
    push_gain_any(state, player, len(cards) // 2, LOCATION, "HAVEN",
                  prev_input_type=InputType.DISCARD_CARDS)


HAVEN = register(LocationDefinition(
    name="HAVEN", location_type=LocationType.HAVEN, occupancy=LocationOccupancy.UNLIMITED,
    description="Discard any number of CARD. Gain 1 ANY for every 2 discarded.",
    play_inner=_haven_play, resolve_inner=_haven_resolve,
))


def _journey(name: str, num: int, occupancy: LocationOccupancy) -> LocationDefinition:
    def check(state, game_input):
        player = state.get_player(game_input.player_id)
        if player.current_season != Season.AUTUMN:
            return "Journey locations are only available in AUTUMN"
        if player.num_cards_in_hand < num:
            return f"Need at least {num} CARD in hand to visit {name}"
        return None

    def play_inner(state, game_input, player):
        push_discard(state, player, num, num, LOCATION, name, f"Discard {num} CARD",
                     prev_input_type=game_input.input_type)

    def resolve_inner(state, game_input):
        player = state.get_player(game_input.player_id)
        cards = game_input.option("cards_to_discard")
        player.discard_cards(state, cards)
        state.add_log(player, f" discarded {len(cards)} CARD at ", _part(name), ".")

    return register(LocationDefinition(
        name=name, location_type=LocationType.JOURNEY, occupancy=occupancy, base_vp=num,
        description=f"Discard {num} CARD. Worth {num} VP.",
        can_play_check_inner=check, play_inner=play_inner, resolve_inner=resolve_inner,
    ))


JOURNEY_TWO = _journey("JOURNEY_TWO", 2, LocationOccupancy.UNLIMITED)
JOURNEY_THREE = _journey("JOURNEY_THREE", 3, LocationOccupancy.EXCLUSIVE)
JOURNEY_FOUR = _journey("JOURNEY_FOUR", 4, LocationOccupancy.EXCLUSIVE)
JOURNEY_FIVE = _journey("JOURNEY_FIVE", 5, LocationOccupancy.EXCLUSIVE)

BASIC_LOCATIONS = [
    BASIC_ONE_BERRY,
    BASIC_ONE_BERRY_AND_ONE_CARD,
    BASIC_ONE_RESIN_AND_ONE_CARD,
    BASIC_ONE_STONE,
    BASIC_THREE_TWIGS,
    BASIC_TWO_CARDS_AND_ONE_VP,
    BASIC_TWO_RESIN,
    BASIC_TWO_TWIGS_AND_ONE_CARD,
]

JOURNEY_LOCATIONS = [JOURNEY_TWO, JOURNEY_THREE, JOURNEY_FOUR, JOURNEY_FIVE]
