"""
Pearlbrook - the river, its destinations, and adornments.

Each player gets one ambassador. River spots are gated by how many cards of
a type the player has in their city; the first ambassador on a face-down
spot reveals it and earns a PEARL. Adornments cost 1 PEARL to play and
score at game end.
"""

from __future__ import annotations

from ...engine_core.action import ContextType, InputType
from ...engine_core.catalog import (
    AdornmentDefinition, CardType, RiverDestinationDefinition, RiverSpotDefinition,
    get_card, register,
)
from ...engine_core.game_log import entity_part
from ...engine_core.resources import BASIC_RESOURCES
from .helpers import is_gain_any, push_discard, push_gain_any, resolve_gain_any

RIVER = ContextType.RIVER_DESTINATION
ADORNMENT = ContextType.ADORNMENT


def _river_part(name: str):
    return entity_part("river_destination", name)


def _adornment_part(name: str):
    return entity_part("adornment", name)


# ============================================================================
# River spots
# ============================================================================

SHOAL_SPOT = register(RiverSpotDefinition(name="SHOAL"))
THREE_PRODUCTION_SPOT = register(RiverSpotDefinition(
    name="THREE_PRODUCTION", required_card_type=CardType.PRODUCTION, required_count=3))
TWO_DESTINATION_SPOT = register(RiverSpotDefinition(
    name="TWO_DESTINATION", required_card_type=CardType.DESTINATION, required_count=2))
TWO_GOVERNANCE_SPOT = register(RiverSpotDefinition(
    name="TWO_GOVERNANCE", required_card_type=CardType.GOVERNANCE, required_count=2))
TWO_TRAVELER_SPOT = register(RiverSpotDefinition(
    name="TWO_TRAVELER", required_card_type=CardType.TRAVELER, required_count=2))

RIVER_SPOTS = [
    SHOAL_SPOT,
    THREE_PRODUCTION_SPOT,
    TWO_DESTINATION_SPOT,
    TWO_GOVERNANCE_SPOT,
    TWO_TRAVELER_SPOT,
]


# ============================================================================
# River destinations
# ============================================================================

# -- SHOAL: pay 2 ANY and discard 2 CARD for 1 PEARL ------------------------

def _shoal_play(state, game_input, player):
    basic = sum(player.get_num_resource(r) for r in BASIC_RESOURCES)
    if basic < 2 or player.num_cards_in_hand < 2:
        state.add_log(player, " cannot pay 2 ANY and discard 2 CARD at ", _river_part("SHOAL"), ".")
        return
    state.push_pending(
        InputType.SELECT_RESOURCES,
        player.player_id,
        "Pay 2 ANY (then discard 2 CARD) to gain 1 PEARL",
        RIVER,
        "SHOAL",
        prev_input_type=game_input.input_type,
        min_choices=2,
        max_choices=2,
        to_spend=True,
    )


def _shoal_resolve(state, game_input):
    player = state.get_player(game_input.player_id)
    if game_input.input_type == InputType.SELECT_RESOURCES:
        player.spend_resources(game_input.option("resources"))
        push_discard(state, player, 2, 2, RIVER, "SHOAL", "Discard 2 CARD",
                     prev_input_type=InputType.SELECT_RESOURCES)
        return
    cards = game_input.option("cards_to_discard")
    player.discard_cards(state, cards)
    player.gain_resources(state, {"PEARL": 1})
    state.add_log(player, " paid 2 ANY and discarded 2 CARD at ", _river_part("SHOAL"),
                  " to gain 1 PEARL.")


SHOAL = register(RiverDestinationDefinition(
    name="SHOAL", kind="SHOAL",
    description="Pay 2 ANY and discard 2 CARD to gain 1 PEARL.",
    play_inner=_shoal_play, resolve_inner=_shoal_resolve,
))


# -- Citizens: reveal 2 cards of a kind for 1 VP and 1 PEARL ----------------

def _citizen(name: str, noun: str, matches) -> RiverDestinationDefinition:
    def play_inner(state, game_input, player):
        eligible = [c for c in player.cards_in_hand if matches(get_card(c))]
        if len(eligible) < 2:
            state.add_log(player, f" does not have 2 {noun} cards to discard at ",
                          _river_part(name), ".")
            return
        state.push_pending(
            InputType.SELECT_CARDS,
            player.player_id,
            f"Select 2 {noun} cards to discard for 1 VP and 1 PEARL",
            RIVER,
            name,
            prev_input_type=game_input.input_type,
            options=eligible,
            min_choices=2,
            max_choices=2,
        )

    def resolve_inner(state, game_input):
        player = state.get_player(game_input.player_id)
        cards = game_input.option("selected_cards")
        player.discard_cards(state, cards)
        player.gain_resources(state, {"VP": 1, "PEARL": 1})
        state.add_log(player, f" discarded {', '.join(cards)} at ", _river_part(name),
                      " to gain 1 VP and 1 PEARL.")

    return register(RiverDestinationDefinition(
        name=name, kind="CITIZEN",
        description=f"Discard 2 {noun} cards to gain 1 VP and 1 PEARL.",
        play_inner=play_inner, resolve_inner=resolve_inner,
    ))


GUS_THE_GARDENER = _citizen(
    "GUS_THE_GARDENER", "PRODUCTION", lambda d: d.card_type == CardType.PRODUCTION)
CRUSTINA_THE_CONSTABLE = _citizen(
    "CRUSTINA_THE_CONSTABLE", "GOVERNANCE", lambda d: d.card_type == CardType.GOVERNANCE)
ILUMINOUS_THE_ARCHITECT = _citizen(
    "ILUMINOUS_THE_ARCHITECT", "construction", lambda d: d.is_construction)
BOSLEY_THE_ARTIST = _citizen(
    "BOSLEY_THE_ARTIST", "DESTINATION", lambda d: d.card_type == CardType.DESTINATION)

CITIZENS = [GUS_THE_GARDENER, CRUSTINA_THE_CONSTABLE, ILUMINOUS_THE_ARCHITECT, BOSLEY_THE_ARTIST]


# -- Locations: pay 1 VP and 1 resource to draw cards and gain 1 PEARL ------

PAY = "PAY"
DECLINE = "DECLINE"


def _river_location(name: str, resource: str, num_cards: int) -> RiverDestinationDefinition:
    def play_inner(state, game_input, player):
        if player.get_num_resource("VP") < 1 or player.get_num_resource(resource) < 1:
            state.add_log(player, f" cannot pay 1 VP and 1 {resource} at ", _river_part(name), ".")
            return
        state.push_pending(
            InputType.SELECT_OPTION_GENERIC,
            player.player_id,
            f"Pay 1 VP and 1 {resource} to draw {num_cards} CARD and gain 1 PEARL?",
            RIVER,
            name,
            prev_input_type=game_input.input_type,
            options=[PAY, DECLINE],
        )

    def resolve_inner(state, game_input):
        player = state.get_player(game_input.player_id)
        if game_input.option("selected_option") == DECLINE:
            state.add_log(player, " declined to pay at ", _river_part(name), ".")
            return
        player.spend_resources({"VP": 1, resource: 1})
        player.draw_cards(state, num_cards)
        player.gain_resources(state, {"PEARL": 1})
        state.add_log(player, f" paid 1 VP and 1 {resource} at ", _river_part(name),
                      f" to draw {num_cards} CARD and gain 1 PEARL.")

    return register(RiverDestinationDefinition(
        name=name, kind="LOCATION",
        description=f"Pay 1 VP and 1 {resource} to draw {num_cards} CARD and gain 1 PEARL.",
        play_inner=play_inner, resolve_inner=resolve_inner,
    ))


BALLROOM = _river_location("BALLROOM", "RESIN", 3)
WATERMILL = _river_location("WATERMILL", "TWIG", 2)
OBSERVATORY = _river_location("OBSERVATORY", "PEBBLE", 3)
GREAT_HALL = _river_location("GREAT_HALL", "BERRY", 2)

RIVER_LOCATIONS = [BALLROOM, WATERMILL, OBSERVATORY, GREAT_HALL]


# ============================================================================
# Adornments
# ============================================================================

def _gain_any_play(name: str, count_fn):
    def play_inner(state, game_input, player):
        num = count_fn(player)
        if num <= 0:
            state.add_log(player, " gained nothing from ", _adornment_part(name), ".")
            return
        push_gain_any(state, player, num, ADORNMENT, name, prev_input_type=game_input.input_type)
    return play_inner


def _gain_any_resolve(name: str):
    def resolve_inner(state, game_input):
        resolve_gain_any(state, game_input, _adornment_part(name))
    return resolve_inner


def _count(card_type: CardType):
    def points(state, player_id):
        return state.get_player(player_id).count_card_type(card_type)
    return points


def _critters(player) -> int:
    return sum(1 for pc in player.played_cards if get_card(pc.card_name).is_critter)


def _constructions(player) -> int:
    return sum(1 for pc in player.played_cards if get_card(pc.card_name).is_construction)


def _bell_play(state, game_input, player):
    player.gain_resources(state, {"BERRY": 3})
    state.add_log(player, " gained 3 BERRY from ", _adornment_part("BELL"), ".")


BELL = register(AdornmentDefinition(
    name="BELL",
    description="Gain 3 BERRY. Worth 1 VP for every 2 critters in your city.",
    play_inner=_bell_play,
    points_inner=lambda state, pid: _critters(state.get_player(pid)) // 2,
))


def _compass_play(state, game_input, player):
    # FOOL's effect is placing itself, so it has nothing to reactivate.
    travelers = [pc for pc in player.get_played_cards_by_type(CardType.TRAVELER)
                 if pc.card_name != "FOOL"]
    if not travelers:
        state.add_log(player, " has no TRAVELER cards to reactivate with ",
                      _adornment_part("COMPASS"), ".")
        return
    state.push_pending(
        InputType.SELECT_PLAYED_CARDS,
        player.player_id,
        "Select up to 2 TRAVELER cards to reactivate",
        ADORNMENT,
        "COMPASS",
        prev_input_type=game_input.input_type,
        options=[pc.uid for pc in travelers],
        min_choices=0,
        max_choices=2,
    )


def _compass_resolve(state, game_input):
    player = state.get_player(game_input.player_id)
    for uid in game_input.option("selected_cards"):
        owner, played_card = state.find_played_card(uid)
        definition = get_card(played_card.card_name)
        state.add_log(player, " reactivated ", definition.entity_part(), " with ",
                      _adornment_part("COMPASS"), ".")
        definition.activate(state, game_input, owner, played_card)


COMPASS = register(AdornmentDefinition(
    name="COMPASS",
    description="Reactivate up to 2 TRAVELER cards. Worth 1 VP for every 2 TRAVELER cards.",
    play_inner=_compass_play, resolve_inner=_compass_resolve,
    points_inner=lambda state, pid: _count(CardType.TRAVELER)(state, pid) // 2,
))

GILDED_BOOK = register(AdornmentDefinition(
    name="GILDED_BOOK",
    description="Gain 1 ANY for each GOVERNANCE card. Worth 1 VP for each GOVERNANCE card.",
    play_inner=_gain_any_play("GILDED_BOOK", lambda p: p.count_card_type(CardType.GOVERNANCE)),
    resolve_inner=_gain_any_resolve("GILDED_BOOK"),
    points_inner=_count(CardType.GOVERNANCE),
))

KEY_TO_THE_CITY = register(AdornmentDefinition(
    name="KEY_TO_THE_CITY",
    description="Gain 2 ANY. Worth 1 VP for every 2 constructions in your city.",
    play_inner=_gain_any_play("KEY_TO_THE_CITY", lambda p: 2),
    resolve_inner=_gain_any_resolve("KEY_TO_THE_CITY"),
    points_inner=lambda state, pid: _constructions(state.get_player(pid)) // 2,
))


def _scales_play(state, game_input, player):
    push_discard(state, player, 0, min(4, player.num_cards_in_hand), ADORNMENT, "SCALES",
                 "Discard up to 4 CARD to gain 1 ANY each",
                 prev_input_type=game_input.input_type)


def _scales_resolve(state, game_input):
    if is_gain_any(game_input):
        resolve_gain_any(state, game_input, _adornment_part("SCALES"))
        return
    player = state.get_player(game_input.player_id)
    cards = game_input.option("cards_to_discard")
    player.discard_cards(state, cards)
    state.add_log(player, f" discarded {len(cards)} CARD with ", _adornment_part("SCALES"), ".")
    push_gain_any(state, player, len(cards), ADORNMENT, "SCALES",
                  prev_input_type=InputType.DISCARD_CARDS)


SCALES = register(AdornmentDefinition(
    name="SCALES",
    description="Discard up to 4 CARD and gain 1 ANY for each.",
    play_inner=_scales_play, resolve_inner=_scales_resolve,
))


def _spyglass_play(state, game_input, player):
    player.gain_resources(state, {"CARD": 1, "PEARL": 1})
    state.add_log(player, " drew 1 CARD and gained 1 PEARL from ", _adornment_part("SPYGLASS"), ".")
    push_gain_any(state, player, 1, ADORNMENT, "SPYGLASS", prev_input_type=game_input.input_type)


SPYGLASS = register(AdornmentDefinition(
    name="SPYGLASS",
    description="Gain 1 ANY, 1 CARD and 1 PEARL.",
    play_inner=_spyglass_play, resolve_inner=_gain_any_resolve("SPYGLASS"),
))

TIARA = register(AdornmentDefinition(
    name="TIARA",
    description="Gain 1 ANY per PROSPERITY card, up to 3. Worth 1 VP for each PROSPERITY card.",
    play_inner=_gain_any_play("TIARA", lambda p: min(3, p.count_card_type(CardType.PROSPERITY))),
    resolve_inner=_gain_any_resolve("TIARA"),
    points_inner=_count(CardType.PROSPERITY),
))


def _masque_play(state, game_input, player):
    drawn = player.draw_cards(state, 2)
    state.add_log(player, f" drew {drawn} CARD from ", _adornment_part("MASQUE"), ".")


MASQUE = register(AdornmentDefinition(
    name="MASQUE",
    description="Draw 2 CARD. Worth 1 VP for every 3 VP tokens.",
    play_inner=_masque_play,
    points_inner=lambda state, pid: state.get_player(pid).get_num_resource("VP") // 3,
))

ADORNMENTS = [BELL, COMPASS, GILDED_BOOK, KEY_TO_THE_CITY, SCALES, SPYGLASS, TIARA, MASQUE]
