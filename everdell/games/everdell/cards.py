"""
Everdell Cards - Card definitions.

This module contains a representative subset of the base game cards plus a
few expansion-flavoured ones. Every effect shape the engine has to
sequence is covered:
- Production cards that gain resources or copy other production cards
- Travelers with chained follow-ups (FOOL, TEACHER, POSTAL_PIGEON, HERALD)
- Destinations that hold workers (CHAPEL, POST_OFFICE, INN)
- Governance cards reacting to later plays (HISTORIAN, SHOPKEEPER, COURTHOUSE)
- Prosperity cards scored at game end

Card structure:
- Type (TRAVELER, PRODUCTION, DESTINATION, GOVERNANCE, PROSPERITY)
- Cost, base VP, copies in the deck
- Critter or construction, common or unique
- Associated cards (a critter may be played for free by occupying them)
"""

from __future__ import annotations

from ...engine_core.action import ContextType, InputType
from ...engine_core.catalog import CardDefinition, CardType, EventType, get_card, get_event, register
from ...engine_core.errors import IllegalActionError
from ...engine_core.game_log import entity_part
from ...engine_core.resources import Discount, ResourceType, validate_paid_resources
from .helpers import push_discard, push_gain_any, resolve_gain_any

CARD = ContextType.CARD


def _part(name: str):
    return entity_part("card", name)


def _draw_revealed(state, num: int) -> list[str]:
    revealed = []
    for _ in range(num):
        card = state.draw_card()
        if card is None:
            break
        revealed.append(card)
    return revealed


def _shortfall(player, cost: dict[str, int]) -> int:
    return sum(max(0, count - player.get_num_resource(r)) for r, count in cost.items())


# ============================================================================
# Effects
# ============================================================================

def _husband_play(state, game_input, card_owner, played_card):
    if card_owner.has_card("WIFE") and card_owner.has_card("FARM"):
        push_gain_any(state, card_owner, 1, CARD, "HUSBAND",
                      label="Select 1 ANY to gain from HUSBAND",
                      prev_input_type=game_input.input_type)


def _husband_resolve(state, game_input):
    resolve_gain_any(state, game_input, _part("HUSBAND"))


def _barge_toad_play(state, game_input, card_owner, played_card):
    num_farms = len(card_owner.get_played_cards_by_name("FARM"))
    if num_farms:
        card_owner.gain_resources(state, {"TWIG": 2 * num_farms})
        state.add_log(card_owner, f" gained {2 * num_farms} TWIG from ", _part("BARGE_TOAD"), ".")


def _general_store_play(state, game_input, card_owner, played_card):
    num_berries = 2 if card_owner.has_card("FARM") else 1
    card_owner.gain_resources(state, {"BERRY": num_berries})
    state.add_log(card_owner, f" gained {num_berries} BERRY from ", _part("GENERAL_STORE"), ".")


# -- copying production -----------------------------------------------------

_NO_COPY = ("CHIP_SWEEP", "MINER_MOLE")


def _push_copy_production(state, game_input, card_owner, card_name, candidates):
    options = [pc.uid for pc in candidates if pc.card_name not in _NO_COPY]
    if not options:
        state.add_log(card_owner, " has no PRODUCTION cards to copy with ", _part(card_name), ".")
        return
    state.push_pending(
        InputType.SELECT_PLAYED_CARDS,
        card_owner.player_id,
        "Select 1 PRODUCTION card to activate",
        CARD,
        card_name,
        prev_input_type=game_input.input_type,
        options=options,
        min_choices=1,
        max_choices=1,
    )


def _resolve_copy_production(state, game_input):
    player = state.get_player(game_input.player_id)
    _, target = state.find_played_card(game_input.option("selected_cards")[0])
    state.add_log(player, " activated ", _part(target.card_name), " using ",
                  _part(game_input.context_name), ".")
    get_card(target.card_name).production_activate(state, game_input, player, target)


def _chip_sweep_play(state, game_input, card_owner, played_card):
    _push_copy_production(state, game_input, card_owner, "CHIP_SWEEP",
                          card_owner.get_played_cards_by_type(CardType.PRODUCTION))


def _miner_mole_play(state, game_input, card_owner, played_card):
    candidates = []
    for opponent in state.other_players(card_owner.player_id):
        candidates.extend(opponent.get_played_cards_by_type(CardType.PRODUCTION))
    _push_copy_production(state, game_input, card_owner, "MINER_MOLE", candidates)


# -- governance triggers ----------------------------------------------------

def _shopkeeper_trigger(state, card_owner, played_card_name):
    if get_card(played_card_name).is_critter:
        card_owner.gain_resources(state, {"BERRY": 1})
        state.add_log(card_owner, " gained 1 BERRY from ", _part("SHOPKEEPER"), ".")


def _historian_trigger(state, card_owner, played_card_name):
    if card_owner.draw_cards(state, 1):
        state.add_log(card_owner, " drew 1 CARD from ", _part("HISTORIAN"), ".")


def _courthouse_trigger(state, card_owner, played_card_name):
    if get_card(played_card_name).is_construction:
        state.push_pending(
            InputType.SELECT_OPTION_GENERIC,
            card_owner.player_id,
            "Select TWIG, RESIN or PEBBLE to gain",
            CARD,
            "COURTHOUSE",
            prev_input_type=InputType.PLAY_CARD,
            options=["TWIG", "RESIN", "PEBBLE"],
            min_choices=1,
            max_choices=1,
        )


def _courthouse_resolve(state, game_input):
    player = state.get_player(game_input.player_id)
    resource = game_input.option("selected_option")
    player.gain_resources(state, {resource: 1})
    state.add_log(player, f" gained 1 {resource} from ", _part("COURTHOUSE"), ".")


# -- FOOL -------------------------------------------------------------------

def _fool_targets(state, player_id):
    return [p.player_id for p in state.other_players(player_id) if p.can_add_to_city("FOOL")]


def _fool_check(state, game_input):
    if not _fool_targets(state, game_input.player_id):
        return "No opponent has room for FOOL in their city"
    return None


def _fool_play(state, game_input, card_owner, played_card):
    state.push_pending(
        InputType.SELECT_PLAYER,
        card_owner.player_id,
        "Select a player to place FOOL in their city",
        CARD,
        "FOOL",
        prev_input_type=game_input.input_type,
        options=_fool_targets(state, card_owner.player_id),
    )


def _fool_resolve(state, game_input):
    player = state.get_player(game_input.player_id)
    target = state.get_player(game_input.option("selected_player"))
    target.add_to_city(state, "FOOL")
    state.add_log(player, " added ", _part("FOOL"), " to ", target, "'s city.")


# -- prosperity scoring -----------------------------------------------------

def _architect_points(state, player_id):
    player = state.get_player(player_id)
    return min(6, player.get_num_resource(ResourceType.RESIN) + player.get_num_resource(ResourceType.PEBBLE))


def _castle_points(state, player_id):
    player = state.get_player(player_id)
    return sum(1 for pc in player.played_cards
               if get_card(pc.card_name).is_construction and not get_card(pc.card_name).is_unique)


def _king_points(state, player_id):
    player = state.get_player(player_id)
    points = 0
    for event in player.claimed_events:
        points += 1 if get_event(event).event_type == EventType.BASIC else 2
    return points


def _evertree_points(state, player_id):
    return state.get_player(player_id).count_card_type(CardType.PROSPERITY)


def _theatre_points(state, player_id):
    player = state.get_player(player_id)
    return sum(1 for pc in player.played_cards
               if get_card(pc.card_name).is_critter and get_card(pc.card_name).is_unique)


def _school_points(state, player_id):
    player = state.get_player(player_id)
    return sum(1 for pc in player.played_cards
               if get_card(pc.card_name).is_critter and not get_card(pc.card_name).is_unique)


# -- BARD -------------------------------------------------------------------

def _bard_play(state, game_input, card_owner, played_card):
    push_discard(state, card_owner, 0, 5, CARD, "BARD",
                 "Select up to 5 CARD to discard (gain 1 VP each)",
                 prev_input_type=game_input.input_type)


def _bard_resolve(state, game_input):
    player = state.get_player(game_input.player_id)
    cards = game_input.option("cards_to_discard")
    if not cards:
        if game_input.is_auto_advanced:
            state.add_log(player, " has no CARD to discard for ", _part("BARD"), ".")
        else:
            state.add_log(player, " chose not to discard any CARD for ", _part("BARD"), ".")
        return
    player.discard_cards(state, cards)
    player.gain_resources(state, {"VP": len(cards)})
    state.add_log(player, f" discarded {len(cards)} CARD to gain {len(cards)} VP from ",
                  _part("BARD"), ".")


# -- TEACHER ----------------------------------------------------------------

def _teacher_play(state, game_input, card_owner, played_card):
    revealed = _draw_revealed(state, 2)
    if not revealed:
        state.add_log(card_owner, " had no CARD to draw for ", _part("TEACHER"), ".")
        return
    state.push_pending(
        InputType.SELECT_CARDS,
        card_owner.player_id,
        "Select 1 CARD to keep; the other goes to an opponent",
        CARD,
        "TEACHER",
        prev_input_type=game_input.input_type,
        options=list(revealed),
        min_choices=1,
        max_choices=1,
        metadata={"revealed": list(revealed)},
    )


def _teacher_resolve(state, game_input):
    player = state.get_player(game_input.player_id)
    pending = game_input.pending
    if game_input.input_type == InputType.SELECT_CARDS:
        kept = game_input.option("selected_cards")[0]
        player.add_card_to_hand(state, kept)
        remaining = list(pending.metadata["revealed"])
        remaining.remove(kept)
        state.add_log(player, " kept a CARD from ", _part("TEACHER"), ".")
        if not remaining:
            return
        state.push_pending(
            InputType.SELECT_PLAYER,
            player.player_id,
            "Select a player to give the other CARD to",
            CARD,
            "TEACHER",
            prev_input_type=InputType.SELECT_CARDS,
            options=[p.player_id for p in state.other_players(player.player_id)],
            metadata={"card": remaining[0]},
        )
    elif game_input.input_type == InputType.SELECT_PLAYER:
        target = state.get_player(game_input.option("selected_player"))
        target.add_card_to_hand(state, pending.metadata["card"])
        state.add_log(player, " gave a CARD to ", target, " using ", _part("TEACHER"), ".")
    else:
        raise IllegalActionError(f"TEACHER cannot resolve {game_input.input_type.value}")


# -- CHAPEL / SHEPHERD --------------------------------------------------------

def _chapel_play(state, game_input, visitor, played_card):
    played_card.resources["VP"] = played_card.resources.get("VP", 0) + 1
    num_vp = played_card.resources["VP"]
    drawn = visitor.draw_cards(state, 2 * num_vp)
    state.add_log(visitor, " placed 1 VP on ", _part("CHAPEL"), f" and drew {drawn} CARD.")


def _shepherd_play(state, game_input, card_owner, played_card):
    chapel_vp = sum(pc.resources.get("VP", 0) for pc in card_owner.get_played_cards_by_name("CHAPEL"))
    if chapel_vp:
        card_owner.gain_resources(state, {"VP": chapel_vp})
        state.add_log(card_owner, f" gained {chapel_vp} VP from ", _part("SHEPHERD"), ".")


# -- POST_OFFICE ---------------------------------------------------------------

def _post_office_play(state, game_input, visitor, played_card):
    state.push_pending(
        InputType.SELECT_PLAYER,
        visitor.player_id,
        "Select a player to give 2 CARD to",
        CARD,
        "POST_OFFICE",
        prev_input_type=game_input.input_type,
        options=[p.player_id for p in state.other_players(visitor.player_id)],
    )


def _push_post_office_discard(state, player):
    push_discard(state, player, 0, player.num_cards_in_hand, CARD, "POST_OFFICE",
                 "Discard any number of CARD, then draw up to your hand limit",
                 prev_input_type=InputType.SELECT_CARDS)


def _post_office_resolve(state, game_input):
    player = state.get_player(game_input.player_id)
    if game_input.input_type == InputType.SELECT_PLAYER:
        target_id = game_input.option("selected_player")
        num = min(2, player.num_cards_in_hand)
        if num == 0:
            _push_post_office_discard(state, player)
            return
        state.push_pending(
            InputType.SELECT_CARDS,
            player.player_id,
            f"Select {num} CARD to give away",
            CARD,
            "POST_OFFICE",
            prev_input_type=InputType.SELECT_PLAYER,
            options=list(player.cards_in_hand),
            min_choices=num,
            max_choices=num,
            metadata={"target": target_id},
        )
    elif game_input.input_type == InputType.SELECT_CARDS:
        target = state.get_player(game_input.pending.metadata["target"])
        cards = game_input.option("selected_cards")
        for card in cards:
            player.remove_card_from_hand(card)
            target.add_card_to_hand(state, card)
        state.add_log(player, f" gave {len(cards)} CARD to ", target, ".")
        _push_post_office_discard(state, player)
    elif game_input.input_type == InputType.DISCARD_CARDS:
        cards = game_input.option("cards_to_discard")
        player.discard_cards(state, cards)
        drawn = player.draw_cards(state, player.hand_room)
        state.add_log(player, f" discarded {len(cards)} CARD and drew {drawn} CARD.")
    else:
        raise IllegalActionError(f"POST_OFFICE cannot resolve {game_input.input_type.value}")


# -- POSTAL_PIGEON ---------------------------------------------------------------

def _postal_pigeon_play(state, game_input, card_owner, played_card):
    revealed = _draw_revealed(state, 2)
    if not revealed:
        return
    playable = []
    for name in revealed:
        definition = get_card(name)
        if (definition.base_vp <= 3 and name not in playable
                and definition.can_play_ignore_cost_and_source(state, card_owner) is None):
            playable.append(name)
    state.add_log(card_owner, f" revealed {', '.join(revealed)} with ", _part("POSTAL_PIGEON"), ".")
    state.push_pending(
        InputType.SELECT_CARDS,
        card_owner.player_id,
        "Select 1 CARD worth up to 3 VP to play for free",
        CARD,
        "POSTAL_PIGEON",
        prev_input_type=game_input.input_type,
        options=playable,
        min_choices=0,
        max_choices=1 if playable else 0,
        metadata={"revealed": list(revealed)},
    )


def _postal_pigeon_resolve(state, game_input):
    player = state.get_player(game_input.player_id)
    selected = game_input.option("selected_cards")
    leftover = list(game_input.pending.metadata["revealed"])
    for card in selected:
        leftover.remove(card)
    for card in leftover:
        state.discard_pile.add_to_stack(card)
    if selected:
        state.add_log(player, " played ", _part(selected[0]), " using ", _part("POSTAL_PIGEON"), ".")
        get_card(selected[0]).add_to_city_and_play(state, game_input, player)


# -- INN ------------------------------------------------------------------------

def _inn_options(state, player):
    options = []
    for name in state.meadow_cards:
        if name in options:
            continue
        definition = get_card(name)
        if definition.can_play_ignore_cost_and_source(state, player) is not None:
            continue
        if _shortfall(player, definition.base_cost) <= 3:
            options.append(name)
    return options


def _inn_check(state, game_input):
    if game_input.input_type != InputType.VISIT_DESTINATION_CARD:
        return None
    if not _inn_options(state, state.get_player(game_input.player_id)):
        return "No CARD in the Meadow can be played using the INN"
    return None


def _inn_play(state, game_input, visitor, played_card):
    state.push_pending(
        InputType.SELECT_CARDS,
        visitor.player_id,
        "Select a CARD from the Meadow to play for 3 ANY less",
        CARD,
        "INN",
        prev_input_type=game_input.input_type,
        options=_inn_options(state, visitor),
        min_choices=1,
        max_choices=1,
    )


def _inn_play_selected(state, game_input, player, card_name):
    state.remove_card_from_meadow(card_name)
    state.add_log(player, " played ", _part(card_name), " from the Meadow using ", _part("INN"), ".")
    get_card(card_name).add_to_city_and_play(state, game_input, player)


def _inn_resolve(state, game_input):
    player = state.get_player(game_input.player_id)
    if game_input.input_type == InputType.SELECT_CARDS:
        card_name = game_input.option("selected_cards")[0]
        if get_card(card_name).total_cost <= 3:
            _inn_play_selected(state, game_input, player, card_name)
            return
        state.push_pending(
            InputType.SELECT_PAYMENT_FOR_CARD,
            player.player_id,
            f"Select resources to pay for {card_name} (3 ANY less)",
            CARD,
            "INN",
            prev_input_type=InputType.SELECT_CARDS,
            card=card_name,
        )
    elif game_input.input_type == InputType.SELECT_PAYMENT_FOR_CARD:
        card_name = game_input.pending.card
        paid = game_input.option("payment_options")["resources"]
        error = validate_paid_resources(paid, get_card(card_name).base_cost, Discount.ANY_3,
                                        has_judge=player.has_card("JUDGE"))
        if error:
            raise IllegalActionError(error)
        player.spend_resources(paid)
        _inn_play_selected(state, game_input, player, card_name)
    else:
        raise IllegalActionError(f"INN cannot resolve {game_input.input_type.value}")


# -- HERALD ---------------------------------------------------------------------

def _herald_play(state, game_input, card_owner, played_card):
    state.push_pending(
        InputType.SELECT_PLAYER,
        card_owner.player_id,
        "Select an opponent who must discard 1 CARD",
        CARD,
        "HERALD",
        prev_input_type=game_input.input_type,
        options=[p.player_id for p in state.other_players(card_owner.player_id)],
    )


def _herald_resolve(state, game_input):
    if game_input.input_type == InputType.SELECT_PLAYER:
        target = state.get_player(game_input.option("selected_player"))
        num = min(1, target.num_cards_in_hand)
        push_discard(state, target, num, num, CARD, "HERALD",
                     f"Discard {num} CARD for the HERALD",
                     prev_input_type=InputType.SELECT_PLAYER,
                     herald_owner=game_input.player_id)
    elif game_input.input_type == InputType.DISCARD_CARDS:
        target = state.get_player(game_input.player_id)
        owner = state.get_player(game_input.pending.metadata["herald_owner"])
        cards = game_input.option("cards_to_discard")
        if not cards:
            state.add_log(target, " has no CARD to discard for ", _part("HERALD"), ".")
            return
        target.discard_cards(state, cards)
        drawn = owner.draw_cards(state, 1)
        state.add_log(target, " discarded 1 CARD; ", owner, f" drew {drawn} CARD.")
    else:
        raise IllegalActionError(f"HERALD cannot resolve {game_input.input_type.value}")


# ============================================================================
# Card definitions
# ============================================================================

FARM = register(CardDefinition(
    name="FARM", card_type=CardType.PRODUCTION, base_cost={"TWIG": 2, "RESIN": 1},
    base_vp=1, num_in_deck=8, is_unique=False, is_construction=True,
    associated_cards=("HUSBAND", "WIFE"), resources_to_gain={"BERRY": 1},
    description="Gain 1 BERRY.",
))

HUSBAND = register(CardDefinition(
    name="HUSBAND", card_type=CardType.PRODUCTION, base_cost={"BERRY": 2},
    base_vp=2, num_in_deck=4, is_unique=False, is_construction=False,
    associated_cards=("FARM",), play_inner=_husband_play, resolve_inner=_husband_resolve,
    description="Gain 1 ANY if paired with a WIFE and you have a FARM. Shares a space with a WIFE.",
))

WIFE = register(CardDefinition(
    name="WIFE", card_type=CardType.PROSPERITY, base_cost={"BERRY": 2},
    base_vp=2, num_in_deck=4, is_unique=False, is_construction=False,
    associated_cards=("FARM",),
    description="Worth 3 more VP when paired with a HUSBAND.",
))

TWIG_BARGE = register(CardDefinition(
    name="TWIG_BARGE", card_type=CardType.PRODUCTION, base_cost={"TWIG": 1, "PEBBLE": 1},
    base_vp=1, num_in_deck=3, is_unique=False, is_construction=True,
    associated_cards=("BARGE_TOAD",), resources_to_gain={"TWIG": 2},
    description="Gain 2 TWIG.",
))

BARGE_TOAD = register(CardDefinition(
    name="BARGE_TOAD", card_type=CardType.PRODUCTION, base_cost={"BERRY": 2},
    base_vp=1, num_in_deck=3, is_unique=False, is_construction=False,
    associated_cards=("TWIG_BARGE",), play_inner=_barge_toad_play,
    description="Gain 2 TWIG for each FARM in your city.",
))

RESIN_REFINERY = register(CardDefinition(
    name="RESIN_REFINERY", card_type=CardType.PRODUCTION, base_cost={"RESIN": 1, "PEBBLE": 1},
    base_vp=1, num_in_deck=3, is_unique=False, is_construction=True,
    associated_cards=("CHIP_SWEEP",), resources_to_gain={"RESIN": 1},
    description="Gain 1 RESIN.",
))

CHIP_SWEEP = register(CardDefinition(
    name="CHIP_SWEEP", card_type=CardType.PRODUCTION, base_cost={"BERRY": 3},
    base_vp=2, num_in_deck=3, is_unique=False, is_construction=False,
    associated_cards=("RESIN_REFINERY",), play_inner=_chip_sweep_play,
    resolve_inner=_resolve_copy_production,
    description="Activate 1 PRODUCTION card in your city.",
))

MINE = register(CardDefinition(
    name="MINE", card_type=CardType.PRODUCTION, base_cost={"TWIG": 1, "RESIN": 1, "PEBBLE": 1},
    base_vp=2, num_in_deck=3, is_unique=False, is_construction=True,
    associated_cards=("MINER_MOLE",), resources_to_gain={"PEBBLE": 1},
    description="Gain 1 PEBBLE.",
))

MINER_MOLE = register(CardDefinition(
    name="MINER_MOLE", card_type=CardType.PRODUCTION, base_cost={"BERRY": 3},
    base_vp=1, num_in_deck=3, is_unique=False, is_construction=False,
    associated_cards=("MINE",), play_inner=_miner_mole_play,
    resolve_inner=_resolve_copy_production,
    description="Copy 1 PRODUCTION card in an opponent's city.",
))

GENERAL_STORE = register(CardDefinition(
    name="GENERAL_STORE", card_type=CardType.PRODUCTION, base_cost={"RESIN": 1, "PEBBLE": 1},
    base_vp=1, num_in_deck=3, is_unique=False, is_construction=True,
    associated_cards=("SHOPKEEPER",), play_inner=_general_store_play,
    description="Gain 1 BERRY. If you have a FARM, gain 2 BERRY instead.",
))

SHOPKEEPER = register(CardDefinition(
    name="SHOPKEEPER", card_type=CardType.GOVERNANCE, base_cost={"BERRY": 2},
    base_vp=1, num_in_deck=3, is_unique=True, is_construction=False,
    associated_cards=("GENERAL_STORE",), trigger_inner=_shopkeeper_trigger,
    description="After you play a critter, gain 1 BERRY.",
))

FAIRGROUNDS = register(CardDefinition(
    name="FAIRGROUNDS", card_type=CardType.PRODUCTION, base_cost={"TWIG": 1, "RESIN": 2, "PEBBLE": 1},
    base_vp=3, num_in_deck=3, is_unique=True, is_construction=True,
    associated_cards=("FOOL",), resources_to_gain={"CARD": 2},
    description="Draw 2 CARD.",
))

FOOL = register(CardDefinition(
    name="FOOL", card_type=CardType.TRAVELER, base_cost={"BERRY": 3},
    base_vp=-2, num_in_deck=2, is_unique=True, is_construction=False,
    associated_cards=("FAIRGROUNDS",), goes_to_opponent=True,
    can_play_check_inner=_fool_check, play_inner=_fool_play, resolve_inner=_fool_resolve,
    description="Play into an empty space in an opponent's city.",
))

COURTHOUSE = register(CardDefinition(
    name="COURTHOUSE", card_type=CardType.GOVERNANCE, base_cost={"TWIG": 1, "RESIN": 1, "PEBBLE": 2},
    base_vp=2, num_in_deck=2, is_unique=True, is_construction=True,
    associated_cards=("JUDGE",), trigger_inner=_courthouse_trigger,
    resolve_inner=_courthouse_resolve,
    description="After you play a construction, gain 1 TWIG, RESIN or PEBBLE.",
))

JUDGE = register(CardDefinition(
    name="JUDGE", card_type=CardType.GOVERNANCE, base_cost={"BERRY": 3},
    base_vp=2, num_in_deck=2, is_unique=True, is_construction=False,
    associated_cards=("COURTHOUSE",),
    description="When you play a card, you may replace 1 resource in the cost with 1 other resource.",
))

CRANE = register(CardDefinition(
    name="CRANE", card_type=CardType.GOVERNANCE, base_cost={"PEBBLE": 1},
    base_vp=1, num_in_deck=3, is_unique=True, is_construction=True,
    associated_cards=("ARCHITECT",),
    description="Discard to pay 3 ANY less for a construction.",
))

ARCHITECT = register(CardDefinition(
    name="ARCHITECT", card_type=CardType.PROSPERITY, base_cost={"BERRY": 4},
    base_vp=2, num_in_deck=2, is_unique=True, is_construction=False,
    associated_cards=("CRANE",), points_inner=_architect_points,
    description="1 VP for each of your leftover RESIN and PEBBLE, up to 6.",
))

CASTLE = register(CardDefinition(
    name="CASTLE", card_type=CardType.PROSPERITY, base_cost={"TWIG": 2, "RESIN": 3, "PEBBLE": 3},
    base_vp=4, num_in_deck=2, is_unique=True, is_construction=True,
    associated_cards=("KING",), points_inner=_castle_points,
    description="1 VP for each common construction in your city.",
))

KING = register(CardDefinition(
    name="KING", card_type=CardType.PROSPERITY, base_cost={"BERRY": 6},
    base_vp=4, num_in_deck=2, is_unique=True, is_construction=False,
    associated_cards=("CASTLE",), points_inner=_king_points,
    description="1 VP for each basic event and 2 VP for each special event you achieved.",
))

EVERTREE = register(CardDefinition(
    name="EVERTREE", card_type=CardType.PROSPERITY, base_cost={"TWIG": 3, "RESIN": 3, "PEBBLE": 3},
    base_vp=5, num_in_deck=2, is_unique=True, is_construction=True,
    points_inner=_evertree_points,
    description="1 VP for each PROSPERITY card in your city. Any critter may occupy it.",
))

THEATRE = register(CardDefinition(
    name="THEATRE", card_type=CardType.PROSPERITY, base_cost={"TWIG": 3, "RESIN": 1, "PEBBLE": 1},
    base_vp=3, num_in_deck=2, is_unique=True, is_construction=True,
    associated_cards=("BARD",), points_inner=_theatre_points,
    description="1 VP for each unique critter in your city.",
))

BARD = register(CardDefinition(
    name="BARD", card_type=CardType.TRAVELER, base_cost={"BERRY": 3},
    base_vp=0, num_in_deck=2, is_unique=True, is_construction=False,
    associated_cards=("THEATRE",), play_inner=_bard_play, resolve_inner=_bard_resolve,
    description="Discard up to 5 CARD to gain 1 VP each.",
))

SCHOOL = register(CardDefinition(
    name="SCHOOL", card_type=CardType.PROSPERITY, base_cost={"TWIG": 2, "RESIN": 2},
    base_vp=2, num_in_deck=2, is_unique=True, is_construction=True,
    associated_cards=("TEACHER",), points_inner=_school_points,
    description="1 VP for each common critter in your city.",
))

TEACHER = register(CardDefinition(
    name="TEACHER", card_type=CardType.PRODUCTION, base_cost={"BERRY": 2},
    base_vp=2, num_in_deck=3, is_unique=False, is_construction=False,
    associated_cards=("SCHOOL",), play_inner=_teacher_play, resolve_inner=_teacher_resolve,
    description="Draw 2 CARD, keep 1 and give the other to an opponent.",
))

CHAPEL = register(CardDefinition(
    name="CHAPEL", card_type=CardType.DESTINATION, base_cost={"TWIG": 2, "RESIN": 1, "PEBBLE": 1},
    base_vp=2, num_in_deck=2, is_unique=True, is_construction=True,
    associated_cards=("SHEPHERD",), play_inner=_chapel_play,
    description="Place 1 VP here, then draw 2 CARD for each VP on this card.",
))

SHEPHERD = register(CardDefinition(
    name="SHEPHERD", card_type=CardType.TRAVELER, base_cost={"BERRY": 3},
    base_vp=1, num_in_deck=2, is_unique=True, is_construction=False,
    associated_cards=("CHAPEL",), resources_to_gain={"BERRY": 3}, play_inner=_shepherd_play,
    description="Gain 3 BERRY, then gain 1 VP for each VP on your CHAPEL.",
))

POST_OFFICE = register(CardDefinition(
    name="POST_OFFICE", card_type=CardType.DESTINATION, base_cost={"TWIG": 1, "RESIN": 2},
    base_vp=2, num_in_deck=3, is_unique=False, is_construction=True,
    associated_cards=("POSTAL_PIGEON",), is_open_destination=True,
    play_inner=_post_office_play, resolve_inner=_post_office_resolve,
    description="Give an opponent 2 CARD, then discard any number of CARD and draw up to your hand limit.",
))

POSTAL_PIGEON = register(CardDefinition(
    name="POSTAL_PIGEON", card_type=CardType.TRAVELER, base_cost={"BERRY": 2},
    base_vp=0, num_in_deck=3, is_unique=False, is_construction=False,
    associated_cards=("POST_OFFICE",), play_inner=_postal_pigeon_play,
    resolve_inner=_postal_pigeon_resolve,
    description="Reveal 2 CARD. You may play 1 worth up to 3 VP for free; discard the rest.",
))

INN = register(CardDefinition(
    name="INN", card_type=CardType.DESTINATION, base_cost={"TWIG": 2, "RESIN": 1},
    base_vp=2, num_in_deck=3, is_unique=False, is_construction=True,
    is_open_destination=True, can_play_check_inner=_inn_check,
    play_inner=_inn_play, resolve_inner=_inn_resolve,
    description="Play a CARD from the Meadow for 3 ANY less.",
))

HISTORIAN = register(CardDefinition(
    name="HISTORIAN", card_type=CardType.GOVERNANCE, base_cost={"BERRY": 2},
    base_vp=1, num_in_deck=3, is_unique=True, is_construction=False,
    trigger_inner=_historian_trigger,
    description="After you play a critter or construction, draw 1 CARD.",
))

WANDERER = register(CardDefinition(
    name="WANDERER", card_type=CardType.TRAVELER, base_cost={"BERRY": 2},
    base_vp=1, num_in_deck=3, is_unique=False, is_construction=False,
    resources_to_gain={"CARD": 3}, occupies_space=False,
    description="Draw 3 CARD. Does not take up a space in your city.",
))

HERALD = register(CardDefinition(
    name="HERALD", card_type=CardType.TRAVELER, base_cost={"BERRY": 2},
    base_vp=1, num_in_deck=3, is_unique=False, is_construction=False,
    play_inner=_herald_play, resolve_inner=_herald_resolve,
    description="Choose an opponent; they discard 1 CARD and you draw 1 CARD.",
))


EVERDELL_CARDS: list[CardDefinition] = [
    FARM, HUSBAND, WIFE, TWIG_BARGE, BARGE_TOAD, RESIN_REFINERY, CHIP_SWEEP,
    MINE, MINER_MOLE, GENERAL_STORE, SHOPKEEPER, FAIRGROUNDS, FOOL,
    COURTHOUSE, JUDGE, CRANE, ARCHITECT, CASTLE, KING, EVERTREE, THEATRE, BARD,
    SCHOOL, TEACHER, CHAPEL, SHEPHERD, POST_OFFICE, POSTAL_PIGEON, INN,
    HISTORIAN, WANDERER, HERALD,
]


def build_deck() -> list[str]:
    """Every copy of every card, unshuffled."""
    deck: list[str] = []
    for card in EVERDELL_CARDS:
        deck.extend([card.name] * card.num_in_deck)
    return deck
