"""
Everdell Game Setup - Creates initial game state.

This module handles:
- Building and shuffling the deck (seeded, so a seed reproduces a game)
- Dealing the meadow and starting hands (5, 6, 7, 8 cards in seat order)
- Choosing the forest locations and laying out events
- Pearlbrook: river map, adornments and ambassadors
- Newleaf: the station

The setup follows Everdell base game rules for 2-4 players.
"""

from __future__ import annotations
import logging
import random
import uuid

from ...engine_core.state import (
    MEADOW_SIZE, CardStack, GameOptions, GameState, Player, RiverSpotState,
)
from .cards import build_deck
from .events import BASIC_EVENTS, SPECIAL_EVENTS
from .locations import BASIC_LOCATIONS, FOREST_LOCATIONS, HAVEN, JOURNEY_LOCATIONS
from .pearlbrook import ADORNMENTS, CITIZENS, RIVER_LOCATIONS, RIVER_SPOTS

logger = logging.getLogger(__name__)

STARTING_HAND_SIZES = [5, 6, 7, 8]
ADORNMENTS_PER_PLAYER = 2


def create_game_state(
    player_names: list[str],
    game_options: GameOptions | None = None,
    random_seed: int | None = None,
    game_id: str | None = None,
) -> GameState:
    """
    Set up a new Everdell game.

    Args:
        player_names: Names in seating order (2-4); the first player starts
        game_options: Expansions and undo (defaults to base game with undo)
        random_seed: Seed for deterministic shuffling
        game_id: Identifier to use (a fresh uuid if not provided)

    Returns:
        Initial GameState awaiting the first player's input
    """
    num_players = len(player_names)
    if num_players < 2 or num_players > 4:
        raise ValueError("Everdell supports 2-4 players")

    if random_seed is None:
        random_seed = random.randrange(2**31)
    options = game_options or GameOptions()

    players = [
        Player(player_id=f"player{i + 1}", name=name, player_secret=uuid.uuid4().hex)
        for i, name in enumerate(player_names)
    ]

    state = GameState(
        game_id=game_id or str(uuid.uuid4()),
        game_state_id=1,
        active_player_id=players[0].player_id,
        players=players,
        game_options=options,
        random_seed=random_seed,
    )

    state.deck.cards = build_deck()
    state.deck.shuffle(state.next_rng())

    _deal_meadow(state)
    _deal_hands(state)
    _lay_out_locations(state)
    _lay_out_events(state)

    if options.pearlbrook:
        _setup_pearlbrook(state)
    if options.newleaf:
        state.replenish_station()

    state.add_log(f"Game created with {num_players} players.")
    logger.info("Created game %s with %d players (seed=%d, options=%s)",
                state.game_id, num_players, random_seed, options.to_dict())
    return state


def _deal_meadow(state: GameState) -> None:
    for _ in range(MEADOW_SIZE):
        state.meadow_cards.append(state.deck.draw())


def _deal_hands(state: GameState) -> None:
    for player, hand_size in zip(state.players, STARTING_HAND_SIZES):
        player.draw_cards(state, hand_size)


def _lay_out_locations(state: GameState) -> None:
    forest = [location.name for location in FOREST_LOCATIONS]
    state.next_rng().shuffle(forest)
    num_forest = 3 if state.num_players == 2 else 4

    names = [location.name for location in BASIC_LOCATIONS]
    names.extend(forest[:num_forest])
    names.append(HAVEN.name)
    names.extend(location.name for location in JOURNEY_LOCATIONS)
    state.locations_map = {name: [] for name in names}


def _lay_out_events(state: GameState) -> None:
    state.events_map = {event.name: None for event in BASIC_EVENTS + SPECIAL_EVENTS}


def _setup_pearlbrook(state: GameState) -> None:
    # SHOAL is always face-up; the other spots get 2 citizens and 2 river
    # locations, face-down in random order.
    rng = state.next_rng()
    citizens = [d.name for d in CITIZENS]
    locations = [d.name for d in RIVER_LOCATIONS]
    rng.shuffle(citizens)
    rng.shuffle(locations)
    destinations = citizens[:2] + locations[:2]
    rng.shuffle(destinations)

    river: dict[str, RiverSpotState] = {"SHOAL": RiverSpotState(name="SHOAL", revealed=True)}
    spots = [spot.name for spot in RIVER_SPOTS if spot.name != "SHOAL"]
    for spot, destination in zip(spots, destinations):
        river[spot] = RiverSpotState(name=destination)
    state.river_destination_map = river

    state.adornments_pile = CardStack(name="Adornments", cards=[a.name for a in ADORNMENTS])
    state.adornments_pile.shuffle(state.next_rng())
    for player in state.players:
        player.num_ambassadors = 1
        for _ in range(ADORNMENTS_PER_PLAYER):
            adornment = state.adornments_pile.draw()
            if adornment is not None:
                player.adornments_in_hand.append(adornment)
