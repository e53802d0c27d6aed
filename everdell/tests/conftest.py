"""
Pytest fixtures for Everdell tests.

Most tests start from a seeded game and then overwrite the parts of the state
they care about (hands, resources, cities, the meadow) so that the outcome
does not depend on the shuffle.
"""

import pytest

from ..engine_core.action import GameInput
from ..engine_core.reducer import Reducer
from ..engine_core.state import GameOptions, GameState, PlayedCard
from ..games.everdell.setup import create_game_state
from ..session import GameManager, InMemoryGameStore

ALICE = "player1"
BOB = "player2"


@pytest.fixture
def reducer() -> Reducer:
    return Reducer()


@pytest.fixture
def two_player_state() -> GameState:
    """A fresh 2-player base game. Alice (player1) is active."""
    return create_game_state(["Alice", "Bob"], random_seed=42, game_id="test_game")


@pytest.fixture
def four_player_state() -> GameState:
    return create_game_state(
        ["Alice", "Bob", "Carol", "Dave"], random_seed=42, game_id="test_game_4p"
    )


@pytest.fixture
def pearlbrook_state() -> GameState:
    """A 2-player game with the river and adornments."""
    return create_game_state(
        ["Alice", "Bob"], GameOptions(pearlbrook=True), random_seed=7, game_id="pearl_game"
    )


@pytest.fixture
def newleaf_state() -> GameState:
    return create_game_state(
        ["Alice", "Bob"], GameOptions(newleaf=True), random_seed=11, game_id="leaf_game"
    )


@pytest.fixture
def manager() -> GameManager:
    return GameManager(store=InMemoryGameStore())


# ============================================================================
# Helpers
# ============================================================================

def set_hand(state: GameState, player_id: str, cards: list[str]) -> None:
    state.get_player(player_id).cards_in_hand = list(cards)


def give(state: GameState, player_id: str, **resources: int) -> None:
    player = state.get_player(player_id)
    for resource, count in resources.items():
        player.resources[resource] = player.resources.get(resource, 0) + count


def build_city(state: GameState, player_id: str, *cards: str) -> list[PlayedCard]:
    player = state.get_player(player_id)
    return [player.add_to_city(state, card) for card in cards]


def apply_ok(reducer: Reducer, state: GameState, game_input: GameInput) -> GameState:
    """Apply an input that must be accepted and return the new state."""
    result = reducer.apply(state, game_input)
    assert result.success, result.error
    return result.new_state


def answer_head(reducer: Reducer, state: GameState, **client_options) -> GameState:
    """Answer the head of the pending queue for whoever it targets."""
    head = state.pending_inputs[0]
    return apply_ok(reducer, state, GameInput.answer(head, **client_options))
