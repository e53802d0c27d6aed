"""
Action Generator - Generates the legal inputs for a viewer.

The action generator is used by:
1. The service layer, to return the next legal inputs with every projection
2. UI to show available actions
3. Tests, to check that the engine agrees with what it offers

Design: Generates GameInput templates, not just input types.
Top-level templates name their target (card and source, location, event,
...) and leave the payment to the client. Follow-up templates carry the
PendingInput they answer.
"""

from __future__ import annotations
from dataclasses import dataclass

from .action import CardSource, GameInput
from .catalog import get_adornment, get_card, get_event, get_location, get_river_spot
from .errors import EngineError
from .reducer import Reducer
from .state import GameState, PlayedCard, Player


@dataclass
class ActionGenerator:
    """
    Generates legal inputs for one player in the current game state.

    With no ``player_id`` the generator answers for whoever the game is
    waiting on.
    """
    state: GameState
    player_id: str | None = None

    def __post_init__(self) -> None:
        if self.player_id is None:
            self.player_id = self._waiting_on()

    def _waiting_on(self) -> str | None:
        if self.state.is_game_over:
            return None
        if self.state.pending_inputs:
            return self.state.pending_inputs[0].player_id
        return self.state.active_player_id

    @property
    def player(self) -> Player:
        return self.state.get_player(self.player_id)

    def legal_inputs(self) -> list[GameInput]:
        """
        Generate every input the player could submit right now.

        Returns an empty list when the game is over or when the player is
        waiting on someone else.
        """
        if self.state.is_game_over or self.player_id is None:
            return []

        inputs: list[GameInput] = []

        if self.state.pending_inputs:
            head = self.state.pending_inputs[0]
            if head.player_id == self.player_id:
                template = GameInput.answer(head)
                template.pending = head
                inputs.append(template)
            inputs.extend(self._undo_inputs())
            return inputs

        if self.state.active_player_id != self.player_id:
            return self._undo_inputs()

        pid = self.player_id
        inputs.extend(GameInput.place_worker(pid, name) for name in self.playable_locations())
        inputs.extend(
            GameInput.visit_destination_card(pid, pc.uid)
            for pc in self.visitable_destination_cards()
        )
        inputs.extend(GameInput.claim_event(pid, name) for name in self.claimable_events())
        inputs.extend(GameInput.place_ambassador(pid, spot) for spot in self.ambassador_options())
        inputs.extend(
            GameInput.play_card(pid, card, source) for card, source in self.playable_cards()
        )
        inputs.extend(GameInput.play_adornment(pid, name) for name in self.playable_adornments())
        inputs.extend(GameInput.reserve_card(pid, card) for card in self.reservable_cards())

        if self._is_legal(GameInput.prepare_for_season(pid)):
            inputs.append(GameInput.prepare_for_season(pid))
        if self._is_legal(GameInput.game_end(pid)):
            inputs.append(GameInput.game_end(pid))

        inputs.extend(self._undo_inputs())
        return inputs

    # ------------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------------

    def playable_locations(self) -> list[str]:
        return [
            name for name in self.state.locations_map
            if get_location(name).can_play(self.state, GameInput.place_worker(self.player_id, name))
        ]

    def claimable_events(self) -> list[str]:
        return [
            name for name in self.state.events_map
            if get_event(name).can_play(self.state, GameInput.claim_event(self.player_id, name))
        ]

    def playable_cards(self) -> list[tuple[str, CardSource]]:
        """
        Cards the player could play now, with where they come from.

        Affordability counts associated constructions, CRANE, JUDGE and the
        reservation discount.
        """
        player = self.player
        candidates: list[tuple[str, CardSource]] = []
        candidates.extend((card, CardSource.HAND) for card in dict.fromkeys(player.cards_in_hand))
        candidates.extend((card, CardSource.MEADOW) for card in dict.fromkeys(self.state.meadow_cards))
        candidates.extend((card, CardSource.STATION) for card in dict.fromkeys(self.state.station_cards))
        if player.reserved_card is not None:
            candidates.append((player.reserved_card, CardSource.RESERVED))

        playable = []
        for card, source in candidates:
            definition = get_card(card)
            if definition.can_play_ignore_cost_and_source(self.state, player):
                continue
            if player.can_afford_card(definition, source):
                playable.append((card, source))
        return playable

    def visitable_destination_cards(self) -> list[PlayedCard]:
        visitable = []
        for other in self.state.players:
            for played_card in other.played_cards:
                definition = get_card(played_card.card_name)
                if not definition.is_destination:
                    continue
                game_input = GameInput.visit_destination_card(self.player_id, played_card.uid)
                if self._is_legal(game_input):
                    visitable.append(played_card)
        return visitable

    def ambassador_options(self) -> list[str]:
        if self.state.river_destination_map is None:
            return []
        return [
            spot for spot in self.state.river_destination_map
            if get_river_spot(spot).can_play(
                self.state, GameInput.place_ambassador(self.player_id, spot)
            )
        ]

    def playable_adornments(self) -> list[str]:
        if not self.state.game_options.pearlbrook:
            return []
        return [
            name for name in dict.fromkeys(self.player.adornments_in_hand)
            if get_adornment(name).can_play(self.state, GameInput.play_adornment(self.player_id, name))
        ]

    def reservable_cards(self) -> list[str]:
        return [
            card for card in dict.fromkeys(self.state.meadow_cards)
            if self._is_legal(GameInput.reserve_card(self.player_id, card))
        ]

    # ------------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------------

    def _is_legal(self, game_input: GameInput) -> bool:
        try:
            return Reducer().can_play_check(self.state, game_input) is None
        except EngineError:
            return False

    def _undo_inputs(self) -> list[GameInput]:
        if self.state.undo_snapshot is not None and self.state.undo_player_id == self.player_id:
            return [GameInput.undo(self.player_id)]
        return []


def legal_inputs(state: GameState, player_id: str | None = None) -> list[GameInput]:
    """
    Convenience function to list legal inputs.

    Creates an ActionGenerator and generates inputs.
    """
    return ActionGenerator(state, player_id).legal_inputs()
