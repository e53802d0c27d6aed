"""
Reducer - Applies game inputs to game state.

The reducer is the single point of state mutation.
All state changes must go through apply_input().

Design principles:
- Never mutates its argument: (state, input) -> new state on a deep clone
- Validates before applying; any EngineError discards the clone
- Returns InputResult with success/failure
- Drives follow-up resolution: auto-advance, season preparation,
  governance triggers and turn hand-off once the pending queue drains
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any

from .action import (
    ContextType, FOLLOWUP_INPUT_TYPES, TOP_LEVEL_INPUT_TYPES,
    GameInput, InputResult, InputType, PendingInput,
)
from .catalog import (
    CardType, get_adornment, get_card, get_context_entity, get_event, get_location,
    get_river_spot,
)
from .effect_resolver import build_auto_input, validate_followup
from .errors import (
    EngineError, GameOverError, IllegalActionError, InvariantViolation,
    MalformedInputError, NotYourTurnError,
)
from .game_log import MAX_LOG_ENTRIES
from .state import (
    MAX_CITY_SIZE, MAX_HAND_SIZE, NEXT_SEASON, WORKERS_FOR_SEASON,
    GameState, Player, PlayerStatus, Season,
)

logger = logging.getLogger(__name__)


@dataclass
class Reducer:
    """
    Reducer applies inputs to game state.

    Stateless - all state is in GameState. Content rules live in the catalog.
    """

    def apply(self, state: GameState, game_input: GameInput) -> InputResult:
        """
        Apply an input to the game state.

        Returns InputResult with the new state or a typed error. Internal
        inconsistencies are not converted: InvariantViolation propagates.
        """
        try:
            new_state = self._apply(state, game_input)
        except InvariantViolation:
            logger.exception("Invariant violated in game %s", state.game_id)
            raise
        except EngineError as e:
            logger.debug(
                "Rejected %s from %s in game %s: %s",
                game_input.input_type.value, game_input.player_id, state.game_id, e.message,
            )
            return InputResult.failure(e.message, error_code=e.code.value)
        except Exception as e:
            logger.exception("Unexpected error in game %s", state.game_id)
            raise InvariantViolation(f"Unexpected error while resolving input: {e}") from e

        logger.info(
            "Game %s: %s applied %s (state %d)",
            state.game_id, game_input.player_id, game_input.input_type.value,
            new_state.game_state_id,
        )
        return InputResult.success_with_state(new_state, changes=_new_log_lines(state, new_state))

    def _apply(self, state: GameState, game_input: GameInput) -> GameState:
        if state.is_game_over:
            raise GameOverError("Game is over")
        if not game_input.player_id:
            raise MalformedInputError("Input must name the submitting player")
        state.get_player(game_input.player_id)

        if game_input.input_type == InputType.UNDO:
            return self._handle_undo(state, game_input)

        if state.pending_inputs:
            normalized = self._validate_followup(state, game_input)
            working = state.clone()
            working.game_state_id += 1
            self._answer_head(working, game_input, normalized)
        else:
            self._validate_top_level(state, game_input)
            working = state.clone()
            working.game_state_id += 1
            self._take_checkpoint(state, working, game_input)
            handler = self._get_handler(game_input.input_type)
            handler(working, game_input)

        self._settle(working)
        self._check_invariants(working)
        return working

    # ========================================================================
    # Validation
    # ========================================================================

    def _validate_followup(self, state: GameState, game_input: GameInput) -> dict[str, Any]:
        head = state.pending_inputs[0]
        if game_input.player_id != head.player_id:
            waiting = state.get_player(head.player_id)
            raise NotYourTurnError(f"Waiting for {waiting.name} to respond: {head.label}")
        if game_input.input_type in TOP_LEVEL_INPUT_TYPES:
            raise IllegalActionError(f"Must respond to the pending input first: {head.label}")
        if (game_input.input_type != head.input_type
                or game_input.context_type != head.context_type
                or game_input.context_name != head.context_name):
            raise IllegalActionError(
                f"Expected {head.input_type.value} for {head.context_name}, "
                f"got {game_input.input_type.value}"
            )
        if game_input.input_id is not None and game_input.input_id != head.input_id:
            raise IllegalActionError(f"Input {game_input.input_id} is not the pending input")
        return validate_followup(state, head, game_input)

    def _validate_top_level(self, state: GameState, game_input: GameInput) -> None:
        if game_input.player_id != state.active_player_id:
            raise NotYourTurnError(f"It is {state.active_player.name}'s turn")
        if game_input.input_type in FOLLOWUP_INPUT_TYPES:
            raise IllegalActionError("There is no pending input to respond to")
        reason = self.can_play_check(state, game_input)
        if reason:
            raise IllegalActionError(reason)

    def can_play_check(self, state: GameState, game_input: GameInput) -> str | None:
        """Why a top-level input is not legal right now, or None."""
        player = state.get_player(game_input.player_id)
        input_type = game_input.input_type

        if input_type == InputType.PLAY_CARD:
            return get_card(_required(game_input, "card")).can_play_check(state, game_input)
        if input_type == InputType.PLACE_WORKER:
            return get_location(_required(game_input, "location")).can_play_check(state, game_input)
        if input_type == InputType.VISIT_DESTINATION_CARD:
            _, played_card = state.find_played_card(game_input.option("card_uid"))
            return get_card(played_card.card_name).can_play_check(state, game_input)
        if input_type == InputType.CLAIM_EVENT:
            return get_event(_required(game_input, "event")).can_play_check(state, game_input)
        if input_type == InputType.PLACE_AMBASSADOR:
            if not state.game_options.pearlbrook:
                return "The river is not part of this game"
            return get_river_spot(_required(game_input, "spot")).can_play_check(state, game_input)
        if input_type == InputType.PLAY_ADORNMENT:
            if not state.game_options.pearlbrook:
                return "Adornments are not part of this game"
            return get_adornment(_required(game_input, "adornment")).can_play_check(state, game_input)
        if input_type == InputType.RESERVE_CARD:
            if not state.game_options.newleaf:
                return "Reserving cards is not part of this game"
            if player.has_used_reservation:
                return "You have already reserved a card this game"
            card = _required(game_input, "card")
            if card not in state.meadow_cards:
                return f"{card} is not in the Meadow"
            return None
        if input_type == InputType.PREPARE_FOR_SEASON:
            if player.current_season == Season.AUTUMN:
                return "Cannot prepare for season in AUTUMN"
            if player.available_workers > 0:
                return "Cannot prepare for season while you still have workers to place"
            return None
        if input_type == InputType.GAME_END:
            if player.current_season != Season.AUTUMN:
                return "Cannot end the game before AUTUMN"
            return None
        return f"Unhandled input type: {input_type.value}"

    # ========================================================================
    # Top-level handlers
    # ========================================================================

    def _get_handler(self, input_type: InputType):
        """Get the handler function for an input type."""
        handlers = {
            InputType.PLAY_CARD: self._handle_play_card,
            InputType.PLACE_WORKER: self._handle_place_worker,
            InputType.VISIT_DESTINATION_CARD: self._handle_visit_destination_card,
            InputType.CLAIM_EVENT: self._handle_claim_event,
            InputType.PLACE_AMBASSADOR: self._handle_place_ambassador,
            InputType.PLAY_ADORNMENT: self._handle_play_adornment,
            InputType.RESERVE_CARD: self._handle_reserve_card,
            InputType.PREPARE_FOR_SEASON: self._handle_prepare_for_season,
            InputType.GAME_END: self._handle_game_end,
        }
        return handlers[input_type]

    def _handle_play_card(self, state: GameState, game_input: GameInput) -> None:
        get_card(game_input.option("card")).play(state, game_input)

    def _handle_place_worker(self, state: GameState, game_input: GameInput) -> None:
        get_location(game_input.option("location")).play(state, game_input)

    def _handle_visit_destination_card(self, state: GameState, game_input: GameInput) -> None:
        _, played_card = state.find_played_card(game_input.option("card_uid"))
        get_card(played_card.card_name).play(state, game_input)

    def _handle_claim_event(self, state: GameState, game_input: GameInput) -> None:
        get_event(game_input.option("event")).play(state, game_input)

    def _handle_place_ambassador(self, state: GameState, game_input: GameInput) -> None:
        get_river_spot(game_input.option("spot")).play(state, game_input)

    def _handle_play_adornment(self, state: GameState, game_input: GameInput) -> None:
        get_adornment(game_input.option("adornment")).play(state, game_input)

    def _handle_reserve_card(self, state: GameState, game_input: GameInput) -> None:
        player = state.get_player(game_input.player_id)
        card = game_input.option("card")
        state.remove_card_from_meadow(card)
        if player.reserved_card is not None:
            raise InvariantViolation(f"{player.name} already holds a reserved card")
        player.reserved_card = card
        player.has_used_reservation = True
        state.add_log(player, " reserved ", get_card(card).entity_part(), " from the Meadow.")

    def _handle_prepare_for_season(self, state: GameState, game_input: GameInput) -> None:
        player = state.get_player(game_input.player_id)
        player.status = PlayerStatus.PREPARING_FOR_SEASON
        state.add_log(player, " took the prepare for season action.")

    def _handle_game_end(self, state: GameState, game_input: GameInput) -> None:
        player = state.get_player(game_input.player_id)
        player.status = PlayerStatus.GAME_ENDED
        state.add_log(player, " took the game end action.")

    # ========================================================================
    # Follow-ups
    # ========================================================================

    def _answer_head(self, state: GameState, game_input: GameInput, normalized: dict[str, Any]) -> None:
        head = state.pending_inputs.pop(0)
        effective = GameInput(
            input_type=head.input_type,
            player_id=head.player_id,
            client_options=normalized,
            context_type=head.context_type,
            context_name=head.context_name,
            input_id=head.input_id,
            is_auto_advanced=game_input.is_auto_advanced,
            pending=head,
        )
        if head.context_type == ContextType.SEASON:
            self._resolve_meadow_pick(state, effective)
        else:
            get_context_entity(head.context_type, head.context_name).play(state, effective)

    def _resolve_meadow_pick(self, state: GameState, game_input: GameInput) -> None:
        player = state.get_player(game_input.player_id)
        selected = game_input.option("selected_cards")
        for card in selected:
            state.remove_card_from_meadow(card)
            player.add_card_to_hand(state, card)
        state.add_log(player, f" selected {', '.join(selected) or 'no cards'} from the Meadow.")

    # ========================================================================
    # Settling: auto-advance, seasons, triggers, turn hand-off
    # ========================================================================

    def _settle(self, state: GameState) -> None:
        while True:
            if state.pending_inputs:
                head = state.pending_inputs[0]
                auto_input = build_auto_input(state, head)
                if auto_input is None:
                    return
                normalized = validate_followup(state, head, auto_input)
                self._answer_head(state, auto_input, normalized)
                continue

            if state.is_game_over:
                self._handle_game_over(state)
                return

            state.replenish_meadow()
            state.replenish_station()

            player = state.active_player
            if player.status == PlayerStatus.PREPARING_FOR_SEASON:
                self._prepare_for_season(state, player)
                continue
            if state.played_cards_this_turn:
                self._fire_played_card_triggers(state, player)
                continue

            self._end_turn(state)
            return

    def _prepare_for_season(self, state: GameState, player: Player) -> None:
        player.recall_workers(state)
        season = NEXT_SEASON[player.current_season]
        player.current_season = season
        player.num_workers = WORKERS_FOR_SEASON[season]
        player.status = PlayerStatus.DURING_SEASON
        state.add_log(player, f" is now in {season.value}.")
        logger.info("Game %s: %s moved to %s", state.game_id, player.player_id, season.value)

        if season in (Season.SPRING, Season.AUTUMN):
            self._activate_production(state, player)
        else:
            num = min(2, player.hand_room, len(state.meadow_cards))
            if num > 0:
                state.push_pending(
                    InputType.SELECT_CARDS,
                    player.player_id,
                    f"Select {num} CARD from the Meadow to keep",
                    ContextType.SEASON,
                    season.value,
                    prev_input_type=InputType.PREPARE_FOR_SEASON,
                    options=list(state.meadow_cards),
                    min_choices=num,
                    max_choices=num,
                )

    def _activate_production(self, state: GameState, player: Player) -> None:
        prep_input = GameInput.prepare_for_season(player.player_id)
        production = player.get_played_cards_by_type(CardType.PRODUCTION)
        if production:
            state.add_log(player, f" activated {len(production)} PRODUCTION cards.")
        for played_card in production:
            get_card(played_card.card_name).production_activate(state, prep_input, player, played_card)

    def _fire_played_card_triggers(self, state: GameState, player: Player) -> None:
        played = state.played_cards_this_turn
        state.played_cards_this_turn = []
        for idx, card_name in enumerate(played):
            for played_card in list(player.played_cards):
                definition = get_card(played_card.card_name)
                if definition.trigger_inner is None:
                    continue
                # Only cards already in the city when ``card_name`` was played react to it.
                if played_card.card_name in played[idx:]:
                    continue
                definition.trigger_inner(state, player, card_name)

    def _end_turn(self, state: GameState) -> None:
        previous = state.active_player_id
        next_player = state.next_player()
        if next_player is None:
            raise InvariantViolation("No player is left to take a turn")
        if next_player.player_id != previous:
            logger.debug("Game %s: turn passes to %s", state.game_id, next_player.player_id)

    def _handle_game_over(self, state: GameState) -> None:
        state.add_log("Game over")
        for player in state.players:
            state.add_log(player, f" has {player.get_points(state)} points.")
        logger.info("Game %s is over: %s", state.game_id, state.get_scores())

    # ========================================================================
    # Undo
    # ========================================================================

    def _take_checkpoint(self, state: GameState, working: GameState, game_input: GameInput) -> None:
        if not state.game_options.allow_undo:
            working.undo_snapshot = None
            working.undo_player_id = None
            return
        snapshot = state.to_dict(include_private=True)
        snapshot["undo_snapshot"] = None
        snapshot["undo_player_id"] = None
        working.undo_snapshot = snapshot
        working.undo_player_id = game_input.player_id

    def _handle_undo(self, state: GameState, game_input: GameInput) -> GameState:
        if state.undo_snapshot is None:
            raise IllegalActionError("There is nothing to undo")
        if game_input.player_id != state.undo_player_id:
            raise NotYourTurnError("Only the player who took the last action can undo it")
        restored = GameState.from_dict(state.undo_snapshot)
        restored.game_state_id = state.game_state_id + 1
        restored.undo_snapshot = None
        restored.undo_player_id = None
        return restored

    # ========================================================================
    # Invariants
    # ========================================================================

    def _check_invariants(self, state: GameState) -> None:
        if not state.has_player(state.active_player_id):
            raise InvariantViolation(f"Active player {state.active_player_id!r} does not exist")
        for player in state.players:
            for resource, count in player.resources.items():
                if count < 0:
                    raise InvariantViolation(f"{player.name} has {count} {resource}")
            if len(player.cards_in_hand) > MAX_HAND_SIZE:
                raise InvariantViolation(f"{player.name} holds {len(player.cards_in_hand)} cards")
            if player.num_occupied_spaces() > MAX_CITY_SIZE:
                raise InvariantViolation(f"{player.name}'s city is over capacity")
            if player.available_workers < 0:
                raise InvariantViolation(f"{player.name} placed more workers than they have")
        for pending in state.pending_inputs:
            _check_pending(state, pending)


def _check_pending(state: GameState, pending: PendingInput) -> None:
    if not state.has_player(pending.player_id):
        raise InvariantViolation(f"Pending input targets unknown player {pending.player_id!r}")
    if pending.context_type != ContextType.SEASON:
        try:
            get_context_entity(pending.context_type, pending.context_name)
        except EngineError:
            raise InvariantViolation(f"Pending input has unknown context {pending.context_name!r}")


def _required(game_input: GameInput, key: str) -> str:
    value = game_input.option(key)
    if not isinstance(value, str) or not value:
        raise MalformedInputError(f"{game_input.input_type.value} requires '{key}'")
    return value


def _new_log_lines(old: GameState, new: GameState) -> list[str]:
    start = len(old.game_log)
    if len(new.game_log) < start:
        # The log was trimmed while resolving.
        start -= MAX_LOG_ENTRIES // 2
    return [entry.plain_text() for entry in new.game_log[max(start, 0):]]


def apply_input(state: GameState, game_input: GameInput) -> InputResult:
    """
    Convenience function to apply an input.

    Creates a Reducer and applies the input.
    """
    return Reducer().apply(state, game_input)
