"""
Tests for the reducer (state transitions).

Tests:
- Input application
- State mutation correctness
- Validation and error codes
- Seasons, game end and invariant failures
"""

import pytest

from ..engine_core.action import CardSource, ContextType, GameInput, InputType
from ..engine_core.errors import ErrorCode, InvariantViolation
from ..engine_core.reducer import Reducer, apply_input
from ..engine_core.state import PlayerStatus, Season
from .conftest import ALICE, BOB, answer_head, apply_ok, build_city, give, set_hand


class TestPlaceWorker:
    """Tests for placing workers on locations."""

    def test_gain_resources(self, reducer, two_player_state):
        """Placing a worker gains the location's resources."""
        state = apply_ok(reducer, two_player_state,
                         GameInput.place_worker(ALICE, "BASIC_THREE_TWIGS"))

        alice = state.get_player(ALICE)
        assert alice.get_num_resource("TWIG") == 3
        assert alice.available_workers == 1
        assert state.locations_map["BASIC_THREE_TWIGS"] == [ALICE]

    def test_turn_passes(self, reducer, two_player_state):
        state = apply_ok(reducer, two_player_state,
                         GameInput.place_worker(ALICE, "BASIC_THREE_TWIGS"))

        assert state.active_player_id == BOB
        assert state.game_state_id == two_player_state.game_state_id + 1

    def test_original_state_untouched(self, reducer, two_player_state):
        """The reducer works on a copy."""
        before = two_player_state.to_dict()
        reducer.apply(two_player_state, GameInput.place_worker(ALICE, "BASIC_THREE_TWIGS"))
        assert two_player_state.to_dict() == before

    def test_draws_cards(self, reducer, two_player_state):
        state = apply_ok(reducer, two_player_state,
                         GameInput.place_worker(ALICE, "BASIC_TWO_CARDS_AND_ONE_VP"))

        alice = state.get_player(ALICE)
        assert alice.num_cards_in_hand == 7
        assert alice.get_num_resource("VP") == 1

    def test_log_lines_reported(self, reducer, two_player_state):
        result = reducer.apply(two_player_state,
                               GameInput.place_worker(ALICE, "BASIC_THREE_TWIGS"))
        assert any("placed a worker on BASIC_THREE_TWIGS" in line for line in result.state_changes)

    def test_exclusive_location_occupied(self, reducer, two_player_state):
        state = apply_ok(reducer, two_player_state,
                         GameInput.place_worker(ALICE, "BASIC_THREE_TWIGS"))

        result = reducer.apply(state, GameInput.place_worker(BOB, "BASIC_THREE_TWIGS"))

        assert not result.success
        assert result.error_code == ErrorCode.ILLEGAL_ACTION.value
        assert "occupied" in result.error

    def test_unlimited_location_shared(self, reducer, two_player_state):
        state = apply_ok(reducer, two_player_state,
                         GameInput.place_worker(ALICE, "BASIC_ONE_BERRY_AND_ONE_CARD"))
        state = apply_ok(reducer, state,
                         GameInput.place_worker(BOB, "BASIC_ONE_BERRY_AND_ONE_CARD"))

        assert state.locations_map["BASIC_ONE_BERRY_AND_ONE_CARD"] == [ALICE, BOB]

    def test_wrong_player(self, reducer, two_player_state):
        """Bob cannot act on Alice's turn."""
        result = reducer.apply(two_player_state, GameInput.place_worker(BOB, "BASIC_THREE_TWIGS"))

        assert not result.success
        assert result.error_code == ErrorCode.NOT_YOUR_TURN.value

    def test_unknown_location(self, reducer, two_player_state):
        result = reducer.apply(two_player_state, GameInput.place_worker(ALICE, "MOUNTAIN"))

        assert not result.success
        assert result.error_code == ErrorCode.NOT_FOUND.value

    def test_missing_location(self, reducer, two_player_state):
        result = reducer.apply(two_player_state, GameInput(InputType.PLACE_WORKER, ALICE))

        assert not result.success
        assert result.error_code == ErrorCode.MALFORMED_INPUT.value

    def test_no_workers_left(self, reducer, two_player_state):
        two_player_state.get_player(ALICE).num_workers = 0

        result = reducer.apply(two_player_state,
                               GameInput.place_worker(ALICE, "BASIC_ONE_BERRY_AND_ONE_CARD"))

        assert not result.success
        assert "workers" in result.error

    def test_followup_type_as_top_level(self, reducer, two_player_state):
        result = reducer.apply(two_player_state,
                               GameInput(InputType.SELECT_CARDS, ALICE, {"selected_cards": []}))

        assert not result.success
        assert "no pending input" in result.error


class TestPlayCard:
    """Tests for playing cards into the city."""

    def test_play_from_hand(self, reducer, two_player_state):
        """FARM costs 2 TWIG 1 RESIN and produces 1 BERRY when played."""
        set_hand(two_player_state, ALICE, ["FARM"])
        give(two_player_state, ALICE, TWIG=2, RESIN=1)

        state = apply_ok(reducer, two_player_state,
                         GameInput.play_card(ALICE, "FARM", resources={"TWIG": 2, "RESIN": 1}))

        alice = state.get_player(ALICE)
        assert alice.cards_in_hand == []
        assert [pc.card_name for pc in alice.played_cards] == ["FARM"]
        assert alice.get_num_resource("TWIG") == 0
        assert alice.get_num_resource("RESIN") == 0
        assert alice.get_num_resource("BERRY") == 1

    def test_played_card_uids_unique(self, reducer, two_player_state):
        set_hand(two_player_state, ALICE, ["FARM", "FARM"])
        give(two_player_state, ALICE, TWIG=4, RESIN=2)
        state = apply_ok(reducer, two_player_state,
                         GameInput.play_card(ALICE, "FARM", resources={"TWIG": 2, "RESIN": 1}))
        state.active_player_id = ALICE
        state = apply_ok(reducer, state,
                         GameInput.play_card(ALICE, "FARM", resources={"TWIG": 2, "RESIN": 1}))

        uids = [pc.uid for pc in state.get_player(ALICE).played_cards]
        assert len(set(uids)) == 2

    def test_play_from_meadow(self, reducer, two_player_state):
        two_player_state.meadow_cards[0] = "FARM"
        give(two_player_state, ALICE, TWIG=2, RESIN=1)

        state = apply_ok(reducer, two_player_state, GameInput.play_card(
            ALICE, "FARM", CardSource.MEADOW, resources={"TWIG": 2, "RESIN": 1}))

        assert state.get_player(ALICE).has_card("FARM")
        assert len(state.meadow_cards) == 8

    def test_not_in_hand(self, reducer, two_player_state):
        set_hand(two_player_state, ALICE, ["MINE"])
        give(two_player_state, ALICE, TWIG=2, RESIN=1)

        result = reducer.apply(two_player_state,
                               GameInput.play_card(ALICE, "FARM", resources={"TWIG": 2, "RESIN": 1}))

        assert not result.success
        assert "not in your hand" in result.error

    def test_overpay(self, reducer, two_player_state):
        set_hand(two_player_state, ALICE, ["FARM"])
        give(two_player_state, ALICE, TWIG=3, RESIN=1)

        result = reducer.apply(two_player_state,
                               GameInput.play_card(ALICE, "FARM", resources={"TWIG": 3, "RESIN": 1}))

        assert not result.success
        assert result.error == "Cannot overpay for cards"

    def test_insufficient_payment(self, reducer, two_player_state):
        set_hand(two_player_state, ALICE, ["FARM"])
        give(two_player_state, ALICE, TWIG=2, RESIN=1)

        result = reducer.apply(two_player_state,
                               GameInput.play_card(ALICE, "FARM", resources={"TWIG": 1, "RESIN": 1}))

        assert not result.success
        assert result.error == "Paid resources is insufficient"

    def test_paying_with_resources_not_held(self, reducer, two_player_state):
        set_hand(two_player_state, ALICE, ["FARM"])

        result = reducer.apply(two_player_state,
                               GameInput.play_card(ALICE, "FARM", resources={"TWIG": 2, "RESIN": 1}))

        assert not result.success
        assert "do not have the resources" in result.error

    def test_unique_card_twice(self, reducer, two_player_state):
        build_city(two_player_state, ALICE, "SHOPKEEPER")
        set_hand(two_player_state, ALICE, ["SHOPKEEPER"])
        give(two_player_state, ALICE, BERRY=2)

        result = reducer.apply(two_player_state,
                               GameInput.play_card(ALICE, "SHOPKEEPER", resources={"BERRY": 2}))

        assert not result.success
        assert "Unable to add SHOPKEEPER" in result.error

    def test_associated_construction(self, reducer, two_player_state):
        """A critter can be played for free by occupying its construction."""
        build_city(two_player_state, ALICE, "FARM")
        set_hand(two_player_state, ALICE, ["HUSBAND", "HUSBAND"])

        state = apply_ok(reducer, two_player_state,
                         GameInput.play_card(ALICE, "HUSBAND", use_associated_card=True))

        alice = state.get_player(ALICE)
        farm = alice.get_played_cards_by_name("FARM")[0]
        assert farm.used_for_critter
        assert alice.has_card("HUSBAND")

        state.active_player_id = ALICE
        result = reducer.apply(state, GameInput.play_card(ALICE, "HUSBAND", use_associated_card=True))
        assert not result.success
        assert "No unoccupied associated construction" in result.error

    def test_city_full(self, reducer, two_player_state):
        build_city(two_player_state, ALICE, *(["FARM"] * 15))
        set_hand(two_player_state, ALICE, ["FARM", "WANDERER"])
        give(two_player_state, ALICE, TWIG=2, RESIN=1, BERRY=2)

        result = reducer.apply(two_player_state,
                               GameInput.play_card(ALICE, "FARM", resources={"TWIG": 2, "RESIN": 1}))
        assert not result.success
        assert "Unable to add FARM" in result.error

        # WANDERER does not take up a space.
        state = apply_ok(reducer, two_player_state,
                         GameInput.play_card(ALICE, "WANDERER", resources={"BERRY": 2}))
        assert state.get_player(ALICE).has_card("WANDERER")

    def test_crane_discount(self, reducer, two_player_state):
        build_city(two_player_state, ALICE, "CRANE")
        set_hand(two_player_state, ALICE, ["CASTLE"])
        give(two_player_state, ALICE, TWIG=2, RESIN=3)

        state = apply_ok(reducer, two_player_state, GameInput.play_card(
            ALICE, "CASTLE", resources={"TWIG": 2, "RESIN": 3}, card_to_use="CRANE"))

        alice = state.get_player(ALICE)
        assert alice.has_card("CASTLE")
        assert not alice.has_card("CRANE")
        assert "CRANE" in state.discard_pile.cards

    def test_crane_only_for_constructions(self, reducer, two_player_state):
        build_city(two_player_state, ALICE, "CRANE")
        set_hand(two_player_state, ALICE, ["KING"])
        give(two_player_state, ALICE, BERRY=3)

        result = reducer.apply(two_player_state, GameInput.play_card(
            ALICE, "KING", resources={"BERRY": 3}, card_to_use="CRANE"))

        assert not result.success
        assert "constructions" in result.error

    def test_judge_substitution(self, reducer, two_player_state):
        build_city(two_player_state, ALICE, "JUDGE")
        set_hand(two_player_state, ALICE, ["FARM"])
        give(two_player_state, ALICE, TWIG=2, PEBBLE=1)

        state = apply_ok(reducer, two_player_state,
                         GameInput.play_card(ALICE, "FARM", resources={"TWIG": 2, "PEBBLE": 1}))

        assert state.get_player(ALICE).has_card("FARM")

    def test_bad_source(self, reducer, two_player_state):
        set_hand(two_player_state, ALICE, ["FARM"])
        game_input = GameInput.play_card(ALICE, "FARM")
        game_input.client_options["source"] = "POCKET"

        result = reducer.apply(two_player_state, game_input)

        assert not result.success
        assert result.error_code == ErrorCode.MALFORMED_INPUT.value


class TestGovernanceTriggers:
    """Cards already in the city react to cards played after them."""

    def test_shopkeeper_after_critter(self, reducer, two_player_state):
        build_city(two_player_state, ALICE, "SHOPKEEPER")
        set_hand(two_player_state, ALICE, ["HUSBAND"])
        give(two_player_state, ALICE, BERRY=2)

        state = apply_ok(reducer, two_player_state,
                         GameInput.play_card(ALICE, "HUSBAND", resources={"BERRY": 2}))

        assert state.get_player(ALICE).get_num_resource("BERRY") == 1

    def test_shopkeeper_not_triggered_by_itself(self, reducer, two_player_state):
        set_hand(two_player_state, ALICE, ["SHOPKEEPER"])
        give(two_player_state, ALICE, BERRY=2)

        state = apply_ok(reducer, two_player_state,
                         GameInput.play_card(ALICE, "SHOPKEEPER", resources={"BERRY": 2}))

        assert state.get_player(ALICE).get_num_resource("BERRY") == 0

    def test_historian_draws(self, reducer, two_player_state):
        build_city(two_player_state, ALICE, "HISTORIAN")
        set_hand(two_player_state, ALICE, ["FARM"])
        give(two_player_state, ALICE, TWIG=2, RESIN=1)

        state = apply_ok(reducer, two_player_state,
                         GameInput.play_card(ALICE, "FARM", resources={"TWIG": 2, "RESIN": 1}))

        assert state.get_player(ALICE).num_cards_in_hand == 1

    def test_courthouse_asks_for_a_resource(self, reducer, two_player_state):
        """The turn does not pass until the follow-up is answered."""
        build_city(two_player_state, ALICE, "COURTHOUSE")
        set_hand(two_player_state, ALICE, ["FARM"])
        give(two_player_state, ALICE, TWIG=2, RESIN=1)

        state = apply_ok(reducer, two_player_state,
                         GameInput.play_card(ALICE, "FARM", resources={"TWIG": 2, "RESIN": 1}))

        assert state.active_player_id == ALICE
        head = state.pending_inputs[0]
        assert head.input_type == InputType.SELECT_OPTION_GENERIC
        assert head.context_name == "COURTHOUSE"
        assert head.options == ["TWIG", "RESIN", "PEBBLE"]

        state = answer_head(reducer, state, selected_option="PEBBLE")

        assert state.get_player(ALICE).get_num_resource("PEBBLE") == 1
        assert state.pending_inputs == []
        assert state.active_player_id == BOB


class TestFollowupValidation:
    """Answers must match the head of the pending queue."""

    @pytest.fixture
    def pending_state(self, reducer, two_player_state):
        build_city(two_player_state, ALICE, "COURTHOUSE")
        set_hand(two_player_state, ALICE, ["FARM"])
        give(two_player_state, ALICE, TWIG=2, RESIN=1)
        return apply_ok(reducer, two_player_state,
                        GameInput.play_card(ALICE, "FARM", resources={"TWIG": 2, "RESIN": 1}))

    def test_other_player_cannot_answer(self, reducer, pending_state):
        game_input = GameInput.answer(pending_state.pending_inputs[0], selected_option="TWIG")
        game_input.player_id = BOB

        result = reducer.apply(pending_state, game_input)

        assert result.error_code == ErrorCode.NOT_YOUR_TURN.value

    def test_top_level_input_blocked(self, reducer, pending_state):
        result = reducer.apply(pending_state, GameInput.place_worker(ALICE, "BASIC_THREE_TWIGS"))

        assert not result.success
        assert "Must respond" in result.error

    def test_wrong_context(self, reducer, pending_state):
        game_input = GameInput.answer(pending_state.pending_inputs[0], selected_option="TWIG")
        game_input.context_name = "HISTORIAN"

        result = reducer.apply(pending_state, game_input)

        assert result.error_code == ErrorCode.ILLEGAL_ACTION.value

    def test_stale_input_id(self, reducer, pending_state):
        game_input = GameInput.answer(pending_state.pending_inputs[0], selected_option="TWIG")
        game_input.input_id = "input-999"

        result = reducer.apply(pending_state, game_input)

        assert result.error_code == ErrorCode.ILLEGAL_ACTION.value

    def test_option_not_offered(self, reducer, pending_state):
        result = reducer.apply(
            pending_state,
            GameInput.answer(pending_state.pending_inputs[0], selected_option="BERRY"),
        )

        assert result.error_code == ErrorCode.ILLEGAL_ACTION.value
        assert pending_state.pending_inputs


class TestSeasons:
    """Tests for preparing for the next season."""

    def _exhaust_workers(self, state, player_id):
        player = state.get_player(player_id)
        for _ in range(player.available_workers):
            player.place_worker_on_location(state, "BASIC_ONE_BERRY_AND_ONE_CARD")

    def test_cannot_prepare_with_workers(self, reducer, two_player_state):
        result = reducer.apply(two_player_state, GameInput.prepare_for_season(ALICE))

        assert not result.success
        assert "still have workers" in result.error

    def test_spring_recalls_and_produces(self, reducer, two_player_state):
        build_city(two_player_state, ALICE, "FARM", "MINE")
        self._exhaust_workers(two_player_state, ALICE)

        state = apply_ok(reducer, two_player_state, GameInput.prepare_for_season(ALICE))

        alice = state.get_player(ALICE)
        assert alice.current_season == Season.SPRING
        assert alice.num_workers == 3
        assert alice.placed_workers == []
        assert ALICE not in state.locations_map["BASIC_ONE_BERRY_AND_ONE_CARD"]
        assert alice.get_num_resource("BERRY") == 1
        assert alice.get_num_resource("PEBBLE") == 1
        assert alice.status == PlayerStatus.DURING_SEASON
        assert state.active_player_id == BOB

    def test_event_worker_is_recalled(self, reducer, two_player_state):
        alice = two_player_state.get_player(ALICE)
        alice.place_worker_on_event(two_player_state, "BASIC_FOUR_PRODUCTION")
        self._exhaust_workers(two_player_state, ALICE)

        state = apply_ok(reducer, two_player_state, GameInput.prepare_for_season(ALICE))

        alice = state.get_player(ALICE)
        assert alice.placed_workers == []
        assert alice.claimed_events == ["BASIC_FOUR_PRODUCTION"]
        assert state.events_map["BASIC_FOUR_PRODUCTION"] == ALICE

    def test_summer_picks_from_meadow(self, reducer, two_player_state):
        alice = two_player_state.get_player(ALICE)
        alice.current_season = Season.SPRING
        alice.num_workers = 3
        set_hand(two_player_state, ALICE, [])
        self._exhaust_workers(two_player_state, ALICE)

        state = apply_ok(reducer, two_player_state, GameInput.prepare_for_season(ALICE))

        head = state.pending_inputs[0]
        assert head.input_type == InputType.SELECT_CARDS
        assert head.min_choices == head.max_choices == 2
        picked = head.options[:2]

        state = answer_head(reducer, state, selected_cards=picked)

        alice = state.get_player(ALICE)
        assert alice.current_season == Season.SUMMER
        assert alice.num_workers == 4
        assert sorted(alice.cards_in_hand) == sorted(picked)
        assert len(state.meadow_cards) == 8
        assert state.active_player_id == BOB

    def test_no_preparing_in_autumn(self, reducer, two_player_state):
        alice = two_player_state.get_player(ALICE)
        alice.current_season = Season.AUTUMN
        alice.num_workers = 0

        result = reducer.apply(two_player_state, GameInput.prepare_for_season(ALICE))

        assert not result.success
        assert "AUTUMN" in result.error


class TestGameEnd:
    """Tests for ending the game."""

    def _to_autumn(self, state):
        for player in state.players:
            player.current_season = Season.AUTUMN
            player.num_workers = 6

    def test_cannot_end_before_autumn(self, reducer, two_player_state):
        result = reducer.apply(two_player_state, GameInput.game_end(ALICE))

        assert not result.success
        assert "AUTUMN" in result.error

    def test_full_game_end(self, reducer, two_player_state):
        self._to_autumn(two_player_state)

        state = apply_ok(reducer, two_player_state, GameInput.game_end(ALICE))
        assert state.get_player(ALICE).status == PlayerStatus.GAME_ENDED
        assert state.active_player_id == BOB

        # Bob keeps taking turns on his own.
        state = apply_ok(reducer, state, GameInput.place_worker(BOB, "BASIC_ONE_BERRY_AND_ONE_CARD"))
        assert state.active_player_id == BOB
        assert not state.is_game_over

        state = apply_ok(reducer, state, GameInput.game_end(BOB))
        assert state.is_game_over
        assert any(entry.plain_text() == "Game over" for entry in state.game_log)

    def test_inputs_after_game_over(self, reducer, two_player_state):
        self._to_autumn(two_player_state)
        state = apply_ok(reducer, two_player_state, GameInput.game_end(ALICE))
        state = apply_ok(reducer, state, GameInput.game_end(BOB))

        result = reducer.apply(state, GameInput.place_worker(BOB, "BASIC_ONE_BERRY_AND_ONE_CARD"))

        assert not result.success
        assert result.error_code == ErrorCode.INVALID_INPUT.value

    def test_scores(self, two_player_state):
        alice = two_player_state.get_player(ALICE)
        build_city(two_player_state, ALICE, "FARM", "HUSBAND", "WIFE")
        give(two_player_state, ALICE, VP=3, PEARL=1)

        # FARM 1 + HUSBAND 2 + WIFE 2+3 + 3 VP tokens + 1 PEARL (2)
        assert alice.get_points(two_player_state) == 13
        assert two_player_state.get_scores()[ALICE] == 13


class TestInvariants:
    """Internal errors are never reported as ordinary rejections."""

    def test_unexpected_exception(self, monkeypatch, two_player_state):
        def boom(self, state, game_input):
            raise KeyError("boom")

        monkeypatch.setattr(Reducer, "_handle_place_worker", boom)

        with pytest.raises(InvariantViolation):
            apply_input(two_player_state, GameInput.place_worker(ALICE, "BASIC_THREE_TWIGS"))

    def test_negative_resources(self, monkeypatch, two_player_state):
        def corrupt(self, state, game_input):
            state.get_player(game_input.player_id).resources["TWIG"] = -1

        monkeypatch.setattr(Reducer, "_handle_place_worker", corrupt)

        with pytest.raises(InvariantViolation):
            apply_input(two_player_state, GameInput.place_worker(ALICE, "BASIC_THREE_TWIGS"))
        assert two_player_state.get_player(ALICE).get_num_resource("TWIG") == 0


class TestMalformedPayloads:
    """Wrong-shape client payloads are rejected, never treated as engine bugs."""

    def test_payment_options_not_an_object(self, reducer, two_player_state):
        set_hand(two_player_state, ALICE, ["HUSBAND"])
        give(two_player_state, ALICE, BERRY=2)
        game_input = GameInput.from_dict({
            "input_type": "PLAY_CARD",
            "player_id": ALICE,
            "client_options": {"card": "HUSBAND", "source": "HAND", "payment_options": "oops"},
        })

        result = reducer.apply(two_player_state, game_input)

        assert not result.success
        assert result.error_code == ErrorCode.MALFORMED_INPUT.value

    @pytest.mark.parametrize("selected", [[{"x": 1}], [["FARM"]], [1]])
    def test_selected_cards_must_be_names(self, reducer, two_player_state, selected):
        two_player_state.deck.cards = ["HERALD"] * 20 + ["MINE", "FARM"]
        set_hand(two_player_state, ALICE, ["TEACHER"])
        give(two_player_state, ALICE, BERRY=2)
        state = apply_ok(reducer, two_player_state,
                         GameInput.play_card(ALICE, "TEACHER", resources={"BERRY": 2}))
        head = state.pending_inputs[0]
        game_input = GameInput.from_dict({
            "input_type": "SELECT_CARDS",
            "player_id": ALICE,
            "client_options": {"selected_cards": selected},
            "context_type": head.context_type.value,
            "context_name": head.context_name,
            "input_id": head.input_id,
        })

        result = reducer.apply(state, game_input)

        assert not result.success
        assert result.error_code == ErrorCode.MALFORMED_INPUT.value
        assert state.pending_inputs[0].input_id == head.input_id

    @pytest.mark.parametrize("selected", [["1"], [{"uid": 1}], [True]])
    def test_selected_played_cards_must_be_uids(self, reducer, two_player_state, selected):
        farm, = build_city(two_player_state, ALICE, "FARM")
        head = two_player_state.push_pending(
            InputType.SELECT_PLAYED_CARDS, ALICE, "Select 1 PRODUCTION card to activate",
            ContextType.CARD, "CHIP_SWEEP", options=[farm.uid], min_choices=1, max_choices=1,
        )
        game_input = GameInput.from_dict({
            "input_type": "SELECT_PLAYED_CARDS",
            "player_id": ALICE,
            "client_options": {"selected_cards": selected},
            "context_type": "card",
            "context_name": "CHIP_SWEEP",
            "input_id": head.input_id,
        })

        result = reducer.apply(two_player_state, game_input)

        assert result.error_code == ErrorCode.MALFORMED_INPUT.value
