"""
Tests for the Pearlbrook river and adornments.
"""

from ..engine_core.action import GameInput, InputType
from ..engine_core.catalog import get_adornment
from ..engine_core.state import RiverSpotState
from .conftest import ALICE, BOB, answer_head, apply_ok, build_city, give, set_hand


class TestSetup:
    def test_river_layout(self, pearlbrook_state):
        river = pearlbrook_state.river_destination_map
        assert set(river) == {
            "SHOAL", "THREE_PRODUCTION", "TWO_DESTINATION", "TWO_GOVERNANCE", "TWO_TRAVELER",
        }
        assert river["SHOAL"].revealed
        assert river["SHOAL"].name == "SHOAL"
        assert not any(spot.revealed for name, spot in river.items() if name != "SHOAL")

    def test_adornments_and_ambassadors(self, pearlbrook_state):
        for player in pearlbrook_state.players:
            assert len(player.adornments_in_hand) == 2
            assert player.num_ambassadors == 1
            assert player.ambassador_spot is None
        assert len(pearlbrook_state.adornments_pile) == 4

    def test_face_down_destinations_hidden(self, pearlbrook_state):
        public = pearlbrook_state.to_dict(include_private=False)

        river = public["river_destination_map"]
        assert river["SHOAL"]["name"] == "SHOAL"
        assert river["TWO_TRAVELER"]["name"] is None
        assert public["adornments_pile"].get("cards") is None

    def test_base_game_has_no_river(self, two_player_state):
        assert two_player_state.river_destination_map is None
        assert two_player_state.adornments_pile is None


class TestRiver:
    def test_shoal(self, reducer, pearlbrook_state):
        give(pearlbrook_state, ALICE, TWIG=1, RESIN=2)
        set_hand(pearlbrook_state, ALICE, ["FARM", "MINE", "KING"])

        state = apply_ok(reducer, pearlbrook_state, GameInput.place_ambassador(ALICE, "SHOAL"))
        head = state.pending_inputs[0]
        assert head.input_type == InputType.SELECT_RESOURCES
        assert head.to_spend

        state = answer_head(reducer, state, resources={"RESIN": 2})
        assert state.pending_inputs[0].input_type == InputType.DISCARD_CARDS

        state = answer_head(reducer, state, cards_to_discard=["FARM", "KING"])

        alice = state.get_player(ALICE)
        assert alice.get_num_resource("PEARL") == 1
        assert alice.get_num_resource("RESIN") == 0
        assert alice.get_num_resource("TWIG") == 1
        assert alice.cards_in_hand == ["MINE"]
        assert alice.ambassador_spot == "SHOAL"
        # Ambassadors are not workers.
        assert alice.available_workers == 2
        assert state.active_player_id == BOB

    def test_shoal_cannot_pay(self, reducer, pearlbrook_state):
        state = apply_ok(reducer, pearlbrook_state, GameInput.place_ambassador(ALICE, "SHOAL"))

        assert state.pending_inputs == []
        assert state.get_player(ALICE).get_num_resource("PEARL") == 0
        assert any("cannot pay 2 ANY" in e.plain_text() for e in state.game_log)

    def test_gated_spot(self, reducer, pearlbrook_state):
        build_city(pearlbrook_state, ALICE, "FARM", "MINE")

        result = reducer.apply(pearlbrook_state,
                               GameInput.place_ambassador(ALICE, "THREE_PRODUCTION"))

        assert not result.success
        assert "Need 3 PRODUCTION" in result.error

    def test_reveal_earns_pearl(self, reducer, pearlbrook_state):
        pearlbrook_state.river_destination_map["TWO_TRAVELER"] = RiverSpotState(name="GREAT_HALL")
        build_city(pearlbrook_state, ALICE, "WANDERER", "HERALD")
        give(pearlbrook_state, ALICE, VP=1, BERRY=1)
        hand_size = pearlbrook_state.get_player(ALICE).num_cards_in_hand

        state = apply_ok(reducer, pearlbrook_state,
                         GameInput.place_ambassador(ALICE, "TWO_TRAVELER"))
        spot = state.river_destination_map["TWO_TRAVELER"]
        assert spot.revealed
        assert spot.ambassadors == [ALICE]
        head = state.pending_inputs[0]
        assert head.input_type == InputType.SELECT_OPTION_GENERIC
        assert head.options == ["PAY", "DECLINE"]

        state = answer_head(reducer, state, selected_option="PAY")

        alice = state.get_player(ALICE)
        assert alice.get_num_resource("PEARL") == 2
        assert alice.get_num_resource("VP") == 0
        assert alice.get_num_resource("BERRY") == 0
        assert alice.num_cards_in_hand == hand_size + 2

    def test_river_location_decline(self, reducer, pearlbrook_state):
        pearlbrook_state.river_destination_map["TWO_TRAVELER"] = RiverSpotState(name="WATERMILL")
        build_city(pearlbrook_state, ALICE, "WANDERER", "HERALD")
        give(pearlbrook_state, ALICE, VP=1, TWIG=1)

        state = apply_ok(reducer, pearlbrook_state,
                         GameInput.place_ambassador(ALICE, "TWO_TRAVELER"))
        state = answer_head(reducer, state, selected_option="DECLINE")

        alice = state.get_player(ALICE)
        assert alice.get_num_resource("PEARL") == 1
        assert alice.get_num_resource("TWIG") == 1

    def test_citizen_auto_selects(self, reducer, pearlbrook_state):
        pearlbrook_state.river_destination_map["TWO_TRAVELER"] = RiverSpotState(
            name="GUS_THE_GARDENER")
        build_city(pearlbrook_state, ALICE, "WANDERER", "HERALD")
        set_hand(pearlbrook_state, ALICE, ["FARM", "MINE", "KING"])

        state = apply_ok(reducer, pearlbrook_state,
                         GameInput.place_ambassador(ALICE, "TWO_TRAVELER"))

        # Only FARM and MINE are PRODUCTION cards, so there is nothing to choose.
        assert state.pending_inputs == []
        alice = state.get_player(ALICE)
        assert alice.cards_in_hand == ["KING"]
        assert alice.get_num_resource("PEARL") == 2
        assert alice.get_num_resource("VP") == 1

    def test_one_ambassador(self, reducer, pearlbrook_state):
        state = apply_ok(reducer, pearlbrook_state, GameInput.place_ambassador(ALICE, "SHOAL"))
        state.active_player_id = ALICE

        result = reducer.apply(state, GameInput.place_ambassador(ALICE, "SHOAL"))

        assert not result.success
        assert result.error == "No ambassador available"

    def test_ambassador_recalled_with_workers(self, reducer, pearlbrook_state):
        state = apply_ok(reducer, pearlbrook_state, GameInput.place_ambassador(ALICE, "SHOAL"))
        state.active_player_id = ALICE
        state.get_player(ALICE).num_workers = 0

        state = apply_ok(reducer, state, GameInput.prepare_for_season(ALICE))

        assert state.get_player(ALICE).ambassador_spot is None
        assert state.river_destination_map["SHOAL"].ambassadors == []

    def test_unknown_spot(self, reducer, pearlbrook_state):
        result = reducer.apply(pearlbrook_state, GameInput.place_ambassador(ALICE, "LAKE"))

        assert not result.success
        assert result.error_code == "NOT_FOUND"

    def test_river_not_in_base_game(self, reducer, two_player_state):
        result = reducer.apply(two_player_state, GameInput.place_ambassador(ALICE, "SHOAL"))

        assert not result.success
        assert result.error == "The river is not part of this game"


class TestAdornments:
    def test_needs_pearl(self, reducer, pearlbrook_state):
        pearlbrook_state.get_player(ALICE).adornments_in_hand = ["BELL"]

        result = reducer.apply(pearlbrook_state, GameInput.play_adornment(ALICE, "BELL"))

        assert not result.success
        assert result.error == "Need 1 PEARL to play BELL"

    def test_not_in_hand(self, reducer, pearlbrook_state):
        pearlbrook_state.get_player(ALICE).adornments_in_hand = ["BELL"]
        give(pearlbrook_state, ALICE, PEARL=1)

        result = reducer.apply(pearlbrook_state, GameInput.play_adornment(ALICE, "TIARA"))

        assert not result.success
        assert "not in your hand" in result.error

    def test_not_in_base_game(self, reducer, two_player_state):
        result = reducer.apply(two_player_state, GameInput.play_adornment(ALICE, "BELL"))

        assert not result.success
        assert result.error == "Adornments are not part of this game"

    def test_bell(self, reducer, pearlbrook_state):
        pearlbrook_state.get_player(ALICE).adornments_in_hand = ["BELL", "TIARA"]
        give(pearlbrook_state, ALICE, PEARL=1)

        state = apply_ok(reducer, pearlbrook_state, GameInput.play_adornment(ALICE, "BELL"))

        alice = state.get_player(ALICE)
        assert alice.get_num_resource("BERRY") == 3
        assert alice.get_num_resource("PEARL") == 0
        assert alice.adornments_in_hand == ["TIARA"]
        assert alice.played_adornments == ["BELL"]
        assert state.active_player_id == BOB

    def test_spyglass(self, reducer, pearlbrook_state):
        pearlbrook_state.get_player(ALICE).adornments_in_hand = ["SPYGLASS"]
        give(pearlbrook_state, ALICE, PEARL=1)
        hand_size = pearlbrook_state.get_player(ALICE).num_cards_in_hand

        state = apply_ok(reducer, pearlbrook_state, GameInput.play_adornment(ALICE, "SPYGLASS"))
        state = answer_head(reducer, state, resources={"PEBBLE": 1})

        alice = state.get_player(ALICE)
        assert alice.get_num_resource("PEARL") == 1
        assert alice.get_num_resource("PEBBLE") == 1
        assert alice.num_cards_in_hand == hand_size + 1

    def test_compass_reactivates_travelers(self, reducer, pearlbrook_state):
        wanderer, = build_city(pearlbrook_state, ALICE, "WANDERER")
        set_hand(pearlbrook_state, ALICE, [])
        pearlbrook_state.get_player(ALICE).adornments_in_hand = ["COMPASS"]
        give(pearlbrook_state, ALICE, PEARL=1)

        state = apply_ok(reducer, pearlbrook_state, GameInput.play_adornment(ALICE, "COMPASS"))
        head = state.pending_inputs[0]
        assert head.options == [wanderer.uid]

        state = answer_head(reducer, state, selected_cards=[wanderer.uid])

        assert state.get_player(ALICE).num_cards_in_hand == 3

    def test_compass_skips_fool(self, reducer, pearlbrook_state):
        build_city(pearlbrook_state, ALICE, "FOOL")
        pearlbrook_state.get_player(ALICE).adornments_in_hand = ["COMPASS"]
        give(pearlbrook_state, ALICE, PEARL=1)

        state = apply_ok(reducer, pearlbrook_state, GameInput.play_adornment(ALICE, "COMPASS"))

        assert state.pending_inputs == []
        assert any("no TRAVELER cards" in e.plain_text() for e in state.game_log)

    def test_scales(self, reducer, pearlbrook_state):
        set_hand(pearlbrook_state, ALICE, ["FARM", "MINE", "KING", "INN", "BARD"])
        pearlbrook_state.get_player(ALICE).adornments_in_hand = ["SCALES"]
        give(pearlbrook_state, ALICE, PEARL=1)

        state = apply_ok(reducer, pearlbrook_state, GameInput.play_adornment(ALICE, "SCALES"))
        assert state.pending_inputs[0].max_choices == 4

        state = answer_head(reducer, state, cards_to_discard=["FARM", "MINE"])
        state = answer_head(reducer, state, resources={"BERRY": 1, "TWIG": 1})

        alice = state.get_player(ALICE)
        assert alice.get_num_resource("BERRY") == 1
        assert alice.get_num_resource("TWIG") == 1
        assert alice.num_cards_in_hand == 3


class TestScoring:
    def test_pearls_worth_two(self, pearlbrook_state):
        give(pearlbrook_state, ALICE, PEARL=3)
        assert pearlbrook_state.get_player(ALICE).get_points(pearlbrook_state) == 6

    def test_tiara_points(self, pearlbrook_state):
        build_city(pearlbrook_state, ALICE, "KING", "WIFE")
        assert get_adornment("TIARA").get_points(pearlbrook_state, ALICE) == 2

    def test_bell_points(self, pearlbrook_state):
        build_city(pearlbrook_state, ALICE, "HUSBAND", "WIFE", "KING")
        assert get_adornment("BELL").get_points(pearlbrook_state, ALICE) == 1

    def test_played_adornments_count_toward_score(self, pearlbrook_state):
        build_city(pearlbrook_state, ALICE, "CHAPEL", "INN")
        alice = pearlbrook_state.get_player(ALICE)
        before = alice.get_points(pearlbrook_state)

        alice.played_adornments.append("KEY_TO_THE_CITY")

        assert alice.get_points(pearlbrook_state) == before + 1
