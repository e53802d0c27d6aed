"""
Tests for the legal input generator.

Every template the generator offers must be accepted by the reducer once the
client fills in what the template leaves open.
"""

from ..engine_core.action import CardSource, GameInput, InputType
from ..engine_core.action_generator import ActionGenerator, legal_inputs
from ..engine_core.state import PlayerStatus, Season
from .conftest import ALICE, BOB, apply_ok, build_city, give, set_hand


def _types(inputs):
    return {gi.input_type for gi in inputs}


class TestLegalInputs:
    def test_initial_inputs(self, two_player_state):
        inputs = legal_inputs(two_player_state, ALICE)

        assert InputType.PLACE_WORKER in _types(inputs)
        locations = {gi.option("location") for gi in inputs if gi.input_type == InputType.PLACE_WORKER}
        assert "BASIC_ONE_BERRY" in locations
        assert "HAVEN" in locations
        # Journeys are closed until AUTUMN.
        assert "JOURNEY_TWO" not in locations
        assert InputType.PREPARE_FOR_SEASON not in _types(inputs)
        assert InputType.GAME_END not in _types(inputs)
        assert InputType.UNDO not in _types(inputs)

    def test_other_player_has_nothing(self, two_player_state):
        assert legal_inputs(two_player_state, BOB) == []

    def test_defaults_to_waiting_player(self, two_player_state):
        assert ActionGenerator(two_player_state).player_id == ALICE

    def test_every_place_worker_is_accepted(self, reducer, two_player_state):
        inputs = [gi for gi in legal_inputs(two_player_state, ALICE)
                  if gi.input_type == InputType.PLACE_WORKER]

        assert inputs
        for game_input in inputs:
            result = reducer.apply(two_player_state, game_input)
            assert result.success, (game_input.option("location"), result.error)

    def test_only_undo_after_acting(self, reducer, two_player_state):
        state = apply_ok(reducer, two_player_state,
                         GameInput.place_worker(ALICE, "BASIC_THREE_TWIGS"))

        alice_inputs = legal_inputs(state, ALICE)

        assert [gi.input_type for gi in alice_inputs] == [InputType.UNDO]
        assert InputType.PLACE_WORKER in _types(legal_inputs(state, BOB))

    def test_pending_template(self, reducer, two_player_state):
        build_city(two_player_state, ALICE, "COURTHOUSE")
        set_hand(two_player_state, ALICE, ["FARM"])
        give(two_player_state, ALICE, TWIG=2, RESIN=1)
        state = apply_ok(reducer, two_player_state,
                         GameInput.play_card(ALICE, "FARM", resources={"TWIG": 2, "RESIN": 1}))

        inputs = legal_inputs(state, ALICE)

        assert [gi.input_type for gi in inputs] == [InputType.SELECT_OPTION_GENERIC, InputType.UNDO]
        template = inputs[0]
        assert template.pending is state.pending_inputs[0]
        assert template.input_id == state.pending_inputs[0].input_id
        assert legal_inputs(state, BOB) == []

    def test_playable_cards(self, two_player_state):
        set_hand(two_player_state, ALICE, ["FARM", "KING", "HUSBAND"])
        two_player_state.meadow_cards = ["MINE", "WANDERER"] + ["KING"] * 6
        give(two_player_state, ALICE, TWIG=2, RESIN=1, BERRY=2)

        playable = ActionGenerator(two_player_state, ALICE).playable_cards()

        assert ("FARM", CardSource.HAND) in playable
        assert ("HUSBAND", CardSource.HAND) in playable
        assert ("WANDERER", CardSource.MEADOW) in playable
        assert ("KING", CardSource.HAND) not in playable
        assert ("MINE", CardSource.MEADOW) not in playable

    def test_playable_with_associated_construction(self, two_player_state):
        build_city(two_player_state, ALICE, "MINE")
        set_hand(two_player_state, ALICE, ["MINER_MOLE"])

        playable = ActionGenerator(two_player_state, ALICE).playable_cards()

        assert ("MINER_MOLE", CardSource.HAND) in playable

    def test_unique_card_already_played(self, two_player_state):
        build_city(two_player_state, ALICE, "KING")
        set_hand(two_player_state, ALICE, ["KING"])
        two_player_state.meadow_cards = ["EVERTREE"] * 8
        give(two_player_state, ALICE, BERRY=6)

        assert ActionGenerator(two_player_state, ALICE).playable_cards() == []

    def test_visitable_destinations(self, two_player_state):
        chapel, = build_city(two_player_state, ALICE, "CHAPEL")
        build_city(two_player_state, BOB, "CHAPEL")
        post_office, = build_city(two_player_state, BOB, "POST_OFFICE")

        visitable = ActionGenerator(two_player_state, ALICE).visitable_destination_cards()

        # Bob's CHAPEL is closed to other players.
        assert {pc.uid for pc in visitable} == {chapel.uid, post_office.uid}

    def test_prepare_for_season_when_out_of_workers(self, two_player_state):
        two_player_state.get_player(ALICE).num_workers = 0

        inputs = legal_inputs(two_player_state, ALICE)

        assert InputType.PREPARE_FOR_SEASON in _types(inputs)
        assert InputType.PLACE_WORKER not in _types(inputs)

    def test_game_end_in_autumn(self, two_player_state):
        two_player_state.get_player(ALICE).current_season = Season.AUTUMN

        inputs = legal_inputs(two_player_state, ALICE)

        assert InputType.GAME_END in _types(inputs)
        assert InputType.PREPARE_FOR_SEASON not in _types(inputs)

    def test_ambassador_and_adornment_options(self, pearlbrook_state):
        generator = ActionGenerator(pearlbrook_state, ALICE)

        assert generator.ambassador_options() == ["SHOAL"]
        assert generator.playable_adornments() == []

        give(pearlbrook_state, ALICE, PEARL=1)
        assert sorted(generator.playable_adornments()) == sorted(
            pearlbrook_state.get_player(ALICE).adornments_in_hand)

    def test_reservable_cards_with_newleaf(self, newleaf_state):
        inputs = legal_inputs(newleaf_state, ALICE)

        reserved = {gi.option("card") for gi in inputs if gi.input_type == InputType.RESERVE_CARD}
        assert reserved == set(newleaf_state.meadow_cards)

    def test_game_over(self, two_player_state):
        for player in two_player_state.players:
            player.status = PlayerStatus.GAME_ENDED

        assert legal_inputs(two_player_state, ALICE) == []
        assert ActionGenerator(two_player_state).player_id is None
