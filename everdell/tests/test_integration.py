"""
Integration tests - End-to-end workflow tests.

Tests the complete flow:
1. Create a game through the manager
2. Play every season with a simple policy
3. Score the finished game
4. Persist and reload states
"""

import json

import pytest

from ..cli import main
from ..engine_core.action import GameInput, InputType
from ..engine_core.action_generator import ActionGenerator
from ..engine_core.state import GameOptions, GameState, Season
from ..games.everdell.setup import create_game_state
from ..session import FileGameStore, GameManager, InMemoryGameStore
from .conftest import ALICE, BOB


def _answer(state, pending):
    """Pick the first legal answer to a pending input."""
    if pending.input_type in (InputType.SELECT_CARDS, InputType.SELECT_PLAYED_CARDS):
        return GameInput.answer(pending, selected_cards=pending.options[:pending.min_choices])
    if pending.input_type == InputType.SELECT_OPTION_GENERIC:
        return GameInput.answer(pending, selected_option=pending.options[0])
    if pending.input_type == InputType.SELECT_PLAYER:
        return GameInput.answer(pending, selected_player=pending.options[0])
    if pending.input_type == InputType.DISCARD_CARDS:
        hand = state.get_player(pending.player_id).cards_in_hand
        return GameInput.answer(pending, cards_to_discard=hand[:pending.min_choices])
    raise AssertionError(f"No policy for {pending.input_type}")


def _choose(state, player_id):
    """Cards and a point until out of workers, then the next season or the end."""
    if state.pending_inputs:
        return _answer(state, state.pending_inputs[0])
    inputs = ActionGenerator(state, player_id).legal_inputs()
    for game_input in inputs:
        if game_input.option("location") == "BASIC_TWO_CARDS_AND_ONE_VP":
            return game_input
    for input_type in (InputType.PREPARE_FOR_SEASON, InputType.GAME_END):
        for game_input in inputs:
            if game_input.input_type == input_type:
                return game_input
    raise AssertionError(f"No move for {player_id}")


def _play_out(manager, game_id, max_steps=300):
    for _ in range(max_steps):
        state = manager.load_state(game_id)
        if state.is_game_over:
            return state
        player_id = ActionGenerator(state).player_id
        secret = state.get_player(player_id).player_secret
        result = manager.submit_input(game_id, player_id, secret, _choose(state, player_id))
        assert result.success, result.error
    raise AssertionError("Game did not finish")


class TestFullGameFlow:
    """Tests for a complete game."""

    @pytest.mark.parametrize("names", [["Alice", "Bob"], ["Alice", "Bob", "Carol", "Dave"]])
    def test_play_to_the_end(self, names):
        manager = GameManager(store=InMemoryGameStore())
        game = manager.create_game(names, random_seed=21)

        final = _play_out(manager, game.game_id)

        assert all(p.current_season == Season.AUTUMN for p in final.players)
        view = manager.get_game_state(game.game_id)
        assert view["resolver_state"] == "game_over"
        assert set(view["scores"]) == {p.player_id for p in final.players}
        assert all(score > 0 for score in view["scores"].values())
        assert final.game_log[-1].plain_text()

    def test_no_inputs_after_game_over(self):
        manager = GameManager(store=InMemoryGameStore())
        game = manager.create_game(["Alice", "Bob"], random_seed=4)
        final = _play_out(manager, game.game_id)

        result = manager.submit_input(
            game.game_id, ALICE, final.get_player(ALICE).player_secret,
            GameInput.place_worker(ALICE, "BASIC_ONE_BERRY"),
        )

        assert result.error_code == "INVALID_INPUT"
        assert manager.legal_inputs(game.game_id, BOB, final.get_player(BOB).player_secret) == []

    def test_pearlbrook_game_finishes(self):
        manager = GameManager(store=InMemoryGameStore())
        game = manager.create_game(["Alice", "Bob"], GameOptions(pearlbrook=True), random_seed=8)

        final = _play_out(manager, game.game_id)

        assert final.is_game_over

    def test_file_store_game(self, tmp_path):
        manager = GameManager(store=FileGameStore(tmp_path))
        game = manager.create_game(["Alice", "Bob"], random_seed=13)

        final = _play_out(manager, game.game_id)

        reloaded = GameManager(store=FileGameStore(tmp_path)).load_state(game.game_id)
        assert reloaded.to_dict() == final.to_dict()


class TestDeterminism:
    def test_same_seed_same_setup(self):
        first = create_game_state(["Alice", "Bob"], random_seed=99)
        second = create_game_state(["Alice", "Bob"], random_seed=99)

        assert first.deck.cards == second.deck.cards
        assert first.meadow_cards == second.meadow_cards
        assert [p.cards_in_hand for p in first.players] == [p.cards_in_hand for p in second.players]

    def test_different_seed_different_deck(self):
        first = create_game_state(["Alice", "Bob"], random_seed=1)
        second = create_game_state(["Alice", "Bob"], random_seed=2)

        assert first.deck.cards != second.deck.cards

    def test_same_seed_same_game(self):
        results = []
        for _ in range(2):
            manager = GameManager(store=InMemoryGameStore())
            game = manager.create_game(["Alice", "Bob"], random_seed=17)
            final = _play_out(manager, game.game_id)
            results.append([p.get_points(final) for p in final.players])

        assert results[0] == results[1]


class TestPersistence:
    def test_round_trip_through_json(self, pearlbrook_state):
        text = json.dumps(pearlbrook_state.to_dict())

        restored = GameState.from_dict(json.loads(text))

        assert restored.to_dict() == pearlbrook_state.to_dict()

    def test_round_trip_mid_game(self):
        manager = GameManager(store=InMemoryGameStore())
        game = manager.create_game(["Alice", "Bob"], random_seed=6)
        manager.submit_input(game.game_id, ALICE, game.get_player(ALICE).player_secret,
                             GameInput.place_worker(ALICE, "BASIC_TWO_CARDS_AND_ONE_VP"))
        state = manager.load_state(game.game_id)

        restored = GameState.from_dict(json.loads(json.dumps(state.to_dict())))

        assert restored.to_dict() == state.to_dict()
        assert restored.undo_snapshot is not None


class TestCLI:
    def test_new_show_submit(self, tmp_path, capsys):
        data_dir = str(tmp_path)

        main(["--data-dir", data_dir, "new", "Alice", "Bob", "--seed", "3"])
        out = capsys.readouterr().out
        game_id = out.split("Game created: ")[1].split()[0]
        secret = next(line.split("secret=")[1].strip()
                      for line in out.splitlines() if ALICE in line)

        main(["--data-dir", data_dir, "submit", game_id,
              json.dumps({"input_type": "PLACE_WORKER",
                          "client_options": {"location": "BASIC_ONE_BERRY"}}),
              "--player-id", ALICE, "--secret", secret])
        assert "game_state_id=2" in capsys.readouterr().out

        main(["--data-dir", data_dir, "show", game_id])
        view = json.loads(capsys.readouterr().out)
        assert view["game_state_id"] == 2
        assert view["players"][0]["resources"]["BERRY"] == 1

    def test_submit_rejected(self, tmp_path, capsys):
        data_dir = str(tmp_path)
        main(["--data-dir", data_dir, "new", "Alice", "Bob"])
        game_id = capsys.readouterr().out.split("Game created: ")[1].split()[0]

        with pytest.raises(SystemExit):
            main(["--data-dir", data_dir, "submit", game_id, "{}",
                  "--player-id", ALICE, "--secret", "wrong"])

        assert "AUTH_ERROR" in capsys.readouterr().out

    def test_delete(self, tmp_path, capsys):
        data_dir = str(tmp_path)
        main(["--data-dir", data_dir, "new", "Alice", "Bob"])
        game_id = capsys.readouterr().out.split("Game created: ")[1].split()[0]

        main(["--data-dir", data_dir, "delete", game_id])
        assert f"Game deleted: {game_id}" in capsys.readouterr().out
        assert not list(tmp_path.glob("*.json"))

        with pytest.raises(SystemExit):
            main(["--data-dir", data_dir, "delete", game_id])
        assert "NOT_FOUND" in capsys.readouterr().out
