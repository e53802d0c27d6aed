"""
Everdell CLI - Command-line interface for the engine.

Usage:
    everdell new <name> <name> [...]     Create a game, print the secrets
    everdell show <game_id>              Print a game (as a player with --player-id)
    everdell submit <game_id> <input>    Apply a JSON input for a player
    everdell inputs <game_id>            List a player's legal inputs
    everdell delete <game_id>            Delete a stored game
    everdell serve                       Run the HTTP API with uvicorn

Games are stored as JSON files in --data-dir (default: $EVERDELL_DATA_DIR,
then ~/.everdell/games).
"""

import argparse
import json
import logging
import os
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Everdell - Turn-based rules engine",
        prog="everdell",
    )
    parser.add_argument("--data-dir", default=os.getenv("EVERDELL_DATA_DIR"),
                        help="Directory holding game files")
    parser.add_argument("--log-level", default=os.getenv("EVERDELL_LOG_LEVEL", "WARNING"),
                        help="Logging level (DEBUG, INFO, WARNING, ...)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # New command
    new_parser = subparsers.add_parser("new", help="Create a new game")
    new_parser.add_argument("names", nargs="+", help="Player names in seating order (2-4)")
    new_parser.add_argument("--pearlbrook", action="store_true", help="Include Pearlbrook")
    new_parser.add_argument("--newleaf", action="store_true", help="Include Newleaf")
    new_parser.add_argument("--no-undo", action="store_true", help="Disable undo")
    new_parser.add_argument("--seed", type=int, help="Random seed")

    # Show command
    show_parser = subparsers.add_parser("show", help="Show a game")
    show_parser.add_argument("game_id", help="Game id")
    _add_credentials(show_parser, required=False)

    # Submit command
    submit_parser = subparsers.add_parser("submit", help="Submit an input")
    submit_parser.add_argument("game_id", help="Game id")
    submit_parser.add_argument("input", help="GameInput as JSON, or @path to a JSON file")
    _add_credentials(submit_parser, required=True)

    # Inputs command
    inputs_parser = subparsers.add_parser("inputs", help="List legal inputs")
    inputs_parser.add_argument("game_id", help="Game id")
    _add_credentials(inputs_parser, required=True)

    # Delete command
    delete_parser = subparsers.add_parser("delete", help="Delete a game")
    delete_parser.add_argument("game_id", help="Game id")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "new":
        cmd_new(args)
    elif args.command == "show":
        cmd_show(args)
    elif args.command == "submit":
        cmd_submit(args)
    elif args.command == "inputs":
        cmd_inputs(args)
    elif args.command == "delete":
        cmd_delete(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def _add_credentials(parser, required):
    parser.add_argument("--player-id", required=required, help="Player id")
    parser.add_argument("--secret", required=required, help="Player secret")


def _manager(args):
    from .session import FileGameStore, GameManager
    return GameManager(store=FileGameStore(args.data_dir))


def _print_json(data):
    print(json.dumps(data, indent=2, sort_keys=True))


def _fail(message):
    print(f"Error: {message}")
    sys.exit(1)


def cmd_new(args):
    """Create a game."""
    from .engine_core.state import GameOptions

    options = GameOptions(
        pearlbrook=args.pearlbrook,
        newleaf=args.newleaf,
        allow_undo=not args.no_undo,
    )
    try:
        state = _manager(args).create_game(args.names, options, args.seed)
    except ValueError as e:
        _fail(str(e))

    print(f"Game created: {state.game_id}")
    print("\nPlayers (keep each secret private):")
    for player in state.players:
        print(f"  {player.player_id}  {player.name}  secret={player.player_secret}")


def cmd_show(args):
    """Print a game projection."""
    from .engine_core.errors import EngineError

    try:
        view = _manager(args).get_game_state(args.game_id, args.player_id, args.secret)
    except EngineError as e:
        _fail(f"{e.code.value}: {e.message}")
    _print_json(view)


def cmd_submit(args):
    """Apply an input."""
    raw = args.input
    try:
        if raw.startswith("@"):
            with open(raw[1:], "r", encoding="utf-8") as f:
                payload = json.load(f)
        else:
            payload = json.loads(raw)
    except FileNotFoundError:
        _fail(f"File not found: {raw[1:]}")
    except json.JSONDecodeError as e:
        _fail(f"Input is not valid JSON: {e}")

    result = _manager(args).submit_input(args.game_id, args.player_id, args.secret, payload)
    if not result.success:
        _fail(f"{result.error_code}: {result.error}")

    print(f"Applied. game_state_id={result.game_state_id}")
    for line in result.changes:
        print(f"  {line}")
    print(f"\n{len(result.legal_inputs)} legal input(s) next.")


def cmd_inputs(args):
    """List legal inputs."""
    from .engine_core.errors import EngineError

    try:
        inputs = _manager(args).legal_inputs(args.game_id, args.player_id, args.secret)
    except EngineError as e:
        _fail(f"{e.code.value}: {e.message}")
    _print_json(inputs)


def cmd_delete(args):
    """Delete a stored game."""
    from .engine_core.errors import EngineError

    try:
        _manager(args).delete_game(args.game_id)
    except EngineError as e:
        _fail(f"{e.code.value}: {e.message}")
    print(f"Game deleted: {args.game_id}")


def cmd_serve(args):
    """Run the HTTP API."""
    try:
        import uvicorn
    except ImportError:
        _fail("uvicorn not installed. Install with: pip install uvicorn")

    if args.data_dir:
        os.environ["EVERDELL_DATA_DIR"] = args.data_dir
    os.environ.setdefault("EVERDELL_LOG_LEVEL", args.log_level)
    uvicorn.run("everdell.api.app:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
