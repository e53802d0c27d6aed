"""
Game Manager - Creates games and runs inputs against stored snapshots.

LIFECYCLE:
1. create_game() sets up a new state and saves its snapshot
2. For every submitted input, with the game's lock held:
   - load the snapshot
   - authenticate the submitter
   - apply the input with the reducer
   - save the new snapshot
   - notify subscribers (only once the save succeeded)
3. Rejected inputs never reach the store: the stored snapshot is unchanged

CONCURRENCY:
- One threading.Lock per game id; inputs to different games run in parallel
- A registry lock guards the lock table itself
- The engine never blocks on I/O; only the store does
"""

from __future__ import annotations
import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable

from ..engine_core.action import GameInput
from ..engine_core.action_generator import ActionGenerator
from ..engine_core.errors import AuthError, EngineError, InvariantViolation, NotFoundError
from ..engine_core.reducer import Reducer
from ..engine_core.state import GameOptions, GameState
from ..engine_core.visibility import project_state
from ..games.everdell.setup import create_game_state
from .store import GameStore, InMemoryGameStore

logger = logging.getLogger(__name__)

GameChangedCallback = Callable[[str, int], None]


class GameChangeNotifier:
    """
    Fan-out of "game changed" events to subscribers.

    Callbacks run synchronously on the submitting thread and receive
    ``(game_id, game_state_id)``. A failing callback is logged and skipped.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: dict[str, tuple[str, GameChangedCallback]] = {}

    def subscribe(self, game_id: str, callback: GameChangedCallback) -> str:
        token = str(uuid.uuid4())
        with self._lock:
            self._subscribers[token] = (game_id, callback)
        return token

    def unsubscribe(self, token: str) -> None:
        with self._lock:
            self._subscribers.pop(token, None)

    def notify_game_changed(self, game_id: str, game_state_id: int) -> None:
        with self._lock:
            callbacks = [cb for gid, cb in self._subscribers.values() if gid == game_id]
        for callback in callbacks:
            try:
                callback(game_id, game_state_id)
            except Exception:
                logger.exception("Change callback failed for game %s", game_id)


@dataclass
class SubmitResult:
    """
    Outcome of a submitted input.

    On success ``state`` is the submitter's projection and ``legal_inputs``
    what they can do next. On failure only ``error``/``error_code`` are set.
    """
    success: bool
    game_id: str
    game_state_id: int | None = None
    state: dict[str, Any] | None = None
    legal_inputs: list[dict[str, Any]] = field(default_factory=list)
    changes: list[str] = field(default_factory=list)
    error: str | None = None
    error_code: str | None = None


def serialize_input(game_input: GameInput) -> dict[str, Any]:
    """GameInput as JSON, with the pending input it answers if any."""
    data = game_input.to_dict()
    if game_input.pending is not None:
        data["pending"] = game_input.pending.to_dict()
    return data


class GameManager:
    """
    Owns the store, the per-game locks and the notifier.

    Usage:
        manager = GameManager()
        state = manager.create_game(["Alice", "Bob"])
        player = state.players[0]
        result = manager.submit_input(
            state.game_id, player.player_id, player.player_secret,
            GameInput.place_worker(player.player_id, "BASIC_ONE_BERRY"),
        )
    """

    def __init__(
        self,
        store: GameStore | None = None,
        notifier: GameChangeNotifier | None = None,
        reducer: Reducer | None = None,
    ):
        self.store = store or InMemoryGameStore()
        self.notifier = notifier or GameChangeNotifier()
        self.reducer = reducer or Reducer()
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, game_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(game_id)
            if lock is None:
                lock = self._locks[game_id] = threading.Lock()
            return lock

    # ------------------------------------------------------------------------
    # Games
    # ------------------------------------------------------------------------

    def create_game(
        self,
        player_names: list[str],
        game_options: GameOptions | None = None,
        random_seed: int | None = None,
    ) -> GameState:
        """
        Create and store a new game.

        Returns the full private state; callers hand each player their own
        ``player_secret``.
        """
        state = create_game_state(player_names, game_options, random_seed)
        with self._lock_for(state.game_id):
            self.store.save(state.game_id, state.to_dict(include_private=True))
        return state

    def load_state(self, game_id: str) -> GameState:
        """Load the canonical state. Raises NotFoundError."""
        return GameState.from_dict(self.store.load(game_id))

    def list_games(self) -> list[str]:
        return self.store.list_games()

    def delete_game(self, game_id: str) -> None:
        """Remove a game and its lock. Raises NotFoundError."""
        with self._lock_for(game_id):
            if not self.store.exists(game_id):
                self._forget_lock(game_id)
                raise NotFoundError(f"Unknown game: {game_id!r}")
            self.store.delete(game_id)
            self._forget_lock(game_id)
        logger.info("Deleted game %s", game_id)

    def _forget_lock(self, game_id: str) -> None:
        with self._registry_lock:
            self._locks.pop(game_id, None)

    def get_game_state(
        self,
        game_id: str,
        player_id: str | None = None,
        player_secret: str | None = None,
    ) -> dict[str, Any]:
        """
        Projection of a game for a player, or the public view.

        A player id without the matching secret is an AuthError.
        """
        state = self.load_state(game_id)
        if player_id is not None:
            _authenticate(state, player_id, player_secret)
        return project_state(state, player_id)

    def legal_inputs(
        self,
        game_id: str,
        player_id: str,
        player_secret: str | None,
    ) -> list[dict[str, Any]]:
        state = self.load_state(game_id)
        _authenticate(state, player_id, player_secret)
        return [serialize_input(gi) for gi in ActionGenerator(state, player_id).legal_inputs()]

    def game_log(self, game_id: str, since: int = 0) -> list[dict[str, Any]]:
        """Log entries from index ``since`` on. The log is public."""
        state = self.load_state(game_id)
        return [entry.to_dict() for entry in state.game_log[since:]]

    # ------------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------------

    def submit_input(
        self,
        game_id: str,
        player_id: str,
        player_secret: str | None,
        game_input: GameInput | dict[str, Any],
    ) -> SubmitResult:
        """
        Authenticate and apply one input.

        Engine errors come back as a failed SubmitResult. InvariantViolation
        propagates and nothing is saved.
        """
        with self._lock_for(game_id):
            try:
                try:
                    state = self.load_state(game_id)
                except NotFoundError:
                    self._forget_lock(game_id)
                    raise
                _authenticate(state, player_id, player_secret)
                if isinstance(game_input, dict):
                    game_input = GameInput.from_dict(game_input)
                if game_input.player_id is None:
                    game_input.player_id = player_id
                elif game_input.player_id != player_id:
                    raise AuthError("Input names a different player than the submitter")
            except InvariantViolation:
                raise
            except EngineError as e:
                logger.debug("Rejected submission to game %s: %s", game_id, e.message)
                return SubmitResult(success=False, game_id=game_id,
                                    error=e.message, error_code=e.code.value)

            result = self.reducer.apply(state, game_input)
            if not result.success:
                return SubmitResult(success=False, game_id=game_id,
                                    error=result.error, error_code=result.error_code)

            new_state: GameState = result.new_state
            self.store.save(game_id, new_state.to_dict(include_private=True))

        self.notifier.notify_game_changed(game_id, new_state.game_state_id)
        return SubmitResult(
            success=True,
            game_id=game_id,
            game_state_id=new_state.game_state_id,
            state=project_state(new_state, player_id),
            legal_inputs=[
                serialize_input(gi)
                for gi in ActionGenerator(new_state, player_id).legal_inputs()
            ],
            changes=result.state_changes,
        )


def _authenticate(state: GameState, player_id: str, player_secret: str | None) -> None:
    if not state.has_player(player_id):
        raise AuthError(f"Unknown player: {player_id!r}")
    if state.get_player(player_id).player_secret != player_secret:
        raise AuthError("Invalid player secret")
