"""
Game Store - Persists game snapshots by game id.

The store:
- Keeps one snapshot (GameState.to_dict(include_private=True)) per game
- Knows nothing about the rules; it only loads and saves JSON
- Is only ever called with the game's lock held (see GameManager)

Two implementations:
- InMemoryGameStore: JSON text in a dict, for tests and single-process use
- FileGameStore: one JSON file per game on local disk
"""

from __future__ import annotations
import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from ..engine_core.errors import NotFoundError

logger = logging.getLogger(__name__)


class GameStore(ABC):
    """Persistence interface for game snapshots."""

    @abstractmethod
    def load(self, game_id: str) -> dict[str, Any]:
        """Load a snapshot. Raises NotFoundError if the game does not exist."""

    @abstractmethod
    def save(self, game_id: str, snapshot: dict[str, Any]) -> None:
        """Store a snapshot, replacing any previous one."""

    @abstractmethod
    def exists(self, game_id: str) -> bool:
        ...

    @abstractmethod
    def list_games(self) -> list[str]:
        ...

    @abstractmethod
    def delete(self, game_id: str) -> None:
        ...


class InMemoryGameStore(GameStore):
    """
    Keeps snapshots as JSON text.

    Loads always return a fresh dict; raw() exposes the stored text.
    """

    def __init__(self):
        self._games: dict[str, str] = {}

    def load(self, game_id: str) -> dict[str, Any]:
        if game_id not in self._games:
            raise NotFoundError(f"Game not found: {game_id}")
        return json.loads(self._games[game_id])

    def save(self, game_id: str, snapshot: dict[str, Any]) -> None:
        self._games[game_id] = json.dumps(snapshot, sort_keys=True)

    def exists(self, game_id: str) -> bool:
        return game_id in self._games

    def list_games(self) -> list[str]:
        return sorted(self._games)

    def delete(self, game_id: str) -> None:
        self._games.pop(game_id, None)

    def raw(self, game_id: str) -> str:
        """The stored JSON text."""
        if game_id not in self._games:
            raise NotFoundError(f"Game not found: {game_id}")
        return self._games[game_id]


class FileGameStore(GameStore):
    """
    File-based store, one ``<game_id>.json`` per game.

    Usage:
        store = FileGameStore("~/.everdell/games")
        store.save(state.game_id, state.to_dict())
        snapshot = store.load(state.game_id)
    """

    def __init__(self, directory: str | Path | None = None):
        if directory is None:
            directory = Path.home() / ".everdell" / "games"
        self.directory = Path(directory).expanduser()

        # Ensure the directory exists
        self.directory.mkdir(parents=True, exist_ok=True)

    def load(self, game_id: str) -> dict[str, Any]:
        path = self._get_path(game_id)
        if not path.exists():
            raise NotFoundError(f"Game not found: {game_id}")
        with open(path) as f:
            return json.load(f)

    def save(self, game_id: str, snapshot: dict[str, Any]) -> None:
        path = self._get_path(game_id)
        # Readers only ever see a complete file.
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w") as f:
            json.dump(snapshot, f, sort_keys=True)
        os.replace(tmp_path, path)
        logger.debug("Saved game %s to %s", game_id, path)

    def exists(self, game_id: str) -> bool:
        return self._get_path(game_id).exists()

    def list_games(self) -> list[str]:
        if not self.directory.exists():
            return []
        return sorted(f.stem for f in self.directory.glob("*.json"))

    def delete(self, game_id: str) -> None:
        self._get_path(game_id).unlink(missing_ok=True)

    def _get_path(self, game_id: str) -> Path:
        """
        Get file path for a game.

        Ids are used as file names, so anything that could escape the
        directory is rejected.
        """
        if not game_id or "/" in game_id or "\\" in game_id or game_id.startswith("."):
            raise NotFoundError(f"Game not found: {game_id}")
        return self.directory / f"{game_id}.json"
