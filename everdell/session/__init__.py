"""
Session Module - Stores games and serializes access to them.

A game lives in a GameStore as a JSON snapshot. The GameManager:
- Creates games
- Runs each submitted input under the game's lock
- Saves the new snapshot and then notifies subscribers

Nothing else in the process holds game state between requests.
"""

from .manager import GameChangeNotifier, GameManager, SubmitResult, serialize_input
from .store import FileGameStore, GameStore, InMemoryGameStore

__all__ = [
    "GameChangeNotifier",
    "GameManager",
    "SubmitResult",
    "serialize_input",
    "FileGameStore",
    "GameStore",
    "InMemoryGameStore",
]
