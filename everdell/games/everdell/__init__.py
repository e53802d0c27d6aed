"""
Everdell - the base game plus representative Pearlbrook and Newleaf content.

Everdell is a worker-placement and tableau-building game played over four
seasons. Key mechanics:
- Workers collect resources at locations, visit destination cards, claim events
- Cards are played from hand, the Meadow, the Station or a reservation into a
  city of at most 15 spaces
- PRODUCTION cards activate again in spring and autumn
- Highest VP after everyone has ended in autumn wins

Importing this package registers every card, location, event, river
destination and adornment with the catalog.
"""

from . import cards, events, locations, pearlbrook
from .cards import EVERDELL_CARDS, build_deck
from .setup import create_game_state

__all__ = [
    "cards",
    "events",
    "locations",
    "pearlbrook",
    "EVERDELL_CARDS",
    "build_deck",
    "create_game_state",
]
