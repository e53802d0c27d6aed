"""
Game log - structured, append-only record of what happened.

Each entry is a list of text parts so that a client can render cards,
resources and players as rich elements instead of parsing prose:

    [{"type": "player", "player_id": "p1", "name": "Alice"},
     {"type": "text", "text": " played "},
     {"type": "entity", "entity_type": "card", "name": "FARM"},
     {"type": "text", "text": "."}]

The log is part of the game state, so it is restored by undo along with
everything else.
"""

from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import Any

from .resources import ResourceType, CARD, ANY

MAX_LOG_ENTRIES = 500

_SYMBOLS = {r.value for r in ResourceType} | {CARD, ANY}
_TOKEN_RE = re.compile(r"\b(" + "|".join(sorted(_SYMBOLS)) + r")\b")


@dataclass(frozen=True)
class TextPart:
    """One renderable piece of a log entry."""
    type: str  # "text", "resource", "player", "entity"
    text: str = ""
    player_id: str | None = None
    entity_type: str | None = None  # card, location, event, adornment, river_destination

    def to_dict(self) -> dict[str, Any]:
        if self.type == "text":
            return {"type": "text", "text": self.text}
        if self.type == "resource":
            return {"type": "resource", "resource": self.text}
        if self.type == "player":
            return {"type": "player", "player_id": self.player_id, "name": self.text}
        return {"type": "entity", "entity_type": self.entity_type, "name": self.text}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TextPart:
        part_type = data["type"]
        if part_type == "text":
            return cls(type="text", text=data["text"])
        if part_type == "resource":
            return cls(type="resource", text=data["resource"])
        if part_type == "player":
            return cls(type="player", text=data["name"], player_id=data["player_id"])
        return cls(type="entity", text=data["name"], entity_type=data["entity_type"])


@dataclass
class GameLogEntry:
    parts: list[TextPart] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"entry": [p.to_dict() for p in self.parts]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameLogEntry:
        return cls(parts=[TextPart.from_dict(p) for p in data["entry"]])

    def plain_text(self) -> str:
        return "".join(p.text for p in self.parts)


def player_part(player: Any) -> TextPart:
    return TextPart(type="player", text=player.name, player_id=player.player_id)


def entity_part(entity_type: str, name: str) -> TextPart:
    return TextPart(type="entity", entity_type=entity_type, text=name)


def to_game_text(*chunks: Any) -> list[TextPart]:
    """
    Turn a mixture of strings, players and TextParts into log parts.

    Plain strings are scanned for resource symbols (TWIG, CARD, VP ...),
    which become resource parts.
    """
    parts: list[TextPart] = []
    for chunk in chunks:
        if isinstance(chunk, TextPart):
            parts.append(chunk)
        elif isinstance(chunk, str):
            pos = 0
            for match in _TOKEN_RE.finditer(chunk):
                if match.start() > pos:
                    parts.append(TextPart(type="text", text=chunk[pos:match.start()]))
                parts.append(TextPart(type="resource", text=match.group(1)))
                pos = match.end()
            if pos < len(chunk):
                parts.append(TextPart(type="text", text=chunk[pos:]))
        elif hasattr(chunk, "player_id") and hasattr(chunk, "name"):
            parts.append(player_part(chunk))
        else:
            parts.append(TextPart(type="text", text=str(chunk)))
    return parts


def append_entry(log: list[GameLogEntry], *chunks: Any) -> GameLogEntry:
    """Append an entry, dropping the oldest half of the log once it is full."""
    entry = GameLogEntry(parts=to_game_text(*chunks))
    log.append(entry)
    if len(log) > MAX_LOG_ENTRIES:
        del log[: MAX_LOG_ENTRIES // 2]
    return entry
