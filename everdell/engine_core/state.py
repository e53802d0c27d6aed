"""
Game State - the single mutable root the engine operates on.

Design principles:
- Mutable in place, but only ever on a clone: the reducer deep-copies the
  stored state before resolving an input, so a rejected input leaves the
  original untouched
- Serializable: to_dict()/from_dict() round-trip to an equal state
- Deterministic: shuffles are seeded from (random_seed, shuffle_count)
- Catalog-driven: card behaviour is looked up by name, never stored here
"""

from __future__ import annotations
import random
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .action import CardSource, ContextType, InputType, PendingInput
from .catalog import CardDefinition, CardType, LocationType, get_adornment, get_card, get_event, get_location
from .errors import IllegalActionError, InvariantViolation, NotFoundError
from .game_log import GameLogEntry, append_entry
from .resources import (
    BASIC_RESOURCES, Discount, ResourceType, empty_resources, parse_resource_map,
    validate_paid_resources,
)

MAX_HAND_SIZE = 8
MAX_CITY_SIZE = 15
MEADOW_SIZE = 8
STATION_SIZE = 3


class Season(str, Enum):
    WINTER = "WINTER"
    SPRING = "SPRING"
    SUMMER = "SUMMER"
    AUTUMN = "AUTUMN"


NEXT_SEASON = {
    Season.WINTER: Season.SPRING,
    Season.SPRING: Season.SUMMER,
    Season.SUMMER: Season.AUTUMN,
}

# Total workers a player has once the season begins.
WORKERS_FOR_SEASON = {
    Season.WINTER: 2,
    Season.SPRING: 3,
    Season.SUMMER: 4,
    Season.AUTUMN: 6,
}


class PlayerStatus(str, Enum):
    DURING_SEASON = "DURING_SEASON"
    PREPARING_FOR_SEASON = "PREPARING_FOR_SEASON"
    GAME_ENDED = "GAME_ENDED"


@dataclass
class GameOptions:
    """Per-game configuration chosen at creation time."""
    pearlbrook: bool = False
    newleaf: bool = False
    allow_undo: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {"pearlbrook": self.pearlbrook, "newleaf": self.newleaf, "allow_undo": self.allow_undo}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> GameOptions:
        data = data or {}
        return cls(
            pearlbrook=bool(data.get("pearlbrook", False)),
            newleaf=bool(data.get("newleaf", False)),
            allow_undo=bool(data.get("allow_undo", True)),
        )


@dataclass
class CardStack:
    """An ordered pile of card names. The top of the pile is the end of the list."""
    name: str
    cards: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.cards)

    @property
    def is_empty(self) -> bool:
        return not self.cards

    def draw(self) -> str | None:
        return self.cards.pop() if self.cards else None

    def add_to_stack(self, card: str) -> None:
        self.cards.append(card)

    def shuffle(self, rng: random.Random) -> None:
        rng.shuffle(self.cards)

    def to_dict(self, include_private: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "num_cards": len(self.cards)}
        if include_private:
            data["cards"] = list(self.cards)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CardStack:
        return cls(name=data["name"], cards=list(data.get("cards", [])))


# ============================================================================
# Played cards (a sum type: critters, constructions, destinations)
# ============================================================================

@dataclass
class PlayedCard:
    """A card in a player's city. ``uid`` is unique within the game."""
    uid: int
    card_name: str
    card_owner_id: str
    resources: dict[str, int] = field(default_factory=dict)

    kind = "card"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "uid": self.uid,
            "card_name": self.card_name,
            "card_owner_id": self.card_owner_id,
            "resources": dict(self.resources),
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> PlayedCard:
        cls = _PLAYED_CARD_KINDS.get(data.get("kind"))
        if cls is None:
            raise InvariantViolation(f"Unknown played card kind: {data.get('kind')!r}")
        played = cls(
            uid=data["uid"],
            card_name=data["card_name"],
            card_owner_id=data["card_owner_id"],
            resources=dict(data.get("resources", {})),
        )
        if isinstance(played, PlayedConstruction):
            played.used_for_critter = data.get("used_for_critter", False)
        if isinstance(played, PlayedDestination):
            played.workers = list(data.get("workers", []))
        _check_kind(get_card(played.card_name), played)
        return played


@dataclass
class PlayedCritter(PlayedCard):
    kind = "critter"


@dataclass
class PlayedConstruction(PlayedCard):
    used_for_critter: bool = False

    kind = "construction"

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["used_for_critter"] = self.used_for_critter
        return data


@dataclass
class PlayedDestination(PlayedConstruction):
    workers: list[str] = field(default_factory=list)

    kind = "destination"

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["workers"] = list(self.workers)
        return data


_PLAYED_CARD_KINDS: dict[str, type[PlayedCard]] = {
    "critter": PlayedCritter,
    "construction": PlayedConstruction,
    "destination": PlayedDestination,
}


def _played_card_class(definition: CardDefinition) -> type[PlayedCard]:
    if definition.is_critter:
        return PlayedCritter
    if definition.is_destination:
        return PlayedDestination
    return PlayedConstruction


def _check_kind(definition: CardDefinition, played: PlayedCard) -> None:
    if type(played) is not _played_card_class(definition):
        raise InvariantViolation(
            f"{definition.name} cannot be stored as a {played.kind} played card"
        )


def make_played_card(definition: CardDefinition, owner_id: str, uid: int) -> PlayedCard:
    return _played_card_class(definition)(uid=uid, card_name=definition.name, card_owner_id=owner_id)


@dataclass
class WorkerPlacement:
    """Where one of a player's workers currently sits."""
    location: str | None = None
    event: str | None = None
    card_uid: int | None = None
    card_owner_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "location": self.location,
            "event": self.event,
            "card_uid": self.card_uid,
            "card_owner_id": self.card_owner_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WorkerPlacement:
        return cls(
            location=data.get("location"),
            event=data.get("event"),
            card_uid=data.get("card_uid"),
            card_owner_id=data.get("card_owner_id"),
        )


# ============================================================================
# Players
# ============================================================================

@dataclass
class Player:
    """
    State for a single player.

    ``player_secret`` authenticates input submission and must never leave the
    server except to its owner.
    """
    player_id: str
    name: str
    player_secret: str
    cards_in_hand: list[str] = field(default_factory=list)
    played_cards: list[PlayedCard] = field(default_factory=list)
    resources: dict[str, int] = field(default_factory=empty_resources)
    num_workers: int = WORKERS_FOR_SEASON[Season.WINTER]
    placed_workers: list[WorkerPlacement] = field(default_factory=list)
    current_season: Season = Season.WINTER
    status: PlayerStatus = PlayerStatus.DURING_SEASON
    claimed_events: list[str] = field(default_factory=list)

    # Newleaf
    reserved_card: str | None = None
    has_used_reservation: bool = False

    # Pearlbrook
    num_ambassadors: int = 0
    ambassador_spot: str | None = None
    adornments_in_hand: list[str] = field(default_factory=list)
    played_adornments: list[str] = field(default_factory=list)

    # -- workers -------------------------------------------------------------

    @property
    def available_workers(self) -> int:
        return self.num_workers - len(self.placed_workers)

    @property
    def has_available_ambassador(self) -> bool:
        return self.num_ambassadors > 0 and self.ambassador_spot is None

    def place_worker_on_location(self, state: GameState, location: str) -> None:
        self._check_worker_available()
        state.locations_map[location].append(self.player_id)
        self.placed_workers.append(WorkerPlacement(location=location))

    def place_worker_on_event(self, state: GameState, event: str) -> None:
        self._check_worker_available()
        state.events_map[event] = self.player_id
        self.claimed_events.append(event)
        self.placed_workers.append(WorkerPlacement(event=event))

    def place_worker_on_card(self, owner: Player, played_card: PlayedCard) -> None:
        self._check_worker_available()
        if not isinstance(played_card, PlayedDestination):
            raise IllegalActionError(f"{played_card.card_name} cannot hold workers")
        played_card.workers.append(self.player_id)
        self.placed_workers.append(
            WorkerPlacement(card_uid=played_card.uid, card_owner_id=owner.player_id)
        )

    def place_ambassador(self, state: GameState, spot: str) -> None:
        if not self.has_available_ambassador:
            raise IllegalActionError("No ambassador available")
        state.river_destination_map[spot].ambassadors.append(self.player_id)
        self.ambassador_spot = spot

    def _check_worker_available(self) -> None:
        if self.available_workers <= 0:
            raise IllegalActionError("Cannot place any more workers")

    def recall_workers(self, state: GameState) -> None:
        """Bring every worker and the ambassador home."""
        for placement in self.placed_workers:
            if placement.location is not None:
                state.locations_map[placement.location].remove(self.player_id)
            elif placement.card_uid is not None:
                _, played_card = state.find_played_card(placement.card_uid)
                played_card.workers.remove(self.player_id)
        self.placed_workers = []
        if self.ambassador_spot is not None:
            state.river_destination_map[self.ambassador_spot].ambassadors.remove(self.player_id)
            self.ambassador_spot = None

    # -- hand ----------------------------------------------------------------

    @property
    def num_cards_in_hand(self) -> int:
        return len(self.cards_in_hand)

    @property
    def hand_room(self) -> int:
        return max(0, MAX_HAND_SIZE - len(self.cards_in_hand))

    def add_card_to_hand(self, state: GameState, card: str) -> None:
        """Full hands overflow into the discard pile."""
        if len(self.cards_in_hand) < MAX_HAND_SIZE:
            self.cards_in_hand.append(card)
        else:
            state.discard_pile.add_to_stack(card)

    def draw_cards(self, state: GameState, num: int) -> int:
        """Draw up to ``num`` cards, stopping at the hand limit. Returns how many were drawn."""
        drawn = 0
        for _ in range(min(num, self.hand_room)):
            card = state.draw_card()
            if card is None:
                break
            self.cards_in_hand.append(card)
            drawn += 1
        return drawn

    def remove_card_from_hand(self, card: str) -> None:
        if card not in self.cards_in_hand:
            raise IllegalActionError(f"{card} is not in your hand")
        self.cards_in_hand.remove(card)

    def discard_cards(self, state: GameState, cards: list[str]) -> None:
        for card in cards:
            self.remove_card_from_hand(card)
            state.discard_pile.add_to_stack(card)

    # -- resources -----------------------------------------------------------

    def get_num_resource(self, resource: ResourceType | str) -> int:
        key = resource.value if isinstance(resource, ResourceType) else resource
        return self.resources.get(key, 0)

    def has_resources(self, resources: dict[str, int]) -> bool:
        return all(self.get_num_resource(r) >= n for r, n in resources.items())

    def gain_resources(self, state: GameState, resources: dict[str, int]) -> None:
        """Add resources; the CARD pseudo-resource draws from the deck."""
        for resource, count in resources.items():
            if resource == "CARD":
                self.draw_cards(state, count)
            elif resource == "ANY":
                raise InvariantViolation("ANY must be resolved to concrete resources before gaining")
            else:
                key = ResourceType(resource).value
                self.resources[key] = self.resources.get(key, 0) + count

    def spend_resources(self, resources: dict[str, int]) -> None:
        for resource, count in resources.items():
            if self.get_num_resource(resource) < count:
                raise IllegalActionError(f"Insufficient {ResourceType(resource).value}")
        for resource, count in resources.items():
            key = ResourceType(resource).value
            self.resources[key] -= count

    # -- city ----------------------------------------------------------------

    def has_card(self, card_name: str) -> bool:
        return any(pc.card_name == card_name for pc in self.played_cards)

    def get_played_cards_by_name(self, card_name: str) -> list[PlayedCard]:
        return [pc for pc in self.played_cards if pc.card_name == card_name]

    def get_played_card(self, uid: int) -> PlayedCard | None:
        for pc in self.played_cards:
            if pc.uid == uid:
                return pc
        return None

    def get_played_cards_by_type(self, card_type: CardType) -> list[PlayedCard]:
        return [pc for pc in self.played_cards if get_card(pc.card_name).card_type == card_type]

    def count_card_type(self, card_type: CardType) -> int:
        return len(self.get_played_cards_by_type(card_type))

    def num_occupied_spaces(self) -> int:
        spaces = sum(1 for pc in self.played_cards if get_card(pc.card_name).occupies_space)
        # A HUSBAND and WIFE pair shares a single space.
        return spaces - self.num_husband_wife_pairs()

    def num_husband_wife_pairs(self) -> int:
        return min(len(self.get_played_cards_by_name("HUSBAND")),
                   len(self.get_played_cards_by_name("WIFE")))

    def can_add_to_city(self, card_name: str) -> bool:
        definition = get_card(card_name)
        if definition.is_unique and self.has_card(card_name):
            return False
        if not definition.occupies_space:
            return True
        if card_name in ("HUSBAND", "WIFE"):
            partner = "WIFE" if card_name == "HUSBAND" else "HUSBAND"
            if (len(self.get_played_cards_by_name(partner))
                    > len(self.get_played_cards_by_name(card_name))):
                return True
        return self.num_occupied_spaces() < MAX_CITY_SIZE

    def add_to_city(self, state: GameState, card_name: str) -> PlayedCard:
        definition = get_card(card_name)
        if not self.can_add_to_city(card_name):
            raise IllegalActionError(f"Unable to add {card_name} to city")
        played_card = make_played_card(definition, self.player_id, state.allocate_uid())
        self.played_cards.append(played_card)
        return played_card

    def remove_card_from_city(self, state: GameState, played_card: PlayedCard,
                              to_discard: bool = True) -> None:
        if isinstance(played_card, PlayedDestination) and played_card.workers:
            raise IllegalActionError(f"Cannot remove {played_card.card_name} while it holds workers")
        self.played_cards.remove(played_card)
        if to_discard:
            state.discard_pile.add_to_stack(played_card.card_name)

    # -- paying for cards ----------------------------------------------------

    def _find_unused_associated_construction(self, definition: CardDefinition) -> PlayedCard | None:
        candidates = list(definition.associated_cards) + ["EVERTREE"]
        for name in candidates:
            for pc in self.get_played_cards_by_name(name):
                if isinstance(pc, PlayedConstruction) and not pc.used_for_critter:
                    return pc
        return None

    def validate_payment_options(
        self,
        definition: CardDefinition,
        source: CardSource,
        payment_options: dict[str, Any],
    ) -> str | None:
        """Returns a reason the payment is unacceptable, or None."""
        paid = parse_resource_map(payment_options.get("resources"))
        if not self.has_resources(paid):
            return "You do not have the resources you are trying to pay with"

        if payment_options.get("use_associated_card"):
            if not definition.is_critter:
                return "Only critters can be played using an associated construction"
            if self._find_unused_associated_construction(definition) is None:
                return f"No unoccupied associated construction for {definition.name}"
            if paid:
                return "Cannot overpay for cards"
            return None

        discount = None
        card_to_use = payment_options.get("card_to_use")
        if card_to_use is not None:
            if card_to_use != "CRANE":
                return f"Cannot use {card_to_use} to pay for cards"
            if not self.has_card("CRANE"):
                return "You do not have a CRANE in your city"
            if not definition.is_construction:
                return "CRANE can only be used to play constructions"
            discount = Discount.ANY_3
        elif source == CardSource.RESERVED:
            discount = Discount.ANY_1

        return validate_paid_resources(
            paid, definition.base_cost, discount, has_judge=self.has_card("JUDGE")
        )

    def pay_for_card(
        self,
        state: GameState,
        definition: CardDefinition,
        source: CardSource,
        payment_options: dict[str, Any],
    ) -> None:
        reason = self.validate_payment_options(definition, source, payment_options)
        if reason:
            raise IllegalActionError(reason)
        self.spend_resources(parse_resource_map(payment_options.get("resources")))

        if payment_options.get("use_associated_card"):
            construction = self._find_unused_associated_construction(definition)
            construction.used_for_critter = True
            state.add_log(self, f" occupied their {construction.card_name} to play {definition.name}.")
        elif payment_options.get("card_to_use") == "CRANE":
            crane = self.get_played_cards_by_name("CRANE")[0]
            self.remove_card_from_city(state, crane)
            state.add_log(self, f" discarded CRANE to pay 3 fewer resources for {definition.name}.")

    def can_afford_card(self, definition: CardDefinition, source: CardSource = CardSource.HAND) -> bool:
        if definition.is_critter and self._find_unused_associated_construction(definition):
            return True
        cost = dict(definition.base_cost)
        allowance = 0
        if definition.is_construction and self.has_card("CRANE"):
            allowance = 3
        elif source == CardSource.RESERVED:
            allowance = 1
        shortfall = sum(max(0, n - self.get_num_resource(r)) for r, n in cost.items())
        if shortfall <= allowance:
            return True
        if self.has_card("JUDGE") and shortfall == 1:
            spare = sum(max(0, self.get_num_resource(r) - cost.get(r.value, 0))
                        for r in BASIC_RESOURCES)
            return spare >= 1
        return False

    # -- scoring -------------------------------------------------------------

    def get_points(self, state: GameState) -> int:
        points = self.get_num_resource(ResourceType.VP)
        points += 2 * self.get_num_resource(ResourceType.PEARL)
        points += 3 * self.num_husband_wife_pairs()
        for pc in self.played_cards:
            points += get_card(pc.card_name).get_points(state, self.player_id)
            points += pc.resources.get(ResourceType.VP.value, 0)
        for event in self.claimed_events:
            points += get_event(event).get_points(state, self.player_id)
        for location in {p.location for p in self.placed_workers if p.location}:
            definition = get_location(location)
            if definition.location_type == LocationType.JOURNEY:
                points += definition.get_points(state, self.player_id)
        for adornment in self.played_adornments:
            points += get_adornment(adornment).get_points(state, self.player_id)
        return points

    # -- serialization -------------------------------------------------------

    def to_dict(self, include_private: bool = True) -> dict[str, Any]:
        data = {
            "player_id": self.player_id,
            "name": self.name,
            "num_cards_in_hand": len(self.cards_in_hand),
            "cards_in_hand": list(self.cards_in_hand) if include_private else None,
            "played_cards": [pc.to_dict() for pc in self.played_cards],
            "resources": dict(self.resources),
            "num_workers": self.num_workers,
            "placed_workers": [p.to_dict() for p in self.placed_workers],
            "current_season": self.current_season.value,
            "status": self.status.value,
            "claimed_events": list(self.claimed_events),
            "reserved_card": self.reserved_card,
            "has_used_reservation": self.has_used_reservation,
            "num_ambassadors": self.num_ambassadors,
            "ambassador_spot": self.ambassador_spot,
            "num_adornments_in_hand": len(self.adornments_in_hand),
            "adornments_in_hand": list(self.adornments_in_hand) if include_private else None,
            "played_adornments": list(self.played_adornments),
        }
        if include_private:
            data["player_secret"] = self.player_secret
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Player:
        return cls(
            player_id=data["player_id"],
            name=data["name"],
            player_secret=data["player_secret"],
            cards_in_hand=list(data["cards_in_hand"]),
            played_cards=[PlayedCard.from_dict(pc) for pc in data["played_cards"]],
            resources=dict(data["resources"]),
            num_workers=data["num_workers"],
            placed_workers=[WorkerPlacement.from_dict(p) for p in data["placed_workers"]],
            current_season=Season(data["current_season"]),
            status=PlayerStatus(data["status"]),
            claimed_events=list(data["claimed_events"]),
            reserved_card=data.get("reserved_card"),
            has_used_reservation=data.get("has_used_reservation", False),
            num_ambassadors=data.get("num_ambassadors", 0),
            ambassador_spot=data.get("ambassador_spot"),
            adornments_in_hand=list(data.get("adornments_in_hand") or []),
            played_adornments=list(data.get("played_adornments", [])),
        )


# ============================================================================
# River (Pearlbrook)
# ============================================================================

@dataclass
class RiverSpotState:
    """A river spot and the face-down destination sitting on it."""
    name: str  # destination name
    revealed: bool = False
    ambassadors: list[str] = field(default_factory=list)

    def to_dict(self, include_private: bool = True) -> dict[str, Any]:
        return {
            "name": self.name if (self.revealed or include_private) else None,
            "revealed": self.revealed,
            "ambassadors": list(self.ambassadors),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RiverSpotState:
        return cls(name=data["name"], revealed=data["revealed"],
                   ambassadors=list(data.get("ambassadors", [])))


# ============================================================================
# Game state
# ============================================================================

@dataclass
class GameState:
    """
    Complete game state at a point in time.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer.
    """
    game_id: str
    game_state_id: int
    active_player_id: str
    players: list[Player]
    meadow_cards: list[str] = field(default_factory=list)
    deck: CardStack = field(default_factory=lambda: CardStack(name="Deck"))
    discard_pile: CardStack = field(default_factory=lambda: CardStack(name="Discard Pile"))
    locations_map: dict[str, list[str]] = field(default_factory=dict)
    events_map: dict[str, str | None] = field(default_factory=dict)
    game_options: GameOptions = field(default_factory=GameOptions)

    station_cards: list[str] = field(default_factory=list)
    river_destination_map: dict[str, RiverSpotState] | None = None
    adornments_pile: CardStack | None = None

    # Effect resolution
    pending_inputs: list[PendingInput] = field(default_factory=list)
    played_cards_this_turn: list[str] = field(default_factory=list)

    game_log: list[GameLogEntry] = field(default_factory=list)

    # One-level undo checkpoint
    undo_snapshot: dict[str, Any] | None = None
    undo_player_id: str | None = None

    # Determinism and identity counters
    random_seed: int = 0
    shuffle_count: int = 0
    next_uid: int = 1
    next_input_id: int = 1

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def active_player(self) -> Player:
        return self.get_player(self.active_player_id)

    @property
    def is_game_over(self) -> bool:
        return all(p.status == PlayerStatus.GAME_ENDED for p in self.players)

    def get_player(self, player_id: str | None) -> Player:
        for p in self.players:
            if p.player_id == player_id:
                return p
        raise NotFoundError(f"Unknown player: {player_id!r}")

    def has_player(self, player_id: str | None) -> bool:
        return any(p.player_id == player_id for p in self.players)

    def other_players(self, player_id: str) -> list[Player]:
        return [p for p in self.players if p.player_id != player_id]

    def find_played_card(self, uid: Any) -> tuple[Player, PlayedCard]:
        if isinstance(uid, bool) or not isinstance(uid, int):
            raise NotFoundError(f"Unknown played card: {uid!r}")
        for player in self.players:
            played_card = player.get_played_card(uid)
            if played_card is not None:
                return player, played_card
        raise NotFoundError(f"Unknown played card: {uid!r}")

    # -- counters ------------------------------------------------------------

    def allocate_uid(self) -> int:
        uid = self.next_uid
        self.next_uid += 1
        return uid

    def next_rng(self) -> random.Random:
        rng = random.Random(self.random_seed * 1_000_003 + self.shuffle_count)
        self.shuffle_count += 1
        return rng

    # -- cards ---------------------------------------------------------------

    def draw_card(self) -> str | None:
        """Draw from the deck, reshuffling the discard pile when it runs out."""
        if self.deck.is_empty and not self.discard_pile.is_empty:
            self.deck.cards = self.discard_pile.cards
            self.discard_pile.cards = []
            self.deck.shuffle(self.next_rng())
            self.add_log("Shuffled the discard pile into the deck.")
        return self.deck.draw()

    def replenish_meadow(self) -> None:
        while len(self.meadow_cards) < MEADOW_SIZE:
            card = self.draw_card()
            if card is None:
                break
            self.meadow_cards.append(card)

    def replenish_station(self) -> None:
        if not self.game_options.newleaf:
            return
        while len(self.station_cards) < STATION_SIZE:
            card = self.draw_card()
            if card is None:
                break
            self.station_cards.append(card)

    def remove_card_from_meadow(self, card: str) -> None:
        if card not in self.meadow_cards:
            raise IllegalActionError(f"{card} is not in the Meadow")
        self.meadow_cards.remove(card)

    def remove_card_from_station(self, card: str) -> None:
        if card not in self.station_cards:
            raise IllegalActionError(f"{card} is not in the Station")
        self.station_cards.remove(card)

    # -- pending inputs and log ----------------------------------------------

    def push_pending(
        self,
        input_type: InputType,
        player_id: str,
        label: str,
        context_type: ContextType,
        context_name: str,
        **constraints: Any,
    ) -> PendingInput:
        """Queue a follow-up at the back of the FIFO."""
        pending = PendingInput(
            input_id=f"input-{self.next_input_id}",
            input_type=input_type,
            player_id=player_id,
            label=label,
            context_type=context_type,
            context_name=context_name,
            **constraints,
        )
        self.next_input_id += 1
        self.pending_inputs.append(pending)
        return pending

    def add_log(self, *chunks: Any) -> GameLogEntry:
        return append_entry(self.game_log, *chunks)

    # -- turn order ----------------------------------------------------------

    def next_player(self) -> Player | None:
        """Hand the turn to the next player in seating order who has not ended."""
        idx = next(i for i, p in enumerate(self.players) if p.player_id == self.active_player_id)
        for offset in range(1, self.num_players + 1):
            candidate = self.players[(idx + offset) % self.num_players]
            if candidate.status != PlayerStatus.GAME_ENDED:
                self.active_player_id = candidate.player_id
                return candidate
        return None

    def get_scores(self) -> dict[str, int]:
        return {p.player_id: p.get_points(self) for p in self.players}

    # -- copying and serialization -------------------------------------------

    def clone(self) -> GameState:
        """Deep copy the state."""
        return deepcopy(self)

    def to_dict(self, include_private: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {
            "game_id": self.game_id,
            "game_state_id": self.game_state_id,
            "active_player_id": self.active_player_id,
            "players": [p.to_dict(include_private) for p in self.players],
            "meadow_cards": list(self.meadow_cards),
            "station_cards": list(self.station_cards),
            "deck": self.deck.to_dict(include_private),
            "discard_pile": self.discard_pile.to_dict(include_private),
            "locations_map": {k: list(v) for k, v in self.locations_map.items()},
            "events_map": dict(self.events_map),
            "river_destination_map": (
                {k: v.to_dict(include_private) for k, v in self.river_destination_map.items()}
                if self.river_destination_map is not None else None
            ),
            "adornments_pile": (
                self.adornments_pile.to_dict(include_private)
                if self.adornments_pile is not None else None
            ),
            "game_options": self.game_options.to_dict(),
            "played_cards_this_turn": list(self.played_cards_this_turn),
            "game_log": [e.to_dict() for e in self.game_log],
            "next_uid": self.next_uid,
            "next_input_id": self.next_input_id,
        }
        if include_private:
            data["pending_inputs"] = [p.to_dict() for p in self.pending_inputs]
            data["undo_snapshot"] = self.undo_snapshot
            data["undo_player_id"] = self.undo_player_id
            data["random_seed"] = self.random_seed
            data["shuffle_count"] = self.shuffle_count
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameState:
        river = data.get("river_destination_map")
        adornments = data.get("adornments_pile")
        return cls(
            game_id=data["game_id"],
            game_state_id=data["game_state_id"],
            active_player_id=data["active_player_id"],
            players=[Player.from_dict(p) for p in data["players"]],
            meadow_cards=list(data["meadow_cards"]),
            station_cards=list(data.get("station_cards", [])),
            deck=CardStack.from_dict(data["deck"]),
            discard_pile=CardStack.from_dict(data["discard_pile"]),
            locations_map={k: list(v) for k, v in data["locations_map"].items()},
            events_map=dict(data["events_map"]),
            river_destination_map=(
                {k: RiverSpotState.from_dict(v) for k, v in river.items()}
                if river is not None else None
            ),
            adornments_pile=CardStack.from_dict(adornments) if adornments is not None else None,
            game_options=GameOptions.from_dict(data.get("game_options")),
            pending_inputs=[PendingInput.from_dict(p) for p in data.get("pending_inputs", [])],
            played_cards_this_turn=list(data.get("played_cards_this_turn", [])),
            game_log=[GameLogEntry.from_dict(e) for e in data.get("game_log", [])],
            undo_snapshot=data.get("undo_snapshot"),
            undo_player_id=data.get("undo_player_id"),
            random_seed=data.get("random_seed", 0),
            shuffle_count=data.get("shuffle_count", 0),
            next_uid=data.get("next_uid", 1),
            next_input_id=data.get("next_input_id", 1),
        )
