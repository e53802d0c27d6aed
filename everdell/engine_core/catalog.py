"""
Content catalog - immutable records for every playable entity.

Cards, locations, events, adornments and river destinations are frozen
dataclasses holding plain data plus references to effect functions. Every
record implements the same effect protocol:

    can_play_check(state, game_input) -> str | None   # reason, or None if legal
    can_play(state, game_input) -> bool
    play(state, game_input) -> None                    # mutates the working state
    get_points(state, player_id) -> int

Records are registered by name; the engine dispatches through the registry
rather than through subclasses. Effect hooks:

- ``play_inner``: what happens when the entity is activated or visited
- ``resolve_inner``: handles an answer to a follow-up queued in its context
- ``can_play_check_inner``: extra legality rule on top of the generic ones
- ``points_inner``: end-of-game bonus points
- ``trigger_inner``: governance cards reacting to another card being played

Content lives in ``everdell.games.everdell`` and is loaded on first lookup.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Protocol, TYPE_CHECKING

from .action import CardSource, ContextType, GameInput, InputType
from .errors import IllegalActionError, MalformedInputError, NotFoundError
from .game_log import entity_part
from .resources import ResourceType

if TYPE_CHECKING:
    from .state import GameState, Player, PlayedCard

logger = logging.getLogger(__name__)


class CardType(str, Enum):
    TRAVELER = "TRAVELER"
    PRODUCTION = "PRODUCTION"
    DESTINATION = "DESTINATION"
    GOVERNANCE = "GOVERNANCE"
    PROSPERITY = "PROSPERITY"


class LocationType(str, Enum):
    BASIC = "BASIC"
    FOREST = "FOREST"
    HAVEN = "HAVEN"
    JOURNEY = "JOURNEY"


class LocationOccupancy(str, Enum):
    EXCLUSIVE = "EXCLUSIVE"
    # Exclusive, but a second player may join with 4+ players.
    EXCLUSIVE_FOUR = "EXCLUSIVE_FOUR"
    UNLIMITED = "UNLIMITED"


class EventType(str, Enum):
    BASIC = "BASIC"
    SPECIAL = "SPECIAL"


class Playable(Protocol):
    """The effect protocol every catalog record implements."""
    name: str

    def can_play_check(self, state: GameState, game_input: GameInput) -> str | None: ...

    def can_play(self, state: GameState, game_input: GameInput) -> bool: ...

    def play(self, state: GameState, game_input: GameInput) -> None: ...

    def get_points(self, state: GameState, player_id: str) -> int: ...


class _PlayableMixin:
    """Shared protocol plumbing for catalog records."""
    name: str
    context_type: ContextType
    resolve_inner: Callable | None

    def can_play(self, state: GameState, game_input: GameInput) -> bool:
        return self.can_play_check(state, game_input) is None

    def entity_part(self):
        return entity_part(self.context_type.value, self.name)

    def _resolve_followup(self, state: GameState, game_input: GameInput) -> None:
        if self.resolve_inner is None:
            raise IllegalActionError(
                f"{self.name} does not accept {game_input.input_type.value} inputs"
            )
        self.resolve_inner(state, game_input)


# ============================================================================
# Cards
# ============================================================================

@dataclass(frozen=True)
class CardDefinition(_PlayableMixin):
    name: str
    card_type: CardType
    base_cost: dict[str, int]
    base_vp: int
    num_in_deck: int
    is_unique: bool
    is_construction: bool
    associated_cards: tuple[str, ...] = ()
    resources_to_gain: dict[str, int] = field(default_factory=dict)
    is_open_destination: bool = False
    max_workers: int = 1
    occupies_space: bool = True
    goes_to_opponent: bool = False
    description: str = ""
    can_play_check_inner: Callable | None = None
    play_inner: Callable | None = None
    resolve_inner: Callable | None = None
    points_inner: Callable | None = None
    trigger_inner: Callable | None = None

    context_type = ContextType.CARD

    @property
    def is_critter(self) -> bool:
        return not self.is_construction

    @property
    def is_destination(self) -> bool:
        return self.card_type == CardType.DESTINATION

    @property
    def total_cost(self) -> int:
        return sum(self.base_cost.values())

    # -- protocol ------------------------------------------------------------

    def can_play_check(self, state: GameState, game_input: GameInput) -> str | None:
        if game_input.input_type == InputType.PLAY_CARD:
            return self._can_play_card_check(state, game_input)
        if game_input.input_type == InputType.VISIT_DESTINATION_CARD:
            return self._can_visit_check(state, game_input)
        return None

    def play(self, state: GameState, game_input: GameInput) -> None:
        if game_input.input_type == InputType.PLAY_CARD:
            self._play_from_source(state, game_input)
        elif game_input.input_type == InputType.VISIT_DESTINATION_CARD:
            self._visit(state, game_input)
        else:
            self._resolve_followup(state, game_input)

    def get_points(self, state: GameState, player_id: str) -> int:
        points = self.base_vp
        if self.points_inner is not None:
            points += self.points_inner(state, player_id)
        return points

    # -- checks --------------------------------------------------------------

    def can_play_ignore_cost_and_source(self, state: GameState, player: Player) -> str | None:
        """Whether the card could enter play at all, ignoring where it comes from and its cost."""
        if not self.goes_to_opponent and not player.can_add_to_city(self.name):
            return f"Unable to add {self.name} to city"
        if self.can_play_check_inner is not None:
            return self.can_play_check_inner(
                state, GameInput.play_card(player.player_id, self.name)
            )
        return None

    def _can_play_card_check(self, state: GameState, game_input: GameInput) -> str | None:
        player = state.get_player(game_input.player_id)
        source = parse_card_source(game_input.option("source", CardSource.HAND.value))

        if source == CardSource.HAND and self.name not in player.cards_in_hand:
            return f"{self.name} is not in your hand"
        if source == CardSource.MEADOW and self.name not in state.meadow_cards:
            return f"{self.name} is not in the Meadow"
        if source == CardSource.STATION and self.name not in state.station_cards:
            return f"{self.name} is not in the Station"
        if source == CardSource.RESERVED and player.reserved_card != self.name:
            return f"{self.name} is not your reserved card"

        reason = self.can_play_ignore_cost_and_source(state, player)
        if reason:
            return reason
        payment_options = game_input.option("payment_options") or {}
        if not isinstance(payment_options, dict):
            raise MalformedInputError("payment_options must be an object")
        return player.validate_payment_options(self, source, payment_options)

    def _can_visit_check(self, state: GameState, game_input: GameInput) -> str | None:
        player = state.get_player(game_input.player_id)
        if not self.is_destination:
            return f"{self.name} is not a destination card"
        owner, played_card = state.find_played_card(game_input.option("card_uid"))
        if played_card.card_name != self.name:
            raise MalformedInputError("card_uid does not refer to this card")
        if owner.player_id != player.player_id and not self.is_open_destination:
            return f"Cannot visit another player's {self.name}"
        if player.available_workers <= 0:
            return "Cannot place any more workers"
        if len(played_card.workers) >= self.max_workers:
            return f"{self.name} is already occupied"
        if self.can_play_check_inner is not None:
            return self.can_play_check_inner(state, game_input)
        return None

    # -- mutations -----------------------------------------------------------

    def _play_from_source(self, state: GameState, game_input: GameInput) -> None:
        player = state.get_player(game_input.player_id)
        source = parse_card_source(game_input.option("source", CardSource.HAND.value))
        if source == CardSource.HAND:
            player.remove_card_from_hand(self.name)
        elif source == CardSource.MEADOW:
            state.remove_card_from_meadow(self.name)
        elif source == CardSource.STATION:
            state.remove_card_from_station(self.name)
        else:
            player.reserved_card = None

        player.pay_for_card(state, self, source, game_input.option("payment_options") or {})
        where = "" if source == CardSource.HAND else f" from the {source.value.title()}"
        state.add_log(player, " played ", self.entity_part(), f"{where}.")
        self.add_to_city_and_play(state, game_input, player)

    def add_to_city_and_play(self, state: GameState, game_input: GameInput, player: Player) -> None:
        """Put the card into play for ``player`` and run its on-play effect."""
        state.played_cards_this_turn.append(self.name)
        if self.goes_to_opponent:
            # The effect decides whose city it ends up in.
            self.play_inner(state, game_input, player, None)
            return
        played_card = player.add_to_city(state, self.name)
        if self.card_type in (CardType.PRODUCTION, CardType.TRAVELER):
            self.activate(state, game_input, player, played_card)

    def activate(
        self,
        state: GameState,
        game_input: GameInput,
        card_owner: Player,
        played_card: PlayedCard | None,
    ) -> None:
        if self.resources_to_gain:
            card_owner.gain_resources(state, self.resources_to_gain)
        if self.play_inner is not None:
            self.play_inner(state, game_input, card_owner, played_card)

    def _visit(self, state: GameState, game_input: GameInput) -> None:
        player = state.get_player(game_input.player_id)
        owner, played_card = state.find_played_card(game_input.option("card_uid"))
        player.place_worker_on_card(owner, played_card)
        state.add_log(player, " placed a worker on ", self.entity_part(), ".")
        if owner.player_id != player.player_id:
            owner.gain_resources(state, {ResourceType.VP.value: 1})
            state.add_log(owner, " gained 1 VP because ", player, f" visited their {self.name}.")
        if self.play_inner is not None:
            self.play_inner(state, game_input, player, played_card)

    def production_activate(self, state: GameState, game_input: GameInput, card_owner: Player,
                            played_card: PlayedCard) -> None:
        if self.card_type != CardType.PRODUCTION:
            raise IllegalActionError(f"{self.name} is not a PRODUCTION card")
        self.activate(state, game_input, card_owner, played_card)


def parse_card_source(raw: Any) -> CardSource:
    try:
        return CardSource(raw)
    except ValueError:
        raise MalformedInputError(f"Unknown card source: {raw!r}")


# ============================================================================
# Locations
# ============================================================================

@dataclass(frozen=True)
class LocationDefinition(_PlayableMixin):
    name: str
    location_type: LocationType
    occupancy: LocationOccupancy
    resources_to_gain: dict[str, int] = field(default_factory=dict)
    base_vp: int = 0
    description: str = ""
    can_play_check_inner: Callable | None = None
    play_inner: Callable | None = None
    resolve_inner: Callable | None = None

    context_type = ContextType.LOCATION

    def can_play_check(self, state: GameState, game_input: GameInput) -> str | None:
        if game_input.input_type != InputType.PLACE_WORKER:
            return None
        player = state.get_player(game_input.player_id)
        if self.name not in state.locations_map:
            return f"{self.name} is not part of this game"
        if player.available_workers <= 0:
            return "Cannot place any more workers"
        occupants = state.locations_map[self.name]
        if self.occupancy == LocationOccupancy.EXCLUSIVE and occupants:
            return f"{self.name} is already occupied"
        if self.occupancy == LocationOccupancy.EXCLUSIVE_FOUR and occupants:
            if (len(state.players) < 4 or len(occupants) >= 2
                    or player.player_id in occupants):
                return f"{self.name} is already occupied"
        if self.can_play_check_inner is not None:
            return self.can_play_check_inner(state, game_input)
        return None

    def play(self, state: GameState, game_input: GameInput) -> None:
        if game_input.input_type != InputType.PLACE_WORKER:
            self._resolve_followup(state, game_input)
            return
        player = state.get_player(game_input.player_id)
        player.place_worker_on_location(state, self.name)
        state.add_log(player, " placed a worker on ", self.entity_part(), ".")
        if self.play_inner is not None:
            self.play_inner(state, game_input, player)
        if self.resources_to_gain:
            player.gain_resources(state, self.resources_to_gain)

    def get_points(self, state: GameState, player_id: str) -> int:
        """Journey points for every worker ``player_id`` has here."""
        if self.location_type != LocationType.JOURNEY:
            return 0
        return self.base_vp * state.locations_map.get(self.name, []).count(player_id)


# ============================================================================
# Events
# ============================================================================

@dataclass(frozen=True)
class EventDefinition(_PlayableMixin):
    name: str
    event_type: EventType
    base_vp: int
    required_cards: tuple[str, ...] = ()
    required_card_types: dict[str, int] = field(default_factory=dict)
    description: str = ""
    can_play_check_inner: Callable | None = None
    play_inner: Callable | None = None
    resolve_inner: Callable | None = None
    points_inner: Callable | None = None

    context_type = ContextType.EVENT

    def can_play_check(self, state: GameState, game_input: GameInput) -> str | None:
        if game_input.input_type != InputType.CLAIM_EVENT:
            return None
        player = state.get_player(game_input.player_id)
        if self.name not in state.events_map:
            return f"{self.name} is not part of this game"
        if state.events_map[self.name] is not None:
            return f"{self.name} has already been claimed"
        if player.available_workers <= 0:
            return "Cannot place any more workers"
        for card_name in self.required_cards:
            if not player.has_card(card_name):
                return f"Need to have played {card_name} to claim {self.name}"
        for card_type, count in self.required_card_types.items():
            have = player.count_card_type(CardType(card_type))
            if have < count:
                return f"Need at least {count} {card_type} cards to claim {self.name} (have {have})"
        if self.can_play_check_inner is not None:
            return self.can_play_check_inner(state, game_input)
        return None

    def play(self, state: GameState, game_input: GameInput) -> None:
        if game_input.input_type != InputType.CLAIM_EVENT:
            self._resolve_followup(state, game_input)
            return
        player = state.get_player(game_input.player_id)
        player.place_worker_on_event(state, self.name)
        state.add_log(player, " claimed the ", self.entity_part(), " event.")
        if self.play_inner is not None:
            self.play_inner(state, game_input, player)

    def get_points(self, state: GameState, player_id: str) -> int:
        points = self.base_vp
        if self.points_inner is not None:
            points += self.points_inner(state, player_id)
        return points


# ============================================================================
# Pearlbrook: adornments and the river
# ============================================================================

@dataclass(frozen=True)
class AdornmentDefinition(_PlayableMixin):
    name: str
    description: str = ""
    play_inner: Callable | None = None
    resolve_inner: Callable | None = None
    points_inner: Callable | None = None

    context_type = ContextType.ADORNMENT

    def can_play_check(self, state: GameState, game_input: GameInput) -> str | None:
        if game_input.input_type != InputType.PLAY_ADORNMENT:
            return None
        player = state.get_player(game_input.player_id)
        if self.name not in player.adornments_in_hand:
            return f"{self.name} is not in your hand"
        if player.get_num_resource(ResourceType.PEARL) < 1:
            return f"Need 1 PEARL to play {self.name}"
        return None

    def play(self, state: GameState, game_input: GameInput) -> None:
        if game_input.input_type != InputType.PLAY_ADORNMENT:
            self._resolve_followup(state, game_input)
            return
        player = state.get_player(game_input.player_id)
        player.spend_resources({ResourceType.PEARL.value: 1})
        player.adornments_in_hand.remove(self.name)
        player.played_adornments.append(self.name)
        state.add_log(player, " played ", self.entity_part(), ".")
        if self.play_inner is not None:
            self.play_inner(state, game_input, player)

    def get_points(self, state: GameState, player_id: str) -> int:
        if self.points_inner is None:
            return 0
        return self.points_inner(state, player_id)


@dataclass(frozen=True)
class RiverDestinationDefinition(_PlayableMixin):
    """What an ambassador does once it reaches a (revealed) river spot."""
    name: str
    kind: str  # "SHOAL", "CITIZEN" or "LOCATION"
    description: str = ""
    play_inner: Callable | None = None
    resolve_inner: Callable | None = None

    context_type = ContextType.RIVER_DESTINATION

    def can_play_check(self, state: GameState, game_input: GameInput) -> str | None:
        return None

    def play(self, state: GameState, game_input: GameInput) -> None:
        if game_input.input_type == InputType.PLACE_AMBASSADOR:
            player = state.get_player(game_input.player_id)
            if self.play_inner is not None:
                self.play_inner(state, game_input, player)
        else:
            self._resolve_followup(state, game_input)

    def get_points(self, state: GameState, player_id: str) -> int:
        return 0


@dataclass(frozen=True)
class RiverSpotDefinition:
    """A spot on the river map and its entry requirement."""
    name: str
    required_card_type: CardType | None = None
    required_count: int = 0

    def can_play_check(self, state: GameState, game_input: GameInput) -> str | None:
        player = state.get_player(game_input.player_id)
        if state.river_destination_map is None:
            return "The river is not part of this game"
        if self.name not in state.river_destination_map:
            return f"Unknown river spot {self.name}"
        if not player.has_available_ambassador:
            return "No ambassador available"
        if self.required_card_type is not None:
            have = player.count_card_type(self.required_card_type)
            if have < self.required_count:
                return (f"Need {self.required_count} {self.required_card_type.value} "
                        f"cards to visit {self.name} (have {have})")
        return None

    def can_play(self, state: GameState, game_input: GameInput) -> bool:
        return self.can_play_check(state, game_input) is None

    def play(self, state: GameState, game_input: GameInput) -> None:
        player = state.get_player(game_input.player_id)
        spot = state.river_destination_map[self.name]
        player.place_ambassador(state, self.name)
        if not spot.revealed:
            spot.revealed = True
            player.gain_resources(state, {ResourceType.PEARL.value: 1})
            state.add_log(player, " revealed ", entity_part("river_destination", spot.name),
                          " and gained 1 PEARL.")
        destination = get_river_destination(spot.name)
        state.add_log(player, " placed an ambassador on ", destination.entity_part(), ".")
        destination.play(state, game_input)

    def get_points(self, state: GameState, player_id: str) -> int:
        return 0


# ============================================================================
# Registry
# ============================================================================

_REGISTRY: dict[str, dict[str, Any]] = {
    "card": {},
    "location": {},
    "event": {},
    "adornment": {},
    "river_destination": {},
    "river_spot": {},
}
_loaded = False


def _kind_of(definition: Any) -> str:
    if isinstance(definition, CardDefinition):
        return "card"
    if isinstance(definition, LocationDefinition):
        return "location"
    if isinstance(definition, EventDefinition):
        return "event"
    if isinstance(definition, AdornmentDefinition):
        return "adornment"
    if isinstance(definition, RiverDestinationDefinition):
        return "river_destination"
    if isinstance(definition, RiverSpotDefinition):
        return "river_spot"
    raise TypeError(f"Not a catalog record: {definition!r}")


def register(definition: Any) -> Any:
    """Add a record to the catalog. Names are unique per kind."""
    table = _REGISTRY[_kind_of(definition)]
    if definition.name in table:
        raise ValueError(f"Duplicate catalog entry: {definition.name}")
    table[definition.name] = definition
    return definition


def _ensure_loaded() -> None:
    global _loaded
    if not _loaded:
        _loaded = True
        from ..games import everdell  # noqa: F401  (registers the content)
        logger.debug(
            "Catalog loaded: %s",
            {kind: len(table) for kind, table in _REGISTRY.items()},
        )


def _lookup(kind: str, name: str) -> Any:
    _ensure_loaded()
    try:
        return _REGISTRY[kind][name]
    except (KeyError, TypeError):
        raise NotFoundError(f"Unknown {kind.replace('_', ' ')}: {name!r}")


def get_card(name: str) -> CardDefinition:
    return _lookup("card", name)


def get_location(name: str) -> LocationDefinition:
    return _lookup("location", name)


def get_event(name: str) -> EventDefinition:
    return _lookup("event", name)


def get_adornment(name: str) -> AdornmentDefinition:
    return _lookup("adornment", name)


def get_river_destination(name: str) -> RiverDestinationDefinition:
    return _lookup("river_destination", name)


def get_river_spot(name: str) -> RiverSpotDefinition:
    return _lookup("river_spot", name)


def all_of(kind: str) -> list[Any]:
    _ensure_loaded()
    return list(_REGISTRY[kind].values())


_CONTEXT_KINDS = {
    ContextType.CARD: "card",
    ContextType.LOCATION: "location",
    ContextType.EVENT: "event",
    ContextType.ADORNMENT: "adornment",
    ContextType.RIVER_DESTINATION: "river_destination",
}


def get_context_entity(context_type: ContextType, name: str) -> Any:
    """Look up the record that owns follow-ups with this context tag."""
    kind = _CONTEXT_KINDS.get(context_type)
    if kind is None:
        raise NotFoundError(f"No catalog entity for context {context_type!r}")
    return _lookup(kind, name)
