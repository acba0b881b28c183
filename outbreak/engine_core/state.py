"""
Game State - The canonical snapshot the engine operates on.

Design principles:
- Immutable-friendly: all changes return a new state, nothing is mutated in place
- Explicit: the snapshot is passed into and returned from every transform
- Queryable: simple read helpers only, no game rules
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Union


class Disease(str, Enum):
    """The four disease colors."""
    BLUE = "blue"
    YELLOW = "yellow"
    BLACK = "black"
    RED = "red"


DISEASES: tuple[Disease, ...] = (Disease.BLUE, Disease.YELLOW, Disease.BLACK, Disease.RED)


class CureStatus(str, Enum):
    """Cure progress for one disease."""
    UNCURED = "uncured"
    CURED = "cured"
    ERADICATED = "eradicated"


class TurnPhase(str, Enum):
    """The three phases of a player's turn."""
    ACTIONS = "actions"
    DRAW = "draw"
    INFECT = "infect"


class GameStatus(str, Enum):
    """Overall game status. Anything but ONGOING is terminal."""
    ONGOING = "ongoing"
    WON = "won"
    LOST = "lost"


class LossReason(str, Enum):
    """Why a game was lost."""
    OUTBREAKS = "outbreaks"
    CUBES_EXHAUSTED = "cubes_exhausted"
    PLAYER_DECK_EXHAUSTED = "player_deck_exhausted"


class Role(str, Enum):
    """The seven player roles."""
    CONTINGENCY_PLANNER = "contingency_planner"
    DISPATCHER = "dispatcher"
    MEDIC = "medic"
    OPERATIONS_EXPERT = "operations_expert"
    QUARANTINE_SPECIALIST = "quarantine_specialist"
    RESEARCHER = "researcher"
    SCIENTIST = "scientist"


ALL_ROLES: tuple[Role, ...] = tuple(Role)


class EventType(str, Enum):
    """The five event cards."""
    AIRLIFT = "airlift"
    FORECAST = "forecast"
    GOVERNMENT_GRANT = "government_grant"
    ONE_QUIET_NIGHT = "one_quiet_night"
    RESILIENT_POPULATION = "resilient_population"


# Rules constants
CUBES_PER_COLOR = 24
MAX_CUBES_PER_CITY = 3
MAX_RESEARCH_STATIONS = 6
HAND_LIMIT = 7
ACTIONS_PER_TURN = 4
CARDS_DRAWN_PER_TURN = 2
OUTBREAK_LIMIT = 8
INFECTION_RATE_TRACK: tuple[int, ...] = (2, 2, 2, 3, 3, 4, 4)
STARTING_CITY = "Atlanta"


def infection_rate(position: int) -> int:
    """Number of infection cards drawn at a rate-track position (1-7)."""
    if position < 1 or position > len(INFECTION_RATE_TRACK):
        raise ValueError(
            f"Invalid infection rate position: {position}. "
            f"Must be between 1 and {len(INFECTION_RATE_TRACK)}."
        )
    return INFECTION_RATE_TRACK[position - 1]


# =============================================================================
# Cards
# =============================================================================

@dataclass(frozen=True)
class CityCard:
    """A player card naming a city."""
    city: str
    color: Disease

    @property
    def kind(self) -> str:
        return "city"

    def __str__(self) -> str:
        return self.city


@dataclass(frozen=True)
class EventCard:
    """A player card carrying a one-off event effect."""
    event: EventType

    @property
    def kind(self) -> str:
        return "event"

    def __str__(self) -> str:
        return f"Event: {self.event.value}"


@dataclass(frozen=True)
class EpidemicCard:
    """An epidemic card. Never held in a hand."""

    @property
    def kind(self) -> str:
        return "epidemic"

    def __str__(self) -> str:
        return "Epidemic"


PlayerCard = Union[CityCard, EventCard, EpidemicCard]


@dataclass(frozen=True)
class InfectionCard:
    """An infection card: which city gets a cube of which color."""
    city: str
    color: Disease

    def __str__(self) -> str:
        return f"{self.city} ({self.color.value})"


# =============================================================================
# Board and players
# =============================================================================

@dataclass(frozen=True)
class CityState:
    """Disease cubes and research station presence for one city."""
    blue: int = 0
    yellow: int = 0
    black: int = 0
    red: int = 0
    has_research_station: bool = False

    def cubes(self, color: Disease) -> int:
        return getattr(self, Disease(color).value)

    def with_cubes(self, color: Disease, count: int) -> CityState:
        """Return new city state with the cube count for one color replaced."""
        return replace(self, **{Disease(color).value: count})

    def with_station(self, present: bool) -> CityState:
        return replace(self, has_research_station=present)

    @property
    def total_cubes(self) -> int:
        return self.blue + self.yellow + self.black + self.red


@dataclass(frozen=True)
class PlayerState:
    """
    State for a single player.

    The stored event slot is only ever filled for the Contingency
    Planner and does not count toward the hand limit.
    """
    role: Role
    location: str
    hand: tuple[PlayerCard, ...] = ()
    stored_event: EventCard | None = None

    def with_location(self, city: str) -> PlayerState:
        return replace(self, location=city)

    def with_hand(self, hand: list[PlayerCard] | tuple[PlayerCard, ...]) -> PlayerState:
        return replace(self, hand=tuple(hand))

    def with_stored_event(self, card: EventCard | None) -> PlayerState:
        return replace(self, stored_event=card)

    def add_card(self, card: PlayerCard) -> PlayerState:
        return replace(self, hand=self.hand + (card,))

    def remove_card_at(self, index: int) -> tuple[PlayerCard, PlayerState]:
        """Return (removed card, new player state)."""
        card = self.hand[index]
        return card, replace(self, hand=self.hand[:index] + self.hand[index + 1:])

    def find_city_card(self, city: str) -> int:
        """Index of the city card for `city` in hand, or -1."""
        for index, card in enumerate(self.hand):
            if isinstance(card, CityCard) and card.city == city:
                return index
        return -1

    def find_event_card(self, event: EventType) -> int:
        """Index of the event card in hand, or -1."""
        for index, card in enumerate(self.hand):
            if isinstance(card, EventCard) and card.event == event:
                return index
        return -1

    def city_cards_of_color(self, color: Disease) -> list[CityCard]:
        return [c for c in self.hand if isinstance(c, CityCard) and c.color == color]

    @property
    def hand_size(self) -> int:
        return len(self.hand)


@dataclass(frozen=True)
class GameState:
    """
    Complete game state at a point in time.

    Decks are ordered top-first: index 0 is the next card drawn.
    Discard piles are ordered oldest-first.
    """
    players: tuple[PlayerState, ...]
    board: dict[str, CityState]

    # Turn structure
    current_player_idx: int = 0
    phase: TurnPhase = TurnPhase.ACTIONS
    actions_remaining: int = ACTIONS_PER_TURN
    turn_number: int = 1

    # Disease progress
    cures: dict[Disease, CureStatus] = field(
        default_factory=lambda: {d: CureStatus.UNCURED for d in DISEASES}
    )
    cube_supply: dict[Disease, int] = field(
        default_factory=lambda: {d: CUBES_PER_COLOR for d in DISEASES}
    )
    infection_rate_position: int = 1
    outbreak_count: int = 0

    # Decks
    player_deck: tuple[PlayerCard, ...] = ()
    player_discard: tuple[PlayerCard, ...] = ()
    player_removed: tuple[PlayerCard, ...] = ()
    infection_deck: tuple[InfectionCard, ...] = ()
    infection_discard: tuple[InfectionCard, ...] = ()
    infection_removed: tuple[InfectionCard, ...] = ()

    # Outcome
    status: GameStatus = GameStatus.ONGOING
    loss_reason: LossReason | None = None

    # Per-turn flags, cleared when the next player's turn starts
    ops_expert_move_used: bool = False
    skip_next_infection: bool = False
    player_cards_drawn: bool = False

    # Setup parameters
    difficulty: int = 4
    seed: int | None = None

    @property
    def current_player(self) -> PlayerState:
        """Get the current player."""
        return self.players[self.current_player_idx]

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def is_over(self) -> bool:
        return self.status != GameStatus.ONGOING

    @property
    def infection_rate(self) -> int:
        return infection_rate(self.infection_rate_position)

    def get_player(self, index: int) -> PlayerState | None:
        """Get player by index, or None if out of range."""
        if 0 <= index < len(self.players):
            return self.players[index]
        return None

    def city(self, name: str) -> CityState:
        """Get the state of a city. Raises KeyError for unknown names."""
        return self.board[name]

    def cubes_on_board(self, color: Disease) -> int:
        return sum(c.cubes(color) for c in self.board.values())

    def research_stations(self) -> list[str]:
        return [name for name, c in self.board.items() if c.has_research_station]

    def is_cured(self, color: Disease) -> bool:
        return self.cures[color] in (CureStatus.CURED, CureStatus.ERADICATED)

    def all_cured(self) -> bool:
        return all(self.is_cured(d) for d in DISEASES)

    def players_over_hand_limit(self) -> list[int]:
        return [i for i, p in enumerate(self.players) if p.hand_size > HAND_LIMIT]

    def with_player(self, index: int, player: PlayerState) -> GameState:
        """Return new state with one player replaced."""
        players = list(self.players)
        players[index] = player
        return self._copy_with(players=tuple(players))

    def with_city(self, name: str, city_state: CityState) -> GameState:
        """Return new state with one city replaced."""
        board = dict(self.board)
        board[name] = city_state
        return self._copy_with(board=board)

    def with_cure(self, color: Disease, status: CureStatus) -> GameState:
        cures = dict(self.cures)
        cures[color] = status
        return self._copy_with(cures=cures)

    def with_supply(self, color: Disease, count: int) -> GameState:
        supply = dict(self.cube_supply)
        supply[color] = count
        return self._copy_with(cube_supply=supply)

    def discard_player_cards(self, *cards: PlayerCard) -> GameState:
        return self._copy_with(player_discard=self.player_discard + tuple(cards))

    def lose(self, reason: LossReason) -> GameState:
        """Return new state marked as lost (the first recorded reason wins)."""
        if self.status == GameStatus.LOST:
            return self
        return self._copy_with(status=GameStatus.LOST, loss_reason=reason)

    def _copy_with(self, **kwargs: Any) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)
