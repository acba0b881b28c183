"""
Infection - Cube placement, outbreak cascades, and epidemics.

Placement rules:
- Eradicated colors are never placed.
- Nothing is placed in or next to the Quarantine Specialist's city.
- A city never holds more than 3 cubes of a color; the extra cube
  becomes an outbreak that spreads one cube to every neighbour.
- Each city outbreaks at most once per cascade.
- Taking a cube from an empty reserve loses the game, and so does
  the 8th outbreak. Processing stops at the first loss.
"""

from __future__ import annotations
import logging
import random
from collections import deque
from dataclasses import dataclass, field

from ..board.catalog import get_connections, is_adjacent
from .action import ActionResult, ErrorCode
from .roles import prevents_nearby_infection
from .state import (
    CureStatus,
    Disease,
    GameState,
    GameStatus,
    InfectionCard,
    INFECTION_RATE_TRACK,
    LossReason,
    MAX_CUBES_PER_CITY,
    OUTBREAK_LIMIT,
    TurnPhase,
)

logger = logging.getLogger(__name__)

EPIDEMIC_CUBES = 3


# =============================================================================
# Reports
# =============================================================================

@dataclass(frozen=True)
class CubePlacement:
    """Cubes added to one city."""
    city: str
    color: Disease
    count: int


@dataclass(frozen=True)
class OutbreakRecord:
    """One outbreak in a cascade. `source` is the city whose outbreak spread here."""
    city: str
    color: Disease
    source: str | None = None


@dataclass
class InfectionReport:
    """Everything that happened while placing cubes."""
    cards_drawn: list[InfectionCard] = field(default_factory=list)
    placements: list[CubePlacement] = field(default_factory=list)
    outbreaks: list[OutbreakRecord] = field(default_factory=list)
    prevented: list[str] = field(default_factory=list)
    skipped: bool = False

    def extend(self, other: InfectionReport) -> None:
        self.cards_drawn.extend(other.cards_drawn)
        self.placements.extend(other.placements)
        self.outbreaks.extend(other.outbreaks)
        self.prevented.extend(other.prevented)


@dataclass
class EpidemicReport:
    """Result of resolving one epidemic card."""
    infection_rate_position: int
    infected_card: InfectionCard | None
    infection: InfectionReport = field(default_factory=InfectionReport)
    intensified: int = 0


# =============================================================================
# Placement
# =============================================================================

def is_quarantined(state: GameState, city: str) -> bool:
    """True if a Quarantine Specialist stands in or next to `city`."""
    for player in state.players:
        if prevents_nearby_infection(player.role):
            if player.location == city or is_adjacent(player.location, city):
                return True
    return False


def _take_from_reserve(
    state: GameState, city: str, color: Disease, count: int, report: InfectionReport
) -> GameState:
    """Add `count` cubes to a city, or lose if the reserve cannot cover all of them."""
    if state.cube_supply[color] < count:
        logger.warning(
            "Cannot place %d %s cube(s) in %s: reserve has %d",
            count, color.value, city, state.cube_supply[color],
        )
        return state.lose(LossReason.CUBES_EXHAUSTED)

    city_state = state.city(city)
    state = state.with_city(city, city_state.with_cubes(color, city_state.cubes(color) + count))
    state = state.with_supply(color, state.cube_supply[color] - count)
    report.placements.append(CubePlacement(city, color, count))
    logger.debug("Placed %d %s cube(s) in %s", count, color.value, city)
    return state


def _can_place(state: GameState, city: str, color: Disease, report: InfectionReport) -> bool:
    if state.cures[color] == CureStatus.ERADICATED:
        report.prevented.append(f"{city}: {color.value} is eradicated")
        return False
    if is_quarantined(state, city):
        report.prevented.append(f"{city}: quarantined")
        return False
    return True


def _outbreak_cascade(
    state: GameState, origin: str, color: Disease, report: InfectionReport
) -> GameState:
    """
    Resolve an outbreak starting at `origin`.

    Iterative breadth-first spread. A city already outbroken (or queued
    to outbreak) in this cascade gets neither a cube nor a second outbreak.
    """
    queue = deque([(origin, None)])
    outbroken = {origin}

    while queue:
        city, source = queue.popleft()
        state = state._copy_with(outbreak_count=state.outbreak_count + 1)
        report.outbreaks.append(OutbreakRecord(city, color, source))
        logger.info(
            "Outbreak %d: %s (%s)%s",
            state.outbreak_count, city, color.value,
            f" from {source}" if source else "",
        )
        if state.outbreak_count >= OUTBREAK_LIMIT:
            logger.warning("Outbreak limit reached")
            return state.lose(LossReason.OUTBREAKS)

        for neighbour in get_connections(city):
            if neighbour in outbroken:
                continue
            if not _can_place(state, neighbour, color, report):
                continue
            if state.city(neighbour).cubes(color) >= MAX_CUBES_PER_CITY:
                outbroken.add(neighbour)
                queue.append((neighbour, city))
                continue
            state = _take_from_reserve(state, neighbour, color, 1, report)
            if state.status != GameStatus.ONGOING:
                return state

    return state


def place_cubes(
    state: GameState,
    city: str,
    color: Disease,
    count: int = 1,
    report: InfectionReport | None = None,
) -> tuple[GameState, InfectionReport]:
    """
    Place `count` cubes of `color` in `city`, resolving any outbreak.

    Cubes beyond the 3-cube ceiling turn into a single outbreak.
    """
    report = report if report is not None else InfectionReport()
    if not _can_place(state, city, color, report):
        return state, report

    present = state.city(city).cubes(color)
    fill = min(count, MAX_CUBES_PER_CITY - present)
    if fill > 0:
        state = _take_from_reserve(state, city, color, fill, report)
        if state.status != GameStatus.ONGOING:
            return state, report

    if present + count > MAX_CUBES_PER_CITY:
        state = _outbreak_cascade(state, city, color, report)
    return state, report


# =============================================================================
# Infection phase
# =============================================================================

def infect_cities(state: GameState) -> ActionResult:
    """
    Run the Infect phase: draw `infection_rate` cards and infect each city.

    One Quiet Night skips the draws entirely and clears its flag. If the
    deck holds fewer cards than the rate, only the available cards are drawn.
    """
    if state.status != GameStatus.ONGOING:
        return ActionResult.failure(
            f"Game is over ({state.status.value})", error_code=ErrorCode.GAME_OVER
        )
    if state.phase != TurnPhase.INFECT:
        return ActionResult.failure(
            f"Cannot infect cities during the {state.phase.value} phase",
            error_code=ErrorCode.PHASE_VIOLATION,
        )

    report = InfectionReport()
    if state.skip_next_infection:
        report.skipped = True
        logger.info("Infection phase skipped (One Quiet Night)")
        return ActionResult.success_with_state(
            state._copy_with(skip_next_infection=False),
            ["Infection phase skipped"],
            report,
        )

    to_draw = min(state.infection_rate, len(state.infection_deck))
    changes = []
    for _ in range(to_draw):
        card = state.infection_deck[0]
        state = state._copy_with(
            infection_deck=state.infection_deck[1:],
            infection_discard=state.infection_discard + (card,),
        )
        report.cards_drawn.append(card)
        changes.append(f"Infected {card}")
        state, _ = place_cubes(state, card.city, card.color, 1, report)
        if state.status != GameStatus.ONGOING:
            break

    return ActionResult.success_with_state(state, changes, report)


# =============================================================================
# Epidemic
# =============================================================================

def resolve_epidemic(state: GameState, rng: random.Random) -> tuple[GameState, EpidemicReport]:
    """
    Resolve one epidemic card.

    1. Increase: advance the infection rate marker (capped at the track end).
    2. Infect: draw the bottom infection card and place 3 cubes there.
    3. Intensify: shuffle the infection discard pile onto the deck.

    An empty infection deck skips step 2 only.
    """
    position = min(state.infection_rate_position + 1, len(INFECTION_RATE_TRACK))
    state = state._copy_with(infection_rate_position=position)

    if not state.infection_deck:
        logger.info("Epidemic: infection deck empty, no city infected")
        report = EpidemicReport(infection_rate_position=position, infected_card=None)
    else:
        card = state.infection_deck[-1]
        state = state._copy_with(
            infection_deck=state.infection_deck[:-1],
            infection_discard=state.infection_discard + (card,),
        )
        report = EpidemicReport(infection_rate_position=position, infected_card=card)
        report.infection.cards_drawn.append(card)
        logger.info("Epidemic in %s (%s), infection rate now %d",
                    card.city, card.color.value, state.infection_rate)
        state, _ = place_cubes(state, card.city, card.color, EPIDEMIC_CUBES, report.infection)
        if state.status != GameStatus.ONGOING:
            return state, report

    discard = list(state.infection_discard)
    rng.shuffle(discard)
    report.intensified = len(discard)
    state = state._copy_with(
        infection_deck=tuple(discard) + state.infection_deck,
        infection_discard=(),
    )
    return state, report
