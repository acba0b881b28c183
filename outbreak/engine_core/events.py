"""
Events - One-off event card effects.

Events do not cost an action and ignore the phase gate: they only need
an ongoing game and a player actually holding the card, in hand or in
the Contingency Planner's stored slot. A card played from hand is
discarded; a stored card is removed from the game.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Union

from ..board.catalog import get_city
from .action import ActionResult, ErrorCode
from .reducer import build_station, relocate
from .state import EventCard, EventType, GameState, GameStatus

logger = logging.getLogger(__name__)

FORECAST_DEPTH = 6


# =============================================================================
# Event parameters
# =============================================================================

@dataclass(frozen=True)
class Airlift:
    """Move any pawn to any city."""
    target_player_idx: int
    destination: str

    event = EventType.AIRLIFT


@dataclass(frozen=True)
class GovernmentGrant:
    """Build a research station anywhere without a card."""
    city: str
    city_to_remove: str | None = None

    event = EventType.GOVERNMENT_GRANT


@dataclass(frozen=True)
class OneQuietNight:
    """Skip the next Infect phase."""

    event = EventType.ONE_QUIET_NIGHT


@dataclass(frozen=True)
class ResilientPopulation:
    """Remove one card from the infection discard pile for the rest of the game."""
    city: str

    event = EventType.RESILIENT_POPULATION


@dataclass(frozen=True)
class Forecast:
    """Rearrange the top infection cards. `order` lists city names, top first."""
    order: tuple[str, ...]

    event = EventType.FORECAST


EventParams = Union[Airlift, GovernmentGrant, OneQuietNight, ResilientPopulation, Forecast]


def forecast_window(state: GameState) -> tuple[str, ...]:
    """City names of the infection cards a Forecast may reorder, top first."""
    return tuple(card.city for card in state.infection_deck[:FORECAST_DEPTH])


# =============================================================================
# Effects
# =============================================================================

def _airlift(state: GameState, params: Airlift) -> tuple[GameState | None, str | None, list[str]]:
    target = state.get_player(params.target_player_idx)
    if target is None:
        return None, f"Invalid target player index: {params.target_player_idx}", []
    if get_city(params.destination) is None:
        return None, f"Invalid destination city: {params.destination}", []
    if target.location == params.destination:
        return None, f"Player {params.target_player_idx} is already in {params.destination}", []
    state, changes = relocate(state, params.target_player_idx, params.destination)
    return state, None, changes


def _government_grant(
    state: GameState, params: GovernmentGrant
) -> tuple[GameState | None, str | None, list[str]]:
    if get_city(params.city) is None:
        return None, f"Invalid city: {params.city}", []
    new_state, error = build_station(state, params.city, params.city_to_remove)
    if error:
        return None, error, []
    return new_state, None, [f"Built research station in {params.city}"]


def _one_quiet_night(
    state: GameState, params: OneQuietNight
) -> tuple[GameState | None, str | None, list[str]]:
    return state._copy_with(skip_next_infection=True), None, ["The next infection phase will be skipped"]


def _resilient_population(
    state: GameState, params: ResilientPopulation
) -> tuple[GameState | None, str | None, list[str]]:
    for index, card in enumerate(state.infection_discard):
        if card.city == params.city:
            state = state._copy_with(
                infection_discard=state.infection_discard[:index] + state.infection_discard[index + 1:],
                infection_removed=state.infection_removed + (card,),
            )
            return state, None, [f"Removed {card} from the game"]
    return None, f"{params.city} is not in the infection discard pile", []


def _forecast(state: GameState, params: Forecast) -> tuple[GameState | None, str | None, list[str]]:
    window = forecast_window(state)
    if sorted(params.order) != sorted(window):
        return None, (
            f"Forecast order must be a permutation of the top {len(window)} "
            f"infection cards: {', '.join(window)}"
        ), []

    by_city = {card.city: card for card in state.infection_deck[:len(window)]}
    reordered = tuple(by_city[city] for city in params.order)
    state = state._copy_with(infection_deck=reordered + state.infection_deck[len(window):])
    return state, None, [f"Rearranged top {len(window)} infection cards"]


_EFFECTS = {
    EventType.AIRLIFT: _airlift,
    EventType.GOVERNMENT_GRANT: _government_grant,
    EventType.ONE_QUIET_NIGHT: _one_quiet_night,
    EventType.RESILIENT_POPULATION: _resilient_population,
    EventType.FORECAST: _forecast,
}


def play_event(state: GameState, player_idx: int, params: EventParams) -> ActionResult:
    """
    Play an event card held by `player_idx`.

    The effect is validated before the card is spent, so a failed event
    leaves the card where it was.
    """
    if state.status != GameStatus.ONGOING:
        return ActionResult.failure(
            f"Cannot play event card: game has ended with status {state.status.value}",
            error_code=ErrorCode.GAME_OVER,
        )

    player = state.get_player(player_idx)
    if player is None:
        return ActionResult.failure(f"Invalid player index: {player_idx}")

    event = params.event
    hand_idx = player.find_event_card(event)
    stored = hand_idx < 0 and player.stored_event == EventCard(event)
    if hand_idx < 0 and not stored:
        return ActionResult.failure(
            f"Player does not have {event.value} event card in hand or stored"
        )

    new_state, error, changes = _EFFECTS[event](state, params)
    if error:
        return ActionResult.failure(error)

    # Spend the card on the post-effect state; effects never touch hands
    player = new_state.players[player_idx]
    if stored:
        new_state = new_state.with_player(player_idx, player.with_stored_event(None))
        new_state = new_state._copy_with(player_removed=new_state.player_removed + (EventCard(event),))
    else:
        card, player = player.remove_card_at(hand_idx)
        new_state = new_state.with_player(player_idx, player).discard_player_cards(card)

    logger.info("Player %d played %s", player_idx, event.value)
    return ActionResult.success_with_state(new_state, [f"Played {event.value}"] + changes)
