"""
Action Generator - Generates all legal actions from a game state.

The action generator is used by:
1. The orchestrator to list available actions
2. The CLI to show what the current player can do
3. Tests (every generated token must be accepted by the reducer)

Design: candidates are built from the board and the hands, then each
one is checked against the reducer so the list never drifts from the
rules.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..board.catalog import CITY_NAMES, get_connections
from .action import Action, CardSource, MoveType
from .parser import format_action
from .reducer import Reducer
from .roles import (
    can_move_other_pawns,
    can_store_event,
    has_station_special_move,
)
from .state import DISEASES, CityCard, EventCard, GameState, GameStatus, TurnPhase


@dataclass
class ActionGenerator:
    """
    Generates legal actions for the current player.

    Only meaningful during the Actions phase; any other phase, or a
    finished game, yields nothing.
    """
    reducer: Reducer = field(default_factory=Reducer)

    def generate(self, state: GameState) -> list[Action]:
        """
        Generate all legal actions for the current player.

        Returns a list of fully-specified Action objects.
        """
        if state.status != GameStatus.ONGOING:
            return []
        if state.phase != TurnPhase.ACTIONS or state.actions_remaining <= 0:
            return []

        legal = []
        seen = set()
        for action in self._candidates(state):
            if action in seen:
                continue
            seen.add(action)
            if self.reducer.apply(state, action).success:
                legal.append(action)
        return legal

    def _candidates(self, state: GameState):
        player = state.current_player
        idx = state.current_player_idx
        location = player.location
        hand_cities = [c.city for c in player.hand if isinstance(c, CityCard)]
        stations = state.research_stations()

        # Movement
        for city in get_connections(location):
            yield Action.drive_ferry(city)
        for city in hand_cities:
            yield Action.direct_flight(city)
        if location in hand_cities:
            for city in CITY_NAMES:
                yield Action.charter_flight(city)
        for city in stations:
            yield Action.shuttle_flight(city)

        # Build
        yield Action.build_research_station()
        for city in stations:
            yield Action.build_research_station(city)

        # Treat and cure
        for color in DISEASES:
            yield Action.treat(color)
            yield Action.discover_cure(color)

        # Share knowledge
        for other_idx, other in enumerate(state.players):
            if other_idx == idx or other.location != location:
                continue
            for city in hand_cities:
                yield Action.share_give(other_idx, city)
            for card in other.hand:
                if isinstance(card, CityCard):
                    yield Action.share_take(other_idx, card.city)

        if can_move_other_pawns(player.role):
            yield from self._dispatcher_candidates(state)

        if has_station_special_move(player.role) and not state.ops_expert_move_used:
            for destination in CITY_NAMES:
                for card_city in hand_cities:
                    yield Action.ops_expert_move(destination, card_city)

        if can_store_event(player.role):
            for card in state.player_discard:
                if isinstance(card, EventCard):
                    yield Action.contingency_planner_take(card.event)

    def _dispatcher_candidates(self, state: GameState):
        idx = state.current_player_idx
        for mover_idx, mover in enumerate(state.players):
            for target_idx in range(state.num_players):
                yield Action.dispatcher_move_to_pawn(mover_idx, target_idx)
            if mover_idx == idx:
                continue

            for city in get_connections(mover.location):
                yield Action.dispatcher_move_other(mover_idx, MoveType.DRIVE, city)
            for city in state.research_stations():
                yield Action.dispatcher_move_other(mover_idx, MoveType.SHUTTLE, city)
            for source, holder in (
                (CardSource.DISPATCHER, state.current_player),
                (CardSource.PLAYER, mover),
            ):
                holder_cities = [c.city for c in holder.hand if isinstance(c, CityCard)]
                for city in holder_cities:
                    yield Action.dispatcher_move_other(mover_idx, MoveType.DIRECT, city, source)
                if mover.location in holder_cities:
                    for city in CITY_NAMES:
                        yield Action.dispatcher_move_other(mover_idx, MoveType.CHARTER, city, source)


def available_actions(state: GameState) -> list[str]:
    """Every legal action token for the current player."""
    return [format_action(action) for action in ActionGenerator().generate(state)]
