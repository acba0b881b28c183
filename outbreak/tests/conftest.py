"""
Pytest fixtures for Outbreak tests.
"""

import random

import pytest

from ..api.schemas import GameConfig
from ..board.catalog import CITIES, require_city
from ..engine_core.state import (
    DISEASES,
    CityCard,
    CityState,
    CUBES_PER_COLOR,
    Disease,
    GameState,
    InfectionCard,
    PlayerState,
    Role,
    STARTING_CITY,
    TurnPhase,
)
from ..session import OrchestratedGame


def city_card(name: str) -> CityCard:
    """Player card for a catalog city."""
    return CityCard(name, require_city(name).color)


def infection_card(name: str) -> InfectionCard:
    return InfectionCard(name, require_city(name).color)


def make_state(
    roles=(Role.SCIENTIST, Role.RESEARCHER),
    locations=None,
    hands=None,
    **overrides,
) -> GameState:
    """
    Hand-built state: empty board with a station in Atlanta, every
    pawn in Atlanta, empty decks, Actions phase for player 0.
    """
    board = {city.name: CityState() for city in CITIES}
    board[STARTING_CITY] = board[STARTING_CITY].with_station(True)
    locations = locations or [STARTING_CITY] * len(roles)
    hands = hands or [()] * len(roles)
    players = tuple(
        PlayerState(
            role=role,
            location=location,
            hand=tuple(city_card(c) if isinstance(c, str) else c for c in hand),
        )
        for role, location, hand in zip(roles, locations, hands)
    )
    state = GameState(players=players, board=board)
    return state._copy_with(**overrides) if overrides else state


def with_cubes(state: GameState, city: str, color: Disease, count: int) -> GameState:
    """Put cubes on a city, taking them from the reserve."""
    present = state.city(city).cubes(color)
    state = state.with_city(city, state.city(city).with_cubes(color, count))
    return state.with_supply(color, state.cube_supply[color] - (count - present))


def assert_cube_ledger(state: GameState) -> None:
    """Reserve plus board always equals the full supply."""
    for color in DISEASES:
        assert state.cube_supply[color] + state.cubes_on_board(color) == CUBES_PER_COLOR


def all_player_cards(state: GameState) -> list:
    cards = list(state.player_deck) + list(state.player_discard) + list(state.player_removed)
    for player in state.players:
        cards.extend(player.hand)
        if player.stored_event is not None:
            cards.append(player.stored_event)
    return cards


@pytest.fixture
def rng() -> random.Random:
    """Deterministic random source."""
    return random.Random(1234)


@pytest.fixture
def two_player_state() -> GameState:
    """Scientist and Researcher in Atlanta with empty hands."""
    return make_state()


@pytest.fixture
def game() -> OrchestratedGame:
    """Seeded 2-player orchestrated game with fixed roles."""
    config = GameConfig(
        player_count=2,
        difficulty=4,
        roles=[Role.MEDIC, Role.SCIENTIST],
        seed=42,
    )
    return OrchestratedGame.create(config)


@pytest.fixture
def draw_phase_state() -> GameState:
    """State at the start of player 0's Draw phase."""
    return make_state(phase=TurnPhase.DRAW, actions_remaining=0)
