"""
Full-game runs driven through the orchestrator.
"""

import random

import pytest

from ..engine_core.state import (
    HAND_LIMIT,
    MAX_RESEARCH_STATIONS,
    EventType,
    GameStatus,
    TurnPhase,
)
from ..session import create_game
from .conftest import all_player_cards, assert_cube_ledger

CITY_COUNT = 48
MAX_STEPS = 2000


def assert_invariants(game, difficulty):
    state = game.state
    assert_cube_ledger(state)
    assert len(all_player_cards(state)) == CITY_COUNT + len(EventType) + difficulty
    assert len(state.infection_deck) + len(state.infection_discard) + len(state.infection_removed) == CITY_COUNT
    assert len(state.research_stations()) <= MAX_RESEARCH_STATIONS
    assert 0 <= state.outbreak_count <= 8
    if state.phase == TurnPhase.ACTIONS and state.status == GameStatus.ONGOING:
        assert 1 <= state.actions_remaining <= 4


def play_to_the_end(game, chooser: random.Random, difficulty: int) -> int:
    """Play random legal moves until the game ends; return the step count."""
    for step in range(MAX_STEPS):
        if game.status != GameStatus.ONGOING:
            return step

        if game.phase == TurnPhase.ACTIONS:
            tokens = game.get_available_actions()
            assert tokens, "an ongoing Actions phase always has a legal move"
            outcome = game.perform_action(chooser.choice(tokens))
        elif game.phase == TurnPhase.DRAW and not game.state.player_cards_drawn:
            outcome = game.draw_cards()
        elif game.phase == TurnPhase.DRAW:
            idx = game.state.players_over_hand_limit()[0]
            excess = game.state.players[idx].hand_size - HAND_LIMIT
            outcome = game.discard_cards(idx, list(range(excess)))
        else:
            outcome = game.infect_cities()

        assert outcome.success, outcome.error
        assert_invariants(game, difficulty)

    pytest.fail("game did not finish")


@pytest.mark.parametrize("seed,players,difficulty", [
    (1, 2, 4),
    (7, 3, 5),
    (2024, 4, 6),
])
def test_random_game_keeps_invariants(seed, players, difficulty):
    """Random legal play never breaks the cube, card or station ledgers."""
    game = create_game({"player_count": players, "difficulty": difficulty}, seed=seed)
    assert_invariants(game, difficulty)

    steps = play_to_the_end(game, random.Random(seed), difficulty)

    assert steps > 0
    assert game.status in (GameStatus.WON, GameStatus.LOST)
    assert game.perform_action("drive-ferry:Chicago").success is False


def test_same_seed_same_game():
    """Identical seeds and choices replay identically."""
    finals = []
    for _ in range(2):
        game = create_game({"player_count": 2}, seed=99)
        play_to_the_end(game, random.Random(5), 4)
        finals.append(game.state)
    assert finals[0] == finals[1]
