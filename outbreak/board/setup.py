"""
Game Setup - Creates the initial game state.

This module handles:
- Building the board (Atlanta starts with a research station)
- Shuffling the infection deck with a seeded random source
- Initial infection: 3 cities x 3 cubes, 3 x 2, 3 x 1
- Role assignment and starting hands (4/3/2 cards for 2/3/4 players)
- Splitting the player deck into piles with one epidemic each

Hands are dealt before epidemics are mixed in, so nobody starts
holding an epidemic.
"""

from __future__ import annotations
import logging
import random
from typing import TYPE_CHECKING

from ..engine_core.state import (
    ALL_ROLES,
    CityCard,
    CityState,
    CUBES_PER_COLOR,
    DISEASES,
    EpidemicCard,
    EventCard,
    EventType,
    GameState,
    InfectionCard,
    PlayerCard,
    PlayerState,
    STARTING_CITY,
)
from .catalog import CITIES

if TYPE_CHECKING:
    from ..api.schemas import GameConfig

logger = logging.getLogger(__name__)

STARTING_HAND_SIZE = {2: 4, 3: 3, 4: 2}
INITIAL_INFECTION = (3, 3, 3, 2, 2, 2, 1, 1, 1)


def setup_game(config: GameConfig, rng: random.Random | None = None) -> GameState:
    """
    Set up a new game.

    Args:
        config: Validated game configuration
        rng: Random source for all shuffles (defaults to one seeded from config.seed)

    Returns:
        Initial GameState at the first player's Actions phase
    """
    rng = rng or random.Random(config.seed)

    board = {city.name: CityState() for city in CITIES}
    board[STARTING_CITY] = board[STARTING_CITY].with_station(True)
    supply = {color: CUBES_PER_COLOR for color in DISEASES}

    infection_deck = [InfectionCard(city.name, city.color) for city in CITIES]
    rng.shuffle(infection_deck)
    infection_discard = []
    for cubes in INITIAL_INFECTION:
        card = infection_deck.pop(0)
        board[card.city] = board[card.city].with_cubes(card.color, cubes)
        supply[card.color] -= cubes
        infection_discard.append(card)

    roles = list(config.roles) if config.roles else rng.sample(list(ALL_ROLES), config.player_count)

    player_cards: list[PlayerCard] = [CityCard(city.name, city.color) for city in CITIES]
    player_cards.extend(EventCard(event) for event in EventType)
    rng.shuffle(player_cards)

    hand_size = STARTING_HAND_SIZE[config.player_count]
    players = []
    for role in roles:
        hand, player_cards = player_cards[:hand_size], player_cards[hand_size:]
        players.append(PlayerState(role=role, location=STARTING_CITY, hand=tuple(hand)))

    player_deck = _insert_epidemics(player_cards, config.difficulty, rng)

    logger.info(
        "New game: %d players (%s), difficulty %d",
        config.player_count, ", ".join(r.value for r in roles), config.difficulty,
    )
    return GameState(
        players=tuple(players),
        board=board,
        cube_supply=supply,
        player_deck=tuple(player_deck),
        infection_deck=tuple(infection_deck),
        infection_discard=tuple(infection_discard),
        difficulty=config.difficulty,
        seed=config.seed,
    )


def _insert_epidemics(cards: list[PlayerCard], difficulty: int, rng: random.Random) -> list[PlayerCard]:
    """Split into `difficulty` near-equal piles, shuffle an epidemic into each, stack them."""
    base, extra = divmod(len(cards), difficulty)
    deck: list[PlayerCard] = []
    start = 0
    for i in range(difficulty):
        size = base + (1 if i < extra else 0)
        pile = cards[start:start + size] + [EpidemicCard()]
        rng.shuffle(pile)
        deck.extend(pile)
        start += size
    return deck
