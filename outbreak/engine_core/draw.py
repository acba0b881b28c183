"""
Draw - Player card draws, epidemic triggering, and hand-limit discards.
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field

from .action import ActionResult, ErrorCode
from .infection import EpidemicReport, resolve_epidemic
from .state import (
    CARDS_DRAWN_PER_TURN,
    EpidemicCard,
    GameState,
    GameStatus,
    HAND_LIMIT,
    LossReason,
    PlayerCard,
    TurnPhase,
)

logger = logging.getLogger(__name__)


@dataclass
class DrawReport:
    """Cards drawn in one Draw phase and what they caused."""
    cards_drawn: list[PlayerCard] = field(default_factory=list)
    epidemics: list[EpidemicReport] = field(default_factory=list)
    players_over_hand_limit: list[int] = field(default_factory=list)


def _game_over(state: GameState) -> ActionResult | None:
    if state.status != GameStatus.ONGOING:
        return ActionResult.failure(
            f"Game is over ({state.status.value})", error_code=ErrorCode.GAME_OVER
        )
    return None


def draw_player_cards(state: GameState, rng: random.Random) -> ActionResult:
    """
    Draw two player cards for the current player.

    Epidemics are resolved in full, in draw order, before the next card
    is considered. A deck with fewer than two cards loses the game.
    """
    error = _game_over(state)
    if error:
        return error
    if state.phase != TurnPhase.DRAW:
        return ActionResult.failure(
            f"Cannot draw cards during the {state.phase.value} phase",
            error_code=ErrorCode.PHASE_VIOLATION,
        )
    if state.player_cards_drawn:
        return ActionResult.failure(
            "Player cards have already been drawn this turn",
            error_code=ErrorCode.PHASE_VIOLATION,
        )

    report = DrawReport()
    state = state._copy_with(player_cards_drawn=True)
    if len(state.player_deck) < CARDS_DRAWN_PER_TURN:
        logger.warning("Player deck exhausted (%d card(s) left)", len(state.player_deck))
        return ActionResult.success_with_state(
            state.lose(LossReason.PLAYER_DECK_EXHAUSTED),
            ["Player deck exhausted"],
            report,
        )

    changes = []
    idx = state.current_player_idx
    for _ in range(CARDS_DRAWN_PER_TURN):
        card = state.player_deck[0]
        state = state._copy_with(player_deck=state.player_deck[1:])
        report.cards_drawn.append(card)

        if isinstance(card, EpidemicCard):
            state = state.discard_player_cards(card)
            state, epidemic = resolve_epidemic(state, rng)
            report.epidemics.append(epidemic)
            changes.append("Epidemic!")
            if state.status != GameStatus.ONGOING:
                break
        else:
            state = state.with_player(idx, state.players[idx].add_card(card))
            changes.append(f"Drew {card}")

    report.players_over_hand_limit = state.players_over_hand_limit()
    if report.players_over_hand_limit:
        logger.info("Players over hand limit: %s", report.players_over_hand_limit)
    return ActionResult.success_with_state(state, changes, report)


def discard_cards(state: GameState, player_idx: int, card_indices: list[int]) -> ActionResult:
    """
    Discard cards from an over-limit hand.

    Exactly `hand_size - 7` distinct, in-range indices must be given.
    """
    error = _game_over(state)
    if error:
        return error

    player = state.get_player(player_idx)
    if player is None:
        return ActionResult.failure(f"Invalid player index: {player_idx}")

    excess = player.hand_size - HAND_LIMIT
    if excess <= 0:
        return ActionResult.failure(
            f"Player {player_idx} has {player.hand_size} cards and does not need to discard"
        )

    indices = list(card_indices)
    if len(indices) != excess:
        return ActionResult.failure(
            f"Must discard exactly {excess} card(s), got {len(indices)}"
        )
    if len(set(indices)) != len(indices):
        return ActionResult.failure("Card indices must be distinct")
    for index in indices:
        if not 0 <= index < player.hand_size:
            return ActionResult.failure(f"Invalid card index: {index}")

    discarded = [player.hand[i] for i in sorted(indices)]
    kept = [card for i, card in enumerate(player.hand) if i not in set(indices)]
    state = state.with_player(player_idx, player.with_hand(kept))
    state = state.discard_player_cards(*discarded)
    return ActionResult.success_with_state(
        state, [f"Discarded {card}" for card in discarded]
    )
