"""
Orchestrator - Sequences the phases of each player's turn.

The loop:
1. Actions: perform_action() until four actions are spent
2. Draw: draw_cards(), then discard_cards() if anyone is over the hand limit
3. Infect: infect_cities()
4. Next player's Actions

Phases advance automatically as soon as their completion condition is
met. Events may be played at any point while the game is ongoing. Once
the game is won or lost the orchestrator stops advancing and every
state-changing call fails with GAME_OVER.

The orchestrator holds the only reference to the current GameState and
replaces it wholesale after each successful call. It is not thread-safe:
callers serialize access to one instance.
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from typing import Any

from ..api.schemas import GameConfig, GameSnapshot
from ..board.setup import setup_game
from ..config import default_seed
from ..engine_core.action import ActionResult, ErrorCode
from ..engine_core.action_generator import available_actions
from ..engine_core.draw import DrawReport, discard_cards, draw_player_cards
from ..engine_core.events import EventParams, play_event
from ..engine_core.infection import InfectionReport, infect_cities
from ..engine_core.parser import ActionParseError, parse_action
from ..engine_core.reducer import apply_action
from ..engine_core.state import (
    ACTIONS_PER_TURN,
    GameState,
    GameStatus,
    PlayerState,
    TurnPhase,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Outcomes
# =============================================================================

@dataclass
class Outcome:
    """
    Result of one orchestrator call.

    A loss detected while drawing or infecting is still a success:
    check `status` to see whether the game ended.
    """
    success: bool
    status: GameStatus
    phase: TurnPhase
    error: str | None = None
    error_code: ErrorCode | None = None
    changes: list[str] = field(default_factory=list)


@dataclass
class ActionOutcome(Outcome):
    action: str = ""
    actions_remaining: int = 0


@dataclass
class DrawOutcome(Outcome):
    report: DrawReport | None = None
    needs_discard: list[int] = field(default_factory=list)


@dataclass
class InfectOutcome(Outcome):
    report: InfectionReport | None = None


@dataclass
class EventOutcome(Outcome):
    event: str = ""


@dataclass
class DiscardOutcome(Outcome):
    player_index: int = 0


# =============================================================================
# Orchestrator
# =============================================================================

class OrchestratedGame:
    """
    The turn-phase driver for one game.

    Usage:
        game = OrchestratedGame.create(GameConfig(player_count=2), seed=7)
        game.perform_action("drive-ferry:Chicago")
        ...
        game.draw_cards()
        game.infect_cities()
    """

    def __init__(self, state: GameState, rng: random.Random | None = None):
        self._state = state
        self._rng = rng or random.Random(state.seed)

    @classmethod
    def create(
        cls,
        config: GameConfig | dict[str, Any] | None = None,
        seed: int | None = None,
        rng: random.Random | None = None,
    ) -> OrchestratedGame:
        """
        Start a new game.

        Seed precedence: the `seed` argument, then `config.seed`, then
        OUTBREAK_DEFAULT_SEED. An explicit `rng` is used as given.
        """
        if config is None:
            config = GameConfig()
        elif not isinstance(config, GameConfig):
            config = GameConfig.model_validate(config)

        if seed is None:
            seed = config.seed if config.seed is not None else default_seed()
        if seed != config.seed:
            config = config.model_copy(update={"seed": seed})

        rng = rng or random.Random(seed)
        return cls(setup_game(config, rng), rng)

    # -------------------------------------------------------------------------
    # Read-only accessors
    # -------------------------------------------------------------------------

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def phase(self) -> TurnPhase:
        return self._state.phase

    @property
    def current_player(self) -> PlayerState:
        return self._state.current_player

    @property
    def current_player_index(self) -> int:
        return self._state.current_player_idx

    @property
    def actions_remaining(self) -> int:
        return self._state.actions_remaining

    @property
    def status(self) -> GameStatus:
        return self._state.status

    @property
    def turn_number(self) -> int:
        return self._state.turn_number

    def snapshot(self) -> GameSnapshot:
        """Detached, serializable view of the current state."""
        return GameSnapshot.from_state(self._state)

    def get_available_actions(self) -> list[str]:
        """Legal action tokens for the current player (empty outside the Actions phase)."""
        return available_actions(self._state)

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def perform_action(self, token: str) -> ActionOutcome:
        """Parse and apply one player action."""
        if self._state.is_over:
            return self._rejected(
                token, f"Game is over ({self.status.value})", ErrorCode.GAME_OVER
            )
        try:
            action = parse_action(token)
        except ActionParseError as e:
            return self._rejected(token, str(e), ErrorCode.MALFORMED_ACTION)

        result = apply_action(self._state, action)
        self._commit(result)
        return ActionOutcome(
            **self._outcome_fields(result),
            action=token,
            actions_remaining=self.actions_remaining,
        )

    def draw_cards(self) -> DrawOutcome:
        """Draw the current player's two cards, resolving any epidemics."""
        result = draw_player_cards(self._state, self._rng)
        self._commit(result)
        return DrawOutcome(
            **self._outcome_fields(result),
            report=result.report,
            needs_discard=self._state.players_over_hand_limit() if result.success else [],
        )

    def infect_cities(self) -> InfectOutcome:
        """Run the Infect phase and pass the turn to the next player."""
        result = infect_cities(self._state)
        if result.success and result.new_state.status == GameStatus.ONGOING:
            result.new_state = self._next_turn(result.new_state)
        self._commit(result)
        return InfectOutcome(**self._outcome_fields(result), report=result.report)

    def play_event(self, player_index: int, params: EventParams) -> EventOutcome:
        """Play an event card held by any player. Costs no action."""
        result = play_event(self._state, player_index, params)
        self._commit(result)
        return EventOutcome(**self._outcome_fields(result), event=params.event.value)

    def discard_cards(self, player_index: int, card_indices: list[int]) -> DiscardOutcome:
        """Resolve a hand-limit overflow by discarding the given hand positions."""
        result = discard_cards(self._state, player_index, card_indices)
        self._commit(result)
        return DiscardOutcome(**self._outcome_fields(result), player_index=player_index)

    # -------------------------------------------------------------------------
    # Phase machinery
    # -------------------------------------------------------------------------

    def _commit(self, result: ActionResult) -> None:
        if not result.success:
            return
        self._state = self._advance(result.new_state)
        if self._state.status == GameStatus.LOST:
            logger.warning("Game lost: %s", self._state.loss_reason.value)
        elif self._state.status == GameStatus.WON:
            logger.info("Game won on turn %d", self._state.turn_number)

    def _rejected(self, token: str, error: str, error_code: ErrorCode) -> ActionOutcome:
        return ActionOutcome(
            success=False,
            status=self.status,
            phase=self.phase,
            error=error,
            error_code=error_code,
            action=token,
            actions_remaining=self.actions_remaining,
        )

    def _outcome_fields(self, result: ActionResult) -> dict[str, Any]:
        return {
            "success": result.success,
            "status": self.status,
            "phase": self.phase,
            "error": result.error,
            "error_code": result.error_code,
            "changes": list(result.state_changes),
        }

    def _advance(self, state: GameState) -> GameState:
        """Apply every automatic phase transition that is due."""
        if state.status != GameStatus.ONGOING:
            return state

        if state.phase == TurnPhase.ACTIONS and state.actions_remaining <= 0:
            logger.info("Player %d: actions done, drawing", state.current_player_idx)
            state = state._copy_with(phase=TurnPhase.DRAW, player_cards_drawn=False)

        if (
            state.phase == TurnPhase.DRAW
            and state.player_cards_drawn
            and not state.players_over_hand_limit()
        ):
            logger.info("Player %d: draw resolved, infecting", state.current_player_idx)
            state = state._copy_with(phase=TurnPhase.INFECT)

        return state

    def _next_turn(self, state: GameState) -> GameState:
        next_idx = (state.current_player_idx + 1) % state.num_players
        logger.info("Turn %d: player %d to act", state.turn_number + 1, next_idx)
        return state._copy_with(
            current_player_idx=next_idx,
            phase=TurnPhase.ACTIONS,
            actions_remaining=ACTIONS_PER_TURN,
            turn_number=state.turn_number + 1,
            ops_expert_move_used=False,
            skip_next_infection=False,
            player_cards_drawn=False,
        )


def create_game(
    config: GameConfig | dict[str, Any] | None = None,
    seed: int | None = None,
    rng: random.Random | None = None,
) -> OrchestratedGame:
    """Start a new orchestrated game."""
    return OrchestratedGame.create(config, seed=seed, rng=rng)
