"""
Action System - Actions, payloads, and results.

Actions represent the player actions of the Actions phase. Each one
costs exactly one of the four actions per turn. Event cards, drawing
and infection are not actions; they have their own entry points.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .state import Disease, EventType


class ActionType(str, Enum):
    """Types of player actions. Values double as token verbs."""
    # Movement
    DRIVE_FERRY = "drive-ferry"
    DIRECT_FLIGHT = "direct-flight"
    CHARTER_FLIGHT = "charter-flight"
    SHUTTLE_FLIGHT = "shuttle-flight"

    # Other standard actions
    BUILD_RESEARCH_STATION = "build-research-station"
    TREAT = "treat"
    SHARE_KNOWLEDGE_GIVE = "share-knowledge-give"
    SHARE_KNOWLEDGE_TAKE = "share-knowledge-take"
    DISCOVER_CURE = "discover-cure"

    # Role actions
    DISPATCHER_MOVE_TO_PAWN = "dispatcher-move-to-pawn"
    DISPATCHER_MOVE_OTHER = "dispatcher-move-other"
    OPS_EXPERT_MOVE = "ops-expert-move"
    CONTINGENCY_PLANNER_TAKE = "contingency-planner-take"


class MoveType(str, Enum):
    """Movement kinds a Dispatcher may perform for another pawn."""
    DRIVE = "drive"
    DIRECT = "direct"
    CHARTER = "charter"
    SHUTTLE = "shuttle"


class CardSource(str, Enum):
    """Whose hand pays for a Dispatcher-driven flight."""
    DISPATCHER = "dispatcher"
    PLAYER = "player"


class ErrorCode(str, Enum):
    """Structured error categories surfaced to the caller."""
    GAME_OVER = "GAME_OVER"
    PHASE_VIOLATION = "PHASE_VIOLATION"
    RULE_VIOLATION = "RULE_VIOLATION"
    MALFORMED_ACTION = "MALFORMED_ACTION"


@dataclass(frozen=True)
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields; the reducer reads
    only the fields its handler needs.
    """
    destination: str | None = None
    color: Disease | None = None

    # Share knowledge: the city card to hand over
    # Build research station: the city to demolish a station in
    # Operations Expert move: the city card to discard
    city: str | None = None

    target_player_idx: int | None = None
    player_to_move_idx: int | None = None
    move_type: MoveType | None = None
    card_source: CardSource = CardSource.DISPATCHER
    event: EventType | None = None


@dataclass(frozen=True)
class Action:
    """A complete, typed player action."""
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def drive_ferry(cls, destination: str) -> Action:
        return cls(ActionType.DRIVE_FERRY, ActionPayload(destination=destination))

    @classmethod
    def direct_flight(cls, destination: str) -> Action:
        return cls(ActionType.DIRECT_FLIGHT, ActionPayload(destination=destination))

    @classmethod
    def charter_flight(cls, destination: str) -> Action:
        return cls(ActionType.CHARTER_FLIGHT, ActionPayload(destination=destination))

    @classmethod
    def shuttle_flight(cls, destination: str) -> Action:
        return cls(ActionType.SHUTTLE_FLIGHT, ActionPayload(destination=destination))

    @classmethod
    def build_research_station(cls, city_to_remove: str | None = None) -> Action:
        return cls(ActionType.BUILD_RESEARCH_STATION, ActionPayload(city=city_to_remove))

    @classmethod
    def treat(cls, color: Disease) -> Action:
        return cls(ActionType.TREAT, ActionPayload(color=Disease(color)))

    @classmethod
    def share_give(cls, target_player_idx: int, city: str) -> Action:
        return cls(
            ActionType.SHARE_KNOWLEDGE_GIVE,
            ActionPayload(target_player_idx=target_player_idx, city=city),
        )

    @classmethod
    def share_take(cls, target_player_idx: int, city: str) -> Action:
        return cls(
            ActionType.SHARE_KNOWLEDGE_TAKE,
            ActionPayload(target_player_idx=target_player_idx, city=city),
        )

    @classmethod
    def discover_cure(cls, color: Disease) -> Action:
        return cls(ActionType.DISCOVER_CURE, ActionPayload(color=Disease(color)))

    @classmethod
    def dispatcher_move_to_pawn(cls, player_to_move_idx: int, target_player_idx: int) -> Action:
        return cls(
            ActionType.DISPATCHER_MOVE_TO_PAWN,
            ActionPayload(
                player_to_move_idx=player_to_move_idx,
                target_player_idx=target_player_idx,
            ),
        )

    @classmethod
    def dispatcher_move_other(
        cls,
        player_to_move_idx: int,
        move_type: MoveType,
        destination: str,
        card_source: CardSource = CardSource.DISPATCHER,
    ) -> Action:
        return cls(
            ActionType.DISPATCHER_MOVE_OTHER,
            ActionPayload(
                player_to_move_idx=player_to_move_idx,
                move_type=MoveType(move_type),
                destination=destination,
                card_source=CardSource(card_source),
            ),
        )

    @classmethod
    def ops_expert_move(cls, destination: str, card_city: str) -> Action:
        return cls(
            ActionType.OPS_EXPERT_MOVE,
            ActionPayload(destination=destination, city=card_city),
        )

    @classmethod
    def contingency_planner_take(cls, event: EventType) -> Action:
        return cls(ActionType.CONTINGENCY_PLANNER_TAKE, ActionPayload(event=EventType(event)))


@dataclass
class ActionResult:
    """
    Result of applying an action (or any other state transform).

    Contains:
    - Whether it succeeded
    - New state (if succeeded)
    - Error and error category (if failed)
    - Human-readable changes (for UI feedback)
    - A structured report for draw/infect/event resolution
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: ErrorCode | None = None

    state_changes: list[str] = field(default_factory=list)
    report: Any | None = None

    @classmethod
    def failure(
        cls, error: str, error_code: ErrorCode = ErrorCode.RULE_VIOLATION
    ) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
        report: Any | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
            report=report,
        )
