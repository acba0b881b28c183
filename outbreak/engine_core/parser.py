"""
Action Tokens - Parse and format colon-delimited action strings.

Token grammar (fields separated by ':'):
    drive-ferry:<City>
    direct-flight:<City>
    charter-flight:<City>
    shuttle-flight:<City>
    build-research-station[:<CityToRemove>]
    treat:<color>
    share-knowledge-give:<playerIndex>:<City>
    share-knowledge-take:<playerIndex>:<City>
    discover-cure:<color>
    dispatcher-move-to-pawn:<playerToMove>:<targetPlayer>
    dispatcher-move-other:<playerIndex>:<moveType>:<City>[:<cardSource>]
    ops-expert-move:<City>:<CardCity>
    contingency-planner-take:<event>

Parsing only checks shape. Whether a city exists or a move is legal is
the reducer's business.
"""

from __future__ import annotations

from .action import Action, ActionType, CardSource, MoveType
from .state import Disease, EventType

SEPARATOR = ":"


class ActionParseError(ValueError):
    """Raised when an action token is malformed or names an unknown verb."""

    def __init__(self, token: str, reason: str):
        self.token = token
        self.reason = reason
        super().__init__(f"Invalid action '{token}': {reason}")


def _expect_fields(token: str, fields: list[str], minimum: int, maximum: int) -> None:
    if not minimum <= len(fields) <= maximum:
        if minimum == maximum:
            expected = str(minimum)
        else:
            expected = f"{minimum}-{maximum}"
        raise ActionParseError(token, f"expected {expected} parameter(s), got {len(fields)}")
    for value in fields:
        if not value.strip():
            raise ActionParseError(token, "empty parameter")


def _parse_index(token: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ActionParseError(token, f"'{value}' is not a player index")


def _parse_color(token: str, value: str) -> Disease:
    try:
        return Disease(value.strip().lower())
    except ValueError:
        raise ActionParseError(token, f"unknown disease color '{value}'")


def _parse_event(token: str, value: str) -> EventType:
    try:
        return EventType(value.strip().lower().replace("-", "_"))
    except ValueError:
        raise ActionParseError(token, f"unknown event '{value}'")


def _parse_move_type(token: str, value: str) -> MoveType:
    try:
        return MoveType(value.strip().lower())
    except ValueError:
        raise ActionParseError(token, f"unknown move type '{value}'")


def _parse_card_source(token: str, value: str) -> CardSource:
    try:
        return CardSource(value.strip().lower())
    except ValueError:
        raise ActionParseError(token, f"unknown card source '{value}'")


def parse_action(token: str) -> Action:
    """
    Parse an action token into a typed Action.

    Raises ActionParseError for unknown verbs and malformed parameters.
    """
    if not isinstance(token, str) or not token.strip():
        raise ActionParseError(str(token), "empty action")

    verb, *fields = token.strip().split(SEPARATOR)
    try:
        action_type = ActionType(verb)
    except ValueError:
        raise ActionParseError(token, f"unknown action type '{verb}'")

    if action_type in (
        ActionType.DRIVE_FERRY,
        ActionType.DIRECT_FLIGHT,
        ActionType.CHARTER_FLIGHT,
        ActionType.SHUTTLE_FLIGHT,
    ):
        _expect_fields(token, fields, 1, 1)
        factory = {
            ActionType.DRIVE_FERRY: Action.drive_ferry,
            ActionType.DIRECT_FLIGHT: Action.direct_flight,
            ActionType.CHARTER_FLIGHT: Action.charter_flight,
            ActionType.SHUTTLE_FLIGHT: Action.shuttle_flight,
        }[action_type]
        return factory(fields[0])

    if action_type == ActionType.BUILD_RESEARCH_STATION:
        _expect_fields(token, fields, 0, 1)
        return Action.build_research_station(fields[0] if fields else None)

    if action_type == ActionType.TREAT:
        _expect_fields(token, fields, 1, 1)
        return Action.treat(_parse_color(token, fields[0]))

    if action_type == ActionType.DISCOVER_CURE:
        _expect_fields(token, fields, 1, 1)
        return Action.discover_cure(_parse_color(token, fields[0]))

    if action_type in (ActionType.SHARE_KNOWLEDGE_GIVE, ActionType.SHARE_KNOWLEDGE_TAKE):
        _expect_fields(token, fields, 2, 2)
        index = _parse_index(token, fields[0])
        if action_type == ActionType.SHARE_KNOWLEDGE_GIVE:
            return Action.share_give(index, fields[1])
        return Action.share_take(index, fields[1])

    if action_type == ActionType.DISPATCHER_MOVE_TO_PAWN:
        _expect_fields(token, fields, 2, 2)
        return Action.dispatcher_move_to_pawn(
            _parse_index(token, fields[0]),
            _parse_index(token, fields[1]),
        )

    if action_type == ActionType.DISPATCHER_MOVE_OTHER:
        _expect_fields(token, fields, 3, 4)
        source = _parse_card_source(token, fields[3]) if len(fields) == 4 else CardSource.DISPATCHER
        return Action.dispatcher_move_other(
            _parse_index(token, fields[0]),
            _parse_move_type(token, fields[1]),
            fields[2],
            source,
        )

    if action_type == ActionType.OPS_EXPERT_MOVE:
        _expect_fields(token, fields, 2, 2)
        return Action.ops_expert_move(fields[0], fields[1])

    # CONTINGENCY_PLANNER_TAKE
    _expect_fields(token, fields, 1, 1)
    return Action.contingency_planner_take(_parse_event(token, fields[0]))


def format_action(action: Action) -> str:
    """Render an Action back into its token form."""
    p = action.payload
    verb = action.action_type.value
    t = action.action_type

    if t in (
        ActionType.DRIVE_FERRY,
        ActionType.DIRECT_FLIGHT,
        ActionType.CHARTER_FLIGHT,
        ActionType.SHUTTLE_FLIGHT,
    ):
        parts = [verb, p.destination]
    elif t == ActionType.BUILD_RESEARCH_STATION:
        parts = [verb] if p.city is None else [verb, p.city]
    elif t in (ActionType.TREAT, ActionType.DISCOVER_CURE):
        parts = [verb, p.color.value]
    elif t in (ActionType.SHARE_KNOWLEDGE_GIVE, ActionType.SHARE_KNOWLEDGE_TAKE):
        parts = [verb, str(p.target_player_idx), p.city]
    elif t == ActionType.DISPATCHER_MOVE_TO_PAWN:
        parts = [verb, str(p.player_to_move_idx), str(p.target_player_idx)]
    elif t == ActionType.DISPATCHER_MOVE_OTHER:
        parts = [verb, str(p.player_to_move_idx), p.move_type.value, p.destination]
        if p.move_type in (MoveType.DIRECT, MoveType.CHARTER):
            parts.append(p.card_source.value)
    elif t == ActionType.OPS_EXPERT_MOVE:
        parts = [verb, p.destination, p.city]
    else:
        parts = [verb, p.event.value]

    return SEPARATOR.join(parts)
