"""
Engine Core - Deterministic rules for the outbreak board game.

The engine is the runtime that:
1. Holds the immutable GameState model
2. Parses action tokens
3. Generates legal actions
4. Applies actions via the reducer
5. Resolves draws, epidemics, infections and events
"""

from .state import (
    CityCard,
    CityState,
    CureStatus,
    Disease,
    EpidemicCard,
    EventCard,
    EventType,
    GameState,
    GameStatus,
    InfectionCard,
    LossReason,
    PlayerState,
    Role,
    TurnPhase,
)
from .action import Action, ActionType, ActionPayload, ActionResult, ErrorCode
from .parser import ActionParseError, parse_action, format_action
from .reducer import Reducer, apply_action
from .infection import InfectionReport, EpidemicReport, OutbreakRecord, infect_cities, place_cubes
from .draw import DrawReport, draw_player_cards, discard_cards
from .events import (
    Airlift,
    Forecast,
    GovernmentGrant,
    OneQuietNight,
    ResilientPopulation,
    play_event,
)
from .action_generator import ActionGenerator, available_actions

__all__ = [
    "CityCard",
    "CityState",
    "CureStatus",
    "Disease",
    "EpidemicCard",
    "EventCard",
    "EventType",
    "GameState",
    "GameStatus",
    "InfectionCard",
    "LossReason",
    "PlayerState",
    "Role",
    "TurnPhase",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "ErrorCode",
    "ActionParseError",
    "parse_action",
    "format_action",
    "Reducer",
    "apply_action",
    "InfectionReport",
    "EpidemicReport",
    "OutbreakRecord",
    "infect_cities",
    "place_cubes",
    "DrawReport",
    "draw_player_cards",
    "discard_cards",
    "Airlift",
    "Forecast",
    "GovernmentGrant",
    "OneQuietNight",
    "ResilientPopulation",
    "play_event",
    "ActionGenerator",
    "available_actions",
]
