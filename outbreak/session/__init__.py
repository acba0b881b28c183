"""
Session - The turn-phase orchestrator that drives one game.
"""

from .orchestrator import (
    OrchestratedGame,
    create_game,
    Outcome,
    ActionOutcome,
    DrawOutcome,
    InfectOutcome,
    EventOutcome,
    DiscardOutcome,
)

__all__ = [
    "OrchestratedGame",
    "create_game",
    "Outcome",
    "ActionOutcome",
    "DrawOutcome",
    "InfectOutcome",
    "EventOutcome",
    "DiscardOutcome",
]
