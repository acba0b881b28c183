"""
Outbreak - Cooperative Outbreak-Containment Rules Engine

A deterministic, rules-driven engine for a card-driven cooperative
board game about containing four diseases. The engine provides:
- Board catalog and game setup
- Immutable-style game state snapshots
- Action resolution with role-specific overrides
- Infection, outbreak and epidemic resolution
- Event card effects
- A turn-phase orchestrator for a single local caller
"""

__version__ = "0.1.0"

# engine_core must load before board/api/session, which import from it
from .engine_core import GameState, TurnPhase, GameStatus, Disease, Role
from .session import OrchestratedGame, create_game

__all__ = [
    "GameState",
    "TurnPhase",
    "GameStatus",
    "Disease",
    "Role",
    "OrchestratedGame",
    "create_game",
]
