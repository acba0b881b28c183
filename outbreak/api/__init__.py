"""
API - Pydantic models for configuring games and viewing their state.
"""

from .schemas import GameConfig, CityView, PlayerView, GameSnapshot

__all__ = ["GameConfig", "CityView", "PlayerView", "GameSnapshot"]
