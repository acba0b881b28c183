"""
Board - Static map data and game setup.
"""

from .catalog import (
    City,
    CITIES,
    CITY_MAP,
    CITY_NAMES,
    get_city,
    require_city,
    get_cities_by_color,
    get_connections,
    is_adjacent,
)
from .setup import setup_game

__all__ = [
    "City",
    "CITIES",
    "CITY_MAP",
    "CITY_NAMES",
    "get_city",
    "require_city",
    "get_cities_by_color",
    "get_connections",
    "is_adjacent",
    "setup_game",
]
