"""
Board Catalog - Static city data for the world map.

Each of the 48 cities has a disease color (its region) and a list of
connected cities. Connections are symmetric.

This module is pure data plus lookups; it never sees a GameState.
"""

from __future__ import annotations
from dataclasses import dataclass

from ..engine_core.state import Disease


@dataclass(frozen=True)
class City:
    """A city on the board."""
    name: str
    color: Disease
    connections: tuple[str, ...]


def _city(name: str, color: Disease, *connections: str) -> City:
    return City(name=name, color=color, connections=tuple(connections))


CITIES: tuple[City, ...] = (
    # Blue: North America and Europe
    _city("Atlanta", Disease.BLUE, "Chicago", "Miami", "Washington"),
    _city("Chicago", Disease.BLUE, "Atlanta", "Los Angeles", "Mexico City", "Montreal", "San Francisco"),
    _city("Essen", Disease.BLUE, "London", "Milan", "Paris", "St. Petersburg"),
    _city("London", Disease.BLUE, "Essen", "Madrid", "New York", "Paris"),
    _city("Madrid", Disease.BLUE, "Algiers", "London", "New York", "Paris", "Sao Paulo"),
    _city("Milan", Disease.BLUE, "Essen", "Istanbul", "Paris"),
    _city("Montreal", Disease.BLUE, "Chicago", "New York", "Washington"),
    _city("New York", Disease.BLUE, "London", "Madrid", "Montreal", "Washington"),
    _city("Paris", Disease.BLUE, "Algiers", "Essen", "London", "Madrid", "Milan"),
    _city("San Francisco", Disease.BLUE, "Chicago", "Los Angeles", "Manila", "Tokyo"),
    _city("St. Petersburg", Disease.BLUE, "Essen", "Istanbul", "Moscow"),
    _city("Washington", Disease.BLUE, "Atlanta", "Miami", "Montreal", "New York"),

    # Yellow: Central/South America and Africa
    _city("Bogota", Disease.YELLOW, "Buenos Aires", "Lima", "Mexico City", "Miami", "Sao Paulo"),
    _city("Buenos Aires", Disease.YELLOW, "Bogota", "Sao Paulo"),
    _city("Johannesburg", Disease.YELLOW, "Khartoum", "Kinshasa"),
    _city("Khartoum", Disease.YELLOW, "Cairo", "Johannesburg", "Kinshasa", "Lagos"),
    _city("Kinshasa", Disease.YELLOW, "Johannesburg", "Khartoum", "Lagos"),
    _city("Lagos", Disease.YELLOW, "Khartoum", "Kinshasa", "Sao Paulo"),
    _city("Lima", Disease.YELLOW, "Bogota", "Mexico City", "Santiago"),
    _city("Los Angeles", Disease.YELLOW, "Chicago", "Mexico City", "San Francisco", "Sydney"),
    _city("Mexico City", Disease.YELLOW, "Bogota", "Chicago", "Lima", "Los Angeles", "Miami"),
    _city("Miami", Disease.YELLOW, "Atlanta", "Bogota", "Mexico City", "Washington"),
    _city("Santiago", Disease.YELLOW, "Lima"),
    _city("Sao Paulo", Disease.YELLOW, "Bogota", "Buenos Aires", "Lagos", "Madrid"),

    # Black: Middle East, Central and South Asia
    _city("Algiers", Disease.BLACK, "Cairo", "Istanbul", "Madrid", "Paris"),
    _city("Baghdad", Disease.BLACK, "Cairo", "Istanbul", "Karachi", "Riyadh", "Tehran"),
    _city("Cairo", Disease.BLACK, "Algiers", "Baghdad", "Istanbul", "Khartoum", "Riyadh"),
    _city("Chennai", Disease.BLACK, "Bangkok", "Delhi", "Jakarta", "Kolkata", "Mumbai"),
    _city("Delhi", Disease.BLACK, "Chennai", "Karachi", "Kolkata", "Mumbai", "Tehran"),
    _city("Istanbul", Disease.BLACK, "Algiers", "Baghdad", "Cairo", "Milan", "Moscow", "St. Petersburg"),
    _city("Karachi", Disease.BLACK, "Baghdad", "Delhi", "Mumbai", "Riyadh", "Tehran"),
    _city("Kolkata", Disease.BLACK, "Bangkok", "Chennai", "Delhi", "Hong Kong"),
    _city("Moscow", Disease.BLACK, "Istanbul", "St. Petersburg", "Tehran"),
    _city("Mumbai", Disease.BLACK, "Chennai", "Delhi", "Karachi"),
    _city("Riyadh", Disease.BLACK, "Baghdad", "Cairo", "Karachi"),
    _city("Tehran", Disease.BLACK, "Baghdad", "Delhi", "Karachi", "Moscow"),

    # Red: East Asia, Southeast Asia and Oceania
    _city("Bangkok", Disease.RED, "Chennai", "Ho Chi Minh City", "Hong Kong", "Jakarta", "Kolkata"),
    _city("Beijing", Disease.RED, "Seoul", "Shanghai"),
    _city("Ho Chi Minh City", Disease.RED, "Bangkok", "Hong Kong", "Jakarta", "Manila"),
    _city("Hong Kong", Disease.RED, "Bangkok", "Ho Chi Minh City", "Kolkata", "Manila", "Shanghai", "Taipei"),
    _city("Jakarta", Disease.RED, "Bangkok", "Chennai", "Ho Chi Minh City", "Sydney"),
    _city("Manila", Disease.RED, "Ho Chi Minh City", "Hong Kong", "San Francisco", "Sydney", "Taipei"),
    _city("Osaka", Disease.RED, "Taipei", "Tokyo"),
    _city("Seoul", Disease.RED, "Beijing", "Shanghai", "Tokyo"),
    _city("Shanghai", Disease.RED, "Beijing", "Hong Kong", "Seoul", "Taipei", "Tokyo"),
    _city("Sydney", Disease.RED, "Jakarta", "Los Angeles", "Manila"),
    _city("Taipei", Disease.RED, "Hong Kong", "Manila", "Osaka", "Shanghai"),
    _city("Tokyo", Disease.RED, "Osaka", "San Francisco", "Seoul", "Shanghai"),
)

CITY_MAP: dict[str, City] = {city.name: city for city in CITIES}
CITY_NAMES: tuple[str, ...] = tuple(city.name for city in CITIES)


def get_city(name: str) -> City | None:
    """Get a city by name, or None if the name is not on the board."""
    return CITY_MAP.get(name)


def require_city(name: str) -> City:
    """Get a city by name. Raises ValueError for unknown names."""
    city = CITY_MAP.get(name)
    if city is None:
        raise ValueError(f"Unknown city: {name}")
    return city


def get_cities_by_color(color: Disease) -> list[City]:
    """All cities of one disease color, in catalog order."""
    return [city for city in CITIES if city.color == color]


def get_connections(name: str) -> tuple[str, ...]:
    return require_city(name).connections


def is_adjacent(city_a: str, city_b: str) -> bool:
    """Check whether two cities are directly connected."""
    city = CITY_MAP.get(city_a)
    return city is not None and city_b in city.connections
