"""
Process configuration read from the environment.

Per-game settings (player count, difficulty, roles, seed) live in
GameConfig (see api/schemas.py); this module only covers defaults
that apply to the whole process.
"""

import logging
import os

# Environment configuration
OUTBREAK_LOG_LEVEL = os.getenv("OUTBREAK_LOG_LEVEL", "WARNING")
OUTBREAK_DEFAULT_SEED = os.getenv("OUTBREAK_DEFAULT_SEED", None)


def default_seed() -> int | None:
    """Seed used when a game is created without one (None = random)."""
    if OUTBREAK_DEFAULT_SEED is None or OUTBREAK_DEFAULT_SEED == "":
        return None
    try:
        return int(OUTBREAK_DEFAULT_SEED)
    except ValueError:
        raise ValueError(
            f"OUTBREAK_DEFAULT_SEED must be an integer, got {OUTBREAK_DEFAULT_SEED!r}"
        )


def log_level(name: str | None = None) -> int:
    """Resolve a level name (or the configured default) to a logging level."""
    level_name = (name or OUTBREAK_LOG_LEVEL).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name}")
    return level


def configure_logging(name: str | None = None) -> None:
    """Configure root logging for command-line use."""
    logging.basicConfig(
        level=log_level(name),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
