"""
Pydantic Schemas - Validated game configuration and read-only state views.

GameConfig is the only way to start a game. The view models are
detached copies of a GameState for a presentation layer: mutating them
never affects the engine.
"""

from typing import Optional
from pydantic import BaseModel, Field, model_validator

from ..engine_core.state import (
    DISEASES,
    CureStatus,
    GameState,
    GameStatus,
    LossReason,
    Role,
    TurnPhase,
)


# =============================================================================
# Configuration
# =============================================================================

class GameConfig(BaseModel):
    """Setup parameters for a new game."""
    player_count: int = Field(2, ge=2, le=4)
    difficulty: int = Field(4, ge=4, le=6, description="Number of epidemic cards")
    roles: Optional[list[Role]] = Field(
        None, description="Fixed roles in seat order; random when omitted"
    )
    seed: Optional[int] = None

    @model_validator(mode="after")
    def _check_roles(self) -> "GameConfig":
        if self.roles is not None:
            if len(self.roles) != self.player_count:
                raise ValueError(
                    f"Expected {self.player_count} roles, got {len(self.roles)}"
                )
            if len(set(self.roles)) != len(self.roles):
                raise ValueError("Roles must be unique")
        return self


# =============================================================================
# State views
# =============================================================================

class CityView(BaseModel):
    """Cubes and station for one city."""
    name: str
    blue: int = 0
    yellow: int = 0
    black: int = 0
    red: int = 0
    has_research_station: bool = False

    model_config = {"from_attributes": True}


class PlayerView(BaseModel):
    """A player's role, position and cards."""
    index: int
    role: Role
    location: str
    hand: list[str] = Field(default_factory=list)
    stored_event: Optional[str] = None
    is_current_turn: bool = False


class GameSnapshot(BaseModel):
    """Complete read-only view of a game."""
    turn_number: int
    current_player_index: int
    phase: TurnPhase
    actions_remaining: int
    status: GameStatus
    loss_reason: Optional[LossReason] = None

    cures: dict[str, CureStatus]
    cube_supply: dict[str, int]
    outbreak_count: int
    infection_rate_position: int
    infection_rate: int

    player_deck_size: int
    player_discard: list[str] = Field(default_factory=list)
    infection_deck_size: int
    infection_discard: list[str] = Field(default_factory=list)

    research_stations: list[str] = Field(default_factory=list)
    cities: list[CityView] = Field(default_factory=list, description="Cities with cubes or a station")
    players: list[PlayerView] = Field(default_factory=list)

    @classmethod
    def from_state(cls, state: GameState) -> "GameSnapshot":
        cities = [
            CityView(
                name=name,
                blue=city.blue,
                yellow=city.yellow,
                black=city.black,
                red=city.red,
                has_research_station=city.has_research_station,
            )
            for name, city in state.board.items()
            if city.total_cubes or city.has_research_station
        ]
        players = [
            PlayerView(
                index=i,
                role=player.role,
                location=player.location,
                hand=[str(card) for card in player.hand],
                stored_event=str(player.stored_event) if player.stored_event else None,
                is_current_turn=i == state.current_player_idx,
            )
            for i, player in enumerate(state.players)
        ]
        return cls(
            turn_number=state.turn_number,
            current_player_index=state.current_player_idx,
            phase=state.phase,
            actions_remaining=state.actions_remaining,
            status=state.status,
            loss_reason=state.loss_reason,
            cures={color.value: state.cures[color] for color in DISEASES},
            cube_supply={color.value: state.cube_supply[color] for color in DISEASES},
            outbreak_count=state.outbreak_count,
            infection_rate_position=state.infection_rate_position,
            infection_rate=state.infection_rate,
            player_deck_size=len(state.player_deck),
            player_discard=[str(card) for card in state.player_discard],
            infection_deck_size=len(state.infection_deck),
            infection_discard=[str(card) for card in state.infection_discard],
            research_stations=state.research_stations(),
            cities=cities,
            players=players,
        )
