"""
Role Capabilities - The single table of role-specific rule overrides.

Every action that behaves differently for some role asks this table
instead of comparing roles inline. Adding or changing a role means
editing one entry here.
"""

from __future__ import annotations
from dataclasses import dataclass

from .state import Role

STANDARD_CARDS_FOR_CURE = 5


@dataclass(frozen=True)
class RoleCapabilities:
    """What a role is allowed to do differently from the base rules."""
    role: Role
    cards_needed_for_cure: int = STANDARD_CARDS_FOR_CURE
    always_removes_all_cubes: bool = False
    clears_cured_cubes_on_entry: bool = False
    can_build_without_card: bool = False
    can_give_any_city_card: bool = False
    can_move_other_pawns: bool = False
    has_station_special_move: bool = False
    can_store_event: bool = False
    prevents_nearby_infection: bool = False
    description: str = ""


ROLE_CAPABILITIES: dict[Role, RoleCapabilities] = {
    Role.CONTINGENCY_PLANNER: RoleCapabilities(
        role=Role.CONTINGENCY_PLANNER,
        can_store_event=True,
        description="Take an event card from the discard pile and store it off-hand",
    ),
    Role.DISPATCHER: RoleCapabilities(
        role=Role.DISPATCHER,
        can_move_other_pawns=True,
        description="Move other pawns as your own, or move any pawn to another pawn",
    ),
    Role.MEDIC: RoleCapabilities(
        role=Role.MEDIC,
        always_removes_all_cubes=True,
        clears_cured_cubes_on_entry=True,
        description="Treat removes all cubes; cured cubes vanish where the Medic stands",
    ),
    Role.OPERATIONS_EXPERT: RoleCapabilities(
        role=Role.OPERATIONS_EXPERT,
        can_build_without_card=True,
        has_station_special_move=True,
        description="Build stations without a card; once per turn fly from a station",
    ),
    Role.QUARANTINE_SPECIALIST: RoleCapabilities(
        role=Role.QUARANTINE_SPECIALIST,
        prevents_nearby_infection=True,
        description="No cubes are placed in or next to the Quarantine Specialist's city",
    ),
    Role.RESEARCHER: RoleCapabilities(
        role=Role.RESEARCHER,
        can_give_any_city_card=True,
        description="May give any city card when sharing knowledge",
    ),
    Role.SCIENTIST: RoleCapabilities(
        role=Role.SCIENTIST,
        cards_needed_for_cure=4,
        description="Needs only 4 cards to discover a cure",
    ),
}


def capabilities_for(role: Role) -> RoleCapabilities:
    return ROLE_CAPABILITIES[Role(role)]


def cards_needed_for_cure(role: Role) -> int:
    return capabilities_for(role).cards_needed_for_cure


def always_removes_all_cubes(role: Role) -> bool:
    return capabilities_for(role).always_removes_all_cubes


def clears_cured_cubes_on_entry(role: Role) -> bool:
    return capabilities_for(role).clears_cured_cubes_on_entry


def can_build_without_card(role: Role) -> bool:
    return capabilities_for(role).can_build_without_card


def can_give_any_city_card(role: Role) -> bool:
    return capabilities_for(role).can_give_any_city_card


def can_move_other_pawns(role: Role) -> bool:
    return capabilities_for(role).can_move_other_pawns


def has_station_special_move(role: Role) -> bool:
    return capabilities_for(role).has_station_special_move


def can_store_event(role: Role) -> bool:
    return capabilities_for(role).can_store_event


def prevents_nearby_infection(role: Role) -> bool:
    return capabilities_for(role).prevents_nearby_infection


def describe_role(role: Role) -> str:
    return capabilities_for(role).description
