"""
Reducer - Applies player actions to game state.

The reducer is the single point of state change for the Actions phase.
All player actions go through apply_action().

Design principles:
- Pure function: (state, action) -> new_state
- Validates before applying, first failure wins
- Returns ActionResult with success/failure
- Role differences come from the capability table in roles.py
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable

from ..board.catalog import get_city, is_adjacent
from .action import Action, ActionResult, ActionType, CardSource, ErrorCode, MoveType
from .roles import (
    always_removes_all_cubes,
    can_build_without_card,
    can_give_any_city_card,
    can_move_other_pawns,
    can_store_event,
    cards_needed_for_cure,
    clears_cured_cubes_on_entry,
    has_station_special_move,
)
from .state import (
    DISEASES,
    CityCard,
    CureStatus,
    Disease,
    EventCard,
    GameState,
    GameStatus,
    HAND_LIMIT,
    MAX_RESEARCH_STATIONS,
    TurnPhase,
)

Handler = Callable[[GameState, Action], ActionResult]


# =============================================================================
# Shared rule helpers (also used by events and the infection engine)
# =============================================================================

def refresh_eradication(state: GameState, colors=DISEASES) -> GameState:
    """Promote every cured color with no cubes left on the board to eradicated."""
    for color in colors:
        if state.cures[color] == CureStatus.CURED and state.cubes_on_board(color) == 0:
            state = state.with_cure(color, CureStatus.ERADICATED)
    return state


def apply_medic_passive(state: GameState, player_idx: int) -> tuple[GameState, list[str]]:
    """
    Remove cured-disease cubes where a Medic stands.

    No-op for any other role. Cubes go back to the reserve, and a color
    that ends up with zero cubes on the board becomes eradicated.
    """
    player = state.players[player_idx]
    if not clears_cured_cubes_on_entry(player.role):
        return state, []

    changes = []
    city_state = state.city(player.location)
    for color in DISEASES:
        count = city_state.cubes(color)
        if count and state.is_cured(color):
            city_state = city_state.with_cubes(color, 0)
            state = state.with_supply(color, state.cube_supply[color] + count)
            changes.append(f"Medic cleared {count} {color.value} cube(s) in {player.location}")
    if changes:
        state = state.with_city(player.location, city_state)
        state = refresh_eradication(state)
    return state, changes


def relocate(state: GameState, player_idx: int, destination: str) -> tuple[GameState, list[str]]:
    """Move a pawn and run the Medic passive at the destination."""
    player = state.players[player_idx]
    state = state.with_player(player_idx, player.with_location(destination))
    changes = [f"{player.role.value} moved {player.location} -> {destination}"]
    state, medic_changes = apply_medic_passive(state, player_idx)
    return state, changes + medic_changes


def build_station(
    state: GameState, city: str, city_to_remove: str | None
) -> tuple[GameState | None, str | None]:
    """
    Place a research station, honoring the six-station cap.

    Returns (new_state, None) or (None, error).
    """
    if state.city(city).has_research_station:
        return None, f"Cannot build research station in {city}: research station already exists here"

    stations = state.research_stations()
    if len(stations) >= MAX_RESEARCH_STATIONS:
        if city_to_remove is None:
            return None, (
                f"Cannot build research station: all {MAX_RESEARCH_STATIONS} stations are in use, "
                "choose a station to remove"
            )
        if get_city(city_to_remove) is None:
            return None, f"Invalid city to remove station from: {city_to_remove}"
        if city_to_remove not in stations:
            return None, (
                f"Cannot remove research station from {city_to_remove}: "
                "no research station exists there"
            )
        state = state.with_city(city_to_remove, state.city(city_to_remove).with_station(False))
    elif city_to_remove is not None:
        return None, (
            "Cannot remove research station: only remove stations when all "
            f"{MAX_RESEARCH_STATIONS} are in use"
        )

    return state.with_city(city, state.city(city).with_station(True)), None


def check_win(state: GameState) -> GameState:
    if state.status == GameStatus.ONGOING and state.all_cured():
        return state._copy_with(status=GameStatus.WON)
    return state


# =============================================================================
# Reducer
# =============================================================================

@dataclass
class Reducer:
    """
    Reducer applies player actions to game state.

    Stateless - all state is in GameState.
    """

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error. A successful
        action always costs exactly one action.
        """
        gate_error = self._validate_action(state)
        if gate_error:
            return gate_error

        handler = self._get_handler(action.action_type)
        result = handler(state, action)
        if result.success:
            new_state = result.new_state
            result.new_state = new_state._copy_with(
                actions_remaining=new_state.actions_remaining - 1
            )
        return result

    def _validate_action(self, state: GameState) -> ActionResult | None:
        """Shared precondition gate. Returns a failure, or None if the action may proceed."""
        if state.status != GameStatus.ONGOING:
            return ActionResult.failure(
                f"Game is over ({state.status.value})", error_code=ErrorCode.GAME_OVER
            )
        if state.phase != TurnPhase.ACTIONS:
            return ActionResult.failure(
                f"Cannot perform actions during the {state.phase.value} phase",
                error_code=ErrorCode.PHASE_VIOLATION,
            )
        if state.actions_remaining <= 0:
            return ActionResult.failure(
                "No actions remaining this turn", error_code=ErrorCode.PHASE_VIOLATION
            )
        return None

    def _get_handler(self, action_type: ActionType) -> Handler:
        """Get the handler function for an action type."""
        handlers = {
            ActionType.DRIVE_FERRY: self._handle_drive_ferry,
            ActionType.DIRECT_FLIGHT: self._handle_direct_flight,
            ActionType.CHARTER_FLIGHT: self._handle_charter_flight,
            ActionType.SHUTTLE_FLIGHT: self._handle_shuttle_flight,
            ActionType.BUILD_RESEARCH_STATION: self._handle_build_research_station,
            ActionType.TREAT: self._handle_treat,
            ActionType.SHARE_KNOWLEDGE_GIVE: self._handle_share_give,
            ActionType.SHARE_KNOWLEDGE_TAKE: self._handle_share_take,
            ActionType.DISCOVER_CURE: self._handle_discover_cure,
            ActionType.DISPATCHER_MOVE_TO_PAWN: self._handle_dispatcher_move_to_pawn,
            ActionType.DISPATCHER_MOVE_OTHER: self._handle_dispatcher_move_other,
            ActionType.OPS_EXPERT_MOVE: self._handle_ops_expert_move,
            ActionType.CONTINGENCY_PLANNER_TAKE: self._handle_contingency_planner_take,
        }
        return handlers[action_type]

    # -------------------------------------------------------------------------
    # Movement
    # -------------------------------------------------------------------------

    def _check_destination(self, state: GameState, player_idx: int, destination: str | None) -> str | None:
        if destination is None or get_city(destination) is None:
            return f"Invalid destination: {destination} is not a valid city"
        if state.players[player_idx].location == destination:
            return f"Cannot move to {destination}: already there"
        return None

    def _move_legality(
        self, state: GameState, player_idx: int, move_type: MoveType, destination: str
    ) -> str | None:
        """Card-independent legality for a move of one pawn."""
        location = state.players[player_idx].location
        if move_type == MoveType.DRIVE and not is_adjacent(location, destination):
            return (
                f"Cannot drive/ferry from {location} to {destination}: "
                "cities are not connected"
            )
        if move_type == MoveType.SHUTTLE:
            if not state.city(location).has_research_station:
                return f"Cannot shuttle flight from {location}: no research station at current location"
            if not state.city(destination).has_research_station:
                return f"Cannot shuttle flight to {destination}: no research station at destination"
        return None

    def _handle_drive_ferry(self, state: GameState, action: Action) -> ActionResult:
        idx = state.current_player_idx
        destination = action.payload.destination
        error = self._check_destination(state, idx, destination) or self._move_legality(
            state, idx, MoveType.DRIVE, destination
        )
        if error:
            return ActionResult.failure(error)
        new_state, changes = relocate(state, idx, destination)
        return ActionResult.success_with_state(new_state, changes)

    def _handle_direct_flight(self, state: GameState, action: Action) -> ActionResult:
        idx = state.current_player_idx
        destination = action.payload.destination
        error = self._check_destination(state, idx, destination)
        if error:
            return ActionResult.failure(error)

        player = state.players[idx]
        card_idx = player.find_city_card(destination)
        if card_idx < 0:
            return ActionResult.failure(
                f"Cannot direct flight to {destination}: player does not have that city card"
            )
        card, player = player.remove_card_at(card_idx)
        state = state.with_player(idx, player).discard_player_cards(card)
        new_state, changes = relocate(state, idx, destination)
        return ActionResult.success_with_state(new_state, [f"Discarded {card}"] + changes)

    def _handle_charter_flight(self, state: GameState, action: Action) -> ActionResult:
        idx = state.current_player_idx
        destination = action.payload.destination
        error = self._check_destination(state, idx, destination)
        if error:
            return ActionResult.failure(error)

        player = state.players[idx]
        card_idx = player.find_city_card(player.location)
        if card_idx < 0:
            return ActionResult.failure(
                f"Cannot charter flight from {player.location}: player does not have that city card"
            )
        card, player = player.remove_card_at(card_idx)
        state = state.with_player(idx, player).discard_player_cards(card)
        new_state, changes = relocate(state, idx, destination)
        return ActionResult.success_with_state(new_state, [f"Discarded {card}"] + changes)

    def _handle_shuttle_flight(self, state: GameState, action: Action) -> ActionResult:
        idx = state.current_player_idx
        destination = action.payload.destination
        error = self._check_destination(state, idx, destination) or self._move_legality(
            state, idx, MoveType.SHUTTLE, destination
        )
        if error:
            return ActionResult.failure(error)
        new_state, changes = relocate(state, idx, destination)
        return ActionResult.success_with_state(new_state, changes)

    # -------------------------------------------------------------------------
    # Build, treat, share, cure
    # -------------------------------------------------------------------------

    def _handle_build_research_station(self, state: GameState, action: Action) -> ActionResult:
        idx = state.current_player_idx
        player = state.current_player
        location = player.location
        if state.city(location).has_research_station:
            return ActionResult.failure(
                f"Cannot build research station in {location}: research station already exists here"
            )

        card = None
        if not can_build_without_card(player.role):
            card_idx = player.find_city_card(location)
            if card_idx < 0:
                return ActionResult.failure(
                    f"Cannot build research station in {location}: player does not have that city card"
                )
            card, player = player.remove_card_at(card_idx)

        new_state, error = build_station(state, location, action.payload.city)
        if error:
            return ActionResult.failure(error)

        changes = [f"Built research station in {location}"]
        if action.payload.city is not None:
            changes.append(f"Removed research station from {action.payload.city}")
        if card is not None:
            new_state = new_state.with_player(idx, player).discard_player_cards(card)
            changes.insert(0, f"Discarded {card}")
        return ActionResult.success_with_state(new_state, changes)

    def _handle_treat(self, state: GameState, action: Action) -> ActionResult:
        player = state.current_player
        color = action.payload.color
        location = player.location
        city_state = state.city(location)
        present = city_state.cubes(color)
        if present == 0:
            return ActionResult.failure(
                f"Cannot treat {color.value} disease in {location}: no {color.value} cubes present"
            )

        if always_removes_all_cubes(player.role) or state.is_cured(color):
            removed = present
        else:
            removed = 1

        state = state.with_city(location, city_state.with_cubes(color, present - removed))
        state = state.with_supply(color, state.cube_supply[color] + removed)
        state = refresh_eradication(state, (color,))
        changes = [f"Treated {removed} {color.value} cube(s) in {location}"]
        if state.cures[color] == CureStatus.ERADICATED:
            changes.append(f"{color.value} disease eradicated")
        return ActionResult.success_with_state(state, changes)

    def _share(
        self, state: GameState, giver_idx: int, receiver_idx: int, city: str | None
    ) -> ActionResult:
        """Move one city card from giver to receiver."""
        giver = state.players[giver_idx]
        receiver = state.players[receiver_idx]
        location = state.current_player.location

        if giver.location != receiver.location:
            return ActionResult.failure(
                "Cannot share knowledge: both players must be in the same city "
                f"(giver: {giver.location}, receiver: {receiver.location})"
            )
        if city is None or get_city(city) is None:
            return ActionResult.failure(f"Invalid city card: {city}")
        if city != location and not can_give_any_city_card(giver.role):
            return ActionResult.failure(
                f"Cannot share knowledge: only the {location} city card may be shared "
                f"(the {giver.role.value} is giving)"
            )

        card_idx = giver.find_city_card(city)
        if card_idx < 0:
            return ActionResult.failure(
                f"Cannot share knowledge: {giver.role.value} does not have the {city} city card"
            )
        if receiver.hand_size >= HAND_LIMIT:
            return ActionResult.failure(
                f"Cannot share knowledge: {receiver.role.value} already has "
                f"{HAND_LIMIT} cards (hand limit)"
            )

        card, giver = giver.remove_card_at(card_idx)
        state = state.with_player(giver_idx, giver)
        state = state.with_player(receiver_idx, receiver.add_card(card))
        return ActionResult.success_with_state(
            state, [f"{giver.role.value} gave {card} to {receiver.role.value}"]
        )

    def _check_other_player(self, state: GameState, index: int | None) -> str | None:
        if index is None or state.get_player(index) is None:
            return f"Invalid target player index: {index}"
        if index == state.current_player_idx:
            return "Cannot share knowledge with yourself"
        return None

    def _handle_share_give(self, state: GameState, action: Action) -> ActionResult:
        target = action.payload.target_player_idx
        error = self._check_other_player(state, target)
        if error:
            return ActionResult.failure(error)
        return self._share(state, state.current_player_idx, target, action.payload.city)

    def _handle_share_take(self, state: GameState, action: Action) -> ActionResult:
        target = action.payload.target_player_idx
        error = self._check_other_player(state, target)
        if error:
            return ActionResult.failure(error)
        return self._share(state, target, state.current_player_idx, action.payload.city)

    def _handle_discover_cure(self, state: GameState, action: Action) -> ActionResult:
        idx = state.current_player_idx
        player = state.current_player
        color = action.payload.color
        location = player.location

        if not state.city(location).has_research_station:
            return ActionResult.failure(f"Cannot discover cure: no research station in {location}")
        if state.is_cured(color):
            return ActionResult.failure(
                f"Cannot discover cure: {color.value} disease is already cured"
            )

        needed = cards_needed_for_cure(player.role)
        matching = player.city_cards_of_color(color)
        if len(matching) < needed:
            return ActionResult.failure(
                f"Cannot discover cure: need {needed} {color.value} city cards, "
                f"but only have {len(matching)}"
            )

        # Discard the first N matching cards in hand order
        to_discard = matching[:needed]
        hand = list(player.hand)
        for card in to_discard:
            hand.remove(card)
        state = state.with_player(idx, player.with_hand(hand))
        state = state.discard_player_cards(*to_discard)
        state = state.with_cure(color, CureStatus.CURED)
        changes = [f"Discovered cure for {color.value}"]

        for medic_idx in range(state.num_players):
            state, medic_changes = apply_medic_passive(state, medic_idx)
            changes.extend(medic_changes)

        state = refresh_eradication(state, (color,))
        if state.cures[color] == CureStatus.ERADICATED:
            changes.append(f"{color.value} disease eradicated")

        state = check_win(state)
        if state.status == GameStatus.WON:
            changes.append("All four diseases cured")
        return ActionResult.success_with_state(state, changes)

    # -------------------------------------------------------------------------
    # Role actions
    # -------------------------------------------------------------------------

    def _handle_dispatcher_move_to_pawn(self, state: GameState, action: Action) -> ActionResult:
        if not can_move_other_pawns(state.current_player.role):
            return ActionResult.failure(
                "Cannot use Dispatcher ability: current player is not Dispatcher"
            )
        mover = action.payload.player_to_move_idx
        target = action.payload.target_player_idx
        if mover is None or state.get_player(mover) is None:
            return ActionResult.failure(f"Invalid player to move index: {mover}")
        if target is None or state.get_player(target) is None:
            return ActionResult.failure(f"Invalid target player index: {target}")

        destination = state.players[target].location
        if state.players[mover].location == destination:
            return ActionResult.failure("Cannot move player to their own location")

        new_state, changes = relocate(state, mover, destination)
        return ActionResult.success_with_state(new_state, changes)

    def _handle_dispatcher_move_other(self, state: GameState, action: Action) -> ActionResult:
        if not can_move_other_pawns(state.current_player.role):
            return ActionResult.failure(
                "Cannot use Dispatcher ability: current player is not Dispatcher"
            )
        payload = action.payload
        mover = payload.player_to_move_idx
        if mover is None or state.get_player(mover) is None:
            return ActionResult.failure(f"Invalid player to move index: {mover}")
        if mover == state.current_player_idx:
            return ActionResult.failure(
                f"Invalid player to move index: {mover} (the Dispatcher moves itself normally)"
            )

        destination = payload.destination
        error = self._check_destination(state, mover, destination) or self._move_legality(
            state, mover, payload.move_type, destination
        )
        if error:
            return ActionResult.failure(error)

        changes = []
        if payload.move_type in (MoveType.DIRECT, MoveType.CHARTER):
            holder_idx = state.current_player_idx if payload.card_source == CardSource.DISPATCHER else mover
            if payload.move_type == MoveType.DIRECT:
                needed_city = destination
            else:
                needed_city = state.players[mover].location
            holder = state.players[holder_idx]
            card_idx = holder.find_city_card(needed_city)
            if card_idx < 0:
                return ActionResult.failure(
                    f"Cannot perform {payload.move_type.value} flight: "
                    f"{payload.card_source.value} does not have the {needed_city} city card"
                )
            card, holder = holder.remove_card_at(card_idx)
            state = state.with_player(holder_idx, holder).discard_player_cards(card)
            changes.append(f"Discarded {card}")

        new_state, move_changes = relocate(state, mover, destination)
        return ActionResult.success_with_state(new_state, changes + move_changes)

    def _handle_ops_expert_move(self, state: GameState, action: Action) -> ActionResult:
        idx = state.current_player_idx
        player = state.current_player
        if not has_station_special_move(player.role):
            return ActionResult.failure(
                "Cannot use Operations Expert special move: current player is not Operations Expert"
            )
        if state.ops_expert_move_used:
            return ActionResult.failure(
                "Cannot use Operations Expert special move: already used once this turn"
            )
        if not state.city(player.location).has_research_station:
            return ActionResult.failure(
                f"Cannot use Operations Expert special move from {player.location}: "
                "no research station at current location"
            )
        destination = action.payload.destination
        error = self._check_destination(state, idx, destination)
        if error:
            return ActionResult.failure(error)

        card_idx = player.find_city_card(action.payload.city)
        if card_idx < 0:
            return ActionResult.failure(
                "Cannot use Operations Expert special move: player does not have "
                f"the {action.payload.city} city card"
            )
        card, player = player.remove_card_at(card_idx)
        state = state.with_player(idx, player).discard_player_cards(card)
        state = state._copy_with(ops_expert_move_used=True)
        new_state, changes = relocate(state, idx, destination)
        return ActionResult.success_with_state(new_state, [f"Discarded {card}"] + changes)

    def _handle_contingency_planner_take(self, state: GameState, action: Action) -> ActionResult:
        idx = state.current_player_idx
        player = state.current_player
        if not can_store_event(player.role):
            return ActionResult.failure(
                "Cannot use Contingency Planner ability: current player is not Contingency Planner"
            )
        if player.stored_event is not None:
            return ActionResult.failure(
                "Cannot store event card: Contingency Planner already has a stored event card"
            )

        wanted = EventCard(action.payload.event)
        if wanted not in state.player_discard:
            return ActionResult.failure(
                f"Cannot take event card: {wanted.event.value} not found in player discard pile"
            )
        discard = list(state.player_discard)
        discard.remove(wanted)
        state = state._copy_with(player_discard=tuple(discard))
        state = state.with_player(idx, player.with_stored_event(wanted))
        return ActionResult.success_with_state(state, [f"Stored {wanted}"])


_REDUCER = Reducer()


def apply_action(state: GameState, action: Action) -> ActionResult:
    """Apply a player action using the shared stateless reducer."""
    return _REDUCER.apply(state, action)
