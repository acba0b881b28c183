"""
Tests for the turn-phase orchestrator.
"""

import random

from ..api.schemas import GameConfig
from ..engine_core.action import ErrorCode
from ..engine_core.events import OneQuietNight
from ..engine_core.state import (
    DISEASES,
    CureStatus,
    Disease,
    EventCard,
    EventType,
    GameStatus,
    LossReason,
    Role,
    TurnPhase,
)
from ..session import OrchestratedGame, create_game
from .conftest import assert_cube_ledger, city_card, infection_card, make_state, with_cubes

PLAYER_DECK = ["Chicago", "Miami", "Lima", "Bogota", "Paris", "Tokyo", "Cairo", "Delhi"]
INFECTION_DECK = ["Sydney", "Osaka", "Madrid", "Karachi", "Beijing", "Lagos"]
SIX = ["Essen", "Milan", "London", "Sydney", "Manila", "Seoul"]


def scripted_game(hands=None, **overrides) -> OrchestratedGame:
    """A hand-built game with known decks."""
    overrides.setdefault("player_deck", tuple(city_card(c) for c in PLAYER_DECK))
    overrides.setdefault("infection_deck", tuple(infection_card(c) for c in INFECTION_DECK))
    state = make_state(hands=hands, **overrides)
    return OrchestratedGame(state, random.Random(0))


def spend_actions(game, count=4):
    for _ in range(count):
        here = game.current_player.location
        outcome = game.perform_action(
            "drive-ferry:Atlanta" if here == "Chicago" else "drive-ferry:Chicago"
        )
        assert outcome.success, outcome.error


class TestCreate:
    """Tests for starting games."""

    def test_fresh_game(self, game):
        """A new game waits for the first player's four actions in Atlanta."""
        assert game.phase == TurnPhase.ACTIONS
        assert game.actions_remaining == 4
        assert game.current_player_index == 0
        assert game.turn_number == 1
        assert game.status == GameStatus.ONGOING
        assert all(p.location == "Atlanta" for p in game.state.players)
        assert all(game.state.cures[d] == CureStatus.UNCURED for d in DISEASES)
        assert_cube_ledger(game.state)
        assert sum(game.state.cube_supply.values()) == 96 - 18

    def test_same_seed_same_game(self):
        """Seeding makes setup reproducible."""
        a = create_game(GameConfig(player_count=3, seed=11))
        b = create_game({"player_count": 3}, seed=11)
        assert a.state == b.state

    def test_seed_argument_wins(self):
        """The explicit seed overrides the config seed."""
        game = OrchestratedGame.create(GameConfig(seed=1), seed=2)
        assert game.state.seed == 2

    def test_default_config(self):
        """No config means a 2-player, difficulty 4 game."""
        game = OrchestratedGame.create(seed=5)
        assert game.state.num_players == 2
        assert game.state.difficulty == 4


class TestActionsPhase:
    """Tests for performing actions."""

    def test_perform_action(self, game):
        """A legal token is applied and costs an action."""
        outcome = game.perform_action("drive-ferry:Chicago")
        assert outcome.success
        assert outcome.actions_remaining == 3
        assert game.current_player.location == "Chicago"

    def test_direct_flight(self):
        """Flying on a held card moves the pawn and discards the card."""
        game = OrchestratedGame(make_state(hands=[["Chicago"], []]), random.Random(0))
        outcome = game.perform_action("direct-flight:Chicago")
        assert outcome.success
        assert game.current_player.location == "Chicago"
        assert game.current_player.hand == ()
        assert [c.city for c in game.state.player_discard] == ["Chicago"]
        assert game.actions_remaining == 3

    def test_malformed_token(self, game):
        """Garbage tokens are a distinct error and change nothing."""
        before = game.state
        outcome = game.perform_action("teleport:Chicago")
        assert not outcome.success
        assert outcome.error_code == ErrorCode.MALFORMED_ACTION
        assert game.state is before

    def test_rule_violation(self, game):
        """Illegal moves are rule violations."""
        outcome = game.perform_action("drive-ferry:Tokyo")
        assert outcome.error_code == ErrorCode.RULE_VIOLATION
        assert game.actions_remaining == 4

    def test_available_actions_are_accepted(self, game):
        """Every offered token succeeds."""
        tokens = game.get_available_actions()
        assert tokens
        outcome = game.perform_action(tokens[0])
        assert outcome.success

    def test_fourth_action_moves_to_draw(self):
        """Spending the last action advances to Draw."""
        game = scripted_game()
        spend_actions(game, 3)
        assert game.phase == TurnPhase.ACTIONS
        spend_actions(game, 1)
        assert game.phase == TurnPhase.DRAW
        assert game.get_available_actions() == []

    def test_no_actions_in_draw(self):
        """Actions during Draw are phase violations."""
        game = scripted_game()
        spend_actions(game)
        outcome = game.perform_action("drive-ferry:Chicago")
        assert outcome.error_code == ErrorCode.PHASE_VIOLATION

    def test_draw_during_actions(self):
        """Drawing early is a phase violation."""
        assert scripted_game().draw_cards().error_code == ErrorCode.PHASE_VIOLATION

    def test_infect_during_actions(self):
        """Infecting early is a phase violation."""
        assert scripted_game().infect_cities().error_code == ErrorCode.PHASE_VIOLATION


class TestTurnCycle:
    """Tests for the Actions -> Draw -> Infect -> next player cycle."""

    def test_full_turn(self):
        """A whole turn hands play to the next player."""
        game = scripted_game()
        spend_actions(game)

        draw = game.draw_cards()
        assert draw.success
        assert [c.city for c in game.state.players[0].hand] == ["Chicago", "Miami"]
        assert game.phase == TurnPhase.INFECT

        infect = game.infect_cities()
        assert infect.success
        assert [c.city for c in infect.report.cards_drawn] == ["Sydney", "Osaka"]
        assert game.phase == TurnPhase.ACTIONS
        assert game.current_player_index == 1
        assert game.actions_remaining == 4
        assert game.turn_number == 2

    def test_turn_wraps_around(self):
        """After the last player comes the first again."""
        game = scripted_game()
        for _ in range(2):
            spend_actions(game)
            game.draw_cards()
            game.infect_cities()
        assert game.current_player_index == 0
        assert game.turn_number == 3

    def test_special_move_flag_resets(self):
        """The Operations Expert can use the station move again next turn."""
        game = scripted_game(
            roles=(Role.OPERATIONS_EXPERT, Role.MEDIC),
            hands=[["Paris"], []],
        )
        assert game.perform_action("ops-expert-move:Tokyo:Paris").success
        assert game.state.ops_expert_move_used
        for token in ["drive-ferry:Osaka", "drive-ferry:Tokyo", "drive-ferry:Osaka"]:
            assert game.perform_action(token).success
        game.draw_cards()
        game.infect_cities()
        assert not game.state.ops_expert_move_used


class TestHandLimit:
    """Tests for the Draw phase waiting on discards."""

    def test_overflow_holds_draw(self):
        """Eight cards after drawing keep the game in Draw."""
        game = scripted_game(hands=[SIX, []])
        spend_actions(game)
        draw = game.draw_cards()
        assert draw.needs_discard == [0]
        assert game.phase == TurnPhase.DRAW
        assert game.infect_cities().error_code == ErrorCode.PHASE_VIOLATION

    def test_discard_releases_draw(self):
        """Discarding down to seven moves on to Infect."""
        game = scripted_game(hands=[SIX, []])
        spend_actions(game)
        game.draw_cards()
        outcome = game.discard_cards(0, [0])
        assert outcome.success
        assert game.phase == TurnPhase.INFECT
        assert game.state.players[0].hand_size == 7

    def test_second_draw_rejected(self):
        """Cards are drawn once even while waiting on a discard."""
        game = scripted_game(hands=[SIX, []])
        spend_actions(game)
        game.draw_cards()
        assert game.draw_cards().error_code == ErrorCode.PHASE_VIOLATION

    def test_event_counts_as_discard(self):
        """Playing an event from the hand also resolves the overflow."""
        hand = SIX[:5] + [EventCard(EventType.ONE_QUIET_NIGHT)]
        game = scripted_game(hands=[hand, []])
        spend_actions(game)
        game.draw_cards()
        assert game.phase == TurnPhase.DRAW

        outcome = game.play_event(0, OneQuietNight())
        assert outcome.success
        assert game.phase == TurnPhase.INFECT

        infect = game.infect_cities()
        assert infect.report.skipped
        assert game.current_player_index == 1


class TestGameOver:
    """Tests for terminal states."""

    def test_blue_reserve_exhausted(self):
        """A blue infection with no blue cubes left loses the game."""
        state = make_state(
            phase=TurnPhase.INFECT,
            actions_remaining=0,
            infection_deck=(infection_card("Paris"), infection_card("Tokyo")),
        ).with_supply(Disease.BLUE, 0)
        game = OrchestratedGame(state, random.Random(0))

        outcome = game.infect_cities()
        assert outcome.success
        assert outcome.status == GameStatus.LOST
        assert game.state.loss_reason == LossReason.CUBES_EXHAUSTED
        # No transition to the next player
        assert game.phase == TurnPhase.INFECT
        assert game.current_player_index == 0

    def test_eighth_outbreak(self):
        """Outbreak seven to eight ends the game."""
        state = make_state(
            phase=TurnPhase.INFECT,
            actions_remaining=0,
            outbreak_count=7,
            infection_deck=(infection_card("Paris"), infection_card("Tokyo")),
        )
        game = OrchestratedGame(with_cubes(state, "Paris", Disease.BLUE, 3), random.Random(0))
        game.infect_cities()
        assert game.status == GameStatus.LOST
        assert game.state.outbreak_count == 8

    def test_inert_after_loss(self):
        """Every state-changing call fails with GAME_OVER once lost."""
        game = OrchestratedGame(make_state(status=GameStatus.LOST), random.Random(0))
        assert game.perform_action("drive-ferry:Chicago").error_code == ErrorCode.GAME_OVER
        assert game.draw_cards().error_code == ErrorCode.GAME_OVER
        assert game.infect_cities().error_code == ErrorCode.GAME_OVER
        assert game.play_event(0, OneQuietNight()).error_code == ErrorCode.GAME_OVER
        assert game.discard_cards(0, [0]).error_code == ErrorCode.GAME_OVER

    def test_garbage_token_after_loss(self):
        """Once the game is over even an unparseable token is GAME_OVER."""
        game = OrchestratedGame(make_state(status=GameStatus.LOST), random.Random(0))
        outcome = game.perform_action("teleport:Chicago")
        assert outcome.error_code == ErrorCode.GAME_OVER

    def test_player_deck_runs_out(self):
        """Drawing from a one-card deck loses."""
        game = scripted_game(player_deck=(city_card("Lima"),))
        spend_actions(game)
        outcome = game.draw_cards()
        assert outcome.success
        assert outcome.status == GameStatus.LOST
        assert game.phase == TurnPhase.DRAW

    def test_win(self):
        """Discovering the last cure wins at once."""
        hand = ["Atlanta", "Chicago", "Essen", "London"]
        game = scripted_game(hands=[hand, []])
        state = game.state
        for color in (Disease.YELLOW, Disease.BLACK, Disease.RED):
            state = state.with_cure(color, CureStatus.CURED)
        game = OrchestratedGame(state, random.Random(0))

        outcome = game.perform_action("discover-cure:blue")
        assert outcome.success
        assert game.status == GameStatus.WON
        assert game.perform_action("drive-ferry:Chicago").error_code == ErrorCode.GAME_OVER


class TestSnapshot:
    """Tests for the read-only view."""

    def test_snapshot_matches_state(self, game):
        """The snapshot mirrors the engine state."""
        snapshot = game.snapshot()
        assert snapshot.phase == TurnPhase.ACTIONS
        assert snapshot.actions_remaining == 4
        assert len(snapshot.players) == 2
        assert snapshot.players[0].is_current_turn
        assert snapshot.research_stations == ["Atlanta"]
        assert sum(snapshot.cube_supply.values()) == 78

    def test_snapshot_is_detached(self, game):
        """Mutating the view does not touch the game."""
        snapshot = game.snapshot()
        snapshot.players[0].location = "Tokyo"
        assert game.current_player.location == "Atlanta"
