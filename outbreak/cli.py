"""
Outbreak CLI - Command-line interface for the engine.

Usage:
    outbreak new [options]               Create a game and print its snapshot
    outbreak actions [options]           List the first player's legal actions
    outbreak run [options] STEP...       Play a scripted sequence of steps

Steps for `run`:
    <action token>                       e.g. drive-ferry:Chicago, treat:blue
    draw                                 Draw phase
    infect                               Infect phase
    discard:<player>:<i>[,<j>...]        Hand-limit discard
    event:<player>:airlift:<target>:<City>
    event:<player>:government_grant:<City>[:<CityToRemove>]
    event:<player>:one_quiet_night
    event:<player>:resilient_population:<City>
    event:<player>:forecast:<City>|<City>|...
"""

import argparse
import json
import sys

from pydantic import ValidationError

from .api.schemas import GameConfig
from .config import configure_logging
from .engine_core.roles import describe_role
from .engine_core.events import (
    Airlift,
    Forecast,
    GovernmentGrant,
    OneQuietNight,
    ResilientPopulation,
)
from .session import OrchestratedGame


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Outbreak - cooperative outbreak-containment rules engine",
        prog="outbreak",
    )
    parser.add_argument("--log-level", help="Logging level (default: OUTBREAK_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    new_parser = subparsers.add_parser("new", help="Create a game and print its snapshot")
    _add_game_options(new_parser)

    actions_parser = subparsers.add_parser("actions", help="List legal actions at game start")
    _add_game_options(actions_parser)

    run_parser = subparsers.add_parser("run", help="Play a scripted sequence of steps")
    _add_game_options(run_parser)
    run_parser.add_argument("steps", nargs="+", help="Action tokens, draw, infect, discard:..., event:...")
    run_parser.add_argument("--quiet", "-q", action="store_true", help="Only print the final snapshot")

    args = parser.parse_args(argv)
    try:
        configure_logging(args.log_level)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(2)

    if args.command == "new":
        cmd_new(args)
    elif args.command == "actions":
        cmd_actions(args)
    elif args.command == "run":
        cmd_run(args)
    else:
        parser.print_help()
        sys.exit(1)


def _add_game_options(subparser):
    subparser.add_argument("--players", "-p", type=int, default=2, help="Number of players (2-4)")
    subparser.add_argument("--difficulty", "-d", type=int, default=4, help="Epidemic cards (4-6)")
    subparser.add_argument("--seed", "-s", type=int, default=None, help="Random seed")
    subparser.add_argument("--roles", help="Comma-separated roles in seat order")


def _create_game(args):
    roles = args.roles.split(",") if args.roles else None
    try:
        config = GameConfig(
            player_count=args.players,
            difficulty=args.difficulty,
            roles=roles,
            seed=args.seed,
        )
    except ValidationError as e:
        print(f"Error: invalid game configuration\n{e}")
        sys.exit(2)
    return OrchestratedGame.create(config)


def _print_snapshot(game):
    print(json.dumps(game.snapshot().model_dump(mode="json"), indent=2))


def cmd_new(args):
    """Create a game and print its snapshot."""
    game = _create_game(args)
    _print_snapshot(game)


def cmd_actions(args):
    """List the current player's legal actions."""
    game = _create_game(args)
    player = game.current_player
    print(f"Player {game.current_player_index} ({player.role.value}) in {player.location}:")
    print(f"  {describe_role(player.role)}")
    for token in game.get_available_actions():
        print(f"  {token}")


def parse_event_step(step):
    """Split an `event:` step into (player_index, event params)."""
    fields = step.split(":")
    if len(fields) < 3:
        raise ValueError(f"Malformed event step: {step}")
    player = int(fields[1])
    name = fields[2].replace("-", "_")
    rest = fields[3:]

    if name == "airlift" and len(rest) == 2:
        return player, Airlift(target_player_idx=int(rest[0]), destination=rest[1])
    if name == "government_grant" and len(rest) in (1, 2):
        return player, GovernmentGrant(city=rest[0], city_to_remove=rest[1] if len(rest) == 2 else None)
    if name == "one_quiet_night" and not rest:
        return player, OneQuietNight()
    if name == "resilient_population" and len(rest) == 1:
        return player, ResilientPopulation(city=rest[0])
    if name == "forecast" and len(rest) == 1:
        return player, Forecast(order=tuple(rest[0].split("|")))
    raise ValueError(f"Malformed event step: {step}")


def run_step(game, step):
    """Run one scripted step and return its outcome."""
    if step == "draw":
        return game.draw_cards()
    if step == "infect":
        return game.infect_cities()
    if step.startswith("discard:"):
        _, player, indices = step.split(":", 2)
        return game.discard_cards(int(player), [int(i) for i in indices.split(",")])
    if step.startswith("event:"):
        player, params = parse_event_step(step)
        return game.play_event(player, params)
    return game.perform_action(step)


def cmd_run(args):
    """Play a scripted sequence of steps."""
    game = _create_game(args)
    failures = 0

    for step in args.steps:
        try:
            outcome = run_step(game, step)
        except ValueError as e:
            print(f"[error] {step}: {e}")
            failures += 1
            continue

        if not args.quiet:
            if outcome.success:
                print(f"[ok] {step} -> {outcome.phase.value}, {outcome.status.value}")
                for change in outcome.changes:
                    print(f"     {change}")
            else:
                print(f"[{outcome.error_code.value}] {step}: {outcome.error}")
        if not outcome.success:
            failures += 1
        if game.state.is_over:
            break

    _print_snapshot(game)
    if failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
