"""CLI entry point for the RPS bandit agent."""

import argparse
import logging

from .agent import AgentConfig, MetaBanditAgent, DEFAULT_DECAY
from .engine import InvalidMoveValue, parse_move
from .opponents import get_opponent_by_name, ALL_OPPONENT_CLASSES
from .session import GameSession
from .stats import print_match_summary, print_gauntlet, print_standings
from .tournament import simulate, gauntlet
from .export import export_json, export_csv


def list_roster():
    """Print the agent's experts and the available scripted opponents."""
    agent = MetaBanditAgent()
    print("\nExperts (roster order):")
    print("-" * 40)
    for i, expert in enumerate(agent.experts):
        print(f"  {i:>2d}. {expert.display_name()}")
    print("\nOpponents:")
    print("-" * 40)
    for i, cls in enumerate(ALL_OPPONENT_CLASSES, 1):
        print(f"  {i:>2d}. {cls.name}")
    print()


def cmd_play(args, config):
    """Interactive game against the agent in the terminal."""
    session = GameSession(config=config, seed=args.seed)
    print("\n✊ ✋ ✌️  Rock-Paper-Scissors vs the Meta-Bandit")
    print("  Enter rock/paper/scissors (or r/p/s, 0/1/2).")
    print("  Commands: 'score', 'experts', 'reset' (clear score), 'new' (new match), 'quit'\n")

    while True:
        try:
            raw = input("Your move> ").strip().lower()
        except EOFError:
            print()
            break

        if raw in ("q", "quit", "exit"):
            break
        if raw == "score":
            print(f"  {session.score_line()}")
            continue
        if raw == "experts":
            print_standings(session.agent.standings(), limit=10)
            continue
        if raw == "reset":
            session.reset_score()
            print(f"  {session.score_line()}")
            continue
        if raw == "new":
            session.new_match()
            print("  New match: the agent has forgotten everything.")
            continue

        try:
            move = parse_move(raw)
        except InvalidMoveValue as e:
            print(f"  ✗ {e}")
            continue

        outcome = session.play(move)
        print(f"  You played: {outcome.player_move.label}  |  "
              f"Agent played: {outcome.agent_move.label}  →  {outcome.message}")
        print(f"  {session.score_line()}")

    print(f"\n  Final: {session.score_line()}\n")


def cmd_simulate(args, config):
    """Play the agent against one scripted opponent."""
    opponent = get_opponent_by_name(args.opponent)
    print(f"\n⚔️  Simulation")
    print(f"  Meta-Bandit vs {opponent.name}  |  {args.rounds} rounds"
          + (f"  |  seed={args.seed}" if args.seed is not None else ""))

    result = simulate(opponent, rounds=args.rounds, seed=args.seed, config=config)
    print_match_summary(result)

    if args.export and args.output:
        _export(args, [result])


def cmd_gauntlet(args, config):
    """Play a fresh agent against every scripted opponent."""
    print(f"\n🏆 Gauntlet")
    print(f"  Meta-Bandit vs {len(ALL_OPPONENT_CLASSES)} opponents  |  {args.rounds} rounds each"
          + (f"  |  seed={args.seed}" if args.seed is not None else ""))
    print(f"  Running...", end="", flush=True)

    results = gauntlet(rounds=args.rounds, seed=args.seed, config=config,
                       parallel=not args.sequential)
    print(f" done! ({len(results)} matches played)")
    print_gauntlet(results)

    if args.export and args.output:
        _export(args, results)


def _export(args, results):
    """Handle export based on CLI args."""
    fmt = args.export.lower()
    if fmt == "json":
        export_json(results, args.output)
    elif fmt == "csv":
        export_csv(results, args.output)
    else:
        print(f"  ✗ Unknown export format: {fmt}. Use 'json' or 'csv'.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rps-bandit",
        description="🎮 Rock-Paper-Scissors meta-bandit agent",
    )
    parser.add_argument("--list", action="store_true", help="List experts and scripted opponents")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log which expert the agent trusts each round")
    parser.add_argument("--decay", type=float, default=DEFAULT_DECAY,
                        help=f"Score decay per round (default: {DEFAULT_DECAY})")

    subparsers = parser.add_subparsers(dest="command")

    play = subparsers.add_parser("play", help="Play against the agent in the terminal")
    play.add_argument("--seed", type=int, default=None, help="RNG seed for reproducibility")

    sim = subparsers.add_parser("simulate", help="Agent vs one scripted opponent")
    sim.add_argument("--opponent", required=True, help="Name of the scripted opponent")
    sim.add_argument("--rounds", type=int, default=1000, help="Number of rounds (default: 1000)")
    sim.add_argument("--seed", type=int, default=None, help="RNG seed for reproducibility")
    sim.add_argument("--export", choices=["json", "csv"], help="Export format")
    sim.add_argument("--output", help="Export file path")

    gnt = subparsers.add_parser("gauntlet", help="Agent vs every scripted opponent")
    gnt.add_argument("--rounds", type=int, default=1000, help="Number of rounds per match (default: 1000)")
    gnt.add_argument("--seed", type=int, default=None, help="RNG seed for reproducibility")
    gnt.add_argument("--sequential", action="store_true", help="Run matches in this process only")
    gnt.add_argument("--export", choices=["json", "csv"], help="Export format")
    gnt.add_argument("--output", help="Export file path")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.list:
        list_roster()
        return

    try:
        config = AgentConfig(decay=args.decay)
    except ValueError as e:
        parser.error(str(e))

    if args.command == "play":
        cmd_play(args, config)
    elif args.command == "simulate":
        cmd_simulate(args, config)
    elif args.command == "gauntlet":
        cmd_gauntlet(args, config)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
