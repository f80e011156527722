"""Stats aggregation and pretty-printing for simulated matches."""

from dataclasses import dataclass
from collections import Counter
from .engine import MatchResult


@dataclass
class GauntletSummary:
    """Aggregated agent performance across a gauntlet run."""
    matches_played: int = 0
    match_wins: int = 0
    match_losses: int = 0
    match_draws: int = 0
    total_wins: int = 0
    total_losses: int = 0
    total_draws: int = 0
    favourite_expert: str = "N/A"

    @property
    def win_pct(self) -> float:
        total = self.total_wins + self.total_losses + self.total_draws
        return (self.total_wins / total * 100) if total else 0.0

    @property
    def decisive_win_rate(self) -> float:
        decisive = self.total_wins + self.total_losses
        return (self.total_wins / decisive * 100) if decisive else 0.0

    def to_dict(self) -> dict:
        return {
            "matches_played": self.matches_played,
            "match_wins": self.match_wins,
            "match_losses": self.match_losses,
            "match_draws": self.match_draws,
            "total_round_wins": self.total_wins,
            "total_round_losses": self.total_losses,
            "total_round_draws": self.total_draws,
            "round_win_pct": round(self.win_pct, 2),
            "decisive_win_rate": round(self.decisive_win_rate, 2),
            "favourite_expert": self.favourite_expert,
        }


def summarize(results: list[MatchResult]) -> GauntletSummary:
    """Fold match results into one summary.

    The favourite expert is the one most often ranked first at the end of
    a match.
    """
    summary = GauntletSummary()
    leaders = Counter()
    for r in results:
        summary.matches_played += 1
        summary.total_wins += r.agent_wins
        summary.total_losses += r.opponent_wins
        summary.total_draws += r.draws
        if r.outcome == "WIN":
            summary.match_wins += 1
        elif r.outcome == "LOSS":
            summary.match_losses += 1
        else:
            summary.match_draws += 1
        if r.final_standings:
            leaders[r.final_standings[0][0]] += 1
    if leaders:
        summary.favourite_expert = leaders.most_common(1)[0][0]
    return summary


# ---------------------------------------------------------------------------
# Pretty-printing
# ---------------------------------------------------------------------------

def print_standings(standings: list[tuple[str, float]], limit: int = 5):
    """Print the top of the expert leaderboard."""
    print(f"  {'#':>3s}  {'Expert':<34s} {'Score':>8s}")
    print("  " + "-" * 47)
    for i, (name, score) in enumerate(standings[:limit], 1):
        print(f"  {i:>3d}  {name:<34s} {score:>8.3f}")


def print_match_summary(result: MatchResult):
    """Print a detailed summary of a single match."""
    print("=" * 60)
    print(f"  {result.agent_name}  vs  {result.opponent_name}")
    print(f"  Rounds: {result.rounds}")
    print("=" * 60)
    print(f"  {'':20s} {'Agent':>10s} {'Opponent':>10s}")
    print(f"  {'Wins':20s} {result.agent_wins:>10d} {result.opponent_wins:>10d}")
    print(f"  {'Draws':20s} {result.draws:>10d} {result.draws:>10d}")
    print(f"  {'Win %':20s} {result.agent_win_pct:>9.1f}% {result.opponent_win_pct:>9.1f}%")
    print(f"  {'Decisive Win %':20s} {result.decisive_win_rate:>9.1f}%")
    print()
    print(f"  Most trusted expert: {result.most_trusted}")
    print(f"  Opponent move distribution: {result.opponent_move_distribution}")
    print()
    print("  Final expert standings:")
    print_standings(result.final_standings)
    print(f"\n  ★ Result: {result.outcome}")
    print("=" * 60)


def print_gauntlet(results: list[MatchResult]):
    """Print one line per opponent followed by the aggregate."""
    print()
    print("=" * 92)
    print(f"  {'Opponent':<22s} {'W':>5s} {'L':>5s} {'D':>5s} {'Win%':>7s} {'Dec%':>7s}  {'Leader':<30s}")
    print("-" * 92)
    for r in results:
        leader = r.final_standings[0][0] if r.final_standings else "N/A"
        print(f"  {r.opponent_name:<22s} {r.agent_wins:>5d} {r.opponent_wins:>5d} {r.draws:>5d} "
              f"{r.agent_win_pct:>6.1f}% {r.decisive_win_rate:>6.1f}%  {leader:<30s}")
    print("=" * 92)

    s = summarize(results)
    print(f"  Matches: {s.matches_played} ({s.match_wins}W / {s.match_losses}L / {s.match_draws}D)")
    print(f"  Rounds:  {s.total_wins}W / {s.total_losses}L / {s.total_draws}D  |  "
          f"Win%: {s.win_pct:.1f}%  |  Decisive Win%: {s.decisive_win_rate:.1f}%")
    print(f"  Most frequent final leader: {s.favourite_expert}")
    print()
