"""Export simulation results to JSON or CSV."""

import json
import csv
from pathlib import Path
from .engine import MatchResult
from .stats import summarize


def export_json(results: list[MatchResult], path: str):
    """Export matches plus the aggregate summary to a JSON file."""
    data = {
        "matches": [r.to_dict() for r in results],
        "summary": summarize(results).to_dict(),
    }

    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "w") as f:
        json.dump(data, f, indent=2)
    print(f"  ✓ Results exported to {out}")


def export_csv(results: list[MatchResult], path: str):
    """Export one row per match to a CSV file."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = [
        "opponent", "rounds", "agent_wins", "opponent_wins", "draws",
        "agent_win_pct", "decisive_win_rate", "outcome", "most_trusted",
    ]

    with open(out, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames, extrasaction="ignore")
        writer.writeheader()
        for r in results:
            writer.writerow(r.to_dict())
    print(f"  ✓ Matches exported to {out}")
