"""Move primitives and the match loop for the bandit agent."""

from enum import IntEnum
from dataclasses import dataclass, field
from collections import Counter
import random
from typing import Optional


class InvalidMoveValue(ValueError):
    """A move outside Rock/Paper/Scissors was passed in."""


class ProtocolViolation(RuntimeError):
    """act() and observe_outcome() were not called in strict alternation."""


class Move(IntEnum):
    ROCK = 0
    PAPER = 1
    SCISSORS = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()


MOVES = [Move.ROCK, Move.PAPER, Move.SCISSORS]

# What each move beats
BEATS = {
    Move.ROCK: Move.SCISSORS,
    Move.SCISSORS: Move.PAPER,
    Move.PAPER: Move.ROCK,
}


_ALIASES = {
    "rock": Move.ROCK, "r": Move.ROCK, "0": Move.ROCK,
    "paper": Move.PAPER, "p": Move.PAPER, "1": Move.PAPER,
    "scissors": Move.SCISSORS, "s": Move.SCISSORS, "2": Move.SCISSORS,
}


def validate_move(value) -> Move:
    """Return ``value`` as a Move, failing fast on anything out of range.

    Accepts Move members and plain ints 0..2. Bools, floats, strings and
    out-of-range ints raise InvalidMoveValue; nothing is clamped or wrapped.
    """
    if isinstance(value, Move):
        return value
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidMoveValue(
            f"Move must be an int in 0..2 or a Move, got {type(value).__name__} {value!r}"
        )
    if not 0 <= value <= 2:
        raise InvalidMoveValue(f"Move value {value} is out of range 0..2")
    return Move(value)


def parse_move(text: str) -> Move:
    """Parse user input such as 'rock', 'R' or '0' into a Move."""
    key = str(text).strip().lower()
    if key not in _ALIASES:
        raise InvalidMoveValue(
            f"Unknown move: '{text}'. Use rock/paper/scissors, r/p/s or 0/1/2"
        )
    return _ALIASES[key]


def counter_move(move) -> Move:
    """Return the move that beats `move`."""
    return Move((validate_move(move) + 1) % 3)


def determine_winner(move_a, move_b) -> int:
    """Return 1 if A wins, -1 if B wins, 0 for draw."""
    a = validate_move(move_a)
    b = validate_move(move_b)
    if a == b:
        return 0
    return 1 if BEATS[a] == b else -1


@dataclass
class MatchResult:
    """Result of a match between the bandit agent and a scripted opponent."""
    agent_name: str
    opponent_name: str
    rounds: int
    agent_wins: int = 0
    opponent_wins: int = 0
    draws: int = 0
    agent_moves: list = field(default_factory=list)
    opponent_moves: list = field(default_factory=list)
    trusted: list = field(default_factory=list)
    final_standings: list = field(default_factory=list)

    @property
    def agent_win_pct(self) -> float:
        return (self.agent_wins / self.rounds * 100) if self.rounds else 0.0

    @property
    def opponent_win_pct(self) -> float:
        return (self.opponent_wins / self.rounds * 100) if self.rounds else 0.0

    @property
    def draw_pct(self) -> float:
        return (self.draws / self.rounds * 100) if self.rounds else 0.0

    @property
    def decisive_win_rate(self) -> float:
        """Agent win rate over decisive rounds only (ties excluded)."""
        decisive = self.agent_wins + self.opponent_wins
        return (self.agent_wins / decisive * 100) if decisive else 0.0

    @property
    def outcome(self) -> str:
        if self.agent_wins > self.opponent_wins:
            return "WIN"
        if self.opponent_wins > self.agent_wins:
            return "LOSS"
        return "DRAW"

    @property
    def most_trusted(self) -> str:
        if not self.trusted:
            return "N/A"
        return Counter(self.trusted).most_common(1)[0][0]

    @property
    def opponent_move_distribution(self) -> dict[str, int]:
        return dict(Counter(m.label for m in self.opponent_moves))

    def to_dict(self) -> dict:
        return {
            "agent": self.agent_name,
            "opponent": self.opponent_name,
            "rounds": self.rounds,
            "agent_wins": self.agent_wins,
            "opponent_wins": self.opponent_wins,
            "draws": self.draws,
            "agent_win_pct": round(self.agent_win_pct, 2),
            "opponent_win_pct": round(self.opponent_win_pct, 2),
            "draw_pct": round(self.draw_pct, 2),
            "decisive_win_rate": round(self.decisive_win_rate, 2),
            "outcome": self.outcome,
            "most_trusted": self.most_trusted,
            "final_standings": [
                {"expert": name, "score": round(score, 4)}
                for name, score in self.final_standings
            ],
        }


def run_match(
    agent,
    opponent,
    rounds: int = 1000,
    seed: Optional[int] = None,
    record_moves: bool = True,
) -> MatchResult:
    """Run a match of N rounds between the bandit agent and a scripted bot.

    Both sides get their own seeded RNG derived from the master seed and
    are reset first, so the same seed always replays the same match.

    Args:
        record_moves: If False, skip storing per-round moves in the result.
                      Set to False for bulk gauntlet runs to save memory.
    """
    if rounds < 0:
        raise ValueError(f"rounds must be >= 0, got {rounds}")

    master_rng = random.Random(seed)
    agent_seed = master_rng.randint(0, 2**31)
    opponent_seed = master_rng.randint(0, 2**31)

    agent.reseed(agent_seed)
    opponent.rng = random.Random(opponent_seed)
    opponent.reset()

    result = MatchResult(
        agent_name=agent.name,
        opponent_name=opponent.name,
        rounds=rounds,
    )

    agent_history: list[Move] = []
    opponent_history: list[Move] = []

    for round_num in range(rounds):
        agent_move = agent.act()
        if record_moves:
            result.trusted.append(agent.trusted_expert.display_name())
        opponent_move = validate_move(
            opponent.choose(round_num, tuple(opponent_history), tuple(agent_history))
        )
        agent.observe_outcome(opponent_move, agent_move)

        outcome = determine_winner(agent_move, opponent_move)
        if outcome == 1:
            result.agent_wins += 1
        elif outcome == -1:
            result.opponent_wins += 1
        else:
            result.draws += 1

        agent_history.append(agent_move)
        opponent_history.append(opponent_move)
        if record_moves:
            result.agent_moves.append(agent_move)
            result.opponent_moves.append(opponent_move)

    result.final_standings = agent.standings()[:5]
    return result
