"""Scripted opponents used to exercise the bandit agent in simulation."""

from abc import ABC, abstractmethod
from collections import Counter
import random

from .engine import Move, MOVES, BEATS, counter_move


class Opponent(ABC):
    """Base class for scripted RPS bots."""

    def __init__(self):
        self.rng: random.Random = random.Random()
        self.reset()

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def choose(self, round_num: int, my_history: tuple, opp_history: tuple) -> Move:
        ...

    def reset(self):
        """Reset any internal state between matches."""
        pass

    def __repr__(self):
        return f"<{self.name}>"


# ---------------------------------------------------------------------------
# Constant strategies
# ---------------------------------------------------------------------------

class AlwaysRock(Opponent):
    """Always chooses Rock. The agent should lock onto Paper within a few rounds."""
    name = "Always Rock"

    def choose(self, round_num, my_history, opp_history):
        return Move.ROCK


class AlwaysPaper(Opponent):
    name = "Always Paper"

    def choose(self, round_num, my_history, opp_history):
        return Move.PAPER


class AlwaysScissors(Opponent):
    name = "Always Scissors"

    def choose(self, round_num, my_history, opp_history):
        return Move.SCISSORS


# ---------------------------------------------------------------------------
# Random baselines
# ---------------------------------------------------------------------------

class PureRandom(Opponent):
    """Chooses a move completely at random.

    Unexploitable in the long run; the agent should hover around a third
    of rounds won.
    """
    name = "Pure Random"

    def choose(self, round_num, my_history, opp_history):
        return self.rng.choice(MOVES)


class BiasedRandom(Opponent):
    """Random, but throws Rock half of the time.

    The kind of skew the Frequency and Hand-Bias experts are built for.
    """
    name = "Biased Random"
    weights = (0.5, 0.25, 0.25)

    def choose(self, round_num, my_history, opp_history):
        return self.rng.choices(MOVES, weights=self.weights)[0]


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

class Cycle(Opponent):
    """Cycles through Rock -> Paper -> Scissors repeatedly.

    **Sequence**: R, P, S, R, P, S...
    """
    name = "Cycle"

    def choose(self, round_num, my_history, opp_history):
        return MOVES[round_num % 3]


class Spiral(Opponent):
    """Plays R, R, P, P, S, S... Each throw twice before rotating."""
    name = "Spiral"

    def choose(self, round_num, my_history, opp_history):
        return MOVES[(round_num // 2) % 3]


# ---------------------------------------------------------------------------
# Reactive
# ---------------------------------------------------------------------------

class TitForTat(Opponent):
    """Repeats the agent's last move. Starts with Rock."""
    name = "Tit-for-Tat"

    def choose(self, round_num, my_history, opp_history):
        if not opp_history:
            return Move.ROCK
        return opp_history[-1]


class AntiTitForTat(Opponent):
    """Plays the move that beats the agent's last move."""
    name = "Anti-Tit-for-Tat"

    def choose(self, round_num, my_history, opp_history):
        if not opp_history:
            return self.rng.choice(MOVES)
        return counter_move(opp_history[-1])


class FrequencyAnalyzer(Opponent):
    """Counters the agent's most frequent move."""
    name = "Frequency Analyzer"

    def choose(self, round_num, my_history, opp_history):
        if not opp_history:
            return self.rng.choice(MOVES)
        most_common = Counter(opp_history).most_common(1)[0][0]
        return counter_move(most_common)


class WinStayLoseShift(Opponent):
    """Standard Pavlov strategy: stay after a win or draw, shift after a loss.

    On a loss it switches to the move that would have beaten the agent's
    last throw.
    """
    name = "Win-Stay-Lose-Shift"

    def choose(self, round_num, my_history, opp_history):
        if not my_history:
            return self.rng.choice(MOVES)
        my_last = my_history[-1]
        opp_last = opp_history[-1]
        if BEATS[my_last] == opp_last or my_last == opp_last:
            return my_last
        return counter_move(opp_last)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

ALL_OPPONENT_CLASSES = [
    AlwaysRock,
    AlwaysPaper,
    AlwaysScissors,
    PureRandom,
    BiasedRandom,
    Cycle,
    Spiral,
    TitForTat,
    AntiTitForTat,
    FrequencyAnalyzer,
    WinStayLoseShift,
]


def get_all_opponents() -> list[Opponent]:
    """Return fresh instances of all opponents."""
    return [cls() for cls in ALL_OPPONENT_CLASSES]


def get_opponent_by_name(name: str) -> Opponent:
    """Get a single opponent instance by name (case-insensitive)."""
    name_lower = name.lower()
    for cls in ALL_OPPONENT_CLASSES:
        if cls.name.lower() == name_lower:
            return cls()
    available = ", ".join(cls.name for cls in ALL_OPPONENT_CLASSES)
    raise ValueError(f"Unknown opponent: '{name}'. Available: {available}")
