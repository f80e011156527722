"""The twelve opponent-move predictors and the meta-reasoning wrapper."""

from abc import ABC, abstractmethod
from collections import deque
import random

import numpy as np

from .engine import Move, MOVES, counter_move, validate_move


class Expert(ABC):
    """Base class for opponent-move predictors.

    An expert owns its private history and nothing else. ``predict`` reads
    that history (drawing from ``self.rng`` only when the history is not
    enough to decide) and ``observe`` appends one round to it.
    """

    def __init__(self):
        self.rng: random.Random = random.Random()
        self.reset()

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def predict(self) -> Move:
        ...

    def observe(self, opponent_move: Move, own_move: Move):
        """Absorb the round just played. Both moves are always passed."""
        validate_move(opponent_move)
        validate_move(own_move)

    def reset(self):
        """Reset any internal state between matches."""
        pass

    @property
    def base(self) -> "Expert":
        """The expert that actually learns; wrappers return what they wrap."""
        return self

    def display_name(self) -> str:
        return self.name

    def _random_move(self) -> Move:
        return self.rng.choice(MOVES)

    def __repr__(self):
        return f"<{self.display_name()}>"


# ---------------------------------------------------------------------------
# Baseline
# ---------------------------------------------------------------------------

class RandomExpert(Expert):
    """Predicts uniformly at random. Keeps a zero-information baseline in the pool."""
    name = "Random"

    def predict(self):
        return self._random_move()


class FrequencyExpert(Expert):
    """Predicts the opponent's most-played move so far.

    Ties go to the lowest move value, the same first-max rule the agent
    uses for its scores.
    """
    name = "Frequency"

    def reset(self):
        self._counts = np.zeros(3, dtype=np.int64)

    def predict(self):
        if self._counts.sum() == 0:
            return self._random_move()
        return Move(int(np.argmax(self._counts)))

    def observe(self, opponent_move, own_move):
        super().observe(opponent_move, own_move)
        self._counts[opponent_move] += 1


class MarkovExpert(Expert):
    """Order-k Markov chain over the opponent's moves.

    Keys are the last ``order`` opponent moves; values count which move
    followed that window. At most 3**order keys ever exist.

    **Prediction**: most frequent successor of the current window, random
    when the window has never been seen or history is still too short.
    """

    def __init__(self, order: int = 1):
        if order < 1:
            raise ValueError(f"Markov order must be >= 1, got {order}")
        self.order = order
        super().__init__()

    @property
    def name(self):
        return f"Markov-{self.order}"

    def reset(self):
        self._history: deque[Move] = deque(maxlen=self.order)
        self._transitions: dict[tuple, np.ndarray] = {}

    def predict(self):
        if len(self._history) < self.order:
            return self._random_move()
        counts = self._transitions.get(tuple(self._history))
        if counts is None or counts.sum() == 0:
            return self._random_move()
        return Move(int(np.argmax(counts)))

    def observe(self, opponent_move, own_move):
        super().observe(opponent_move, own_move)
        if len(self._history) == self.order:
            state = tuple(self._history)
            if state not in self._transitions:
                self._transitions[state] = np.zeros(3, dtype=np.int64)
            self._transitions[state][opponent_move] += 1
        self._history.append(Move(opponent_move))


# ---------------------------------------------------------------------------
# Reactive heuristics
# ---------------------------------------------------------------------------

class RotationExpert(Expert):
    """Assumes the opponent rotates their last throw forward (R -> P -> S)."""
    name = "Rotator"

    def reset(self):
        self._last_move = None

    def predict(self):
        if self._last_move is None:
            return self._random_move()
        return counter_move(self._last_move)

    def observe(self, opponent_move, own_move):
        super().observe(opponent_move, own_move)
        self._last_move = Move(opponent_move)


class WSLSExpert(Expert):
    """Win-Stay, Lose-Shift (Pavlov) model of the opponent.

    If the opponent won last round they repeat; if they lost they advance
    one step. After a tie there is nothing to go on.
    """
    name = "WSLS-Pavlov"

    def reset(self):
        self._last_opp_move = None
        self._last_result = None  # 1=opponent won, -1=opponent lost, 0=tie

    def predict(self):
        if self._last_opp_move is None:
            return self._random_move()
        if self._last_result == 1:
            return self._last_opp_move
        if self._last_result == -1:
            return counter_move(self._last_opp_move)
        return self._random_move()

    def observe(self, opponent_move, own_move):
        super().observe(opponent_move, own_move)
        self._last_opp_move = Move(opponent_move)
        if opponent_move == own_move:
            self._last_result = 0
        elif opponent_move == counter_move(own_move):
            self._last_result = 1
        else:
            self._last_result = -1


class GamblersFallacyExpert(Expert):
    """Expects a streak of two or more identical throws to break.

    The first observation starts a streak of 1; repeats extend it and any
    change restarts it at 1 on the new move.
    """
    name = "GamblerFallacy"

    def reset(self):
        self._last_move = None
        self._streak = 0

    def predict(self):
        if self._last_move is None or self._streak < 2:
            return self._random_move()
        options = [m for m in MOVES if m != self._last_move]
        return self.rng.choice(options)

    def observe(self, opponent_move, own_move):
        super().observe(opponent_move, own_move)
        if opponent_move == self._last_move:
            self._streak += 1
        else:
            self._streak = 1
            self._last_move = Move(opponent_move)


class MirrorExpert(Expert):
    """Predicts the opponent copies our last move."""
    name = "Mirror (Copycat)"

    def reset(self):
        self._my_last_move = None

    def predict(self):
        if self._my_last_move is None:
            return self._random_move()
        return self._my_last_move

    def observe(self, opponent_move, own_move):
        super().observe(opponent_move, own_move)
        self._my_last_move = Move(own_move)


class SecondGuessingExpert(Expert):
    """Predicts the opponent plays whatever beats our last move."""
    name = "Level-1 (Counter-Me)"

    def reset(self):
        self._my_last_move = None

    def predict(self):
        if self._my_last_move is None:
            return self._random_move()
        return counter_move(self._my_last_move)

    def observe(self, opponent_move, own_move):
        super().observe(opponent_move, own_move)
        self._my_last_move = Move(own_move)


class HandBiasExpert(Expert):
    """Detects a skew towards one hand in a sliding window.

    **Window**: last ``history_len`` opponent moves (20 by default)
    **Trigger**: a move whose share of the window exceeds ``threshold``;
    the lowest such move wins if the window somehow has two.
    """
    name = "Hand-Bias (Skew)"

    def __init__(self, history_len: int = 20, threshold: float = 0.4, min_samples: int = 5):
        self.history_len = history_len
        self.threshold = threshold
        self.min_samples = min_samples
        super().__init__()

    def reset(self):
        self._window: deque[Move] = deque(maxlen=self.history_len)

    def predict(self):
        if len(self._window) < self.min_samples:
            return self._random_move()
        probs = np.bincount(np.fromiter(self._window, dtype=np.int64), minlength=3) / len(self._window)
        for move in MOVES:
            if probs[move] > self.threshold:
                return move
        return self._random_move()

    def observe(self, opponent_move, own_move):
        super().observe(opponent_move, own_move)
        self._window.append(Move(opponent_move))


class StubbornExpert(Expert):
    """Predicts the opponent doubles down on a throw that just lost."""
    name = "Stubborn (Double-Down)"

    def reset(self):
        self._last_opp_move = None
        self._last_my_move = None

    def predict(self):
        if self._last_opp_move is None:
            return self._random_move()
        if self._last_my_move == counter_move(self._last_opp_move):
            return self._last_opp_move
        return self._random_move()

    def observe(self, opponent_move, own_move):
        super().observe(opponent_move, own_move)
        self._last_opp_move = Move(opponent_move)
        self._last_my_move = Move(own_move)


# ---------------------------------------------------------------------------
# Meta-reasoning wrapper
# ---------------------------------------------------------------------------

LEVEL_LABELS = {0: None, 1: "L1", 2: "L2"}


class MetaWrapper(Expert):
    """Shifts a base expert's prediction by a fixed offset.

    Offset 1 models an opponent who anticipates our counter, offset 2 one
    who anticipates that too. The wrapper never learns: the agent feeds
    observations to the shared base exactly once per round.
    """

    def __init__(self, base_expert: Expert, offset: int, level_name: str = None):
        if isinstance(offset, bool) or not isinstance(offset, int) or offset not in LEVEL_LABELS:
            raise ValueError(f"Wrapper offset must be 0, 1 or 2, got {offset!r}")
        self._expert = base_expert
        self.offset = offset
        self.level_name = level_name if level_name is not None else LEVEL_LABELS[offset]
        super().__init__()

    @property
    def name(self):
        if not self.level_name:
            return self._expert.display_name()
        return f"{self._expert.display_name()} [{self.level_name}]"

    @property
    def base(self):
        return self._expert

    def predict(self):
        return Move((self._expert.predict() + self.offset) % 3)

    def observe(self, opponent_move, own_move):
        pass


# ---------------------------------------------------------------------------
# Roster
# ---------------------------------------------------------------------------

def build_base_experts(
    markov_orders=(1, 2, 3),
    hand_bias_window: int = 20,
    hand_bias_threshold: float = 0.4,
    hand_bias_min_samples: int = 5,
) -> list[Expert]:
    """Return fresh base experts in roster order."""
    return [
        RandomExpert(),
        FrequencyExpert(),
        RotationExpert(),
        *[MarkovExpert(order) for order in markov_orders],
        WSLSExpert(),
        GamblersFallacyExpert(),
        MirrorExpert(),
        SecondGuessingExpert(),
        HandBiasExpert(hand_bias_window, hand_bias_threshold, hand_bias_min_samples),
        StubbornExpert(),
    ]
