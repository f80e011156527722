"""Meta-bandit agent: follows whichever expert has recently predicted best.

Every round the agent polls the whole roster, trusts the top-scoring
expert, and afterwards scores every expert against what it *would* have
earned. Scores decay exponentially, so the agent tracks recent form rather
than lifetime accuracy.
"""

import logging
import random
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .engine import Move, ProtocolViolation, counter_move, validate_move
from .experts import Expert, MetaWrapper, LEVEL_LABELS, build_base_experts

logger = logging.getLogger(__name__)

DEFAULT_DECAY = 0.95


@dataclass(frozen=True)
class AgentConfig:
    """Tunable constants for the agent and its experts."""
    decay: float = DEFAULT_DECAY
    markov_orders: tuple = (1, 2, 3)
    offsets: tuple = (0, 1, 2)
    hand_bias_window: int = 20
    hand_bias_threshold: float = 0.4
    hand_bias_min_samples: int = 5

    def __post_init__(self):
        if not 0.0 <= self.decay <= 1.0:
            raise ValueError(f"decay must be within [0, 1], got {self.decay}")
        if not self.offsets:
            raise ValueError("offsets must not be empty")
        for offset in self.offsets:
            if offset not in LEVEL_LABELS:
                raise ValueError(f"offsets must be drawn from 0, 1, 2; got {offset!r}")


def reward_for(prediction, actual) -> int:
    """Reward for trusting ``prediction`` when the opponent played ``actual``.

    +1 if the implied counter beats ``actual``, -1 if it is any other move
    than ``actual``, 0 when it ties.
    """
    hypothetical = counter_move(prediction)
    if hypothetical == counter_move(actual):
        return 1
    if hypothetical != validate_move(actual):
        return -1
    return 0


def score_update(score: float, reward: int, decay: float = DEFAULT_DECAY) -> float:
    return score * decay + reward


class MetaBanditAgent:
    """Selection engine over a fixed roster of experts and their wrappers.

    The roster holds the things that predict (each base plus its L1/L2
    wrappers); ``base_experts`` holds the things that learn, one entry per
    distinct base. Both are built once and never reordered.

    ``base_experts`` replaces the standard twelve when given; each is still
    expanded with the configured wrapper offsets.

    Rounds must alternate strictly: ``act()`` then ``observe_outcome()``.
    """
    name = "Meta-Bandit"

    def __init__(
        self,
        config: Optional[AgentConfig] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        base_experts: Optional[list[Expert]] = None,
    ):
        self.config = config or AgentConfig()
        if base_experts is not None:
            bases = list(base_experts)
        else:
            bases = build_base_experts(
                markov_orders=self.config.markov_orders,
                hand_bias_window=self.config.hand_bias_window,
                hand_bias_threshold=self.config.hand_bias_threshold,
                hand_bias_min_samples=self.config.hand_bias_min_samples,
            )
        if not bases:
            raise ValueError("the agent needs at least one base expert")

        roster: list[Expert] = []
        for base in bases:
            for offset in self.config.offsets:
                roster.append(base if offset == 0 else MetaWrapper(base, offset))
        self._experts = tuple(roster)

        learners = []
        seen = set()
        for expert in self._experts:
            if id(expert.base) not in seen:
                seen.add(id(expert.base))
                learners.append(expert.base)
        self._bases = tuple(learners)

        self._seed_experts(rng if rng is not None else random.Random(seed))
        self._clear()

    # -- lifecycle ---------------------------------------------------------

    def _seed_experts(self, master_rng: random.Random):
        for base in self._bases:
            base.rng = random.Random(master_rng.randint(0, 2**31))

    def _clear(self):
        self._scores = np.zeros(len(self._experts), dtype=np.float64)
        self._predictions: list[Move] = []
        self._awaiting_outcome = False
        self.rounds_played = 0

    def reset(self):
        """Start a new match: forget every expert's history and all scores."""
        for base in self._bases:
            base.reset()
        self._clear()

    def reseed(self, seed: Optional[int]):
        """Reset for a new match and re-derive every expert's RNG from ``seed``."""
        self._seed_experts(random.Random(seed))
        self.reset()

    # -- round protocol ----------------------------------------------------

    def act(self) -> Move:
        """Poll every expert, trust the best-scoring one, return its counter."""
        if self._awaiting_outcome:
            raise ProtocolViolation(
                "act() called twice without observe_outcome() in between"
            )
        self._predictions = [expert.predict() for expert in self._experts]
        best = self.trusted_index
        self._awaiting_outcome = True

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Round %d: trusting %s (score: %.2f) predicting %s",
                self.rounds_played + 1,
                self._experts[best].display_name(),
                self._scores[best],
                self._predictions[best].label,
            )
        return counter_move(self._predictions[best])

    def observe_outcome(self, opponent_move, own_move):
        """Score every expert against the real move, then let the bases learn."""
        opponent_move = validate_move(opponent_move)
        own_move = validate_move(own_move)
        if not self._awaiting_outcome:
            raise ProtocolViolation(
                "observe_outcome() called without a preceding act()"
            )

        rewards = np.array(
            [reward_for(p, opponent_move) for p in self._predictions],
            dtype=np.float64,
        )
        self._scores = score_update(self._scores, rewards, self.config.decay)

        for base in self._bases:
            base.observe(opponent_move, own_move)

        self._predictions = []
        self._awaiting_outcome = False
        self.rounds_played += 1

    # -- introspection -----------------------------------------------------

    @property
    def experts(self) -> tuple:
        return self._experts

    @property
    def base_experts(self) -> tuple:
        return self._bases

    @property
    def scores(self) -> list[float]:
        return self._scores.tolist()

    @property
    def predictions(self) -> list[Move]:
        """Predictions from the open round; empty between rounds."""
        return list(self._predictions)

    @property
    def awaiting_outcome(self) -> bool:
        return self._awaiting_outcome

    @property
    def trusted_index(self) -> int:
        """Index of the top score; the lowest index wins ties."""
        return int(np.argmax(self._scores))

    @property
    def trusted_expert(self) -> Expert:
        return self._experts[self.trusted_index]

    def standings(self) -> list[tuple[str, float]]:
        """(name, score) pairs, best first; equal scores keep roster order."""
        order = sorted(range(len(self._experts)), key=lambda i: -self._scores[i])
        return [(self._experts[i].display_name(), float(self._scores[i])) for i in order]

    def __repr__(self):
        return f"<{self.name}: {len(self._experts)} experts, {self.rounds_played} rounds>"
