import pytest

from rps_bandit.engine import Move
from rps_bandit.experts import Expert


class FirstChoiceRng:
    """Stand-in RNG whose random path always picks the first option."""

    def choice(self, seq):
        return seq[0]


class ScriptedExpert(Expert):
    """Predicts whatever the test sets on ``next_prediction``."""
    name = "Scripted"

    def reset(self):
        self.next_prediction = Move.ROCK
        self.observed = []

    def predict(self):
        return self.next_prediction

    def observe(self, opponent_move, own_move):
        super().observe(opponent_move, own_move)
        self.observed.append((opponent_move, own_move))


@pytest.fixture
def first_choice_rng():
    return FirstChoiceRng()


def feed(expert, opponent_moves, own_move=Move.ROCK):
    """Observe a run of opponent moves with a fixed own move."""
    for m in opponent_moves:
        expert.observe(m, own_move)
    return expert
