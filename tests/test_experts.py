import random

import pytest

from conftest import feed
from rps_bandit.engine import InvalidMoveValue, Move, MOVES
from rps_bandit.experts import (
    FrequencyExpert,
    GamblersFallacyExpert,
    HandBiasExpert,
    MarkovExpert,
    MetaWrapper,
    MirrorExpert,
    RandomExpert,
    RotationExpert,
    SecondGuessingExpert,
    StubbornExpert,
    WSLSExpert,
    build_base_experts,
)

R, P, S = Move.ROCK, Move.PAPER, Move.SCISSORS


def test_random_expert_is_reproducible_with_seeded_rng():
    a, b = RandomExpert(), RandomExpert()
    a.rng, b.rng = random.Random(3), random.Random(3)
    assert [a.predict() for _ in range(20)] == [b.predict() for _ in range(20)]


def test_random_fallback_uses_injected_rng(first_choice_rng):
    expert = FrequencyExpert()
    expert.rng = first_choice_rng
    assert expert.predict() == R


def test_frequency_predicts_most_seen():
    expert = feed(FrequencyExpert(), [R, R, P])
    assert expert.predict() == R


def test_frequency_tie_goes_to_lowest_move():
    expert = feed(FrequencyExpert(), [S, P])
    assert expert.predict() == P


def test_frequency_reset_forgets(first_choice_rng):
    expert = feed(FrequencyExpert(), [S, S, S])
    expert.reset()
    expert.rng = first_choice_rng
    assert expert.predict() == R


def test_markov_order_one_predicts_recorded_successor():
    # transitions R->P, P->S, S->R, R->P, P->R; history ends in R
    expert = feed(MarkovExpert(1), [R, P, S, R, P, R])
    assert expert.predict() == P


def test_markov_order_two():
    expert = feed(MarkovExpert(2), [R, R, S, P, R, R, S, P, R, R])
    assert expert.predict() == S


def test_markov_random_while_history_short(first_choice_rng):
    expert = feed(MarkovExpert(3), [S, S])
    expert.rng = first_choice_rng
    assert expert.predict() == R


def test_markov_random_for_unseen_window(first_choice_rng):
    expert = feed(MarkovExpert(1), [P, P, S])
    expert.rng = first_choice_rng
    assert expert.predict() == R


def test_markov_name_and_order_validation():
    assert MarkovExpert(3).display_name() == "Markov-3"
    with pytest.raises(ValueError):
        MarkovExpert(0)


def test_rotation_predicts_counter_of_last():
    expert = feed(RotationExpert(), [R])
    assert expert.predict() == P


def test_wsls_opponent_won_repeats():
    expert = WSLSExpert()
    expert.observe(P, R)
    assert expert.predict() == P


def test_wsls_opponent_lost_advances():
    expert = WSLSExpert()
    expert.observe(R, P)
    assert expert.predict() == P


def test_wsls_tie_is_random(first_choice_rng):
    expert = WSLSExpert()
    expert.observe(S, S)
    expert.rng = first_choice_rng
    assert expert.predict() == R


def test_gamblers_fallacy_expects_streak_to_break():
    expert = feed(GamblersFallacyExpert(), [S, S])
    expert.rng = random.Random(11)
    predictions = {expert.predict() for _ in range(60)}
    assert predictions == {R, P}


def test_gamblers_fallacy_single_throw_is_no_streak(first_choice_rng):
    expert = feed(GamblersFallacyExpert(), [P, P, R])
    expert.rng = first_choice_rng
    # streak restarted at 1 on Rock, so the random path runs
    assert expert.predict() == R


def test_mirror_predicts_own_last_move():
    expert = MirrorExpert()
    expert.observe(S, P)
    assert expert.predict() == P


def test_second_guessing_predicts_counter_of_own_last():
    expert = SecondGuessingExpert()
    expert.observe(R, P)
    assert expert.predict() == S


def test_hand_bias_needs_five_samples(first_choice_rng):
    expert = feed(HandBiasExpert(), [S, S, S, S])
    expert.rng = first_choice_rng
    assert expert.predict() == R
    expert.observe(S, R)
    assert expert.predict() == S


def test_hand_bias_threshold_is_strict(first_choice_rng):
    expert = feed(HandBiasExpert(), [P, P, S, S, R])
    expert.rng = first_choice_rng
    # 0.4 is not above the threshold
    assert expert.predict() == R


def test_hand_bias_window_slides():
    expert = feed(HandBiasExpert(history_len=20), [R] * 10 + [S] * 20)
    assert expert.predict() == S


def test_stubborn_predicts_repeat_after_opponent_lost():
    expert = StubbornExpert()
    expert.observe(R, P)
    assert expert.predict() == R


def test_stubborn_random_otherwise(first_choice_rng):
    expert = StubbornExpert()
    expert.observe(P, R)
    expert.rng = first_choice_rng
    assert expert.predict() == R


def test_observe_rejects_invalid_moves():
    with pytest.raises(InvalidMoveValue):
        FrequencyExpert().observe(3, R)
    with pytest.raises(InvalidMoveValue):
        MirrorExpert().observe(R, -1)


def test_meta_wrapper_rotates_prediction():
    base = feed(FrequencyExpert(), [S])
    assert MetaWrapper(base, 1).predict() == R
    assert MetaWrapper(base, 2).predict() == P
    assert MetaWrapper(base, 0).predict() == S


def test_meta_wrapper_names():
    base = FrequencyExpert()
    assert MetaWrapper(base, 0).display_name() == "Frequency"
    assert MetaWrapper(base, 1).display_name() == "Frequency [L1]"
    assert MetaWrapper(base, 2, "L2").display_name() == "Frequency [L2]"


def test_meta_wrapper_observe_does_not_touch_base():
    base = feed(FrequencyExpert(), [S])
    wrapper = MetaWrapper(base, 1)
    wrapper.observe(R, R)
    wrapper.observe(R, R)
    assert base.predict() == S
    assert wrapper.base is base


@pytest.mark.parametrize("offset", [3, -1, 1.0, True])
def test_meta_wrapper_rejects_bad_offset(offset):
    with pytest.raises(ValueError):
        MetaWrapper(FrequencyExpert(), offset)


def test_base_roster_order():
    names = [e.display_name() for e in build_base_experts()]
    assert names == [
        "Random", "Frequency", "Rotator", "Markov-1", "Markov-2", "Markov-3",
        "WSLS-Pavlov", "GamblerFallacy", "Mirror (Copycat)", "Level-1 (Counter-Me)",
        "Hand-Bias (Skew)", "Stubborn (Double-Down)",
    ]


def test_predict_does_not_mutate_state():
    expert = feed(MarkovExpert(1), [R, P, R])
    first = [expert.predict() for _ in range(5)]
    assert first == [P] * 5
    assert all(m in MOVES for m in first)
