import pytest

from conftest import ScriptedExpert
from rps_bandit.agent import AgentConfig, MetaBanditAgent
from rps_bandit.engine import InvalidMoveValue, Move, determine_winner
from rps_bandit.session import GameSession

R, P, S = Move.ROCK, Move.PAPER, Move.SCISSORS


def test_play_resolves_round_from_agent_perspective():
    session = GameSession(seed=8)
    outcome = session.play(R)
    expected = {1: "win", -1: "lose", 0: "tie"}[determine_winner(outcome.agent_move, R)]
    assert outcome.result == expected
    assert outcome.round_num == 1
    assert outcome.trusted_expert == "Random"
    assert session.agent.rounds_played == 1


def test_tallies_exclude_ties():
    # the only expert always predicts Rock, so the agent always throws Paper
    agent = MetaBanditAgent(config=AgentConfig(offsets=(0,)), base_experts=[ScriptedExpert()])
    session = GameSession(agent=agent)
    results = [session.play(move).result for move in [R, P, S, R, R]]
    assert results == ["win", "tie", "lose", "win", "win"]
    assert session.agent_wins == 3
    assert session.ties == 1
    assert session.decisive_rounds == 4
    assert session.win_rate == pytest.approx(75.0)
    assert session.score_line() == "Agent Win Rate (vs. you, excluding ties): 75.0% (3/4)"


def test_win_rate_zero_without_decisive_rounds():
    session = GameSession(seed=1)
    assert session.win_rate == 0.0
    assert session.score_line() == "Agent Win Rate (vs. you, excluding ties): 0.0% (0/0)"


def test_reset_score_keeps_learning():
    session = GameSession(seed=2)
    for _ in range(15):
        session.play(R)
    session.reset_score()
    assert session.decisive_rounds == 0
    assert session.agent.rounds_played == 15


def test_new_match_forgets_everything():
    session = GameSession(seed=2)
    for _ in range(15):
        session.play(R)
    session.new_match()
    assert session.agent.rounds_played == 0
    assert session.history == []
    assert set(session.agent.scores) == {0.0}


def test_invalid_move_leaves_session_untouched():
    session = GameSession(seed=2)
    with pytest.raises(InvalidMoveValue):
        session.play(7)
    assert session.history == []
    assert not session.agent.awaiting_outcome


def test_agent_exploits_a_repeating_player():
    session = GameSession(seed=6)
    for _ in range(100):
        session.play(S)
    assert session.win_rate > 80


def test_summary_shape():
    session = GameSession(seed=3)
    outcome = session.play(P)
    summary = session.summary()
    assert summary["rounds_played"] == 1
    assert len(summary["standings"]) == 5
    assert outcome.to_dict()["player_move"] == "Paper"
