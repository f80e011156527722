"""A human-vs-agent game session: one agent per match plus the score board."""

from dataclasses import dataclass
from typing import Optional

from .agent import AgentConfig, MetaBanditAgent
from .engine import Move, determine_winner, validate_move

OUTCOME_TEXT = {
    "tie": "It's a Tie!",
    "win": "Agent Wins!",
    "lose": "You Win!",
}


@dataclass
class RoundOutcome:
    """One resolved round, from the agent's point of view."""
    round_num: int
    player_move: Move
    agent_move: Move
    result: str  # "win" | "lose" | "tie" for the agent
    trusted_expert: str
    trusted_score: float

    @property
    def message(self) -> str:
        return OUTCOME_TEXT[self.result]

    def to_dict(self) -> dict:
        return {
            "round": self.round_num,
            "player_move": self.player_move.label,
            "agent_move": self.agent_move.label,
            "result": self.result,
            "message": self.message,
            "trusted_expert": self.trusted_expert,
            "trusted_score": round(self.trusted_score, 4),
        }


class GameSession:
    """Game loop glue around a MetaBanditAgent.

    Tallies count the agent's wins over decisive rounds; ties are left out
    of the win rate. ``reset_score`` only clears the tallies, while
    ``new_match`` also wipes everything the agent has learned.
    """

    def __init__(
        self,
        config: Optional[AgentConfig] = None,
        seed: Optional[int] = None,
        agent: Optional[MetaBanditAgent] = None,
    ):
        self.agent = agent if agent is not None else MetaBanditAgent(config=config, seed=seed)
        self.history: list[RoundOutcome] = []
        self.reset_score()

    def play(self, player_move) -> RoundOutcome:
        player_move = validate_move(player_move)
        trusted = self.agent.trusted_expert
        trusted_score = self.agent.scores[self.agent.trusted_index]
        agent_move = self.agent.act()

        outcome = determine_winner(agent_move, player_move)
        if outcome == 0:
            result = "tie"
            self.ties += 1
        elif outcome == 1:
            result = "win"
            self.agent_wins += 1
            self.decisive_rounds += 1
        else:
            result = "lose"
            self.decisive_rounds += 1

        self.agent.observe_outcome(player_move, agent_move)

        round_outcome = RoundOutcome(
            round_num=len(self.history) + 1,
            player_move=player_move,
            agent_move=agent_move,
            result=result,
            trusted_expert=trusted.display_name(),
            trusted_score=trusted_score,
        )
        self.history.append(round_outcome)
        return round_outcome

    @property
    def win_rate(self) -> float:
        """Agent win percentage over decisive rounds."""
        if not self.decisive_rounds:
            return 0.0
        return self.agent_wins / self.decisive_rounds * 100

    def reset_score(self):
        self.agent_wins = 0
        self.decisive_rounds = 0
        self.ties = 0

    def new_match(self):
        self.agent.reset()
        self.history = []
        self.reset_score()

    def score_line(self) -> str:
        return (f"Agent Win Rate (vs. you, excluding ties): {self.win_rate:.1f}% "
                f"({self.agent_wins}/{self.decisive_rounds})")

    def summary(self) -> dict:
        return {
            "rounds_played": len(self.history),
            "agent_wins": self.agent_wins,
            "player_wins": self.decisive_rounds - self.agent_wins,
            "ties": self.ties,
            "decisive_rounds": self.decisive_rounds,
            "win_rate": round(self.win_rate, 2),
            "trusted_expert": self.agent.trusted_expert.display_name(),
            "standings": [
                {"expert": name, "score": round(score, 4)}
                for name, score in self.agent.standings()[:5]
            ],
        }
