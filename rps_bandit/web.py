"""Flask JSON API for playing against the bandit agent from a browser."""

import threading
from flask import Flask, request, jsonify

from .engine import InvalidMoveValue, Move, parse_move, validate_move
from .opponents import get_opponent_by_name
from .session import GameSession
from .tournament import simulate

MAX_SIMULATION_ROUNDS = 100_000


def _parse_request_move(value) -> Move:
    if isinstance(value, str):
        return parse_move(value)
    return validate_move(value)


def _parse_rounds(value) -> int:
    if isinstance(value, bool):
        raise ValueError(f"'rounds' must be an integer, got {value!r}")
    try:
        rounds = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"'rounds' must be an integer, got {value!r}") from None
    if not 1 <= rounds <= MAX_SIMULATION_ROUNDS:
        raise ValueError(f"'rounds' must be between 1 and {MAX_SIMULATION_ROUNDS}, got {rounds}")
    return rounds


def create_app(seed=None) -> Flask:
    """Build the app around a single game session.

    The session is one match shared by every client of this process, like
    the single page it serves; a lock keeps act/observe rounds atomic under
    a threaded server.
    """
    app = Flask(__name__)
    session = GameSession(seed=seed)
    lock = threading.Lock()

    @app.errorhandler(InvalidMoveValue)
    def handle_invalid_move(err):
        return jsonify({"error": str(err)}), 400

    @app.route("/api/experts")
    def api_experts():
        return jsonify([e.display_name() for e in session.agent.experts])

    @app.route("/api/state")
    def api_state():
        with lock:
            return jsonify(session.summary())

    @app.route("/api/play", methods=["POST"])
    def api_play():
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or "move" not in data:
            return jsonify({"error": "Request body must include 'move'"}), 400
        move = _parse_request_move(data["move"])
        with lock:
            outcome = session.play(move)
            return jsonify({
                "round": outcome.to_dict(),
                "score": {
                    "agent_wins": session.agent_wins,
                    "decisive_rounds": session.decisive_rounds,
                    "win_rate": round(session.win_rate, 2),
                    "text": session.score_line(),
                },
            })

    @app.route("/api/reset-score", methods=["POST"])
    def api_reset_score():
        with lock:
            session.reset_score()
            return jsonify(session.summary())

    @app.route("/api/new-match", methods=["POST"])
    def api_new_match():
        with lock:
            session.new_match()
            return jsonify(session.summary())

    @app.route("/api/simulate", methods=["POST"])
    def api_simulate():
        data = request.get_json(silent=True)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            return jsonify({"error": "Request body must be a JSON object"}), 400

        name = data.get("opponent", "Always Rock")
        if not isinstance(name, str):
            return jsonify({"error": "'opponent' must be a string"}), 400
        try:
            opponent = get_opponent_by_name(name)
            rounds = _parse_rounds(data.get("rounds", 1000))
        except ValueError as e:
            return jsonify({"error": str(e)}), 400

        seed = data.get("seed")
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
            return jsonify({"error": "'seed' must be an integer or null"}), 400

        result = simulate(opponent, rounds=rounds, seed=seed)
        return jsonify(result.to_dict())

    return app


def main():
    print("\n🎮 RPS Meta-Bandit Web API")
    print("  → http://localhost:5000\n")
    create_app().run(debug=True, port=5000)


if __name__ == "__main__":
    main()
