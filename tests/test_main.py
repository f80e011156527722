import json

from rps_bandit.main import main


def test_list(capsys):
    main(["--list"])
    out = capsys.readouterr().out
    assert "Random [L1]" in out
    assert "Win-Stay-Lose-Shift" in out


def test_simulate_with_export(capsys, tmp_path):
    path = tmp_path / "sim.json"
    main(["simulate", "--opponent", "Always Rock", "--rounds", "50", "--seed", "1",
          "--export", "json", "--output", str(path)])
    out = capsys.readouterr().out
    assert "Meta-Bandit  vs  Always Rock" in out
    assert json.loads(path.read_text())["matches"][0]["rounds"] == 50


def test_gauntlet_sequential(capsys):
    main(["gauntlet", "--rounds", "20", "--seed", "1", "--sequential"])
    assert "Most frequent final leader" in capsys.readouterr().out


def test_play_loop(capsys, monkeypatch):
    inputs = iter(["r", "lizard", "score", "reset", "p", "new", "quit"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(inputs))
    main(["play", "--seed", "3"])
    out = capsys.readouterr().out
    assert "You played: Rock" in out
    assert "Unknown move" in out
    assert "New match" in out


def test_play_loop_stops_on_eof(capsys, monkeypatch):
    def eof(prompt=""):
        raise EOFError

    monkeypatch.setattr("builtins.input", eof)
    main(["play"])
    assert "Final:" in capsys.readouterr().out
