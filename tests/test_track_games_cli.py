"""
Tests for the command-line runner.
"""

import pytest

import track_games
from gametracker.settings import Settings
from gametracker.ui_logic import GameManager


@pytest.fixture
def storage_file(tmp_path, monkeypatch):
    monkeypatch.setattr(track_games, "LOGS_DIR", tmp_path / "logs")
    monkeypatch.delenv("GAME_TRACKER_STORAGE", raising=False)
    path = tmp_path / "storage.json"
    gm = GameManager(settings=Settings(storage_file=path))
    gm.start()
    gm.submit("wantToPlay", {"name": "Hades", "interest_level": "High"})
    gm.submit("finished", {"name": "Celeste", "score": 5, "hours_spent": "12"})
    return path


def test_list_all(storage_file, capsys):
    assert track_games.main(["--storage", str(storage_file), "list"]) == 0
    out = capsys.readouterr().out
    assert "== Want to Play ==" in out
    assert "Hades" in out
    assert "★★★★★" in out
    assert "No abandoned games. Keep it up!" in out


def test_list_one_collection(storage_file, capsys):
    track_games.main(["--storage", str(storage_file), "list", "finished"])
    out = capsys.readouterr().out
    assert "Celeste" in out
    assert "Hades" not in out


def test_export_all(storage_file, tmp_path, capsys):
    out_dir = tmp_path / "exports"
    assert track_games.main(["--storage", str(storage_file), "export", "all", "--out", str(out_dir)]) == 0
    assert (out_dir / "games_to_play.csv").exists()
    assert (out_dir / "games_finished.csv").exists()
    assert not (out_dir / "games_abandoned.csv").exists()
    assert "abandoned: Nothing to export." in capsys.readouterr().out


def test_plots(storage_file, tmp_path):
    out_dir = tmp_path / "plots"
    assert track_games.main(["--storage", str(storage_file), "plots", "--out", str(out_dir)]) == 0
    assert sorted(p.name for p in out_dir.iterdir()) == [
        "interest_distribution.png",
        "reason_distribution.png",
        "score_histogram.png",
    ]


def test_stats(storage_file, capsys):
    assert track_games.main(["--storage", str(storage_file), "stats"]) == 0
    out = capsys.readouterr().out
    assert "Finished: 1" in out
    assert "Finished total: 1" in out
    assert "Average hours: 12.0h" in out
    assert "Interest Level: Low=0, Medium=0, High=1" in out


def test_unknown_collection_rejected(storage_file):
    with pytest.raises(SystemExit):
        track_games.main(["--storage", str(storage_file), "list", "wishlist"])
