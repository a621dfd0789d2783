# src/tests/scores_unit.py
import json

from src.dockjumper.config import DEFAULT_PLAYER_NAME, SCOREBOARD_LIMIT
from src.dockjumper.scores import JsonScoreStore, MemoryScoreStore, ScoreEntry, rank_scores


def test_ranking_breaks_ties_by_earlier_timestamp():
    entries = [
        ScoreEntry("late", 5, 200.0),
        ScoreEntry("best", 9, 300.0),
        ScoreEntry("early", 5, 100.0),
    ]
    assert [e.name for e in rank_scores(entries)] == ["best", "early", "late"]


def test_scoreboard_is_trimmed():
    store = MemoryScoreStore()
    for i in range(1, SCOREBOARD_LIMIT + 5):
        store.record_finished_run("p", i, float(i))
    board = store.load_scoreboard()
    assert len(board) == SCOREBOARD_LIMIT
    assert board[0].score == SCOREBOARD_LIMIT + 4
    assert store.load_high_score() == SCOREBOARD_LIMIT + 4


def test_zero_score_is_not_recorded():
    store = MemoryScoreStore()
    store.record_finished_run("p", 0, 1.0)
    assert store.load_scoreboard() == []
    assert store.load_high_score() == 0


def test_player_name_defaults_and_strips():
    store = MemoryScoreStore()
    assert store.load_player_name() == DEFAULT_PLAYER_NAME
    store.save_player_name("  Ada ")
    assert store.load_player_name() == "Ada"
    store.save_player_name("   ")
    assert store.load_player_name() == DEFAULT_PLAYER_NAME


def test_json_store_round_trips(tmp_path):
    path = tmp_path / "scores.json"
    store = JsonScoreStore(path)
    store.save_player_name("Ada")
    store.record_finished_run("Ada", 7, 10.0)
    store.store_high_score(9)

    again = JsonScoreStore(path)
    assert again.load_player_name() == "Ada"
    assert again.load_high_score() == 9
    assert again.load_scoreboard() == [ScoreEntry("Ada", 7, 10.0)]


def test_missing_file_loads_empty(tmp_path):
    store = JsonScoreStore(tmp_path / "nope" / "scores.json")
    assert store.load_scoreboard() == []
    assert store.load_high_score() == 0


def test_corrupt_file_loads_empty(tmp_path):
    path = tmp_path / "scores.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonScoreStore(path)
    assert store.load_scoreboard() == []
    assert store.load_high_score() == 0

    path.write_text(json.dumps({"high_score": "x", "scoreboard": [{"name": "a"}]}), encoding="utf-8")
    store = JsonScoreStore(path)
    assert store.load_scoreboard() == []
    assert store.load_high_score() == 0


def test_high_score_is_max_of_stored_and_board(tmp_path):
    path = tmp_path / "scores.json"
    path.write_text(json.dumps({
        "high_score": 2,
        "scoreboard": [{"name": "a", "score": 6, "timestamp": 1.0}],
    }), encoding="utf-8")
    assert JsonScoreStore(path).load_high_score() == 6


def test_infinite_numbers_load_empty(tmp_path):
    path = tmp_path / "scores.json"
    path.write_text('{"high_score": Infinity, "scoreboard": []}', encoding="utf-8")
    assert JsonScoreStore(path).load_high_score() == 0

    path.write_text('{"scoreboard": [{"name": "a", "score": 1e400, "timestamp": 1}]}',
                    encoding="utf-8")
    store = JsonScoreStore(path)
    assert store.load_scoreboard() == []
    assert store.load_high_score() == 0


def test_save_replaces_file_without_leftovers(tmp_path):
    path = tmp_path / "scores.json"
    path.write_text(json.dumps({"high_score": 1}), encoding="utf-8")
    store = JsonScoreStore(path)
    store.record_finished_run("Ada", 4, 2.0)
    assert [p.name for p in tmp_path.iterdir()] == ["scores.json"]
    assert json.loads(path.read_text(encoding="utf-8"))["high_score"] == 4
