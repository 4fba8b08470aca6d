from __future__ import annotations

from pathlib import Path

from gridsnake.records import BEST_SCORE_KEY
from gridsnake.storage import JsonFileStore, MemoryStore
from gridsnake.utils import load_json, save_json


def test_best_score_round_trip_with_default() -> None:
    store = MemoryStore()
    assert store.read(BEST_SCORE_KEY, 0) == 0
    assert store.write(BEST_SCORE_KEY, 120)
    assert store.read(BEST_SCORE_KEY, 0) == 120


def test_remove_falls_back_to_default() -> None:
    store = MemoryStore({"k": [1, 2]})
    assert store.read("k", []) == [1, 2]
    store.remove("k")
    assert store.read("k", "gone") == "gone"


def test_unserialisable_write_is_reported_not_raised() -> None:
    store = MemoryStore()
    assert store.write("k", object()) is False
    assert store.read("k", None) is None


def test_external_write_notifies_subscribers() -> None:
    store = MemoryStore()
    seen: list[tuple[str, object]] = []
    unsubscribe = store.subscribe("k", lambda key, value: seen.append((key, value)))

    store.write("k", 1)
    store.apply_external_write("k", 2)
    unsubscribe()
    store.apply_external_write("k", 3)

    assert seen == [("k", 2)]
    assert store.read("k", None) == 3


def test_json_file_store_round_trip(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path / "data")
    store.write("snake-game-stats", {"totalScore": 40})
    assert store.path_for("snake-game-stats").exists()
    assert JsonFileStore(tmp_path / "data").read("snake-game-stats", {}) == {"totalScore": 40}


def test_json_file_store_malformed_file_reads_default(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path)
    store.path_for("broken").write_text("{not json", encoding="utf-8")
    assert store.read("broken", 7) == 7


def test_json_file_store_failed_write_keeps_old_value(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path)
    store.write("k", 5)
    assert store.write("k", {1, 2}) is False
    assert store.read("k", None) == 5


def test_json_file_store_detects_other_session(tmp_path: Path) -> None:
    mine = JsonFileStore(tmp_path)
    theirs = JsonFileStore(tmp_path)
    seen: list[object] = []
    mine.subscribe(BEST_SCORE_KEY, lambda key, value: seen.append(value))

    theirs.write(BEST_SCORE_KEY, 90)
    assert mine.poll_external_changes() == [BEST_SCORE_KEY]
    assert mine.poll_external_changes() == []
    assert seen == [90]


def test_json_helpers(tmp_path: Path) -> None:
    p = tmp_path / "x.json"
    save_json(p, {"ok": True})
    assert load_json(p, {}) == {"ok": True}
    assert load_json(tmp_path / "missing.json", []) == []


def test_json_file_store_poll_survives_undecodable_file(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path)
    seen: list[object] = []
    store.subscribe(BEST_SCORE_KEY, lambda key, value: seen.append(value))

    store.path_for(BEST_SCORE_KEY).write_bytes(b"\xff\xfe90")
    assert store.poll_external_changes() == []
    assert seen == []
    assert store.read(BEST_SCORE_KEY, 0) == 0
