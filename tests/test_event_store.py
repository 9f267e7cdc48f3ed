"""Tests for EventStore session/level/task accumulation."""

import logging
import threading

from hypothesis import given, settings, strategies as st

from playmetrics.analytics.store import EventStore


def test_puzzle_scenario_produces_closed_level(store) -> None:
    store.initialize("Puzzle", "s1")
    store.start_level("L1")
    assert store.record_task("L1", "t1", "Tap", "tap", "success", 500, 10) is True
    assert store.end_level("L1", True, 12000, 100) is True

    report = store.get_report_data()
    assert report["session"]["game_name"] == "Puzzle"
    assert report["session"]["session_id"] == "s1"
    level = report["levels"][0]
    assert level["level_id"] == "L1"
    assert level["completed"] is True
    assert level["duration_ms"] == 12000
    assert level["xp_earned"] == 100
    assert level["end_time"] is not None
    assert level["tasks"] == [
        {
            "task_id": "t1",
            "task_name": "Tap",
            "task_type": "tap",
            "result": "success",
            "time_taken_ms": 500,
            "points_earned": 10,
        }
    ]
    assert store.current_level is None


def test_initialize_uses_clock_and_overwrites_prior_session(store, clock) -> None:
    first = store.initialize("Puzzle", "s1")
    second = store.initialize("Racer", "s2")
    assert first.timestamp == 1_700_000_000_000
    assert second.timestamp == first.timestamp + clock.step
    assert store.get_report_data()["session"] == {
        "game_name": "Racer",
        "session_id": "s2",
        "timestamp": second.timestamp,
    }


def test_report_without_initialize_has_absent_session(store) -> None:
    store.start_level("L1")
    report = store.get_report_data()
    assert report["session"] is None
    assert len(report["levels"]) == 1


def test_record_task_without_level_is_rejected(store, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="playmetrics.analytics.store"):
        ok = store.record_task("L1", "t1", "Tap", "tap", "success", 500, 10)
    assert ok is False
    assert store.get_report_data()["levels"] == []
    assert "no active level L1" in caplog.text


def test_record_task_with_mismatched_level_does_not_mutate(store) -> None:
    store.start_level("L1")
    store.record_task("L1", "t1", "Tap", "tap", "success", 500, 10)
    before = store.get_report_data()

    assert store.record_task("L2", "t2", "Swipe", "swipe", "failure", 300, -5) is False
    assert store.get_report_data() == before


def test_record_task_after_level_closed_is_rejected(store) -> None:
    store.start_level("L1")
    store.end_level("L1", False, 1000, 0)
    assert store.record_task("L1", "t1", "Tap", "tap", "success", 500, 10) is False
    assert store.levels[0].tasks == []


def test_end_level_with_mismatched_id_keeps_current(store) -> None:
    store.start_level("L1")
    assert store.end_level("L2", True, 100, 5) is False
    current = store.current_level
    assert current is not None
    assert current.level_id == "L1"
    assert current.end_time is None
    assert current.completed is False


def test_end_level_twice_is_noop(store) -> None:
    store.start_level("L1")
    assert store.end_level("L1", True, 100, 5) is True
    assert store.end_level("L1", False, 999, 0) is False
    level = store.get_report_data()["levels"][0]
    assert level["completed"] is True
    assert level["duration_ms"] == 100
    assert level["xp_earned"] == 5


def test_end_level_trusts_caller_duration(store, clock) -> None:
    store.start_level("L1")
    store.end_level("L1", True, 42, 7)
    level = store.get_report_data()["levels"][0]
    assert level["end_time"] - level["start_time"] == clock.step
    assert level["duration_ms"] == 42


def test_start_level_while_open_leaves_previous_unclosed(store) -> None:
    store.start_level("L1")
    store.start_level("L2")
    levels = store.get_report_data()["levels"]
    assert [lv["level_id"] for lv in levels] == ["L1", "L2"]
    assert levels[0]["end_time"] is None
    assert levels[0]["completed"] is False
    assert store.current_level.level_id == "L2"
    # The replaced level can no longer be ended or receive tasks.
    assert store.end_level("L1", True, 1, 1) is False


def test_duplicate_level_ids_are_kept(store) -> None:
    store.start_level("L1")
    store.end_level("L1", False, 10, 0)
    store.start_level("L1")
    store.record_task("L1", "t1", "Tap", "tap", "success", 5, 1)
    store.end_level("L1", True, 20, 3)
    levels = store.get_report_data()["levels"]
    assert len(levels) == 2
    assert levels[0]["tasks"] == []
    assert len(levels[1]["tasks"]) == 1


def test_open_level_is_included_in_report(store) -> None:
    store.start_level("L1")
    store.record_task("L1", "t1", "Tap", "tap", "success", 5, 1)
    level = store.get_report_data()["levels"][0]
    assert level["end_time"] is None
    assert level["duration_ms"] is None
    assert level["xp_earned"] == 0
    assert len(level["tasks"]) == 1


def test_raw_metric_last_write_wins(store) -> None:
    store.add_raw_metric("score", 10)
    store.add_raw_metric("score", 25)
    store.add_raw_metric("path", ["a", "b"])
    assert store.get_report_data()["rawData"] == {"score": 25, "path": ["a", "b"]}


def test_reset_clears_everything(store) -> None:
    store.initialize("Puzzle", "s1")
    store.start_level("L1")
    store.add_raw_metric("score", 1)
    store.reset()
    assert store.get_report_data() == {"session": None, "levels": [], "rawData": {}}
    assert store.current_level is None
    assert store.session is None


def test_snapshot_cannot_mutate_store(store) -> None:
    store.initialize("Puzzle", "s1")
    store.start_level("L1")
    store.record_task("L1", "t1", "Tap", "tap", "success", 5, 1)
    store.add_raw_metric("nested", {"hits": [1, 2]})

    report = store.get_report_data()
    report["session"]["game_name"] = "changed"
    report["levels"][0]["tasks"].clear()
    report["levels"].append({"level_id": "bogus"})
    report["rawData"]["nested"]["hits"].append(3)

    fresh = store.get_report_data()
    assert fresh["session"]["game_name"] == "Puzzle"
    assert len(fresh["levels"]) == 1
    assert len(fresh["levels"][0]["tasks"]) == 1
    assert fresh["rawData"] == {"nested": {"hits": [1, 2]}}


def test_accessor_copies_are_detached(store) -> None:
    store.start_level("L1")
    current = store.current_level
    current.tasks.append("junk")
    assert store.current_level.tasks == []


def test_get_report_data_is_idempotent(store) -> None:
    store.initialize("Puzzle", "s1")
    store.start_level("L1")
    store.record_task("L1", "t1", "Tap", "tap", "success", 5, 1)
    store.add_raw_metric("score", 3)
    assert store.get_report_data() == store.get_report_data()


_task_args = st.tuples(
    st.text(min_size=1, max_size=8),
    st.text(max_size=8),
    st.sampled_from(["tap", "swipe", "drag", "quiz"]),
    st.sampled_from(["success", "failure", "skipped"]),
    st.integers(min_value=0, max_value=60_000),
    st.integers(min_value=-100, max_value=100),
)


@settings(max_examples=50, deadline=None)
@given(tasks=st.lists(_task_args, max_size=15), stray=st.lists(_task_args, max_size=5))
def test_closed_level_holds_exactly_the_tasks_recorded_while_current(tasks, stray) -> None:
    store = EventStore(clock=lambda: 0)
    store.start_level("L1")
    for i, args in enumerate(tasks):
        assert store.record_task("L1", *args) is True
        if i < len(stray):
            assert store.record_task("other", *stray[i]) is False
    store.end_level("L1", True, 1, 1)
    for args in stray:
        store.record_task("L1", *args)

    recorded = store.get_report_data()["levels"][0]["tasks"]
    assert [(t["task_id"], t["task_name"], t["task_type"], t["result"], t["time_taken_ms"], t["points_earned"])
            for t in recorded] == list(tasks)


def test_concurrent_task_recording_keeps_every_task(store) -> None:
    store.start_level("L1")

    def worker(n):
        for i in range(50):
            store.record_task("L1", f"t{n}-{i}", "Tap", "tap", "success", i, 1)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(store.get_report_data()["levels"][0]["tasks"]) == 200


def test_numeric_fields_are_stored_as_ints_for_tasks_and_levels(store) -> None:
    store.start_level("L1")
    store.record_task("L1", "t1", "Tap", "tap", "success", 500.7, 10.0)
    store.end_level("L1", True, 12000.9, 100.0)
    level = store.get_report_data()["levels"][0]
    assert level["duration_ms"] == 12000 and type(level["duration_ms"]) is int
    assert level["xp_earned"] == 100 and type(level["xp_earned"]) is int
    task = level["tasks"][0]
    assert task["time_taken_ms"] == 500 and type(task["time_taken_ms"]) is int
    assert task["points_earned"] == 10 and type(task["points_earned"]) is int


def test_replacing_open_level_warns_only_when_previous_is_open(store, caplog) -> None:
    store.start_level("L1")
    store.end_level("L1", True, 1, 1)
    with caplog.at_level(logging.WARNING, logger="playmetrics.analytics.store"):
        store.start_level("L2")
    assert "left unclosed" not in caplog.text

    with caplog.at_level(logging.WARNING, logger="playmetrics.analytics.store"):
        store.start_level("L3")
    assert "L2 is left unclosed" in caplog.text
    assert store.levels[1].is_open is True
    assert store.levels[0].is_open is False
