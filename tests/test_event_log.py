"""Tests for the thread-safe match event feed."""

import sys
import os
import threading

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from heistcity.utils.event_log import EventLog, MatchEvent


def test_append_and_latest():
    log = EventLog()
    for i in range(5):
        log.append(MatchEvent(1, "move", f"m{i}"))
    assert len(log) == 5
    assert [e.message for e in log.latest(2)] == ["m3", "m4"]


def test_since_turn():
    log = EventLog()
    log.append_many([MatchEvent(1, "turn", "a"), MatchEvent(2, "turn", "b"), MatchEvent(3, "turn", "c")])
    assert [e.message for e in log.since_turn(2)] == ["b", "c"]


def test_clear():
    log = EventLog()
    log.append(MatchEvent(1, "vp", "x", ("a",)))
    log.clear()
    assert len(log) == 0
    assert log.latest() == []


def test_to_dict():
    event = MatchEvent(2, "attack", "a melee on b: hit", ("a", "b"))
    assert event.to_dict() == {
        "turn": 2, "category": "attack", "message": "a melee on b: hit", "characterIds": ["a", "b"],
    }


def test_concurrent_writers():
    log = EventLog()

    def writer(n):
        for i in range(200):
            log.append(MatchEvent(1, "dice", f"{n}-{i}"))

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(log) == 800
