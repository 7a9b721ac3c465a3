"""
Tests for the turn history ring buffer.
"""

import pytest

from llm_monopoly.turn.history import TurnHistory


def test_newest_entry_comes_first():
    history = TurnHistory()
    history.add(0, "Alice", ["Rolled dice: 3, 4"])
    history.add(1, "Bob", ["Ended turn"])

    assert [e.actor_name for e in history.entries()] == ["Bob", "Alice"]


def test_eleventh_append_evicts_oldest():
    history = TurnHistory(capacity=10)
    for i in range(11):
        history.add(i % 2, f"P{i}", [f"action {i}"])

    assert len(history) == 10
    assert [e.actions[0] for e in history] == [f"action {i}" for i in range(10, 0, -1)]


def test_recent_limits_exposure():
    history = TurnHistory()
    for i in range(8):
        history.add(0, "Alice", [f"action {i}"])

    recent = history.recent(5)
    assert len(recent) == 5
    assert recent[0].actions == ("action 7",)
    assert history.recent(0) == []


def test_entries_are_immutable_records():
    history = TurnHistory()
    actions = ["Bought property: Baltic Avenue"]
    entry = history.add(0, "Alice", actions)
    actions.append("Ended turn")

    assert entry.actions == ("Bought property: Baltic Avenue",)
    assert entry.timestamp.tzinfo is not None


def test_clear():
    history = TurnHistory()
    history.add(0, "Alice", ["Ended turn"])
    history.clear()

    assert len(history) == 0


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        TurnHistory(capacity=0)
