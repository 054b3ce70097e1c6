"""Tests for the sync job lifecycle rules."""

from __future__ import annotations

import pytest

from datasync.engine import state
from datasync.engine.errors import InvalidJobTransition


@pytest.mark.parametrize(
    "current,target",
    [
        ("queued", "running"),
        ("queued", "failed"),
        ("running", "success"),
        ("running", "partial"),
        ("running", "failed"),
    ],
)
def test_allowed_transitions(current, target):
    state.check_transition(current, target)


@pytest.mark.parametrize(
    "current,target",
    [
        ("queued", "success"),
        ("running", "queued"),
        ("success", "running"),
        ("failed", "queued"),
        ("partial", "success"),
    ],
)
def test_rejected_transitions(current, target):
    with pytest.raises(InvalidJobTransition):
        state.check_transition(current, target)


def test_aggregate_status():
    assert state.aggregate_status([True, True]) == "success"
    assert state.aggregate_status([True, False]) == "partial"
    assert state.aggregate_status([False, False]) == "failed"
    assert state.aggregate_status([]) == "success"


def test_terminal_statuses():
    assert not state.is_terminal("queued")
    assert not state.is_terminal("running")
    assert all(state.is_terminal(s) for s in ("success", "partial", "failed"))


def test_predecessors():
    assert state.predecessors("running") == {"queued"}
    assert state.predecessors("failed") == {"queued", "running"}
    assert state.predecessors("success") == {"running"}
    assert state.predecessors("queued") == frozenset()
