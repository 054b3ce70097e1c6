"""Sync job lifecycle: queued -> running -> success/partial/failed."""

from __future__ import annotations

from .errors import InvalidJobTransition

QUEUED = "queued"
RUNNING = "running"
SUCCESS = "success"
PARTIAL = "partial"
FAILED = "failed"

TERMINAL_STATUSES = frozenset({SUCCESS, PARTIAL, FAILED})

_TRANSITIONS: dict[str, frozenset[str]] = {
    QUEUED: frozenset({RUNNING, FAILED}),
    RUNNING: TERMINAL_STATUSES,
    SUCCESS: frozenset(),
    PARTIAL: frozenset(),
    FAILED: frozenset(),
}


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATUSES


def check_transition(current: str, target: str) -> None:
    """Raise InvalidJobTransition unless ``current -> target`` is allowed."""
    if target not in _TRANSITIONS.get(current, frozenset()):
        raise InvalidJobTransition(current, target)


def aggregate_status(site_results: list[bool]) -> str:
    """Derive the job status from per-site success flags.

    An organization without sites counts as a success.
    """
    if all(site_results):
        return SUCCESS
    if not any(site_results):
        return FAILED
    return PARTIAL


def predecessors(target: str) -> frozenset[str]:
    """Statuses a job may be in for ``target`` to be a legal next step."""
    return frozenset(s for s, nxt in _TRANSITIONS.items() if target in nxt)
