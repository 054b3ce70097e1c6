"""Collapse policies: reduce resolved items to the one object a destination gets."""

from __future__ import annotations

import copy
from typing import Any, Callable

from .resolver import ResolvedItem

CollapsePolicy = Callable[[list[ResolvedItem]], dict[str, Any]]


def collapse_first(items: list[ResolvedItem]) -> dict[str, Any]:
    """Use the first resolved item's data; an empty list gives ``{}``."""
    if not items:
        return {}
    return dict(items[0].data)


def _deep_merge(base: dict[str, Any], incoming: dict[str, Any]) -> dict[str, Any]:
    for key, value in incoming.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            base[key] = _deep_merge(current, value)
        else:
            base[key] = copy.deepcopy(value)
    return base


def collapse_merge(items: list[ResolvedItem]) -> dict[str, Any]:
    """Deep-merge every item's data in order; later items win on conflicts."""
    merged: dict[str, Any] = {}
    for item in items:
        _deep_merge(merged, item.data)
    return merged


COLLAPSE_POLICIES: dict[str, CollapsePolicy] = {
    "first": collapse_first,
    "merge": collapse_merge,
}


def get_collapse_policy(name: str) -> CollapsePolicy:
    try:
        return COLLAPSE_POLICIES[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown collapse policy {name!r}; expected one of {sorted(COLLAPSE_POLICIES)}"
        ) from None
