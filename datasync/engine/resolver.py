"""Mapping resolution: which items reach a site, and with what data."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable

from .store import MappingRecord

PUBLISHED = "published"


@dataclass(frozen=True)
class ResolvedItem:
    id: uuid.UUID
    title: str
    data: dict[str, Any]
    mode: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": str(self.id), "title": self.title, "data": self.data, "mode": self.mode}


def exclusion_reason(mapping: MappingRecord) -> str | None:
    """Return why a mapping is left out of the payload, or ``None`` if it is kept."""
    if mapping.mode == "block":
        return "blocked"
    if mapping.item is None:
        return "content item missing"
    if mapping.item.status != PUBLISHED:
        return f"status is {mapping.item.status}"
    return None


def resolve(mappings: Iterable[MappingRecord]) -> list[ResolvedItem]:
    """Build the effective item list for one site's mappings.

    Blocked mappings and unpublished items are dropped. ``override`` mappings
    shallow-merge their overrides on top of the item data. Input order is kept.
    """
    resolved: list[ResolvedItem] = []
    for mapping in mappings:
        if exclusion_reason(mapping) is not None:
            continue
        item = mapping.item
        data = dict(item.data or {})
        if mapping.mode == "override":
            data.update(mapping.overrides or {})
        resolved.append(ResolvedItem(id=item.id, title=item.title, data=data, mode=mapping.mode))
    return resolved


def build_payload(
    items: list[ResolvedItem], synced_at: datetime, version: str = "1.0"
) -> dict[str, Any]:
    return {
        "items": [item.to_dict() for item in items],
        "syncedAt": synced_at.isoformat(),
        "version": version,
    }
