"""Tests for mapping resolution."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from datasync.engine.resolver import build_payload, exclusion_reason, resolve
from datasync.engine.store import ContentItemRecord, MappingRecord


def _mapping(
    title="Hero",
    data=None,
    status="published",
    mode="full",
    overrides=None,
    missing=False,
) -> MappingRecord:
    item_id = uuid.uuid4()
    item = None if missing else ContentItemRecord(
        id=item_id, title=title, status=status, data=data if data is not None else {"h": title}
    )
    return MappingRecord(
        id=uuid.uuid4(),
        site_id=uuid.uuid4(),
        content_item_id=item_id,
        mode=mode,
        overrides=overrides or {},
        item=item,
    )


def test_full_mapping_keeps_item_data():
    mapping = _mapping(data={"headline": "Hi", "price": 10})
    [item] = resolve([mapping])
    assert item.id == mapping.item.id
    assert item.title == "Hero"
    assert item.data == {"headline": "Hi", "price": 10}
    assert item.mode == "full"


def test_override_shallow_merges_overrides():
    mapping = _mapping(
        data={"headline": "Hi", "cta": {"label": "Buy", "url": "/buy"}},
        mode="override",
        overrides={"headline": "Hello FB", "cta": {"label": "Shop"}},
    )
    [item] = resolve([mapping])
    assert item.data == {"headline": "Hello FB", "cta": {"label": "Shop"}}


def test_override_does_not_mutate_source_item():
    mapping = _mapping(data={"headline": "Hi"}, mode="override", overrides={"headline": "Yo"})
    resolve([mapping])
    assert mapping.item.data == {"headline": "Hi"}


def test_block_wins_over_published_status():
    mapping = _mapping(mode="block")
    assert resolve([mapping]) == []
    assert exclusion_reason(mapping) == "blocked"


def test_unpublished_items_never_resolve():
    for mode in ("full", "override"):
        draft = _mapping(status="draft", mode=mode, overrides={"x": 1})
        archived = _mapping(status="archived", mode=mode)
        assert resolve([draft, archived]) == []
    assert exclusion_reason(_mapping(status="draft")) == "status is draft"


def test_missing_item_is_skipped():
    mapping = _mapping(missing=True)
    assert resolve([mapping]) == []
    assert exclusion_reason(mapping) == "content item missing"


def test_resolution_preserves_mapping_order():
    mappings = [_mapping(title=t) for t in ("one", "two", "three")]
    mappings.insert(1, _mapping(title="hidden", mode="block"))
    assert [item.title for item in resolve(mappings)] == ["one", "two", "three"]


def test_build_payload_shape():
    synced_at = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    items = resolve([_mapping(title="A"), _mapping(title="B", status="draft")])
    payload = build_payload(items, synced_at)
    assert payload["syncedAt"] == "2024-05-01T12:00:00+00:00"
    assert payload["version"] == "1.0"
    assert [i["title"] for i in payload["items"]] == ["A"]
    assert payload["items"][0]["id"] == str(items[0].id)
    assert payload["items"][0]["mode"] == "full"
