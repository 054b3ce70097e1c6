"""Records and the storage contract consumed by the sync engine.

The orchestrator never talks to the database directly; it is handed a
``SyncStore``. ``datasync.engine.sql_store.SqlSyncStore`` is the
SQLAlchemy-backed implementation, tests use an in-memory one.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol


@dataclass(frozen=True)
class SiteRecord:
    id: uuid.UUID
    organization_id: uuid.UUID
    name: str
    slug: str
    destination_url: str
    destination_secret: str


@dataclass(frozen=True)
class ContentItemRecord:
    id: uuid.UUID
    title: str
    status: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MappingRecord:
    """A site mapping joined with its content item (``None`` if the item is gone)."""

    id: uuid.UUID
    site_id: uuid.UUID
    content_item_id: uuid.UUID
    mode: str
    overrides: dict[str, Any] = field(default_factory=dict)
    item: ContentItemRecord | None = None


class SyncStore(Protocol):
    async def get_job_status(self, job_id: uuid.UUID) -> str | None: ...

    async def list_sites_for_org(self, organization_id: uuid.UUID) -> list[SiteRecord]: ...

    async def list_mappings_for_site(self, site_id: uuid.UUID) -> list[MappingRecord]: ...

    async def upsert_snapshot(
        self,
        site_id: uuid.UUID,
        payload: dict[str, Any],
        item_count: int,
        received_at: datetime | None = None,
    ) -> None: ...

    async def update_site_sync_status(
        self, site_id: uuid.UUID, status: str, at: datetime
    ) -> None: ...

    async def update_job_status(
        self,
        job_id: uuid.UUID,
        status: str,
        started_at: datetime | None = None,
        completed_at: datetime | None = None,
    ) -> None: ...

    async def append_job_log(
        self,
        job_id: uuid.UUID,
        level: str,
        message: str,
        site_id: uuid.UUID | None = None,
        content_item_id: uuid.UUID | None = None,
        payload: dict[str, Any] | None = None,
    ) -> None: ...
