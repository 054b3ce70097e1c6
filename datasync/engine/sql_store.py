"""SQLAlchemy implementation of the sync engine's storage contract."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from ..models.log import JobLog
from ..models.site import DestinationSnapshot, Site, SiteItemMapping
from ..models.sync_job import SyncJob
from . import state
from .errors import InvalidJobTransition, JobNotFound
from .store import ContentItemRecord, MappingRecord, SiteRecord

_UPSERT_INSERTS = {"sqlite": sqlite_insert, "postgresql": pg_insert}


class SqlSyncStore:
    """Opens one short-lived session per call.

    Per-site sync tasks run concurrently, and an ``AsyncSession`` must not be
    shared between tasks.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get_job_status(self, job_id: uuid.UUID) -> str | None:
        async with self.session_factory() as db:
            result = await db.execute(select(SyncJob.status).where(SyncJob.id == job_id))
            return result.scalar_one_or_none()

    async def list_sites_for_org(self, organization_id: uuid.UUID) -> list[SiteRecord]:
        async with self.session_factory() as db:
            stmt = (
                select(Site)
                .where(Site.organization_id == organization_id)
                .order_by(Site.created_at, Site.name)
            )
            result = await db.execute(stmt)
            return [
                SiteRecord(
                    id=site.id,
                    organization_id=site.organization_id,
                    name=site.name,
                    slug=site.slug,
                    destination_url=site.destination_url,
                    destination_secret=site.destination_secret,
                )
                for site in result.scalars().all()
            ]

    async def list_mappings_for_site(self, site_id: uuid.UUID) -> list[MappingRecord]:
        async with self.session_factory() as db:
            stmt = (
                select(SiteItemMapping)
                .where(SiteItemMapping.site_id == site_id)
                .options(selectinload(SiteItemMapping.content_item))
                .order_by(SiteItemMapping.created_at)
            )
            result = await db.execute(stmt)
            records = []
            for mapping in result.scalars().all():
                item = mapping.content_item
                records.append(
                    MappingRecord(
                        id=mapping.id,
                        site_id=mapping.site_id,
                        content_item_id=mapping.content_item_id,
                        mode=mapping.mode,
                        overrides=dict(mapping.overrides or {}),
                        item=ContentItemRecord(
                            id=item.id,
                            title=item.title,
                            status=item.status,
                            data=dict(item.data or {}),
                        )
                        if item is not None
                        else None,
                    )
                )
            return records

    async def upsert_snapshot(
        self,
        site_id: uuid.UUID,
        payload: dict[str, Any],
        item_count: int,
        received_at: datetime | None = None,
    ) -> None:
        """Insert or replace the site's snapshot in one statement."""
        received_at = received_at or datetime.now(timezone.utc)
        async with self.session_factory() as db:
            dialect = db.get_bind().dialect.name
            insert = _UPSERT_INSERTS.get(dialect)
            if insert is None:
                raise NotImplementedError(f"Snapshot upsert is not supported on {dialect}")
            stmt = insert(DestinationSnapshot).values(
                id=uuid.uuid4(),
                site_id=site_id,
                payload=payload,
                item_count=item_count,
                received_at=received_at,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[DestinationSnapshot.site_id],
                set_={
                    "payload": stmt.excluded.payload,
                    "item_count": stmt.excluded.item_count,
                    "received_at": stmt.excluded.received_at,
                },
            )
            await db.execute(stmt)
            await db.commit()

    async def update_site_sync_status(
        self, site_id: uuid.UUID, status: str, at: datetime
    ) -> None:
        async with self.session_factory() as db:
            await db.execute(
                update(Site)
                .where(Site.id == site_id)
                .values(last_sync_status=status, last_sync_at=at)
            )
            await db.commit()

    async def update_job_status(
        self,
        job_id: uuid.UUID,
        status: str,
        started_at: datetime | None = None,
        completed_at: datetime | None = None,
    ) -> None:
        """Move the job to ``status`` only if its current status allows it.

        The check and the write are one conditional UPDATE, so of two
        concurrent callers racing for the same transition exactly one wins.
        """
        values: dict[str, Any] = {"status": status}
        if started_at:
            values["started_at"] = started_at
        if completed_at:
            values["completed_at"] = completed_at

        async with self.session_factory() as db:
            result = await db.execute(
                update(SyncJob)
                .where(
                    SyncJob.id == job_id,
                    SyncJob.status.in_(sorted(state.predecessors(status))),
                )
                .values(**values)
            )
            if result.rowcount == 0:
                current = (
                    await db.execute(select(SyncJob.status).where(SyncJob.id == job_id))
                ).scalar_one_or_none()
                await db.rollback()
                if current is None:
                    raise JobNotFound(f"Sync job {job_id} not found")
                raise InvalidJobTransition(current, status)
            await db.commit()

    async def append_job_log(
        self,
        job_id: uuid.UUID,
        level: str,
        message: str,
        site_id: uuid.UUID | None = None,
        content_item_id: uuid.UUID | None = None,
        payload: dict[str, Any] | None = None,
    ) -> None:
        async with self.session_factory() as db:
            db.add(
                JobLog(
                    job_id=job_id,
                    level=level,
                    message=message,
                    site_id=site_id,
                    content_item_id=content_item_id,
                    payload=payload,
                )
            )
            await db.commit()
