"""Sync job and job log queries."""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..engine.state import QUEUED
from ..models.log import JobLog
from ..models.sync_job import SyncJob

TRIGGERS = ("manual", "cron")


async def create_job(
    db: AsyncSession,
    organization_id: uuid.UUID,
    trigger: str = "manual",
    created_by: str | None = None,
) -> SyncJob:
    if trigger not in TRIGGERS:
        raise ValueError(f"Invalid trigger {trigger!r}")
    job = SyncJob(
        organization_id=organization_id,
        status=QUEUED,
        trigger=trigger,
        created_by=created_by,
    )
    db.add(job)
    await db.commit()
    await db.refresh(job)
    return job


async def get_job(db: AsyncSession, job_id: uuid.UUID) -> SyncJob | None:
    result = await db.execute(select(SyncJob).where(SyncJob.id == job_id))
    return result.scalar_one_or_none()


async def list_jobs(db: AsyncSession, organization_id: uuid.UUID, limit: int = 10) -> list[SyncJob]:
    stmt = (
        select(SyncJob)
        .where(SyncJob.organization_id == organization_id)
        .order_by(SyncJob.created_at.desc())
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def list_queued_jobs(db: AsyncSession, organization_id: uuid.UUID) -> list[SyncJob]:
    stmt = (
        select(SyncJob)
        .where(SyncJob.organization_id == organization_id, SyncJob.status == QUEUED)
        .order_by(SyncJob.created_at.asc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def list_job_logs(db: AsyncSession, job_id: uuid.UUID) -> list[JobLog]:
    stmt = select(JobLog).where(JobLog.job_id == job_id).order_by(JobLog.created_at.asc())
    result = await db.execute(stmt)
    return list(result.scalars().all())
