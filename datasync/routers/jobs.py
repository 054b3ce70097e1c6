"""Sync job routes: create, inspect and run jobs."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..database import get_db, get_session_factory
from ..engine.orchestrator import SyncOrchestrator
from ..models.log import JobLog
from ..models.organization import Organization
from ..models.sync_job import SyncJob
from ..schemas.sync import SyncJobCreate
from ..services import job_svc, sync_svc
from ..tenant.deps import get_current_organization

router = APIRouter(prefix="/orgs/{slug}/sync-jobs", tags=["sync"])


def get_orchestrator(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> SyncOrchestrator:
    return sync_svc.build_orchestrator(session_factory)


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def _job_dict(job: SyncJob) -> dict:
    return {
        "id": str(job.id),
        "status": job.status,
        "trigger": job.trigger,
        "created_by": job.created_by,
        "created_at": _iso(job.created_at),
        "started_at": _iso(job.started_at),
        "completed_at": _iso(job.completed_at),
    }


def _log_dict(log: JobLog) -> dict:
    return {
        "id": str(log.id),
        "level": log.level,
        "message": log.message,
        "site_id": str(log.site_id) if log.site_id else None,
        "content_item_id": str(log.content_item_id) if log.content_item_id else None,
        "payload": log.payload,
        "created_at": _iso(log.created_at),
    }


async def _get_org_job(db: AsyncSession, org: Organization, job_id: uuid.UUID) -> SyncJob:
    job = await job_svc.get_job(db, job_id)
    if not job or job.organization_id != org.id:
        raise HTTPException(status_code=404, detail="Sync job not found")
    return job


@router.get("")
async def list_jobs(
    limit: int = 10,
    org: Organization = Depends(get_current_organization),
    db: AsyncSession = Depends(get_db),
):
    return [_job_dict(j) for j in await job_svc.list_jobs(db, org.id, limit=limit)]


@router.post("", status_code=201)
async def create_job(
    data: SyncJobCreate,
    org: Organization = Depends(get_current_organization),
    db: AsyncSession = Depends(get_db),
    orchestrator: SyncOrchestrator = Depends(get_orchestrator),
):
    job = await job_svc.create_job(db, org.id, trigger=data.trigger, created_by=data.created_by)
    if not data.run:
        return _job_dict(job)

    outcome = await orchestrator.execute(job.id, org.id)
    await db.refresh(job)
    return {**_job_dict(job), "outcome": outcome.to_dict()}


@router.get("/{job_id}")
async def get_job(
    job_id: uuid.UUID,
    org: Organization = Depends(get_current_organization),
    db: AsyncSession = Depends(get_db),
):
    job = await _get_org_job(db, org, job_id)
    logs = await job_svc.list_job_logs(db, job.id)
    return {**_job_dict(job), "logs": [_log_dict(log) for log in logs]}


@router.post("/{job_id}/run")
async def run_job(
    job_id: uuid.UUID,
    org: Organization = Depends(get_current_organization),
    db: AsyncSession = Depends(get_db),
    orchestrator: SyncOrchestrator = Depends(get_orchestrator),
):
    """Execute a queued job synchronously and return its outcome."""
    job = await _get_org_job(db, org, job_id)
    if job.status != "queued":
        raise HTTPException(status_code=422, detail=f"Sync job is {job.status}, expected queued")

    outcome = await orchestrator.execute(job.id, org.id)
    return outcome.to_dict()
