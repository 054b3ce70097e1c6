"""Wiring for running sync jobs from the API and the CLI."""

from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..config import settings
from ..engine.collapse import get_collapse_policy
from ..engine.delivery import Deliverer, HttpDeliverer, LocalDeliverer
from ..engine.faults import FaultPolicy, probabilistic
from ..engine.orchestrator import JobOutcome, SyncOrchestrator
from ..engine.sql_store import SqlSyncStore
from .receiver_svc import FileSink


def build_deliverer(mode: str | None = None) -> Deliverer:
    mode = (mode or settings.sync_delivery_mode).strip().lower()
    if mode == "http":
        return HttpDeliverer(timeout=settings.sync_http_timeout_seconds)
    if mode == "local":
        return LocalDeliverer(FileSink(settings.receiver_dir))
    raise ValueError(f"Unknown delivery mode {mode!r}; expected 'http' or 'local'")


def build_orchestrator(
    session_factory: async_sessionmaker[AsyncSession],
    deliverer: Deliverer | None = None,
    fault_policy: FaultPolicy | None = None,
) -> SyncOrchestrator:
    """Assemble an orchestrator from settings, overriding the pluggable parts."""
    return SyncOrchestrator(
        SqlSyncStore(session_factory),
        deliverer or build_deliverer(),
        fault_policy=fault_policy or probabilistic(settings.sync_fault_probability),
        fault_pause_seconds=settings.sync_fault_pause_seconds,
        collapse=get_collapse_policy(settings.sync_collapse_policy),
        site_timeout=settings.site_timeout,
        payload_version=settings.sync_payload_version,
    )


async def run_job(
    session_factory: async_sessionmaker[AsyncSession],
    job_id: uuid.UUID,
    organization_id: uuid.UUID,
    orchestrator: SyncOrchestrator | None = None,
) -> JobOutcome:
    orchestrator = orchestrator or build_orchestrator(session_factory)
    return await orchestrator.execute(job_id, organization_id)
