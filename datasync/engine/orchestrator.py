"""Sync orchestrator: drives one sync job across every site of an organization."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from ..security.signing import sign
from . import state
from .collapse import CollapsePolicy, collapse_first
from .delivery import Deliverer
from .errors import InvalidJobTransition, JobNotFound
from .faults import FaultPolicy, never
from .resolver import build_payload, exclusion_reason, resolve
from .store import SiteRecord, SyncStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SiteOutcome:
    site_id: uuid.UUID
    success: bool
    item_count: int = 0
    duration_ms: int = 0
    error: str | None = None


@dataclass
class JobOutcome:
    job_id: uuid.UUID
    status: str
    success: bool
    sites: list[SiteOutcome] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "job_id": str(self.job_id),
            "status": self.status,
            "success": self.success,
            "error": self.error,
            "sites": [
                {
                    "site_id": str(s.site_id),
                    "success": s.success,
                    "item_count": s.item_count,
                    "duration_ms": s.duration_ms,
                    "error": s.error,
                }
                for s in self.sites
            ],
        }


class SyncOrchestrator:
    """Runs sync jobs against an injected store and delivery transport.

    Sites are synced concurrently; each site's failure is recorded on the
    site and in the job log without affecting its siblings. ``execute``
    never raises.
    """

    def __init__(
        self,
        store: SyncStore,
        deliverer: Deliverer,
        *,
        fault_policy: FaultPolicy = never,
        fault_pause_seconds: float = 0.5,
        collapse: CollapsePolicy = collapse_first,
        site_timeout: float | None = None,
        payload_version: str = "1.0",
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.deliverer = deliverer
        self.fault_policy = fault_policy
        self.fault_pause_seconds = fault_pause_seconds
        self.collapse = collapse
        self.site_timeout = site_timeout
        self.payload_version = payload_version
        self.clock = clock

    async def execute(self, job_id: uuid.UUID, organization_id: uuid.UUID) -> JobOutcome:
        status = None
        try:
            status = await self.store.get_job_status(job_id)
            if status is None:
                raise JobNotFound(f"Sync job {job_id} not found")
            if status != state.QUEUED:
                return JobOutcome(
                    job_id=job_id,
                    status=status,
                    success=False,
                    error=f"Sync job is {status}, expected queued",
                )

            try:
                await self.store.update_job_status(job_id, state.RUNNING, started_at=self.clock())
            except InvalidJobTransition as exc:
                # Another runner claimed the job between the read and the write.
                return JobOutcome(
                    job_id=job_id,
                    status=exc.current,
                    success=False,
                    error=f"Sync job is {exc.current}, expected queued",
                )
            status = state.RUNNING
            await self.store.append_job_log(job_id, "info", "Sync job started")

            sites = await self.store.list_sites_for_org(organization_id)
            await self.store.append_job_log(job_id, "info", f"Found {len(sites)} sites to sync")

            results = await asyncio.gather(
                *(self._sync_site(job_id, site) for site in sites),
                return_exceptions=True,
            )
            outcomes = [
                result if isinstance(result, SiteOutcome) else self._crashed(site, result)
                for site, result in zip(sites, results)
            ]

            final_status = state.aggregate_status([o.success for o in outcomes])
            await self.store.update_job_status(job_id, final_status, completed_at=self.clock())
            status = final_status
            await self.store.append_job_log(
                job_id, "info", f"Sync job completed with status: {final_status}"
            )
            return JobOutcome(
                job_id=job_id,
                status=final_status,
                success=final_status != state.FAILED,
                sites=outcomes,
            )
        except JobNotFound as exc:
            logger.warning("%s", exc)
            return JobOutcome(job_id=job_id, status=state.FAILED, success=False, error=str(exc))
        except Exception as exc:
            logger.exception("Sync job %s failed", job_id)
            await self._fail_job(job_id, status, exc)
            return JobOutcome(job_id=job_id, status=state.FAILED, success=False, error=str(exc))

    async def _fail_job(self, job_id: uuid.UUID, status: str | None, exc: Exception) -> None:
        """Best-effort: record the fatal error and force the job to failed."""
        if status is not None and state.is_terminal(status):
            return
        try:
            await self.store.append_job_log(job_id, "error", f"Fatal error: {exc}")
            await self.store.update_job_status(job_id, state.FAILED, completed_at=self.clock())
        except Exception:
            logger.exception("Could not record failure for sync job %s", job_id)

    def _crashed(self, site: SiteRecord, exc: BaseException) -> SiteOutcome:
        logger.error("Site task for %s crashed: %r", site.slug, exc)
        return SiteOutcome(site_id=site.id, success=False, error=str(exc))

    async def _sync_site(self, job_id: uuid.UUID, site: SiteRecord) -> SiteOutcome:
        started = time.monotonic()
        try:
            await self.store.append_job_log(
                job_id, "info", f"Syncing site: {site.name}", site_id=site.id
            )
            if self.site_timeout is None:
                item_count, receipt = await self._push_site(job_id, site)
            else:
                try:
                    item_count, receipt = await asyncio.wait_for(
                        self._push_site(job_id, site), timeout=self.site_timeout
                    )
                except asyncio.TimeoutError:
                    raise TimeoutError(f"timed out after {self.site_timeout:g}s") from None

            await self.store.update_site_sync_status(site.id, state.SUCCESS, self.clock())
            duration_ms = int((time.monotonic() - started) * 1000)
            await self.store.append_job_log(
                job_id,
                "info",
                f"Successfully synced to {site.name}",
                site_id=site.id,
                payload={**receipt, "itemCount": item_count, "durationMs": duration_ms},
            )
            return SiteOutcome(
                site_id=site.id, success=True, item_count=item_count, duration_ms=duration_ms
            )
        except Exception as exc:
            duration_ms = int((time.monotonic() - started) * 1000)
            logger.warning("Failed to sync site %s: %s", site.slug, exc)
            await self.store.update_site_sync_status(site.id, state.FAILED, self.clock())
            await self.store.append_job_log(
                job_id, "error", f"Failed to sync {site.name}: {exc}", site_id=site.id
            )
            return SiteOutcome(
                site_id=site.id, success=False, duration_ms=duration_ms, error=str(exc)
            )

    async def _push_site(self, job_id: uuid.UUID, site: SiteRecord) -> tuple[int, dict[str, Any]]:
        """Resolve, sign and deliver one site's content. Raises on any failure."""
        mappings = await self.store.list_mappings_for_site(site.id)
        await self.store.append_job_log(
            job_id, "info", f"Found {len(mappings)} mappings for {site.name}", site_id=site.id
        )

        for mapping in mappings:
            reason = exclusion_reason(mapping)
            if reason is not None:
                title = mapping.item.title if mapping.item else str(mapping.content_item_id)
                await self.store.append_job_log(
                    job_id,
                    "info",
                    f"Skipped {title}: {reason}",
                    site_id=site.id,
                    content_item_id=mapping.content_item_id if mapping.item else None,
                )

        items = resolve(mappings)
        payload = build_payload(items, self.clock(), self.payload_version)
        item_count = len(payload["items"])

        if self.fault_policy():
            await self.store.append_job_log(
                job_id, "warn", f"Simulated failure for {site.name}, retrying...", site_id=site.id
            )
            await asyncio.sleep(self.fault_pause_seconds)

        await self.store.append_job_log(
            job_id,
            "info",
            f"Sending {item_count} items to {site.name}",
            site_id=site.id,
            payload={"itemCount": item_count},
        )

        content = self.collapse(items)
        body = {
            "payload": content,
            "signature": sign(content, site.destination_secret),
            "campaign": site.slug,
        }
        receipt = await self.deliverer.deliver(site, body)

        await self.store.upsert_snapshot(site.id, content, item_count, received_at=self.clock())
        return item_count, receipt
