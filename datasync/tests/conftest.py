"""Async test fixtures for DataSync tests using SQLite."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from datasync.database import get_db, get_session_factory
from datasync.engine.delivery import raise_for_response
from datasync.engine.errors import JobNotFound
from datasync.engine.state import check_transition
from datasync.engine.store import ContentItemRecord, MappingRecord, SiteRecord
from datasync.models.base import Base
from datasync.models.organization import Organization
from datasync.services.receiver_svc import DestinationReceiver, MemorySink


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest_asyncio.fixture
async def engine(tmp_path):
    # File-backed so concurrent per-site tasks each get their own connection.
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'datasync_test.db'}", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def organization(db: AsyncSession):
    org = Organization(id=uuid.uuid4(), name="Acme Marketing", slug="acme")
    db.add(org)
    await db.commit()
    await db.refresh(org)
    return org


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTPX async test client against the DataSync app."""
    from datasync.app import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


class InMemorySyncStore:
    """SyncStore backed by plain dicts and lists."""

    def __init__(self) -> None:
        self.jobs: dict[uuid.UUID, dict[str, Any]] = {}
        self.sites: dict[uuid.UUID, list[SiteRecord]] = {}
        self.mappings: dict[uuid.UUID, list[MappingRecord]] = {}
        self.snapshots: dict[uuid.UUID, dict[str, Any]] = {}
        self.site_status: dict[uuid.UUID, tuple[str, datetime]] = {}
        self.logs: list[dict[str, Any]] = []
        self.broken: set[str] = set()

    def _check(self, op: str) -> None:
        if op in self.broken:
            raise RuntimeError(f"{op} unavailable")

    def add_job(self, organization_id: uuid.UUID, status: str = "queued") -> uuid.UUID:
        job_id = uuid.uuid4()
        self.jobs[job_id] = {
            "organization_id": organization_id,
            "status": status,
            "started_at": None,
            "completed_at": None,
        }
        return job_id

    def add_site(self, organization_id: uuid.UUID, slug: str, secret: str = "s3cret") -> SiteRecord:
        site = SiteRecord(
            id=uuid.uuid4(),
            organization_id=organization_id,
            name=slug.title(),
            slug=slug,
            destination_url=f"https://{slug}.example.com/api/sync",
            destination_secret=secret,
        )
        self.sites.setdefault(organization_id, []).append(site)
        self.mappings.setdefault(site.id, [])
        return site

    def add_mapping(
        self,
        site: SiteRecord,
        title: str,
        data: dict[str, Any] | None = None,
        status: str = "published",
        mode: str = "full",
        overrides: dict[str, Any] | None = None,
        missing: bool = False,
    ) -> MappingRecord:
        item_id = uuid.uuid4()
        item = None
        if not missing:
            item = ContentItemRecord(id=item_id, title=title, status=status, data=dict(data or {}))
        mapping = MappingRecord(
            id=uuid.uuid4(),
            site_id=site.id,
            content_item_id=item_id,
            mode=mode,
            overrides=dict(overrides or {}),
            item=item,
        )
        self.mappings[site.id].append(mapping)
        return mapping

    def logs_for(self, level: str | None = None, site_id: uuid.UUID | None = None) -> list[dict]:
        return [
            log
            for log in self.logs
            if (level is None or log["level"] == level)
            and (site_id is None or log["site_id"] == site_id)
        ]

    async def get_job_status(self, job_id):
        self._check("get_job_status")
        job = self.jobs.get(job_id)
        return job["status"] if job else None

    async def list_sites_for_org(self, organization_id):
        self._check("list_sites_for_org")
        return list(self.sites.get(organization_id, []))

    async def list_mappings_for_site(self, site_id):
        self._check("list_mappings_for_site")
        return list(self.mappings.get(site_id, []))

    async def upsert_snapshot(self, site_id, payload, item_count, received_at=None):
        self._check("upsert_snapshot")
        self.snapshots[site_id] = {
            "payload": payload,
            "item_count": item_count,
            "received_at": received_at or datetime.now(),
        }

    async def update_site_sync_status(self, site_id, status, at):
        self._check("update_site_sync_status")
        self.site_status[site_id] = (status, at)

    async def update_job_status(self, job_id, status, started_at=None, completed_at=None):
        self._check("update_job_status")
        job = self.jobs.get(job_id)
        if job is None:
            raise JobNotFound(str(job_id))
        check_transition(job["status"], status)
        job["status"] = status
        if started_at:
            job["started_at"] = started_at
        if completed_at:
            job["completed_at"] = completed_at

    async def append_job_log(
        self, job_id, level, message, site_id=None, content_item_id=None, payload=None
    ):
        self._check("append_job_log")
        self.logs.append(
            {
                "job_id": job_id,
                "level": level,
                "message": message,
                "site_id": site_id,
                "content_item_id": content_item_id,
                "payload": payload,
            }
        )


class ReceiverDeliverer:
    """Delivers straight into a DestinationReceiver, as a remote endpoint would."""

    def __init__(self, secrets: dict[str, str], allowed: list[str] | None = None):
        self.sink = MemorySink()
        self.receiver = DestinationReceiver(
            allowed_campaigns=allowed if allowed is not None else list(secrets),
            secrets=secrets,
            sink=self.sink,
        )
        self.bodies: list[dict[str, Any]] = []

    async def deliver(self, site, body):
        self.bodies.append(body)
        response = await self.receiver.handle(body)
        raise_for_response(response.status_code, response.body)
        return response.body


@pytest.fixture
def fake_store() -> InMemorySyncStore:
    return InMemorySyncStore()


@pytest.fixture
def org_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def receiver_deliverer():
    """Factory: ``receiver_deliverer({"campaign": "secret"})``."""
    return ReceiverDeliverer
