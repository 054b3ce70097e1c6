"""FastAPI application factory for DataSync."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Auto-create tables for SQLite (local dev)
    if "sqlite" in settings.database_url:
        from .database import engine
        from .models import Base
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    if settings.is_production:
        unsigned = [c for c in settings.receiver_campaigns if c not in settings.receiver_secrets_map]
        if unsigned:
            raise RuntimeError(
                "Production mode requires a receiver secret for every allowed campaign; "
                f"missing: {', '.join(unsigned)}. Set DATASYNC_RECEIVER_SECRETS."
            )
    yield


app = FastAPI(title=settings.app_title, lifespan=lifespan)

# Import and register routers
from .routers import (  # noqa: E402
    content,
    health,
    jobs,
    mappings,
    organizations,
    receiver,
    sites,
)

app.include_router(organizations.router)
app.include_router(content.router)
app.include_router(sites.router)
app.include_router(mappings.router)
app.include_router(jobs.router)
app.include_router(receiver.router)
app.include_router(health.router)
