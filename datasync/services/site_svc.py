"""Destination site service."""

from __future__ import annotations

import secrets
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.site import Site
from .organization_svc import slugify


def generate_secret(length: int = 32) -> str:
    """Random hex secret built from ``length`` bytes."""
    return secrets.token_hex(length)


async def create_site(
    db: AsyncSession,
    organization_id: uuid.UUID,
    name: str,
    destination_url: str,
    destination_secret: str | None = None,
    slug: str | None = None,
) -> Site:
    site = Site(
        organization_id=organization_id,
        name=name,
        slug=slug or slugify(name),
        destination_url=destination_url,
        destination_secret=destination_secret or generate_secret(),
    )
    db.add(site)
    await db.commit()
    await db.refresh(site)
    return site


async def list_sites(db: AsyncSession, organization_id: uuid.UUID) -> list[Site]:
    stmt = (
        select(Site)
        .where(Site.organization_id == organization_id)
        .order_by(Site.created_at.desc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_site(db: AsyncSession, site_id: uuid.UUID) -> Site | None:
    result = await db.execute(select(Site).where(Site.id == site_id))
    return result.scalar_one_or_none()


async def get_site_by_slug(db: AsyncSession, organization_id: uuid.UUID, slug: str) -> Site | None:
    result = await db.execute(
        select(Site).where(Site.organization_id == organization_id, Site.slug == slug)
    )
    return result.scalar_one_or_none()
