"""Organization (tenant) service."""

from __future__ import annotations

import re

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.organization import Organization


def slugify(name: str, sep: str = "-") -> str:
    """Lowercase and collapse every non-alphanumeric run into ``sep``."""
    return re.sub(r"[^a-z0-9]+", sep, name.lower()).strip(sep)


async def create_organization(db: AsyncSession, name: str, slug: str | None = None) -> Organization:
    org = Organization(name=name, slug=slug or slugify(name))
    db.add(org)
    await db.commit()
    await db.refresh(org)
    return org


async def list_organizations(db: AsyncSession) -> list[Organization]:
    result = await db.execute(select(Organization).order_by(Organization.name))
    return list(result.scalars().all())


async def get_organization_by_slug(db: AsyncSession, slug: str) -> Organization | None:
    result = await db.execute(select(Organization).where(Organization.slug == slug))
    return result.scalar_one_or_none()
