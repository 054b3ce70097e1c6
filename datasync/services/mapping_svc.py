"""Site-item mapping service."""

from __future__ import annotations

import uuid

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models.site import MAPPING_MODES, Site, SiteItemMapping


async def upsert_mapping(
    db: AsyncSession,
    site_id: uuid.UUID,
    content_item_id: uuid.UUID,
    mode: str = "full",
    overrides: dict | None = None,
) -> SiteItemMapping:
    """Create or replace the mapping for a (site, item) pair."""
    if mode not in MAPPING_MODES:
        raise ValueError(f"Invalid mapping mode {mode!r}")
    stmt = select(SiteItemMapping).where(
        SiteItemMapping.site_id == site_id,
        SiteItemMapping.content_item_id == content_item_id,
    )
    result = await db.execute(stmt)
    mapping = result.scalar_one_or_none()

    if mapping:
        mapping.mode = mode
        mapping.overrides = overrides or {}
    else:
        mapping = SiteItemMapping(
            site_id=site_id,
            content_item_id=content_item_id,
            mode=mode,
            overrides=overrides or {},
        )
        db.add(mapping)

    await db.commit()
    await db.refresh(mapping)
    return mapping


async def delete_mapping(
    db: AsyncSession, site_id: uuid.UUID, content_item_id: uuid.UUID
) -> bool:
    result = await db.execute(
        delete(SiteItemMapping).where(
            SiteItemMapping.site_id == site_id,
            SiteItemMapping.content_item_id == content_item_id,
        )
    )
    await db.commit()
    return result.rowcount > 0


async def list_mappings(db: AsyncSession, organization_id: uuid.UUID) -> list[SiteItemMapping]:
    stmt = (
        select(SiteItemMapping)
        .join(Site, Site.id == SiteItemMapping.site_id)
        .where(Site.organization_id == organization_id)
        .options(
            selectinload(SiteItemMapping.site),
            selectinload(SiteItemMapping.content_item),
        )
        .order_by(SiteItemMapping.created_at.desc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())
