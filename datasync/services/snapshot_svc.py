"""Destination snapshot reads."""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.site import DestinationSnapshot


async def get_snapshot(db: AsyncSession, site_id: uuid.UUID) -> DestinationSnapshot | None:
    result = await db.execute(
        select(DestinationSnapshot).where(DestinationSnapshot.site_id == site_id)
    )
    return result.scalar_one_or_none()
