"""Site-item mapping routes."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models.organization import Organization
from ..schemas.site import MappingDelete, MappingUpsert
from ..services import content_svc, mapping_svc, site_svc
from ..tenant.deps import get_current_organization

router = APIRouter(prefix="/orgs/{slug}/mappings", tags=["mappings"])


async def _resolve_pair(
    db: AsyncSession, org: Organization, site_id: str, content_item_id: str
) -> tuple[uuid.UUID, uuid.UUID]:
    try:
        sid, iid = uuid.UUID(site_id), uuid.UUID(content_item_id)
    except ValueError:
        raise HTTPException(status_code=422, detail="Invalid site or content item id") from None

    site = await site_svc.get_site(db, sid)
    if not site or site.organization_id != org.id:
        raise HTTPException(status_code=404, detail="Site not found")
    item = await content_svc.get_content_item(db, iid)
    if not item or item.organization_id != org.id:
        raise HTTPException(status_code=404, detail="Content item not found")
    return sid, iid


@router.get("")
async def list_mappings(
    org: Organization = Depends(get_current_organization),
    db: AsyncSession = Depends(get_db),
):
    mappings = await mapping_svc.list_mappings(db, org.id)
    return [
        {
            "id": str(m.id),
            "site_id": str(m.site_id),
            "site_name": m.site.name,
            "site_slug": m.site.slug,
            "content_item_id": str(m.content_item_id),
            "content_item_title": m.content_item.title if m.content_item else None,
            "mode": m.mode,
            "overrides": m.overrides,
        }
        for m in mappings
    ]


@router.put("")
async def upsert_mapping(
    data: MappingUpsert,
    org: Organization = Depends(get_current_organization),
    db: AsyncSession = Depends(get_db),
):
    site_id, item_id = await _resolve_pair(db, org, data.site_id, data.content_item_id)
    mapping = await mapping_svc.upsert_mapping(
        db, site_id, item_id, mode=data.mode, overrides=data.overrides
    )
    return {
        "id": str(mapping.id),
        "site_id": str(mapping.site_id),
        "content_item_id": str(mapping.content_item_id),
        "mode": mapping.mode,
        "overrides": mapping.overrides,
    }


@router.delete("")
async def delete_mapping(
    data: MappingDelete,
    org: Organization = Depends(get_current_organization),
    db: AsyncSession = Depends(get_db),
):
    site_id, item_id = await _resolve_pair(db, org, data.site_id, data.content_item_id)
    deleted = await mapping_svc.delete_mapping(db, site_id, item_id)
    return {"deleted": deleted}
