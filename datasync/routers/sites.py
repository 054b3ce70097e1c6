"""Site routes and the snapshot read interface."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models.organization import Organization
from ..models.site import Site
from ..schemas.site import SiteCreate
from ..services import organization_svc, site_svc, snapshot_svc
from ..tenant.deps import get_current_organization

router = APIRouter(prefix="/orgs/{slug}/sites", tags=["sites"])


def _site_dict(site: Site) -> dict:
    # destination_secret is shown once, on creation.
    return {
        "id": str(site.id),
        "name": site.name,
        "slug": site.slug,
        "destination_url": site.destination_url,
        "last_sync_status": site.last_sync_status,
        "last_sync_at": site.last_sync_at.isoformat() if site.last_sync_at else None,
    }


async def _get_org_site(db: AsyncSession, org: Organization, site_id: uuid.UUID) -> Site:
    site = await site_svc.get_site(db, site_id)
    if not site or site.organization_id != org.id:
        raise HTTPException(status_code=404, detail="Site not found")
    return site


@router.get("")
async def list_sites(
    org: Organization = Depends(get_current_organization),
    db: AsyncSession = Depends(get_db),
):
    return [_site_dict(s) for s in await site_svc.list_sites(db, org.id)]


@router.post("", status_code=201)
async def create_site(
    data: SiteCreate,
    org: Organization = Depends(get_current_organization),
    db: AsyncSession = Depends(get_db),
):
    slug = organization_svc.slugify(data.name)
    if not slug:
        raise HTTPException(status_code=422, detail="Site name must contain letters or digits")
    if await site_svc.get_site_by_slug(db, org.id, slug):
        raise HTTPException(status_code=422, detail=f"Site '{slug}' already exists")
    site = await site_svc.create_site(
        db,
        org.id,
        name=data.name,
        slug=slug,
        destination_url=data.destination_url,
        destination_secret=data.destination_secret,
    )
    return {**_site_dict(site), "destination_secret": site.destination_secret}


@router.get("/{site_id}")
async def get_site(
    site_id: uuid.UUID,
    org: Organization = Depends(get_current_organization),
    db: AsyncSession = Depends(get_db),
):
    return _site_dict(await _get_org_site(db, org, site_id))


@router.get("/{site_id}/snapshot")
async def get_snapshot(
    site_id: uuid.UUID,
    org: Organization = Depends(get_current_organization),
    db: AsyncSession = Depends(get_db),
):
    """Last payload the destination accepted, or ``{}`` if it has none yet."""
    site = await _get_org_site(db, org, site_id)
    snapshot = await snapshot_svc.get_snapshot(db, site.id)
    if not snapshot:
        return {}
    return {
        "payload": snapshot.payload,
        "received_at": snapshot.received_at.isoformat(),
        "item_count": snapshot.item_count,
    }
