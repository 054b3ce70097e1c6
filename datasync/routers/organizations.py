"""Organization routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..schemas.site import OrganizationCreate
from ..services import organization_svc

router = APIRouter(prefix="/orgs", tags=["organizations"])


@router.get("")
async def list_organizations(db: AsyncSession = Depends(get_db)):
    orgs = await organization_svc.list_organizations(db)
    return [{"id": str(o.id), "name": o.name, "slug": o.slug} for o in orgs]


@router.post("", status_code=201)
async def create_organization(data: OrganizationCreate, db: AsyncSession = Depends(get_db)):
    slug = data.slug or organization_svc.slugify(data.name)
    if not slug:
        raise HTTPException(
            status_code=422, detail="Organization name must contain letters or digits"
        )
    if await organization_svc.get_organization_by_slug(db, slug):
        raise HTTPException(status_code=422, detail=f"Organization '{slug}' already exists")
    org = await organization_svc.create_organization(db, data.name, slug)
    return {"id": str(org.id), "name": org.name, "slug": org.slug}
