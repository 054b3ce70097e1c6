"""Content type and content item routes."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models.content import ContentItem, ContentType
from ..models.organization import Organization
from ..schemas.content import ContentItemCreate, ContentItemUpdate, ContentTypeCreate
from ..services import content_svc, templates
from ..services.organization_svc import slugify
from ..tenant.deps import get_current_organization

router = APIRouter(prefix="/orgs/{slug}", tags=["content"])


def _type_dict(ct: ContentType) -> dict:
    return {"id": str(ct.id), "name": ct.name, "slug": ct.slug, "schema": ct.schema}


def _item_dict(item: ContentItem) -> dict:
    return {
        "id": str(item.id),
        "content_type_id": str(item.content_type_id),
        "title": item.title,
        "data": item.data,
        "status": item.status,
    }


def _parse_uuid(raw: str, what: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid {what} id") from None


async def _create_type(
    db: AsyncSession, org: Organization, name: str, schema: list[dict], slug: str | None = None
) -> ContentType:
    slug = slug or slugify(name, "_")
    if not slug:
        raise HTTPException(
            status_code=422, detail="Content type name must contain letters or digits"
        )
    if await content_svc.get_content_type_by_slug(db, org.id, slug):
        raise HTTPException(status_code=422, detail=f"Content type '{slug}' already exists")
    return await content_svc.create_content_type(db, org.id, name, schema, slug=slug)


@router.get("/content-types")
async def list_content_types(
    org: Organization = Depends(get_current_organization),
    db: AsyncSession = Depends(get_db),
):
    return [_type_dict(ct) for ct in await content_svc.list_content_types(db, org.id)]


@router.post("/content-types", status_code=201)
async def create_content_type(
    data: ContentTypeCreate,
    org: Organization = Depends(get_current_organization),
    db: AsyncSession = Depends(get_db),
):
    schema = [f.model_dump(exclude_none=True) for f in data.fields]
    ct = await _create_type(db, org, data.name, schema)
    return _type_dict(ct)


@router.get("/content-types/templates")
async def list_content_type_templates(org: Organization = Depends(get_current_organization)):
    return templates.list_templates()


@router.post("/content-types/templates/{key}", status_code=201)
async def create_content_type_from_template(
    key: str,
    org: Organization = Depends(get_current_organization),
    db: AsyncSession = Depends(get_db),
):
    template = templates.get_template(key)
    if template is None:
        raise HTTPException(status_code=404, detail=f"Template '{key}' not found")
    ct = await _create_type(
        db, org, template["name"], [dict(f) for f in template["schema"]], slug=template["slug"]
    )
    return _type_dict(ct)


@router.get("/content-items")
async def list_content_items(
    content_type_id: uuid.UUID | None = None,
    status: str | None = None,
    org: Organization = Depends(get_current_organization),
    db: AsyncSession = Depends(get_db),
):
    items = await content_svc.list_content_items(
        db, org.id, content_type_id=content_type_id, status=status
    )
    return [_item_dict(i) for i in items]


@router.post("/content-items", status_code=201)
async def create_content_item(
    data: ContentItemCreate,
    org: Organization = Depends(get_current_organization),
    db: AsyncSession = Depends(get_db),
):
    ct = await content_svc.get_content_type(db, _parse_uuid(data.content_type_id, "content type"))
    if not ct or ct.organization_id != org.id:
        raise HTTPException(status_code=404, detail="Content type not found")

    errors = content_svc.validate_item_data(ct.schema or [], data.data)
    if errors:
        raise HTTPException(status_code=422, detail=errors)

    item = await content_svc.create_content_item(
        db, org.id, ct.id, title=data.title, data=data.data, status=data.status
    )
    return _item_dict(item)


@router.patch("/content-items/{item_id}")
async def update_content_item(
    item_id: uuid.UUID,
    data: ContentItemUpdate,
    org: Organization = Depends(get_current_organization),
    db: AsyncSession = Depends(get_db),
):
    item = await content_svc.get_content_item(db, item_id)
    if not item or item.organization_id != org.id:
        raise HTTPException(status_code=404, detail="Content item not found")

    updates = data.model_dump(exclude_unset=True, exclude_none=True)
    if "data" in updates:
        ct = await content_svc.get_content_type(db, item.content_type_id)
        errors = content_svc.validate_item_data(ct.schema if ct else [], updates["data"])
        if errors:
            raise HTTPException(status_code=422, detail=errors)

    item = await content_svc.update_content_item(db, item_id, **updates)
    return _item_dict(item)
