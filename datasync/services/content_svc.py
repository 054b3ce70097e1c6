"""Content type and content item service."""

from __future__ import annotations

import re
import uuid
from datetime import date
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.content import CONTENT_STATUSES, ContentItem, ContentType
from .organization_svc import slugify

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_URL_RE = re.compile(r"^https?://\S+$", re.IGNORECASE)
_PHONE_RE = re.compile(r"^\+?[\d\s().-]{7,20}$")


async def create_content_type(
    db: AsyncSession,
    organization_id: uuid.UUID,
    name: str,
    schema: list[dict],
    slug: str | None = None,
) -> ContentType:
    content_type = ContentType(
        organization_id=organization_id,
        name=name,
        slug=slug or slugify(name, "_"),
        schema=schema,
    )
    db.add(content_type)
    await db.commit()
    await db.refresh(content_type)
    return content_type


async def list_content_types(db: AsyncSession, organization_id: uuid.UUID) -> list[ContentType]:
    stmt = (
        select(ContentType)
        .where(ContentType.organization_id == organization_id)
        .order_by(ContentType.created_at.desc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_content_type(db: AsyncSession, content_type_id: uuid.UUID) -> ContentType | None:
    result = await db.execute(select(ContentType).where(ContentType.id == content_type_id))
    return result.scalar_one_or_none()


async def get_content_type_by_slug(
    db: AsyncSession, organization_id: uuid.UUID, slug: str
) -> ContentType | None:
    result = await db.execute(
        select(ContentType).where(
            ContentType.organization_id == organization_id, ContentType.slug == slug
        )
    )
    return result.scalar_one_or_none()


async def create_content_item(
    db: AsyncSession,
    organization_id: uuid.UUID,
    content_type_id: uuid.UUID,
    title: str,
    data: dict | None = None,
    status: str = "draft",
) -> ContentItem:
    if status not in CONTENT_STATUSES:
        raise ValueError(f"Invalid status {status!r}")
    item = ContentItem(
        organization_id=organization_id,
        content_type_id=content_type_id,
        title=title,
        data=data or {},
        status=status,
    )
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item


async def get_content_item(db: AsyncSession, item_id: uuid.UUID) -> ContentItem | None:
    result = await db.execute(select(ContentItem).where(ContentItem.id == item_id))
    return result.scalar_one_or_none()


async def list_content_items(
    db: AsyncSession,
    organization_id: uuid.UUID,
    content_type_id: uuid.UUID | None = None,
    status: str | None = None,
) -> list[ContentItem]:
    stmt = select(ContentItem).where(ContentItem.organization_id == organization_id)
    if content_type_id:
        stmt = stmt.where(ContentItem.content_type_id == content_type_id)
    if status:
        stmt = stmt.where(ContentItem.status == status)
    stmt = stmt.order_by(ContentItem.updated_at.desc())
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def update_content_item(
    db: AsyncSession, item_id: uuid.UUID, **kwargs
) -> ContentItem | None:
    item = await get_content_item(db, item_id)
    if not item:
        return None
    if "status" in kwargs and kwargs["status"] not in CONTENT_STATUSES:
        raise ValueError(f"Invalid status {kwargs['status']!r}")
    for key, value in kwargs.items():
        if hasattr(item, key):
            setattr(item, key, value)
    await db.commit()
    await db.refresh(item)
    return item


def validate_item_data(schema: list[dict], data: dict[str, Any]) -> list[str]:
    """Check item data against its content type's field list.

    Returns human-readable errors; an empty list means valid. Keys that are
    not in the schema are allowed through.
    """
    errors: list[str] = []
    for fld in schema:
        name = fld.get("name")
        if not name:
            continue
        label = fld.get("label") or name
        value = data.get(name)
        if value is None or value == "" or value == []:
            if fld.get("required"):
                errors.append(f"{label} is required")
            continue

        ftype = fld.get("type", "text")
        rules = fld.get("validation") or {}
        options = fld.get("options") or []

        if ftype == "number":
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                errors.append(f"{label} must be a number")
                continue
            if rules.get("min") is not None and value < rules["min"]:
                errors.append(f"{label} must be at least {rules['min']:g}")
            if rules.get("max") is not None and value > rules["max"]:
                errors.append(f"{label} must be at most {rules['max']:g}")
        elif ftype == "email":
            if not isinstance(value, str) or not _EMAIL_RE.match(value):
                errors.append(f"{label} must be a valid email")
        elif ftype in ("url", "image"):
            if not isinstance(value, str) or not _URL_RE.match(value):
                errors.append(f"{label} must be a valid URL")
        elif ftype == "phone":
            if not isinstance(value, str) or not _PHONE_RE.match(value):
                errors.append(f"{label} must be a valid phone number")
        elif ftype == "date":
            try:
                date.fromisoformat(str(value)[:10])
            except ValueError:
                errors.append(f"{label} must be a date (YYYY-MM-DD)")
        elif ftype == "select":
            if value not in options:
                errors.append(f"{label} must be one of: {', '.join(options)}")
        elif ftype == "multi-select":
            if not isinstance(value, list) or any(v not in options for v in value):
                errors.append(f"{label} must only contain: {', '.join(options)}")
        elif isinstance(value, str):
            if rules.get("min") is not None and len(value) < rules["min"]:
                errors.append(f"{label} must be at least {int(rules['min'])} characters")
            if rules.get("max") is not None and len(value) > rules["max"]:
                errors.append(f"{label} must be at most {int(rules['max'])} characters")
            if rules.get("pattern"):
                try:
                    matched = re.search(rules["pattern"], value)
                except re.error:
                    errors.append(f"{label} has an unusable pattern")
                    continue
                if not matched:
                    errors.append(f"{label} has an invalid format")
    return errors
