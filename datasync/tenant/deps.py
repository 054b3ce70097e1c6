"""FastAPI dependencies for tenant resolution."""

from __future__ import annotations

import hmac

from fastapi import Depends, HTTPException, Path, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..database import get_db
from ..models.organization import Organization


async def get_current_organization(
    request: Request,
    slug: str = Path(..., description="Organization slug"),
    db: AsyncSession = Depends(get_db),
) -> Organization:
    """Resolve organization slug to Organization model. Raises 404 if not found."""
    result = await db.execute(select(Organization).where(Organization.slug == slug))
    org = result.scalar_one_or_none()
    if not org:
        raise HTTPException(status_code=404, detail=f"Organization '{slug}' not found")

    expected_token = settings.tenant_access_tokens_map.get(slug)
    provided_token = request.headers.get(settings.tenant_token_header, "").strip()

    if expected_token:
        if not provided_token or not hmac.compare_digest(provided_token, expected_token):
            raise HTTPException(status_code=403, detail="Organization access token required")
    elif settings.tenant_auth_required:
        raise HTTPException(status_code=403, detail="Tenant authorization required")

    return org
