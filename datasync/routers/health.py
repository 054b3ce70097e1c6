"""Liveness and readiness checks."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check():
    return {"status": "healthy", "service": "datasync"}


@router.get("/ready")
async def readiness_check(db: AsyncSession = Depends(get_db)):
    """Ready once the database answers; also reports how jobs deliver."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("Readiness check failed: %s", exc)
        raise HTTPException(status_code=503, detail="Database unavailable") from None
    return {
        "status": "ready",
        "service": "datasync",
        "delivery_mode": settings.sync_delivery_mode,
    }
