"""Sync job schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class SyncJobCreate(BaseModel):
    trigger: Literal["manual", "cron"] = "manual"
    created_by: str | None = None
    run: bool = False
