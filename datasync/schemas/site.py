"""Pydantic models for organizations, sites and mappings."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

MappingMode = Literal["full", "override", "block"]


class OrganizationCreate(BaseModel):
    name: str = Field(min_length=1)
    slug: str | None = None


class SiteCreate(BaseModel):
    name: str = Field(min_length=1)
    destination_url: str
    destination_secret: str | None = None


class MappingUpsert(BaseModel):
    site_id: str
    content_item_id: str
    mode: MappingMode = "full"
    overrides: dict[str, Any] = Field(default_factory=dict)


class MappingDelete(BaseModel):
    site_id: str
    content_item_id: str
