"""Destination sites, their item mappings and last-accepted snapshots."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, UUIDMixin, TimestampMixin, TenantMixin
from .content import ContentItem

MAPPING_MODES = ("full", "override", "block")


class Site(UUIDMixin, TimestampMixin, TenantMixin, Base):
    __tablename__ = "site"
    __table_args__ = (
        UniqueConstraint("organization_id", "slug", name="uq_site_org_slug"),
    )

    name: Mapped[str] = mapped_column(String(200))
    slug: Mapped[str] = mapped_column(String(100), index=True)
    destination_url: Mapped[str] = mapped_column(Text)
    destination_secret: Mapped[str] = mapped_column(String(200))
    # Written only by the sync orchestrator.
    last_sync_status: Mapped[str | None] = mapped_column(
        String(20), default=None
    )  # success/partial/failed
    last_sync_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=None, nullable=True
    )

    organization: Mapped["Organization"] = relationship(back_populates="sites")  # noqa: F821
    mappings: Mapped[list[SiteItemMapping]] = relationship(
        back_populates="site", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Site {self.slug!r}>"


class SiteItemMapping(UUIDMixin, TimestampMixin, Base):
    """Per-(site, item) syndication policy."""

    __tablename__ = "site_item_mapping"
    __table_args__ = (
        UniqueConstraint("site_id", "content_item_id", name="uq_mapping_site_item"),
    )

    site_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("site.id", ondelete="CASCADE"), index=True
    )
    content_item_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("content_item.id", ondelete="CASCADE"), index=True
    )
    mode: Mapped[str] = mapped_column(String(20), default="full")  # full/override/block
    overrides: Mapped[dict] = mapped_column(JSON, default=dict)

    site: Mapped[Site] = relationship(back_populates="mappings")
    content_item: Mapped[ContentItem] = relationship()

    def __repr__(self) -> str:
        return f"<SiteItemMapping {self.mode}>"


class DestinationSnapshot(UUIDMixin, Base):
    """Last payload a destination accepted; one row per site."""

    __tablename__ = "destination_snapshot"

    site_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("site.id", ondelete="CASCADE"), unique=True, index=True
    )
    payload: Mapped[dict] = mapped_column(JSON, default=dict)
    received_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    item_count: Mapped[int] = mapped_column(Integer, default=0)

    def __repr__(self) -> str:
        return f"<DestinationSnapshot items={self.item_count}>"
