"""Content types (schemas) and the content items built against them."""

from __future__ import annotations

import uuid

from sqlalchemy import JSON, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, UUIDMixin, TimestampMixin, TenantMixin

CONTENT_STATUSES = ("draft", "published", "archived")


class ContentType(UUIDMixin, TimestampMixin, TenantMixin, Base):
    """Ordered list of field descriptors that shapes ContentItem.data."""

    __tablename__ = "content_type"
    __table_args__ = (
        UniqueConstraint("organization_id", "slug", name="uq_content_type_org_slug"),
    )

    name: Mapped[str] = mapped_column(String(200))
    slug: Mapped[str] = mapped_column(String(100), index=True)
    schema: Mapped[list] = mapped_column(JSON, default=list)

    items: Mapped[list[ContentItem]] = relationship(
        back_populates="content_type", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<ContentType {self.slug!r}>"


class ContentItem(UUIDMixin, TimestampMixin, TenantMixin, Base):
    __tablename__ = "content_item"

    content_type_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("content_type.id", ondelete="CASCADE"), index=True
    )
    title: Mapped[str] = mapped_column(String(300))
    data: Mapped[dict] = mapped_column(JSON, default=dict)
    status: Mapped[str] = mapped_column(String(20), default="draft")  # draft/published/archived

    content_type: Mapped[ContentType] = relationship(back_populates="items")

    def __repr__(self) -> str:
        return f"<ContentItem {self.title!r} [{self.status}]>"
