"""Sync job model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, UUIDMixin, TimestampMixin, TenantMixin


class SyncJob(UUIDMixin, TimestampMixin, TenantMixin, Base):
    """One sync run across every site of an organization."""

    __tablename__ = "sync_job"

    status: Mapped[str] = mapped_column(
        String(20), default="queued", index=True
    )  # queued/running/success/partial/failed
    trigger: Mapped[str] = mapped_column(String(20), default="manual")  # manual/cron
    created_by: Mapped[str | None] = mapped_column(String(200), default=None)
    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=None, nullable=True
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=None, nullable=True
    )

    logs: Mapped[list["JobLog"]] = relationship(  # noqa: F821
        back_populates="job",
        cascade="all, delete-orphan",
        order_by="JobLog.created_at",
    )

    def __repr__(self) -> str:
        return f"<SyncJob {self.status}>"
