"""Append-only audit log for sync jobs."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, UUIDMixin


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobLog(UUIDMixin, Base):
    """Audit trail entry for a sync job."""

    __tablename__ = "job_log"

    job_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("sync_job.id", ondelete="CASCADE"), index=True
    )
    level: Mapped[str] = mapped_column(String(10), default="info")  # info/warn/error
    message: Mapped[str] = mapped_column(Text)
    site_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("site.id", ondelete="SET NULL"), default=None
    )
    content_item_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("content_item.id", ondelete="SET NULL"), default=None
    )
    payload: Mapped[dict | None] = mapped_column(JSON, default=None)
    # Client-side default keeps sub-second ordering on SQLite.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, index=True
    )

    job: Mapped["SyncJob"] = relationship(back_populates="logs")  # noqa: F821

    def __repr__(self) -> str:
        return f"<JobLog [{self.level}] {self.message[:40]!r}>"
