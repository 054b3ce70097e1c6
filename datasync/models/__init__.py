"""DataSync models - re-exports all models and Base.metadata."""

from .base import Base, UUIDMixin, TimestampMixin, TenantMixin
from .organization import Organization
from .content import ContentType, ContentItem
from .site import Site, SiteItemMapping, DestinationSnapshot
from .sync_job import SyncJob
from .log import JobLog

__all__ = [
    "Base",
    "UUIDMixin",
    "TimestampMixin",
    "TenantMixin",
    "Organization",
    "ContentType",
    "ContentItem",
    "Site",
    "SiteItemMapping",
    "DestinationSnapshot",
    "SyncJob",
    "JobLog",
]
