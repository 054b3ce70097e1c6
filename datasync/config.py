"""DataSync configuration via pydantic-settings."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings


class DataSyncSettings(BaseSettings):
    environment: str = "development"
    database_url: str = "sqlite+aiosqlite:///datasync.db"
    echo_sql: bool = False
    app_title: str = "DataSync"
    log_level: str = "INFO"

    tenant_auth_required: bool = False
    tenant_access_tokens: str = ""
    tenant_token_header: str = "X-Org-Token"

    # Sync engine
    sync_fault_probability: float = 0.15
    sync_fault_pause_seconds: float = 0.5
    sync_site_timeout_seconds: float = 30.0  # 0 = no budget
    sync_collapse_policy: str = "first"  # first/merge
    sync_delivery_mode: str = "http"  # http/local
    sync_http_timeout_seconds: float = 10.0
    sync_payload_version: str = "1.0"

    # Destination receiver
    receiver_allowed_campaigns: str = "facebook,google,instagram"
    receiver_secrets: str = ""
    receiver_output_dir: str = "data/landing-pages"

    model_config = {"env_prefix": "DATASYNC_", "env_file": ".env", "extra": "ignore"}

    @property
    def base_dir(self) -> Path:
        return Path(__file__).resolve().parent

    @property
    def project_dir(self) -> Path:
        return self.base_dir.parent

    @property
    def receiver_dir(self) -> Path:
        path = Path(self.receiver_output_dir)
        if not path.is_absolute():
            path = self.project_dir / path
        return path

    @property
    def tenant_access_tokens_map(self) -> dict[str, str]:
        """Parse comma-separated slug:token pairs."""
        return _parse_pairs(self.tenant_access_tokens)

    @property
    def receiver_secrets_map(self) -> dict[str, str]:
        """Parse comma-separated campaign:secret pairs."""
        return _parse_pairs(self.receiver_secrets)

    @property
    def receiver_campaigns(self) -> list[str]:
        return [c.strip() for c in self.receiver_allowed_campaigns.split(",") if c.strip()]

    @property
    def site_timeout(self) -> float | None:
        return self.sync_site_timeout_seconds if self.sync_site_timeout_seconds > 0 else None

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() in {"prod", "production"}


def _parse_pairs(raw: str) -> dict[str, str]:
    mapping: dict[str, str] = {}
    if not raw.strip():
        return mapping

    for item in raw.split(","):
        pair = item.strip()
        if not pair or ":" not in pair:
            continue
        key, value = pair.split(":", 1)
        key = key.strip()
        value = value.strip()
        if key and value:
            mapping[key] = value
    return mapping


settings = DataSyncSettings()
