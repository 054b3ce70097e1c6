"""Destination receiver: validates signed sync deliveries and stores them."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Protocol

from ..security.signing import verify

logger = logging.getLogger(__name__)


@dataclass
class ReceiverResponse:
    status_code: int
    body: dict[str, Any]


class SnapshotSink(Protocol):
    async def store(self, campaign: str, data: dict[str, Any]) -> None: ...

    async def load(self, campaign: str) -> dict[str, Any] | None: ...


@dataclass
class MemorySink:
    """Keeps the last stored document per campaign in memory."""

    documents: dict[str, dict[str, Any]] = field(default_factory=dict)

    async def store(self, campaign: str, data: dict[str, Any]) -> None:
        self.documents[campaign] = data

    async def load(self, campaign: str) -> dict[str, Any] | None:
        return self.documents.get(campaign)


class FileSink:
    """Writes ``<root>/<campaign>/data.json`` for static landing pages."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def path_for(self, campaign: str) -> Path:
        return self.root / campaign / "data.json"

    async def store(self, campaign: str, data: dict[str, Any]) -> None:
        target = self.path_for(campaign)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    async def load(self, campaign: str) -> dict[str, Any] | None:
        target = self.path_for(campaign)
        if not target.is_file():
            return None
        return json.loads(target.read_text(encoding="utf-8"))


class DestinationReceiver:
    """Accepts ``{payload, signature, campaign}`` bodies.

    ``secrets`` maps each campaign to the shared key its payloads are signed
    with. A campaign outside ``allowed_campaigns`` is rejected even if a
    secret is configured for it.
    """

    def __init__(
        self,
        allowed_campaigns: list[str] | tuple[str, ...],
        secrets: Mapping[str, str],
        sink: SnapshotSink,
    ):
        self.allowed_campaigns = list(allowed_campaigns)
        self.secrets = dict(secrets)
        self.sink = sink

    async def handle(self, body: Any) -> ReceiverResponse:
        try:
            if not isinstance(body, dict) or _missing_fields(body):
                return _error(400, "Missing required fields: payload, signature, campaign")

            payload = body["payload"]
            signature = body["signature"]
            campaign = body["campaign"]
            if not isinstance(payload, dict):
                return _error(400, "Payload must be a JSON object")

            if campaign not in self.allowed_campaigns:
                return _error(
                    400,
                    f"Invalid campaign. Must be one of: {', '.join(self.allowed_campaigns)}",
                )

            secret = self.secrets.get(campaign)
            if not secret or not verify(payload, secret, signature):
                return _error(401, "Invalid signature")

            synced_at = datetime.now(timezone.utc).isoformat()
            document = {**payload, "synced_at": synced_at, "campaign": campaign}
            await self.sink.store(campaign, document)
        except Exception as exc:
            logger.exception("Error processing sync request")
            return ReceiverResponse(
                500,
                {"success": False, "error": "Internal server error", "details": str(exc)},
            )

        logger.info("Synced content to %s landing page", campaign)
        return ReceiverResponse(
            200,
            {
                "success": True,
                "message": f"Content synced to {campaign} landing page",
                "timestamp": synced_at,
            },
        )


def _missing_fields(body: dict[str, Any]) -> bool:
    # An empty payload object is valid: a site with nothing mapped still syncs.
    if body.get("payload") is None:
        return True
    return not body.get("signature") or not body.get("campaign")


def _error(status_code: int, message: str) -> ReceiverResponse:
    return ReceiverResponse(status_code, {"success": False, "error": message})
