"""Transports that hand a signed payload to a destination."""

from __future__ import annotations

from typing import Any, Protocol

import httpx

from ..services.receiver_svc import DestinationReceiver, MemorySink, SnapshotSink
from .errors import DeliveryError, DeliveryRejected, SignatureRejected
from .store import SiteRecord


class Deliverer(Protocol):
    async def deliver(self, site: SiteRecord, body: dict[str, Any]) -> dict[str, Any]:
        """Deliver ``{payload, signature, campaign}``; raise DeliveryError on refusal."""
        ...


def raise_for_response(status_code: int, body: Any) -> None:
    """Translate a receiver status/body pair into the delivery error taxonomy."""
    if 200 <= status_code < 300:
        if isinstance(body, dict) and body.get("success") is False:
            raise DeliveryError(str(body.get("error") or "Destination reported failure"), status_code)
        return

    message = f"Destination responded {status_code}"
    if isinstance(body, dict) and body.get("error"):
        message = str(body["error"])
    if status_code == 401:
        raise SignatureRejected(message)
    if 400 <= status_code < 500:
        raise DeliveryRejected(message, status_code)
    raise DeliveryError(message, status_code)


class HttpDeliverer:
    """POSTs the wire body as JSON to each site's ``destination_url``."""

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float = 10.0):
        self._client = client
        self._timeout = timeout

    async def deliver(self, site: SiteRecord, body: dict[str, Any]) -> dict[str, Any]:
        if self._client is not None:
            return await self._post(self._client, site, body)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await self._post(client, site, body)

    async def _post(
        self, client: httpx.AsyncClient, site: SiteRecord, body: dict[str, Any]
    ) -> dict[str, Any]:
        try:
            resp = await client.post(site.destination_url, json=body)
        except httpx.HTTPError as exc:
            raise DeliveryError(f"{type(exc).__name__}: {exc}") from exc

        try:
            data = resp.json()
        except ValueError:
            data = {"error": resp.text[:200]} if resp.text else {}
        raise_for_response(resp.status_code, data)
        return data if isinstance(data, dict) else {}


class LocalDeliverer:
    """Delivers to an in-process receiver that trusts each site's own slug and secret."""

    def __init__(self, sink: SnapshotSink | None = None):
        self.sink = sink or MemorySink()

    async def deliver(self, site: SiteRecord, body: dict[str, Any]) -> dict[str, Any]:
        receiver = DestinationReceiver(
            allowed_campaigns=[site.slug],
            secrets={site.slug: site.destination_secret},
            sink=self.sink,
        )
        response = await receiver.handle(body)
        raise_for_response(response.status_code, response.body)
        return response.body
