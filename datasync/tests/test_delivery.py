"""Tests for delivery transports."""

from __future__ import annotations

import json
import uuid

import httpx
import pytest

from datasync.engine.delivery import HttpDeliverer, LocalDeliverer, raise_for_response
from datasync.engine.errors import DeliveryError, DeliveryRejected, SignatureRejected
from datasync.engine.store import SiteRecord
from datasync.security.signing import sign
from datasync.services.receiver_svc import MemorySink

SITE = SiteRecord(
    id=uuid.uuid4(),
    organization_id=uuid.uuid4(),
    name="Facebook",
    slug="facebook",
    destination_url="https://fb.example.com/api/sync",
    destination_secret="fb-secret",
)
PAYLOAD = {"headline": "Hello"}
BODY = {"payload": PAYLOAD, "signature": sign(PAYLOAD, "fb-secret"), "campaign": "facebook"}


def _client(status_code: int, json_body=None, text: str | None = None) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url == httpx.URL(SITE.destination_url)
        if text is not None:
            return httpx.Response(status_code, text=text)
        return httpx.Response(status_code, json=json_body)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_http_delivery_success_returns_receipt():
    async with _client(200, {"success": True, "message": "ok"}) as client:
        receipt = await HttpDeliverer(client).deliver(SITE, BODY)
    assert receipt == {"success": True, "message": "ok"}


@pytest.mark.asyncio
async def test_http_delivery_sends_wire_body():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(json.loads(request.content))
        return httpx.Response(200, json={"success": True})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        await HttpDeliverer(client).deliver(SITE, BODY)
    assert seen == BODY


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status_code,exc_type",
    [(401, SignatureRejected), (400, DeliveryRejected), (500, DeliveryError), (503, DeliveryError)],
)
async def test_http_delivery_error_statuses(status_code, exc_type):
    async with _client(status_code, {"success": False, "error": "nope"}) as client:
        with pytest.raises(exc_type) as info:
            await HttpDeliverer(client).deliver(SITE, BODY)
    assert info.value.status_code == status_code
    assert str(info.value) == "nope"


@pytest.mark.asyncio
async def test_http_delivery_non_json_error_body():
    async with _client(502, text="Bad Gateway") as client:
        with pytest.raises(DeliveryError, match="Bad Gateway"):
            await HttpDeliverer(client).deliver(SITE, BODY)


@pytest.mark.asyncio
async def test_http_transport_error_wrapped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(DeliveryError, match="ConnectError"):
            await HttpDeliverer(client).deliver(SITE, BODY)


def test_success_flag_false_is_an_error():
    with pytest.raises(DeliveryError, match="quota"):
        raise_for_response(200, {"success": False, "error": "quota"})
    raise_for_response(200, {"success": True})
    raise_for_response(204, None)


@pytest.mark.asyncio
async def test_local_delivery_stores_in_sink():
    sink = MemorySink()
    receipt = await LocalDeliverer(sink).deliver(SITE, BODY)

    assert receipt["success"] is True
    assert sink.documents["facebook"]["headline"] == "Hello"


@pytest.mark.asyncio
async def test_local_delivery_rejects_wrong_key():
    body = {**BODY, "signature": sign(PAYLOAD, "other")}
    with pytest.raises(SignatureRejected):
        await LocalDeliverer().deliver(SITE, body)
