"""Destination receiver endpoint for landing pages."""

from __future__ import annotations

import json

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from ..config import settings
from ..services.receiver_svc import DestinationReceiver, FileSink, SnapshotSink

router = APIRouter(prefix="/receiver", tags=["receiver"])


def get_receiver_sink() -> SnapshotSink:
    return FileSink(settings.receiver_dir)


def get_receiver(sink: SnapshotSink = Depends(get_receiver_sink)) -> DestinationReceiver:
    return DestinationReceiver(
        allowed_campaigns=settings.receiver_campaigns,
        secrets=settings.receiver_secrets_map,
        sink=sink,
    )


@router.post("/sync")
async def receive_sync(
    request: Request,
    receiver: DestinationReceiver = Depends(get_receiver),
):
    raw_body = await request.body()
    try:
        body = json.loads(raw_body.decode("utf-8")) if raw_body else None
    except (UnicodeDecodeError, json.JSONDecodeError):
        return JSONResponse(status_code=400, content={"success": False, "error": "Invalid JSON body"})

    response = await receiver.handle(body)
    return JSONResponse(status_code=response.status_code, content=response.body)


@router.get("/{campaign}")
async def get_landing_page_data(
    campaign: str,
    sink: SnapshotSink = Depends(get_receiver_sink),
):
    if campaign not in settings.receiver_campaigns:
        raise HTTPException(status_code=404, detail="Unknown campaign")
    data = await sink.load(campaign)
    if data is None:
        raise HTTPException(status_code=404, detail="No synced data yet")
    return data
