"""Payload signing shared by the sync orchestrator and destination receivers.

Both sides serialize with ``canonical_json`` before computing the MAC:
keys sorted, no insignificant whitespace, non-ASCII kept as UTF-8, NaN and
Infinity rejected. Any two JSON-equal payloads therefore sign identically.
"""

from __future__ import annotations

import hashlib
import hmac
import json
from typing import Any


def canonical_json(payload: Any) -> bytes:
    return json.dumps(
        payload,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    ).encode("utf-8")


def sign(payload: Any, secret: str) -> str:
    """Return the hex HMAC-SHA256 of the canonical payload."""
    return hmac.new(secret.encode("utf-8"), canonical_json(payload), hashlib.sha256).hexdigest()


def verify(payload: Any, secret: str, signature: Any) -> bool:
    """Constant-time check of ``signature`` against the payload; never raises."""
    if not isinstance(signature, str) or not isinstance(secret, str):
        return False
    provided = signature.strip().lower()
    if provided.startswith("sha256="):
        provided = provided.split("=", 1)[1]
    try:
        expected = sign(payload, secret)
        return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))
    except (TypeError, ValueError, UnicodeError):
        return False
