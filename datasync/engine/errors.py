"""Exceptions raised by the sync engine."""

from __future__ import annotations


class SyncError(Exception):
    """Base class for sync engine failures."""


class DeliveryError(SyncError):
    """A destination did not accept a delivery."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DeliveryRejected(DeliveryError):
    """The destination rejected the request as malformed (4xx)."""


class SignatureRejected(DeliveryError):
    """The destination could not verify the payload signature (401)."""

    def __init__(self, message: str = "Invalid signature"):
        super().__init__(message, status_code=401)


class JobNotFound(SyncError):
    pass


class InvalidJobTransition(SyncError):
    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot move sync job from {current!r} to {target!r}")
        self.current = current
        self.target = target
