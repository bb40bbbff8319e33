# review_sync/errors.py
from __future__ import annotations
from typing import Optional


class ReviewSyncError(Exception):
    """Base for every failure the review manager surfaces as its last error."""


class ValidationError(ReviewSyncError):
    """Required draft fields missing; raised before any request is sent."""

    def __init__(self, message: str, missing: Optional[list] = None):
        super().__init__(message)
        self.missing = list(missing or [])


class NetworkError(ReviewSyncError):
    """Request could not be sent, or the response could not be parsed."""


class ServerError(ReviewSyncError):
    """Non-2xx response. `message` is the server's own text when it sent one."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        super().__init__(message or f"HTTP {status_code}")
        self.status_code = status_code
        self.message = message


class ConcurrentWriteError(ReviewSyncError):
    """A second write was attempted while another one is still in flight."""
