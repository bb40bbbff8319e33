"""Client-side synchronisation of the remote reviews collection."""
from .client import ReviewClient
from .errors import (
    ConcurrentWriteError,
    NetworkError,
    ReviewSyncError,
    ServerError,
    ValidationError,
)
from .manager import ReviewManager
from .store import ImageAttachment, ReviewStore
from .view import build_view

__all__ = [
    "ReviewClient",
    "ReviewManager",
    "ReviewStore",
    "ImageAttachment",
    "build_view",
    "ReviewSyncError",
    "ValidationError",
    "NetworkError",
    "ServerError",
    "ConcurrentWriteError",
]
