# review_sync/store.py
from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from schemas import draft_from_review, empty_draft

CREATING = "creating"
EDITING = "editing"


@dataclass(frozen=True)
class ImageAttachment:
    """Binary image picked for the next create/update; never part of a draft."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


class ReviewStore:
    """
    Central UI state for the review screen.

    Owns the listed records, both draft buffers, the pending image and the
    transient flags. Callers change it only through the named methods below;
    the view reads `snapshot()`.
    """

    def __init__(self):
        self.reviews: List[Dict[str, Any]] = []
        self.draft_new: Dict[str, Any] = empty_draft()
        self.draft_edit: Optional[Dict[str, Any]] = None
        self.pending_image: Optional[ImageAttachment] = None
        self.mode: str = CREATING
        self.busy: bool = False
        self.last_error: Optional[str] = None
        self.loaded: bool = False

    # ---------- records ----------
    def replace_reviews(self, reviews: List[Dict[str, Any]]) -> None:
        self.reviews = list(reviews)
        self.loaded = True

    def find(self, review_id: str) -> Optional[Dict[str, Any]]:
        for r in self.reviews:
            if r.get("id") == review_id:
                return r
        return None

    # ---------- flags ----------
    def set_error(self, message: str) -> None:
        self.last_error = message

    def clear_error(self) -> None:
        self.last_error = None

    def set_busy(self, busy: bool) -> None:
        self.busy = busy

    # ---------- drafts ----------
    @property
    def editing(self) -> bool:
        return self.mode == EDITING

    def active_draft(self) -> Dict[str, Any]:
        if self.editing and self.draft_edit is not None:
            return self.draft_edit
        return self.draft_new

    def update_draft(self, **fields: Any) -> None:
        """Write fields into whichever buffer the current mode binds."""
        self.active_draft().update(fields)

    def reset_new_draft(self) -> None:
        self.draft_new = empty_draft()

    def begin_edit(self, record: Dict[str, Any]) -> None:
        self.draft_edit = draft_from_review(record)
        self.mode = EDITING

    def end_edit(self) -> None:
        self.draft_edit = None
        self.mode = CREATING

    def attach_image(self, image: ImageAttachment) -> None:
        self.pending_image = image

    def clear_image(self) -> None:
        self.pending_image = None

    def snapshot(self) -> Dict[str, Any]:
        return {
            "reviews": copy.deepcopy(self.reviews),
            "draft_new": dict(self.draft_new),
            "draft_edit": dict(self.draft_edit) if self.draft_edit is not None else None,
            "pending_image": self.pending_image.filename if self.pending_image else None,
            "mode": self.mode,
            "busy": self.busy,
            "last_error": self.last_error,
            "loaded": self.loaded,
        }
