"""
review_sync/manager.py

Runs the four remote operations against a ReviewStore:
- refresh(): full list replacement (never patched locally)
- create()/update()/delete(): one write, then exactly one refresh on success
- every failure collapses to store.last_error; drafts survive failures

Writes are single-flight per manager: while one is in flight `busy` is set and
a second write is rejected without touching the network.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Optional

from schemas import missing_create_fields, missing_update_fields
from .client import ReviewClient
from .errors import (
    ConcurrentWriteError,
    ReviewSyncError,
    ServerError,
    ValidationError,
)
from .store import ReviewStore

logger = logging.getLogger(__name__)

LIST_FAILED = "Failed to fetch reviews"
CREATE_REQUIRED = "Text, reviewer name, and image are required"
UPDATE_REQUIRED = "Text and reviewer name are required for update"
BUSY_MESSAGE = "Another review operation is already in progress"


def _describe(err: ReviewSyncError, fallback: str) -> str:
    if isinstance(err, ServerError):
        return err.message or fallback
    return str(err) or fallback


class ReviewManager:
    def __init__(self, client: ReviewClient, store: Optional[ReviewStore] = None):
        self.client = client
        self.store = store or ReviewStore()
        self._write_lock = threading.Lock()

    # ---------- helpers ----------

    @contextmanager
    def _single_flight(self):
        if not self._write_lock.acquire(blocking=False):
            raise ConcurrentWriteError(BUSY_MESSAGE)
        self.store.set_busy(True)
        try:
            yield
        finally:
            self.store.set_busy(False)
            self._write_lock.release()

    def _fail(self, err: ReviewSyncError, prefix: str = "", fallback: str = "") -> bool:
        if isinstance(err, (ValidationError, ConcurrentWriteError)) or not prefix:
            message = str(err)
        else:
            message = f"{prefix}: {_describe(err, fallback)}"
        logger.error(message)
        self.store.set_error(message)
        return False

    # ---------- read ----------

    def refresh(self) -> bool:
        try:
            reviews = self.client.list_reviews()
        except ReviewSyncError as e:
            logger.error("Fetching reviews failed: %s", e)
            self.store.set_error(LIST_FAILED)
            return False
        self.store.replace_reviews(reviews)
        logger.debug("Loaded %d review(s)", len(reviews))
        return True

    # ---------- writes ----------

    def create(self) -> bool:
        store = self.store
        draft, image = dict(store.draft_new), store.pending_image
        missing = missing_create_fields(draft, image)
        if missing:
            return self._fail(ValidationError(CREATE_REQUIRED, missing))
        try:
            with self._single_flight():
                self.client.create_review(draft, image)
                logger.info("Created review by %s", draft["reviewerName"])
                store.reset_new_draft()
                store.clear_image()
                store.clear_error()
                self.refresh()
        except ReviewSyncError as e:
            return self._fail(e, "Error creating review", "Failed to create review")
        return True

    def update(self) -> bool:
        store = self.store
        if store.draft_edit is None:
            return self._fail(ValidationError("No review selected for editing"))
        draft, image = dict(store.draft_edit), store.pending_image
        missing = missing_update_fields(draft)
        if missing:
            return self._fail(ValidationError(UPDATE_REQUIRED, missing))
        review_id = draft.pop("id")
        try:
            with self._single_flight():
                self.client.update_review(review_id, draft, image)
                logger.info("Updated review %s", review_id)
                store.end_edit()
                store.clear_image()
                store.clear_error()
                self.refresh()
        except ReviewSyncError as e:
            return self._fail(e, "Error updating review", "Failed to update review")
        return True

    def delete(self, review_id: str) -> bool:
        try:
            with self._single_flight():
                self.client.delete_review(review_id)
                logger.info("Deleted review %s", review_id)
                self.store.clear_error()
                self.refresh()
        except ReviewSyncError as e:
            return self._fail(e, "Error deleting review", "Failed to delete review")
        return True

    def submit(self) -> bool:
        """The form's single button: update while editing, create otherwise."""
        return self.update() if self.store.editing else self.create()

    # ---------- mode ----------

    def begin_edit(self, review_id: str) -> bool:
        record = self.store.find(review_id)
        if record is None:
            return self._fail(ValidationError(f"Review {review_id} not found"))
        self.store.begin_edit(record)
        return True

    def cancel_edit(self) -> None:
        self.store.end_edit()
        self.store.clear_image()

    def close(self) -> None:
        """Release the HTTP connection pool; the store stays readable."""
        self.client.close()
