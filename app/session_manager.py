# app/session_manager.py
from __future__ import annotations

import logging
import threading
import uuid
from typing import Callable

from cachetools import LRUCache
from flask import current_app, g, has_request_context, request

from infra.settings import Settings
from review_sync import ReviewClient, ReviewManager

SESSION_COOKIE = "session_id"
EXTENSION_KEY = "review_sessions"
COOKIE_MAX_AGE = 60 * 60 * 24 * 365

logger = logging.getLogger(__name__)

# --------------------------- per-browser managers ---------------------------

class _ClosingLRUCache(LRUCache):
    """LRU map of managers that closes each manager it evicts."""

    def popitem(self):
        session_id, mgr = super().popitem()
        logger.debug("Evicting review session %s", session_id)
        mgr.close()
        return session_id, mgr


class SessionRegistry:
    """
    One ReviewManager (and so one store) per browser session, in process memory.

    Holds at most `max_size` sessions; the least recently used one is evicted
    and its HTTP session closed. An evicted browser starts over with a fresh store.
    """

    def __init__(self, factory: Callable[[], ReviewManager], max_size: int = 500):
        self._factory = factory
        self._managers = _ClosingLRUCache(maxsize=max(1, max_size))
        self._lock = threading.Lock()

    def get(self, session_id: str) -> ReviewManager:
        with self._lock:
            mgr = self._managers.get(session_id)
            if mgr is None:
                mgr = self._factory()
                self._managers[session_id] = mgr
            return mgr

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._managers

    def __len__(self) -> int:
        return len(self._managers)

def manager_factory(settings: Settings) -> Callable[[], ReviewManager]:
    def token() -> str:
        # browser token cookie wins; configured token is the fallback
        if has_request_context():
            return request.cookies.get(settings.token_cookie) or settings.api_token
        return settings.api_token

    def make() -> ReviewManager:
        return ReviewManager(ReviewClient(settings.api_url, token, timeout=settings.timeout))
    return make

# --------------------------- request helpers -----------------------------------

def load_session() -> None:
    """before_request hook: pick the cookie session id or mint a new one."""
    sid = request.cookies.get(SESSION_COOKIE)
    g.session_is_new = not sid
    g.session_id = sid or str(uuid.uuid4())

def persist_session(response):
    """after_request hook: hand a freshly minted id back to the browser."""
    if g.get("session_is_new"):
        response.set_cookie(SESSION_COOKIE, g.session_id, max_age=COOKIE_MAX_AGE,
                            httponly=True, samesite="Lax")
    return response

def current_manager() -> ReviewManager:
    return current_app.extensions[EXTENSION_KEY].get(g.session_id)
