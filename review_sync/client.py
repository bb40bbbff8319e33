"""
review_sync/client.py

Thin HTTP client for the remote reviews API:
- GET    {base}/api/reviews          -> JSON array of reviews
- POST   {base}/api/reviews/create   -> multipart text/reviewerName/rating/image
- PUT    {base}/api/reviews/{id}     -> multipart, image part only when replacing it
- DELETE {base}/api/reviews/{id}

Every request carries `Authorization: Bearer <token>`; the token is read from a
provider callable at request time so it can come from the browser cookie.
Exactly one attempt per call: transport failures become NetworkError, non-2xx
responses become ServerError with the server's `message` when present.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

import requests

from schemas import form_fields, normalize_reviews
from .errors import NetworkError, ServerError

logger = logging.getLogger(__name__)

COLLECTION_PATH = "/api/reviews"


def _server_message(r: requests.Response) -> Optional[str]:
    try:
        body = r.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return None


class ReviewClient:
    def __init__(self, base_url: str, token_provider: Callable[[], Optional[str]],
                 timeout: float = 30, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        self.timeout = timeout
        self._session = session or requests.Session()

    def _item_path(self, review_id: str) -> str:
        # the id is always its own path segment
        return f"{COLLECTION_PATH}/{quote(str(review_id), safe='')}"

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        headers = {"Authorization": f"Bearer {self.token_provider() or ''}"}
        logger.debug("%s %s", method, url)
        try:
            r = self._session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise NetworkError(f"Network request failed: {e}") from e
        if not r.ok:
            raise ServerError(r.status_code, _server_message(r))
        return r

    @staticmethod
    def _multipart(draft: Dict[str, Any], image=None) -> Dict[str, tuple]:
        # (None, value) parts keep the body multipart even without a file
        parts = {k: (None, v) for k, v in form_fields(draft).items()}
        if image is not None:
            parts["image"] = (image.filename, image.content, image.content_type)
        return parts

    # ---------- operations ----------

    def list_reviews(self) -> List[Dict[str, Any]]:
        r = self._request("GET", COLLECTION_PATH)
        try:
            return normalize_reviews(r.json())
        except ValueError as e:
            raise NetworkError(f"Could not parse reviews response: {e}") from e

    def create_review(self, draft: Dict[str, Any], image) -> None:
        self._request("POST", f"{COLLECTION_PATH}/create", files=self._multipart(draft, image))

    def update_review(self, review_id: str, draft: Dict[str, Any], image=None) -> None:
        self._request("PUT", self._item_path(review_id), files=self._multipart(draft, image))

    def delete_review(self, review_id: str) -> None:
        self._request("DELETE", self._item_path(review_id))

    def close(self) -> None:
        self._session.close()
