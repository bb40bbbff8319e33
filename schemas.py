# schemas.py
from __future__ import annotations
from typing import Dict, Any, List, Optional

REVIEW_FIELDS = ("text", "reviewerName", "rating")
DEFAULT_RATING = 1
RATING_MIN, RATING_MAX = 1, 5  # input hints only, the API owns the real check

def _as_str(x: Any) -> str:
    return "" if x is None else str(x)

def _present(x: Any) -> bool:
    # same truthiness the form uses: "" and None are missing, "  " is not
    return x is not None and x != ""

def normalize_review(raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalises one review object from the API.
    - id comes from `id` or, for Mongo-backed servers, `_id`
    - reviewerName/text guaranteed strings
    - rating is kept exactly as the server sent it
    - image is the server URL or None
    """
    if not isinstance(raw, dict):
        raise ValueError(f"expected a review object, got {type(raw).__name__}")
    r = dict(raw)
    rid = r.get("id")
    if rid is None:
        rid = r.get("_id")
    return {
        "id": _as_str(rid),
        "reviewerName": _as_str(r.get("reviewerName")),
        "text": _as_str(r.get("text")),
        "rating": r.get("rating"),
        "image": r.get("image") or None,
    }

def normalize_reviews(payload: Any) -> List[Dict[str, Any]]:
    if not isinstance(payload, list):
        raise ValueError(f"expected a JSON array of reviews, got {type(payload).__name__}")
    return [normalize_review(r) for r in payload]

def empty_draft() -> Dict[str, Any]:
    return {"text": "", "reviewerName": "", "rating": DEFAULT_RATING}

def draft_from_review(review: Dict[str, Any]) -> Dict[str, Any]:
    """Edit draft seeded from a listed record (keeps the id, drops the image URL)."""
    draft = {k: review.get(k) for k in REVIEW_FIELDS}
    draft["id"] = review.get("id")
    return draft

def missing_create_fields(draft: Dict[str, Any], image: Optional[Any]) -> List[str]:
    missing = [k for k in ("text", "reviewerName") if not _present(draft.get(k))]
    if image is None:
        missing.append("image")
    return missing

def missing_update_fields(draft: Dict[str, Any]) -> List[str]:
    return [k for k in ("text", "reviewerName") if not _present(draft.get(k))]

def form_fields(draft: Dict[str, Any]) -> Dict[str, str]:
    """Text parts of a multipart write; rating goes out as typed, no clamping."""
    return {k: _as_str(draft.get(k)) for k in REVIEW_FIELDS}
