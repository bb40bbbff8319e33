# review_sync/view.py
from __future__ import annotations
from typing import Dict, Any, List

from schemas import RATING_MIN, RATING_MAX

HEADING = "Review Management"
PLACEHOLDER_IMAGE = "https://via.placeholder.com/150"

def _card(review: Dict[str, Any], placeholder: str) -> Dict[str, Any]:
    return {
        "id": review.get("id"),
        "reviewerName": review.get("reviewerName", ""),
        "text": review.get("text", ""),
        "rating_label": f"Rating: {review.get('rating')}",
        "image": review.get("image") or placeholder,
        "alt": review.get("reviewerName", ""),
    }

def build_view(snapshot: Dict[str, Any], placeholder_image: str = PLACEHOLDER_IMAGE) -> Dict[str, Any]:
    """
    Pure mapping of a store snapshot to what the page shows.
    The draft bound to the form is picked by mode; cards keep list order.
    """
    editing = snapshot.get("mode") == "editing" and snapshot.get("draft_edit") is not None
    draft = snapshot["draft_edit"] if editing else snapshot.get("draft_new") or {}
    busy = bool(snapshot.get("busy"))

    if busy:
        button = "Processing..."
    else:
        button = "Update Review" if editing else "Create Review"

    cards: List[Dict[str, Any]] = [_card(r, placeholder_image) for r in snapshot.get("reviews") or []]
    return {
        "heading": HEADING,
        "error": snapshot.get("last_error") or None,
        "form": {
            "title": "Edit Review" if editing else "Create New Review",
            "button": button,
            "disabled": busy,
            "editing": editing,
            "review_id": draft.get("id") if editing else None,
            "reviewerName": draft.get("reviewerName") or "",
            "text": draft.get("text") or "",
            "rating": "" if draft.get("rating") is None else draft.get("rating"),
            "rating_min": RATING_MIN,
            "rating_max": RATING_MAX,
            "image_name": snapshot.get("pending_image"),
        },
        "cards": cards,
    }
