#!/usr/bin/env python3
"""
manage_reviews.py

Command line access to the reviews API, driving the same ReviewManager the
web screen uses (same validation, same refresh-after-write).

Examples:
    manage-reviews list
    manage-reviews create --text "Great!" --reviewer Ann --rating 5 --image ann.jpg
    manage-reviews update 42 --text "Edited" --rating 4
    manage-reviews delete 42

Configuration comes from REVIEWS_API_URL / REVIEWS_API_TOKEN (see infra/settings.py).
"""

from __future__ import annotations

import argparse
import mimetypes
import sys
from pathlib import Path
from typing import List, Optional

from infra.settings import configure_logging, load_settings
from review_sync import ImageAttachment, ReviewClient, ReviewManager


def _read_image(path: Optional[str]) -> Optional[ImageAttachment]:
    if not path:
        return None
    p = Path(path)
    content_type = mimetypes.guess_type(p.name)[0] or "application/octet-stream"
    return ImageAttachment(filename=p.name, content=p.read_bytes(), content_type=content_type)


def _draft_fields(args: argparse.Namespace) -> dict:
    fields = {"text": args.text, "reviewerName": args.reviewer, "rating": args.rating}
    return {k: v for k, v in fields.items() if v is not None}


def _print_reviews(mgr: ReviewManager) -> None:
    reviews = mgr.store.reviews
    if not reviews:
        print("No reviews.")
        return
    for r in reviews:
        print(f"{r['id']}\t{r['reviewerName']}\tRating: {r['rating']}\t{r['text']}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage reviews on the remote reviews API.")
    parser.add_argument("--api-url", default=None,
                        help="Base URL of the API (overrides REVIEWS_API_URL).")
    parser.add_argument("--token", default=None,
                        help="Bearer token (overrides REVIEWS_API_TOKEN).")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List all reviews.")

    create = sub.add_parser("create", help="Create a review (text, reviewer and image required).")
    create.add_argument("--text", required=True)
    create.add_argument("--reviewer", required=True)
    create.add_argument("--rating", default="1", help="Sent as given; the API validates 1-5.")
    create.add_argument("--image", required=True, help="Path to the image file.")

    update = sub.add_parser("update", help="Update a review; omitted fields keep their current value.")
    update.add_argument("review_id")
    update.add_argument("--text")
    update.add_argument("--reviewer")
    update.add_argument("--rating")
    update.add_argument("--image", help="Replace the stored image with this file.")

    delete = sub.add_parser("delete", help="Delete a review.")
    delete.add_argument("review_id")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    configure_logging(settings.log_level)

    api_url = args.api_url or settings.api_url
    token = args.token if args.token is not None else settings.api_token
    mgr = ReviewManager(ReviewClient(api_url, lambda: token, timeout=settings.timeout))
    store = mgr.store

    if args.command == "list":
        ok = mgr.refresh()
    elif args.command == "create":
        store.update_draft(**_draft_fields(args))
        store.attach_image(_read_image(args.image))
        ok = mgr.create()
    elif args.command == "update":
        # seed the edit draft from the server copy, then apply the flags
        ok = mgr.refresh() and mgr.begin_edit(args.review_id)
        if ok:
            store.update_draft(**_draft_fields(args))
            image = _read_image(args.image)
            if image is not None:
                store.attach_image(image)
            ok = mgr.update()
    else:
        ok = mgr.delete(args.review_id)

    if not ok:
        print(f"❌ {store.last_error}", file=sys.stderr)
        return 1
    _print_reviews(mgr)
    if store.last_error:
        # write went through but the follow-up refresh did not
        print(f"ℹ️ {store.last_error}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
