# app/review.py
from __future__ import annotations

from flask import Blueprint, current_app, flash, g, jsonify, redirect, render_template, request, url_for

from app.session_manager import current_manager, load_session, persist_session
from review_sync import ImageAttachment, build_view

bp = Blueprint("reviews", __name__, url_prefix="/reviews", template_folder="templates")

FORM_FIELDS = ("reviewerName", "text", "rating")

bp.before_request(load_session)
bp.after_request(persist_session)

def _back():
    return redirect(url_for("reviews.index"))

# ------------------------ Views ------------------------

@bp.route("/")
def index():
    """The review screen: error line, create/edit form, one card per review."""
    mgr = current_manager()
    # initial load only; an error on screen waits for the Refresh button
    if not mgr.store.loaded and mgr.store.last_error is None:
        mgr.refresh()
    settings = current_app.config["REVIEWS_SETTINGS"]
    view = build_view(mgr.store.snapshot(), placeholder_image=settings.placeholder_image)
    return render_template("reviews/index.html", view=view)

@bp.route("/submit", methods=["POST"])
def submit():
    mgr = current_manager()
    fields = {k: request.form[k] for k in FORM_FIELDS if k in request.form}
    if fields:
        mgr.store.update_draft(**fields)

    upload = request.files.get("image")
    if upload and upload.filename:
        mgr.store.attach_image(ImageAttachment(
            filename=upload.filename,
            content=upload.read(),
            content_type=upload.mimetype or "application/octet-stream",
        ))

    was_editing = mgr.store.editing
    if mgr.submit():
        flash("Review updated" if was_editing else "Review created", "success")
    return _back()

@bp.route("/<path:review_id>/edit", methods=["POST"])
def edit(review_id: str):
    current_manager().begin_edit(review_id)
    return _back()

@bp.route("/cancel", methods=["POST"])
def cancel():
    current_manager().cancel_edit()
    return _back()

@bp.route("/<path:review_id>/delete", methods=["POST"])
def delete(review_id: str):
    if current_manager().delete(review_id):
        flash("Review deleted", "success")
    return _back()

@bp.route("/refresh", methods=["POST"])
def refresh():
    current_manager().refresh()
    return _back()

@bp.get("/api/state")
def api_state():
    """JSON view of this browser's store (handy for front-end polling)."""
    snap = current_manager().store.snapshot()
    return jsonify({"ok": True, "session_id": g.session_id, "state": snap})
