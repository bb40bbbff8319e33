import pytest
import requests

from review_sync import build_view
from review_sync.manager import CREATE_REQUIRED, UPDATE_REQUIRED, LIST_FAILED, BUSY_MESSAGE
from tests.conftest import LIST_URL, CREATE_URL, review

def _calls(api):
    return [(h.method, h.url) for h in api.request_history]

def _cards(manager):
    return build_view(manager.store.snapshot())["cards"]

# ---------- create ----------

def test_create_scenario_on_empty_collection(api, manager, image):
    api.post(CREATE_URL, status_code=201, json={"message": "created"})
    api.get(LIST_URL, json=[review("1", "Ann", "Great!", 5)])
    manager.store.update_draft(text="Great!", reviewerName="Ann", rating=5)
    manager.store.attach_image(image)

    assert manager.create() is True
    assert _calls(api) == [("POST", CREATE_URL), ("GET", LIST_URL)]
    cards = _cards(manager)
    assert len(cards) == 1
    assert (cards[0]["reviewerName"], cards[0]["text"], cards[0]["rating_label"]) == ("Ann", "Great!", "Rating: 5")
    # draft and image are reset, error cleared
    assert manager.store.draft_new == {"text": "", "reviewerName": "", "rating": 1}
    assert manager.store.pending_image is None
    assert manager.store.last_error is None

@pytest.mark.parametrize("missing", ["text", "reviewerName", "image"])
def test_create_with_missing_field_sends_nothing(api, manager, image, missing):
    fields = {"text": "Great!", "reviewerName": "Ann"}
    fields.pop(missing, None)
    manager.store.update_draft(**fields)
    if missing != "image":
        manager.store.attach_image(image)

    assert manager.create() is False
    assert api.call_count == 0
    assert manager.store.last_error == CREATE_REQUIRED

def test_create_failure_keeps_draft_and_image(api, manager, image):
    api.post(CREATE_URL, status_code=400, json={"message": "Image too large"})
    manager.store.update_draft(text="Great!", reviewerName="Ann", rating=5)
    manager.store.attach_image(image)

    assert manager.create() is False
    assert manager.store.last_error == "Error creating review: Image too large"
    assert manager.store.draft_new["text"] == "Great!"
    assert manager.store.pending_image is image
    assert _calls(api) == [("POST", CREATE_URL)]  # no refresh after a failed write

def test_create_failure_without_server_message_uses_fallback(api, manager, image):
    api.post(CREATE_URL, status_code=500, text="Internal Server Error")
    manager.store.update_draft(text="Great!", reviewerName="Ann")
    manager.store.attach_image(image)
    manager.create()
    assert manager.store.last_error == "Error creating review: Failed to create review"

def test_successful_write_then_failed_refresh_reports_fetch_error(api, manager, image):
    api.post(CREATE_URL, status_code=201, json={})
    api.get(LIST_URL, status_code=503, json={"message": "down"})
    manager.store.update_draft(text="Great!", reviewerName="Ann")
    manager.store.attach_image(image)
    assert manager.create() is True
    assert manager.store.last_error == LIST_FAILED

# ---------- update ----------

def test_update_without_new_image_keeps_server_image(api, manager):
    api.get(LIST_URL, [
        {"json": [review("42", "Ann", "Old", 5, image="https://cdn.example.com/42.jpg")]},
        {"json": [review("42", "Ann", "Edited", 4, image="https://cdn.example.com/42.jpg")]},
    ])
    api.put(f"{LIST_URL}/42", json={})
    manager.refresh()
    assert manager.begin_edit("42") is True
    manager.store.update_draft(text="Edited", rating=4)

    assert manager.update() is True
    put = api.request_history[1]
    assert put.method == "PUT" and put.url == f"{LIST_URL}/42"
    assert b'name="image"' not in put.body
    assert b"Edited" in put.body
    assert manager.store.reviews[0]["image"] == "https://cdn.example.com/42.jpg"
    assert manager.store.editing is False and manager.store.draft_edit is None

def test_update_sends_new_image_when_attached(api, manager, image):
    api.get(LIST_URL, json=[review("42")])
    api.put(f"{LIST_URL}/42", json={})
    manager.refresh()
    manager.begin_edit("42")
    manager.store.attach_image(image)
    assert manager.update() is True
    assert b'filename="fileA.jpg"' in api.request_history[1].body
    assert manager.store.pending_image is None

@pytest.mark.parametrize("blank", ["text", "reviewerName"])
def test_update_with_missing_field_sends_nothing(api, manager, blank):
    api.get(LIST_URL, json=[review("42")])
    manager.refresh()
    manager.begin_edit("42")
    manager.store.update_draft(**{blank: ""})
    before = api.call_count

    assert manager.update() is False
    assert api.call_count == before
    assert manager.store.last_error == UPDATE_REQUIRED

def test_update_failure_stays_in_edit_mode(api, manager):
    api.get(LIST_URL, json=[review("42")])
    api.put(f"{LIST_URL}/42", status_code=404, json={"message": "Review not found"})
    manager.refresh()
    manager.begin_edit("42")
    manager.store.update_draft(text="Edited")

    assert manager.update() is False
    assert manager.store.last_error == "Error updating review: Review not found"
    assert manager.store.editing is True
    assert manager.store.draft_edit["text"] == "Edited"

# ---------- delete ----------

def test_delete_then_refresh_drops_card(api, manager):
    api.get(LIST_URL, [{"json": [review("41"), review("42")]}, {"json": [review("41")]}])
    api.delete(f"{LIST_URL}/42", status_code=204)
    manager.refresh()
    assert [c["id"] for c in _cards(manager)] == ["41", "42"]

    assert manager.delete("42") is True
    assert [c["id"] for c in _cards(manager)] == ["41"]
    assert _calls(api)[-2:] == [("DELETE", f"{LIST_URL}/42"), ("GET", LIST_URL)]

def test_delete_while_unreachable_keeps_card(api, manager):
    api.get(LIST_URL, json=[review("42")])
    api.delete(f"{LIST_URL}/42", exc=requests.exceptions.ConnectionError("unreachable"))
    manager.refresh()

    assert manager.delete("42") is False
    assert manager.store.last_error.startswith("Error deleting review: Network request failed")
    assert [c["id"] for c in _cards(manager)] == ["42"]

def test_delete_server_failure_uses_fallback(api, manager):
    api.delete(f"{LIST_URL}/42", status_code=500)
    manager.delete("42")
    assert manager.store.last_error == "Error deleting review: Failed to delete review"

# ---------- list ----------

def test_refresh_twice_renders_identically(api, manager):
    api.get(LIST_URL, json=[review("1"), review("2", "Bob", "Meh", 2, image=None)])
    manager.refresh()
    first = build_view(manager.store.snapshot())
    manager.refresh()
    assert build_view(manager.store.snapshot()) == first

def test_refresh_failure_leaves_reviews_untouched(api, manager):
    api.get(LIST_URL, [{"json": [review("1")]}, {"status_code": 500, "json": {"message": "db down"}}])
    manager.refresh()
    assert manager.refresh() is False
    assert [r["id"] for r in manager.store.reviews] == ["1"]
    assert manager.store.last_error == LIST_FAILED

def test_error_is_overwritten_not_accumulated(api, manager):
    api.get(LIST_URL, status_code=500)
    manager.create()
    manager.refresh()
    assert manager.store.last_error == LIST_FAILED

# ---------- single flight / mode ----------

def test_second_write_while_busy_is_rejected(api, manager, image):
    seen = {}

    def during_post(request, context):
        seen["busy"] = manager.store.busy
        seen["second"] = manager.delete("1")
        seen["error"] = manager.store.last_error
        context.status_code = 201
        return {}

    api.post(CREATE_URL, json=during_post)
    api.get(LIST_URL, json=[])
    manager.store.update_draft(text="Great!", reviewerName="Ann")
    manager.store.attach_image(image)

    assert manager.create() is True
    assert seen == {"busy": True, "second": False, "error": BUSY_MESSAGE}
    assert "DELETE" not in [h.method for h in api.request_history]
    assert manager.store.busy is False

def test_submit_dispatches_by_mode(api, manager, image):
    api.get(LIST_URL, json=[review("42")])
    api.put(f"{LIST_URL}/42", json={})
    api.post(CREATE_URL, json={})
    manager.refresh()
    manager.begin_edit("42")
    manager.submit()
    manager.store.update_draft(text="New", reviewerName="Bea")
    manager.store.attach_image(image)
    manager.submit()
    assert [h.method for h in api.request_history if h.method != "GET"] == ["PUT", "POST"]

def test_begin_edit_unknown_id(manager):
    assert manager.begin_edit("nope") is False
    assert manager.store.last_error == "Review nope not found"
    assert manager.store.editing is False

def test_cancel_edit_discards_draft_and_image(api, manager, image):
    api.get(LIST_URL, json=[review("42")])
    manager.refresh()
    manager.begin_edit("42")
    manager.store.attach_image(image)
    manager.cancel_edit()
    assert manager.store.editing is False
    assert manager.store.draft_edit is None
    assert manager.store.pending_image is None

def test_refresh_with_malformed_entries_reports_fetch_error(api, manager):
    api.get(LIST_URL, [{"json": [review("1")]}, {"json": [1]}])
    manager.refresh()
    assert manager.refresh() is False
    assert manager.store.last_error == LIST_FAILED
    assert [r["id"] for r in manager.store.reviews] == ["1"]

def test_update_without_selected_review_sends_nothing(api, manager):
    assert manager.update() is False
    assert manager.store.last_error == "No review selected for editing"
    assert api.call_count == 0
