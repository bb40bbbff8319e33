# tests/conftest.py
import sys, pathlib
import pytest
import requests_mock

# Put repo root on sys.path so 'app', 'review_sync', 'schemas', etc. import cleanly.
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from infra.settings import load_settings
from review_sync import ImageAttachment, ReviewClient, ReviewManager

BASE = "https://reviews.example.com"
LIST_URL = f"{BASE}/api/reviews"
CREATE_URL = f"{BASE}/api/reviews/create"

@pytest.fixture(autouse=True)
def _env_isolation(monkeypatch):
    monkeypatch.setenv("REVIEWS_API_URL", BASE)
    monkeypatch.setenv("REVIEWS_API_TOKEN", "test-token")
    monkeypatch.setenv("REVIEWS_API_TIMEOUT", "5")
    monkeypatch.setenv("FLASK_SECRET_KEY", "test")
    monkeypatch.delenv("REVIEWS_TOKEN_COOKIE", raising=False)
    monkeypatch.delenv("REVIEWS_PLACEHOLDER_IMAGE", raising=False)
    return

@pytest.fixture
def api():
    """Mocked reviews API; every test registers the responses it needs."""
    with requests_mock.Mocker() as m:
        yield m

@pytest.fixture
def image():
    return ImageAttachment(filename="fileA.jpg", content=b"\xff\xd8fake-jpeg", content_type="image/jpeg")

@pytest.fixture
def manager():
    return ReviewManager(ReviewClient(BASE, lambda: "test-token", timeout=5))

@pytest.fixture
def settings():
    return load_settings()

@pytest.fixture
def web(settings):
    from app.app import create_app
    app = create_app(settings)
    app.config["TESTING"] = True
    return app.test_client()

def review(rid, name="Ann", text="Great!", rating=5, image="https://cdn.example.com/a.jpg", key="_id"):
    return {key: rid, "reviewerName": name, "text": text, "rating": rating, "image": image}
