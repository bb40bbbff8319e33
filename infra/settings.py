# infra/settings.py
"""
Runtime configuration for the review manager.

Values come from the environment (optionally a local .env file). Call
`load_settings()` at the point of use so tests can override the environment.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    api_url: str = "http://localhost:5000"
    api_token: str = ""
    timeout: float = 30.0
    token_cookie: str = "token"
    placeholder_image: str = "https://via.placeholder.com/150"
    secret_key: str = "dev"
    log_level: str = "INFO"
    port: int = 8000
    max_sessions: int = 500


def load_settings() -> Settings:
    return Settings(
        api_url=os.getenv("REVIEWS_API_URL", Settings.api_url).rstrip("/"),
        api_token=os.getenv("REVIEWS_API_TOKEN", Settings.api_token),
        timeout=float(os.getenv("REVIEWS_API_TIMEOUT", str(Settings.timeout))),
        token_cookie=os.getenv("REVIEWS_TOKEN_COOKIE", Settings.token_cookie),
        placeholder_image=os.getenv("REVIEWS_PLACEHOLDER_IMAGE", Settings.placeholder_image),
        secret_key=os.getenv("FLASK_SECRET_KEY", Settings.secret_key),
        log_level=os.getenv("LOG_LEVEL", Settings.log_level).upper(),
        port=int(os.getenv("PORT", str(Settings.port))),
        max_sessions=int(os.getenv("REVIEWS_MAX_SESSIONS", str(Settings.max_sessions))),
    )


def configure_logging(level: str | None = None) -> None:
    """Root logging setup shared by the web app and the CLI."""
    logging.basicConfig(level=level or load_settings().log_level, format=LOG_FORMAT)
