# app/app.py
from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, redirect, url_for

from app.review import bp as reviews_bp
from app.session_manager import EXTENSION_KEY, SessionRegistry, manager_factory
from infra.settings import Settings, configure_logging, load_settings

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> Flask:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.config["REVIEWS_SETTINGS"] = settings
    app.extensions[EXTENSION_KEY] = SessionRegistry(manager_factory(settings), max_size=settings.max_sessions)

    # --- Register blueprint ---------------------------------------------------
    app.register_blueprint(reviews_bp)  # exposes /reviews

    @app.route("/")
    def home():
        return redirect(url_for("reviews.index"))

    @app.get("/health")
    def health():
        return "ok", 200

    logger.info("Review manager using API at %s", settings.api_url)
    return app


app = create_app()

if __name__ == "__main__":
    # 0.0.0.0 so containers expose the port
    app.run(host="0.0.0.0", port=load_settings().port, debug=True)
