"""Cross-origin access for the cookie-authenticated API."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from tubehub.core.logger import REQUEST_ID_HEADER


def parse_origins(raw: str | None) -> list[str]:
    """Split a comma separated ``CORS_ORIGINS`` value; ``"*"`` means any origin."""

    origins = [o.strip() for o in (raw or "").split(",") if o.strip()]
    return [] if origins == ["*"] else origins


def init_app(app: Flask) -> None:
    """Enable CORS on ``/api/*``.

    Browsers only send the auth cookies cross-origin when credentials are
    allowed, which in turn requires explicit origins. With no origin list
    any origin is accepted and credentials stay disabled.
    """
    origins = parse_origins(app.config.get("CORS_ORIGINS"))
    CORS(
        app,
        resources={r"/api/*": {"origins": origins or "*"}},
        supports_credentials=bool(origins),
        expose_headers=[REQUEST_ID_HEADER],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
