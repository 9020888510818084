"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from flask import Flask, current_app
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

from tubehub.infra.jwt.pyjwt_token_codec import JWTTokenCodec, TokenCodecConfig

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)

TOKEN_CODEC_KEY = "token_codec"


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy and the token codec.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. The token codec is built
        once from an explicit :class:`TokenCodecConfig` and stored in
        ``app.extensions`` so request handlers never read secrets from
        process-wide state.

    Raises
    ------
    RuntimeError
        If the token configuration is unusable (empty or shared secrets).
    """
    db.init_app(app)

    # Ensure models are imported so metadata is complete
    from tubehub import models as _models  # noqa: F401

    try:
        codec = JWTTokenCodec(TokenCodecConfig.from_mapping(app.config))
    except ValueError as exc:
        raise RuntimeError(f"Invalid token configuration: {exc}") from exc
    app.extensions[TOKEN_CODEC_KEY] = codec


def get_token_codec() -> JWTTokenCodec:
    """Return the token codec bound to the current application."""
    codec = current_app.extensions.get(TOKEN_CODEC_KEY)
    if codec is None:
        raise RuntimeError("Token codec is not initialized. Call init_app() first.")
    return codec
