"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from datetime import timedelta
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)
_DURATION_UNITS: Final[Mapping[str, str]] = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
}

# Loads .env during development (no-op when the file is missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def parse_duration(raw: str) -> timedelta:
    """Parse a compact duration such as ``"900"``, ``"15m"``, ``"12h"`` or ``"10d"``.

    :param raw: Duration text. A bare integer means seconds.
    :type raw: str
    :returns: Parsed duration.
    :rtype: datetime.timedelta
    :raises ValueError: If the value does not match ``<int>[s|m|h|d]``.
    """
    match = _DURATION_RE.match(raw or "")
    if match is None:
        raise ValueError(f"Invalid duration: {raw!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit.lower()]: int(amount)})


def env_duration(name: str, default: str) -> timedelta:
    """Read a duration from the environment, falling back to ``default``."""
    return parse_duration(os.getenv(name) or default)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret. Not used for tokens.
    ACCESS_TOKEN_SECRET: str
        HMAC key for access tokens. Must differ from ``REFRESH_TOKEN_SECRET``.
        Read from the environment only; only development and testing carry
        built-in values.
    REFRESH_TOKEN_SECRET: str
        HMAC key for refresh tokens.
    ACCESS_TOKEN_EXPIRY: timedelta
        Access token lifetime (env ``ACCESS_TOKEN_EXPIRY``, default ``15m``).
    REFRESH_TOKEN_EXPIRY: timedelta
        Refresh token lifetime (env ``REFRESH_TOKEN_EXPIRY``, default ``10d``).
    JWT_ALGORITHM: str
        Signing algorithm shared by both token kinds.
    JWT_ISSUER: str
        ``iss`` claim stamped on and required from every token.
    AUTH_COOKIE_SECURE: bool
        Emit auth cookies with the ``Secure`` attribute.
    AUTH_COOKIE_SAMESITE: str
        ``SameSite`` attribute for auth cookies.
    AUTH_COOKIE_PATH: str
        Cookie path scope.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")

    # Tokens
    # No fallback: an unset secret stops the app at startup
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "")
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "")
    ACCESS_TOKEN_EXPIRY = env_duration("ACCESS_TOKEN_EXPIRY", "15m")
    REFRESH_TOKEN_EXPIRY = env_duration("REFRESH_TOKEN_EXPIRY", "10d")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "tubehub")

    # Cookies
    AUTH_COOKIE_SECURE = env_bool("AUTH_COOKIE_SECURE", True)
    AUTH_COOKIE_SAMESITE = os.getenv("AUTH_COOKIE_SAMESITE", "Lax")
    AUTH_COOKIE_PATH = os.getenv("AUTH_COOKIE_PATH", "/")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "dev-access-token-secret")
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "dev-refresh-token-secret")
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Pins token secrets so test runs never depend on the environment.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    ACCESS_TOKEN_SECRET = "testing-access-secret-0123456789abcdef"
    REFRESH_TOKEN_SECRET = "testing-refresh-secret-0123456789abcdef"
    ACCESS_TOKEN_EXPIRY = timedelta(minutes=15)
    REFRESH_TOKEN_EXPIRY = timedelta(days=10)
    LOG_LEVEL = "WARNING"
    CORS_ORIGINS = "http://localhost:5173"


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False
    AUTH_COOKIE_SECURE = True


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
