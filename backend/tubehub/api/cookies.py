"""Auth cookie transport: reading and writing the token cookies."""

from __future__ import annotations

from flask import Request, Response, current_app

from tubehub.services.auth.dto import TokenPairOut

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"
REFRESH_BODY_FIELD = "refreshToken"


def _cookie_options() -> dict[str, object]:
    cfg = current_app.config
    return {
        "httponly": True,
        "secure": bool(cfg.get("AUTH_COOKIE_SECURE", True)),
        "samesite": cfg.get("AUTH_COOKIE_SAMESITE", "Lax"),
        "path": cfg.get("AUTH_COOKIE_PATH", "/"),
    }


def _non_blank(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def extract_refresh_token(req: Request) -> str | None:
    """
    Return the presented refresh token, cookie first, then JSON body.

    A body that is not a JSON object, or a field that is not a string, counts
    as absent.
    """
    cookie = _non_blank(req.cookies.get(REFRESH_COOKIE))
    if cookie is not None:
        return cookie
    body = req.get_json(silent=True)
    if isinstance(body, dict) and REFRESH_BODY_FIELD in body:
        return _non_blank(body[REFRESH_BODY_FIELD])
    return None


def extract_access_token(req: Request) -> str | None:
    """Return the access token from its cookie or an ``Authorization: Bearer`` header."""
    cookie = _non_blank(req.cookies.get(ACCESS_COOKIE))
    if cookie is not None:
        return cookie
    scheme, _, credentials = req.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer":
        return _non_blank(credentials.strip())
    return None


def attach_auth_cookies(response: Response, pair: TokenPairOut) -> Response:
    """Set both token cookies; each ``Max-Age`` matches its token lifetime."""
    options = _cookie_options()
    response.set_cookie(
        ACCESS_COOKIE, pair.access_token, max_age=pair.access_max_age, **options
    )
    response.set_cookie(
        REFRESH_COOKIE, pair.refresh_token, max_age=pair.refresh_max_age, **options
    )
    return response


def clear_auth_cookies(response: Response) -> Response:
    """Expire both token cookies using the attributes they were set with."""
    options = _cookie_options()
    response.delete_cookie(ACCESS_COOKIE, **options)
    response.delete_cookie(REFRESH_COOKIE, **options)
    return response
