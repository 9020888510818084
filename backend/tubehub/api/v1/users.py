"""User account and session endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from tubehub.api.cookies import attach_auth_cookies, clear_auth_cookies, extract_refresh_token
from tubehub.api.deps import (
    current_user_id,
    get_auth_service,
    get_identity_service,
    json_response,
    require_auth,
    timing,
)
from tubehub.schemas import (
    AvatarSchema,
    ChangePasswordSchema,
    CoverImageSchema,
    LoginSchema,
    RegisterSchema,
    TokenPairSchema,
    UpdateAccountSchema,
    UserSchema,
)
from tubehub.services.auth.dto import LoginIn, RefreshIn
from tubehub.services.identity.dto import UserPasswordChangeIn, UserRegisterIn, UserUpdateIn

bp = Blueprint("users", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
update_account_schema = UpdateAccountSchema()
change_password_schema = ChangePasswordSchema()
avatar_schema = AvatarSchema()
cover_image_schema = CoverImageSchema()
user_schema = UserSchema()
token_schema = TokenPairSchema()


@bp.post("/register")
@timing
def register():
    """Create an account and return its public representation."""

    data = register_schema.load(request.get_json(silent=True) or {})
    user = get_identity_service().register_user(UserRegisterIn(**data))
    return json_response(
        {"data": user_schema.dump(user), "message": "User registered successfully"},
        status=201,
    )


@bp.post("/login")
@timing
def login():
    """Verify credentials, issue a token pair and set both auth cookies."""

    data = login_schema.load(request.get_json(silent=True) or {})
    result = get_auth_service().login(
        LoginIn(identifiers=LoginSchema.identifiers(data), password=data["password"])
    )
    body = {
        "data": {"user": user_schema.dump(result.user), **token_schema.dump(result.tokens)},
        "message": "User logged in successfully",
    }
    return attach_auth_cookies(json_response(body), result.tokens)


@bp.post("/logout")
@require_auth
@timing
def logout():
    """Clear the stored refresh token and both auth cookies."""

    get_auth_service().logout(current_user_id())
    return clear_auth_cookies(json_response({"data": {}, "message": "User logged out"}))


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Rotate the refresh token and reset both auth cookies."""

    pair = get_auth_service().refresh(RefreshIn(refresh_token=extract_refresh_token(request)))
    body = {"data": token_schema.dump(pair), "message": "Access token refreshed"}
    return attach_auth_cookies(json_response(body), pair)


@bp.get("/current-user")
@require_auth
@timing
def current_user():
    """Return the authenticated user's profile."""

    user = get_identity_service().get_user(current_user_id())
    return json_response({"data": user_schema.dump(user)})


@bp.post("/change-password")
@require_auth
@timing
def change_password():
    """Change the password; the stored refresh token is cleared."""

    data = change_password_schema.load(request.get_json(silent=True) or {})
    get_identity_service().change_password(
        UserPasswordChangeIn(user_id=current_user_id(), **data)
    )
    return json_response({"data": {}, "message": "Password changed successfully"})


@bp.patch("/update-account")
@require_auth
@timing
def update_account():
    """Replace full name and email of the authenticated user."""

    data = update_account_schema.load(request.get_json(silent=True) or {})
    user = get_identity_service().update_account(current_user_id(), UserUpdateIn(**data))
    return json_response(
        {"data": user_schema.dump(user), "message": "Account details updated successfully"}
    )


@bp.patch("/update-avatar")
@require_auth
@timing
def update_avatar():
    data = avatar_schema.load(request.get_json(silent=True) or {})
    user = get_identity_service().update_avatar(current_user_id(), data["avatar_url"])
    return json_response(
        {"data": user_schema.dump(user), "message": "Avatar image updated successfully"}
    )


@bp.patch("/update-cover-image")
@require_auth
@timing
def update_cover_image():
    data = cover_image_schema.load(request.get_json(silent=True) or {})
    user = get_identity_service().update_cover_image(current_user_id(), data["cover_image_url"])
    return json_response(
        {"data": user_schema.dump(user), "message": "Cover image updated successfully"}
    )
