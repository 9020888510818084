# tubehub/services/auth/service.py
from __future__ import annotations

import hmac
import logging

from tubehub.infra.security.password_verifier import PasswordVerifier
from tubehub.services._shared.base import BaseService
from tubehub.services._shared.errors import (
    InternalFailureError,
    InvalidCredentialsError,
    TokenExpiredError,
    TokenInvalidError,
    UnauthorizedError,
    UserNotFoundError,
)
from tubehub.services._shared.ports.session_store import SessionStore
from tubehub.services._shared.ports.token_codec import TokenCodec, TokenKind
from tubehub.services._shared.ports.user_directory import DirectoryUser, UserDirectory
from tubehub.services.auth.dto import LoginIn, LoginOut, RefreshIn, TokenPairOut

log = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Authentication lifecycle service (login / refresh / logout).

    Single-session model: the session store holds at most one refresh token
    per user. Login overwrites it, refresh rotates it and logout clears it.
    Access tokens are stateless and only expire.
    """

    def __init__(
        self,
        *,
        directory: UserDirectory,
        session_store: SessionStore,
        token_codec: TokenCodec,
        verifier: PasswordVerifier | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param directory: Account lookups by identifier or id.
        :param session_store: Per-user refresh token storage.
        :param token_codec: Issues and validates signed tokens.
        :param verifier: Password checker; defaults to :class:`PasswordVerifier`.
        """
        super().__init__()
        self.directory = directory
        self.sessions = session_store
        self.tokens = token_codec
        self.verifier = verifier or PasswordVerifier()

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _issue_pair(self, user: DirectoryUser) -> TokenPairOut:
        """
        Sign a new access/refresh pair.

        :raises InternalFailureError: If signing fails for any reason.
        """
        try:
            access = self.tokens.issue(
                user.id,
                TokenKind.ACCESS,
                {"email": user.email, "username": user.username},
            )
            refresh = self.tokens.issue(user.id, TokenKind.REFRESH)
        except Exception as exc:
            log.error(
                "Token issuance failed", exc_info=True, extra={"user_id": user.id}
            )
            raise InternalFailureError("Something went wrong while generating tokens") from exc

        return TokenPairOut(
            access_token=access.token,
            refresh_token=refresh.token,
            access_max_age=int(self.tokens.lifetime(TokenKind.ACCESS).total_seconds()),
            refresh_max_age=int(self.tokens.lifetime(TokenKind.REFRESH).total_seconds()),
        )

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Authenticate credentials and issue a fresh token pair.

        The new refresh token overwrites any previous one, which ends every
        other session of the user.

        :param dto: Login input.
        :returns: Token pair and the public user view.
        :raises UserNotFoundError: No account matches the identifier.
        :raises InvalidCredentialsError: Password mismatch; the store is untouched.
        :raises InternalFailureError: Signing or storage failed; nothing persisted.
        """
        user = self.directory.find_by_identifier(*dto.identifiers)
        if user is None:
            log.info("Login rejected: unknown identifier", extra={"reason": "user_not_found"})
            raise UserNotFoundError()

        if not self.verifier.verify(dto.password, user.password_hash):
            log.info(
                "Login rejected: bad password",
                extra={"user_id": user.id, "reason": "invalid_credentials"},
            )
            raise InvalidCredentialsError()

        pair = self._issue_pair(user)
        self.sessions.set_refresh_token(user.id, pair.refresh_token)

        log.info("User logged in", extra={"user_id": user.id})
        return LoginOut(tokens=pair, user=user.to_public())

    # ------------------------------------------------------------------ #
    # Refresh with rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Exchange the current refresh token for a new pair.

        Security
        --------
        - The presented token must be validly signed with the refresh secret,
          unexpired, and byte-equal to the stored one.
        - Rotation is a compare-and-set in the store; of two concurrent
          refreshes with the same token exactly one succeeds.
        - Every failure is reported as :class:`UnauthorizedError`.
        """
        presented = dto.refresh_token
        if not presented or not presented.strip():
            raise UnauthorizedError("Unauthorized request")

        try:
            subject = self.tokens.validate(presented, TokenKind.REFRESH)
        except TokenExpiredError as exc:
            log.info("Refresh rejected: token expired", extra={"reason": "expired"})
            raise UnauthorizedError("Refresh token is expired") from exc
        except TokenInvalidError as exc:
            log.warning("Refresh rejected: token invalid", extra={"reason": "invalid"})
            raise UnauthorizedError("Invalid refresh token") from exc

        try:
            user_id = int(subject)
        except ValueError as exc:
            raise UnauthorizedError("Invalid refresh token") from exc

        user = self.directory.get(user_id)
        if user is None:
            log.warning(
                "Refresh rejected: user gone", extra={"user_id": user_id, "reason": "no_user"}
            )
            raise UnauthorizedError("Invalid refresh token")

        stored = self.sessions.get_refresh_token(user.id)
        if stored is None or not hmac.compare_digest(
            stored.encode("utf-8"), presented.encode("utf-8")
        ):
            log.warning(
                "Refresh rejected: token superseded or used",
                extra={"user_id": user.id, "reason": "mismatch"},
            )
            raise UnauthorizedError("Refresh token is expired or used")

        pair = self._issue_pair(user)
        if not self.sessions.rotate_refresh_token(user.id, presented, pair.refresh_token):
            log.warning(
                "Refresh rejected: concurrent rotation",
                extra={"user_id": user.id, "reason": "race"},
            )
            raise UnauthorizedError("Refresh token is expired or used")

        log.info("Refresh token rotated", extra={"user_id": user.id})
        return pair

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, user_id: int) -> None:
        """
        Clear the stored refresh token unconditionally.

        Access tokens already issued stay valid until they expire.
        """
        self.sessions.set_refresh_token(user_id, None)
        log.info("User logged out", extra={"user_id": user_id})
