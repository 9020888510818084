# tests/unit/services/test_auth_service.py
from __future__ import annotations

import logging
import threading
from datetime import timedelta

import pytest
from werkzeug.security import generate_password_hash

from tubehub.infra.jwt.pyjwt_token_codec import JWTTokenCodec, TokenCodecConfig
from tubehub.services._shared.errors import (
    InternalFailureError,
    InvalidCredentialsError,
    UnauthorizedError,
    UserNotFoundError,
)
from tubehub.services._shared.ports import (
    DirectoryUser,
    InMemorySessionStore,
    InMemoryUserDirectory,
    TokenKind,
)
from tubehub.services.auth.dto import LoginIn, LoginOut, RefreshIn, TokenPairOut
from tubehub.services.auth.service import AuthService

PASSWORD = "correct horse"


class FailingCodec(JWTTokenCodec):
    """Codec whose signing always fails."""

    def issue(self, user_id, kind, additional_claims=None):
        raise RuntimeError("signer unavailable")


def _codec_config() -> TokenCodecConfig:
    return TokenCodecConfig(
        access_secret="svc-access-secret-0123456789abcdef",
        refresh_secret="svc-refresh-secret-0123456789abcdef",
        access_lifetime=timedelta(minutes=15),
        refresh_lifetime=timedelta(days=10),
    )


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def ana() -> DirectoryUser:
    return DirectoryUser(
        id=1,
        email="ana@example.com",
        username="ana",
        full_name="Ana Lopez",
        password_hash=generate_password_hash(PASSWORD, method="pbkdf2:sha256:1000"),
    )


@pytest.fixture()
def directory(ana) -> InMemoryUserDirectory:
    return InMemoryUserDirectory([ana])


@pytest.fixture()
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture()
def codec() -> JWTTokenCodec:
    return JWTTokenCodec(_codec_config())


@pytest.fixture()
def service(directory, store, codec) -> AuthService:
    """Build an AuthService wired to in-memory doubles and a real codec."""
    return AuthService(directory=directory, session_store=store, token_codec=codec)


# ------------------------------- Login ------------------------------------ #
class TestLogin:
    def test_issues_pair_and_stores_refresh_token(self, service, store, codec):
        out = service.login(LoginIn(identifiers=("ana@example.com",), password=PASSWORD))

        assert isinstance(out, LoginOut)
        assert store.get_refresh_token(1) == out.refresh_token
        assert codec.validate(out.access_token, TokenKind.ACCESS) == "1"
        assert codec.validate(out.refresh_token, TokenKind.REFRESH) == "1"
        assert out.tokens.access_max_age == 15 * 60
        assert out.tokens.refresh_max_age == 10 * 24 * 3600

    def test_public_user_has_no_secrets(self, service):
        out = service.login(LoginIn(identifiers=("ana",), password=PASSWORD))

        assert out.user.id == 1
        assert out.user.username == "ana"
        assert not hasattr(out.user, "password_hash")
        assert not hasattr(out.user, "refresh_token")

    def test_login_by_username_any_case(self, service):
        out = service.login(LoginIn(identifiers=("ANA",), password=PASSWORD))
        assert out.user.email == "ana@example.com"

    def test_matching_email_wins_over_unknown_username(self, service):
        out = service.login(
            LoginIn(identifiers=("ana@example.com", "nobody"), password=PASSWORD)
        )
        assert out.user.id == 1

    def test_unknown_user(self, service, store):
        with pytest.raises(UserNotFoundError):
            service.login(LoginIn(identifiers=("ghost@example.com",), password=PASSWORD))
        assert store.writes == 0

    def test_wrong_password_leaves_store_unchanged(self, service, store):
        store.set_refresh_token(1, "previous-token")

        with pytest.raises(InvalidCredentialsError):
            service.login(LoginIn(identifiers=("ana",), password="wrong"))

        assert store.get_refresh_token(1) == "previous-token"

    def test_second_login_supersedes_first(self, service, store):
        first = service.login(LoginIn(identifiers=("ana",), password=PASSWORD))
        second = service.login(LoginIn(identifiers=("ana",), password=PASSWORD))

        assert first.refresh_token != second.refresh_token
        assert store.get_refresh_token(1) == second.refresh_token
        with pytest.raises(UnauthorizedError):
            service.refresh(RefreshIn(refresh_token=first.refresh_token))

    def test_signing_failure_persists_nothing(self, directory, store):
        service = AuthService(
            directory=directory, session_store=store, token_codec=FailingCodec(_codec_config())
        )

        with pytest.raises(InternalFailureError):
            service.login(LoginIn(identifiers=("ana",), password=PASSWORD))

        assert store.writes == 0
        assert store.get_refresh_token(1) is None


# ------------------------------ Refresh ----------------------------------- #
class TestRefresh:
    def test_rotates_and_invalidates_previous(self, service, store, codec):
        first = service.login(LoginIn(identifiers=("ana",), password=PASSWORD))

        pair = service.refresh(RefreshIn(refresh_token=first.refresh_token))

        assert isinstance(pair, TokenPairOut)
        assert pair.refresh_token != first.refresh_token
        assert store.get_refresh_token(1) == pair.refresh_token
        assert codec.validate(pair.access_token, TokenKind.ACCESS) == "1"

        with pytest.raises(UnauthorizedError):
            service.refresh(RefreshIn(refresh_token=first.refresh_token))
        # A rejected replay does not disturb the live session
        assert store.get_refresh_token(1) == pair.refresh_token

    def test_chain_of_rotations(self, service):
        current = service.login(LoginIn(identifiers=("ana",), password=PASSWORD)).refresh_token
        for _ in range(3):
            current = service.refresh(RefreshIn(refresh_token=current)).refresh_token
        assert service.refresh(RefreshIn(refresh_token=current)).refresh_token

    @pytest.mark.parametrize("token", [None, "", "   "])
    def test_missing_token(self, service, token):
        with pytest.raises(UnauthorizedError):
            service.refresh(RefreshIn(refresh_token=token))

    def test_access_token_is_not_a_refresh_token(self, service):
        out = service.login(LoginIn(identifiers=("ana",), password=PASSWORD))
        with pytest.raises(UnauthorizedError):
            service.refresh(RefreshIn(refresh_token=out.access_token))

    def test_garbage_token_logged_as_warning(self, service, caplog):
        with caplog.at_level(logging.INFO, logger="tubehub.services.auth.service"):
            with pytest.raises(UnauthorizedError):
                service.refresh(RefreshIn(refresh_token="garbage"))
        assert any(
            r.levelno == logging.WARNING and getattr(r, "reason", None) == "invalid"
            for r in caplog.records
        )

    def test_expired_token(self, service, store, freeze_time, caplog):
        with freeze_time("2024-01-01 12:00:00") as frozen:
            out = service.login(LoginIn(identifiers=("ana",), password=PASSWORD))
            frozen.tick(timedelta(days=10, seconds=1))
            with caplog.at_level(logging.INFO, logger="tubehub.services.auth.service"):
                with pytest.raises(UnauthorizedError, match="expired"):
                    service.refresh(RefreshIn(refresh_token=out.refresh_token))

        assert store.get_refresh_token(1) == out.refresh_token
        assert any(
            r.levelno == logging.INFO and getattr(r, "reason", None) == "expired"
            for r in caplog.records
        )

    def test_user_deleted(self, service, directory):
        out = service.login(LoginIn(identifiers=("ana",), password=PASSWORD))
        directory.remove(1)

        with pytest.raises(UnauthorizedError):
            service.refresh(RefreshIn(refresh_token=out.refresh_token))

    def test_after_logout(self, service):
        out = service.login(LoginIn(identifiers=("ana",), password=PASSWORD))
        service.logout(1)

        with pytest.raises(UnauthorizedError):
            service.refresh(RefreshIn(refresh_token=out.refresh_token))

    def test_signing_failure_keeps_stored_token(self, directory, store, codec):
        ok = AuthService(directory=directory, session_store=store, token_codec=codec)
        out = ok.login(LoginIn(identifiers=("ana",), password=PASSWORD))
        broken = AuthService(
            directory=directory, session_store=store, token_codec=FailingCodec(_codec_config())
        )

        with pytest.raises(InternalFailureError):
            broken.refresh(RefreshIn(refresh_token=out.refresh_token))

        assert store.get_refresh_token(1) == out.refresh_token

    def test_lost_rotation_race(self, service, store, monkeypatch):
        out = service.login(LoginIn(identifiers=("ana",), password=PASSWORD))
        monkeypatch.setattr(store, "rotate_refresh_token", lambda *a, **k: False)

        with pytest.raises(UnauthorizedError):
            service.refresh(RefreshIn(refresh_token=out.refresh_token))

    def test_concurrent_refresh_single_winner(self, service, store):
        out = service.login(LoginIn(identifiers=("ana",), password=PASSWORD))
        results: list[str] = []
        barrier = threading.Barrier(4)

        def _attempt() -> None:
            barrier.wait()
            try:
                pair = service.refresh(RefreshIn(refresh_token=out.refresh_token))
            except UnauthorizedError:
                results.append("rejected")
            else:
                results.append(pair.refresh_token)

        threads = [threading.Thread(target=_attempt) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        winners = [r for r in results if r != "rejected"]
        assert len(winners) == 1
        assert store.get_refresh_token(1) == winners[0]


# ------------------------------- Logout ----------------------------------- #
class TestLogout:
    def test_clears_stored_token(self, service, store):
        service.login(LoginIn(identifiers=("ana",), password=PASSWORD))
        service.logout(1)
        assert store.get_refresh_token(1) is None

    def test_idempotent(self, service, store):
        service.logout(1)
        service.logout(1)
        assert store.get_refresh_token(1) is None

    def test_access_token_survives_logout(self, service, codec):
        out = service.login(LoginIn(identifiers=("ana",), password=PASSWORD))
        service.logout(1)
        assert codec.validate(out.access_token, TokenKind.ACCESS) == "1"
