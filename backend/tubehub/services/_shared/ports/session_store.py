from __future__ import annotations

import threading
from typing import Protocol


class SessionStore(Protocol):
    """
    Server-side record of each user's single current refresh token.

    Holding at most one token per user means a new login or a rotation
    silently invalidates the previous refresh token.
    """

    def set_refresh_token(self, user_id: int, token: str | None) -> None:
        """Overwrite the stored token; ``None`` clears it."""

    def get_refresh_token(self, user_id: int) -> str | None:
        """Return the stored token, or ``None`` when unset or the user is gone."""

    def rotate_refresh_token(self, user_id: int, current: str, replacement: str) -> bool:
        """
        Atomically replace ``current`` with ``replacement``.

        :returns: ``False`` if the stored token no longer equals ``current``.
        """


class InMemorySessionStore(SessionStore):
    """
    Dict-backed session store for unit tests.

    .. note::
       Uses a threading lock to make rotation a true compare-and-set.
    """

    def __init__(self, initial: dict[int, str | None] | None = None) -> None:
        self._tokens: dict[int, str | None] = dict(initial or {})
        self._lock = threading.Lock()
        self.writes = 0

    def set_refresh_token(self, user_id: int, token: str | None) -> None:
        with self._lock:
            self._tokens[user_id] = token
            self.writes += 1

    def get_refresh_token(self, user_id: int) -> str | None:
        with self._lock:
            return self._tokens.get(user_id)

    def rotate_refresh_token(self, user_id: int, current: str, replacement: str) -> bool:
        with self._lock:
            if self._tokens.get(user_id) != current:
                return False
            self._tokens[user_id] = replacement
            self.writes += 1
            return True
