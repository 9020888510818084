"""
tubehub.services._shared.ports
==============================

Collection of *ports* (hexagonal interfaces) that the authentication
services depend on.

Modules
-------
- :mod:`token_codec`:
    Defines :class:`~.TokenCodec`, :class:`~.TokenKind` and
    :class:`~.IssuedToken`: signing and validation of access/refresh tokens.

- :mod:`session_store`:
    Defines :class:`~.SessionStore`: single refresh token per user, with
    atomic rotation.

- :mod:`user_directory`:
    Defines :class:`~.UserDirectory` and :class:`~.DirectoryUser`: account
    lookups by identifier or id.

Concrete adapters live under ``tubehub.infra``; the ``InMemory*`` classes
are test doubles.
"""

from __future__ import annotations

from .session_store import InMemorySessionStore, SessionStore
from .token_codec import IssuedToken, TokenCodec, TokenKind
from .user_directory import DirectoryUser, InMemoryUserDirectory, UserDirectory

__all__ = [
    "TokenCodec",
    "TokenKind",
    "IssuedToken",
    "SessionStore",
    "InMemorySessionStore",
    "UserDirectory",
    "DirectoryUser",
    "InMemoryUserDirectory",
]
