"""Repository package exposing persistence-layer access for domain models."""

from __future__ import annotations

from tubehub.repositories.base import BaseRepository
from tubehub.repositories.user import UserRepository

__all__ = ["BaseRepository", "UserRepository"]
