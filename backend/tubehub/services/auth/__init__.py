"""Authentication lifecycle: login, refresh rotation and logout."""

from .dto import LoginIn, LoginOut, RefreshIn, TokenPairOut
from .service import AuthService

__all__ = ["AuthService", "LoginIn", "LoginOut", "RefreshIn", "TokenPairOut"]
