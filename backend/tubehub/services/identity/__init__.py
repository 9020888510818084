"""Account registration, profile and password management."""

from .dto import UserPasswordChangeIn, UserPublicOut, UserRegisterIn, UserUpdateIn
from .service import IdentityService

__all__ = [
    "IdentityService",
    "UserRegisterIn",
    "UserUpdateIn",
    "UserPasswordChangeIn",
    "UserPublicOut",
]
