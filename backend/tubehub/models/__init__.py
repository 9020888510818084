from tubehub.models.user import User

__all__ = ["User"]
