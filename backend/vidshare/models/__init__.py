from vidshare.models.user import User

__all__ = ["User"]
