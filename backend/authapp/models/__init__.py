from authapp.models.user import User

__all__ = ["User"]
