"""SQLAlchemy models registered on the shared metadata."""

from lof_auth.models.refresh_token import RefreshToken
from lof_auth.models.user import User

__all__ = [
    "RefreshToken",
    "User",
]
