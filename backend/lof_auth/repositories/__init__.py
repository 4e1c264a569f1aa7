"""Repository package exposing persistence-layer access for the auth models."""

from __future__ import annotations

from lof_auth.repositories.base import BaseRepository
from lof_auth.repositories.refresh_token import RefreshTokenRepository
from lof_auth.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "RefreshTokenRepository",
    "UserRepository",
]
