"""Refresh token persistence model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lof_auth.core.extensions import db

from .base import ReprMixin, UTCDateTime

if TYPE_CHECKING:
    from .user import User


class RefreshToken(ReprMixin, db.Model):
    """
    One live refresh session.

    The row's presence is what makes the refresh token usable: rotation,
    logout and the expiry sweep all delete rows, nothing updates them.

    Fields
    ------
    id : str
        Token identifier (``jti`` claim of the refresh token).
    user_id : int
        Owner; rows go away with the user (``ON DELETE CASCADE``).
    token : str
        Raw signed refresh token, compared verbatim on rotation.
    expires_at : datetime
        UTC expiry; indexed for the bulk sweep.
    """

    __tablename__ = "refresh_tokens"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token: Mapped[str] = mapped_column(Text, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        server_default=func.now(),
    )

    user: Mapped[User] = relationship(back_populates="refresh_tokens")
