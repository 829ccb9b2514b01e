# movie_catalog/db_models.py
from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String

# CRITICAL: import Base from models_auth so ALL tables share the same MetaData
from movie_catalog.models_auth import Base, User, UserSession


class UserFavorite(Base):
    """
    A user's favorite movie keyed by TMDb movie id.
    No FK to a local catalogue: titles and posters are copied from TMDb at add time.
    """
    __tablename__ = "user_favorites"

    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True)
    movie_id = Column(Integer, primary_key=True)
    movie_title = Column(String(500), nullable=False)
    poster_path = Column(String(500), nullable=True)
    # set by the application (microsecond precision) so listing order is stable
    added_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_user_favorites_user_added", "user_id", "added_at"),
    )


__all__ = [
    "Base",
    "User",
    "UserSession",
    "UserFavorite",
]
