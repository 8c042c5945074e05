from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, UniqueConstraint, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
from app.utils.movie_reference import MovieReference, MovieSource


class Watchlist(Base):
    """
    Watchlist model - Movies saved by users to watch later.
    ``movie_data`` is a snapshot of the movie taken when it was added, so
    listings never have to go back to OMDb.
    """
    __tablename__ = "watchlists"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    movie_id = Column(String(50), nullable=False)
    movie_source = Column(String(20), nullable=False, default=MovieSource.EXTERNAL.value)
    movie_data = Column(JSON)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="watchlist_items")

    # Ensure one entry per user per movie
    __table_args__ = (
        UniqueConstraint('user_id', 'movie_id', 'movie_source', name='unique_user_movie_watchlist'),
        CheckConstraint("movie_source IN ('omdb', 'custom')", name="ck_watchlists_movie_source"),
    )

    @property
    def reference(self) -> MovieReference:
        return MovieReference(MovieSource(self.movie_source), self.movie_id)

    def __repr__(self):
        return f"<Watchlist(user_id={self.user_id}, movie={self.movie_source}:{self.movie_id})>"
