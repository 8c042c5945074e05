from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    CheckConstraint,
    Index,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
from app.utils.movie_reference import MovieReference, MovieSource


class Review(Base):
    """
    A user's review of one movie from either catalog.
    ``movie_id`` holds the raw id (OMDb id or local primary key as text).
    """
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    movie_id = Column(String(50), nullable=False)
    movie_source = Column(String(20), nullable=False, default=MovieSource.EXTERNAL.value)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False)
    helpful_count = Column(Integer, nullable=False, default=0, server_default="0")
    total_votes = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="reviews")

    # One review per user per movie
    __table_args__ = (
        UniqueConstraint("user_id", "movie_id", "movie_source", name="unique_user_movie_review"),
        CheckConstraint("rating >= 1 AND rating <= 10", name="ck_reviews_rating"),
        CheckConstraint("movie_source IN ('omdb', 'custom')", name="ck_reviews_movie_source"),
        Index("idx_reviews_movie", "movie_id", "movie_source"),
    )

    @property
    def reference(self) -> MovieReference:
        return MovieReference(MovieSource(self.movie_source), self.movie_id)

    @property
    def author_name(self):
        return self.user.name if self.user else None

    def __repr__(self):
        return f"<Review(id={self.id}, user_id={self.user_id}, movie={self.movie_source}:{self.movie_id})>"
