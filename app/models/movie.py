"""
Admin-curated movies (the local half of the catalog).

Rows here are exposed to clients as ``custom_<id>`` references in the same
OMDb-style shape as external titles.
"""
from sqlalchemy import Column, Integer, String, Float, JSON, DateTime, Text, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class Movie(Base):
    __tablename__ = "movies"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    year = Column(Integer)
    runtime = Column(String(50))
    director = Column(String(255))
    cast_members = Column(JSON, default=list)  # ["Timothée Chalamet", "Zendaya"]
    genre = Column(JSON, default=list)  # ["Sci-Fi", "Adventure"]
    plot = Column(Text)
    poster = Column(String(500))
    imdb_rating = Column(Float)  # 0-10, one decimal
    language = Column(String(100))
    country = Column(String(100))
    awards = Column(Text)
    box_office = Column(String(100))
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    creator = relationship("User")

    __table_args__ = (
        Index("idx_movies_title", "title"),
    )

    @property
    def created_by_name(self):
        return self.creator.name if self.creator else None

    def __repr__(self):
        return f"<Movie(id={self.id}, title='{self.title}', year={self.year})>"
