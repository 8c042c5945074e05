"""
Import all models to ensure they are registered with SQLAlchemy
"""
from app.models.user import User, UserRole
from app.models.movie import Movie
from app.models.review import Review
from app.models.watchlist import Watchlist

__all__ = [
    "User",
    "UserRole",
    "Movie",
    "Review",
    "Watchlist",
]
