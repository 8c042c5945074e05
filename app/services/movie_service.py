"""
Movie Service - CRUD and search over the admin-curated catalog
"""

from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func, or_, select, literal
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
import logging

from app.models.movie import Movie
from app.schemas.movie import MovieCreate, MovieUpdate
from app.utils.errors import InternalError

logger = logging.getLogger(__name__)

# Schema field -> column, where the names differ
_FIELD_TO_COLUMN = {
    "cast": "cast_members",
}


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


# Table-valued function yielding the text elements of a JSON array, per dialect
_JSON_ARRAY_ELEMENTS = {
    "sqlite": func.json_each,
    "postgresql": func.json_array_elements_text,
}


def _to_columns(data: dict) -> dict:
    return {_FIELD_TO_COLUMN.get(key, key): value for key, value in data.items()}


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to {action} custom movie: {str(e)}")
        raise InternalError(f"Failed to {action} movie")


class MovieService:
    """Service for the local movie catalog"""

    @staticmethod
    def _newest_first(query):
        return query.order_by(Movie.created_at.desc(), Movie.id.desc())

    @staticmethod
    def create(db: Session, movie_data: MovieCreate, created_by: Optional[int]) -> Movie:
        """
        Insert a new custom movie.
        Admin checks happen before this is called.
        """
        values = _to_columns(movie_data.model_dump())
        values["cast_members"] = values.get("cast_members") or []
        values["genre"] = values.get("genre") or []

        movie = Movie(**values, created_by=created_by)
        db.add(movie)
        _commit(db, "save")
        db.refresh(movie)
        logger.info(f"Custom movie created: id={movie.id} title={movie.title!r} by user {created_by}")
        return movie

    @staticmethod
    def get(db: Session, movie_id: int) -> Optional[Movie]:
        return db.query(Movie).options(joinedload(Movie.creator)).filter(Movie.id == movie_id).first()

    @staticmethod
    def list(db: Session, limit: int = 20, offset: int = 0) -> List[Movie]:
        """Custom movies, most recently created first"""
        query = db.query(Movie).options(joinedload(Movie.creator))
        return MovieService._newest_first(query).offset(offset).limit(limit).all()

    @staticmethod
    def count(db: Session) -> int:
        return db.query(func.count(Movie.id)).scalar() or 0

    @staticmethod
    def search(db: Session, term: str, limit: int = 20, offset: int = 0) -> List[Movie]:
        """
        Case-insensitive substring search over title, director, any cast
        member and any genre.

        Cast and genre are JSON lists, matched element by element so a term
        never matches the JSON punctuation or spans two names.
        """
        dialect = db.get_bind().dialect.name
        array_elements = _JSON_ARRAY_ELEMENTS.get(dialect)
        if array_elements is None:
            raise InternalError(f"Movie search is not supported on {dialect}")

        pattern = f"%{_escape_like(term.lower())}%"

        def contains(column):
            return func.lower(column).like(pattern, escape="\\")

        def any_element_contains(column):
            elements = array_elements(column).table_valued("value").alias()
            return (
                select(literal(1))
                .select_from(elements)
                .where(contains(elements.c.value))
                .correlate(Movie)
                .exists()
            )

        query = db.query(Movie).options(joinedload(Movie.creator)).filter(
            or_(
                contains(Movie.title),
                contains(Movie.director),
                any_element_contains(Movie.cast_members),
                any_element_contains(Movie.genre),
            )
        )
        return MovieService._newest_first(query).offset(offset).limit(limit).all()

    @staticmethod
    def update(db: Session, movie_id: int, movie_data: MovieUpdate) -> Optional[Movie]:
        """
        Apply only the fields present in the payload.
        Returns None if the movie does not exist.
        """
        movie = db.query(Movie).filter(Movie.id == movie_id).first()
        if not movie:
            return None

        changes = _to_columns(movie_data.model_dump(exclude_unset=True, exclude_none=True))
        for column, value in changes.items():
            setattr(movie, column, value)
        movie.updated_at = func.now()

        _commit(db, "update")
        db.refresh(movie)
        logger.info(f"Custom movie updated: id={movie.id} fields={sorted(changes)}")
        return movie

    @staticmethod
    def delete(db: Session, movie_id: int) -> bool:
        movie = db.query(Movie).filter(Movie.id == movie_id).first()
        if not movie:
            return False

        db.delete(movie)
        _commit(db, "delete")
        logger.info(f"Custom movie deleted: id={movie_id}")
        return True
