from sqlalchemy.orm import Session
from sqlalchemy import func, and_, or_
from sqlalchemy.exc import IntegrityError
from typing import Dict, Iterable, List, Optional
import logging

from app.models.watchlist import Watchlist
from app.schemas.watchlist import WatchlistItemResponse, PopularMovie
from app.utils.movie_reference import MovieReference, MovieSource

logger = logging.getLogger(__name__)

# Fields copied from a resolved movie when the client sends no snapshot
SNAPSHOT_FIELDS = ("Title", "Year", "Poster", "Type", "Genre", "imdbRating")


def snapshot_from_movie(movie: Dict) -> Dict:
    return {field: movie[field] for field in SNAPSHOT_FIELDS if movie.get(field)}


class WatchlistService:
    """Service for watchlist operations"""

    @staticmethod
    def _entry_query(db: Session, user_id: int, reference: MovieReference):
        return db.query(Watchlist).filter(
            Watchlist.user_id == user_id,
            Watchlist.movie_id == reference.movie_id,
            Watchlist.movie_source == reference.source.value
        )

    @staticmethod
    def add(db: Session, user_id: int, reference: MovieReference, movie_data: Dict) -> Optional[Watchlist]:
        """
        Add a movie to user's watchlist.
        Returns None when the entry already exists; the unique constraint on
        (user, movie, source) decides between concurrent adds.
        """
        watchlist_item = Watchlist(
            user_id=user_id,
            movie_id=reference.movie_id,
            movie_source=reference.source.value,
            movie_data=movie_data
        )
        db.add(watchlist_item)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info(f"Watchlist add ignored, already present: user={user_id} movie={reference}")
            return None

        db.refresh(watchlist_item)
        return watchlist_item

    @staticmethod
    def remove(db: Session, user_id: int, reference: MovieReference) -> bool:
        """Remove a movie from watchlist; False if it was not there"""
        deleted = WatchlistService._entry_query(db, user_id, reference).delete(synchronize_session=False)
        db.commit()
        return deleted > 0

    @staticmethod
    def get_entry(db: Session, user_id: int, reference: MovieReference) -> Optional[Watchlist]:
        return WatchlistService._entry_query(db, user_id, reference).first()

    @staticmethod
    def is_in_watchlist(db: Session, user_id: int, reference: MovieReference) -> bool:
        return WatchlistService.get_entry(db, user_id, reference) is not None

    @staticmethod
    def get_watchlist(db: Session, user_id: int, limit: int = 50, offset: int = 0) -> List[Watchlist]:
        """Get user's watchlist, most recently added first"""
        return db.query(Watchlist).filter(
            Watchlist.user_id == user_id
        ).order_by(Watchlist.created_at.desc(), Watchlist.id.desc()).offset(offset).limit(limit).all()

    @staticmethod
    def count(db: Session, user_id: int) -> int:
        return db.query(func.count(Watchlist.id)).filter(Watchlist.user_id == user_id).scalar() or 0

    @staticmethod
    def remove_all(db: Session, user_id: int) -> int:
        """Clear the user's watchlist and return how many entries were removed"""
        removed = db.query(Watchlist).filter(
            Watchlist.user_id == user_id
        ).delete(synchronize_session=False)
        db.commit()
        logger.info(f"Watchlist cleared for user {user_id}: {removed} entries")
        return removed

    @staticmethod
    def check_multiple(db: Session, user_id: int, references: Iterable[MovieReference]) -> Dict[str, bool]:
        """
        Membership for many movies in a single query.
        Every queried reference appears in the result, keyed by its encoded form.
        """
        references = list(dict.fromkeys(references))
        status = {ref.encode(): False for ref in references}
        if not references:
            return status

        conditions = [
            and_(Watchlist.movie_id == ref.movie_id, Watchlist.movie_source == ref.source.value)
            for ref in references
        ]
        rows = db.query(Watchlist.movie_id, Watchlist.movie_source).filter(
            Watchlist.user_id == user_id,
            or_(*conditions)
        ).all()

        for movie_id, movie_source in rows:
            status[MovieReference(MovieSource(movie_source), movie_id).encode()] = True
        return status

    @staticmethod
    def popular_movies(db: Session, limit: int = 10) -> List[PopularMovie]:
        """
        Movies found in the most watchlists.

        Counted per movie reference only; the snapshot shown is the one from
        the most recent entry for that movie.
        """
        grouped = db.query(
            Watchlist.movie_id,
            Watchlist.movie_source,
            func.count(Watchlist.id).label("watchlist_count"),
            func.max(Watchlist.id).label("latest_id")
        ).group_by(
            Watchlist.movie_id, Watchlist.movie_source
        ).order_by(
            func.count(Watchlist.id).desc(), func.max(Watchlist.id).desc()
        ).limit(limit).all()

        latest_ids = [row.latest_id for row in grouped]
        snapshots = {}
        if latest_ids:
            snapshots = dict(
                db.query(Watchlist.id, Watchlist.movie_data).filter(Watchlist.id.in_(latest_ids)).all()
            )

        return [
            PopularMovie(
                movie_id=MovieReference(MovieSource(row.movie_source), row.movie_id).encode(),
                movie_source=row.movie_source,
                watchlist_count=int(row.watchlist_count),
                movie_data=snapshots.get(row.latest_id) or {}
            )
            for row in grouped
        ]

    @staticmethod
    def to_response(item: Watchlist) -> WatchlistItemResponse:
        return WatchlistItemResponse(
            id=item.id,
            movie_id=item.reference.encode(),
            movie_source=item.movie_source,
            added_at=item.created_at,
            movie_data=item.movie_data or {}
        )
