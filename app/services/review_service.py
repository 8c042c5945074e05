"""
Review Service - Handle all review-related business logic
Follows the same pattern as WatchlistService for consistency
"""

from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func, case
from sqlalchemy.exc import IntegrityError
from typing import List, Optional, Dict
from datetime import datetime, timezone
import logging
import math

from app.models.review import Review
from app.schemas.review import ReviewCreate, ReviewUpdate, ReviewResponse
from app.utils.errors import ConflictError, ValidationError
from app.utils.movie_reference import MovieReference
from app.utils.timeago import relative_time

logger = logging.getLogger(__name__)

RECOMMEND_THRESHOLD = 7
DUPLICATE_REVIEW = "You have already reviewed this movie. Use PUT to update your review."


class ReviewService:
    """Service for movie review operations"""

    @staticmethod
    def _with_author(db: Session):
        return db.query(Review).options(joinedload(Review.user))

    @staticmethod
    def _for_movie(query, reference: MovieReference):
        return query.filter(
            Review.movie_id == reference.movie_id,
            Review.movie_source == reference.source.value
        )

    @staticmethod
    def get(db: Session, review_id: int) -> Optional[Review]:
        """Get a review with its author loaded, or None"""
        return ReviewService._with_author(db).filter(Review.id == review_id).first()

    @staticmethod
    def get_user_review_for_movie(db: Session, user_id: int, reference: MovieReference) -> Optional[Review]:
        query = ReviewService._with_author(db).filter(Review.user_id == user_id)
        return ReviewService._for_movie(query, reference).first()

    @staticmethod
    def create(db: Session, user_id: int, reference: MovieReference, review_data: ReviewCreate) -> Review:
        """
        Create the user's review for a movie.

        Raises:
            ConflictError: If the user already reviewed this movie, including
                when a concurrent request wins the unique constraint.
        """
        if ReviewService.get_user_review_for_movie(db, user_id, reference):
            raise ConflictError(DUPLICATE_REVIEW)

        review = Review(
            user_id=user_id,
            movie_id=reference.movie_id,
            movie_source=reference.source.value,
            title=review_data.title,
            content=review_data.content,
            rating=review_data.rating
        )
        db.add(review)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info(f"Duplicate review rejected by constraint: user={user_id} movie={reference}")
            raise ConflictError(DUPLICATE_REVIEW)

        return ReviewService.get(db, review.id)

    @staticmethod
    def update(db: Session, review: Review, update_data: ReviewUpdate) -> Review:
        """
        Apply provided fields only.
        Ownership must be verified by the caller.
        """
        changes = update_data.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            raise ValidationError("No fields to update")

        for field, value in changes.items():
            setattr(review, field, value)
        review.updated_at = func.now()

        db.commit()
        return ReviewService.get(db, review.id)

    @staticmethod
    def delete(db: Session, review: Review) -> None:
        """Ownership (or admin role) must be verified by the caller"""
        db.delete(review)
        db.commit()

    @staticmethod
    def mark_helpful(db: Session, review: Review, helpful: bool) -> Review:
        """
        Record one vote. Both counters are incremented in SQL so concurrent
        votes never overwrite each other; they are never decremented.
        Self-votes must be rejected by the caller.
        """
        db.query(Review).filter(Review.id == review.id).update(
            {
                Review.total_votes: Review.total_votes + 1,
                Review.helpful_count: Review.helpful_count + (1 if helpful else 0),
            },
            synchronize_session=False
        )
        db.commit()
        db.expire(review)
        return ReviewService.get(db, review.id)

    @staticmethod
    def list_by_movie(db: Session, reference: MovieReference, limit: int = 20, offset: int = 0) -> List[Review]:
        query = ReviewService._for_movie(ReviewService._with_author(db), reference)
        return query.order_by(Review.created_at.desc(), Review.id.desc()).offset(offset).limit(limit).all()

    @staticmethod
    def list_by_user(db: Session, user_id: int, limit: int = 20, offset: int = 0) -> List[Review]:
        query = ReviewService._with_author(db).filter(Review.user_id == user_id)
        return query.order_by(Review.created_at.desc(), Review.id.desc()).offset(offset).limit(limit).all()

    @staticmethod
    def list_recent(db: Session, limit: int = 10) -> List[Review]:
        query = ReviewService._with_author(db)
        return query.order_by(Review.created_at.desc(), Review.id.desc()).limit(limit).all()

    @staticmethod
    def get_movie_stats(db: Session, reference: MovieReference) -> Dict:
        """
        Aggregate statistics for one movie

        Returns:
            total_reviews, average_rating (one-decimal string) and
            recommendation_percentage (share of ratings >= 7, rounded)
        """
        total, average, recommended = ReviewService._for_movie(
            db.query(
                func.count(Review.id),
                func.avg(Review.rating),
                func.sum(case((Review.rating >= RECOMMEND_THRESHOLD, 1), else_=0)),
            ),
            reference
        ).one()

        total = int(total or 0)
        if total == 0:
            return {
                "total_reviews": 0,
                "average_rating": "0.0",
                "recommendation_percentage": 0
            }

        return {
            "total_reviews": total,
            "average_rating": f"{float(average):.1f}",
            # Half-up, so 62.5% reads as 63
            "recommendation_percentage": int(math.floor(int(recommended or 0) * 100.0 / total + 0.5))
        }

    @staticmethod
    def to_response(review: Review, now: Optional[datetime] = None) -> ReviewResponse:
        return ReviewResponse(
            id=review.id,
            user_id=review.user_id,
            author=review.author_name,
            movie_id=review.reference.encode(),
            movie_source=review.movie_source,
            title=review.title,
            content=review.content,
            rating=review.rating,
            helpful_count=review.helpful_count or 0,
            total_votes=review.total_votes or 0,
            date=relative_time(review.created_at, now or datetime.now(timezone.utc)),
            created_at=review.created_at,
            updated_at=review.updated_at
        )
