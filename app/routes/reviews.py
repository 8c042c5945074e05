"""
Review Routes - API endpoints for movie reviews
Follows RESTful conventions and watchlist routes pattern
"""

from fastapi import APIRouter, Depends, status, Query, Path
from sqlalchemy.orm import Session

from app.database import get_db
from app.utils.access_control import ensure_owner, ensure_owner_or_admin, ensure_not_author
from app.utils.dependencies import get_current_user
from app.utils.errors import NotFoundError
from app.utils.movie_reference import decode
from app.models.user import User
from app.models.review import Review
from app.schemas.review import (
    ReviewCreate,
    ReviewUpdate,
    HelpfulVote,
    ReviewEnvelope,
    ReviewListResponse,
    MovieReviewListResponse,
)
from app.schemas.validation import page_to_offset
from app.services.review_service import ReviewService

router = APIRouter(prefix="/api/reviews", tags=["Reviews"])


def get_review_or_404(db: Session, review_id: int) -> Review:
    review = ReviewService.get(db, review_id)
    if not review:
        raise NotFoundError("Review not found")
    return review


def _page(reviews, page: int, limit: int) -> dict:
    return {
        "reviews": [ReviewService.to_response(r) for r in reviews],
        "current_page": page,
        "has_more": len(reviews) == limit
    }


# ==================== REVIEW CRUD ENDPOINTS ====================

@router.post("/", response_model=ReviewEnvelope, status_code=status.HTTP_201_CREATED)
def create_review(
    review_data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Review a movie from either catalog

    - **movie_id**: movie reference (`tt0111161` or `custom_12`)
    - **rating**: 1 to 10

    One review per user per movie; a second attempt answers 409.
    """
    review = ReviewService.create(db, current_user.id, decode(review_data.movie_id), review_data)
    return {"review": ReviewService.to_response(review), "message": "Review created successfully"}


@router.get("/movie/{movie_ref}", response_model=MovieReviewListResponse)
def get_movie_reviews(
    movie_ref: str,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=50),
    db: Session = Depends(get_db)
):
    """Reviews for a movie, newest first, with aggregate statistics"""
    reference = decode(movie_ref)
    reviews = ReviewService.list_by_movie(db, reference, limit, page_to_offset(page, limit))
    stats = ReviewService.get_movie_stats(db, reference)
    return {**_page(reviews, page, limit), "stats": stats}


@router.get("/user/{user_id}", response_model=ReviewListResponse)
def get_user_reviews(
    user_id: int = Path(..., gt=0),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=50),
    db: Session = Depends(get_db)
):
    """Reviews written by a given user (public)"""
    reviews = ReviewService.list_by_user(db, user_id, limit, page_to_offset(page, limit))
    return _page(reviews, page, limit)


@router.get("/my-reviews", response_model=ReviewListResponse)
def get_my_reviews(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=50),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Reviews written by the current user"""
    reviews = ReviewService.list_by_user(db, current_user.id, limit, page_to_offset(page, limit))
    return _page(reviews, page, limit)


@router.get("/lists/recent", response_model=ReviewListResponse)
def get_recent_reviews(
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db)
):
    """Latest reviews across all movies"""
    reviews = ReviewService.list_recent(db, limit)
    return {"reviews": [ReviewService.to_response(r) for r in reviews]}


@router.get("/{review_id}", response_model=ReviewEnvelope)
def get_review(review_id: int = Path(..., gt=0), db: Session = Depends(get_db)):
    review = get_review_or_404(db, review_id)
    return {"review": ReviewService.to_response(review)}


@router.put("/{review_id}", response_model=ReviewEnvelope)
def update_review(
    update_data: ReviewUpdate,
    review_id: int = Path(..., gt=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update a review (author only); omitted fields keep their value"""
    review = get_review_or_404(db, review_id)
    ensure_owner(current_user, review)

    updated = ReviewService.update(db, review, update_data)
    return {"review": ReviewService.to_response(updated), "message": "Review updated successfully"}


@router.delete("/{review_id}")
def delete_review(
    review_id: int = Path(..., gt=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a review (author or admin)"""
    review = get_review_or_404(db, review_id)
    ensure_owner_or_admin(current_user, review)

    ReviewService.delete(db, review)
    return {"success": True, "message": "Review deleted successfully"}


@router.post("/{review_id}/helpful", response_model=ReviewEnvelope)
def mark_review_helpful(
    vote: HelpfulVote,
    review_id: int = Path(..., gt=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Vote on another user's review

    Every vote counts towards `total_votes`; `helpful: true` also counts
    towards `helpful_count`. Authors cannot vote on their own reviews.
    """
    review = get_review_or_404(db, review_id)
    ensure_not_author(current_user, review)

    updated = ReviewService.mark_helpful(db, review, vote.helpful)
    message = "Review marked as helpful" if vote.helpful else "Review marked as not helpful"
    return {"review": ReviewService.to_response(updated), "message": message}
