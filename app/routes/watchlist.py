from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.utils.dependencies import get_current_user
from app.utils.errors import ConflictError, NotFoundError
from app.utils.movie_reference import decode
from app.models.user import User
from app.schemas.watchlist import (
    WatchlistAdd,
    WatchlistAddResponse,
    WatchlistPage,
    WatchlistStats,
    WatchlistCheckMultiple,
    WatchlistCheckMultipleResponse,
    PopularMovie,
    ClearWatchlistResponse,
)
from app.schemas.validation import page_to_offset
from app.services.catalog_service import CatalogService
from app.services.watchlist_service import WatchlistService, snapshot_from_movie

router = APIRouter(prefix="/api/watchlist", tags=["Watchlist"])

ALREADY_IN_WATCHLIST = "Movie is already in your watchlist"


# ==================== WATCHLIST ENDPOINTS ====================

@router.post("/", response_model=WatchlistAddResponse, status_code=status.HTTP_201_CREATED)
def add_to_watchlist(
    watchlist_data: WatchlistAdd,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Add a movie to user's watchlist

    - **movie_id**: movie reference (`tt0111161` or `custom_12`)
    - **movie_data**: snapshot to store (optional, looked up when omitted)
    """
    reference = decode(watchlist_data.movie_id)
    if WatchlistService.is_in_watchlist(db, current_user.id, reference):
        raise ConflictError(ALREADY_IN_WATCHLIST)

    if watchlist_data.movie_data is not None:
        movie_data = watchlist_data.movie_data.model_dump(exclude_none=True)
    else:
        movie = CatalogService.get_details(db, reference)
        if not movie:
            raise NotFoundError("Movie not found")
        movie_data = snapshot_from_movie(movie)

    item = WatchlistService.add(db, current_user.id, reference, movie_data)
    if item is None:
        raise ConflictError(ALREADY_IN_WATCHLIST)

    return {
        "watchlist_item": WatchlistService.to_response(item),
        "message": "Movie added to watchlist"
    }


@router.get("/", response_model=WatchlistPage)
def get_watchlist(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get user's watchlist, most recently added first

    - **page**: page number, starting at 1
    - **limit**: items per page (max 100)
    """
    offset = page_to_offset(page, limit)
    items = WatchlistService.get_watchlist(db, current_user.id, limit, offset)
    total_count = WatchlistService.count(db, current_user.id)

    return {
        "watchlist": [WatchlistService.to_response(item) for item in items],
        "total_count": total_count,
        "current_page": page,
        "total_pages": -(-total_count // limit),
        "has_more": offset + limit < total_count
    }


@router.get("/stats", response_model=WatchlistStats)
def get_watchlist_stats(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    total = WatchlistService.count(db, current_user.id)
    noun = "movie" if total == 1 else "movies"
    return {"total_movies": total, "message": f"You have {total} {noun} in your watchlist"}


@router.get("/popular", response_model=List[PopularMovie])
def get_popular_movies(
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db)
):
    """Movies saved by the most users (public)"""
    return WatchlistService.popular_movies(db, limit)


@router.get("/check/{movie_ref}", response_model=dict)
def check_in_watchlist(
    movie_ref: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Check if a movie is in user's watchlist

    Returns:
    - in_watchlist: boolean
    - item_id: watchlist item ID if exists, null otherwise
    - movie_id: movie reference as queried
    """
    reference = decode(movie_ref)
    entry = WatchlistService.get_entry(db, current_user.id, reference)
    return {
        "movie_id": reference.encode(),
        "in_watchlist": entry is not None,
        "item_id": entry.id if entry else None
    }


@router.post("/check-multiple", response_model=WatchlistCheckMultipleResponse)
def check_multiple(
    payload: WatchlistCheckMultiple,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Watchlist membership for many movies at once"""
    references = [decode(ref) for ref in payload.movies]
    return {"watchlist_status": WatchlistService.check_multiple(db, current_user.id, references)}


@router.delete("/", response_model=ClearWatchlistResponse)
def clear_watchlist(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    removed = WatchlistService.remove_all(db, current_user.id)
    return {"removed_count": removed, "message": f"Removed {removed} movies from watchlist"}


@router.delete("/{movie_ref}")
def remove_from_watchlist(
    movie_ref: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Remove a movie from watchlist"""
    if not WatchlistService.remove(db, current_user.id, decode(movie_ref)):
        raise NotFoundError("Movie not found in watchlist")
    return {"success": True, "message": "Movie removed from watchlist"}
