from fastapi import APIRouter, Query, Path, Depends, status
from sqlalchemy.orm import Session
from typing import Dict, List

from app.database import get_db
from app.models.user import User
from app.schemas.movie import MovieCreate, MovieUpdate, MovieMutationResponse
from app.services.catalog_service import CatalogService, format_local_movie
from app.services.movie_service import MovieService
from app.utils.dependencies import require_admin
from app.utils.errors import NotFoundError
from app.utils.movie_reference import decode
from app.schemas.validation import page_to_offset

router = APIRouter(prefix="/api/movies", tags=["Movies"])


# ============================================
# Combined Search
# ============================================

@router.get("/search")
def search_movies(
    q: str = Query(..., min_length=1, max_length=200, description="Search query"),
    page: int = Query(1, ge=1, le=100, description="Page number"),
    db: Session = Depends(get_db)
):
    """
    Search OMDb and the custom catalog at once

    Results use the OMDb layout; custom movies carry `Source: "custom"` and an
    `imdbID` of the form `custom_<id>`. Duplicates (same title and year) are
    collapsed in favour of the OMDb entry.
    """
    return CatalogService.combined_search(db, q, page)


# ============================================
# Curated Lists
# ============================================

@router.get("/lists/featured", response_model=List[Dict])
def get_featured(db: Session = Depends(get_db)):
    """Featured OMDb titles plus the newest custom movies (max 12)"""
    return CatalogService.featured(db)


@router.get("/lists/top-rated")
def get_top_rated(page: int = Query(1, ge=1, le=10)):
    """Top rated classics (rating >= 7.0), best first"""
    return CatalogService.top_rated(page)


@router.get("/lists/new-releases", response_model=List[Dict])
def get_new_releases():
    """A few releases from the current year"""
    return CatalogService.new_releases()


# ============================================
# Custom Movie Management (Admin)
# ============================================

@router.post("/", response_model=MovieMutationResponse, status_code=status.HTTP_201_CREATED)
def create_movie(
    movie_data: MovieCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Create a custom movie (admin only)"""
    movie = MovieService.create(db, movie_data, created_by=admin.id)
    return {"movie": format_local_movie(movie), "message": "Movie created successfully"}


@router.get("/admin/custom-movies")
def list_custom_movies(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """All custom movies with their creator, newest first (admin only)"""
    offset = page_to_offset(page, limit)
    movies = MovieService.list(db, limit=limit, offset=offset)
    total_count = MovieService.count(db)

    return {
        "movies": [
            {**format_local_movie(m), "createdBy": m.created_by_name, "createdAt": m.created_at}
            for m in movies
        ],
        "total_count": total_count,
        "current_page": page,
        "total_pages": -(-total_count // limit),
        "has_more": offset + limit < total_count
    }


@router.put("/admin/custom-movies/{movie_id}", response_model=MovieMutationResponse)
def update_movie(
    movie_data: MovieUpdate,
    movie_id: int = Path(..., gt=0),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Update a custom movie; omitted fields keep their value (admin only)"""
    movie = MovieService.update(db, movie_id, movie_data)
    if not movie:
        raise NotFoundError("Movie not found")
    return {"movie": format_local_movie(movie), "message": "Movie updated successfully"}


@router.delete("/admin/custom-movies/{movie_id}")
def delete_movie(
    movie_id: int = Path(..., gt=0),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Delete a custom movie (admin only)"""
    if not MovieService.delete(db, movie_id):
        raise NotFoundError("Movie not found")
    return {"success": True, "message": "Movie deleted successfully"}


# ============================================
# Movie Details (MUST be last - dynamic route)
# ============================================

@router.get("/{movie_ref}")
def get_movie_details(movie_ref: str, db: Session = Depends(get_db)):
    """Get movie details by reference (`tt…` for OMDb, `custom_<id>` for custom movies)"""
    movie = CatalogService.get_details(db, decode(movie_ref))
    if not movie:
        raise NotFoundError("Movie not found")
    return movie
