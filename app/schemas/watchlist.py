from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Dict, List, Optional

from app.schemas.validation import is_http_url


# ==================== WATCHLIST SCHEMAS ====================

class MovieSnapshot(BaseModel):
    """
    Movie fields copied into the watchlist entry at add time.
    Uses the OMDb field names; extra OMDb fields are kept as-is.
    """
    model_config = ConfigDict(extra="allow")

    Title: str = Field(..., min_length=1, max_length=500)
    Year: Optional[str] = None
    Poster: Optional[str] = None
    Type: Optional[str] = None

    @field_validator('Poster')
    @classmethod
    def validate_poster(cls, v):
        # OMDb uses "N/A" for missing posters
        if v and v != "N/A" and not is_http_url(v):
            raise ValueError("Poster must be a valid URL if provided")
        return v


class WatchlistAdd(BaseModel):
    """Schema for adding a movie to watchlist"""
    movie_id: str = Field(..., min_length=1, max_length=50, description="Movie reference (OMDb id or custom_<id>)")
    movie_data: Optional[MovieSnapshot] = Field(
        None, description="Snapshot to store; resolved from the catalog when omitted"
    )


class WatchlistItemResponse(BaseModel):
    """Schema for watchlist item response"""
    id: int
    movie_id: str = Field(..., description="Encoded movie reference")
    movie_source: str
    added_at: Optional[datetime] = None
    movie_data: Dict = Field(default_factory=dict)


class WatchlistAddResponse(BaseModel):
    success: bool = True
    watchlist_item: WatchlistItemResponse
    message: str


class WatchlistPage(BaseModel):
    watchlist: List[WatchlistItemResponse]
    total_count: int
    current_page: int
    total_pages: int
    has_more: bool


class WatchlistCheckMultiple(BaseModel):
    movies: List[str] = Field(..., min_length=1, max_length=200, description="Movie references to check")


class WatchlistCheckMultipleResponse(BaseModel):
    watchlist_status: Dict[str, bool]


class PopularMovie(BaseModel):
    movie_id: str
    movie_source: str
    watchlist_count: int
    movie_data: Dict = Field(default_factory=dict)


class WatchlistStats(BaseModel):
    """Schema for watchlist statistics"""
    total_movies: int
    message: str


class ClearWatchlistResponse(BaseModel):
    success: bool = True
    removed_count: int
    message: str
