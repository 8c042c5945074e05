"""
Review Schemas - Pydantic models for review request/response validation
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.schemas.validation import SafeStringMixin


class ReviewCreate(BaseModel, SafeStringMixin):
    """Schema for creating a review"""
    movie_id: str = Field(..., min_length=1, max_length=50, description="Movie reference (OMDb id or custom_<id>)")
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=10, max_length=2000)
    rating: int = Field(..., ge=1, le=10, description="Rating value (1-10)")

    @field_validator('title')
    @classmethod
    def clean_title(cls, v):
        return cls.validate_no_script(v)

    @field_validator('content')
    @classmethod
    def clean_content(cls, v):
        v = cls.validate_no_script(v)
        return cls.sanitize_html(v)


class ReviewUpdate(BaseModel, SafeStringMixin):
    """Schema for updating a review; only provided fields change"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=10, max_length=2000)
    rating: Optional[int] = Field(None, ge=1, le=10)

    @field_validator('title')
    @classmethod
    def clean_title(cls, v):
        return cls.validate_no_script(v) if v else v

    @field_validator('content')
    @classmethod
    def clean_content(cls, v):
        if not v:
            return v
        return cls.sanitize_html(cls.validate_no_script(v))


class HelpfulVote(BaseModel):
    helpful: bool


class ReviewResponse(BaseModel):
    """A review as shown to clients, with the author's display name"""
    id: int
    user_id: int
    author: Optional[str] = None
    movie_id: str = Field(..., description="Encoded movie reference")
    movie_source: str
    title: str
    content: str
    rating: int
    helpful_count: int = 0
    total_votes: int = 0
    date: str = Field(..., description="Relative creation time, e.g. '3 days ago'")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MovieReviewStats(BaseModel):
    """Schema for movie-specific review statistics"""
    total_reviews: int = Field(..., description="Total reviews for this movie")
    average_rating: str = Field(..., description="Average rating with one decimal, '0.0' when empty")
    recommendation_percentage: int = Field(..., description="Share of reviews rated 7 or higher")

    model_config = {
        "json_schema_extra": {
            "example": {
                "total_reviews": 4,
                "average_rating": "6.5",
                "recommendation_percentage": 75
            }
        }
    }


class ReviewEnvelope(BaseModel):
    success: bool = True
    review: ReviewResponse
    message: Optional[str] = None


class ReviewListResponse(BaseModel):
    reviews: List[ReviewResponse]
    current_page: Optional[int] = None
    has_more: Optional[bool] = None


class MovieReviewListResponse(ReviewListResponse):
    stats: MovieReviewStats
