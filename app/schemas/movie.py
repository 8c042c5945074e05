"""
Movie Schemas - payloads for the admin-curated catalog.

Responses for movies are not modelled here: both catalogs are returned in the
OMDb field layout (``Title``, ``Year``, ``imdbID`` ...) as plain dicts.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.validation import SafeStringMixin, is_http_url

MIN_YEAR = 1800


def _validate_year(v):
    if v is None:
        return v
    max_year = datetime.now().year + 5
    if v < MIN_YEAR or v > max_year:
        raise ValueError(f'Year must be between {MIN_YEAR} and {max_year}')
    return v


def _validate_names(v):
    if v is None:
        return v
    cleaned = [name.strip() for name in v if name and name.strip()]
    return cleaned


class MovieBase(BaseModel, SafeStringMixin):
    model_config = ConfigDict(populate_by_name=True)

    year: Optional[int] = None
    runtime: Optional[str] = Field(None, max_length=50)
    director: Optional[str] = Field(None, max_length=255)
    cast: Optional[List[str]] = None
    genre: Optional[List[str]] = None
    plot: Optional[str] = Field(None, max_length=2000)
    poster: Optional[str] = Field(None, max_length=500)
    imdb_rating: Optional[float] = Field(None, ge=0, le=10, alias="imdbRating")
    language: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    awards: Optional[str] = None
    box_office: Optional[str] = Field(None, max_length=100, alias="boxOffice")

    @field_validator('year')
    @classmethod
    def check_year(cls, v):
        return _validate_year(v)

    @field_validator('cast', 'genre')
    @classmethod
    def clean_names(cls, v):
        return _validate_names(v)

    @field_validator('imdb_rating')
    @classmethod
    def round_rating(cls, v):
        return round(v, 1) if v is not None else v

    @field_validator('poster')
    @classmethod
    def check_poster(cls, v):
        if v and not is_http_url(v):
            raise ValueError('Poster must be a valid http(s) URL')
        return v

    @field_validator('plot', 'awards')
    @classmethod
    def clean_text(cls, v):
        return cls.sanitize_html(cls.validate_no_script(v)) if v else v


class MovieCreate(MovieBase):
    """Schema for creating a custom movie (admin only)"""
    title: str = Field(..., min_length=1, max_length=255)

    @field_validator('title')
    @classmethod
    def clean_title(cls, v):
        return cls.validate_no_script(v.strip())


class MovieUpdate(MovieBase):
    """Schema for partial updates; omitted or null fields keep their value"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)

    @field_validator('title')
    @classmethod
    def clean_title(cls, v):
        return cls.validate_no_script(v.strip()) if v else v


class MovieMutationResponse(BaseModel):
    success: bool = True
    movie: dict
    message: str
