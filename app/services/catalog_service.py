"""
Catalog Service - one movie namespace over OMDb and the custom catalog
======================================================================

Both sources are returned in the OMDb field layout. Custom movies are mapped
into it by ``format_local_movie`` and identified as ``custom_<id>``.

Combined search queries both sources at the same time: the OMDb call runs on
a worker thread while the local query uses the request's own session, then
the two are joined.
"""
from concurrent.futures import ThreadPoolExecutor, TimeoutError
from datetime import datetime
from typing import Dict, List, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.movie import Movie
from app.services.movie_service import MovieService
from app.services.omdb_service import OMDBService, empty_search_result
from app.utils.errors import InternalError
from app.utils.movie_reference import MovieReference, MovieSource

logger = logging.getLogger(__name__)

_FANOUT_EXECUTOR = ThreadPoolExecutor(max_workers=8, thread_name_prefix="omdb-fanout")

SEARCH_PAGE_SIZE = 20
JOIN_MARGIN_SECONDS = 2.0

FEATURED_TERMS = ['Batman', 'Marvel', 'Star Wars', 'Inception', 'Avatar', 'Titanic']
FEATURED_LOCAL_COUNT = 6
FEATURED_LIMIT = 12

TOP_RATED_TERMS = [
    'Godfather', 'Shawshank', 'Dark Knight', 'Pulp Fiction', 'Lord of the Rings',
    'Fight Club', 'Forrest Gump', 'Inception', 'Matrix', 'Goodfellas',
    'Silence of the Lambs', 'Saving Private Ryan', 'Terminator', 'Alien',
    'Casablanca', 'Citizen Kane', 'Vertigo', 'Psycho', 'Taxi Driver',
    'Apocalypse Now', 'Chinatown', 'Once Upon a Time', 'Interstellar'
]
TOP_RATED_PAGE_SIZE = 16
TOP_RATED_MIN_RATING = 7.0

NEW_RELEASE_TERMS = ['action', 'drama', 'comedy', 'thriller']


def _join(items) -> str:
    if isinstance(items, (list, tuple)):
        return ", ".join(items)
    return items or ""


def parse_rating(value) -> float:
    """OMDb ratings are strings and may be 'N/A'"""
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def format_local_movie(movie: Movie) -> Dict:
    """Map a custom movie row into the OMDb result layout"""
    return {
        "imdbID": MovieReference.local(movie.id).encode(),
        "Title": movie.title,
        "Year": str(movie.year) if movie.year is not None else "",
        "Runtime": movie.runtime or "",
        "Director": movie.director or "",
        "Actors": _join(movie.cast_members),
        "Genre": _join(movie.genre),
        "Plot": movie.plot or "",
        "Poster": movie.poster or "",
        "imdbRating": f"{movie.imdb_rating:.1f}" if movie.imdb_rating is not None else "",
        "Language": movie.language or "",
        "Country": movie.country or "",
        "Awards": movie.awards or "",
        "BoxOffice": movie.box_office or "",
        "Response": "True",
        "Source": MovieSource.LOCAL.value,
    }


def dedupe_by_title_and_year(movies: List[Dict]) -> List[Dict]:
    """
    Drop later entries whose title (case-insensitive) and year string match an
    earlier one. External results come first, so they win over custom copies.
    """
    seen = set()
    unique = []
    for movie in movies:
        key = ((movie.get("Title") or "").lower(), movie.get("Year") or "")
        if key in seen:
            continue
        seen.add(key)
        unique.append(movie)
    return unique


class CatalogService:
    """Aggregates the OMDb gateway and the custom catalog"""

    @staticmethod
    def _first_hit_details(term: str, year: Optional[int] = None) -> Optional[Dict]:
        """Full details of the most relevant OMDb hit for a search term"""
        response = OMDBService.search_movies(term, year=year)
        hits = response.get("Search") or []
        if not hits:
            return None
        return OMDBService.get_movie_by_id(hits[0].get("imdbID"))

    @staticmethod
    def combined_search(db: Session, query: str, page: int = 1) -> Dict:
        """
        Search OMDb and the custom catalog together.

        A failing local query fails the whole search. OMDb problems never do:
        the gateway degrades to an empty page, and a call that outlives its
        timeout is abandoned.
        """
        external_future = _FANOUT_EXECUTOR.submit(OMDBService.search_movies, query, page)

        try:
            local_movies = MovieService.search(
                db, query, limit=SEARCH_PAGE_SIZE, offset=(page - 1) * SEARCH_PAGE_SIZE
            )
        except SQLAlchemyError as e:
            external_future.cancel()
            logger.error(f"Custom catalog search failed for {query!r}: {str(e)}")
            raise InternalError("Movie search failed")

        try:
            external = external_future.result(timeout=OMDBService.TIMEOUT + JOIN_MARGIN_SECONDS)
        except TimeoutError:
            logger.warning(f"OMDb search for {query!r} timed out; returning custom results only")
            external_future.cancel()
            external = empty_search_result("OMDb request timed out")

        combined = list(external.get("Search") or []) + [format_local_movie(m) for m in local_movies]
        unique_movies = dedupe_by_title_and_year(combined)

        # Pre-dedup estimate, kept for client compatibility
        total = int(external.get("totalResults") or 0) + len(local_movies)

        result = {
            "Search": unique_movies,
            "totalResults": str(total),
            "Response": "True" if unique_movies else "False",
            "page": page,
        }
        if external.get("Error") and not external.get("Search"):
            result["externalError"] = external["Error"]
        return result

    @staticmethod
    def get_details(db: Session, reference: MovieReference) -> Optional[Dict]:
        """Resolve a reference against its owning catalog; None if not found"""
        if reference.is_local:
            pk = reference.local_pk
            movie = MovieService.get(db, pk) if pk is not None else None
            if not movie:
                return None
            return format_local_movie(movie)

        movie = OMDBService.get_movie_by_id(reference.movie_id)
        if not movie:
            return None
        movie["Source"] = MovieSource.EXTERNAL.value
        return movie

    @staticmethod
    def featured(db: Session) -> List[Dict]:
        """Hand-picked OMDb titles followed by the newest custom movies"""
        featured = []
        for term in FEATURED_TERMS:
            details = CatalogService._first_hit_details(term)
            if details:
                featured.append(details)

        newest = MovieService.list(db, limit=FEATURED_LOCAL_COUNT, offset=0)
        featured.extend(format_local_movie(m) for m in newest)
        return featured[:FEATURED_LIMIT]

    @staticmethod
    def top_rated(page: int = 1) -> Dict:
        """Classic titles rated at least 7.0, best first, 16 search terms per page"""
        start = (page - 1) * TOP_RATED_PAGE_SIZE
        page_terms = TOP_RATED_TERMS[start:start + TOP_RATED_PAGE_SIZE]

        movies = []
        for term in page_terms:
            details = CatalogService._first_hit_details(term)
            if details and parse_rating(details.get("imdbRating")) >= TOP_RATED_MIN_RATING:
                movies.append(details)

        movies.sort(key=lambda m: parse_rating(m.get("imdbRating")), reverse=True)
        total_pages = -(-len(TOP_RATED_TERMS) // TOP_RATED_PAGE_SIZE)
        return {"movies": movies, "totalPages": total_pages}

    @staticmethod
    def new_releases() -> List[Dict]:
        """One title per broad genre term, restricted to the current year"""
        current_year = datetime.now().year
        releases = []
        for term in NEW_RELEASE_TERMS:
            details = CatalogService._first_hit_details(term, year=current_year)
            if details:
                releases.append(details)
        return releases
