import requests
import os
from typing import Dict, Optional
from dotenv import load_dotenv
from app.utils.errors import UpstreamError
import logging

load_dotenv()
logger = logging.getLogger(__name__)

SOURCE_TAG = "omdb"
NOT_CONFIGURED = "OMDb API key not configured"


def empty_search_result(error: Optional[str] = None) -> Dict:
    result = {"Search": [], "totalResults": "0", "Response": "False"}
    if error:
        result["Error"] = error
    return result


# OMDb Service - read-only gateway to the external movie catalog
class OMDBService:
    BASE_URL = "https://www.omdbapi.com/"
    API_KEY = os.getenv("OMDB_API_KEY")
    TIMEOUT = float(os.getenv("OMDB_TIMEOUT", "5"))

    @classmethod
    def is_configured(cls) -> bool:
        return bool(cls.API_KEY)

    # Internal method to make GET requests to OMDb
    @classmethod
    def _make_request(cls, params: Dict) -> Dict:
        """
        Make HTTP request to OMDb.

        Args:
            params: Query parameters (s, i, page, y, plot ...)

        Returns:
            JSON response from OMDb. OMDb reports "no such movie" inside the
            body (Response == "False"), not with an HTTP status.

        Raises:
            UpstreamError: If the request fails or the body is not JSON
        """
        params = dict(params)
        params['apikey'] = cls.API_KEY

        try:
            response = requests.get(cls.BASE_URL, params=params, timeout=cls.TIMEOUT)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise UpstreamError(f"OMDb API error: {str(e)}", cause=e)
        except ValueError as e:
            raise UpstreamError("OMDb API returned an invalid response", cause=e)

        if not isinstance(data, dict):
            raise UpstreamError("OMDb API returned an invalid response")
        logger.debug(f"OMDb API request successful: {sorted(k for k in params if k != 'apikey')}")
        return data

    @classmethod
    def search_movies(cls, query: str, page: int = 1, year: Optional[int] = None) -> Dict:
        """
        Search movies by title.

        Never raises: a missing key or a provider failure yields an empty
        result with an ``Error`` marker so combined search keeps working on
        the local catalog alone.
        """
        if not cls.is_configured():
            logger.warning("OMDb search skipped: API key not configured")
            return empty_search_result(NOT_CONFIGURED)

        params = {'s': query, 'page': page}
        if year:
            params['y'] = year

        try:
            data = cls._make_request(params)
        except UpstreamError as e:
            logger.error(f"OMDb search failed for {query!r}: {e.detail}")
            return empty_search_result("Failed to fetch from OMDb")

        if data.get('Response') != 'True':
            # "Movie not found!", "Too many results." ...
            return empty_search_result(data.get('Error'))

        results = []
        for item in data.get('Search') or []:
            normalized = dict(item)
            normalized['Source'] = SOURCE_TAG
            results.append(normalized)

        return {
            "Search": results,
            "totalResults": str(data.get('totalResults') or len(results)),
            "Response": "True",
        }

    @classmethod
    def get_movie_by_id(cls, imdb_id: str) -> Optional[Dict]:
        """
        Get full movie details by OMDb/IMDb id.
        Returns None when the movie does not exist, the key is missing or
        OMDb cannot be reached.
        """
        if not cls.is_configured():
            logger.warning("OMDb lookup skipped: API key not configured")
            return None
        if not imdb_id:
            return None

        try:
            data = cls._make_request({'i': imdb_id, 'plot': 'full'})
        except UpstreamError as e:
            logger.error(f"OMDb lookup failed for {imdb_id}: {e.detail}")
            return None

        if data.get('Response') != 'True':
            return None

        data['Source'] = SOURCE_TAG
        return data
