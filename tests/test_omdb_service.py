import pytest
import requests

from app.services import omdb_service
from app.services.omdb_service import OMDBService, NOT_CONFIGURED


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


@pytest.fixture
def configured(monkeypatch):
    monkeypatch.setattr(OMDBService, "API_KEY", "test-key")


def fake_get(monkeypatch, response, calls=None):
    def _get(url, params=None, timeout=None):
        if calls is not None:
            calls.append({"url": url, "params": params, "timeout": timeout})
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(omdb_service.requests, "get", _get)


def test_search_without_key_is_empty_and_makes_no_request(monkeypatch):
    calls = []
    fake_get(monkeypatch, FakeResponse({}), calls)

    result = OMDBService.search_movies("Dune")

    assert result == {"Search": [], "totalResults": "0", "Response": "False", "Error": NOT_CONFIGURED}
    assert calls == []


def test_search_tags_results_and_passes_params(monkeypatch, configured):
    calls = []
    payload = {
        "Search": [{"Title": "Dune", "Year": "2021", "imdbID": "tt1160419"}],
        "totalResults": "42",
        "Response": "True",
    }
    fake_get(monkeypatch, FakeResponse(payload), calls)

    result = OMDBService.search_movies("Dune", page=2, year=2021)

    assert result["Response"] == "True"
    assert result["totalResults"] == "42"
    assert result["Search"][0]["Source"] == "omdb"
    assert calls[0]["params"] == {"s": "Dune", "page": 2, "y": 2021, "apikey": "test-key"}
    assert calls[0]["timeout"] == OMDBService.TIMEOUT


def test_search_not_found_carries_provider_error(monkeypatch, configured):
    fake_get(monkeypatch, FakeResponse({"Response": "False", "Error": "Movie not found!"}))

    result = OMDBService.search_movies("zzzz")

    assert result["Search"] == []
    assert result["Error"] == "Movie not found!"


@pytest.mark.parametrize("failure", [
    requests.exceptions.Timeout("slow"),
    requests.exceptions.ConnectionError("down"),
    FakeResponse({}, status_code=503),
    FakeResponse(ValueError("not json")),
    FakeResponse(["not", "a", "dict"]),
])
def test_search_degrades_on_provider_failure(monkeypatch, configured, failure):
    fake_get(monkeypatch, failure)

    result = OMDBService.search_movies("Dune")

    assert result["Search"] == []
    assert result["totalResults"] == "0"
    assert result["Error"] == "Failed to fetch from OMDb"


def test_get_movie_by_id(monkeypatch, configured):
    calls = []
    fake_get(monkeypatch, FakeResponse({"Title": "Dune", "imdbID": "tt1160419", "Response": "True"}), calls)

    movie = OMDBService.get_movie_by_id("tt1160419")

    assert movie["Title"] == "Dune"
    assert movie["Source"] == "omdb"
    assert calls[0]["params"]["i"] == "tt1160419"
    assert calls[0]["params"]["plot"] == "full"


def test_get_movie_by_id_missing_or_failing(monkeypatch, configured):
    fake_get(monkeypatch, FakeResponse({"Response": "False", "Error": "Incorrect IMDb ID."}))
    assert OMDBService.get_movie_by_id("tt0000000") is None

    fake_get(monkeypatch, requests.exceptions.Timeout("slow"))
    assert OMDBService.get_movie_by_id("tt0000000") is None


def test_get_movie_by_id_without_key():
    assert OMDBService.get_movie_by_id("tt1160419") is None
