from app.schemas.movie import MovieCreate, MovieUpdate
from app.services.movie_service import MovieService
from tests.factories import create_movie


def titles(movies):
    return [m.title for m in movies]


def test_search_matches_title_case_insensitively(db_session):
    create_movie(db_session, title="Dune")
    create_movie(db_session, title="Arrival", year=2016)

    assert titles(MovieService.search(db_session, "dUnE")) == ["Dune"]


def test_search_matches_director_cast_and_genre(db_session):
    create_movie(db_session, title="Sicario", year=2015, director="Denis Villeneuve",
                 cast_members=["Emily Blunt", "Benicio del Toro"], genre=["Crime", "Thriller"])
    create_movie(db_session, title="Paddington", year=2014, director="Paul King",
                 cast_members=["Ben Whishaw"], genre=["Family"])

    assert titles(MovieService.search(db_session, "villeneuve")) == ["Sicario"]
    assert titles(MovieService.search(db_session, "blunt")) == ["Sicario"]
    assert titles(MovieService.search(db_session, "thrill")) == ["Sicario"]
    assert titles(MovieService.search(db_session, "whishaw")) == ["Paddington"]


def test_search_matches_non_ascii_cast(db_session):
    create_movie(db_session, title="Amélie", year=2001, cast_members=["Audrey Tautou", "Mathieu Kassovitz"])

    assert titles(MovieService.search(db_session, "amélie")) == ["Amélie"]
    assert titles(MovieService.search(db_session, "tautou")) == ["Amélie"]


def test_search_treats_wildcards_literally(db_session):
    create_movie(db_session, title="100% Wolf", year=2020)
    create_movie(db_session, title="Wolf", year=2021)

    assert titles(MovieService.search(db_session, "100%")) == ["100% Wolf"]
    assert MovieService.search(db_session, "_olf") == []


def test_search_pages_newest_first(db_session):
    for i in range(5):
        create_movie(db_session, title=f"Alien {i}", year=1979 + i)

    first = MovieService.search(db_session, "alien", limit=2, offset=0)
    second = MovieService.search(db_session, "alien", limit=2, offset=2)

    assert titles(first) == ["Alien 4", "Alien 3"]
    assert titles(second) == ["Alien 2", "Alien 1"]


def test_create_maps_cast_and_records_creator(db_session, admin):
    payload = MovieCreate(title="Dune", year=2021, cast=[" Timothée Chalamet ", ""], genre=["Sci-Fi"],
                          imdbRating=8.04)

    movie = MovieService.create(db_session, payload, created_by=admin.id)

    assert movie.id is not None
    assert movie.cast_members == ["Timothée Chalamet"]
    assert movie.genre == ["Sci-Fi"]
    assert movie.created_by_name == "Admin"


def test_update_only_touches_provided_fields(db_session):
    movie = create_movie(db_session, title="Dune", director="Denis Villeneuve")

    updated = MovieService.update(db_session, movie.id, MovieUpdate(year=2022))

    assert updated.year == 2022
    assert updated.title == "Dune"
    assert updated.director == "Denis Villeneuve"


def test_update_and_delete_missing_movie(db_session):
    assert MovieService.update(db_session, 999, MovieUpdate(title="Nothing")) is None
    assert MovieService.delete(db_session, 999) is False


def test_delete_removes_row(db_session):
    movie = create_movie(db_session)

    assert MovieService.delete(db_session, movie.id) is True
    assert MovieService.get(db_session, movie.id) is None
    assert MovieService.count(db_session) == 0


def test_search_matches_cast_and_genre_per_element(db_session):
    create_movie(db_session, title="Dune", year=2021)
    create_movie(db_session, title="Alien", year=1979,
                 cast_members=["Sigourney Weaver", "Ian Holm"], genre=["Horror", "Sci-Fi"])

    # JSON punctuation and text spanning two names never match
    assert MovieService.search(db_session, "[") == []
    assert MovieService.search(db_session, '"') == []
    assert MovieService.search(db_session, ", ") == []
    assert MovieService.search(db_session, 'weaver", "ian') == []
    assert MovieService.search(db_session, "horror, sci") == []

    assert titles(MovieService.search(db_session, "ian holm")) == ["Alien"]
    assert titles(MovieService.search(db_session, "sci-fi")) == ["Alien"]


def test_search_folds_case_of_non_ascii_text(db_session):
    create_movie(db_session, title="Émile", year=1990, director="Étienne Chatiliez",
                 cast_members=["Émile Zola"], genre=["Drame"])
    create_movie(db_session, title="Other", year=1991)

    assert titles(MovieService.search(db_session, "émile")) == ["Émile"]
    assert titles(MovieService.search(db_session, "ÉMILE ZOLA")) == ["Émile"]
    assert titles(MovieService.search(db_session, "étienne")) == ["Émile"]
