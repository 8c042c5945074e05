from app.models.movie import Movie
from app.services.omdb_service import OMDBService
from tests.factories import auth_headers, create_movie

NEW_MOVIE = {
    "title": "Dune: Part Two",
    "year": 2024,
    "director": "Denis Villeneuve",
    "cast": ["Timothée Chalamet", "Zendaya"],
    "genre": ["Sci-Fi"],
    "imdbRating": 8.6,
    "poster": "https://example.com/dune2.jpg",
}


# ============================================
# Admin catalog management
# ============================================

def test_admin_can_create_movie(client, db_session, admin):
    response = client.post("/api/movies/", json=NEW_MOVIE, headers=auth_headers(admin))

    assert response.status_code == 201
    movie = response.json()["movie"]
    assert movie["Title"] == "Dune: Part Two"
    assert movie["imdbID"].startswith("custom_")
    assert movie["Actors"] == "Timothée Chalamet, Zendaya"
    assert movie["imdbRating"] == "8.6"

    db_session.expire_all()
    stored = db_session.query(Movie).one()
    assert stored.created_by == admin.id


def test_non_admin_cannot_create_movie(client, db_session, user):
    response = client.post("/api/movies/", json=NEW_MOVIE, headers=auth_headers(user))

    assert response.status_code == 403
    assert response.json()["detail"] == "Admin access required"
    assert db_session.query(Movie).count() == 0


def test_create_movie_requires_authentication(client, db_session):
    response = client.post("/api/movies/", json=NEW_MOVIE)

    assert response.status_code in (401, 403)
    assert db_session.query(Movie).count() == 0


def test_create_movie_validation_error_shape(client, admin):
    response = client.post("/api/movies/", json={"title": "", "year": 1500}, headers=auth_headers(admin))

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation failed"
    fields = {detail["field"] for detail in body["details"]}
    assert "body.title" in fields
    assert "body.year" in fields


def test_admin_update_and_delete(client, db_session, admin):
    movie = create_movie(db_session, title="Dune", year=2021, director="Denis Villeneuve")
    headers = auth_headers(admin)

    response = client.put(f"/api/movies/admin/custom-movies/{movie.id}", json={"year": 2022}, headers=headers)
    assert response.status_code == 200
    assert response.json()["movie"]["Year"] == "2022"
    assert response.json()["movie"]["Director"] == "Denis Villeneuve"

    response = client.delete(f"/api/movies/admin/custom-movies/{movie.id}", headers=headers)
    assert response.status_code == 200

    response = client.delete(f"/api/movies/admin/custom-movies/{movie.id}", headers=headers)
    assert response.status_code == 404


def test_admin_list_custom_movies(client, db_session, admin):
    for i in range(3):
        create_movie(db_session, title=f"Movie {i}", created_by=admin.id)

    response = client.get("/api/movies/admin/custom-movies?page=1&limit=2", headers=auth_headers(admin))

    assert response.status_code == 200
    body = response.json()
    assert [m["Title"] for m in body["movies"]] == ["Movie 2", "Movie 1"]
    assert body["movies"][0]["createdBy"] == "Admin"
    assert body["total_count"] == 3
    assert body["total_pages"] == 2
    assert body["has_more"] is True


def test_admin_routes_reject_regular_users(client, db_session, user):
    movie = create_movie(db_session)
    headers = auth_headers(user)

    assert client.get("/api/movies/admin/custom-movies", headers=headers).status_code == 403
    assert client.put(f"/api/movies/admin/custom-movies/{movie.id}", json={"year": 2000},
                      headers=headers).status_code == 403
    assert client.delete(f"/api/movies/admin/custom-movies/{movie.id}", headers=headers).status_code == 403


# ============================================
# Public catalog
# ============================================

def test_search_route(client, db_session):
    movie = create_movie(db_session, title="Dune", year=2021)

    response = client.get("/api/movies/search", params={"q": "dune"})

    assert response.status_code == 200
    body = response.json()
    assert [m["imdbID"] for m in body["Search"]] == [f"custom_{movie.id}"]
    assert body["externalError"] == "OMDb API key not configured"


def test_search_requires_query(client, db_session):
    assert client.get("/api/movies/search").status_code == 400


def test_details_route(client, db_session, monkeypatch):
    movie = create_movie(db_session, title="Arrival", year=2016)
    monkeypatch.setattr(OMDBService, "get_movie_by_id",
                        lambda imdb_id: {"Title": "Dune", "imdbID": imdb_id, "Response": "True"})

    assert client.get(f"/api/movies/custom_{movie.id}").json()["Title"] == "Arrival"
    assert client.get("/api/movies/tt1160419").json()["Source"] == "omdb"
    assert client.get("/api/movies/custom_999").status_code == 404


def test_health_reports_tables_and_omdb(client, db_session):
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["database"]["connected"] is True
    assert body["database"]["missing_tables"] == []
    assert body["omdb"]["configured"] is False
