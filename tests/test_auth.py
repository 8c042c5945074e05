from app.models.user import User
from tests.factories import auth_headers, create_user


def register(client, email="new@example.com", password="secret123", name="New User"):
    return client.post("/api/auth/register", json={"email": email, "password": password, "name": name})


def test_register_logs_in_as_regular_user(client, db_session):
    response = register(client, email="New@Example.com")

    assert response.status_code == 201
    body = response.json()
    assert body["token"]
    assert body["user"]["email"] == "new@example.com"
    assert body["user"]["role"] == "user"

    profile = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {body['token']}"})
    assert profile.status_code == 200
    assert profile.json()["user"]["name"] == "New User"


def test_register_ignores_role_in_payload(client, db_session):
    response = client.post("/api/auth/register", json={
        "email": "sneaky@example.com", "password": "secret123", "name": "Sneaky", "role": "admin"
    })

    assert response.status_code == 201
    assert db_session.query(User).filter(User.email == "sneaky@example.com").one().role == "user"


def test_register_duplicate_email(client, db_session):
    register(client)
    assert register(client).status_code == 409


def test_register_validation(client, db_session):
    assert register(client, password="123").status_code == 400
    assert register(client, email="not-an-email").status_code == 400


def test_login(client, db_session):
    create_user(db_session, email="login@example.com", password="Password123!")

    ok = client.post("/api/auth/login", json={"email": "login@example.com", "password": "Password123!"})
    wrong = client.post("/api/auth/login", json={"email": "login@example.com", "password": "nope"})
    unknown = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "nope"})

    assert ok.status_code == 200
    assert ok.json()["token"]
    assert wrong.status_code == 401
    assert unknown.status_code == 401
    assert wrong.json()["detail"] == unknown.json()["detail"] == "Invalid email or password"


def test_inactive_user_cannot_login(client, db_session):
    user = create_user(db_session, email="gone@example.com", password="Password123!")
    user.is_active = False
    db_session.commit()

    response = client.post("/api/auth/login", json={"email": "gone@example.com", "password": "Password123!"})

    assert response.status_code == 403


def test_invalid_token_is_rejected(client, db_session):
    response = client.get("/api/auth/verify", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401


def test_update_profile(client, db_session, user, other_user):
    headers = auth_headers(user)

    taken = client.put("/api/auth/profile", json={"email": other_user.email}, headers=headers)
    renamed = client.put("/api/auth/profile", json={"name": "Renamed"}, headers=headers)

    assert taken.status_code == 409
    assert renamed.status_code == 200
    assert renamed.json()["user"]["name"] == "Renamed"
    assert renamed.json()["user"]["email"] == user.email
