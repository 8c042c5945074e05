"""Row builders shared by the test modules."""
from app.models.movie import Movie
from app.models.user import User, UserRole
from app.utils.security import hash_password, create_access_token


def create_user(session, email="user@example.com", password="Password123!", name="Test User",
                role=UserRole.USER):
    user = User(email=email, password_hash=hash_password(password), name=name, role=role.value)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def create_movie(session, title="Dune", year=2021, created_by=None, **fields):
    fields.setdefault("cast_members", [])
    fields.setdefault("genre", [])
    movie = Movie(title=title, year=year, created_by=created_by, **fields)
    session.add(movie)
    session.commit()
    session.refresh(movie)
    return movie


def auth_headers(user):
    token = create_access_token({"sub": user.email, "user_id": user.id})
    return {"Authorization": f"Bearer {token}"}
