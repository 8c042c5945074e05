from app.migrations.create_all_tables import seed_default_users
from app.models.user import User
from app.utils.security import verify_password


def test_seed_creates_admin_and_user(db_session, monkeypatch):
    monkeypatch.setenv("SEED_ADMIN_EMAIL", "Root@Example.com")
    monkeypatch.setenv("SEED_ADMIN_PASSWORD", "rootpass")
    monkeypatch.delenv("SEED_USER_EMAIL", raising=False)
    monkeypatch.delenv("SEED_USER_PASSWORD", raising=False)

    created = seed_default_users(db_session)

    assert len(created) == 2
    admin = db_session.query(User).filter(User.email == "root@example.com").one()
    demo = db_session.query(User).filter(User.email == "user@moviedb.com").one()
    assert admin.role == "admin"
    assert demo.role == "user"
    assert verify_password("rootpass", admin.password_hash)
    assert verify_password("user123", demo.password_hash)


def test_seed_is_idempotent(db_session):
    seed_default_users(db_session)

    assert seed_default_users(db_session) == []
    assert db_session.query(User).count() == 2


def test_seed_accepts_long_multibyte_password(db_session, monkeypatch):
    # 40 two-byte characters: 40 characters but 80 bytes
    password = "é" * 40
    monkeypatch.setenv("SEED_ADMIN_PASSWORD", password)

    seed_default_users(db_session)

    admin = db_session.query(User).filter(User.role == "admin").one()
    assert verify_password(password, admin.password_hash)
