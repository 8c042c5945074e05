from app.utils.security import hash_password, verify_password


def test_passwords_are_cut_at_72_bytes_not_characters():
    # 24 three-byte characters fill bcrypt's 72 bytes exactly
    prefix = "€" * 24
    hashed = hash_password(prefix + "first")

    assert verify_password(prefix + "second", hashed)
    assert not verify_password("€" * 23, hashed)


def test_ascii_password_round_trip():
    hashed = hash_password("Password123!")

    assert verify_password("Password123!", hashed)
    assert not verify_password("password123!", hashed)
