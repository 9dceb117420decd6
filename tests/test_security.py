"""Unit tests for password hashing and the User password boundary."""

from __future__ import annotations

from taskhub.server.db.tables import User
from taskhub.server.security import hash_password, verify_password


def test_hash_and_verify():
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert hashed.startswith("$pbkdf2-sha256$")
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong", hashed)


def test_verify_rejects_missing_or_malformed_hash():
    assert not verify_password("secret123", None)
    assert not verify_password("secret123", "")
    assert not verify_password("secret123", "not-a-hash")


def test_user_password_is_hashed_on_assignment():
    user = User(email="a@x.com", name="A", password="secret123")
    assert user.password is not None
    assert user.password != "secret123"
    assert user.compare_password("secret123")
    assert not user.compare_password("wrong")


def test_user_hash_shaped_password_is_hashed_like_any_other():
    hash_shaped = hash_password("other")
    user = User(email="a@x.com", name="A", password=hash_shaped)
    assert user.password != hash_shaped
    assert user.compare_password(hash_shaped)
    assert not user.compare_password("other")


def test_user_without_password_never_matches():
    user = User(email="a@x.com", name="A")
    assert user.password is None
    assert not user.compare_password("")


def test_omit_password():
    user = User(user_id="u1", email="a@x.com", name="A", password="secret123")
    public = user.omit_password()
    assert public.user_id == "u1"
    assert "password" not in public.model_dump()
