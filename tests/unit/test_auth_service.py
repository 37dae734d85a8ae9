"""Tests for auth_service — hashing, tokens, registration and login."""

from datetime import timedelta

from app.application.services.auth_service import (
    create_access_token,
    decode_access_token,
    hash_password,
    login,
    register_user,
    seed_admin,
    send_welcome_email,
    verify_password,
)
from app.config import get_settings
from app.domain.models.user import ROLE_ADMIN, ROLE_CLIENT, User
from app.domain.schemas.auth import RegisterRequest
from app.infrastructure.email_sender import EmailSender
from app.infrastructure.repositories.user_repository import SQLAlchemyIdentityStore


class InMemoryStore:
    """IdentityStore double."""

    def __init__(self):
        self.users = {}

    def get_by_email(self, email):
        return self.users.get(email.strip().lower())

    def add(self, user):
        user.id = len(self.users) + 1
        user.is_active = True
        self.users[user.email.lower()] = user
        return user


def _register(store, **overrides):
    values = {"first_name": "Ana", "last_name": "Gomez", "email": "ana@example.com", "password": "secret1"}
    values.update(overrides)
    return register_user(store, RegisterRequest(**values))


def test_password_hashing():
    hashed = hash_password("secret1")
    assert hashed != "secret1"
    assert verify_password("secret1", hashed)
    assert not verify_password("wrong", hashed)


class TestTokens:

    def test_round_trip_claims(self):
        payload = decode_access_token(create_access_token({"sub": "ana@example.com", "role": "Admin"}))
        assert payload["sub"] == "ana@example.com"
        assert payload["role"] == "Admin"

    def test_expired_token(self):
        token = create_access_token({"sub": "ana@example.com"}, expires_delta=timedelta(seconds=-1))
        assert decode_access_token(token) is None

    def test_garbage_token(self):
        assert decode_access_token("not.a.token") is None


class TestRegister:

    def test_defaults_to_client_role(self):
        result = _register(InMemoryStore())
        assert result.succeeded
        assert result.user.role == ROLE_CLIENT

    def test_duplicate_email(self):
        store = InMemoryStore()
        _register(store)
        result = _register(store, email="ANA@example.com")
        assert not result.succeeded
        assert result.duplicate
        assert result.reason == "A user with this email already exists"

    def test_admin_cannot_self_register(self):
        result = _register(InMemoryStore(), role=ROLE_ADMIN)
        assert not result.succeeded
        assert not result.duplicate

    def test_unknown_role(self):
        assert _register(InMemoryStore(), role="Boss").reason == "Unknown role 'Boss'"


class TestLogin:

    def test_valid_credentials(self):
        store = InMemoryStore()
        _register(store)
        token = login(store, "ana@example.com", "secret1")
        assert token.token_type == "bearer"
        assert token.user.email == "ana@example.com"
        assert decode_access_token(token.access_token)["role"] == ROLE_CLIENT

    def test_wrong_password(self):
        store = InMemoryStore()
        _register(store)
        assert login(store, "ana@example.com", "nope") is None

    def test_inactive_user(self):
        store = InMemoryStore()
        user = _register(store).user
        user.is_active = False
        assert login(store, "ana@example.com", "secret1") is None


def test_seed_admin_is_idempotent(db):
    store = SQLAlchemyIdentityStore(db)
    assert seed_admin(store) is not None
    assert seed_admin(store) is None

    admins = db.query(User).filter(User.role == ROLE_ADMIN).all()
    assert [a.email for a in admins] == [get_settings().ADMIN_EMAIL]


def test_welcome_email_skipped_without_smtp():
    assert send_welcome_email(EmailSender(), "ana@example.com", "Ana") is False
