"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules:
settings with a test signing key, in-memory repositories that keep the same
set semantics as the relation tables, and fake storage and mail transports.
"""

import itertools
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt  # PyJWT
import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import (
    get_auth_service,
    get_post_service,
    get_token_service,
    get_user_repository,
    get_user_service,
    reset_container,
)
from shared.config import Settings, get_settings
from shared.security import hash_password
from shared.storage import StorageError, StoredObject
from shared.mail import MailDeliveryError
from modules.auth.service import AuthService
from modules.auth.tokens import TokenService
from modules.posts.exceptions import PostNotFoundError
from modules.posts.models import NewPost, Post
from modules.posts.service import PostService
from modules.users.exceptions import UserAlreadyExistsError, UserNotFoundError
from modules.users.models import NewUser, User
from modules.users.service import UserService


# HS512 wants a key of at least 64 bytes
TEST_JWT_SECRET = "test-secret-key-for-testing-only-" + "0123456789abcdef" * 4
TEST_PASSWORD = "password123"


def create_test_token(
    user_id: str = "test-user-123",
    purpose: str = "session",
    expired: bool = False,
    secret: str = TEST_JWT_SECRET,
    **claims: Any,
) -> str:
    """
    Create a signed token the way TokenService does.

    Args:
        user_id: Subject of the token
        purpose: Purpose claim ("session", "activation", "password_reset")
        expired: If True, creates an expired token
        secret: Signing key; pass another value to forge a bad signature
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)
    payload = {
        **claims,
        "sub": user_id,
        "purpose": purpose,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm="HS512")


# -----------------------------------------------------------------------------
# In-memory fakes
# -----------------------------------------------------------------------------


class InMemoryStore:
    """Rows of every table, shared by the fake repositories."""

    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        self.posts: dict[str, Post] = {}
        self.follows: list[tuple[str, str]] = []   # (follower_id, following_id)
        self.likes: list[tuple[str, str]] = []     # (post_id, user_id)
        self.saved: list[tuple[str, str]] = []     # (user_id, post_id)
        self.reported: list[tuple[str, str]] = []  # (user_id, post_id)
        self.summaries: dict[str, Optional[str]] = {}
        self.extracts: dict[str, Optional[str]] = {}
        self._ids = itertools.count(1)
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    def tick(self) -> datetime:
        self._clock += timedelta(minutes=1)
        return self._clock

    def cascade_post(self, post_id: str) -> None:
        self.posts.pop(post_id, None)
        self.likes = [row for row in self.likes if row[0] != post_id]
        self.saved = [row for row in self.saved if row[1] != post_id]
        self.reported = [row for row in self.reported if row[1] != post_id]


class FakeUserRepository:
    """Dict-backed stand-in for UserRepository."""

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    def _hydrate(self, user: User) -> User:
        s = self.store
        return user.model_copy(update={
            "followers": [f for f, t in s.follows if t == user.id],
            "followings": [t for f, t in s.follows if f == user.id],
            "posts": [p.id for p in s.posts.values() if p.user_id == user.id],
            "saved_posts": [p for u, p in s.saved if u == user.id],
            "blacklisted_posts": [p for u, p in s.reported if u == user.id],
        })

    def get_by_id(self, user_id: str) -> Optional[User]:
        user = self.store.users.get(user_id)
        return self._hydrate(user) if user else None

    def get_by_email(self, email: str) -> Optional[User]:
        for user in self.store.users.values():
            if user.email == email:
                return self._hydrate(user)
        return None

    def exists_by_email(self, email: str) -> bool:
        return any(u.email == email for u in self.store.users.values())

    def exists_by_username(self, username: str) -> bool:
        return any(u.username == username for u in self.store.users.values())

    def list_all(self) -> list[User]:
        return [self._hydrate(u) for u in self.store.users.values()]

    def get_many(self, user_ids: list[str]) -> list[User]:
        return [self.get_by_id(uid) for uid in user_ids if uid in self.store.users]

    def create(self, new_user: NewUser) -> User:
        if self.exists_by_email(new_user.email) or self.exists_by_username(new_user.username):
            raise UserAlreadyExistsError(new_user.email)
        now = self.store.tick()
        user = User(
            id=self.store.next_id("user"),
            created_at=now,
            updated_at=now,
            **new_user.model_dump(),
        )
        self.store.users[user.id] = user
        return user

    def update(self, user_id: str, changes: dict[str, Any]) -> User:
        user = self.store.users.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        self.store.users[user_id] = user.model_copy(
            update={**changes, "updated_at": self.store.tick()}
        )
        return self.get_by_id(user_id)

    def delete(self, user_id: str) -> None:
        s = self.store
        s.users.pop(user_id, None)
        for post_id in [p.id for p in s.posts.values() if p.user_id == user_id]:
            s.cascade_post(post_id)
        s.follows = [row for row in s.follows if user_id not in row]
        s.likes = [row for row in s.likes if row[1] != user_id]
        s.saved = [row for row in s.saved if row[0] != user_id]
        s.reported = [row for row in s.reported if row[0] != user_id]

    def is_following(self, follower_id: str, target_id: str) -> bool:
        return (follower_id, target_id) in self.store.follows

    def add_follow(self, follower_id: str, target_id: str) -> bool:
        if self.is_following(follower_id, target_id):
            return False
        self.store.follows.append((follower_id, target_id))
        return True

    def remove_follow(self, follower_id: str, target_id: str) -> bool:
        if not self.is_following(follower_id, target_id):
            return False
        self.store.follows.remove((follower_id, target_id))
        return True

    def has_saved_post(self, user_id: str, post_id: str) -> bool:
        return (user_id, post_id) in self.store.saved

    def add_saved_post(self, user_id: str, post_id: str) -> bool:
        if self.has_saved_post(user_id, post_id):
            return False
        self.store.saved.append((user_id, post_id))
        return True

    def remove_saved_post(self, user_id: str, post_id: str) -> bool:
        if not self.has_saved_post(user_id, post_id):
            return False
        self.store.saved.remove((user_id, post_id))
        return True

    def add_reported_post(self, user_id: str, post_id: str) -> None:
        if (user_id, post_id) not in self.store.reported:
            self.store.reported.append((user_id, post_id))


class FakePostRepository:
    """Dict-backed stand-in for PostRepository."""

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self.fail_on_create = False

    def _hydrate(self, post: Post) -> Post:
        return post.model_copy(
            update={"likes": [u for p, u in self.store.likes if p == post.id]}
        )

    def get_by_id(self, post_id: str) -> Optional[Post]:
        post = self.store.posts.get(post_id)
        return self._hydrate(post) if post else None

    def list_all(self) -> list[Post]:
        posts = sorted(self.store.posts.values(), key=lambda p: p.created_at)
        return [self._hydrate(p) for p in posts]

    def list_by_user(self, user_id: str) -> list[Post]:
        return [p for p in self.list_all() if p.user_id == user_id]

    def get_many(self, post_ids: list[str]) -> list[Post]:
        return [self.get_by_id(pid) for pid in post_ids if pid in self.store.posts]

    def list_file_keys_by_user(self, user_id: str) -> list[str]:
        return [p.file_key for p in self.list_by_user(user_id) if p.file_key]

    def create(self, new_post: NewPost) -> Post:
        if self.fail_on_create:
            raise RuntimeError("insert failed")
        now = self.store.tick()
        post = Post(
            id=self.store.next_id("post"),
            created_at=now,
            updated_at=now,
            **new_post.model_dump(),
        )
        self.store.posts[post.id] = post
        return post

    def update(self, post_id: str, changes: dict[str, Any]) -> Post:
        post = self.store.posts.get(post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        self.store.posts[post_id] = post.model_copy(
            update={**changes, "updated_at": self.store.tick()}
        )
        return self.get_by_id(post_id)

    def mark_blacklisted(self, post_id: str) -> None:
        post = self.store.posts[post_id]
        self.store.posts[post_id] = post.model_copy(update={"is_blacklisted": True})

    def delete(self, post_id: str) -> None:
        self.store.cascade_post(post_id)

    def has_like(self, post_id: str, user_id: str) -> bool:
        return (post_id, user_id) in self.store.likes

    def add_like(self, post_id: str, user_id: str) -> bool:
        if (post_id, user_id) in self.store.likes:
            return False
        self.store.likes.append((post_id, user_id))
        return True

    def remove_like(self, post_id: str, user_id: str) -> bool:
        if (post_id, user_id) not in self.store.likes:
            return False
        self.store.likes.remove((post_id, user_id))
        return True

    def get_summary(self, post_id: str) -> Optional[str]:
        return self.store.summaries.get(post_id)

    def get_extracted_text(self, post_id: str) -> Optional[str]:
        return self.store.extracts.get(post_id)


class FakeStorage:
    """Object storage kept in a dict."""

    def __init__(self) -> None:
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.deleted: list[str] = []
        self.fail_on_delete = False
        self._ids = itertools.count(1)

    def put(self, content: bytes, content_type: str, file_name: Optional[str]) -> StoredObject:
        key = f"{next(self._ids)}__{file_name or 'unnamed'}"
        self.objects[key] = (content, content_type)
        return StoredObject(key=key, url=f"https://storage.test/posts/{key}")

    def get(self, key: str) -> bytes:
        if key not in self.objects:
            raise StorageError("Failed to download file: not found", key)
        return self.objects[key][0]

    def delete(self, key: str) -> None:
        if self.fail_on_delete:
            raise StorageError("Failed to delete file: storage offline", key)
        self.objects.pop(key, None)
        self.deleted.append(key)

    def presign(self, key: str, ttl_minutes: int) -> str:
        return f"https://storage.test/signed/{key}?ttl={ttl_minutes * 60}"


class FakeMailer:
    """Records outgoing mail instead of talking SMTP."""

    def __init__(self) -> None:
        self.sent: list[dict[str, str]] = []
        self.dispatched: list[dict[str, str]] = []
        self.fail = False

    def send(self, to: str, subject: str, html_body: str) -> None:
        if self.fail:
            raise MailDeliveryError(to, "connection refused")
        self.sent.append({"to": to, "subject": subject, "html": html_body})

    async def send_async(self, to: str, subject: str, html_body: str) -> None:
        self.send(to, subject, html_body)

    def dispatch(self, to: str, subject: str, html_body: str) -> None:
        self.dispatched.append({"to": to, "subject": subject, "html": html_body})


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def test_environment(monkeypatch):
    """Point settings at test values and drop cached settings and services."""
    monkeypatch.setenv("JWT_SECRET", TEST_JWT_SECRET)
    monkeypatch.setenv("VALID_DOMAIN", "example.com")
    monkeypatch.setenv("FRONTEND_URL", "http://frontend.test")
    monkeypatch.setenv("API_BASE_URL", "http://api.test")
    get_settings.cache_clear()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_container()


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def user_repo(store) -> FakeUserRepository:
    return FakeUserRepository(store)


@pytest.fixture
def post_repo(store) -> FakePostRepository:
    return FakePostRepository(store)


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def tokens(settings) -> TokenService:
    return TokenService(settings)


@pytest.fixture
def auth_service(user_repo, tokens, mailer, settings) -> AuthService:
    return AuthService(users=user_repo, tokens=tokens, mailer=mailer, settings=settings)


@pytest.fixture
def user_service(user_repo, post_repo, storage) -> UserService:
    return UserService(repository=user_repo, post_repository=post_repo, storage=storage)


@pytest.fixture
def post_service(post_repo, user_repo, storage, settings) -> PostService:
    return PostService(
        repository=post_repo, users=user_repo, storage=storage, settings=settings
    )


@pytest.fixture
def make_user(user_repo):
    """Factory inserting a user whose password is TEST_PASSWORD."""
    password_hash = hash_password(TEST_PASSWORD)

    def _make(username: str = "alice", **fields: Any) -> User:
        data = {
            "username": username,
            "firstname": username.capitalize(),
            "lastname": "Tester",
            "email": f"{username}@example.com",
            "password_hash": password_hash,
            **fields,
        }
        return user_repo.create(NewUser(**data))

    return _make


@pytest.fixture
def make_post(post_repo):
    """Factory inserting a post owned by the given user."""

    def _make(user_id: str, title: str = "Lecture notes", **fields: Any) -> Post:
        data = {
            "user_id": user_id,
            "title": title,
            "description": "Week 1",
            "file_url": f"https://storage.test/posts/{title}.pdf",
            "file_key": f"1700000000__{title.replace(' ', '_')}.pdf",
            "file_type": "application/pdf",
            "file_name": f"{title}.pdf",
            "program": "CS",
            "course": "cs101",
            "resource_type": "notes",
            **fields,
        }
        return post_repo.create(NewPost(**data))

    return _make


@pytest.fixture
def app(user_repo, tokens, auth_service, user_service, post_service):
    """App wired to the in-memory fakes."""
    app = create_app()
    app.dependency_overrides[get_user_repository] = lambda: user_repo
    app.dependency_overrides[get_token_service] = lambda: tokens
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    app.dependency_overrides[get_user_service] = lambda: user_service
    app.dependency_overrides[get_post_service] = lambda: post_service
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def login_as(client, tokens):
    """Put a session cookie for the given user on the test client."""

    def _login(user: User) -> TestClient:
        client.cookies.set("token", tokens.issue_session(user.id))
        return client

    return _login


@pytest.fixture
def make_token():
    """Sign arbitrary tokens with the test key (or a forged one)."""
    return create_test_token
