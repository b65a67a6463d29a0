"""Shared pytest fixtures for gallery tests."""

import io
import os
import tempfile
from typing import Callable, Generator

# Settings are read at import time, so the environment is prepared first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="gallery-storage-")
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["AI_API_KEY"] = ""
os.environ["STRIPE_SECRET_KEY"] = "sk_test_gallery"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_gallery"
os.environ["MAIL_HOST"] = ""
os.environ["TELEGRAM_NOTIFICATION_ENABLED"] = "false"
os.environ["REDIS_URL"] = ""
os.environ["PRINTFUL_API_KEY"] = ""
os.environ["PRINTIFY_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from gallery.core.database import Base, build_engine, get_db
from gallery.core.hasher import PasswordHelper
from gallery.core.limiter import limiter
from gallery.core.security import jwt_manager
from gallery.models.artwork import Artwork
from gallery.models.user import ADMIN_ROLE, USER_ROLE, User
from gallery.utils.file_upload import file_upload_service
from main import app

# One shared in-memory connection, visible from the TestClient worker threads
engine = build_engine("sqlite://", poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Fresh schema per test.

    Yields:
        Session bound to the in-memory test database
    """
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def storage_dir(tmp_path, monkeypatch):
    """Point uploads at a per-test directory."""
    monkeypatch.setattr(file_upload_service, "base_storage_path", tmp_path)
    return tmp_path


@pytest.fixture
def client(db: Session) -> Generator[TestClient, None, None]:
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    """Factory for persisted users."""

    def _make_user(
        email: str = "seeker@example.com",
        name: str = "Star Seeker",
        role: str = USER_ROLE,
        password: str = "cosmic-pass-1",
    ) -> User:
        user = User(
            email=email,
            name=name,
            role=role,
            hashed_password=PasswordHelper.hash_password(password),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def user(make_user) -> User:
    return make_user()


@pytest.fixture
def admin(make_user) -> User:
    return make_user(email="curator@example.com", name="Curator", role=ADMIN_ROLE)


def _bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {jwt_manager.create_access_token(user)}"}


@pytest.fixture
def headers_for() -> Callable[[User], dict]:
    return _bearer


@pytest.fixture
def auth_headers(user: User) -> dict:
    return _bearer(user)


@pytest.fixture
def admin_headers(admin: User) -> dict:
    return _bearer(admin)


@pytest.fixture
def make_artwork(db: Session) -> Callable[..., Artwork]:
    """Factory for persisted artworks."""
    counter = {"n": 0}

    def _make_artwork(title: str = None, **fields) -> Artwork:
        counter["n"] += 1
        title = title or f"Nebula Dreams {counter['n']}"
        artwork = Artwork(
            slug=fields.pop("slug", f"artwork-{counter['n']}"),
            title=title,
            description=fields.pop("description", f"{title} rendered in starlight"),
            **fields,
        )
        db.add(artwork)
        db.commit()
        db.refresh(artwork)
        return artwork

    return _make_artwork


@pytest.fixture
def artwork(make_artwork) -> Artwork:
    return make_artwork("Nebula Dreams")


def _encode_image(fmt: str = "PNG", size=(320, 240), color=(120, 40, 200)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def image_bytes() -> Callable[..., bytes]:
    """Encode a solid-colour test image."""
    return _encode_image
