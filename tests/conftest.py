"""Shared pytest fixtures.

Provides:
- In-memory SQLite session, fresh per test
- TestClient on the FastAPI app with the database, OpenAI client,
  geocoder and image store swapped for fakes
- Factory helpers for cases and model completions
"""

import os
from types import SimpleNamespace
from unittest.mock import MagicMock

# Force test configuration before the app is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["OPENAI_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from caselens.core.dependencies import get_db, get_geocoder, get_image_store, get_openai_client
from caselens.db.init_db import init_db
from caselens.main import app
from caselens.models import Case, CaseImage
from caselens.schemas.location import Coordinates
from caselens.services.errors import StorageError
from caselens.utils.s3 import StoredImage


def make_completion(text):
    """Shape of an OpenAI chat completion, as far as the services read it."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


class FakeGeocoder:
    def __init__(self, result=None):
        self.result = result
        self.calls = []

    def geocode(self, place):
        self.calls.append(place)
        return self.result


class FakeImageStore:
    def __init__(self):
        self.uploaded = {}
        self.deleted = []
        self.fail_uploads = False
        self.fail_deletes = False

    def case_key(self, case_id, name):
        return f"cases/case-{case_id}/{name}"

    def upload(self, key, data, content_type=None):
        if self.fail_uploads:
            raise StorageError("Failed to upload image: bucket unavailable")
        self.uploaded[key] = data
        return StoredImage(
            storage_key=key,
            remote_url=f"http://cdn.test/{key}",
            secure_remote_url=f"https://cdn.test/{key}",
        )

    def delete(self, key):
        self.deleted.append(key)
        if self.fail_deletes:
            raise StorageError(f"Failed to delete image {key}: access denied")


# ── Database fixtures ─────────────────────────────────────────────────

@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    Session = sessionmaker(bind=db_engine, autocommit=False, autoflush=False)
    session = Session()
    yield session
    session.close()


# ── Collaborator fakes ────────────────────────────────────────────────

@pytest.fixture
def openai_client():
    return MagicMock()


@pytest.fixture
def geocoder():
    return FakeGeocoder(result=Coordinates(lat=35.0, lng=-90.0))


@pytest.fixture
def image_store():
    return FakeImageStore()


@pytest.fixture
def client(db_session, openai_client, geocoder, image_store):
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_openai_client] = lambda: openai_client
    app.dependency_overrides[get_geocoder] = lambda: geocoder
    app.dependency_overrides[get_image_store] = lambda: image_store

    yield TestClient(app)

    app.dependency_overrides.clear()


# ── Factory helpers ───────────────────────────────────────────────────

@pytest.fixture
def make_case(db_session):
    def _make(title="Warehouse break-in", image_urls=(), **fields):
        case = Case(title=title, **fields)
        for i, url in enumerate(image_urls):
            case.images.append(
                CaseImage(
                    remote_url=url.replace("https://", "http://"),
                    secure_remote_url=url,
                    original_name=f"photo-{i}.jpg",
                    storage_key=f"cases/case-x/photo-{i}.jpg",
                    content_type="image/jpeg",
                )
            )
        db_session.add(case)
        db_session.commit()
        db_session.refresh(case)
        return case

    return _make
