"""Shared test fixtures for the community API tests."""

import os
import tempfile
from unittest.mock import MagicMock

import pytest
import redis

# Use a temp SQLite DB; must be set before importing planeta modules
_tmp_dir = tempfile.mkdtemp()
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmp_dir, 'test.db')}"
os.environ["SCHEDULER_ENABLED"] = "false"

from fastapi.testclient import TestClient  # noqa: E402

from planeta.core.cache import redis_client  # noqa: E402
from planeta.core.config import settings  # noqa: E402
from planeta.core.database import Base, SessionLocal, engine  # noqa: E402
from planeta.main import app  # noqa: E402
from planeta.models import BlogPost, Recipe  # noqa: E402

API = settings.API_V1_PREFIX
client = TestClient(app)


def url(path: str) -> str:
    return f"{API}{path}"


def make_post(**overrides):
    """Create a forum post with defaults."""
    data = {
        "title": "Mi primera semana keto",
        "content": "Contenido suficientemente largo para el foro.",
        "category": "general",
        "authorName": "Ana",
        "authorEmail": "ana@example.com",
        "authorId": "user-ana",
    }
    data.update(overrides)
    return client.post(url("/forum"), json=data)


def post_id_of(response) -> str:
    return response.json()["data"]["post"]["id"]


def make_comment(post_id, **overrides):
    data = {
        "content": "Muy buen aporte",
        "authorName": "Luis",
        "authorEmail": "luis@example.com",
        "authorId": "user-luis",
    }
    data.update(overrides)
    return client.post(url(f"/forum/{post_id}/comments"), json=data)


def make_reply(post_id, **overrides):
    data = {
        "content": "Gracias por compartir",
        "postId": post_id,
        "authorName": "Eva",
        "authorEmail": "eva@example.com",
        "authorId": "user-eva",
    }
    data.update(overrides)
    return client.post(url("/forum/replies"), json=data)


def delete_json(path: str, body: dict):
    return client.request("DELETE", url(path), json=body)


def create_recipe(title="Pan keto sin harina", slug="pan-keto-sin-harina") -> str:
    db = SessionLocal()
    try:
        recipe = Recipe(title=title, slug=slug)
        db.add(recipe)
        db.commit()
        return recipe.id
    finally:
        db.close()


def create_blog_post(title="Beneficios de la dieta keto", slug="beneficios-dieta-keto") -> str:
    db = SessionLocal()
    try:
        post = BlogPost(title=title, slug=slug)
        db.add(post)
        db.commit()
        return post.id
    finally:
        db.close()


@pytest.fixture(autouse=True)
def fresh_db():
    """Reset DB before each test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(autouse=True)
def redis_down(monkeypatch):
    """Redis is unreachable unless a test installs its own fake."""
    fake = MagicMock()
    fake.incr.side_effect = redis.ConnectionError("redis unavailable")
    fake.delete.side_effect = redis.ConnectionError("redis unavailable")
    monkeypatch.setattr(redis_client, "client", fake)
    return fake


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def pending_by_default(monkeypatch):
    monkeypatch.setattr(settings, "AUTO_APPROVE_CONTENT", False)
