"""Tests for slug derivation and allocation."""

import re
from unittest.mock import patch

from conftest import make_post

from planeta.models import ForumPost
from planeta.services.slugs import allocate_slug, insert_with_unique_slug, slugify


def build_post(slug=None, title="Receta de pan keto"):
    return ForumPost(
        title=title,
        slug=slug,
        content="Contenido de prueba del foro",
        author_name="Ana",
        author_email="ana@example.com",
        author_id="user-ana",
        category="general",
    )


def test_slugify_basic():
    assert slugify("Hola Mundo Keto") == "hola-mundo-keto"


def test_slugify_strips_accents_and_symbols():
    assert slugify("¡¿Qué tal el café con ñ?!") == "que-tal-el-cafe-con-n"


def test_slugify_collapses_whitespace_and_hyphens():
    assert slugify("  a  -- b  ") == "a-b"


def test_slugify_truncates():
    assert slugify("a" * 120, max_length=96) == "a" * 96


def test_slugify_truncation_drops_trailing_hyphen():
    title = "a" * 95 + " b"
    assert slugify(title, max_length=96) == "a" * 95


def test_slugify_empty_falls_back():
    assert slugify("¿¡!?") == "publicacion"


def test_sequential_posts_get_suffixes():
    slugs = [
        make_post(title="Pan keto casero").json()["data"]["post"]["slug"]
        for _ in range(3)
    ]
    assert slugs == ["pan-keto-casero", "pan-keto-casero-1", "pan-keto-casero-2"]


def test_allocate_slug_falls_back_after_max_attempts(db):
    for slug in ("pan", "pan-1", "pan-2"):
        db.add(build_post(slug=slug))
    db.commit()

    slug = allocate_slug(db, ForumPost, "Pan", max_attempts=2)
    assert re.fullmatch(r"pan-[0-9a-f]{8}", slug)


def test_insert_retries_when_slug_taken_concurrently(db):
    db.add(build_post(slug="receta-de-pan-keto"))
    db.commit()

    # Simulates another request taking the slug between check and insert
    with patch(
        "planeta.services.slugs.allocate_slug",
        side_effect=["receta-de-pan-keto", "receta-de-pan-keto-1"],
    ):
        post = insert_with_unique_slug(db, build_post(), "Receta de pan keto")

    assert post.slug == "receta-de-pan-keto-1"
    assert db.query(ForumPost).count() == 2
