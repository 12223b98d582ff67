"""Tests for recipe comments, ratings and blog comments."""

import pytest
from conftest import client, create_blog_post, create_recipe, url

from planeta.models import Recipe
from planeta.services.counters import round_rating


@pytest.fixture
def recipe_id():
    return create_recipe()


def comment_on_recipe(recipe_id, **overrides):
    data = {
        "recipeId": recipe_id,
        "authorName": "Marta",
        "authorEmail": "marta@example.com",
        "content": "Me encantó esta receta",
    }
    data.update(overrides)
    return client.post(url("/comments"), json=data)


def test_comment_with_rating(recipe_id):
    r = comment_on_recipe(recipe_id, rating=5)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["comment"]["id"].startswith("recipeComment_")
    assert data["comment"]["rating"] == 5
    assert data["rating"] == {"averageRating": 5.0, "totalRatings": 1}


def test_average_rating(recipe_id, db):
    for rating in (5, 4, 3):
        comment_on_recipe(recipe_id, rating=rating)
    recipe = db.get(Recipe, recipe_id)
    assert recipe.average_rating == 4.0
    assert recipe.total_ratings == 3


def test_average_rating_is_rounded(recipe_id):
    for rating in (5, 4, 4):
        r = comment_on_recipe(recipe_id, rating=rating)
    assert r.json()["data"]["rating"]["averageRating"] == 4.3


def test_round_rating_half_up():
    assert round_rating(4.25) == 4.3
    assert round_rating(4.5) == 4.5
    assert round_rating(13 / 3) == 4.3


def test_comment_without_rating_not_counted(recipe_id):
    comment_on_recipe(recipe_id, rating=4)
    r = comment_on_recipe(recipe_id)
    assert r.json()["data"]["rating"] == {"averageRating": 4.0, "totalRatings": 1}


@pytest.mark.parametrize("rating", [0, 6, 4.5, "5", True])
def test_invalid_rating(recipe_id, rating):
    r = comment_on_recipe(recipe_id, rating=rating)
    assert r.status_code == 400
    assert r.json()["msg"] == "La valoración debe ser un número entero entre 1 y 5"


@pytest.mark.parametrize("length,status", [(3, 400), (4, 200), (2000, 200), (2001, 400)])
def test_recipe_comment_length(recipe_id, length, status):
    assert comment_on_recipe(recipe_id, content="x" * length).status_code == status


def test_comment_on_missing_recipe():
    r = comment_on_recipe("recipe_missing")
    assert r.status_code == 404
    assert r.json()["msg"] == "Receta no encontrada"


def test_list_recipe_comments(recipe_id):
    comment_on_recipe(recipe_id, content="Primer comentario", rating=2)
    comment_on_recipe(recipe_id, content="Segundo comentario", rating=4)
    data = client.get(url("/comments"), params={"recipeId": recipe_id}).json()["data"]
    assert [c["content"] for c in data["comments"]] == ["Primer comentario", "Segundo comentario"]
    assert data["rating"] == {"averageRating": 3.0, "totalRatings": 2}


def test_pending_rating_not_counted(recipe_id, pending_by_default):
    r = comment_on_recipe(recipe_id, rating=5)
    assert r.json()["data"]["rating"]["totalRatings"] == 0
    data = client.get(url("/comments"), params={"recipeId": recipe_id}).json()["data"]
    assert data["comments"] == []


# --- Blog comments ---


def test_blog_comments():
    post_id = create_blog_post()
    r = client.post(url("/blog-comments"), json={
        "postId": post_id,
        "authorName": "Pablo",
        "authorEmail": "pablo@example.com",
        "content": "Gran artículo",
    })
    assert r.status_code == 200
    assert r.json()["data"]["comment"]["id"].startswith("blogComment_")

    data = client.get(url("/blog-comments"), params={"postId": post_id}).json()["data"]
    assert [c["content"] for c in data["comments"]] == ["Gran artículo"]


def test_blog_comment_on_missing_post():
    r = client.post(url("/blog-comments"), json={
        "postId": "blogPost_missing",
        "authorName": "Pablo",
        "authorEmail": "pablo@example.com",
        "content": "Gran artículo",
    })
    assert r.status_code == 404
    assert r.json()["msg"] == "Artículo no encontrado"
