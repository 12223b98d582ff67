"""Tests for the scheduled maintenance jobs."""

import inspect
from unittest.mock import patch

import redis
from sqlalchemy.exc import OperationalError
from conftest import create_recipe, make_comment, make_post, post_id_of

from planeta.models import ForumPost, Recipe
from planeta.tasks.jobs import _post_id_from_key, reconcile_counters, sync_views_to_db


def test_post_id_from_key():
    assert _post_id_from_key("forum_post:forumPost_abc:views") == "forumPost_abc"
    assert _post_id_from_key("forum_post::views") is None
    assert _post_id_from_key("forum_post:views") is None


def test_sync_views_adds_buffered_deltas(redis_down, db):
    pid = post_id_of(make_post())
    redis_down.scan_iter.return_value = [f"forum_post:{pid}:views", "forum_post:broken"]
    redis_down.getdel.return_value = "5"

    sync_views_to_db()
    assert db.get(ForumPost, pid).views == 5
    redis_down.getdel.assert_called_once_with(f"forum_post:{pid}:views")


def test_sync_views_skips_empty_delta(redis_down, db):
    pid = post_id_of(make_post())
    redis_down.scan_iter.return_value = [f"forum_post:{pid}:views"]
    redis_down.getdel.return_value = None

    sync_views_to_db()
    assert db.get(ForumPost, pid).views == 0


def test_sync_views_survives_redis_outage(redis_down):
    redis_down.scan_iter.side_effect = redis.ConnectionError("redis unavailable")
    sync_views_to_db()


def test_reconcile_rebuilds_counters(db):
    pid = post_id_of(make_post())
    make_comment(pid)
    recipe_id = create_recipe()

    db.get(ForumPost, pid).reply_count = 99
    recipe = db.get(Recipe, recipe_id)
    recipe.average_rating = 4.7
    recipe.total_ratings = 12
    db.commit()

    reconcile_counters()

    db.expire_all()
    assert db.get(ForumPost, pid).reply_count == 1
    recipe = db.get(Recipe, recipe_id)
    assert (recipe.average_rating, recipe.total_ratings) == (0.0, 0)


def test_sync_views_restores_delta_when_db_write_fails(redis_down, db):
    pid = post_id_of(make_post())
    key = f"forum_post:{pid}:views"
    redis_down.scan_iter.return_value = [key]
    redis_down.getdel.return_value = "7"

    failure = OperationalError("UPDATE forum_posts", {}, Exception("database is locked"))
    with patch("planeta.tasks.jobs.increment_post_views", side_effect=failure):
        sync_views_to_db()

    redis_down.incrby.assert_called_once_with(key, 7)
    assert db.get(ForumPost, pid).views == 0


def test_jobs_are_plain_functions():
    # 调度器把同步任务放进线程池执行
    assert not inspect.iscoroutinefunction(sync_views_to_db)
    assert not inspect.iscoroutinefunction(reconcile_counters)
