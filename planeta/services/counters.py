"""
Denormalized engagement counters.

replyCount and the recipe rating summary are caches: they are always
recomputed from the child rows, never adjusted by a local +1/-1. Likes
and views are changed with single atomic UPDATE statements.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Tuple

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from planeta.models.content import Recipe, RecipeComment
from planeta.models.forum import ForumComment, ForumPost, ForumReply
from planeta.utils.identifiers import utcnow

logger = logging.getLogger(__name__)


def count_post_children(db: Session, post_id: str) -> int:
    comments = db.query(func.count(ForumComment.id)).filter(
        ForumComment.post_id == post_id, ForumComment.is_deleted.is_(False)
    ).scalar()
    replies = db.query(func.count(ForumReply.id)).filter(
        ForumReply.post_id == post_id, ForumReply.is_deleted.is_(False)
    ).scalar()
    return (comments or 0) + (replies or 0)


def resync_reply_count(db: Session, post_id: str, touch_activity: bool = False) -> int:
    count = count_post_children(db, post_id)
    values = {"reply_count": count}
    if touch_activity:
        values["last_activity_at"] = utcnow()
    db.execute(update(ForumPost).where(ForumPost.id == post_id).values(**values))
    db.commit()
    return count


def refresh_reply_count(db: Session, post_id: str, touch_activity: bool = False) -> Optional[int]:
    """Best-effort resync: failures are logged, the caller's mutation stands."""
    try:
        return resync_reply_count(db, post_id, touch_activity)
    except SQLAlchemyError:
        db.rollback()
        logger.error(f"Failed to resync replyCount for post {post_id}", exc_info=True)
        return None


def increment_likes(db: Session, model, item_id: str) -> int:
    result = db.execute(update(model).where(model.id == item_id).values(likes=model.likes + 1))
    db.commit()
    return result.rowcount


def decrement_likes(db: Session, model, item_id: str) -> int:
    """Atomic decrement that never goes below zero."""
    result = db.execute(
        update(model).where(model.id == item_id, model.likes > 0).values(likes=model.likes - 1)
    )
    db.commit()
    return result.rowcount


def increment_post_views(db: Session, post_id: str, amount: int = 1) -> None:
    db.execute(update(ForumPost).where(ForumPost.id == post_id).values(views=ForumPost.views + amount))
    db.commit()


def round_rating(value: float) -> float:
    # 与前端保持一致: 四舍五入保留 1 位小数
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def recompute_recipe_rating(db: Session, recipe_id: str) -> Tuple[float, int]:
    average, total = db.query(func.avg(RecipeComment.rating), func.count(RecipeComment.id)).filter(
        RecipeComment.recipe_id == recipe_id,
        RecipeComment.approved.is_(True),
        RecipeComment.is_deleted.is_(False),
        RecipeComment.rating.isnot(None),
    ).one()
    average = round_rating(average) if total else 0.0
    db.execute(
        update(Recipe).where(Recipe.id == recipe_id).values(average_rating=average, total_ratings=total)
    )
    db.commit()
    return average, total


def refresh_recipe_rating(db: Session, recipe_id: str) -> Optional[Tuple[float, int]]:
    try:
        return recompute_recipe_rating(db, recipe_id)
    except SQLAlchemyError:
        db.rollback()
        logger.error(f"Failed to recompute rating for recipe {recipe_id}", exc_info=True)
        return None


def reconcile_all(db: Session) -> Tuple[int, int]:
    """Rebuild every post replyCount and every recipe rating. Returns (posts, recipes) touched."""
    post_ids = [row[0] for row in db.query(ForumPost.id).all()]
    for post_id in post_ids:
        resync_reply_count(db, post_id)

    recipe_ids = [row[0] for row in db.query(Recipe.id).all()]
    for recipe_id in recipe_ids:
        recompute_recipe_rating(db, recipe_id)

    return len(post_ids), len(recipe_ids)
