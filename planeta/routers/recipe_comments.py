"""
食谱评论 API 路由 - 发表评论后重新计算食谱平均评分
"""
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from planeta.core.config import settings
from planeta.core.database import get_db
from planeta.core.exceptions import NotFound
from planeta.models.content import Recipe, RecipeComment
from planeta.schemas.common import ResponseModel
from planeta.schemas.comment import RecipeCommentCreate, RecipeCommentResponse, RatingSummary
from planeta.services.counters import refresh_recipe_rating
from planeta.utils.identifiers import utcnow


router = APIRouter(prefix="/comments", tags=["recetas-comentarios"])
logger = logging.getLogger(__name__)


def get_recipe(db: Session, recipe_id: str) -> Recipe:
    recipe = db.get(Recipe, recipe_id)
    if not recipe:
        raise NotFound("Receta no encontrada")
    return recipe


@router.get("", response_model=ResponseModel)
def get_recipe_comments(recipe_id: str = Query(..., alias="recipeId"), db: Session = Depends(get_db)):
    """获取食谱评论 (旧 -> 新) 及评分汇总"""
    recipe = get_recipe(db, recipe_id)
    comments = (
        db.query(RecipeComment)
        .filter(
            RecipeComment.recipe_id == recipe_id,
            RecipeComment.approved.is_(True),
            RecipeComment.is_deleted.is_(False),
        )
        .order_by(RecipeComment.created_at.asc())
        .all()
    )
    return ResponseModel(
        code=200,
        data={
            "comments": [RecipeCommentResponse.model_validate(c) for c in comments],
            "rating": RatingSummary.model_validate(recipe),
        }
    )


@router.post("", response_model=ResponseModel)
def create_recipe_comment(comment_in: RecipeCommentCreate, db: Session = Depends(get_db)):
    """发表食谱评论 (可附 1-5 分评分)"""
    recipe = get_recipe(db, comment_in.recipe_id)

    comment = RecipeComment(
        recipe_id=recipe.id,
        author_name=comment_in.author_name.strip(),
        author_email=comment_in.author_email.strip(),
        author_id=comment_in.author_id,
        content=comment_in.content.strip(),
        rating=comment_in.rating,
        approved=True if settings.AUTO_APPROVE_CONTENT else None,
        is_deleted=False,
        created_at=utcnow(),
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)

    refresh_recipe_rating(db, recipe.id)
    db.refresh(recipe)

    return ResponseModel(
        code=200,
        msg="¡Comentario publicado exitosamente!",
        data={
            "comment": RecipeCommentResponse.model_validate(comment),
            "rating": RatingSummary.model_validate(recipe),
        }
    )
