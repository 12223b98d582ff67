"""
食谱 / 博客评论 Schema
"""
from datetime import datetime
from typing import Optional
from pydantic import field_validator
from pydantic_core import PydanticCustomError

from planeta.schemas.common import CamelModel, required_text, check_length, check_email

CONTENT_MSG = "El comentario debe tener entre 4 y 2000 caracteres"
RATING_MSG = "La valoración debe ser un número entero entre 1 y 5"


class CommentFields(CamelModel):
    author_name: str
    author_email: str
    content: str
    author_id: Optional[str] = None

    @field_validator("author_name", "author_email", "content", mode="before")
    @classmethod
    def not_blank(cls, v):
        return required_text(v)

    @field_validator("content")
    @classmethod
    def content_length(cls, v):
        return check_length(v, 4, 2000, CONTENT_MSG)

    @field_validator("author_email")
    @classmethod
    def email_format(cls, v):
        return check_email(v.strip())


class RecipeCommentCreate(CommentFields):
    recipe_id: str
    rating: Optional[int] = None

    @field_validator("recipe_id", mode="before")
    @classmethod
    def recipe_not_blank(cls, v):
        return required_text(v)

    @field_validator("rating", mode="before")
    @classmethod
    def rating_range(cls, v):
        if v is None:
            return None
        # bool 是 int 的子类, 需排除
        if isinstance(v, bool) or not isinstance(v, int) or not 1 <= v <= 5:
            raise PydanticCustomError("forum_invalid", RATING_MSG)
        return v


class BlogCommentCreate(CommentFields):
    post_id: str

    @field_validator("post_id", mode="before")
    @classmethod
    def post_not_blank(cls, v):
        return required_text(v)


class RecipeCommentResponse(CamelModel):
    id: str
    recipe_id: str
    author_name: str
    content: str
    rating: Optional[int] = None
    created_at: Optional[datetime] = None


class BlogCommentResponse(CamelModel):
    id: str
    blog_post_id: str
    author_name: str
    content: str
    created_at: Optional[datetime] = None


class RatingSummary(CamelModel):
    average_rating: float = 0
    total_ratings: int = 0
