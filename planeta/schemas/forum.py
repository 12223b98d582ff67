"""
论坛相关 Schema (帖子 / 评论 / 回复)
"""
from datetime import datetime
from typing import Optional, List
from pydantic import Field, field_validator

from planeta.schemas.common import CamelModel, required_text, check_length, check_email

TITLE_MSG = "El título debe tener entre 5 y 200 caracteres"
POST_CONTENT_MSG = "El contenido debe tener entre 10 y 5000 caracteres"
COMMENT_CONTENT_MSG = "El comentario debe tener entre 5 y 1000 caracteres"
REPLY_CONTENT_MSG = "El contenido debe tener entre 5 y 2000 caracteres"

MAX_TAGS = 10
MAX_TAG_LENGTH = 50


def _clean_tags(value):
    if not isinstance(value, list):
        return []
    return [str(t).strip()[:MAX_TAG_LENGTH] for t in value if t and str(t).strip()][:MAX_TAGS]


# ============ 帖子 ============

class ForumPostFields(CamelModel):
    title: str
    content: str
    category: str
    tags: List[str] = Field(default_factory=list)

    @field_validator("title", "content", "category", mode="before")
    @classmethod
    def not_blank(cls, v):
        return required_text(v)

    @field_validator("title")
    @classmethod
    def title_length(cls, v):
        return check_length(v, 5, 200, TITLE_MSG)

    @field_validator("content")
    @classmethod
    def content_length(cls, v):
        return check_length(v, 10, 5000, POST_CONTENT_MSG)

    @field_validator("category")
    @classmethod
    def category_length(cls, v):
        return check_length(v.strip(), 1, 50, "Categoría inválida")

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v):
        return _clean_tags(v)


class ForumPostCreate(ForumPostFields):
    """创建帖子请求"""
    author_name: str
    author_email: str
    author_id: str

    @field_validator("author_name", "author_email", "author_id", mode="before")
    @classmethod
    def author_not_blank(cls, v):
        return required_text(v)

    @field_validator("author_email")
    @classmethod
    def email_format(cls, v):
        return check_email(v.strip())


class ForumPostUpdate(ForumPostFields):
    """更新帖子请求 (仅作者本人)"""
    post_id: str
    author_id: str

    @field_validator("post_id", "author_id", mode="before")
    @classmethod
    def ids_not_blank(cls, v):
        return required_text(v)


class ForumPostDelete(CamelModel):
    post_id: str
    author_id: str

    @field_validator("post_id", "author_id", mode="before")
    @classmethod
    def ids_not_blank(cls, v):
        return required_text(v)


class ForumPostResponse(CamelModel):
    id: str
    title: str
    slug: str
    content: str
    author_name: str
    author_id: str
    category: str
    tags: List[str] = []
    is_pinned: bool = False
    is_locked: bool = False
    is_edited: bool = False
    views: int = 0
    likes: int = 0
    reply_count: int = 0
    last_activity_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============ 评论 (两级) ============

class ForumCommentCreate(CamelModel):
    content: str
    author_name: str
    author_email: str
    author_id: str
    parent_id: Optional[str] = None

    @field_validator("content", "author_name", "author_email", "author_id", mode="before")
    @classmethod
    def not_blank(cls, v):
        return required_text(v)

    @field_validator("content")
    @classmethod
    def content_length(cls, v):
        return check_length(v, 5, 1000, COMMENT_CONTENT_MSG)

    @field_validator("author_email")
    @classmethod
    def email_format(cls, v):
        return check_email(v.strip())


class ForumCommentUpdate(CamelModel):
    content: str
    author_id: str

    @field_validator("content", "author_id", mode="before")
    @classmethod
    def not_blank(cls, v):
        return required_text(v)

    @field_validator("content")
    @classmethod
    def content_length(cls, v):
        return check_length(v, 5, 1000, COMMENT_CONTENT_MSG)


class AuthorRef(CamelModel):
    author_id: str

    @field_validator("author_id", mode="before")
    @classmethod
    def not_blank(cls, v):
        return required_text(v)


class ThreadReply(CamelModel):
    """回复 (第二层)"""
    id: str
    content: str
    author_name: str
    author_id: str
    approved: Optional[bool] = None
    is_deleted: bool = False
    is_edited: bool = False
    likes: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    parent_id: Optional[str] = None


class ThreadComment(CamelModel):
    """根评论 (包含回复列表)"""
    id: str
    content: str
    author_name: str
    author_id: str
    approved: Optional[bool] = None
    is_deleted: bool = False
    is_edited: bool = False
    likes: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    replies: List[ThreadReply] = []


# ============ 回复 (独立内容类型) ============

class ForumReplyCreate(CamelModel):
    content: str
    post_id: str
    author_name: str
    author_email: str
    author_id: str

    @field_validator("content", "post_id", "author_name", "author_email", "author_id", mode="before")
    @classmethod
    def not_blank(cls, v):
        return required_text(v)

    @field_validator("content")
    @classmethod
    def content_length(cls, v):
        return check_length(v, 5, 2000, REPLY_CONTENT_MSG)

    @field_validator("author_email")
    @classmethod
    def email_format(cls, v):
        return check_email(v.strip())


class ForumReplyUpdate(CamelModel):
    reply_id: str
    author_id: str
    content: str

    @field_validator("reply_id", "author_id", "content", mode="before")
    @classmethod
    def not_blank(cls, v):
        return required_text(v)

    @field_validator("content")
    @classmethod
    def content_length(cls, v):
        return check_length(v, 5, 2000, REPLY_CONTENT_MSG)


class ForumReplyDelete(CamelModel):
    reply_id: str
    author_id: str
    post_id: Optional[str] = None

    @field_validator("reply_id", "author_id", mode="before")
    @classmethod
    def not_blank(cls, v):
        return required_text(v)


class ForumReplyResponse(CamelModel):
    id: str
    post_id: str
    content: str
    author_name: str
    author_id: str
    likes: int = 0
    is_edited: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
