"""
论坛帖子 API 路由
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from planeta.core.cache import redis_client, post_views_key
from planeta.core.config import settings
from planeta.core.database import get_db
from planeta.core.exceptions import NotFound, PermissionDenied
from planeta.models.forum import ForumPost, ForumReply
from planeta.schemas.common import ResponseModel
from planeta.schemas.forum import ForumPostCreate, ForumPostUpdate, ForumPostDelete, ForumPostResponse
from planeta.services.counters import increment_post_views
from planeta.services.slugs import insert_with_unique_slug
from planeta.utils.identifiers import FORUM_POST, kind_of, utcnow


router = APIRouter(prefix="/forum", tags=["foro"])
logger = logging.getLogger(__name__)

DELETED_POST_PLACEHOLDER = "[Publicación eliminada por el usuario]"


def public_posts(db: Session):
    """已通过审核且未删除的帖子"""
    return db.query(ForumPost).filter(ForumPost.approved.is_(True), ForumPost.is_deleted.is_(False))


def get_owned_post(db: Session, post_id: str, author_id: str, verb: str) -> ForumPost:
    post = db.get(ForumPost, post_id)
    if not post or post.is_deleted:
        raise NotFound("Publicación no encontrada")
    if post.author_id != author_id:
        raise PermissionDenied(f"No tienes permisos para {verb} esta publicación")
    return post


def like_pattern(term: str) -> str:
    """Substring pattern with the LIKE wildcards of ``term`` escaped."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


@router.get("", response_model=ResponseModel)
def list_posts(
    category: Optional[str] = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db)
):
    """获取帖子列表 (置顶优先, 新 -> 旧)"""
    query = public_posts(db)
    if category and category != "all":
        query = query.filter(ForumPost.category == category)

    total = query.count()
    posts = query.order_by(
        ForumPost.is_pinned.desc(), ForumPost.created_at.desc()
    ).offset(offset).limit(limit).all()

    return ResponseModel(
        code=200,
        data={
            "posts": [ForumPostResponse.model_validate(p) for p in posts],
            "total": total,
            "hasMore": offset + limit < total,
        }
    )


@router.post("", response_model=ResponseModel)
def create_post(post_in: ForumPostCreate, db: Session = Depends(get_db)):
    """创建帖子"""
    now = utcnow()
    post = ForumPost(
        title=post_in.title,
        content=post_in.content,
        category=post_in.category.strip(),
        tags=post_in.tags,
        author_name=post_in.author_name.strip(),
        author_email=post_in.author_email.strip(),
        author_id=post_in.author_id,
        is_pinned=False,
        is_locked=False,
        approved=True if settings.AUTO_APPROVE_CONTENT else None,
        is_edited=False,
        is_deleted=False,
        views=0,
        likes=0,
        reply_count=0,
        last_activity_at=now,
        created_at=now,
        updated_at=now,
    )
    insert_with_unique_slug(db, post, post_in.title)
    db.refresh(post)
    logger.info(f"Forum post created: {post.id} ({post.slug})")

    return ResponseModel(
        code=200,
        msg="¡Publicación creada exitosamente!",
        data={"post": ForumPostResponse.model_validate(post)}
    )


@router.put("", response_model=ResponseModel)
def update_post(post_in: ForumPostUpdate, db: Session = Depends(get_db)):
    """更新帖子 (仅作者本人)"""
    post = get_owned_post(db, post_in.post_id, post_in.author_id, "editar")

    now = utcnow()
    post.title = post_in.title
    post.content = post_in.content
    post.category = post_in.category.strip()
    post.tags = post_in.tags
    post.is_edited = True
    post.updated_at = now
    post.last_activity_at = now
    db.commit()
    db.refresh(post)

    return ResponseModel(
        code=200,
        msg="Publicación actualizada exitosamente",
        data={"post": ForumPostResponse.model_validate(post)}
    )


@router.delete("", response_model=ResponseModel)
def delete_post(post_in: ForumPostDelete, db: Session = Depends(get_db)):
    """删除帖子 (软删除, 仅作者本人)"""
    post = get_owned_post(db, post_in.post_id, post_in.author_id, "eliminar")

    post.is_deleted = True
    post.content = DELETED_POST_PLACEHOLDER
    post.deleted_at = post.updated_at = utcnow()
    db.commit()
    redis_client.delete(post_views_key(post.id))

    return ResponseModel(code=200, msg="Publicación eliminada exitosamente")


@router.get("/search", response_model=ResponseModel)
def search_posts(
    q: Optional[str] = None,
    category: Optional[str] = "all",
    db: Session = Depends(get_db)
):
    """搜索帖子: 标题 / 内容 / 作者, 以及回复内容命中的帖子"""
    term = (q or "").strip().lower()
    if not term:
        return ResponseModel(code=200, data={"posts": [], "total": 0})

    pattern = like_pattern(term)
    limit = settings.SEARCH_RESULT_LIMIT

    query = public_posts(db).filter(
        or_(
            ForumPost.title.ilike(pattern, escape="\\"),
            ForumPost.content.ilike(pattern, escape="\\"),
            ForumPost.author_name.ilike(pattern, escape="\\"),
        )
    )
    if category and category != "all":
        query = query.filter(ForumPost.category == category)
    posts = query.order_by(ForumPost.is_pinned.desc(), ForumPost.created_at.desc()).limit(limit).all()

    # 回复内容命中的帖子
    reply_post_ids = (
        db.query(ForumReply.post_id)
        .filter(
            ForumReply.content.ilike(pattern, escape="\\"),
            ForumReply.approved.is_(True),
            ForumReply.is_deleted.is_(False),
        )
        .distinct()
    )
    reply_query = public_posts(db).filter(ForumPost.id.in_(reply_post_ids))
    if category and category != "all":
        reply_query = reply_query.filter(ForumPost.category == category)
    reply_posts = reply_query.order_by(ForumPost.is_pinned.desc(), ForumPost.created_at.desc()).limit(limit).all()

    seen = set()
    results = []
    for post in posts + reply_posts:
        if post.id in seen:
            continue
        seen.add(post.id)
        results.append(ForumPostResponse.model_validate(post))
    results = results[:limit]

    return ResponseModel(code=200, data={"posts": results, "total": len(results)})


@router.get("/{post_ref}", response_model=ResponseModel)
def get_post(post_ref: str, db: Session = Depends(get_db)):
    """帖子详情 (id 或 slug), 浏览量先累计到 Redis"""
    query = public_posts(db)
    if kind_of(post_ref) == FORUM_POST:
        post = query.filter(ForumPost.id == post_ref).first()
    else:
        post = query.filter(ForumPost.slug == post_ref).first()
    if not post:
        raise NotFound("Publicación no encontrada")

    buffered = redis_client.incr(post_views_key(post.id))
    if not buffered:
        # Redis 不可用时直接写库
        increment_post_views(db, post.id)
        db.refresh(post)

    data = ForumPostResponse.model_validate(post)
    data.views = post.views + buffered
    return ResponseModel(code=200, data={"post": data})
