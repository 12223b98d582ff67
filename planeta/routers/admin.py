"""
管理员接口 (Bearer ADMIN_TOKEN) - 论坛数据的查看与物理删除
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from planeta.core.cache import redis_client, post_views_key
from planeta.core.database import get_db
from planeta.core.deps import require_admin
from planeta.models.forum import ForumComment, ForumPost, ForumReply
from planeta.schemas.common import ResponseModel


router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])
logger = logging.getLogger(__name__)


@router.get("/forum-posts", response_model=ResponseModel)
def list_forum_posts(db: Session = Depends(get_db)):
    """列出全部帖子 (含已删除)"""
    posts = db.query(ForumPost).order_by(ForumPost.created_at.desc()).all()
    comment_count = db.query(func.count(ForumComment.id)).scalar() or 0
    reply_count = db.query(func.count(ForumReply.id)).scalar() or 0
    records = [
        {
            "id": p.id,
            "title": p.title,
            "authorName": p.author_name,
            "isDeleted": p.is_deleted,
            "createdAt": p.created_at,
        }
        for p in posts
    ]
    return ResponseModel(
        code=200,
        data={
            "forumPosts": records,
            "forumCommentsCount": comment_count,
            "forumRepliesCount": reply_count,
            "totalItems": len(records) + comment_count + reply_count,
        }
    )


@router.delete("/forum-posts", response_model=ResponseModel)
def delete_forum_posts(db: Session = Depends(get_db)):
    """物理删除全部帖子及其评论和回复 (单个事务)"""
    post_ids = [row[0] for row in db.query(ForumPost.id).all()]
    if not post_ids:
        return ResponseModel(code=200, msg="No hay publicaciones del foro para eliminar", data={"deleted": 0})

    try:
        # 先删第二层评论, 再删根评论, 避免自引用外键冲突
        replies_to_comments = db.query(ForumComment).filter(ForumComment.parent_id.isnot(None)).delete(synchronize_session=False)
        root_comments = db.query(ForumComment).delete(synchronize_session=False)
        replies = db.query(ForumReply).delete(synchronize_session=False)
        posts = db.query(ForumPost).delete(synchronize_session=False)
        db.commit()
    except Exception:
        db.rollback()
        raise

    redis_client.delete(*[post_views_key(pid) for pid in post_ids])

    deleted = posts + replies_to_comments + root_comments + replies
    logger.warning(f"Admin hard delete: {posts} posts, {replies_to_comments + root_comments} comments, {replies} replies")
    return ResponseModel(
        code=200,
        msg=f"Eliminadas {posts} publicaciones y {deleted - posts} comentarios del foro",
        data={"deleted": deleted}
    )
