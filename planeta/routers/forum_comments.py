"""
论坛评论 API 路由 - 两级评论树, 每次变更后返回重建的完整评论树
"""
import logging

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from planeta.core.config import settings
from planeta.core.database import get_db
from planeta.core.exceptions import NotFound, PermissionDenied, ValidationFailed
from planeta.models.forum import ForumComment, ForumPost
from planeta.schemas.common import ResponseModel
from planeta.schemas.forum import ForumCommentCreate, ForumCommentUpdate, AuthorRef
from planeta.services.counters import decrement_likes, increment_likes, refresh_reply_count
from planeta.services.threads import build_comment_tree
from planeta.utils.identifiers import utcnow


router = APIRouter(prefix="/forum", tags=["foro-comentarios"])
logger = logging.getLogger(__name__)

DELETED_COMMENT_PLACEHOLDER = "[Comentario eliminado por el usuario]"


def get_live_post(db: Session, post_id: str) -> ForumPost:
    post = db.get(ForumPost, post_id)
    if not post or post.is_deleted:
        raise NotFound("Publicación no encontrada")
    return post


def get_live_comment(db: Session, comment_id: str) -> ForumComment:
    comment = db.get(ForumComment, comment_id)
    if not comment or comment.is_deleted:
        raise NotFound("Comentario no encontrado")
    return comment


def thread_payload(db: Session, post_id: str) -> dict:
    comments = build_comment_tree(db, post_id)
    return {"comments": comments, "total": len(comments)}


@router.get("/{post_id}/comments", response_model=ResponseModel)
def get_comments(post_id: str, db: Session = Depends(get_db)):
    """获取帖子的评论树"""
    get_live_post(db, post_id)
    return ResponseModel(code=200, data=thread_payload(db, post_id))


@router.post("/{post_id}/comments", response_model=ResponseModel)
def create_comment(post_id: str, comment_in: ForumCommentCreate, db: Session = Depends(get_db)):
    """发表评论或回复根评论 (只支持一层回复)"""
    post = get_live_post(db, post_id)
    if post.is_locked:
        raise PermissionDenied("La publicación está cerrada a nuevos comentarios")

    if comment_in.parent_id:
        parent = db.get(ForumComment, comment_in.parent_id)
        if not parent or parent.is_deleted or parent.post_id != post_id:
            raise NotFound("Comentario padre no encontrado")
        if parent.parent_id is not None:
            raise ValidationFailed("Solo se puede responder a comentarios principales")

    now = utcnow()
    comment = ForumComment(
        content=comment_in.content.strip(),
        author_name=comment_in.author_name.strip(),
        author_email=comment_in.author_email.strip(),
        author_id=comment_in.author_id,
        post_id=post_id,
        parent_id=comment_in.parent_id or None,
        approved=True if settings.AUTO_APPROVE_CONTENT else None,
        is_deleted=False,
        is_edited=False,
        likes=0,
        created_at=now,
        updated_at=now,
    )
    db.add(comment)
    db.commit()
    logger.info(f"Comment {comment.id} created on post {post_id}")

    refresh_reply_count(db, post_id, touch_activity=True)

    return ResponseModel(
        code=200,
        msg="Comentario creado exitosamente",
        data=thread_payload(db, post_id)
    )


@router.put("/comments/{comment_id}", response_model=ResponseModel)
def update_comment(comment_id: str, comment_in: ForumCommentUpdate, db: Session = Depends(get_db)):
    """编辑评论 (仅作者本人)"""
    comment = get_live_comment(db, comment_id)
    if comment.author_id != comment_in.author_id:
        raise PermissionDenied("No tienes permisos para editar este comentario")

    comment.content = comment_in.content.strip()
    comment.is_edited = True
    comment.updated_at = utcnow()
    db.commit()

    return ResponseModel(
        code=200,
        msg="Comentario actualizado exitosamente",
        data=thread_payload(db, comment.post_id)
    )


@router.delete("/comments/{comment_id}", response_model=ResponseModel)
def delete_comment(comment_id: str, author: AuthorRef = Body(...), db: Session = Depends(get_db)):
    """删除评论 (软删除, 仅作者本人)"""
    comment = get_live_comment(db, comment_id)
    if comment.author_id != author.author_id:
        raise PermissionDenied("No tienes permisos para eliminar este comentario")

    post_id = comment.post_id
    now = utcnow()
    comment.is_deleted = True
    comment.content = DELETED_COMMENT_PLACEHOLDER
    comment.deleted_at = comment.updated_at = now
    db.commit()

    refresh_reply_count(db, post_id)

    return ResponseModel(
        code=200,
        msg="Comentario eliminado exitosamente",
        data=thread_payload(db, post_id)
    )


@router.post("/comments/{comment_id}/like", response_model=ResponseModel)
def like_comment(comment_id: str, db: Session = Depends(get_db)):
    """点赞 (原子 +1)"""
    comment = get_live_comment(db, comment_id)
    increment_likes(db, ForumComment, comment_id)

    return ResponseModel(
        code=200,
        msg="Like agregado exitosamente",
        data=thread_payload(db, comment.post_id)
    )


@router.delete("/comments/{comment_id}/like", response_model=ResponseModel)
def unlike_comment(comment_id: str, db: Session = Depends(get_db)):
    """取消点赞 (原子 -1, 不低于 0)"""
    comment = get_live_comment(db, comment_id)
    decrement_likes(db, ForumComment, comment_id)

    return ResponseModel(
        code=200,
        msg="Like removido exitosamente",
        data=thread_payload(db, comment.post_id)
    )
