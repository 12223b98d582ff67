"""
论坛回复 API 路由 (forumReply, 与评论并行的独立内容类型)
"""
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from planeta.core.config import settings
from planeta.core.database import get_db
from planeta.core.exceptions import NotFound, PermissionDenied
from planeta.models.forum import ForumPost, ForumReply
from planeta.schemas.common import ResponseModel
from planeta.schemas.forum import ForumReplyCreate, ForumReplyUpdate, ForumReplyDelete, ForumReplyResponse
from planeta.services.counters import refresh_reply_count
from planeta.utils.identifiers import utcnow


router = APIRouter(prefix="/forum/replies", tags=["foro-respuestas"])
logger = logging.getLogger(__name__)

DELETED_REPLY_PLACEHOLDER = "[Respuesta eliminada por el usuario]"


def get_owned_reply(db: Session, reply_id: str, author_id: str, verb: str) -> ForumReply:
    reply = db.get(ForumReply, reply_id)
    if not reply or reply.is_deleted:
        raise NotFound("Respuesta no encontrada")
    if reply.author_id != author_id:
        raise PermissionDenied(f"No tienes permisos para {verb} esta respuesta")
    return reply


@router.get("", response_model=ResponseModel)
def get_replies(post_id: str = Query(..., alias="postId"), db: Session = Depends(get_db)):
    """获取帖子的回复 (旧 -> 新)"""
    replies = (
        db.query(ForumReply)
        .filter(
            ForumReply.post_id == post_id,
            ForumReply.is_deleted.is_(False),
            ForumReply.approved.is_(True),
        )
        .order_by(ForumReply.created_at.asc(), ForumReply.id.asc())
        .all()
    )
    return ResponseModel(code=200, data={"replies": [ForumReplyResponse.model_validate(r) for r in replies]})


@router.post("", response_model=ResponseModel)
def create_reply(reply_in: ForumReplyCreate, db: Session = Depends(get_db)):
    """创建回复"""
    post = db.get(ForumPost, reply_in.post_id)
    if not post or post.is_deleted:
        raise NotFound("El post no existe")

    now = utcnow()
    reply = ForumReply(
        content=reply_in.content,
        post_id=post.id,
        author_name=reply_in.author_name.strip(),
        author_email=reply_in.author_email.strip(),
        author_id=reply_in.author_id,
        approved=True if settings.AUTO_APPROVE_CONTENT else None,
        likes=0,
        is_edited=False,
        is_deleted=False,
        created_at=now,
        updated_at=now,
    )
    db.add(reply)
    db.commit()
    db.refresh(reply)
    logger.info(f"Reply {reply.id} created on post {post.id}")

    refresh_reply_count(db, post.id, touch_activity=True)

    return ResponseModel(
        code=200,
        msg="¡Respuesta creada exitosamente!",
        data={"reply": ForumReplyResponse.model_validate(reply)}
    )


@router.put("", response_model=ResponseModel)
def update_reply(reply_in: ForumReplyUpdate, db: Session = Depends(get_db)):
    """编辑回复 (仅作者本人)"""
    reply = get_owned_reply(db, reply_in.reply_id, reply_in.author_id, "editar")

    reply.content = reply_in.content
    reply.is_edited = True
    reply.updated_at = utcnow()
    db.commit()
    db.refresh(reply)

    return ResponseModel(
        code=200,
        msg="Respuesta actualizada exitosamente",
        data={"reply": ForumReplyResponse.model_validate(reply)}
    )


@router.delete("", response_model=ResponseModel)
def delete_reply(reply_in: ForumReplyDelete, db: Session = Depends(get_db)):
    """删除回复 (软删除), 计数以回复自身所属帖子为准"""
    reply = get_owned_reply(db, reply_in.reply_id, reply_in.author_id, "eliminar")

    post_id = reply.post_id
    if reply_in.post_id and reply_in.post_id != post_id:
        logger.warning(f"Reply {reply.id} deleted with mismatching postId {reply_in.post_id}")

    now = utcnow()
    reply.is_deleted = True
    reply.content = DELETED_REPLY_PLACEHOLDER
    reply.deleted_at = reply.updated_at = now
    db.commit()

    refresh_reply_count(db, post_id)

    return ResponseModel(code=200, msg="Respuesta eliminada exitosamente")
