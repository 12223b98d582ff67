"""
Moderation state machine shared by every moderatable content kind.

    pending  --approve-->  approved
    pending  --reject--->  rejected
    approved --reject--->  rejected
    rejected --approve-->  approved
    any      --delete--->  deleted      (terminal)

Approve/reject are idempotent (the moderatedAt stamp moves forward).
"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from planeta.core.exceptions import NotFound, ValidationFailed
from planeta.models.content import BlogComment, RecipeComment
from planeta.models.forum import ForumComment, ForumPost, ForumReply
from planeta.schemas.moderation import ModerationItem, ModerationSource
from planeta.services.counters import refresh_recipe_rating, refresh_reply_count
from planeta.utils.identifiers import (
    BLOG_COMMENT, FORUM_COMMENT, FORUM_POST, FORUM_REPLY, RECIPE_COMMENT, kind_of, utcnow,
)

logger = logging.getLogger(__name__)

APPROVE = "approve"
REJECT = "reject"
DELETE = "delete"
EDIT = "edit"

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
STATUS_DELETED = "deleted"

DELETED_PLACEHOLDER = "[Contenido eliminado por moderación]"
REJECT_REASON = "Rechazado por moderador"

MODELS = {
    FORUM_POST: ForumPost,
    FORUM_COMMENT: ForumComment,
    FORUM_REPLY: ForumReply,
    RECIPE_COMMENT: RecipeComment,
    BLOG_COMMENT: BlogComment,
}

# 无前缀的旧 id 按此顺序逐类探测
PROBE_ORDER = (FORUM_POST, FORUM_REPLY, RECIPE_COMMENT, BLOG_COMMENT)

# 审核队列覆盖的内容类型 (论坛评论的 id 总带前缀, 不参与探测)
QUEUE_KINDS = (FORUM_POST, FORUM_COMMENT, FORUM_REPLY, RECIPE_COMMENT, BLOG_COMMENT)

TYPE_ALIASES = {
    "post": FORUM_POST,
    "reply": FORUM_REPLY,
}

DISPLAY_TYPES = {
    FORUM_POST: "post",
    FORUM_REPLY: "reply",
    FORUM_COMMENT: "comment",
    RECIPE_COMMENT: "comment",
    BLOG_COMMENT: "comment",
}

ACTION_MESSAGES = {
    APPROVE: "Contenido aprobado exitosamente",
    REJECT: "Contenido rechazado exitosamente",
    DELETE: "Contenido eliminado exitosamente",
}


@dataclass
class ModerationResult:
    kind: str
    item: object
    action: str
    status: str

    @property
    def message(self) -> str:
        return ACTION_MESSAGES[self.action]


def status_of(item) -> str:
    if item.is_deleted:
        return STATUS_DELETED
    if item.approved is True:
        return STATUS_APPROVED
    if item.approved is False and item.moderated_at is not None:
        return STATUS_REJECTED
    return STATUS_PENDING


def _approve(item) -> None:
    item.approved = True
    item.moderated_at = utcnow()
    item.moderation_reason = None


def _reject(item) -> None:
    item.approved = False
    item.moderated_at = utcnow()
    item.moderation_reason = REJECT_REASON


def _delete(item) -> None:
    if item.is_deleted:
        return
    now = utcnow()
    item.is_deleted = True
    item.deleted_at = now
    item.moderated_at = now
    item.content = DELETED_PLACEHOLDER


TRANSITIONS: Dict[str, Callable] = {
    APPROVE: _approve,
    REJECT: _reject,
    DELETE: _delete,
}


def resolve_item(db: Session, item_id: str, type_hint: Optional[str] = None) -> Tuple[str, object]:
    """Find the document behind ``item_id`` and its kind.

    The kind is read from the id prefix; ids without one are looked up
    under the hinted kind first, then under each kind of PROBE_ORDER.
    """
    kind = kind_of(item_id)
    if kind in MODELS:
        item = db.get(MODELS[kind], item_id)
        if item is None:
            raise NotFound()
        return kind, item

    candidates: List[str] = []
    hinted = TYPE_ALIASES.get(type_hint, type_hint)
    if hinted in MODELS:
        candidates.append(hinted)
    candidates.extend(k for k in PROBE_ORDER if k not in candidates)

    for candidate in candidates:
        item = db.get(MODELS[candidate], item_id)
        if item is not None:
            return candidate, item
    raise NotFound()


def _after_transition(db: Session, kind: str, item, action: str) -> None:
    """Rebuild the caches that depend on the moderated item."""
    if kind in (FORUM_COMMENT, FORUM_REPLY) and action == DELETE:
        refresh_reply_count(db, item.post_id)
    elif kind == RECIPE_COMMENT:
        refresh_recipe_rating(db, item.recipe_id)


def apply_action(db: Session, item_id: str, action: str, type_hint: Optional[str] = None) -> ModerationResult:
    if action == EDIT:
        raise ValidationFailed("La edición requiere contenido adicional")
    transition = TRANSITIONS.get(action)
    if transition is None:
        raise ValidationFailed("Acción no válida")

    kind, item = resolve_item(db, item_id, type_hint)
    if item.is_deleted and action != DELETE:
        raise ValidationFailed("El contenido ya fue eliminado")

    transition(item)
    db.commit()
    logger.info(f"Moderation {action} applied to {kind} {item_id}")

    _after_transition(db, kind, item, action)
    db.refresh(item)
    return ModerationResult(kind=kind, item=item, action=action, status=status_of(item))


# ============ 审核队列 (读时聚合, 不持久化) ============

def _status_filter(model, status: str):
    not_deleted = model.is_deleted.is_(False)
    if status == STATUS_APPROVED:
        return [not_deleted, model.approved.is_(True)]
    if status == STATUS_REJECTED:
        return [not_deleted, model.approved.is_(False), model.moderated_at.isnot(None)]
    return [
        not_deleted,
        or_(model.approved.is_(None), model.approved.is_(False) & model.moderated_at.is_(None)),
    ]


def _source_of(kind: str, item) -> ModerationSource:
    if kind == FORUM_POST:
        return ModerationSource(type=kind, title=item.title, slug=item.slug)
    if kind in (FORUM_REPLY, FORUM_COMMENT):
        parent = item.post
    elif kind == RECIPE_COMMENT:
        parent = item.recipe
    else:
        parent = item.blog_post
    return ModerationSource(
        type=kind,
        title=parent.title if parent else None,
        slug=parent.slug if parent else None,
    )


def to_queue_item(kind: str, item) -> ModerationItem:
    return ModerationItem(
        id=item.id,
        kind=kind,
        type=DISPLAY_TYPES[kind],
        status=status_of(item),
        title=getattr(item, "title", None),
        content=item.content,
        author_name=item.author_name,
        author_email=item.author_email,
        category=getattr(item, "category", None),
        source=_source_of(kind, item),
        created_at=item.created_at,
        moderated_at=item.moderated_at,
    )


def queue_bucket(db: Session, status: str, limit: Optional[int] = None) -> List[ModerationItem]:
    """Newest-first union over QUEUE_KINDS. ``limit`` caps the merged list."""
    collected = []
    for kind in QUEUE_KINDS:
        model = MODELS[kind]
        query = db.query(model).filter(*_status_filter(model, status)).order_by(model.created_at.desc())
        if limit is not None:
            query = query.limit(limit)
        collected.extend((kind, item) for item in query.all())

    collected.sort(key=lambda pair: pair[1].created_at, reverse=True)
    if limit is not None:
        collected = collected[:limit]
    return [to_queue_item(kind, item) for kind, item in collected]
