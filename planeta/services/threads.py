"""两级评论树: 根评论 (新 -> 旧), 每条根评论下的回复 (旧 -> 新)"""
from typing import Dict, List

from sqlalchemy.orm import Session

from planeta.models.forum import ForumComment
from planeta.schemas.forum import ThreadComment, ThreadReply


def visible_comments(db: Session, post_id: str) -> List[ForumComment]:
    return (
        db.query(ForumComment)
        .filter(
            ForumComment.post_id == post_id,
            ForumComment.is_deleted.is_(False),
            ForumComment.approved.is_(True),
        )
        .order_by(ForumComment.created_at.asc(), ForumComment.id.asc())
        .all()
    )


def build_comment_tree(db: Session, post_id: str) -> List[ThreadComment]:
    """Rebuild the whole thread of ``post_id`` from storage.

    Replies whose root is deleted or hidden are dropped with it.
    """
    rows = visible_comments(db, post_id)

    roots: List[ForumComment] = []
    replies_map: Dict[str, List[ThreadReply]] = {}
    for row in rows:
        if row.parent_id is None:
            roots.append(row)
        else:
            replies_map.setdefault(row.parent_id, []).append(ThreadReply.model_validate(row))

    tree = []
    for root in reversed(roots):
        node = ThreadComment.model_validate(root)
        node.replies = replies_map.get(root.id, [])
        tree.append(node)
    return tree
