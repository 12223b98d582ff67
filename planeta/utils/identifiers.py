"""Document identifiers of the form ``<kind>_<uuid4>``."""
import uuid
from datetime import datetime, timezone
from typing import Optional

FORUM_POST = "forumPost"
FORUM_COMMENT = "forumComment"
FORUM_REPLY = "forumReply"
RECIPE_COMMENT = "recipeComment"
BLOG_COMMENT = "blogComment"
RECIPE = "recipe"
BLOG_POST = "blogPost"

KNOWN_KINDS = (FORUM_POST, FORUM_COMMENT, FORUM_REPLY, RECIPE_COMMENT, BLOG_COMMENT, RECIPE, BLOG_POST)


def new_id(kind: str) -> str:
    return f"{kind}_{uuid.uuid4()}"


def kind_of(document_id: str) -> Optional[str]:
    """Kind encoded in the id prefix, or None for legacy/foreign ids."""
    if not document_id or "_" not in document_id:
        return None
    prefix = document_id.split("_", 1)[0]
    return prefix if prefix in KNOWN_KINDS else None


def utcnow() -> datetime:
    # 数据库统一存储不带时区的 UTC 时间
    return datetime.now(timezone.utc).replace(tzinfo=None)
