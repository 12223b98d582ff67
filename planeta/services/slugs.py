"""
Slug 生成与唯一性分配

唯一性靠"查询 + 追加 -n 后缀"保证; 该检查与插入不是原子的,
并发创建同名帖子时由数据库唯一索引兜底, 插入失败后重新分配。
"""
import logging
import re
import unicodedata
import uuid
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from planeta.core.config import settings

logger = logging.getLogger(__name__)

_INVALID_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")

DEFAULT_SLUG = "publicacion"
INSERT_RETRIES = 3


def slugify(title: str, max_length: Optional[int] = None) -> str:
    """'¡Pan Keto sin harina!' -> 'pan-keto-sin-harina'"""
    # 先去掉重音符号 (á -> a, ñ -> n), 否则西语字符会被整体删掉
    text = unicodedata.normalize("NFKD", title or "").encode("ascii", "ignore").decode("ascii")
    text = _INVALID_CHARS.sub("", text.lower())
    text = _WHITESPACE.sub("-", text.strip())
    text = _HYPHENS.sub("-", text).strip("-")
    if max_length:
        text = text[:max_length].rstrip("-")
    return text or DEFAULT_SLUG


def slug_exists(db: Session, model, slug: str) -> bool:
    return db.query(model.id).filter(model.slug == slug).first() is not None


def allocate_slug(db: Session, model, title: str, max_length: Optional[int] = None,
                  max_attempts: Optional[int] = None) -> str:
    """Return a slug for ``title`` not yet used by any ``model`` row.

    Tries the base slug, then ``base-1``, ``base-2`` ... up to
    ``max_attempts`` suffixes before falling back to a random suffix.
    """
    max_length = max_length or settings.SLUG_MAX_LENGTH
    max_attempts = max_attempts or settings.SLUG_MAX_ATTEMPTS

    base = slugify(title, max_length)
    if not slug_exists(db, model, base):
        return base

    for counter in range(1, max_attempts + 1):
        candidate = f"{base}-{counter}"
        if not slug_exists(db, model, candidate):
            return candidate

    fallback = f"{base}-{uuid.uuid4().hex[:8]}"
    logger.warning(f"Slug suffixes exhausted for '{base}', using {fallback}")
    return fallback


def insert_with_unique_slug(db: Session, document, title: str):
    """Allocate a slug for ``document`` and commit it.

    A concurrent insert can take the same slug between the check and the
    commit; the unique index rejects it and allocation runs again.
    """
    model = type(document)
    for attempt in range(1, INSERT_RETRIES + 1):
        document.slug = allocate_slug(db, model, title)
        db.add(document)
        try:
            db.commit()
            return document
        except IntegrityError:
            db.rollback()
            logger.warning(f"Slug collision on '{document.slug}' (attempt {attempt}), retrying")
    raise RuntimeError(f"Could not allocate a unique slug for '{title}'")
