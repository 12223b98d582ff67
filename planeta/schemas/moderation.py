from datetime import datetime
from typing import Optional
from pydantic import field_validator

from planeta.schemas.common import CamelModel, required_text


class ModerationRequest(CamelModel):
    """审核操作请求: action = approve | reject | delete | edit"""
    action: str
    item_id: str
    type: Optional[str] = None

    @field_validator("action", "item_id", mode="before")
    @classmethod
    def not_blank(cls, v):
        return required_text(v)


class ModerationSource(CamelModel):
    type: str
    title: Optional[str] = None
    slug: Optional[str] = None


class ModerationItem(CamelModel):
    id: str
    kind: str
    type: str
    status: str
    title: Optional[str] = None
    content: str
    author_name: str
    author_email: str
    category: Optional[str] = None
    source: ModerationSource
    created_at: Optional[datetime] = None
    moderated_at: Optional[datetime] = None
