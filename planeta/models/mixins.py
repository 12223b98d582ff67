from sqlalchemy import Column, String, Boolean, DateTime

from planeta.utils.identifiers import utcnow


class ModeratedMixin:
    """审核状态字段, 所有可审核内容共用

    approved: True 已通过 / False 且 moderated_at 非空为已拒绝 / 其余为待审核
    """
    # 无默认值: 写入方必须显式给出 True (自动通过) 或 None (待审核)
    approved = Column(Boolean, nullable=True)
    is_deleted = Column(Boolean, default=False, nullable=False)
    moderated_at = Column(DateTime, nullable=True)
    moderation_reason = Column(String(255), nullable=True)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, index=True)
