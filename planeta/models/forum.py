"""论坛数据模型 - 帖子 / 评论 (两级嵌套) / 回复"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from planeta.core.database import Base
from planeta.models.mixins import ModeratedMixin
from planeta.utils.identifiers import FORUM_POST, FORUM_COMMENT, FORUM_REPLY, new_id, utcnow


class ForumPost(ModeratedMixin, Base):
    __tablename__ = "forum_posts"

    id = Column(String(64), primary_key=True, default=lambda: new_id(FORUM_POST))
    title = Column(String(200), nullable=False)
    slug = Column(String(120), unique=True, index=True, nullable=False, comment="URL 标识, 同类型内唯一")
    content = Column(Text, nullable=False)

    author_name = Column(String(100), nullable=False)
    author_email = Column(String(255), nullable=False)
    author_id = Column(String(100), nullable=False, index=True, comment="客户端提供的作者标识")

    category = Column(String(50), nullable=False, index=True)
    tags = Column(JSON, default=list)

    is_pinned = Column(Boolean, default=False)
    is_locked = Column(Boolean, default=False)
    is_edited = Column(Boolean, default=False)

    # Stats (denormalized, rebuilt by services.counters)
    views = Column(Integer, default=0, nullable=False)
    likes = Column(Integer, default=0, nullable=False)
    reply_count = Column(Integer, default=0, nullable=False)

    last_activity_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow)

    comments = relationship(
        "ForumComment",
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    replies = relationship(
        "ForumReply",
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ForumComment(ModeratedMixin, Base):
    """评论模型 - 支持一层回复 (parent_id 指向根评论)"""
    __tablename__ = "forum_comments"

    id = Column(String(64), primary_key=True, default=lambda: new_id(FORUM_COMMENT))
    content = Column(Text, nullable=False)

    author_name = Column(String(100), nullable=False)
    author_email = Column(String(255), nullable=False)
    author_id = Column(String(100), nullable=False, index=True)

    post_id = Column(String(64), ForeignKey("forum_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_id = Column(String(64), ForeignKey("forum_comments.id", ondelete="CASCADE"), nullable=True, index=True)

    is_edited = Column(Boolean, default=False)
    likes = Column(Integer, default=0, nullable=False)
    updated_at = Column(DateTime, default=utcnow)

    post = relationship("ForumPost", back_populates="comments")
    parent = relationship("ForumComment", remote_side=[id], back_populates="children")
    children = relationship("ForumComment", back_populates="parent", passive_deletes=True)


class ForumReply(ModeratedMixin, Base):
    __tablename__ = "forum_replies"

    id = Column(String(64), primary_key=True, default=lambda: new_id(FORUM_REPLY))
    content = Column(Text, nullable=False)

    author_name = Column(String(100), nullable=False)
    author_email = Column(String(255), nullable=False)
    author_id = Column(String(100), nullable=False, index=True)

    post_id = Column(String(64), ForeignKey("forum_posts.id", ondelete="CASCADE"), nullable=False, index=True)

    is_edited = Column(Boolean, default=False)
    likes = Column(Integer, default=0, nullable=False)
    updated_at = Column(DateTime, default=utcnow)

    post = relationship("ForumPost", back_populates="replies")
