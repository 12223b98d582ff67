"""
博客评论 API 路由
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from planeta.core.config import settings
from planeta.core.database import get_db
from planeta.core.exceptions import NotFound
from planeta.models.content import BlogPost, BlogComment
from planeta.schemas.common import ResponseModel
from planeta.schemas.comment import BlogCommentCreate, BlogCommentResponse
from planeta.utils.identifiers import utcnow


router = APIRouter(prefix="/blog-comments", tags=["blog-comentarios"])


def get_blog_post(db: Session, post_id: str) -> BlogPost:
    post = db.get(BlogPost, post_id)
    if not post:
        raise NotFound("Artículo no encontrado")
    return post


@router.get("", response_model=ResponseModel)
def get_blog_comments(post_id: str = Query(..., alias="postId"), db: Session = Depends(get_db)):
    get_blog_post(db, post_id)
    comments = (
        db.query(BlogComment)
        .filter(
            BlogComment.blog_post_id == post_id,
            BlogComment.approved.is_(True),
            BlogComment.is_deleted.is_(False),
        )
        .order_by(BlogComment.created_at.asc())
        .all()
    )
    return ResponseModel(code=200, data={"comments": [BlogCommentResponse.model_validate(c) for c in comments]})


@router.post("", response_model=ResponseModel)
def create_blog_comment(comment_in: BlogCommentCreate, db: Session = Depends(get_db)):
    post = get_blog_post(db, comment_in.post_id)

    comment = BlogComment(
        blog_post_id=post.id,
        author_name=comment_in.author_name.strip(),
        author_email=comment_in.author_email.strip(),
        author_id=comment_in.author_id,
        content=comment_in.content.strip(),
        approved=True if settings.AUTO_APPROVE_CONTENT else None,
        is_deleted=False,
        created_at=utcnow(),
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)

    return ResponseModel(
        code=200,
        msg="¡Comentario publicado exitosamente!",
        data={"comment": BlogCommentResponse.model_validate(comment)}
    )
