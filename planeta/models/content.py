"""Recipes, blog posts and the comments attached to them."""
from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from planeta.core.database import Base
from planeta.models.mixins import ModeratedMixin
from planeta.utils.identifiers import RECIPE, BLOG_POST, RECIPE_COMMENT, BLOG_COMMENT, new_id, utcnow


class Recipe(Base):
    __tablename__ = "recipes"

    id = Column(String(64), primary_key=True, default=lambda: new_id(RECIPE))
    title = Column(String(200), nullable=False)
    slug = Column(String(120), unique=True, index=True, nullable=False)

    # 由 services.counters.recompute_recipe_rating 维护
    average_rating = Column(Float, default=0, nullable=False)
    total_ratings = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=utcnow)

    comments = relationship("RecipeComment", back_populates="recipe", passive_deletes=True)


class BlogPost(Base):
    __tablename__ = "blog_posts"

    id = Column(String(64), primary_key=True, default=lambda: new_id(BLOG_POST))
    title = Column(String(200), nullable=False)
    slug = Column(String(120), unique=True, index=True, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    comments = relationship("BlogComment", back_populates="blog_post", passive_deletes=True)


class RecipeComment(ModeratedMixin, Base):
    __tablename__ = "recipe_comments"

    id = Column(String(64), primary_key=True, default=lambda: new_id(RECIPE_COMMENT))
    recipe_id = Column(String(64), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True)
    author_name = Column(String(100), nullable=False)
    author_email = Column(String(255), nullable=False)
    author_id = Column(String(100), nullable=True)
    content = Column(Text, nullable=False)
    rating = Column(Integer, nullable=True, comment="1-5")

    recipe = relationship("Recipe", back_populates="comments")


class BlogComment(ModeratedMixin, Base):
    __tablename__ = "blog_comments"

    id = Column(String(64), primary_key=True, default=lambda: new_id(BLOG_COMMENT))
    blog_post_id = Column(String(64), ForeignKey("blog_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    author_name = Column(String(100), nullable=False)
    author_email = Column(String(255), nullable=False)
    author_id = Column(String(100), nullable=True)
    content = Column(Text, nullable=False)

    blog_post = relationship("BlogPost", back_populates="comments")
