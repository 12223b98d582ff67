# Models module
from planeta.models.forum import ForumPost, ForumComment, ForumReply
from planeta.models.content import Recipe, BlogPost, RecipeComment, BlogComment

__all__ = ["ForumPost", "ForumComment", "ForumReply", "Recipe", "BlogPost", "RecipeComment", "BlogComment"]
