"""Database models."""

# Import all models here to ensure they're recognized by SQLAlchemy
from zenith.models.comment import Comment
from zenith.models.enums import CommentStatus, PostStatus, Role
from zenith.models.post import Post, post_tags
from zenith.models.taxonomy import Category, Tag
from zenith.models.user import User

__all__ = [
    "User",
    "Post",
    "Comment",
    "Category",
    "Tag",
    "post_tags",
    "Role",
    "PostStatus",
    "CommentStatus",
]
