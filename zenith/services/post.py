import math
import re
from typing import List, Optional

from slugify import slugify
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from zenith.core.config import settings
from zenith.core.exceptions import ForbiddenError, ResourceNotFoundError
from zenith.models import Category, Comment, Post, PostStatus, Role, Tag, post_tags
from zenith.schemas.base import PageResponse
from zenith.schemas.post import PostCreate, PostResponse, PostUpdate
from zenith.services.authorization import Actor, ensure_can_modify, ensure_can_view, ensure_role, is_staff
from zenith.services.base import (
    PageParams,
    QueryUtils,
    TransactionManager,
    build_sort_fields,
    count_grouped,
    paginate,
)
from zenith.services.tag import TagService
from zenith.utils.logger import post_logger

POST_SORT_FIELDS = build_sort_fields(
    title=Post.title,
    createdAt=Post.created_at,
    updatedAt=Post.updated_at,
)

SLUG_MAX_LENGTH = 100
WORD_PATTERN = re.compile(r"\S+")


def calculate_reading_time(content: Optional[str], words_per_minute: int = settings.READING_WORDS_PER_MINUTE) -> int:
    """Minutes needed to read ``content``, rounded up; 0 for empty text."""
    words = len(WORD_PATTERN.findall(content or ""))
    if words == 0:
        return 0
    return math.ceil(words / words_per_minute)


class PostService:
    @staticmethod
    def generate_unique_slug(db: Session, title: str, post_id: Optional[int] = None) -> str:
        """Slugify the title and append -1, -2, ... until no other post uses it."""
        base_slug = slugify(title, max_length=SLUG_MAX_LENGTH, word_boundary=True) or "post"
        slug = base_slug
        counter = 1

        while True:
            query = db.query(Post.id).filter(Post.slug == slug)
            if post_id is not None:
                query = query.filter(Post.id != post_id)
            if not query.first():
                return slug
            slug = f"{base_slug}-{counter}"
            counter += 1

    @staticmethod
    def to_responses(db: Session, posts: List[Post]) -> List[PostResponse]:
        comment_counts = count_grouped(db, Comment.post_id, [post.id for post in posts])
        responses = []
        for post in posts:
            tag_names = [tag.name for tag in post.tags]
            responses.append(
                PostResponse(
                    id=post.id,
                    title=post.title,
                    slug=post.slug,
                    content=post.content,
                    status=post.status,
                    reading_time=post.reading_time or 0,
                    author_id=post.author_id,
                    author_username=post.author.username if post.author else None,
                    category_id=post.category_id,
                    category_name=post.category.name if post.category else None,
                    tags=tag_names,
                    tag_count=len(tag_names),
                    comment_count=comment_counts.get(post.id, 0),
                    created_at=post.created_at,
                    updated_at=post.updated_at,
                )
            )
        return responses

    @classmethod
    def to_response(cls, db: Session, post: Post) -> PostResponse:
        return cls.to_responses(db, [post])[0]

    @staticmethod
    def _resolve_tags(db: Session, names: Optional[List[str]], tag_ids: Optional[List[int]]) -> List[Tag]:
        tags = TagService.get_tags_by_ids(db, tag_ids or [])
        seen = {tag.id for tag in tags}
        for tag in TagService.get_or_create_tags(db, names or []):
            if tag.id not in seen:
                tags.append(tag)
                seen.add(tag.id)
        return tags

    @classmethod
    def _page(cls, db: Session, query, params: PageParams) -> PageResponse[PostResponse]:
        page = paginate(query, params, POST_SORT_FIELDS, lambda rows: cls.to_responses(db, rows))
        return PageResponse[PostResponse](**page)

    # Reads

    @classmethod
    def get_post(cls, db: Session, actor: Optional[Actor], post_id: int) -> PostResponse:
        """Published posts are public; anything else needs owner or staff access."""
        post = QueryUtils.get_or_404(db, Post, post_id, "Post")
        if post.status != PostStatus.PUBLISHED:
            ensure_can_view(actor, post.author_id, "post")
        return cls.to_response(db, post)

    @classmethod
    def get_post_by_slug(cls, db: Session, actor: Optional[Actor], slug: str) -> PostResponse:
        post = db.query(Post).filter(Post.slug == slug).first()
        if post is None:
            raise ResourceNotFoundError(f"Post not found with slug: {slug}")
        if post.status != PostStatus.PUBLISHED:
            ensure_can_view(actor, post.author_id, "post")
        return cls.to_response(db, post)

    @classmethod
    def list_published(
        cls,
        db: Session,
        params: PageParams,
        category_id: Optional[int] = None,
        tag: Optional[str] = None,
    ) -> PageResponse[PostResponse]:
        query = db.query(Post).filter(Post.status == PostStatus.PUBLISHED)
        if category_id is not None:
            query = query.filter(Post.category_id == category_id)
        if tag:
            tagged = (
                select(post_tags.c.post_id)
                .join(Tag, Tag.id == post_tags.c.tag_id)
                .where(func.lower(Tag.name) == tag.strip().lower())
            )
            query = query.filter(Post.id.in_(tagged))
        return cls._page(db, query, params)

    @classmethod
    def list_my_posts(
        cls, db: Session, actor: Actor, params: PageParams, status: Optional[PostStatus] = None
    ) -> PageResponse[PostResponse]:
        query = db.query(Post).filter(Post.author_id == actor.user_id)
        if status is not None:
            query = query.filter(Post.status == status)
        return cls._page(db, query, params)

    @classmethod
    def list_by_status(
        cls, db: Session, actor: Actor, params: PageParams, status: Optional[PostStatus] = None
    ) -> PageResponse[PostResponse]:
        """Moderation listing over any status; all posts when status is None."""
        ensure_role(actor, Role.ADMIN, Role.MODERATOR)
        query = db.query(Post)
        if status is not None:
            query = query.filter(Post.status == status)
        return cls._page(db, query, params)

    # Writes

    @classmethod
    def create_post(cls, db: Session, actor: Actor, post_data: PostCreate) -> PostResponse:
        status = post_data.status or PostStatus.DRAFT
        if status != PostStatus.DRAFT and not is_staff(actor):
            raise ForbiddenError("Only moderators and admins can create posts that are not drafts")

        category = QueryUtils.get_or_404(db, Category, post_data.category_id, "Category")

        with TransactionManager(db):
            tags = cls._resolve_tags(db, post_data.tags, post_data.tag_ids)
            post = Post(
                title=post_data.title.strip(),
                slug=cls.generate_unique_slug(db, post_data.title),
                content=post_data.content,
                status=status,
                reading_time=calculate_reading_time(post_data.content),
                author_id=actor.user_id,
                category_id=category.id,
            )
            post.tags = tags
            db.add(post)

        db.refresh(post)
        post_logger.success("Post created", "CREATE", post_id=post.id, author=actor.username, status=status.value)
        return cls.to_response(db, post)

    @classmethod
    def update_post(cls, db: Session, actor: Actor, post_id: int, post_data: PostUpdate) -> PostResponse:
        """Apply only the fields that carry a value; the rest stay as they are."""
        post = QueryUtils.get_or_404(db, Post, post_id, "Post")
        ensure_can_modify(actor, post.author_id, "post")

        with TransactionManager(db):
            if post_data.title is not None and post_data.title.strip():
                title = post_data.title.strip()
                if title != post.title:
                    post.title = title
                    post.slug = cls.generate_unique_slug(db, title, post_id=post.id)

            if post_data.content is not None and post_data.content.strip():
                post.content = post_data.content
                post.reading_time = calculate_reading_time(post.content)

            if post_data.category_id is not None and post_data.category_id != post.category_id:
                category = QueryUtils.get_or_404(db, Category, post_data.category_id, "Category")
                post.category_id = category.id
                post.category = category

            if post_data.tags or post_data.tag_ids:
                post.tags = cls._resolve_tags(db, post_data.tags, post_data.tag_ids)

        db.refresh(post)
        post_logger.info("Post updated", "UPDATE", post_id=post.id, actor=actor.username)
        return cls.to_response(db, post)

    @staticmethod
    def delete_post(db: Session, actor: Actor, post_id: int) -> None:
        """Delete a post with its comments and tag links in one transaction."""
        post = QueryUtils.get_or_404(db, Post, post_id, "Post")
        ensure_can_modify(actor, post.author_id, "post")

        with TransactionManager(db):
            comments = db.query(Comment).filter(Comment.post_id == post.id).delete(synchronize_session=False)
            db.execute(post_tags.delete().where(post_tags.c.post_id == post.id))
            db.query(Post).filter(Post.id == post.id).delete(synchronize_session=False)

        post_logger.warning("Post deleted", "DELETE", post_id=post_id, actor=actor.username, comments=comments)

    @classmethod
    def update_status(cls, db: Session, actor: Actor, post_id: int, status: PostStatus) -> PostResponse:
        """Set any status; the transition itself is not restricted."""
        ensure_role(actor, Role.ADMIN, Role.MODERATOR)
        post = QueryUtils.get_or_404(db, Post, post_id, "Post")
        previous = post.status
        post.status = status
        db.commit()
        db.refresh(post)

        post_logger.info(
            "Post status changed", "STATUS",
            post_id=post.id, actor=actor.username, old=previous.value, new=status.value,
        )
        return cls.to_response(db, post)

    @classmethod
    def publish_post(cls, db: Session, actor: Actor, post_id: int) -> PostResponse:
        return cls.update_status(db, actor, post_id, PostStatus.PUBLISHED)
