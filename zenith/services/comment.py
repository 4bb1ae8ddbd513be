from typing import List, Optional

from sqlalchemy.orm import Session

from zenith.core.exceptions import ResourceNotFoundError, ValidationError
from zenith.models import Comment, CommentStatus, Post, PostStatus, Role
from zenith.schemas.base import PageResponse
from zenith.schemas.comment import CommentCreate, CommentResponse, CommentUpdate
from zenith.services.authorization import Actor, ensure_can_modify, ensure_can_view, ensure_role
from zenith.services.base import PageParams, QueryUtils, TransactionManager, build_sort_fields, paginate
from zenith.utils.logger import comment_logger

COMMENT_SORT_FIELDS = build_sort_fields(
    createdAt=Comment.created_at,
    updatedAt=Comment.updated_at,
)

STAFF = (Role.ADMIN, Role.MODERATOR)


class CommentService:
    @staticmethod
    def to_responses(comments: List[Comment]) -> List[CommentResponse]:
        return [
            CommentResponse.model_validate(comment).model_copy(
                update={"author_username": comment.author.username if comment.author else None}
            )
            for comment in comments
        ]

    @classmethod
    def _page(cls, query, params: PageParams) -> PageResponse[CommentResponse]:
        page = paginate(query, params, COMMENT_SORT_FIELDS, cls.to_responses)
        return PageResponse[CommentResponse](**page)

    @classmethod
    def list_approved_for_post(
        cls, db: Session, post_id: int, params: PageParams, actor: Optional[Actor] = None
    ) -> PageResponse[CommentResponse]:
        """
        Public comment listing: only APPROVED comments are ever returned.

        Comments of a post that is not published are visible to whoever may
        view the post itself.
        """
        post = QueryUtils.get_or_404(db, Post, post_id, "Post")
        if post.status != PostStatus.PUBLISHED:
            ensure_can_view(actor, post.author_id, "post")
        query = db.query(Comment).filter(
            Comment.post_id == post_id,
            Comment.status == CommentStatus.APPROVED,
        )
        return cls._page(query, params)

    @classmethod
    def list_my_comments(
        cls, db: Session, actor: Actor, params: PageParams, status: Optional[CommentStatus] = None
    ) -> PageResponse[CommentResponse]:
        query = db.query(Comment).filter(Comment.author_id == actor.user_id)
        if status is not None:
            query = query.filter(Comment.status == status)
        return cls._page(query, params)

    @classmethod
    def list_for_moderation(
        cls,
        db: Session,
        actor: Actor,
        params: PageParams,
        status: Optional[CommentStatus] = None,
        author_id: Optional[int] = None,
    ) -> PageResponse[CommentResponse]:
        ensure_role(actor, *STAFF)
        query = db.query(Comment)
        if status is not None:
            query = query.filter(Comment.status == status)
        if author_id is not None:
            query = query.filter(Comment.author_id == author_id)
        return cls._page(query, params)

    @classmethod
    def get_comment(cls, db: Session, actor: Actor, comment_id: int) -> CommentResponse:
        comment = QueryUtils.get_or_404(db, Comment, comment_id, "Comment")
        if comment.status != CommentStatus.APPROVED:
            ensure_can_view(actor, comment.author_id, "comment")
        return cls.to_responses([comment])[0]

    @classmethod
    def create_comment(cls, db: Session, actor: Actor, post_id: int, comment_data: CommentCreate) -> CommentResponse:
        post = QueryUtils.get_or_404(db, Post, post_id, "Post")
        if post.status != PostStatus.PUBLISHED:
            raise ValidationError("Cannot comment on unpublished post")

        comment = Comment(
            content=comment_data.content,
            status=CommentStatus.PENDING,
            post_id=post.id,
            author_id=actor.user_id,
        )
        db.add(comment)
        db.commit()
        db.refresh(comment)

        comment_logger.success("Comment created", "CREATE", comment_id=comment.id, post_id=post.id, author=actor.username)
        return cls.to_responses([comment])[0]

    @classmethod
    def update_comment(cls, db: Session, actor: Actor, comment_id: int, comment_data: CommentUpdate) -> CommentResponse:
        """Replace the content in place; the moderation status is left alone."""
        comment = QueryUtils.get_or_404(db, Comment, comment_id, "Comment")
        ensure_can_modify(actor, comment.author_id, "comment")

        comment.content = comment_data.content
        db.commit()
        db.refresh(comment)
        return cls.to_responses([comment])[0]

    @classmethod
    def delete_comment(cls, db: Session, actor: Actor, comment_id: int) -> None:
        """Soft delete: the comment is archived and removed later by the cleanup job."""
        comment = QueryUtils.get_or_404(db, Comment, comment_id, "Comment")
        ensure_can_modify(actor, comment.author_id, "comment")

        comment.status = CommentStatus.ARCHIVED
        db.commit()
        comment_logger.info("Comment archived", "DELETE", comment_id=comment.id, actor=actor.username)

    @classmethod
    def update_status(cls, db: Session, actor: Actor, comment_id: int, status: CommentStatus) -> CommentResponse:
        """Set any status. Setting the current status again is a no-op, not an error."""
        ensure_role(actor, *STAFF)
        comment = QueryUtils.get_or_404(db, Comment, comment_id, "Comment")

        previous = comment.status
        comment.status = status
        db.commit()
        db.refresh(comment)

        comment_logger.info(
            "Comment status changed", "STATUS",
            comment_id=comment.id, actor=actor.username, old=previous.value, new=status.value,
        )
        return cls.to_responses([comment])[0]

    @classmethod
    def approve(cls, db: Session, actor: Actor, comment_id: int) -> CommentResponse:
        return cls.update_status(db, actor, comment_id, CommentStatus.APPROVED)

    @classmethod
    def mark_spam(cls, db: Session, actor: Actor, comment_id: int) -> CommentResponse:
        return cls.update_status(db, actor, comment_id, CommentStatus.SPAM)

    @classmethod
    def archive(cls, db: Session, actor: Actor, comment_id: int) -> CommentResponse:
        return cls.update_status(db, actor, comment_id, CommentStatus.ARCHIVED)

    @classmethod
    def bulk_update_status(
        cls, db: Session, actor: Actor, comment_ids: List[int], status: CommentStatus
    ) -> List[CommentResponse]:
        """Set one status on many comments. Nothing changes if any id is unknown."""
        ensure_role(actor, *STAFF)
        ids = list(dict.fromkeys(comment_ids))
        comments = db.query(Comment).filter(Comment.id.in_(ids)).all()

        missing = sorted(set(ids) - {comment.id for comment in comments})
        if missing:
            raise ResourceNotFoundError(
                f"Comment not found with id: {', '.join(str(i) for i in missing)}",
                details={"missing_ids": missing},
            )

        with TransactionManager(db):
            for comment in comments:
                comment.status = status

        comment_logger.info("Bulk comment status change", "STATUS", count=len(comments), new=status.value)
        comments.sort(key=lambda c: ids.index(c.id))
        return cls.to_responses(comments)
