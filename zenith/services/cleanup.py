"""
Removal of stale archived content.

Archived comments and archived posts older than the retention window are
deleted once a day by ``CleanupScheduler``. Comments go first so no comment
is left pointing at a deleted post.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from zenith.core.config import settings
from zenith.models import Comment, CommentStatus, Post, PostStatus, post_tags
from zenith.services.base import TransactionManager
from zenith.utils.logger import cleanup_logger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CleanupResult:
    comments_deleted: int
    posts_deleted: int
    cutoff: datetime


class CleanupService:
    @staticmethod
    def cleanup_archived_content(
        db: Session,
        retention_days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> CleanupResult:
        """
        Delete ARCHIVED comments and posts created before the retention cutoff.

        Args:
            db: Database session
            retention_days: Age in days past which archived content is removed
            now: Reference time, defaults to the current UTC time

        Returns:
            CleanupResult: Counts of deleted rows and the cutoff used

        Raises:
            SQLAlchemyError: After rolling back, if any delete fails
        """
        if retention_days is None:
            retention_days = settings.CLEANUP_RETENTION_DAYS
        cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=retention_days)

        stale_posts = select(Post.id).where(
            Post.status == PostStatus.ARCHIVED,
            Post.created_at < cutoff,
        )

        with TransactionManager(db):
            comments_deleted = (
                db.query(Comment)
                .filter(Comment.status == CommentStatus.ARCHIVED, Comment.created_at < cutoff)
                .delete(synchronize_session=False)
            )
            # Whatever comments remain on the posts about to go
            comments_deleted += (
                db.query(Comment)
                .filter(Comment.post_id.in_(stale_posts))
                .delete(synchronize_session=False)
            )
            db.execute(post_tags.delete().where(post_tags.c.post_id.in_(stale_posts)))
            posts_deleted = (
                db.query(Post)
                .filter(Post.status == PostStatus.ARCHIVED, Post.created_at < cutoff)
                .delete(synchronize_session=False)
            )

        cleanup_logger.success(
            "Archived content removed", "RUN",
            comments=comments_deleted, posts=posts_deleted, cutoff=cutoff.isoformat(),
        )
        return CleanupResult(comments_deleted=comments_deleted, posts_deleted=posts_deleted, cutoff=cutoff)


def run_cleanup_job(session_factory: Optional[Callable[[], Session]] = None) -> Optional[CleanupResult]:
    """
    Run one cleanup pass in its own session.

    Failures are logged and not retried; the next scheduled run picks up
    whatever is left.
    """
    if session_factory is None:
        from zenith.db.session import SessionLocal
        session_factory = SessionLocal

    cleanup_logger.section_start("archived content cleanup")
    db = session_factory()
    try:
        result = CleanupService.cleanup_archived_content(db)
        cleanup_logger.section_end("archived content cleanup")
        return result
    except Exception as e:
        logger.exception("Cleanup job failed")
        cleanup_logger.error("Cleanup job failed", "RUN", error=str(e))
        cleanup_logger.section_end("archived content cleanup", success=False)
        return None
    finally:
        db.close()
