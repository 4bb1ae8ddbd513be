"""Moderation endpoints, available to MODERATOR and ADMIN."""

from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from zenith.api.deps import get_page_params, require_staff
from zenith.db.session import get_db
from zenith.models import CommentStatus, PostStatus
from zenith.schemas.base import PageResponse
from zenith.schemas.comment import BulkCommentStatusUpdate, CommentResponse
from zenith.schemas.post import PostResponse
from zenith.services.authorization import Actor
from zenith.services.base import PageParams
from zenith.services.comment import CommentService
from zenith.services.post import PostService

router = APIRouter()


# Posts

@router.get("/posts", response_model=PageResponse[PostResponse])
def list_posts_by_status(
    post_status: Optional[PostStatus] = Query(None, alias="status"),
    params: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_staff),
) -> Any:
    return PostService.list_by_status(db=db, actor=actor, params=params, status=post_status)


@router.patch("/posts/{post_id}/status", response_model=PostResponse)
def update_post_status(
    post_id: int,
    post_status: PostStatus = Query(..., alias="status"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_staff),
) -> Any:
    return PostService.update_status(db=db, actor=actor, post_id=post_id, status=post_status)


@router.patch("/posts/{post_id}/publish", response_model=PostResponse)
def publish_post(post_id: int, db: Session = Depends(get_db), actor: Actor = Depends(require_staff)) -> Any:
    return PostService.publish_post(db=db, actor=actor, post_id=post_id)


# Comments

@router.get("/comments", response_model=PageResponse[CommentResponse])
def list_comments(
    comment_status: Optional[CommentStatus] = Query(None, alias="status"),
    author_id: Optional[int] = Query(None),
    params: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_staff),
) -> Any:
    return CommentService.list_for_moderation(
        db=db, actor=actor, params=params, status=comment_status, author_id=author_id
    )


@router.patch("/comments/bulk-status", response_model=List[CommentResponse])
def bulk_update_comment_status(
    update_data: BulkCommentStatusUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_staff),
) -> Any:
    return CommentService.bulk_update_status(
        db=db, actor=actor, comment_ids=update_data.comment_ids, status=update_data.status
    )


@router.patch("/comments/{comment_id}/status", response_model=CommentResponse)
def update_comment_status(
    comment_id: int,
    comment_status: CommentStatus = Query(..., alias="status"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_staff),
) -> Any:
    return CommentService.update_status(db=db, actor=actor, comment_id=comment_id, status=comment_status)


@router.patch("/comments/{comment_id}/approve", response_model=CommentResponse)
def approve_comment(comment_id: int, db: Session = Depends(get_db), actor: Actor = Depends(require_staff)) -> Any:
    return CommentService.approve(db=db, actor=actor, comment_id=comment_id)


@router.patch("/comments/{comment_id}/spam", response_model=CommentResponse)
def mark_comment_spam(comment_id: int, db: Session = Depends(get_db), actor: Actor = Depends(require_staff)) -> Any:
    return CommentService.mark_spam(db=db, actor=actor, comment_id=comment_id)


@router.patch("/comments/{comment_id}/archive", response_model=CommentResponse)
def archive_comment(comment_id: int, db: Session = Depends(get_db), actor: Actor = Depends(require_staff)) -> Any:
    return CommentService.archive(db=db, actor=actor, comment_id=comment_id)
