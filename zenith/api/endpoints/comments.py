from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from zenith.api.deps import get_current_actor, get_optional_actor, get_page_params
from zenith.db.session import get_db
from zenith.models import CommentStatus
from zenith.schemas.base import PageResponse
from zenith.schemas.comment import CommentCreate, CommentResponse, CommentUpdate
from zenith.services.authorization import Actor
from zenith.services.base import PageParams
from zenith.services.comment import CommentService

# Mounted under /posts
post_comments_router = APIRouter()

# Mounted under /comments
router = APIRouter()


@post_comments_router.get("/{post_id}/comments", response_model=PageResponse[CommentResponse])
def list_post_comments(
    post_id: int,
    params: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
    actor: Optional[Actor] = Depends(get_optional_actor),
) -> Any:
    """Approved comments of a post. Unpublished posts follow the post visibility rule."""
    return CommentService.list_approved_for_post(db=db, post_id=post_id, params=params, actor=actor)


@post_comments_router.post(
    "/{post_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED
)
def create_comment(
    post_id: int,
    comment_data: CommentCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> Any:
    """Comment on a published post. New comments wait in PENDING for moderation."""
    return CommentService.create_comment(db=db, actor=actor, post_id=post_id, comment_data=comment_data)


@router.get("/my", response_model=PageResponse[CommentResponse])
def list_my_comments(
    comment_status: Optional[CommentStatus] = Query(None, alias="status"),
    params: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> Any:
    return CommentService.list_my_comments(db=db, actor=actor, params=params, status=comment_status)


@router.get("/{comment_id}", response_model=CommentResponse)
def get_comment(comment_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)) -> Any:
    return CommentService.get_comment(db=db, actor=actor, comment_id=comment_id)


@router.put("/{comment_id}", response_model=CommentResponse)
def update_comment(
    comment_id: int,
    comment_data: CommentUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> Any:
    return CommentService.update_comment(db=db, actor=actor, comment_id=comment_id, comment_data=comment_data)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(comment_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)) -> None:
    """Archive a comment. Archived comments are purged by the cleanup job."""
    CommentService.delete_comment(db=db, actor=actor, comment_id=comment_id)
