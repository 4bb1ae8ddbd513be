from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from zenith.api.deps import get_current_actor, get_optional_actor, get_page_params
from zenith.db.session import get_db
from zenith.models import PostStatus
from zenith.schemas.base import PageResponse
from zenith.schemas.post import PostCreate, PostResponse, PostUpdate
from zenith.services.authorization import Actor
from zenith.services.base import PageParams
from zenith.services.post import PostService

router = APIRouter()


def _list_published(
    category_id: Optional[int] = Query(None, description="Only posts in this category"),
    tag: Optional[str] = Query(None, description="Tag name, case-insensitive"),
    params: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
) -> PageResponse[PostResponse]:
    return PostService.list_published(db=db, params=params, category_id=category_id, tag=tag)


@router.get("", response_model=PageResponse[PostResponse])
def list_posts(page: PageResponse[PostResponse] = Depends(_list_published)) -> Any:
    """List published posts, optionally filtered by category or tag."""
    return page


@router.get("/published", response_model=PageResponse[PostResponse])
def list_published_posts(page: PageResponse[PostResponse] = Depends(_list_published)) -> Any:
    return page


@router.get("/my", response_model=PageResponse[PostResponse])
def list_my_posts(
    post_status: Optional[PostStatus] = Query(None, alias="status"),
    params: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> Any:
    return PostService.list_my_posts(db=db, actor=actor, params=params, status=post_status)


@router.get("/slug/{slug}", response_model=PostResponse)
def get_post_by_slug(
    slug: str,
    db: Session = Depends(get_db),
    actor: Optional[Actor] = Depends(get_optional_actor),
) -> Any:
    return PostService.get_post_by_slug(db=db, actor=actor, slug=slug)


@router.get("/{post_id}", response_model=PostResponse)
def get_post(
    post_id: int,
    db: Session = Depends(get_db),
    actor: Optional[Actor] = Depends(get_optional_actor),
) -> Any:
    """Get a post. Unpublished posts are visible to their author and to staff only."""
    return PostService.get_post(db=db, actor=actor, post_id=post_id)


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    post_data: PostCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> Any:
    return PostService.create_post(db=db, actor=actor, post_data=post_data)


@router.put("/{post_id}", response_model=PostResponse)
def update_post(
    post_id: int,
    post_data: PostUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> Any:
    return PostService.update_post(db=db, actor=actor, post_id=post_id, post_data=post_data)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(post_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)) -> None:
    PostService.delete_post(db=db, actor=actor, post_id=post_id)
