from typing import Any, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from zenith.api.deps import get_page_params, require_admin
from zenith.db.session import get_db
from zenith.schemas.base import PageResponse
from zenith.schemas.taxonomy import TagBulkCreate, TagCreate, TagResponse, TagUpdate
from zenith.services.authorization import Actor
from zenith.services.base import PageParams
from zenith.services.tag import TagService

# Public reads, mounted under /tags
router = APIRouter()

# Admin writes, mounted under /admin/tags
admin_router = APIRouter()


@router.get("", response_model=PageResponse[TagResponse])
def list_tags(params: PageParams = Depends(get_page_params), db: Session = Depends(get_db)) -> Any:
    """List tags. ``post_count`` only counts published posts."""
    return TagService.list_tags(db=db, params=params)


@router.get("/{tag_id}", response_model=TagResponse)
def get_tag(tag_id: int, db: Session = Depends(get_db)) -> Any:
    return TagService.get_tag(db=db, tag_id=tag_id)


@admin_router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
def create_tag(tag_data: TagCreate, db: Session = Depends(get_db), actor: Actor = Depends(require_admin)) -> Any:
    return TagService.create_tag(db=db, actor=actor, tag_data=tag_data)


@admin_router.post("/bulk", response_model=List[TagResponse])
def bulk_create_tags(
    bulk_data: TagBulkCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
) -> Any:
    """Create the missing tags among ``names`` and return all of them."""
    return TagService.bulk_create(db=db, actor=actor, names=bulk_data.names)


@admin_router.put("/{tag_id}", response_model=TagResponse)
def update_tag(
    tag_id: int,
    tag_data: TagUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
) -> Any:
    return TagService.update_tag(db=db, actor=actor, tag_id=tag_id, tag_data=tag_data)


@admin_router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tag(tag_id: int, db: Session = Depends(get_db), actor: Actor = Depends(require_admin)) -> None:
    TagService.delete_tag(db=db, actor=actor, tag_id=tag_id)
