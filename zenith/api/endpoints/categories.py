from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from zenith.api.deps import get_page_params, require_admin
from zenith.db.session import get_db
from zenith.schemas.base import PageResponse
from zenith.schemas.taxonomy import CategoryCreate, CategoryResponse, CategoryUpdate
from zenith.services.authorization import Actor
from zenith.services.base import PageParams
from zenith.services.category import CategoryService

# Public reads, mounted under /categories
router = APIRouter()

# Admin writes, mounted under /admin/categories
admin_router = APIRouter()


@router.get("", response_model=PageResponse[CategoryResponse])
def list_categories(params: PageParams = Depends(get_page_params), db: Session = Depends(get_db)) -> Any:
    return CategoryService.list_categories(db=db, params=params)


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(category_id: int, db: Session = Depends(get_db)) -> Any:
    return CategoryService.get_category(db=db, category_id=category_id)


@admin_router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    category_data: CategoryCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
) -> Any:
    return CategoryService.create_category(db=db, actor=actor, category_data=category_data)


@admin_router.put("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    category_data: CategoryUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
) -> Any:
    return CategoryService.update_category(db=db, actor=actor, category_id=category_id, category_data=category_data)


@admin_router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: int, db: Session = Depends(get_db), actor: Actor = Depends(require_admin)) -> None:
    """Delete a category. Fails with 409 while posts still use it."""
    CategoryService.delete_category(db=db, actor=actor, category_id=category_id)
