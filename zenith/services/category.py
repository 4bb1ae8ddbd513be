from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from zenith.core.exceptions import DuplicateResourceError, ResourceInUseError
from zenith.models import Category, Post, Role
from zenith.schemas.base import PageResponse
from zenith.schemas.taxonomy import CategoryCreate, CategoryResponse, CategoryUpdate
from zenith.services.authorization import Actor, ensure_role
from zenith.services.base import PageParams, QueryUtils, build_sort_fields, count_grouped, paginate
from zenith.utils.logger import taxonomy_logger

CATEGORY_SORT_FIELDS = build_sort_fields(
    name=Category.name,
    createdAt=Category.created_at,
    updatedAt=Category.updated_at,
)


class CategoryService:
    @staticmethod
    def _ensure_unique_name(db: Session, name: str, exclude_id: Optional[int] = None) -> None:
        query = db.query(Category.id).filter(func.lower(Category.name) == name.lower())
        if exclude_id is not None:
            query = query.filter(Category.id != exclude_id)
        if query.first():
            raise DuplicateResourceError(f"Category with name '{name}' already exists")

    @staticmethod
    def to_responses(db: Session, categories: List[Category]) -> List[CategoryResponse]:
        post_counts = count_grouped(db, Post.category_id, [c.id for c in categories])
        return [
            CategoryResponse.model_validate(category).model_copy(
                update={"post_count": post_counts.get(category.id, 0)}
            )
            for category in categories
        ]

    @classmethod
    def list_categories(cls, db: Session, params: PageParams) -> PageResponse[CategoryResponse]:
        page = paginate(db.query(Category), params, CATEGORY_SORT_FIELDS, lambda rows: cls.to_responses(db, rows))
        return PageResponse[CategoryResponse](**page)

    @classmethod
    def get_category(cls, db: Session, category_id: int) -> CategoryResponse:
        category = QueryUtils.get_or_404(db, Category, category_id)
        return cls.to_responses(db, [category])[0]

    @classmethod
    def create_category(cls, db: Session, actor: Actor, category_data: CategoryCreate) -> CategoryResponse:
        ensure_role(actor, Role.ADMIN)
        cls._ensure_unique_name(db, category_data.name)

        category = Category(name=category_data.name, description=category_data.description)
        db.add(category)
        db.commit()
        db.refresh(category)

        taxonomy_logger.success("Category created", "CATEGORY", category_id=category.id, name=category.name)
        return cls.to_responses(db, [category])[0]

    @classmethod
    def update_category(cls, db: Session, actor: Actor, category_id: int, category_data: CategoryUpdate) -> CategoryResponse:
        ensure_role(actor, Role.ADMIN)
        category = QueryUtils.get_or_404(db, Category, category_id)

        if category_data.name is not None:
            # The category's own row is excluded so case-only renames go through
            cls._ensure_unique_name(db, category_data.name, exclude_id=category.id)
            category.name = category_data.name
        if category_data.description is not None:
            category.description = category_data.description

        db.commit()
        db.refresh(category)
        return cls.to_responses(db, [category])[0]

    @staticmethod
    def delete_category(db: Session, actor: Actor, category_id: int) -> None:
        """Delete a category that no post references."""
        ensure_role(actor, Role.ADMIN)
        category = QueryUtils.get_or_404(db, Category, category_id)

        in_use = db.query(func.count(Post.id)).filter(Post.category_id == category.id).scalar()
        if in_use:
            raise ResourceInUseError(
                f"Category '{category.name}' has dependents and cannot be deleted",
                details={"post_count": in_use},
            )

        db.delete(category)
        db.commit()
        taxonomy_logger.warning("Category deleted", "CATEGORY", category_id=category_id)
