"""
Base service utilities shared by the domain services.

This module provides lookup helpers, sort-field validation, pagination and
transaction management for synchronous database operations.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from zenith.core.config import settings
from zenith.core.exceptions import ResourceNotFoundError, ValidationError
from zenith.db.base_class import Base

ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)

SORT_DIRECTIONS = ("asc", "desc")


@dataclass(frozen=True)
class PageParams:
    """Raw paging and sorting input as received from the client."""

    page: int = 0
    size: int = settings.DEFAULT_PAGE_SIZE
    sort_by: str = "createdAt"
    sort_direction: str = "asc"


def _normalize_field(name: str) -> str:
    # "createdAt", "created_at" and "CREATEDAT" all name the same field
    return name.replace("_", "").lower()


def build_sort_fields(**columns) -> Dict[str, Any]:
    """
    Build a sort allow-list from keyword arguments.

    Args:
        **columns: Public field name mapped to the column it sorts by,
            e.g. ``createdAt=Post.created_at``

    Returns:
        dict: Normalized field name to column
    """
    return {_normalize_field(name): column for name, column in columns.items()}


def validate_sort(sort_by: Optional[str], sort_direction: Optional[str], allowed: Dict[str, Any]) -> Tuple[Any, bool]:
    """
    Check a requested sort against an allow-list before any query is built.

    Args:
        sort_by: Requested field name (case-insensitive)
        sort_direction: "asc" or "desc" (case-insensitive)
        allowed: Allow-list built with ``build_sort_fields``

    Returns:
        tuple: (column to order by, True when descending)

    Raises:
        ValidationError: If the field or direction is not recognized
    """
    field = sort_by if sort_by is not None else "createdAt"
    direction = sort_direction if sort_direction is not None else "asc"

    column = allowed.get(_normalize_field(field.strip()))
    if column is None:
        raise ValidationError(f"Invalid sort field: {field}")

    if direction.strip().lower() not in SORT_DIRECTIONS:
        raise ValidationError(f"Invalid sort direction: {direction}")

    return column, direction.strip().lower() == "desc"


def paginate(
    query: Query,
    params: PageParams,
    allowed_sort: Dict[str, Any],
    to_response: Callable[[List[Any]], List[Any]],
) -> Dict[str, Any]:
    """
    Sort, count and slice a query into the page envelope.

    Args:
        query: Filtered query, not yet ordered
        params: Paging input
        allowed_sort: Allow-list for ``params.sort_by``
        to_response: Maps the page's rows to response objects in one pass

    Returns:
        dict: Keyword arguments for ``PageResponse``
    """
    column, descending = validate_sort(params.sort_by, params.sort_direction, allowed_sort)

    if params.page < 0:
        raise ValidationError("Page index must not be negative")
    if params.size < 1 or params.size > settings.MAX_PAGE_SIZE:
        raise ValidationError(f"Page size must be between 1 and {settings.MAX_PAGE_SIZE}")

    total = query.order_by(None).count()
    ordered = query.order_by(column.desc() if descending else column.asc())
    rows = ordered.offset(params.page * params.size).limit(params.size).all()

    return {
        "content": to_response(rows),
        "page": params.page,
        "size": params.size,
        "total_elements": total,
        "total_pages": math.ceil(total / params.size) if total > 0 else 0,
    }


class QueryUtils:
    """
    Utility class providing common query patterns and helpers.
    """

    @staticmethod
    def get_or_404(db: Session, model: Type[ModelType], id: Any, resource: Optional[str] = None) -> ModelType:
        """
        Get a record by ID or raise if not found.

        Args:
            db: Database session
            model: SQLAlchemy model class
            id: Primary key value
            resource: Name used in the error message, defaults to the model name

        Returns:
            Model instance

        Raises:
            ResourceNotFoundError: If no record has this id
        """
        obj = db.query(model).filter(model.id == id).first()
        if obj is None:
            raise ResourceNotFoundError.for_id(resource or model.__name__, id)
        return obj


class TransactionManager:
    """
    Context manager making one business operation a single all-or-nothing unit.

    Commits on a clean exit and rolls back when the block raises, so a failed
    multi-step delete never leaves partial changes behind.
    """

    def __init__(self, db: Session):
        self.db = db

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False

    def commit(self):
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error committing transaction: {e}")
            self.rollback()
            raise

    def rollback(self):
        self.db.rollback()


def count_grouped(db: Session, key_column, ids: List[int], *filters) -> Dict[int, int]:
    """Count rows per ``key_column`` value for the given ids in one query."""
    if not ids:
        return {}
    rows = (
        db.query(key_column, func.count())
        .filter(key_column.in_(ids), *filters)
        .group_by(key_column)
        .all()
    )
    return {key: count for key, count in rows}
