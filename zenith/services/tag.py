from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from zenith.core.exceptions import DuplicateResourceError, ResourceInUseError, ResourceNotFoundError
from zenith.models import Post, PostStatus, Role, Tag, post_tags
from zenith.schemas.base import PageResponse
from zenith.schemas.taxonomy import TagCreate, TagResponse, TagUpdate
from zenith.services.authorization import Actor, ensure_role
from zenith.services.base import PageParams, QueryUtils, build_sort_fields, paginate
from zenith.utils.logger import taxonomy_logger

TAG_SORT_FIELDS = build_sort_fields(
    name=Tag.name,
    createdAt=Tag.created_at,
    updatedAt=Tag.updated_at,
)


class TagService:
    @staticmethod
    def _ensure_unique_name(db: Session, name: str, exclude_id: Optional[int] = None) -> None:
        query = db.query(Tag.id).filter(func.lower(Tag.name) == name.lower())
        if exclude_id is not None:
            query = query.filter(Tag.id != exclude_id)
        if query.first():
            raise DuplicateResourceError(f"Tag with name '{name}' already exists")

    @staticmethod
    def published_post_counts(db: Session, tag_ids: List[int]) -> Dict[int, int]:
        """Tag usage counts, counting PUBLISHED posts only."""
        if not tag_ids:
            return {}
        rows = (
            db.query(post_tags.c.tag_id, func.count(post_tags.c.post_id))
            .join(Post, Post.id == post_tags.c.post_id)
            .filter(post_tags.c.tag_id.in_(tag_ids), Post.status == PostStatus.PUBLISHED)
            .group_by(post_tags.c.tag_id)
            .all()
        )
        return {tag_id: count for tag_id, count in rows}

    @classmethod
    def to_responses(cls, db: Session, tags: List[Tag]) -> List[TagResponse]:
        counts = cls.published_post_counts(db, [tag.id for tag in tags])
        return [
            TagResponse.model_validate(tag).model_copy(update={"post_count": counts.get(tag.id, 0)})
            for tag in tags
        ]

    @classmethod
    def list_tags(cls, db: Session, params: PageParams) -> PageResponse[TagResponse]:
        page = paginate(db.query(Tag), params, TAG_SORT_FIELDS, lambda rows: cls.to_responses(db, rows))
        return PageResponse[TagResponse](**page)

    @classmethod
    def get_tag(cls, db: Session, tag_id: int) -> TagResponse:
        tag = QueryUtils.get_or_404(db, Tag, tag_id)
        return cls.to_responses(db, [tag])[0]

    @classmethod
    def create_tag(cls, db: Session, actor: Actor, tag_data: TagCreate) -> TagResponse:
        ensure_role(actor, Role.ADMIN)
        cls._ensure_unique_name(db, tag_data.name)

        tag = Tag(name=tag_data.name)
        db.add(tag)
        db.commit()
        db.refresh(tag)

        taxonomy_logger.success("Tag created", "TAG", tag_id=tag.id, name=tag.name)
        return cls.to_responses(db, [tag])[0]

    @classmethod
    def update_tag(cls, db: Session, actor: Actor, tag_id: int, tag_data: TagUpdate) -> TagResponse:
        ensure_role(actor, Role.ADMIN)
        tag = QueryUtils.get_or_404(db, Tag, tag_id)
        cls._ensure_unique_name(db, tag_data.name, exclude_id=tag.id)

        tag.name = tag_data.name
        db.commit()
        db.refresh(tag)
        return cls.to_responses(db, [tag])[0]

    @staticmethod
    def delete_tag(db: Session, actor: Actor, tag_id: int) -> None:
        """Delete a tag that no post references."""
        ensure_role(actor, Role.ADMIN)
        tag = QueryUtils.get_or_404(db, Tag, tag_id)

        in_use = db.query(func.count()).select_from(post_tags).filter(post_tags.c.tag_id == tag.id).scalar()
        if in_use:
            raise ResourceInUseError(
                f"Tag '{tag.name}' has dependents and cannot be deleted",
                details={"post_count": in_use},
            )

        db.delete(tag)
        db.commit()
        taxonomy_logger.warning("Tag deleted", "TAG", tag_id=tag_id)

    @staticmethod
    def get_or_create_tags(db: Session, names: Iterable[str]) -> List[Tag]:
        """
        Resolve tag names, creating the ones that do not exist yet.

        Matching is case-insensitive and an existing tag keeps its stored
        spelling. New tags are flushed but not committed; the caller owns the
        transaction.

        Args:
            db: Database session
            names: Tag names as supplied by the client

        Returns:
            list: Existing and newly created tags, in first-seen order
        """
        wanted: Dict[str, str] = {}
        for name in names:
            cleaned = (name or "").strip()
            if cleaned and cleaned.lower() not in wanted:
                wanted[cleaned.lower()] = cleaned
        if not wanted:
            return []

        existing = db.query(Tag).filter(func.lower(Tag.name).in_(list(wanted))).all()
        by_key = {tag.name.lower(): tag for tag in existing}

        created = [Tag(name=name) for key, name in wanted.items() if key not in by_key]
        if created:
            db.add_all(created)
            db.flush()
            by_key.update({tag.name.lower(): tag for tag in created})
            taxonomy_logger.info("Tags created on demand", "TAG", names=[tag.name for tag in created])

        return [by_key[key] for key in wanted]

    @classmethod
    def bulk_create(cls, db: Session, actor: Actor, names: Iterable[str]) -> List[TagResponse]:
        ensure_role(actor, Role.ADMIN)
        tags = cls.get_or_create_tags(db, names)
        db.commit()
        return cls.to_responses(db, tags)

    @staticmethod
    def get_tags_by_ids(db: Session, tag_ids: Iterable[int]) -> List[Tag]:
        ids = list(dict.fromkeys(tag_ids))
        if not ids:
            return []
        tags = db.query(Tag).filter(Tag.id.in_(ids)).all()
        missing = sorted(set(ids) - {tag.id for tag in tags})
        if missing:
            raise ResourceNotFoundError(
                f"Tag not found with id: {', '.join(str(i) for i in missing)}",
                details={"missing_ids": missing},
            )
        return tags
