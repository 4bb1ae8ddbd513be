from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from zenith.core.exceptions import DuplicateResourceError, ForbiddenError, ResourceNotFoundError
from zenith.core.security import get_password_hash
from zenith.models import Comment, Post, Role, User, post_tags
from zenith.schemas.base import PageResponse
from zenith.schemas.user import UserCreate, UserResponse, UserUpdate
from zenith.services.authorization import Actor, ensure_role
from zenith.services.base import (
    PageParams,
    QueryUtils,
    TransactionManager,
    build_sort_fields,
    count_grouped,
    paginate,
)
from zenith.utils.logger import user_logger

USER_SORT_FIELDS = build_sort_fields(
    username=User.username,
    email=User.email,
    createdAt=User.created_at,
    updatedAt=User.updated_at,
)


class UserService:
    @staticmethod
    def get_user_by_username(db: Session, username: str) -> Optional[User]:
        return db.query(User).filter(User.username == username).first()

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def ensure_unique(
        db: Session,
        username: Optional[str] = None,
        email: Optional[str] = None,
        exclude_id: Optional[int] = None,
    ) -> None:
        """Case-insensitive uniqueness check for username and email.

        ``exclude_id`` skips the user being updated so re-saving an unchanged
        value is not reported as a clash with itself.
        """
        if username is not None:
            query = db.query(User.id).filter(func.lower(User.username) == username.lower())
            if exclude_id is not None:
                query = query.filter(User.id != exclude_id)
            if query.first():
                raise DuplicateResourceError(f"User with username '{username}' already exists")

        if email is not None:
            query = db.query(User.id).filter(func.lower(User.email) == email.lower())
            if exclude_id is not None:
                query = query.filter(User.id != exclude_id)
            if query.first():
                raise DuplicateResourceError(f"User with email '{email}' already exists")

    @staticmethod
    def to_responses(db: Session, users: List[User]) -> List[UserResponse]:
        ids = [user.id for user in users]
        post_counts = count_grouped(db, Post.author_id, ids)
        comment_counts = count_grouped(db, Comment.author_id, ids)

        return [
            UserResponse.model_validate(user).model_copy(
                update={
                    "post_count": post_counts.get(user.id, 0),
                    "comment_count": comment_counts.get(user.id, 0),
                }
            )
            for user in users
        ]

    @classmethod
    def to_response(cls, db: Session, user: User) -> UserResponse:
        return cls.to_responses(db, [user])[0]

    @classmethod
    def get_user(cls, db: Session, user_id: int) -> UserResponse:
        user = QueryUtils.get_or_404(db, User, user_id, "User")
        return cls.to_response(db, user)

    @classmethod
    def get_profile(cls, db: Session, actor: Actor) -> UserResponse:
        return cls.get_user(db, actor.user_id)

    @classmethod
    def list_users(
        cls, db: Session, actor: Actor, params: PageParams, role: Optional[Role] = None
    ) -> PageResponse[UserResponse]:
        ensure_role(actor, Role.ADMIN)
        query = db.query(User)
        if role is not None:
            query = query.filter(User.role == role)

        page = paginate(query, params, USER_SORT_FIELDS, lambda rows: cls.to_responses(db, rows))
        return PageResponse[UserResponse](**page)

    @classmethod
    def create_user(cls, db: Session, actor: Actor, user_data: UserCreate) -> UserResponse:
        """Create a user with an explicit role (admin operation)."""
        ensure_role(actor, Role.ADMIN)
        cls.ensure_unique(db, username=user_data.username, email=user_data.email)

        user = User(
            username=user_data.username,
            email=user_data.email,
            password=get_password_hash(user_data.password),
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            bio=user_data.bio,
            role=user_data.role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)

        user_logger.success("User created", "CREATE", user_id=user.id, role=user.role.value)
        return cls.to_response(db, user)

    @classmethod
    def update_user(cls, db: Session, actor: Actor, user_id: int, user_data: UserUpdate) -> UserResponse:
        """Partially update a profile. Allowed for the user themself or an admin."""
        if actor.user_id != user_id and actor.role != Role.ADMIN:
            raise ForbiddenError("You can only update your own profile")

        user = QueryUtils.get_or_404(db, User, user_id, "User")
        changes: Dict[str, object] = user_data.model_dump(exclude_unset=True)

        cls.ensure_unique(
            db,
            username=changes.get("username"),
            email=changes.get("email"),
            exclude_id=user.id,
        )

        for field in ("username", "email", "first_name", "last_name", "bio"):
            if changes.get(field) is not None:
                setattr(user, field, changes[field])
        if changes.get("password"):
            user.password = get_password_hash(changes["password"])

        db.commit()
        db.refresh(user)

        user_logger.info("User updated", "UPDATE", user_id=user.id, fields=sorted(changes))
        return cls.to_response(db, user)

    @classmethod
    def update_role(cls, db: Session, actor: Actor, user_id: int, role: Role) -> UserResponse:
        ensure_role(actor, Role.ADMIN)
        user = QueryUtils.get_or_404(db, User, user_id, "User")
        previous = user.role
        user.role = role
        db.commit()
        db.refresh(user)

        user_logger.info("User role changed", "ROLE", user_id=user.id, old=previous.value, new=role.value)
        return cls.to_response(db, user)

    @staticmethod
    def delete_user(db: Session, actor: Actor, user_id: int) -> None:
        """Delete a user and everything they own in one transaction.

        Order: the user's comments, other comments on the user's posts, tag
        links of those posts, the posts, then the user.
        """
        ensure_role(actor, Role.ADMIN)
        user = QueryUtils.get_or_404(db, User, user_id, "User")
        own_posts = select(Post.id).where(Post.author_id == user.id)

        with TransactionManager(db):
            comments = db.query(Comment).filter(Comment.author_id == user.id).delete(synchronize_session=False)
            comments += (
                db.query(Comment)
                .filter(Comment.post_id.in_(own_posts))
                .delete(synchronize_session=False)
            )
            db.execute(post_tags.delete().where(post_tags.c.post_id.in_(own_posts)))
            posts = db.query(Post).filter(Post.author_id == user.id).delete(synchronize_session=False)
            db.query(User).filter(User.id == user.id).delete(synchronize_session=False)

        user_logger.warning("User deleted", "DELETE", user_id=user_id, posts=posts, comments=comments)
