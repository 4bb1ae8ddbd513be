from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from zenith.api.deps import get_current_actor, get_page_params, require_admin
from zenith.db.session import get_db
from zenith.models import Role
from zenith.schemas.base import PageResponse
from zenith.schemas.user import RoleUpdate, UserCreate, UserResponse, UserUpdate
from zenith.services.authorization import Actor
from zenith.services.base import PageParams
from zenith.services.user import UserService

router = APIRouter()


@router.get("/me", response_model=UserResponse)
def get_my_profile(db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)) -> Any:
    return UserService.get_profile(db=db, actor=actor)


@router.get("", response_model=PageResponse[UserResponse])
def list_users(
    role: Optional[Role] = Query(None, description="Only users with this role"),
    params: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
) -> Any:
    return UserService.list_users(db=db, actor=actor, params=params, role=role)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
) -> Any:
    return UserService.create_user(db=db, actor=actor, user_data=user_data)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)) -> Any:
    return UserService.get_user(db=db, user_id=user_id)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> Any:
    """Update a profile. Users may edit themselves; admins may edit anyone."""
    return UserService.update_user(db=db, actor=actor, user_id=user_id, user_data=user_data)


@router.patch("/{user_id}/role", response_model=UserResponse)
def update_user_role(
    user_id: int,
    role_data: RoleUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
) -> Any:
    return UserService.update_role(db=db, actor=actor, user_id=user_id, role=role_data.role)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, db: Session = Depends(get_db), actor: Actor = Depends(require_admin)) -> None:
    """Delete a user together with their posts and comments."""
    UserService.delete_user(db=db, actor=actor, user_id=user_id)
