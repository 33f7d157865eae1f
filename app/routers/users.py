from typing import Optional
from fastapi import APIRouter, Depends

from app.schemas.common import MessageResponse, PaginationInfo
from app.schemas.user import UserPage, UserResponse, UserUpdate
from app.services import users
from app.store import Store, get_store
from app.utils.auth import get_current_actor
from app.utils.policy import Actor


router = APIRouter(
    prefix="/users",
    tags=["users"],
)


@router.get("/", response_model=UserPage)
def get_users(
    role: Optional[str] = None,
    is_active: Optional[bool] = None,
    page: int = 1,
    limit: Optional[int] = None,
    store: Store = Depends(get_store),
    actor: Actor = Depends(get_current_actor),
):
    """
    List users. Requires administrator privileges.
    """
    result = users.list_users(store, actor, role=role, is_active=is_active, page=page, limit=limit)
    return {"data": result.items, "pagination": PaginationInfo.from_page(result)}


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, store: Store = Depends(get_store), actor: Actor = Depends(get_current_actor)):
    return users.get_user(store, actor, user_id)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    user_update: UserUpdate,
    store: Store = Depends(get_store),
    actor: Actor = Depends(get_current_actor),
):
    """
    Update a user's profile, role or flags. Requires administrator privileges.
    """
    return users.update_user(store, actor, user_id, user_update.model_dump(exclude_unset=True))


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(user_id: int, store: Store = Depends(get_store), actor: Actor = Depends(get_current_actor)):
    """
    Deactivate a user. Users are never removed.
    """
    users.deactivate_user(store, actor, user_id)
    return {"message": "User deleted successfully"}
