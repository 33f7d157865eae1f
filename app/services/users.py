import logging
from typing import Any, Dict, Optional

from app.models.enums import UserRole
from app.models.user import User
from app.store import Store
from app.utils.auth import get_password_hash, verify_password
from app.utils.exceptions import NotFoundError, ValidationError
from app.utils.pagination import Page, page_window
from app.utils.policy import Actor, Operation, authorize

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
ADMIN_UPDATABLE_FIELDS = ("name", "email", "phone", "address", "role", "is_active", "is_verified")


def _ensure_email_free(store: Store, email: str, message: str):
    if store.find_first(User, User.email == email):
        raise ValidationError(message)


def register_user(
    store: Store,
    name: str,
    email: str,
    password: str,
    phone: Optional[str] = None,
    address: Optional[str] = None,
    role: UserRole = UserRole.USER,
) -> User:
    if not name or not name.strip():
        raise ValidationError("Name is required")
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    _ensure_email_free(store, email, "User already exists")

    user = store.create(
        User(
            name=name.strip(),
            email=email,
            hashed_password=get_password_hash(password),
            phone=phone,
            address=address,
            role=role,
            is_active=True,
            is_verified=False,
        )
    )
    logger.info(f"Registered user {user.id} ({user.role.value})")
    return user


def authenticate(store: Store, email: str, password: str) -> Optional[User]:
    """Return the active user matching the credentials, or None."""
    user = store.find_first(User, User.email == email)
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def ensure_admin(store: Store, email: str, password: str, name: str) -> User:
    """Create the bootstrap administrator unless a user with ``email`` exists."""
    user = store.find_first(User, User.email == email)
    if user:
        logger.info("Admin user already exists")
        return user
    user = register_user(store, name, email, password, role=UserRole.ADMIN)
    return store.save(user, is_verified=True)


def get_user(store: Store, actor: Actor, user_id: int) -> User:
    authorize(actor, Operation.USER_MANAGE, message="Access denied. Admin privileges required.")
    user = store.find_by_id(User, user_id)
    if not user:
        raise NotFoundError("User")
    return user


def list_users(
    store: Store,
    actor: Actor,
    role=None,
    is_active: Optional[bool] = None,
    page: int = 1,
    limit: Optional[int] = None,
) -> Page:
    authorize(actor, Operation.USER_MANAGE, message="Access denied. Admin privileges required.")
    page, limit, skip = page_window(page, limit)
    criteria = []
    if role is not None:
        try:
            criteria.append(User.role == UserRole(role))
        except ValueError:
            raise ValidationError("Invalid role")
    if is_active is not None:
        criteria.append(User.is_active.is_(is_active))

    items = store.find_many(User, *criteria, order_by=(User.created_at.desc(), User.id.desc()), skip=skip, limit=limit)
    return Page(items=items, total=store.count(User, *criteria), page=page, limit=limit)


def update_user(store: Store, actor: Actor, user_id: int, changes: Dict[str, Any]) -> User:
    user = get_user(store, actor, user_id)
    unknown = set(changes) - set(ADMIN_UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Invalid updates: {', '.join(sorted(unknown))}")

    changes = dict(changes)
    for name in ("name", "email", "phone"):
        if name in changes and (changes[name] is None or not str(changes[name]).strip()):
            raise ValidationError(f"{name.capitalize()} cannot be empty")
    if "role" in changes:
        try:
            changes["role"] = UserRole(changes["role"])
        except ValueError:
            raise ValidationError("Invalid role")
    if "email" in changes and changes["email"] != user.email:
        _ensure_email_free(store, changes["email"], "Email is already taken")

    return store.save(user, **changes)


def deactivate_user(store: Store, actor: Actor, user_id: int) -> User:
    """Soft-delete a user."""
    user = get_user(store, actor, user_id)
    logger.info(f"Deactivating user {user_id} by admin {actor.id}")
    return store.save(user, is_active=False)
