"""
Access policy.

``is_allowed`` is a pure function of the actor, the operation and the target
entity (when there is one). It knows nothing about HTTP; the routers resolve
the actor and the services call ``authorize`` before touching state.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Optional

from app.models.enums import UserRole
from app.utils.exceptions import ForbiddenError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    """Identity issuing a request. ``id`` is None for anonymous callers."""

    id: Optional[int] = None
    role: Optional[UserRole] = None

    @property
    def is_authenticated(self) -> bool:
        return self.id is not None

    @property
    def is_admin(self) -> bool:
        return self.is_authenticated and self.role == UserRole.ADMIN

    @classmethod
    def from_user(cls, user) -> "Actor":
        return cls(id=user.id, role=user.role)


ANONYMOUS = Actor()


class Operation(str, enum.Enum):
    LISTING_READ = "listing:read"
    LISTING_CREATE = "listing:create"
    LISTING_UPDATE = "listing:update"
    LISTING_DELETE = "listing:delete"
    REVIEW_CREATE = "review:create"

    BOOKING_CREATE = "booking:create"
    BOOKING_READ = "booking:read"
    BOOKING_LIST = "booking:list"
    BOOKING_CANCEL = "booking:cancel"
    BOOKING_CHANGE_STATUS = "booking:change_status"

    USER_MANAGE = "user:manage"


def _owns(actor: Actor, target: Any, attribute: str) -> bool:
    return target is not None and actor.is_authenticated and getattr(target, attribute, None) == actor.id


def is_allowed(actor: Actor, operation: Operation, target: Any = None) -> bool:
    """Decide whether ``actor`` may perform ``operation`` on ``target``.

    ``target`` is a hostel for the listing operations and a booking for the
    per-booking reservation operations.
    """
    if actor.is_admin:
        return True
    if operation is Operation.LISTING_READ:
        return True
    if not actor.is_authenticated:
        return False

    if operation in (Operation.LISTING_UPDATE, Operation.LISTING_DELETE):
        return _owns(actor, target, "owner_id")
    if operation in (Operation.BOOKING_READ, Operation.BOOKING_CANCEL):
        return _owns(actor, target, "user_id")
    if operation in (Operation.REVIEW_CREATE, Operation.BOOKING_CREATE, Operation.BOOKING_LIST):
        return True
    # LISTING_CREATE, BOOKING_CHANGE_STATUS, USER_MANAGE
    return False


def authorize(actor: Actor, operation: Operation, target: Any = None, message: str = None):
    """Raise ForbiddenError unless ``actor`` may perform ``operation``."""
    if not is_allowed(actor, operation, target):
        logger.warning(f"Denied {operation.value} for actor {actor.id} (role: {actor.role})")
        raise ForbiddenError(message) if message else ForbiddenError()
