"""
Listing store: hostels with their rooms and reviews.
"""

import logging
from typing import Any, Dict, Iterable, Optional

from sqlalchemy import or_

from app.models.enums import RoomType
from app.models.hostel import Hostel, HostelAmenity, Review, Room
from app.models.user import User
from app.store import Store
from app.utils.exceptions import NotFoundError, ValidationError
from app.utils.pagination import Page, page_window
from app.utils.policy import Actor, Operation, authorize

logger = logging.getLogger(__name__)


REQUIRED_HOSTEL_FIELDS = (
    "name",
    "description",
    "street",
    "city",
    "state",
    "country",
    "zip_code",
    "contact_phone",
    "contact_email",
)
OPTIONAL_HOSTEL_FIELDS = (
    "latitude",
    "longitude",
    "amenities",
    "images",
    "check_in_time",
    "check_out_time",
    "cancellation_policy",
    "house_rules",
)
UPDATABLE_HOSTEL_FIELDS = REQUIRED_HOSTEL_FIELDS + OPTIONAL_HOSTEL_FIELDS + ("is_active",)
ROOM_FIELDS = ("type", "capacity", "price", "amenities", "images", "is_available")
SEARCH_FIELDS = (Hostel.name, Hostel.description, Hostel.city, Hostel.state, Hostel.country)


def _require_text(data: Dict[str, Any], fields: Iterable[str]):
    for name in fields:
        value = data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"{name.replace('_', ' ').capitalize()} is required")


def _set_amenities(hostel: Hostel, names):
    """Replace the hostel's amenities, keeping rows for names that stay."""
    names = list(dict.fromkeys(names or []))
    kept = [link for link in hostel.amenity_links if link.name in names]
    present = {link.name for link in kept}
    hostel.amenity_links = kept + [HostelAmenity(name=name) for name in names if name not in present]


def _build_room(data: Dict[str, Any]) -> Room:
    room = Room(amenities=[], images=[], is_available=True)
    _apply_room_changes(room, data, creating=True)
    return room


def _apply_room_changes(room: Room, data: Dict[str, Any], creating: bool = False):
    unknown = set(data) - set(ROOM_FIELDS)
    if unknown:
        raise ValidationError(f"Invalid room fields: {', '.join(sorted(unknown))}")
    if creating:
        for name in ("type", "capacity", "price"):
            if data.get(name) is None:
                raise ValidationError(f"Room {name} is required")

    if "type" in data:
        try:
            data = {**data, "type": RoomType(data["type"])}
        except ValueError:
            raise ValidationError("Room type must be one of: single, double, dormitory, suite")
    if "capacity" in data and (data["capacity"] is None or data["capacity"] < 1):
        raise ValidationError("Room capacity must be at least 1")
    if "price" in data and (data["price"] is None or data["price"] < 0):
        raise ValidationError("Room price must be a non-negative number")

    for key, value in data.items():
        if value is None and key in ("amenities", "images", "is_available"):
            continue
        setattr(room, key, value)


def _get_hostel_or_404(store: Store, hostel_id: int) -> Hostel:
    hostel = store.find_by_id(Hostel, hostel_id)
    if not hostel:
        logger.error(f"Hostel not found: {hostel_id}")
        raise NotFoundError("Hostel")
    return hostel


def get_hostel(store: Store, actor: Actor, hostel_id: int) -> Hostel:
    authorize(actor, Operation.LISTING_READ)
    return _get_hostel_or_404(store, hostel_id)


def create_hostel(store: Store, actor: Actor, data: Dict[str, Any]) -> Hostel:
    """Create a hostel with at least one room. Administrators only."""
    authorize(actor, Operation.LISTING_CREATE, message="Access denied. Admin privileges required.")
    data = dict(data)
    _require_text(data, REQUIRED_HOSTEL_FIELDS)

    rooms = data.pop("rooms", None) or []
    if not rooms:
        raise ValidationError("At least one room is required")

    owner_id = data.pop("owner_id", None)
    if owner_id is None:
        owner_id = actor.id
    else:
        owner = store.find_by_id(User, owner_id)
        if not owner or not owner.is_active:
            logger.error(f"Hostel owner not found: {owner_id}")
            raise NotFoundError("User")
    unknown = set(data) - set(REQUIRED_HOSTEL_FIELDS + OPTIONAL_HOSTEL_FIELDS)
    if unknown:
        raise ValidationError(f"Invalid hostel fields: {', '.join(sorted(unknown))}")

    amenities = data.pop("amenities", None) or []
    hostel = Hostel(
        **{key: value for key, value in data.items() if value is not None},
        owner_id=owner_id,
        rating=0.0,
        is_active=True,
    )
    hostel.images = hostel.images or []
    hostel.house_rules = hostel.house_rules or []
    _set_amenities(hostel, amenities)
    hostel.rooms = [_build_room(room) for room in rooms]

    hostel = store.create(hostel)
    logger.info(f"Created hostel {hostel.id} with {len(hostel.rooms)} rooms, owner: {owner_id}")
    return hostel


def search_hostels(
    store: Store,
    actor: Actor,
    search: Optional[str] = None,
    city: Optional[str] = None,
    state: Optional[str] = None,
    country: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    amenities: Optional[Iterable[str]] = None,
    page: int = 1,
    limit: Optional[int] = None,
) -> Page:
    """
    Search active hostels, best rated first.

    - **search**: matches when any word appears in the name, description,
      city, state or country.
    - **min_price** / **max_price**: a hostel matches when some room is at
      least ``min_price`` and some room is at most ``max_price``.
    - **amenities**: the hostel must offer every one of them.
    """
    authorize(actor, Operation.LISTING_READ)
    page, limit, skip = page_window(page, limit)
    criteria = [Hostel.is_active.is_(True)]

    words = (search or "").split()
    if words:
        criteria.append(or_(*[field.icontains(word, autoescape=True) for word in words for field in SEARCH_FIELDS]))
    if city:
        criteria.append(Hostel.city == city)
    if state:
        criteria.append(Hostel.state == state)
    if country:
        criteria.append(Hostel.country == country)
    if min_price is not None:
        criteria.append(Hostel.rooms.any(Room.price >= min_price))
    if max_price is not None:
        criteria.append(Hostel.rooms.any(Room.price <= max_price))
    for amenity in amenities or ():
        criteria.append(Hostel.amenity_links.any(HostelAmenity.name == amenity))

    items = store.find_many(
        Hostel,
        *criteria,
        order_by=(Hostel.rating.desc(), Hostel.id),
        skip=skip,
        limit=limit,
    )
    total = store.count(Hostel, *criteria)
    return Page(items=items, total=total, page=page, limit=limit)


def update_hostel(store: Store, actor: Actor, hostel_id: int, changes: Dict[str, Any]) -> Hostel:
    """Merge ``changes`` into a hostel. Administrators and the owner only."""
    hostel = _get_hostel_or_404(store, hostel_id)
    authorize(actor, Operation.LISTING_UPDATE, hostel, message="Access denied. Hostel owner privileges required.")

    unknown = set(changes) - set(UPDATABLE_HOSTEL_FIELDS)
    if unknown:
        raise ValidationError(f"Invalid hostel fields: {', '.join(sorted(unknown))}")
    _require_text(changes, [name for name in REQUIRED_HOSTEL_FIELDS if name in changes])

    changes = dict(changes)
    if "amenities" in changes:
        _set_amenities(hostel, changes.pop("amenities"))
    if "is_active" in changes and changes["is_active"] is None:
        changes.pop("is_active")
    for name in ("images", "house_rules"):
        if name in changes and changes[name] is None:
            changes[name] = []

    hostel = store.save(hostel, **changes)
    logger.debug(f"Updated hostel {hostel_id}: {sorted(changes)}")
    return hostel


def delete_hostel(store: Store, actor: Actor, hostel_id: int) -> Hostel:
    """Deactivate a hostel; hostels are never removed."""
    hostel = _get_hostel_or_404(store, hostel_id)
    authorize(actor, Operation.LISTING_DELETE, hostel, message="Access denied. Hostel owner privileges required.")
    logger.info(f"Deactivating hostel {hostel_id} by actor {actor.id}")
    return store.save(hostel, is_active=False)


def add_room(store: Store, actor: Actor, hostel_id: int, data: Dict[str, Any]) -> Room:
    hostel = _get_hostel_or_404(store, hostel_id)
    authorize(actor, Operation.LISTING_UPDATE, hostel, message="Access denied. Hostel owner privileges required.")
    room = _build_room(data)
    hostel.rooms.append(room)
    store.save(hostel)
    logger.debug(f"Added room {room.id} to hostel {hostel_id}")
    return room


def update_room(store: Store, actor: Actor, hostel_id: int, room_id: int, changes: Dict[str, Any]) -> Room:
    hostel = _get_hostel_or_404(store, hostel_id)
    authorize(actor, Operation.LISTING_UPDATE, hostel, message="Access denied. Hostel owner privileges required.")
    room = hostel.room(room_id)
    if not room:
        logger.error(f"Room {room_id} not found in hostel {hostel_id}")
        raise NotFoundError("Room")
    _apply_room_changes(room, changes)
    store.save(room)
    logger.debug(f"Updated room {room_id} of hostel {hostel_id}: {sorted(changes)}")
    return room


def add_review(store: Store, actor: Actor, hostel_id: int, rating: int, comment: str) -> Hostel:
    """Add a review and recompute the hostel's average rating."""
    authorize(actor, Operation.REVIEW_CREATE)
    if rating is None or not 1 <= rating <= 5:
        raise ValidationError("Rating must be between 1 and 5")
    if not comment or not comment.strip():
        raise ValidationError("Comment is required")

    hostel = _get_hostel_or_404(store, hostel_id)
    if not hostel.is_active:
        raise NotFoundError("Hostel")

    hostel.reviews.append(Review(user_id=actor.id, rating=rating, comment=comment))
    hostel.recalculate_rating()
    hostel = store.save(hostel)
    logger.debug(f"Hostel {hostel_id} rating is now {hostel.rating:.2f} over {len(hostel.reviews)} reviews")
    return hostel
