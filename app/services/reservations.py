"""
Reservation engine.

Creates bookings against a hostel's room, prices them, and moves them
through their statuses::

    pending -> confirmed | cancelled
    confirmed -> completed | cancelled

Users may only cancel their own confirmed bookings, and only while check-in
is at least ``CANCELLATION_WINDOW_HOURS`` away. Administrators may set any
status; with ``STRICT_STATUS_TRANSITIONS`` enabled they are held to the
graph above.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from app.config import settings
from app.models.booking import Booking
from app.models.enums import BookingStatus, PaymentMethod, PaymentStatus
from app.models.hostel import Hostel
from app.store import Store
from app.utils.exceptions import InvalidStateError, NotFoundError, ValidationError
from app.utils.pagination import Page, page_window
from app.utils.policy import Actor, Operation, authorize
from app.utils.scheduler import find_conflicting_booking, room_locks
from app.utils.validation_helpers import count_nights, to_utc_naive, utcnow, validate_guests, validate_stay

logger = logging.getLogger(__name__)


ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.CANCELLED: set(),
    BookingStatus.COMPLETED: set(),
}


def calculate_total_price(nightly_price: float, check_in: datetime, check_out: datetime) -> float:
    return nightly_price * count_nights(check_in, check_out)


def can_cancel(booking: Booking, now: Optional[datetime] = None) -> bool:
    """A booking can be cancelled while confirmed and far enough from check-in."""
    now = to_utc_naive(now) if now else utcnow()
    window = timedelta(hours=settings.CANCELLATION_WINDOW_HOURS)
    return booking.status == BookingStatus.CONFIRMED and booking.check_in - now >= window


def _parse_enum(enum_cls, value, label):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"Valid {label} is required")


def _get_booking_or_404(store: Store, booking_id: int) -> Booking:
    booking = store.find_by_id(Booking, booking_id)
    if not booking:
        logger.error(f"Booking not found: {booking_id}")
        raise NotFoundError("Booking")
    return booking


def create_booking(
    store: Store,
    actor: Actor,
    hostel_id: int,
    room_id: int,
    check_in: datetime,
    check_out: datetime,
    adults: int,
    children: int = 0,
    payment_method=PaymentMethod.CREDIT_CARD,
    special_requests: Optional[str] = None,
) -> Booking:
    """Book a room of a hostel for ``actor``; the booking starts out pending."""
    authorize(actor, Operation.BOOKING_CREATE)
    check_in, check_out = validate_stay(check_in, check_out)
    validate_guests(adults, children)
    payment_method = _parse_enum(PaymentMethod, payment_method, "payment method")

    logger.debug(f"Creating booking for user: {actor.id}, hostel_id: {hostel_id}, room_id: {room_id}")

    hostel = store.find_by_id(Hostel, hostel_id)
    if not hostel or not hostel.is_active:
        logger.error(f"Hostel not found: {hostel_id}")
        raise NotFoundError("Hostel")

    room = hostel.room(room_id)
    if not room:
        logger.error(f"Room {room_id} not found in hostel {hostel_id}")
        raise NotFoundError("Room")
    if not room.is_available:
        logger.error(f"Room is not available: {room_id}")
        raise InvalidStateError("Room is not available")

    booking = Booking(
        user_id=actor.id,
        hostel_id=hostel.id,
        room_id=room.id,
        check_in=check_in,
        check_out=check_out,
        adults=adults,
        children=children,
        total_price=calculate_total_price(room.price, check_in, check_out),
        status=BookingStatus.PENDING,
        payment_status=PaymentStatus.PENDING,
        payment_method=payment_method,
        special_requests=special_requests,
    )

    if not settings.ENFORCE_NO_OVERLAP:
        return store.create(booking)

    with room_locks.hold(hostel.id, room.id):
        conflict = find_conflicting_booking(store, hostel.id, room.id, check_in, check_out)
        if conflict:
            logger.error(f"Overlapping booking {conflict.id} for room_id: {room.id}, stay: {check_in} to {check_out}")
            raise InvalidStateError("Room is already booked for these dates", status_code=409)
        booking = store.create(booking)

    logger.debug(f"Created booking: {booking.id}, total_price: {booking.total_price}")
    return booking


def change_status(store: Store, actor: Actor, booking_id: int, new_status) -> Booking:
    """Set a booking's status. Administrators only."""
    authorize(actor, Operation.BOOKING_CHANGE_STATUS, message="Access denied. Admin privileges required.")
    new_status = _parse_enum(BookingStatus, new_status, "status")
    booking = _get_booking_or_404(store, booking_id)

    if settings.STRICT_STATUS_TRANSITIONS and new_status != booking.status:
        if new_status not in ALLOWED_TRANSITIONS[booking.status]:
            logger.error(f"Refused transition {booking.status.value} -> {new_status.value} for booking {booking_id}")
            raise InvalidStateError(
                f"Cannot change booking status from {booking.status.value} to {new_status.value}"
            )

    logger.info(f"Booking {booking_id} status {booking.status.value} -> {new_status.value} by admin {actor.id}")
    return store.save(booking, status=new_status)


def cancel_booking(
    store: Store,
    actor: Actor,
    booking_id: int,
    reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Booking:
    """Cancel a confirmed booking at least the cancellation window before check-in."""
    booking = _get_booking_or_404(store, booking_id)
    authorize(actor, Operation.BOOKING_CANCEL, booking, message="Not authorized to cancel this booking")

    if not can_cancel(booking, now):
        logger.error(f"Booking {booking_id} cannot be cancelled (status: {booking.status.value})")
        raise InvalidStateError(
            f"Booking cannot be cancelled (must be at least "
            f"{settings.CANCELLATION_WINDOW_HOURS} hours before check-in)"
        )

    logger.info(f"Booking {booking_id} cancelled by actor {actor.id}")
    return store.save(booking, status=BookingStatus.CANCELLED, cancellation_reason=reason)


def get_booking(store: Store, actor: Actor, booking_id: int) -> Booking:
    booking = _get_booking_or_404(store, booking_id)
    authorize(actor, Operation.BOOKING_READ, booking, message="Not authorized to view this booking")
    return booking


def list_bookings(
    store: Store,
    actor: Actor,
    status=None,
    page: int = 1,
    limit: Optional[int] = None,
    mine_only: bool = False,
) -> Page:
    """
    List bookings newest first.

    Administrators see every booking unless ``mine_only`` is set; everyone
    else sees only their own.
    """
    authorize(actor, Operation.BOOKING_LIST)
    page, limit, skip = page_window(page, limit)

    criteria = []
    if mine_only or not actor.is_admin:
        criteria.append(Booking.user_id == actor.id)
    if status is not None:
        criteria.append(Booking.status == _parse_enum(BookingStatus, status, "status"))

    items = store.find_many(
        Booking,
        *criteria,
        order_by=(Booking.created_at.desc(), Booking.id.desc()),
        skip=skip,
        limit=limit,
    )
    total = store.count(Booking, *criteria)
    logger.debug(f"Retrieved {len(items)} of {total} bookings for actor {actor.id}")
    return Page(items=items, total=total, page=page, limit=limit)
