from typing import Optional
from fastapi import APIRouter, Depends, status
import logging

from app.schemas.booking import BookingCancel, BookingCreate, BookingPage, BookingResponse, BookingStatusUpdate
from app.schemas.common import PaginationInfo
from app.services import reservations
from app.store import Store, get_store
from app.utils.auth import get_current_actor
from app.utils.policy import Actor

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/bookings",
    tags=["bookings"],
)


@router.post(
    "/",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new booking",
    description="Book a room of a hostel for a stay. Requires authentication."
)
def create_booking(
    booking: BookingCreate,
    store: Store = Depends(get_store),
    actor: Actor = Depends(get_current_actor),
):
    """
    Book a room of a hostel.
    Requires authentication.

    - **hostel_id**: ID of the hostel.
    - **room_id**: ID of the room within the hostel.
    - **check_in** / **check_out**: Stay dates; check-out must be after check-in.
    - **guests**: Number of adults (at least one) and children.
    - **payment_method**: credit_card, debit_card, paypal or bank_transfer.

    Returns the pending booking with its total price.
    """
    return reservations.create_booking(
        store,
        actor,
        hostel_id=booking.hostel_id,
        room_id=booking.room_id,
        check_in=booking.check_in,
        check_out=booking.check_out,
        adults=booking.guests.adults,
        children=booking.guests.children,
        payment_method=booking.payment_method,
        special_requests=booking.special_requests,
    )


@router.get(
    "/",
    response_model=BookingPage,
    summary="List bookings",
    description="Administrators see all bookings, other users their own."
)
def get_bookings(
    status: Optional[str] = None,
    page: int = 1,
    limit: Optional[int] = None,
    store: Store = Depends(get_store),
    actor: Actor = Depends(get_current_actor),
):
    """
    Retrieve a paginated list of bookings, newest first.

    - **status**: Only bookings in this status.
    - **page** / **limit**: Page number and page size.
    """
    result = reservations.list_bookings(store, actor, status=status, page=page, limit=limit)
    return {"data": result.items, "pagination": PaginationInfo.from_page(result)}


@router.get(
    "/my-bookings",
    response_model=BookingPage,
    summary="List own bookings",
)
def get_my_bookings(
    page: int = 1,
    limit: Optional[int] = None,
    store: Store = Depends(get_store),
    actor: Actor = Depends(get_current_actor),
):
    """
    Retrieve the caller's own bookings, newest first, administrators included.
    """
    result = reservations.list_bookings(store, actor, page=page, limit=limit, mine_only=True)
    return {"data": result.items, "pagination": PaginationInfo.from_page(result)}


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Get a booking by ID",
    description="Retrieve a booking. Only its owner or an administrator may view it."
)
def get_booking(
    booking_id: int,
    store: Store = Depends(get_store),
    actor: Actor = Depends(get_current_actor),
):
    return reservations.get_booking(store, actor, booking_id)


@router.patch(
    "/{booking_id}/status",
    response_model=BookingResponse,
    summary="Update booking status",
    description="Set a booking's status. Requires administrator privileges."
)
def update_booking_status(
    booking_id: int,
    status_update: BookingStatusUpdate,
    store: Store = Depends(get_store),
    actor: Actor = Depends(get_current_actor),
):
    """
    Set a booking's status.

    - **status**: pending, confirmed, cancelled or completed.
    """
    return reservations.change_status(store, actor, booking_id, status_update.status)


@router.post(
    "/{booking_id}/cancel",
    response_model=BookingResponse,
    summary="Cancel a booking",
    description="Cancel a confirmed booking at least 24 hours before check-in."
)
def cancel_booking(
    booking_id: int,
    cancel: Optional[BookingCancel] = None,
    store: Store = Depends(get_store),
    actor: Actor = Depends(get_current_actor),
):
    """
    Cancel a booking.
    Only the booking's owner or an administrator may cancel it.

    - **reason**: (Optional) Why the booking is cancelled.
    """
    reason = cancel.reason if cancel else None
    logger.debug(f"Cancel requested for booking {booking_id} by actor {actor.id}")
    return reservations.cancel_booking(store, actor, booking_id, reason)
