import threading
from collections import defaultdict
from contextlib import contextmanager
from datetime import datetime

from app.models.booking import Booking
from app.models.enums import BookingStatus
from app.store import Store


# Bookings in these states hold their room for their date range
ACTIVE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


class RoomLocks:
    """Process-local locks keyed by (hostel id, room id).

    Locks are never evicted; the map holds at most one lock per room.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = defaultdict(threading.Lock)

    @contextmanager
    def hold(self, hostel_id: int, room_id: int):
        with self._guard:
            lock = self._locks[(hostel_id, room_id)]
        with lock:
            yield


room_locks = RoomLocks()


def find_conflicting_booking(store: Store, hostel_id: int, room_id: int, check_in: datetime, check_out: datetime):
    """
    Return an active booking of the room whose stay intersects [check_in, check_out).
    Back-to-back stays (one checking out when the next checks in) do not conflict.
    """
    return store.find_first(
        Booking,
        Booking.hostel_id == hostel_id,
        Booking.room_id == room_id,
        Booking.status.in_(ACTIVE_STATUSES),
        Booking.check_in < check_out,
        Booking.check_out > check_in,
    )
