from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from app.models.enums import BookingStatus, PaymentMethod, PaymentStatus
from app.schemas.common import PaginationInfo


class GuestCounts(BaseModel):
    adults: int
    children: int = 0


class BookingCreate(BaseModel):
    hostel_id: int
    room_id: int
    check_in: datetime
    check_out: datetime
    guests: GuestCounts
    payment_method: str
    special_requests: Optional[str] = None


class BookingStatusUpdate(BaseModel):
    status: str


class BookingCancel(BaseModel):
    reason: Optional[str] = None


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    hostel_id: int
    room_id: int
    check_in: datetime
    check_out: datetime
    adults: int
    children: int
    total_price: float
    status: BookingStatus
    payment_status: PaymentStatus
    payment_method: PaymentMethod
    special_requests: Optional[str] = None
    cancellation_reason: Optional[str] = None
    refund_amount: float
    created_at: datetime
    updated_at: datetime


class BookingPage(BaseModel):
    data: List[BookingResponse]
    pagination: PaginationInfo
