from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from app.models.enums import RoomType
from app.schemas.common import PaginationInfo


class RoomBase(BaseModel):
    type: str
    capacity: int
    price: float
    amenities: List[str] = []
    images: List[str] = []
    is_available: bool = True


class RoomCreate(RoomBase):
    pass


class RoomUpdate(BaseModel):
    type: Optional[str] = None
    capacity: Optional[int] = None
    price: Optional[float] = None
    amenities: Optional[List[str]] = None
    images: Optional[List[str]] = None
    is_available: Optional[bool] = None


class RoomResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: RoomType
    capacity: int
    price: float
    amenities: List[str]
    images: List[str]
    is_available: bool


class ReviewCreate(BaseModel):
    rating: int
    comment: str


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    rating: int
    comment: str
    date: datetime


class HostelBase(BaseModel):
    name: str
    description: str
    street: str
    city: str
    state: str
    country: str
    zip_code: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    contact_phone: str
    contact_email: EmailStr
    amenities: List[str] = []
    images: List[str] = []
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    cancellation_policy: Optional[str] = None
    house_rules: List[str] = []


class HostelCreate(HostelBase):
    rooms: List[RoomCreate]
    owner_id: Optional[int] = None


class HostelUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    zip_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    amenities: Optional[List[str]] = None
    images: Optional[List[str]] = None
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    cancellation_policy: Optional[str] = None
    house_rules: Optional[List[str]] = None
    is_active: Optional[bool] = None


class HostelResponse(HostelBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    contact_email: str
    rating: float
    is_active: bool
    owner_id: int
    rooms: List[RoomResponse]
    reviews: List[ReviewResponse]
    created_at: datetime
    updated_at: datetime

    @field_validator("amenities", mode="before")
    @classmethod
    def listify_amenities(cls, value):
        return list(value) if value is not None else []


class HostelPage(BaseModel):
    data: List[HostelResponse]
    pagination: PaginationInfo
