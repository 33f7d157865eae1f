from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.ext.associationproxy import association_proxy
from sqlalchemy.orm import relationship
from app.db import Base
from app.models.enums import RoomType
from app.utils.validation_helpers import utcnow


class Hostel(Base):
    __tablename__ = "hostels"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    description = Column(Text, nullable=False)

    street = Column(String, nullable=False)
    city = Column(String, index=True, nullable=False)
    state = Column(String, index=True, nullable=False)
    country = Column(String, index=True, nullable=False)
    zip_code = Column(String, nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    contact_phone = Column(String, nullable=False)
    contact_email = Column(String, nullable=False)

    images = Column(JSON, default=list, nullable=False)
    rating = Column(Float, default=0.0, nullable=False)

    check_in_time = Column(String, nullable=True)
    check_out_time = Column(String, nullable=True)
    cancellation_policy = Column(Text, nullable=True)
    house_rules = Column(JSON, default=list, nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    owner = relationship("User")
    rooms = relationship(
        "Room", back_populates="hostel", cascade="all, delete-orphan", order_by="Room.id"
    )
    reviews = relationship(
        "Review", back_populates="hostel", cascade="all, delete-orphan", order_by="Review.id"
    )
    amenity_links = relationship(
        "HostelAmenity", cascade="all, delete-orphan", order_by="HostelAmenity.id"
    )
    amenities = association_proxy(
        "amenity_links", "name", creator=lambda name: HostelAmenity(name=name)
    )

    def room(self, room_id):
        """Return the room with ``room_id`` or None."""
        for room in self.rooms:
            if room.id == room_id:
                return room
        return None

    def recalculate_rating(self):
        if not self.reviews:
            self.rating = 0.0
        else:
            self.rating = sum(review.rating for review in self.reviews) / len(self.reviews)
        return self.rating


class HostelAmenity(Base):
    __tablename__ = "hostel_amenities"
    id = Column(Integer, primary_key=True)
    hostel_id = Column(Integer, ForeignKey("hostels.id"), nullable=False, index=True)
    name = Column(String, nullable=False, index=True)


class Room(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    hostel_id = Column(Integer, ForeignKey("hostels.id"), nullable=False, index=True)
    type = Column(Enum(RoomType), nullable=False)
    capacity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    amenities = Column(JSON, default=list, nullable=False)
    images = Column(JSON, default=list, nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)

    hostel = relationship("Hostel", back_populates="rooms")


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    hostel_id = Column(Integer, ForeignKey("hostels.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False)
    date = Column(DateTime, default=utcnow, nullable=False)

    hostel = relationship("Hostel", back_populates="reviews")
    user = relationship("User")
