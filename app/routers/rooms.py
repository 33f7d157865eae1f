from fastapi import APIRouter, Depends, status

from app.schemas.hostel import RoomCreate, RoomResponse, RoomUpdate
from app.services import listings
from app.store import Store, get_store
from app.utils.auth import get_current_actor
from app.utils.policy import Actor


router = APIRouter(
    prefix="/hostels/{hostel_id}/rooms",
    tags=["rooms"],
)


@router.post("/", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(
    hostel_id: int,
    room: RoomCreate,
    store: Store = Depends(get_store),
    actor: Actor = Depends(get_current_actor),
):
    """
    Add a room to a hostel.
    Requires administrator privileges or ownership of the hostel.
    """
    return listings.add_room(store, actor, hostel_id, room.model_dump())


@router.patch("/{room_id}", response_model=RoomResponse)
def update_room(
    hostel_id: int,
    room_id: int,
    room_update: RoomUpdate,
    store: Store = Depends(get_store),
    actor: Actor = Depends(get_current_actor),
):
    """
    Update a room's details, including its availability.
    Requires administrator privileges or ownership of the hostel.
    """
    return listings.update_room(store, actor, hostel_id, room_id, room_update.model_dump(exclude_unset=True))
