from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status

from app.schemas.common import MessageResponse, PaginationInfo
from app.schemas.hostel import HostelCreate, HostelPage, HostelResponse, HostelUpdate, ReviewCreate
from app.services import listings
from app.store import Store, get_store
from app.utils.auth import get_current_actor, get_optional_actor
from app.utils.policy import Actor


router = APIRouter(
    prefix="/hostels",
    tags=["hostels"],
)


@router.get("/", response_model=HostelPage)
def get_hostels(
    search: Optional[str] = None,
    city: Optional[str] = None,
    state: Optional[str] = None,
    country: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    amenities: Optional[str] = Query(None, description="Comma separated amenities, all required"),
    page: int = 1,
    limit: Optional[int] = None,
    store: Store = Depends(get_store),
    actor: Actor = Depends(get_optional_actor),
):
    """
    Search active hostels, highest rated first.
    """
    wanted: List[str] = [a.strip() for a in amenities.split(",") if a.strip()] if amenities else []
    result = listings.search_hostels(
        store,
        actor,
        search=search,
        city=city,
        state=state,
        country=country,
        min_price=min_price,
        max_price=max_price,
        amenities=wanted,
        page=page,
        limit=limit,
    )
    return {"data": result.items, "pagination": PaginationInfo.from_page(result)}


@router.get("/{hostel_id}", response_model=HostelResponse)
def get_hostel(
    hostel_id: int,
    store: Store = Depends(get_store),
    actor: Actor = Depends(get_optional_actor),
):
    """
    Retrieve a hostel with its rooms and reviews.
    """
    return listings.get_hostel(store, actor, hostel_id)


@router.post("/", response_model=HostelResponse, status_code=status.HTTP_201_CREATED)
def create_hostel(body: HostelCreate, store: Store = Depends(get_store), actor: Actor = Depends(get_current_actor)):
    """
    Create a hostel with at least one room.
    Requires administrator privileges.
    """
    return listings.create_hostel(store, actor, body.model_dump())


@router.put("/{hostel_id}", response_model=HostelResponse)
def update_hostel(
    hostel_id: int,
    hostel_update: HostelUpdate,
    store: Store = Depends(get_store),
    actor: Actor = Depends(get_current_actor),
):
    """
    Update a hostel's details.
    Requires administrator privileges or ownership.
    """
    return listings.update_hostel(store, actor, hostel_id, hostel_update.model_dump(exclude_unset=True))


@router.delete("/{hostel_id}", response_model=MessageResponse)
def delete_hostel(hostel_id: int, store: Store = Depends(get_store), actor: Actor = Depends(get_current_actor)):
    """
    Deactivate a hostel. Hostels are never removed.
    Requires administrator privileges or ownership.
    """
    listings.delete_hostel(store, actor, hostel_id)
    return {"message": "Hostel deleted successfully"}


@router.post("/{hostel_id}/reviews", response_model=HostelResponse, status_code=status.HTTP_201_CREATED)
def add_review(
    hostel_id: int,
    review: ReviewCreate,
    store: Store = Depends(get_store),
    actor: Actor = Depends(get_current_actor),
):
    """
    Review a hostel; the hostel's rating becomes the mean of its reviews.
    Requires authentication.
    """
    return listings.add_review(store, actor, hostel_id, review.rating, review.comment)
