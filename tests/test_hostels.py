import pytest
from fastapi import status

from app.models.enums import RoomType
from app.models.hostel import Hostel, Room
from app.services import listings
from app.utils.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.utils.policy import ANONYMOUS, Actor

from tests.conf_tests import (
    client,
    clear_db,
    make_hostel,
    make_user,
    store,
    test_db,
    test_user,
    other_user,
    admin_user,
    auth_headers,
    other_headers,
    admin_headers,
    test_hostel,
)

HOSTEL_DATA = {
    "name": "Harbour Hostel",
    "description": "Dorms and doubles by the sea",
    "street": "5 Quay Road",
    "city": "Porto",
    "state": "Porto",
    "country": "Portugal",
    "zip_code": "4000-001",
    "contact_phone": "+351111111",
    "contact_email": "harbour@example.com",
    "amenities": ["wifi", "kitchen"],
    "house_rules": ["No smoking"],
    "rooms": [
        {"type": "dormitory", "capacity": 6, "price": 25},
        {"type": "double", "capacity": 2, "price": 70, "amenities": ["balcony"]},
    ],
}


@pytest.fixture
def owned_hostel(test_db, test_user): # pylint: disable=redefined-outer-name
    return make_hostel(test_db, test_user, name="Owned Hostel")


# pylint: disable-next=redefined-outer-name
def test_create_hostel_as_admin(admin_headers, admin_user):
    response = client.post("/hostels/", json=HOSTEL_DATA, headers=admin_headers)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["name"] == HOSTEL_DATA["name"]
    assert data["owner_id"] == admin_user.id
    assert data["rating"] == 0
    assert data["is_active"] is True
    assert sorted(data["amenities"]) == ["kitchen", "wifi"]
    assert [room["type"] for room in data["rooms"]] == ["dormitory", "double"]
    assert all(room["is_available"] for room in data["rooms"])


# pylint: disable-next=redefined-outer-name
def test_create_hostel_as_user_is_forbidden(auth_headers):
    response = client.post("/hostels/", json=HOSTEL_DATA, headers=auth_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_create_hostel_unauthorized():
    response = client.post("/hostels/", json=HOSTEL_DATA)
    assert response.status_code in [
        status.HTTP_401_UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN,
    ]


# pylint: disable-next=redefined-outer-name
def test_create_hostel_requires_rooms(admin_headers):
    response = client.post("/hostels/", json={**HOSTEL_DATA, "rooms": []}, headers=admin_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "At least one room is required"


# pylint: disable-next=redefined-outer-name
def test_create_hostel_rejects_blank_fields(admin_headers):
    response = client.post("/hostels/", json={**HOSTEL_DATA, "city": "  "}, headers=admin_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


# pylint: disable-next=redefined-outer-name
def test_create_hostel_rejects_unknown_room_type(admin_headers):
    rooms = [{"type": "penthouse", "capacity": 2, "price": 10}]
    response = client.post("/hostels/", json={**HOSTEL_DATA, "rooms": rooms}, headers=admin_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


# pylint: disable-next=redefined-outer-name
def test_admin_assigns_owner(store, admin_user, test_user):
    hostel = listings.create_hostel(store, Actor.from_user(admin_user), {**HOSTEL_DATA, "owner_id": test_user.id})
    assert hostel.owner_id == test_user.id


# pylint: disable-next=redefined-outer-name
def test_create_hostel_with_unknown_owner(admin_headers, test_db):
    response = client.post("/hostels/", json={**HOSTEL_DATA, "owner_id": 424242}, headers=admin_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "User not found"
    assert test_db.query(Hostel).count() == 0


# pylint: disable-next=redefined-outer-name
def test_create_hostel_with_inactive_owner(store, test_db, admin_user):
    inactive = make_user(test_db, is_active=False)
    with pytest.raises(NotFoundError):
        listings.create_hostel(store, Actor.from_user(admin_user), {**HOSTEL_DATA, "owner_id": inactive.id})


# pylint: disable-next=redefined-outer-name
def test_get_hostel(test_hostel):
    response = client.get(f"/hostels/{test_hostel.id}")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == test_hostel.id
    assert len(data["rooms"]) == 2


# pylint: disable-next=redefined-outer-name
def test_get_hostel_with_token(auth_headers, test_hostel):
    response = client.get(f"/hostels/{test_hostel.id}", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK


def test_get_hostel_with_bad_token(test_hostel): # pylint: disable=redefined-outer-name
    response = client.get(f"/hostels/{test_hostel.id}", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_get_hostel_not_found():
    response = client.get("/hostels/9999")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Hostel not found"


# pylint: disable-next=redefined-outer-name
def test_search_filters(test_db, admin_user):
    lisbon = make_hostel(test_db, admin_user, amenities=["wifi", "kitchen"], rating=4.5)
    porto = make_hostel(
        test_db,
        admin_user,
        name="Harbour Hostel",
        description="By the river",
        city="Porto",
        state="Porto",
        amenities=["wifi"],
        rating=3.0,
        rooms=[Room(type=RoomType.SUITE, capacity=2, price=90, amenities=[], images=[])],
    )
    make_hostel(test_db, admin_user, name="Closed", is_active=False)

    def ids(**params):
        response = client.get("/hostels/", params=params)
        assert response.status_code == status.HTTP_200_OK
        return [hostel["id"] for hostel in response.json()["data"]]

    assert ids() == [lisbon.id, porto.id]
    assert ids(city="Porto") == [porto.id]
    assert ids(search="river") == [porto.id]
    assert ids(search="harbour lisbon") == [lisbon.id, porto.id]
    assert ids(amenities="wifi,kitchen") == [lisbon.id]
    assert ids(min_price=1000) == [lisbon.id]
    assert ids(max_price=500) == [lisbon.id, porto.id]
    assert ids(max_price=100) == [porto.id]
    assert ids(min_price=50, max_price=100) == [porto.id]


# pylint: disable-next=redefined-outer-name
def test_search_treats_wildcards_literally(store, test_db, admin_user):
    make_hostel(test_db, admin_user)
    discount = make_hostel(test_db, admin_user, name="100% Backpackers")
    assert listings.search_hostels(store, ANONYMOUS, search="%").total == 1
    assert listings.search_hostels(store, ANONYMOUS, search="_").total == 0
    assert [h.id for h in listings.search_hostels(store, ANONYMOUS, search="100%").items] == [discount.id]


# pylint: disable-next=redefined-outer-name
def test_search_pagination(test_db, admin_user):
    for number in range(3):
        make_hostel(test_db, admin_user, name=f"Hostel {number}")
    response = client.get("/hostels/", params={"page": 2, "limit": 2})
    data = response.json()
    assert len(data["data"]) == 1
    assert data["pagination"] == {"total": 3, "page": 2, "pages": 2}


# pylint: disable-next=redefined-outer-name
def test_update_hostel_as_owner(other_headers, test_db, other_user):
    hostel = make_hostel(test_db, other_user)
    response = client.put(
        f"/hostels/{hostel.id}",
        json={"name": "Renamed", "amenities": ["laundry"]},
        headers=other_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["name"] == "Renamed"
    assert data["amenities"] == ["laundry"]
    assert data["city"] == "Lisbon"


# pylint: disable-next=redefined-outer-name
def test_update_hostel_by_another_user(auth_headers, test_hostel):
    response = client.put(f"/hostels/{test_hostel.id}", json={"name": "Mine now"}, headers=auth_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


# pylint: disable-next=redefined-outer-name
def test_update_hostel_rejects_empty_name(admin_headers, test_hostel):
    response = client.put(f"/hostels/{test_hostel.id}", json={"name": ""}, headers=admin_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


# pylint: disable-next=redefined-outer-name
def test_delete_hostel_is_soft(admin_headers, test_db, test_hostel):
    response = client.delete(f"/hostels/{test_hostel.id}", headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    test_db.refresh(test_hostel)
    assert test_hostel.is_active is False
    assert test_db.get(Hostel, test_hostel.id) is not None
    assert client.get("/hostels/").json()["data"] == []


# pylint: disable-next=redefined-outer-name
def test_delete_hostel_by_owner_and_stranger(store, test_user, other_user, owned_hostel):
    with pytest.raises(ForbiddenError):
        listings.delete_hostel(store, Actor.from_user(other_user), owned_hostel.id)
    assert listings.delete_hostel(store, Actor.from_user(test_user), owned_hostel.id).is_active is False


# pylint: disable-next=redefined-outer-name
def test_review_updates_rating(auth_headers, other_headers, test_hostel):
    response = client.post(
        f"/hostels/{test_hostel.id}/reviews", json={"rating": 3, "comment": "Fine"}, headers=auth_headers
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["rating"] == 3

    response = client.post(
        f"/hostels/{test_hostel.id}/reviews", json={"rating": 5, "comment": "Great"}, headers=other_headers
    )
    data = response.json()
    assert data["rating"] == 4
    assert [review["rating"] for review in data["reviews"]] == [3, 5]


# pylint: disable-next=redefined-outer-name
def test_review_validation(store, test_user, test_hostel):
    actor = Actor.from_user(test_user)
    with pytest.raises(ValidationError):
        listings.add_review(store, actor, test_hostel.id, 6, "Too good")
    with pytest.raises(ValidationError):
        listings.add_review(store, actor, test_hostel.id, 4, " ")
    with pytest.raises(NotFoundError):
        listings.add_review(store, actor, 9999, 4, "Nice")


def test_review_unauthorized(test_hostel): # pylint: disable=redefined-outer-name
    response = client.post(f"/hostels/{test_hostel.id}/reviews", json={"rating": 4, "comment": "Nice"})
    assert response.status_code in [
        status.HTTP_401_UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN,
    ]


def test_rating_of_hostel_without_reviews():
    hostel = Hostel(rating=2.5)
    assert hostel.recalculate_rating() == 0
