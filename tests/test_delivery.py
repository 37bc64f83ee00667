import io
from pathlib import Path

from sebeta_mart.config import settings
from sebeta_mart.models.delivery_profile import DeliveryProfile
from sebeta_mart.models.order import Order, OrderStatus
from sebeta_mart.models.user import UserRole


def test_toggle_availability_twice_restores_status(auth_client, make_user, make_delivery_profile):
    rider = make_user(UserRole.DELIVERY)
    make_delivery_profile(rider, availability_status="offline")
    client = auth_client(rider)

    first = client.patch("/delivery/toggle-availability")
    assert first.status_code == 200
    assert first.json()["data"]["availability_status"] == "online"
    assert first.json()["message"] == "You are now online"

    second = client.patch("/delivery/toggle-availability")
    assert second.json()["data"]["availability_status"] == "offline"
    assert second.json()["message"] == "You are now offline"


def test_toggle_without_profile(auth_client, make_user):
    rider = make_user(UserRole.DELIVERY)

    response = auth_client(rider).patch("/delivery/toggle-availability")

    assert response.status_code == 404
    assert response.json()["message"] == "Delivery profile not found"


def test_toggle_requires_delivery_role(auth_client, make_user):
    buyer = make_user(UserRole.BUYER)
    assert auth_client(buyer).patch("/delivery/toggle-availability").status_code == 403


def test_activate_profile(auth_client, db, make_user):
    rider = make_user(UserRole.DELIVERY)

    response = auth_client(rider).post(
        "/delivery/activate",
        data={
            "vehicle_type": "motorbike",
            "plate_number": "AA-3-12345",
            "license_number": "LIC-77",
            "national_id": "1234567890123456",
        },
        files={"profile_image": ("face.png", io.BytesIO(b"\x89PNG fake"), "image/png")}
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["availability_status"] == "offline"
    assert data["status"] == "pending"
    assert data["profile_image"].endswith(".png")
    assert f"uploads/delivery/{rider.id}/" in data["profile_image"]
    assert db.query(DeliveryProfile).filter(DeliveryProfile.user_id == rider.id).count() == 1


def test_activate_rejects_short_national_id(auth_client, make_user):
    rider = make_user(UserRole.DELIVERY)

    response = auth_client(rider).post("/delivery/activate", data={"national_id": "12345"})

    assert response.status_code == 400
    assert response.json()["message"] == "National ID must be 16 digits"


def test_activate_twice(auth_client, make_user, make_delivery_profile):
    rider = make_user(UserRole.DELIVERY)
    make_delivery_profile(rider)

    response = auth_client(rider).post("/delivery/activate", data={"national_id": "6543210987654321"})

    assert response.status_code == 400
    assert response.json()["message"] == "Profile already exists"


def test_update_profile_partially(auth_client, make_user, make_delivery_profile):
    rider = make_user(UserRole.DELIVERY)
    make_delivery_profile(rider, plate_number="AA-1")

    response = auth_client(rider).patch(
        "/delivery/update",
        data={"vehicle_type": "car", "availability_status": "online"}
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["vehicle_type"] == "car"
    assert data["availability_status"] == "online"
    assert data["plate_number"] == "AA-1"


def test_delivery_persons_listed_for_sellers(auth_client, make_user, make_delivery_profile):
    seller = make_user(UserRole.SELLER)
    rider = make_user(UserRole.DELIVERY, full_name="Abebe Kebede")
    make_delivery_profile(rider, availability_status="online")
    make_user(UserRole.BUYER)

    response = auth_client(seller).get("/deliveryPersons")

    assert response.status_code == 200
    persons = response.json()["data"]
    assert [p["id"] for p in persons] == [rider.id]
    assert persons[0]["name"] == "Abebe Kebede"
    assert persons[0]["availability_status"] == "online"


def test_complete_assigned_order(auth_client, db, make_user, make_product, make_order):
    seller = make_user(UserRole.SELLER)
    buyer = make_user(UserRole.BUYER)
    rider = make_user(UserRole.DELIVERY)
    order = make_order(buyer, make_product(seller), paid=True, delivery_person_id=rider.id,
                       status=OrderStatus.ASSIGNED_FOR_DELIVERY)
    client = auth_client(rider)

    assigned = client.get("/delivery/complete")
    assert [o["id"] for o in assigned.json()["data"]["orders"]] == [order.id]

    response = client.patch("/delivery/complete", json={"order_id": order.id})
    assert response.status_code == 200
    assert response.json()["data"]["order"]["status"] == "delivered"
    db.expire_all()
    assert db.get(Order, order.id).status == OrderStatus.DELIVERED


def test_complete_rejects_other_delivery_person(auth_client, db, make_user, make_product, make_order):
    seller = make_user(UserRole.SELLER)
    buyer = make_user(UserRole.BUYER)
    rider = make_user(UserRole.DELIVERY)
    intruder = make_user(UserRole.DELIVERY)
    order = make_order(buyer, make_product(seller), paid=True, delivery_person_id=rider.id,
                       status=OrderStatus.ASSIGNED_FOR_DELIVERY)

    response = auth_client(intruder).patch("/delivery/complete", json={"order_id": order.id})

    assert response.status_code == 400
    assert response.json()["message"] == "Order not found or not assigned to you"
    db.expire_all()
    assert db.get(Order, order.id).status == OrderStatus.ASSIGNED_FOR_DELIVERY


def test_complete_requires_order_id(auth_client, make_user):
    rider = make_user(UserRole.DELIVERY)

    response = auth_client(rider).patch("/delivery/complete", json={})

    assert response.status_code == 400
    assert response.json()["message"] == "order_id is required"


def _stored_files():
    return set(Path(settings.UPLOAD_DIR).rglob("*"))


def test_activate_with_bad_id_card_writes_no_files(auth_client, db, make_user):
    rider = make_user(UserRole.DELIVERY)
    before = _stored_files()

    response = auth_client(rider).post(
        "/delivery/activate",
        data={"national_id": "1234567890123456"},
        files={
            "profile_image": ("face.png", io.BytesIO(b"\x89PNG fake"), "image/png"),
            "id_card_image": ("card.txt", io.BytesIO(b"not an image"), "text/plain"),
        }
    )

    assert response.status_code == 400
    assert response.json()["message"].startswith("Invalid file type")
    assert _stored_files() == before
    assert db.query(DeliveryProfile).count() == 0


def test_update_with_bad_id_card_keeps_profile_image(auth_client, db, make_user, make_delivery_profile):
    rider = make_user(UserRole.DELIVERY)
    profile = make_delivery_profile(rider, profile_image="uploads/delivery/old.png")
    before = _stored_files()

    response = auth_client(rider).patch(
        "/delivery/update",
        files={
            "profile_image": ("face.png", io.BytesIO(b"\x89PNG fake"), "image/png"),
            "id_card_image": ("card.exe", io.BytesIO(b"MZ"), "application/octet-stream"),
        }
    )

    assert response.status_code == 400
    assert _stored_files() == before
    db.expire_all()
    assert db.get(DeliveryProfile, profile.id).profile_image == "uploads/delivery/old.png"


def test_open_assignments_list_paid_unassigned_orders(auth_client, make_user, make_product, make_order):
    seller = make_user(UserRole.SELLER)
    buyer = make_user(UserRole.BUYER, full_name="Almaz Bekele")
    rider = make_user(UserRole.DELIVERY)
    product = make_product(seller, name="Shiro")
    waiting = make_order(buyer, product, paid=True)
    make_order(buyer, product)
    make_order(buyer, product, paid=True, status=OrderStatus.ASSIGNED_FOR_DELIVERY, delivery_person_id=rider.id)
    make_order(buyer, product, status=OrderStatus.CANCELLED)

    response = auth_client(rider).get("/delivery/assignments")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total"] == 1
    order = data["orders"][0]
    assert order["id"] == waiting.id
    assert order["customer_name"] == "Almaz Bekele"
    assert order["customer_phone"] == buyer.phone_number
    assert order["product_name"] == "Shiro"

    assert auth_client(buyer).get("/delivery/assignments").status_code == 403
