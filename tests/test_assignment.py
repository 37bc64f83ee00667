import pytest
from fastapi import HTTPException

from sebeta_mart.models.order import Order, OrderStatus
from sebeta_mart.models.user import UserRole
from sebeta_mart.services import order_service


@pytest.fixture()
def marketplace(make_user, make_product):
    seller = make_user(UserRole.SELLER)
    buyer = make_user(UserRole.BUYER)
    rider = make_user(UserRole.DELIVERY)
    product = make_product(seller)
    return seller, buyer, rider, product


def test_assign_paid_order(auth_client, db, marketplace, make_order):
    seller, buyer, rider, product = marketplace
    order = make_order(buyer, product, paid=True)

    response = auth_client(seller).patch(
        f"/singleOrder/assign-delivery/{order.id}",
        json={"delivery_person_id": rider.id}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Delivery person assigned successfully"
    assert body["data"]["order"]["status"] == "assigned_for_delivery"
    assert body["data"]["order"]["delivery_person_id"] == rider.id

    db.expire_all()
    stored = db.get(Order, order.id)
    assert stored.status == OrderStatus.ASSIGNED_FOR_DELIVERY
    assert stored.delivery_person_id == rider.id


def test_unpaid_order_cannot_be_assigned(auth_client, db, marketplace, make_order):
    seller, buyer, rider, product = marketplace
    order = make_order(buyer, product)

    response = auth_client(seller).patch(
        f"/orders/{order.id}/assign-delivery",
        json={"delivery_person_id": rider.id}
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Payment must be confirmed before assigning delivery"
    db.expire_all()
    assert db.get(Order, order.id).delivery_person_id is None


def test_already_assigned_order_keeps_first_assignment(auth_client, db, marketplace, make_user, make_order):
    seller, buyer, rider, product = marketplace
    other_rider = make_user(UserRole.DELIVERY)
    order = make_order(buyer, product, paid=True, delivery_person_id=rider.id,
                       status=OrderStatus.ASSIGNED_FOR_DELIVERY)

    response = auth_client(seller).patch(
        f"/singleOrder/assign-delivery/{order.id}",
        json={"delivery_person_id": other_rider.id}
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Delivery person already assigned"
    db.expire_all()
    assert db.get(Order, order.id).delivery_person_id == rider.id


def test_non_delivery_user_is_not_found(auth_client, marketplace, make_order):
    seller, buyer, rider, product = marketplace
    order = make_order(buyer, product, paid=True)

    response = auth_client(seller).patch(
        f"/singleOrder/assign-delivery/{order.id}",
        json={"delivery_person_id": buyer.id}
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Delivery person not found"


def test_missing_order_is_not_found(auth_client, marketplace):
    seller, _, rider, _ = marketplace

    response = auth_client(seller).patch(
        "/singleOrder/assign-delivery/999",
        json={"delivery_person_id": rider.id}
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Order not found"


def test_delivery_person_id_is_required(auth_client, marketplace, make_order):
    seller, buyer, _, product = marketplace
    order = make_order(buyer, product, paid=True)

    client = auth_client(seller)
    assert client.patch(f"/singleOrder/assign-delivery/{order.id}", json={}).json()["message"] == \
        "Delivery person ID is required"
    response = client.patch(f"/singleOrder/assign-delivery/{order.id}")
    assert response.status_code == 400
    assert response.json()["message"] == "Delivery person ID is required"


def test_buyer_cannot_assign(auth_client, marketplace, make_order):
    _, buyer, rider, product = marketplace
    order = make_order(buyer, product, paid=True)

    response = auth_client(buyer).patch(
        f"/singleOrder/assign-delivery/{order.id}",
        json={"delivery_person_id": rider.id}
    )

    assert response.status_code == 403


def test_assign_scenario_order_42(auth_client, db, make_user, make_product, make_order):
    seller = make_user(UserRole.SELLER, id=2)
    buyer = make_user(UserRole.BUYER, id=3)
    make_user(UserRole.DELIVERY, id=7)
    make_user(UserRole.DELIVERY, id=8)
    product = make_product(seller)
    make_order(buyer, product, paid=True, id=42)

    client = auth_client(seller)
    first = client.patch("/singleOrder/assign-delivery/42", json={"delivery_person_id": 7})
    assert first.status_code == 200
    assert first.json()["data"]["order"]["delivery_person_id"] == 7
    assert first.json()["data"]["order"]["status"] == "assigned_for_delivery"

    second = client.patch("/singleOrder/assign-delivery/42", json={"delivery_person_id": 8})
    assert second.status_code == 400
    assert second.json()["message"] == "Delivery person already assigned"

    db.expire_all()
    assert db.get(Order, 42).delivery_person_id == 7


def test_lost_race_is_reported_as_already_assigned(db, marketplace, make_user, make_order):
    seller, buyer, rider, product = marketplace
    rival = make_user(UserRole.DELIVERY)
    order = make_order(buyer, product, paid=True)

    # Both requests pass the guards before either writes
    checked = order_service.check_assignable(db, order.id, rider.id)
    db.query(Order).filter(Order.id == order.id).update({
        Order.delivery_person_id: rival.id,
        Order.status: OrderStatus.ASSIGNED_FOR_DELIVERY,
    }, synchronize_session=False)
    db.commit()

    with pytest.raises(HTTPException) as exc_info:
        order_service.claim_order(db, checked, rider.id)

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Delivery person already assigned"
    db.expire_all()
    assert db.get(Order, order.id).delivery_person_id == rival.id
