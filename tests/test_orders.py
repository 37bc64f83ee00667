import pytest
from fastapi import HTTPException

from sebeta_mart.models.order import Order, OrderStatus, PaymentStatus
from sebeta_mart.models.product import Product
from sebeta_mart.models.user import UserRole
from sebeta_mart.schemas.order import OrderCreate
from sebeta_mart.services import order_service


def test_create_order_reserves_stock(auth_client, db, make_user, make_product):
    seller = make_user(UserRole.SELLER)
    buyer = make_user(UserRole.BUYER)
    product = make_product(seller, price="120.50", stock=5)

    response = auth_client(buyer).post("/orders", json={"product_id": product.id, "quantity": 2})

    assert response.status_code == 201
    order = response.json()["data"]["order"]
    assert order["total_price"] == 241.0
    assert order["status"] == "pending"
    assert order["payment_status"] == "unpaid"
    assert order["payment_method"] == "cash"
    assert order["seller_id"] == seller.id
    db.expire_all()
    assert db.get(Product, product.id).stock == 3


def test_create_order_insufficient_stock(auth_client, db, make_user, make_product):
    seller = make_user(UserRole.SELLER)
    buyer = make_user(UserRole.BUYER)
    product = make_product(seller, stock=1)

    response = auth_client(buyer).post("/orders", json={"product_id": product.id, "quantity": 3})

    assert response.status_code == 400
    assert response.json()["message"] == "Insufficient stock"
    assert db.query(Order).count() == 0


def test_create_order_rejects_zero_quantity(auth_client, make_user, make_product):
    seller = make_user(UserRole.SELLER)
    buyer = make_user(UserRole.BUYER)
    product = make_product(seller)

    response = auth_client(buyer).post("/orders", json={"product_id": product.id, "quantity": 0})

    assert response.status_code == 400


def test_confirm_payment_by_owning_seller(auth_client, db, make_user, make_product, make_order):
    seller = make_user(UserRole.SELLER)
    buyer = make_user(UserRole.BUYER)
    order = make_order(buyer, make_product(seller))

    response = auth_client(seller).patch(f"/singleOrder/confirm-payment/{order.id}")

    assert response.status_code == 200
    db.expire_all()
    stored = db.get(Order, order.id)
    assert stored.payment_status == PaymentStatus.PAYMENT_CONFIRMED
    assert stored.status == OrderStatus.PAYMENT_CONFIRMED

    again = auth_client(seller).patch(f"/singleOrder/confirm-payment/{order.id}")
    assert again.status_code == 400
    assert again.json()["message"] == "Payment already confirmed"


def test_confirm_payment_by_other_seller(auth_client, make_user, make_product, make_order):
    seller = make_user(UserRole.SELLER)
    other_seller = make_user(UserRole.SELLER)
    buyer = make_user(UserRole.BUYER)
    order = make_order(buyer, make_product(seller))

    response = auth_client(other_seller).patch(f"/singleOrder/confirm-payment/{order.id}")

    assert response.status_code == 403
    assert response.json()["message"] == "Only the seller can confirm payment"


def test_undo_payment(auth_client, db, make_user, make_product, make_order):
    seller = make_user(UserRole.SELLER)
    buyer = make_user(UserRole.BUYER)
    order = make_order(buyer, make_product(seller), paid=True)

    response = auth_client(seller).patch(f"/singleOrder/undo-payment/{order.id}")

    assert response.status_code == 200
    db.expire_all()
    stored = db.get(Order, order.id)
    assert stored.payment_status == PaymentStatus.UNPAID
    assert stored.status == OrderStatus.PENDING


def test_lowercase_single_order_alias(auth_client, make_user, make_product, make_order):
    seller = make_user(UserRole.SELLER)
    buyer = make_user(UserRole.BUYER)
    order = make_order(buyer, make_product(seller))

    response = auth_client(seller).patch(f"/singleorder/confirm-payment/{order.id}")

    assert response.status_code == 200


def test_single_order_visible_to_involved_users_only(auth_client, make_user, make_product, make_order):
    seller = make_user(UserRole.SELLER)
    buyer = make_user(UserRole.BUYER)
    stranger = make_user(UserRole.BUYER)
    clerk = make_user(UserRole.CITY_CLERK)
    order = make_order(buyer, make_product(seller, name="Teff Flour"))

    own = auth_client(buyer).get(f"/singleOrder/{order.id}")
    assert own.status_code == 200
    assert own.json()["data"]["product_name"] == "Teff Flour"
    assert own.json()["data"]["buyer_name"] == buyer.full_name

    assert auth_client(seller).get(f"/singleOrder/{order.id}").status_code == 200
    assert auth_client(clerk).get(f"/singleOrder/{order.id}").status_code == 200
    assert auth_client(stranger).get(f"/singleOrder/{order.id}").status_code == 403


def test_cancel_pending_order_restores_stock(auth_client, db, make_user, make_product):
    seller = make_user(UserRole.SELLER)
    buyer = make_user(UserRole.BUYER)
    product = make_product(seller, stock=4)
    client = auth_client(buyer)
    order_id = client.post("/orders", json={"product_id": product.id, "quantity": 3}).json()["data"]["order"]["id"]

    response = client.patch(f"/orders/{order_id}/cancel")

    assert response.status_code == 200
    assert response.json()["data"]["order"]["status"] == "cancelled"
    db.expire_all()
    assert db.get(Product, product.id).stock == 4


def test_cancel_paid_order_is_rejected(auth_client, make_user, make_product, make_order):
    seller = make_user(UserRole.SELLER)
    buyer = make_user(UserRole.BUYER)
    order = make_order(buyer, make_product(seller), paid=True)

    response = auth_client(buyer).patch(f"/orders/{order.id}/cancel")

    assert response.status_code == 400
    assert response.json()["message"] == "Only pending orders can be cancelled"


def test_buyer_confirm_requires_delivery(auth_client, make_user, make_product, make_order):
    seller = make_user(UserRole.SELLER)
    buyer = make_user(UserRole.BUYER)
    product = make_product(seller)
    in_transit = make_order(buyer, product, paid=True, status=OrderStatus.ASSIGNED_FOR_DELIVERY)
    delivered = make_order(buyer, product, paid=True, status=OrderStatus.DELIVERED)
    client = auth_client(buyer)

    early = client.post(f"/buyer/orders/{in_transit.id}/buyer-confirm")
    assert early.status_code == 400
    assert early.json()["message"] == "Order cannot be confirmed before delivery"

    response = client.post(f"/buyer/orders/{delivered.id}/buyer-confirm")
    assert response.status_code == 200
    assert response.json()["data"]["order"]["status"] == "buyer_confirmed"


def test_seller_order_views(auth_client, make_user, make_product, make_order, make_delivery_profile):
    seller = make_user(UserRole.SELLER)
    buyer = make_user(UserRole.BUYER)
    rider = make_user(UserRole.DELIVERY)
    make_delivery_profile(rider, vehicle_type="bajaj")
    product = make_product(seller, name="Honey")
    unpaid = make_order(buyer, product)
    ready = make_order(buyer, product, paid=True)
    assigned = make_order(buyer, product, paid=True, delivery_person_id=rider.id,
                          status=OrderStatus.ASSIGNED_FOR_DELIVERY)
    client = auth_client(seller)

    with_products = client.get("/sellerOrders").json()["data"]
    assert {o["id"] for o in with_products} == {unpaid.id, ready.id, assigned.id}
    assert all(o["product_name"] == "Honey" for o in with_products)

    detailed = {o["id"]: o for o in client.get("/seller/orders").json()["data"]["orders"]}
    assert detailed[assigned.id]["delivery_name"] == rider.full_name
    assert detailed[assigned.id]["vehicle_type"] == "bajaj"
    assert detailed[unpaid.id]["buyer_name"] == buyer.full_name

    waiting = client.get("/seller/orders/ready-for-delivery").json()["data"]
    assert [o["id"] for o in waiting] == [ready.id]


def test_buyer_orders_include_delivery_contact(auth_client, make_user, make_product, make_order, make_delivery_profile):
    seller = make_user(UserRole.SELLER)
    buyer = make_user(UserRole.BUYER)
    rider = make_user(UserRole.DELIVERY)
    make_delivery_profile(rider, vehicle_type="motorbike")
    order = make_order(buyer, make_product(seller), paid=True, delivery_person_id=rider.id,
                       status=OrderStatus.ASSIGNED_FOR_DELIVERY)

    orders = auth_client(buyer).get("/buyer/orders").json()["data"]["orders"]

    assert orders[0]["id"] == order.id
    assert orders[0]["delivery_name"] == rider.full_name
    assert orders[0]["delivery_phone"] == rider.phone_number
    assert orders[0]["vehicle_type"] == "motorbike"


def test_cancel_keeps_stock_taken_by_concurrent_checkout(db, second_session, make_user, make_product):
    seller = make_user(UserRole.SELLER)
    buyer = make_user(UserRole.BUYER)
    rival = make_user(UserRole.BUYER)
    product = make_product(seller, stock=10)

    order = order_service.create_order(db, buyer, OrderCreate(product_id=product.id, quantity=2))
    # This session now holds a stale copy of the product
    assert order.product.stock == 8
    order_service.create_order(second_session, rival, OrderCreate(product_id=product.id, quantity=5))

    cancelled = order_service.cancel_order(db, order.id, buyer)

    assert cancelled.status == OrderStatus.CANCELLED
    db.expire_all()
    assert db.get(Product, product.id).stock == 5


def test_cancel_loses_to_concurrent_payment_confirmation(db, second_session, make_user, make_product, make_order):
    seller = make_user(UserRole.SELLER)
    buyer = make_user(UserRole.BUYER)
    product = make_product(seller, stock=4)
    order = make_order(buyer, product, quantity=2)

    # Loaded as pending here, then confirmed by another request
    assert order.status == OrderStatus.PENDING
    second_session.query(Order).filter(Order.id == order.id).update({
        Order.status: OrderStatus.PAYMENT_CONFIRMED,
        Order.payment_status: PaymentStatus.PAYMENT_CONFIRMED,
    }, synchronize_session=False)
    second_session.commit()

    with pytest.raises(HTTPException) as exc_info:
        order_service.cancel_order(db, order.id, buyer)

    assert exc_info.value.status_code == 400
    db.expire_all()
    assert db.get(Order, order.id).status == OrderStatus.PAYMENT_CONFIRMED
    assert db.get(Product, product.id).stock == 4


def test_confirm_payment_twice_is_rejected(auth_client, make_user, make_product, make_order):
    seller = make_user(UserRole.SELLER)
    buyer = make_user(UserRole.BUYER)
    order = make_order(buyer, make_product(seller), paid=True)

    response = auth_client(seller).patch(f"/singleOrder/confirm-payment/{order.id}")

    assert response.status_code == 400
    assert response.json()["message"] == "Payment already confirmed"


def test_undo_payment_after_assignment_is_rejected(auth_client, db, make_user, make_product, make_order):
    seller = make_user(UserRole.SELLER)
    buyer = make_user(UserRole.BUYER)
    rider = make_user(UserRole.DELIVERY)
    order = make_order(
        buyer, make_product(seller), paid=True,
        status=OrderStatus.ASSIGNED_FOR_DELIVERY, delivery_person_id=rider.id
    )

    response = auth_client(seller).patch(f"/singleOrder/undo-payment/{order.id}")

    assert response.status_code == 400
    assert response.json()["message"] == "Cannot undo payment after delivery has been assigned"
    db.expire_all()
    stored = db.get(Order, order.id)
    assert stored.payment_status == PaymentStatus.PAYMENT_CONFIRMED
    assert stored.delivery_person_id == rider.id
