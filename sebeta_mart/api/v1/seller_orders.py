"""
Seller-side order views
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, joinedload
from sebeta_mart.database import get_db
from sebeta_mart.api.deps import require_seller
from sebeta_mart.schemas.common import ResponseModel
from sebeta_mart.models.order import Order, PaymentStatus
from sebeta_mart.models.user import User
from sebeta_mart.utils.formatters import format_order

router = APIRouter()


def _with_people(order: Order) -> dict:
    data = format_order(order)
    buyer = order.buyer
    data["buyer_name"] = buyer.full_name if buyer else None
    data["buyer_phone"] = buyer.phone_number if buyer else None

    delivery_person = order.delivery_person
    profile = delivery_person.delivery_profile if delivery_person else None
    data["delivery_name"] = delivery_person.full_name if delivery_person else None
    data["delivery_phone"] = delivery_person.phone_number if delivery_person else None
    data["vehicle_type"] = profile.vehicle_type if profile else None
    data["plate_number"] = profile.plate_number if profile else None
    return data


@router.get("/sellerOrders", response_model=ResponseModel)
def get_seller_orders_with_products(
    seller: User = Depends(require_seller),
    db: Session = Depends(get_db)
):
    """Seller's orders with product name and price, newest first"""
    orders = db.query(Order).options(joinedload(Order.product)).filter(
        Order.seller_id == seller.id
    ).order_by(Order.created_at.desc(), Order.id.desc()).all()

    items = []
    for order in orders:
        data = format_order(order)
        data["product_name"] = order.product.name if order.product else None
        data["product_price"] = float(order.product.price) if order.product else None
        items.append(data)

    return ResponseModel(success=True, data=items)


@router.get("/seller/orders", response_model=ResponseModel)
def get_seller_orders(
    seller: User = Depends(require_seller),
    db: Session = Depends(get_db)
):
    """Seller's orders with buyer and delivery-person details"""
    orders = db.query(Order).filter(Order.seller_id == seller.id).order_by(Order.id.desc()).all()
    return ResponseModel(success=True, data={"orders": [_with_people(o) for o in orders]})


@router.get("/seller/orders/ready-for-delivery", response_model=ResponseModel)
def get_orders_ready_for_delivery(
    seller: User = Depends(require_seller),
    db: Session = Depends(get_db)
):
    """Paid orders still waiting for a delivery person"""
    orders = db.query(Order).filter(
        Order.seller_id == seller.id,
        Order.payment_status == PaymentStatus.PAYMENT_CONFIRMED,
        Order.delivery_person_id.is_(None)
    ).order_by(Order.id.asc()).all()
    return ResponseModel(success=True, data=[_with_people(o) for o in orders])
