from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session
from typing import Optional
from sebeta_mart.database import get_db
from sebeta_mart.api.deps import get_current_user, require_buyer, require_seller, require_roles
from sebeta_mart.schemas.common import ResponseModel
from sebeta_mart.schemas.order import OrderCreate, DeliveryAssignment
from sebeta_mart.models.user import User, UserRole, STAFF_ROLES
from sebeta_mart.services import order_service
from sebeta_mart.utils.formatters import format_order
from sebeta_mart.utils.uploads import build_file_url

# Mounted at /orders
router = APIRouter()
# Mounted at /singleOrder
single_order_router = APIRouter()

require_assigner = require_roles(UserRole.SELLER, UserRole.ADMIN)


def _assign(order_id: int, assignment: Optional[DeliveryAssignment], db: Session) -> ResponseModel:
    if assignment is None or not assignment.delivery_person_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Delivery person ID is required"
        )

    order = order_service.assign_delivery_person(db, order_id, assignment.delivery_person_id)
    return ResponseModel(
        success=True,
        data={"order": format_order(order)},
        message="Delivery person assigned successfully"
    )


@router.post("", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
def create_order(
    order_data: OrderCreate,
    buyer: User = Depends(require_buyer),
    db: Session = Depends(get_db)
):
    """Checkout a single product"""
    order = order_service.create_order(db, buyer, order_data)
    return ResponseModel(
        success=True,
        data={"order": format_order(order)},
        message="Order created successfully."
    )


@router.patch("/{order_id}/assign-delivery", response_model=ResponseModel)
def assign_delivery(
    order_id: int,
    assignment: Optional[DeliveryAssignment] = None,
    current_user: User = Depends(require_assigner),
    db: Session = Depends(get_db)
):
    """Bind a delivery person to a paid, unassigned order"""
    return _assign(order_id, assignment, db)


@router.patch("/{order_id}/cancel", response_model=ResponseModel)
def cancel_order(
    order_id: int,
    buyer: User = Depends(require_buyer),
    db: Session = Depends(get_db)
):
    order = order_service.cancel_order(db, order_id, buyer)
    return ResponseModel(success=True, data={"order": format_order(order)}, message="Order cancelled")


@single_order_router.get("/{order_id}", response_model=ResponseModel)
def get_single_order(
    order_id: int,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Order details for the buyer, the seller, the assigned delivery person or staff"""
    order = order_service.get_order_or_404(db, order_id)

    involved = {order.user_id, order.seller_id, order.delivery_person_id}
    if current_user.id not in involved and current_user.role not in STAFF_ROLES:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    data = format_order(order)
    if order.buyer is not None:
        data.update({
            "buyer_name": order.buyer.full_name,
            "buyer_email": order.buyer.email,
            "buyer_phone": order.buyer.phone_number,
        })
    if order.product is not None:
        data.update({
            "product_name": order.product.name,
            "product_description": order.product.description,
            "product_price": float(order.product.price),
            "product_image": build_file_url(request, order.product.image_url),
        })
    if order.delivery_person is not None:
        data.update({
            "delivery_name": order.delivery_person.full_name,
            "delivery_phone": order.delivery_person.phone_number,
        })

    return ResponseModel(success=True, data=data)


@single_order_router.patch("/confirm-payment/{order_id}", response_model=ResponseModel)
def confirm_payment(
    order_id: int,
    seller: User = Depends(require_seller),
    db: Session = Depends(get_db)
):
    order = order_service.confirm_payment(db, order_id, seller)
    return ResponseModel(success=True, data={"order": format_order(order)}, message="Payment confirmed successfully")


@single_order_router.patch("/undo-payment/{order_id}", response_model=ResponseModel)
def undo_payment(
    order_id: int,
    seller: User = Depends(require_seller),
    db: Session = Depends(get_db)
):
    order = order_service.undo_payment(db, order_id, seller)
    return ResponseModel(success=True, data={"order": format_order(order)}, message="Payment confirmation undone")


@single_order_router.patch("/assign-delivery/{order_id}", response_model=ResponseModel)
def assign_delivery_single(
    order_id: int,
    assignment: Optional[DeliveryAssignment] = None,
    current_user: User = Depends(require_assigner),
    db: Session = Depends(get_db)
):
    return _assign(order_id, assignment, db)
