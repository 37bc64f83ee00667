"""
Order lifecycle: checkout, payment confirmation, delivery assignment,
delivery completion and buyer confirmation.
"""
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from sebeta_mart.models.order import Order, OrderStatus, PaymentStatus
from sebeta_mart.models.product import Product
from sebeta_mart.models.user import User, UserRole
from sebeta_mart.schemas.order import OrderCreate
from datetime import datetime
from decimal import Decimal
from typing import Optional
import logging

logger = logging.getLogger(__name__)


def get_order_or_404(db: Session, order_id: int) -> Order:
    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found"
        )
    return order


def create_order(db: Session, buyer: User, order_data: OrderCreate) -> Order:
    """Place an order for one product, reserving stock in the same commit"""
    product = db.query(Product).filter(Product.id == order_data.product_id).first()
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found."
        )

    if product.seller_id == buyer.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You cannot order your own product."
        )

    reserved = db.query(Product).filter(
        Product.id == product.id,
        Product.stock >= order_data.quantity
    ).update({Product.stock: Product.stock - order_data.quantity}, synchronize_session=False)
    if reserved == 0:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Insufficient stock"
        )

    order = Order(
        user_id=buyer.id,
        product_id=product.id,
        seller_id=product.seller_id,
        quantity=order_data.quantity,
        total_price=Decimal(str(product.price)) * order_data.quantity,
        payment_method=order_data.payment_method,
        telebirr_txn_number=order_data.telebirr_txn_number,
    )
    db.add(order)
    db.commit()
    db.refresh(order)

    logger.info("Order %s placed by buyer %s for product %s", order.id, buyer.id, product.id)
    return order


def confirm_payment(db: Session, order_id: int, seller: User) -> Order:
    order = get_order_or_404(db, order_id)

    if order.seller_id != seller.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the seller can confirm payment"
        )

    if order.payment_status == PaymentStatus.PAYMENT_CONFIRMED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Payment already confirmed"
        )

    if order.status == OrderStatus.CANCELLED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Order has been cancelled"
        )

    order.payment_status = PaymentStatus.PAYMENT_CONFIRMED
    order.status = OrderStatus.PAYMENT_CONFIRMED
    db.commit()
    db.refresh(order)

    logger.info("Payment confirmed for order %s", order.id)
    return order


def undo_payment(db: Session, order_id: int, seller: User) -> Order:
    """Revert a confirmation made by mistake, as long as nobody is delivering it yet"""
    order = get_order_or_404(db, order_id)

    if order.seller_id != seller.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the seller can undo payment"
        )

    if order.payment_status != PaymentStatus.PAYMENT_CONFIRMED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Payment is not confirmed"
        )

    if order.delivery_person_id is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot undo payment after delivery has been assigned"
        )

    order.payment_status = PaymentStatus.UNPAID
    order.status = OrderStatus.PENDING
    db.commit()
    db.refresh(order)

    logger.info("Payment confirmation undone for order %s", order.id)
    return order


def check_assignable(db: Session, order_id: int, delivery_person_id: int) -> Order:
    """
    Guard clauses of the assignment workflow, in order:
    order exists, payment confirmed, not yet assigned, delivery person exists.
    """
    order = get_order_or_404(db, order_id)

    if order.payment_status != PaymentStatus.PAYMENT_CONFIRMED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Payment must be confirmed before assigning delivery"
        )

    if order.delivery_person_id is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Delivery person already assigned"
        )

    delivery_person = db.query(User).filter(
        User.id == delivery_person_id,
        User.role == UserRole.DELIVERY
    ).first()
    if not delivery_person:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Delivery person not found"
        )

    return order


def claim_order(db: Session, order: Order, delivery_person_id: int) -> Order:
    """
    Bind the delivery person with a single conditional UPDATE. The WHERE clause
    repeats the guards, so a request that lost a race against another
    assignment changes nothing and is reported as already assigned.
    """
    order_id = order.id
    updated = db.query(Order).filter(
        Order.id == order_id,
        Order.delivery_person_id.is_(None),
        Order.payment_status == PaymentStatus.PAYMENT_CONFIRMED
    ).update({
        Order.delivery_person_id: delivery_person_id,
        Order.status: OrderStatus.ASSIGNED_FOR_DELIVERY,
        Order.updated_at: datetime.utcnow(),
    }, synchronize_session=False)

    if updated == 0:
        db.rollback()
        logger.warning("Assignment of order %s lost a race; delivery person %s not bound", order_id, delivery_person_id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Delivery person already assigned"
        )

    db.commit()
    db.refresh(order)
    return order


def assign_delivery_person(db: Session, order_id: int, delivery_person_id: int) -> Order:
    order = check_assignable(db, order_id, delivery_person_id)
    order = claim_order(db, order, delivery_person_id)
    logger.info("Order %s assigned to delivery person %s", order.id, delivery_person_id)
    return order


def complete_delivery(db: Session, order_id: int, delivery_person: User) -> Order:
    """Mark an order delivered; only its assigned delivery person may do so"""
    updated = db.query(Order).filter(
        Order.id == order_id,
        Order.delivery_person_id == delivery_person.id,
        Order.status == OrderStatus.ASSIGNED_FOR_DELIVERY
    ).update({
        Order.status: OrderStatus.DELIVERED,
        Order.updated_at: datetime.utcnow(),
    }, synchronize_session=False)

    if updated == 0:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Order not found or not assigned to you"
        )

    db.commit()
    logger.info("Order %s delivered by %s", order_id, delivery_person.id)
    return get_order_or_404(db, order_id)


def confirm_receipt(db: Session, order_id: int, buyer: User) -> Order:
    order = db.query(Order).filter(
        Order.id == order_id,
        Order.user_id == buyer.id
    ).first()
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found"
        )

    if order.status != OrderStatus.DELIVERED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Order cannot be confirmed before delivery"
        )

    order.status = OrderStatus.BUYER_CONFIRMED
    db.commit()
    db.refresh(order)

    logger.info("Buyer %s confirmed receipt of order %s", buyer.id, order.id)
    return order


# Statuses in which the goods are still with the seller
STOCK_HELD_STATUSES = (
    OrderStatus.PENDING,
    OrderStatus.PAYMENT_CONFIRMED,
    OrderStatus.ASSIGNED_FOR_DELIVERY,
)


def restore_stock(db: Session, product_id: Optional[int], quantity: int) -> None:
    """Give reserved units back with a relative UPDATE; the caller commits"""
    if product_id is None:
        return
    db.query(Product).filter(Product.id == product_id).update(
        {Product.stock: Product.stock + quantity}, synchronize_session=False
    )


def cancel_order(db: Session, order_id: int, buyer: User) -> Order:
    order = db.query(Order).filter(
        Order.id == order_id,
        Order.user_id == buyer.id
    ).first()
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found"
        )

    if order.status != OrderStatus.PENDING or order.delivery_person_id is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only pending orders can be cancelled"
        )

    product_id, quantity = order.product_id, order.quantity
    updated = db.query(Order).filter(
        Order.id == order_id,
        Order.status == OrderStatus.PENDING,
        Order.delivery_person_id.is_(None)
    ).update({
        Order.status: OrderStatus.CANCELLED,
        Order.updated_at: datetime.utcnow(),
    }, synchronize_session=False)

    if updated == 0:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only pending orders can be cancelled"
        )

    restore_stock(db, product_id, quantity)
    db.commit()

    logger.info("Order %s cancelled by buyer %s", order_id, buyer.id)
    return get_order_or_404(db, order_id)


def set_transaction_status(db: Session, order_id: int, new_status: OrderStatus) -> Order:
    """
    Staff override of an order's status. Cancelling gives stock back when the
    goods never left the seller; a cancelled order cannot be reopened because
    its units may already have been sold again.
    """
    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Transaction not found"
        )

    previous = order.status
    if previous == new_status:
        return order
    if previous == OrderStatus.CANCELLED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cancelled orders cannot be reopened"
        )

    product_id, quantity = order.product_id, order.quantity
    updated = db.query(Order).filter(
        Order.id == order_id,
        Order.status == previous
    ).update({
        Order.status: new_status,
        Order.updated_at: datetime.utcnow(),
    }, synchronize_session=False)

    if updated == 0:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Order status changed, please retry"
        )

    if new_status == OrderStatus.CANCELLED and previous in STOCK_HELD_STATUSES:
        restore_stock(db, product_id, quantity)
    db.commit()

    return get_order_or_404(db, order_id)

