"""
Role dashboards

Each builder returns the plain dict the matching dashboard page renders.
"""
from typing import Dict, Any
from sqlalchemy import func
from sqlalchemy.orm import Session
from sebeta_mart.models.delivery_profile import DeliveryProfile
from sebeta_mart.models.favorite import Favorite
from sebeta_mart.models.order import Order, OrderStatus, PaymentStatus, FULFILLED_STATUSES
from sebeta_mart.models.product import Product
from sebeta_mart.models.seller import Seller
from sebeta_mart.models.user import User, UserRole
from sebeta_mart.utils.formatters import format_order, format_seller


def count_orders_by_status(db: Session, *criteria) -> Dict[str, int]:
    """Order counts keyed by status value; every status is present"""
    counts = {s.value: 0 for s in OrderStatus}
    rows = db.query(Order.status, func.count(Order.id)).filter(*criteria).group_by(Order.status).all()
    for order_status, count in rows:
        key = order_status.value if hasattr(order_status, "value") else order_status
        counts[key] = count
    return counts


def _count_role(db: Session, role: UserRole) -> int:
    return db.query(func.count(User.id)).filter(User.role == role).scalar() or 0


def admin_dashboard(db: Session, viewer: User) -> Dict[str, Any]:
    data = {
        "total_sellers": _count_role(db, UserRole.SELLER),
        "pending_seller_approvals": db.query(func.count(Seller.id)).filter(
            Seller.is_verified.is_(False)
        ).scalar() or 0,
        "total_buyers": _count_role(db, UserRole.BUYER),
        "active_listings": db.query(func.count(Product.id)).filter(Product.stock > 0).scalar() or 0,
        "delivery_persons": _count_role(db, UserRole.DELIVERY),
        "orders_by_status": count_orders_by_status(db),
    }
    # Clerks don't manage other staff
    if viewer.role == UserRole.ADMIN:
        data["city_clerks"] = _count_role(db, UserRole.CITY_CLERK)
    return data


def buyer_dashboard(db: Session, buyer: User) -> Dict[str, Any]:
    recent = db.query(Order).filter(Order.user_id == buyer.id).order_by(Order.id.desc()).limit(5).all()
    return {
        "orders_by_status": count_orders_by_status(db, Order.user_id == buyer.id),
        "favorites_count": db.query(func.count(Favorite.id)).filter(Favorite.user_id == buyer.id).scalar() or 0,
        "recent_orders": [format_order(o) for o in recent],
    }


def seller_dashboard(db: Session, seller: User) -> Dict[str, Any]:
    shop = db.query(Seller).filter(Seller.user_id == seller.id).first()
    revenue = db.query(func.coalesce(func.sum(Order.total_price), 0)).filter(
        Order.seller_id == seller.id,
        Order.status.in_(FULFILLED_STATUSES)
    ).scalar()

    return {
        "shop": format_seller(shop) if shop else None,
        "product_count": db.query(func.count(Product.id)).filter(Product.seller_id == seller.id).scalar() or 0,
        "orders_by_status": count_orders_by_status(db, Order.seller_id == seller.id),
        "awaiting_payment_confirmation": db.query(func.count(Order.id)).filter(
            Order.seller_id == seller.id,
            Order.payment_status == PaymentStatus.UNPAID,
            Order.status == OrderStatus.PENDING
        ).scalar() or 0,
        "ready_for_delivery": db.query(func.count(Order.id)).filter(
            Order.seller_id == seller.id,
            Order.payment_status == PaymentStatus.PAYMENT_CONFIRMED,
            Order.delivery_person_id.is_(None)
        ).scalar() or 0,
        "revenue": float(revenue or 0),
    }


def delivery_dashboard(db: Session, delivery_person: User) -> Dict[str, Any]:
    profile = db.query(DeliveryProfile).filter(DeliveryProfile.user_id == delivery_person.id).first()
    return {
        "availability_status": profile.availability_status if profile else None,
        "profile_status": profile.status if profile else None,
        "active_assignments": db.query(func.count(Order.id)).filter(
            Order.delivery_person_id == delivery_person.id,
            Order.status == OrderStatus.ASSIGNED_FOR_DELIVERY
        ).scalar() or 0,
        "delivered_count": db.query(func.count(Order.id)).filter(
            Order.delivery_person_id == delivery_person.id,
            Order.status.in_(FULFILLED_STATUSES)
        ).scalar() or 0,
    }


def build_dashboard(db: Session, user: User) -> Dict[str, Any]:
    if user.role == UserRole.BUYER:
        view = buyer_dashboard(db, user)
    elif user.role == UserRole.SELLER:
        view = seller_dashboard(db, user)
    elif user.role == UserRole.DELIVERY:
        view = delivery_dashboard(db, user)
    else:
        view = admin_dashboard(db, user)
    view["role"] = user.role.value
    return view
