from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional
from sebeta_mart.database import get_db
from sebeta_mart.api.deps import require_buyer
from sebeta_mart.schemas.common import ResponseModel
from sebeta_mart.schemas.favorite import FavoriteRequest
from sebeta_mart.models.favorite import Favorite
from sebeta_mart.models.order import Order
from sebeta_mart.models.product import Product
from sebeta_mart.models.user import User
from sebeta_mart.services import order_service
from sebeta_mart.utils.formatters import format_order
from sebeta_mart.utils.uploads import build_file_url

router = APIRouter()


def _find_favorite(db: Session, user_id: int, product_id: int) -> Optional[Favorite]:
    return db.query(Favorite).filter(
        Favorite.user_id == user_id,
        Favorite.product_id == product_id
    ).first()


@router.get("/orders", response_model=ResponseModel)
def get_buyer_orders(
    buyer: User = Depends(require_buyer),
    db: Session = Depends(get_db)
):
    """Buyer's orders with the delivery person's contact and vehicle"""
    orders = db.query(Order).filter(Order.user_id == buyer.id).order_by(Order.id.desc()).all()

    items = []
    for order in orders:
        data = format_order(order)
        data["product_name"] = order.product.name if order.product else None
        delivery_person = order.delivery_person
        profile = delivery_person.delivery_profile if delivery_person else None
        data["delivery_name"] = delivery_person.full_name if delivery_person else None
        data["delivery_phone"] = delivery_person.phone_number if delivery_person else None
        data["vehicle_type"] = profile.vehicle_type if profile else None
        items.append(data)

    return ResponseModel(success=True, data={"orders": items})


@router.post("/orders/{order_id}/buyer-confirm", response_model=ResponseModel)
def buyer_confirm_order(
    order_id: int,
    buyer: User = Depends(require_buyer),
    db: Session = Depends(get_db)
):
    order = order_service.confirm_receipt(db, order_id, buyer)
    return ResponseModel(success=True, data={"order": format_order(order)}, message="Order receipt confirmed")


@router.get("/favorites", response_model=ResponseModel)
def get_favorites(
    request: Request,
    buyer: User = Depends(require_buyer),
    db: Session = Depends(get_db)
):
    """Get buyer's favorites"""
    rows = db.query(Favorite, Product).join(
        Product, Product.id == Favorite.product_id
    ).filter(Favorite.user_id == buyer.id).order_by(Favorite.created_at.desc(), Favorite.id.desc()).all()

    items = []
    for favorite, product in rows:
        items.append({
            "id": favorite.id,
            "product_id": product.id,
            "name": product.name,
            "price": float(product.price),
            "image": build_file_url(request, product.image_url),
            "created_at": favorite.created_at.isoformat() if favorite.created_at else None,
        })

    return ResponseModel(success=True, data=items)


@router.post("/favorites/add", response_model=ResponseModel)
def add_favorite(
    response: Response,
    payload: Optional[FavoriteRequest] = None,
    buyer: User = Depends(require_buyer),
    db: Session = Depends(get_db)
):
    """Add product to favorites; adding twice is not an error"""
    if payload is None or not payload.product_id:
        raise HTTPException(status_code=400, detail="Product ID required")

    product = db.query(Product).filter(Product.id == payload.product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    if _find_favorite(db, buyer.id, payload.product_id):
        return ResponseModel(success=True, message="Already in favorites")

    db.add(Favorite(user_id=buyer.id, product_id=payload.product_id))
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request inserted the same pair first
        db.rollback()
        return ResponseModel(success=True, message="Already in favorites")

    response.status_code = status.HTTP_201_CREATED
    return ResponseModel(success=True, message="Added to favorites")


@router.delete("/favorites/remove", response_model=ResponseModel)
def remove_favorite(
    payload: Optional[FavoriteRequest] = None,
    buyer: User = Depends(require_buyer),
    db: Session = Depends(get_db)
):
    if payload is None or not payload.product_id:
        raise HTTPException(status_code=400, detail="Product ID required")

    favorite = _find_favorite(db, buyer.id, payload.product_id)
    if not favorite:
        raise HTTPException(status_code=404, detail="Product not in favorites")

    db.delete(favorite)
    db.commit()

    return ResponseModel(success=True, message="Removed from favorites")


@router.get("/favorites/count", response_model=ResponseModel)
def count_favorites(
    buyer: User = Depends(require_buyer),
    db: Session = Depends(get_db)
):
    count = db.query(Favorite).filter(Favorite.user_id == buyer.id).count()
    return ResponseModel(success=True, data={"count": count})
