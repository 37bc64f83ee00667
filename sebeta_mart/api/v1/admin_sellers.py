"""
Admin Seller Management Endpoints
Admins and city clerks review shops; clerks never see the uploaded documents
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import or_
from typing import Optional
from sebeta_mart.database import get_db
from sebeta_mart.schemas.common import ResponseModel
from sebeta_mart.schemas.seller import SellerVerify
from sebeta_mart.models.seller import Seller
from sebeta_mart.models.user import User, UserRole
from sebeta_mart.api.deps import require_staff
from sebeta_mart.utils.formatters import format_seller
from sebeta_mart.utils.pagination import paginate_query
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


def _hide_documents_for(viewer: User) -> bool:
    return viewer.role == UserRole.CITY_CLERK


def _get_seller_or_404(db: Session, seller_id: int) -> Seller:
    seller = db.query(Seller).options(joinedload(Seller.user)).filter(Seller.id == seller_id).first()
    if not seller:
        raise HTTPException(status_code=404, detail="Seller not found")
    return seller


@router.get("", response_model=ResponseModel)
def list_sellers(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    search: Optional[str] = None,
    is_verified: Optional[bool] = None,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db)
):
    """List shops with their owner's contact details"""
    query = db.query(Seller).join(User, User.id == Seller.user_id).options(joinedload(Seller.user))

    if search:
        query = query.filter(
            or_(
                Seller.shop_name.ilike(f"%{search}%"),
                User.full_name.ilike(f"%{search}%"),
                User.email.ilike(f"%{search}%")
            )
        )
    if is_verified is not None:
        query = query.filter(Seller.is_verified == is_verified)

    sellers, pagination = paginate_query(query.order_by(Seller.created_at.desc(), Seller.id.desc()), page, limit)
    hide = _hide_documents_for(staff)

    return ResponseModel(
        success=True,
        data={
            "items": [format_seller(s, hide_documents=hide) for s in sellers],
            "pagination": pagination
        }
    )


@router.get("/{seller_id}", response_model=ResponseModel)
def get_seller(
    seller_id: int,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db)
):
    seller = _get_seller_or_404(db, seller_id)
    return ResponseModel(success=True, data=format_seller(seller, hide_documents=_hide_documents_for(staff)))


@router.patch("/{seller_id}/verify", response_model=ResponseModel)
def verify_seller(
    seller_id: int,
    verify_data: SellerVerify,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db)
):
    """Approve or revoke a shop"""
    # "true" and 1 are rejected; only JSON booleans count
    if not isinstance(verify_data.verify, bool):
        raise HTTPException(status_code=400, detail="`verify` must be boolean")

    seller = _get_seller_or_404(db, seller_id)
    seller.is_verified = verify_data.verify
    db.commit()
    db.refresh(seller)

    logger.info("Staff %s set seller %s verified=%s", staff.id, seller.id, seller.is_verified)
    return ResponseModel(
        success=True,
        data=format_seller(seller, hide_documents=_hide_documents_for(staff)),
        message=f"Seller {'verified' if seller.is_verified else 'unverified'} successfully"
    )
