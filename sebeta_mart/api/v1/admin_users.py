"""
Admin User Management Endpoints
Dashboard counts, buyer accounts and staff registration
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import Optional
from sebeta_mart.database import get_db
from sebeta_mart.schemas.common import ResponseModel
from sebeta_mart.schemas.user import StaffUserCreate, UserStatusUpdate
from sebeta_mart.models.user import User, UserRole
from sebeta_mart.api.deps import require_staff, require_admin
from sebeta_mart.services import auth_service, dashboard_service
from sebeta_mart.utils.formatters import format_user
from sebeta_mart.utils.pagination import paginate_query
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/dashboard", response_model=ResponseModel)
def get_admin_dashboard(
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db)
):
    return ResponseModel(success=True, data=dashboard_service.admin_dashboard(db, staff))


@router.get("/buyers", response_model=ResponseModel)
def list_buyers(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    search: Optional[str] = None,
    is_active: Optional[bool] = None,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db)
):
    """List buyer accounts with optional name/email search"""
    query = db.query(User).filter(User.role == UserRole.BUYER)

    if search:
        query = query.filter(
            or_(
                User.full_name.ilike(f"%{search}%"),
                User.email.ilike(f"%{search}%"),
                User.phone_number.ilike(f"%{search}%")
            )
        )
    if is_active is not None:
        query = query.filter(User.is_active == is_active)

    buyers, pagination = paginate_query(query.order_by(User.created_at.desc(), User.id.desc()), page, limit)

    return ResponseModel(
        success=True,
        data={"items": [format_user(b) for b in buyers], "pagination": pagination}
    )


@router.patch("/buyers/{user_id}/status", response_model=ResponseModel)
def update_buyer_status(
    user_id: int,
    status_data: UserStatusUpdate,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db)
):
    """Activate or block a buyer account"""
    if status_data.is_active is None:
        raise HTTPException(status_code=400, detail="is_active is required")

    buyer = db.query(User).filter(User.id == user_id, User.role == UserRole.BUYER).first()
    if not buyer:
        raise HTTPException(status_code=404, detail="Buyer not found")

    buyer.is_active = status_data.is_active
    db.commit()
    db.refresh(buyer)

    logger.info("Staff %s set buyer %s active=%s", staff.id, buyer.id, buyer.is_active)
    return ResponseModel(
        success=True,
        data=format_user(buyer),
        message=f"Buyer {'activated' if buyer.is_active else 'deactivated'} successfully"
    )


@router.post("/register-user", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
def register_staff_user(
    user_data: StaffUserCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Register an admin or city clerk (admins only)"""
    user = auth_service.register_user(db, user_data)
    logger.info("Admin %s registered %s %s", admin.id, user.role.value, user.id)
    return ResponseModel(
        success=True,
        data={"user": format_user(user)},
        message="User registered successfully"
    )
