"""
Admin Delivery Profile Endpoints
Review and approve delivery persons' profiles
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session, joinedload
from typing import Optional
from sebeta_mart.database import get_db
from sebeta_mart.schemas.common import ResponseModel
from sebeta_mart.schemas.delivery import ProfileStatusUpdate
from sebeta_mart.models.delivery_profile import DeliveryProfile, ProfileStatus
from sebeta_mart.models.user import User
from sebeta_mart.api.deps import require_staff
from sebeta_mart.utils.formatters import format_delivery_profile
from sebeta_mart.utils.pagination import paginate_query
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

PROFILE_STATUSES = [s.value for s in ProfileStatus]


def _get_profile_or_404(db: Session, profile_id: int) -> DeliveryProfile:
    profile = db.query(DeliveryProfile).options(
        joinedload(DeliveryProfile.user)
    ).filter(DeliveryProfile.id == profile_id).first()
    if not profile:
        raise HTTPException(status_code=404, detail="Delivery profile not found")
    return profile


@router.get("", response_model=ResponseModel)
def list_delivery_profiles(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    status: Optional[str] = None,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db)
):
    query = db.query(DeliveryProfile).options(joinedload(DeliveryProfile.user))
    if status:
        query = query.filter(DeliveryProfile.status == status)

    profiles, pagination = paginate_query(
        query.order_by(DeliveryProfile.created_at.desc(), DeliveryProfile.id.desc()), page, limit
    )

    return ResponseModel(
        success=True,
        data={
            "items": [format_delivery_profile(p, request) for p in profiles],
            "pagination": pagination
        }
    )


@router.get("/{profile_id}", response_model=ResponseModel)
def get_delivery_profile(
    profile_id: int,
    request: Request,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db)
):
    profile = _get_profile_or_404(db, profile_id)
    return ResponseModel(success=True, data=format_delivery_profile(profile, request))


@router.patch("/{profile_id}/status", response_model=ResponseModel)
def update_delivery_profile_status(
    profile_id: int,
    status_data: ProfileStatusUpdate,
    request: Request,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db)
):
    """Approve, reject or suspend a delivery profile"""
    if status_data.status not in PROFILE_STATUSES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid status. Allowed: {', '.join(PROFILE_STATUSES)}"
        )

    profile = _get_profile_or_404(db, profile_id)
    profile.status = status_data.status
    db.commit()
    db.refresh(profile)

    logger.info("Staff %s set delivery profile %s to %s", staff.id, profile.id, profile.status)
    return ResponseModel(
        success=True,
        data=format_delivery_profile(profile, request),
        message="Delivery profile status updated"
    )
