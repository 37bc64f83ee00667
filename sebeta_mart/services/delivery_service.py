from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from sebeta_mart.models.delivery_profile import DeliveryProfile, AvailabilityStatus
from sebeta_mart.models.user import User
import logging

logger = logging.getLogger(__name__)


def get_profile_or_404(db: Session, user: User) -> DeliveryProfile:
    profile = db.query(DeliveryProfile).filter(DeliveryProfile.user_id == user.id).first()
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Delivery profile not found"
        )
    return profile


def toggle_availability(db: Session, user: User) -> DeliveryProfile:
    """Flip online <-> offline for the caller's own profile"""
    profile = get_profile_or_404(db, user)

    if profile.availability_status == AvailabilityStatus.ONLINE.value:
        profile.availability_status = AvailabilityStatus.OFFLINE.value
    else:
        profile.availability_status = AvailabilityStatus.ONLINE.value

    db.commit()
    db.refresh(profile)

    logger.info("Delivery person %s is now %s", user.id, profile.availability_status)
    return profile
