"""
Delivery Endpoints
Profile activation, availability and the delivery person's assigned orders
"""
from fastapi import APIRouter, Depends, HTTPException, status, Request, UploadFile, File, Form
from sqlalchemy.orm import Session, joinedload
from typing import Optional
import re
from sebeta_mart.database import get_db
from sebeta_mart.api.deps import require_delivery, require_roles
from sebeta_mart.schemas.common import ResponseModel
from sebeta_mart.schemas.order import DeliveryCompletion
from sebeta_mart.models.delivery_profile import DeliveryProfile, AvailabilityStatus, ProfileStatus
from sebeta_mart.models.order import Order, OrderStatus, PaymentStatus
from sebeta_mart.models.user import User, UserRole
from sebeta_mart.services import delivery_service, order_service
from sebeta_mart.utils.formatters import format_delivery_profile, format_order
from sebeta_mart.utils.uploads import read_image_upload, store_image, has_upload
import logging

logger = logging.getLogger(__name__)

# Mounted at /delivery
router = APIRouter()
# Mounted at the root for /deliveryPersons
persons_router = APIRouter()

NATIONAL_ID_PATTERN = re.compile(r"^\d{16}$")

require_dispatcher = require_roles(UserRole.SELLER, UserRole.ADMIN, UserRole.CITY_CLERK)


def _read_profile_images(profile_image: Optional[UploadFile], id_card_image: Optional[UploadFile]) -> dict:
    """Validate every supplied image before any of them is written"""
    images = {}
    if has_upload(profile_image):
        images["profile_image"] = read_image_upload(profile_image)
    if has_upload(id_card_image):
        images["id_card_image"] = read_image_upload(id_card_image)
    return images


def _store_profile_images(profile: DeliveryProfile, images: dict, owner_id: int) -> None:
    for field, (file_ext, content) in images.items():
        setattr(profile, field, store_image(file_ext, content, "delivery", owner_id))


def _with_customer(order: Order) -> dict:
    data = format_order(order)
    data["customer_name"] = order.buyer.full_name if order.buyer else None
    data["customer_phone"] = order.buyer.phone_number if order.buyer else None
    data["product_name"] = order.product.name if order.product else None
    return data


@persons_router.get("/deliveryPersons", response_model=ResponseModel)
def list_delivery_persons(
    current_user: User = Depends(require_dispatcher),
    db: Session = Depends(get_db)
):
    """Delivery-role users a seller can pick from when assigning an order"""
    users = db.query(User).options(joinedload(User.delivery_profile)).filter(
        User.role == UserRole.DELIVERY,
        User.is_active.is_(True)
    ).order_by(User.full_name.asc()).all()

    persons = []
    for user in users:
        profile = user.delivery_profile
        persons.append({
            "id": user.id,
            "name": user.full_name,
            "full_name": user.full_name,
            "phone_number": user.phone_number,
            "availability_status": profile.availability_status if profile else None,
            "vehicle_type": profile.vehicle_type if profile else None,
            "profile_status": profile.status if profile else None,
        })

    return ResponseModel(success=True, data=persons)


@router.get("/profile", response_model=ResponseModel)
def get_profile(
    request: Request,
    current_user: User = Depends(require_delivery),
    db: Session = Depends(get_db)
):
    profile = delivery_service.get_profile_or_404(db, current_user)
    return ResponseModel(success=True, data=format_delivery_profile(profile, request))


@router.post("/activate", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
def activate_profile(
    request: Request,
    vehicle_type: Optional[str] = Form(None),
    plate_number: Optional[str] = Form(None),
    license_number: Optional[str] = Form(None),
    national_id: str = Form(""),
    profile_image: Optional[UploadFile] = File(None),
    id_card_image: Optional[UploadFile] = File(None),
    current_user: User = Depends(require_delivery),
    db: Session = Depends(get_db)
):
    """Create the caller's delivery profile; it starts offline and pending review"""
    if not NATIONAL_ID_PATTERN.match(national_id or ""):
        raise HTTPException(status_code=400, detail="National ID must be 16 digits")

    existing = db.query(DeliveryProfile).filter(DeliveryProfile.user_id == current_user.id).first()
    if existing:
        raise HTTPException(status_code=400, detail="Profile already exists")
    images = _read_profile_images(profile_image, id_card_image)

    profile = DeliveryProfile(
        user_id=current_user.id,
        vehicle_type=vehicle_type,
        plate_number=plate_number,
        license_number=license_number,
        national_id=national_id,
        availability_status=AvailabilityStatus.OFFLINE.value,
        status=ProfileStatus.PENDING.value,
    )
    _store_profile_images(profile, images, current_user.id)

    db.add(profile)
    db.commit()
    db.refresh(profile)

    logger.info("Delivery profile created for user %s", current_user.id)
    return ResponseModel(
        success=True,
        data=format_delivery_profile(profile, request),
        message="Delivery profile created"
    )


@router.patch("/update", response_model=ResponseModel)
def update_profile(
    request: Request,
    vehicle_type: Optional[str] = Form(None),
    plate_number: Optional[str] = Form(None),
    license_number: Optional[str] = Form(None),
    national_id: Optional[str] = Form(None),
    availability_status: Optional[str] = Form(None),
    profile_image: Optional[UploadFile] = File(None),
    id_card_image: Optional[UploadFile] = File(None),
    current_user: User = Depends(require_delivery),
    db: Session = Depends(get_db)
):
    """Partial update; omitted fields keep their current value"""
    profile = delivery_service.get_profile_or_404(db, current_user)
    images = _read_profile_images(profile_image, id_card_image)

    if national_id is not None:
        if not NATIONAL_ID_PATTERN.match(national_id):
            raise HTTPException(status_code=400, detail="National ID must be 16 digits")
        profile.national_id = national_id

    if availability_status is not None:
        allowed = [s.value for s in AvailabilityStatus]
        if availability_status not in allowed:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid availability status. Allowed: {', '.join(allowed)}"
            )
        profile.availability_status = availability_status

    if vehicle_type is not None:
        profile.vehicle_type = vehicle_type
    if plate_number is not None:
        profile.plate_number = plate_number
    if license_number is not None:
        profile.license_number = license_number
    _store_profile_images(profile, images, current_user.id)

    db.commit()
    db.refresh(profile)

    return ResponseModel(
        success=True,
        data=format_delivery_profile(profile, request),
        message="Delivery profile updated"
    )


@router.patch("/toggle-availability", response_model=ResponseModel)
def toggle_availability(
    request: Request,
    current_user: User = Depends(require_delivery),
    db: Session = Depends(get_db)
):
    profile = delivery_service.toggle_availability(db, current_user)
    return ResponseModel(
        success=True,
        data=format_delivery_profile(profile, request),
        message=f"You are now {profile.availability_status}"
    )


@router.get("/assignments", response_model=ResponseModel)
def list_open_assignments(
    current_user: User = Depends(require_delivery),
    db: Session = Depends(get_db)
):
    """Paid orders still waiting for a delivery person, oldest first"""
    orders = db.query(Order).options(
        joinedload(Order.buyer), joinedload(Order.product)
    ).filter(
        Order.payment_status == PaymentStatus.PAYMENT_CONFIRMED,
        Order.status == OrderStatus.PAYMENT_CONFIRMED,
        Order.delivery_person_id.is_(None)
    ).order_by(Order.created_at.asc(), Order.id.asc()).all()

    return ResponseModel(success=True, data={"orders": [_with_customer(o) for o in orders], "total": len(orders)})


@router.get("/complete", response_model=ResponseModel)
def get_assigned_orders(
    current_user: User = Depends(require_delivery),
    db: Session = Depends(get_db)
):
    """Orders assigned to the logged-in delivery person"""
    orders = db.query(Order).filter(
        Order.delivery_person_id == current_user.id
    ).order_by(Order.id.asc()).all()

    formatted = [_with_customer(o) for o in orders]

    return ResponseModel(success=True, data={"orders": formatted, "total": len(formatted)})


@router.patch("/complete", response_model=ResponseModel)
def mark_delivered(
    completion: Optional[DeliveryCompletion] = None,
    current_user: User = Depends(require_delivery),
    db: Session = Depends(get_db)
):
    if completion is None or not completion.order_id:
        raise HTTPException(status_code=400, detail="order_id is required")

    order = order_service.complete_delivery(db, completion.order_id, current_user)
    return ResponseModel(success=True, data={"order": format_order(order)}, message="Order marked as delivered")
