from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sebeta_mart.database import get_db
from sebeta_mart.api.deps import require_seller
from sebeta_mart.schemas.common import ResponseModel
from sebeta_mart.schemas.seller import SellerCreate, SellerUpdate
from sebeta_mart.models.seller import Seller
from sebeta_mart.models.user import User
from sebeta_mart.utils.formatters import format_seller

router = APIRouter()

SHOP_FIELDS = (
    "shop_description",
    "shop_address",
    "business_license",
    "government_id",
    "national_id_number",
)


@router.get("/{user_id}", response_model=ResponseModel)
def get_seller(user_id: int, db: Session = Depends(get_db)):
    """Shop of a seller user"""
    seller = db.query(Seller).filter(Seller.user_id == user_id).first()
    if not seller:
        raise HTTPException(status_code=404, detail="Seller not found")
    # Public route: documents stay private
    return ResponseModel(success=True, data=format_seller(seller, hide_documents=True))


@router.post("", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
def create_seller(
    shop_data: SellerCreate,
    current_user: User = Depends(require_seller),
    db: Session = Depends(get_db)
):
    """Open the logged-in seller's shop"""
    if not shop_data.shop_name or not shop_data.shop_name.strip():
        raise HTTPException(status_code=400, detail="Shop name is required")

    if db.query(Seller).filter(Seller.user_id == current_user.id).first():
        raise HTTPException(status_code=400, detail="Shop already exists for this user")

    seller = Seller(user_id=current_user.id, shop_name=shop_data.shop_name.strip(), is_verified=False)
    for field in SHOP_FIELDS:
        setattr(seller, field, getattr(shop_data, field) or "")

    db.add(seller)
    db.commit()
    db.refresh(seller)

    return ResponseModel(success=True, data=format_seller(seller), message="Shop created successfully")


@router.put("/{seller_id}", response_model=ResponseModel)
def update_seller(
    seller_id: int,
    shop_data: SellerUpdate,
    current_user: User = Depends(require_seller),
    db: Session = Depends(get_db)
):
    seller = db.query(Seller).filter(Seller.id == seller_id).first()
    if not seller:
        raise HTTPException(status_code=404, detail="Seller not found")
    if seller.user_id != current_user.id:
        raise HTTPException(status_code=403, detail="You can only edit your own shop")

    if shop_data.shop_name is not None:
        if not shop_data.shop_name.strip():
            raise HTTPException(status_code=400, detail="Shop name is required")
        seller.shop_name = shop_data.shop_name.strip()
    for field in SHOP_FIELDS:
        value = getattr(shop_data, field)
        if value is not None:
            setattr(seller, field, value)

    db.commit()
    db.refresh(seller)

    return ResponseModel(success=True, data=format_seller(seller), message="Shop updated successfully")
