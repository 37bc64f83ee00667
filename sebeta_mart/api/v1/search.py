from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from typing import Optional
from sebeta_mart.database import get_db
from sebeta_mart.schemas.common import ResponseModel
from sebeta_mart.models.product import Product
from sebeta_mart.models.user import User, UserRole
from sebeta_mart.utils.uploads import build_file_url

router = APIRouter()

SEARCH_LIMIT = 20
SEARCH_TYPES = ("product", "seller")


@router.get("", response_model=ResponseModel)
def search(
    request: Request,
    q: Optional[str] = Query(None),
    search_type: str = Query("product", alias="type"),
    db: Session = Depends(get_db)
):
    """Case-insensitive name search over products or sellers"""
    term = (q or "").strip()
    if not term:
        raise HTTPException(status_code=400, detail="Search query is required")
    if search_type not in SEARCH_TYPES:
        raise HTTPException(status_code=400, detail="Invalid search type")

    pattern = f"%{term}%"
    if search_type == "product":
        products = db.query(Product).filter(
            Product.name.ilike(pattern)
        ).order_by(Product.id.asc()).limit(SEARCH_LIMIT).all()
        results = [
            {
                "id": p.id,
                "name": p.name,
                "price": float(p.price),
                "seller_id": p.seller_id,
                "image": build_file_url(request, p.image_url),
            }
            for p in products
        ]
    else:
        sellers = db.query(User).filter(
            User.role == UserRole.SELLER,
            User.full_name.ilike(pattern)
        ).order_by(User.id.asc()).limit(SEARCH_LIMIT).all()
        results = [{"id": s.id, "full_name": s.full_name} for s in sellers]

    return ResponseModel(
        success=True,
        data={"type": search_type, "count": len(results), "results": results}
    )
