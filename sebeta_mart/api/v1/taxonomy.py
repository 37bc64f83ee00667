"""
Catalog taxonomy lists used by the product form filters
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional
from sebeta_mart.database import get_db
from sebeta_mart.schemas.common import ResponseModel
from sebeta_mart.models.category import Category, Subcategory
from sebeta_mart.models.brand import Brand

categories_router = APIRouter()
subcategories_router = APIRouter()
brands_router = APIRouter()


@categories_router.get("", response_model=ResponseModel)
def list_categories(db: Session = Depends(get_db)):
    categories = db.query(Category).order_by(Category.name.asc()).all()
    return ResponseModel(success=True, data=[{"id": c.id, "name": c.name} for c in categories])


@subcategories_router.get("", response_model=ResponseModel)
def list_subcategories(category_id: Optional[int] = None, db: Session = Depends(get_db)):
    query = db.query(Subcategory)
    if category_id is not None:
        query = query.filter(Subcategory.category_id == category_id)
    subcategories = query.order_by(Subcategory.name.asc()).all()
    return ResponseModel(
        success=True,
        data=[{"id": s.id, "category_id": s.category_id, "name": s.name} for s in subcategories]
    )


@brands_router.get("", response_model=ResponseModel)
def list_brands(db: Session = Depends(get_db)):
    brands = db.query(Brand).order_by(Brand.name.asc()).all()
    return ResponseModel(success=True, data=[{"id": b.id, "name": b.name} for b in brands])
