from fastapi import APIRouter, Depends, HTTPException, status, Request, UploadFile, File, Form
from sqlalchemy.orm import Session
from typing import Optional
from decimal import Decimal, InvalidOperation
from sebeta_mart.database import get_db
from sebeta_mart.api.deps import require_seller
from sebeta_mart.schemas.common import ResponseModel
from sebeta_mart.models.product import Product
from sebeta_mart.models.category import Category, Subcategory
from sebeta_mart.models.brand import Brand
from sebeta_mart.models.user import User
from sebeta_mart.utils.formatters import format_product
from sebeta_mart.utils.uploads import save_uploaded_file, has_upload
import logging

logger = logging.getLogger(__name__)

# Mounted at /products
router = APIRouter()
# Mounted at the root for /productlist and /product/{id}
catalog_router = APIRouter()


# Numeric(10, 2) and a signed 32-bit Integer column
MAX_PRICE = Decimal("99999999.99")
MAX_STOCK = 2 ** 31 - 1
CENT = Decimal("0.01")


def _parse_price(raw: str) -> Decimal:
    try:
        price = Decimal(raw.strip())
        if not price.is_finite():
            raise HTTPException(status_code=400, detail="Price must be a positive number")
        if price > MAX_PRICE:
            raise HTTPException(status_code=400, detail=f"Price must not exceed {MAX_PRICE}")
        price = price.quantize(CENT)
    except (InvalidOperation, TypeError, ValueError):
        raise HTTPException(status_code=400, detail="Price must be a positive number")
    if price <= 0:
        raise HTTPException(status_code=400, detail="Price must be a positive number")
    return price


def _parse_stock(raw: Optional[str]) -> int:
    if raw is None or not raw.strip():
        return 0
    try:
        stock = int(raw.strip())
    except ValueError:
        raise HTTPException(status_code=400, detail="Stock must be a whole number")
    if stock < 0:
        raise HTTPException(status_code=400, detail="Stock cannot be negative")
    if stock > MAX_STOCK:
        raise HTTPException(status_code=400, detail=f"Stock must not exceed {MAX_STOCK}")
    return stock


def _parse_reference(db: Session, model, raw: Optional[str], label: str) -> Optional[int]:
    """Form ids arrive as strings, "" meaning unset"""
    if raw is None or not raw.strip():
        return None
    try:
        ref_id = int(raw.strip())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label}")
    if db.query(model.id).filter(model.id == ref_id).first() is None:
        raise HTTPException(status_code=400, detail=f"{label.capitalize()} not found")
    return ref_id



def _get_owned_product(db: Session, product_id: int, seller: User) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    if product.seller_id != seller.id:
        raise HTTPException(status_code=403, detail="You can only modify your own products")
    return product


@catalog_router.get("/productlist", response_model=ResponseModel)
def list_products(request: Request, db: Session = Depends(get_db)):
    """All products for the storefront, newest first"""
    products = db.query(Product).order_by(Product.created_at.desc(), Product.id.desc()).all()
    return ResponseModel(success=True, data=[format_product(p, request) for p in products])


@catalog_router.get("/product/{product_id}", response_model=ResponseModel)
def get_product(product_id: int, request: Request, db: Session = Depends(get_db)):
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return ResponseModel(success=True, data=format_product(product, request))


@router.get("/seller/{seller_id}", response_model=ResponseModel)
def get_seller_products(seller_id: int, request: Request, db: Session = Depends(get_db)):
    products = db.query(Product).filter(Product.seller_id == seller_id).order_by(Product.id.desc()).all()
    return ResponseModel(success=True, data=[format_product(p, request) for p in products])


@router.post("", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
def create_product(
    request: Request,
    name: str = Form(""),
    price: str = Form(""),
    description: str = Form(""),
    stock: Optional[str] = Form(None),
    category_id: Optional[str] = Form(None),
    subcategory_id: Optional[str] = Form(None),
    brand_id: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    seller: User = Depends(require_seller),
    db: Session = Depends(get_db)
):
    """Create a product for the logged-in seller (multipart, optional image)"""
    if not name.strip() or not price.strip():
        raise HTTPException(status_code=400, detail="Name and price are required.")

    product = Product(
        seller_id=seller.id,
        name=name.strip(),
        description=description or "",
        price=_parse_price(price),
        stock=_parse_stock(stock),
        category_id=_parse_reference(db, Category, category_id, "category"),
        subcategory_id=_parse_reference(db, Subcategory, subcategory_id, "subcategory"),
        brand_id=_parse_reference(db, Brand, brand_id, "brand"),
    )
    if has_upload(image):
        product.image_url = save_uploaded_file(image, "products", seller.id)

    db.add(product)
    db.commit()
    db.refresh(product)

    logger.info("Seller %s created product %s", seller.id, product.id)
    return ResponseModel(
        success=True,
        data=format_product(product, request),
        message="Product created successfully"
    )


@router.put("/{product_id}", response_model=ResponseModel)
def update_product(
    product_id: int,
    request: Request,
    name: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    stock: Optional[str] = Form(None),
    category_id: Optional[str] = Form(None),
    subcategory_id: Optional[str] = Form(None),
    brand_id: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    seller: User = Depends(require_seller),
    db: Session = Depends(get_db)
):
    """Partially update one of the seller's products"""
    product = _get_owned_product(db, product_id, seller)

    if name is not None:
        if not name.strip():
            raise HTTPException(status_code=400, detail="Name cannot be empty")
        product.name = name.strip()
    if price is not None:
        product.price = _parse_price(price)
    if description is not None:
        product.description = description
    if stock is not None:
        product.stock = _parse_stock(stock)
    if category_id is not None:
        product.category_id = _parse_reference(db, Category, category_id, "category")
    if subcategory_id is not None:
        product.subcategory_id = _parse_reference(db, Subcategory, subcategory_id, "subcategory")
    if brand_id is not None:
        product.brand_id = _parse_reference(db, Brand, brand_id, "brand")
    if has_upload(image):
        product.image_url = save_uploaded_file(image, "products", seller.id)

    db.commit()
    db.refresh(product)

    return ResponseModel(
        success=True,
        data=format_product(product, request),
        message="Product updated successfully"
    )


@router.delete("/{product_id}", response_model=ResponseModel)
def delete_product(
    product_id: int,
    seller: User = Depends(require_seller),
    db: Session = Depends(get_db)
):
    product = _get_owned_product(db, product_id, seller)
    db.delete(product)
    db.commit()

    logger.info("Seller %s deleted product %s", seller.id, product_id)
    return ResponseModel(success=True, message="Product deleted successfully")
