"""
Shape ORM rows into the JSON dicts the storefront reads
"""
from typing import Optional, Dict, Any
from fastapi import Request
from sebeta_mart.utils.uploads import build_file_url


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def _enum(value) -> Optional[str]:
    return value.value if hasattr(value, "value") else value


def _money(value) -> float:
    return float(value) if value is not None else 0.0


def format_user(user) -> Dict[str, Any]:
    return {
        "id": user.id,
        "full_name": user.full_name,
        "email": user.email,
        "role": _enum(user.role),
        "phone_number": user.phone_number,
        "is_active": user.is_active,
        "created_at": _iso(user.created_at),
    }


def format_seller(seller, hide_documents: bool = False) -> Dict[str, Any]:
    data = {
        "id": seller.id,
        "user_id": seller.user_id,
        "shop_name": seller.shop_name,
        "shop_description": seller.shop_description,
        "shop_address": seller.shop_address,
        "business_license": seller.business_license,
        "government_id": seller.government_id,
        "national_id_number": seller.national_id_number,
        "is_verified": seller.is_verified,
        "created_at": _iso(seller.created_at),
    }
    if seller.user is not None:
        data["full_name"] = seller.user.full_name
        data["email"] = seller.user.email
        data["phone_number"] = seller.user.phone_number
    if hide_documents:
        data["business_license"] = None
        data["government_id"] = None
    return data


def format_product(product, request: Optional[Request] = None) -> Dict[str, Any]:
    image_path = product.image_url.replace("\\", "/") if product.image_url else None
    return {
        "id": product.id,
        "seller_id": product.seller_id,
        "name": product.name,
        "description": product.description,
        "price": _money(product.price),
        "stock": product.stock,
        "category_id": product.category_id,
        "subcategory_id": product.subcategory_id,
        "brand_id": product.brand_id,
        "image_url": image_path,
        "image": build_file_url(request, image_path),
        "created_at": _iso(product.created_at),
    }


def format_order(order) -> Dict[str, Any]:
    return {
        "id": order.id,
        "order_id": order.id,
        "user_id": order.user_id,
        "buyer_id": order.user_id,
        "product_id": order.product_id,
        "seller_id": order.seller_id,
        "quantity": order.quantity,
        "total_price": _money(order.total_price),
        "payment_method": _enum(order.payment_method),
        "telebirr_txn_number": order.telebirr_txn_number,
        "payment_status": _enum(order.payment_status),
        "status": _enum(order.status),
        "delivery_person_id": order.delivery_person_id,
        "created_at": _iso(order.created_at),
        "updated_at": _iso(order.updated_at),
    }


def format_delivery_profile(profile, request: Optional[Request] = None) -> Dict[str, Any]:
    data = {
        "id": profile.id,
        "user_id": profile.user_id,
        "vehicle_type": profile.vehicle_type,
        "plate_number": profile.plate_number,
        "license_number": profile.license_number,
        "national_id": profile.national_id,
        "profile_image": build_file_url(request, profile.profile_image),
        "id_card_image": build_file_url(request, profile.id_card_image),
        "availability_status": profile.availability_status,
        "status": profile.status,
        "created_at": _iso(profile.created_at),
    }
    if profile.user is not None:
        data["full_name"] = profile.user.full_name
        data["email"] = profile.user.email
        data["phone_number"] = profile.user.phone_number
    return data
