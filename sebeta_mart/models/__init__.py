from sebeta_mart.models.user import User
from sebeta_mart.models.seller import Seller
from sebeta_mart.models.product import Product
from sebeta_mart.models.order import Order
from sebeta_mart.models.delivery_profile import DeliveryProfile
from sebeta_mart.models.favorite import Favorite
from sebeta_mart.models.subcity import Subcity
from sebeta_mart.models.category import Category, Subcategory
from sebeta_mart.models.brand import Brand

__all__ = [
    "User",
    "Seller",
    "Product",
    "Order",
    "DeliveryProfile",
    "Favorite",
    "Subcity",
    "Category",
    "Subcategory",
    "Brand",
]
