from gaia.models.user import User
from gaia.models.category import Category
from gaia.models.product import Product, ProductImage, ProductColor
from gaia.models.order import Order, OrderItem, OrderStatus, CANCELLABLE_STATUSES
from gaia.models.address import UserAddress, UserPaymentMethod
from gaia.models.promo_code import PromoCode
from gaia.models.content import Content

__all__ = [
    "User",
    "Category",
    "Product",
    "ProductImage",
    "ProductColor",
    "Order",
    "OrderItem",
    "OrderStatus",
    "CANCELLABLE_STATUSES",
    "UserAddress",
    "UserPaymentMethod",
    "PromoCode",
    "Content",
]
