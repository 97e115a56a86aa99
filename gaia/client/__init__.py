"""
Headless storefront client

Cart, checkout workflow, form validation and a typed HTTP client for the
GAIA Cosmetics API.
"""
from gaia.client.api import ApiClient, ApiError
from gaia.client.cart import Cart, CartItem
from gaia.client.checkout import Checkout, CheckoutStep
from gaia.client.forms import FormState
from gaia.client.notifications import NotificationCenter
from gaia.client.services import AuthService, OrderService
from gaia.client.session import SessionStore
from gaia.client.validation import Rule, validate_field, validate_form

__all__ = [
    "ApiClient",
    "ApiError",
    "AuthService",
    "Cart",
    "CartItem",
    "Checkout",
    "CheckoutStep",
    "FormState",
    "NotificationCenter",
    "OrderService",
    "Rule",
    "SessionStore",
    "validate_field",
    "validate_form",
]
