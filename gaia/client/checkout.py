"""
Checkout workflow

Two screens, shipping then payment, each backed by a `FormState`. Shipping
values are copied into the payment form on every change, so payment rules
can read the whole bag. The order is submitted once from the payment step.

    shipping --continue_to_payment (valid)--> payment
    payment  --back_to_shipping-------------> shipping
    payment  --place_order (server 201)-----> order complete

An empty cart with no completed order redirects to the cart page.
"""
import logging
import random
import re
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

from gaia.client.api import ApiError
from gaia.client.cart import Cart
from gaia.client.forms import FormState
from gaia.client.notifications import NotificationCenter
from gaia.client.services import OrderService
from gaia.client.session import SessionStore
from gaia.client.validation import Rule, Values

logger = logging.getLogger(__name__)

CART_PATH = "/cart"
ORDER_FAILED_MESSAGE = "Failed to place order. Please try again."
# No card brand is collected on the payment screen
CARD_BRAND = "visa"

SHIPPING_FIELDS = ("fullName", "email", "phone", "address", "city", "state", "postalCode", "country")

INITIAL_SHIPPING = {
    "fullName": "",
    "email": "",
    "phone": "",
    "address": "",
    "city": "",
    "state": "",
    "postalCode": "",
    "country": "India",
}

INITIAL_PAYMENT = {
    "paymentMethod": "card",
    "savedCard": "new",
    "cardNumber": "",
    "nameOnCard": "",
    "expiryDate": "",
    "cvv": "",
}


class CheckoutStep(str, Enum):
    SHIPPING = "shipping"
    PAYMENT = "payment"


def field_label(field: str) -> str:
    """'postalCode' -> 'Postal Code'"""
    return field[:1].upper() + re.sub(r"([A-Z])", r" \1", field[1:])


def pays_with_new_card(values: Values) -> bool:
    return values.get("paymentMethod") == "card" and values.get("savedCard") == "new"


def _card_check(pattern: str, message: str) -> Callable[[Any, Values], Optional[str]]:
    compiled = re.compile(pattern)

    def check(value: Any, values: Values) -> Optional[str]:
        if not pays_with_new_card(values):
            return None
        return None if compiled.match(str(value)) else message

    return check


SHIPPING_RULES: Dict[str, Rule] = {
    field: Rule(required=True, required_message=f"{field_label(field)} is required")
    for field in SHIPPING_FIELDS
}
SHIPPING_RULES["email"] = Rule(
    required=True,
    required_message="Email is required",
    pattern=r"\S+@\S+\.\S+",
    pattern_message="Please enter a valid email address",
)
SHIPPING_RULES["phone"] = Rule(
    required=True,
    required_message="Phone is required",
    pattern=r"^\d{10}$",
    pattern_message="Please enter a valid 10-digit phone number",
)
SHIPPING_RULES["postalCode"] = Rule(
    required=True,
    required_message="Postal Code is required",
    pattern=r"^\d{6}$",
    pattern_message="Please enter a valid 6-digit postal code",
)

PAYMENT_RULES: Dict[str, Rule] = {
    "cardNumber": Rule(
        required=pays_with_new_card,
        required_message="Card number is required",
        validate=_card_check(r"^\d{16}$", "Please enter a valid 16-digit card number"),
    ),
    "nameOnCard": Rule(
        required=pays_with_new_card,
        required_message="Name on card is required",
    ),
    "expiryDate": Rule(
        required=pays_with_new_card,
        required_message="Expiry date is required",
        validate=_card_check(r"^(0[1-9]|1[0-2])/\d{2}$", "Please enter a valid expiry date (MM/YY)"),
    ),
    "cvv": Rule(
        required=pays_with_new_card,
        required_message="CVV is required",
        validate=_card_check(r"^\d{3,4}$", "Please enter a valid CVV"),
    ),
}


class Checkout:
    """
    Drives one checkout from the shipping form to a placed order.

    `on_scroll_top` is called whenever the visible step changes and
    `on_redirect` receives the path to leave for when the cart is empty.
    """

    def __init__(
        self,
        cart: Cart,
        session: SessionStore,
        orders: OrderService,
        notifications: NotificationCenter,
        on_scroll_top: Optional[Callable[[], None]] = None,
        on_redirect: Optional[Callable[[str], None]] = None,
    ):
        self.cart = cart
        self.session = session
        self.orders = orders
        self.notifications = notifications
        self.on_scroll_top = on_scroll_top
        self.on_redirect = on_redirect

        self.shipping = FormState(INITIAL_SHIPPING, SHIPPING_RULES)
        self.payment = FormState({**INITIAL_SHIPPING, **INITIAL_PAYMENT}, PAYMENT_RULES)
        self.same_as_shipping = True
        self.step = CheckoutStep.SHIPPING
        self.loading = False
        self.order_complete = False
        self.order_id: Optional[str] = None

        self.refresh()
        self.prefill_from_session()

    # =========================================================================
    # STATE
    # =========================================================================

    def refresh(self) -> Optional[str]:
        """Re-evaluate the empty-cart guard; returns the redirect path, if any."""
        redirect = self.redirect_path
        if redirect and self.on_redirect:
            self.on_redirect(redirect)
        return redirect

    @property
    def redirect_path(self) -> Optional[str]:
        if self.cart.is_empty and not self.order_complete:
            return CART_PATH
        return None

    def prefill_from_session(self) -> None:
        user = self.session.user
        if not user:
            return
        self.set_shipping_value("fullName", user.get("name") or "")
        self.set_shipping_value("email", user.get("email") or "")

    def _scroll_top(self) -> None:
        if self.on_scroll_top:
            self.on_scroll_top()

    # =========================================================================
    # INPUT
    # =========================================================================

    def set_shipping_value(self, name: str, value: Any) -> None:
        self.shipping.handle_change(name, value)
        self.payment.set_field_value(name, value)

    def set_payment_value(self, name: str, value: Any) -> None:
        self.payment.handle_change(name, value)

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def continue_to_payment(self) -> bool:
        if self.refresh():
            return False
        if self.shipping.validate():
            return False
        self.step = CheckoutStep.PAYMENT
        self._scroll_top()
        return True

    def back_to_shipping(self) -> None:
        self.step = CheckoutStep.SHIPPING
        self._scroll_top()

    def shipping_address(self) -> Dict[str, Any]:
        return {field: self.shipping.values.get(field, "") for field in SHIPPING_FIELDS}

    def build_order(self) -> Dict[str, Any]:
        """Request body for order creation, totals taken from the cart as-is."""
        shipping_address = self.shipping_address()
        payment_method = self.payment.values.get("paymentMethod")
        order = {
            "items": self.cart.to_payload(),
            "subtotal": self.cart.subtotal,
            "discount": self.cart.discount,
            "shippingCost": self.cart.shipping_cost,
            "total": self.cart.total,
            "shippingAddress": shipping_address,
            # No separate billing form exists yet
            "billingAddress": dict(shipping_address) if self.same_as_shipping else {},
            "paymentMethod": payment_method,
        }
        if payment_method == "card":
            card_number = str(self.payment.values.get("cardNumber") or "")
            order["paymentDetails"] = {
                "lastFour": card_number[-4:],
                "expiryDate": self.payment.values.get("expiryDate"),
                "cardType": CARD_BRAND,
            }
        if not self.session.is_logged_in:
            order["userInfo"] = {
                "email": shipping_address["email"],
                "name": shipping_address["fullName"],
            }
        return order

    async def place_order(self) -> bool:
        """
        Validate the payment form and submit the order.

        On failure the cart is kept, the step stays on payment and the error
        goes to the notification channel. Returns True once the order exists.
        """
        if self.refresh() or self.step != CheckoutStep.PAYMENT:
            return False

        self.payment.errors.pop("submit", None)
        if self.payment.validate():
            return False

        order = self.build_order()
        self.loading = True
        try:
            if self.session.is_logged_in:
                response = await self.orders.create_order(order)
            else:
                response = await self.orders.guest_checkout(order)
        except ApiError as e:
            logger.error(f"Error placing order: {e.status_code} {e.message}")
            self.payment.set_field_error("submit", ORDER_FAILED_MESSAGE)
            self.notifications.error(ORDER_FAILED_MESSAGE)
            return False
        finally:
            self.loading = False

        self.order_id = _order_number(response)
        self.order_complete = True
        self.cart.clear()
        self._scroll_top()
        logger.info(f"Order {self.order_id} placed")
        return True


def _order_number(response: Optional[Mapping[str, Any]]) -> str:
    order_number = response.get("orderNumber") if response else None
    if order_number:
        return order_number
    fallback = f"ORD-{random.randint(100000, 999999)}"
    logger.warning(f"Order response had no orderNumber, showing {fallback}")
    return fallback
