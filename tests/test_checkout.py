"""
Tests for the checkout workflow.
"""
import json

import httpx
import pytest
from sqlalchemy import select

from gaia.client.api import ApiClient
from gaia.client.cart import Cart, CartItem
from gaia.client.checkout import (
    ORDER_FAILED_MESSAGE,
    PAYMENT_RULES,
    SHIPPING_FIELDS,
    Checkout,
    CheckoutStep,
    field_label,
)
from gaia.client.notifications import NotificationCenter
from gaia.client.services import OrderService
from gaia.client.session import SessionStore
from gaia.client.validation import validate_form
from gaia.main import app
from gaia.models import Order, OrderItem

SHIPPING = {
    "fullName": "Asha Rao",
    "email": "asha@example.com",
    "phone": "9876543210",
    "address": "12 MG Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "postalCode": "560001",
    "country": "India",
}

CARD = {"cardNumber": "4242424242424242", "nameOnCard": "ASHA RAO", "expiryDate": "12/29", "cvv": "123"}


def mist_cart() -> Cart:
    return Cart([CartItem(id=7, name="Hydrating Face Mist", price=499, original_price=499, quantity=2)])


class Recorder:
    """Mock API that records order submissions."""

    def __init__(self, status_code=201, body=None):
        self.status_code = status_code
        self.body = {"id": 42, "orderNumber": "ORD-000042", "status": "pending"} if body is None else body
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append((request.url.path, json.loads(request.content)))
        return httpx.Response(self.status_code, json=self.body)


def make_checkout(handler, cart=None, session=None, **hooks):
    session = session or SessionStore()
    api = ApiClient(session=session, base_url="http://shop.test/api", transport=httpx.MockTransport(handler))
    return Checkout(
        cart=cart if cart is not None else mist_cart(),
        session=session,
        orders=OrderService(api),
        notifications=NotificationCenter(),
        **hooks,
    )


def fill_shipping(checkout, **overrides):
    for name, value in {**SHIPPING, **overrides}.items():
        checkout.set_shipping_value(name, value)


def fill_card(checkout, **overrides):
    for name, value in {**CARD, **overrides}.items():
        checkout.set_payment_value(name, value)


class TestShippingStep:

    def test_field_labels(self):
        assert field_label("fullName") == "Full Name"
        assert field_label("postalCode") == "Postal Code"
        assert field_label("city") == "City"

    @pytest.mark.parametrize("field", SHIPPING_FIELDS)
    def test_blank_required_field_blocks_transition(self, field):
        scrolls = []
        checkout = make_checkout(Recorder(), on_scroll_top=lambda: scrolls.append(1))
        fill_shipping(checkout, **{field: ""})

        assert checkout.continue_to_payment() is False

        assert checkout.step == CheckoutStep.SHIPPING
        assert checkout.shipping.errors == {field: f"{field_label(field)} is required"}
        assert scrolls == []

    @pytest.mark.parametrize("field,value,message", [
        ("email", "asha.example.com", "Please enter a valid email address"),
        ("phone", "98765", "Please enter a valid 10-digit phone number"),
        ("postalCode", "5600", "Please enter a valid 6-digit postal code"),
    ])
    def test_format_errors(self, field, value, message):
        checkout = make_checkout(Recorder())
        fill_shipping(checkout, **{field: value})

        assert checkout.continue_to_payment() is False
        assert checkout.shipping.errors == {field: message}

    def test_valid_shipping_moves_to_payment(self):
        scrolls = []
        checkout = make_checkout(Recorder(), on_scroll_top=lambda: scrolls.append(1))
        fill_shipping(checkout)

        assert checkout.continue_to_payment() is True

        assert checkout.step == CheckoutStep.PAYMENT
        assert scrolls == [1]

    def test_shipping_values_are_copied_to_payment_form(self):
        checkout = make_checkout(Recorder())
        fill_shipping(checkout)

        assert all(checkout.payment.values[name] == value for name, value in SHIPPING.items())

    def test_back_keeps_payment_values(self):
        checkout = make_checkout(Recorder())
        fill_shipping(checkout)
        checkout.continue_to_payment()
        fill_card(checkout)

        checkout.back_to_shipping()

        assert checkout.step == CheckoutStep.SHIPPING
        assert checkout.payment.values["cardNumber"] == CARD["cardNumber"]

    def test_prefills_from_session_user(self):
        session = SessionStore()
        session.login("tok", {"id": 1, "name": "Asha Rao", "email": "asha@example.com", "role": "customer"})

        checkout = make_checkout(Recorder(), session=session)

        assert checkout.shipping.values["fullName"] == "Asha Rao"
        assert checkout.shipping.values["email"] == "asha@example.com"
        assert checkout.shipping.values["country"] == "India"


class TestEmptyCartGuard:

    def test_empty_cart_redirects(self):
        redirects = []
        checkout = make_checkout(Recorder(), cart=Cart(), on_redirect=redirects.append)

        assert redirects == ["/cart"]
        assert checkout.redirect_path == "/cart"

    def test_guard_is_re_evaluated(self):
        redirects = []
        checkout = make_checkout(Recorder(), on_redirect=redirects.append)
        fill_shipping(checkout)
        assert redirects == []

        checkout.cart.clear()

        assert checkout.continue_to_payment() is False
        assert redirects == ["/cart"]


class TestPaymentRules:

    @pytest.mark.parametrize("values", [
        {},
        {"cardNumber": "12", "expiryDate": "13/99", "cvv": "x"},
        {"cardNumber": "not a card", "nameOnCard": "", "expiryDate": "", "cvv": "12345"},
    ])
    def test_cash_on_delivery_never_errors(self, values):
        assert validate_form({"paymentMethod": "cod", "savedCard": "new", **values}, PAYMENT_RULES) == {}

    def test_saved_card_skips_card_rules(self):
        assert validate_form({"paymentMethod": "card", "savedCard": "card-1", "cvv": "x"}, PAYMENT_RULES) == {}

    def test_new_card_required_messages(self):
        errors = validate_form({"paymentMethod": "card", "savedCard": "new"}, PAYMENT_RULES)

        assert errors == {
            "cardNumber": "Card number is required",
            "nameOnCard": "Name on card is required",
            "expiryDate": "Expiry date is required",
            "cvv": "CVV is required",
        }

    def test_new_card_format_messages(self):
        values = {"paymentMethod": "card", "savedCard": "new", **CARD,
                  "cardNumber": "4242", "expiryDate": "13/29", "cvv": "12"}

        assert validate_form(values, PAYMENT_RULES) == {
            "cardNumber": "Please enter a valid 16-digit card number",
            "expiryDate": "Please enter a valid expiry date (MM/YY)",
            "cvv": "Please enter a valid CVV",
        }


class TestPlaceOrder:

    def ready(self, handler, **kwargs):
        checkout = make_checkout(handler, **kwargs)
        fill_shipping(checkout)
        assert checkout.continue_to_payment()
        return checkout

    @pytest.mark.asyncio
    async def test_guest_card_order(self):
        recorder = Recorder()
        checkout = self.ready(recorder)
        fill_card(checkout)

        assert await checkout.place_order() is True

        path, body = recorder.requests[0]
        assert path == "/api/orders/guest"
        assert body["userInfo"] == {"email": "asha@example.com", "name": "Asha Rao"}
        assert body["items"][0]["id"] == 7
        assert body["items"][0]["quantity"] == 2
        assert (body["subtotal"], body["discount"], body["shippingCost"], body["total"]) == (998, 0, 50, 1048)
        assert body["shippingAddress"] == SHIPPING
        assert body["billingAddress"] == SHIPPING
        assert body["paymentMethod"] == "card"
        assert body["paymentDetails"] == {"lastFour": "4242", "expiryDate": "12/29", "cardType": "visa"}

        assert checkout.order_complete
        assert checkout.order_id == "ORD-000042"
        assert checkout.cart.is_empty
        assert checkout.redirect_path is None

    @pytest.mark.asyncio
    async def test_registered_cod_order(self):
        recorder = Recorder()
        session = SessionStore()
        session.login("tok", {"id": 1, "name": "Asha Rao", "email": "asha@example.com", "role": "customer"})
        checkout = self.ready(recorder, session=session)
        checkout.set_payment_value("paymentMethod", "cod")

        assert await checkout.place_order() is True

        path, body = recorder.requests[0]
        assert path == "/api/orders"
        assert "userInfo" not in body
        assert "paymentDetails" not in body
        assert body["paymentMethod"] == "cod"

    @pytest.mark.asyncio
    async def test_billing_is_empty_when_not_same_as_shipping(self):
        recorder = Recorder()
        checkout = self.ready(recorder)
        checkout.set_payment_value("paymentMethod", "cod")
        checkout.same_as_shipping = False

        await checkout.place_order()

        assert recorder.requests[0][1]["billingAddress"] == {}

    @pytest.mark.asyncio
    async def test_invalid_card_is_not_submitted(self):
        recorder = Recorder()
        checkout = self.ready(recorder)
        fill_card(checkout, cvv="")

        assert await checkout.place_order() is False

        assert recorder.requests == []
        assert checkout.payment.errors == {"cvv": "CVV is required"}

    @pytest.mark.asyncio
    async def test_cannot_place_from_shipping_step(self):
        recorder = Recorder()
        checkout = make_checkout(recorder)
        fill_shipping(checkout)

        assert await checkout.place_order() is False
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_server_failure_keeps_cart_and_notifies(self):
        recorder = Recorder(status_code=500, body={"message": "Failed to place order"})
        checkout = self.ready(recorder)
        fill_card(checkout)

        assert await checkout.place_order() is False

        assert checkout.step == CheckoutStep.PAYMENT
        assert not checkout.order_complete
        assert len(checkout.cart) == 1
        assert checkout.payment.errors == {"submit": ORDER_FAILED_MESSAGE}
        assert checkout.notifications.latest.message == ORDER_FAILED_MESSAGE
        assert checkout.notifications.latest.type == "error"
        assert checkout.loading is False

        recorder.status_code = 201
        recorder.body = {"id": 43, "orderNumber": "ORD-000043"}
        assert await checkout.place_order() is True
        assert len(recorder.requests) == 2
        assert checkout.order_id == "ORD-000043"

    @pytest.mark.asyncio
    async def test_missing_order_number_falls_back_to_random_id(self):
        checkout = self.ready(Recorder(body={"id": 42}))
        fill_card(checkout)

        assert await checkout.place_order() is True

        assert checkout.order_id.startswith("ORD-")
        assert 100000 <= int(checkout.order_id[4:]) <= 999999


class TestCheckoutAgainstApi:
    """Full checkout through the real app."""

    @pytest.mark.asyncio
    async def test_guest_checkout_persists_order(self, client, db, seeded):
        session = SessionStore()
        api = ApiClient(session=session, base_url="http://test/api", transport=httpx.ASGITransport(app=app))
        checkout = Checkout(mist_cart(), session, OrderService(api), NotificationCenter())
        fill_shipping(checkout)
        assert checkout.continue_to_payment()
        checkout.set_payment_value("paymentMethod", "cod")

        assert await checkout.place_order() is True
        await api.close()

        order = await db.scalar(select(Order).where(Order.guest_email == "asha@example.com"))
        assert checkout.order_id == order.order_number
        assert order.shipping_cost == 50
        assert order.total == 1048
        items = (await db.execute(select(OrderItem).where(OrderItem.order_id == order.id))).scalars().all()
        assert [(i.product_id, i.quantity, i.price) for i in items] == [(7, 2, 499)]
