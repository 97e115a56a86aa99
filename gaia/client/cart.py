"""Shopping cart with client-side totals."""
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

FREE_SHIPPING_ABOVE = 999
FLAT_SHIPPING_COST = 50
LOCAL_PROMO_CODE = "GAIA20"
LOCAL_PROMO_RATE = 0.2


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


@dataclass
class CartItem:
    id: int
    name: str
    price: float
    quantity: int = 1
    original_price: Optional[float] = None
    selected_color: Optional[str] = None
    image: Optional[str] = None

    @property
    def key(self):
        return (self.id, self.selected_color)

    def to_payload(self) -> Dict[str, Any]:
        """Camel-cased line as sent in the order request."""
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "originalPrice": self.original_price,
            "quantity": self.quantity,
            "selectedColor": self.selected_color,
            "image": self.image,
        }


class Cart:
    """
    Items are keyed by (product id, selected color).

    Totals are recomputed from the items on every read. A promo applied with
    `apply_promo_code` lasts until the items change.
    """

    def __init__(self, items: Optional[List[CartItem]] = None):
        self.items: List[CartItem] = []
        self._promo_discount = 0
        for item in items or []:
            self.add(item)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def _find(self, product_id: int, color: Optional[str]) -> Optional[CartItem]:
        for item in self.items:
            if item.key == (product_id, color):
                return item
        return None

    def _changed(self) -> None:
        self._promo_discount = 0

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def add(self, item: CartItem) -> None:
        existing = self._find(item.id, item.selected_color)
        if existing:
            existing.quantity += item.quantity
        else:
            self.items.append(item)
        self._changed()

    def update_quantity(self, product_id: int, color: Optional[str], quantity: int) -> None:
        if quantity < 1:
            return
        item = self._find(product_id, color)
        if item:
            item.quantity = quantity
            self._changed()

    def remove(self, product_id: int, color: Optional[str] = None) -> None:
        self.items = [item for item in self.items if item.key != (product_id, color)]
        self._changed()

    def clear(self) -> None:
        self.items = []
        self._changed()

    # =========================================================================
    # TOTALS
    # =========================================================================

    @property
    def subtotal(self) -> float:
        return sum(item.price * item.quantity for item in self.items)

    @property
    def discount(self) -> float:
        line_discount = sum(
            (item.original_price - item.price) * item.quantity
            for item in self.items
            if item.original_price is not None
        )
        return line_discount + self._promo_discount

    @property
    def shipping_cost(self) -> float:
        return 0 if self.subtotal > FREE_SHIPPING_ABOVE else FLAT_SHIPPING_COST

    @property
    def total(self) -> float:
        return self.subtotal + self.shipping_cost - self._promo_discount

    def apply_promo_code(self, code: str) -> Dict[str, Any]:
        if code == LOCAL_PROMO_CODE:
            self._promo_discount += _round_half_up(self.subtotal * LOCAL_PROMO_RATE)
            return {"valid": True, "message": "20% discount applied"}
        return {"valid": False, "message": "Invalid promo code"}

    def to_payload(self) -> List[Dict[str, Any]]:
        return [item.to_payload() for item in self.items]
