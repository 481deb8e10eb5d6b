"""
Cart state and its transitions.

Every operation takes a ``Cart`` and returns a new one; nothing here touches
storage or the request. ``totalItems`` and ``subtotal`` are derived from the
line items on read, so whatever totals a stored cart carries are ignored.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, computed_field
from pydantic.alias_generators import to_camel

from solestyle.domain import CartError

log = logging.getLogger("solestyle.cart")


class CartItem(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    product_id: str
    name: str
    price: Decimal
    image: Optional[str] = None
    color: Optional[str] = None
    size: Optional[str] = None
    quantity: int = Field(1, ge=1)

    @property
    def key(self) -> Tuple[str, Optional[str], Optional[str]]:
        return (self.product_id, self.color, self.size)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class Cart(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    items: List[CartItem] = Field(default_factory=list)

    @computed_field(alias="totalItems")
    @property
    def total_items(self) -> int:
        return sum(it.quantity for it in self.items)

    @computed_field(alias="subtotal")
    @property
    def subtotal(self) -> Decimal:
        return sum((it.line_total for it in self.items), Decimal("0"))

    @property
    def is_empty(self) -> bool:
        return not self.items

    def to_storage(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


def empty_cart() -> Cart:
    return Cart()


def cart_from_storage(raw: Any) -> Cart:
    """Build a cart from a stored value; absent or malformed data gives an empty cart."""
    if raw is None:
        return empty_cart()
    try:
        return Cart.model_validate(raw)
    except ValidationError as e:
        log.warning("Discarding malformed stored cart: %s", e.errors()[:3])
        return empty_cart()


def _find_line(
    items: List[CartItem],
    product_id: str,
    color: Optional[str] = None,
    size: Optional[str] = None,
) -> int:
    # without a variant the first line of the product matches
    match_variant = color is not None or size is not None
    for idx, it in enumerate(items):
        if it.product_id != product_id:
            continue
        if match_variant and (it.color, it.size) != (color, size):
            continue
        return idx
    return -1


def add_to_cart(
    cart: Cart,
    product_id: str,
    name: str,
    price: Decimal,
    image: Optional[str] = None,
    color: Optional[str] = None,
    size: Optional[str] = None,
) -> Cart:
    try:
        price = Decimal(str(price))
    except InvalidOperation:
        raise CartError(f"Invalid price: {price!r}")
    if not price.is_finite():
        raise CartError(f"Invalid price: {price!r}")
    if price < 0:
        raise CartError("Price must not be negative")
    items = list(cart.items)
    key = (product_id, color, size)
    idx = next((i for i, it in enumerate(items) if it.key == key), -1)
    if idx > -1:
        items[idx] = items[idx].model_copy(update={"quantity": items[idx].quantity + 1})
    else:
        items.append(
            CartItem(
                product_id=product_id,
                name=name,
                price=price,
                image=image,
                color=color,
                size=size,
                quantity=1,
            )
        )
    return Cart(items=items)


def remove_from_cart(
    cart: Cart,
    product_id: str,
    color: Optional[str] = None,
    size: Optional[str] = None,
) -> Cart:
    idx = _find_line(cart.items, product_id, color, size)
    if idx < 0:
        return cart
    items = list(cart.items)
    del items[idx]
    return Cart(items=items)


def update_cart_item_quantity(
    cart: Cart,
    product_id: str,
    new_quantity: int,
    color: Optional[str] = None,
    size: Optional[str] = None,
) -> Cart:
    if isinstance(new_quantity, bool) or not isinstance(new_quantity, int) or new_quantity < 1:
        raise CartError("Quantity must be a positive integer")
    idx = _find_line(cart.items, product_id, color, size)
    if idx < 0:
        return cart
    items = list(cart.items)
    items[idx] = items[idx].model_copy(update={"quantity": new_quantity})
    return Cart(items=items)


def clear_cart() -> Cart:
    return empty_cart()
