from datetime import datetime
from typing import List, Mapping, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from solestyle.domain.cart import Cart, CartItem
from solestyle.domain.checkout_form import CASH_ON_DELIVERY
from solestyle.domain.pricing import OrderTotals, compute_totals


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class CustomerInfo(_Record):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class ShippingAddress(_Record):
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None


class PaymentInfo(_Record):
    method: str
    status: str


class Order(_Record):
    order_id: str
    order_date: datetime
    customer_info: CustomerInfo
    shipping_address: ShippingAddress
    items: List[CartItem]
    totals: OrderTotals
    payment: PaymentInfo

    def to_storage(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


def payment_status_for(method: str) -> str:
    return "pending" if method == CASH_ON_DELIVERY else "paid"


def build_order(
    order_id: str,
    order_date: datetime,
    cart: Cart,
    fields: Mapping[str, Optional[str]],
    payment_method: str,
    payment_status: Optional[str] = None,
) -> Order:
    """Assemble an order from a cart snapshot and the submitted form fields."""
    return Order(
        order_id=order_id,
        order_date=order_date,
        customer_info=CustomerInfo(
            first_name=fields.get("first-name"),
            last_name=fields.get("last-name"),
            email=fields.get("email"),
            phone=fields.get("phone"),
        ),
        shipping_address=ShippingAddress(
            address=fields.get("address"),
            city=fields.get("city"),
            state=fields.get("state"),
            zip=fields.get("zip"),
            country=fields.get("country"),
        ),
        items=list(cart.items),
        totals=compute_totals(cart.subtotal),
        payment=PaymentInfo(
            method=payment_method,
            status=payment_status or payment_status_for(payment_method),
        ),
    )
