# view models returned to the storefront pages
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ViewModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuantityOption(ViewModel):
    value: int
    selected: bool


class CartRowOut(ViewModel):
    product_id: str
    name: str
    image: Optional[str] = None
    link: str
    color: str
    size: str
    quantity: int
    quantity_options: List[QuantityOption]
    unit_price: str
    line_total: str


class CartViewOut(ViewModel):
    cart_count: int
    cart_label: str
    rows: List[CartRowOut] = []
    subtotal: str
    tax: str
    total: str
    empty_message: Optional[str] = None
    show_actions: bool


class ToastOut(ViewModel):
    message: str
    link: str
    link_text: str = "View Cart"
    dismiss_after_ms: int
    fade_ms: int


class SummaryRowOut(ViewModel):
    name: str
    image: Optional[str] = None
    details: str
    price: str


class TotalRowOut(ViewModel):
    label: str
    value: str
    grand_total: bool = False


class CheckoutSummaryOut(ViewModel):
    rows: List[SummaryRowOut] = []
    totals: List[TotalRowOut] = []
