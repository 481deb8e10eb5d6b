from typing import Optional

from solestyle.config import settings
from solestyle.domain.cart import Cart
from solestyle.domain.pricing import compute_totals, format_money, tax_label
from solestyle.schemas.view_schema import (
    CartRowOut,
    CartViewOut,
    CheckoutSummaryOut,
    QuantityOption,
    SummaryRowOut,
    ToastOut,
    TotalRowOut,
)

EMPTY_CART_MESSAGE = "Your cart is empty."
DEFAULT_VARIANT = "Default"


def cart_label(count: int) -> str:
    return f"Cart ({count})"


def render_cart(cart: Cart) -> CartViewOut:
    totals = compute_totals(cart.subtotal)
    if cart.is_empty:
        return CartViewOut(
            cart_count=0,
            cart_label=cart_label(0),
            rows=[],
            subtotal=format_money(totals.subtotal),
            tax=format_money(totals.tax),
            total=format_money(totals.subtotal + totals.tax),
            empty_message=EMPTY_CART_MESSAGE,
            show_actions=False,
        )

    rows = []
    for it in cart.items:
        # the selector always offers 1..MAX, plus the current value if it is larger
        upper = max(settings.MAX_LINE_QUANTITY, it.quantity)
        rows.append(
            CartRowOut(
                product_id=it.product_id,
                name=it.name,
                image=it.image,
                link=f"{it.product_id}.html",
                color=it.color or DEFAULT_VARIANT,
                size=it.size or DEFAULT_VARIANT,
                quantity=it.quantity,
                quantity_options=[
                    QuantityOption(value=n, selected=n == it.quantity)
                    for n in range(1, upper + 1)
                ],
                unit_price=format_money(it.price),
                line_total=format_money(it.line_total),
            )
        )
    return CartViewOut(
        cart_count=cart.total_items,
        cart_label=cart_label(cart.total_items),
        rows=rows,
        subtotal=format_money(totals.subtotal),
        tax=format_money(totals.tax),
        # the cart page shows no shipping line
        total=format_money(totals.subtotal + totals.tax),
        empty_message=None,
        show_actions=True,
    )


def added_to_cart_toast(product_name: str) -> ToastOut:
    return ToastOut(
        message=f'"{product_name}" added to your cart!',
        link="cart.html",
        dismiss_after_ms=settings.TOAST_DISMISS_MS,
        fade_ms=settings.TOAST_FADE_MS,
    )


def _shipping_text(amount) -> str:
    return "Free" if amount == 0 else format_money(amount)


def render_checkout_summary(cart: Optional[Cart]) -> CheckoutSummaryOut:
    cart = cart or Cart()
    totals = compute_totals(cart.subtotal)
    rows = [
        SummaryRowOut(
            name=it.name,
            image=it.image,
            details=f"{it.color or DEFAULT_VARIANT} | {it.size or DEFAULT_VARIANT} | Qty: {it.quantity}",
            price=format_money(it.line_total),
        )
        for it in cart.items
    ]
    return CheckoutSummaryOut(
        rows=rows,
        totals=[
            TotalRowOut(label="Subtotal:", value=format_money(totals.subtotal)),
            TotalRowOut(label="Shipping:", value=_shipping_text(totals.shipping)),
            TotalRowOut(label=f"{tax_label()}:", value=format_money(totals.tax)),
            TotalRowOut(label="Total:", value=format_money(totals.total), grand_total=True),
        ],
    )
