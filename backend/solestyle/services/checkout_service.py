import logging
from datetime import datetime, timezone
from typing import List, Mapping, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from solestyle.adapters.mock_payment import MockPaymentAdapter, PaymentDeclined
from solestyle.config import settings
from solestyle.domain import CheckoutError
from solestyle.domain.cart import Cart, cart_from_storage, empty_cart
from solestyle.domain.checkout_form import ValidationResult, validate_checkout_form
from solestyle.domain.order import Order, build_order
from solestyle.domain.pricing import compute_totals
from solestyle.models.client_storage import StorageScope
from solestyle.repositories.storage_repo import (
    CART_KEY,
    CHECKOUT_CART_KEY,
    LAST_ORDER_ID_KEY,
    ORDERS_KEY,
    ClientStorageRepository,
)
from solestyle.schemas.view_schema import CheckoutSummaryOut
from solestyle.services.cart_service import EMPTY_CART_CHECKOUT_MESSAGE
from solestyle.services.order_ids import generate_unused_order_id
from solestyle.services.rendering import render_checkout_summary
from solestyle.utils.transactions import atomic

log = logging.getLogger("solestyle.checkout")

CONFIRMATION_PAGE = "order-confirmation.html"


class CheckoutFormInvalid(Exception):
    def __init__(self, result: ValidationResult):
        super().__init__("Checkout form is invalid")
        self.result = result


class CheckoutService:
    def __init__(self, db: Session, client_id: str, session_id: str):
        self.db = db
        self.client_id = client_id
        self.local = ClientStorageRepository(db, client_id, StorageScope.LOCAL)
        self.session = ClientStorageRepository(
            db, session_id, StorageScope.SESSION, ttl_seconds=settings.SESSION_TTL_SECONDS
        )
        self.payment_adapter = MockPaymentAdapter()

    def load_snapshot(self) -> Cart:
        return cart_from_storage(self.session.get_item(CHECKOUT_CART_KEY))

    def summary(self) -> CheckoutSummaryOut:
        return render_checkout_summary(self.load_snapshot())

    def validate(self, fields: Mapping[str, Optional[str]], payment_method: Optional[str]) -> ValidationResult:
        return validate_checkout_form(fields, payment_method)

    def list_orders(self) -> List[Order]:
        raw = self.local.get_item(ORDERS_KEY)
        if not isinstance(raw, list):
            return []
        orders = []
        for entry in raw:
            try:
                orders.append(Order.model_validate(entry))
            except ValidationError:
                log.warning("client=%s skipping malformed stored order", self.client_id)
        return orders

    def last_order(self) -> Optional[Order]:
        order_id = self.session.get_item(LAST_ORDER_ID_KEY)
        if not order_id:
            return None
        return next((o for o in self.list_orders() if o.order_id == order_id), None)

    def place_order(
        self,
        fields: Mapping[str, Optional[str]],
        payment_method: Optional[str],
        now: Optional[datetime] = None,
    ) -> Order:
        """
        Validate the form, then record the order built from the checkout
        snapshot: append it to the order list, empty the cart and remember
        its id for the confirmation page, all in one commit.
        """
        result = self.validate(fields, payment_method)
        if not result.valid:
            log.info("client=%s checkout rejected: %s", self.client_id, result.invalid_fields)
            raise CheckoutFormInvalid(result)

        cart = self.load_snapshot()
        if cart.is_empty:
            raise CheckoutError(EMPTY_CART_CHECKOUT_MESSAGE)

        raw_orders = self.local.get_item(ORDERS_KEY)
        if not isinstance(raw_orders, list):
            raw_orders = []
        taken = {o.get("orderId") for o in raw_orders if isinstance(o, dict)}

        try:
            payment = self.payment_adapter.settle(payment_method, compute_totals(cart.subtotal).total)
        except PaymentDeclined as e:
            raise CheckoutError(str(e))

        order = build_order(
            order_id=generate_unused_order_id(taken),
            order_date=now or datetime.now(timezone.utc),
            cart=cart,
            fields=fields,
            payment_method=payment.method,
            payment_status=payment.status,
        )

        with atomic(self.db):
            self.local.set_item(ORDERS_KEY, raw_orders + [order.to_storage()])
            self.local.set_item(CART_KEY, empty_cart().to_storage())
            self.session.set_item(LAST_ORDER_ID_KEY, order.order_id)

        log.info(
            "client=%s placed order %s total=%s payment=%s/%s",
            self.client_id,
            order.order_id,
            order.totals.total,
            order.payment.method,
            order.payment.status,
        )
        return order
