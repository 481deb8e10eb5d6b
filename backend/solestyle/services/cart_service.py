import logging
from decimal import Decimal
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from solestyle.config import settings
from solestyle.domain import CheckoutError
from solestyle.domain import cart as cart_ops
from solestyle.domain.cart import Cart
from solestyle.models.client_storage import StorageScope
from solestyle.repositories.storage_repo import (
    CART_KEY,
    CHECKOUT_CART_KEY,
    ClientStorageRepository,
)
from solestyle.schemas.view_schema import ToastOut
from solestyle.services.rendering import added_to_cart_toast

log = logging.getLogger("solestyle.cart")

EMPTY_CART_CHECKOUT_MESSAGE = "Your cart is empty. Please add items before checkout."


class CartService:
    """
    Loads the client's cart from local storage, applies one operation and
    writes the whole cart back.
    """

    def __init__(self, db: Session, client_id: str, session_id: Optional[str] = None):
        self.db = db
        self.client_id = client_id
        self.local = ClientStorageRepository(db, client_id, StorageScope.LOCAL)
        self.session = None
        if session_id:
            self.session = ClientStorageRepository(
                db, session_id, StorageScope.SESSION, ttl_seconds=settings.SESSION_TTL_SECONDS
            )

    def load(self) -> Cart:
        return cart_ops.cart_from_storage(self.local.get_item(CART_KEY))

    def save(self, cart: Cart) -> Cart:
        self.local.set_item(CART_KEY, cart.to_storage())
        self.db.commit()
        return cart

    def add_to_cart(
        self,
        product_id: str,
        name: str,
        price: Decimal,
        image: Optional[str] = None,
        color: Optional[str] = None,
        size: Optional[str] = None,
    ) -> Tuple[Cart, ToastOut]:
        cart = cart_ops.add_to_cart(self.load(), product_id, name, price, image, color, size)
        self.save(cart)
        log.info("client=%s added %s (%s/%s) -> %d items", self.client_id, product_id, color, size, cart.total_items)
        return cart, added_to_cart_toast(name)

    def remove_from_cart(self, product_id: str, color: Optional[str] = None, size: Optional[str] = None) -> Cart:
        before = self.load()
        cart = cart_ops.remove_from_cart(before, product_id, color, size)
        if cart is before:
            log.info("client=%s remove %s: not in cart", self.client_id, product_id)
            return cart
        log.info("client=%s removed %s -> %d items", self.client_id, product_id, cart.total_items)
        return self.save(cart)

    def update_quantity(
        self,
        product_id: str,
        new_quantity: int,
        color: Optional[str] = None,
        size: Optional[str] = None,
    ) -> Cart:
        before = self.load()
        cart = cart_ops.update_cart_item_quantity(before, product_id, new_quantity, color, size)
        if cart is before:
            return cart
        log.info("client=%s set %s quantity=%d", self.client_id, product_id, new_quantity)
        return self.save(cart)

    def clear(self) -> Cart:
        log.info("client=%s cleared cart", self.client_id)
        return self.save(cart_ops.clear_cart())

    def begin_checkout(self) -> Cart:
        """Copy the cart into session storage as the checkout snapshot."""
        if self.session is None:
            raise CheckoutError("No browsing session")
        cart = self.load()
        if cart.is_empty:
            raise CheckoutError(EMPTY_CART_CHECKOUT_MESSAGE)
        self.session.set_item(CHECKOUT_CART_KEY, cart.to_storage())
        self.db.commit()
        log.info("client=%s checkout started with %d items", self.client_id, cart.total_items)
        return cart
