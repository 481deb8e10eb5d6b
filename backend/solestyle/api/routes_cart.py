from decimal import Decimal
from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from solestyle.api.deps import ClientContext, get_client
from solestyle.config import settings
from solestyle.db import get_db
from solestyle.domain import CartError, CheckoutError
from solestyle.domain.product_text import (
    parse_price_text,
    product_id_from_link,
    product_id_from_name,
)
from solestyle.services.cart_service import CartService
from solestyle.services.rendering import cart_label, render_cart

router = APIRouter(prefix="/api/cart", tags=["cart"])


class AddItemIn(BaseModel):
    product_id: Optional[str] = Field(None, alias="productId")
    # product page link such as "air-runner.html"
    link: Optional[str] = None
    name: str
    # a number, or price text such as "$89.99" / "$59.99 $89.99"
    price: Union[Decimal, str]
    image: Optional[str] = None
    color: Optional[str] = None
    size: Optional[str] = None


class QuantityIn(BaseModel):
    quantity: int = Field(..., ge=1, le=settings.MAX_LINE_QUANTITY)
    color: Optional[str] = None
    size: Optional[str] = None


def _service(db: Session, client: ClientContext) -> CartService:
    return CartService(db, client.client_id, client.session_id)


@router.get("", summary="Render cart")
def get_cart(client: ClientContext = Depends(get_client), db: Session = Depends(get_db)):
    cart = _service(db, client).load()
    return render_cart(cart).model_dump(by_alias=True)


@router.post("/items", summary="Add item to cart")
def add_item(
    payload: AddItemIn,
    client: ClientContext = Depends(get_client),
    db: Session = Depends(get_db),
):
    if payload.product_id:
        product_id = payload.product_id
    elif payload.link:
        product_id = product_id_from_link(payload.link)
    else:
        product_id = product_id_from_name(payload.name)
    try:
        price = payload.price if isinstance(payload.price, Decimal) else parse_price_text(payload.price)
        cart, toast = _service(db, client).add_to_cart(
            product_id, payload.name, price, payload.image, payload.color, payload.size
        )
    except CartError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "cartCount": cart.total_items,
        "cartLabel": cart_label(cart.total_items),
        "toast": toast.model_dump(by_alias=True),
        "cart": cart.to_storage(),
    }


@router.delete("/items/{product_id}", summary="Remove item")
def remove_item(
    product_id: str,
    color: Optional[str] = None,
    size: Optional[str] = None,
    client: ClientContext = Depends(get_client),
    db: Session = Depends(get_db),
):
    cart = _service(db, client).remove_from_cart(product_id, color, size)
    return render_cart(cart).model_dump(by_alias=True)


@router.patch("/items/{product_id}", summary="Change item quantity")
def update_quantity(
    product_id: str,
    payload: QuantityIn,
    client: ClientContext = Depends(get_client),
    db: Session = Depends(get_db),
):
    try:
        cart = _service(db, client).update_quantity(product_id, payload.quantity, payload.color, payload.size)
    except CartError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return render_cart(cart).model_dump(by_alias=True)


@router.delete("", summary="Clear cart")
def clear_cart(client: ClientContext = Depends(get_client), db: Session = Depends(get_db)):
    cart = _service(db, client).clear()
    return render_cart(cart).model_dump(by_alias=True)


@router.post("/checkout", summary="Start checkout")
def begin_checkout(client: ClientContext = Depends(get_client), db: Session = Depends(get_db)):
    try:
        cart = _service(db, client).begin_checkout()
    except CheckoutError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"redirect": "checkout.html", "cartCount": cart.total_items}
