from decimal import Decimal

import pytest

from solestyle.domain import CartError
from solestyle.domain.cart import (
    Cart,
    add_to_cart,
    cart_from_storage,
    clear_cart,
    empty_cart,
    remove_from_cart,
    update_cart_item_quantity,
)


def _cart_with(*adds):
    cart = empty_cart()
    for a in adds:
        cart = add_to_cart(cart, *a)
    return cart


def test_same_variant_twice_is_one_line():
    cart = _cart_with(
        ("runner", "Runner", "89.99", "runner.jpg", "red", "9"),
        ("runner", "Runner", "89.99", "runner.jpg", "red", "9"),
    )
    assert len(cart.items) == 1
    assert cart.items[0].quantity == 2
    assert cart.total_items == 2
    assert cart.subtotal == Decimal("179.98")


def test_different_colours_are_distinct_lines():
    cart = _cart_with(
        ("x", "Shoe X", "10.00", None, "red"),
        ("x", "Shoe X", "10.00", None, "blue"),
    )
    assert [it.color for it in cart.items] == ["red", "blue"]
    assert all(it.quantity == 1 for it in cart.items)


def test_new_line_counts_price_once():
    cart = _cart_with(("x", "Shoe X", "25.50"))
    assert cart.total_items == 1
    assert cart.subtotal == Decimal("25.50")


def test_add_does_not_mutate_input():
    before = _cart_with(("x", "Shoe X", "10"))
    after = add_to_cart(before, "x", "Shoe X", Decimal("10"))
    assert before.items[0].quantity == 1
    assert after.items[0].quantity == 2


def test_negative_price_rejected():
    with pytest.raises(CartError):
        add_to_cart(empty_cart(), "x", "Shoe X", Decimal("-1"))

@pytest.mark.parametrize("price", ["NaN", "Infinity", "not a price"])
def test_non_numeric_price_rejected(price):
    with pytest.raises(CartError):
        add_to_cart(empty_cart(), "x", "Shoe X", price)



def test_remove_first_matching_line_and_its_totals():
    cart = _cart_with(
        ("x", "Shoe X", "10.00", None, "red"),
        ("x", "Shoe X", "10.00", None, "red"),
        ("x", "Shoe X", "12.00", None, "blue"),
        ("y", "Shoe Y", "5.00"),
    )
    assert cart.total_items == 4
    assert cart.subtotal == Decimal("37.00")

    after = remove_from_cart(cart, "x")
    assert [(it.product_id, it.color) for it in after.items] == [("x", "blue"), ("y", None)]
    assert cart.total_items - after.total_items == 2
    assert cart.subtotal - after.subtotal == Decimal("20.00")


def test_remove_with_variant_uses_full_key():
    cart = _cart_with(
        ("x", "Shoe X", "10.00", None, "red"),
        ("x", "Shoe X", "12.00", None, "blue"),
    )
    after = remove_from_cart(cart, "x", color="blue")
    assert [it.color for it in after.items] == ["red"]


def test_remove_unknown_product_returns_same_cart():
    cart = _cart_with(("x", "Shoe X", "10.00"))
    assert remove_from_cart(cart, "nope") is cart


def test_quantity_change_moves_totals_by_delta():
    cart = _cart_with(("x", "Shoe X", "20.00"), ("x", "Shoe X", "20.00"))
    after = update_cart_item_quantity(cart, "x", 5)
    assert after.subtotal - cart.subtotal == Decimal("60.00")
    assert after.total_items - cart.total_items == 3
    assert after.items[0].quantity == 5


@pytest.mark.parametrize("bad", [0, -2, True, 2.5])
def test_quantity_must_be_positive_integer(bad):
    cart = _cart_with(("x", "Shoe X", "20.00"))
    with pytest.raises(CartError):
        update_cart_item_quantity(cart, "x", bad)


def test_clear_cart():
    cart = clear_cart()
    assert cart.items == []
    assert cart.total_items == 0
    assert cart.subtotal == 0
    assert cart.to_storage() == {"items": [], "totalItems": 0, "subtotal": "0"}


def test_storage_shape_uses_camel_case_keys():
    cart = _cart_with(("air-max", "Air Max", "120.00", "air.jpg", None, "10"))
    stored = cart.to_storage()
    assert stored["totalItems"] == 1
    assert stored["items"][0]["productId"] == "air-max"
    assert stored["items"][0]["size"] == "10"
    assert cart_from_storage(stored) == cart


def test_stored_totals_are_ignored_on_load():
    raw = {
        "items": [{"productId": "x", "name": "X", "price": "10", "quantity": 2}],
        "totalItems": 99,
        "subtotal": 1234,
    }
    cart = cart_from_storage(raw)
    assert cart.total_items == 2
    assert cart.subtotal == Decimal("20")


@pytest.mark.parametrize("raw", [None, "garbage", {"items": "nope"}, {"items": [{"name": "no id"}]}])
def test_malformed_storage_falls_back_to_empty(raw):
    assert cart_from_storage(raw) == Cart()
