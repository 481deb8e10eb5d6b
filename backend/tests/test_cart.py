import pytest
from fastapi.testclient import TestClient

from solestyle.db import SessionLocal
from solestyle.main import app
from solestyle.models.client_storage import StorageScope
from solestyle.repositories.storage_repo import CART_KEY, CHECKOUT_CART_KEY, ClientStorageRepository


def _stored(client_id, key=CART_KEY, scope=StorageScope.LOCAL):
    db = SessionLocal()
    try:
        return ClientStorageRepository(db, client_id, scope).get_item(key)
    finally:
        db.close()


def _add(client, **kw):
    payload = {"productId": "runner", "name": "Trail Runner", "price": "80.00", "image": "runner.jpg"}
    payload.update(kw)
    return client.post("/api/cart/items", json=payload)


def test_empty_cart_renders_empty_state(client):
    res = client.get("/api/cart")
    assert res.status_code == 200
    body = res.json()
    assert body["rows"] == []
    assert body["emptyMessage"]
    assert body["showActions"] is False
    assert body["cartLabel"] == "Cart (0)"
    assert "client_id" in res.cookies


def test_add_item_returns_toast_and_count(client):
    res = _add(client)
    assert res.status_code == 200
    body = res.json()
    assert body["cartCount"] == 1
    assert body["cartLabel"] == "Cart (1)"
    assert body["toast"]["message"] == '"Trail Runner" added to your cart!'
    assert body["toast"]["dismissAfterMs"] == 3000
    assert body["toast"]["fadeMs"] == 500


def test_add_same_variant_twice_persists_one_line(client):
    _add(client, color="red", size="9")
    _add(client, color="red", size="9")
    stored = _stored(client.cookies["client_id"])
    assert len(stored["items"]) == 1
    assert stored["items"][0]["quantity"] == 2
    assert stored["totalItems"] == 2
    assert stored["subtotal"] == "160.00"


def test_add_with_price_text_and_derived_id(client):
    res = client.post("/api/cart/items", json={"name": "Classic Boot", "price": "Sale $59.99 $89.99"})
    assert res.status_code == 200
    item = res.json()["cart"]["items"][0]
    assert item["productId"] == "classic-boot"
    assert item["price"] == "59.99"


def test_add_with_unparseable_price(client):
    res = client.post("/api/cart/items", json={"name": "Boot", "price": "call us"})
    assert res.status_code == 400


@pytest.mark.parametrize("price", ["NaN", "$sNaN", "Infinity", "-Infinity"])
def test_add_with_non_finite_price(client, price):
    res = client.post("/api/cart/items", json={"name": "Boot", "price": price})
    assert res.status_code == 400
    assert client.get("/api/cart").json()["cartCount"] == 0


def test_add_takes_product_id_from_link(client):
    res = client.post(
        "/api/cart/items",
        json={"link": "air-runner.html", "name": "Air Runner Pro", "price": "$120.00"},
    )
    assert res.status_code == 200
    assert res.json()["cart"]["items"][0]["productId"] == "air-runner"


def test_explicit_product_id_beats_link(client):
    res = _add(client, link="other.html")
    assert res.json()["cart"]["items"][0]["productId"] == "runner"


def test_render_rows(client):
    _add(client, color="red")
    _add(client, color="red")
    body = client.get("/api/cart").json()
    assert body["showActions"] is True
    row = body["rows"][0]
    assert row["color"] == "red"
    assert row["size"] == "Default"
    assert row["link"] == "runner.html"
    assert row["unitPrice"] == "$80.00"
    assert row["lineTotal"] == "$160.00"
    assert [o["value"] for o in row["quantityOptions"]] == [1, 2, 3, 4, 5]
    assert [o["value"] for o in row["quantityOptions"] if o["selected"]] == [2]
    assert body["subtotal"] == "$160.00"
    assert body["tax"] == "$12.80"
    assert body["total"] == "$172.80"


def test_update_quantity(client):
    _add(client)
    _add(client)
    res = client.patch("/api/cart/items/runner", json={"quantity": 5})
    assert res.status_code == 200
    assert res.json()["cartCount"] == 5
    assert _stored(client.cookies["client_id"])["subtotal"] == "400.00"


def test_update_quantity_outside_selector_range(client):
    _add(client)
    assert client.patch("/api/cart/items/runner", json={"quantity": 6}).status_code == 422
    assert client.patch("/api/cart/items/runner", json={"quantity": 0}).status_code == 422


def test_remove_item(client):
    _add(client, productId="a", price="10.00")
    _add(client, productId="b", price="20.00")
    res = client.delete("/api/cart/items/a")
    assert res.status_code == 200
    body = res.json()
    assert [r["productId"] for r in body["rows"]] == ["b"]
    assert body["cartCount"] == 1


def test_clear_cart(client):
    _add(client)
    res = client.delete("/api/cart")
    assert res.status_code == 200
    assert res.json()["cartCount"] == 0
    stored = _stored(client.cookies["client_id"])
    assert stored == {"items": [], "totalItems": 0, "subtotal": "0"}


def test_checkout_refuses_empty_cart(client):
    res = client.post("/api/cart/checkout")
    assert res.status_code == 400
    assert "empty" in res.json()["detail"]


def test_checkout_copies_snapshot_to_session(client):
    _add(client)
    res = client.post("/api/cart/checkout")
    assert res.status_code == 200
    assert res.json()["redirect"] == "checkout.html"
    snap = _stored(client.cookies["session_id"], CHECKOUT_CART_KEY, StorageScope.SESSION)
    assert snap["totalItems"] == 1
    # later cart edits don't touch the snapshot
    _add(client)
    snap = _stored(client.cookies["session_id"], CHECKOUT_CART_KEY, StorageScope.SESSION)
    assert snap["totalItems"] == 1


def test_carts_are_per_client(client):
    _add(client)
    other = TestClient(app)
    assert other.get("/api/cart").json()["cartCount"] == 0
