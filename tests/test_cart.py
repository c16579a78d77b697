from conftest import auth_header, register


def test_cart_requires_login(client):
    assert client.get("/api/cart").status_code == 401


def test_cart_preflight_skips_auth(client):
    assert client.options("/api/cart").status_code == 200


def test_empty_cart(client, customer_headers):
    cart = client.get("/api/cart", headers=customer_headers).get_json()["data"]
    assert cart["items"] == []
    assert cart["totalItems"] == 0
    assert cart["totalPrice"] == 0
    assert cart["is_empty"] is True


def test_add_increments_existing_line(client, customer_headers, make_product):
    product = make_product(price=499.5, stock=10)

    client.post("/api/cart/add", json={"productId": product["id"], "quantity": 2}, headers=customer_headers)
    resp = client.post("/api/cart/add", json={"productId": product["id"]}, headers=customer_headers)

    assert resp.status_code == 200
    cart = resp.get_json()["data"]
    assert len(cart["items"]) == 1
    assert cart["items"][0]["quantity"] == 3
    assert cart["totalItems"] == 3
    assert cart["total_cents"] == 3 * 49950
    assert cart["totalPrice"] == 1498.5


def test_add_beyond_stock_is_rejected(client, customer_headers, make_product):
    product = make_product(stock=2)
    client.post("/api/cart/add", json={"productId": product["id"], "quantity": 2}, headers=customer_headers)

    resp = client.post("/api/cart/add", json={"productId": product["id"]}, headers=customer_headers)
    assert resp.status_code == 400
    assert resp.get_json()["error_code"] == "INSUFFICIENT_STOCK"


def test_add_unknown_product(client, customer_headers):
    resp = client.post("/api/cart/add", json={"productId": 9999}, headers=customer_headers)
    assert resp.status_code == 404


def test_update_and_remove(client, customer_headers, make_product):
    product = make_product(stock=10)
    client.post("/api/cart/add", json={"productId": product["id"]}, headers=customer_headers)

    resp = client.put("/api/cart/update", json={"productId": product["id"], "quantity": 4}, headers=customer_headers)
    assert resp.get_json()["data"]["items"][0]["quantity"] == 4

    resp = client.put("/api/cart/update", json={"productId": product["id"], "quantity": 0}, headers=customer_headers)
    assert resp.get_json()["data"]["is_empty"] is True

    resp = client.delete(f"/api/cart/remove/{product['id']}", headers=customer_headers)
    assert resp.status_code == 404


def test_update_line_not_in_cart(client, customer_headers, make_product):
    product = make_product()
    resp = client.put("/api/cart/update", json={"productId": product["id"], "quantity": 1}, headers=customer_headers)
    assert resp.status_code == 404


def test_carts_are_per_user(client, customer_headers, make_product):
    product = make_product()
    client.post("/api/cart/add", json={"productId": product["id"]}, headers=customer_headers)

    other = auth_header(register(client, "ravi@example.com")["token"])
    assert client.get("/api/cart", headers=other).get_json()["data"]["is_empty"] is True


def test_clear(client, customer_headers, make_product):
    for name in ("Kurta", "Jacket"):
        product = make_product(name=name)
        client.post("/api/cart/add", json={"productId": product["id"]}, headers=customer_headers)

    resp = client.delete("/api/cart/clear", headers=customer_headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["items"] == []
