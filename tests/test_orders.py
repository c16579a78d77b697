import pytest

from conftest import auth_header, register


def order_payload(*lines, email="asha@example.com"):
    return {
        "user_name": "Asha Verma",
        "user_email": email,
        "user_phone": "+91 98765 43210",
        "location": "12 MG Road, Bengaluru",
        "products": list(lines),
    }


def line(product, quantity=1, price=None):
    return {
        "product_id": product["id"],
        "product_name": product["name"],
        "product_price": product["price"] if price is None else price,
        "product_image": product["image"],
        "quantity": quantity,
        "collection": product["collection"],
    }


@pytest.fixture
def kurta(make_product):
    return make_product(name="Cotton Kurta", price=1299.5, stock=5)


@pytest.fixture
def saree(make_product):
    return make_product(name="Silk Saree", price=5499, stock=2, collection="women", category="Sarees")


def test_create_order_totals_and_stock(client, kurta, saree):
    resp = client.post("/api/orders", json=order_payload(line(kurta, 2), line(saree, 1)))
    body = resp.get_json()

    assert resp.status_code == 201
    assert body["message"] == "Order placed successfully!"
    order = body["data"]["order"]
    assert order["total_cents"] == 2 * 129950 + 549900
    assert order["total_amount"] == 8098.0
    assert order["order_status"] == "pending"
    assert order["payment_status"] == "pending"
    assert order["user_id"] is None
    assert [item["quantity"] for item in order["products"]] == [2, 1]

    assert client.get(f"/api/products/{kurta['id']}").get_json()["data"]["product"]["stock"] == 3
    assert client.get(f"/api/products/{saree['id']}").get_json()["data"]["product"]["stock"] == 1


def test_create_order_links_signed_in_user(client, customer, customer_headers, kurta):
    resp = client.post("/api/orders", json=order_payload(line(kurta)), headers=customer_headers)
    assert resp.status_code == 201
    assert resp.get_json()["data"]["order"]["user_id"] == customer["user"]["id"]


def test_create_order_requires_products(client):
    resp = client.post("/api/orders", json=order_payload())
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Please provide at least one product"


def test_create_order_missing_fields(client):
    resp = client.post("/api/orders", json={"products": []})
    assert resp.status_code == 400
    assert resp.get_json()["message"].startswith("Please provide")


def test_insufficient_stock_rolls_back_whole_order(client, services, kurta, saree):
    resp = client.post("/api/orders", json=order_payload(line(kurta, 1), line(saree, 3)))

    assert resp.status_code == 400
    assert resp.get_json()["error_code"] == "INSUFFICIENT_STOCK"
    assert client.get(f"/api/products/{kurta['id']}").get_json()["data"]["product"]["stock"] == 5
    assert services.orders.list_orders() == []


def test_repeated_product_lines_are_checked_together(client, saree):
    resp = client.post("/api/orders", json=order_payload(line(saree, 1), line(saree, 2)))
    assert resp.status_code == 400
    assert client.get(f"/api/products/{saree['id']}").get_json()["data"]["product"]["stock"] == 2


def test_unknown_product_is_not_found(client, kurta):
    ghost = dict(kurta, id=9999)
    resp = client.post("/api/orders", json=order_payload(line(kurta), line(ghost)))
    assert resp.status_code == 404
    assert client.get(f"/api/products/{kurta['id']}").get_json()["data"]["product"]["stock"] == 5


def test_list_all_orders_is_admin_only(client, admin_headers, customer_headers, kurta):
    client.post("/api/orders", json=order_payload(line(kurta)))

    assert client.get("/api/orders").status_code == 401
    assert client.get("/api/orders", headers=customer_headers).status_code == 403

    body = client.get("/api/orders", headers=admin_headers).get_json()
    assert body["count"] == 1


def test_orders_by_email_only_for_owner_or_admin(client, admin_headers, customer_headers, kurta):
    client.post("/api/orders", json=order_payload(line(kurta)))
    client.post("/api/orders", json=order_payload(line(kurta), email="ravi@example.com"))

    mine = client.get("/api/orders/user/asha@example.com", headers=customer_headers)
    assert mine.status_code == 200
    assert mine.get_json()["count"] == 1

    other = client.get("/api/orders/user/ravi@example.com", headers=customer_headers)
    assert other.status_code == 403

    as_admin = client.get("/api/orders/user/ravi@example.com", headers=admin_headers)
    assert as_admin.get_json()["count"] == 1


def test_get_order_access(client, customer_headers, kurta):
    order = client.post("/api/orders", json=order_payload(line(kurta))).get_json()["data"]["order"]

    assert client.get(f"/api/orders/{order['id']}", headers=customer_headers).status_code == 200

    stranger = auth_header(register(client, "ravi@example.com")["token"])
    assert client.get(f"/api/orders/{order['id']}", headers=stranger).status_code == 403
    assert client.get("/api/orders/9999", headers=customer_headers).status_code == 404


def test_update_status(client, admin_headers, customer_headers, kurta):
    order = client.post("/api/orders", json=order_payload(line(kurta))).get_json()["data"]["order"]
    url = f"/api/orders/{order['id']}/status"

    assert client.patch(url, json={"order_status": "shipped"}, headers=customer_headers).status_code == 403

    resp = client.patch(url, json={"order_status": "shipped", "payment_status": "paid"}, headers=admin_headers)
    assert resp.status_code == 200
    updated = resp.get_json()["data"]["order"]
    assert updated["order_status"] == "shipped"
    assert updated["payment_status"] == "paid"

    assert client.patch(url, json={"order_status": "teleported"}, headers=admin_headers).status_code == 400
    assert client.patch(url, json={}, headers=admin_headers).status_code == 400


def test_receipt(client, customer_headers, kurta):
    order = client.post("/api/orders", json=order_payload(line(kurta, 2))).get_json()["data"]["order"]

    resp = client.get(f"/api/orders/{order['id']}/receipt", headers=customer_headers)
    assert resp.status_code == 200
    assert resp.mimetype == "text/plain"

    text = resp.get_data(as_text=True)
    assert "VASTRAVERSE" in text
    assert f"Order #: {order['id']}" in text
    assert "Subtotal (2 items):" in text
    assert "₹2,599.00" in text
    assert "Shipping:" in text and "FREE" in text
    assert "Thank you for shopping with VastraVerse!" in text


@pytest.mark.parametrize("overrides", [{"quantity": 10**20}, {"price": 1e30}, {"product_id": 10**20}])
def test_oversized_order_line_is_rejected(client, kurta, overrides):
    order_line = line(kurta, overrides.get("quantity", 1), overrides.get("price"))
    if "product_id" in overrides:
        order_line["product_id"] = overrides["product_id"]

    resp = client.post("/api/orders", json=order_payload(order_line))
    assert resp.status_code == 400
    assert client.get(f"/api/products/{kurta['id']}").get_json()["data"]["product"]["stock"] == 5
