import pytest


def test_list_products_newest_first(client, make_product):
    first = make_product(name="First Kurta")
    second = make_product(name="Second Kurta")

    resp = client.get("/api/products")
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["count"] == 2
    ids = [p["id"] for p in body["data"]["products"]]
    assert ids == [second["id"], first["id"]]


def test_list_products_pagination(client, make_product):
    for i in range(3):
        make_product(name=f"Kurta {i}")

    body = client.get("/api/products?limit=2&offset=0").get_json()
    pagination = body["data"]["pagination"]
    assert pagination["count"] == 2
    assert pagination["total"] == 3
    assert pagination["has_more"] is True


def test_create_product_requires_admin(client, customer_headers):
    resp = client.post(
        "/api/products",
        json={"name": "X", "description": "Y", "price": 10, "category": "Z", "image": "i.jpg"},
        headers=customer_headers,
    )
    assert resp.status_code == 403
    assert resp.get_json()["message"] == "Admin access required"


def test_create_product_stores_price_exactly(make_product):
    product = make_product(price=1299.5)
    assert product["price"] == 1299.5
    assert product["price_cents"] == 129950
    assert product["brand"] == "VastraVerse"
    assert product["sizes"] == ["M", "L"]
    assert product["in_stock"] is True


@pytest.mark.parametrize("price", [0, -10])
def test_create_product_rejects_non_positive_price(client, admin_headers, price):
    resp = client.post(
        "/api/products",
        json={"name": "X", "description": "Y", "price": price, "category": "Z", "image": "i.jpg"},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Price must be greater than 0"


def test_create_product_rejects_negative_stock(client, admin_headers):
    resp = client.post(
        "/api/products",
        json={"name": "X", "description": "Y", "price": 10, "category": "Z", "image": "i.jpg", "stock": -1},
        headers=admin_headers,
    )
    assert resp.status_code == 400


def test_get_product_not_found(client):
    resp = client.get("/api/products/9999")
    body = resp.get_json()
    assert resp.status_code == 404
    assert body["success"] is False
    assert body["message"] == "Product not found"


def test_category_listing_is_case_insensitive(client, make_product):
    make_product(category="Sarees", collection="women")
    make_product(category="Kurtas")

    body = client.get("/api/products/category/sarees").get_json()
    assert body["count"] == 1
    assert body["data"]["products"][0]["category"] == "Sarees"


def test_search_matches_name_description_and_category(client, make_product):
    make_product(name="Banarasi Silk Saree", description="Zari border", category="Sarees", collection="women")
    make_product(name="Denim Jeans", description="Stretch denim", category="Jeans")

    assert client.get("/api/products/search?q=SILK").get_json()["count"] == 1
    assert client.get("/api/products/search?q=zari").get_json()["count"] == 1
    assert client.get("/api/products/search?q=jeans").get_json()["count"] == 1
    assert client.get("/api/products/search?q=VastraVerse").get_json()["count"] == 2


def test_search_requires_query(client):
    resp = client.get("/api/products/search")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Please provide a search query"


def test_collection_views(client, make_product):
    kurta = make_product(name="Kurta", collection="men")
    saree = make_product(name="Saree", collection="women")

    men = client.get("/api/products/men").get_json()["data"]["products"]
    women = client.get("/api/products/women").get_json()["data"]["products"]
    assert [p["id"] for p in men] == [kurta["id"]]
    assert [p["id"] for p in women] == [saree["id"]]

    assert client.get(f"/api/products/women/{saree['id']}").status_code == 200
    assert client.get(f"/api/products/men/{saree['id']}").status_code == 404

    body = client.get("/api/products/women/search?q=saree").get_json()
    assert body["count"] == 1
    assert client.get("/api/products/men/search?q=saree").get_json()["count"] == 0


def test_unknown_collection_is_rejected(client):
    resp = client.get("/api/products/kids/search?q=shirt")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == 'Invalid collection. Use "men" or "women"'


def test_update_product_partial(client, admin_headers, make_product):
    product = make_product(price=999)

    resp = client.put(
        f"/api/products/{product['id']}",
        json={"price": 899.99, "stock": 3},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    updated = resp.get_json()["data"]["product"]
    assert updated["price_cents"] == 89999
    assert updated["stock"] == 3
    assert updated["name"] == product["name"]


def test_update_product_rejects_zero_price(client, admin_headers, make_product):
    product = make_product()
    resp = client.put(f"/api/products/{product['id']}", json={"price": 0}, headers=admin_headers)
    assert resp.status_code == 400


def test_update_missing_product(client, admin_headers):
    resp = client.put("/api/products/9999", json={"stock": 1}, headers=admin_headers)
    assert resp.status_code == 404


def test_delete_product_and_delete_all(client, admin_headers, make_product):
    first = make_product()
    make_product()
    make_product()

    assert client.delete(f"/api/products/{first['id']}", headers=admin_headers).status_code == 200
    assert client.delete(f"/api/products/{first['id']}", headers=admin_headers).status_code == 404

    resp = client.delete("/api/products/all", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["deleted"] == 2
    assert client.get("/api/products").get_json()["count"] == 0


def test_stock_never_goes_negative(client, admin_headers, make_product):
    product = make_product(stock=3)
    url = f"/api/products/{product['id']}/stock"

    assert client.post(url, json={"quantity": 2}, headers=admin_headers).status_code == 200

    resp = client.post(url, json={"quantity": 2}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.get_json()["error_code"] == "INSUFFICIENT_STOCK"

    resp = client.post(url, json={"quantity": 1}, headers=admin_headers)
    assert resp.get_json()["data"]["product"]["stock"] == 0
    assert resp.get_json()["data"]["product"]["in_stock"] is False


def test_stock_decrement_unknown_product(client, admin_headers):
    resp = client.post("/api/products/9999/stock", json={"quantity": 1}, headers=admin_headers)
    assert resp.status_code == 404


def test_unknown_route_uses_json_envelope(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json()["database"] == "reachable"
    assert resp.headers["X-Request-Id"]


def test_offset_without_limit_still_pages(client, make_product):
    oldest = make_product(name="Kurta 0")
    for i in range(1, 3):
        make_product(name=f"Kurta {i}")

    body = client.get("/api/products?offset=2").get_json()
    assert body["count"] == 1
    assert body["data"]["products"][0]["id"] == oldest["id"]
    assert body["data"]["pagination"]["offset"] == 2
    assert body["data"]["pagination"]["total"] == 3


def test_search_treats_wildcards_literally(client, make_product):
    make_product(name="Cotton Kurta")
    make_product(name="Flat 50% Off Dupatta", collection="women")

    assert client.get("/api/products/search?q=%25").get_json()["count"] == 1
    assert client.get("/api/products/search?q=_").get_json()["count"] == 0


@pytest.mark.parametrize("field, value", [("price", 1e30), ("stock", 10**20)])
def test_create_product_rejects_oversized_numbers(client, admin_headers, field, value):
    payload = {"name": "X", "description": "Y", "price": 10, "category": "Z", "image": "i.jpg"}
    payload[field] = value
    resp = client.post("/api/products", json=payload, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.get_json()["error_code"] == "VALIDATION_ERROR"
