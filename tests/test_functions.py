import json

import pytest

from conftest import PASSWORD, make_config
from vastraverse import functions


@pytest.fixture
def fn_services(tmp_path):
    services = functions.configure(make_config(tmp_path))
    yield services
    functions._services = None


def event(method, body=None, query=None, headers=None):
    return {
        "httpMethod": method,
        "body": json.dumps(body) if body is not None else None,
        "queryStringParameters": query,
        "headers": headers or {},
    }


def parse(response):
    return response["statusCode"], json.loads(response["body"])


REGISTRATION = {
    "name": "Asha Verma",
    "email": "asha@example.com",
    "password": PASSWORD,
    "phone": "+91 98765 43210",
    "address": "12 MG Road, Bengaluru",
}


def test_wrong_method_is_405(fn_services):
    status, body = parse(functions.register_handler(event("GET")))
    assert status == 405
    assert body["message"] == "Method Not Allowed"


def test_register_and_login(fn_services):
    status, body = parse(functions.register_handler(event("POST", REGISTRATION)))
    assert status == 201
    assert body["data"]["user"]["email"] == "asha@example.com"

    status, body = parse(functions.register_handler(event("POST", REGISTRATION)))
    assert status == 400

    status, body = parse(
        functions.login_handler(event("POST", {"email": "asha@example.com", "password": PASSWORD}))
    )
    assert status == 200
    assert body["data"]["token"]


def test_invalid_json_body(fn_services):
    response = functions.login_handler({"httpMethod": "POST", "body": "{not json"})
    assert response["statusCode"] == 400


def test_create_order_and_fetch_by_email(fn_services):
    product_id = fn_services.products.create_product(
        {
            "name": "Silk Saree",
            "description": "Pure silk",
            "price": 5499,
            "category": "Sarees",
            "image": "saree.jpg",
            "stock": 3,
            "collection": "women",
        }
    )["id"]

    _, registered = parse(functions.register_handler(event("POST", REGISTRATION)))
    headers = {"Authorization": f"Bearer {registered['data']['token']}"}

    status, body = parse(
        functions.create_order_handler(
            event(
                "POST",
                {
                    "user_name": "Asha Verma",
                    "user_email": "asha@example.com",
                    "user_phone": "+91 98765 43210",
                    "location": "Bengaluru",
                    "products": [
                        {"product_id": product_id, "product_name": "Silk Saree", "product_price": 5499, "quantity": 2}
                    ],
                },
                headers=headers,
            )
        )
    )
    assert status == 201
    assert body["data"]["order"]["total_cents"] == 1099800
    assert fn_services.products.get_product(product_id)["stock"] == 1

    status, body = parse(
        functions.get_user_orders_handler(event("GET", query={"email": "asha@example.com"}, headers=headers))
    )
    assert status == 200
    assert body["data"]["count"] == 1


def test_get_user_orders_requires_email(fn_services):
    status, body = parse(functions.get_user_orders_handler(event("GET", query={})))
    assert status == 400
    assert body["message"] == "Email is required"


def test_get_user_orders_requires_token(fn_services):
    status, _ = parse(functions.get_user_orders_handler(event("GET", query={"email": "asha@example.com"})))
    assert status == 401


def test_unexpected_error_is_500(fn_services, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(fn_services.auth, "login", boom)
    status, body = parse(functions.login_handler(event("POST", {"email": "asha@example.com", "password": PASSWORD})))
    assert status == 500
    assert body["success"] is False
