import pytest

from vastraverse.app import create_app
from vastraverse.config import APIConfig, AppConfig, Config, DatabaseConfig, SecurityConfig

ADMIN_EMAIL = "admin@example.com"
PASSWORD = "secret123"


def make_config(tmp_path) -> Config:
    return Config(
        database=DatabaseConfig(url=f"sqlite:///{tmp_path / 'test.db'}"),
        security=SecurityConfig(
            jwt_secret_key="test-secret",
            bcrypt_rounds=4,
            admin_emails=[ADMIN_EMAIL],
        ),
        api=APIConfig(),
        app=AppConfig(environment="testing", log_level="WARNING"),
    )


@pytest.fixture
def config(tmp_path):
    return make_config(tmp_path)


@pytest.fixture
def app(config):
    app = create_app(config)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    return app.extensions["vastraverse"]


def register(client, email, name="Asha Verma", password=PASSWORD):
    resp = client.post(
        "/api/auth/register",
        json={
            "name": name,
            "email": email,
            "password": password,
            "phone": "+91 98765 43210",
            "address": "12 MG Road, Bengaluru",
        },
    )
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["data"]


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client):
    return auth_header(register(client, ADMIN_EMAIL, name="Store Admin")["token"])


@pytest.fixture
def customer(client):
    return register(client, "asha@example.com")


@pytest.fixture
def customer_headers(customer):
    return auth_header(customer["token"])


@pytest.fixture
def make_product(client, admin_headers):
    def _make(**overrides):
        payload = {
            "name": "Classic Cotton Kurta",
            "description": "Handloom cotton kurta",
            "price": 1299,
            "category": "Kurtas",
            "image": "https://img.example.com/kurta.jpg",
            "stock": 10,
            "collection": "men",
            "sizes": ["M", "L"],
        }
        payload.update(overrides)
        resp = client.post("/api/products", json=payload, headers=admin_headers)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]["product"]
    return _make
