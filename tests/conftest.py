from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from storefront.config import Settings
from storefront.main import create_app

ADMIN_PASSWORD = "s3cret-pass"


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def admin_password():
    return ADMIN_PASSWORD


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def data_file(tmp_path) -> Path:
    return tmp_path / "data" / "orders.json"


@pytest.fixture()
def settings(data_file):
    return Settings(
        admin_password=ADMIN_PASSWORD,
        data_file=data_file,
        orders_database_url="",
        rate_limit_window_seconds=3600,
        rate_limit_max_posts=100,
        admin_token_ttl_seconds=0,
    )


@pytest.fixture()
def client(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def admin_token(client):
    response = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    # header-only from here on; drop the cookie so tests control how they authenticate
    client.cookies.clear()
    return response.json()["token"]


@pytest.fixture()
def admin_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture()
def minimal_payload():
    return {
        "name": "Amina Benali",
        "phone": "0551234567",
        "wilaya": "16 - Alger",
        "address": "12 Rue Didouche Mourad",
        "color": "Black",
        "size": "M",
        "qty": 2,
        "notes": "",
    }
