"""Test fixtures for the Finance Tracker API tests."""

from typing import Dict

import pytest
from fastapi.testclient import TestClient

from finance_tracker_api.app.core import security
from finance_tracker_api.app.core.config import settings
from finance_tracker_api.app.main import create_app


API = "/api/v1"


@pytest.fixture
def client(tmp_path, monkeypatch) -> TestClient:
    """Application client backed by a fresh SQLite file per test."""
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "test.db"))
    # Hashing cost is irrelevant for tests.
    monkeypatch.setattr(security, "PBKDF2_ITERATIONS", 1_000)
    with TestClient(create_app()) as test_client:
        yield test_client


def register_and_login(client: TestClient, email: str, password: str = "secret") -> Dict[str, str]:
    """Create a user and return the auth headers for it."""
    response = client.post(f"{API}/users/", json={"email": email, "password": password})
    assert response.status_code == 201, response.text
    response = client.post(f"{API}/users/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth_headers(client: TestClient) -> Dict[str, str]:
    return register_and_login(client, "alice@example.com")


@pytest.fixture
def other_headers(client: TestClient) -> Dict[str, str]:
    return register_and_login(client, "bob@example.com")


def create_account(client: TestClient, headers: Dict[str, str], name: str = "Checking") -> Dict:
    response = client.post(f"{API}/accounts/", json={"name": name}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_category(client: TestClient, headers: Dict[str, str], name: str = "Groceries") -> Dict:
    response = client.post(f"{API}/categories/", json={"name": name}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_transaction(client: TestClient, headers: Dict[str, str], **fields) -> Dict:
    payload = {"amount": -10_000, "payee": "Corner Grocery", "date": "2024-03-01"}
    payload.update(fields)
    response = client.post(f"{API}/transactions/", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]
