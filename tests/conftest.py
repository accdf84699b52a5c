"""
Shared fixtures: an app wired to a throwaway SQLite database.
"""

import pytest
from fastapi.testclient import TestClient

from config.settings import Settings
from main import create_app

PASSWORD = "abc12345"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret="tests-secret-key",
        bcrypt_rounds=4,
    )


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


def sign_up(client: TestClient, email: str = "a@b.com", name: str = "Al", password: str = PASSWORD) -> dict:
    """Register an account and return the response body."""
    response = client.post(
        "/users/sign_up",
        json={
            "email": email,
            "password": password,
            "confirmPassword": password,
            "name": name,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(client) -> dict:
    body = sign_up(client, email="alice@mail.com", name="Alice")
    return {"token": body["token"], "id": body["user"]["id"], "headers": auth_headers(body["token"])}


@pytest.fixture
def bob(client) -> dict:
    body = sign_up(client, email="bob@mail.com", name="Bob")
    return {"token": body["token"], "id": body["user"]["id"], "headers": auth_headers(body["token"])}
