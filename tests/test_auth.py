"""Tests for auth: register, login, me, logout."""

import pytest
from fastapi.testclient import TestClient

from server.app import app
from server.auth import SESSION_COOKIE
from server.dependencies import get_settings


@pytest.fixture
def client(settings):
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_register_login_me_logout(client):
    """Register, login, me, logout flow."""
    # Register
    r = client.post("/auth/register", json={"email": "test@example.com", "password": "password123"})
    assert r.status_code == 200
    assert r.json()["email"] == "test@example.com"
    assert SESSION_COOKIE in r.cookies

    # Me
    r = client.get("/auth/me")
    assert r.status_code == 200
    assert r.json()["email"] == "test@example.com"

    # Logout
    r = client.post("/auth/logout")
    assert r.status_code == 200

    # Me after logout
    client.cookies.clear()
    r = client.get("/auth/me")
    assert r.status_code == 401


def test_logged_out_token_is_rejected(client):
    r = client.post("/auth/register", json={"email": "t@example.com", "password": "password123"})
    token = r.cookies[SESSION_COOKIE]
    client.post("/auth/logout")
    client.cookies.clear()
    r = client.get("/auth/me", cookies={SESSION_COOKIE: token})
    assert r.status_code == 401


def test_login(client):
    """Login with correct credentials."""
    client.post("/auth/register", json={"email": "u@x.com", "password": "secret123"})
    client.cookies.clear()
    r = client.post("/auth/login", json={"email": "U@x.com ", "password": "secret123"})
    assert r.status_code == 200
    assert SESSION_COOKIE in r.cookies


def test_login_wrong_password(client):
    client.post("/auth/register", json={"email": "u@x.com", "password": "secret123"})
    client.cookies.clear()
    r = client.post("/auth/login", json={"email": "u@x.com", "password": "wrong-one"})
    assert r.status_code == 401


def test_register_duplicate_email(client):
    """Register with existing email fails."""
    client.post("/auth/register", json={"email": "dup@x.com", "password": "password123"})
    r = client.post("/auth/register", json={"email": "dup@x.com", "password": "other456"})
    assert r.status_code == 400
