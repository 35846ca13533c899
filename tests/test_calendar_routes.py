from urllib.parse import parse_qs, urlparse

import pytest

from frontdesk.routes import calendar as calendar_routes
from frontdesk.services.calendar_service import load_tokens, store_tokens

from .factories import make_org, make_staff


def redirect_params(response) -> dict:
    assert response.status_code == 307
    location = urlparse(response.headers["location"])
    assert location.path == "/employee/meetings"
    return {k: v[0] for k, v in parse_qs(location.query).items()}


@pytest.fixture
def host(db):
    return make_staff(db, make_org(db), "Hank Host", clerk_user_id="user_hank")


def test_provider_error_is_passed_through(client):
    response = client.get("/api/calendar/google/callback", params={"error": "access_denied"})
    assert redirect_params(response) == {"error": "access_denied"}


def test_missing_code_or_state(client):
    response = client.get("/api/calendar/outlook/callback", params={"code": "abc"})
    assert redirect_params(response) == {"error": "missing_parameters"}


def test_unknown_staff(client, host):
    response = client.get("/api/calendar/google/callback", params={"code": "abc", "state": "9999"})
    assert redirect_params(response) == {"error": "staff_not_found"}


def test_successful_callback_stores_encrypted_tokens(client, db, host, monkeypatch):
    async def fake_exchange(provider, code):
        assert (provider, code) == ("google", "abc")
        return {"access_token": "at-1", "refresh_token": "rt-1", "expires_at": 4102444800}

    monkeypatch.setattr(calendar_routes, "exchange_code_for_tokens", fake_exchange)
    response = client.get("/api/calendar/google/callback", params={"code": "abc", "state": str(host.id)})

    assert redirect_params(response) == {"calendar_connected": "google"}
    db.refresh(host)
    assert host.google_calendar_connected is True
    assert "at-1" not in host.google_calendar_token
    assert load_tokens(host, "google")["access_token"] == "at-1"


def test_failed_exchange_redirects_with_error(client, host, monkeypatch):
    async def failing_exchange(provider, code):
        raise RuntimeError("invalid_grant")

    monkeypatch.setattr(calendar_routes, "exchange_code_for_tokens", failing_exchange)
    response = client.get("/api/calendar/outlook/callback", params={"code": "abc", "state": str(host.id)})
    assert redirect_params(response) == {"error": "invalid_grant"}


def test_disconnect_requires_sign_in(client):
    response = client.post("/api/calendar/disconnect", json={"provider": "google"})
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_disconnect_rejects_unknown_provider(client, browser, host):
    browser.login("user_hank")
    response = client.post("/api/calendar/disconnect", json={"provider": "icloud"})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid provider"}


def test_disconnect_without_staff_profile(client, browser, host):
    browser.login("user_nobody")
    response = client.post("/api/calendar/disconnect", json={"provider": "outlook"})
    assert response.status_code == 404


def test_disconnect_revokes_google_and_clears_tokens(client, db, browser, host, monkeypatch):
    store_tokens(db, host, "google", {"access_token": "at-1", "refresh_token": "rt-1", "expires_at": 0})
    revoked = []

    async def fake_revoke(token):
        revoked.append(token)
        return True

    monkeypatch.setattr(calendar_routes, "revoke_google_token", fake_revoke)
    browser.login("user_hank")
    response = client.post("/api/calendar/disconnect", json={"provider": "google"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Google Calendar disconnected"}
    assert revoked == ["at-1"]
    db.refresh(host)
    assert host.google_calendar_connected is False
    assert host.google_calendar_token is None
    assert host.google_calendar_refresh_token is None
