import hashlib
from datetime import timedelta
from urllib.parse import parse_qs, urlparse

import pytest
from conftest import USER_PASSWORD, reload

from extensions import db
from models import User
from services import credentials
from services.errors import InvalidToken, ValidationError
from utils.clock import utcnow


def token_from(issue):
    return parse_qs(urlparse(issue.reset_link).query)["token"][0]


def login(client, username, password):
    return client.post("/api/login", json={"username": username, "password": password})


def test_login_logout_and_current_user(client, make_user):
    make_user()

    assert client.get("/api/user").status_code == 401

    response = login(client, "user", USER_PASSWORD)
    assert response.status_code == 200
    assert response.get_json()["username"] == "user"
    assert "passwordHash" not in response.get_json()

    me = client.get("/api/user")
    assert me.status_code == 200
    assert me.get_json()["isAdmin"] is False

    assert client.post("/api/logout").status_code == 200
    assert client.get("/api/user").status_code == 401


def test_wrong_password_is_unauthorized(client, make_user):
    make_user()

    response = login(client, "user", "not-the-password")

    assert response.status_code == 401
    assert response.get_json()["message"] == "Invalid username or password"
    assert login(client, "ghost", USER_PASSWORD).status_code == 401


def test_register_creates_regular_user(client):
    response = client.post(
        "/api/register",
        json={"username": "collector", "password": "brushstroke9", "email": "Collector@ArtLovers.org", "isAdmin": True},
    )

    assert response.status_code == 201
    body = response.get_json()
    assert body["isAdmin"] is False
    assert body["email"] == "collector@artlovers.org"
    assert client.get("/api/user").get_json()["username"] == "collector"


def test_register_rejects_duplicates_and_weak_passwords(client, make_user):
    make_user()

    duplicate = client.post("/api/register", json={"username": "user", "password": "brushstroke9"})
    weak = client.post("/api/register", json={"username": "painter", "password": "short"})
    same_as_name = client.post("/api/register", json={"username": "painter99", "password": "PAINTER99"})

    assert duplicate.status_code == 400
    assert duplicate.get_json()["message"] == "Username already exists"
    assert weak.status_code == 400
    assert weak.get_json()["message"] == "Password must be at least 8 characters long"
    assert same_as_name.status_code == 400


def test_forgot_password_does_not_reveal_accounts(client, make_user):
    make_user()

    known = client.post("/api/forgot-password", json={"email": "user@x.com"})
    unknown = client.post("/api/forgot-password", json={"email": "nobody@x.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.get_json() == unknown.get_json()
    assert "resetLink" not in known.get_json()


def test_unknown_email_issues_no_token(app, make_user):
    user = make_user()

    assert credentials.request_password_reset("nobody@x.com", "http://localhost") is None

    stored = reload(User, user.id)
    assert stored.reset_token is None
    assert stored.reset_token_expiry is None


def test_reset_token_is_stored_hashed(app, make_user, monkeypatch):
    user = make_user()
    monkeypatch.setattr(credentials, "send_email", lambda *args: True)

    issue = credentials.request_password_reset("user@x.com", "https://gallery.local/")

    token = token_from(issue)
    stored = reload(User, user.id)
    assert issue.reset_link.startswith("https://gallery.local/reset-password?token=")
    assert issue.delivered is True
    assert stored.reset_token == hashlib.sha256(token.encode()).hexdigest()
    assert stored.reset_token != token
    assert stored.reset_token_expiry > utcnow() + timedelta(minutes=59)


def test_reset_scenario_changes_password(client, make_user):
    make_user()
    issue = credentials.request_password_reset("user@x.com", "http://localhost")

    response = client.post(
        "/api/reset-password",
        json={"token": token_from(issue), "newPassword": "longenough1"},
    )

    assert response.status_code == 200
    assert login(client, "user", "longenough1").status_code == 200
    assert login(client, "user", USER_PASSWORD).status_code == 401


def test_reset_token_is_single_use(app, make_user):
    make_user()
    token = token_from(credentials.request_password_reset("user@x.com", "http://localhost"))

    credentials.reset_password(token, "first-new-pass")

    with pytest.raises(InvalidToken):
        credentials.reset_password(token, "second-new-pass")


def test_reset_token_expires(app, make_user, monkeypatch):
    make_user()
    token = token_from(credentials.request_password_reset("user@x.com", "http://localhost"))
    later = utcnow() + timedelta(hours=1, seconds=1)
    monkeypatch.setattr(credentials, "utcnow", lambda: later)

    with pytest.raises(InvalidToken):
        credentials.reset_password(token, "longenough1")


def test_new_request_replaces_previous_token(app, make_user):
    make_user()
    first = token_from(credentials.request_password_reset("user@x.com", "http://localhost"))
    second = token_from(credentials.request_password_reset("user@x.com", "http://localhost"))

    with pytest.raises(InvalidToken):
        credentials.reset_password(first, "longenough1")
    credentials.reset_password(second, "longenough1")


def test_weak_password_keeps_token_usable(app, make_user):
    user = make_user()
    token = token_from(credentials.request_password_reset("user@x.com", "http://localhost"))

    with pytest.raises(ValidationError):
        credentials.reset_password(token, "short")

    assert reload(User, user.id).reset_token is not None
    credentials.reset_password(token, "longenough1")


def test_reset_endpoint_rejects_bad_token(client):
    response = client.post("/api/reset-password", json={"token": "deadbeef", "newPassword": "longenough1"})

    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid or expired reset token"


def test_reset_link_returned_only_in_debug_without_mail(app, client, make_user):
    make_user()

    app.config["DEBUG"] = True
    debug_body = client.post("/api/forgot-password", json={"email": "user@x.com"}).get_json()
    app.config["DEBUG"] = False
    normal_body = client.post("/api/forgot-password", json={"email": "user@x.com"}).get_json()

    assert "/reset-password?token=" in debug_body["resetLink"]
    assert "resetLink" not in normal_body


def test_legacy_hash_is_upgraded_on_login(client, make_user):
    user = make_user()
    salt = "a1b2c3d4e5f6"
    digest = hashlib.scrypt(b"legacy-pass-1", salt=salt.encode(), n=16384, r=8, p=1, dklen=64).hex()
    user.password_hash = f"{digest}.{salt}"
    db.session.commit()

    assert login(client, "user", "wrong-pass-1").status_code == 401
    assert login(client, "user", "legacy-pass-1").status_code == 200
    assert reload(User, user.id).password_hash.startswith("scrypt:")
    assert login(client, "user", "legacy-pass-1").status_code == 200


def test_admin_gate(client, user_client, admin_client, make_artwork):
    artwork = make_artwork()

    assert client.delete(f"/api/artworks/{artwork.id}").status_code == 401
    forbidden = user_client.delete(f"/api/artworks/{artwork.id}")
    assert forbidden.status_code == 403
    assert forbidden.get_json()["message"] == "Administrator privileges required"
    assert admin_client.delete(f"/api/artworks/{artwork.id}").status_code == 204
