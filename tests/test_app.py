import logging

from flask import g
from flask_babel import get_locale
from werkzeug.datastructures import LanguageAccept

from models import Artwork, SiteSetting, User, Workshop
from services import credentials
from utils.i18n import negotiate_language
from utils.rate_limit import InMemoryRateLimiter


def test_healthz_and_security_headers(client):
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert "Referrer-Policy" in response.headers


def test_http_errors_are_json(client):
    not_found = client.get("/api/does-not-exist")
    wrong_method = client.delete("/api/workshops")

    assert not_found.status_code == 404
    assert "message" in not_found.get_json()
    assert wrong_method.status_code == 405
    assert "message" in wrong_method.get_json()


def test_unexpected_error_hides_details(app, client):
    def explode():
        raise RuntimeError("database password is hunter2")

    app.add_url_rule("/api/explode", "explode", explode)

    response = client.get("/api/explode")

    assert response.status_code == 500
    assert response.get_json() == {"message": "Internal server error"}


def test_csrf_token_required_when_enabled(app, client):
    app.config["CSRF_ENABLED"] = True

    rejected = client.post("/api/subscribers", json={"email": "fan@artlovers.org"})
    assert rejected.status_code == 400
    assert rejected.get_json()["message"].startswith("Invalid CSRF token")

    token = client.get("/api/csrf-token").get_json()["csrfToken"]
    accepted = client.post(
        "/api/subscribers",
        json={"email": "fan@artlovers.org"},
        headers={"X-CSRF-Token": token},
    )
    assert accepted.status_code == 201

    forged = client.post(
        "/api/subscribers",
        json={"email": "fan@artlovers.org"},
        headers={"X-CSRF-Token": "forged"},
    )
    assert forged.status_code == 400

    # Чтение не требует токена
    assert client.get("/api/artworks").status_code == 200


def test_login_is_rate_limited(app, client):
    app.config["RATELIMIT_ENABLED"] = True
    app.extensions["rate_limiter"].reset()

    statuses = [
        client.post("/api/login", json={"username": "ghost", "password": "guess-123"}).status_code
        for _ in range(11)
    ]

    assert statuses[:10] == [401] * 10
    assert statuses[10] == 429


def test_rate_limiter_window_and_switch(app):
    now = [0.0]
    limiter = InMemoryRateLimiter(clock=lambda: now[0])

    assert [limiter.hit("login:1.2.3.4", limit=2, window_seconds=60) for _ in range(3)] == [True, True, False]
    now[0] = 60.0
    assert limiter.hit("login:1.2.3.4", limit=2, window_seconds=60) is True
    assert limiter.hit("login:5.6.7.8", limit=0, window_seconds=60) is False

    app.config["RATELIMIT_ENABLED"] = False
    with app.test_request_context("/api/login"):
        assert all(not limiter.exceeded("login", limit=1, window_seconds=60) for _ in range(5))

    app.config["RATELIMIT_ENABLED"] = True
    with app.test_request_context("/api/login", headers={"X-Forwarded-For": "9.9.9.9, 10.0.0.1"}):
        assert limiter.exceeded("login", limit=1, window_seconds=60) is False
        assert limiter.exceeded("login", limit=1, window_seconds=60) is True
        assert limiter.exceeded("login", limit=1, window_seconds=60, identity="curator") is False


def test_api_requests_are_logged(app, client, caplog):
    caplog.set_level(logging.INFO, logger=app.logger.name)

    client.get("/api/artworks")

    assert any("GET /api/artworks 200" in record.getMessage() for record in caplog.records)


def test_language_negotiation_order():
    supported = ("en", "ru")
    accept = LanguageAccept([("ru-RU", 1), ("ru", 0.9), ("en", 0.5)])

    assert negotiate_language(supported, "en", accept_languages=accept) == "ru"
    assert negotiate_language(supported, "en", cookie_lang="en", accept_languages=accept) == "en"
    assert negotiate_language(supported, "en", query_lang="ru_RU", cookie_lang="en") == "ru"
    assert negotiate_language(supported, "en", query_lang="de", accept_languages=LanguageAccept([("de", 1)])) == "en"


def test_request_locale_follows_query_parameter(app):
    app.config["SUPPORTED_LANGUAGES"] = ("en", "ru")

    with app.test_request_context("/api/artworks?lang=ru", headers={"Accept-Language": "en"}):
        app.preprocess_request()
        assert g.lang == "ru"
        assert str(get_locale()) == "ru"

    with app.test_request_context("/api/artworks", headers={"Cookie": "site_lang=fr"}):
        app.preprocess_request()
        assert g.lang == "en"


def test_seed_is_idempotent(app):
    app.config["ADMIN_PASSWORD"] = "seed-admin-pass"
    runner = app.test_cli_runner()

    first = runner.invoke(args=["seed"])
    second = runner.invoke(args=["seed"])

    assert first.exit_code == 0, first.output
    assert second.exit_code == 0, second.output
    assert "Artworks already exist." in second.output
    assert Artwork.query.count() == 5
    assert Workshop.query.count() == 3
    assert SiteSetting.query.count() == len(app.config["DEFAULT_SITE_SETTINGS"])
    admins = User.query.filter_by(is_admin=True).all()
    assert [admin.username for admin in admins] == [app.config["ADMIN_USERNAME"]]
    assert all(w.capacity == w.spots_available for w in Workshop.query.all())


def test_create_admin_and_reset_password_commands(app):
    runner = app.test_cli_runner()

    assert runner.invoke(args=["init-db"]).exit_code == 0

    created = runner.invoke(args=["create-admin", "--username", "curator", "--password", "curator-pass-1"])
    assert created.exit_code == 0, created.output
    assert User.query.filter_by(username="curator").one().is_admin is True

    duplicate = runner.invoke(args=["create-admin", "--username", "curator", "--password", "curator-pass-1"])
    assert duplicate.exit_code != 0

    reset = runner.invoke(args=["reset-admin-password", "--username", "curator", "--password", "fresh-pass-22"])
    assert reset.exit_code == 0, reset.output
    assert credentials.authenticate("curator", "fresh-pass-22") is not None
    assert credentials.authenticate("curator", "curator-pass-1") is None

    missing = runner.invoke(args=["reset-admin-password", "--username", "nobody", "--password", "fresh-pass-22"])
    assert missing.exit_code != 0
    assert "User not found" in missing.output
