"""
Модуль: `utils/csrf.py`.
Назначение: Защита мутирующих запросов к API токеном из сессии.

Клиент получает токен через `GET /api/csrf-token` и возвращает его
в заголовке `X-CSRF-Token` (или в поле формы `csrf_token`).
"""

import hmac
import secrets

from flask import jsonify, request, session
from flask_babel import gettext as _

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "TRACE"})
SESSION_KEY = "csrf_token"


def issue_token() -> str:
    """Токен текущей сессии; создаётся при первом обращении."""
    return session.setdefault(SESSION_KEY, secrets.token_urlsafe(32))


def token_matches(expected: str | None, provided: str | None) -> bool:
    return bool(expected and provided) and hmac.compare_digest(expected, provided)


def needs_check(method: str, path: str) -> bool:
    return method not in SAFE_METHODS and path.startswith("/api/")


def init_csrf(app) -> None:
    """Подключает проверку токена и выдачу токена клиенту."""

    @app.before_request
    def enforce_csrf():
        """Мутирующие запросы к API должны нести X-CSRF-Token из сессии."""
        if not app.config["CSRF_ENABLED"] or not needs_check(request.method, request.path):
            return None

        provided = request.headers.get("X-CSRF-Token") or request.form.get(SESSION_KEY)
        if token_matches(session.get(SESSION_KEY), provided):
            return None
        return jsonify({"message": _("Invalid CSRF token. Refresh the page and try again.")}), 400

    @app.get("/api/csrf-token")
    def csrf_token():
        return jsonify({"csrfToken": issue_token()})
