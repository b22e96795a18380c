"""
Программа: «Atelier» – веб-приложение художественной галереи.
Модуль: routes/auth.py – маршруты аутентификации и восстановления пароля.

Назначение модуля:
- Регистрация покупателей, вход и выход с использованием Flask-Login.
- Данные текущего пользователя для SPA-клиента.
- Восстановление пароля по одноразовой ссылке из письма.
- Загрузка пользователя по идентификатору для управления сессией.
"""

from flask import current_app, jsonify, request, session
from flask_babel import gettext as _
from flask_login import current_user, login_required, login_user, logout_user

from extensions import login_manager
from schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    parse_payload,
)
from services import credentials, storage
from services.errors import RateLimited, Unauthorized
from utils.csrf import SESSION_KEY as CSRF_SESSION_KEY
from utils.rate_limit import is_rate_limited


@login_manager.user_loader
def load_user(user_id):
    """Загружает пользователя сессии Flask-Login."""
    try:
        return storage.get_user(int(user_id))
    except (TypeError, ValueError):
        return None


def _reset_base_url() -> str:
    return current_app.config.get("PUBLIC_BASE_URL") or request.host_url.rstrip("/")


def register_routes(app):
    """Регистрирует маршруты модуля в приложении."""

    @app.post("/api/register")
    def register_user():
        """Регистрация покупателя с автоматическим входом."""
        if is_rate_limited("register", limit=10, window_seconds=15 * 60):
            raise RateLimited(_("Too many registration attempts. Try again in a few minutes."))

        payload = parse_payload(RegisterRequest, request.get_json(silent=True))
        user = credentials.register_user(
            payload.username.strip(),
            payload.password,
            email=payload.email,
        )
        login_user(user)
        return jsonify(user.to_dict()), 201

    @app.post("/api/login")
    def login():
        """Вход по имени и паролю."""
        if is_rate_limited("login_ip", limit=20, window_seconds=10 * 60):
            raise RateLimited(_("Too many login attempts. Try again later."))

        payload = parse_payload(LoginRequest, request.get_json(silent=True))

        username_key = payload.username.strip().lower() or "anonymous"
        if is_rate_limited("login_user", limit=10, window_seconds=10 * 60, identity=username_key):
            raise RateLimited(_("Too many login attempts for this user. Try again later."))

        user = credentials.authenticate(payload.username, payload.password)
        if user is None:
            raise Unauthorized(_("Invalid username or password"))

        login_user(user)
        current_app.logger.info("Вход пользователя #%s", user.id)
        return jsonify(user.to_dict())

    @app.post("/api/logout")
    @login_required
    def logout():
        logout_user()
        session.pop(CSRF_SESSION_KEY, None)
        return jsonify({"message": _("Logged out")}), 200

    @app.get("/api/user")
    def current_user_info():
        """Данные текущего пользователя."""
        if not current_user.is_authenticated:
            raise Unauthorized(_("Not authenticated"))
        return jsonify(current_user.to_dict())

    @app.post("/api/forgot-password")
    def forgot_password():
        """Запрос ссылки для сброса пароля."""
        if is_rate_limited("forgot_password_ip", limit=8, window_seconds=15 * 60):
            raise RateLimited(_("Too many requests. Try again later."))

        payload = parse_payload(ForgotPasswordRequest, request.get_json(silent=True))

        if is_rate_limited("forgot_password_email", limit=5, window_seconds=15 * 60, identity=payload.email.lower()):
            raise RateLimited(_("Too many requests for this email. Try again later."))

        issue = credentials.request_password_reset(payload.email, _reset_base_url())

        # Не раскрываем, существует ли аккаунт с таким email
        body = {
            "message": _(
                "If your email is registered with us, you will receive a password reset link shortly."
            )
        }
        if issue is not None and not issue.delivered and current_app.debug:
            body["resetLink"] = issue.reset_link
        return jsonify(body), 200

    @app.post("/api/reset-password")
    def reset_password():
        """Установка нового пароля по токену из письма."""
        if is_rate_limited("reset_password_ip", limit=20, window_seconds=15 * 60):
            raise RateLimited(_("Too many password reset attempts. Try again later."))

        payload = parse_payload(ResetPasswordRequest, request.get_json(silent=True))
        credentials.reset_password(payload.token, payload.new_password)
        return jsonify({"message": _("Password has been updated successfully")}), 200
