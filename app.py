"""
Название: «Atelier»
Назначение: REST API художественной галереи – витрина работ, корзина и заказы,
запись на мастер-классы, административный раздел и восстановление пароля.
Язык: Python (Flask)
"""

import os

from flask import Flask, jsonify, request
from flask_babel import gettext as _
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from config import Config
from extensions import db, login_manager, cors
import models  # noqa: F401 - регистрирует модели для db.create_all()
from commands import register_commands
from routes.auth import register_routes as register_auth_routes
from routes.artworks import register_routes as register_artwork_routes
from routes.workshops import register_routes as register_workshop_routes
from routes.orders import register_routes as register_order_routes
from routes.site import register_routes as register_site_routes
from services.errors import ServiceError
from utils.csrf import init_csrf
from utils.i18n import init_i18n
from utils.logging_setup import configure_logging, register_request_logging
from utils.rate_limit import InMemoryRateLimiter


def _api_error(message: str, status: int = 400):
    return jsonify({"message": message}), status


def create_app(test_config: dict | None = None) -> Flask:
    """Фабрика приложения, собирающая все модули воедино."""
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)
    app.config["UPLOAD_FOLDER"] = os.path.abspath(app.config["UPLOAD_FOLDER"])

    configure_logging(app)

    # Инициализация расширений
    db.init_app(app)
    login_manager.init_app(app)

    init_i18n(app)

    if app.config["CORS_ENABLED"]:
        cors.init_app(
            app,
            resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
            supports_credentials=True,
        )

    InMemoryRateLimiter(app)

    # Гарантируем наличие служебных директорий
    os.makedirs(app.instance_path, exist_ok=True)
    os.makedirs(app.config["UPLOAD_FOLDER"], exist_ok=True)

    # Регистрация роутов по модулям
    register_auth_routes(app)
    register_artwork_routes(app)
    register_workshop_routes(app)
    register_order_routes(app)
    register_site_routes(app)
    register_commands(app)
    register_request_logging(app)

    with app.app_context():
        # Создаем отсутствующие таблицы (без изменения существующих колонок)
        db.create_all()

    @login_manager.unauthorized_handler
    def handle_unauthorized():
        return _api_error(_("Authentication required"), 401)

    init_csrf(app)

    @app.errorhandler(ServiceError)
    def handle_service_error(error: ServiceError):
        db.session.rollback()
        if error.status_code >= 500:
            app.logger.error("Ошибка сервиса: %s", error.message)
        return _api_error(error.message, error.status_code)

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(_error):
        limit_mb = app.config["MAX_CONTENT_LENGTH"] // (1024 * 1024)
        return _api_error(_("File too large. Maximum size is %(size)s MB", size=limit_mb), 413)

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return _api_error(error.description or error.name, error.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        # Стек вызовов только в журнал, клиенту – общее сообщение
        db.session.rollback()
        app.logger.exception("Необработанная ошибка при запросе %s %s", request.method, request.path)
        return _api_error(_("Internal server error"), 500)

    @app.after_request
    def apply_security_headers(response):
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        response.headers.setdefault("Permissions-Policy", "camera=(), microphone=(), geolocation=()")
        return response

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}, 200

    return app


app = create_app()


if __name__ == "__main__":
    is_production = os.environ.get("FLASK_ENV", "").lower() == "production"
    app.run(debug=not is_production)
