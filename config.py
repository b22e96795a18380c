"""
Программа: «Atelier» – веб-приложение художественной галереи.
Модуль: config.py – конфигурация приложения.

Назначение модуля:
- Определение базовых параметров приложения Flask (секретный ключ, строка подключения к БД).
- Настройка загрузки изображений (папка, максимальный размер, допустимые форматы).
- Параметры восстановления пароля, почты, журналирования и языка интерфейса.
"""

import os
import warnings


def _env(name: str, default, parse=str):
    """Значение переменной окружения, приведённое через `parse`; пустое или битое даёт default."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return parse(raw)
    except ValueError:
        return default


def _flag(raw: str) -> bool:
    return raw.lower() in {"1", "true", "yes", "on"}


def _csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _is_production() -> bool:
    """Определяет production-режим по FLASK_ENV."""
    return os.environ.get("FLASK_ENV", "").strip().lower() == "production"


class Config:
    """Базовая конфигурация приложения."""

    _PRODUCTION = _is_production()

    SECRET_KEY = os.environ.get("SECRET_KEY")
    if not SECRET_KEY:
        if _PRODUCTION:
            raise RuntimeError(
                "SECRET_KEY environment variable is required in production. "
                "Set a strong random value before starting the app."
            )
        SECRET_KEY = "dev-insecure-secret-key"
        warnings.warn(
            "SECRET_KEY is not set. Using insecure development fallback key.",
            RuntimeWarning,
            stacklevel=1,
        )

    SQLALCHEMY_DATABASE_URI = _env(
        "DATABASE_URL",
        "sqlite:////app/instance/gallery.db" if _PRODUCTION else "sqlite:///gallery.db",
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_COOKIE_SECURE = _env("SESSION_COOKIE_SECURE", _PRODUCTION, _flag)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = _env("SESSION_COOKIE_SAMESITE", "Lax")
    REMEMBER_COOKIE_SECURE = SESSION_COOKIE_SECURE
    REMEMBER_COOKIE_HTTPONLY = True
    REMEMBER_COOKIE_SAMESITE = SESSION_COOKIE_SAMESITE

    CORS_ENABLED = _env("CORS_ENABLED", False, _flag)
    CORS_ORIGINS = _env(
        "CORS_ORIGINS",
        ["http://127.0.0.1:5000", "http://localhost:5000", "http://localhost:5173"],
        _csv,
    )
    CSRF_ENABLED = _env("CSRF_ENABLED", True, _flag)
    RATELIMIT_ENABLED = _env("RATELIMIT_ENABLED", True, _flag)

    LOG_LEVEL = _env("LOG_LEVEL", "INFO").upper()

    UPLOAD_FOLDER = _env("UPLOAD_FOLDER", "uploads/images")
    UPLOAD_URL_PREFIX = "/uploads/images"
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024
    ALLOWED_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp"}
    ALLOWED_IMAGE_FORMATS = {"png", "jpeg", "gif", "webp"}
    MAX_IMAGE_PIXELS = _env("MAX_IMAGE_PIXELS", 40_000_000, int)

    PASSWORD_MIN_LENGTH = _env("PASSWORD_MIN_LENGTH", 8, int)
    PASSWORD_RESET_TOKEN_TTL_MINUTES = _env("PASSWORD_RESET_TOKEN_TTL_MINUTES", 60, int)
    PUBLIC_BASE_URL = _env("PUBLIC_BASE_URL", "").rstrip("/")

    SMTP_HOST = _env("SMTP_HOST", "")
    SMTP_PORT = _env("SMTP_PORT", 587, int)
    SMTP_USER = _env("SMTP_USER", "")
    SMTP_PASSWORD = os.environ.get("SMTP_PASSWORD", "")
    SMTP_FROM = _env("SMTP_FROM", "")
    SMTP_USE_TLS = _env("SMTP_USE_TLS", True, _flag)
    SMTP_USE_SSL = _env("SMTP_USE_SSL", False, _flag)

    SUPPORTED_LANGUAGES = tuple(_env("SUPPORTED_LANGUAGES", ["en"], _csv)) or ("en",)
    DEFAULT_LANGUAGE = _env("DEFAULT_LANGUAGE", "en").lower()
    LANG_COOKIE_NAME = _env("LANG_COOKIE_NAME", "site_lang")

    ADMIN_USERNAME = _env("ADMIN_USERNAME", "admin")
    ADMIN_EMAIL = _env("ADMIN_EMAIL", "")
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "")

    DEFAULT_SITE_SETTINGS = {
        "contactEmail": "contact@atelier.gallery",
        "contactPhone": "+1 (555) 123-4567",
        "contactAddress": "123 Art Studio Lane, Creative City, State 12345",
        "facebookUrl": "https://facebook.com/atelier.gallery",
        "instagramUrl": "https://instagram.com/atelier.gallery",
        "twitterUrl": "https://twitter.com/atelier_gallery",
    }
