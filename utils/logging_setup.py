"""
Модуль: `utils/logging_setup.py`.
Назначение: Единый формат журнала приложения и журнал запросов к API.

Формат: `время | уровень | логгер | сообщение`, уровень задаётся LOG_LEVEL.
"""

import logging
import time

from flask import g, request
from flask.logging import default_handler

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(app) -> None:
    """Настраивает app.logger; вызывается один раз в фабрике приложения."""
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    default_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    app.logger.setLevel(level)


def register_request_logging(app) -> None:
    """Пишет в журнал каждый ответ API: метод, путь, статус и длительность."""

    @app.before_request
    def start_request_timer():
        g.request_started_at = time.perf_counter()

    @app.after_request
    def log_api_request(response):
        if request.path.startswith("/api/"):
            started = getattr(g, "request_started_at", None)
            duration_ms = (time.perf_counter() - started) * 1000 if started is not None else 0.0
            app.logger.info(
                "%s %s %s in %.0fms",
                request.method,
                request.path,
                response.status_code,
                duration_ms,
            )
        return response
