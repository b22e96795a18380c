"""
Модуль: `utils/rate_limit.py`.
Назначение: Ограничение частоты запросов к чувствительным маршрутам (вход, сброс пароля).

Лимитер хранится в `app.extensions["rate_limiter"]` и сам читает
переключатель `RATELIMIT_ENABLED` из конфигурации своего приложения.
"""

import time
from collections import defaultdict, deque
from threading import Lock

from flask import current_app, request


def client_address() -> str:
    """IP клиента: первый адрес из X-Forwarded-For или адрес соединения."""
    forwarded = [part.strip() for part in request.headers.get("X-Forwarded-For", "").split(",")]
    if forwarded and forwarded[0]:
        return forwarded[0]
    return request.remote_addr or "unknown"


class InMemoryRateLimiter:
    """Скользящее окно попыток по ключу `bucket:identity` в памяти процесса."""

    def __init__(self, app=None, clock=time.monotonic):
        self._clock = clock
        self._hits: dict[str, deque] = defaultdict(deque)
        self._lock = Lock()
        if app is not None:
            self.init_app(app)

    def init_app(self, app) -> None:
        app.config.setdefault("RATELIMIT_ENABLED", True)
        app.extensions["rate_limiter"] = self

    @staticmethod
    def enabled() -> bool:
        return bool(current_app.config.get("RATELIMIT_ENABLED", True))

    def hit(self, key: str, limit: int, window_seconds: int) -> bool:
        """Учитывает попытку; False, если лимит окна уже исчерпан."""
        if limit <= 0 or window_seconds <= 0:
            return False

        now = self._clock()
        with self._lock:
            hits = self._hits[key]
            while hits and now - hits[0] >= window_seconds:
                hits.popleft()
            if len(hits) >= limit:
                return False
            hits.append(now)
        return True

    def exceeded(self, bucket: str, limit: int, window_seconds: int, identity: str | None = None) -> bool:
        """Проверяет лимит для пары (bucket, клиент) в текущем запросе."""
        if not self.enabled():
            return False
        return not self.hit(f"{bucket}:{identity or client_address()}", limit, window_seconds)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


def is_rate_limited(bucket: str, limit: int, window_seconds: int, identity: str | None = None) -> bool:
    """Проверка лимита через лимитер текущего приложения."""
    limiter = current_app.extensions.get("rate_limiter")
    if limiter is None:
        return False
    return limiter.exceeded(bucket, limit, window_seconds, identity=identity)
