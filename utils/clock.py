"""
Модуль: `utils/clock.py`.
Назначение: Единый источник текущего времени (naive UTC, как хранится в БД).
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Возвращает текущее время UTC без tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value: datetime | None) -> str | None:
    """Сериализует метку времени для JSON-ответов."""
    if value is None:
        return None
    return value.isoformat()
