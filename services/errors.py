"""
Модуль: `services/errors.py`.
Назначение: Иерархия доменных ошибок сервисного слоя.

Сервисы поднимают эти исключения, а обработчик в `app.py` превращает их
в JSON-ответ `{"message": ...}` с указанным HTTP-статусом.
"""


class ServiceError(Exception):
    """Базовая доменная ошибка с HTTP-статусом."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Некорректные или отсутствующие входные данные."""

    status_code = 400


class NotFound(ServiceError):
    """Запрошенная сущность не существует."""

    status_code = 404


class Conflict(ServiceError):
    """Нарушено бизнес-правило: нет в наличии, нет мест, дубликат."""

    status_code = 400


class InvalidToken(Conflict):
    """Токен восстановления не найден, истёк или уже использован."""


class Unauthorized(ServiceError):
    status_code = 401


class Forbidden(ServiceError):
    status_code = 403


class RateLimited(ServiceError):
    status_code = 429


class Internal(ServiceError):
    """Непредвиденная ошибка хранилища; детали только в журнале."""

    status_code = 500
