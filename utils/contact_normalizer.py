"""
Модуль: `utils/contact_normalizer.py`.
Назначение: Нормализация email-адресов перед поиском и сохранением.
"""

from email_validator import EmailNotValidError, validate_email


def normalize_email(value: str | None) -> str:
    """Каноническая форма адреса в нижнем регистре; для некорректного адреса ''."""
    if not value or not value.strip():
        return ""
    try:
        checked = validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError:
        return ""
    return checked.normalized.lower()


def mask_email(value: str | None) -> str:
    """Скрывает локальную часть адреса для записи в журнал."""
    if not value or "@" not in value:
        return "***"
    local, _, domain = value.partition("@")
    return f"{local[:1]}***@{domain}"
