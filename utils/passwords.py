"""
Модуль: `utils/passwords.py`.
Назначение: Хеширование и проверка паролей, политика сложности пароля.

Новые хеши создаются werkzeug (scrypt с солью). Хеши прежней версии сайта
(`<hex scrypt>.<соль>`, N=16384, r=8, p=1, ключ 64 байта) принимаются при входе
и заменяются на формат werkzeug после успешной проверки.
"""

import hashlib
import hmac
import re

from flask_babel import gettext as _
from werkzeug.security import check_password_hash, generate_password_hash

_LEGACY_HASH_RE = re.compile(r"^[0-9a-f]{128}\.[0-9a-f]+$")


def hash_password(password: str) -> str:
    return generate_password_hash(password, method="scrypt")


def is_legacy_hash(stored_hash: str) -> bool:
    return bool(stored_hash) and bool(_LEGACY_HASH_RE.match(stored_hash))


def _check_legacy_hash(stored_hash: str, password: str) -> bool:
    digest_hex, salt = stored_hash.split(".", 1)
    computed = hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=16384,
        r=8,
        p=1,
        dklen=64,
    )
    return hmac.compare_digest(computed.hex(), digest_hex)


def verify_password(stored_hash: str | None, password: str) -> bool:
    """Сверяет пароль с хешем любого поддерживаемого формата."""
    if not stored_hash or password is None:
        return False
    if is_legacy_hash(stored_hash):
        return _check_legacy_hash(stored_hash, password)
    try:
        return check_password_hash(stored_hash, password)
    except ValueError:
        # Неизвестный метод хеширования в БД
        return False


def validate_password_strength(password: str, min_length: int, username: str | None = None) -> str | None:
    """Возвращает текст ошибки или None, если пароль подходит."""
    if len(password) < min_length:
        return _("Password must be at least %(num)s characters long", num=min_length)
    if len(password) > 128:
        return _("Password must not exceed 128 characters")
    if not password.strip():
        return _("Password must not consist of whitespace only")
    if username and password.lower() == username.lower():
        return _("Password must not be the same as the username")
    return None
