"""
Программа: «Atelier» – веб-приложение художественной галереи.
Модуль: services/credentials.py – учётные данные и восстановление пароля.

Назначение модуля:
- Проверка логина/пароля (с переходом старых хешей на формат werkzeug).
- Регистрация пользователей без прав администратора.
- Жизненный цикл токена сброса пароля: выдача (срок жизни – час),
  проверка срока при использовании, одноразовое погашение вместе со сменой пароля.
"""

import hashlib
import secrets
from dataclasses import dataclass
from datetime import timedelta

from flask import current_app
from flask_babel import gettext as _
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import User
from services import storage
from services.errors import Internal, InvalidToken, ValidationError
from utils.clock import utcnow
from utils.contact_normalizer import mask_email
from utils.mailer import send_email
from utils.passwords import hash_password, is_legacy_hash, validate_password_strength, verify_password


@dataclass
class ResetIssue:
    """Результат выдачи токена: ссылка и признак доставки письма."""

    reset_link: str
    delivered: bool


def _token_digest(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _password_policy_error(password: str, username: str | None = None) -> str | None:
    return validate_password_strength(
        password,
        min_length=int(current_app.config.get("PASSWORD_MIN_LENGTH", 8)),
        username=username,
    )


def authenticate(username: str, password: str) -> User | None:
    """Возвращает пользователя при верном пароле, иначе None."""
    user = storage.get_user_by_username(username)
    if user is None or not verify_password(user.password_hash, password):
        return None

    if is_legacy_hash(user.password_hash):
        storage.set_password_hash(user, hash_password(password))
        current_app.logger.info("Хеш пароля пользователя #%s обновлён до scrypt", user.id)

    return user


def register_user(username: str, password: str, email: str | None = None, is_admin: bool = False) -> User:
    """Создаёт пользователя после проверки политики паролей."""
    if any(ch.isspace() for ch in username):
        raise ValidationError(_("Username must not contain spaces"))

    policy_error = _password_policy_error(password, username=username)
    if policy_error:
        raise ValidationError(policy_error)

    user = storage.create_user(username, hash_password(password), email=email, is_admin=is_admin)
    current_app.logger.info("Создан пользователь #%s (%s), admin=%s", user.id, user.username, user.is_admin)
    return user


def request_password_reset(email: str, base_url: str) -> ResetIssue | None:
    """Выдаёт новый токен сброса для известного email.

    Для неизвестного адреса ничего не происходит и возвращается None; вызывающий
    код в обоих случаях отвечает одинаково, чтобы не раскрывать наличие аккаунта.
    """
    user = storage.get_user_by_email(email)
    if user is None:
        current_app.logger.info("Запрошен сброс пароля для неизвестного адреса %s", mask_email(email))
        return None

    token = secrets.token_hex(32)
    ttl_minutes = int(current_app.config.get("PASSWORD_RESET_TOKEN_TTL_MINUTES", 60))

    # Новый токен заменяет ранее выданный
    user.reset_token = _token_digest(token)
    user.reset_token_expiry = utcnow() + timedelta(minutes=ttl_minutes)
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Не удалось сохранить токен сброса для пользователя #%s", user.id)
        raise Internal(_("Failed to generate reset token"))

    reset_link = f"{base_url.rstrip('/')}/reset-password?token={token}"
    body = (
        "You requested a password reset.\n"
        f"Open this link to choose a new password: {reset_link}\n\n"
        f"The link is valid for {ttl_minutes} minutes. "
        "If you did not request it, simply ignore this email."
    )
    delivered = send_email(user.email, "Password reset", body)
    if not delivered:
        current_app.logger.warning(
            "Не удалось доставить ссылку сброса пароля для %s", mask_email(user.email)
        )

    return ResetIssue(reset_link=reset_link, delivered=delivered)


def reset_password(token: str, new_password: str) -> User:
    """Меняет пароль по действующему токену и одновременно гасит токен."""
    if not token:
        raise InvalidToken(_("Invalid or expired reset token"))

    policy_error = _password_policy_error(new_password)
    if policy_error:
        raise ValidationError(policy_error)

    user = storage.get_user_by_reset_digest(_token_digest(token), now=utcnow())
    if user is None:
        raise InvalidToken(_("Invalid or expired reset token"))

    user.password_hash = hash_password(new_password)
    user.reset_token = None
    user.reset_token_expiry = None
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Не удалось обновить пароль пользователя #%s", user.id)
        raise Internal(_("Failed to update password"))

    current_app.logger.info("Пароль пользователя #%s изменён по токену сброса", user.id)
    return user


def change_admin_password(username: str, new_password: str) -> User:
    """Принудительная смена пароля из CLI; сбрасывает и выданный токен."""
    user = storage.get_user_by_username(username)
    if user is None:
        raise ValidationError(_("User not found"))

    policy_error = _password_policy_error(new_password, username=username)
    if policy_error:
        raise ValidationError(policy_error)

    user.password_hash = hash_password(new_password)
    user.reset_token = None
    user.reset_token_expiry = None
    db.session.commit()
    return user
