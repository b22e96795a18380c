"""
Программа: «Atelier» – веб-приложение художественной галереи.
Модуль: models/user.py – модель пользователя системы.

Назначение модуля:
- Описание ORM-модели User для таблицы пользователей (администраторы и покупатели).
- Хранение учётных данных (логин, email, хеш пароля) и признака администратора.
- Хранение токена восстановления пароля и срока его действия.
"""

from flask_login import UserMixin

from extensions import db
from utils.clock import isoformat, utcnow


class User(UserMixin, db.Model):
    """Учётная запись; reset_token и reset_token_expiry заданы только вместе."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=True, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    is_admin = db.Column(db.Boolean, nullable=False, default=False)
    # Храним только SHA-256 от выданного токена
    reset_token = db.Column(db.String(64), nullable=True, index=True)
    reset_token_expiry = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "isAdmin": bool(self.is_admin),
            "createdAt": isoformat(self.created_at),
        }
