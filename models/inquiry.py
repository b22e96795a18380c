"""
Программа: «Atelier» – веб-приложение художественной галереи.
Модуль: models/inquiry.py – обращения посетителей и подписчики рассылки.
"""

from extensions import db
from utils.clock import isoformat, utcnow


class Contact(db.Model):
    """Обращение из формы обратной связи (только запись)."""

    __tablename__ = "contacts"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), nullable=False)
    subject = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "subject": self.subject,
            "message": self.message,
            "createdAt": isoformat(self.created_at),
        }


class Subscriber(db.Model):
    """Подписчик рассылки; email уникален."""

    __tablename__ = "subscribers"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "createdAt": isoformat(self.created_at),
        }
