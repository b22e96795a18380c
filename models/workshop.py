"""
Программа: «Atelier» – веб-приложение художественной галереи.
Модуль: models/workshop.py – мастер-классы и записи участников.

Назначение модуля:
- ORM-модель Workshop с ограниченной вместимостью (0 <= spots_available <= capacity).
- ORM-модель Registration – заявка участника на одно место в мастер-классе.
"""

from extensions import db
from utils.clock import isoformat, utcnow

WORKSHOP_TYPES = ("online", "in-person")
EXPERIENCE_LEVELS = ("beginner", "intermediate", "advanced")


class Workshop(db.Model):
    """Класс `Workshop` описывает запланированное занятие."""

    __tablename__ = "workshops"
    __table_args__ = (
        db.CheckConstraint("spots_available >= 0", name="spots_non_negative"),
        db.CheckConstraint("spots_available <= capacity", name="spots_within_capacity"),
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    price = db.Column(db.Float, nullable=False)
    date = db.Column(db.String(40), nullable=False)
    time = db.Column(db.String(40), nullable=False)
    location = db.Column(db.String(200), nullable=False)
    type = db.Column(db.String(20), nullable=False, index=True)
    image_url = db.Column(db.String(500), nullable=False)
    capacity = db.Column(db.Integer, nullable=False)
    spots_available = db.Column(db.Integer, nullable=False)

    registrations = db.relationship("Registration", back_populates="workshop", lazy=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "date": self.date,
            "time": self.time,
            "location": self.location,
            "type": self.type,
            "imageUrl": self.image_url,
            "capacity": self.capacity,
            "spotsAvailable": self.spots_available,
        }


class Registration(db.Model):
    """Класс `Registration` описывает запись участника на мастер-класс."""

    __tablename__ = "registrations"

    id = db.Column(db.Integer, primary_key=True)
    workshop_id = db.Column(db.Integer, db.ForeignKey("workshops.id"), nullable=False, index=True)
    first_name = db.Column(db.String(80), nullable=False)
    last_name = db.Column(db.String(80), nullable=False)
    email = db.Column(db.String(120), nullable=False)
    phone = db.Column(db.String(40), nullable=False)
    experience_level = db.Column(db.String(20), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    workshop = db.relationship("Workshop", back_populates="registrations")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "workshopId": self.workshop_id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "experienceLevel": self.experience_level,
            "createdAt": isoformat(self.created_at),
        }
