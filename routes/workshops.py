"""
Программа: «Atelier» – веб-приложение художественной галереи.
Модуль: routes/workshops.py – API мастер-классов и записей участников.

Назначение модуля:
- Публичное расписание мастер-классов и запись на них.
- Управление мастер-классами, список участников и рассылка для администратора.
"""

from flask import jsonify, request
from flask_babel import gettext as _

from schemas import (
    RegistrationCreate,
    WorkshopCreate,
    WorkshopUpdate,
    parse_payload,
)
from services import registrations, storage
from utils.access import admin_required


def register_routes(app):
    """Регистрирует маршруты модуля в приложении."""

    @app.get("/api/workshops")
    def list_workshops():
        """Публичное расписание мастер-классов."""
        return jsonify([workshop.to_dict() for workshop in storage.list_workshops()])

    @app.get("/api/workshops/type/<workshop_type>")
    def list_workshops_by_type(workshop_type: str):
        return jsonify([workshop.to_dict() for workshop in storage.list_workshops_by_type(workshop_type)])

    @app.get("/api/workshops/<int:workshop_id>")
    def get_workshop(workshop_id: int):
        return jsonify(storage.require_workshop(workshop_id).to_dict())

    @app.post("/api/workshops")
    @admin_required
    def create_workshop():
        """Добавление мастер-класса; capacity по умолчанию равна числу мест."""
        payload = parse_payload(WorkshopCreate, request.get_json(silent=True))
        workshop = storage.create_workshop(payload.model_dump())
        app.logger.info("Добавлен мастер-класс #%s «%s»", workshop.id, workshop.title)
        return jsonify(workshop.to_dict()), 201

    @app.route("/api/workshops/<int:workshop_id>", methods=["PATCH", "PUT"])
    @admin_required
    def update_workshop(workshop_id: int):
        payload = parse_payload(WorkshopUpdate, request.get_json(silent=True))
        workshop = storage.update_workshop(workshop_id, payload.changes())
        return jsonify(workshop.to_dict())

    @app.delete("/api/workshops/<int:workshop_id>")
    @admin_required
    def delete_workshop(workshop_id: int):
        storage.delete_workshop(workshop_id)
        app.logger.info("Удалён мастер-класс #%s", workshop_id)
        return "", 204

    @app.post("/api/registrations")
    def create_registration():
        """Запись участника на мастер-класс."""
        payload = parse_payload(RegistrationCreate, request.get_json(silent=True))
        registration = registrations.register(payload)
        body = registration.to_dict()
        body["notificationSent"] = True
        return jsonify(body), 201

    @app.get("/api/workshops/<int:workshop_id>/registrations")
    @admin_required
    def list_workshop_registrations(workshop_id: int):
        """Участники мастер-класса в порядке записи."""
        return jsonify([item.to_dict() for item in registrations.list_registrations(workshop_id)])

    @app.post("/api/workshops/<int:workshop_id>/notify")
    @admin_required
    def notify_workshop_participants(workshop_id: int):
        """Рассылка сообщения всем участникам мастер-класса."""
        workshop, recipient_count = registrations.notify_participants(workshop_id, request.get_json(silent=True))
        return jsonify(
            {
                "message": _("Notifications sent successfully"),
                "recipientCount": recipient_count,
                "workshopTitle": workshop.title,
            }
        )
