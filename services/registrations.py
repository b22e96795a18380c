"""
Программа: «Atelier» – веб-приложение художественной галереи.
Модуль: services/registrations.py – запись на мастер-классы.

Назначение модуля:
- Запись участника с учётом вместимости: создание заявки и уменьшение числа мест
  выполняются одной транзакцией.
- Письмо-подтверждение участнику (ошибка доставки не отменяет запись).
- Рассылка сообщения всем участникам мастер-класса.
"""

from flask import current_app
from flask_babel import gettext as _
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import Registration, Workshop
from schemas import WorkshopNotification, parse_payload
from services import storage
from services.errors import Conflict, Internal, NotFound
from utils.contact_normalizer import mask_email
from utils.mailer import send_email


def _take_spot(workshop_id: int) -> bool:
    """Уменьшает spots_available на 1, только если свободные места ещё есть."""
    result = db.session.execute(
        update(Workshop)
        .where(Workshop.id == workshop_id, Workshop.spots_available > 0)
        .values(spots_available=Workshop.spots_available - 1)
    )
    return result.rowcount == 1


def _send_confirmation(registration: Registration, workshop: Workshop) -> None:
    body = (
        f"Hello {registration.first_name},\n\n"
        f"You are registered for \"{workshop.title}\" on {workshop.date} at {workshop.time} "
        f"({workshop.location}).\n\n"
        "We look forward to seeing you!"
    )
    delivered = send_email(registration.email, f"Registration confirmed: {workshop.title}", body)
    current_app.logger.info(
        "Подтверждение записи #%s для %s на «%s» (доставлено: %s)",
        registration.id,
        mask_email(registration.email),
        workshop.title,
        delivered,
    )


def register(draft) -> Registration:
    """Записывает участника; на успех место в мастер-классе уже списано."""
    workshop = storage.get_workshop(draft.workshop_id)
    if workshop is None:
        raise NotFound(_("Workshop not found"))
    if workshop.spots_available <= 0:
        raise Conflict(_("No spots available for this workshop"))

    registration = Registration(
        workshop_id=workshop.id,
        first_name=draft.first_name,
        last_name=draft.last_name,
        email=draft.email,
        phone=draft.phone,
        experience_level=draft.experience_level,
    )
    try:
        if not _take_spot(workshop.id):
            db.session.rollback()
            raise Conflict(_("No spots available for this workshop"))
        db.session.add(registration)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Не удалось сохранить запись на мастер-класс #%s", workshop.id)
        raise Internal(_("Failed to create registration"))

    try:
        _send_confirmation(registration, workshop)
    except Exception:
        current_app.logger.exception("Ошибка отправки подтверждения записи #%s", registration.id)

    return registration


def list_registrations(workshop_id: int) -> list[Registration]:
    """Записи на существующий мастер-класс по времени создания."""
    storage.require_workshop(workshop_id)
    return storage.list_registrations(workshop_id)


def notify_participants(workshop_id: int, payload) -> tuple[Workshop, int]:
    """Рассылает сообщение всем записавшимся; возвращает мастер-класс и число адресатов.

    Тело запроса проверяется только после того, как найдены мастер-класс
    и его участники.
    """
    workshop = storage.require_workshop(workshop_id)
    registrations = storage.list_registrations(workshop.id)
    if not registrations:
        raise NotFound(_("No registrations found for this workshop"))

    notification = parse_payload(WorkshopNotification, payload)

    delivered = 0
    for registration in registrations:
        if send_email(registration.email, notification.subject, notification.message):
            delivered += 1

    current_app.logger.info(
        "Рассылка по мастер-классу «%s»: %s адресатов, доставлено %s",
        workshop.title,
        len(registrations),
        delivered,
    )
    return workshop, len(registrations)
