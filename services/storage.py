"""
Программа: «Atelier» – веб-приложение художественной галереи.
Модуль: services/storage.py – слой доступа к данным.

Назначение модуля:
- Типизированные CRUD-операции по каждой сущности, изолирующие запросы SQLAlchemy
  от обработчиков запросов.
- Одиночные операции фиксируют транзакцию сами; многошаговые сценарии
  (заказ, запись, сброс пароля) живут в отдельных сервисах.
"""

from datetime import datetime

from flask import current_app
from flask_babel import gettext as _
from sqlalchemy.exc import IntegrityError

from extensions import db
from models import (
    Artwork,
    Contact,
    Order,
    OrderItem,
    Registration,
    SiteSetting,
    Subscriber,
    User,
    Workshop,
)
from schemas import MAX_RECORD_ID
from services.errors import Conflict, NotFound, ValidationError
from utils.clock import utcnow
from utils.contact_normalizer import normalize_email


def _is_record_id(value) -> bool:
    # Значения вне диапазона INTEGER драйвер SQLite не принимает
    return isinstance(value, int) and 0 < value <= MAX_RECORD_ID


# --- Пользователи -----------------------------------------------------------

def get_user(user_id: int) -> User | None:
    """Пользователь по идентификатору или None."""
    if not _is_record_id(user_id):
        return None
    return db.session.get(User, user_id)


def get_user_by_username(username: str) -> User | None:
    """Пользователь по точному имени."""
    return User.query.filter_by(username=username).first()


def get_user_by_email(email: str) -> User | None:
    """Пользователь по нормализованному email."""
    normalized = normalize_email(email)
    if not normalized:
        return None
    return User.query.filter_by(email=normalized).first()


def get_user_by_reset_digest(token_digest: str, now: datetime) -> User | None:
    """Ищет пользователя с действующим (не истёкшим) токеном сброса."""
    return (
        User.query.filter(User.reset_token == token_digest)
        .filter(User.reset_token_expiry.is_not(None))
        .filter(User.reset_token_expiry > now)
        .first()
    )


def create_user(username: str, password_hash: str, email: str | None = None, is_admin: bool = False) -> User:
    """Создаёт пользователя; имя и email должны быть свободны."""
    if get_user_by_username(username):
        raise Conflict(_("Username already exists"))

    normalized_email = normalize_email(email) or None
    if email and not normalized_email:
        raise ValidationError(_("Invalid email address"))
    if normalized_email and get_user_by_email(normalized_email):
        raise Conflict(_("Email is already used by another account"))

    user = User(
        username=username,
        email=normalized_email,
        password_hash=password_hash,
        is_admin=is_admin,
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict(_("Username or email already exists"))
    return user


def set_password_hash(user: User, password_hash: str) -> User:
    """Сохраняет новый хеш пароля пользователя."""
    user.password_hash = password_hash
    db.session.commit()
    return user


# --- Произведения -----------------------------------------------------------

def list_artworks() -> list[Artwork]:
    """Все работы каталога в порядке добавления."""
    return Artwork.query.order_by(Artwork.id).all()


def list_featured_artworks() -> list[Artwork]:
    """Работы, отмеченные для главной страницы."""
    return Artwork.query.filter_by(is_featured=True).order_by(Artwork.id).all()


def list_artworks_by_medium(medium: str) -> list[Artwork]:
    """Работы в указанной технике."""
    return Artwork.query.filter(Artwork.medium == medium.strip().lower()).order_by(Artwork.id).all()


def get_artwork(artwork_id: int) -> Artwork | None:
    if not _is_record_id(artwork_id):
        return None
    return db.session.get(Artwork, artwork_id)


def require_artwork(artwork_id: int) -> Artwork:
    """Работа по идентификатору; отсутствие даёт NotFound."""
    artwork = get_artwork(artwork_id)
    if artwork is None:
        raise NotFound(_("Artwork not found"))
    return artwork


def create_artwork(fields: dict) -> Artwork:
    """Добавляет работу в каталог."""
    artwork = Artwork(**fields)
    db.session.add(artwork)
    db.session.commit()
    return artwork


def update_artwork(artwork_id: int, changes: dict) -> Artwork:
    """Применяет переданные поля к существующей работе."""
    artwork = require_artwork(artwork_id)
    for name, value in changes.items():
        setattr(artwork, name, value)
    db.session.commit()
    return artwork


def delete_artwork(artwork_id: int) -> None:
    """Удаляет работу, если она не входит ни в один заказ."""
    artwork = require_artwork(artwork_id)
    if OrderItem.query.filter_by(artwork_id=artwork.id).first() is not None:
        raise Conflict(_("Artwork is part of an order and cannot be deleted"))
    db.session.delete(artwork)
    db.session.commit()


# --- Мастер-классы ----------------------------------------------------------

def list_workshops() -> list[Workshop]:
    """Все мастер-классы в порядке добавления."""
    return Workshop.query.order_by(Workshop.id).all()


def list_workshops_by_type(workshop_type: str) -> list[Workshop]:
    """Мастер-классы выбранного формата (online или in-person)."""
    return Workshop.query.filter(Workshop.type == workshop_type.strip().lower()).order_by(Workshop.id).all()


def get_workshop(workshop_id: int) -> Workshop | None:
    if not _is_record_id(workshop_id):
        return None
    return db.session.get(Workshop, workshop_id)


def require_workshop(workshop_id: int) -> Workshop:
    """Мастер-класс по идентификатору; отсутствие даёт NotFound."""
    workshop = get_workshop(workshop_id)
    if workshop is None:
        raise NotFound(_("Workshop not found"))
    return workshop


def create_workshop(fields: dict) -> Workshop:
    """Добавляет мастер-класс в расписание."""
    workshop = Workshop(**fields)
    db.session.add(workshop)
    db.session.commit()
    return workshop


def update_workshop(workshop_id: int, changes: dict) -> Workshop:
    """Обновляет мастер-класс, не допуская spots_available больше capacity."""
    workshop = require_workshop(workshop_id)

    capacity = changes.get("capacity", workshop.capacity)
    spots = changes.get("spots_available", workshop.spots_available)
    if spots > capacity:
        raise ValidationError(_("Validation error: spotsAvailable cannot exceed capacity"))

    for name, value in changes.items():
        setattr(workshop, name, value)
    db.session.commit()
    return workshop


def delete_workshop(workshop_id: int) -> None:
    """Удаляет мастер-класс без записей участников."""
    workshop = require_workshop(workshop_id)
    if Registration.query.filter_by(workshop_id=workshop.id).first() is not None:
        raise Conflict(_("Workshop has registrations and cannot be deleted"))
    db.session.delete(workshop)
    db.session.commit()


def list_registrations(workshop_id: int) -> list[Registration]:
    """Записи на мастер-класс по времени создания."""
    return (
        Registration.query.filter_by(workshop_id=workshop_id)
        .order_by(Registration.created_at, Registration.id)
        .all()
    )


# --- Обращения и подписки ---------------------------------------------------

def create_contact(fields: dict) -> Contact:
    """Сохраняет сообщение из формы обратной связи."""
    contact = Contact(**fields)
    db.session.add(contact)
    db.session.commit()
    current_app.logger.info("Новое обращение #%s: %s", contact.id, contact.subject)
    return contact


def create_subscriber(email: str) -> Subscriber:
    """Идемпотентная подписка: повторный email возвращает существующую запись."""
    normalized = normalize_email(email)
    if not normalized:
        raise ValidationError(_("Invalid email address"))

    existing = Subscriber.query.filter_by(email=normalized).first()
    if existing is not None:
        return existing

    subscriber = Subscriber(email=normalized)
    db.session.add(subscriber)
    try:
        db.session.commit()
    except IntegrityError:
        # Параллельная подписка с тем же адресом успела раньше
        db.session.rollback()
        return Subscriber.query.filter_by(email=normalized).one()
    return subscriber


# --- Заказы -----------------------------------------------------------------

def list_orders() -> list[Order]:
    """Все заказы, новые первыми."""
    return Order.query.order_by(Order.created_at.desc(), Order.id.desc()).all()


def get_order(order_id: int) -> Order | None:
    if not _is_record_id(order_id):
        return None
    return db.session.get(Order, order_id)


def list_order_items(order_id: int) -> list[OrderItem]:
    """Позиции заказа в порядке добавления."""
    return OrderItem.query.filter_by(order_id=order_id).order_by(OrderItem.id).all()


# --- Настройки сайта --------------------------------------------------------

def list_site_settings() -> list[SiteSetting]:
    """Все настройки сайта, упорядоченные по ключу."""
    return SiteSetting.query.order_by(SiteSetting.setting_key).all()


def get_site_setting(key: str) -> SiteSetting | None:
    """Настройка по ключу или None."""
    return SiteSetting.query.filter_by(setting_key=key).first()


def upsert_site_setting(key: str, value: str) -> SiteSetting:
    """Создаёт настройку или перезаписывает её значение."""
    setting = get_site_setting(key)
    if setting is None:
        setting = SiteSetting(setting_key=key, setting_value=value)
        db.session.add(setting)
    else:
        setting.setting_value = value
        setting.updated_at = utcnow()
    db.session.commit()
    return setting
