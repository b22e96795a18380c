"""
Программа: «Atelier» – веб-приложение художественной галереи.
Модуль: services/orders.py – оформление заказа и учёт наличия работ.

Назначение модуля:
- Проверка корзины по актуальному состоянию каталога до любой записи в БД.
- Создание заказа и его позиций одной транзакцией.
- Снятие работ с продажи условным UPDATE (`WHERE in_stock`), чтобы две
  параллельные покупки одной работы не прошли обе.
- Чтение заказа и смена его статуса администратором.
"""

from flask import current_app
from flask_babel import gettext as _
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import Artwork, Order, OrderItem
from models.order import ORDER_STATUSES
from services import storage
from services.errors import Conflict, Internal, NotFound, ValidationError
from utils.contact_normalizer import mask_email


def _validate_line_items(items) -> None:
    """Каждая работа должна существовать и быть в наличии; иначе заказ не создаётся."""
    for item in items:
        artwork = storage.get_artwork(item.artwork_id)
        if artwork is None:
            raise NotFound(_("Artwork with ID %(id)s not found", id=item.artwork_id))
        if not artwork.in_stock:
            raise Conflict(_('Artwork "%(title)s" is not in stock', title=artwork.title))


def _claim_artwork(artwork_id: int) -> bool:
    """Снимает работу с продажи, только если она ещё в наличии."""
    result = db.session.execute(
        update(Artwork)
        .where(Artwork.id == artwork_id, Artwork.in_stock.is_(True))
        .values(in_stock=False)
    )
    return result.rowcount == 1


def create_order(draft, items) -> Order:
    """Создаёт заказ со статусом pending и снимает все его работы с продажи.

    `draft` – проверенная схема заказа (email, total), `items` – непустой список
    позиций (artwork_id, quantity, price). При любой ошибке в БД не остаётся
    ни заказа, ни позиций, ни изменений наличия.
    """
    if not items:
        raise ValidationError(_("Validation error: items: an order needs at least one item"))

    _validate_line_items(items)

    order = Order(email=draft.email, total=draft.total, status="pending")
    try:
        db.session.add(order)
        db.session.flush()

        for item in items:
            db.session.add(
                OrderItem(
                    order_id=order.id,
                    artwork_id=item.artwork_id,
                    quantity=item.quantity,
                    price=item.price,
                )
            )
            if not _claim_artwork(item.artwork_id):
                # Работу купили между проверкой и записью
                db.session.rollback()
                artwork = storage.get_artwork(item.artwork_id)
                title = artwork.title if artwork is not None else item.artwork_id
                raise Conflict(_('Artwork "%(title)s" is not in stock', title=title))

        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Не удалось сохранить заказ для %s", mask_email(draft.email))
        raise Internal(_("Failed to create order"))

    current_app.logger.info(
        "Создан заказ #%s (%s позиций) для %s",
        order.id,
        len(items),
        mask_email(order.email),
    )
    return order


def get_order(order_id: int) -> tuple[Order, list[OrderItem]]:
    """Заказ и его позиции; отсутствие заказа даёт NotFound."""
    order = storage.get_order(order_id)
    if order is None:
        raise NotFound(_("Order not found"))
    return order, storage.list_order_items(order.id)


def update_order_status(order_id: int, status: str) -> Order:
    """Меняет статус без таблицы переходов: допустим любой из известных статусов."""
    if status not in ORDER_STATUSES:
        raise ValidationError(_("Validation error: status: must be one of pending, completed, cancelled"))

    order = storage.get_order(order_id)
    if order is None:
        raise NotFound(_("Order not found"))

    previous = order.status
    order.status = status
    db.session.commit()
    current_app.logger.info("Статус заказа #%s: %s -> %s", order.id, previous, status)
    return order


def list_orders() -> list[Order]:
    """Все заказы, новые первыми."""
    return storage.list_orders()
