"""
Программа: «Atelier» – веб-приложение художественной галереи.
Модуль: models/order.py – заказы и позиции заказа.

Цена позиции фиксируется в момент покупки и не зависит от последующих
изменений цены произведения.
"""

from extensions import db
from utils.clock import isoformat, utcnow

ORDER_STATUSES = ("pending", "completed", "cancelled")


class Order(db.Model):
    """Класс `Order` описывает оформленную покупку."""

    __tablename__ = "orders"
    __table_args__ = (db.CheckConstraint("total > 0", name="total_positive"),)

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), nullable=False, index=True)
    total = db.Column(db.Float, nullable=False)
    status = db.Column(db.String(20), nullable=False, default="pending")
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    items = db.relationship(
        "OrderItem",
        back_populates="order",
        lazy=True,
        order_by="OrderItem.id",
        cascade="all, delete-orphan",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "total": self.total,
            "status": self.status,
            "createdAt": isoformat(self.created_at),
        }


class OrderItem(db.Model):
    """Класс `OrderItem` описывает одну позицию заказа."""

    __tablename__ = "order_items"

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)
    artwork_id = db.Column(db.Integer, db.ForeignKey("artworks.id"), nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    price = db.Column(db.Float, nullable=False)

    order = db.relationship("Order", back_populates="items")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "orderId": self.order_id,
            "artworkId": self.artwork_id,
            "quantity": self.quantity,
            "price": self.price,
        }
