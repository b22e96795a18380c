"""
Программа: «Atelier» – веб-приложение художественной галереи.
Модуль: routes/orders.py – оформление и администрирование заказов.
"""

from flask import jsonify, request

from schemas import CheckoutRequest, OrderStatusUpdate, parse_payload
from services import orders
from utils.access import admin_required


def register_routes(app):
    """Регистрирует маршруты модуля в приложении."""

    @app.post("/api/orders")
    def create_order():
        """Оформление заказа из корзины: `{order: {...}, items: [...]}`."""
        payload = parse_payload(CheckoutRequest, request.get_json(silent=True))
        order = orders.create_order(payload.order, payload.items)
        return jsonify(order.to_dict()), 201

    @app.get("/api/orders")
    @admin_required
    def list_orders():
        """Все заказы для администратора, новые первыми."""
        return jsonify([order.to_dict() for order in orders.list_orders()])

    @app.get("/api/orders/<int:order_id>")
    @admin_required
    def get_order(order_id: int):
        """Заказ вместе с его позициями."""
        order, items = orders.get_order(order_id)
        return jsonify({"order": order.to_dict(), "items": [item.to_dict() for item in items]})

    @app.put("/api/orders/<int:order_id>/status")
    @admin_required
    def update_order_status(order_id: int):
        """Смена статуса заказа администратором."""
        payload = parse_payload(OrderStatusUpdate, request.get_json(silent=True))
        order = orders.update_order_status(order_id, payload.status)
        return jsonify(order.to_dict())
