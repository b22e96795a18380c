"""
Программа: «Atelier» – веб-приложение художественной галереи.
Модуль: routes/site.py – обратная связь, подписка на рассылку и настройки сайта.
"""

from flask import jsonify, request
from flask_babel import gettext as _

from schemas import ContactCreate, SiteSettingUpdate, SubscriberCreate, parse_payload
from services import storage
from services.errors import NotFound
from utils.access import admin_required


def register_routes(app):
    """Регистрирует маршруты модуля в приложении."""

    @app.post("/api/contacts")
    def create_contact():
        """Сообщение из формы обратной связи."""
        payload = parse_payload(ContactCreate, request.get_json(silent=True))
        contact = storage.create_contact(payload.model_dump())
        return jsonify(contact.to_dict()), 201

    @app.post("/api/subscribers")
    def create_subscriber():
        # Повторная подписка возвращает ту же запись без ошибки
        payload = parse_payload(SubscriberCreate, request.get_json(silent=True))
        subscriber = storage.create_subscriber(payload.email)
        return jsonify(subscriber.to_dict()), 201

    @app.get("/api/site-settings")
    def list_site_settings():
        """Все настройки сайта."""
        return jsonify([setting.to_dict() for setting in storage.list_site_settings()])

    @app.get("/api/site-settings/<key>")
    def get_site_setting(key: str):
        setting = storage.get_site_setting(key)
        if setting is None:
            raise NotFound(_("Setting not found"))
        return jsonify(setting.to_dict())

    @app.put("/api/site-settings/<key>")
    @admin_required
    def update_site_setting(key: str):
        """Создание или изменение настройки администратором."""
        payload = parse_payload(SiteSettingUpdate, request.get_json(silent=True))
        setting = storage.upsert_site_setting(key, payload.setting_value)
        app.logger.info("Настройка сайта %s обновлена", key)
        return jsonify(setting.to_dict())
