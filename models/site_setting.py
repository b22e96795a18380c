"""
Программа: «Atelier» – веб-приложение художественной галереи.
Модуль: models/site_setting.py – настройки сайта в формате ключ/значение.
"""

from extensions import db
from utils.clock import isoformat, utcnow


class SiteSetting(db.Model):
    """Класс `SiteSetting` хранит одну настройку витрины."""

    __tablename__ = "site_settings"

    id = db.Column(db.Integer, primary_key=True)
    setting_key = db.Column(db.String(100), unique=True, nullable=False)
    setting_value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "settingKey": self.setting_key,
            "settingValue": self.setting_value,
            "updatedAt": isoformat(self.updated_at),
        }
