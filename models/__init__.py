"""
Модуль: `models/__init__.py`.
Назначение: Импорт моделей для корректной регистрации в SQLAlchemy metadata.
"""

from .user import User
from .artwork import Artwork
from .workshop import Workshop, Registration
from .inquiry import Contact, Subscriber
from .order import Order, OrderItem
from .site_setting import SiteSetting

__all__ = [
    "User",
    "Artwork",
    "Workshop",
    "Registration",
    "Contact",
    "Subscriber",
    "Order",
    "OrderItem",
    "SiteSetting",
]
