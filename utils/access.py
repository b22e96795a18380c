"""
Модуль: `utils/access.py`.
Назначение: Проверка прав доступа к административным маршрутам API.
"""

from functools import wraps

from flask_babel import gettext as _
from flask_login import current_user

from services.errors import Forbidden, Unauthorized


def admin_required(view):
    """Пропускает запрос только при активной сессии администратора.

    Проверка выполняется до любой логики обработчика: без сессии – 401,
    сессия без прав администратора – 403.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        if not current_user.is_authenticated:
            raise Unauthorized(_("Authentication required"))
        if not current_user.is_admin:
            raise Forbidden(_("Administrator privileges required"))
        return view(*args, **kwargs)

    return wrapper
