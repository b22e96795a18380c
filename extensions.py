"""
Программа: «Atelier» – веб-приложение художественной галереи.
Модуль: extensions.py – экземпляры Flask-расширений.

Расширения создаются здесь без привязки к приложению и инициализируются
в фабрике `create_app`, поэтому тесты могут собирать несколько приложений.
"""

from flask_babel import Babel
from flask_cors import CORS
from flask_login import LoginManager
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

# Явные имена ограничений: одинаковая схема в SQLite и PostgreSQL
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

db = SQLAlchemy(metadata=MetaData(naming_convention=NAMING_CONVENTION))
login_manager = LoginManager()
cors = CORS()
babel = Babel()
