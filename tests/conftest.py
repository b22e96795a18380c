import os
import tempfile

# Модуль app создаёт приложение при импорте, поэтому окружение задаём заранее
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOAD_FOLDER", tempfile.mkdtemp(prefix="atelier-uploads-"))

import pytest
from flask import g

from app import create_app
from extensions import db
from models import Artwork, Registration, User, Workshop
from utils.passwords import hash_password

ADMIN_PASSWORD = "gallery-admin-1"
USER_PASSWORD = "oldpassword"


@pytest.fixture
def app(tmp_path):
    upload_dir = tmp_path / "uploads"
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'gallery.db'}",
            "UPLOAD_FOLDER": str(upload_dir),
            "CSRF_ENABLED": False,
            "RATELIMIT_ENABLED": False,
            "SMTP_HOST": "",
            "SMTP_FROM": "",
            "ADMIN_PASSWORD": "",
        }
    )
    # Контекст приложения общий для всех запросов теста, вместе с ним и `g`:
    # пользователь, закэшированный Flask-Login, не должен переходить между клиентами
    @app.before_request
    def forget_cached_user():
        g.pop("_login_user", None)

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def factory(username="user", password=USER_PASSWORD, email="user@x.com", is_admin=False):
        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password),
            is_admin=is_admin,
        )
        db.session.add(user)
        db.session.commit()
        return user

    return factory


@pytest.fixture
def make_artwork(app):
    def factory(**overrides):
        fields = {
            "title": "Sunset Mountains",
            "description": "Mountains at sunset in warm golden light.",
            "medium": "oil",
            "image_url": "/uploads/images/sunset.jpg",
            "price": 500,
            "size": '24" x 36"',
            "year": "2023",
            "is_featured": False,
            "in_stock": True,
            "is_framed": True,
        }
        fields.update(overrides)
        artwork = Artwork(**fields)
        db.session.add(artwork)
        db.session.commit()
        return artwork

    return factory


@pytest.fixture
def make_workshop(app):
    def factory(**overrides):
        fields = {
            "title": "Oil Painting Fundamentals",
            "description": "Color mixing, layering and composition.",
            "price": 120,
            "date": "June 15, 2026",
            "time": "10:00 AM - 2:00 PM",
            "location": "Art Studio, 123 Creative Ave",
            "type": "in-person",
            "image_url": "/uploads/images/workshop.jpg",
            "capacity": 5,
            "spots_available": 5,
        }
        fields.update(overrides)
        workshop = Workshop(**fields)
        db.session.add(workshop)
        db.session.commit()
        return workshop

    return factory


@pytest.fixture
def registration_payload():
    def build(workshop_id, email="painter@artlovers.org"):
        return {
            "workshopId": workshop_id,
            "firstName": "Ada",
            "lastName": "Lovelace",
            "email": email,
            "phone": "+1 555 0100",
            "experienceLevel": "beginner",
        }

    return build


@pytest.fixture
def admin_client(app, make_user):
    make_user(username="admin", password=ADMIN_PASSWORD, email="admin@atelier.gallery", is_admin=True)
    client = app.test_client()
    response = client.post("/api/login", json={"username": "admin", "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client


@pytest.fixture
def user_client(app, make_user):
    make_user()
    client = app.test_client()
    response = client.post("/api/login", json={"username": "user", "password": USER_PASSWORD})
    assert response.status_code == 200
    return client


def reload(model, pk):
    """Читает запись заново, минуя кэш текущей сессии."""
    db.session.expire_all()
    return db.session.get(model, pk)


def registration_count(workshop_id):
    return Registration.query.filter_by(workshop_id=workshop_id).count()
