"""
Программа: «Atelier» – веб-приложение художественной галереи.
Модуль: commands.py – служебные команды `flask ...`.

Назначение модуля:
- `flask init-db` – создание недостающих таблиц.
- `flask seed` – идемпотентное наполнение базы демонстрационными данными.
- `flask create-admin` и `flask reset-admin-password` – управление администраторами.
"""

import click

from extensions import db
from models import Artwork, SiteSetting, Workshop
from services import credentials, storage
from services.errors import ServiceError

SAMPLE_ARTWORKS = [
    {
        "title": "Sunset Mountains",
        "description": "A breathtaking depiction of mountains at sunset, capturing the warm golden light "
        "casting long shadows across the peaks.",
        "medium": "oil",
        "image_url": "https://images.unsplash.com/photo-1578301978693-85fa9c0320b9",
        "price": 750,
        "size": '24" x 36"',
        "year": "2023",
        "is_featured": True,
        "is_framed": True,
    },
    {
        "title": "Fluid Dreams",
        "description": "Abstract acrylic painting exploring the fluidity of dreams through vibrant colors "
        "and flowing forms.",
        "medium": "acrylic",
        "image_url": "https://images.unsplash.com/photo-1596548438137-d51ea5c83ca5",
        "price": 580,
        "size": '30" x 40"',
        "year": "2023",
        "is_featured": True,
        "is_framed": False,
    },
    {
        "title": "Serene Valley",
        "description": "A serene watercolor landscape capturing the misty morning atmosphere of a peaceful valley.",
        "medium": "watercolor",
        "image_url": "https://images.unsplash.com/photo-1605721911519-3dfeb3be25e7",
        "price": 420,
        "size": '18" x 24"',
        "year": "2022",
        "is_featured": True,
        "is_framed": True,
    },
    {
        "title": "Ocean Waves",
        "description": "A mesmerizing oil painting capturing the motion and power of ocean waves "
        "as they crash against the shore at sunset.",
        "medium": "oil",
        "image_url": "https://images.unsplash.com/photo-1579783902614-a3fb3927b6a5",
        "price": 680,
        "size": '24" x 36"',
        "year": "2023",
        "is_featured": False,
        "is_framed": True,
    },
    {
        "title": "Color Explosion",
        "description": "A vibrant explosion of colors in abstract form, representing the chaotic beauty "
        "of creative energy.",
        "medium": "acrylic",
        "image_url": "https://images.unsplash.com/photo-1536924940846-227afb31e2a5",
        "price": 520,
        "size": '30" x 30"',
        "year": "2022",
        "is_featured": False,
        "is_framed": False,
    },
]

SAMPLE_WORKSHOPS = [
    {
        "title": "Oil Painting Fundamentals",
        "description": "Learn the basics of oil painting including color mixing, layering techniques, "
        "and composition. All materials provided.",
        "price": 120,
        "date": "June 15, 2023",
        "time": "10:00 AM - 2:00 PM",
        "location": "Art Studio, 123 Creative Ave, City",
        "type": "in-person",
        "image_url": "https://images.unsplash.com/photo-1460661419201-fd4cecdf8a8b",
        "spots_available": 5,
    },
    {
        "title": "Watercolor Landscapes",
        "description": "Explore watercolor techniques to create stunning landscape paintings. "
        "Materials list provided upon registration.",
        "price": 80,
        "date": "June 22, 2023",
        "time": "6:00 PM - 8:00 PM",
        "location": "Zoom Session (Link sent after registration)",
        "type": "online",
        "image_url": "https://images.unsplash.com/photo-1587385789097-0197a7fbd179",
        "spots_available": 12,
    },
    {
        "title": "Abstract Acrylic Painting",
        "description": "Let your creativity flow with this abstract acrylic painting workshop. "
        "Perfect for all skill levels.",
        "price": 95,
        "date": "July 5, 2023",
        "time": "1:00 PM - 4:00 PM",
        "location": "Community Arts Center, 456 Gallery Road",
        "type": "in-person",
        "image_url": "https://images.unsplash.com/photo-1510832842230-87253f48d74f",
        "spots_available": 8,
    },
]


def _ensure_admin(app, username: str, password: str, email: str | None) -> bool:
    """Создаёт администратора, если его ещё нет. Возвращает True при создании."""
    if storage.get_user_by_username(username) is not None:
        return False
    credentials.register_user(username, password, email=email, is_admin=True)
    app.logger.info("Создан администратор %s", username)
    return True


def register_commands(app):
    @app.cli.command("init-db")
    def init_db_command():
        """Создать недостающие таблицы."""
        db.create_all()
        click.echo("Database tables are ready.")

    @app.cli.command("seed")
    def seed_command():
        """Наполнить базу демонстрационными работами, мастер-классами и настройками."""
        db.create_all()

        if Artwork.query.first() is None:
            for fields in SAMPLE_ARTWORKS:
                db.session.add(Artwork(**fields))
            click.echo(f"Created {len(SAMPLE_ARTWORKS)} sample artworks.")
        else:
            click.echo("Artworks already exist.")

        if Workshop.query.first() is None:
            for fields in SAMPLE_WORKSHOPS:
                db.session.add(Workshop(capacity=fields["spots_available"], **fields))
            click.echo(f"Created {len(SAMPLE_WORKSHOPS)} sample workshops.")
        else:
            click.echo("Workshops already exist.")

        for key, value in app.config["DEFAULT_SITE_SETTINGS"].items():
            if SiteSetting.query.filter_by(setting_key=key).first() is None:
                db.session.add(SiteSetting(setting_key=key, setting_value=value))
        db.session.commit()

        admin_password = app.config.get("ADMIN_PASSWORD")
        if admin_password:
            try:
                created = _ensure_admin(
                    app,
                    app.config["ADMIN_USERNAME"],
                    admin_password,
                    app.config.get("ADMIN_EMAIL") or None,
                )
            except ServiceError as exc:
                raise click.ClickException(exc.message) from exc
            click.echo("Admin user created." if created else "Admin user already exists.")
        else:
            click.echo("ADMIN_PASSWORD is not set, admin user was not created.")

        click.echo("Database seeding completed successfully!")

    @app.cli.command("create-admin")
    @click.option("--username", default=None, help="Имя администратора (по умолчанию ADMIN_USERNAME).")
    @click.option("--email", default=None, help="Email администратора.")
    @click.password_option(help="Пароль администратора.")
    def create_admin_command(username, email, password):
        """Создать учётную запись администратора."""
        username = username or app.config["ADMIN_USERNAME"]
        try:
            created = _ensure_admin(app, username, password, email or app.config.get("ADMIN_EMAIL") or None)
        except ServiceError as exc:
            raise click.ClickException(exc.message) from exc
        if not created:
            raise click.ClickException(f"User {username} already exists.")
        click.echo(f"Admin user {username} created.")

    @app.cli.command("reset-admin-password")
    @click.option("--username", default=None, help="Имя администратора (по умолчанию ADMIN_USERNAME).")
    @click.password_option(help="Новый пароль.")
    def reset_admin_password_command(username, password):
        """Задать администратору новый пароль."""
        username = username or app.config["ADMIN_USERNAME"]
        try:
            credentials.change_admin_password(username, password)
        except ServiceError as exc:
            raise click.ClickException(exc.message) from exc
        click.echo(f"Password for {username} has been reset.")
