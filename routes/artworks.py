"""
Программа: «Atelier» – веб-приложение художественной галереи.
Модуль: routes/artworks.py – API каталога произведений.

Назначение модуля:
- Публичное чтение каталога (все, избранные, по технике, по идентификатору).
- Создание, изменение и удаление работ администратором.
- Загрузка изображений работ и выдача загруженных файлов.
"""

from flask import jsonify, request, send_from_directory
from flask_babel import gettext as _

from schemas import ArtworkCreate, ArtworkUpdate, parse_payload
from services import storage
from utils.access import admin_required
from utils.images import save_uploaded_image


def register_routes(app):
    """Регистрирует маршруты модуля в приложении."""

    @app.get("/api/artworks")
    def list_artworks():
        """Публичный каталог работ."""
        return jsonify([artwork.to_dict() for artwork in storage.list_artworks()])

    @app.get("/api/artworks/featured")
    def list_featured_artworks():
        return jsonify([artwork.to_dict() for artwork in storage.list_featured_artworks()])

    @app.get("/api/artworks/medium/<medium>")
    def list_artworks_by_medium(medium: str):
        return jsonify([artwork.to_dict() for artwork in storage.list_artworks_by_medium(medium)])

    @app.get("/api/artworks/<int:artwork_id>")
    def get_artwork(artwork_id: int):
        """Карточка работы по идентификатору."""
        return jsonify(storage.require_artwork(artwork_id).to_dict())

    @app.post("/api/artworks")
    @admin_required
    def create_artwork():
        """Добавление работы администратором."""
        payload = parse_payload(ArtworkCreate, request.get_json(silent=True))
        artwork = storage.create_artwork(payload.model_dump())
        app.logger.info("Добавлена работа #%s «%s»", artwork.id, artwork.title)
        return jsonify(artwork.to_dict()), 201

    # PUT оставлен для совместимости со старым клиентом
    @app.route("/api/artworks/<int:artwork_id>", methods=["PATCH", "PUT"])
    @admin_required
    def update_artwork(artwork_id: int):
        """Частичное обновление работы."""
        payload = parse_payload(ArtworkUpdate, request.get_json(silent=True))
        artwork = storage.update_artwork(artwork_id, payload.changes())
        return jsonify(artwork.to_dict())

    @app.delete("/api/artworks/<int:artwork_id>")
    @admin_required
    def delete_artwork(artwork_id: int):
        storage.delete_artwork(artwork_id)
        app.logger.info("Удалена работа #%s", artwork_id)
        return "", 204

    @app.post("/api/upload/image")
    @admin_required
    def upload_image():
        """Принимает файл из поля `image` и возвращает его публичный путь."""
        image_path = save_uploaded_image(request.files.get("image"))
        return jsonify({"imagePath": image_path, "message": _("File uploaded successfully")}), 201

    @app.route("/uploads/images/<path:filename>")
    def uploaded_file(filename):
        """Отдаёт ранее загруженное изображение."""
        return send_from_directory(app.config["UPLOAD_FOLDER"], filename)
