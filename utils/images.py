"""
Программа: «Atelier» – веб-приложение художественной галереи.
Модуль: utils/images.py – проверка и сохранение загруженных изображений.

Назначение модуля:
- Проверка расширения файла и реального формата изображения через Pillow.
- Ограничение разрешения изображения.
- Сохранение файла под уникальным именем в папке загрузок.
"""

import os
import uuid

from flask import current_app
from flask_babel import gettext as _
from PIL import Image, UnidentifiedImageError

from services.errors import ValidationError
from utils.clock import utcnow

FORMAT_TO_EXTENSION = {"jpeg": "jpg", "png": "png", "gif": "gif", "webp": "webp"}


def allowed_file(filename: str) -> bool:
    allowed = current_app.config["ALLOWED_EXTENSIONS"]
    return "." in filename and filename.rsplit(".", 1)[1].lower() in allowed


def validate_uploaded_image(file_storage) -> str:
    """Проверяет, что файл – изображение допустимого формата; возвращает расширение."""
    invalid = _("Invalid file type. Only JPEG, PNG, GIF, and WebP images are allowed.")

    file_storage.stream.seek(0)
    try:
        with Image.open(file_storage.stream) as image:
            image.verify()
    except (UnidentifiedImageError, OSError):
        raise ValidationError(invalid)
    finally:
        file_storage.stream.seek(0)

    # verify() портит объект, поэтому формат и размеры читаем повторно
    try:
        with Image.open(file_storage.stream) as image:
            image_format = (image.format or "").lower()
            width, height = image.size
    except (UnidentifiedImageError, OSError):
        raise ValidationError(invalid)
    finally:
        file_storage.stream.seek(0)

    if image_format not in current_app.config["ALLOWED_IMAGE_FORMATS"]:
        raise ValidationError(invalid)

    if width * height > current_app.config["MAX_IMAGE_PIXELS"]:
        raise ValidationError(_("Image resolution is too large"))

    return FORMAT_TO_EXTENSION[image_format]


def save_uploaded_image(file_storage) -> str:
    """Сохраняет проверенный файл и возвращает его публичный путь."""
    if file_storage is None or not file_storage.filename:
        raise ValidationError(_("No file uploaded"))

    if not allowed_file(file_storage.filename):
        raise ValidationError(
            _("Invalid file type. Only JPEG, PNG, GIF, and WebP images are allowed.")
        )

    extension = validate_uploaded_image(file_storage)

    timestamp = utcnow().strftime("%Y%m%d_%H%M%S")
    unique_filename = f"image-{timestamp}_{uuid.uuid4().hex[:12]}.{extension}"
    filepath = os.path.join(current_app.config["UPLOAD_FOLDER"], unique_filename)
    file_storage.save(filepath)

    current_app.logger.info("Загружено изображение %s", unique_filename)
    return f"{current_app.config['UPLOAD_URL_PREFIX']}/{unique_filename}"
