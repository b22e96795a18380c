"""
Программа: «Atelier» – веб-приложение художественной галереи.
Модуль: models/artwork.py – модель произведения искусства.

Каждое произведение – уникальный физический объект: флаг in_stock, а не остаток.
"""

from extensions import db

MEDIUMS = ("oil", "acrylic", "watercolor", "mixed media", "digital")


class Artwork(db.Model):
    """Класс `Artwork` описывает карточку работы в каталоге."""

    __tablename__ = "artworks"
    __table_args__ = (db.CheckConstraint("price > 0", name="price_positive"),)

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    medium = db.Column(db.String(40), nullable=False, index=True)
    image_url = db.Column(db.String(500), nullable=False)
    price = db.Column(db.Float, nullable=False)
    size = db.Column(db.String(80), nullable=False)
    year = db.Column(db.String(10), nullable=False)
    is_featured = db.Column(db.Boolean, nullable=False, default=False)
    in_stock = db.Column(db.Boolean, nullable=False, default=True)
    is_framed = db.Column(db.Boolean, nullable=False, default=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "medium": self.medium,
            "imageUrl": self.image_url,
            "price": self.price,
            "size": self.size,
            "year": self.year,
            "isFeatured": bool(self.is_featured),
            "inStock": bool(self.in_stock),
            "isFramed": bool(self.is_framed),
        }
