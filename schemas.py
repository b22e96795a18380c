"""
Программа: «Atelier» – веб-приложение художественной галереи.
Модуль: schemas.py – схемы входных данных REST API.

Назначение модуля:
- Декларативная проверка тел запросов (pydantic) вместо ручных проверок в маршрутах.
- Поля принимаются в camelCase (как их отправляет SPA-клиент) и в snake_case.
- Превращение ошибок pydantic в читаемое сообщение и доменную ValidationError.
"""

from typing import Annotated, List, Literal, Optional

import pydantic
from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    PositiveFloat,
    StringConstraints,
    model_validator,
)
from pydantic.alias_generators import to_camel

from services.errors import ValidationError

Medium = Literal["oil", "acrylic", "watercolor", "mixed media", "digital"]
WorkshopType = Literal["online", "in-person"]
ExperienceLevel = Literal["beginner", "intermediate", "advanced"]
OrderStatus = Literal["pending", "completed", "cancelled"]

Text = Annotated[str, StringConstraints(min_length=1)]

# Первичные ключи хранятся в знаковом 64-битном INTEGER
MAX_RECORD_ID = 2**63 - 1
RecordId = Annotated[int, Field(gt=0, le=MAX_RECORD_ID)]


class ApiModel(BaseModel):
    """Общая конфигурация схем API."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class PartialModel(ApiModel):
    """Схема частичного обновления: переданные поля не могут быть null."""

    @model_validator(mode="after")
    def _reject_explicit_nulls(self):
        nulls = [name for name in self.model_fields_set if getattr(self, name) is None]
        if nulls:
            raise ValueError(f"fields cannot be null: {', '.join(sorted(nulls))}")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


# --- Каталог ---------------------------------------------------------------

class ArtworkCreate(ApiModel):
    title: Text
    description: Text
    medium: Medium
    image_url: Text
    price: PositiveFloat
    size: Text
    year: Text
    is_featured: bool = False
    in_stock: bool = True
    is_framed: bool = False


class ArtworkUpdate(PartialModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    medium: Optional[Medium] = None
    image_url: Optional[str] = Field(None, min_length=1)
    price: Optional[PositiveFloat] = None
    size: Optional[str] = Field(None, min_length=1)
    year: Optional[str] = Field(None, min_length=1)
    is_featured: Optional[bool] = None
    in_stock: Optional[bool] = None
    is_framed: Optional[bool] = None


class WorkshopCreate(ApiModel):
    title: Text
    description: Text
    price: float = Field(..., ge=0)
    date: Text
    time: Text
    location: Text
    type: WorkshopType
    image_url: Text
    capacity: Optional[int] = Field(None, ge=0)
    spots_available: int = Field(..., ge=0)

    @model_validator(mode="after")
    def _spots_within_capacity(self):
        if self.capacity is None:
            self.capacity = self.spots_available
        if self.spots_available > self.capacity:
            raise ValueError("spotsAvailable cannot exceed capacity")
        return self


class WorkshopUpdate(PartialModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    date: Optional[str] = Field(None, min_length=1)
    time: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    type: Optional[WorkshopType] = None
    image_url: Optional[str] = Field(None, min_length=1)
    capacity: Optional[int] = Field(None, ge=0)
    spots_available: Optional[int] = Field(None, ge=0)


# --- Записи и уведомления ----------------------------------------------------

class RegistrationCreate(ApiModel):
    workshop_id: RecordId
    first_name: Text
    last_name: Text
    email: EmailStr
    phone: Text
    experience_level: ExperienceLevel


class WorkshopNotification(ApiModel):
    subject: Text
    message: Text


class ContactCreate(ApiModel):
    name: Text
    email: EmailStr
    subject: Text
    message: Text


class SubscriberCreate(ApiModel):
    email: EmailStr


class SiteSettingUpdate(ApiModel):
    setting_value: str


# --- Заказы -----------------------------------------------------------------

class OrderDraft(ApiModel):
    # Статус от клиента игнорируется: новый заказ всегда pending
    email: EmailStr
    total: PositiveFloat


class OrderItemDraft(ApiModel):
    artwork_id: RecordId
    quantity: int = 1
    price: PositiveFloat

    @model_validator(mode="after")
    def _single_unit(self):
        if self.quantity != 1:
            raise ValueError("each artwork is one of a kind, quantity must be 1")
        return self


class CheckoutRequest(ApiModel):
    order: OrderDraft
    items: List[OrderItemDraft] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _unique_artworks(self):
        seen = set()
        for item in self.items:
            if item.artwork_id in seen:
                raise ValueError(f"artwork {item.artwork_id} appears more than once")
            seen.add(item.artwork_id)
        return self


class OrderStatusUpdate(ApiModel):
    status: OrderStatus


# --- Аутентификация ---------------------------------------------------------

class LoginRequest(ApiModel):
    username: Text
    password: str = Field(..., min_length=1)


class RegisterRequest(ApiModel):
    username: str = Field(..., min_length=3, max_length=80)
    password: str = Field(..., min_length=1, max_length=128)
    email: Optional[EmailStr] = None


class ForgotPasswordRequest(ApiModel):
    email: EmailStr


class ResetPasswordRequest(ApiModel):
    token: Text
    new_password: str = Field(..., max_length=128)


def format_validation_error(exc: pydantic.ValidationError) -> str:
    """Формирует сообщение вида `Validation error: field: reason; ...`."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "__root__")
        message = error.get("msg", "invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        parts.append(f"{location}: {message}" if location else message)
    return "Validation error: " + "; ".join(parts)


def parse_payload(schema: type[BaseModel], payload):
    """Проверяет тело запроса по схеме или поднимает доменную ValidationError."""
    if payload is None:
        raise ValidationError("Validation error: request body must be a JSON object")
    try:
        return schema.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError(format_validation_error(exc)) from exc
