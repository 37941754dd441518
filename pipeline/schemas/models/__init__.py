"""Perícias schemas — SQLAlchemy ORM model and Pydantic validation schemas."""

from models.base import Base, TimestampMixin
from models.pericia import (
    Pericia,
    PericiaCreateSchema,
    PericiaPatchSchema,
    PericiaSchema,
    PericiaStatus,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "Pericia",
    "PericiaCreateSchema",
    "PericiaPatchSchema",
    "PericiaSchema",
    "PericiaStatus",
]
