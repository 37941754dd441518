"""Declarative base, column mixins and Pydantic bases for the perícias tables."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    # Native UUID on PostgreSQL, CHAR(32) on SQLite.
    type_annotation_map = {
        uuid.UUID: Uuid(as_uuid=True),
        datetime: DateTime(timezone=True),
    }


class UUIDPrimaryKeyMixin:
    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)


class OwnedMixin:
    """Every row belongs to exactly one user; all pipeline queries filter on it."""

    user_id: Mapped[uuid.UUID] = mapped_column(nullable=False, index=True)


class TimestampMixin:
    """``created_at`` / ``updated_at`` filled by the database."""

    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )


class BaseSchema(BaseModel):
    """Shared config: load from ORM objects, strip string whitespace."""

    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)


class BaseEntitySchema(BaseSchema):
    """A stored record: id, owner and store timestamps."""

    id: uuid.UUID
    user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
