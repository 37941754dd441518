"""Shared fixtures: an in-memory SQLite store, ``.xlsx`` and record builders."""

from __future__ import annotations

import io
import uuid
from datetime import date, datetime, timezone
from typing import Callable, Optional

import openpyxl
import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from models.pericia import PericiaSchema

from processing.config import Settings
from processing.loaders.store import PericiaStore

XlsxBuilder = Callable[..., bytes]


def build_xlsx(
    rows: list[list[object]],
    hyperlinks: Optional[dict[tuple[int, int], str]] = None,
) -> bytes:
    """Write *rows* to the first sheet of a new workbook.

    *hyperlinks* maps 0-based ``(row, col)`` to a link target.
    """
    wb = openpyxl.Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    for (row, col), target in (hyperlinks or {}).items():
        ws.cell(row=row + 1, column=col + 1).hyperlink = target
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def import_row(
    numero_processo: Optional[str] = "0000001-11.2024.5.02.0001",
    requerente: Optional[str] = "João da Silva",
    requerido: Optional[str] = "Empresa X Ltda",
    vara: Optional[object] = "1ª VT",
    **columns: object,
) -> list[object]:
    """One row in the positional import layout (51 columns).

    Extra keyword arguments are ``c<index>=value`` overrides.
    """
    row: list[object] = [None] * 51
    row[2] = vara
    row[3] = requerente
    row[4] = numero_processo
    row[6] = requerido
    for key, value in columns.items():
        row[int(key[1:])] = value
    return row


IMPORT_HEADER = import_row("Nº do Processo", "Reclamante", "Reclamada", "Vara")


@pytest.fixture
def xlsx() -> XlsxBuilder:
    return build_xlsx


@pytest.fixture
def engine():
    """In-memory SQLite engine shared across connections."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine) -> PericiaStore:
    store = PericiaStore(engine)
    store.create_tables()
    return store


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        secret_key="test-secret",
        perito_padrao="Perito Teste",
    )


@pytest.fixture
def user_id() -> uuid.UUID:
    return uuid.UUID("11111111-1111-1111-1111-111111111111")


@pytest.fixture
def other_user_id() -> uuid.UUID:
    return uuid.UUID("22222222-2222-2222-2222-222222222222")


def pericia_schema(**overrides) -> PericiaSchema:
    """A persisted-looking perícia, for code that only reads records."""
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    fields = {
        "id": uuid.uuid4(),
        "user_id": uuid.uuid4(),
        "created_at": now,
        "updated_at": now,
        "numero_processo": "0001",
        "requerente": "João",
        "requerido": "Empresa X",
        "vara": "1ª VT",
        "perito": "Perito Teste",
        "data_nomeacao": date(2024, 1, 15),
    }
    fields.update(overrides)
    return PericiaSchema(**fields)
