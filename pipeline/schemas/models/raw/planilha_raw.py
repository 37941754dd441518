"""Raw spreadsheet row models — one untyped cell per field in, typed values out.

The transformers map cells to field names (by position or by header text);
these models run every cell through the matching normalizer.
"""

from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from normalizers import (
    clean_text,
    collapse_whitespace,
    extract_marked_positions,
    parse_currency,
    parse_date,
    parse_int_set,
    parse_integer,
    parse_time,
)

__all__ = [
    "PlanilhaImportacaoRaw",
    "PlanilhaAtualizacaoRaw",
]

_TEXT_FIELDS = (
    "numero_processo",
    "requerente",
    "requerido",
    "vara",
    "perito",
    "cidade",
    "endereco",
    "funcao",
    "deslocamento",
    "estacao",
    "linha_numero",
    "linha_cor",
    "link_processo",
    "email_reclamante",
    "email_reclamada",
    "observacoes",
)
_DATE_FIELDS = (
    "data_nomeacao",
    "data_pericia_agendada",
    "data_prazo",
    "data_entrega",
    "prazo_esclarecimento",
    "data_esclarecimento",
    "data_recebimento",
)
_MONEY_FIELDS = ("valor_causa", "honorarios", "valor_recebimento")


class _PlanilhaRow(BaseModel):
    numero_processo: Optional[str] = None
    numero: Optional[int] = None
    status: Optional[str] = None
    requerente: Optional[str] = None
    requerido: Optional[str] = None
    vara: Optional[str] = None
    perito: Optional[str] = None
    cidade: Optional[str] = None
    endereco: Optional[str] = None
    funcao: Optional[str] = None
    deslocamento: Optional[str] = None
    estacao: Optional[str] = None
    linha_numero: Optional[str] = None
    linha_cor: Optional[str] = None
    link_processo: Optional[str] = None
    email_reclamante: Optional[str] = None
    email_reclamada: Optional[str] = None
    nr15: Optional[list[int]] = None
    nr16: Optional[list[int]] = None
    data_nomeacao: Optional[date] = None
    data_pericia_agendada: Optional[date] = None
    horario: Optional[time] = None
    data_prazo: Optional[date] = None
    data_entrega: Optional[date] = None
    prazo_esclarecimento: Optional[date] = None
    data_esclarecimento: Optional[date] = None
    data_recebimento: Optional[date] = None
    valor_causa: Optional[Decimal] = None
    honorarios: Optional[Decimal] = None
    valor_recebimento: Optional[Decimal] = None
    observacoes: Optional[str] = None

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def _clean_text(cls, v: Any) -> Optional[str]:
        return clean_text(v)

    @field_validator("status", mode="before")
    @classmethod
    def _clean_status(cls, v: Any) -> Optional[str]:
        return collapse_whitespace(v)

    @field_validator("numero", mode="before")
    @classmethod
    def _parse_numero(cls, v: Any) -> Optional[int]:
        return parse_integer(v)

    @field_validator(*_DATE_FIELDS, mode="before")
    @classmethod
    def _parse_date(cls, v: Any) -> Optional[date]:
        return parse_date(v)

    @field_validator("horario", mode="before")
    @classmethod
    def _parse_time(cls, v: Any) -> Optional[time]:
        return parse_time(v)

    @field_validator(*_MONEY_FIELDS, mode="before")
    @classmethod
    def _parse_money(cls, v: Any) -> Optional[Decimal]:
        return parse_currency(v)


class PlanilhaImportacaoRaw(_PlanilhaRow):
    """A positional import row. ``nr15`` / ``nr16`` arrive as the run of
    annex mark cells and become the set of marked positions."""

    @field_validator("nr15", "nr16", mode="before")
    @classmethod
    def _marked_positions(cls, v: Any) -> Optional[list[int]]:
        if v is None:
            return None
        return extract_marked_positions(v)

    @property
    def has_required_fields(self) -> bool:
        return bool(self.numero_processo and self.requerente and self.requerido and self.vara)


class PlanilhaAtualizacaoRaw(_PlanilhaRow):
    """A template update row. ``nr15`` / ``nr16`` arrive as ``"1, 5"`` text."""

    @field_validator("nr15", "nr16", mode="before")
    @classmethod
    def _parse_codes(cls, v: Any) -> Optional[list[int]]:
        return parse_int_set(v)
