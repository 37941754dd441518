"""Pericia (expert-examination case) — SQLAlchemy model and Pydantic schemas."""

from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from enum import StrEnum
from typing import Any, Optional

from sqlalchemy import ARRAY, JSON, CheckConstraint, Date, Index, Integer, Numeric, String, Text, Time
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, BaseEntitySchema, BaseSchema, OwnedMixin, TimestampMixin, UUIDPrimaryKeyMixin


class PericiaStatus(StrEnum):
    AGUARDANDO = "Aguardando"
    EM_ANDAMENTO = "Em andamento"
    SUSPENSA = "Suspensa"
    CONCLUIDA = "Concluída"
    ARQUIVADA = "Arquivada"
    ACORDO_ANTES_PERICIA = "FINALIZADO EM ACORDO ANTES DA PERÍCIA"
    AGENDAR_PERICIA = "AGENDAR PERÍCIA"
    AGUARDANDO_PERICIA = "AGUARDANDO PERÍCIA"
    AGUARDANDO_LAUDO = "AGUARDANDO LAUDO"
    AGUARDANDO_ESCLARECIMENTOS = "AGUARDANDO ESCLARECIMENTOS"
    LAUDO_ENTREGUE = "LAUDO/ESCLARECIMENTOS ENTREGUES"
    SENTENCA = "SENTENÇA"
    RECURSO_ORDINARIO = "RECURSO ORDINÁRIO"
    ACORDO_APOS_PERICIA = "ACORDO APÓS REALIZAÇÃO DA PERÍCIA"
    TRANSITO_EM_JULGADO = "CERTIDÃO DE TRÂNSITO EM JULGADO"
    SOLICITACAO_PAGAMENTO = "SOLICITAÇÃO DE PAGAMENTO DE HONORÁRIOS"
    HONORARIOS_RECEBIDOS = "HONORÁRIOS RECEBIDOS"
    REFAZER_PERICIA = "REFAZER A PERÍCIA - ORDEM JUDICIAL"


_STATUS_SQL_VALUES = ", ".join(f"'{s.value}'" for s in PericiaStatus)

# Postgres keeps annex codes in an int[]; SQLite (tests) falls back to JSON.
_ANEXOS_TYPE = ARRAY(Integer).with_variant(JSON(), "sqlite")


class Pericia(UUIDPrimaryKeyMixin, OwnedMixin, TimestampMixin, Base):
    __tablename__ = "pericias"

    numero_processo: Mapped[str] = mapped_column(String(50), nullable=False)
    numero: Mapped[Optional[int]] = mapped_column(Integer)
    status: Mapped[Optional[str]] = mapped_column(String(60))

    requerente: Mapped[str] = mapped_column(String(255), nullable=False)
    requerido: Mapped[str] = mapped_column(String(255), nullable=False)
    vara: Mapped[str] = mapped_column(String(50), nullable=False)
    perito: Mapped[str] = mapped_column(String(255), nullable=False)
    cidade: Mapped[Optional[str]] = mapped_column(String(100))
    endereco: Mapped[Optional[str]] = mapped_column(Text)
    funcao: Mapped[Optional[str]] = mapped_column(String(255))

    deslocamento: Mapped[Optional[str]] = mapped_column(String(255))
    estacao: Mapped[Optional[str]] = mapped_column(String(255))
    linha_numero: Mapped[Optional[str]] = mapped_column(String(50))
    linha_cor: Mapped[Optional[str]] = mapped_column(String(50))

    link_processo: Mapped[Optional[str]] = mapped_column(Text)
    email_reclamante: Mapped[Optional[str]] = mapped_column(String(255))
    email_reclamada: Mapped[Optional[str]] = mapped_column(String(255))

    nr15: Mapped[Optional[list[int]]] = mapped_column(_ANEXOS_TYPE)
    nr16: Mapped[Optional[list[int]]] = mapped_column(_ANEXOS_TYPE)

    data_nomeacao: Mapped[date] = mapped_column(Date, nullable=False)
    data_pericia_agendada: Mapped[Optional[date]] = mapped_column(Date)
    horario: Mapped[Optional[time]] = mapped_column(Time)
    data_prazo: Mapped[Optional[date]] = mapped_column(Date)
    data_entrega: Mapped[Optional[date]] = mapped_column(Date)
    prazo_esclarecimento: Mapped[Optional[date]] = mapped_column(Date)
    data_esclarecimento: Mapped[Optional[date]] = mapped_column(Date)
    data_recebimento: Mapped[Optional[date]] = mapped_column(Date)

    valor_causa: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2))
    honorarios: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2))
    valor_recebimento: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2))

    observacoes: Mapped[Optional[str]] = mapped_column(Text)

    __table_args__ = (
        CheckConstraint(
            f"status IS NULL OR status IN ({_STATUS_SQL_VALUES})",
            name="ck_pericia_status",
        ),
        # Non-unique; duplicates surface as DuplicateBusinessKeyError on lookup.
        Index("ix_pericias_user_processo", "user_id", "numero_processo"),
    )


class _PericiaFields(BaseSchema):
    numero: Optional[int] = None
    status: Optional[str] = None
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


class PericiaSchema(_PericiaFields, BaseEntitySchema):
    numero_processo: str
    requerente: str
    requerido: str
    vara: str
    perito: str
    data_nomeacao: date


class PericiaCreateSchema(_PericiaFields):
    """Insert payload. ``status`` is a plain string, checked by the store."""

    numero_processo: str
    requerente: str
    requerido: str
    vara: str
    perito: str
    data_nomeacao: date


class PericiaPatchSchema(_PericiaFields):
    """Sparse update payload: only the fields that carry a value are written."""

    requerente: Optional[str] = None
    requerido: Optional[str] = None
    vara: Optional[str] = None
    perito: Optional[str] = None
    data_nomeacao: Optional[date] = None

    def changes(self) -> dict[str, Any]:
        """Return the column -> value mapping to apply, ``None`` fields excluded."""
        return self.model_dump(mode="python", exclude_none=True)
