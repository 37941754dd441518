"""Base transformer — abstract class and the per-row extraction outcome."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum
from typing import Iterator, Optional

from pydantic import BaseModel

from processing.readers import Cell, Planilha


class SkipReason(StrEnum):
    """Why a row was ignored without being counted as an error."""

    LINHA_VAZIA = "linha vazia"
    CAMPOS_OBRIGATORIOS = "campos obrigatórios ausentes"
    SEM_PROCESSO = "sem nº do processo"
    SEM_ALTERACOES = "nenhum campo para atualizar"


@dataclass
class ExtractedRow:
    """One spreadsheet row after extraction, before it reaches the store.

    Exactly one of ``record``, ``skip_reason`` or ``error`` is set.
    """

    row: int
    numero_processo: Optional[str] = None
    record: Optional[BaseModel] = None
    skip_reason: Optional[SkipReason] = None
    error: Optional[str] = None

    @classmethod
    def skipped(cls, row: int, reason: SkipReason) -> ExtractedRow:
        return cls(row=row, skip_reason=reason)

    @classmethod
    def failed(cls, row: int, error: str) -> ExtractedRow:
        return cls(row=row, error=error)


def cell_at(row: list[Cell], col: int) -> Cell:
    """Positional access tolerant of short rows."""
    return row[col] if col < len(row) else None


def is_blank_row(row: list[Cell]) -> bool:
    return all(c is None or (isinstance(c, str) and not c.strip()) for c in row)


class BasePlanilhaTransformer(ABC):
    """Abstract base for spreadsheet row extractors."""

    source_name: str  # e.g. "planilha", "atualizacao"

    @abstractmethod
    def transform(self, planilha: Planilha) -> Iterator[ExtractedRow]:
        """Yield one :class:`ExtractedRow` per data row, in file order.

        Implementations must be resilient: a row that cannot be extracted is
        yielded as failed and the remaining rows are still processed.
        """
