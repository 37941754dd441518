"""Positional import transformer — one new perícia per spreadsheet row."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Iterator, Optional

from models.anexos import NR15_COLUMNS, NR16_COLUMNS
from models.pericia import PericiaCreateSchema, PericiaStatus
from models.raw.planilha_raw import PlanilhaImportacaoRaw

from processing.readers import Cell, Planilha
from processing.transformers.base import (
    BasePlanilhaTransformer,
    ExtractedRow,
    SkipReason,
    cell_at,
    is_blank_row,
)

logger = logging.getLogger(__name__)

# The real header row is found by this label; title rows above it vary.
HEADER_MARKER = "Nº do Processo"
HEADER_SCAN_ROWS = 20

PROCESSO_COLUMN = 4
NR15_START = 7
NR16_START = NR15_START + NR15_COLUMNS

# field name -> 0-based column index
IMPORT_COLUMNS: dict[str, int] = {
    "numero": 0,
    "cidade": 1,
    "vara": 2,
    "requerente": 3,
    "numero_processo": PROCESSO_COLUMN,
    "funcao": 5,
    "requerido": 6,
    "status": 26,
    "data_nomeacao": 27,
    "data_pericia_agendada": 28,
    "horario": 29,
    "endereco": 30,
    "email_reclamante": 31,
    "email_reclamada": 32,
    "data_prazo": 33,
    "data_entrega": 34,
    "prazo_esclarecimento": 35,
    "data_esclarecimento": 36,
    "data_recebimento": 37,
    "valor_recebimento": 38,
    "valor_causa": 39,
    "deslocamento": 40,
    "estacao": 41,
    "linha_numero": 42,
    "linha_cor": 43,
    "honorarios": 49,
    "observacoes": 50,
}


def infer_status(data_entrega: Optional[date], observacoes: Optional[str]) -> PericiaStatus:
    """Derive a workflow status from the delivered date and the sentence text."""
    if observacoes and "acordo" in observacoes.lower():
        if data_entrega:
            return PericiaStatus.ACORDO_APOS_PERICIA
        return PericiaStatus.ACORDO_ANTES_PERICIA

    if data_entrega:
        return PericiaStatus.LAUDO_ENTREGUE

    return PericiaStatus.AGUARDANDO_LAUDO


def locate_header_row(planilha: Planilha) -> int:
    """Index of the first row (within the first 20) holding the header marker.

    Defaults to row 0 when the marker is never found.
    """
    for index, row in enumerate(planilha.rows[:HEADER_SCAN_ROWS]):
        if any(cell is not None and HEADER_MARKER in str(cell) for cell in row):
            logger.debug("Header found at row %d", index)
            return index
    logger.debug("Header marker %r not found, assuming row 0", HEADER_MARKER)
    return 0


class ImportacaoTransformer(BasePlanilhaTransformer):
    """Extract new perícias from the positional import layout.

    The status is read from its own column; blank falls back to
    ``AGUARDANDO LAUDO``.
    """

    source_name: str = "planilha"

    def __init__(self, perito: str, today: Callable[[], date] = date.today) -> None:
        self._perito = perito
        self._today = today

    def transform(
        self, planilha: Planilha, header_row: Optional[int] = None
    ) -> Iterator[ExtractedRow]:
        if header_row is None:
            header_row = locate_header_row(planilha)

        for index in range(header_row + 1, len(planilha.rows)):
            row_number = index + 1
            try:
                yield self._transform_row(planilha, index)
            except Exception as exc:
                logger.warning("%s: linha %d — error extracting row: %s", self.source_name, row_number, exc)
                yield ExtractedRow.failed(row_number, str(exc))

    def resolve_status(self, raw: PlanilhaImportacaoRaw) -> str:
        return raw.status or PericiaStatus.AGUARDANDO_LAUDO.value

    # ------------------------------------------------------------------ #
    # Internals                                                            #
    # ------------------------------------------------------------------ #

    def _transform_row(self, planilha: Planilha, index: int) -> ExtractedRow:
        row = planilha.rows[index]
        row_number = index + 1

        if is_blank_row(row):
            return ExtractedRow.skipped(row_number, SkipReason.LINHA_VAZIA)

        cells: dict[str, object] = {name: cell_at(row, col) for name, col in IMPORT_COLUMNS.items()}
        cells["nr15"] = _run(row, NR15_START, NR15_COLUMNS)
        cells["nr16"] = _run(row, NR16_START, NR16_COLUMNS)
        cells["link_processo"] = planilha.hyperlink_at(index, PROCESSO_COLUMN)

        raw = PlanilhaImportacaoRaw.model_validate(cells)

        if not raw.has_required_fields:
            logger.debug(
                "%s: linha %d — required fields missing (processo=%r, requerente=%r, requerido=%r, vara=%r)",
                self.source_name,
                row_number,
                raw.numero_processo,
                raw.requerente,
                raw.requerido,
                raw.vara,
            )
            return ExtractedRow.skipped(row_number, SkipReason.CAMPOS_OBRIGATORIOS)

        fields = raw.model_dump(exclude={"status", "perito", "data_nomeacao"})
        record = PericiaCreateSchema(
            **fields,
            status=self.resolve_status(raw),
            perito=self._perito,
            data_nomeacao=raw.data_nomeacao or self._today(),
        )
        return ExtractedRow(row=row_number, numero_processo=record.numero_processo, record=record)


class ImportacaoLegadaTransformer(ImportacaoTransformer):
    """Legacy single-shot import: the status column is ignored and the status
    is inferred from the delivered date and the sentence text instead."""

    source_name: str = "legado"

    def resolve_status(self, raw: PlanilhaImportacaoRaw) -> str:
        return infer_status(raw.data_entrega, raw.observacoes).value


def _run(row: list[Cell], start: int, width: int) -> list[Cell]:
    return [cell_at(row, col) for col in range(start, start + width)]
