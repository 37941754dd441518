"""Template update transformer — header-keyed rows to sparse patches."""

from __future__ import annotations

import logging
from typing import Iterator

from models.pericia import PericiaPatchSchema
from models.raw.planilha_raw import PlanilhaAtualizacaoRaw
from normalizers import clean_text

from processing.readers import Cell, Planilha
from processing.transformers.base import BasePlanilhaTransformer, ExtractedRow, SkipReason, is_blank_row

logger = logging.getLogger(__name__)

KEY_HEADER = "Nº Processo*"

# Template header label -> pericias column. Order is the template's column order.
UPDATE_COLUMNS: dict[str, str] = {
    KEY_HEADER: "numero_processo",
    "Nº": "numero",
    "Status": "status",
    "Nº Vara": "vara",
    "Reclamante": "requerente",
    "Reclamada": "requerido",
    "Data Nomeação": "data_nomeacao",
    "Prazo Entrega": "data_prazo",
    "Data Perícia": "data_pericia_agendada",
    "Horário": "horario",
    "Data Entrega": "data_entrega",
    "Prazo Esclarec.": "prazo_esclarecimento",
    "Data Esclarec.": "data_esclarecimento",
    "Data Recebimento": "data_recebimento",
    "Cidade": "cidade",
    "Endereço": "endereco",
    "Função": "funcao",
    "Perito": "perito",
    "Valor da Causa": "valor_causa",
    "Honorários": "honorarios",
    "Valor Recebido": "valor_recebimento",
    "Deslocamento": "deslocamento",
    "Estação": "estacao",
    "Nº Linha": "linha_numero",
    "Cor Linha": "linha_cor",
    "NR15": "nr15",
    "NR16": "nr16",
    "Link Processo": "link_processo",
    "E-mail Reclamante": "email_reclamante",
    "E-mail Reclamada": "email_reclamada",
    "Observações": "observacoes",
}


class AtualizacaoTransformer(BasePlanilhaTransformer):
    """Build one sparse patch per row of the update template.

    A blank cell means "leave unchanged": it never becomes a ``None`` write.
    """

    source_name: str = "atualizacao"
    header_row: int = 0

    def transform(self, planilha: Planilha) -> Iterator[ExtractedRow]:
        for row_number, record in planilha.records(self.header_row):
            try:
                yield self._transform_row(row_number, record)
            except Exception as exc:
                logger.warning("%s: linha %d — error extracting row: %s", self.source_name, row_number, exc)
                yield ExtractedRow.failed(row_number, str(exc))

    def _transform_row(self, row_number: int, record: dict[str, Cell]) -> ExtractedRow:
        numero_processo = clean_text(record.get(KEY_HEADER))
        if not numero_processo:
            reason = SkipReason.LINHA_VAZIA if is_blank_row(list(record.values())) else SkipReason.SEM_PROCESSO
            logger.debug("%s: linha %d — %s, skipping", self.source_name, row_number, reason)
            return ExtractedRow.skipped(row_number, reason)

        cells = {
            field: record[header]
            for header, field in UPDATE_COLUMNS.items()
            if header in record and field != "numero_processo"
        }
        raw = PlanilhaAtualizacaoRaw.model_validate(cells)
        patch = PericiaPatchSchema.model_validate(
            raw.model_dump(exclude={"numero_processo"}, exclude_none=True)
        )

        if not patch.changes():
            logger.debug("%s: linha %d — nothing to update for %s", self.source_name, row_number, numero_processo)
            return ExtractedRow.skipped(row_number, SkipReason.SEM_ALTERACOES)

        return ExtractedRow(row=row_number, numero_processo=numero_processo, record=patch)
