"""Transformers — convert decoded spreadsheet rows into perícia schemas."""

from processing.transformers.atualizacao import UPDATE_COLUMNS, AtualizacaoTransformer
from processing.transformers.base import BasePlanilhaTransformer, ExtractedRow, SkipReason
from processing.transformers.importacao import (
    IMPORT_COLUMNS,
    ImportacaoLegadaTransformer,
    ImportacaoTransformer,
    infer_status,
    locate_header_row,
)

IMPORTER_REGISTRY: dict[str, type[ImportacaoTransformer]] = {
    "planilha": ImportacaoTransformer,
    "legado": ImportacaoLegadaTransformer,
}

__all__ = [
    # Base
    "BasePlanilhaTransformer",
    "ExtractedRow",
    "SkipReason",
    # Importer
    "IMPORT_COLUMNS",
    "ImportacaoTransformer",
    "ImportacaoLegadaTransformer",
    "infer_status",
    "locate_header_row",
    # Updater
    "UPDATE_COLUMNS",
    "AtualizacaoTransformer",
    # Registry
    "IMPORTER_REGISTRY",
]
