"""Import and update pipelines: decode -> extract -> write, one row at a time.

Rows are processed strictly in file order. Each row's write is its own
transaction, so a batch interrupted midway stays partially applied.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from processing.config import Settings
from processing.exceptions import NaoAutenticadoError
from processing.loaders.store import PericiaStore, StoreError
from processing.readers import decode_planilha
from processing.results import BatchResult
from processing.transformers import (
    IMPORTER_REGISTRY,
    AtualizacaoTransformer,
    ExtractedRow,
    locate_header_row,
)

logger = logging.getLogger(__name__)

DEFAULT_VARIANT = "planilha"


def _require_owner(user_id: Optional[uuid.UUID]) -> uuid.UUID:
    if user_id is None:
        raise NaoAutenticadoError()
    return user_id


def _bookkeep_extraction(extracted: ExtractedRow, result: BatchResult) -> bool:
    """Account for skipped / failed extractions. Returns True if the row
    still has a record to write."""
    if extracted.skip_reason is not None:
        result.add_skip()
        return False
    if extracted.error is not None:
        result.add_failure(extracted.row, extracted.error)
        return False
    return True


def importar_planilha(
    data: bytes,
    user_id: Optional[uuid.UUID],
    store: PericiaStore,
    *,
    variante: str = DEFAULT_VARIANT,
    settings: Optional[Settings] = None,
) -> BatchResult:
    """Insert one new perícia per row of a positional import spreadsheet.

    Args:
        data: Raw ``.xlsx`` bytes.
        user_id: Owner of every inserted record.
        store: Record store to write to.
        variante: ``"planilha"`` (status column) or ``"legado"`` (status inferred).
        settings: Supplies the expert name written on every record.

    Returns:
        :class:`BatchResult` with per-row outcomes.

    Raises:
        NaoAutenticadoError: If *user_id* is missing.
        PlanilhaInvalidaError: If *data* is not a readable workbook.
        ValueError: If *variante* is unknown.
    """
    owner = _require_owner(user_id)
    if variante not in IMPORTER_REGISTRY:
        raise ValueError(
            f"Unsupported import variant: {variante!r}. Use one of {sorted(IMPORTER_REGISTRY)}."
        )
    settings = settings or Settings.from_env()

    planilha = decode_planilha(data)
    transformer = IMPORTER_REGISTRY[variante](perito=settings.perito_padrao)
    header_row = locate_header_row(planilha)

    result = BatchResult(
        message="Importação concluída",
        total=max(len(planilha.rows) - header_row - 1, 0),
    )
    logger.info("Import (%s) for user %s: header at row %d", variante, owner, header_row)

    for extracted in transformer.transform(planilha, header_row):
        if not _bookkeep_extraction(extracted, result):
            continue
        try:
            store.insert(extracted.record, owner)
        except StoreError as exc:
            logger.warning("Linha %d: insert rejected: %s", extracted.row, exc)
            result.add_failure(extracted.row, str(exc))
        else:
            logger.debug("Linha %d: imported %s", extracted.row, extracted.numero_processo)
            result.add_success()

    logger.info(
        "Import complete — total=%d successful=%d failed=%d skipped=%d",
        result.total,
        result.successful,
        result.failed,
        result.skipped,
    )
    return result


def atualizar_planilha(
    data: bytes,
    user_id: Optional[uuid.UUID],
    store: PericiaStore,
) -> BatchResult:
    """Apply each row of the update template as a sparse patch to the owned
    perícia with the same process number.

    Raises:
        NaoAutenticadoError: If *user_id* is missing.
        PlanilhaInvalidaError: If *data* is not a readable workbook.
    """
    owner = _require_owner(user_id)
    planilha = decode_planilha(data)
    transformer = AtualizacaoTransformer()

    result = BatchResult(
        message="Atualização concluída",
        total=max(len(planilha.rows) - transformer.header_row - 1, 0),
        report_not_found=True,
    )
    logger.info("Update for user %s: %d data rows", owner, result.total)

    for extracted in transformer.transform(planilha):
        if not _bookkeep_extraction(extracted, result):
            continue
        try:
            existing = store.find_one(extracted.numero_processo, owner)
            if existing is None:
                logger.info("Linha %d: perícia %s not found", extracted.row, extracted.numero_processo)
                result.add_not_found()
                continue
            changes = extracted.record.changes()
            store.update(existing.id, owner, changes)
        except StoreError as exc:
            logger.warning("Linha %d: update failed: %s", extracted.row, exc)
            result.add_failure(extracted.row, str(exc))
        else:
            logger.debug("Linha %d: updated fields %s", extracted.row, sorted(changes))
            result.add_success()

    logger.info(
        "Update complete — total=%d successful=%d not_found=%d failed=%d skipped=%d",
        result.total,
        result.successful,
        result.not_found,
        result.failed,
        result.skipped,
    )
    return result
