"""Tabular decoder — workbook bytes to a grid of untyped cells, via openpyxl."""

from __future__ import annotations

import datetime
import io
import logging
import zipfile
from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

from openpyxl import load_workbook
from openpyxl.utils.datetime import to_excel
from openpyxl.utils.exceptions import InvalidFileException

from processing.exceptions import PlanilhaInvalidaError

logger = logging.getLogger(__name__)

Cell = Union[str, int, float, None]

_TEMPORAL_TYPES = (datetime.datetime, datetime.date, datetime.time, datetime.timedelta)


@dataclass
class Planilha:
    """A decoded worksheet.

    - rows:       rectangular grid, one list per physical row, in file order
    - hyperlinks: (row, col) -> link target, 0-based indices
    """

    rows: list[list[Cell]] = field(default_factory=list)
    hyperlinks: dict[tuple[int, int], str] = field(default_factory=dict)
    sheet_name: str = ""

    def __len__(self) -> int:
        return len(self.rows)

    def hyperlink_at(self, row: int, col: int) -> Optional[str]:
        return self.hyperlinks.get((row, col))

    def records(self, header_row: int = 0) -> Iterator[tuple[int, dict[str, Cell]]]:
        """Yield ``(physical_row_number, {header: cell})`` for every row after
        *header_row*. Row numbers are 1-based; blank headers are dropped."""
        if header_row >= len(self.rows):
            return
        headers = [
            str(h).strip() if h is not None and str(h).strip() else None
            for h in self.rows[header_row]
        ]
        for index in range(header_row + 1, len(self.rows)):
            row = self.rows[index]
            record = {h: cell for h, cell in zip(headers, row) if h is not None}
            yield index + 1, record


def _to_cell(value: object) -> Cell:
    """Collapse openpyxl value types onto str | number | None.

    Date and time typed cells become spreadsheet serials so the normalizers
    see the same encoding whatever the cell format was.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float, str)):
        return value
    if isinstance(value, _TEMPORAL_TYPES):
        return to_excel(value)
    return str(value)


def decode_planilha(data: bytes) -> Planilha:
    """Decode the first worksheet of an ``.xlsx`` workbook.

    Raises:
        PlanilhaInvalidaError: If *data* is empty or is not a readable workbook.
    """
    if not data:
        raise PlanilhaInvalidaError("Nenhum arquivo enviado")

    try:
        # Not read-only: read-only cells do not expose hyperlinks.
        workbook = load_workbook(io.BytesIO(data), data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as exc:
        raise PlanilhaInvalidaError(f"Arquivo não é uma planilha válida: {exc}") from exc

    try:
        if not workbook.worksheets:
            raise PlanilhaInvalidaError("A planilha não contém abas")
        sheet = workbook.worksheets[0]

        planilha = Planilha(sheet_name=sheet.title)
        for row_index, row in enumerate(sheet.iter_rows()):
            values: list[Cell] = []
            for col_index, cell in enumerate(row):
                values.append(_to_cell(cell.value))
                link = getattr(cell, "hyperlink", None)
                if link is not None and link.target:
                    planilha.hyperlinks[(row_index, col_index)] = link.target
            planilha.rows.append(values)
    finally:
        workbook.close()

    logger.info(
        "Decoded sheet %r: %d rows, %d hyperlinks",
        planilha.sheet_name,
        len(planilha.rows),
        len(planilha.hyperlinks),
    )
    return planilha
