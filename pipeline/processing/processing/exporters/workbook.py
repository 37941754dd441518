"""Workbook writers: the update template and the perícias export."""

from __future__ import annotations

import io
import logging
from datetime import date, time
from decimal import Decimal
from typing import Iterable, Optional

import openpyxl
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from models.anexos import format_anexos
from models.pericia import PericiaSchema, PericiaStatus

from processing.transformers.atualizacao import KEY_HEADER, UPDATE_COLUMNS

logger = logging.getLogger(__name__)

HEADER_COLOR = "1E40AF"
_BORDER_SIDE = Side(style="thin", color="D1D5DB")
_CELL_BORDER = Border(top=_BORDER_SIDE, left=_BORDER_SIDE, bottom=_BORDER_SIDE, right=_BORDER_SIDE)
_EMPTY = "-"

# status -> (background, text) hex colors
STATUS_COLORS: dict[str, tuple[str, str]] = {
    PericiaStatus.ACORDO_ANTES_PERICIA: ("EF4444", "FFFFFF"),
    PericiaStatus.REFAZER_PERICIA: ("EF4444", "FFFFFF"),
    PericiaStatus.AGENDAR_PERICIA: ("FACC15", "000000"),
    PericiaStatus.AGUARDANDO_PERICIA: ("FACC15", "000000"),
    PericiaStatus.AGUARDANDO_LAUDO: ("FACC15", "000000"),
    PericiaStatus.AGUARDANDO_ESCLARECIMENTOS: ("3B82F6", "FFFFFF"),
    PericiaStatus.LAUDO_ENTREGUE: ("3B82F6", "FFFFFF"),
    PericiaStatus.SENTENCA: ("3B82F6", "FFFFFF"),
    PericiaStatus.ACORDO_APOS_PERICIA: ("F97316", "FFFFFF"),
    PericiaStatus.TRANSITO_EM_JULGADO: ("9CA3AF", "FFFFFF"),
    PericiaStatus.SOLICITACAO_PAGAMENTO: ("A855F7", "FFFFFF"),
    PericiaStatus.HONORARIOS_RECEBIDOS: ("22C55E", "FFFFFF"),
    PericiaStatus.RECURSO_ORDINARIO: ("FFFFFF", "000000"),
    PericiaStatus.AGUARDANDO: ("FACC15", "000000"),
    PericiaStatus.EM_ANDAMENTO: ("3B82F6", "FFFFFF"),
    PericiaStatus.SUSPENSA: ("F97316", "FFFFFF"),
    PericiaStatus.CONCLUIDA: ("22C55E", "FFFFFF"),
    PericiaStatus.ARQUIVADA: ("9CA3AF", "FFFFFF"),
}

# (header, field, width)
EXPORT_COLUMNS: list[tuple[str, str, int]] = [
    ("Nº", "numero", 8),
    ("Nº Vara", "vara", 15),
    ("Reclamante", "requerente", 25),
    ("Nº Processo", "numero_processo", 22),
    ("Reclamada", "requerido", 25),
    ("Data Nomeação", "data_nomeacao", 15),
    ("Prazo Entrega", "data_prazo", 15),
    ("Data Perícia", "data_pericia_agendada", 15),
    ("Horário", "horario", 12),
    ("Data Entrega", "data_entrega", 15),
    ("Prazo Esclarec.", "prazo_esclarecimento", 15),
    ("Status", "status", 20),
    ("NR15", "nr15", 20),
    ("NR16", "nr16", 20),
    ("Cidade", "cidade", 18),
    ("Endereço", "endereco", 30),
    ("Função", "funcao", 18),
    ("Perito", "perito", 20),
    ("Valor da Causa", "valor_causa", 15),
    ("Honorários", "honorarios", 15),
    ("Valor Recebido", "valor_recebimento", 15),
    ("Observações", "observacoes", 35),
]

_TEMPLATE_WIDTHS: dict[str, int] = {
    KEY_HEADER: 25,
    "Nº": 8,
    "Status": 25,
    "Endereço": 30,
    "Link Processo": 40,
    "Observações": 35,
}


def format_date_br(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def format_brl(value: Decimal) -> str:
    """``Decimal("1234.5")`` -> ``"R$ 1.234,50"``."""
    us = f"{value:,.2f}"
    return "R$ " + us.replace(",", "_").replace(".", ",").replace("_", ".")


def _display(value: object) -> object:
    if value is None or value == "":
        return _EMPTY
    if isinstance(value, Decimal):
        return format_brl(value)
    if isinstance(value, date):
        return format_date_br(value)
    if isinstance(value, time):
        return value.strftime("%H:%M")
    return value


def _style_header(ws: Worksheet, widths: list[int]) -> None:
    """Bold white header on blue, frozen first row, fixed widths."""
    fill = PatternFill("solid", fgColor=HEADER_COLOR)
    font = Font(bold=True, color="FFFFFF", size=11)
    for cell in ws[1]:
        cell.font = font
        cell.fill = fill
        cell.alignment = Alignment(horizontal="center", vertical="center")
    ws.row_dimensions[1].height = 25
    ws.freeze_panes = "A2"
    for i, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(i)].width = width


def _save(wb: openpyxl.Workbook) -> bytes:
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def build_update_template() -> bytes:
    """Return the ``.xlsx`` template the update pipeline reads.

    The header labels are exactly the keys of ``UPDATE_COLUMNS``; a second
    sheet carries the filling instructions.
    """
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Atualização"

    headers = list(UPDATE_COLUMNS)
    ws.append(headers)
    _style_header(ws, [_TEMPLATE_WIDTHS.get(h, 15) for h in headers])

    instructions = wb.create_sheet("Instruções")
    instructions.column_dimensions["A"].width = 100
    lines = [
        "=== INSTRUÇÕES PARA ATUALIZAÇÃO EM MASSA ===",
        "",
        f"1. O campo '{KEY_HEADER}' é OBRIGATÓRIO e identifica qual perícia será atualizada.",
        "",
        "2. Preencha APENAS os campos que deseja atualizar. Campos vazios serão ignorados.",
        "",
        "3. Formatos aceitos:",
        "   - Datas: DD/MM/AAAA (ex: 01/01/2024)",
        "   - Horário: HH:MM (ex: 14:00)",
        "   - Valores monetários: 3000,50 ou R$ 3.000,50",
        "   - NR15 / NR16: números dos anexos separados por vírgula (ex: 1, 5, 13)",
        "",
        "4. Status válidos:",
        *(f"   - {status.value}" for status in PericiaStatus),
        "",
        "5. Você pode atualizar várias perícias de uma vez, cada uma em uma linha.",
    ]
    for line in lines:
        instructions.append([line])
    instructions["A1"].font = Font(bold=True, size=14)

    return _save(wb)


def export_pericias(pericias: Iterable[PericiaSchema], *, sheet_title: str = "Perícias") -> bytes:
    """Write perícias to ``.xlsx`` in the dashboard export layout."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = sheet_title
    ws.sheet_properties.tabColor = HEADER_COLOR

    ws.append([header for header, _, _ in EXPORT_COLUMNS])
    _style_header(ws, [width for _, _, width in EXPORT_COLUMNS])

    status_col = next(i for i, (_, name, _) in enumerate(EXPORT_COLUMNS, start=1) if name == "status")
    count = 0
    for pericia in pericias:
        values = []
        for _, name, _ in EXPORT_COLUMNS:
            value = getattr(pericia, name)
            if name in ("nr15", "nr16"):
                value = format_anexos(value)
            values.append(_display(value))
        ws.append(values)
        count += 1

        row = ws.max_row
        for cell in ws[row]:
            cell.border = _CELL_BORDER
            cell.alignment = Alignment(vertical="center", wrap_text=True)
        _color_status(ws.cell(row=row, column=status_col), pericia.status)

    ws.auto_filter.ref = f"A1:{get_column_letter(len(EXPORT_COLUMNS))}1"
    logger.info("Exported %d perícias", count)
    return _save(wb)


def _color_status(cell, status: Optional[str]) -> None:
    colors = STATUS_COLORS.get(status) if status else None
    if colors is None:
        return
    background, text = colors
    cell.fill = PatternFill("solid", fgColor=background)
    cell.font = Font(bold=True, color=text)
    cell.alignment = Alignment(horizontal="center", vertical="center")
