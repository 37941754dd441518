"""Exporters — write perícias and the update template as ``.xlsx``."""

from processing.exporters.workbook import build_update_template, export_pericias, format_brl

__all__ = [
    "build_update_template",
    "export_pericias",
    "format_brl",
]
