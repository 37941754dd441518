"""Readers — decode uploaded workbooks into plain cell grids."""

from processing.readers.planilha import Cell, Planilha, decode_planilha

__all__ = [
    "Cell",
    "Planilha",
    "decode_planilha",
]
