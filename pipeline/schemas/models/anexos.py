"""NR15 / NR16 annex catalogs referenced by ``Pericia.nr15`` and ``Pericia.nr16``."""

from __future__ import annotations

from typing import Iterable, Optional

NR15_ANEXOS: dict[int, str] = {
    1: "RUÍDO CONTÍNUO",
    2: "RUÍDO DE IMPACTO",
    3: "CALOR",
    5: "RADIAÇÕES IONIZANTES",
    6: "PRESSÕES",
    7: "RADIAÇÕES NÃO-IONIZANTES",
    8: "VIBRAÇÃO",
    9: "FRIO",
    10: "UMIDADE",
    11: "AG. QUÍMICOS - LT",
    12: "POEIRAS",
    13: "AG. QUÍMICOS",
    14: "AG. BIOLÓGICOS",
}

NR16_ANEXOS: dict[int, str] = {
    1: "EXPLOSIVOS",
    2: "INFLAMÁVEIS",
    3: "SEGURANÇA/ROUBO",
    4: "ENERGIA ELÉTRICA",
    5: "MOTOCICLETA",
}

# Width of each annex block in the import spreadsheet.
NR15_COLUMNS = 14
NR16_COLUMNS = 5


def nr15_label(code: int) -> str:
    return NR15_ANEXOS.get(code, f"Anexo {code}")


def nr16_label(code: int) -> str:
    return NR16_ANEXOS.get(code, f"Anexo {code}")


def format_anexos(codes: Optional[Iterable[int]]) -> Optional[str]:
    """Render an annex set as ``"1, 5, 13"``; ``None`` stays ``None``."""
    if codes is None:
        return None
    return ", ".join(str(c) for c in sorted(set(codes)))
