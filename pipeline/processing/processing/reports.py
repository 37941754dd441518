"""Fee summary over a user's perícias."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

from models.pericia import PericiaSchema


@dataclass(frozen=True)
class ResumoHonorarios:
    total_honorarios: Decimal
    total_recebido: Decimal
    a_receber: Decimal
    # records without honorarios
    sem_valor: int

    def to_payload(self) -> dict[str, Any]:
        return {
            "totalHonorarios": str(self.total_honorarios),
            "totalRecebido": str(self.total_recebido),
            "aReceber": str(self.a_receber),
            "semValor": self.sem_valor,
        }


def resumo_honorarios(pericias: Iterable[PericiaSchema]) -> ResumoHonorarios:
    """Sum fees and received amounts. Unset values are skipped, not zeroed."""
    total_honorarios = Decimal("0")
    total_recebido = Decimal("0")
    sem_valor = 0
    for pericia in pericias:
        if pericia.honorarios is None:
            sem_valor += 1
        else:
            total_honorarios += pericia.honorarios
        if pericia.valor_recebimento is not None:
            total_recebido += pericia.valor_recebimento
    return ResumoHonorarios(
        total_honorarios=total_honorarios,
        total_recebido=total_recebido,
        a_receber=total_honorarios - total_recebido,
        sem_valor=sem_valor,
    )
