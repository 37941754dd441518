"""Tests for the raw spreadsheet row models."""

from __future__ import annotations

from datetime import date, time
from decimal import Decimal

from models.raw import PlanilhaAtualizacaoRaw, PlanilhaImportacaoRaw


class TestPlanilhaImportacaoRaw:
    def test_cells_are_normalized(self):
        raw = PlanilhaImportacaoRaw.model_validate(
            {
                "numero_processo": " 0001 ",
                "numero": 4.0,
                "vara": 12.0,
                "status": "AGUARDANDO\nLAUDO",
                "data_nomeacao": "02/03/24",
                "horario": "09:15",
                "honorarios": "R$ 800,00",
                "nr15": [None, 1, None],
                "nr16": [None] * 5,
            }
        )

        assert raw.numero_processo == "0001"
        assert raw.numero == 4
        assert raw.vara == "12"
        assert raw.status == "AGUARDANDO LAUDO"
        assert raw.data_nomeacao == date(2024, 3, 2)
        assert raw.horario == time(9, 15)
        assert raw.honorarios == Decimal("800.00")
        assert raw.nr15 == [2]
        assert raw.nr16 is None

    def test_garbage_becomes_none(self):
        raw = PlanilhaImportacaoRaw.model_validate(
            {"data_entrega": "sem data", "valor_causa": "a combinar", "numero": "n/a"}
        )

        assert raw.data_entrega is None
        assert raw.valor_causa is None
        assert raw.numero is None

    def test_required_fields(self):
        full = PlanilhaImportacaoRaw(numero_processo="1", requerente="A", requerido="B", vara="1")
        missing = PlanilhaImportacaoRaw(numero_processo="1", requerente="A", requerido="  ", vara="1")

        assert full.has_required_fields
        assert not missing.has_required_fields


class TestPlanilhaAtualizacaoRaw:
    def test_annexes_from_text(self):
        raw = PlanilhaAtualizacaoRaw.model_validate({"nr15": "1, 14", "nr16": ""})

        assert raw.nr15 == [1, 14]
        assert raw.nr16 is None

    def test_unset_fields_dump_empty(self):
        raw = PlanilhaAtualizacaoRaw.model_validate({"cidade": "  ", "observacoes": None})

        assert raw.model_dump(exclude_none=True) == {}
