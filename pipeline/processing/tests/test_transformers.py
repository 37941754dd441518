"""Tests for processing transformers — pure logic, no external I/O."""

from __future__ import annotations

from datetime import date, time
from decimal import Decimal

from conftest import IMPORT_HEADER, import_row

from models.pericia import PericiaCreateSchema, PericiaPatchSchema, PericiaStatus

from processing.readers import Planilha
from processing.transformers import (
    IMPORTER_REGISTRY,
    AtualizacaoTransformer,
    ImportacaoLegadaTransformer,
    ImportacaoTransformer,
    SkipReason,
    infer_status,
    locate_header_row,
)
from processing.transformers.atualizacao import KEY_HEADER

FIXED_TODAY = date(2025, 3, 10)


def _importer(cls=ImportacaoTransformer):
    return cls(perito="Perito Teste", today=lambda: FIXED_TODAY)


# -------------------------------------------------------------------- #
# Header location                                                       #
# -------------------------------------------------------------------- #


class TestLocateHeaderRow:
    """The header row is found by its marker text within the first 20 rows."""

    def test_marker_below_title_rows(self):
        """Title rows above the header are skipped."""
        planilha = Planilha(rows=[["CONTROLE DE PERÍCIAS"], [None], IMPORT_HEADER])

        assert locate_header_row(planilha) == 2

    def test_marker_absent_defaults_to_zero(self):
        """Without the marker, row 0 is the header."""
        planilha = Planilha(rows=[["a"], ["b"]])

        assert locate_header_row(planilha) == 0

    def test_marker_beyond_scan_window_ignored(self):
        """A marker on row 21 or later is not considered."""
        rows = [[None]] * 20 + [IMPORT_HEADER]

        assert locate_header_row(Planilha(rows=rows)) == 0


# -------------------------------------------------------------------- #
# Status inference                                                      #
# -------------------------------------------------------------------- #


class TestInferStatus:
    def test_acordo_without_delivery(self):
        assert infer_status(None, "Houve ACORDO entre as partes") == PericiaStatus.ACORDO_ANTES_PERICIA

    def test_acordo_after_delivery(self):
        assert infer_status(date(2024, 5, 1), "acordo homologado") == PericiaStatus.ACORDO_APOS_PERICIA

    def test_delivered_without_acordo(self):
        assert infer_status(date(2024, 5, 1), "procedente") == PericiaStatus.LAUDO_ENTREGUE

    def test_nothing_known(self):
        assert infer_status(None, None) == PericiaStatus.AGUARDANDO_LAUDO


# -------------------------------------------------------------------- #
# ImportacaoTransformer                                                 #
# -------------------------------------------------------------------- #


class TestImportacaoTransformer:
    """Positional extraction of new perícias."""

    def test_full_row(self):
        """Every mapped column lands in the right field with the right type."""
        row = import_row(
            c0=7,
            c1="São Paulo",
            c5="Soldador",
            c7=1,
            c10="1",
            c19=1,
            c21=1,
            c24=1,
            c26="AGUARDANDO  PERÍCIA",
            c27="15/01/2024",
            c28=45350,
            c29="08:30 / 14:00",
            c30="Rua A, 100",
            c33="15/03/24",
            c38="R$ 1.234,56",
            c39=50000,
            c41="Sé",
            c42=3,
            c43="Vermelha",
            c49="3.000,00",
            c50="  Observação  ",
        )
        planilha = Planilha(
            rows=[IMPORT_HEADER, row],
            hyperlinks={(1, 4): "https://pje.jus.br/p/1"},
        )

        [extracted] = list(_importer().transform(planilha))

        assert extracted.row == 2
        assert extracted.error is None and extracted.skip_reason is None
        record = extracted.record
        assert isinstance(record, PericiaCreateSchema)
        assert record.numero == 7
        assert record.cidade == "São Paulo"
        assert record.vara == "1ª VT"
        assert record.numero_processo == "0000001-11.2024.5.02.0001"
        assert record.funcao == "Soldador"
        assert record.nr15 == [1, 4, 13]
        assert record.nr16 == [1, 4]
        assert record.status == "AGUARDANDO PERÍCIA"
        assert record.data_nomeacao == date(2024, 1, 15)
        assert record.data_pericia_agendada == date(2024, 2, 28)
        assert record.horario == time(8, 30)
        assert record.endereco == "Rua A, 100"
        assert record.data_prazo == date(2024, 3, 15)
        assert record.valor_recebimento == Decimal("1234.56")
        assert record.valor_causa == Decimal("50000")
        assert record.estacao == "Sé"
        assert record.linha_numero == "3"
        assert record.linha_cor == "Vermelha"
        assert record.honorarios == Decimal("3000.00")
        assert record.observacoes == "Observação"
        assert record.link_processo == "https://pje.jus.br/p/1"
        assert record.perito == "Perito Teste"

    def test_blank_status_defaults_to_aguardando_laudo(self):
        planilha = Planilha(rows=[IMPORT_HEADER, import_row()])

        [extracted] = list(_importer().transform(planilha))

        assert extracted.record.status == PericiaStatus.AGUARDANDO_LAUDO.value

    def test_missing_nomeacao_uses_today(self):
        planilha = Planilha(rows=[IMPORT_HEADER, import_row()])

        [extracted] = list(_importer().transform(planilha))

        assert extracted.record.data_nomeacao == FIXED_TODAY

    def test_no_marks_means_not_applicable(self):
        """An annex block with no marks is None, not an empty list."""
        planilha = Planilha(rows=[IMPORT_HEADER, import_row(c8=0, c22="x")])

        [extracted] = list(_importer().transform(planilha))

        assert extracted.record.nr15 is None
        assert extracted.record.nr16 is None

    def test_short_row_is_tolerated(self):
        """Rows shorter than the layout read missing cells as blank."""
        short = import_row()[:7]
        planilha = Planilha(rows=[IMPORT_HEADER, short])

        [extracted] = list(_importer().transform(planilha))

        assert extracted.record is not None
        assert extracted.record.honorarios is None

    def test_missing_required_field_is_skipped(self):
        """A row without vara (or any other required field) is skipped."""
        planilha = Planilha(rows=[IMPORT_HEADER, import_row(vara=None)])

        [extracted] = list(_importer().transform(planilha))

        assert extracted.record is None
        assert extracted.skip_reason == SkipReason.CAMPOS_OBRIGATORIOS

    def test_blank_row_is_skipped(self):
        planilha = Planilha(rows=[IMPORT_HEADER, [None] * 51])

        [extracted] = list(_importer().transform(planilha))

        assert extracted.skip_reason == SkipReason.LINHA_VAZIA

    def test_numeric_vara_becomes_text(self):
        """A court number typed as a number is kept as its integral text."""
        planilha = Planilha(rows=[IMPORT_HEADER, import_row(vara=76.0)])

        [extracted] = list(_importer().transform(planilha))

        assert extracted.record.vara == "76"

    def test_rows_after_header_only(self):
        """Rows above and at the header are never extracted."""
        planilha = Planilha(rows=[["Título"], IMPORT_HEADER, import_row(), import_row("0002")])

        extracted = list(_importer().transform(planilha, header_row=1))

        assert [e.row for e in extracted] == [3, 4]
        assert [e.numero_processo for e in extracted] == ["0000001-11.2024.5.02.0001", "0002"]


class TestImportacaoLegadaTransformer:
    """The legacy variant infers status instead of reading its column."""

    def test_status_column_ignored(self):
        row = import_row(c26="SENTENÇA", c34="01/06/2024", c50="Acordo homologado")
        planilha = Planilha(rows=[IMPORT_HEADER, row])

        [extracted] = list(_importer(ImportacaoLegadaTransformer).transform(planilha))

        assert extracted.record.status == PericiaStatus.ACORDO_APOS_PERICIA.value

    def test_registry_names(self):
        assert IMPORTER_REGISTRY["planilha"] is ImportacaoTransformer
        assert IMPORTER_REGISTRY["legado"] is ImportacaoLegadaTransformer


# -------------------------------------------------------------------- #
# AtualizacaoTransformer                                                #
# -------------------------------------------------------------------- #


class TestAtualizacaoTransformer:
    """Header-keyed sparse patches."""

    def test_only_filled_cells_become_changes(self):
        """Blank cells are absent from the patch, never written as None."""
        planilha = Planilha(
            rows=[
                [KEY_HEADER, "Status", "Honorários", "Data Entrega", "Observações", "NR15"],
                ["0001", "SENTENÇA", "R$ 2.500,00", None, "  ", "1, 5, 13"],
            ]
        )

        [extracted] = list(AtualizacaoTransformer().transform(planilha))

        assert extracted.numero_processo == "0001"
        assert isinstance(extracted.record, PericiaPatchSchema)
        assert extracted.record.changes() == {
            "status": "SENTENÇA",
            "honorarios": Decimal("2500.00"),
            "nr15": [1, 5, 13],
        }

    def test_missing_key_is_skipped(self):
        planilha = Planilha(rows=[[KEY_HEADER, "Status"], [None, "SENTENÇA"]])

        [extracted] = list(AtualizacaoTransformer().transform(planilha))

        assert extracted.skip_reason == SkipReason.SEM_PROCESSO

    def test_blank_row_is_skipped(self):
        planilha = Planilha(rows=[[KEY_HEADER, "Status"], [None, None]])

        [extracted] = list(AtualizacaoTransformer().transform(planilha))

        assert extracted.skip_reason == SkipReason.LINHA_VAZIA

    def test_nothing_to_update_is_skipped(self):
        planilha = Planilha(rows=[[KEY_HEADER, "Status"], ["0001", None]])

        [extracted] = list(AtualizacaoTransformer().transform(planilha))

        assert extracted.skip_reason == SkipReason.SEM_ALTERACOES

    def test_unknown_headers_ignored(self):
        planilha = Planilha(rows=[[KEY_HEADER, "Coluna Extra", "Cidade"], ["0001", "x", "Santos"]])

        [extracted] = list(AtualizacaoTransformer().transform(planilha))

        assert extracted.record.changes() == {"cidade": "Santos"}

    def test_time_and_dates(self):
        planilha = Planilha(
            rows=[
                [KEY_HEADER, "Horário", "Data Perícia", "Data Recebimento"],
                ["0001", 0.375, "05/08/2024", 45500],
            ]
        )

        [extracted] = list(AtualizacaoTransformer().transform(planilha))

        assert extracted.record.changes() == {
            "horario": time(9, 0),
            "data_pericia_agendada": date(2024, 8, 5),
            "data_recebimento": date(2024, 7, 27),
        }
