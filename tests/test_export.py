"""Unit tests for tabular, spreadsheet and backup exports."""

import io
from datetime import date

import pytest
from openpyxl import load_workbook

from invoice_gen.errors import ValidationError
from invoice_gen.export import (
    INVOICE_COLUMNS,
    ITEM_COLUMNS,
    backup_to_json,
    export_filename,
    parse_backup,
    to_csv,
    to_tabular,
    to_xlsx,
)
from invoice_gen.models import validate_invoice


@pytest.fixture
def records(make_draft) -> list:
    first = validate_invoice(
        make_draft(
            number="INV-0001",
            customer="Yamada, Inc.",
            items=[
                {"description": "A", "quantity": 2, "unitPrice": 500},
                {"description": "B", "quantity": 1, "unitPrice": 1000},
            ],
            createdAt="2026-01-02T03:04:05.678Z",
            updatedAt="2026-01-03T10:20:30.000Z",
        )
    )
    second = validate_invoice(make_draft(number="INV-0002", customer="Suzuki"))
    return [first, second]


class TestToTabular:
    """Flattened rows share a fixed column order."""

    def test_headers(self, records: list) -> None:
        tabular = to_tabular(records)
        assert tabular.invoice_sheet[0] == INVOICE_COLUMNS
        assert tabular.item_sheet[0] == ITEM_COLUMNS

    def test_invoice_rows(self, records: list) -> None:
        rows = to_tabular(records).invoice_sheet[1:]
        assert len(rows) == 2
        assert rows[0] == [
            "INV-0001",
            "2026-01-10",
            "2026-02-09",
            "Yamada, Inc.",
            "1 Main St",
            "555-0100",
            2000,
            10,
            200,
            2200,
            "2026-01-02 03:04",
            "2026-01-03 10:20",
        ]

    def test_item_rows_keyed_by_invoice(self, records: list) -> None:
        rows = to_tabular(records).item_sheet[1:]
        assert [row[0] for row in rows] == ["INV-0001", "INV-0001", "INV-0002"]
        assert rows[1] == ["INV-0001", "B", 1, 1000, 1000]

    def test_empty(self) -> None:
        tabular = to_tabular([])
        assert tabular.invoice_sheet == [INVOICE_COLUMNS]
        assert tabular.item_sheet == [ITEM_COLUMNS]


class TestCsv:
    def test_byte_order_mark_and_quoting(self, records: list) -> None:
        text = to_csv(to_tabular(records).invoice_sheet)
        assert text.startswith("\ufeffInvoice Number,Issue Date,Due Date,")
        lines = text.lstrip("\ufeff").splitlines()
        assert len(lines) == 3
        assert lines[1].startswith('INV-0001,2026-01-10,2026-02-09,"Yamada, Inc.",')


class TestXlsx:
    def test_two_sheets(self, records: list) -> None:
        workbook = load_workbook(io.BytesIO(to_xlsx(to_tabular(records))))
        assert workbook.sheetnames == ["Invoices", "Items"]

        invoices = list(workbook["Invoices"].values)
        assert list(invoices[0]) == INVOICE_COLUMNS
        assert invoices[1][0] == "INV-0001"
        assert invoices[1][9] == 2200

        items = list(workbook["Items"].values)
        assert len(items) == 4
        assert list(items[0]) == ITEM_COLUMNS


class TestBackupFiles:
    def test_filename(self) -> None:
        assert export_filename("invoices", "xlsx", date(2026, 1, 2)) == "invoices_20260102.xlsx"
        assert (
            export_filename("invoice_backup", "json", date(2026, 1, 2))
            == "invoice_backup_20260102.json"
        )

    def test_backup_json_keeps_non_ascii(self) -> None:
        text = backup_to_json({"companyInfo": {"name": "株式会社サンプル"}, "invoices": []})
        assert "株式会社サンプル" in text
        assert parse_backup(text)["companyInfo"]["name"] == "株式会社サンプル"

    def test_parse_bytes(self) -> None:
        assert parse_backup(b'{"invoices": []}') == {"invoices": []}

    @pytest.mark.parametrize("text", ["not json", "[1, 2]", ""])
    def test_parse_rejects(self, text: str) -> None:
        with pytest.raises(ValidationError):
            parse_backup(text)
