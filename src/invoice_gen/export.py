"""
Tabular, spreadsheet and backup exports of the invoice collection.

to_tabular() flattens records into two row sets sharing a fixed column
order: one row per invoice and one row per line item keyed by invoice
number. The same rows feed the CSV download (invoice sheet only) and the
two-sheet Excel workbook.
"""

import csv
import io
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Sequence

from openpyxl import Workbook

from invoice_gen.errors import ValidationError
from invoice_gen.lib.objects import from_json, to_json
from invoice_gen.models.invoice import InvoiceRecord
from invoice_gen.utils import date_stamp, format_datetime

# Bump when a column is added, removed or reordered.
EXPORT_SCHEMA_VERSION = 1

INVOICE_COLUMNS = [
    "Invoice Number",
    "Issue Date",
    "Due Date",
    "Customer Name",
    "Customer Address",
    "Customer Phone",
    "Subtotal",
    "Tax Rate",
    "Tax Amount",
    "Total",
    "Created At",
    "Updated At",
]

ITEM_COLUMNS = [
    "Invoice Number",
    "Description",
    "Quantity",
    "Unit Price",
    "Amount",
]

INVOICE_SHEET_TITLE = "Invoices"
ITEM_SHEET_TITLE = "Items"

Row = List[Any]


@dataclass(slots=True)
class TabularExport:
    """Header row followed by data rows, for each sheet."""

    invoice_sheet: List[Row]
    item_sheet: List[Row]


def _invoice_row(record: InvoiceRecord) -> Row:
    return [
        record.invoice_number,
        record.date,
        record.due_date,
        record.customer.name,
        record.customer.address or "",
        record.customer.phone or "",
        record.subtotal,
        record.tax_rate,
        record.tax,
        record.total,
        format_datetime(record.created_at),
        format_datetime(record.updated_at),
    ]


def to_tabular(records: Sequence[InvoiceRecord]) -> TabularExport:
    """Flatten records into invoice and item row sets, headers first."""
    invoice_sheet: List[Row] = [list(INVOICE_COLUMNS)]
    item_sheet: List[Row] = [list(ITEM_COLUMNS)]
    for record in records:
        invoice_sheet.append(_invoice_row(record))
        for item in record.items:
            item_sheet.append(
                [
                    record.invoice_number,
                    item.description,
                    item.quantity,
                    item.unit_price,
                    item.amount,
                ]
            )
    return TabularExport(invoice_sheet=invoice_sheet, item_sheet=item_sheet)


def to_csv(rows: Sequence[Row]) -> str:
    """
    Render rows as CSV text prefixed with a UTF-8 byte order mark.

    The BOM makes Excel open non-ASCII customer names correctly.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(rows)
    return "\ufeff" + buffer.getvalue()


def to_xlsx(tabular: TabularExport) -> bytes:
    """Build a two-sheet workbook and return it as .xlsx bytes."""
    workbook = Workbook()
    invoice_ws = workbook.active
    invoice_ws.title = INVOICE_SHEET_TITLE
    for row in tabular.invoice_sheet:
        invoice_ws.append(row)

    item_ws = workbook.create_sheet(ITEM_SHEET_TITLE)
    for row in tabular.item_sheet:
        item_ws.append(row)

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def export_filename(kind: str, extension: str, today: date | None = None) -> str:
    """
    Return the download file name, e.g. invoices_20260102.xlsx.

    Args:
        kind: "invoices" or "invoice_backup".
        extension: File extension without the dot.
    """
    return f"{kind}_{date_stamp(today)}.{extension}"


def backup_to_json(data: dict) -> str:
    """Serialize a backup document as indented JSON."""
    return to_json(data, indent=2)


def parse_backup(text: str | bytes) -> dict:
    """
    Parse a backup file.

    Raises:
        ValidationError: If the text is not a JSON object.
    """
    try:
        data = from_json(text, default=None)
    except ValueError as exc:
        raise ValidationError(["The backup file is not valid JSON"]) from exc
    if not isinstance(data, dict):
        raise ValidationError(["The backup file does not contain invoice data"])
    return data
