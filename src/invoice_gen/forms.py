"""
Translation between Dash form values and domain payloads.

Callbacks receive flat lists of field values; these helpers turn them into
the camelCase draft accepted by validate_invoice() and back again. They
hold no Dash state so they can be unit tested directly.
"""

import base64
import binascii
from typing import Any, Mapping, Sequence

from invoice_gen import config
from invoice_gen.calc import Totals, compute_totals, line_amount
from invoice_gen.errors import ValidationError
from invoice_gen.models.company import BankAccount, CompanyInfo
from invoice_gen.models.invoice import DraftItem
from invoice_gen.utils import parse_lenient


def collect_items(
    descriptions: Sequence[Any],
    quantities: Sequence[Any],
    prices: Sequence[Any],
) -> list[dict]:
    """Zip the per-row field values into draft line items."""
    return [
        {"description": description or "", "quantity": quantity, "unitPrice": price}
        for description, quantity, price in zip(descriptions, quantities, prices)
    ]


def draft_from_form(
    invoice_number: str | None,
    invoice_date: str | None,
    due_date: str | None,
    customer_name: str | None,
    customer_address: str | None,
    customer_phone: str | None,
    tax_rate: Any,
    items: Sequence[Mapping[str, Any]],
) -> dict:
    """Return the camelCase draft for the current form contents."""
    return {
        "invoiceNumber": invoice_number or "",
        "date": invoice_date or "",
        "dueDate": due_date or "",
        "customer": {
            "name": customer_name or "",
            "address": customer_address or "",
            "phone": customer_phone or "",
        },
        "items": [dict(item) for item in items],
        "taxRate": tax_rate,
    }


def live_totals(
    quantities: Sequence[Any],
    prices: Sequence[Any],
    tax_rate: Any,
) -> tuple[list[float], Totals]:
    """
    Recompute row amounts and totals while the user types.

    Uses the same lenient parsing as validation, so what the form shows is
    what gets saved.
    """
    drafts = [
        DraftItem(quantity=parse_lenient(q), unit_price=parse_lenient(p))
        for q, p in zip(quantities, prices)
    ]
    amounts = [line_amount(item.quantity, item.unit_price) for item in drafts]
    return amounts, compute_totals(drafts, parse_lenient(tax_rate))


def form_values(draft: Mapping[str, Any]) -> tuple:
    """
    Return the form field values for a draft or stored record.

    Order: invoice number, date, due date, customer name, address, phone,
    tax rate, items.
    """
    customer = draft.get("customer") or {}
    items = list(draft.get("items") or []) or [DraftItem()]
    return (
        draft.get("invoiceNumber", ""),
        draft.get("date", ""),
        draft.get("dueDate", ""),
        customer.get("name", ""),
        customer.get("address", ""),
        customer.get("phone", ""),
        draft.get("taxRate", config.DEFAULT_TAX_RATE),
        [_item_dict(item) for item in items],
    )


def _item_dict(item: Any) -> dict:
    if isinstance(item, DraftItem):
        return {
            "description": item.description,
            "quantity": item.quantity,
            "unitPrice": item.unit_price,
        }
    return dict(item)


def company_from_form(
    name: str | None,
    address: str | None,
    phone: str | None,
    email: str | None,
    logo: str | None,
    bank_name: str | None,
    bank_branch: str | None,
    account_number: str | None,
    account_name: str | None,
) -> CompanyInfo:
    """Build CompanyInfo from the settings form."""
    return CompanyInfo(
        name=name or "",
        address=address or "",
        phone=phone or "",
        email=email or "",
        logo=logo or "",
        bank=BankAccount(
            name=bank_name or "",
            branch=bank_branch or "",
            account_number=account_number or "",
            account_name=account_name or "",
        ),
    )


def decode_upload(contents: str | None) -> bytes:
    """
    Decode a dcc.Upload "data:<mime>;base64,<payload>" string.

    Raises:
        ValidationError: If the upload is empty or not base64.
    """
    _, separator, payload = (contents or "").partition(",")
    if not separator:
        raise ValidationError(["No file was uploaded"])
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError(["The uploaded file could not be read"]) from exc


def next_row_index(row_ids: Sequence[Mapping[str, Any]]) -> int:
    """Return an index not used by any current item row."""
    return max((int(row_id["index"]) for row_id in row_ids), default=-1) + 1
