"""
Invoice domain models and serialization helpers.

The hierarchy mirrors the JSON stored in the local record store:

    InvoiceRecord
    ├── Customer (name, address, phone)
    ├── LineItem[] (description, quantity, unit price, amount)
    └── derived totals (subtotal, tax, total)

Records are persisted in camelCase (invoiceNumber, unitPrice, ...) so
backups written by the browser version of the tool load unchanged.

validate_invoice() is the only way a draft becomes a record: it applies the
lenient numeric coercion and recomputes every derived field.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, List, Mapping, Sequence

from benedict import benedict

from invoice_gen import config
from invoice_gen.calc import compute_totals, line_amount
from invoice_gen.errors import ValidationError
from invoice_gen.utils import calculate_due_date, parse_lenient, today_iso


@dataclass(slots=True)
class Customer:
    """The billed party."""

    name: str
    address: str = ""
    phone: str = ""

    def to_dict(self) -> dict:
        return {"name": self.name, "address": self.address, "phone": self.phone}


@dataclass(slots=True)
class LineItem:
    """Represents an individual line item on the invoice."""

    description: str
    quantity: float
    unit_price: float
    amount: float

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "amount": self.amount,
        }


@dataclass(slots=True)
class InvoiceRecord:
    """Primary dataclass for invoices."""

    invoice_number: str
    date: str
    due_date: str
    customer: Customer
    items: Sequence[LineItem]
    tax_rate: float
    subtotal: float
    tax: float
    total: float
    created_at: str = ""
    updated_at: str = ""

    def searchable_terms(self) -> List[str]:
        """Return the terms that should be matched when filtering."""
        terms = [self.invoice_number, self.customer.name]
        return [value.lower() for value in terms if value]

    def with_timestamps(self, created_at: str, updated_at: str) -> "InvoiceRecord":
        """Return a copy carrying the given persistence timestamps."""
        return replace(self, created_at=created_at, updated_at=updated_at)

    def to_dict(self) -> dict:
        """Convert to the camelCase JSON shape used on disk and on the wire."""
        return {
            "invoiceNumber": self.invoice_number,
            "date": self.date,
            "dueDate": self.due_date,
            "customer": self.customer.to_dict(),
            "items": [item.to_dict() for item in self.items],
            "subtotal": self.subtotal,
            "taxRate": self.tax_rate,
            "tax": self.tax,
            "total": self.total,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(slots=True)
class DraftItem:
    """Line item input before derived fields are computed."""

    description: str = ""
    quantity: float = 1
    unit_price: float = 0


@dataclass(slots=True)
class InvoiceDraft:
    """Blank form state produced when the create form is reset."""

    invoice_number: str
    date: str
    due_date: str
    tax_rate: float = config.DEFAULT_TAX_RATE
    customer: Customer = field(default_factory=lambda: Customer(name=""))
    items: List[DraftItem] = field(default_factory=lambda: [DraftItem()])

    def to_dict(self) -> dict:
        return {
            "invoiceNumber": self.invoice_number,
            "date": self.date,
            "dueDate": self.due_date,
            "customer": self.customer.to_dict(),
            "items": [
                {
                    "description": item.description,
                    "quantity": item.quantity,
                    "unitPrice": item.unit_price,
                }
                for item in self.items
            ],
            "taxRate": self.tax_rate,
        }


def new_draft(invoice_number: str, today: date | None = None) -> InvoiceDraft:
    """
    Return the blank draft shown after a form reset.

    The issue date is today and the due date DEFAULT_DUE_DAYS later.
    """
    issued = today_iso(today)
    return InvoiceDraft(
        invoice_number=invoice_number,
        date=issued,
        due_date=calculate_due_date(issued, config.DEFAULT_DUE_DAYS),
    )


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def validate_invoice(draft: Mapping[str, Any] | InvoiceRecord) -> InvoiceRecord:
    """
    Validate a draft and build a normalized InvoiceRecord.

    Numeric fields go through parse_lenient, so a non-numeric quantity,
    unit price or tax rate is treated as 0 instead of failing. amount,
    subtotal, tax and total are always recomputed; values supplied in the
    draft are ignored. dueDate is not compared with date.

    Args:
        draft: camelCase mapping (form payload, sink payload, backup entry)
               or an existing record.

    Returns:
        A record with derived fields filled in.

    Raises:
        ValidationError: Listing every missing required field.
    """
    if isinstance(draft, InvoiceRecord):
        draft = draft.to_dict()
    data = benedict(dict(draft), keypath_separator=".")

    problems: list[str] = []
    invoice_number = _text(data.get("invoiceNumber")).strip()
    if not invoice_number:
        problems.append("Invoice number is required")

    customer_name = _text(data.get("customer.name"))
    if not customer_name.strip():
        problems.append("Customer name is required")

    raw_items = data.get("items") or []
    if not isinstance(raw_items, (list, tuple)) or not raw_items:
        problems.append("At least one line item is required")
        raw_items = []

    items: list[LineItem] = []
    for position, raw in enumerate(raw_items, start=1):
        raw = raw if isinstance(raw, Mapping) else {}
        description = _text(raw.get("description"))
        if not description.strip():
            problems.append(f"Item {position}: description is required")
        quantity = parse_lenient(raw.get("quantity"))
        unit_price = parse_lenient(raw.get("unitPrice"))
        items.append(
            LineItem(
                description=description,
                quantity=quantity,
                unit_price=unit_price,
                amount=line_amount(quantity, unit_price),
            )
        )

    if problems:
        raise ValidationError(problems)

    tax_rate = parse_lenient(data.get("taxRate"))
    totals = compute_totals(items, tax_rate)
    return InvoiceRecord(
        invoice_number=invoice_number,
        date=_text(data.get("date")),
        due_date=_text(data.get("dueDate")),
        customer=Customer(
            name=customer_name,
            address=_text(data.get("customer.address")),
            phone=_text(data.get("customer.phone")),
        ),
        items=items,
        tax_rate=tax_rate,
        subtotal=totals.subtotal,
        tax=totals.tax,
        total=totals.total,
        created_at=_text(data.get("createdAt")),
        updated_at=_text(data.get("updatedAt")),
    )


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _entries(value: Any) -> list[Mapping[str, Any]]:
    if not isinstance(value, list):
        return []
    return [entry for entry in value if isinstance(entry, Mapping)]


def is_invoice_payload(payload: Any) -> bool:
    """Return True when a backup entry has the stored record's nested shape."""
    if not isinstance(payload, Mapping):
        return False
    customer = payload.get("customer")
    if customer is not None and not isinstance(customer, Mapping):
        return False
    items = payload.get("items")
    if items is None:
        return True
    return isinstance(items, list) and all(isinstance(item, Mapping) for item in items)


def deserialize_invoice(payload: Mapping[str, Any]) -> InvoiceRecord:
    """
    Convert a stored dictionary back into an InvoiceRecord.

    Stored values are taken as persisted; missing keys default to empty
    values so records from older versions still load. A customer or item
    that is not an object is treated as missing.
    """
    customer = _mapping(payload.get("customer"))
    return InvoiceRecord(
        invoice_number=_text(payload.get("invoiceNumber")),
        date=_text(payload.get("date")),
        due_date=_text(payload.get("dueDate")),
        customer=Customer(
            name=_text(customer.get("name")),
            address=_text(customer.get("address")),
            phone=_text(customer.get("phone")),
        ),
        items=[
            LineItem(
                description=_text(item.get("description")),
                quantity=parse_lenient(item.get("quantity")),
                unit_price=parse_lenient(item.get("unitPrice")),
                amount=parse_lenient(item.get("amount")),
            )
            for item in _entries(payload.get("items"))
        ],
        tax_rate=parse_lenient(payload.get("taxRate")),
        subtotal=parse_lenient(payload.get("subtotal")),
        tax=parse_lenient(payload.get("tax")),
        total=parse_lenient(payload.get("total")),
        created_at=_text(payload.get("createdAt")),
        updated_at=_text(payload.get("updatedAt")),
    )


def serialize_invoices(records: Sequence[InvoiceRecord]) -> list[dict]:
    """Convert records into the list persisted under the invoices key."""
    return [record.to_dict() for record in records]


def deserialize_invoices(payload: Sequence[Mapping[str, Any]] | None) -> list[InvoiceRecord]:
    """Convert a persisted list back into records, skipping non-mapping entries."""
    return [deserialize_invoice(item) for item in payload or [] if isinstance(item, Mapping)]
