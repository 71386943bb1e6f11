"""
Data models and serialization helpers for the invoice generator.

This package provides:
- Invoice domain models (InvoiceRecord, LineItem, Customer) and validation
- Company settings (CompanyInfo, BankAccount)
- UI state models (AppState, StatusMessage) for dcc.Store compatibility

All models use Python dataclasses.
"""

from invoice_gen.models.common import AppState, StatusMessage
from invoice_gen.models.company import (
    BankAccount,
    CompanyInfo,
    deserialize_company_info,
    is_company_payload,
    parse_logo_upload,
)
from invoice_gen.models.invoice import (
    Customer,
    DraftItem,
    InvoiceDraft,
    InvoiceRecord,
    LineItem,
    deserialize_invoice,
    deserialize_invoices,
    is_invoice_payload,
    new_draft,
    serialize_invoices,
    validate_invoice,
)

__all__ = [
    "AppState",
    "BankAccount",
    "CompanyInfo",
    "Customer",
    "DraftItem",
    "InvoiceDraft",
    "InvoiceRecord",
    "LineItem",
    "StatusMessage",
    "deserialize_company_info",
    "deserialize_invoice",
    "deserialize_invoices",
    "is_company_payload",
    "is_invoice_payload",
    "new_draft",
    "parse_logo_upload",
    "serialize_invoices",
    "validate_invoice",
]
