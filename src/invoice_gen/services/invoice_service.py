"""
Abstract base class defining the invoice data access contract.

All invoice service implementations must extend InvoiceService. The
contract covers the invoice collection (upsert, lookup, listing, search,
delete), the company-info singleton, backup import/export and the
replication sink settings.

Implementations:
- LocalInvoiceService: Durable key/value store with sink forwarding
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from invoice_gen.errors import NotFoundError
from invoice_gen.models.company import CompanyInfo
from invoice_gen.models.invoice import InvoiceRecord
from invoice_gen.services.sink import SinkOutcome, SyncReport
from invoice_gen.utils import matches_query


class InvoiceService(ABC):
    """
    Abstract base class for invoice data access.

    Subclasses provide persistence; search and lookup helpers are derived
    from list_invoices().

    Attributes:
        last_sink_outcome: Outcome of the most recent replication forward,
                           so callers can surface a non-fatal warning.
    """

    last_sink_outcome: SinkOutcome | None = None

    @abstractmethod
    def save_invoice(self, record: InvoiceRecord | Mapping[str, Any]) -> InvoiceRecord:
        """
        Insert or replace the record keyed by its invoice number.

        Returns:
            The persisted record with derived fields and timestamps.
        """

    @abstractmethod
    def list_invoices(self) -> Sequence[InvoiceRecord]:
        """Return every invoice, newest createdAt first."""

    @abstractmethod
    def delete_invoice(self, invoice_number: str) -> bool:
        """Remove an invoice. Returns False when it was not found."""

    @abstractmethod
    def load_company_info(self) -> CompanyInfo:
        """Return the company info, or the empty default when none is saved."""

    @abstractmethod
    def save_company_info(self, info: CompanyInfo) -> CompanyInfo:
        """Replace the company info wholesale."""

    @abstractmethod
    def next_invoice_number(self) -> str:
        """Allocate the next invoice number."""

    @abstractmethod
    def export_all_data(self) -> dict:
        """Return the backup document {invoices, companyInfo, exportDate}."""

    @abstractmethod
    def import_all_data(self, data: Mapping[str, Any]) -> bool:
        """Replace invoices and company info from a backup document."""

    @abstractmethod
    def clear_all_data(self) -> None:
        """Remove every invoice and the company info."""

    @abstractmethod
    def get_sink_url(self) -> str:
        """Return the configured sink URL, or ""."""

    @abstractmethod
    def set_sink_url(self, url: str) -> None:
        """Persist the sink URL. An empty value disables forwarding."""

    @abstractmethod
    def sync_all(self) -> SyncReport:
        """Forward the company info and every invoice to the sink."""

    def get_invoice(self, invoice_number: str) -> InvoiceRecord | None:
        """Return the invoice with an exactly matching number, or None."""
        for record in self.list_invoices():
            if record.invoice_number == invoice_number:
                return record
        return None

    def require_invoice(self, invoice_number: str) -> InvoiceRecord:
        """
        Return the invoice or raise.

        Raises:
            NotFoundError: If no invoice has that number.
        """
        record = self.get_invoice(invoice_number)
        if record is None:
            raise NotFoundError(invoice_number)
        return record

    def search_invoices(self, query: str | None = None) -> Sequence[InvoiceRecord]:
        """
        Return invoices whose number or customer name contains the query.

        Matching is case-insensitive; an empty query returns list_invoices().
        """
        return [record for record in self.list_invoices() if matches_query(record, query)]

    @property
    def sink_configured(self) -> bool:
        return bool(self.get_sink_url().strip())
