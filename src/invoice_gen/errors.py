"""
Exception taxonomy for the invoice generator.

- ValidationError: draft is missing required fields; nothing is persisted.
- NotFoundError: an operation targets an unknown invoice number.
- StorageError: serialization or backend write failed.
- SinkDispatchError: a replication forward failed. Carried inside
  TransportFailed outcomes and never raised past the sink adapter.
"""

from typing import Sequence


class InvoiceError(Exception):
    """Base class for all errors surfaced to the user."""


class ValidationError(InvoiceError):
    """Raised when an invoice draft fails validation."""

    def __init__(self, problems: Sequence[str]) -> None:
        self.problems = list(problems)
        super().__init__("; ".join(self.problems) or "invalid invoice")


class NotFoundError(InvoiceError):
    """Raised when an invoice number is not in the store."""

    def __init__(self, invoice_number: str) -> None:
        self.invoice_number = invoice_number
        super().__init__(f"Invoice not found: {invoice_number}")


class StorageError(InvoiceError):
    """Raised when the local store cannot be read or written."""


class SinkDispatchError(InvoiceError):
    """Describes a failed replication forward."""

    def __init__(self, action: str, reason: str) -> None:
        self.action = action
        self.reason = reason
        super().__init__(f"{action} dispatch failed: {reason}")
