"""
Local invoice service backed by a durable key/value store.

The whole invoice collection lives under one key as a JSON array. Every
mutation reads the collection, applies the change and writes the entire
array back in a single store call, so a failed write leaves the persisted
collection exactly as it was. Records are re-read from the store on every
call; there is no separate in-memory copy that could drift.

After a successful local write the mutation is forwarded to the
replication sink. The sink outcome is kept in last_sink_outcome and never
affects the local result.
"""

import threading
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Sequence

from invoice_gen import config
from invoice_gen.errors import StorageError
from invoice_gen.lib import logs
from invoice_gen.lib.objects import from_json, to_json
from invoice_gen.lib.stores import KeyValueStore
from invoice_gen.models.company import CompanyInfo, deserialize_company_info, is_company_payload
from invoice_gen.models.invoice import (
    InvoiceRecord,
    deserialize_invoices,
    is_invoice_payload,
    serialize_invoices,
    validate_invoice,
)
from invoice_gen.services.invoice_service import InvoiceService
from invoice_gen.services.sequencer import InvoiceNumberSequencer
from invoice_gen.services.sink import (
    DELETE_INVOICE,
    SAVE_COMPANY_INFO,
    SAVE_INVOICE,
    ReplicationSink,
    SyncReport,
)
from invoice_gen.utils import parse_timestamp, utc_now_iso

LOG = logs.logger(__file__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _created_sort_key(record: InvoiceRecord) -> datetime:
    moment = parse_timestamp(record.created_at)
    if moment is None:
        return _EPOCH
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


class LocalInvoiceService(InvoiceService):
    """
    Invoice service persisting to a KeyValueStore.

    Args:
        store: Durable backend (DiskStore in production, MemoryStore in tests).
        sink: Replication sink; defaults to one reading the stored sink URL.
        sequencer: Invoice number sequencer; defaults to one on the same store.
        clock: Returns the current UTC time, used for createdAt/updatedAt.
    """

    def __init__(
        self,
        store: KeyValueStore,
        sink: ReplicationSink | None = None,
        sequencer: InvoiceNumberSequencer | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._lock = threading.RLock()
        self._sink = sink or ReplicationSink(self.get_sink_url)
        self._sequencer = sequencer or InvoiceNumberSequencer(store)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self.last_sink_outcome = None

    def close(self) -> None:
        """Release the store and the sink's HTTP client."""
        self._sink.close()
        self._store.close()

    def _now(self) -> str:
        return utc_now_iso(self._clock())

    def _read_json(self, key: str, strict: bool) -> Any:
        """
        Read and decode a stored JSON value.

        Reads that only display data (strict=False) log and return None for
        an unreadable value. Reads that precede a write (strict=True) raise
        instead, so a corrupt value is never silently overwritten.
        """
        try:
            return from_json(self._store.get(key))
        except Exception as exc:
            LOG.error("_read_json - key:%s unreadable: %s", key, exc, exc_info=True)
            if strict:
                raise StorageError(f"Stored data under {key} could not be read") from exc
            return None

    def _write_json(self, key: str, value: Any) -> None:
        try:
            text = to_json(value)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Could not serialize data for {key}: {exc}") from exc
        self._write_text(key, text)

    def _write_text(self, key: str, text: str) -> None:
        try:
            self._store.set(key, text)
        except Exception as exc:
            LOG.error("_write_text - key:%s write failed: %s", key, exc, exc_info=True)
            raise StorageError(f"Could not write {key}: {exc}") from exc

    def _delete(self, key: str) -> None:
        try:
            self._store.delete(key)
        except Exception as exc:
            LOG.error("_delete - key:%s failed: %s", key, exc, exc_info=True)
            raise StorageError(f"Could not remove {key}: {exc}") from exc

    def _load_records(self, strict: bool = False) -> list[InvoiceRecord]:
        """Return records in stored (insertion) order."""
        payload = self._read_json(config.INVOICES_KEY, strict)
        if payload is not None and not isinstance(payload, list):
            LOG.error("_load_records - unexpected payload type %s", type(payload).__name__)
            if strict:
                raise StorageError("Stored invoice collection is not a list")
            return []
        return deserialize_invoices(payload)

    def save_invoice(self, record: InvoiceRecord | Mapping[str, Any]) -> InvoiceRecord:
        """
        Upsert an invoice keyed by invoice number.

        The record is re-validated so derived fields always match the line
        items at the moment of persist. An existing record keeps its
        createdAt; updatedAt is always set to now.

        Raises:
            ValidationError: If the record is missing required fields.
            StorageError: If the collection could not be read or written.
        """
        normalized = validate_invoice(record)
        with self._lock:
            records = self._load_records(strict=True)
            now = self._now()
            index = next(
                (
                    position
                    for position, existing in enumerate(records)
                    if existing.invoice_number == normalized.invoice_number
                ),
                None,
            )
            if index is None:
                saved = normalized.with_timestamps(now, now)
                records.append(saved)
            else:
                saved = normalized.with_timestamps(records[index].created_at or now, now)
                records[index] = saved
            self._write_json(config.INVOICES_KEY, serialize_invoices(records))

        LOG.info(
            "save_invoice - number:%s %s total:%s",
            saved.invoice_number,
            "inserted" if index is None else "updated",
            saved.total,
        )
        self.last_sink_outcome = self._sink.forward(SAVE_INVOICE, {"invoice": saved.to_dict()})
        return saved

    def list_invoices(self) -> Sequence[InvoiceRecord]:
        """Return every invoice sorted by createdAt, newest first."""
        return sorted(self._load_records(), key=_created_sort_key, reverse=True)

    def delete_invoice(self, invoice_number: str) -> bool:
        """
        Delete an invoice by exact number.

        Returns:
            True if removed, False if no invoice had that number.

        Raises:
            StorageError: If the collection could not be read or written.
        """
        with self._lock:
            records = self._load_records(strict=True)
            remaining = [r for r in records if r.invoice_number != invoice_number]
            if len(remaining) == len(records):
                LOG.info("delete_invoice - number:%s not found", invoice_number)
                return False
            self._write_json(config.INVOICES_KEY, serialize_invoices(remaining))

        LOG.info("delete_invoice - number:%s deleted", invoice_number)
        self.last_sink_outcome = self._sink.forward(
            DELETE_INVOICE, {"invoiceNumber": invoice_number}
        )
        return True

    def load_company_info(self) -> CompanyInfo:
        """Return stored company info, or the empty default shape."""
        payload = self._read_json(config.COMPANY_INFO_KEY, strict=False)
        if not isinstance(payload, Mapping):
            return CompanyInfo()
        return deserialize_company_info(payload)

    def save_company_info(self, info: CompanyInfo) -> CompanyInfo:
        """
        Replace the company info.

        Raises:
            StorageError: If the value could not be written.
        """
        with self._lock:
            self._write_json(config.COMPANY_INFO_KEY, info.to_dict())
        LOG.info("save_company_info - name:%s", info.name)
        self.last_sink_outcome = self._sink.forward(
            SAVE_COMPANY_INFO, {"companyInfo": info.to_dict()}
        )
        return info

    def next_invoice_number(self) -> str:
        with self._lock:
            return self._sequencer.next()

    def get_sink_url(self) -> str:
        return self._store.get(config.SINK_URL_KEY) or ""

    def set_sink_url(self, url: str) -> None:
        """Store the sink URL; an empty value disables forwarding."""
        cleaned = (url or "").strip()
        self._write_text(config.SINK_URL_KEY, cleaned)
        LOG.info("set_sink_url - configured:%s", bool(cleaned))

    def export_all_data(self) -> dict:
        """
        Return the backup document.

        companyInfo is the stored value as-is ({} when nothing was saved).
        """
        company = self._read_json(config.COMPANY_INFO_KEY, strict=False)
        return {
            "invoices": serialize_invoices(self.list_invoices()),
            "companyInfo": company if isinstance(company, Mapping) else {},
            "exportDate": self._now(),
        }

    def import_all_data(self, data: Mapping[str, Any]) -> bool:
        """
        Restore a backup, replacing each part that is present.

        A backup without "invoices" leaves the invoices untouched, and the
        same holds for "companyInfo". The sink is not notified.

        Returns:
            True on success, False when the document is malformed or the
            write failed.
        """
        if not isinstance(data, Mapping):
            LOG.error("import_all_data - backup is not an object")
            return False
        invoices = data.get("invoices")
        company = data.get("companyInfo")
        if invoices is not None and not isinstance(invoices, list):
            LOG.error("import_all_data - invoices is not a list")
            return False
        if company is not None and not isinstance(company, Mapping):
            LOG.error("import_all_data - companyInfo is not an object")
            return False
        if invoices is not None and not all(is_invoice_payload(entry) for entry in invoices):
            LOG.error("import_all_data - invoices contain a malformed entry")
            return False
        if company is not None and not is_company_payload(company):
            LOG.error("import_all_data - companyInfo has a malformed bank")
            return False

        try:
            with self._lock:
                if invoices is not None:
                    records = deserialize_invoices(invoices)
                    self._write_json(config.INVOICES_KEY, serialize_invoices(records))
                if company is not None:
                    self._write_json(
                        config.COMPANY_INFO_KEY, deserialize_company_info(company).to_dict()
                    )
        except StorageError as exc:
            LOG.error("import_all_data - failed: %s", exc)
            return False

        LOG.info(
            "import_all_data - invoices:%s company:%s",
            len(invoices) if invoices is not None else "kept",
            "replaced" if company is not None else "kept",
        )
        return True

    def clear_all_data(self) -> None:
        """
        Remove invoices and company info. The sink URL and numbering survive.

        Raises:
            StorageError: If a value could not be removed.
        """
        with self._lock:
            self._delete(config.INVOICES_KEY)
            self._delete(config.COMPANY_INFO_KEY)
        LOG.info("clear_all_data - done")

    def sync_all(self) -> SyncReport:
        """Forward the company info and every invoice to the sink."""
        invoices = serialize_invoices(self.list_invoices())
        return self._sink.sync_all(invoices, self.load_company_info().to_dict())
