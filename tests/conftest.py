"""Shared fixtures for the invoice generator tests."""

import os
import time
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import httpx
import pytest

# Keep app imports off the on-disk store.
os.environ.setdefault("INVOICE_GEN_SERVICE", "memory")
# Export timestamps are shown in local time; pin it.
os.environ["TZ"] = "UTC"
if hasattr(time, "tzset"):
    time.tzset()

from invoice_gen import config  # noqa: E402
from invoice_gen.lib.stores import MemoryStore  # noqa: E402
from invoice_gen.services.invoice_service_local import LocalInvoiceService  # noqa: E402
from invoice_gen.services.sink import ReplicationSink  # noqa: E402


class FakeClock:
    """Returns a UTC time that advances one second per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def store() -> MemoryStore:
    """Create an empty in-memory store."""
    return MemoryStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def http_client() -> MagicMock:
    """Create a mocked httpx client; post() succeeds unless told otherwise."""
    return MagicMock(spec=httpx.Client)


@pytest.fixture
def sleeps() -> list[float]:
    """Collects the delays requested by the sink."""
    return []


@pytest.fixture
def sink(store: MemoryStore, http_client: MagicMock, sleeps: list[float]) -> ReplicationSink:
    return ReplicationSink(
        lambda: store.get(config.SINK_URL_KEY) or "",
        client=http_client,
        sync_delay=0.1,
        sleep=sleeps.append,
    )


@pytest.fixture
def service(store: MemoryStore, sink: ReplicationSink, clock: FakeClock) -> LocalInvoiceService:
    """Create a local service over the memory store with a mocked sink client."""
    return LocalInvoiceService(store, sink=sink, clock=clock)


@pytest.fixture
def make_draft():
    """Return a factory for camelCase invoice drafts."""

    def _make(number: str = "INV-0001", customer: str = "Acme Corp", items=None, **extra) -> dict:
        draft = {
            "invoiceNumber": number,
            "date": "2026-01-10",
            "dueDate": "2026-02-09",
            "customer": {"name": customer, "address": "1 Main St", "phone": "555-0100"},
            "items": items
            if items is not None
            else [{"description": "Consulting", "quantity": 2, "unitPrice": 500}],
            "taxRate": 10,
        }
        draft.update(extra)
        return draft

    return _make
