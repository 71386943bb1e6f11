"""Unit tests for the replication sink.

Tests the best-effort forwarder with a mocked httpx client.
"""

from unittest.mock import MagicMock, call

import httpx
import pytest

from invoice_gen.errors import SinkDispatchError
from invoice_gen.services.sink import (
    DELETE_INVOICE,
    SAVE_COMPANY_INFO,
    SAVE_INVOICE,
    Dispatched,
    ReplicationSink,
    SyncReport,
    TransportFailed,
)

SINK_URL = "https://script.example.com/macros/s/abc/exec"


@pytest.fixture
def configured_sink(http_client: MagicMock, sleeps: list[float]) -> ReplicationSink:
    return ReplicationSink(
        lambda: SINK_URL, client=http_client, sync_delay=0.1, sleep=sleeps.append
    )


class TestForward:
    """Single mutation forwards."""

    def test_unknown_action(self, configured_sink: ReplicationSink) -> None:
        with pytest.raises(ValueError, match="Unknown sink action"):
            configured_sink.forward("dropTables", {})

    def test_skipped_without_url(self, sink: ReplicationSink, http_client: MagicMock) -> None:
        outcome = sink.forward(DELETE_INVOICE, {"invoiceNumber": "INV-0001"})
        assert outcome == Dispatched(action=DELETE_INVOICE, skipped=True)
        assert outcome.ok
        http_client.post.assert_not_called()

    def test_posts_action_and_payload(
        self, configured_sink: ReplicationSink, http_client: MagicMock
    ) -> None:
        outcome = configured_sink.forward(DELETE_INVOICE, {"invoiceNumber": "INV-0001"})
        assert outcome == Dispatched(action=DELETE_INVOICE)
        http_client.post.assert_called_once_with(
            SINK_URL, json={"action": DELETE_INVOICE, "invoiceNumber": "INV-0001"}
        )

    def test_response_is_not_inspected(
        self, configured_sink: ReplicationSink, http_client: MagicMock
    ) -> None:
        """An error status still counts as dispatched."""
        http_client.post.return_value = MagicMock(status_code=500)
        assert configured_sink.forward(SAVE_INVOICE, {"invoice": {}}).ok

    def test_transport_failure_is_returned(
        self, configured_sink: ReplicationSink, http_client: MagicMock
    ) -> None:
        http_client.post.side_effect = httpx.ConnectError("Connection refused")
        outcome = configured_sink.forward(SAVE_INVOICE, {"invoice": {}})
        assert isinstance(outcome, TransportFailed)
        assert not outcome.ok
        assert isinstance(outcome.error, SinkDispatchError)
        assert outcome.error.action == SAVE_INVOICE
        assert "Connection refused" in outcome.error.reason

    def test_close_releases_client(
        self, configured_sink: ReplicationSink, http_client: MagicMock
    ) -> None:
        configured_sink.close()
        http_client.close.assert_called_once()


class TestSyncAll:
    """Bulk sync sends company info first, then each invoice."""

    invoices = [{"invoiceNumber": f"INV-000{n}"} for n in (1, 2, 3)]

    def test_tallies_and_continues_after_failure(
        self, configured_sink: ReplicationSink, http_client: MagicMock, sleeps: list[float]
    ) -> None:
        http_client.post.side_effect = [
            MagicMock(),
            MagicMock(),
            httpx.ReadTimeout("timed out"),
            MagicMock(),
        ]
        report = configured_sink.sync_all(self.invoices, {"name": "Acme"})

        assert report == SyncReport(success=2, failure=1, failed_numbers=["INV-0002"])
        assert report.total == 3
        assert http_client.post.call_args_list[0] == call(
            SINK_URL, json={"action": SAVE_COMPANY_INFO, "companyInfo": {"name": "Acme"}}
        )
        assert http_client.post.call_count == 4
        assert sleeps == [0.1, 0.1]

    def test_company_failure_is_not_counted(
        self, configured_sink: ReplicationSink, http_client: MagicMock
    ) -> None:
        http_client.post.side_effect = [httpx.ConnectError("down"), MagicMock()]
        report = configured_sink.sync_all(self.invoices[:1], {})
        assert (report.success, report.failure) == (1, 0)

    def test_skipped_without_url(self, sink: ReplicationSink, http_client: MagicMock) -> None:
        report = sink.sync_all(self.invoices, {})
        assert report.skipped
        http_client.post.assert_not_called()

    def test_skipped_without_invoices(
        self, configured_sink: ReplicationSink, http_client: MagicMock
    ) -> None:
        assert configured_sink.sync_all([], {}).skipped
        http_client.post.assert_not_called()

    def test_summary(self) -> None:
        assert SyncReport(success=2, failure=1).summary() == "Sync finished. Sent: 2, failed: 1"
        assert SyncReport(skipped=True).summary() == "Nothing was sent to the spreadsheet"
