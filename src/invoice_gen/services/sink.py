"""
Replication sink adapter.

Mirrors local mutations to a spreadsheet web-hook (a Google Apps Script
deployment in practice) by POSTing {"action": ..., ...fields} as JSON.

The forward is best-effort. The response is never read, so a successful
outcome only means the request went out without a transport error; it is
never a confirmation that the remote side stored anything. Outcomes are
therefore Dispatched or TransportFailed, never "confirmed". Failures are
logged and returned, never raised, and nothing is retried.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

import httpx

from invoice_gen import config
from invoice_gen.errors import SinkDispatchError
from invoice_gen.lib import logs

LOG = logs.logger(__file__)

SAVE_INVOICE = "saveInvoice"
DELETE_INVOICE = "deleteInvoice"
SAVE_COMPANY_INFO = "saveCompanyInfo"
ACTIONS = frozenset({SAVE_INVOICE, DELETE_INVOICE, SAVE_COMPANY_INFO})


@dataclass(frozen=True)
class Dispatched:
    """The request left without a transport error (or no sink is configured)."""

    action: str
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class TransportFailed:
    """The request could not be sent."""

    action: str
    error: SinkDispatchError

    @property
    def ok(self) -> bool:
        return False


SinkOutcome = Dispatched | TransportFailed


@dataclass
class SyncReport:
    """
    Tally of a bulk sync.

    Attributes:
        success: Invoices dispatched without transport error.
        failure: Invoices whose dispatch failed.
        skipped: True when no sink URL is configured or nothing was sent.
        failed_numbers: Invoice numbers counted in failure.
    """

    success: int = 0
    failure: int = 0
    skipped: bool = False
    failed_numbers: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.success + self.failure

    def summary(self) -> str:
        if self.skipped:
            return "Nothing was sent to the spreadsheet"
        return f"Sync finished. Sent: {self.success}, failed: {self.failure}"


class ReplicationSink:
    """
    Best-effort forwarder to the configured sink URL.

    Attributes:
        url_provider: Returns the current sink URL ("" when not configured).
                      Read on every forward so settings changes apply at once.
    """

    def __init__(
        self,
        url_provider: Callable[[], str],
        client: httpx.Client | None = None,
        timeout: float = config.SINK_TIMEOUT,
        sync_delay: float = config.SINK_SYNC_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.url_provider = url_provider
        self._client = client
        self._timeout = timeout
        self._sync_delay = sync_delay
        self._sleep = sleep

    @property
    def configured(self) -> bool:
        return bool((self.url_provider() or "").strip())

    def _get_client(self) -> httpx.Client:
        """Get or create the HTTP client (lazy initialization)."""
        if self._client is None:
            self._client = httpx.Client(timeout=self._timeout)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def forward(self, action: str, payload: Mapping[str, Any]) -> SinkOutcome:
        """
        Send one mutation to the sink.

        Args:
            action: saveInvoice, deleteInvoice or saveCompanyInfo.
            payload: Action-specific fields merged into the JSON body.

        Returns:
            Dispatched (skipped=True when no URL is configured) or
            TransportFailed.

        Raises:
            ValueError: If action is not a known sink action.
        """
        if action not in ACTIONS:
            raise ValueError(f"Unknown sink action: {action}")

        url = (self.url_provider() or "").strip()
        if not url:
            return Dispatched(action=action, skipped=True)

        body = {"action": action, **payload}
        try:
            # The response is deliberately ignored.
            self._get_client().post(url, json=body)
        except httpx.HTTPError as exc:
            LOG.warning("forward - action:%s failed: %s", action, exc)
            return TransportFailed(
                action=action, error=SinkDispatchError(action, str(exc) or type(exc).__name__)
            )

        LOG.info("forward - action:%s dispatched", action)
        return Dispatched(action=action)

    def sync_all(
        self,
        invoices: Sequence[Mapping[str, Any]],
        company_info: Mapping[str, Any],
    ) -> SyncReport:
        """
        Forward company info and then every invoice, one at a time.

        A fixed delay separates invoice forwards. A failed invoice is
        counted and the loop continues; there is no cancel.

        Args:
            invoices: Serialized invoice records.
            company_info: Serialized company info (sent first, not counted).

        Returns:
            SyncReport with per-invoice success and failure counts.
        """
        if not self.configured:
            LOG.info("sync_all - no sink URL configured")
            return SyncReport(skipped=True)
        if not invoices:
            LOG.info("sync_all - no invoices to send")
            return SyncReport(skipped=True)

        report = SyncReport()
        company_outcome = self.forward(SAVE_COMPANY_INFO, {"companyInfo": dict(company_info)})
        if not company_outcome.ok:
            LOG.warning("sync_all - company info was not sent")

        for index, invoice in enumerate(invoices):
            if index:
                self._sleep(self._sync_delay)
            number = str(invoice.get("invoiceNumber", ""))
            outcome = self.forward(SAVE_INVOICE, {"invoice": dict(invoice)})
            if outcome.ok:
                report.success += 1
            else:
                report.failure += 1
                report.failed_numbers.append(number)

        LOG.info("sync_all - success:%s failure:%s", report.success, report.failure)
        return report
