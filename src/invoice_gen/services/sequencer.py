"""
Invoice number sequencer.

Numbers look like INV-0001. The last issued number is the high-water mark:
next() reads it, increments its trailing digits and persists the new value
before returning it. A number handed to a form that is then abandoned is
never reissued.
"""

import re

from invoice_gen import config
from invoice_gen.errors import StorageError
from invoice_gen.lib import logs
from invoice_gen.lib.stores import KeyValueStore

LOG = logs.logger(__file__)

_TRAILING_DIGITS = re.compile(r"\d+$")


class InvoiceNumberSequencer:
    """
    Issues monotonically increasing invoice numbers.

    Attributes:
        prefix: Literal placed before the dash.
        width: Minimum digit count; longer sequences are not truncated.
    """

    def __init__(
        self,
        store: KeyValueStore,
        prefix: str = config.INVOICE_PREFIX,
        width: int = config.INVOICE_NUMBER_WIDTH,
        key: str = config.LAST_INVOICE_NUMBER_KEY,
    ) -> None:
        self._store = store
        self._key = key
        self.prefix = prefix
        self.width = width

    def peek(self) -> str | None:
        """Return the last issued number without allocating a new one."""
        return self._store.get(self._key) or None

    def next(self) -> str:
        """
        Allocate, persist and return the next invoice number.

        Raises:
            StorageError: If the new high-water mark could not be persisted.
        """
        next_value = 1
        last = self.peek()
        if last:
            match = _TRAILING_DIGITS.search(last)
            if match:
                next_value = int(match.group(0)) + 1

        invoice_number = f"{self.prefix}-{next_value:0{self.width}d}"
        try:
            self._store.set(self._key, invoice_number)
        except Exception as exc:
            LOG.error("next - key:%s write failed: %s", self._key, exc, exc_info=True)
            raise StorageError(f"Could not record invoice number {invoice_number}") from exc
        LOG.info("next - last:%s issued:%s", last, invoice_number)
        return invoice_number
