"""
Service factory for the invoice generator.

This module provides the get_invoice_service() factory function that returns
the appropriate InvoiceService implementation based on configuration.

Available Implementations:
- local: Durable diskcache store under INVOICE_GEN_DATA_DIR
- memory: In-memory store (lost on exit), for demos and tests

The service is cached at the module level, so the same instance is reused
across all requests. Configure via INVOICE_GEN_SERVICE environment variable.
"""

from functools import cache
from typing import Callable, Dict

from invoice_gen import config
from invoice_gen.lib import logs, paths
from invoice_gen.lib.stores import DiskStore, MemoryStore
from invoice_gen.services.invoice_service import InvoiceService
from invoice_gen.services.invoice_service_local import LocalInvoiceService

LOG = logs.logger(__file__)

_SERVICE_REGISTRY: Dict[str, Callable[[], InvoiceService]] = {
    "local": lambda: LocalInvoiceService(DiskStore(paths.data_dir(config.DATA_DIR))),
    "memory": lambda: LocalInvoiceService(MemoryStore()),
}


@cache
def get_invoice_service(kind: str | None = None) -> InvoiceService:
    """Return the configured invoice service implementation."""
    resolved_kind = (kind or config.SERVICE_KIND).lower()
    LOG.info("get_invoice_service - kind:%s resolved_kind:%s", kind, resolved_kind)
    try:
        factory = _SERVICE_REGISTRY[resolved_kind]
    except KeyError as exc:
        msg = f"Unknown invoice service kind: {resolved_kind}"
        raise ValueError(msg) from exc
    return factory()


__all__ = ["InvoiceService", "LocalInvoiceService", "get_invoice_service"]
