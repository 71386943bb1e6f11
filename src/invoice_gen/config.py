"""
Environment-driven configuration for the invoice generator.

Every setting is read once at import from an INVOICE_GEN_* environment
variable, falling back to the defaults below.
"""

import os


def _env_bool(key: str, default: bool = False) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes"}


def _env_int(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, default))
    except ValueError:
        return default


def _env_float(key: str, default: float) -> float:
    try:
        return float(os.getenv(key, default))
    except ValueError:
        return default


# Logging level for every invoice_gen logger
LOG_LEVEL = os.getenv("INVOICE_GEN_LOG_LEVEL") or os.getenv("LOG_LEVEL", "INFO")

# Service backend: "local" (diskcache under DATA_DIR) or "memory"
SERVICE_KIND = os.getenv("INVOICE_GEN_SERVICE", "local").lower()
DATA_DIR = os.getenv("INVOICE_GEN_DATA_DIR") or None

# Persisted keys
KEY_PREFIX = os.getenv("INVOICE_GEN_KEY_PREFIX", "invoiceGen_")
INVOICES_KEY = f"{KEY_PREFIX}invoices"
COMPANY_INFO_KEY = f"{KEY_PREFIX}companyInfo"
SINK_URL_KEY = f"{KEY_PREFIX}appsScriptUrl"
LAST_INVOICE_NUMBER_KEY = f"{KEY_PREFIX}lastInvoiceNumber"

# Invoice numbering
INVOICE_PREFIX = os.getenv("INVOICE_GEN_PREFIX", "INV")
INVOICE_NUMBER_WIDTH = _env_int("INVOICE_GEN_NUMBER_WIDTH", 4)

# Form defaults
DEFAULT_TAX_RATE = _env_float("INVOICE_GEN_DEFAULT_TAX_RATE", 10.0)
DEFAULT_DUE_DAYS = _env_int("INVOICE_GEN_DEFAULT_DUE_DAYS", 30)
CURRENCY_SYMBOL = os.getenv("INVOICE_GEN_CURRENCY_SYMBOL", "¥")

# Replication sink
SINK_TIMEOUT = _env_float("INVOICE_GEN_SINK_TIMEOUT", 10.0)
SINK_SYNC_DELAY = _env_float("INVOICE_GEN_SINK_SYNC_DELAY", 0.1)

# Company logo upload ceiling
LOGO_MAX_BYTES = _env_int("INVOICE_GEN_LOGO_MAX_BYTES", 2 * 1024 * 1024)

# Printable document: wait this long for the logo before printing
LOGO_LOAD_TIMEOUT_MS = 1000

# Dash server
APP_PORT = _env_int("INVOICE_GEN_PORT", 8050)
APP_DEBUG = _env_bool("INVOICE_GEN_DEBUG", False)
APP_TITLE = os.getenv("INVOICE_GEN_TITLE", "Invoice Generator")
