"""
Path utilities for the invoice generator.

Resolves the directories used for durable local data.
"""

import tempfile
from pathlib import Path


def temp_dir() -> Path:
    """Return the system temporary directory as a Path."""
    return Path(tempfile.gettempdir())


def data_dir(configured: str | None = None) -> Path:
    """
    Return the directory holding the local record store.

    Args:
        configured: Explicit directory, typically from INVOICE_GEN_DATA_DIR.
                    Falls back to a folder under the system temp directory.

    Returns:
        Path to the directory, created if it doesn't exist.
    """
    path = Path(configured).expanduser() if configured else temp_dir() / "invoice_gen"
    path.mkdir(parents=True, exist_ok=True)
    return path
