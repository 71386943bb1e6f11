"""
Shared infrastructure modules for the invoice generator.

Modules:
    logs: Logging utilities
    objects: JSON serialization
    paths: Data directory resolution
    stores: Durable key/value backends (disk, memory)
"""

from invoice_gen.lib import logs, objects, paths, stores

__all__ = ["logs", "objects", "paths", "stores"]
