"""
Invoice Generator: A Dash application for creating and printing invoices.

This package provides a local-first invoice tool: invoices and company
settings live in a durable on-disk store, every save can be mirrored to a
spreadsheet web-hook, and invoices export to Excel, CSV, JSON backups and
printable HTML.

Subpackages:
- components: Reusable Dash UI components
- models: Data models, validation and serialization
- services: Data access layer (local store, numbering, replication sink)
- lib: Logging, JSON and key/value store helpers

Main entry points:
- app.main(): Start the development server
- app.app: The Dash application instance (for WSGI deployment)
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
