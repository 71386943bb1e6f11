"""
Reusable Dash UI components for the invoice generator.

This package provides modular, composable components:
- invoice_card: Invoice summary card with edit, print and delete actions
- invoice_results: Invoice list with empty state and result count
- invoice_search: Search input and list toolbar (exports, backup, sync)
- invoice_form: Create/edit form with dynamic line item rows and preview
- settings_panel: Company information, logo, bank account and sink URL
- status: Alert banner for action feedback

All components are pure functions that return Dash html/dcc elements,
making them easy to test and compose.
"""

from invoice_gen.components.invoice_card import build_invoice_card
from invoice_gen.components.invoice_form import (
    build_invoice_form,
    build_item_row,
    build_item_rows,
    build_preview_modal,
    build_totals,
)
from invoice_gen.components.invoice_results import build_invoice_results
from invoice_gen.components.invoice_search import build_search_panel
from invoice_gen.components.settings_panel import build_logo_preview, build_settings_panel
from invoice_gen.components.status import build_status

__all__ = [
    "build_invoice_card",
    "build_invoice_form",
    "build_invoice_results",
    "build_item_row",
    "build_item_rows",
    "build_logo_preview",
    "build_preview_modal",
    "build_search_panel",
    "build_settings_panel",
    "build_status",
    "build_totals",
]
