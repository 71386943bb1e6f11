"""
Layout helpers for the invoice generator Dash application.

This module defines the root layout structure including:
- dcc.Store components for UI state (active section, edit mode, status)
- dcc.Download target for exports, backups and printable invoices
- Navigation bar and the home, create and settings sections
- Preview dialog

build_layout() is served as a function so each page load gets today's date
in the form.
"""

from datetime import date

from dash import dcc, html
from dash_iconify import DashIconify

from invoice_gen import config
from invoice_gen.components.invoice_form import build_invoice_form, build_preview_modal
from invoice_gen.components.invoice_search import build_search_panel
from invoice_gen.components.settings_panel import build_settings_panel
from invoice_gen.models.common import AppState
from invoice_gen.utils import calculate_due_date, today_iso

SECTIONS = ("home", "create", "settings")

_NAV_LABELS = {
    "home": ("lucide:list", "Invoices"),
    "create": ("lucide:file-plus", "Create"),
    "settings": ("lucide:settings", "Settings"),
}


def build_layout(sync_visible: bool = False, today: date | None = None) -> html.Div:
    """
    Build the root layout.

    Args:
        sync_visible: Show the home sync button (a sink URL is configured).
        today: Date used for the blank form; defaults to today.

    Returns:
        Root html.Div containing the complete application layout.
    """
    issued = today_iso(today)
    return html.Div(
        className="app-shell",
        children=[
            # Download target for Excel, CSV, backup and printable files
            dcc.Download(id="download-file"),
            # Serialized AppState (query, edit mode)
            dcc.Store(id="invoice-state", data=AppState().to_dict()),
            # Which section is visible
            dcc.Store(id="active-section", data="home"),
            # Incremented after every mutation so the list re-renders
            dcc.Store(id="data-version", data=0),
            # Serialized StatusMessage for the alert banner
            dcc.Store(id="status-store", data=None),
            # Printable document handed to the browser print window
            dcc.Store(id="print-document", data=None),
            # Logo data URL pending in the settings form
            dcc.Store(id="logo-store", data=""),
            # Draft shown in the preview dialog
            dcc.Store(id="preview-draft", data=None),
            # Issue date last loaded into the form by an edit
            dcc.Store(id="loaded-date", data=None),
            html.Div(
                className="app-container",
                children=[
                    _build_page_header(),
                    _build_nav(),
                    html.Div(id="status-banner"),
                    html.Span(id="print-status", className="muted"),
                    html.Div(
                        id="home-section",
                        className="section active",
                        children=[
                            build_search_panel(sync_visible=sync_visible),
                            html.Div(id="results-container"),
                        ],
                    ),
                    html.Div(
                        id="create-section",
                        className="section",
                        children=[build_invoice_form(issued, calculate_due_date(issued))],
                    ),
                    html.Div(
                        id="settings-section",
                        className="section",
                        children=[build_settings_panel()],
                    ),
                ],
            ),
            build_preview_modal(),
        ],
    )


def _build_page_header() -> html.Div:
    """Return the hero text area at the top of the page."""
    return html.Div(
        className="page-header",
        children=[
            html.H1(config.APP_TITLE),
            html.P("Create, print and export invoices.", className="muted"),
        ],
    )


def _build_nav() -> html.Nav:
    return html.Nav(
        className="nav",
        children=[
            html.Button(
                id=f"nav-{section}",
                className="nav-link active" if section == "home" else "nav-link",
                children=[DashIconify(icon=icon, className="nav-icon"), label],
            )
            for section, (icon, label) in _NAV_LABELS.items()
        ],
    )
