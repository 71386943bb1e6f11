"""
Invoice search panel and list toolbar.

Provides:
- Icon-prefixed search input with debounce
- Export buttons (Excel, CSV, JSON backup) and backup restore upload
- Spreadsheet sync button, hidden until a sink URL is configured
"""

from dash import dcc, html
from dash_iconify import DashIconify


def build_search_panel(initial_value: str = "", sync_visible: bool = False) -> html.Div:
    """
    Build the search panel with input and list actions.

    Args:
        initial_value: Pre-populated search query.
        sync_visible: Show the spreadsheet sync button.

    Returns:
        Card-styled div containing the search UI elements.
    """
    return html.Div(
        className="card search-card",
        children=[
            html.Div(
                className="input-with-icon",
                children=[
                    DashIconify(icon="lucide:search", className="input-icon"),
                    dcc.Input(
                        id="search-query",
                        type="text",
                        value=initial_value,
                        placeholder="Search by invoice number or customer name...",
                        className="search-input",
                        debounce=True,
                    ),
                ],
            ),
            html.Div(
                className="toolbar",
                children=[
                    html.Button(
                        id="create-new-btn",
                        className="button primary gap",
                        children=[DashIconify(icon="lucide:plus"), "New Invoice"],
                    ),
                    _toolbar_button("export-excel-btn", "lucide:sheet", "Excel"),
                    _toolbar_button("export-csv-btn", "lucide:file-spreadsheet", "CSV"),
                    _toolbar_button("export-backup-btn", "lucide:archive", "Backup"),
                    dcc.Upload(
                        id="backup-upload",
                        accept="application/json,.json",
                        children=_toolbar_button(
                            "restore-backup-btn", "lucide:archive-restore", "Restore"
                        ),
                    ),
                    _toolbar_button(
                        "sync-home-btn",
                        "lucide:cloud-upload",
                        "Send to Spreadsheet",
                        hidden=not sync_visible,
                    ),
                ],
            ),
        ],
    )


def _toolbar_button(button_id: str, icon: str, label: str, hidden: bool = False) -> html.Button:
    return html.Button(
        id=button_id,
        className="button secondary gap",
        style={"display": "none"} if hidden else {},
        children=[DashIconify(icon=icon, className="button-icon"), label],
    )
