from __future__ import annotations

from dash import dcc, html
from dash_iconify import DashIconify

from invoice_gen.models.invoice import InvoiceRecord
from invoice_gen.utils import format_currency

"""Invoice summary card shown in the invoice list."""


def build_invoice_card(invoice: InvoiceRecord) -> html.Div:
    """Return a card styled container for a specific invoice."""
    number = invoice.invoice_number
    return html.Div(
        id=f"invoice-{number}",
        className="card invoice-card",
        children=[
            html.Div(
                className="invoice-card-header",
                children=[
                    html.Span(
                        className="title-row",
                        children=[
                            DashIconify(icon="lucide:file-text", className="title-icon"),
                            html.Span(number, className="invoice-number"),
                        ],
                    ),
                    _meta_item("lucide:calendar", invoice.date),
                ],
            ),
            html.Div(
                className="invoice-card-body",
                children=[
                    html.Div(invoice.customer.name, className="customer-name"),
                    html.Div(format_currency(invoice.total), className="invoice-amount"),
                ],
            ),
            _build_actions(number),
        ],
    )


def _build_actions(number: str) -> html.Div:
    """Return the edit, print and delete buttons."""
    return html.Div(
        className="invoice-card-actions",
        children=[
            html.Button(
                id={"type": "edit-invoice", "index": number},
                className="button secondary gap",
                children=[DashIconify(icon="lucide:pencil", className="button-icon"), "Edit"],
            ),
            html.Button(
                id={"type": "print-invoice", "index": number},
                className="button secondary gap",
                children=[DashIconify(icon="lucide:printer", className="button-icon"), "PDF"],
            ),
            dcc.ConfirmDialogProvider(
                id={"type": "delete-invoice", "index": number},
                message=f"Delete invoice {number}?",
                children=html.Button(
                    className="button danger gap",
                    children=[
                        DashIconify(icon="lucide:trash-2", className="button-icon"),
                        "Delete",
                    ],
                ),
            ),
        ],
    )


def _meta_item(icon: str, label: str) -> html.Span:
    """Return a metadata chip."""
    return html.Span(
        className="meta-item",
        children=[
            DashIconify(icon=icon, className="meta-icon"),
            html.Span(label),
        ],
    )
