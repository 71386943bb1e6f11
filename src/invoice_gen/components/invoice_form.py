"""
Create/edit invoice form.

Line item rows use pattern-matching ids keyed by a per-form row index, so
callbacks can read every row with ALL and rows can be added or removed
without disturbing the others:

- {"type": "item-description", "index": n}
- {"type": "item-quantity", "index": n}
- {"type": "item-price", "index": n}
- {"type": "item-amount", "index": n}
- {"type": "remove-item", "index": n}
"""

from typing import Any, Mapping, Sequence

from dash import dcc, html
from dash_iconify import DashIconify

from invoice_gen import config
from invoice_gen.calc import Totals
from invoice_gen.utils import format_amount, format_currency


def build_item_row(index: int, item: Mapping[str, Any] | None = None) -> html.Div:
    """Return one editable line item row."""
    item = item or {}
    quantity = item.get("quantity", 1)
    unit_price = item.get("unitPrice", 0)
    return html.Div(
        className="item-row",
        id={"type": "item-row", "index": index},
        children=[
            dcc.Input(
                id={"type": "item-description", "index": index},
                type="text",
                value=item.get("description", ""),
                placeholder="Item description",
                className="item-description",
            ),
            dcc.Input(
                id={"type": "item-quantity", "index": index},
                type="number",
                value=quantity,
                min=0,
                step="any",
                className="item-quantity",
            ),
            dcc.Input(
                id={"type": "item-price", "index": index},
                type="number",
                value=unit_price,
                min=0,
                step="any",
                className="item-price",
            ),
            html.Span(
                id={"type": "item-amount", "index": index},
                className="item-amount",
                children=format_currency(item.get("amount", 0)),
            ),
            html.Button(
                id={"type": "remove-item", "index": index},
                className="button icon danger",
                title="Remove item",
                children=DashIconify(icon="lucide:x"),
            ),
        ],
    )


def build_item_rows(items: Sequence[Mapping[str, Any]]) -> list[html.Div]:
    """Return rows for the given items, indexed from 0."""
    return [build_item_row(index, item) for index, item in enumerate(items)]


def build_totals(totals: Totals, tax_rate: float) -> list[html.Div]:
    """Return the subtotal, tax and total lines."""
    return [
        _total_line("Subtotal", format_currency(totals.subtotal)),
        _total_line(f"Tax ({format_amount(tax_rate)}%)", format_currency(totals.tax)),
        _total_line("Total", format_currency(totals.total), "total-line grand-total"),
    ]


def _total_line(label: str, value: str, class_name: str = "total-line") -> html.Div:
    return html.Div(className=class_name, children=[html.Span(label), html.Span(value)])


def _field(label: str, control: Any) -> html.Label:
    return html.Label(
        className="field",
        children=[html.Span(label, className="field-label"), control],
    )


def build_invoice_form(
    invoice_date: str = "",
    due_date: str = "",
    tax_rate: float = config.DEFAULT_TAX_RATE,
) -> html.Div:
    """
    Build the invoice form.

    The invoice number stays empty until a form reset allocates one; an
    edit loads the stored record into every field.
    """
    return html.Div(
        className="card invoice-form",
        children=[
            html.H2(id="form-title", children="New Invoice"),
            html.Div(
                className="form-grid",
                children=[
                    _field(
                        "Invoice Number",
                        dcc.Input(id="invoice-number", type="text", readOnly=True),
                    ),
                    _field(
                        "Issue Date",
                        dcc.Input(id="invoice-date", type="date", value=invoice_date),
                    ),
                    _field("Due Date", dcc.Input(id="due-date", type="date", value=due_date)),
                ],
            ),
            html.H3("Bill To"),
            html.Div(
                className="form-grid",
                children=[
                    _field(
                        "Customer Name",
                        dcc.Input(id="customer-name", type="text", placeholder="Required"),
                    ),
                    _field("Address", dcc.Input(id="customer-address", type="text")),
                    _field("Phone", dcc.Input(id="customer-phone", type="tel")),
                ],
            ),
            html.H3("Items"),
            html.Div(
                className="item-row item-header",
                children=[
                    html.Span("Description"),
                    html.Span("Quantity"),
                    html.Span("Unit Price"),
                    html.Span("Amount"),
                    html.Span(""),
                ],
            ),
            html.Div(id="items-container", className="stack", children=[build_item_row(0)]),
            html.Button(
                id="add-item-btn",
                className="button secondary gap",
                children=[DashIconify(icon="lucide:plus"), "Add Item"],
            ),
            html.Div(
                className="totals-panel",
                children=[
                    _field(
                        "Tax Rate (%)",
                        dcc.Input(
                            id="tax-rate", type="number", min=0, step="any", value=tax_rate
                        ),
                    ),
                    html.Div(
                        id="totals-container",
                        className="totals",
                        children=build_totals(Totals(0.0, 0.0, 0.0), tax_rate),
                    ),
                ],
            ),
            html.Div(
                className="form-actions",
                children=[
                    html.Button(
                        id="save-btn",
                        className="button primary gap",
                        children=[DashIconify(icon="lucide:save"), "Save"],
                    ),
                    html.Button(
                        id="preview-btn",
                        className="button secondary gap",
                        children=[DashIconify(icon="lucide:eye"), "Preview"],
                    ),
                    html.Button(
                        id="cancel-btn",
                        className="button secondary gap",
                        children=[DashIconify(icon="lucide:x"), "Cancel"],
                    ),
                ],
            ),
        ],
    )


def build_preview_modal() -> html.Div:
    """Return the hidden preview dialog; the frame content is set by a callback."""
    return html.Div(
        id="preview-modal",
        className="modal hidden",
        children=[
            html.Div(
                className="modal-content card",
                children=[
                    html.Iframe(id="preview-frame", className="preview-frame"),
                    html.Div(
                        className="form-actions",
                        children=[
                            html.Button(
                                id="preview-print-btn",
                                className="button primary gap",
                                children=[DashIconify(icon="lucide:printer"), "Save as PDF"],
                            ),
                            html.Button(
                                id="preview-close-btn",
                                className="button secondary",
                                children="Close",
                            ),
                        ],
                    ),
                ],
            )
        ],
    )
