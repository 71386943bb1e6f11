"""Unit tests for the Dash components and layout."""

from datetime import date

from invoice_gen.calc import Totals
from invoice_gen.components import (
    build_invoice_card,
    build_invoice_results,
    build_item_rows,
    build_logo_preview,
    build_status,
    build_totals,
)
from invoice_gen.layout import build_layout
from invoice_gen.models import StatusMessage, validate_invoice


def _walk(node):
    """Yield every component in a Dash tree."""
    if isinstance(node, (list, tuple)):
        for child in node:
            yield from _walk(child)
        return
    if node is None or isinstance(node, (str, int, float)):
        return
    yield node
    yield from _walk(getattr(node, "children", None))


def _text(node) -> str:
    parts = []
    for component in _walk(node):
        children = getattr(component, "children", None)
        if isinstance(children, (str, int, float)):
            parts.append(str(children))
        elif isinstance(children, list):
            parts.extend(str(c) for c in children if isinstance(c, (str, int, float)))
    return " ".join(parts)


def _ids(node) -> list:
    return [getattr(c, "id", None) for c in _walk(node) if getattr(c, "id", None) is not None]


class TestInvoiceResults:
    """Result list and empty states."""

    def test_empty_without_query(self) -> None:
        assert "No invoices yet" in _text(build_invoice_results([], ""))

    def test_empty_with_query(self) -> None:
        assert 'No results match "acme"' in _text(build_invoice_results([], " acme "))

    def test_cards(self, make_draft) -> None:
        records = [
            validate_invoice(make_draft(number="INV-0001")),
            validate_invoice(make_draft(number="INV-0002")),
        ]
        results = build_invoice_results(records, None)
        text = _text(results)
        assert "2 invoices found" in text
        assert "¥1,100" in text
        ids = _ids(results)
        assert {"type": "edit-invoice", "index": "INV-0002"} in ids
        assert {"type": "delete-invoice", "index": "INV-0001"} in ids


class TestInvoiceCard:
    def test_actions(self, make_draft) -> None:
        card = build_invoice_card(validate_invoice(make_draft()))
        assert card.id == "invoice-INV-0001"
        assert {"type": "print-invoice", "index": "INV-0001"} in _ids(card)
        assert "Acme Corp" in _text(card)


class TestForm:
    def test_item_rows(self) -> None:
        rows = build_item_rows([{"description": "A"}, {"description": "B"}])
        ids = _ids(rows)
        assert {"type": "item-description", "index": 1} in ids
        assert {"type": "remove-item", "index": 0} in ids

    def test_totals(self) -> None:
        text = _text(build_totals(Totals(2000, 200, 2200), 10))
        assert "Tax (10%)" in text
        assert "¥2,200" in text


class TestStatusAndLogo:
    def test_status(self) -> None:
        assert build_status(None) is None
        banner = build_status(StatusMessage.warning("careful"))
        assert banner.className == "alert alert-warning"
        assert "careful" in _text(banner)

    def test_logo_preview(self) -> None:
        assert "No logo" in _text(build_logo_preview(""))
        (image,) = build_logo_preview("data:image/png;base64,AAAA")
        assert image.src == "data:image/png;base64,AAAA"


class TestLayout:
    def test_sections_and_stores(self) -> None:
        layout = build_layout(today=date(2024, 12, 25))
        ids = _ids(layout)
        for expected in (
            "home-section",
            "create-section",
            "settings-section",
            "results-container",
            "items-container",
            "download-file",
            "status-store",
            "sink-url",
        ):
            assert expected in ids

    def test_blank_form_dates(self) -> None:
        layout = build_layout(today=date(2024, 12, 25))
        wanted = ("invoice-date", "due-date")
        inputs = {c.id: c for c in _walk(layout) if getattr(c, "id", None) in wanted}
        assert inputs["invoice-date"].value == "2024-12-25"
        assert inputs["due-date"].value == "2025-01-24"

    def test_sync_button_hidden_by_default(self) -> None:
        layout = build_layout()
        (button,) = [c for c in _walk(layout) if getattr(c, "id", None) == "sync-home-btn"]
        assert button.style == {"display": "none"}
