"""Unit tests for the printable invoice documents."""

import pytest

from invoice_gen.models import BankAccount, CompanyInfo, validate_invoice
from invoice_gen.printable import to_preview_markup, to_printable_markup


@pytest.fixture
def record(make_draft):
    return validate_invoice(
        make_draft(
            items=[
                {"description": "A", "quantity": 2, "unitPrice": 500},
                {"description": "B", "quantity": 1, "unitPrice": 1000},
            ]
        )
    )


@pytest.fixture
def company() -> CompanyInfo:
    return CompanyInfo(name="Sample Co", address="Tokyo", email="hello@sample.test")


class TestPrintableMarkup:
    """Standalone print document."""

    def test_document_contents(self, record, company: CompanyInfo) -> None:
        markup = to_printable_markup(record, company)
        assert markup.startswith("<!DOCTYPE html>")
        assert "<title>Invoice_INV-0001_Acme Corp</title>" in markup
        assert "INVOICE" in markup
        assert "Sample Co" in markup
        assert "Tax (10%)" in markup
        assert "¥2,200" in markup

    def test_escapes_user_values(self, record, company: CompanyInfo) -> None:
        record.customer.name = "<b>Evil</b>"
        company.address = 'a "quoted" & <odd> place'
        markup = to_printable_markup(record, company)
        assert "<b>Evil</b>" not in markup
        assert "&lt;b&gt;Evil&lt;/b&gt;" in markup
        assert "a &quot;quoted&quot; &amp; &lt;odd&gt; place" in markup

    def test_bank_block_only_with_bank_name(self, record, company: CompanyInfo) -> None:
        assert "Payment Details" not in to_printable_markup(record, company)

        company.bank = BankAccount(name="City Bank", account_number="1234567")
        markup = to_printable_markup(record, company)
        assert "Payment Details" in markup
        assert "Account Number: 1234567" in markup

    def test_logo_only_when_set(self, record, company: CompanyInfo) -> None:
        assert "<img" not in to_printable_markup(record, company)
        company.logo = "data:image/png;base64,AAAA"
        assert '<img src="data:image/png;base64,AAAA"' in to_printable_markup(record, company)

    def test_auto_print_script(self, record, company: CompanyInfo) -> None:
        assert "setTimeout(go, 1000)" in to_printable_markup(record, company)
        assert "<script>" not in to_printable_markup(record, company, auto_print=False)


class TestPreviewMarkup:
    def test_fragment(self, record, company: CompanyInfo) -> None:
        markup = to_preview_markup(record, company)
        assert markup.startswith('<div class="preview-invoice">')
        assert "<html" not in markup
        assert "INV-0001" in markup
        assert "¥2,200" in markup
