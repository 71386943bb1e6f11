"""Unit tests for invoice and company models."""

import base64
from datetime import date

import pytest

from invoice_gen.errors import ValidationError
from invoice_gen.models import (
    AppState,
    CompanyInfo,
    StatusMessage,
    deserialize_company_info,
    deserialize_invoices,
    is_company_payload,
    is_invoice_payload,
    new_draft,
    parse_logo_upload,
    validate_invoice,
)


class TestValidateInvoice:
    """Drafts become records only through validation."""

    def test_valid_draft(self, make_draft) -> None:
        record = validate_invoice(make_draft())
        assert record.invoice_number == "INV-0001"
        assert record.customer.name == "Acme Corp"
        assert record.items[0].amount == 1000
        assert (record.subtotal, record.tax, record.total) == (1000, 100, 1100)

    def test_ignores_caller_supplied_totals(self, make_draft) -> None:
        """Derived fields from the caller are recomputed."""
        draft = make_draft(subtotal=1, tax=1, total=1)
        draft["items"][0]["amount"] = 12345
        record = validate_invoice(draft)
        assert record.items[0].amount == 1000
        assert record.total == 1100

    def test_lenient_numeric_fields(self, make_draft) -> None:
        draft = make_draft(
            items=[{"description": "Widget", "quantity": "abc", "unitPrice": "250yen"}],
            taxRate="",
        )
        record = validate_invoice(draft)
        assert record.items[0].quantity == 0
        assert record.items[0].unit_price == 250
        assert record.tax_rate == 0
        assert record.total == 0

    def test_collects_every_problem(self, make_draft) -> None:
        draft = make_draft(
            number="",
            customer="  ",
            items=[{"description": "", "quantity": 1, "unitPrice": 1}],
        )
        with pytest.raises(ValidationError) as excinfo:
            validate_invoice(draft)
        assert excinfo.value.problems == [
            "Invoice number is required",
            "Customer name is required",
            "Item 1: description is required",
        ]

    def test_requires_an_item(self, make_draft) -> None:
        with pytest.raises(ValidationError, match="At least one line item is required"):
            validate_invoice(make_draft(items=[]))

    def test_due_date_before_issue_date_is_accepted(self, make_draft) -> None:
        record = validate_invoice(make_draft(date="2026-02-01", dueDate="2026-01-01"))
        assert record.due_date == "2026-01-01"

    def test_revalidating_a_record(self, make_draft) -> None:
        record = validate_invoice(make_draft())
        assert validate_invoice(record) == record


class TestSerialization:
    """Records are stored in camelCase."""

    def test_to_dict_keys(self, make_draft) -> None:
        payload = validate_invoice(make_draft()).to_dict()
        assert set(payload) == {
            "invoiceNumber",
            "date",
            "dueDate",
            "customer",
            "items",
            "subtotal",
            "taxRate",
            "tax",
            "total",
            "createdAt",
            "updatedAt",
        }
        assert payload["items"][0] == {
            "description": "Consulting",
            "quantity": 2.0,
            "unitPrice": 500.0,
            "amount": 1000.0,
        }

    def test_deserialize_skips_non_mappings(self, make_draft) -> None:
        payload = validate_invoice(make_draft()).to_dict()
        records = deserialize_invoices([payload, "junk", None, 3])
        assert [r.invoice_number for r in records] == ["INV-0001"]

    def test_deserialize_missing_keys(self) -> None:
        (record,) = deserialize_invoices([{"invoiceNumber": "INV-0009"}])
        assert record.customer.name == ""
        assert record.items == []
        assert record.total == 0

    def test_deserialize_tolerates_nested_junk(self) -> None:
        (record,) = deserialize_invoices(
            [{"invoiceNumber": "INV-0009", "customer": "Bob", "items": ["oops", {"quantity": 2}]}]
        )
        assert record.customer.name == ""
        assert [item.quantity for item in record.items] == [2]

        (record,) = deserialize_invoices([{"invoiceNumber": "INV-0010", "items": "oops"}])
        assert record.items == []

    @pytest.mark.parametrize(
        "payload, expected",
        [
            ({"invoiceNumber": "INV-0001"}, True),
            ({"customer": {"name": "Bob"}, "items": [{"quantity": 1}]}, True),
            ({"customer": "Bob"}, False),
            ({"items": ["oops"]}, False),
            ({"items": {"quantity": 1}}, False),
            ("INV-0001", False),
        ],
    )
    def test_is_invoice_payload(self, payload, expected: bool) -> None:
        assert is_invoice_payload(payload) is expected


class TestNewDraft:
    def test_defaults(self) -> None:
        draft = new_draft("INV-0003", date(2024, 12, 25))
        assert draft.invoice_number == "INV-0003"
        assert draft.date == "2024-12-25"
        assert draft.due_date == "2025-01-24"
        assert draft.tax_rate == 10
        assert len(draft.items) == 1
        assert draft.to_dict()["items"] == [{"description": "", "quantity": 1, "unitPrice": 0}]


class TestCompanyInfo:
    """Company settings singleton."""

    def test_empty_default(self) -> None:
        info = deserialize_company_info(None)
        assert info == CompanyInfo()
        assert not info.has_bank

    def test_round_trip(self) -> None:
        payload = {
            "name": "Acme",
            "email": "billing@acme.test",
            "bank": {"name": "City Bank", "accountNumber": "1234567"},
        }
        info = deserialize_company_info(payload)
        assert info.has_bank
        assert info.bank.account_number == "1234567"
        assert info.to_dict()["bank"] == {
            "name": "City Bank",
            "branch": "",
            "accountNumber": "1234567",
            "accountName": "",
        }

    def test_bank_that_is_not_an_object(self) -> None:
        info = deserialize_company_info({"name": "Acme", "bank": "x"})
        assert info.name == "Acme"
        assert not info.has_bank
        assert not is_company_payload({"name": "Acme", "bank": "x"})
        assert is_company_payload({"name": "Acme"})


class TestLogoUpload:
    """Logo uploads are validated before they reach the settings."""

    @staticmethod
    def _data_url(payload: bytes, mime: str = "image/png") -> str:
        return f"data:{mime};base64,{base64.b64encode(payload).decode()}"

    def test_accepts_small_image(self) -> None:
        contents = self._data_url(b"\x89PNG" + b"0" * 16)
        assert parse_logo_upload(contents) == contents

    def test_rejects_large_image(self) -> None:
        with pytest.raises(ValidationError, match="or smaller"):
            parse_logo_upload(self._data_url(b"0" * 11), max_bytes=10)

    def test_rejects_non_image(self) -> None:
        with pytest.raises(ValidationError, match="image file"):
            parse_logo_upload(self._data_url(b"hello", mime="text/plain"))

    def test_rejects_bad_base64(self) -> None:
        with pytest.raises(ValidationError, match="could not be read"):
            parse_logo_upload("data:image/png;base64,@@not-base64@@")


class TestUiState:
    def test_edit_mode_round_trip(self) -> None:
        state = AppState(query="acme").start_edit("INV-0002")
        restored = AppState.from_dict(state.to_dict())
        assert restored.edit_mode
        assert restored.editing_number == "INV-0002"
        assert restored.reset_form() == AppState(query="acme")

    def test_status_message(self) -> None:
        assert StatusMessage.from_dict(None) is None
        assert StatusMessage.from_dict({"text": ""}) is None
        message = StatusMessage.from_dict(StatusMessage.error("boom").to_dict())
        assert message == StatusMessage(text="boom", level="error")
