"""Smoke tests for the Dash application wiring."""

from unittest.mock import patch

import pytest
from dash import html, no_update

from invoice_gen import app as app_module
from invoice_gen.errors import StorageError
from invoice_gen.services.invoice_service_local import LocalInvoiceService


class TestApp:
    def test_layout_is_served_per_request(self) -> None:
        layout = app_module.app.layout
        assert callable(layout)
        assert isinstance(layout(), html.Div)

    def test_callbacks_registered(self) -> None:
        keys = " ".join(app_module.app.callback_map)
        for output in (
            "results-container.children",
            "status-banner.children",
            "download-file.data",
            "totals-container.children",
            "print-status.children",
        ):
            assert output in keys

    def test_uses_memory_service(self) -> None:
        assert app_module._service is not None
        assert not app_module._service.sink_configured


class TestStorageFailureCallbacks:
    """Callbacks report storage failures in the status banner."""

    @pytest.fixture
    def broken_service(self, service: LocalInvoiceService):
        failure = StorageError("disk full")
        with (
            patch.object(app_module, "_service", service),
            patch.object(service, "next_invoice_number", side_effect=failure),
            patch.object(service, "set_sink_url", side_effect=failure),
            patch.object(service, "clear_all_data", side_effect=failure),
        ):
            yield service

    def test_reset_invoice_form(self, broken_service) -> None:
        outputs = app_module.reset_invoice_form(1, None, None)
        *form, section, loaded_date, status = outputs
        assert all(value is no_update for value in form)
        assert section is no_update
        assert status["level"] == "error"
        assert "disk full" in status["text"]

    def test_save_settings(self, broken_service) -> None:
        fields = ["Acme", "", "", "", "", "", "", "", ""]
        version, status = app_module.save_settings(1, *fields, "https://x", 3)
        assert version is no_update
        assert status["level"] == "error"

    def test_clear_all_data(self, broken_service) -> None:
        version, status = app_module.clear_all_data(1, 3)
        assert version == 4
        assert status["level"] == "error"
        assert "disk full" in status["text"]

    def test_clear_all_data_success(self, service: LocalInvoiceService, make_draft) -> None:
        service.save_invoice(make_draft())
        with patch.object(app_module, "_service", service):
            version, status = app_module.clear_all_data(1, None)
        assert version == 1
        assert status["level"] == "success"
        assert service.list_invoices() == []
