"""Unit tests for the logger factory."""

import logging

import pytest

from invoice_gen import config
from invoice_gen.lib import logs


class TestLogger:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/srv/app/src/invoice_gen/services/sink.py", "invoice_gen.services.sink"),
            ("/srv/app/src/invoice_gen/app.py", "invoice_gen.app"),
            ("/srv/app/src/invoice_gen/services/__init__.py", "invoice_gen.services"),
            ("/tmp/scratch/tool.py", "invoice_gen.tool"),
        ],
    )
    def test_name_from_file_path(self, path: str, expected: str) -> None:
        assert logs.logger(path).name == expected

    def test_plain_name_is_kept(self) -> None:
        assert logs.logger("invoice_gen.tests.plain").name == "invoice_gen.tests.plain"

    def test_level_from_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(config, "LOG_LEVEL", "warning")
        log = logs.logger("invoice_gen.tests.level")
        assert log.level == logging.WARNING
        assert len(log.handlers) == 1

    def test_unknown_level_defaults_to_info(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(config, "LOG_LEVEL", "chatty")
        assert logs.logger("invoice_gen.tests.unknown").level == logging.INFO
