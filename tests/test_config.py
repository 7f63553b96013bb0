"""Tests for configuration management module."""

import logging
import os
from unittest.mock import patch

import pytest

from sow_importer.config import Settings, validate_settings_on_startup


class TestSettings:
    """Tests for the Settings class."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.max_file_size_mb == 10
        assert settings.max_import_rows is None
        assert settings.metadata_scan_rows == 5
        assert settings.working_hours_per_day == 8
        assert settings.log_level == "INFO"
        assert settings.debug is False
        assert settings.cors_origins == "*"
        assert settings.server_host == "0.0.0.0"
        assert settings.server_port == 8000

    def test_env_prefix(self) -> None:
        """Settings are read from SOW_-prefixed environment variables."""
        env = {
            "SOW_MAX_FILE_SIZE_MB": "20",
            "SOW_MAX_IMPORT_ROWS": "500",
            "SOW_WORKING_HOURS_PER_DAY": "6",
            "SOW_DEBUG": "true",
            "SOW_SERVER_PORT": "9000",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings(_env_file=None)

        assert settings.max_file_size_mb == 20
        assert settings.max_import_rows == 500
        assert settings.working_hours_per_day == 6
        assert settings.debug is True
        assert settings.server_port == 9000

    def test_log_level_is_normalized(self) -> None:
        with patch.dict(os.environ, {"SOW_LOG_LEVEL": "debug"}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.log_level == "DEBUG"
        assert settings.log_level_int == logging.DEBUG

    @pytest.mark.parametrize(
        ("variable", "value"),
        [
            ("SOW_LOG_LEVEL", "VERBOSE"),
            ("SOW_MAX_FILE_SIZE_MB", "0"),
            ("SOW_MAX_FILE_SIZE_MB", "501"),
            ("SOW_MAX_IMPORT_ROWS", "0"),
            ("SOW_METADATA_SCAN_ROWS", "0"),
            ("SOW_WORKING_HOURS_PER_DAY", "25"),
            ("SOW_SERVER_PORT", "70000"),
        ],
    )
    def test_invalid_values(self, variable: str, value: str) -> None:
        with patch.dict(os.environ, {variable: value}, clear=True):
            with pytest.raises(ValueError):
                Settings(_env_file=None)

    def test_max_file_size_bytes(self) -> None:
        with patch.dict(os.environ, {"SOW_MAX_FILE_SIZE_MB": "2"}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.max_file_size_bytes == 2 * 1024 * 1024

    def test_cors_origins_list(self) -> None:
        env = {"SOW_CORS_ORIGINS": "http://a.example, http://b.example"}
        with patch.dict(os.environ, env, clear=True):
            settings = Settings(_env_file=None)

        assert settings.cors_origins_list == ["http://a.example", "http://b.example"]

    def test_cors_wildcard(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.cors_origins_list == ["*"]

    def test_to_safe_dict(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        safe = settings.to_safe_dict()
        assert safe["metadata_scan_rows"] == 5
        assert set(safe) == {
            "max_file_size_mb",
            "max_import_rows",
            "metadata_scan_rows",
            "working_hours_per_day",
            "log_level",
            "debug",
            "cors_origins",
            "server_host",
            "server_port",
        }


class TestValidateSettingsOnStartup:
    def test_warns_on_open_cors(self, caplog: pytest.LogCaptureFixture) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        with caplog.at_level(logging.INFO, logger="sow_importer.config"):
            validate_settings_on_startup(settings)

        assert "CORS is configured to allow all origins" in caplog.text
        assert "Configuration loaded" in caplog.text

    def test_warns_on_nonstandard_metadata_window(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        env = {"SOW_METADATA_SCAN_ROWS": "8", "SOW_DEBUG": "true"}
        with patch.dict(os.environ, env, clear=True):
            settings = Settings(_env_file=None)

        with caplog.at_level(logging.INFO, logger="sow_importer.config"):
            validate_settings_on_startup(settings)

        assert "metadata_scan_rows is 8" in caplog.text
        assert "CORS" not in caplog.text
