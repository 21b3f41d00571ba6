from __future__ import annotations

import logging

import pytest

from docuforge.core.config import Settings, get_settings, reset_settings
from docuforge.core.exceptions import DecodeError, DocuForgeError, ExternalServiceError
from docuforge.core.model import CompressionResult
from docuforge.core.utils import configure_logging, get_logger, sizeof_fmt


def test_defaults() -> None:
    settings = get_settings()

    assert settings == Settings()
    assert settings.max_dimension == 2048
    assert settings.extract_url is None
    assert settings.max_upload_bytes == 52428800
    assert settings.use_qpdf is True


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCUFORGE_LOG_LEVEL", "debug")
    monkeypatch.setenv("DOCUFORGE_MAX_DIMENSION", "1024")
    monkeypatch.setenv("DOCUFORGE_EXTRACT_URL", " http://localhost:8000/pdf-extract ")
    monkeypatch.setenv("DOCUFORGE_USE_QPDF", "off")

    settings = Settings.from_env()

    assert settings.log_level == "DEBUG"
    assert settings.max_dimension == 1024
    assert settings.extract_url == "http://localhost:8000/pdf-extract"
    assert settings.use_qpdf is False


def test_invalid_integer_names_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCUFORGE_MAX_UPLOAD_BYTES", "lots")
    with pytest.raises(ValueError, match="DOCUFORGE_MAX_UPLOAD_BYTES"):
        Settings.from_env()


def test_settings_are_cached_until_reset(monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_settings()
    monkeypatch.setenv("DOCUFORGE_EXTRACT_TIMEOUT", "99")

    assert get_settings() is first

    reset_settings()
    reset_settings()
    assert get_settings().extract_timeout == 99


def test_configure_logging_sets_tree_level() -> None:
    root = configure_logging("warning")

    assert root.name == "docuforge"
    assert root.level == logging.WARNING
    assert logging.getLogger("docuforge.pdf").getEffectiveLevel() == logging.WARNING

    configure_logging(logging.INFO)
    with pytest.raises(ValueError):
        configure_logging("chatty")


def test_get_logger_attaches_single_handler() -> None:
    logger = get_logger("docuforge.tests.single")
    get_logger("docuforge.tests.single")

    assert len(logger.handlers) == 1
    assert logger.propagate is False


def test_error_default_messages() -> None:
    assert str(DecodeError()) == "Unable to decode the source document."
    assert str(ExternalServiceError("down")) == "down"
    assert isinstance(ExternalServiceError(), DocuForgeError)


def test_compression_result_report() -> None:
    result = CompressionResult(data=b"x" * 250, original_size=1000, media_type="image/jpeg")

    assert result.compressed_size == 250
    assert result.bytes_saved == 750
    assert result.compression_ratio == 0.25
    assert result.percent_saved == 75


@pytest.mark.parametrize(
    ("size", "expected"),
    [(512, "512.0 bytes"), (2048, "2.0 KiB"), (5 * 1024 * 1024, "5.0 MiB")],
)
def test_sizeof_fmt(size: int, expected: str) -> None:
    assert sizeof_fmt(size) == expected
