"""Environment driven configuration for DocuForge."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

ENV_PREFIX = "DOCUFORGE_"


def _read_int(name: str, default: int) -> int:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc


def _read_bool(name: str, default: bool) -> bool:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """Process-wide settings resolved from ``DOCUFORGE_*`` variables."""

    log_level: str = "INFO"
    max_dimension: int = 2048
    extract_url: str | None = None
    extract_timeout: int = 30
    max_upload_bytes: int = 50 * 1024 * 1024
    use_qpdf: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        extract_url = os.getenv(ENV_PREFIX + "EXTRACT_URL") or None
        return cls(
            log_level=os.getenv(ENV_PREFIX + "LOG_LEVEL", "INFO").upper(),
            max_dimension=_read_int("MAX_DIMENSION", 2048),
            extract_url=extract_url.strip() if extract_url else None,
            extract_timeout=_read_int("EXTRACT_TIMEOUT", 30),
            max_upload_bytes=_read_int("MAX_UPLOAD_BYTES", 50 * 1024 * 1024),
            use_qpdf=_read_bool("USE_QPDF", True),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached settings, loading them on first use."""

    return Settings.from_env()


def reset_settings() -> None:
    """Forget cached settings so the next call re-reads the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings"]
