"""Utilities shared by DocuForge tools."""

from __future__ import annotations

import logging
import shutil
import subprocess
from typing import Sequence

ROOT_LOGGER_NAME = "docuforge"


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    return logger


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Apply *level* to the ``docuforge`` logger tree and return its root."""

    logger = get_logger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved
    logger.setLevel(level)
    return logger


def sizeof_fmt(num_bytes: float) -> str:
    """Format *num_bytes* into a human-friendly string."""

    step_unit = 1024.0
    for unit in ("bytes", "KiB", "MiB", "GiB"):
        if abs(num_bytes) < step_unit:
            return f"{num_bytes:3.1f} {unit}"
        num_bytes /= step_unit
    return f"{num_bytes:.1f} TiB"


def which(executables: Sequence[str]) -> str | None:
    """Return the first executable from *executables* found on ``PATH``."""

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for candidate in executables:
        found = shutil.which(candidate)
        if found:
            logger.debug("Detected external tool: %s -> %s", candidate, found)
            return found
    return None


def run_subprocess(command: Sequence[str], *, check: bool = True) -> subprocess.CompletedProcess[str]:
    """Run *command* capturing its output as text."""

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.debug("Executing command: %s", " ".join(command))
    completed = subprocess.run(
        command,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        check=check,
        text=True,
    )
    logger.debug("Command finished with exit code %s", completed.returncode)
    return completed
