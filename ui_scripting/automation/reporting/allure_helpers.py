"""Allure reporting helpers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

try:
    import allure  # type: ignore
except Exception:  # pragma: no cover - optional dependency
    allure = None  # type: ignore

logger = logging.getLogger(__name__)

HTML_ATTACHMENT = "text/html"
XLSX_ATTACHMENT = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def attach_file(name: str, path: Path, attachment_type: Optional[str] = None) -> bool:
    """Attach ``path`` to the running Allure test; returns whether it was attached."""
    if allure is None:
        return False
    if not path.exists():
        return False
    attachment_type = attachment_type or "application/octet-stream"
    try:
        allure.attach(path.read_bytes(), name=name, attachment_type=attachment_type)
    except Exception as exc:
        logger.debug("Allure attachment '%s' skipped: %s", name, exc)
        return False
    return True
