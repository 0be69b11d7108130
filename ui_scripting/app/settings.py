# ui_scripting/app/settings.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

SETTINGS_FILE = "ui_settings.json"
REPORT_FORMATS = ("html", "xlsx")


@dataclass
class AppSettings:
    scripts_root: Optional[str] = None
    find_timeout: float = 5.0
    poll_interval: float = 0.25
    default_wait_ms: int = 1000
    wait_for_element_timeout_ms: int = 10000
    max_results: int = 10
    target_app_regex: Optional[str] = None
    report_format: str = "html"
    enable_allure: bool = True

    @classmethod
    def load(cls, path: Path) -> AppSettings:
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
            return cls()
        if not isinstance(data, dict):
            return cls()
        report_format = str(data.get("report_format", cls.report_format)).lower()
        try:
            return cls(
                scripts_root=data.get("scripts_root"),
                find_timeout=float(data.get("find_timeout", cls.find_timeout)),
                poll_interval=float(data.get("poll_interval", cls.poll_interval)),
                default_wait_ms=int(data.get("default_wait_ms", cls.default_wait_ms)),
                wait_for_element_timeout_ms=int(
                    data.get("wait_for_element_timeout_ms", cls.wait_for_element_timeout_ms)
                ),
                max_results=int(data.get("max_results", cls.max_results)),
                target_app_regex=data.get("target_app_regex", cls.target_app_regex),
                report_format=report_format if report_format in REPORT_FORMATS else cls.report_format,
                enable_allure=bool(data.get("enable_allure", cls.enable_allure)),
            )
        except (TypeError, ValueError) as exc:
            logger.warning("Ignoring invalid settings in %s: %s", path, exc)
            return cls()

    def save(self, path: Path) -> None:
        try:
            path.write_text(json.dumps(asdict(self), indent=2), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not save settings to %s: %s", path, exc)
