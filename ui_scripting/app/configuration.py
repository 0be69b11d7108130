"""Runtime configuration loading helpers for the UI scripting toolkit."""

from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .settings import REPORT_FORMATS, AppSettings

logger = logging.getLogger(__name__)

_ENV_PREFIX = "UI_SCRIPTING_"
_CONFIG_NAME = "ui_scripting.ini"
_BOOL_TRUE = {"1", "true", "yes", "on"}
_BOOL_FALSE = {"0", "false", "no", "off"}


@dataclass(slots=True)
class RuntimeConfig:
    """Declarative overrides sourced from environment variables or config files."""

    config_source: Optional[Path] = None
    scripts_root: Optional[str] = None
    find_timeout: Optional[float] = None
    poll_interval: Optional[float] = None
    default_wait_ms: Optional[int] = None
    wait_for_element_timeout_ms: Optional[int] = None
    max_results: Optional[int] = None
    target_app_regex: Optional[str] = None
    report_format: Optional[str] = None
    enable_allure: Optional[bool] = None

    def apply_to_settings(self, settings: AppSettings) -> None:
        """Project runtime overrides onto persisted settings without destroying saved values."""

        if self.scripts_root is not None:
            settings.scripts_root = self.scripts_root
        if self.find_timeout is not None:
            settings.find_timeout = self.find_timeout
        if self.poll_interval is not None:
            settings.poll_interval = self.poll_interval
        if self.default_wait_ms is not None:
            settings.default_wait_ms = self.default_wait_ms
        if self.wait_for_element_timeout_ms is not None:
            settings.wait_for_element_timeout_ms = self.wait_for_element_timeout_ms
        if self.max_results is not None:
            settings.max_results = self.max_results
        if self.target_app_regex is not None:
            settings.target_app_regex = self.target_app_regex
        if self.report_format is not None:
            if self.report_format in REPORT_FORMATS:
                settings.report_format = self.report_format
            else:
                logger.warning("Ignoring unknown report format '%s'", self.report_format)
        if self.enable_allure is not None:
            settings.enable_allure = self.enable_allure


def load_runtime_config(
    env: Mapping[str, str] | None = None,
    config_path: Optional[Path] = None,
) -> RuntimeConfig:
    """Load runtime configuration overrides from environment variables and optional INI files."""

    source_env = os.environ if env is None else env
    config_file = _determine_config_path(source_env, config_path)
    config = RuntimeConfig(config_source=config_file)

    if config_file is not None and config_file.is_file():
        parser: Optional[configparser.ConfigParser] = configparser.ConfigParser()
        try:
            parser.read(config_file, encoding="utf-8")
        except configparser.Error as exc:
            logger.warning("Ignoring invalid config file %s: %s", config_file, exc)
            parser = None
        if parser and parser.has_section("runtime"):
            section = parser["runtime"]
            config.scripts_root = section.get("scripts_root", config.scripts_root)
            config.find_timeout = _get_float(section, "find_timeout", config.find_timeout)
            config.poll_interval = _get_float(section, "poll_interval", config.poll_interval)
            config.default_wait_ms = _get_int(section, "default_wait_ms", config.default_wait_ms)
            config.wait_for_element_timeout_ms = _get_int(
                section, "wait_for_element_timeout_ms", config.wait_for_element_timeout_ms
            )
            config.max_results = _get_int(section, "max_results", config.max_results)
            config.target_app_regex = section.get("target_app_regex", config.target_app_regex)
            config.report_format = _get_lower(section, "report_format", config.report_format)
            config.enable_allure = _get_bool(section, "enable_allure", config.enable_allure)

    _apply_env_overrides(config, source_env)
    return config


def _determine_config_path(env: Mapping[str, str], explicit: Optional[Path]) -> Optional[Path]:
    if explicit is not None:
        return explicit
    env_override = env.get(f"{_ENV_PREFIX}CONFIG_FILE")
    if env_override:
        return Path(env_override).expanduser()
    root = env.get(f"{_ENV_PREFIX}ROOT")
    candidates = (
        Path(root) / _CONFIG_NAME if root else None,
        Path.cwd() / _CONFIG_NAME,
    )
    for candidate in candidates:
        if candidate and candidate.is_file():
            return candidate
    return None


def _apply_env_overrides(config: RuntimeConfig, env: Mapping[str, str]) -> None:
    config.scripts_root = env.get(f"{_ENV_PREFIX}SCRIPTS_ROOT", config.scripts_root)
    config.find_timeout = _get_float(env, f"{_ENV_PREFIX}FIND_TIMEOUT", config.find_timeout)
    config.poll_interval = _get_float(env, f"{_ENV_PREFIX}POLL_INTERVAL", config.poll_interval)
    config.default_wait_ms = _get_int(env, f"{_ENV_PREFIX}DEFAULT_WAIT_MS", config.default_wait_ms)
    config.wait_for_element_timeout_ms = _get_int(
        env, f"{_ENV_PREFIX}WAIT_FOR_ELEMENT_TIMEOUT_MS", config.wait_for_element_timeout_ms
    )
    config.max_results = _get_int(env, f"{_ENV_PREFIX}MAX_RESULTS", config.max_results)
    config.target_app_regex = env.get(f"{_ENV_PREFIX}TARGET_APP_REGEX", config.target_app_regex)
    config.report_format = _get_lower(env, f"{_ENV_PREFIX}REPORT_FORMAT", config.report_format)
    config.enable_allure = _get_bool(env, f"{_ENV_PREFIX}ENABLE_ALLURE", config.enable_allure)


def _get_float(source: Mapping[str, str], key: str, default: Optional[float]) -> Optional[float]:
    raw = source.get(key)
    if raw is None:
        return default
    try:
        return float(str(raw).strip())
    except (TypeError, ValueError):
        return default


def _get_int(source: Mapping[str, str], key: str, default: Optional[int]) -> Optional[int]:
    raw = source.get(key)
    if raw is None:
        return default
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return default


def _get_lower(source: Mapping[str, str], key: str, default: Optional[str]) -> Optional[str]:
    raw = source.get(key)
    if raw is None:
        return default
    return str(raw).strip().lower() or default


def _get_bool(source: Mapping[str, str], key: str, default: Optional[bool]) -> Optional[bool]:
    raw = source.get(key)
    if raw is None:
        return default
    value = str(raw).strip().lower()
    if value in _BOOL_TRUE:
        return True
    if value in _BOOL_FALSE:
        return False
    return default
