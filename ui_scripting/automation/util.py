import json
import re
from datetime import datetime, timezone
from typing import Any, Optional

# Characters Windows refuses in file names (plus ASCII control characters).
_INVALID_NAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]+')

_BOOL_TRUE = {"1", "true", "yes", "on"}
_BOOL_FALSE = {"0", "false", "no", "off"}


def sanitize_name(name: str) -> str:
    """
    Turn a script name into a filesystem-safe key.

    Runs of illegal characters collapse into a single '_' and trailing dots are
    stripped, so 'a/b' and 'a//b' both become 'a_b'. Returns '' for None/empty input.
    """
    if not name:
        return ""
    parts = [part for part in _INVALID_NAME_CHARS.split(str(name)) if part]
    return "_".join(parts).rstrip(".")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    return value.isoformat()


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are treated as UTC."""
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def file_stamp(value: datetime, *, precise: bool = True) -> str:
    """
    Return '20240131_235959_123456' (or '20240131_235959' when precise=False).
    """
    if precise:
        return value.strftime("%Y%m%d_%H%M%S_%f")
    return value.strftime("%Y%m%d_%H%M%S")


def format_value(value: Any) -> str:
    """String form used for parameters, stored variables and assertion values."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value)
    return str(value)


def parse_bool(value: Any, default: Optional[bool] = False) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    lowered = str(value).strip().lower()
    if lowered in _BOOL_TRUE:
        return True
    if lowered in _BOOL_FALSE:
        return False
    return default


def parse_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default
