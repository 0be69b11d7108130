"""JSON persistence for scripts and run results."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, List, Optional

from .exceptions import InvalidArgumentError, ScriptFormatError, ScriptStorageError
from .result import TestResult
from .script import Script
from .util import file_stamp, sanitize_name, utc_now

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 10
_RESULT_STAMP = r"(\d{8}_\d{6}_\d{6})(?:-(\d+))?"


class ScriptRepository:
    """
    Stores scripts under ``<root>/scripts/<key>.json`` and results under
    ``<root>/results/<key>_<timestamp>.json`` where ``key`` is the sanitized
    script name.

    Names that sanitize to the same key share one file: saving ``a/b`` and then
    ``a_b`` leaves only ``a_b`` on disk.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self.scripts_dir = self.root / "scripts"
        self.results_dir = self.root / "results"
        try:
            self.scripts_dir.mkdir(parents=True, exist_ok=True)
            self.results_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ScriptStorageError(f"Cannot create script store at {self.root}: {exc}") from exc

    def script_path(self, name: str) -> Path:
        return self.scripts_dir / f"{sanitize_name(name)}.json"

    # --- scripts -------------------------------------------------------------

    def save(self, script: Script) -> Path:
        if not script.name or not sanitize_name(script.name):
            raise InvalidArgumentError("Script name cannot be empty")
        script.modified = utc_now()
        path = self.script_path(script.name)
        self._write_json(path, script.to_dict())
        logger.info("Saved script '%s' -> %s", script.name, path)
        return path

    def load(self, name: str) -> Optional[Script]:
        if not sanitize_name(name):
            return None
        path = self.script_path(name)
        if not path.is_file():
            return None
        return Script.from_dict(self._read_json(path))

    def list(self) -> List[Script]:
        scripts: List[Script] = []
        for path in sorted(self.scripts_dir.glob("*.json")):
            try:
                scripts.append(Script.from_dict(self._read_json(path)))
            except (ScriptFormatError, ScriptStorageError) as exc:
                logger.debug("Skipping unreadable script %s: %s", path, exc)
        return sorted(scripts, key=lambda s: s.name)

    def delete(self, name: str) -> bool:
        if not sanitize_name(name):
            return False
        path = self.script_path(name)
        if not path.is_file():
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise ScriptStorageError(f"Cannot delete {path}: {exc}") from exc
        logger.info("Deleted script '%s'", name)
        return True

    # --- results -------------------------------------------------------------

    def save_result(self, result: TestResult) -> Path:
        key = sanitize_name(result.script_name)
        if not key:
            raise InvalidArgumentError("Result script name cannot be empty")
        stamp = file_stamp(utc_now())
        path = self.results_dir / f"{key}_{stamp}.json"
        suffix = 1
        while path.exists():
            path = self.results_dir / f"{key}_{stamp}-{suffix}.json"
            suffix += 1
        self._write_json(path, result.to_dict())
        logger.info("Saved result for '%s' -> %s", result.script_name, path)
        return path

    def result_paths(self, name: str) -> List[Path]:
        """Result files of ``name``, newest first."""
        key = sanitize_name(name)
        if not key:
            return []
        pattern = re.compile(rf"^{re.escape(key)}_{_RESULT_STAMP}\.json$")
        stamped = []
        for path in self.results_dir.glob("*.json"):
            match = pattern.match(path.name)
            if match:
                stamped.append(((match.group(1), int(match.group(2) or 0)), path))
        stamped.sort(key=lambda item: item[0], reverse=True)
        return [path for _, path in stamped]

    def get_results(self, name: str, max_results: int = DEFAULT_MAX_RESULTS) -> List[TestResult]:
        results: List[TestResult] = []
        if max_results <= 0:
            return results
        for path in self.result_paths(name):
            try:
                results.append(TestResult.from_dict(self._read_json(path)))
            except (ScriptFormatError, ScriptStorageError) as exc:
                logger.debug("Skipping unreadable result %s: %s", path, exc)
                continue
            if len(results) >= max_results:
                break
        return results

    def get_latest_result(self, name: str) -> Optional[TestResult]:
        results = self.get_results(name, 1)
        return results[0] if results else None

    # --- io ------------------------------------------------------------------

    @staticmethod
    def _write_json(path: Path, payload: Any) -> None:
        try:
            path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            raise ScriptStorageError(f"Cannot write {path}: {exc}") from exc

    @staticmethod
    def _read_json(path: Path) -> Any:
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise ScriptStorageError(f"Cannot read {path}: {exc}") from exc
        try:
            return json.loads(raw.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ScriptFormatError(f"Malformed JSON in {path}: {exc}") from exc
