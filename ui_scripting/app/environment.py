# ui_scripting/app/environment.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .settings import SETTINGS_FILE


@dataclass
class Paths:
    """Resolved filesystem locations used by the scripting toolkit."""

    root: Path
    data_root: Path
    scripts_dir: Path
    results_dir: Path
    logs_dir: Path

    @property
    def settings_file(self) -> Path:
        return self.data_root / SETTINGS_FILE


def build_default_paths(data_root: Optional[Path] = None) -> Paths:
    """Create the default Paths collection and ensure directories exist."""
    package_root = Path(__file__).resolve().parents[1]
    root = Path(data_root).expanduser() if data_root is not None else package_root / "data"
    paths = Paths(
        root=package_root,
        data_root=root,
        scripts_dir=root / "scripts",
        results_dir=root / "results",
        logs_dir=root / "logs",
    )
    _ensure_dirs(paths.data_root, paths.scripts_dir, paths.results_dir, paths.logs_dir)
    return paths


def _ensure_dirs(*directories: Path) -> None:
    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)
