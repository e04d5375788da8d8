# Trading Dashboard - Data directory resolution
# Fallback chain: frozen-executable dir -> platform app-data dir -> home dir -> cwd.

import logging
import os
import sys
from pathlib import Path

from app.config import Settings

logger = logging.getLogger(__name__)


def _is_writable_dir(path: Path) -> bool:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError:
        return False
    return path.is_dir() and os.access(path, os.W_OK)


def platform_app_data_dir() -> Path | None:
    """Per-user application data root for the current platform, if one can be determined."""
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        return Path(appdata) if appdata else None
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".local" / "share"


def _candidate_dirs(app_dir_name: str) -> list[Path]:
    candidates: list[Path] = []
    if getattr(sys, "frozen", False):
        candidates.append(Path(sys.executable).resolve().parent)
    try:
        app_data = platform_app_data_dir()
    except RuntimeError:  # Path.home() without a resolvable home
        app_data = None
    if app_data is not None:
        candidates.append(app_data / app_dir_name)
    try:
        candidates.append(Path.home() / app_dir_name)
    except RuntimeError:
        pass
    return candidates


def resolve_data_dir(settings: Settings) -> Path:
    """Directory holding the database file. Created if missing."""
    if settings.data_dir:
        return Path(settings.data_dir).expanduser()
    for candidate in _candidate_dirs(settings.app_dir_name):
        if _is_writable_dir(candidate):
            return candidate
        logger.warning("Data directory %s is not writable, trying next location", candidate)
    return Path.cwd()


def resolve_database_url(settings: Settings) -> str:
    if settings.database_url:
        return settings.database_url
    db_path = resolve_data_dir(settings) / settings.database_filename
    return f"sqlite+aiosqlite:///{db_path.as_posix()}"
