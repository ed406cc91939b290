# utils.py
import re
from datetime import datetime, timezone
from pathlib import Path

_SAFE_NAME = re.compile(r"[A-Za-z0-9._-]+")


def is_safe_filename(name: str) -> bool:
    return bool(name) and _SAFE_NAME.fullmatch(name) is not None


def sanitize_filename(name: str, fallback: str) -> str:
    """Return name if every character is whitelisted, else the fallback.

    The whole name is replaced; nothing is stripped or escaped.
    """
    return name if is_safe_filename(name or "") else fallback


def unique_destination(directory: Path, name: str) -> Path:
    """Prefix name with 0-, 1-, ... until it does not exist in directory.

    Check-then-write: two concurrent uploads of the same name may still race.
    """
    dest = directory / name
    i = 0
    while dest.exists():
        dest = directory / f"{i}-{name}"
        i += 1
    return dest


def display_name(path) -> str:
    """Base name of path, or "unknown" when there is none."""
    name = Path(path).name
    return name if name not in ("", ".", "..") else "unknown"


def now_iso() -> str:
    """Current UTC time, e.g. 2024-05-01T12:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
