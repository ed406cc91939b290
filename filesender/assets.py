# assets.py
from pathlib import Path

from flask import send_from_directory
from werkzeug.exceptions import NotFound
from werkzeug.security import safe_join

from .errors import AssetNotFound


class AssetStore:
    """index.html and static/ files, bundled or from a directory on disk."""

    def __init__(self, root):
        self.root = Path(root).resolve()

    def read_text(self, name: str) -> str:
        path = safe_join(str(self.root), name)
        if path is None or not Path(path).is_file():
            raise AssetNotFound(f"{name} missing")
        try:
            return Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            raise AssetNotFound(f"{name} unreadable")

    def send_static(self, asset: str):
        try:
            return send_from_directory(self.root / "static", asset)
        except NotFound:
            raise AssetNotFound(f"static/{asset} missing")
