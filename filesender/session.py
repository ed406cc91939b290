# session.py
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .catalog import DownloadCatalog
from .utils import now_iso


@dataclass(frozen=True)
class LastUpload:
    filename: Optional[str]
    truncated: bool = False
    received_at: str = field(default_factory=now_iso)


@dataclass(frozen=True)
class IndexSnapshot:
    offered_note: str
    downloads: Tuple[str, ...]


class Session:
    """The state shared by the HTTP workers and the window.

    Every method takes the lock only to copy values in or out; callers do
    their file and network I/O after it is released.
    """

    def __init__(self, upload_file_name: str, upload_file_size_limit: int):
        self._lock = threading.Lock()
        self._upload_file_name = upload_file_name
        self._upload_file_size_limit = upload_file_size_limit
        self._offered_note = ""
        self._received_note = ""
        self._downloads = DownloadCatalog()
        self._last_upload: Optional[LastUpload] = None

    def upload_settings(self) -> Tuple[str, int]:
        with self._lock:
            return self._upload_file_name, self._upload_file_size_limit

    # notes
    @property
    def offered_note(self) -> str:
        with self._lock:
            return self._offered_note

    @property
    def received_note(self) -> str:
        with self._lock:
            return self._received_note

    def set_offered_note(self, text: str) -> None:
        with self._lock:
            self._offered_note = text

    def set_received_note(self, text: str) -> None:
        with self._lock:
            self._received_note = text

    # upload outcome
    @property
    def last_upload(self) -> Optional[LastUpload]:
        with self._lock:
            return self._last_upload

    def record_upload(self, filename: Optional[str], truncated: bool = False) -> None:
        with self._lock:
            self._last_upload = LastUpload(filename=filename, truncated=truncated)

    # download catalog
    def download_names(self) -> List[str]:
        with self._lock:
            return self._downloads.list()

    def download_entry(self, index: int) -> Tuple[Path, str]:
        with self._lock:
            return self._downloads.get(index)

    def add_downloads(self, paths: Iterable) -> None:
        paths = list(paths)
        with self._lock:
            self._downloads.append(paths)

    def remove_download(self, index: int) -> Path:
        with self._lock:
            return self._downloads.remove_at(index)

    def index_snapshot(self) -> IndexSnapshot:
        with self._lock:
            return IndexSnapshot(self._offered_note, tuple(self._downloads.list()))
