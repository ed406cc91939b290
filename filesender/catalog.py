# catalog.py
from pathlib import Path
from typing import Iterable, List, Tuple

from .errors import DownloadIndexInvalid
from .utils import display_name


class DownloadCatalog:
    """Ordered files offered to peers; the position is the download index.

    Not locked by itself: the Session guards every access.
    """

    def __init__(self, paths: Iterable = ()):
        self._paths: List[Path] = [Path(p) for p in paths]

    def __len__(self) -> int:
        return len(self._paths)

    def list(self) -> List[str]:
        return [display_name(p) for p in self._paths]

    def get(self, index: int) -> Tuple[Path, str]:
        if not isinstance(index, int) or index < 0 or index >= len(self._paths):
            raise DownloadIndexInvalid(f"no download with index {index!r}")
        path = self._paths[index]
        return path, display_name(path)

    def append(self, paths: Iterable) -> None:
        self._paths.extend(Path(p) for p in paths)

    def remove_at(self, index: int) -> Path:
        # later entries shift down by one; previously shared URLs may now
        # point at a different file
        if not isinstance(index, int) or index < 0 or index >= len(self._paths):
            raise DownloadIndexInvalid(f"no download with index {index!r}")
        return self._paths.pop(index)
