# acceptor.py
import functools
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path

from .errors import StorageIO, UploadMissing, UploadTooLarge
from .utils import sanitize_filename, unique_destination

logger = logging.getLogger(__name__)

COPY_BUFSIZE = 1024 * 1024


@dataclass(frozen=True)
class StoredUpload:
    path: Path
    size: int


def first_file_part(files):
    """First part that carries a filename, whatever its field name."""
    return next(iter(files.values()), None)


class UploadAcceptor:
    def __init__(self, session, bridge, upload_dir, staging_dir):
        self.session = session
        self.bridge = bridge
        self.upload_dir = Path(upload_dir)
        self.staging_dir = Path(staging_dir)

    def accept(self, files) -> StoredUpload:
        """Validate and store the uploaded file from a parsed multipart body."""
        fallback, limit = self.session.upload_settings()

        storage = first_file_part(files)
        if storage is None:
            raise UploadMissing("Uploaded file not found")

        name = sanitize_filename(storage.filename or fallback, fallback)
        staged, size = self._stage(storage.stream, limit)

        try:
            dest = unique_destination(self.upload_dir, name)
            logger.info("Stored upload %s as %s (%d bytes)", staged, dest, size)
            shutil.move(str(staged), str(dest))
        except OSError as e:
            logger.exception("Storing upload %s failed", name)
            _discard(staged)
            raise StorageIO(f"could not store {name}: {e.strerror or e}")

        self.bridge.schedule(functools.partial(self.session.record_upload, dest.name, False))
        return StoredUpload(path=dest, size=size)

    def notify_truncated(self) -> None:
        self.bridge.schedule(functools.partial(self.session.record_upload, None, True))

    def _stage(self, stream, limit: int):
        """Copy at most limit + 1 bytes into the staging directory."""
        try:
            self.staging_dir.mkdir(parents=True, exist_ok=True)
            tmp = tempfile.NamedTemporaryFile(
                dir=self.staging_dir, prefix="upload-", suffix=".part", delete=False
            )
        except OSError as e:
            logger.exception("Could not create staging file")
            raise StorageIO(f"could not stage upload: {e.strerror or e}")

        staged = Path(tmp.name)
        size = 0
        try:
            with tmp:
                while size <= limit:
                    buf = stream.read(min(COPY_BUFSIZE, limit + 1 - size))
                    if not buf:
                        break
                    tmp.write(buf)
                    size += len(buf)
        except OSError as e:
            logger.exception("Staging upload failed")
            _discard(staged)
            raise StorageIO(f"could not stage upload: {e.strerror or e}")

        if size > limit:
            logger.warning("Upload exceeds %d bytes, discarded", limit)
            self.notify_truncated()
            _discard(staged)
            raise UploadTooLarge(f"File too large, the limit is {limit} bytes")
        return staged, size


def _discard(path: Path) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError:
        logger.exception("Could not remove staged upload %s", path)
