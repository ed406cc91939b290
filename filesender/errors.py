# errors.py
"""Failures a request (or startup) can end with.

Every per-request error carries the HTTP status and short code the route
layer answers with; only ConfigInvalid is allowed to end the process.
"""
from typing import Optional


class FileSenderError(Exception):
    status = 500
    code = "error"

    def __init__(self, message: str = "", status: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message or self.code)
        self.message = message or self.code
        if status is not None:
            self.status = status
        if code is not None:
            self.code = code


class ConfigInvalid(FileSenderError):
    code = "config-invalid"


class UploadTooLarge(FileSenderError):
    status = 413
    code = "upload-too-large"


class UploadMissing(FileSenderError):
    status = 400
    code = "upload-missing"


class AssetNotFound(FileSenderError):
    status = 404
    code = "asset-not-found"


class StorageIO(FileSenderError):
    status = 500
    code = "storage-io"


class DownloadIndexInvalid(FileSenderError):
    status = 404
    code = "download-index-invalid"


class TextInvalid(FileSenderError):
    status = 400
    code = "text-missing"
