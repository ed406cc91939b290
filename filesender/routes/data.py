# routes/data.py
import logging

from flask import Blueprint, current_app, redirect, request, send_file
from werkzeug.exceptions import RequestEntityTooLarge

from ..errors import DownloadIndexInvalid, StorageIO, TextInvalid, UploadTooLarge
from ..mailbox import deliver_received_note

logger = logging.getLogger(__name__)

bp = Blueprint("data", __name__, url_prefix="/data")


def _services():
    return current_app.extensions["filesender"]


@bp.post("/text")
def text():
    """Note from the peer; only urlencoded forms are accepted."""
    if request.mimetype != "application/x-www-form-urlencoded":
        raise TextInvalid(
            f"unsupported encoding {request.mimetype or 'none'!r}",
            status=415,
            code="text-encoding",
        )
    if "text" not in request.form:
        raise TextInvalid("missing form field 'text'")
    services = _services()
    deliver_received_note(services.session, services.bridge, request.form["text"])
    return redirect("/", code=303)


@bp.post("/upload")
def upload():
    acceptor = _services().acceptor
    try:
        # werkzeug spools the body here, capped by MAX_CONTENT_LENGTH
        files = request.files
    except RequestEntityTooLarge:
        acceptor.notify_truncated()
        raise UploadTooLarge("Request body too large")
    stored = acceptor.accept(files)
    logger.info("Upload complete: %s, %d bytes", stored.path.name, stored.size)
    return redirect("/", code=303)


@bp.get("/download/<index>")
def download(index: str):
    if not (index.isascii() and index.isdigit()):
        raise DownloadIndexInvalid(f"invalid download index {index!r}")
    # copy the entry out under the lock, stream after releasing it
    path, name = _services().session.download_entry(int(index))
    try:
        f = open(path, "rb")
    except OSError as e:
        logger.exception("Reading %s failed", path)
        raise StorageIO(f"could not read {name}: {e.strerror or e}")
    logger.info("Downloaded %s", name)
    return send_file(
        f,
        mimetype="application/octet-stream",
        as_attachment=True,
        download_name=name,
    )
