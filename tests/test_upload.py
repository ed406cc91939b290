import os
import shutil

import pytest

from conftest import UPLOAD_LIMIT


def stored_files(config):
    return sorted(p.name for p in config.upload_dir.iterdir() if p.is_file())


def staged_files(config):
    if not config.staging_dir.exists():
        return []
    return list(config.staging_dir.iterdir())


def test_upload_stores_file_and_redirects(upload, config, session, bridge):
    resp = upload(b"hello", "report.txt")

    assert resp.status_code == 303
    assert resp.headers["Location"].endswith("/")
    assert (config.upload_dir / "report.txt").read_bytes() == b"hello"
    assert staged_files(config) == []

    assert session.last_upload is None
    bridge.drain()
    assert session.last_upload.filename == "report.txt"
    assert session.last_upload.truncated is False


def test_colliding_names_get_counter_prefix(upload, config):
    (config.upload_dir / "report.txt").write_bytes(b"original")

    assert upload(b"first", "report.txt").status_code == 303
    assert upload(b"second", "report.txt").status_code == 303

    assert stored_files(config) == ["0-report.txt", "1-report.txt", "report.txt"]
    assert (config.upload_dir / "report.txt").read_bytes() == b"original"
    assert (config.upload_dir / "0-report.txt").read_bytes() == b"first"
    assert (config.upload_dir / "1-report.txt").read_bytes() == b"second"


@pytest.mark.parametrize("filename", ["bad name.txt", "report(1).txt", "semi;colon.txt"])
def test_unsafe_names_use_fallback(upload, config, filename):
    assert upload(b"data", filename).status_code == 303
    assert stored_files(config) == ["Upload.file"]


def test_fallback_name_also_collides(upload, config):
    upload(b"one", "bad name")
    upload(b"two", "also bad!")
    assert stored_files(config) == ["0-Upload.file", "Upload.file"]


def test_any_field_name_is_accepted(upload, config):
    assert upload(b"data", "notes.txt", field="attachment").status_code == 303
    assert stored_files(config) == ["notes.txt"]


@pytest.mark.parametrize("size", [UPLOAD_LIMIT - 1, UPLOAD_LIMIT])
def test_sizes_up_to_limit_succeed(upload, config, size):
    resp = upload(b"x" * size, "fits.bin")
    assert resp.status_code == 303
    assert (config.upload_dir / "fits.bin").stat().st_size == size


def test_one_byte_over_limit_is_rejected(upload, config, session, bridge):
    resp = upload(b"x" * (UPLOAD_LIMIT + 1), "big.bin")

    assert resp.status_code == 413
    assert resp.get_json()["error"] == "upload-too-large"
    assert stored_files(config) == []
    assert staged_files(config) == []

    bridge.drain()
    assert session.last_upload.truncated is True
    assert session.last_upload.filename is None


def test_body_over_content_length_cap_is_rejected(app, upload, config, session, bridge):
    app.config["MAX_CONTENT_LENGTH"] = 64

    resp = upload(b"x" * 200, "big.bin")

    assert resp.status_code == 413
    assert resp.get_json()["error"] == "upload-too-large"
    assert stored_files(config) == []
    bridge.drain()
    assert session.last_upload.truncated is True


def test_missing_file_part(client, config, session, bridge):
    resp = client.post(
        "/data/upload",
        data={"text": "no file here"},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "upload-missing"
    assert bridge.drain() == 0
    assert session.last_upload is None


def test_storage_failure_is_reported(upload, config, monkeypatch, session, bridge):
    def broken_move(src, dst):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(shutil, "move", broken_move)

    resp = upload(b"data", "report.txt")

    assert resp.status_code == 500
    assert resp.get_json()["error"] == "storage-io"
    assert stored_files(config) == []
    assert staged_files(config) == []
    assert bridge.drain() == 0


def test_worker_survives_failed_uploads(upload, config):
    upload(b"x" * (UPLOAD_LIMIT + 1), "big.bin")
    assert upload(b"ok", "after.txt").status_code == 303
    assert stored_files(config) == ["after.txt"]


def test_oversize_reported_even_if_staged_file_cannot_be_removed(upload, monkeypatch, session, bridge):
    def stuck_unlink(path):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(os, "unlink", stuck_unlink)

    resp = upload(b"x" * (UPLOAD_LIMIT + 1), "big.bin")

    assert resp.status_code == 413
    assert resp.get_json()["error"] == "upload-too-large"
    bridge.drain()
    assert session.last_upload.truncated is True


def test_storage_failure_survives_cleanup_failure(upload, monkeypatch, bridge):
    def broken(*args):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(shutil, "move", broken)
    monkeypatch.setattr(os, "unlink", broken)

    resp = upload(b"data", "report.txt")

    assert resp.status_code == 500
    assert resp.get_json()["error"] == "storage-io"
    assert bridge.drain() == 0


def test_last_upload_has_timestamp(upload, session, bridge):
    upload(b"hello", "report.txt")
    bridge.drain()
    assert session.last_upload.received_at.endswith("Z")
