"""
Shared fixtures: an app storing uploads under tmp_path, a Session with a
16 byte upload limit and a bridge the tests drain themselves.
"""

import io

import pytest

from filesender.app import create_app
from filesender.bridge import EventBridge
from filesender.config import Config
from filesender.session import Session

UPLOAD_LIMIT = 16


@pytest.fixture
def config(tmp_path):
    return Config(
        upload_filename="Upload.file",
        upload_size=UPLOAD_LIMIT,
        upload_dir=tmp_path / "uploads",
    )


@pytest.fixture
def session(config):
    return Session(config.upload_filename, config.upload_size)


@pytest.fixture
def bridge():
    return EventBridge()


@pytest.fixture
def app(config, session, bridge):
    app = create_app(config, session, bridge)
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def upload(client):
    """POST one file part to /data/upload."""
    def _upload(content: bytes, filename: str, field: str = "File"):
        return client.post(
            "/data/upload",
            data={field: (io.BytesIO(content), filename)},
            content_type="multipart/form-data",
        )
    return _upload
