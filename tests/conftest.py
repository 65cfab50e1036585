"""Shared fixtures for the songshelf tests."""

from __future__ import annotations

import io

import pytest

from songshelf.app import create_app
from songshelf.config import Config


@pytest.fixture()
def songs_root(tmp_path):
    root = tmp_path / "songs"
    root.mkdir()
    return root


@pytest.fixture()
def app(songs_root):
    app = create_app(Config(songs_dir=str(songs_root)))
    app.config["TESTING"] = True
    return app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def upload(client):
    """POST a multipart upload and return the response."""

    def _upload(filename="x.mp3", content=b"ID3fake", **fields):
        data = dict(fields)
        if filename is not None:
            data["mp3File"] = (io.BytesIO(content), filename)
        return client.post("/api/upload", data=data, content_type="multipart/form-data")

    return _upload
