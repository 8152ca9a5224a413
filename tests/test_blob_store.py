import json
import logging

import pytest

from sehat.core.logging_config import JSONFormatter
from sehat.services.blob_store import LocalBlobStore


def test_put_writes_file_and_returns_public_url(tmp_path):
    store = LocalBlobStore(tmp_path, "http://cdn.test/files/")
    url = store.put("u1/1.pdf", b"data")
    assert url == "http://cdn.test/files/u1/1.pdf"
    assert (tmp_path / "u1" / "1.pdf").read_bytes() == b"data"
    assert store.key_from_url(url) == "u1/1.pdf"
    assert store.key_from_url("https://elsewhere/u1/1.pdf") is None


def test_delete(tmp_path):
    store = LocalBlobStore(tmp_path, "http://cdn.test/files")
    store.put("u1/1.png", b"x")
    assert store.delete("u1/1.png") is True
    assert store.delete("u1/1.png") is False


def test_key_cannot_escape_root(tmp_path):
    store = LocalBlobStore(tmp_path / "blobs", "http://cdn.test/files")
    with pytest.raises(ValueError):
        store.put("../outside.pdf", b"x")


def test_json_log_lines():
    record = logging.LogRecord("sehat.test", logging.WARNING, __file__, 1, "analysis failed for %s", ("r1",), None)
    line = json.loads(JSONFormatter().format(record))
    assert line["level"] == "WARNING"
    assert line["logger"] == "sehat.test"
    assert line["message"] == "analysis failed for r1"
