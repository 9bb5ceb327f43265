import base64
import re

import pytest

from services import storage

NAME_RE = re.compile(r"^\d{13}-[a-z0-9]{6}-(main|sub\d)\.(png|jpg|gif|webp)$")


@pytest.mark.parametrize("mime,ext", [
    ("image/png", "png"),
    ("image/jpeg", "jpg"),
    ("image/gif", "gif"),
    ("image/webp", "webp"),
    ("IMAGE/JPEG", "jpg"),
    ("image/tiff", "png"),
    (None, "png"),
])
def test_extension_for_mime(mime, ext):
    assert storage.extension_for(mime) == ext


def test_object_name_shape():
    name = storage.make_object_name("sub2", "image/webp")
    assert NAME_RE.match(name), name
    assert name.endswith("-sub2.webp")


def test_decode_accepts_data_url_prefix():
    raw = b"\x89PNG\r\n"
    encoded = base64.b64encode(raw).decode()
    assert storage.decode_image_data(encoded) == raw
    assert storage.decode_image_data(f"data:image/png;base64,{encoded}") == raw


@pytest.mark.parametrize("bad", ["", "   ", "!!!notbase64!!!", "abc"])
def test_decode_rejects_bad_input(bad):
    with pytest.raises(ValueError):
        storage.decode_image_data(bad)


def test_upload_writes_file_and_returns_public_url(storage_dir, monkeypatch):
    monkeypatch.setenv("IMAGE_PUBLIC_BASE_URL", "https://cdn.example.com/blog-images/")
    url = storage.upload_image(base64.b64encode(b"pixels").decode(), "image/jpeg", "main")

    assert url.startswith("https://cdn.example.com/blog-images/")
    name = url.rsplit("/", 1)[1]
    assert NAME_RE.match(name), name
    assert (storage_dir / name).read_bytes() == b"pixels"


def test_upload_failure_returns_none(storage_dir):
    assert storage.upload_image("%%%", "image/png", "main") is None
    assert not storage_dir.exists() or not any(storage_dir.iterdir())


def test_upload_many_keeps_purpose_and_marks_failures(storage_dir):
    good = base64.b64encode(b"a").decode()
    results = storage.upload_many([
        {"image_data": good, "mime_type": "image/png", "purpose": "main"},
        {"image_data": "%%%", "mime_type": "image/png", "purpose": "sub1"},
    ])
    assert [r["purpose"] for r in results] == ["main", "sub1"]
    assert results[0]["url"].startswith("/static/uploads/blog-images/")
    assert results[1]["url"] is None
