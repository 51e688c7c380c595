"""Tests for the on-disk video and subtitle buckets."""

from pathlib import Path

import pytest

from segmento.errors import NotFoundError
from segmento.storage.blobs import BlobStore


def test_write_read_delete(tmp_path: Path) -> None:
    store = BlobStore.under(tmp_path)
    store.write_subtitles("a.json", '[{"label": "ñ"}]')
    assert store.read_subtitles("a.json") == '[{"label": "ñ"}]'
    path = store.write_video("a.mp4", b"data")
    assert path.read_bytes() == b"data"
    assert path.parent == (tmp_path / "videos").resolve()

    assert store.delete_video("a.mp4") is True
    assert store.delete_video("a.mp4") is False
    assert store.delete_subtitles("a.json") is True


def test_missing_subtitles(tmp_path: Path) -> None:
    with pytest.raises(NotFoundError):
        BlobStore.under(tmp_path).read_subtitles("missing.json")


@pytest.mark.parametrize("name", ["../db.json", "nested/clip.mp4", "", ".."])
def test_names_cannot_leave_their_bucket(tmp_path: Path, name: str) -> None:
    with pytest.raises(NotFoundError):
        BlobStore.under(tmp_path).video_path(name)
