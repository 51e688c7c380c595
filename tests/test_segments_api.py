"""Tests for the segment collection API endpoints."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from segmento import library
from segmento.app import app
from segmento.storage.blobs import BlobStore
from segmento.storage.records import JsonRecordStore

SEGMENTS = [
    {"id": "s1", "start": 0.0, "end": 5.0, "label": "Intro"},
    {"id": "s2", "start": 5.0, "end": 9.0, "label": "Main"},
]


@pytest.fixture()
def segment_client(tmp_path: Path):
    """Provide a test client backed by temporary record and blob stores."""

    original_records = library.get_record_store()
    original_blobs = library.get_blob_store()
    blobs = BlobStore.under(tmp_path / "uploads")
    library.set_record_store(JsonRecordStore(tmp_path / "data" / "db.json"))
    library.set_blob_store(blobs)
    try:
        yield TestClient(app), blobs
    finally:
        library.set_record_store(original_records)
        library.set_blob_store(original_blobs)


def _create(client: TestClient, **kwargs) -> dict:
    response = client.post("/api/segments", **kwargs)
    assert response.status_code == 201, response.text
    return response.json()["segment"]


def test_create_list_detail_delete(segment_client) -> None:
    client, blobs = segment_client
    record = _create(
        client,
        files={"video": ("clip.mp4", b"video-bytes", "video/mp4")},
        data={"subtitles": json.dumps(SEGMENTS)},
    )
    assert record["title"] == "clip.mp4"
    assert record["videoFilename"] == f"{record['id']}.mp4"
    assert record["subtitleFilename"] == f"{record['id']}.json"
    assert blobs.video_path(record["videoFilename"]).read_bytes() == b"video-bytes"

    listing = client.get("/api/segments").json()
    assert [item["id"] for item in listing] == [record["id"]]

    detail = client.get(f"/api/segments/{record['id']}").json()
    assert detail["subtitles"] == SEGMENTS
    assert detail["createdAt"] == record["createdAt"]

    response = client.delete(f"/api/segments/{record['id']}")
    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert client.get("/api/segments").json() == []
    assert not blobs.video_path(record["videoFilename"]).exists()
    assert not blobs.subtitles_path(record["subtitleFilename"]).exists()

    assert client.delete(f"/api/segments/{record['id']}").status_code == 404


def test_create_requires_video_or_subtitles(segment_client) -> None:
    client, _ = segment_client
    response = client.post("/api/segments", data={})
    assert response.status_code == 400


def test_create_without_video_is_untitled(segment_client) -> None:
    client, blobs = segment_client
    record = _create(client, data={"subtitles": json.dumps(SEGMENTS)})
    assert record["title"] == "Untitled Segment (No Video)"
    assert record["videoFilename"] is None
    assert json.loads(blobs.read_subtitles(record["subtitleFilename"])) == SEGMENTS


def test_detail_with_corrupt_subtitles_returns_empty_list(segment_client) -> None:
    client, blobs = segment_client
    record = _create(client, data={"subtitles": json.dumps(SEGMENTS)})
    blobs.write_subtitles(record["subtitleFilename"], "{broken")
    detail = client.get(f"/api/segments/{record['id']}").json()
    assert detail["subtitles"] == []


def test_unknown_record_returns_404(segment_client) -> None:
    client, _ = segment_client
    assert client.get("/api/segments/missing").status_code == 404
    assert client.put("/api/segments/missing", data={"subtitles": "[]"}).status_code == 404


def test_update_adds_video_and_retitles_untitled_record(segment_client) -> None:
    client, blobs = segment_client
    record = _create(client, data={"subtitles": json.dumps(SEGMENTS)})

    response = client.put(
        f"/api/segments/{record['id']}",
        data={"subtitles": json.dumps(SEGMENTS[:1])},
        files={"video": ("talk.webm", b"webm-bytes", "video/webm")},
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["message"] == "Updated successfully"
    assert body["segment"]["videoFilename"] == f"{record['id']}.webm"
    assert body["segment"]["title"] == "talk.webm"
    assert body["segment"]["subtitleFilename"] == record["subtitleFilename"]
    assert json.loads(blobs.read_subtitles(record["subtitleFilename"])) == SEGMENTS[:1]


def test_update_overwrites_existing_video_in_place(segment_client) -> None:
    client, blobs = segment_client
    record = _create(client, files={"video": ("clip.mp4", b"old", "video/mp4")})
    response = client.put(
        f"/api/segments/{record['id']}",
        files={"video": ("renamed.mov", b"new", "video/quicktime")},
    )
    assert response.status_code == 200
    assert response.json()["segment"]["videoFilename"] == record["videoFilename"]
    assert response.json()["segment"]["title"] == "clip.mp4"
    assert blobs.video_path(record["videoFilename"]).read_bytes() == b"new"


def test_derive_from_text_captions(segment_client) -> None:
    client, _ = segment_client
    response = client.post(
        "/api/segments/derive",
        files={"captions": ("cues.txt", b"0|A\nnot a cue\n5000|B\n12000|C", "text/plain")},
        data={"duration": "15"},
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert [(s["start"], s["end"], s["label"]) for s in body["segments"]] == [
        (0.0, 5.0, "A"),
        (5.0, 12.0, "B"),
        (12.0, 15.0, "C"),
    ]
    assert len(body["warnings"]) == 1


def test_derive_rejects_bad_captions(segment_client) -> None:
    client, _ = segment_client
    unsupported = client.post(
        "/api/segments/derive",
        files={"captions": ("cues.srt", b"whatever", "text/plain")},
        data={"duration": "15"},
    )
    assert unsupported.status_code == 400
    invalid = client.post(
        "/api/segments/derive",
        files={"captions": ("cues.json", b'{"tiempo_ms": 0}', "application/json")},
        data={"duration": "15"},
    )
    assert invalid.status_code == 400
    negative = client.post(
        "/api/segments/derive",
        files={"captions": ("cues.txt", b"0|A", "text/plain")},
        data={"duration": "-3"},
    )
    assert negative.status_code == 400
    unicode_digits = client.post(
        "/api/segments/derive",
        files={"captions": ("cues.txt", "\u00b2|bad\n0|ok".encode("utf-8"), "text/plain")},
        data={"duration": "3"},
    )
    assert unicode_digits.status_code == 200
    assert [s["label"] for s in unicode_digits.json()["segments"]] == ["ok"]
    assert len(unicode_digits.json()["warnings"]) == 1


def test_edits_persist_and_report_edit_target(segment_client) -> None:
    client, blobs = segment_client
    record = _create(client, data={"subtitles": json.dumps(SEGMENTS)})

    response = client.post(
        f"/api/segments/{record['id']}/edits",
        json={
            "operations": [
                {"op": "duplicate", "id": "s1"},
                {"op": "delete", "id": "s2"},
                {"op": "add", "start": 9, "end": 12.345, "label": ""},
            ],
            "duration": 20,
            "editingId": "s2",
        },
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["editingId"] is None
    labels = [segment["label"] for segment in body["segments"]]
    assert labels == ["Intro", "(COPY) Intro", "Segment 3: 00:09.00 - 00:12.35"]
    saved = json.loads(blobs.read_subtitles(record["subtitleFilename"]))
    assert saved == body["segments"]


def test_edits_are_rejected_atomically(segment_client) -> None:
    client, blobs = segment_client
    record = _create(client, data={"subtitles": json.dumps(SEGMENTS)})

    out_of_bounds = client.post(
        f"/api/segments/{record['id']}/edits",
        json={
            "operations": [
                {"op": "delete", "id": "s1"},
                {"op": "update", "id": "s2", "start": 5, "end": 30},
            ],
            "duration": 20,
        },
    )
    assert out_of_bounds.status_code == 422
    inverted = client.post(
        f"/api/segments/{record['id']}/edits",
        json={"operations": [{"op": "add", "start": 4, "end": 2}]},
    )
    assert inverted.status_code == 400
    unknown = client.post(
        f"/api/segments/{record['id']}/edits",
        json={"operations": [{"op": "delete", "id": "nope"}]},
    )
    assert unknown.status_code == 404
    assert json.loads(blobs.read_subtitles(record["subtitleFilename"])) == SEGMENTS


def test_upload_saves_under_sanitized_name(segment_client) -> None:
    client, blobs = segment_client
    response = client.post(
        "/api/upload",
        files={"video": ("my clip.mp4", b"bytes", "video/mp4")},
        data={"subtitles": json.dumps(SEGMENTS)},
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["videoFilename"] == "my_clip.mp4"
    assert body["subtitleFilename"] == "my_clip.json"
    assert blobs.video_path("my_clip.mp4").read_bytes() == b"bytes"


def test_upload_requires_video(segment_client) -> None:
    client, _ = segment_client
    response = client.post("/api/upload", data={"subtitles": "[]"})
    assert response.status_code == 400
    assert response.json()["detail"] == "No video file provided"


def test_health(segment_client) -> None:
    client, _ = segment_client
    assert client.get("/api/health").json() == {"status": "ok"}
