"""Saved segment collections: records, their media and their segment lists."""
from __future__ import annotations

import asyncio
import json
import logging
import threading
import uuid
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence

from segmento import config
from segmento.errors import InvalidFormatError, IOFailureError, NotFoundError
from segmento.helpers.formatting import file_extension, sanitize_filename
from segmento.helpers.media import probe_media_duration
from segmento.interfaces.segment import Segment
from segmento.steps.editing import SegmentEditor
from segmento.storage.blobs import BlobStore
from segmento.storage.records import JsonRecordStore, RecordStore, SegmentRecord

LOGGER = logging.getLogger(__name__)
EMPTY_SEGMENT_LIST = "[]"

_records: RecordStore = JsonRecordStore(config.DB_PATH)
_blobs = BlobStore(config.VIDEOS_DIR, config.SUBTITLES_DIR)
_edit_lock = threading.Lock()


def set_record_store(store: RecordStore) -> None:
    """Override the global record store (primarily for tests)."""

    global _records
    _records = store


def set_blob_store(store: BlobStore) -> None:
    """Override the global blob store (primarily for tests)."""

    global _blobs
    _blobs = store


def get_record_store() -> RecordStore:
    return _records


def get_blob_store() -> BlobStore:
    return _blobs


def new_record_id() -> str:
    return uuid.uuid4().hex


def list_records_sync() -> List[SegmentRecord]:
    return _records.list_all()


def get_record_sync(record_id: str) -> SegmentRecord:
    record = _records.get_by_id(record_id)
    if record is None:
        raise NotFoundError(f"Segment '{record_id}' was not found.")
    return record


def read_segment_list(record: SegmentRecord) -> List[Segment]:
    """Load the saved segment list for ``record``, raising on any problem."""

    if not record.subtitle_filename:
        return []
    try:
        text = _blobs.read_subtitles(record.subtitle_filename)
    except NotFoundError:
        return []
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidFormatError(f"Saved subtitles for '{record.id}' are not valid JSON.") from exc
    if not isinstance(payload, list):
        raise InvalidFormatError(f"Saved subtitles for '{record.id}' are not a list.")
    try:
        return [Segment.from_dict(item) for item in payload]
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise InvalidFormatError(f"Saved subtitles for '{record.id}' are not a segment list.") from exc


def load_subtitles_payload(record: SegmentRecord) -> list[Any]:
    """Return the raw saved subtitles for display; failures yield an empty list."""

    if not record.subtitle_filename:
        return []
    try:
        payload = json.loads(_blobs.read_subtitles(record.subtitle_filename))
    except (NotFoundError, IOFailureError, json.JSONDecodeError) as exc:
        LOGGER.warning("Error reading subtitles for %s: %s", record.id, exc)
        return []
    if not isinstance(payload, list):
        LOGGER.warning("Subtitles for %s are not a list; ignoring", record.id)
        return []
    return payload


def get_record_detail_sync(record_id: str) -> dict[str, Any]:
    record = get_record_sync(record_id)
    detail = record.model_dump(mode="json", by_alias=True)
    detail["subtitles"] = load_subtitles_payload(record)
    return detail


def create_record_sync(
    *,
    video_name: Optional[str] = None,
    video_data: Optional[bytes] = None,
    subtitles: Optional[str] = None,
) -> SegmentRecord:
    """Store a new media + segment list pairing; at least one must be present."""

    has_video = video_data is not None
    if not has_video and not subtitles:
        raise InvalidFormatError("Provide at least video or subtitles.")

    record_id = new_record_id()
    video_filename: Optional[str] = None
    if has_video:
        video_filename = f"{record_id}{file_extension(video_name)}"
        _blobs.write_video(video_filename, video_data or b"")

    subtitle_filename = f"{record_id}.json"
    _blobs.write_subtitles(subtitle_filename, subtitles or EMPTY_SEGMENT_LIST)

    record = SegmentRecord(
        id=record_id,
        title=video_name if has_video and video_name else config.UNTITLED_RECORD_TITLE,
        video_filename=video_filename,
        subtitle_filename=subtitle_filename,
    )
    _records.put(record)
    LOGGER.info("Created segment record %s (video=%s)", record_id, video_filename)
    return record


def update_record_sync(
    record_id: str,
    *,
    subtitles: Optional[str] = None,
    video_name: Optional[str] = None,
    video_data: Optional[bytes] = None,
) -> SegmentRecord:
    """Overwrite the saved segment list and/or media of an existing record."""

    record = get_record_sync(record_id)
    changes: dict[str, Any] = {}

    if subtitles:
        subtitle_filename = record.subtitle_filename or f"{record.id}.json"
        _blobs.write_subtitles(subtitle_filename, subtitles)
        if subtitle_filename != record.subtitle_filename:
            changes["subtitle_filename"] = subtitle_filename

    if video_data is not None:
        video_filename = record.video_filename or f"{record.id}{file_extension(video_name)}"
        _blobs.write_video(video_filename, video_data)
        if video_filename != record.video_filename:
            changes["video_filename"] = video_filename
            if record.title == config.UNTITLED_RECORD_TITLE and video_name:
                changes["title"] = video_name

    if changes:
        record = _records.update(record.id, **changes)
    LOGGER.info("Updated segment record %s", record.id)
    return record


def delete_record_sync(record_id: str) -> None:
    """Unlink both blobs on a best-effort basis, then drop the record."""

    record = get_record_sync(record_id)
    for filename, remove in (
        (record.video_filename, _blobs.delete_video),
        (record.subtitle_filename, _blobs.delete_subtitles),
    ):
        if not filename:
            continue
        try:
            remove(filename)
        except (IOFailureError, NotFoundError) as exc:
            LOGGER.warning("Could not delete %s for record %s: %s", filename, record.id, exc)
    _records.delete(record.id)
    LOGGER.info("Deleted segment record %s", record.id)


def record_duration(record: SegmentRecord) -> Optional[float]:
    """Return the probed media duration of ``record``'s video, if any."""

    if not record.video_filename:
        return None
    try:
        path = _blobs.video_path(record.video_filename)
    except NotFoundError:
        return None
    if not path.is_file():
        return None
    return probe_media_duration(path)


def apply_segment_edits_sync(
    record_id: str,
    operations: Sequence[Mapping[str, Any]],
    *,
    duration: Optional[float] = None,
    editing_id: Optional[str] = None,
) -> tuple[list[dict[str, Any]], Optional[str]]:
    """Run edit operations against a record's saved list and persist the result."""

    with _edit_lock:
        record = get_record_sync(record_id)
        segments = read_segment_list(record)
        if duration is None:
            duration = record_duration(record)
        editor = SegmentEditor(segments, duration)
        editing_id = editor.apply(operations, editing_id)
        payload = editor.to_payload()
        subtitle_filename = record.subtitle_filename or f"{record.id}.json"
        _blobs.write_subtitles(subtitle_filename, json.dumps(payload, ensure_ascii=False, indent=2))
        if subtitle_filename != record.subtitle_filename:
            _records.update(record.id, subtitle_filename=subtitle_filename)
    return payload, editing_id


def save_upload_sync(
    video_name: str, video_data: bytes, subtitles: Optional[str] = None
) -> tuple[str, Optional[str]]:
    """Store a standalone upload under its sanitized name; subtitles as ``<stem>.json``."""

    video_filename = sanitize_filename(video_name)
    _blobs.write_video(video_filename, video_data)
    subtitle_filename: Optional[str] = None
    if subtitles:
        subtitle_filename = f"{Path(video_filename).stem}.json"
        _blobs.write_subtitles(subtitle_filename, subtitles)
    return video_filename, subtitle_filename


async def list_records() -> List[SegmentRecord]:
    return await asyncio.to_thread(list_records_sync)


async def get_record_detail(record_id: str) -> dict[str, Any]:
    return await asyncio.to_thread(get_record_detail_sync, record_id)


__all__ = [
    "set_record_store",
    "set_blob_store",
    "get_record_store",
    "get_blob_store",
    "list_records",
    "list_records_sync",
    "get_record_sync",
    "get_record_detail",
    "get_record_detail_sync",
    "read_segment_list",
    "load_subtitles_payload",
    "create_record_sync",
    "update_record_sync",
    "delete_record_sync",
    "record_duration",
    "apply_segment_edits_sync",
    "save_upload_sync",
]
