"""Segment collection endpoints exposed via FastAPI routers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Literal, Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status
from pydantic import BaseModel, ConfigDict, Field

from segmento.errors import (
    InvalidFormatError,
    InvalidRangeError,
    IOFailureError,
    NotFoundError,
    OutOfBoundsError,
    SegmentoError,
    UnsupportedExtensionError,
)
from segmento.library import (
    apply_segment_edits_sync,
    create_record_sync,
    delete_record_sync,
    get_record_detail,
    list_records,
    save_upload_sync,
    update_record_sync,
)
from segmento.steps.segment import derive_segments_from_file, segments_to_payload
from segmento.storage.records import SegmentRecord, to_camel

logger = logging.getLogger(__name__)


class SegmentPayload(BaseModel):
    """A playable range with its label, as saved in subtitle files."""

    id: str
    start: float
    end: float
    label: str


class SegmentRecordResponse(BaseModel):
    """Response body for a created or updated segment record."""

    success: bool = True
    segment: SegmentRecord
    message: Optional[str] = None


class DeriveResponse(BaseModel):
    segments: list[SegmentPayload]
    warnings: list[str] = Field(default_factory=list)


class EditOperation(BaseModel):
    """One add/update/duplicate/delete step applied to a saved segment list."""

    op: Literal["add", "update", "duplicate", "delete"]
    id: Optional[str] = None
    start: Optional[float] = None
    end: Optional[float] = None
    label: Optional[str] = None


class EditRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    operations: list[EditOperation] = Field(min_length=1)
    duration: Optional[float] = Field(default=None, gt=0)
    editing_id: Optional[str] = None


class EditResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    segments: list[SegmentPayload]
    editing_id: Optional[str] = None


class UploadResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    message: str
    video_filename: str
    subtitle_filename: Optional[str] = None


def _http_error(exc: SegmentoError, failure_detail: str) -> HTTPException:
    """Translate a core error into the HTTP status the client should see."""

    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, OutOfBoundsError):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, (InvalidFormatError, UnsupportedExtensionError, InvalidRangeError)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    logger.error("%s: %s", failure_detail, exc, exc_info=exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=failure_detail)


async def _read_upload(upload: UploadFile | None) -> tuple[Optional[str], Optional[bytes]]:
    if upload is None or not upload.filename:
        return None, None
    data = await upload.read()
    await upload.close()
    return upload.filename, data


router = APIRouter(tags=["segments"])


@router.get("/segments", response_model=list[SegmentRecord])
async def list_segment_records() -> list[SegmentRecord]:
    """Return every saved segment record."""

    try:
        return await list_records()
    except IOFailureError as exc:
        raise _http_error(exc, "Failed to fetch segments") from exc


@router.post("/segments", response_model=SegmentRecordResponse, status_code=status.HTTP_201_CREATED)
async def create_segment_record(
    video: UploadFile | None = File(default=None),
    subtitles: Optional[str] = Form(default=None),
) -> SegmentRecordResponse:
    """Save an uploaded video and/or segment list as a new record."""

    video_name, video_data = await _read_upload(video)
    try:
        record = await asyncio.to_thread(
            create_record_sync,
            video_name=video_name,
            video_data=video_data,
            subtitles=subtitles,
        )
    except SegmentoError as exc:
        raise _http_error(exc, "Internal Server Error") from exc
    return SegmentRecordResponse(segment=record)


@router.post("/segments/derive", response_model=DeriveResponse)
async def derive_segment_list(
    captions: UploadFile = File(...),
    duration: float = Form(...),
) -> DeriveResponse:
    """Parse an uploaded caption file and derive its playback segments."""

    raw = await captions.read()
    await captions.close()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Caption file must be UTF-8 text.",
        ) from exc
    try:
        segments, warnings = derive_segments_from_file(captions.filename or "", text, duration)
    except SegmentoError as exc:
        raise _http_error(exc, "Failed to derive segments") from exc
    return DeriveResponse(
        segments=[SegmentPayload(**item) for item in segments_to_payload(segments)],
        warnings=warnings,
    )


@router.get("/segments/{record_id}")
async def get_segment_record(record_id: str) -> dict[str, Any]:
    """Return a record with its saved segment list under ``subtitles``."""

    try:
        return await get_record_detail(record_id)
    except SegmentoError as exc:
        raise _http_error(exc, "Failed to fetch segment") from exc


@router.put("/segments/{record_id}", response_model=SegmentRecordResponse)
async def update_segment_record(
    record_id: str,
    subtitles: Optional[str] = Form(default=None),
    video: UploadFile | None = File(default=None),
) -> SegmentRecordResponse:
    """Replace the saved segment list and/or the video of a record."""

    video_name, video_data = await _read_upload(video)
    try:
        record = await asyncio.to_thread(
            update_record_sync,
            record_id,
            subtitles=subtitles,
            video_name=video_name,
            video_data=video_data,
        )
    except SegmentoError as exc:
        raise _http_error(exc, "Update failed") from exc
    return SegmentRecordResponse(segment=record, message="Updated successfully")


@router.delete("/segments/{record_id}")
async def delete_segment_record(record_id: str) -> dict[str, bool]:
    try:
        await asyncio.to_thread(delete_record_sync, record_id)
    except SegmentoError as exc:
        raise _http_error(exc, "Delete failed") from exc
    return {"success": True}


@router.post("/segments/{record_id}/edits", response_model=EditResponse)
async def edit_segment_list(record_id: str, payload: EditRequest) -> EditResponse:
    """Apply add/update/duplicate/delete operations to a saved segment list.

    The batch is all-or-nothing: if any operation is rejected the saved list
    is left untouched.
    """

    operations = [operation.model_dump() for operation in payload.operations]
    try:
        segments, editing_id = await asyncio.to_thread(
            apply_segment_edits_sync,
            record_id,
            operations,
            duration=payload.duration,
            editing_id=payload.editing_id,
        )
    except SegmentoError as exc:
        raise _http_error(exc, "Update failed") from exc
    return EditResponse(
        segments=[SegmentPayload(**item) for item in segments],
        editing_id=editing_id,
    )


@router.post("/upload", response_model=UploadResponse)
async def upload_media(
    video: UploadFile | None = File(default=None),
    subtitles: Optional[str] = Form(default=None),
) -> UploadResponse:
    """Store a video (and optional segment list) under its own filename."""

    video_name, video_data = await _read_upload(video)
    if video_name is None or video_data is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No video file provided")
    try:
        video_filename, subtitle_filename = await asyncio.to_thread(
            save_upload_sync, video_name, video_data, subtitles
        )
    except SegmentoError as exc:
        raise _http_error(exc, "Internal Server Error") from exc
    return UploadResponse(
        message="Files saved successfully",
        video_filename=video_filename,
        subtitle_filename=subtitle_filename,
    )
