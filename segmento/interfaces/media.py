"""Video delivery with HTTP byte-range support (seeking in the browser player)."""

from __future__ import annotations

import asyncio
import logging
import stat

from fastapi import APIRouter, HTTPException, Request, Response, status
from fastapi.responses import FileResponse, JSONResponse

from segmento import config
from segmento.errors import NotFoundError
from segmento.helpers.media import guess_media_type
from segmento.helpers.ranges import RangeNotSatisfiable, parse_range_header, read_byte_range
from segmento.library import get_blob_store

router = APIRouter(tags=["media"])
logger = logging.getLogger(__name__)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")


@router.get("/videos/{filename}")
async def serve_video(filename: str, request: Request) -> Response:
    """Serve an uploaded video, honouring ``Range: bytes=<start>-<end>``.

    Every stat/open/read failure is answered with 404; the cause is only
    logged.
    """
    try:
        video_path = get_blob_store().video_path(filename)
        stat_result = await asyncio.wait_for(
            asyncio.to_thread(video_path.stat), timeout=config.MEDIA_READ_TIMEOUT_SECONDS
        )
    except (NotFoundError, FileNotFoundError):
        raise _not_found()
    except (OSError, asyncio.TimeoutError) as exc:
        logger.warning("Video serve error for %s: %r", filename, exc)
        raise _not_found() from exc

    if not stat.S_ISREG(stat_result.st_mode):
        raise _not_found()

    file_size = stat_result.st_size
    media_type = guess_media_type(video_path)
    range_header = request.headers.get("range")

    if not range_header:
        return FileResponse(
            path=video_path,
            media_type=media_type,
            stat_result=stat_result,
            headers={"Accept-Ranges": "bytes"},
        )

    try:
        byte_range = parse_range_header(
            range_header, file_size, max_chunk=config.MAX_RANGE_CHUNK_BYTES
        )
    except RangeNotSatisfiable as exc:
        logger.info("Rejecting range for %s: %s", filename, exc)
        return JSONResponse(
            {"detail": "Range not satisfiable"},
            status_code=416,
            headers={"Content-Range": f"bytes */{file_size}", "Accept-Ranges": "bytes"},
        )

    try:
        chunk = await asyncio.wait_for(
            asyncio.to_thread(read_byte_range, video_path, byte_range),
            timeout=config.MEDIA_READ_TIMEOUT_SECONDS,
        )
    except (OSError, asyncio.TimeoutError) as exc:
        logger.warning("Video read error for %s: %r", filename, exc)
        raise _not_found() from exc

    return Response(
        content=chunk,
        status_code=status.HTTP_206_PARTIAL_CONTENT,
        media_type=media_type,
        headers={
            "Content-Range": byte_range.content_range(),
            "Accept-Ranges": "bytes",
            "Content-Length": str(byte_range.length),
        },
    )
