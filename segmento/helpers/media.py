"""Media helper utilities for probing file metadata."""

from __future__ import annotations

import json
import logging
import math
import mimetypes
import subprocess
from pathlib import Path
from typing import Optional

from segmento import config

logger = logging.getLogger(__name__)

PROBE_TIMEOUT_SECONDS = 30


def guess_media_type(path: str | Path) -> str:
    """Return the MIME type for ``path`` based on its extension."""

    mime_type, _ = mimetypes.guess_type(str(path))
    return mime_type or config.DEFAULT_MEDIA_TYPE


def _ffprobe_format(path: Path) -> Optional[dict]:
    command = [
        "ffprobe",
        "-v",
        "error",
        "-print_format",
        "json",
        "-show_format",
        str(path),
    ]
    try:
        result = subprocess.run(
            command,
            check=True,
            text=True,
            capture_output=True,
            timeout=PROBE_TIMEOUT_SECONDS,
        )
        payload = json.loads(result.stdout or "{}")
    except (FileNotFoundError, subprocess.CalledProcessError, subprocess.TimeoutExpired) as exc:
        logger.info("Could not probe %s: %s", path.name, exc)
        return None
    except json.JSONDecodeError:
        logger.info("ffprobe returned unreadable output for %s", path.name)
        return None
    fmt = payload.get("format") if isinstance(payload, dict) else None
    return fmt if isinstance(fmt, dict) else None


def probe_media_duration(path: str | Path) -> Optional[float]:
    """Return the container duration of ``path`` in seconds.

    ``None`` means the duration is unknown: ffprobe is missing, failed, or
    reported something that is not a positive number.
    """

    fmt = _ffprobe_format(Path(path))
    if not fmt:
        return None
    try:
        duration = float(fmt.get("duration"))
    except (TypeError, ValueError):
        return None
    if not math.isfinite(duration) or duration <= 0:
        return None
    return duration


__all__ = ["guess_media_type", "probe_media_duration"]
