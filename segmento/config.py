"""Central configuration for storage, media delivery and segment derivation.

Sections are grouped by feature for easier editing. Every path and limit can
be overridden through the environment or a ``.env`` file.
"""

import os
from pathlib import Path

from segmento.common.env import load_env

load_env(os.environ.get("SEGMENTO_ENV_FILE", ".env"))


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# ---------------------------------------
# Storage locations
# ---------------------------------------
# Record metadata lives in a single JSON array under DATA_DIR
DATA_DIR = Path(os.environ.get("SEGMENTO_DATA_DIR", "data")).expanduser().resolve()
DB_PATH = DATA_DIR / "db.json"

# Uploaded media and saved segment lists
UPLOADS_DIR = Path(os.environ.get("SEGMENTO_UPLOADS_DIR", "uploads")).expanduser().resolve()
VIDEOS_DIR = UPLOADS_DIR / "videos"
SUBTITLES_DIR = UPLOADS_DIR / "subtitles"

# ---------------------------------------
# Media delivery
# ---------------------------------------
# Upper bound for a single blocking read while answering a media request
MEDIA_READ_TIMEOUT_SECONDS = _env_float("MEDIA_READ_TIMEOUT_SECONDS", 30.0)
# Largest partial-content body sent per request; 0 sends the full requested range
MAX_RANGE_CHUNK_BYTES = _env_int("MAX_RANGE_CHUNK_BYTES", 0)
DEFAULT_MEDIA_TYPE = "application/octet-stream"

# ---------------------------------------
# Caption import and segment editing
# ---------------------------------------
SUPPORTED_CAPTION_EXTENSIONS = (".json", ".txt")
# Delimiter between timestamp and text in line-oriented caption files
TEXT_CUE_DELIMITER = "|"
# Extra seconds given to the final cue when the media ends before it
LAST_CUE_FALLBACK_SECONDS = _env_float("LAST_CUE_FALLBACK_SECONDS", 5.0)
COPY_LABEL_PREFIX = "(COPY) "
UNTITLED_RECORD_TITLE = "Untitled Segment (No Video)"

__all__ = [
    "DATA_DIR",
    "DB_PATH",
    "UPLOADS_DIR",
    "VIDEOS_DIR",
    "SUBTITLES_DIR",
    "MEDIA_READ_TIMEOUT_SECONDS",
    "MAX_RANGE_CHUNK_BYTES",
    "DEFAULT_MEDIA_TYPE",
    "SUPPORTED_CAPTION_EXTENSIONS",
    "TEXT_CUE_DELIMITER",
    "LAST_CUE_FALLBACK_SECONDS",
    "COPY_LABEL_PREFIX",
    "UNTITLED_RECORD_TITLE",
]
