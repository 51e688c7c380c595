"""Parse uploaded caption files into ordered cue lists.

Two encodings are accepted:

* ``.json`` – an array of ``{"tiempo_ms": <number>, "texto": <string>}``
  objects (``timestamp_ms``/``text`` are accepted as aliases). A single bad
  element rejects the whole file.
* ``.txt`` – one ``<milliseconds>|<text>`` pair per line. Bad lines are
  skipped with a warning; the file is rejected only when nothing usable
  remains.

Cues keep their source order. Nothing here sorts by timestamp.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List

from segmento import config
from segmento.errors import InvalidFormatError, UnsupportedExtensionError
from segmento.interfaces.segment import Cue

logger = logging.getLogger(__name__)

_TIMESTAMP_KEYS = ("tiempo_ms", "timestamp_ms")
_TEXT_KEYS = ("texto", "text")


@dataclass
class ParsedCues:
    """Cues recovered from a caption file plus user-facing skip warnings."""

    cues: List[Cue]
    warnings: List[str] = field(default_factory=list)


def _first_present(item: dict, keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in item:
            return item[key]
    return None


def _is_timestamp(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    return math.isfinite(value) and value >= 0


def parse_json_cues(text: str) -> ParsedCues:
    """Parse a JSON caption array, rejecting the input if any element is invalid."""

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidFormatError(f"Caption JSON could not be parsed: {exc.msg}") from exc

    if not isinstance(data, list):
        raise InvalidFormatError("Caption JSON must be an array of cue objects.")
    if not data:
        raise InvalidFormatError("Caption JSON does not contain any cues.")

    cues: List[Cue] = []
    for index, item in enumerate(data, start=1):
        if not isinstance(item, dict):
            raise InvalidFormatError(f"Cue {index} is not an object.")
        timestamp = _first_present(item, _TIMESTAMP_KEYS)
        body = _first_present(item, _TEXT_KEYS)
        if not _is_timestamp(timestamp):
            raise InvalidFormatError(
                f"Cue {index} needs a non-negative numeric 'tiempo_ms' timestamp in milliseconds."
            )
        if not isinstance(body, str) or not body.strip():
            raise InvalidFormatError(f"Cue {index} needs a non-empty 'texto' string.")
        cues.append(Cue(timestamp_ms=timestamp, text=body))
    return ParsedCues(cues=cues)


def parse_text_cues(text: str, delimiter: str = config.TEXT_CUE_DELIMITER) -> ParsedCues:
    """Parse ``timestamp|text`` lines, skipping the ones that do not fit."""

    cues: List[Cue] = []
    warnings: List[str] = []
    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue
        timestamp_raw, sep, body = line.partition(delimiter)
        timestamp_raw = timestamp_raw.strip()
        body = body.strip()
        if sep and timestamp_raw.isascii() and timestamp_raw.isdigit() and body:
            cues.append(Cue(timestamp_ms=int(timestamp_raw), text=body))
            continue
        message = f"Line {line_number} skipped: expected 'milliseconds{delimiter}text', got {line!r}"
        logger.warning(message)
        warnings.append(message)

    if not cues:
        raise InvalidFormatError(
            f"Text captions must contain 'milliseconds{delimiter}text' lines; no valid cues were found."
        )
    return ParsedCues(cues=cues, warnings=warnings)


def parse_cues(filename: str | Path, text: str) -> ParsedCues:
    """Dispatch on the caption file extension."""

    suffix = Path(str(filename)).suffix.lower()
    if suffix not in config.SUPPORTED_CAPTION_EXTENSIONS:
        raise UnsupportedExtensionError(
            f"Unsupported caption file '{Path(str(filename)).name}'. Upload a JSON or TXT file."
        )
    if suffix == ".json":
        return parse_json_cues(text)
    return parse_text_cues(text)


__all__ = ["ParsedCues", "parse_json_cues", "parse_text_cues", "parse_cues"]
