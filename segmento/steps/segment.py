"""Turn an ordered cue list into playable, non-overlapping segments."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import List, Sequence, Tuple

from segmento import config
from segmento.common.timecode import millis_to_seconds, round2
from segmento.errors import InvalidRangeError
from segmento.interfaces.segment import Cue, Segment

from .cues import parse_cues

logger = logging.getLogger(__name__)


def derive_segments(
    cues: Sequence[Cue],
    total_duration: float,
    *,
    fallback_seconds: float = config.LAST_CUE_FALLBACK_SECONDS,
) -> List[Segment]:
    """Derive one segment per cue, ending where the next cue starts.

    Parameters
    ----------
    cues:
        Cues in source order. Position, not timestamp, decides which cue is
        "next".
    total_duration:
        Media duration in seconds. The final cue runs until this point; when
        the media ends at or before the final cue it gets
        ``fallback_seconds`` instead.

    Returns
    -------
    List[Segment]
        Segments in cue order. Cues that would produce an empty or
        out-of-media range are dropped with a warning.
    """
    duration = float(total_duration)
    if not math.isfinite(duration) or duration < 0:
        raise InvalidRangeError(f"Media duration must be a non-negative number, got {total_duration!r}.")
    media_end = round2(duration)

    segments: List[Segment] = []
    count = len(cues)
    for index, cue in enumerate(cues):
        start = millis_to_seconds(cue.timestamp_ms)
        extended = False
        if index + 1 < count:
            end = millis_to_seconds(cues[index + 1].timestamp_ms)
        else:
            end = media_end
            if end <= start:
                end = round2(start + fallback_seconds)
                extended = True

        if (
            not (math.isfinite(start) and math.isfinite(end))
            or start >= end
            or (start >= media_end and not extended)
        ):
            logger.warning(
                "Cue %d (%.2fs -> %.2fs) is empty or past the end of the media; skipped",
                index + 1,
                start,
                end,
            )
            continue

        segments.append(Segment(start=start, end=end, label=cue.text))

    logger.info("Derived %d segments from %d cues", len(segments), count)
    return segments


def derive_segments_from_file(
    filename: str | Path, text: str, total_duration: float
) -> Tuple[List[Segment], List[str]]:
    """Parse a caption file and derive its segments in one go."""

    parsed = parse_cues(filename, text)
    return derive_segments(parsed.cues, total_duration), parsed.warnings


def segments_to_payload(segments: Sequence[Segment]) -> List[dict]:
    return [segment.to_dict() for segment in segments]


__all__ = ["derive_segments", "derive_segments_from_file", "segments_to_payload"]
