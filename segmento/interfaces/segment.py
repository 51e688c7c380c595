"""Dataclasses for caption cues and playable segments."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Mapping


def new_segment_id() -> str:
    """Return a fresh identifier that is never reused within a process."""

    return uuid.uuid4().hex


@dataclass(frozen=True, slots=True)
class Cue:
    """A single caption entry: millisecond timestamp plus text."""

    timestamp_ms: float
    text: str


@dataclass(slots=True)
class Segment:
    start: float
    end: float
    label: str
    id: str = field(default_factory=new_segment_id)

    def duration(self) -> float:
        return max(0.0, self.end - self.start)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "start": self.start, "end": self.end, "label": self.label}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Segment":
        """Build a segment from its saved JSON shape.

        Lists saved by older clients carry numeric ids; they are kept as strings.
        """

        raw_id = payload.get("id")
        segment_id = str(raw_id) if raw_id not in (None, "") else new_segment_id()
        return cls(
            start=float(payload["start"]),
            end=float(payload["end"]),
            label=str(payload.get("label") or ""),
            id=segment_id,
        )
