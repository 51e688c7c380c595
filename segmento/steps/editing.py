"""In-memory editing of a segment list.

The editor never remembers which segment a form is editing: callers pass
the edit target explicitly and get the surviving target back from
:meth:`SegmentEditor.delete`.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from segmento import config
from segmento.common.timecode import format_time, round2
from segmento.errors import InvalidRangeError, NotFoundError, OutOfBoundsError
from segmento.interfaces.segment import Segment, new_segment_id


def _coerce_time(value: Any, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidRangeError(f"{name} time must be a number.") from exc
    if not math.isfinite(number) or number < 0:
        raise InvalidRangeError("Start and end times must be positive numbers.")
    return round2(number)


class SegmentEditor:
    """Add, update, duplicate and delete segments while keeping ``start < end``."""

    def __init__(
        self,
        segments: Optional[Iterable[Segment]] = None,
        duration: Optional[float] = None,
        *,
        copy_prefix: str = config.COPY_LABEL_PREFIX,
    ) -> None:
        self.segments: List[Segment] = list(segments or [])
        self.duration = round2(duration) if duration is not None else None
        self.copy_prefix = copy_prefix

    @classmethod
    def from_payload(
        cls, payload: Sequence[Mapping[str, Any]], duration: Optional[float] = None
    ) -> "SegmentEditor":
        return cls([Segment.from_dict(item) for item in payload], duration)

    def to_payload(self) -> list[dict[str, Any]]:
        return [segment.to_dict() for segment in self.segments]

    def _validated_bounds(self, start: Any, end: Any) -> tuple[float, float]:
        start_value = _coerce_time(start, "Start")
        end_value = _coerce_time(end, "End")
        if start_value >= end_value:
            raise InvalidRangeError("Start time must be less than end time.")
        if self.duration is not None and end_value > self.duration:
            raise OutOfBoundsError(
                f"End time {format_time(end_value)} exceeds the media duration {format_time(self.duration)}."
            )
        return start_value, end_value

    def _index_of(self, segment_id: str) -> int:
        for index, segment in enumerate(self.segments):
            if segment.id == segment_id:
                return index
        raise NotFoundError(f"Segment '{segment_id}' was not found.")

    def get(self, segment_id: str) -> Segment:
        return self.segments[self._index_of(segment_id)]

    def begin_edit(self, segment_id: str) -> Segment:
        """Return the segment whose values should be loaded into an edit form."""

        return self.get(segment_id)

    def add(self, start: Any, end: Any, label: str = "") -> Segment:
        start_value, end_value = self._validated_bounds(start, end)
        if not label or not label.strip():
            label = (
                f"Segment {len(self.segments) + 1}: "
                f"{format_time(start_value)} - {format_time(end_value)}"
            )
        segment = Segment(start=start_value, end=end_value, label=label)
        self.segments.append(segment)
        return segment

    def update(self, segment_id: str, start: Any, end: Any, label: str = "") -> Segment:
        index = self._index_of(segment_id)
        start_value, end_value = self._validated_bounds(start, end)
        current = self.segments[index]
        if not label or not label.strip():
            if current.label.startswith(self.copy_prefix):
                label = current.label
            else:
                label = f"Updated segment: {format_time(start_value)} - {format_time(end_value)}"
        current.start = start_value
        current.end = end_value
        current.label = label
        return current

    def duplicate(self, segment_id: str) -> Segment:
        source = self.get(segment_id)
        copy = Segment(
            start=source.start,
            end=source.end,
            label=f"{self.copy_prefix}{source.label}",
            id=new_segment_id(),
        )
        self.segments.append(copy)
        return copy

    def delete(self, segment_id: str, editing_id: Optional[str] = None) -> Optional[str]:
        """Remove ``segment_id`` and return the edit target that is still valid."""

        index = self._index_of(segment_id)
        del self.segments[index]
        if editing_id == segment_id:
            return None
        return editing_id

    def apply(
        self, operations: Sequence[Mapping[str, Any]], editing_id: Optional[str] = None
    ) -> Optional[str]:
        """Apply ``operations`` in order; on any failure nothing is changed.

        Each operation is a mapping with an ``op`` key (``add``, ``update``,
        ``duplicate`` or ``delete``) plus the arguments of the matching method.
        """

        snapshot = [
            Segment(start=s.start, end=s.end, label=s.label, id=s.id) for s in self.segments
        ]
        try:
            for operation in operations:
                kind = operation.get("op")
                if kind == "add":
                    self.add(operation.get("start"), operation.get("end"), operation.get("label") or "")
                elif kind == "update":
                    self.update(
                        str(operation.get("id")),
                        operation.get("start"),
                        operation.get("end"),
                        operation.get("label") or "",
                    )
                elif kind == "duplicate":
                    self.duplicate(str(operation.get("id")))
                elif kind == "delete":
                    editing_id = self.delete(str(operation.get("id")), editing_id)
                else:
                    raise ValueError(f"Unknown edit operation {kind!r}.")
        except Exception:
            self.segments = snapshot
            raise
        return editing_id


__all__ = ["SegmentEditor"]
