"""Persist segment collection metadata in a single JSON file."""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from json import JSONDecodeError
from pathlib import Path
from typing import Any, List, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from segmento.errors import IOFailureError, NotFoundError

logger = logging.getLogger(__name__)


def to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.title() for part in parts[1:])


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class SegmentRecord(BaseModel):
    """Metadata for one saved video + segment list pairing."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    video_filename: str | None = None
    subtitle_filename: str | None = None
    created_at: str = Field(default_factory=_now_iso)


class RecordStore(Protocol):
    """Key-value access to the canonical list of segment records."""

    def list_all(self) -> List[SegmentRecord]: ...

    def get_by_id(self, record_id: str) -> Optional[SegmentRecord]: ...

    def put(self, record: SegmentRecord) -> None: ...

    def update(self, record_id: str, **changes: Any) -> SegmentRecord: ...

    def delete(self, record_id: str) -> None: ...


class JsonRecordStore:
    """Record store backed by one JSON array, written atomically under a lock."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> List[SegmentRecord]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise IOFailureError(f"Unable to read record store {self._path}") from exc
        if not raw.strip():
            return []
        try:
            payload = json.loads(raw)
            if not isinstance(payload, list):
                raise ValueError("record store must hold a JSON array")
            return [SegmentRecord.model_validate(item) for item in payload]
        except (JSONDecodeError, ValidationError, ValueError) as exc:
            raise IOFailureError(f"Record store {self._path} is corrupt") from exc

    def _write(self, records: List[SegmentRecord]) -> None:
        payload = json.dumps(
            [record.model_dump(mode="json", by_alias=True) for record in records],
            ensure_ascii=False,
            indent=2,
        )
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(payload, encoding="utf-8")
            tmp.replace(self._path)
        except OSError as exc:
            raise IOFailureError(f"Unable to write record store {self._path}") from exc

    def list_all(self) -> List[SegmentRecord]:
        with self._lock:
            return self._read()

    def get_by_id(self, record_id: str) -> Optional[SegmentRecord]:
        with self._lock:
            for record in self._read():
                if record.id == record_id:
                    return record
        return None

    def put(self, record: SegmentRecord) -> None:
        with self._lock:
            records = self._read()
            for index, existing in enumerate(records):
                if existing.id == record.id:
                    records[index] = record
                    break
            else:
                records.append(record)
            self._write(records)

    def update(self, record_id: str, **changes: Any) -> SegmentRecord:
        with self._lock:
            records = self._read()
            for index, existing in enumerate(records):
                if existing.id == record_id:
                    updated = existing.model_copy(update=changes)
                    records[index] = updated
                    self._write(records)
                    return updated
        raise NotFoundError(f"Segment record '{record_id}' was not found.")

    def delete(self, record_id: str) -> None:
        with self._lock:
            records = self._read()
            remaining = [record for record in records if record.id != record_id]
            if len(remaining) == len(records):
                logger.debug("Record %s already absent; nothing to delete", record_id)
                return
            self._write(remaining)


__all__ = ["SegmentRecord", "RecordStore", "JsonRecordStore", "to_camel"]
