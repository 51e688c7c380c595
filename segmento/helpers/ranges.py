"""Byte-range parsing and bounded reads for partial media responses."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class RangeNotSatisfiable(ValueError):
    """The ``Range`` header is malformed or lies outside the file."""


@dataclass(frozen=True)
class ByteRange:
    start: int
    end: int
    file_size: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def content_range(self) -> str:
        return f"bytes {self.start}-{self.end}/{self.file_size}"


def parse_range_header(range_header: str, file_size: int, *, max_chunk: int = 0) -> ByteRange:
    """Parse ``bytes=<start>-<end>`` against ``file_size``.

    ``end`` defaults to the last byte and is clamped to it; ``bytes=-N``
    selects the final ``N`` bytes. Only the first range of a multi-range
    header is honoured. ``max_chunk`` (when positive) shortens the range so
    a single response never carries more than that many bytes.
    """
    try:
        unit, _, ranges = range_header.partition("=")
        if unit.strip().lower() != "bytes" or not ranges:
            raise RangeNotSatisfiable(f"Unsupported range unit in {range_header!r}")
        first_range = ranges.split(",")[0].strip()
        first, sep, last = first_range.partition("-")
        if not sep:
            raise RangeNotSatisfiable(f"Malformed range {range_header!r}")
        first, last = first.strip(), last.strip()
        if not first:
            suffix_length = int(last)
            if suffix_length <= 0:
                raise RangeNotSatisfiable(f"Empty suffix range {range_header!r}")
            start = max(0, file_size - suffix_length)
            end = file_size - 1
        else:
            start = int(first)
            end = int(last) if last else file_size - 1
    except ValueError as exc:
        if isinstance(exc, RangeNotSatisfiable):
            raise
        raise RangeNotSatisfiable(f"Malformed range {range_header!r}") from exc

    if start < 0 or start > end or start >= file_size:
        raise RangeNotSatisfiable(f"Range {range_header!r} not satisfiable for {file_size} bytes")
    end = min(end, file_size - 1)
    if max_chunk > 0:
        end = min(end, start + max_chunk - 1)
    return ByteRange(start=start, end=end, file_size=file_size)


def read_byte_range(path: Path, byte_range: ByteRange) -> bytes:
    """Read exactly ``byte_range.length`` bytes, opening and closing the file here."""

    with open(path, "rb") as handle:
        handle.seek(byte_range.start)
        data = handle.read(byte_range.length)
    if len(data) != byte_range.length:
        raise OSError(
            f"Short read from {path.name}: expected {byte_range.length} bytes, got {len(data)}"
        )
    return data


__all__ = ["ByteRange", "RangeNotSatisfiable", "parse_range_header", "read_byte_range"]
