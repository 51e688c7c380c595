"""Error taxonomy shared by the caption, segment, storage and media layers."""

from __future__ import annotations


class SegmentoError(Exception):
    """Base class for recoverable errors reported back to the caller."""


class InvalidFormatError(SegmentoError, ValueError):
    """Caption input could not be parsed or contained no usable cues."""


class UnsupportedExtensionError(SegmentoError, ValueError):
    """Caption file is neither JSON nor line-oriented text."""


class InvalidRangeError(SegmentoError, ValueError):
    """A start/end pair is negative, not a number, or not strictly increasing."""


class OutOfBoundsError(SegmentoError, ValueError):
    """A segment end lies beyond the known media duration."""


class NotFoundError(SegmentoError, LookupError):
    """Unknown record, segment or file."""


class IOFailureError(SegmentoError, OSError):
    """Reading, writing or deleting a stored blob or record failed."""


__all__ = [
    "SegmentoError",
    "InvalidFormatError",
    "UnsupportedExtensionError",
    "InvalidRangeError",
    "OutOfBoundsError",
    "NotFoundError",
    "IOFailureError",
]
