"""Filename-addressed storage for uploaded videos and saved segment lists."""

from __future__ import annotations

import logging
from pathlib import Path

from segmento.errors import IOFailureError, NotFoundError

logger = logging.getLogger(__name__)


class BlobStore:
    """Two flat buckets on disk: ``videos`` and ``subtitles`` (UTF-8 JSON text)."""

    def __init__(self, videos_dir: Path | str, subtitles_dir: Path | str) -> None:
        self.videos_dir = Path(videos_dir).resolve()
        self.subtitles_dir = Path(subtitles_dir).resolve()

    @classmethod
    def under(cls, root: Path | str) -> "BlobStore":
        base = Path(root)
        return cls(base / "videos", base / "subtitles")

    def ensure_dirs(self) -> None:
        self.videos_dir.mkdir(parents=True, exist_ok=True)
        self.subtitles_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _resolve(bucket: Path, filename: str) -> Path:
        candidate = (bucket / filename).resolve()
        if candidate.parent != bucket or not filename:
            raise NotFoundError(f"'{filename}' is not a valid blob name.")
        return candidate

    def video_path(self, filename: str) -> Path:
        return self._resolve(self.videos_dir, filename)

    def subtitles_path(self, filename: str) -> Path:
        return self._resolve(self.subtitles_dir, filename)

    def _write(self, path: Path, data: bytes) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise IOFailureError(f"Unable to write {path.name}") from exc

    def write_video(self, filename: str, data: bytes) -> Path:
        path = self.video_path(filename)
        self._write(path, data)
        return path

    def write_subtitles(self, filename: str, text: str) -> Path:
        path = self.subtitles_path(filename)
        self._write(path, text.encode("utf-8"))
        return path

    def read_subtitles(self, filename: str) -> str:
        path = self.subtitles_path(filename)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise NotFoundError(f"Subtitles '{filename}' were not found.") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise IOFailureError(f"Unable to read subtitles '{filename}'") from exc

    def _delete(self, path: Path) -> bool:
        try:
            path.unlink()
        except FileNotFoundError:
            logger.debug("%s already absent; nothing to delete", path.name)
            return False
        except OSError as exc:
            raise IOFailureError(f"Unable to delete {path.name}") from exc
        return True

    def delete_video(self, filename: str) -> bool:
        """Delete a stored video; returns ``False`` when it was already gone."""

        return self._delete(self.video_path(filename))

    def delete_subtitles(self, filename: str) -> bool:
        return self._delete(self.subtitles_path(filename))


__all__ = ["BlobStore"]
