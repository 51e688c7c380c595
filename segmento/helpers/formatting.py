import colorama
from colorama import Fore, Style

colorama.init(autoreset=True)


def sanitize_filename(name: str) -> str:
    """Return a filesystem-safe version of an uploaded file ``name``."""
    base = name.replace("\\", "/").rsplit("/", 1)[-1].strip()
    cleaned = ''.join(char if char.isalnum() or char in '._-' else '_' for char in base)
    return cleaned.lstrip('.') or "upload"


def file_extension(name: str | None) -> str:
    """Return the lower-cased extension of ``name`` (``""`` when it has none)."""
    if not name:
        return ""
    safe = sanitize_filename(name)
    _, dot, ext = safe.rpartition('.')
    return f".{ext.lower()}" if dot and ext else ""

__all__ = ["Fore", "Style", "sanitize_filename", "file_extension"]
